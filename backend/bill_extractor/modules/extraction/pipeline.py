import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime, timezone

from bill_extractor.core.config import settings
from bill_extractor.modules.extraction.exceptions import BillExtractorError
from bill_extractor.modules.extraction.invoker import ModelInvoker
from bill_extractor.modules.extraction.parsing import reconcile_reply
from bill_extractor.modules.extraction.prompts import build_messages
from bill_extractor.modules.extraction.schemas import (
    ModelExtractionResult,
    ModelRunState,
    ModelTiming,
)
from bill_extractor.modules.pricing.service import calculate_pricing

logger = logging.getLogger(__name__)

_TERMINAL_STATES = {ModelRunState.DONE, ModelRunState.FAILED}


@dataclass
class ModelRun:
    """Tracks one model's progress: pending, invoking, parsing, priced, done.

    Any error moves the run to ``failed``; both ``done`` and ``failed`` are
    terminal.
    """

    model: str
    state: ModelRunState = ModelRunState.PENDING
    history: list[ModelRunState] = field(default_factory=lambda: [ModelRunState.PENDING])
    failed_at: ModelRunState | None = None

    def advance(self, state: ModelRunState) -> None:
        if self.state in _TERMINAL_STATES:
            raise RuntimeError(f"Run for {self.model} already finished ({self.state.value})")
        logger.debug("%s: %s -> %s", self.model, self.state.value, state.value)
        self.state = state
        self.history.append(state)

    def fail(self) -> None:
        self.failed_at = self.state
        self.advance(ModelRunState.FAILED)


class ExtractionPipeline:
    def __init__(
        self,
        invoker: ModelInvoker,
        clock: Callable[[], datetime] | None = None,
    ):
        self.invoker = invoker
        self._now = clock or (lambda: datetime.now(timezone.utc))

    def run_model(self, text: str, model: str, run: ModelRun | None = None) -> ModelExtractionResult:
        run = run or ModelRun(model=model)
        messages = build_messages(text)

        run.advance(ModelRunState.INVOKING)
        invocation = self.invoker.invoke(model, messages)

        run.advance(ModelRunState.PARSING)
        data = reconcile_reply(invocation.text, model)

        pricing = calculate_pricing(model, invocation.usage)
        run.advance(ModelRunState.PRICED)

        result = ModelExtractionResult(
            model=model,
            data=data,
            usage=invocation.usage,
            pricing=pricing,
        )
        run.advance(ModelRunState.DONE)
        return result

    def extract(self, text: str, model: str | None = None) -> ModelExtractionResult:
        """Single-model extraction; errors propagate to the caller."""
        return self.run_model(text, model or settings.EXTRACTION_DEFAULT_MODEL)

    def compare(self, text: str, models: list[str]) -> list[ModelExtractionResult]:
        """Run every model in order, one after another.

        A failing model is reported with ``error`` set and never stops the
        models after it.
        """
        results: list[ModelExtractionResult] = []

        for model in models:
            run = ModelRun(model=model)
            started_at = self._now()
            try:
                result = self.run_model(text, model, run)
            except BillExtractorError as exc:
                run.fail()
                logger.warning("%s failed while %s: %s", model, run.failed_at.value, exc)
                result = ModelExtractionResult(model=model, error=exc.message)
            except Exception as exc:
                run.fail()
                logger.exception("%s failed unexpectedly while %s", model, run.failed_at.value)
                result = ModelExtractionResult(model=model, error=f"{model}: {exc}")
            finished_at = self._now()

            result.timing = ModelTiming(
                started_at=started_at.isoformat(),
                finished_at=finished_at.isoformat(),
                duration_ms=round((finished_at - started_at).total_seconds() * 1000, 3),
            )
            results.append(result)

        return results
