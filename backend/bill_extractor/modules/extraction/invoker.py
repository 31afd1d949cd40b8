import logging
import time
from collections.abc import Callable

import anthropic
import openai
from google.api_core import exceptions as google_exceptions
from pydantic import ValidationError

from bill_extractor.core.config import settings
from bill_extractor.core.llm.base import BaseLLM
from bill_extractor.core.llm.capabilities import USAGE_CHAT, USAGE_MESSAGES, get_capability
from bill_extractor.core.llm.schemas import GenerateConfig, LLMResponse
from bill_extractor.core.llm.throttle import ModelThrottle, default_throttle
from bill_extractor.modules.extraction.exceptions import InvocationError
from bill_extractor.modules.extraction.schemas import InvocationResult, TokenUsage

logger = logging.getLogger(__name__)

LLMFactory = Callable[[str], BaseLLM]

# Failures worth another attempt; anything else is raised on the first try.
TRANSIENT_ERRORS: tuple[type[BaseException], ...] = (
    ConnectionError,
    TimeoutError,
    openai.APIConnectionError,
    openai.RateLimitError,
    openai.InternalServerError,
    anthropic.APIConnectionError,
    anthropic.RateLimitError,
    anthropic.InternalServerError,
    google_exceptions.ServiceUnavailable,
    google_exceptions.ResourceExhausted,
    google_exceptions.InternalServerError,
    google_exceptions.DeadlineExceeded,
)

_USAGE_KEYS: dict[str, tuple[str, str]] = {
    USAGE_CHAT: ("prompt_tokens", "completion_tokens"),
    USAGE_MESSAGES: ("input_tokens", "output_tokens"),
}


def normalize_usage(raw: dict | None, model: str, style: str = USAGE_CHAT) -> TokenUsage:
    """Map either usage naming convention onto TokenUsage.

    The model's declared convention is tried first, then the other one.
    """
    if not raw:
        raise InvocationError(model, "Response did not include token usage")

    styles = [style] + [s for s in _USAGE_KEYS if s != style]
    for candidate in styles:
        prompt_key, completion_key = _USAGE_KEYS.get(candidate, _USAGE_KEYS[USAGE_CHAT])
        prompt = raw.get(prompt_key)
        completion = raw.get(completion_key)
        if prompt is not None and completion is not None:
            break
    else:
        raise InvocationError(
            model,
            f"Token usage is missing prompt/completion counts (got keys: {sorted(raw)})",
        )

    total = raw.get("total_tokens")
    try:
        prompt = int(prompt)
        completion = int(completion)
        total = prompt + completion if total is None else int(total)
        return TokenUsage(
            prompt_tokens=prompt,
            completion_tokens=completion,
            total_tokens=total,
        )
    except (TypeError, ValueError, ValidationError) as exc:
        raise InvocationError(model, f"Malformed token usage {raw!r}: {exc}") from exc


class ModelInvoker:
    def __init__(
        self,
        llm_factory: LLMFactory,
        max_attempts: int | None = None,
        retry_delay: float | None = None,
        throttle: ModelThrottle | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self._llm_factory = llm_factory
        self._max_attempts = max(1, max_attempts or settings.EXTRACTION_MAX_ATTEMPTS)
        self._retry_delay = (
            settings.EXTRACTION_RETRY_DELAY_SECONDS if retry_delay is None else retry_delay
        )
        self._throttle = throttle or default_throttle
        self._sleep = sleep

    def build_config(self, model: str) -> GenerateConfig:
        capability = get_capability(model)
        return GenerateConfig(
            temperature=capability.temperature,
            max_tokens=settings.EXTRACTION_MAX_OUTPUT_TOKENS,
            max_tokens_param=capability.max_tokens_param,
        )

    def _generate(self, llm: BaseLLM, model: str, messages: list[dict]) -> LLMResponse:
        capability = get_capability(model)
        config = self.build_config(model)
        last_error: Exception | None = None

        for attempt in range(1, self._max_attempts + 1):
            self._throttle.wait(model, capability.min_interval_seconds)
            try:
                return llm.generate(messages=messages, config=config)
            except TRANSIENT_ERRORS as exc:
                last_error = exc
                logger.warning(
                    "Attempt %d/%d: %s request failed: %s",
                    attempt,
                    self._max_attempts,
                    model,
                    exc,
                )
                if attempt < self._max_attempts and self._retry_delay > 0:
                    self._sleep(self._retry_delay)
            except Exception as exc:
                logger.warning("%s request failed: %s", model, exc)
                raise InvocationError(model, f"Request failed: {exc}") from exc

        raise InvocationError(
            model,
            f"Request failed after {self._max_attempts} attempt(s): {last_error}",
        ) from last_error

    def invoke(self, model: str, messages: list[dict]) -> InvocationResult:
        try:
            llm = self._llm_factory(model)
        except Exception as exc:
            raise InvocationError(model, f"Could not create client: {exc}") from exc

        response = self._generate(llm, model, messages)
        usage = normalize_usage(response.usage, model, get_capability(model).usage_style)
        logger.info(
            "%s replied with %d chars (%d prompt / %d completion tokens)",
            model,
            len(response.text or ""),
            usage.prompt_tokens,
            usage.completion_tokens,
        )
        return InvocationResult(model=model, text=response.text or "", usage=usage)
