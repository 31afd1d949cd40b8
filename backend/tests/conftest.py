import pytest
from fastapi.testclient import TestClient
from fpdf import FPDF

from bill_extractor.core.config import settings
from bill_extractor.core.llm.base import BaseLLM
from bill_extractor.core.llm.schemas import GenerateConfig, LLMResponse
from bill_extractor.core.llm.throttle import ModelThrottle
from bill_extractor.main import app
from bill_extractor.modules.extraction import get_extraction_pipeline, get_upload_dir
from bill_extractor.modules.extraction.invoker import ModelInvoker
from bill_extractor.modules.extraction.pipeline import ExtractionPipeline

DEFAULT_USAGE = {"prompt_tokens": 1200, "completion_tokens": 300, "total_tokens": 1500}


class FakeLLM(BaseLLM):
    def __init__(
        self,
        model: str,
        reply: str = '{"BillNo": "123"}',
        usage: dict | None = None,
        error: Exception | None = None,
        failures: int = 0,
        events: list | None = None,
    ):
        self.model = model
        self.reply = reply
        self.usage = DEFAULT_USAGE if usage is None else usage
        self.error = error
        self.failures = failures
        self.events = events if events is not None else []
        self.calls: list[dict] = []

    def generate(self, messages: list[dict], config: GenerateConfig | None = None) -> LLMResponse:
        self.calls.append({"messages": messages, "config": config})
        self.events.append(("start", self.model))
        try:
            if self.error is not None and (self.failures == 0 or len(self.calls) <= self.failures):
                raise self.error
            return LLMResponse(text=self.reply, usage=self.usage)
        finally:
            self.events.append(("end", self.model))


class FakeLLMRegistry:
    """Callable LLM factory backed by pre-registered fakes."""

    def __init__(self):
        self.llms: dict[str, FakeLLM] = {}
        self.events: list[tuple[str, str]] = []

    def add(self, model: str, **kwargs) -> FakeLLM:
        llm = FakeLLM(model, events=self.events, **kwargs)
        self.llms[model] = llm
        return llm

    def __call__(self, model: str) -> BaseLLM:
        if model not in self.llms:
            raise ValueError(f"Missing API key for model '{model}'.")
        return self.llms[model]


@pytest.fixture()
def llm_registry():
    return FakeLLMRegistry()


@pytest.fixture()
def invoker(llm_registry):
    return ModelInvoker(
        llm_registry,
        max_attempts=2,
        retry_delay=0,
        throttle=ModelThrottle(sleep=lambda _seconds: None),
    )


@pytest.fixture()
def pipeline(invoker):
    return ExtractionPipeline(invoker=invoker)


@pytest.fixture()
def make_pdf():
    def _make(*pages: str) -> bytes:
        pdf = FPDF()
        pdf.set_font("Helvetica", size=12)
        for page in pages:
            pdf.add_page()
            for line in page.splitlines():
                pdf.cell(0, 10, line, new_x="LMARGIN", new_y="NEXT")
        return bytes(pdf.output())

    return _make


@pytest.fixture()
def upload_dir(tmp_path):
    directory = tmp_path / "uploads"
    directory.mkdir()
    return directory


@pytest.fixture()
def client(pipeline, upload_dir, monkeypatch):
    monkeypatch.setattr(settings, "UPLOAD_DIR", str(upload_dir))
    app.dependency_overrides[get_extraction_pipeline] = lambda: pipeline
    app.dependency_overrides[get_upload_dir] = lambda: upload_dir
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
