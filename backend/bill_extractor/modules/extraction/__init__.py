from pathlib import Path

from bill_extractor.core.config import settings
from bill_extractor.core.llm import llm_for_model
from bill_extractor.modules.extraction.invoker import LLMFactory, ModelInvoker
from bill_extractor.modules.extraction.pipeline import ExtractionPipeline


def create_extraction_pipeline(llm_factory: LLMFactory | None = None) -> ExtractionPipeline:
    return ExtractionPipeline(invoker=ModelInvoker(llm_factory or llm_for_model))


def get_extraction_pipeline() -> ExtractionPipeline:
    return create_extraction_pipeline()


def get_upload_dir() -> Path:
    return settings.upload_dir


__all__ = [
    "ExtractionPipeline",
    "create_extraction_pipeline",
    "get_extraction_pipeline",
    "get_upload_dir",
]
