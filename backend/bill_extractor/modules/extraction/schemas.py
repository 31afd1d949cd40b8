from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field, model_serializer

from bill_extractor.modules.pricing.schemas import PricingInfo


class TokenUsage(BaseModel):
    prompt_tokens: int = Field(ge=0)
    completion_tokens: int = Field(ge=0)
    total_tokens: int = Field(ge=0)


class InvocationResult(BaseModel):
    model: str
    text: str
    usage: TokenUsage


class ModelRunState(str, Enum):
    PENDING = "pending"
    INVOKING = "invoking"
    PARSING = "parsing"
    PRICED = "priced"
    DONE = "done"
    FAILED = "failed"


class ModelTiming(BaseModel):
    started_at: str
    finished_at: str
    duration_ms: float


class ModelExtractionResult(BaseModel):
    model: str
    data: Optional[dict[str, Any]] = None
    usage: Optional[TokenUsage] = None
    pricing: Optional[PricingInfo] = None
    timing: Optional[ModelTiming] = None
    error: Optional[str] = None

    # no return annotation: the schema keeps the declared fields
    @model_serializer(mode="wrap")
    def omit_missing_error(self, handler):
        payload = handler(self)
        if self.error is None:
            payload.pop("error", None)
        return payload


class ExtractResponse(BaseModel):
    status: str
    data: dict[str, Any]
    usage: TokenUsage
    pricing: PricingInfo


class CompareResponse(BaseModel):
    status: str
    filename: str
    results: list[ModelExtractionResult]


class ErrorResponse(BaseModel):
    status: str = "error"
    message: str


class IndexResponse(BaseModel):
    status: str
    message: str
