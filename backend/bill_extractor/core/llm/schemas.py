from pydantic import BaseModel, Field


class GenerateConfig(BaseModel):
    temperature: float | None = None
    max_tokens: int | None = None
    # reasoning models reject "max_tokens" and expect "max_completion_tokens"
    max_tokens_param: str = "max_tokens"
    top_p: float | None = None
    stop: list[str] | None = None


class LLMResponse(BaseModel):
    text: str
    usage: dict = Field(default_factory=dict)
