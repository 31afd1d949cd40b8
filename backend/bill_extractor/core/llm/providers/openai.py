from openai import OpenAI

from bill_extractor.core.llm.base import BaseLLM
from bill_extractor.core.llm.schemas import GenerateConfig, LLMResponse


class OpenAIProvider(BaseLLM):
    base_url: str | None = None

    def __init__(self, api_key: str, model: str):
        self._client = OpenAI(api_key=api_key, base_url=self.base_url)
        self.model = model

    def _build_params(self, messages: list[dict], config: GenerateConfig) -> dict:
        params = {
            "model": self.model,
            "messages": messages,
        }
        if config.temperature is not None:
            params["temperature"] = config.temperature
        if config.top_p is not None:
            params["top_p"] = config.top_p
        if config.max_tokens is not None:
            params[config.max_tokens_param] = config.max_tokens
        if config.stop is not None:
            params["stop"] = config.stop
        return params

    def generate(self, messages: list[dict], config: GenerateConfig | None = None) -> LLMResponse:
        config = config or GenerateConfig()

        response = self._client.chat.completions.create(
            **self._build_params(messages, config),
        )

        usage = {}
        if getattr(response, "usage", None):
            usage = {
                "prompt_tokens": response.usage.prompt_tokens,
                "completion_tokens": response.usage.completion_tokens,
                "total_tokens": response.usage.total_tokens,
            }
        return LLMResponse(
            text=response.choices[0].message.content or "",
            usage=usage,
        )
