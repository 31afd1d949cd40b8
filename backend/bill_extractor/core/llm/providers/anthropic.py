from anthropic import Anthropic

from bill_extractor.core.llm.base import BaseLLM
from bill_extractor.core.llm.schemas import GenerateConfig, LLMResponse


class AnthropicProvider(BaseLLM):
    def __init__(self, api_key: str, model: str):
        self._client = Anthropic(api_key=api_key)
        self.model = model

    def _split_messages(self, messages: list[dict]) -> tuple[str | None, list[dict]]:
        system_parts: list[str] = []
        history: list[dict] = []

        for message in messages:
            role = message.get("role")
            content = message.get("content", "")
            if role == "system":
                if content:
                    system_parts.append(str(content))
                continue
            if role == "assistant":
                history.append({"role": "assistant", "content": str(content)})
            else:
                history.append({"role": "user", "content": str(content)})

        system_text = "\n\n".join(system_parts) if system_parts else None
        return system_text, history

    def _build_params(self, config: GenerateConfig) -> dict:
        # the Messages API always requires max_tokens
        params: dict = {"max_tokens": config.max_tokens or 1024}
        if config.temperature is not None:
            params["temperature"] = config.temperature
        if config.top_p is not None:
            params["top_p"] = config.top_p
        if config.stop is not None:
            params["stop_sequences"] = config.stop
        return params

    def generate(self, messages: list[dict], config: GenerateConfig | None = None) -> LLMResponse:
        config = config or GenerateConfig()
        system_text, history = self._split_messages(messages)

        params = self._build_params(config)
        if system_text:
            params["system"] = system_text

        response = self._client.messages.create(
            model=self.model,
            messages=history,
            **params,
        )

        text_parts = []
        for block in response.content:
            if getattr(block, "text", None):
                text_parts.append(block.text)

        usage = {}
        if getattr(response, "usage", None):
            usage = {
                "input_tokens": response.usage.input_tokens,
                "output_tokens": response.usage.output_tokens,
            }

        return LLMResponse(text="".join(text_parts), usage=usage)
