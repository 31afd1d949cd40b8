import google.generativeai as genai

from bill_extractor.core.llm.base import BaseLLM
from bill_extractor.core.llm.schemas import GenerateConfig, LLMResponse


class GoogleProvider(BaseLLM):
    def __init__(self, api_key: str, model: str):
        genai.configure(api_key=api_key)
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
                history.append({"role": "model", "parts": [str(content)]})
            else:
                history.append({"role": "user", "parts": [str(content)]})

        system_instruction = "\n\n".join(system_parts) if system_parts else None
        return system_instruction, history

    def _build_config(self, config: GenerateConfig) -> genai.types.GenerationConfig:
        params: dict = {}
        if config.temperature is not None:
            params["temperature"] = config.temperature
        if config.top_p is not None:
            params["top_p"] = config.top_p
        if config.max_tokens is not None:
            params["max_output_tokens"] = config.max_tokens
        if config.stop is not None:
            params["stop_sequences"] = config.stop
        return genai.types.GenerationConfig(**params)

    def generate(self, messages: list[dict], config: GenerateConfig | None = None) -> LLMResponse:
        config = config or GenerateConfig()
        system_instruction, history = self._split_messages(messages)
        model = genai.GenerativeModel(self.model, system_instruction=system_instruction)
        response = model.generate_content(
            history or "",
            generation_config=self._build_config(config),
        )
        text = getattr(response, "text", "") or ""

        usage = {}
        metadata = getattr(response, "usage_metadata", None)
        if metadata is not None:
            usage = {
                "prompt_tokens": metadata.prompt_token_count,
                "completion_tokens": metadata.candidates_token_count,
                "total_tokens": metadata.total_token_count,
            }
        return LLMResponse(text=text, usage=usage)
