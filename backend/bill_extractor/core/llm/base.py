from abc import ABC, abstractmethod

from bill_extractor.core.llm.schemas import GenerateConfig, LLMResponse


class BaseLLM(ABC):
    model: str

    @abstractmethod
    def generate(self, messages: list[dict], config: GenerateConfig | None = None) -> LLMResponse:
        """Generate a response from the LLM based on the provided messages.

        ``usage`` is returned in the provider's own naming convention.
        """
        pass
