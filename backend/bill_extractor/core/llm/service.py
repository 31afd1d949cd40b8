from typing import Dict, Tuple

from bill_extractor.core.config import settings
from bill_extractor.core.llm.base import BaseLLM
from bill_extractor.core.llm.capabilities import get_capability
from bill_extractor.core.llm.providers.anthropic import AnthropicProvider
from bill_extractor.core.llm.providers.google import GoogleProvider
from bill_extractor.core.llm.providers.openai import OpenAIProvider
from bill_extractor.core.llm.providers.xai import XaiProvider


PROVIDER_ALIASES = {
    "grok": "xai",
    "gemini": "google",
    "claude": "anthropic",
}

LLM_REGISTRY = {
    "openai": OpenAIProvider,
    "xai": XaiProvider,
    "google": GoogleProvider,
    "anthropic": AnthropicProvider,
}

PROVIDER_CONFIG: Dict[str, dict[str, str]] = {
    "openai": {
        "api_key_attr": "OPENAI_API_KEY",
    },
    "xai": {
        "api_key_attr": "XAI_API_KEY",
    },
    "google": {
        "api_key_attr": "GOOGLE_API_KEY",
    },
    "anthropic": {
        "api_key_attr": "ANTHROPIC_API_KEY",
    },
}


# cache instance per (provider, model)
_instances: Dict[Tuple[str, str], BaseLLM] = {}


def _resolve_api_key(provider: str) -> str:
    provider = PROVIDER_ALIASES.get(provider, provider)
    attr = PROVIDER_CONFIG.get(provider, {}).get("api_key_attr", "")
    if attr:
        val = getattr(settings, attr, "")
        if val:
            return str(val)
    return ""


def create_llm(
    provider: str | None = None,
    model: str | None = None,
    api_key: str | None = None,
    use_cache: bool = True,
) -> BaseLLM:
    model = model or settings.EXTRACTION_DEFAULT_MODEL
    provider = provider or get_capability(model).provider
    provider = PROVIDER_ALIASES.get(provider, provider)
    api_key = api_key or _resolve_api_key(provider)

    if provider not in LLM_REGISTRY:
        raise ValueError(f"Unsupported LLM provider: {provider}")
    if not api_key:
        attr = PROVIDER_CONFIG.get(provider, {}).get("api_key_attr", "")
        hint = f" Set {attr} in env." if attr else ""
        raise ValueError(f"Missing API key for provider '{provider}'.{hint}")
    key = (provider, model)

    if use_cache and key in _instances:
        return _instances[key]

    llm_class = LLM_REGISTRY[provider]

    instance = llm_class(
        api_key=api_key,
        model=model,
    )

    if use_cache:
        _instances[key] = instance

    return instance


def llm_for_model(model: str) -> BaseLLM:
    """Default factory used by the extraction pipeline."""
    return create_llm(model=model)


def clear_llm_cache() -> None:
    """Clear cached LLM instances so next call picks up new config."""
    _instances.clear()
