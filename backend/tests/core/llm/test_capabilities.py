from bill_extractor.core.llm.capabilities import (
    EXTRACTION_TEMPERATURE,
    USAGE_CHAT,
    USAGE_MESSAGES,
    get_capability,
)


def test_gpt_chat_models_get_temperature_hint():
    assert get_capability("gpt-4o").temperature == EXTRACTION_TEMPERATURE
    assert get_capability("gpt-4.5-preview").temperature == EXTRACTION_TEMPERATURE


def test_reasoning_models_skip_temperature_and_use_completion_token_limit():
    capability = get_capability("o3-mini")

    assert capability.temperature is None
    assert capability.max_tokens_param == "max_completion_tokens"


def test_unknown_models_are_inferred_from_prefix():
    assert get_capability("claude-opus-4-1").provider == "anthropic"
    assert get_capability("claude-opus-4-1").usage_style == USAGE_MESSAGES
    assert get_capability("gemini-1.5-pro").provider == "google"
    assert get_capability("grok-4").provider == "xai"
    assert get_capability("gpt-4o-2024-08-06").temperature == EXTRACTION_TEMPERATURE


def test_completely_unknown_model_falls_back_to_openai():
    capability = get_capability("some-new-model")

    assert capability.provider == "openai"
    assert capability.usage_style == USAGE_CHAT
    assert capability.temperature is None
