from bill_extractor.core.llm.providers.anthropic import AnthropicProvider
from bill_extractor.core.llm.schemas import GenerateConfig


def test_split_messages_moves_system_prompt_out_of_history():
    provider = AnthropicProvider(api_key="test", model="claude-3-5-haiku-latest")

    system_text, history = provider._split_messages(
        [
            {"role": "system", "content": "extract fields"},
            {"role": "user", "content": "bill text"},
        ]
    )

    assert system_text == "extract fields"
    assert history == [{"role": "user", "content": "bill text"}]


def test_build_params_always_sets_max_tokens():
    provider = AnthropicProvider(api_key="test", model="claude-3-5-haiku-latest")

    params = provider._build_params(GenerateConfig())

    assert params == {"max_tokens": 1024}
