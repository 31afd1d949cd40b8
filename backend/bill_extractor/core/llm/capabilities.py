"""Per-model capability table.

Models differ in which provider serves them, whether they accept a
temperature, which parameter caps their output and how they name token
usage. The extraction pipeline reads these flags instead of branching on
model families.
"""
from dataclasses import dataclass

USAGE_CHAT = "chat"  # prompt_tokens / completion_tokens
USAGE_MESSAGES = "messages"  # input_tokens / output_tokens

EXTRACTION_TEMPERATURE = 0.1


@dataclass(frozen=True)
class ModelCapability:
    provider: str
    temperature: float | None = None
    max_tokens_param: str = "max_tokens"
    usage_style: str = USAGE_CHAT
    min_interval_seconds: float = 0.0


_GPT_CHAT = ModelCapability(provider="openai", temperature=EXTRACTION_TEMPERATURE)
_OPENAI_REASONING = ModelCapability(
    provider="openai",
    max_tokens_param="max_completion_tokens",
)
_ANTHROPIC = ModelCapability(provider="anthropic", usage_style=USAGE_MESSAGES)
_GOOGLE = ModelCapability(provider="google", min_interval_seconds=1.0)
_XAI = ModelCapability(provider="xai")

MODEL_CAPABILITIES: dict[str, ModelCapability] = {
    "gpt-4.5-preview": ModelCapability(
        provider="openai",
        temperature=EXTRACTION_TEMPERATURE,
        min_interval_seconds=2.0,
    ),
    "gpt-4o": _GPT_CHAT,
    "gpt-4o-mini": _GPT_CHAT,
    "gpt-4.1": _GPT_CHAT,
    "gpt-4.1-mini": _GPT_CHAT,
    "gpt-4.1-nano": _GPT_CHAT,
    "o1": _OPENAI_REASONING,
    "o1-mini": _OPENAI_REASONING,
    "o3": _OPENAI_REASONING,
    "o3-mini": _OPENAI_REASONING,
    "o4-mini": _OPENAI_REASONING,
    "claude-3-5-sonnet-latest": _ANTHROPIC,
    "claude-3-5-haiku-latest": _ANTHROPIC,
    "claude-sonnet-4-20250514": _ANTHROPIC,
    "gemini-2.0-flash": _GOOGLE,
    "gemini-2.5-flash": _GOOGLE,
    "gemini-2.5-pro": _GOOGLE,
    "grok-3": _XAI,
    "grok-3-mini": _XAI,
}

_PREFIX_CAPABILITIES: tuple[tuple[str, ModelCapability], ...] = (
    ("gpt-4", _GPT_CHAT),
    ("o1", _OPENAI_REASONING),
    ("o3", _OPENAI_REASONING),
    ("o4", _OPENAI_REASONING),
    ("claude", _ANTHROPIC),
    ("gemini", _GOOGLE),
    ("grok", _XAI),
)

_FALLBACK = ModelCapability(provider="openai")


def get_capability(model: str) -> ModelCapability:
    key = (model or "").strip().lower()
    if key in MODEL_CAPABILITIES:
        return MODEL_CAPABILITIES[key]
    for prefix, capability in _PREFIX_CAPABILITIES:
        if key.startswith(prefix):
            return capability
    return _FALLBACK
