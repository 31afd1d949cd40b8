import logging
from collections.abc import Mapping
from typing import Any

from bill_extractor.modules.pricing.schemas import (
    ModelRates,
    PriceTableEntry,
    PriceTableResponse,
    PricingInfo,
)

logger = logging.getLogger(__name__)

# USD per 1M tokens: (input, cached input, output)
_MODEL_PRICING_PER_1M: dict[str, tuple[float, float, float]] = {
    "gpt-4.5-preview": (75.0, 37.5, 150.0),
    "gpt-4o": (2.5, 1.25, 10.0),
    "gpt-4o-mini": (0.15, 0.075, 0.6),
    "gpt-4.1": (2.0, 0.5, 8.0),
    "gpt-4.1-mini": (0.4, 0.1, 1.6),
    "gpt-4.1-nano": (0.1, 0.025, 0.4),
    "o1": (15.0, 7.5, 60.0),
    "o1-mini": (1.1, 0.55, 4.4),
    "o3": (2.0, 0.5, 8.0),
    "o3-mini": (1.1, 0.55, 4.4),
    "o4-mini": (1.1, 0.275, 4.4),
    "claude-3-5-sonnet-latest": (3.0, 0.3, 15.0),
    "claude-3-5-haiku-latest": (0.8, 0.08, 4.0),
    "claude-sonnet-4-20250514": (3.0, 0.3, 15.0),
    "gemini-2.0-flash": (0.1, 0.025, 0.4),
    "gemini-2.5-flash": (0.3, 0.075, 2.5),
    "gemini-2.5-pro": (1.25, 0.31, 10.0),
    "grok-3": (3.0, 0.75, 15.0),
    "grok-3-mini": (0.3, 0.075, 0.5),
}

DEFAULT_PRICING_MODEL = "gpt-4o"

CURRENCY = "USD"


def _rates(model: str) -> ModelRates:
    input_rate, cached_rate, output_rate = _MODEL_PRICING_PER_1M[model]
    return ModelRates(
        input_per_million=input_rate,
        cached_input_per_million=cached_rate,
        output_per_million=output_rate,
    )


def resolve_pricing(model: str | None) -> tuple[str, ModelRates, str]:
    """Return (pricing model, rates, source) with source exact/prefix/default."""
    key = (model or "").strip().lower()
    if key in _MODEL_PRICING_PER_1M:
        return key, _rates(key), "exact"

    # dated snapshots, e.g. gpt-4o-2024-08-06
    for prefix in sorted(_MODEL_PRICING_PER_1M, key=len, reverse=True):
        if key.startswith(f"{prefix}-"):
            return prefix, _rates(prefix), "prefix"

    return DEFAULT_PRICING_MODEL, _rates(DEFAULT_PRICING_MODEL), "default"


def format_cost(value: float) -> str:
    return f"${value:.6f}"


def _token_count(usage: Any, name: str) -> int:
    if isinstance(usage, Mapping):
        value = usage[name]
    else:
        value = getattr(usage, name)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise TypeError(f"{name} must be a number, got {type(value).__name__}")
    if value < 0:
        raise ValueError(f"{name} must be non-negative")
    return int(value)


def unavailable_pricing(model: str, reason: str) -> PricingInfo:
    return PricingInfo(model=model, available=False, reason=reason)


def calculate_pricing(model: str, usage: Any) -> PricingInfo:
    """Estimate request cost; degrades to "N/A" pricing instead of raising."""
    try:
        prompt_tokens = _token_count(usage, "prompt_tokens")
        completion_tokens = _token_count(usage, "completion_tokens")
        pricing_model, rates, source = resolve_pricing(model)
    except Exception as exc:
        logger.warning("Pricing unavailable for %s: %s", model, exc)
        return unavailable_pricing(model, f"Pricing calculation failed: {exc}")

    input_cost = (prompt_tokens / 1_000_000.0) * rates.input_per_million
    output_cost = (completion_tokens / 1_000_000.0) * rates.output_per_million
    if source == "default":
        logger.info("No pricing for %s, using %s rates", model, pricing_model)

    return PricingInfo(
        model=model,
        pricing_model=pricing_model,
        pricing_source=source,
        currency=CURRENCY,
        rates=rates,
        input_cost=format_cost(input_cost),
        output_cost=format_cost(output_cost),
        total_cost=format_cost(input_cost + output_cost),
    )


def get_price_table() -> PriceTableResponse:
    return PriceTableResponse(
        status="success",
        currency=CURRENCY,
        default_model=DEFAULT_PRICING_MODEL,
        models=[
            PriceTableEntry(model=model, rates=_rates(model))
            for model in sorted(_MODEL_PRICING_PER_1M)
        ],
    )
