"""Recover a JSON object from a model's free-text reply.

Each strategy takes the raw reply and returns the decoded value, ``NO_MATCH``
when it found nothing to decode, or ``INVALID`` when it found a candidate
that is not JSON. ``reconcile_reply`` tries them in order and stops at the
first strategy that found a candidate, so a broken fenced block is not
second-guessed by the brace span.
"""
import json
import re
from collections.abc import Callable
from typing import Any

from bill_extractor.modules.extraction.exceptions import ParseError

RAW_PREVIEW_CHARS = 200

_FENCED_RE = re.compile(r"```(?:json)?\s*(.*?)\s*```", re.DOTALL | re.IGNORECASE)
_BRACE_SPAN_RE = re.compile(r"\{.*\}", re.DOTALL)

NO_MATCH = object()
INVALID = object()


def _loads(candidate: str) -> Any:
    try:
        return json.loads(candidate)
    except (json.JSONDecodeError, TypeError):
        return INVALID


def parse_whole_text(raw: str) -> Any:
    parsed = _loads(raw.strip())
    # a miss here always falls through to the next strategy
    return NO_MATCH if parsed is INVALID else parsed


def parse_fenced_block(raw: str) -> Any:
    match = _FENCED_RE.search(raw)
    if not match:
        return NO_MATCH
    return _loads(match.group(1))


def parse_brace_span(raw: str) -> Any:
    match = _BRACE_SPAN_RE.search(raw)
    if not match:
        return NO_MATCH
    return _loads(match.group(0))


PARSE_STRATEGIES: tuple[Callable[[str], Any], ...] = (
    parse_whole_text,
    parse_fenced_block,
    parse_brace_span,
)


def _preview(raw: str) -> str:
    if len(raw) <= RAW_PREVIEW_CHARS:
        return raw
    return raw[:RAW_PREVIEW_CHARS] + "..."


def reconcile_reply(raw: str | None, model: str) -> dict:
    raw = raw or ""
    parsed = NO_MATCH
    for strategy in PARSE_STRATEGIES:
        parsed = strategy(raw)
        if parsed is not NO_MATCH:
            break

    if parsed is NO_MATCH or parsed is INVALID:
        raise ParseError(
            model,
            f"Failed to parse bill data from response. Raw output: {_preview(raw)}",
        )
    if not isinstance(parsed, dict):
        raise ParseError(
            model,
            f"Invalid data format received: expected a JSON object, got {type(parsed).__name__}",
        )
    return parsed
