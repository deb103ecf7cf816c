"""Coerce free-text model output into the three-key summary schema.

The model is asked for a JSON object but routinely wraps it in markdown
fences or surrounds it with prose. ``normalize_summary`` strips fences, takes
the greedy span from the first ``{`` to the last ``}`` and decodes it. Anything
that does not decode into the expected shape is replaced by a fallback summary,
so callers always receive all three keys.
"""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any

_logger = logging.getLogger("summarizer.normalizer")

RAW_TEXT_LIMIT = 500
PARSE_ERROR_NOTE = "Could not parse structured response from AI"


class SummaryShapeError(ValueError):
    pass


@dataclass(frozen=True)
class FallbackMessages:
    unparsed_bullet: str
    unparsed_notes: tuple[str, ...]
    error_bullet: str


START_FALLBACKS = FallbackMessages(
    unparsed_bullet="Summary could not be parsed in structured format",
    unparsed_notes=("AI response was not in expected JSON format",),
    error_bullet="Error parsing AI response - please try again",
)

REFINE_FALLBACKS = FallbackMessages(
    unparsed_bullet="Refinement completed",
    unparsed_notes=(),
    error_bullet="Error parsing refined response",
)


def strip_code_fences(text: str) -> str:
    return text.replace("```json", "").replace("```", "").strip()


def _is_missing(value: Any) -> bool:
    # Empty lists count as present; empty strings, null, false and 0 do not.
    if value is None or value is False:
        return True
    if isinstance(value, (str, int, float)) and not value:
        return True
    return False


def _validated(candidate: Any) -> dict:
    if not isinstance(candidate, dict):
        raise SummaryShapeError("Invalid JSON structure")
    bullets = candidate.get("initial_bullet_summary")
    customized = candidate.get("user_customized_summary")
    if _is_missing(bullets) or _is_missing(customized) or not isinstance(bullets, list):
        raise SummaryShapeError("Invalid JSON structure")
    notes = candidate.get("clarifications_or_notes")
    if not isinstance(notes, list):
        notes = []
    return {
        "initial_bullet_summary": bullets,
        "user_customized_summary": customized,
        "clarifications_or_notes": notes,
    }


def error_fallback(cleaned: str, messages: FallbackMessages = START_FALLBACKS) -> dict:
    return {
        "initial_bullet_summary": [messages.error_bullet],
        "user_customized_summary": cleaned[:RAW_TEXT_LIMIT] + "...",
        "clarifications_or_notes": [PARSE_ERROR_NOTE],
    }


def unparsed_fallback(cleaned: str, messages: FallbackMessages = START_FALLBACKS) -> dict:
    return {
        "initial_bullet_summary": [messages.unparsed_bullet],
        "user_customized_summary": cleaned,
        "clarifications_or_notes": list(messages.unparsed_notes),
    }


def _json_span(text: str) -> str | None:
    """First "{" to last "}" in the whole text, not a balanced parse."""
    start = text.find("{")
    end = text.rfind("}")
    if start == -1 or end < start:
        return None
    return text[start : end + 1]


def _reject_constant(token: str) -> Any:
    raise ValueError(f"Non-standard JSON constant: {token}")


def normalize_summary(raw_text: Any, messages: FallbackMessages = START_FALLBACKS) -> dict:
    """Return a structurally complete summary dict for any model output. Never raises."""
    raw = raw_text if isinstance(raw_text, str) else ""
    _logger.debug("Raw AI response (%d chars): %s", len(raw), raw)
    cleaned = strip_code_fences(raw)

    try:
        span = _json_span(cleaned)
        if span is not None:
            candidate = json.loads(span, parse_constant=_reject_constant)
        else:
            _logger.info("No JSON object in AI response; returning raw text")
            # The unparsed fallback is validated too, so empty text still
            # ends up in the error fallback below.
            candidate = unparsed_fallback(cleaned, messages)
        return _validated(candidate)
    except (ValueError, RecursionError) as exc:
        _logger.warning("JSON parse error: %s", exc)
        _logger.warning("Cleaned response: %s", cleaned[:RAW_TEXT_LIMIT])
        return error_fallback(cleaned, messages)
