import json

import pytest

from app.services.summary_normalizer import (
    PARSE_ERROR_NOTE,
    REFINE_FALLBACKS,
    START_FALLBACKS,
    normalize_summary,
    strip_code_fences,
)

KEYS = {"initial_bullet_summary", "user_customized_summary", "clarifications_or_notes"}


def test_missing_clarifications_become_empty_list():
    raw = '{"initial_bullet_summary":["a","b"],"user_customized_summary":"x"}'
    summary = normalize_summary(raw)
    assert summary == {
        "initial_bullet_summary": ["a", "b"],
        "user_customized_summary": "x",
        "clarifications_or_notes": [],
    }


def test_non_list_clarifications_are_replaced():
    raw = json.dumps(
        {
            "initial_bullet_summary": ["a"],
            "user_customized_summary": "x",
            "clarifications_or_notes": "none",
        }
    )
    assert normalize_summary(raw)["clarifications_or_notes"] == []


def test_fenced_object_matches_unfenced():
    body = json.dumps(
        {
            "initial_bullet_summary": ["Decided on vendor"],
            "user_customized_summary": "Vendor chosen.",
            "clarifications_or_notes": ["Budget owner unclear"],
        }
    )
    assert normalize_summary(f"```json\n{body}\n```") == normalize_summary(body)


def test_prose_around_object_is_ignored():
    raw = 'Here is your summary:\n{"initial_bullet_summary":["a"],"user_customized_summary":"x"}\nThanks!'
    assert normalize_summary(raw)["initial_bullet_summary"] == ["a"]


def test_text_without_braces_uses_unparsed_fallback_untruncated():
    raw = "```\n" + "word " * 200 + "\n```"
    cleaned = strip_code_fences(raw)
    summary = normalize_summary(raw)
    assert summary == {
        "initial_bullet_summary": [START_FALLBACKS.unparsed_bullet],
        "user_customized_summary": cleaned,
        "clarifications_or_notes": ["AI response was not in expected JSON format"],
    }
    assert len(summary["user_customized_summary"]) > 500


def test_missing_customized_summary_uses_truncated_error_fallback():
    raw = json.dumps({"initial_bullet_summary": ["a"], "filler": "z" * 800})
    summary = normalize_summary(raw)
    assert summary["initial_bullet_summary"] == ["Error parsing AI response - please try again"]
    assert summary["user_customized_summary"] == raw[:500] + "..."
    assert summary["clarifications_or_notes"] == [PARSE_ERROR_NOTE]


def test_ellipsis_is_appended_even_for_short_text():
    raw = '{"user_customized_summary": "x"}'
    assert normalize_summary(raw)["user_customized_summary"] == raw + "..."


@pytest.mark.parametrize(
    "raw",
    [
        '{"initial_bullet_summary": "one bullet", "user_customized_summary": "x"}',
        '{"initial_bullet_summary": ["a"], "user_customized_summary": ""}',
        '{"initial_bullet_summary": null, "user_customized_summary": "x"}',
        '{"initial_bullet_summary": ["a"], "user_customized_summary": 0}',
        "{not valid json}",
    ],
)
def test_malformed_objects_use_error_fallback(raw):
    summary = normalize_summary(raw)
    assert summary["initial_bullet_summary"] == [START_FALLBACKS.error_bullet]


def test_empty_bullet_list_is_accepted():
    summary = normalize_summary('{"initial_bullet_summary": [], "user_customized_summary": "x"}')
    assert summary["initial_bullet_summary"] == []
    assert summary["user_customized_summary"] == "x"


def test_greedy_span_breaks_on_two_objects():
    first = '{"initial_bullet_summary":["a"],"user_customized_summary":"x"}'
    summary = normalize_summary(f"{first}\nand also\n{first}")
    assert summary["initial_bullet_summary"] == [START_FALLBACKS.error_bullet]


def test_braces_inside_strings_survive_greedy_span():
    raw = '{"initial_bullet_summary":["use {braces}"],"user_customized_summary":"ends with }"}'
    summary = normalize_summary(raw)
    assert summary["initial_bullet_summary"] == ["use {braces}"]
    assert summary["user_customized_summary"] == "ends with }"


def test_extra_keys_are_dropped():
    raw = '{"initial_bullet_summary":["a"],"user_customized_summary":"x","email":"Hi team"}'
    assert set(normalize_summary(raw)) == KEYS


def test_empty_text_falls_through_to_error_fallback():
    summary = normalize_summary("   ")
    assert summary["initial_bullet_summary"] == [START_FALLBACKS.error_bullet]
    assert summary["user_customized_summary"] == "..."


def test_refine_messages():
    unparsed = normalize_summary("Made it shorter.", REFINE_FALLBACKS)
    assert unparsed == {
        "initial_bullet_summary": ["Refinement completed"],
        "user_customized_summary": "Made it shorter.",
        "clarifications_or_notes": [],
    }
    broken = normalize_summary('{"initial_bullet_summary": 3}', REFINE_FALLBACKS)
    assert broken["initial_bullet_summary"] == ["Error parsing refined response"]
    assert broken["clarifications_or_notes"] == [PARSE_ERROR_NOTE]


@pytest.mark.parametrize(
    "raw",
    [None, "", "{", "}", "}{", "[1, 2, 3]", '{"a": ' * 2000, "```json```", 42, "null"],
)
def test_never_raises_and_always_complete(raw):
    summary = normalize_summary(raw)
    assert set(summary) == KEYS
    assert isinstance(summary["initial_bullet_summary"], list)
    assert isinstance(summary["clarifications_or_notes"], list)


@pytest.mark.parametrize(
    "raw",
    [
        '{"initial_bullet_summary": ["a"], "user_customized_summary": NaN}',
        '{"initial_bullet_summary": ["a"], "user_customized_summary": "x", "clarifications_or_notes": [NaN]}',
        '{"initial_bullet_summary": [Infinity], "user_customized_summary": "x"}',
        '{"initial_bullet_summary": ["a"], "user_customized_summary": -Infinity}',
    ],
)
def test_non_standard_json_constants_use_error_fallback(raw):
    summary = normalize_summary(raw)
    assert summary["initial_bullet_summary"] == [START_FALLBACKS.error_bullet]
    assert summary["user_customized_summary"] == raw + "..."
    assert summary["clarifications_or_notes"] == [PARSE_ERROR_NOTE]


def test_closing_brace_before_opening_brace_is_unparsed():
    summary = normalize_summary("} then {")
    assert summary["initial_bullet_summary"] == [START_FALLBACKS.unparsed_bullet]
    assert summary["user_customized_summary"] == "} then {"


def test_unclosed_braces_are_scanned_in_linear_time():
    raw = "{" * 200_000
    summary = normalize_summary(raw)
    assert summary["initial_bullet_summary"] == [START_FALLBACKS.unparsed_bullet]
    assert summary["user_customized_summary"] == raw
