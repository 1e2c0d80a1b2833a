from __future__ import annotations

from typing import get_args

import pytest

from app.notes.soap_parser import (
    KNOWN_SOAP_FORMATS,
    RENDERABLE_SOAP_FORMATS,
    UNKNOWN,
    SoapFormat,
    detect_format,
)
from tests.notes._samples import (
    FREE_TEXT_NOTE,
    LONG_FORM_NOTE,
    TAGGED_NOTE,
    TRADITIONAL_NOTE,
)


def test_detects_traditional_prefixed_note() -> None:
    assert detect_format(TRADITIONAL_NOTE) == "traditional-prefixed"


def test_detects_tagged_note() -> None:
    assert detect_format(TAGGED_NOTE) == "tagged"


def test_free_text_is_unknown() -> None:
    assert detect_format(FREE_TEXT_NOTE) == "unknown"


@pytest.mark.parametrize("text", ["", "   ", "\n\t\n"])
def test_empty_or_blank_text_is_unknown(text: str) -> None:
    assert detect_format(text) == "unknown"


def test_full_word_labels_are_recognized() -> None:
    assert detect_format(LONG_FORM_NOTE) == "traditional-prefixed"


def test_labels_tolerate_case_indentation_and_space_before_colon() -> None:
    assert detect_format("  s : cough\n\to: clear lungs") == "traditional-prefixed"


def test_single_label_is_not_enough() -> None:
    assert detect_format("P: rest and fluids") == "unknown"


def test_label_like_words_are_not_labels() -> None:
    # "SpO2:" and "Allergies:" start with S/A but are not section labels.
    assert detect_format("SpO2: 95%\nAllergies: none") == "unknown"


def test_labels_must_lead_the_line() -> None:
    assert detect_format("reports S: pain and O: nothing") == "unknown"


def test_tags_are_case_insensitive_and_whitespace_tolerant() -> None:
    assert detect_format("< subjective >pain</ Subjective >") == "tagged"


def test_bracket_blocks_are_tagged() -> None:
    assert detect_format("[SUBJECTIVE] pain [/SUBJECTIVE]\n[PLAN] rest [/PLAN]") == "tagged"


def test_single_complete_tag_pair_is_tagged() -> None:
    assert detect_format("<PLAN>rest</PLAN>") == "tagged"


def test_unclosed_tag_does_not_count_as_tagged() -> None:
    assert detect_format("<SUBJECTIVE> pain\nS: pain\nO: clear") == "traditional-prefixed"


def test_tagged_takes_precedence_over_prefixes() -> None:
    text = "<SUBJECTIVE>\nS: pain\n</SUBJECTIVE>\nO: clear\nA: fine\nP: none"
    assert detect_format(text) == "tagged"


@pytest.mark.parametrize(
    "text",
    [
        "\x00\x01\xff<<>>[[]]::",
        "<" * 50_000,
        "[/" * 50_000,
        ":" * 100_000,
        " " * 100_000,
        "S:" * 60_000,
        "<SUBJECTIVE>" * 20_000,
    ],
)
def test_detection_is_total(text: str) -> None:
    assert detect_format(text) in {"traditional-prefixed", "tagged", "unknown"}


def test_closerless_bracket_markers_are_tagged() -> None:
    text = "[SUBJECTIVE] cough [OBJECTIVE] T 38.2 [ASSESSMENT] URI [PLAN] rest"

    assert detect_format(text) == "tagged"


def test_single_closerless_bracket_marker_is_not_enough() -> None:
    assert detect_format("[PLAN] rest and fluids") == "unknown"


def test_closerless_bracket_markers_need_two_distinct_sections() -> None:
    assert detect_format("[PLAN] rest\n[PLAN] fluids") == "unknown"


def test_format_sets_match_the_dialect_type() -> None:
    assert KNOWN_SOAP_FORMATS == get_args(SoapFormat)
    assert RENDERABLE_SOAP_FORMATS == tuple(f for f in KNOWN_SOAP_FORMATS if f != UNKNOWN)
