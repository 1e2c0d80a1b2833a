from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Literal

SoapFormat = Literal["traditional-prefixed", "tagged", "unknown"]

TRADITIONAL_PREFIXED: SoapFormat = "traditional-prefixed"
TAGGED: SoapFormat = "tagged"
UNKNOWN: SoapFormat = "unknown"

KNOWN_SOAP_FORMATS: tuple[SoapFormat, ...] = (TRADITIONAL_PREFIXED, TAGGED, UNKNOWN)
RENDERABLE_SOAP_FORMATS: tuple[SoapFormat, ...] = (TRADITIONAL_PREFIXED, TAGGED)

# Canonical order: used for span boundaries, error listing and rendering.
SECTION_KEYS: tuple[str, ...] = ("subjective", "objective", "assessment", "plan")

UNRECOGNIZED_FORMAT_ERROR = "Unrecognized SOAP note format"


@dataclass(frozen=True)
class SoapSections:
    """The four SOAP sections of a note. Empty string means absent."""

    subjective: str = ""
    objective: str = ""
    assessment: str = ""
    plan: str = ""

    def as_dict(self) -> dict[str, str]:
        return {key: getattr(self, key) for key in SECTION_KEYS}


@dataclass(frozen=True)
class SoapValidationResult:
    """
    Outcome of validating a raw note.

    `errors` follows canonical section order. For `unknown` notes it holds a single
    "format not recognized" entry instead of four missing-section entries, so callers
    can tell garbled input apart from a recognized but incomplete note.
    """

    is_valid: bool
    format: SoapFormat
    errors: tuple[str, ...]
    sections: SoapSections


# Line-leading labels: `S:` or `Subjective:` (case-insensitive), optional indentation
# and optional blanks before the colon. `SpO2:` or `Allergies:` do not match.
_PREFIX_RES: dict[str, re.Pattern[str]] = {
    key: re.compile(rf"^[ \t]*(?:{key}|{key[0]})[ \t]*:", re.IGNORECASE | re.MULTILINE)
    for key in SECTION_KEYS
}

# (opening, closing) marker pairs per section: <PLAN>...</PLAN> and [PLAN]...[/PLAN].
_TAG_RES: dict[str, tuple[tuple[re.Pattern[str], re.Pattern[str]], ...]] = {
    key: (
        (
            re.compile(rf"<\s*{key}\s*>", re.IGNORECASE),
            re.compile(rf"<\s*/\s*{key}\s*>", re.IGNORECASE),
        ),
        (
            re.compile(rf"\[\s*{key}\s*\]", re.IGNORECASE),
            re.compile(rf"\[\s*/\s*{key}\s*\]", re.IGNORECASE),
        ),
    )
    for key in SECTION_KEYS
}

# Any bracket marker, opening or closing: ends a closer-less `[PLAN] ...` block.
_BRACKET_MARKER_RE = re.compile(
    r"\[\s*/?\s*(?:subjective|objective|assessment|plan)\s*\]", re.IGNORECASE
)

_TRADITIONAL_LABELS = {"subjective": "S", "objective": "O", "assessment": "A", "plan": "P"}


def _find_tagged_block(text: str, key: str) -> str | None:
    """Return the raw inner text of the first complete marker pair for `key`."""

    for open_re, close_re in _TAG_RES[key]:
        opening = open_re.search(text)
        if opening is None:
            continue
        # Closing marker is searched once, after the first opener only; this keeps
        # the scan linear even when an opener is repeated without ever being closed.
        closing = close_re.search(text, opening.end())
        if closing is not None:
            return text[opening.end() : closing.start()]
    return None


def _find_bracket_block(text: str, key: str) -> str | None:
    """Return the text after a closer-less `[KEY]` marker, up to the next bracket marker."""

    bracket_open_re = _TAG_RES[key][1][0]
    opening = bracket_open_re.search(text)
    if opening is None:
        return None
    following = _BRACKET_MARKER_RE.search(text, opening.end())
    end = following.start() if following is not None else len(text)
    return text[opening.end() : end]


def detect_format(text: str) -> SoapFormat:
    """
    Classify raw note text into a SOAP dialect.

    - `tagged` when a complete open/close marker pair exists for any section, or when
      at least two distinct closer-less `[SECTION]` markers exist.
    - `traditional-prefixed` when at least two distinct line-leading labels exist.
    - `unknown` otherwise (including empty or whitespace-only text). Never raises.
    """

    if not text or not text.strip():
        return UNKNOWN

    if any(_find_tagged_block(text, key) is not None for key in SECTION_KEYS):
        return TAGGED

    brackets = sum(1 for key in SECTION_KEYS if _TAG_RES[key][1][0].search(text))
    if brackets >= 2:
        return TAGGED

    found = sum(1 for key in SECTION_KEYS if _PREFIX_RES[key].search(text))
    if found >= 2:
        return TRADITIONAL_PREFIXED

    return UNKNOWN


def _extract_tagged(text: str) -> SoapSections:
    values: dict[str, str] = {}
    for key in SECTION_KEYS:
        block = _find_tagged_block(text, key)
        if block is None:
            block = _find_bracket_block(text, key)
        values[key] = block.strip() if block is not None else ""
    return SoapSections(**values)


def _extract_prefixed(text: str) -> SoapSections:
    """
    Split on line-leading labels.

    A block runs from a label to the next line-leading label of a *different* section;
    a repeated label of the same section stays inside the block. The first block of a
    section anchors it; later blocks of the same section (labels repeated out of order)
    are appended to it, separated by a blank line, so no content is dropped and the
    rendering re-extracts to the same sections.
    """

    matches = sorted(
        (match.start(), match.end(), key)
        for key in SECTION_KEYS
        for match in _PREFIX_RES[key].finditer(text)
    )

    blocks: dict[str, list[str]] = {}
    current_key: str | None = None
    content_start = 0
    for start, end, key in matches:
        if key == current_key:
            continue
        if current_key is not None:
            blocks.setdefault(current_key, []).append(text[content_start:start])
        current_key, content_start = key, end
    if current_key is not None:
        blocks.setdefault(current_key, []).append(text[content_start:])

    values = {
        key: "\n\n".join(part for part in (chunk.strip() for chunk in chunks) if part)
        for key, chunks in blocks.items()
    }
    return SoapSections(**values)


def extract_sections(text: str, soap_format: SoapFormat) -> SoapSections:
    """
    Split `text` into the four SOAP sections according to `soap_format`.

    Always returns a complete `SoapSections`; absent sections are empty strings and
    unrecognized formats yield four empty fields.
    """

    if not text:
        return SoapSections()
    if soap_format == TAGGED:
        return _extract_tagged(text)
    if soap_format == TRADITIONAL_PREFIXED:
        return _extract_prefixed(text)
    return SoapSections()


def _section_title(key: str) -> str:
    return key.capitalize()


def missing_sections(sections: SoapSections) -> list[str]:
    return [_section_title(key) for key in SECTION_KEYS if not getattr(sections, key).strip()]


def count_sections(sections: SoapSections) -> int:
    return len(SECTION_KEYS) - len(missing_sections(sections))


def validate_soap_note(text: str) -> SoapValidationResult:
    """Detect, extract and check a raw note for structural completeness."""

    soap_format = detect_format(text)
    sections = extract_sections(text, soap_format)

    if soap_format == UNKNOWN:
        errors: tuple[str, ...] = (UNRECOGNIZED_FORMAT_ERROR,)
    else:
        errors = tuple(
            f"{title} section is missing or empty" for title in missing_sections(sections)
        )

    return SoapValidationResult(
        is_valid=not errors,
        format=soap_format,
        errors=errors,
        sections=sections,
    )


def is_valid_soap_note(text: str) -> bool:
    return validate_soap_note(text).is_valid


def summarize_validation(result: SoapValidationResult) -> str:
    """One-line, content-free description of a validation result (safe to log)."""

    status = "valid" if result.is_valid else "invalid"
    summary = (
        f"{status} SOAP note ({result.format}, "
        f"{count_sections(result.sections)}/{len(SECTION_KEYS)} sections"
    )
    if result.format == UNKNOWN:
        return f"{summary}; format not recognized)"
    missing = missing_sections(result.sections)
    if missing:
        return f"{summary}; missing: {', '.join(missing)})"
    return f"{summary})"


def build_structured_note(
    *,
    subjective: str | None = None,
    objective: str | None = None,
    assessment: str | None = None,
    plan: str | None = None,
) -> SoapSections:
    """Build sections from discrete fields; unspecified fields become empty strings."""

    return SoapSections(
        subjective=(subjective or "").strip(),
        objective=(objective or "").strip(),
        assessment=(assessment or "").strip(),
        plan=(plan or "").strip(),
    )


def to_traditional_format(sections: SoapSections) -> str:
    """Render as `S: ...` / `O: ...` / `A: ...` / `P: ...` blocks; empty fields keep the label."""

    blocks = []
    for key in SECTION_KEYS:
        label = f"{_TRADITIONAL_LABELS[key]}:"
        content = getattr(sections, key).strip()
        blocks.append(f"{label} {content}" if content else label)
    return "\n\n".join(blocks)


def to_tagged_format(sections: SoapSections) -> str:
    """Render as `<SUBJECTIVE>...</SUBJECTIVE>` blocks; empty fields become empty tag pairs."""

    blocks = []
    for key in SECTION_KEYS:
        tag = key.upper()
        content = getattr(sections, key).strip()
        blocks.append(f"<{tag}>\n{content}\n</{tag}>" if content else f"<{tag}></{tag}>")
    return "\n\n".join(blocks)
