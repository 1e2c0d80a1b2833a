from __future__ import annotations

import logging
from typing import cast

from app.core.metrics import record_soap_parse
from app.core.settings import get_settings
from app.domain.exceptions import BusinessValidationError, IncompleteSoapNoteError
from app.notes.soap_parser import (
    KNOWN_SOAP_FORMATS,
    RENDERABLE_SOAP_FORMATS,
    TAGGED,
    UNKNOWN,
    UNRECOGNIZED_FORMAT_ERROR,
    SoapFormat,
    SoapSections,
    SoapValidationResult,
    build_structured_note,
    count_sections,
    detect_format,
    extract_sections,
    to_tagged_format,
    to_traditional_format,
    validate_soap_note,
)

logger = logging.getLogger("app.soap_notes")


def resolve_output_format(requested: str | None) -> SoapFormat:
    """
    Return the render target for a request, falling back to configuration.

    Raises BusinessValidationError for values that cannot be rendered.
    """

    if requested is None:
        return cast(SoapFormat, get_settings().soap_default_output_format)

    normalized = requested.strip().lower()
    if normalized not in RENDERABLE_SOAP_FORMATS:
        raise BusinessValidationError(
            "Invalid format. Supported values: " + ", ".join(RENDERABLE_SOAP_FORMATS) + "."
        )
    return cast(SoapFormat, normalized)


def resolve_source_format(requested: str | None, *, content_text: str) -> SoapFormat:
    if requested is None:
        return detect_format(content_text)

    normalized = requested.strip().lower()
    if normalized not in KNOWN_SOAP_FORMATS:
        raise BusinessValidationError(
            "Invalid format. Supported values: " + ", ".join(KNOWN_SOAP_FORMATS) + "."
        )
    return cast(SoapFormat, normalized)


def _ensure_within_limit(*, length: int) -> None:
    max_chars = get_settings().max_note_chars
    if length > max_chars:
        raise BusinessValidationError(f"Note text exceeds the maximum of {max_chars} characters.")


def _log_parse(
    *,
    event: str,
    soap_format: SoapFormat,
    sections: SoapSections,
    is_valid: bool,
    request_id: str | None,
) -> None:
    # IMPORTANT: never log note text or section content (PHI).
    logger.info(
        event,
        extra={
            "request_id": request_id,
            "soap_format": soap_format,
            "is_valid": is_valid,
            "section_count": count_sections(sections),
        },
    )


def validate_note(*, content_text: str, request_id: str | None = None) -> SoapValidationResult:
    _ensure_within_limit(length=len(content_text))

    result = validate_soap_note(content_text)
    record_soap_parse(soap_format=result.format, is_valid=result.is_valid)
    _log_parse(
        event="SOAP note validated",
        soap_format=result.format,
        sections=result.sections,
        is_valid=result.is_valid,
        request_id=request_id,
    )
    return result


def extract_note_sections(
    *, content_text: str, soap_format: str | None = None, request_id: str | None = None
) -> tuple[SoapFormat, SoapSections]:
    _ensure_within_limit(length=len(content_text))

    resolved = resolve_source_format(soap_format, content_text=content_text)
    sections = extract_sections(content_text, resolved)
    _log_parse(
        event="SOAP sections extracted",
        soap_format=resolved,
        sections=sections,
        is_valid=resolved != UNKNOWN and count_sections(sections) == 4,
        request_id=request_id,
    )
    return resolved, sections


def render_sections(*, sections: SoapSections, soap_format: SoapFormat) -> str:
    if soap_format == TAGGED:
        return to_tagged_format(sections)
    return to_traditional_format(sections)


def normalize_note(
    *,
    content_text: str,
    target_format: str | None = None,
    require_valid: bool = False,
    request_id: str | None = None,
) -> tuple[SoapValidationResult, SoapFormat, str]:
    """
    Re-render a raw note in a canonical format.

    Unrecognized notes cannot be normalized (BusinessValidationError). When
    `require_valid` is set, recognized but incomplete notes raise IncompleteSoapNoteError.
    """

    resolved = resolve_output_format(target_format)
    result = validate_note(content_text=content_text, request_id=request_id)

    if result.format == UNKNOWN:
        raise BusinessValidationError(UNRECOGNIZED_FORMAT_ERROR)
    if require_valid and not result.is_valid:
        raise IncompleteSoapNoteError(result.errors)

    return result, resolved, render_sections(sections=result.sections, soap_format=resolved)


def render_note(
    *, fields: dict[str, str | None], target_format: str | None = None
) -> tuple[SoapFormat, str]:
    """Build a note from discrete section fields and render it in the target format."""

    # Form fields are note text too: the combined length is held to the same limit.
    _ensure_within_limit(length=sum(len(value) for value in fields.values() if value))

    resolved = resolve_output_format(target_format)
    structured = build_structured_note(**fields)
    return resolved, render_sections(sections=structured, soap_format=resolved)
