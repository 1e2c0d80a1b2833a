from __future__ import annotations

from fastapi import APIRouter, Request, status

from app.api.schemas import ErrorOut, IncompleteNoteErrorOut
from app.notes.schemas import (
    SoapExtractIn,
    SoapExtractOut,
    SoapNormalizeIn,
    SoapNormalizeOut,
    SoapNoteIn,
    SoapRenderIn,
    SoapRenderOut,
    SoapSectionsOut,
    SoapValidationOut,
)
from app.notes.service import (
    extract_note_sections,
    normalize_note,
    render_note,
    validate_note,
)
from app.notes.soap_parser import (
    count_sections,
    missing_sections,
    summarize_validation,
)

router = APIRouter(prefix="/notes", tags=["soap-notes"])

_BAD_REQUEST = {status.HTTP_400_BAD_REQUEST: {"model": ErrorOut}}


def _request_id(request: Request) -> str | None:
    # Set by HttpLoggingMiddleware; absent when the router is mounted without it.
    return getattr(request.state, "request_id", None)


@router.post(
    "/validate",
    response_model=SoapValidationOut,
    responses=_BAD_REQUEST,
    summary="Validate a SOAP note",
    description=(
        "Detect the note dialect, extract the four sections and report whether the note is "
        "structurally complete.\n\n"
        "Invalid notes are a normal result (200 with `is_valid=false` and itemized `errors`). "
        "Unrecognized text yields the single error `Unrecognized SOAP note format`."
    ),
)
async def validate(payload: SoapNoteIn, request: Request) -> SoapValidationOut:
    result = validate_note(content_text=payload.content_text, request_id=_request_id(request))
    return SoapValidationOut.from_result(
        result,
        section_count=count_sections(result.sections),
        missing_sections=missing_sections(result.sections),
        summary=summarize_validation(result),
    )


@router.post(
    "/sections",
    response_model=SoapExtractOut,
    responses=_BAD_REQUEST,
    summary="Extract SOAP sections",
)
async def sections(payload: SoapExtractIn, request: Request) -> SoapExtractOut:
    soap_format, extracted = extract_note_sections(
        content_text=payload.content_text,
        soap_format=payload.format,
        request_id=_request_id(request),
    )
    return SoapExtractOut(format=soap_format, sections=SoapSectionsOut.from_sections(extracted))


@router.post(
    "/render",
    response_model=SoapRenderOut,
    responses=_BAD_REQUEST,
    summary="Render discrete sections as a note",
    description="Build a note from form fields (omitted fields are empty) in the requested format.",
)
async def render(payload: SoapRenderIn) -> SoapRenderOut:
    soap_format, content_text = render_note(
        fields=payload.sections.model_dump(), target_format=payload.format
    )
    return SoapRenderOut(format=soap_format, content_text=content_text)


@router.post(
    "/normalize",
    response_model=SoapNormalizeOut,
    responses={
        **_BAD_REQUEST,
        422: {"model": IncompleteNoteErrorOut},
    },
    summary="Convert a SOAP note to a canonical format",
    description=(
        "Parse a raw note and re-render it as `traditional-prefixed` (`S:`/`O:`/`A:`/`P:`) or "
        "`tagged` (`<SUBJECTIVE>...</SUBJECTIVE>`).\n\n"
        "Unrecognized notes are rejected with 400. With `require_valid=true`, incomplete "
        "notes are rejected with 422 and the itemized `errors`."
    ),
)
async def normalize(payload: SoapNormalizeIn, request: Request) -> SoapNormalizeOut:
    result, soap_format, content_text = normalize_note(
        content_text=payload.content_text,
        target_format=payload.format,
        require_valid=payload.require_valid,
        request_id=_request_id(request),
    )
    return SoapNormalizeOut(
        format=soap_format,
        content_text=content_text,
        source_format=result.format,
        is_valid=result.is_valid,
        errors=list(result.errors),
    )
