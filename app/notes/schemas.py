from __future__ import annotations

from pydantic import BaseModel, Field

from app.notes.soap_parser import SoapFormat, SoapSections, SoapValidationResult


class SoapSectionsOut(BaseModel):
    """The four SOAP sections. An empty string means the section was not found."""

    subjective: str = Field(default="", description="Subjective (S): history, symptoms.")
    objective: str = Field(default="", description="Objective (O): vitals, exam, results.")
    assessment: str = Field(default="", description="Assessment (A): impression, diagnoses.")
    plan: str = Field(default="", description="Plan (P): orders, treatment, follow-up.")

    @classmethod
    def from_sections(cls, sections: SoapSections) -> SoapSectionsOut:
        return cls(**sections.as_dict())


class SoapSectionsIn(BaseModel):
    """Discrete section fields as entered in a form. Omitted fields are treated as empty."""

    subjective: str | None = Field(default=None, examples=["cough 3 days"])
    objective: str | None = Field(default=None, examples=["T 38.2"])
    assessment: str | None = Field(default=None, examples=["URI"])
    plan: str | None = Field(default=None, examples=["rest, fluids"])


class SoapNoteIn(BaseModel):
    content_text: str = Field(
        description=(
            "Raw note text as submitted. May be empty; empty or unrecognized notes are "
            "reported as invalid rather than rejected."
        ),
        examples=["S: chest pain\nO: BP 120/80\nA: angina\nP: ECG"],
    )


class SoapExtractIn(SoapNoteIn):
    format: str | None = Field(
        default=None,
        description=(
            "Optional dialect to extract with (`traditional-prefixed`, `tagged`, `unknown`). "
            "Detected from the text when omitted."
        ),
        examples=["traditional-prefixed"],
    )


class SoapRenderIn(BaseModel):
    sections: SoapSectionsIn
    format: str | None = Field(
        default=None,
        description="Target format: `traditional-prefixed` or `tagged`. Defaults to configuration.",
        examples=["tagged"],
    )


class SoapNormalizeIn(SoapNoteIn):
    format: str | None = Field(
        default=None,
        description="Target format: `traditional-prefixed` or `tagged`. Defaults to configuration.",
        examples=["tagged"],
    )
    require_valid: bool = Field(
        default=False,
        description="When true, incomplete notes are rejected with 422 and itemized errors.",
    )


class SoapValidationOut(BaseModel):
    is_valid: bool = Field(
        description="True when the format is recognized and all four sections are non-empty."
    )
    format: SoapFormat = Field(description="Detected dialect.", examples=["traditional-prefixed"])
    errors: list[str] = Field(
        description="Itemized problems in canonical section order; empty when valid.",
        examples=[["Objective section is missing or empty"]],
    )
    sections: SoapSectionsOut
    section_count: int = Field(ge=0, le=4, description="Number of non-empty sections.")
    missing_sections: list[str] = Field(
        description="Titles of empty sections, in canonical order.", examples=[["Objective"]]
    )
    summary: str = Field(
        description="One-line validation summary.",
        examples=["invalid SOAP note (traditional-prefixed, 3/4 sections; missing: Objective)"],
    )

    @classmethod
    def from_result(
        cls,
        result: SoapValidationResult,
        *,
        section_count: int,
        missing_sections: list[str],
        summary: str,
    ) -> SoapValidationOut:
        return cls(
            is_valid=result.is_valid,
            format=result.format,
            errors=list(result.errors),
            sections=SoapSectionsOut.from_sections(result.sections),
            section_count=section_count,
            missing_sections=missing_sections,
            summary=summary,
        )


class SoapExtractOut(BaseModel):
    format: SoapFormat = Field(description="Dialect used for extraction.")
    sections: SoapSectionsOut


class SoapRenderOut(BaseModel):
    format: SoapFormat = Field(description="Format of `content_text`.")
    content_text: str = Field(description="Rendered note text.")


class SoapNormalizeOut(SoapRenderOut):
    source_format: SoapFormat = Field(description="Dialect detected in the submitted note.")
    is_valid: bool
    errors: list[str] = Field(description="Itemized problems of the submitted note.")
