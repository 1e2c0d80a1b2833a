from __future__ import annotations

from pydantic import BaseModel, Field


class HealthOut(BaseModel):
    """Health check response."""

    status: str = Field(
        description="Service status indicator. `ok` means the API process is up and responding.",
        examples=["ok"],
    )


class ErrorOut(BaseModel):
    """Error payload returned for rejected requests."""

    detail: str = Field(description="Human-readable reason for the rejection.")


class IncompleteNoteErrorOut(ErrorOut):
    errors: list[str] = Field(
        description="Itemized section problems, in Subjective/Objective/Assessment/Plan order.",
        examples=[["Objective section is missing or empty"]],
    )
