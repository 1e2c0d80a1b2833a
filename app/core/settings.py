from __future__ import annotations

from functools import lru_cache

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from app.notes.soap_parser import RENDERABLE_SOAP_FORMATS, TRADITIONAL_PREFIXED


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_name: str = "soap-note-service"
    app_env: str = Field(
        default="production",
        validation_alias=AliasChoices("APP_ENV", "app_env"),
        description="Runtime environment: development|production.",
    )

    # SOAP note parsing
    # Note text is clinical content (PHI). Limits are enforced before parsing; never log it.
    max_note_chars: int = Field(
        default=200_000,
        ge=1_000,
        validation_alias=AliasChoices("MAX_NOTE_CHARS", "max_note_chars"),
        description="Maximum accepted length of a raw note (characters).",
    )
    soap_default_output_format: str = Field(
        default=TRADITIONAL_PREFIXED,
        validation_alias=AliasChoices(
            "SOAP_DEFAULT_OUTPUT_FORMAT",
            "soap_default_output_format",
        ),
        description="Format used when render/normalize requests omit one: traditional-prefixed|tagged.",
    )

    @field_validator("soap_default_output_format")
    @classmethod
    def _check_output_format(cls, value: str) -> str:
        normalized = value.strip().lower()
        if normalized not in RENDERABLE_SOAP_FORMATS:
            raise ValueError(
                "soap_default_output_format must be one of: "
                + ", ".join(RENDERABLE_SOAP_FORMATS)
            )
        return normalized

    @property
    def is_development(self) -> bool:
        return str(self.app_env).strip().lower() == "development"


@lru_cache
def get_settings() -> Settings:
    return Settings()
