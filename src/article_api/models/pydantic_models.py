"""Pydantic models for data validation."""

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator

NAME_MAX_LENGTH = 255

ERROR_NAME_EMPTY = "name cannot be empty"
ERROR_NAME_TOO_LONG = "name is too long"

LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


class ArticleParams(BaseModel):
    """Request body for creating or updating an article.

    The name is trimmed of surrounding whitespace before it is checked,
    so the value that reaches the store is always the trimmed one.
    """

    name: str = Field(..., description="Article name, 1-255 characters after trimming")

    @field_validator("name")
    @classmethod
    def normalize_name(cls, value: str) -> str:
        """Trim the name and enforce its length bounds."""
        value = value.strip()
        if not value:
            raise ValueError(ERROR_NAME_EMPTY)
        if len(value) > NAME_MAX_LENGTH:
            raise ValueError(ERROR_NAME_TOO_LONG)
        return value


class ArticleRead(BaseModel):
    """Article as returned to API clients."""

    id: int
    name: str

    model_config = ConfigDict(from_attributes=True, frozen=True)


class Settings(BaseModel):
    """Runtime settings for the API server and migration runner."""

    host: str = Field("0.0.0.0", description="Interface the API server binds to")
    port: int = Field(8080, ge=1, le=65535, description="Port the API server listens on")
    db_path: Path = Field(Path("app.db"), description="Path to the SQLite database file")
    log_level: str = Field("INFO", description="Root logging level")

    model_config = ConfigDict(frozen=True)

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, value: str) -> str:
        """Accept log levels in any case."""
        value = value.upper()
        if value not in LOG_LEVELS:
            raise ValueError(f"unknown log level: {value}")
        return value
