"""API response schemas."""

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """Standard error response."""

    error: str = Field(description="Error category, e.g. 'Bad Request'")
    message: str = Field(description="Human readable description of the problem")


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
