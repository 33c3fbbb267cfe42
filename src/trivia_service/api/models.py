"""
API-specific request and response models for FastAPI endpoints.

These models wrap the core domain models (GenerationOutcome, RankedKeyword,
DailyCount) with the JSON field names the browser client expects.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from trivia_service.models.output_models import DailyCount, RankedKeyword


class TriviaRequest(BaseModel):
    """
    Request body for POST /api/trivia.

    The keyword is deliberately unconstrained here: trimming and the
    length rule are applied by GenerationRequest.from_raw so that the
    caller gets the Japanese validation messages.
    """

    keyword: Optional[str] = Field(
        default="",
        description="Seed word or phrase",
        examples=["カレー"],
    )


class TriviaResponse(BaseModel):
    """Successful trivia generation."""

    model_config = ConfigDict(populate_by_name=True)

    trivia: str = Field(description="Generated trivia sentence")
    keyword: str = Field(description="Keyword as used for generation (trimmed)")
    mode: str = Field(description="Trivia mode", examples=["kitakyushu"])
    model: str = Field(
        description="Model configuration that produced the answer, or 'fallback'",
        examples=["gemini-2.0-flash", "fallback"],
    )
    retries: int = Field(description="Correction turns used across all models", ge=0)
    fallback: bool = Field(description="True when the answer is a best-effort fallback")
    created_at: str = Field(
        alias="createdAt",
        description="Generation timestamp (ISO-8601, UTC)",
    )


class LoginRequest(BaseModel):
    """Request body for POST /api/admin/login."""

    password: str = Field(description="Admin password")


class LoginResponse(BaseModel):
    """Response for admin login and logout."""

    success: bool


class StatsResponse(BaseModel):
    """Response for GET /api/admin/stats."""

    model_config = ConfigDict(populate_by_name=True)

    ranking: list[RankedKeyword] = Field(description="Top keywords, highest count first")
    trend: list[DailyCount] = Field(description="Daily totals, oldest first")
    genres: list[str] = Field(description="All genre labels in display order")
    period: str = Field(examples=["all", "7days", "today"])
    current_genre: Optional[str] = Field(
        default=None,
        alias="currentGenre",
        description="Genre filter applied to the ranking, if any",
    )


class HealthResponse(BaseModel):
    """Response for health check endpoint."""

    status: str = Field(
        description="Overall health status",
        examples=["healthy", "degraded", "unhealthy"]
    )
    version: str = Field(
        description="Service version",
        examples=["0.1.0"]
    )
    services: dict[str, str] = Field(
        description="Service-specific health status",
        examples=[{"gemini": "ok", "redis": "ok", "config": "ok"}]
    )
    timestamp: datetime = Field(
        description="Health check timestamp (UTC)"
    )


class ErrorDetail(BaseModel):
    """Error payload inside the envelope."""

    code: str = Field(
        description="Machine-readable error code",
        examples=["validation_error", "rate_limited", "config_error", "generation_failed"]
    )
    message: str = Field(description="Human-readable (Japanese) error message")
    details: Optional[str] = Field(default=None, description="Additional error details")


class ErrorResponse(BaseModel):
    """Standard error response format: {"error": {...}}."""

    error: ErrorDetail
