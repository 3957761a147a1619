"""Pydantic request/response schemas for the editorial_reviews API.

The review lookup itself reuses the domain envelopes
(:class:`~editorial_reviews.models.review.AlbumReviewInput` in,
:class:`~editorial_reviews.models.review.EditorialResult` out); this
module holds only the API-specific shapes.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class SourcesResponse(BaseModel):
    """Registered review source names."""

    sources: list[str] = Field(default_factory=list)


class HealthResponse(BaseModel):
    """Liveness of one review source."""

    source: str
    status: str


class ErrorResponse(BaseModel):
    """Standard error body returned by the error-handling middleware."""

    error: str
    detail: str
