"""FastAPI API routes for editorial review lookup.

Endpoint                                  Method  Description
----------------------------------------  ------  -------------------------------
/api/v1/sources                           GET     List registered review sources
/api/v1/sources/{source}/health           GET     Liveness check, always "ok"
/api/v1/sources/{source}/reviews          POST    Resolve one album on one source

The :class:`ReviewService` is read from ``app.state`` via ``Depends``.
The reviews endpoint takes the raw JSON body so that envelope validation
goes through the same path as every other host and fails with
``InvalidRequestError``.
"""

from __future__ import annotations

from typing import Annotated

import structlog
from fastapi import APIRouter, Depends, Request, Response

from editorial_reviews.api.schemas import HealthResponse, SourcesResponse
from editorial_reviews.services.review_service import ReviewService
from editorial_reviews.utils.logging import get_logger

_logger: structlog.BoundLogger = get_logger(__name__)

router = APIRouter(prefix="/api/v1")


def _get_review_service(request: Request) -> ReviewService:
    return request.app.state.review_service


ServiceDep = Annotated[ReviewService, Depends(_get_review_service)]


@router.get("/sources", response_model=SourcesResponse)
async def list_sources(service: ServiceDep) -> SourcesResponse:
    return SourcesResponse(sources=service.list_sources())


@router.get("/sources/{source}/health", response_model=HealthResponse)
async def source_health(source: str, service: ServiceDep) -> HealthResponse:
    status = await service.health_check(source)
    return HealthResponse(source=source, status=status)


@router.post("/sources/{source}/reviews")
async def source_reviews(source: str, request: Request, service: ServiceDep) -> Response:
    """Resolve the JSON input envelope in the body against *source*."""
    payload = await request.body()
    envelope = await service.get_album_reviews(source, payload)
    _logger.debug("reviews_served", source=source, size=len(envelope))
    return Response(content=envelope, media_type="application/json")
