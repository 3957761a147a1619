"""Invocation boundary: dispatch review lookups to adapters by name.

The host (CLI, HTTP API or an embedding orchestrator) talks to the
:class:`ReviewService` in serialized form: a JSON input envelope
``{"title": ..., "artist": ..., "year": ...}`` in, a JSON output envelope
``{"reviews": [...]}`` out.  Two failures reach the caller:

* :class:`InvalidRequestError` -- the input envelope does not validate;
* :class:`ConfigurationError` -- the named source is not registered.

Everything that goes wrong during a lookup has already been collapsed to
an empty envelope by the adapter.
"""

from __future__ import annotations

from collections.abc import Mapping

from pydantic import ValidationError

from editorial_reviews.interfaces.review_source import IReviewSource
from editorial_reviews.models.review import AlbumReviewInput, EditorialResult
from editorial_reviews.utils.errors import ConfigurationError, InvalidRequestError
from editorial_reviews.utils.logging import get_logger


class ReviewService:
    """Registry of review sources keyed by provider name."""

    def __init__(self, sources: Mapping[str, IReviewSource] | list[IReviewSource]) -> None:
        if isinstance(sources, Mapping):
            self._sources = dict(sources)
        else:
            self._sources = {source.get_provider_name(): source for source in sources}
        self._logger = get_logger(__name__)

    def list_sources(self) -> list[str]:
        return list(self._sources)

    def get_source(self, name: str) -> IReviewSource:
        """Return the adapter registered as *name*.

        Raises:
            ConfigurationError: If no such source is registered.
        """
        try:
            return self._sources[name]
        except KeyError:
            raise ConfigurationError(
                message=f"Unknown review source '{name}'",
                provider_name=name,
            ) from None

    async def health_check(self, source: str) -> str:
        return await self.get_source(source).health_check()

    async def get_album_reviews(self, source: str, payload_json: str | bytes) -> str:
        """Resolve one serialized input envelope against *source*.

        Args:
            source: Registered source name.
            payload_json: ``{"title": str, "artist": str, "year"?: int}`` as JSON.

        Returns:
            The output envelope as JSON; absent fields are omitted.

        Raises:
            ConfigurationError: Unknown *source*.
            InvalidRequestError: *payload_json* is not a valid input envelope.
        """
        adapter = self.get_source(source)
        request = parse_request(payload_json)
        result = await adapter.get_album_reviews(request)
        return result.model_dump_json(exclude_none=True)

    async def lookup(self, source: str, request: AlbumReviewInput) -> EditorialResult:
        return await self.get_source(source).get_album_reviews(request)

    async def lookup_all(
        self,
        request: AlbumReviewInput,
        sources: list[str] | None = None,
    ) -> EditorialResult:
        """Query each source in turn and concatenate the envelopes.

        Sources run one after another; each contributes zero or one review.
        """
        names = sources if sources is not None else self.list_sources()
        adapters = [self.get_source(name) for name in names]

        combined = EditorialResult()
        for adapter in adapters:
            result = await adapter.get_album_reviews(request)
            combined.reviews.extend(result.reviews)

        self._logger.info(
            "lookup_all_complete",
            artist=request.artist,
            title=request.title,
            sources=len(adapters),
            reviews=len(combined.reviews),
        )
        return combined


def parse_request(payload_json: str | bytes) -> AlbumReviewInput:
    """Validate a JSON input envelope.

    Raises:
        InvalidRequestError: On invalid JSON or missing/mistyped fields.
    """
    try:
        return AlbumReviewInput.model_validate_json(payload_json)
    except ValidationError as exc:
        raise InvalidRequestError(
            message=f"Invalid review request: {exc.error_count()} validation errors"
        ) from exc
