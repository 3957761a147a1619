"""Custom exception hierarchy for editorial_reviews.

All application exceptions inherit from :class:`ReviewLookupError`, which
carries an optional ``provider_name`` so log lines and error handlers can
identify which review site (e.g. "allmusic", "pitchfork") caused the failure.

The hierarchy follows the lifecycle of one resolution:

    ReviewLookupError  (base -- catch-all for any lookup failure)
    +-- NotFoundError           (search / matching produced no candidate)
    +-- UnverifiableError       (structured data names a different artist)
    +-- NoExtractableDataError  (page fetched, no rating and no excerpt)
    +-- TransportError          (fetch error or non-200 response)
    +-- MalformedDataError      (JSON / schema mismatch)
    +-- ConfigurationError      (unknown source, bad settings)
    +-- InvalidRequestError     (malformed invocation envelope)

Inside a site adapter every one of these collapses to "no review for this
source".  Only ``ConfigurationError`` and ``InvalidRequestError`` are
allowed to reach the caller of an operation.
"""


class ReviewLookupError(Exception):
    """Base exception for all editorial_reviews errors.

    Every subclass carries a human-readable ``message`` and an optional
    ``provider_name`` identifying which review site triggered the error.
    ``__str__`` prefixes the provider name in brackets, e.g.
    ``[allmusic] HTTP 503 for https://...``.
    """

    def __init__(
        self,
        message: str = "Review lookup failed",
        provider_name: str | None = None,
    ) -> None:
        self._message = message
        self._provider_name = provider_name
        super().__init__(self._message)

    @property
    def message(self) -> str:
        return self._message

    @property
    def provider_name(self) -> str | None:
        return self._provider_name

    def __str__(self) -> str:
        if self._provider_name:
            return f"[{self._provider_name}] {self._message}"
        return self._message


# ---------------------------------------------------------------------------
# Resolution errors -- collapsed to "no review" by the adapters
# ---------------------------------------------------------------------------

class NotFoundError(ReviewLookupError):
    """Raised when search or matching yields no candidate page."""

    def __init__(
        self,
        message: str = "No matching review found",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class UnverifiableError(ReviewLookupError):
    """Raised when the page's structured data names a different artist.

    This is a full rejection of the page, even when it came from an
    unverified search pass.
    """

    def __init__(
        self,
        message: str = "Structured data does not match the requested artist",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class NoExtractableDataError(ReviewLookupError):
    """Raised when a fetched page yields neither a rating nor an excerpt."""

    def __init__(
        self,
        message: str = "No rating or excerpt could be extracted",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class TransportError(ReviewLookupError):
    """Raised on a fetch error or any non-200 HTTP status."""

    def __init__(
        self,
        message: str = "HTTP request failed",
        provider_name: str | None = None,
        status_code: int | None = None,
    ) -> None:
        self._status_code = status_code
        super().__init__(message=message, provider_name=provider_name)

    @property
    def status_code(self) -> int | None:
        return self._status_code


class MalformedDataError(ReviewLookupError):
    """Raised when a JSON body or JSON-LD block does not fit the expected schema."""

    def __init__(
        self,
        message: str = "Malformed structured data",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


# ---------------------------------------------------------------------------
# Operation-level errors -- surfaced to the caller
# ---------------------------------------------------------------------------

class ConfigurationError(ReviewLookupError):
    """Raised when configuration is invalid or a requested source is unknown."""

    def __init__(
        self,
        message: str = "Invalid or missing configuration",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class InvalidRequestError(ReviewLookupError):
    """Raised when an invocation envelope cannot be parsed."""

    def __init__(
        self,
        message: str = "Invalid request envelope",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)
