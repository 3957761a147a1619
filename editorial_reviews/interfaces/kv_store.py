"""Abstract base class for persisted key-value stores.

The paginated index cache keeps its crawl state in a single named slot
that must survive between invocations.  Injecting the store behind this
contract keeps the cache unit-testable with an in-memory backend and lets
deployments persist it in SQLite or anything else with byte values.
"""

from __future__ import annotations

from abc import ABC, abstractmethod


class IKeyValueStore(ABC):
    """Contract for byte-valued key-value storage."""

    @abstractmethod
    async def get(self, key: str) -> bytes | None:
        """Return the bytes stored under *key*, or ``None`` if unset.

        Parameters
        ----------
        key:
            The slot name.
        """

    @abstractmethod
    async def set(self, key: str, value: bytes) -> None:
        """Store *value* under *key*, replacing any previous value.

        Parameters
        ----------
        key:
            The slot name.
        value:
            Serialized payload.

        Raises
        ------
        editorial_reviews.utils.errors.TransportError
            If the backend cannot persist the value.
        """

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return a short identifier for this backend (e.g. ``"sqlite"``)."""
