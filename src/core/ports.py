"""Ports (interfaces) used by the core pipeline.

Ports define the minimal contracts for fetching, dedup storage and
notification adapters so that the core can be reused with different backends.
"""

from __future__ import annotations

from typing import Protocol

from core.models import DedupRecord


class FetcherPort(Protocol):
    """Retrieves the raw feed document."""

    def fetch(self, url: str) -> bytes:
        ...


class DedupStorePort(Protocol):
    """Durable record of announced entries.

    Both methods raise StoreUnavailable when the store cannot answer.
    """

    def exists(self, key: str) -> bool:
        ...

    def put(self, key: str, record: DedupRecord) -> bool:
        """Create the record if absent; return False if it already existed."""
        ...


class NotifierPort(Protocol):
    """Outbound notification channel; raises NotifySendError on failure."""

    def send(self, message: str) -> None:
        ...
