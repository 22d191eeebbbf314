"""Core domain models.

These dataclasses are shared across the core and adapters to avoid tight
coupling to feedparser, SQLite or any notifier-specific types.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Tuple

from core.errors import EmptyFeedError


@dataclass(frozen=True)
class FeedEntry:
    """One release note as published upstream."""

    identity: str
    title: str
    published_at: str
    content_body: str
    content_type: str
    link: str = ""


@dataclass(frozen=True)
class Feed:
    """Decoded feed; entries keep the upstream order (newest first)."""

    feed_id: str
    title: str
    link: str
    author: str
    updated: str
    entries: Tuple[FeedEntry, ...] = field(default_factory=tuple)

    def latest(self) -> FeedEntry:
        """Return the most recently published entry."""

        if not self.entries:
            raise EmptyFeedError(f"Feed {self.feed_id or '<unknown>'} has no entries")
        return self.entries[0]


@dataclass(frozen=True)
class DedupRecord:
    """Persisted copy of an announced entry, written once and never updated."""

    key: str
    kind: str
    entry_key: str
    identity: str
    title: str
    published_at: str
    link: str
    content_type: str
    content_body: str
    recorded_at: str

    @classmethod
    def from_entry(
        cls,
        entry: FeedEntry,
        *,
        key: str,
        kind: str,
        entry_key: str,
        recorded_at: str,
    ) -> "DedupRecord":
        return cls(
            key=key,
            kind=kind,
            entry_key=entry_key,
            identity=entry.identity,
            title=entry.title,
            published_at=entry.published_at,
            link=entry.link,
            content_type=entry.content_type,
            content_body=entry.content_body,
            recorded_at=recorded_at,
        )
