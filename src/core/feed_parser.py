"""Feed decoding (core domain).

feedparser does the structural work; this module maps its loose dicts onto
the core models and decides which decoding problems are fatal.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping

import feedparser

from core.errors import ParseError
from core.models import Feed, FeedEntry

LOGGER = logging.getLogger(__name__)


def _text(entry: Mapping[str, Any], key: str) -> str:
    value = entry.get(key)
    if isinstance(value, str):
        return value.strip()
    return ""


def _content(entry: Mapping[str, Any]) -> tuple[str, str]:
    """Return (body, type), preferring <content> over <summary>."""

    contents = entry.get("content")
    if isinstance(contents, list) and contents:
        first = contents[0]
        if isinstance(first, Mapping):
            return first.get("value") or "", first.get("type") or ""

    summary = entry.get("summary")
    if isinstance(summary, str):
        detail = entry.get("summary_detail") or {}
        return summary, detail.get("type") or ""
    return "", ""


def parse_entry(entry: Mapping[str, Any]) -> FeedEntry:
    """Map a raw feedparser entry to a FeedEntry."""

    identity = _text(entry, "id") or _text(entry, "guid")
    if not identity:
        raise ParseError(f"Feed entry {_text(entry, 'title')!r} has no id")

    body, content_type = _content(entry)
    return FeedEntry(
        identity=identity,
        title=_text(entry, "title"),
        published_at=_text(entry, "updated") or _text(entry, "published"),
        content_body=body,
        content_type=content_type,
        link=_text(entry, "link"),
    )


def parse_feed(raw: bytes) -> Feed:
    """Decode a raw Atom/RSS document into a Feed, keeping upstream order.

    Raises ParseError when the document is malformed and nothing could be
    recovered from it. A well-formed feed without entries is returned as-is;
    callers use Feed.latest() which raises EmptyFeedError.
    """

    try:
        parsed = feedparser.parse(raw)
    except Exception as exc:  # pragma: no cover - feedparser reports via bozo
        raise ParseError(f"Failed to decode feed ({exc})") from exc

    entries = list(getattr(parsed, "entries", None) or [])
    if getattr(parsed, "bozo", 0):
        exc = getattr(parsed, "bozo_exception", None)
        if not entries:
            msg = "Invalid feed document"
            if exc:
                msg += f" ({exc})"
            raise ParseError(msg)
        LOGGER.warning("Feed decoded with recoverable problems: %s", exc)

    meta = parsed.get("feed", {}) or {}
    return Feed(
        feed_id=_text(meta, "id"),
        title=_text(meta, "title"),
        link=_text(meta, "link"),
        author=_text(meta, "author"),
        updated=_text(meta, "updated"),
        entries=tuple(parse_entry(entry) for entry in entries),
    )
