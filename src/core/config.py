"""Core configuration dataclasses.

We keep config parsing outside the core, but these dataclasses define the
shape the core expects so the app layer can build them once and pass them in.
"""

from __future__ import annotations

from dataclasses import dataclass

DEFAULT_FEED_URL = "https://cloud.google.com/feeds/run-release-notes.xml"
DEFAULT_PRODUCT_NAME = "Cloud Run"
DEFAULT_RECORD_KIND = "CloudRunReleaseNote"
DEFAULT_USER_AGENT = "release-watch/0.1 (+https://cloud.google.com/run/docs/release-notes)"


@dataclass(frozen=True)
class FeedConfig:
    """Upstream feed settings consumed by the fetcher and the pipeline."""

    url: str = DEFAULT_FEED_URL
    product_name: str = DEFAULT_PRODUCT_NAME
    timeout_seconds: float = 20.0
    user_agent: str = DEFAULT_USER_AGENT


@dataclass(frozen=True)
class StoreConfig:
    """Dedup store settings; ``kind`` namespaces the record keys."""

    db_path: str
    kind: str = DEFAULT_RECORD_KIND
