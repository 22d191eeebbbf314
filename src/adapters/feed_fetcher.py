"""HTTP feed fetching adapter.

Implements the core FetcherPort with httpx. There is no retry here: a failed
fetch aborts the invocation and the external scheduler simply runs again.
"""

from __future__ import annotations

import logging
from typing import Optional

import httpx

from core.config import FeedConfig
from core.errors import FetchError

LOGGER = logging.getLogger(__name__)


class HttpFeedFetcher:
    """Fetches the feed document with a bounded timeout."""

    def __init__(self, config: FeedConfig, client: Optional[httpx.Client] = None) -> None:
        self._config = config
        self._client = client

    def _build_client(self) -> httpx.Client:
        return httpx.Client(
            timeout=self._config.timeout_seconds,
            headers={"User-Agent": self._config.user_agent},
            follow_redirects=True,
        )

    def fetch(self, url: str) -> bytes:
        """Return the raw response body; raises FetchError on any failure."""

        LOGGER.debug("Fetching feed %s", url)
        try:
            if self._client is not None:
                resp = self._client.get(url)
            else:
                with self._build_client() as client:
                    resp = client.get(url)
            resp.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise FetchError(f"Feed {url} returned HTTP {exc.response.status_code}") from exc
        except httpx.HTTPError as exc:
            raise FetchError(f"Unable to fetch feed {url}: {type(exc).__name__}: {exc}") from exc

        if not resp.content:
            raise FetchError(f"Feed {url} returned an empty body")
        return resp.content
