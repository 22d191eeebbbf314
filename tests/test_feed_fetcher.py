from __future__ import annotations

import httpx
import pytest

from adapters.feed_fetcher import HttpFeedFetcher
from core.config import FeedConfig
from core.errors import FetchError

URL = "https://example.test/feed.xml"


def _fetcher(handler) -> HttpFeedFetcher:
    client = httpx.Client(transport=httpx.MockTransport(handler))
    return HttpFeedFetcher(FeedConfig(url=URL), client=client)


def test_returns_raw_body() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert str(request.url) == URL
        return httpx.Response(200, content=b"<feed/>")

    assert _fetcher(handler).fetch(URL) == b"<feed/>"


def test_http_error_status_is_fetch_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(503, content=b"unavailable")

    with pytest.raises(FetchError, match="503"):
        _fetcher(handler).fetch(URL)


def test_transport_error_is_fetch_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(FetchError, match="ConnectError"):
        _fetcher(handler).fetch(URL)


def test_empty_body_is_fetch_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, content=b"")

    with pytest.raises(FetchError):
        _fetcher(handler).fetch(URL)
