from __future__ import annotations

import contextlib
import http.client
import io
import json
import logging
import urllib.error

import pytest

from adapters import http_json
from adapters.log_notifier import LogNotifier
from adapters.slack_notifier import SlackWebhookNotifier
from adapters.telegram_bot_notifier import TelegramBotNotifier
from core.errors import NotifySendError


class FakeUrlopen:
    def __init__(self, error: "Exception | None" = None) -> None:
        self.requests = []
        self.error = error

    def __call__(self, request, timeout=None):
        self.requests.append((request, timeout))
        if self.error:
            raise self.error
        return contextlib.nullcontext()


def test_slack_posts_text_payload(monkeypatch) -> None:
    fake = FakeUrlopen()
    monkeypatch.setattr(http_json.urllib.request, "urlopen", fake)

    SlackWebhookNotifier("https://hooks.slack.test/T/B/X", timeout=3).send("Cloud Run has 1 new fix")

    request, timeout = fake.requests[0]
    assert request.full_url == "https://hooks.slack.test/T/B/X"
    assert request.get_method() == "POST"
    assert json.loads(request.data) == {"text": "Cloud Run has 1 new fix"}
    assert timeout == 3


def test_bot_posts_to_send_message(monkeypatch) -> None:
    fake = FakeUrlopen()
    monkeypatch.setattr(http_json.urllib.request, "urlopen", fake)

    TelegramBotNotifier(bot_token="123:abc", chat_id="42").send("Cloud Run has 2 new features")

    request, _ = fake.requests[0]
    assert request.full_url == "https://api.telegram.org/bot123:abc/sendMessage"
    payload = json.loads(request.data)
    assert payload["chat_id"] == "42"
    assert payload["text"] == "Cloud Run has 2 new features"


def test_http_error_becomes_send_error(monkeypatch) -> None:
    error = urllib.error.HTTPError(
        "https://hooks.slack.test", 500, "Server Error", hdrs=None, fp=io.BytesIO(b"invalid_payload")
    )
    monkeypatch.setattr(http_json.urllib.request, "urlopen", FakeUrlopen(error))

    with pytest.raises(NotifySendError, match="500: invalid_payload"):
        SlackWebhookNotifier("https://hooks.slack.test").send("hello")


def test_unreachable_endpoint_becomes_send_error(monkeypatch) -> None:
    monkeypatch.setattr(http_json.urllib.request, "urlopen", FakeUrlopen(urllib.error.URLError("down")))

    with pytest.raises(NotifySendError, match="unreachable"):
        TelegramBotNotifier(bot_token="t", chat_id="1").send("hello")


def test_log_notifier_only_logs(caplog) -> None:
    with caplog.at_level(logging.INFO, logger="adapters.log_notifier"):
        LogNotifier().send("Cloud Run has 1 new change")

    assert "Cloud Run has 1 new change" in caplog.text


def test_scheme_less_url_becomes_send_error() -> None:
    with pytest.raises(NotifySendError, match="invalid endpoint"):
        SlackWebhookNotifier("hooks.slack.test/services/X").send("hello")


def test_malformed_response_becomes_send_error(monkeypatch) -> None:
    monkeypatch.setattr(
        http_json.urllib.request, "urlopen", FakeUrlopen(http.client.BadStatusLine("garbage"))
    )

    with pytest.raises(NotifySendError):
        SlackWebhookNotifier("https://hooks.slack.test").send("hello")
