"""Slack incoming-webhook notification adapter."""

from __future__ import annotations

from adapters.http_json import post_json


class SlackWebhookNotifier:
    """Notifier adapter that posts messages to a Slack incoming webhook."""

    def __init__(self, webhook_url: str, timeout: float = 10.0) -> None:
        self._webhook_url = webhook_url
        self._timeout = timeout

    def send(self, message: str) -> None:
        post_json(self._webhook_url, {"text": message}, timeout=self._timeout, label="Slack webhook")
