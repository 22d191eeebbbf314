"""Telegram Bot API notification adapter.

Uses the Bot API for delivery so release notes can be routed to a bot chat.
"""

from __future__ import annotations

from adapters.http_json import post_json


class TelegramBotNotifier:
    """Notifier adapter that sends messages via the Telegram Bot API."""

    def __init__(self, bot_token: str, chat_id: str, timeout: float = 10.0) -> None:
        self._bot_token = bot_token
        self._chat_id = chat_id
        self._timeout = timeout

    def _endpoint(self) -> str:
        # The Bot API endpoint is deterministic and derived from the token.
        return f"https://api.telegram.org/bot{self._bot_token}/sendMessage"

    def send(self, message: str) -> None:
        """Send the message as plain text via the Bot API."""

        payload = {
            "chat_id": self._chat_id,
            "text": message,
            "disable_web_page_preview": True,
        }
        post_json(self._endpoint(), payload, timeout=self._timeout, label="Bot API")
