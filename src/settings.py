"""Startup configuration for release-watch.

Settings are resolved once, at process start, into a frozen AppSettings that
is passed explicitly to the pipeline and adapters. Precedence, lowest first:
built-in defaults, the optional config.json, then the environment (a local
.env file is loaded through python-dotenv).
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional
from urllib.parse import urlsplit

from dotenv import load_dotenv

from core.config import (
    DEFAULT_FEED_URL,
    DEFAULT_PRODUCT_NAME,
    DEFAULT_RECORD_KIND,
    DEFAULT_USER_AGENT,
    FeedConfig,
    StoreConfig,
)

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))

# Where to store the SQLite database unless DB_PATH says otherwise.
DEFAULT_DB_PATH = os.path.join(PROJECT_ROOT, "release_watch.db")

# Optional JSON file for settings that are awkward as env vars (logging).
CONFIG_PATH = os.path.join(PROJECT_ROOT, "config.json")

NOTIFICATION_METHODS = ("slack", "bot", "log")


class ConfigError(RuntimeError):
    """Raised when required configuration is missing or invalid."""


@dataclass(frozen=True)
class NotificationSettings:
    """Selected outbound channel and its credentials."""

    method: str
    slack_url: Optional[str] = None
    bot_token: Optional[str] = None
    bot_chat_id: Optional[str] = None
    timeout_seconds: float = 10.0


@dataclass(frozen=True)
class AppSettings:
    feed: FeedConfig
    store: StoreConfig
    notification: NotificationSettings
    port: Optional[int] = None
    logging: Mapping[str, Any] = field(default_factory=dict)

    def require_port(self) -> int:
        """Return the listening port; the HTTP trigger cannot start without it."""

        if self.port is None:
            raise ConfigError("PORT not found in environment")
        return self.port


def _load_json_config(path: Optional[str]) -> dict:
    """Load the JSON config if present; an explicit missing path is an error."""

    if path is None:
        path = CONFIG_PATH
        if not os.path.exists(path):
            return {}
    elif not os.path.exists(path):
        raise ConfigError(f"Config file not found: {path}")

    try:
        with open(path, "r", encoding="utf-8") as handle:
            data = json.load(handle)
    except (OSError, ValueError) as exc:
        raise ConfigError(f"Unable to read config file {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a JSON object")
    return data


def _pick(env: Mapping[str, str], name: str, section: Mapping[str, Any], key: str, default: Any = None) -> Any:
    value = env.get(name)
    if value not in (None, ""):
        return value
    value = section.get(key)
    if value not in (None, ""):
        return value
    return default


def _as_float(name: str, value: Any) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"{name} must be a number, got {value!r}") from exc
    if number <= 0:
        raise ConfigError(f"{name} must be positive, got {value!r}")
    return number


def _as_port(value: Any) -> Optional[int]:
    if value in (None, ""):
        return None
    try:
        port = int(value)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"PORT must be an integer, got {value!r}") from exc
    if not 0 < port < 65536:
        raise ConfigError(f"PORT out of range: {port}")
    return port


def _notification_settings(env: Mapping[str, str], section: Mapping[str, Any]) -> NotificationSettings:
    method = str(_pick(env, "NOTIFICATION_METHOD", section, "method", "slack")).lower()
    if method not in NOTIFICATION_METHODS:
        raise ConfigError(f"NOTIFICATION_METHOD must be one of {', '.join(NOTIFICATION_METHODS)}, got {method!r}")

    timeout = _as_float("NOTIFY_TIMEOUT", _pick(env, "NOTIFY_TIMEOUT", section, "timeout_seconds", 10.0))
    slack_url = _pick(env, "SLACK_URL", section, "slack_url")
    bot_token = env.get("BOT_API") or None
    bot_chat_id = _pick(env, "BOT_CHAT_ID", section, "bot_chat_id")

    # Credentials are only required for the channel actually selected.
    if method == "slack":
        if not slack_url:
            raise ConfigError("SLACK_URL not found in environment")
        parts = urlsplit(str(slack_url))
        if parts.scheme not in ("http", "https") or not parts.netloc:
            # Keep the value out of the message; it is a credential.
            raise ConfigError("SLACK_URL must be an absolute http(s) URL")
    if method == "bot":
        if not bot_token:
            raise ConfigError("BOT_API is required when NOTIFICATION_METHOD=bot")
        if not bot_chat_id:
            raise ConfigError("BOT_CHAT_ID is required for bot notifications")

    return NotificationSettings(
        method=method,
        slack_url=slack_url,
        bot_token=bot_token,
        bot_chat_id=str(bot_chat_id) if bot_chat_id is not None else None,
        timeout_seconds=timeout,
    )


def load_settings(env: Optional[Mapping[str, str]] = None, config_path: Optional[str] = None) -> AppSettings:
    """Resolve settings once; raises ConfigError on missing required values."""

    if env is None:
        load_dotenv()
        env = os.environ
    if config_path is None:
        config_path = env.get("RELEASE_WATCH_CONFIG") or None

    config = _load_json_config(config_path)
    feed_section = config.get("feed", {}) or {}
    store_section = config.get("store", {}) or {}

    feed = FeedConfig(
        url=_pick(env, "FEED_URL", feed_section, "url", DEFAULT_FEED_URL),
        product_name=_pick(env, "PRODUCT_NAME", feed_section, "product_name", DEFAULT_PRODUCT_NAME),
        timeout_seconds=_as_float(
            "FETCH_TIMEOUT", _pick(env, "FETCH_TIMEOUT", feed_section, "timeout_seconds", 20.0)
        ),
        user_agent=_pick(env, "USER_AGENT", feed_section, "user_agent", DEFAULT_USER_AGENT),
    )

    db_path = _pick(env, "DB_PATH", store_section, "db_path", DEFAULT_DB_PATH)
    if not os.path.isabs(db_path):
        db_path = os.path.join(PROJECT_ROOT, db_path)
    store = StoreConfig(
        db_path=db_path,
        kind=_pick(env, "RECORD_KIND", store_section, "kind", DEFAULT_RECORD_KIND),
    )

    return AppSettings(
        feed=feed,
        store=store,
        notification=_notification_settings(env, config.get("notifications", {}) or {}),
        port=_as_port(env.get("PORT") or config.get("port")),
        logging=config.get("logging", {}) or {},
    )
