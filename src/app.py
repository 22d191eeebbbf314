"""Application entry point for release-watch."""

from __future__ import annotations

import argparse
import json
import logging
import os
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from typing import Any, Mapping, Optional

from art import tprint

from adapters.feed_fetcher import HttpFeedFetcher
from adapters.log_notifier import LogNotifier
from adapters.slack_notifier import SlackWebhookNotifier
from adapters.sqlite_storage import SQLiteDedupStore
from adapters.telegram_bot_notifier import TelegramBotNotifier
from core.errors import PipelineError
from core.pipeline import ReleaseNotesPipeline
from core.ports import NotifierPort
from server import PipelineFactory, serve
from settings import PROJECT_ROOT, AppSettings, ConfigError, load_settings

NAME = "RELEASE WATCH"
FONT = "tarty-1"

# Environment variables whose values are masked in log output by default.
DEFAULT_REDACT_PATTERNS = ["SLACK_URL", "BOT_API"]

_RESERVED_RECORD_FIELDS = set(vars(logging.LogRecord("", 0, "", 0, "", None, None))) | {"message", "asctime"}


def _print_banner() -> None:
    tprint(NAME, FONT, space=1)


class JsonlFormatter(logging.Formatter):
    """One JSON object per line, including any ``extra=`` fields."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key, value in record.__dict__.items():
            if key not in _RESERVED_RECORD_FIELDS:
                payload[key] = value
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=True, default=str)


class _RedactingFormatter(logging.Formatter):
    def __init__(self, secrets: list[str], inner: logging.Formatter) -> None:
        super().__init__()
        self._secrets = [secret for secret in secrets if secret]
        self._inner = inner

    def format(self, record: logging.LogRecord) -> str:
        message = self._inner.format(record)
        for secret in self._secrets:
            message = message.replace(secret, "***")
        return message


def _collect_redaction_values(config: Mapping[str, Any]) -> list[str]:
    redact_cfg = config.get("redact", {}) if config else {}
    if not redact_cfg.get("enabled", True):
        return []
    values = []
    for name in redact_cfg.get("patterns", DEFAULT_REDACT_PATTERNS):
        value = os.getenv(name)
        if value:
            values.append(value)
    return sorted(set(values), key=len, reverse=True)


def _configure_logging(config: Mapping[str, Any]) -> None:
    config = config or {}
    if not config.get("enabled", True):
        return

    level_name = str(config.get("level", "INFO")).upper()
    level = getattr(logging, level_name, logging.INFO)

    if config.get("format", "plain") == "jsonl":
        inner: logging.Formatter = JsonlFormatter()
    else:
        inner = logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s", "%Y-%m-%d %H:%M:%S")
    formatter = _RedactingFormatter(_collect_redaction_values(config), inner)

    handlers: list[logging.Handler] = []

    if config.get("console", True):
        console_handler = logging.StreamHandler()
        console_handler.setLevel(level)
        console_handler.setFormatter(formatter)
        handlers.append(console_handler)

    file_cfg = config.get("file", {})
    if file_cfg.get("enabled", False):
        path = file_cfg.get("path", "logs/release_watch.log")
        if not os.path.isabs(path):
            path = os.path.join(PROJECT_ROOT, path)
        directory = os.path.dirname(path)
        if directory:
            os.makedirs(directory, exist_ok=True)

        max_bytes = int(file_cfg.get("max_bytes", 5 * 1024 * 1024))
        backup_count = int(file_cfg.get("backup_count", 5))
        file_handler = RotatingFileHandler(
            path,
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding="utf-8",
        )
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)

    if not handlers:
        return

    logging.basicConfig(level=level, handlers=handlers)


def build_notifier(settings: AppSettings) -> NotifierPort:
    """Select the notification adapter so the core never sees delivery details."""

    notification = settings.notification
    if notification.method == "slack":
        return SlackWebhookNotifier(notification.slack_url, timeout=notification.timeout_seconds)
    if notification.method == "bot":
        return TelegramBotNotifier(
            bot_token=notification.bot_token,
            chat_id=notification.bot_chat_id,
            timeout=notification.timeout_seconds,
        )
    if notification.method == "log":
        return LogNotifier()
    raise ConfigError(f"Unsupported notification method: {notification.method}")


def build_pipeline_factory(settings: AppSettings) -> PipelineFactory:
    """Wire adapters once; each call returns a fresh pipeline for one invocation."""

    store = SQLiteDedupStore(settings.store.db_path)
    store.init_db()
    fetcher = HttpFeedFetcher(settings.feed)
    notifier = build_notifier(settings)
    logging.getLogger(__name__).info(
        "Watching %s (notification method - %s)",
        settings.feed.url,
        settings.notification.method,
    )

    def factory() -> ReleaseNotesPipeline:
        return ReleaseNotesPipeline(
            feed_config=settings.feed,
            fetcher=fetcher,
            store=store,
            notifier=notifier,
            record_kind=settings.store.kind,
        )

    return factory


def _check(settings: AppSettings) -> int:
    """Run a single invocation and return a process exit code."""

    factory = build_pipeline_factory(settings)
    try:
        result = factory().run()
    except PipelineError:
        return 1
    logging.getLogger(__name__).info("Check finished: %s (%s)", result.state.value, result.key)
    return 0


def _serve(settings: AppSettings) -> None:
    port = settings.require_port()
    serve(port, build_pipeline_factory(settings))


def main(argv: Optional[list[str]] = None) -> None:
    parser = argparse.ArgumentParser(prog="release-watch")
    parser.add_argument("--config", help="Path to a JSON config file")
    subparsers = parser.add_subparsers(dest="command")

    subparsers.add_parser("serve", help="Run the HTTP trigger endpoint")
    subparsers.add_parser("check", help="Run one check and exit")

    args = parser.parse_args(argv)
    _print_banner()

    try:
        settings = load_settings(config_path=args.config)
        _configure_logging(settings.logging)
        if args.command == "check":
            raise SystemExit(_check(settings))
        _serve(settings)
    except ConfigError as exc:
        # Missing configuration is fatal: refuse to start.
        parser.exit(2, f"release-watch: {exc}\n")
    except PipelineError as exc:
        # Store initialization failed before any invocation could run.
        parser.exit(1, f"release-watch: {exc}\n")


if __name__ == "__main__":
    main()
