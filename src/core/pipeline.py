"""Release-notes check pipeline.

The pipeline enforces a strict order per invocation:
1) Fetch the feed document
2) Parse it and take the newest entry
3) Derive the dedup key and ask the store whether it was announced
4) For a new entry: classify, compose, send (if non-empty), then record
5) Stop on the first failed step; nothing derived from it is used

Notification happens before the record is written. A crash between the two
re-announces the entry on the next run, which is preferred over losing it.

This module is integration-agnostic. It only relies on ports for fetching,
storage and notifications.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, Optional

from core.classifier import classify, compose
from core.config import FeedConfig
from core.dedup import derive_dedup_key
from core.errors import NotifySendError, PipelineError
from core.feed_parser import parse_feed
from core.models import DedupRecord, FeedEntry
from core.ports import DedupStorePort, FetcherPort, NotifierPort

LOGGER = logging.getLogger(__name__)


class PipelineState(enum.Enum):
    FETCHING = "fetching"
    PARSING = "parsing"
    CHECKING_DEDUP = "checking_dedup"
    ALREADY_SEEN = "already_seen"
    NOTIFYING = "notifying"
    DONE = "done"
    ABORTED = "aborted"


@dataclass(frozen=True)
class CheckResult:
    """Outcome of an invocation that reached DONE."""

    state: PipelineState
    key: str
    entry: FeedEntry
    message: str = ""
    notified: bool = False
    recorded: bool = False


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


class ReleaseNotesPipeline:
    """Orchestrates fetch, parse, dedup lookup, notification and persistence."""

    def __init__(
        self,
        feed_config: FeedConfig,
        fetcher: FetcherPort,
        store: DedupStorePort,
        notifier: NotifierPort,
        record_kind: str,
        clock: Callable[[], str] = _utc_now,
    ) -> None:
        self._feed = feed_config
        self._fetcher = fetcher
        self._store = store
        self._notifier = notifier
        self._kind = record_kind
        self._clock = clock
        self.state: Optional[PipelineState] = None

    def run(self) -> CheckResult:
        """Run one invocation; re-raises whatever aborted it after logging."""

        key: Optional[str] = None
        try:
            self.state = PipelineState.FETCHING
            raw = self._fetcher.fetch(self._feed.url)

            self.state = PipelineState.PARSING
            entry = parse_feed(raw).latest()
            key, entry_key = derive_dedup_key(entry.identity, self._kind)

            self.state = PipelineState.CHECKING_DEDUP
            if self._store.exists(key):
                self.state = PipelineState.ALREADY_SEEN
                LOGGER.info("No new %s release notes since %s", self._feed.product_name, entry_key)
                result = CheckResult(state=PipelineState.ALREADY_SEEN, key=key, entry=entry)
            else:
                self.state = PipelineState.NOTIFYING
                result = self._announce(entry, key, entry_key)
        except PipelineError as exc:
            self._abort(exc, key)
            raise
        except Exception as exc:
            self._abort(exc, key, unexpected=True)
            raise

        self.state = PipelineState.DONE
        return result

    def _abort(self, exc: Exception, key: Optional[str], unexpected: bool = False) -> None:
        failed_in = self.state
        self.state = PipelineState.ABORTED
        state_name = failed_in.value if failed_in else "starting"
        LOGGER.error(
            "Invocation aborted in %s: %s: %s",
            state_name,
            type(exc).__name__,
            exc,
            exc_info=unexpected,
            extra={"state": state_name, "error": type(exc).__name__, "key": key},
        )

    def _announce(self, entry: FeedEntry, key: str, entry_key: str) -> CheckResult:
        message = compose(classify(entry.content_body), self._feed.product_name)

        notified = False
        if message:
            LOGGER.debug("Composed message for %s: %s", key, message)
            try:
                self._notifier.send(message)
                notified = True
            except NotifySendError as exc:
                # Best effort: the record is still written below.
                LOGGER.error("Unable to send notification for %s: %s", key, exc)
        else:
            LOGGER.info("Entry %s has no categorized changes; recording without notification", key)

        record = DedupRecord.from_entry(
            entry,
            key=key,
            kind=self._kind,
            entry_key=entry_key,
            recorded_at=self._clock(),
        )
        recorded = self._store.put(key, record)
        if not recorded:
            LOGGER.warning("Entry %s was recorded by a concurrent invocation; notification may be duplicated", key)
        else:
            LOGGER.info("Recorded %s", key)

        return CheckResult(
            state=PipelineState.NOTIFYING,
            key=key,
            entry=entry,
            message=message,
            notified=notified,
            recorded=recorded,
        )
