"""Log-only notification adapter for dry runs and local checks."""

from __future__ import annotations

import logging

LOGGER = logging.getLogger(__name__)


class LogNotifier:
    """Notifier adapter that writes the message to the log and nothing else."""

    def send(self, message: str) -> None:
        LOGGER.info("Notification: %s", message)
