"""Error taxonomy for the check pipeline.

Every stage raises one of these so the orchestrator can short-circuit on the
first failure instead of working with a partial result.
"""

from __future__ import annotations


class PipelineError(Exception):
    """Base class for errors that abort or degrade a single invocation."""


class FetchError(PipelineError):
    """Raised when the upstream feed cannot be retrieved."""


class ParseError(PipelineError):
    """Raised when the feed document cannot be decoded into entries."""


class EmptyFeedError(ParseError):
    """Raised when a decoded feed contains no entries."""


class StoreUnavailable(PipelineError):
    """Raised when the dedup store cannot give a definite answer."""


class NotifySendError(PipelineError):
    """Raised by notifier adapters when a message could not be delivered."""
