"""Failure taxonomy for the synchronization engine.

Failures are raised where they happen (source client, parsers) and are
classified by the scheduler: a failure on the latest-event feed is fatal
to a foreground cycle, a failure on a list feed is downgraded to an
OptionalSourceDegraded record and the list resolves to empty.
"""

from dataclasses import dataclass

from gempa_sync.core.feeds import FeedKind


class SyncError(Exception):
    """Base class for all engine failures.

    Attributes:
        endpoint: Feed the failure belongs to
    """

    def __init__(self, endpoint: FeedKind, message: str) -> None:
        super().__init__(message)
        self.endpoint = endpoint


class NetworkFailure(SyncError):
    """Transport error or non-success HTTP status for one feed."""

    def __init__(self, endpoint: FeedKind, cause: str) -> None:
        super().__init__(endpoint, f"Failed to fetch {endpoint.value} feed: {cause}")
        self.cause = cause


class ParseFailure(SyncError):
    """Malformed payload or missing mandatory root structure."""

    def __init__(self, endpoint: FeedKind, reason: str) -> None:
        super().__init__(endpoint, f"Failed to parse {endpoint.value} feed: {reason}")
        self.reason = reason


@dataclass(frozen=True)
class OptionalSourceDegraded:
    """A list feed that failed and was resolved to an empty list.

    Never raised. Recorded on the cycle result so callers can see which
    lists are empty because of a failure rather than because the feed
    had no entries.

    Attributes:
        endpoint: The degraded list feed
        cause: Message of the underlying failure
    """
    endpoint: FeedKind
    cause: str

    @classmethod
    def from_error(cls, error: SyncError) -> "OptionalSourceDegraded":
        return cls(endpoint=error.endpoint, cause=str(error))
