"""Snapshot model - Pure data structures.

A Snapshot is replaced wholesale on every accepted cycle, never mutated.
"""

from collections.abc import Sequence
from dataclasses import dataclass, replace
from datetime import datetime

from gempa_sync.core.event import EventRecord
from gempa_sync.core.feeds import MAX_LIST_ENTRIES
from gempa_sync.core.signature import compute_signature


@dataclass(frozen=True)
class Snapshot:
    """Immutable view of the engine's data.

    Attributes:
        latest: Latest event, None until the first successful cycle
        recent: Recent events, newest first, at most 15
        felt: Felt events, newest first, at most 15
        signature: Change signature of exactly this latest/recent/felt
        last_updated: When this snapshot was committed (UTC)
        has_unseen_data: A background cycle brought changes the user has
            not acknowledged yet
    """
    latest: EventRecord | None = None
    recent: tuple[EventRecord, ...] = ()
    felt: tuple[EventRecord, ...] = ()
    signature: str = ""
    last_updated: datetime | None = None
    has_unseen_data: bool = False

    @property
    def is_empty(self) -> bool:
        """True before the first commit."""
        return self.last_updated is None

    def with_unseen(self, has_unseen_data: bool) -> "Snapshot":
        """Return a copy with a different unseen flag."""
        return replace(self, has_unseen_data=has_unseen_data)


def build_snapshot(
    latest: EventRecord | None,
    recent: Sequence[EventRecord],
    felt: Sequence[EventRecord],
    last_updated: datetime,
) -> Snapshot:
    """Assemble a candidate snapshot with a matching signature.

    Pure function. Lists are truncated to the list limit so the invariant
    holds however the lists were produced.
    """
    recent_tuple = tuple(recent[:MAX_LIST_ENTRIES])
    felt_tuple = tuple(felt[:MAX_LIST_ENTRIES])

    return Snapshot(
        latest=latest,
        recent=recent_tuple,
        felt=felt_tuple,
        signature=compute_signature(latest, recent_tuple, felt_tuple),
        last_updated=last_updated,
    )
