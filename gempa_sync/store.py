"""Snapshot Store - owns the engine's single mutable reference.

The store holds one immutable Snapshot and swaps it on commit, so an
observer always sees a complete snapshot. Only the scheduler commits.
"""

import logging
from collections.abc import Callable

from gempa_sync.core.signature import has_changed
from gempa_sync.core.snapshot import Snapshot


logger = logging.getLogger(__name__)


SnapshotListener = Callable[[Snapshot], None]


class SnapshotStore:
    """Holds the last accepted snapshot and publishes it to observers."""

    def __init__(self, initial: Snapshot | None = None) -> None:
        self._snapshot = initial or Snapshot()
        self._listeners: list[SnapshotListener] = []

    def current(self) -> Snapshot:
        """Return the last accepted snapshot."""
        return self._snapshot

    def subscribe(self, listener: SnapshotListener) -> Callable[[], None]:
        """Register a listener called with every new snapshot.

        Returns:
            A function that removes the listener
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def commit(self, candidate: Snapshot, background: bool) -> Snapshot:
        """Replace the stored snapshot with a candidate.

        The unseen flag is set when a background cycle changed the
        signature, kept when a background cycle changed nothing, and
        cleared by any foreground commit.

        Args:
            candidate: Fully assembled snapshot with its signature
            background: True if the candidate comes from a timer cycle

        Returns:
            The snapshot as stored
        """
        previous = self._snapshot

        if background:
            unseen = previous.has_unseen_data or has_changed(
                previous.signature, candidate.signature
            )
        else:
            unseen = False

        self._set(candidate.with_unseen(unseen))

        logger.info(
            "Committed %s snapshot: latest=%s, %d recent, %d felt, unseen=%s",
            "background" if background else "foreground",
            candidate.latest.timestamp_utc if candidate.latest else "-",
            len(candidate.recent),
            len(candidate.felt),
            unseen,
        )

        return self._snapshot

    def acknowledge(self) -> Snapshot:
        """Clear the unseen flag after the user has looked at the data."""
        if self._snapshot.has_unseen_data:
            self._set(self._snapshot.with_unseen(False))
        return self._snapshot

    def _set(self, snapshot: Snapshot) -> None:
        self._snapshot = snapshot
        self._publish(snapshot)

    def _publish(self, snapshot: Snapshot) -> None:
        for listener in list(self._listeners):
            try:
                listener(snapshot)
            except Exception:
                logger.exception("Snapshot listener failed")
