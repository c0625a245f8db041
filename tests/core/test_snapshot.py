"""Unit tests for snapshot assembly.

Pure function tests - no mocks needed.
"""

from datetime import datetime, timezone

import pytest

from gempa_sync.core.event import EventRecord
from gempa_sync.core.signature import compute_signature
from gempa_sync.core.snapshot import Snapshot, build_snapshot


NOW = datetime(2023, 12, 19, 5, 0, tzinfo=timezone.utc)


def events(count: int, prefix: str = "t") -> list[EventRecord]:
    return [EventRecord(timestamp_utc=f"{prefix}{i}") for i in range(count)]


class TestSnapshot:
    def test_empty_snapshot(self):
        snapshot = Snapshot()
        assert snapshot.is_empty is True
        assert snapshot.latest is None
        assert snapshot.recent == ()
        assert snapshot.signature == ""
        assert snapshot.has_unseen_data is False

    def test_with_unseen_returns_copy(self):
        snapshot = Snapshot(signature="S0")
        flagged = snapshot.with_unseen(True)

        assert flagged.has_unseen_data is True
        assert snapshot.has_unseen_data is False
        assert flagged.signature == "S0"

    def test_is_immutable(self):
        with pytest.raises(AttributeError):
            Snapshot().signature = "x"


class TestBuildSnapshot:
    def test_signature_matches_contents(self):
        latest = EventRecord(timestamp_utc="L")
        recent = events(3, "r")
        felt = events(2, "f")

        snapshot = build_snapshot(latest, recent, felt, NOW)

        assert snapshot.signature == compute_signature(latest, recent, felt)
        assert snapshot.last_updated == NOW
        assert snapshot.is_empty is False

    def test_lists_become_tuples(self):
        snapshot = build_snapshot(None, events(2), events(1), NOW)
        assert isinstance(snapshot.recent, tuple)
        assert isinstance(snapshot.felt, tuple)

    def test_truncates_long_lists(self):
        snapshot = build_snapshot(None, events(20), events(16), NOW)

        assert len(snapshot.recent) == 15
        assert len(snapshot.felt) == 15
        assert snapshot.recent[0].timestamp_utc == "t0"
        assert snapshot.signature == compute_signature(None, events(15), events(15))

    def test_new_snapshot_is_not_flagged(self):
        snapshot = build_snapshot(None, [], [], NOW)
        assert snapshot.has_unseen_data is False
