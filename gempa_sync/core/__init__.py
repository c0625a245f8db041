"""Functional Core - Pure functions with no side effects.

This module contains all business logic as pure functions:
- Event model and magnitude/tsunami classification
- Latest-event XML and list-feed JSON parsing
- Change signature computation
- Notification gate
- Message formatting

All functions here are deterministic and have no I/O.
"""

from gempa_sync.core.event import EventRecord, MagnitudeClass, classify_magnitude
from gempa_sync.core.errors import NetworkFailure, OptionalSourceDegraded, ParseFailure, SyncError
from gempa_sync.core.feeds import Endpoint, FeedKind
from gempa_sync.core.latest_parser import parse_latest_event
from gempa_sync.core.list_parser import parse_event_list
from gempa_sync.core.signature import compute_signature
from gempa_sync.core.notification import AlertDecision, evaluate_notification, should_notify
from gempa_sync.core.snapshot import Snapshot, build_snapshot

__all__ = [
    # Event
    "EventRecord",
    "MagnitudeClass",
    "classify_magnitude",
    # Errors
    "SyncError",
    "NetworkFailure",
    "ParseFailure",
    "OptionalSourceDegraded",
    # Feeds
    "Endpoint",
    "FeedKind",
    # Parsers
    "parse_latest_event",
    "parse_event_list",
    # Signature
    "compute_signature",
    # Notification
    "AlertDecision",
    "evaluate_notification",
    "should_notify",
    # Snapshot
    "Snapshot",
    "build_snapshot",
]
