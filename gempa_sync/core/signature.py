"""Change signature - Pure functions.

The signature is a fingerprint over the timestamps of a snapshot. It
detects any change to the set or order of events, but not in-place
corrections to an event whose timestamp stays the same.
"""

import base64
import json
from collections.abc import Sequence

from gempa_sync.core.event import EventRecord


def join_timestamps(events: Sequence[EventRecord]) -> str:
    """Comma-join event timestamps in list order."""
    return ",".join(e.timestamp_utc for e in events)


def compute_signature(
    latest: EventRecord | None,
    recent: Sequence[EventRecord],
    felt: Sequence[EventRecord],
) -> str:
    """Compute the change signature for a candidate snapshot.

    Pure function. Depends only on the latest timestamp and the ordered
    recent and felt timestamps.

    Args:
        latest: Latest event, None if absent
        recent: Recent list in feed order
        felt: Felt list in feed order

    Returns:
        Base64 encoded signature string
    """
    data = {
        "latest": latest.timestamp_utc if latest is not None else "",
        "recent": join_timestamps(recent),
        "felt": join_timestamps(felt),
    }
    encoded = json.dumps(data, separators=(",", ":"), ensure_ascii=False)
    return base64.b64encode(encoded.encode("utf-8")).decode("ascii")


def has_changed(previous_signature: str, new_signature: str) -> bool:
    """Return True if there is a previous signature and it differs.

    Pure function. The first snapshot of a session never counts as a
    change.
    """
    return bool(previous_signature) and new_signature != previous_signature
