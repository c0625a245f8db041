"""Event list JSON parsing - Pure functions.

Parses the gempaterkini.json / gempadirasakan.json documents. Both share
the shape {"Infogempa": {"gempa": [...]}}; the felt feed adds Dirasakan.
"""

import json
from typing import Any

from gempa_sync.core.errors import ParseFailure
from gempa_sync.core.event import EventRecord
from gempa_sync.core.feeds import FeedKind, MAX_LIST_ENTRIES


# EventRecord field -> JSON key
FIELD_KEYS = {
    "date_local": "Tanggal",
    "time_local": "Jam",
    "timestamp_utc": "DateTime",
    "coordinates": "Coordinates",
    "latitude": "Lintang",
    "longitude": "Bujur",
    "magnitude": "Magnitude",
    "depth": "Kedalaman",
    "region": "Wilayah",
    "tsunami_potential": "Potensi",
    "felt_report": "Dirasakan",
}


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def parse_list_entry(entry: dict[str, Any]) -> EventRecord:
    """Parse a single list entry into an EventRecord.

    Pure function. Missing keys become empty strings.
    """
    return EventRecord(**{
        field: _as_text(entry.get(key))
        for field, key in FIELD_KEYS.items()
    })


def extract_entries(document: Any) -> list[Any]:
    """Return the raw Infogempa.gempa array, [] when the path is absent."""
    if not isinstance(document, dict):
        return []

    container = document.get("Infogempa")
    if not isinstance(container, dict):
        return []

    entries = container.get("gempa")
    if not isinstance(entries, list):
        return []

    return entries


def parse_event_list(
    json_text: str | bytes,
    endpoint: FeedKind = FeedKind.RECENT,
    limit: int = MAX_LIST_ENTRIES,
) -> list[EventRecord]:
    """Parse a list feed into at most `limit` events in feed order.

    Pure function. The feed is assumed newest-first and is not re-sorted.
    The array is cut to `limit` before non-object entries are dropped, so
    junk entries count against the limit.

    Args:
        json_text: Raw JSON payload
        endpoint: Feed being parsed (used for error reporting)
        limit: Maximum number of entries to keep

    Returns:
        List of EventRecords, empty when the event array is absent

    Raises:
        ParseFailure: If the payload is not valid JSON
    """
    try:
        document = json.loads(json_text)
    except (ValueError, RecursionError) as e:
        raise ParseFailure(endpoint, f"malformed JSON: {e}") from e

    entries = extract_entries(document)[:limit]

    return [
        parse_list_entry(entry)
        for entry in entries
        if isinstance(entry, dict)
    ]
