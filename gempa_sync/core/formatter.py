"""Message formatting - Pure functions.

This module formats earthquake events into alert text and display strings.
All functions are pure with no side effects.
"""

from datetime import datetime, timezone
from typing import Any

from gempa_sync.core.event import EventRecord, MagnitudeClass, classify_magnitude


ALERT_TITLE = "🚨 Gempa Kuat Terdeteksi!"

UTC_UNAVAILABLE = "UTC tidak tersedia"


def get_magnitude_emoji(magnitude: str) -> str:
    """Get an emoji representing earthquake severity.

    Pure function.
    """
    severity = classify_magnitude(magnitude)
    if severity is MagnitudeClass.STRONG:
        return "🔴"
    elif severity is MagnitudeClass.MODERATE:
        return "🟡"
    else:
        return "🟢"


def get_severity_label(magnitude: str) -> str:
    """Get the Indonesian severity label used by BMKG displays.

    Pure function.
    """
    severity = classify_magnitude(magnitude)
    if severity is MagnitudeClass.STRONG:
        return "Gempa Kuat"
    elif severity is MagnitudeClass.MODERATE:
        return "Gempa Sedang"
    else:
        return "Gempa Ringan"


def format_alert_body(event: EventRecord) -> str:
    """Alert body carrying magnitude and region, e.g. "M6.2 - Laut Banda"."""
    return f"M{event.magnitude} - {event.region}"


def format_local_time(date_local: str, time_local: str) -> str:
    """Format the agency's local date and time for display.

    Pure function. BMKG publishes Jam either with or without the WIB
    suffix; it is added only when missing.
    """
    time_text = time_local.strip()
    if not time_text.upper().endswith("WIB"):
        time_text = f"{time_text} WIB"
    return f"{date_local}, {time_text}"


def parse_utc_timestamp(timestamp_utc: str) -> datetime | None:
    """Parse an ISO-8601 timestamp, None if empty or invalid.

    Naive timestamps are taken as UTC.
    """
    text = timestamp_utc.strip()
    if not text:
        return None

    if text.endswith("Z"):
        text = text[:-1] + "+00:00"

    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)

    return parsed.astimezone(timezone.utc)


def format_utc_time(timestamp_utc: str) -> str:
    """Format a UTC timestamp as "19 Dec 2023, 12:00 UTC".

    Pure function. Empty input gives the "not available" text; text that
    does not parse is returned as-is.
    """
    if not timestamp_utc.strip():
        return UTC_UNAVAILABLE

    parsed = parse_utc_timestamp(timestamp_utc)
    if parsed is None:
        return timestamp_utc

    return parsed.strftime("%d %b %Y, %H:%M UTC")


def format_event_summary(event: EventRecord) -> str:
    """Format a one-line summary of an event.

    Pure function.

    Args:
        event: Event to summarize

    Returns:
        One-line summary string
    """
    return (
        f"M{event.magnitude} - {event.region} "
        f"at {format_local_time(event.date_local, event.time_local)} "
        f"(depth: {event.depth})"
    )


def format_slack_payload(title: str, body: str) -> dict[str, Any]:
    """Format an alert as a Slack incoming-webhook payload.

    Pure function.

    Args:
        title: Alert title
        body: Alert body

    Returns:
        Slack message payload dict
    """
    return {
        "text": f"{title} {body}",
        "blocks": [
            {
                "type": "header",
                "text": {
                    "type": "plain_text",
                    "text": title,
                },
            },
            {
                "type": "section",
                "text": {
                    "type": "mrkdwn",
                    "text": f"*{body}*",
                },
            },
        ],
    }
