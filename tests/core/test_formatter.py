"""Unit tests for message formatting.

Pure function tests - no mocks needed.
"""

from datetime import datetime, timezone

from gempa_sync.core.event import EventRecord
from gempa_sync.core.formatter import (
    UTC_UNAVAILABLE,
    format_alert_body,
    format_event_summary,
    format_local_time,
    format_slack_payload,
    format_utc_time,
    get_magnitude_emoji,
    get_severity_label,
    parse_utc_timestamp,
)


SAMPLE_EVENT = EventRecord(
    date_local="19 Des 2023",
    time_local="12:00:00 WIB",
    timestamp_utc="2023-12-19T05:00:00+00:00",
    magnitude="6.2",
    depth="10 km",
    region="Laut Banda",
)


class TestSeverity:
    def test_emoji(self):
        assert get_magnitude_emoji("4.0") == "🟢"
        assert get_magnitude_emoji("5.5") == "🟡"
        assert get_magnitude_emoji("6.5") == "🔴"

    def test_label(self):
        assert get_severity_label("4.0") == "Gempa Ringan"
        assert get_severity_label("5.5") == "Gempa Sedang"
        assert get_severity_label("6.5") == "Gempa Kuat"

    def test_unparsable_is_light(self):
        assert get_severity_label("?") == "Gempa Ringan"


class TestFormatAlertBody:
    def test_carries_magnitude_and_region(self):
        assert format_alert_body(SAMPLE_EVENT) == "M6.2 - Laut Banda"


class TestFormatLocalTime:
    def test_keeps_existing_suffix(self):
        assert format_local_time("19 Des 2023", "12:00:00 WIB") == "19 Des 2023, 12:00:00 WIB"

    def test_adds_missing_suffix(self):
        assert format_local_time("19 Des 2023", "12:00:00") == "19 Des 2023, 12:00:00 WIB"


class TestParseUtcTimestamp:
    def test_parses_offset_timestamp(self):
        parsed = parse_utc_timestamp("2023-12-19T05:00:00+00:00")
        assert parsed == datetime(2023, 12, 19, 5, 0, tzinfo=timezone.utc)

    def test_parses_z_suffix(self):
        parsed = parse_utc_timestamp("2023-12-19T05:00:00Z")
        assert parsed == datetime(2023, 12, 19, 5, 0, tzinfo=timezone.utc)

    def test_naive_is_utc(self):
        parsed = parse_utc_timestamp("2023-12-19T05:00:00")
        assert parsed.tzinfo is not None
        assert parsed.hour == 5

    def test_converts_offsets_to_utc(self):
        parsed = parse_utc_timestamp("2023-12-19T12:00:00+07:00")
        assert parsed.hour == 5

    def test_invalid(self):
        assert parse_utc_timestamp("kemarin") is None
        assert parse_utc_timestamp("") is None


class TestFormatUtcTime:
    def test_formats_timestamp(self):
        assert format_utc_time("2023-12-19T05:00:00+00:00") == "19 Dec 2023, 05:00 UTC"

    def test_empty_is_unavailable(self):
        assert format_utc_time("") == UTC_UNAVAILABLE

    def test_unparsable_returned_raw(self):
        assert format_utc_time("kemarin") == "kemarin"


class TestFormatEventSummary:
    def test_summary(self):
        summary = format_event_summary(SAMPLE_EVENT)

        assert summary.startswith("M6.2 - Laut Banda")
        assert "19 Des 2023, 12:00:00 WIB" in summary
        assert "depth: 10 km" in summary


class TestFormatSlackPayload:
    def test_payload_shape(self):
        payload = format_slack_payload("Title", "M6.2 - Laut Banda")

        assert "M6.2 - Laut Banda" in payload["text"]
        assert payload["blocks"][0]["type"] == "header"
        assert payload["blocks"][0]["text"]["text"] == "Title"
        assert "M6.2 - Laut Banda" in payload["blocks"][1]["text"]["text"]
