"""Unit tests for latest-event XML parsing.

Pure function tests - no mocks needed.
"""

import pytest

from gempa_sync.core.errors import ParseFailure
from gempa_sync.core.feeds import FeedKind
from gempa_sync.core.latest_parser import parse_latest_event


# Sample autogempa.xml document for testing
SAMPLE_XML = """<?xml version="1.0" encoding="UTF-8"?>
<Infogempa>
  <gempa>
    <Tanggal>19 Des 2023</Tanggal>
    <Jam>12:00:00 WIB</Jam>
    <DateTime>2023-12-19T05:00:00+00:00</DateTime>
    <point>
      <coordinates>-3.52,128.28</coordinates>
    </point>
    <Lintang>3.52 LS</Lintang>
    <Bujur>128.28 BT</Bujur>
    <Magnitude>6.2</Magnitude>
    <Kedalaman>10 km</Kedalaman>
    <Wilayah>Pusat gempa berada di laut 50 km BaratDaya Ambon</Wilayah>
    <Potensi>Tidak berpotensi tsunami</Potensi>
    <Dirasakan>III Ambon</Dirasakan>
    <Shakemap>20231219120000.mmi.jpg</Shakemap>
  </gempa>
</Infogempa>
"""


class TestParseLatestEvent:
    """Tests for parse_latest_event() pure function."""

    def test_parses_all_fields(self):
        event = parse_latest_event(SAMPLE_XML)

        assert event.date_local == "19 Des 2023"
        assert event.time_local == "12:00:00 WIB"
        assert event.timestamp_utc == "2023-12-19T05:00:00+00:00"
        assert event.coordinates == "-3.52,128.28"
        assert event.latitude == "3.52 LS"
        assert event.longitude == "128.28 BT"
        assert event.magnitude == "6.2"
        assert event.depth == "10 km"
        assert event.region == "Pusat gempa berada di laut 50 km BaratDaya Ambon"
        assert event.tsunami_potential == "Tidak berpotensi tsunami"
        assert event.felt_report == "III Ambon"
        assert event.shakemap_ref == "20231219120000.mmi.jpg"

    def test_magnitude_stays_text(self):
        event = parse_latest_event(SAMPLE_XML)
        assert isinstance(event.magnitude, str)

    def test_accepts_bytes(self):
        event = parse_latest_event(SAMPLE_XML.encode("utf-8"))
        assert event.magnitude == "6.2"

    def test_accepts_gempa_as_document_root(self):
        xml = "<gempa><Magnitude>5.1</Magnitude></gempa>"
        event = parse_latest_event(xml)
        assert event.magnitude == "5.1"

    def test_missing_optional_tags_become_empty(self):
        """A missing tag yields an empty field, not a failure."""
        xml = """<Infogempa><gempa>
            <DateTime>2023-12-19T05:00:00+00:00</DateTime>
            <Magnitude>4.8</Magnitude>
        </gempa></Infogempa>"""

        event = parse_latest_event(xml)

        assert event.timestamp_utc == "2023-12-19T05:00:00+00:00"
        assert event.magnitude == "4.8"
        assert event.felt_report == ""
        assert event.shakemap_ref == ""
        assert event.region == ""

    def test_trims_whitespace(self):
        xml = "<Infogempa><gempa><Wilayah>\n   Ambon  \n</Wilayah></gempa></Infogempa>"
        event = parse_latest_event(xml)
        assert event.region == "Ambon"

    def test_missing_root_element_is_parse_failure(self):
        xml = "<Infogempa><bukan>x</bukan></Infogempa>"

        with pytest.raises(ParseFailure) as exc_info:
            parse_latest_event(xml)

        assert exc_info.value.endpoint is FeedKind.LATEST
        assert "gempa" in exc_info.value.reason

    def test_malformed_xml_is_parse_failure(self):
        with pytest.raises(ParseFailure) as exc_info:
            parse_latest_event("<Infogempa><gempa>")

        assert exc_info.value.endpoint is FeedKind.LATEST

    def test_html_error_page_is_parse_failure(self):
        with pytest.raises(ParseFailure):
            parse_latest_event("<html><body>Service Unavailable</body></html>")
