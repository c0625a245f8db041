"""Latest event XML parsing - Pure functions.

Parses the BMKG autogempa.xml document into an EventRecord. The `gempa`
element is mandatory; every field inside it is optional.
"""

import xml.etree.ElementTree as ET

from gempa_sync.core.errors import ParseFailure
from gempa_sync.core.event import EventRecord
from gempa_sync.core.feeds import FeedKind


ROOT_TAG = "gempa"

# EventRecord field -> XML tag
FIELD_TAGS = {
    "date_local": "Tanggal",
    "time_local": "Jam",
    "timestamp_utc": "DateTime",
    "coordinates": "coordinates",
    "latitude": "Lintang",
    "longitude": "Bujur",
    "magnitude": "Magnitude",
    "depth": "Kedalaman",
    "region": "Wilayah",
    "tsunami_potential": "Potensi",
    "felt_report": "Dirasakan",
    "shakemap_ref": "Shakemap",
}


def find_event_element(root: ET.Element) -> ET.Element | None:
    """Find the event element: the root itself or its first descendant."""
    if root.tag == ROOT_TAG:
        return root
    return root.find(f".//{ROOT_TAG}")


def get_text(element: ET.Element, tag: str) -> str:
    """Trimmed text of the first descendant with this tag, "" if missing."""
    child = element.find(f".//{tag}")
    if child is None:
        return ""
    return "".join(child.itertext()).strip()


def parse_latest_event(xml_text: str | bytes) -> EventRecord:
    """Parse the latest-event XML document.

    Pure function.

    Args:
        xml_text: Raw autogempa.xml payload

    Returns:
        EventRecord with missing tags as empty strings

    Raises:
        ParseFailure: If the document is not XML or has no gempa element
    """
    try:
        root = ET.fromstring(xml_text)
    except ET.ParseError as e:
        raise ParseFailure(FeedKind.LATEST, f"malformed XML: {e}") from e

    event = find_event_element(root)
    if event is None:
        raise ParseFailure(FeedKind.LATEST, f"no <{ROOT_TAG}> element found")

    return EventRecord(**{
        field: get_text(event, tag)
        for field, tag in FIELD_TAGS.items()
    })
