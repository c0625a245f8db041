"""Earthquake event model and classification rules - Pure functions.

EventRecord is the shared shape of the latest event and of list-feed
entries. Every field stays the agency's display text; the only numeric
interpretation is the magnitude classification policy below.
"""

import math
from dataclasses import dataclass
from enum import Enum


# Localized marker BMKG uses in "no tsunami potential" statements
NO_TSUNAMI_MARKER = "tidak"

# Magnitude bucket thresholds (inclusive lower bounds)
MODERATE_THRESHOLD = 5.0
STRONG_THRESHOLD = 6.0


@dataclass(frozen=True)
class EventRecord:
    """Immutable earthquake event as published by BMKG.

    Missing fields are empty strings.

    Attributes:
        date_local: Local (WIB) date text, e.g. "19 Des 2023"
        time_local: Local (WIB) time text, e.g. "12:00:00 WIB"
        timestamp_utc: ISO-8601 UTC timestamp
        coordinates: Composite "lat,lng" text
        latitude: Latitude text, e.g. "2.45 LU"
        longitude: Longitude text, e.g. "126.87 BT"
        magnitude: Magnitude as decimal text
        depth: Depth with unit, e.g. "10 km"
        region: Affected area description
        tsunami_potential: Tsunami potential statement
        felt_report: Felt intensity report (felt feed and latest event only)
        shakemap_ref: Shakemap image filename (latest event only)
    """
    date_local: str = ""
    time_local: str = ""
    timestamp_utc: str = ""
    coordinates: str = ""
    latitude: str = ""
    longitude: str = ""
    magnitude: str = ""
    depth: str = ""
    region: str = ""
    tsunami_potential: str = ""
    felt_report: str = ""
    shakemap_ref: str = ""

    @property
    def magnitude_value(self) -> float | None:
        """Parsed magnitude, None when the text is not a finite number."""
        return parse_magnitude(self.magnitude)

    @property
    def magnitude_class(self) -> "MagnitudeClass":
        return classify_magnitude(self.magnitude)

    @property
    def is_tsunami_free(self) -> bool:
        return is_tsunami_free(self.tsunami_potential)

    @property
    def lat_lng(self) -> tuple[str, str]:
        """(lat, lng) from the composite field, else the separate fields."""
        if self.coordinates:
            return split_coordinates(self.coordinates)
        return (self.latitude, self.longitude)


class MagnitudeClass(str, Enum):
    """Severity buckets used for display and alerting."""
    LIGHT = "light"
    MODERATE = "moderate"
    STRONG = "strong"


def parse_magnitude(text: str) -> float | None:
    """Parse magnitude text leniently.

    Pure function. Returns None for empty, non-numeric, NaN or infinite
    values instead of raising.
    """
    try:
        value = float(text.strip())
    except (AttributeError, ValueError):
        return None

    if not math.isfinite(value):
        return None

    return value


def classify_magnitude(text: str) -> MagnitudeClass:
    """Classify magnitude text into a severity bucket.

    Pure function. Fail-safe policy: magnitude text that does not parse
    is classified LIGHT, never raised.

    Args:
        text: Magnitude text from the feed

    Returns:
        LIGHT below 5.0, MODERATE below 6.0, STRONG otherwise
    """
    value = parse_magnitude(text)

    if value is None or value < MODERATE_THRESHOLD:
        return MagnitudeClass.LIGHT
    elif value < STRONG_THRESHOLD:
        return MagnitudeClass.MODERATE
    else:
        return MagnitudeClass.STRONG


def magnitude_at_least(text: str, threshold: float) -> bool:
    """Check magnitude text against a threshold, unparsable never passes."""
    value = parse_magnitude(text)
    return value is not None and value >= threshold


def is_tsunami_free(tsunami_potential: str) -> bool:
    """Return True if the statement says there is no tsunami potential.

    Pure function. Text rule, case-insensitive substring match on the
    localized negative marker, e.g. "Gempa ini tidak berpotensi tsunami".
    """
    return NO_TSUNAMI_MARKER in tsunami_potential.lower()


def split_coordinates(coordinates: str) -> tuple[str, str]:
    """Split composite "lat,lng" text into trimmed parts.

    Pure function. Missing parts are empty strings.
    """
    if not coordinates:
        return ("", "")

    parts = coordinates.split(",")
    lat = parts[0].strip()
    lng = parts[1].strip() if len(parts) > 1 else ""
    return (lat, lng)


def resolve_shakemap_url(shakemap_ref: str, base_url: str) -> str | None:
    """Build the shakemap image URL from a stored reference.

    Pure function. Returns None when the event has no shakemap.
    """
    if not shakemap_ref:
        return None
    return f"{base_url.rstrip('/')}/{shakemap_ref.lstrip('/')}"
