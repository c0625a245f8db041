"""Feed identities and default BMKG endpoint locations."""

from dataclasses import dataclass
from enum import Enum


# BMKG TEWS publication directory
BMKG_TEWS_BASE = "https://data.bmkg.go.id/DataMKG/TEWS/"

DEFAULT_LATEST_URL = BMKG_TEWS_BASE + "autogempa.xml"
DEFAULT_RECENT_URL = BMKG_TEWS_BASE + "gempaterkini.json"
DEFAULT_FELT_URL = BMKG_TEWS_BASE + "gempadirasakan.json"

# Shakemap images live next to the feeds
DEFAULT_SHAKEMAP_BASE_URL = BMKG_TEWS_BASE

# List feeds are cut to this many entries at the fetch boundary
MAX_LIST_ENTRIES = 15


class FeedKind(str, Enum):
    """The three feeds a refresh cycle reads."""
    LATEST = "latest"
    RECENT = "recent"
    FELT = "felt"


@dataclass(frozen=True)
class Endpoint:
    """A fetchable feed.

    Attributes:
        kind: Which feed this is
        url: Absolute feed URL
        accept: Value for the Accept header, None to leave it unset
    """
    kind: FeedKind
    url: str
    accept: str | None = None

    @property
    def is_required(self) -> bool:
        """Only the latest-event feed can fail a cycle."""
        return self.kind is FeedKind.LATEST


def build_endpoints(
    latest_url: str = DEFAULT_LATEST_URL,
    recent_url: str = DEFAULT_RECENT_URL,
    felt_url: str = DEFAULT_FELT_URL,
) -> dict[FeedKind, Endpoint]:
    """Build the endpoint table for one engine instance."""
    return {
        FeedKind.LATEST: Endpoint(
            kind=FeedKind.LATEST,
            url=latest_url,
            accept="application/xml, text/xml",
        ),
        FeedKind.RECENT: Endpoint(kind=FeedKind.RECENT, url=recent_url),
        FeedKind.FELT: Endpoint(kind=FeedKind.FELT, url=felt_url),
    }
