"""BMKG Feed Client - Imperative Shell.

This module handles HTTP communication with the BMKG TEWS feeds.
All I/O is contained here; parsing is in the core module.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone

import httpx

from gempa_sync.core.errors import NetworkFailure
from gempa_sync.core.feeds import Endpoint


logger = logging.getLogger(__name__)


# Feeds are polled for freshness, never served from a cache
NO_CACHE_HEADERS = {
    "Cache-Control": "no-cache",
    "Pragma": "no-cache",
}


@dataclass(frozen=True)
class RawPayload:
    """Unparsed body of one feed response.

    Attributes:
        endpoint: Endpoint the payload came from
        text: Decoded response body
        status_code: HTTP status code
        fetched_at: When the response was received (UTC)
    """
    endpoint: Endpoint
    text: str
    status_code: int
    fetched_at: datetime


class SourceClient:
    """Client for fetching raw feed documents.

    This is part of the imperative shell - it handles HTTP I/O. A fetch
    makes exactly one GET; retrying is the scheduler's decision.
    """

    def __init__(
        self,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the feed client.

        Args:
            timeout: Request timeout in seconds, None for the httpx default
            transport: Custom transport (used by tests)
        """
        client_kwargs = {}
        if timeout is not None:
            client_kwargs["timeout"] = timeout
        if transport is not None:
            client_kwargs["transport"] = transport

        self._client = httpx.AsyncClient(
            headers=NO_CACHE_HEADERS,
            follow_redirects=True,
            **client_kwargs,
        )

    async def fetch(self, endpoint: Endpoint) -> RawPayload:
        """Fetch one feed document.

        This method performs HTTP I/O. Cancelling the calling task aborts
        the request.

        Args:
            endpoint: Feed to fetch

        Returns:
            RawPayload with the response body

        Raises:
            NetworkFailure: On transport errors or non-success status
        """
        headers = {}
        if endpoint.accept:
            headers["Accept"] = endpoint.accept

        logger.debug("Fetching %s feed from %s", endpoint.kind.value, endpoint.url)

        try:
            response = await self._client.get(endpoint.url, headers=headers)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise NetworkFailure(
                endpoint.kind,
                f"HTTP {e.response.status_code}",
            ) from e
        except httpx.HTTPError as e:
            raise NetworkFailure(endpoint.kind, str(e) or type(e).__name__) from e

        logger.debug(
            "Fetched %s feed: %d bytes",
            endpoint.kind.value,
            len(response.content),
        )

        return RawPayload(
            endpoint=endpoint,
            text=response.text,
            status_code=response.status_code,
            fetched_at=datetime.now(timezone.utc),
        )

    async def aclose(self) -> None:
        """Close the underlying connection pool."""
        await self._client.aclose()
