"""
source_service.py
~~~~~~~~~~~~~~~~~
Download the cabinet locator page for the observer's position.

Public helpers
--------------
    build_source_url(observer) -> str
    fetch_listing(client, url) -> str      # raises SourceFetchError
"""

from __future__ import annotations

import logging

import httpx

from .api_logging import logged_request_async
from .constants import LOCATION_BASE_URL, LOCATION_GM, LOCATION_LANG
from .errors import SourceFetchError
from .models import ObserverLocation

LOG = logging.getLogger("source_service")

FETCH_TIMEOUT_SEC = 15.0


def build_source_url(observer: ObserverLocation) -> str:
    """Locator URL that lists cabinets ordered by distance from *observer*."""
    url = httpx.URL(
        LOCATION_BASE_URL,
        params={
            "gm": LOCATION_GM,
            "lat": str(observer.lat),
            "lng": str(observer.lon),
            "lang": LOCATION_LANG,
        },
    )
    return str(url)


async def fetch_listing(client: httpx.AsyncClient, url: str) -> str:
    """
    GET *url* and return the markup.

    Raises:
        SourceFetchError: on any transport failure or a non-2xx status.
    """
    try:
        resp = await logged_request_async(client, "get", url, timeout=FETCH_TIMEOUT_SEC)
    except httpx.HTTPError as exc:
        raise SourceFetchError(f"Failed to fetch source page: {exc}") from exc

    if not resp.is_success:
        raise SourceFetchError(
            f"Failed to fetch source page: HTTP {resp.status_code}",
            status_code=resp.status_code,
        )

    LOG.debug("[fetch] %d bytes from %s", len(resp.content), url)
    return resp.text
