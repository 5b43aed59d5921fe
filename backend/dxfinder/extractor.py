"""
extractor.py
~~~~~~~~~~~~
Turn the locator page markup into :class:`LocationRecord` values.

Markup shape (one ``<li>`` per cabinet)
---------------------------------------
    <li>
      <span class="store_name">Round1 Opry Mills</span>
      <span class="store_address">433 Opry Mills Dr, Nashville, TN</span>
      <span class="store_address">12.3 km</span>
      <input class="bt_details_en" type="button"
             onclick="location.href='/alm/shop?gm=98&amp;sid=1234&amp;lang=en'">
    </li>

* ``store_name``    → name
* ``store_address`` → address, unless the line reads ``<number> km``, which is
  the page's own distance from the query point.
* ``bt_details_en`` → its ``onclick`` carries ``sid=<digits>`` and, on some
  pages, ``@<lat>,<lon>``.

Fragments missing a name, an address, a sid or any position are dropped one
by one; only an empty overall result is an error.
"""

from __future__ import annotations

import logging
import re
from typing import Iterator, Optional

from bs4 import BeautifulSoup
from bs4.element import Tag

from .constants import LOCATION_GM, LOCATION_LANG, SHOP_BASE_URL
from .errors import EmptySourceError
from .models import LocationRecord

LOG = logging.getLogger("extractor")

SID_RE = re.compile(r"sid=(\d+)")
COORD_RE = re.compile(r"@(-?\d+(?:\.\d+)?),\s*(-?\d+(?:\.\d+)?)")
DISTANCE_RE = re.compile(r"(\d+(?:\.\d+)?)\s*km\b", re.I)

TRANSLATE = str.maketrans({"\u00a0": " ", "\u2011": "-", "\u2013": "-", "\u2014": "-"})


def details_url(cabinet_id: str) -> str:
    return (
        f"{SHOP_BASE_URL}?gm={LOCATION_GM}&astep=-1"
        f"&sid={cabinet_id}&lang={LOCATION_LANG}"
    )


def clean_text(value: str) -> str:
    """Normalise NBSP / typographic dashes, collapse whitespace and trim."""
    return " ".join(value.translate(TRANSLATE).split())


def parse_distance_km(value: str) -> Optional[float]:
    match = DISTANCE_RE.search(value)
    if not match:
        return None
    return float(match.group(1))


def parse_coordinates(value: str) -> Optional[tuple[float, float]]:
    match = COORD_RE.search(value)
    if not match:
        return None
    lat, lon = float(match.group(1)), float(match.group(2))
    if not (-90.0 <= lat <= 90.0 and -180.0 <= lon <= 180.0):
        return None
    return lat, lon


def _text_of(tag: Tag) -> str:
    return clean_text(tag.get_text(" "))


def _own(li: Tag, class_: str) -> list[Tag]:
    """
    Tags of *class_* that belong to *li* itself.

    When ``</li>`` is left out, ``html.parser`` nests the next entry inside
    this one; its fields must not be read as ours.
    """
    return [tag for tag in li.find_all(class_=class_) if tag.find_parent("li") is li]


def _first(li: Tag, class_: str) -> Optional[Tag]:
    tags = _own(li, class_)
    return tags[0] if tags else None


def _iter_fragments(soup: BeautifulSoup) -> Iterator[Tag]:
    # Only entries that actually carry a cabinet name; navigation lists do not.
    for li in soup.find_all("li"):
        if _first(li, "store_name") is not None:
            yield li


def _parse_fragment(li: Tag, source_url: str) -> Optional[LocationRecord]:
    name_tag = _first(li, "store_name")
    name = _text_of(name_tag) if name_tag is not None else ""

    lines = [_text_of(tag) for tag in _own(li, "store_address")]
    distance_km = next(
        (km for km in map(parse_distance_km, lines) if km is not None), None
    )
    address = next(
        (line for line in lines if line and parse_distance_km(line) is None), ""
    )

    button = _first(li, "bt_details_en")
    onclick = button.get("onclick") if button is not None else None
    if isinstance(onclick, list):  # bs4 may hand back multi-valued attributes
        onclick = " ".join(onclick)
    onclick = clean_text(onclick or "")

    sid = SID_RE.search(onclick)
    coords = parse_coordinates(onclick)

    if not name or not address or not sid:
        return None
    if coords is None and distance_km is None:
        return None

    cabinet_id = sid.group(1)
    return LocationRecord(
        id=cabinet_id,
        name=name,
        address=address,
        details_url=details_url(cabinet_id),
        source_url=source_url,
        lat=coords[0] if coords else None,
        lon=coords[1] if coords else None,
        distance_km=distance_km,
    )


def extract(raw_text: str, source_url: str) -> list[LocationRecord]:
    """
    Parse *raw_text* into cabinet records, in page order.

    Raises:
        EmptySourceError: no fragment produced a valid record.
    """
    soup = BeautifulSoup(raw_text or "", "html.parser")

    records: list[LocationRecord] = []
    skipped = 0
    for li in _iter_fragments(soup):
        record = _parse_fragment(li, source_url)
        if record is None:
            skipped += 1
            continue
        records.append(record)

    if skipped:
        LOG.debug("[extract] skipped %d incomplete entries", skipped)

    if not records:
        raise EmptySourceError("No cabinet locations parsed from the source page")

    LOG.info("[extract] parsed %d cabinets", len(records))
    return records
