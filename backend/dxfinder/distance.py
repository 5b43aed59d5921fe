"""
distance.py
~~~~~~~~~~~
Pick the cabinet nearest to the observer.

Two ranking modes, never mixed within one call:

* **supplied** – any record carries the distance the locator page printed
  next to it (``12.3 km``). Those values are already measured from the query
  point, so they are converted to miles but never recomputed, even when the
  same entries also carry coordinates.
* **coordinates** – no record carries a page distance; rank by haversine
  distance from the observer.

Records lacking the field the chosen mode ranks by are left out and logged.

Ties go to the first record in page order.
"""

from __future__ import annotations

import logging
import math
from typing import Sequence

from .errors import EmptySourceError
from .models import LocationRecord, ObserverLocation

LOG = logging.getLogger("distance")

R_EARTH_MI = 3958.8

MODE_COORDINATES = "coordinates"
MODE_SUPPLIED = "supplied"


def haversine_miles(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great‑circle distance (miles) between *lat1/lon1* and *lat2/lon2*."""
    φ1, φ2 = map(math.radians, (lat1, lat2))
    dφ = math.radians(lat2 - lat1)
    dλ = math.radians(lon2 - lon1)
    a = math.sin(dφ / 2) ** 2 + math.cos(φ1) * math.cos(φ2) * math.sin(dλ / 2) ** 2
    # Rounding can push *a* a hair outside [0, 1] for antipodal points.
    a = min(1.0, max(0.0, a))
    return 2 * R_EARTH_MI * math.atan2(math.sqrt(a), math.sqrt(1 - a))


def ranking_mode(records: Sequence[LocationRecord]) -> str:
    if any(r.distance_km is not None for r in records):
        return MODE_SUPPLIED
    return MODE_COORDINATES


def find_closest(
    observer: ObserverLocation,
    records: Sequence[LocationRecord],
) -> tuple[LocationRecord, float]:
    """
    Return ``(record, miles)`` for the record nearest to *observer*.

    Raises:
        EmptySourceError: nothing to rank.
    """
    if not records:
        raise EmptySourceError("No cabinet locations to rank")

    mode = ranking_mode(records)
    if mode == MODE_SUPPLIED:
        ranked = [(r, r.supplied_miles) for r in records if r.supplied_miles is not None]
        missing = "no page distance"
    else:
        ranked = [
            (r, haversine_miles(observer.lat, observer.lon, r.lat, r.lon))  # type: ignore[arg-type]
            for r in records
            if r.has_coordinates
        ]
        missing = "no coordinates"

    dropped = len(records) - len(ranked)
    if dropped:
        LOG.warning(
            "[distance] %d cabinets carry %s; left out of the ranking", dropped, missing
        )
    if not ranked:
        raise EmptySourceError("No cabinet carries a usable distance")

    # min() keeps the first of equal keys, which gives the page-order tie-break.
    best, miles = min(ranked, key=lambda pair: pair[1])
    LOG.debug("[distance] mode=%s closest=%s (%.2f mi)", mode, best.id, miles)
    return best, float(miles)  # type: ignore[arg-type]
