"""
models.py
~~~~~~~~~
Value objects passed between the pipeline stages, plus the JSON shape of the
state file.

State file example
------------------
    {
      "checkedAt": "2026-10-19T14:00:00.123456+00:00",
      "closest": {
        "id": "1234",
        "name": "Round1 Opry Mills",
        "address": "433 Opry Mills Dr, Nashville, TN",
        "distanceKm": 12.3,
        "detailsUrl": "https://location.am-all.net/alm/shop?...&sid=1234&lang=en",
        "sourceUrl": "https://location.am-all.net/alm/location?...",
        "distanceMiles": 7.6
      }
    }
"""

from __future__ import annotations

import datetime as dt
import enum
from dataclasses import dataclass
from typing import Any, Optional, TypedDict

from .constants import KM_TO_MILES


@dataclass(frozen=True)
class ObserverLocation:
    """The fixed spot we measure every cabinet against."""

    lat: float
    lon: float
    label: str


@dataclass(frozen=True)
class LocationRecord:
    """One cabinet listing pulled out of the locator page."""

    id: str
    name: str
    address: str
    details_url: str
    source_url: str
    lat: Optional[float] = None
    lon: Optional[float] = None
    distance_km: Optional[float] = None

    @property
    def has_coordinates(self) -> bool:
        return self.lat is not None and self.lon is not None

    @property
    def supplied_miles(self) -> Optional[float]:
        """Distance reported by the page itself, converted to miles."""
        if self.distance_km is None:
            return None
        return self.distance_km * KM_TO_MILES


@dataclass(frozen=True)
class ClosestResult:
    record: LocationRecord
    distance_miles: float
    checked_at: dt.datetime


# The persisted state is simply the last closest result.
PersistedState = ClosestResult


@dataclass(frozen=True)
class ChangeEvent:
    """Transition between two checks' closest cabinets."""

    previous: ClosestResult
    current: ClosestResult
    observer_label: str

    @property
    def checked_at(self) -> dt.datetime:
        return self.current.checked_at

    @property
    def source_url(self) -> str:
        return self.current.record.source_url


class CheckOutcome(str, enum.Enum):
    INITIALIZED = "initialized"
    UNCHANGED = "unchanged"
    NOTIFIED = "notified"
    NOTIFICATION_SKIPPED = "notification_skipped"


@dataclass(frozen=True)
class CycleReport:
    outcome: CheckOutcome
    result: ClosestResult
    record_count: int
    previous: Optional[ClosestResult] = None


# ── JSON shape ────────────────────────────────────────────────────────────
class ClosestJSON(TypedDict, total=False):
    id: str
    name: str
    address: str
    distanceKm: float
    lat: float
    lon: float
    detailsUrl: str
    sourceUrl: str
    distanceMiles: float


class StateJSON(TypedDict):
    checkedAt: str  # ISO-8601
    closest: ClosestJSON


def state_to_json(state: ClosestResult) -> StateJSON:
    rec = state.record
    closest: ClosestJSON = {
        "id": rec.id,
        "name": rec.name,
        "address": rec.address,
    }
    if rec.distance_km is not None:
        closest["distanceKm"] = rec.distance_km
    if rec.has_coordinates:
        closest["lat"] = rec.lat  # type: ignore[typeddict-item]
        closest["lon"] = rec.lon  # type: ignore[typeddict-item]
    closest["detailsUrl"] = rec.details_url
    closest["sourceUrl"] = rec.source_url
    closest["distanceMiles"] = state.distance_miles
    return {"checkedAt": state.checked_at.isoformat(), "closest": closest}


def _optional_float(data: dict[str, Any], key: str) -> Optional[float]:
    value = data.get(key)
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"{key} must be a number, got {value!r}")
    return float(value)


def record_from_json(data: dict[str, Any]) -> LocationRecord:
    """
    Rebuild a record from its state-file form.

    Raises:
        ValueError / KeyError / TypeError on a malformed mapping.
    """
    for key in ("id", "name", "address", "detailsUrl", "sourceUrl"):
        if not isinstance(data[key], str):
            raise TypeError(f"{key} must be a string")
    if not data["id"]:
        raise ValueError("id must not be empty")
    return LocationRecord(
        id=data["id"],
        name=data["name"],
        address=data["address"],
        details_url=data["detailsUrl"],
        source_url=data["sourceUrl"],
        lat=_optional_float(data, "lat"),
        lon=_optional_float(data, "lon"),
        distance_km=_optional_float(data, "distanceKm"),
    )
