"""
config.py
~~~~~~~~~
Read the environment **once** at startup and freeze it into a
:class:`Settings` value that is handed to the monitor.

Environment
-----------
    TARGET_LAT / TARGET_LON   Observer coordinates – both or neither.
    TARGET_LABEL              Human-readable name for custom coordinates.
    CHECK_INTERVAL_MINUTES    Positive integer (anything else → 60).
    STATE_FILE                JSON state path (default state/closest-cabinet.json).
    WEBHOOK_URL               Discord webhook; empty/unset disables notifications.
    LOG_LEVEL                 Root log level (default INFO).

A local ``.env`` file is honoured through python-dotenv.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from dotenv import load_dotenv
from geopy.point import Point

from .errors import ConfigurationError
from .models import ObserverLocation

LOG = logging.getLogger("config")

DEFAULT_LOCATION = ObserverLocation(lat=36.1627, lon=-86.7816, label="Nashville, TN")
DEFAULT_INTERVAL_MINUTES = 60
DEFAULT_STATE_FILE = "state/closest-cabinet.json"


@dataclass(frozen=True)
class Settings:
    observer: ObserverLocation = DEFAULT_LOCATION
    check_interval_minutes: int = DEFAULT_INTERVAL_MINUTES
    state_file: Path = Path(DEFAULT_STATE_FILE)
    webhook_url: Optional[str] = None
    log_level: str = "INFO"

    @property
    def check_interval_seconds(self) -> float:
        return self.check_interval_minutes * 60.0

    @property
    def notifications_enabled(self) -> bool:
        return bool(self.webhook_url)


def _parse_interval(raw: str | None) -> int:
    """Positive integer minutes, or the default for anything else."""
    if raw is None or not raw.strip():
        return DEFAULT_INTERVAL_MINUTES
    try:
        minutes = int(raw.strip())
    except ValueError:
        LOG.warning(
            "[config] CHECK_INTERVAL_MINUTES=%r is not an integer; using %d",
            raw,
            DEFAULT_INTERVAL_MINUTES,
        )
        return DEFAULT_INTERVAL_MINUTES
    if minutes <= 0:
        LOG.warning(
            "[config] CHECK_INTERVAL_MINUTES=%d is not positive; using %d",
            minutes,
            DEFAULT_INTERVAL_MINUTES,
        )
        return DEFAULT_INTERVAL_MINUTES
    return minutes


def _parse_observer(env: Mapping[str, str]) -> ObserverLocation:
    lat_raw = (env.get("TARGET_LAT") or "").strip()
    lon_raw = (env.get("TARGET_LON") or "").strip()
    label = (env.get("TARGET_LABEL") or "").strip() or DEFAULT_LOCATION.label

    if not lat_raw and not lon_raw:
        return DEFAULT_LOCATION
    if not lat_raw or not lon_raw:
        raise ConfigurationError("Both TARGET_LAT and TARGET_LON must be set together.")

    try:
        lat = float(lat_raw)
        lon = float(lon_raw)
    except ValueError as exc:
        raise ConfigurationError("TARGET_LAT and TARGET_LON must be valid numbers.") from exc

    # geopy rejects NaN and out-of-range latitudes; longitudes it would wrap.
    if not -180.0 <= lon <= 180.0:
        raise ConfigurationError(f"TARGET_LON out of range: {lon}")
    try:
        point = Point(lat, lon)
    except ValueError as exc:
        raise ConfigurationError(f"Invalid target coordinates: {exc}") from exc

    return ObserverLocation(lat=point.latitude, lon=point.longitude, label=label)


def load_settings(environ: Mapping[str, str] | None = None) -> Settings:
    """
    Build :class:`Settings` from *environ* (defaults to ``os.environ`` after
    loading ``.env``).

    Raises:
        ConfigurationError: partial or invalid observer coordinates.
    """
    if environ is None:
        load_dotenv()
        environ = os.environ

    observer = _parse_observer(environ)
    interval = _parse_interval(environ.get("CHECK_INTERVAL_MINUTES"))
    state_file = Path(
        (environ.get("STATE_FILE") or "").strip() or DEFAULT_STATE_FILE
    ).expanduser()
    webhook_url = (environ.get("WEBHOOK_URL") or "").strip() or None
    log_level = (environ.get("LOG_LEVEL") or "INFO").strip().upper() or "INFO"

    if webhook_url is None:
        LOG.info("[config] WEBHOOK_URL is not set; change notifications are disabled.")

    return Settings(
        observer=observer,
        check_interval_minutes=interval,
        state_file=state_file,
        webhook_url=webhook_url,
        log_level=log_level,
    )
