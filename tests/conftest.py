"""
tests/conftest.py
~~~~~~~~~~~~~~~~~
Global pytest fixtures.

`isolate_environment` strips every variable the settings loader reads and
moves the working directory into *tmp_path*, so the default relative
``state/closest-cabinet.json`` never lands inside the repository.
"""

from __future__ import annotations

import datetime as dt
from pathlib import Path
from typing import Callable

import pytest

from dxfinder.config import DEFAULT_LOCATION, Settings
from dxfinder.models import ClosestResult, LocationRecord
from dxfinder.state_store import StateStore

pytest_plugins = ["pytest_asyncio"]

FIXTURES = Path(__file__).parent / "fixtures"

ENV_VARS = (
    "TARGET_LAT",
    "TARGET_LON",
    "TARGET_LABEL",
    "CHECK_INTERVAL_MINUTES",
    "STATE_FILE",
    "WEBHOOK_URL",
    "LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def isolate_environment(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def load_fixture() -> Callable[[str], str]:
    """Return the text of a recorded markup file under tests/fixtures/."""

    def _load(name: str) -> str:
        return (FIXTURES / name).read_text(encoding="utf-8")

    return _load


@pytest.fixture
def state_path(tmp_path: Path) -> Path:
    return tmp_path / "state" / "closest-cabinet.json"


@pytest.fixture
def store(state_path: Path) -> StateStore:
    return StateStore(state_path)


@pytest.fixture
def make_settings(state_path: Path) -> Callable[..., Settings]:
    def _make(webhook_url: str | None = None, **kwargs) -> Settings:
        kwargs.setdefault("observer", DEFAULT_LOCATION)
        kwargs.setdefault("state_file", state_path)
        return Settings(webhook_url=webhook_url, **kwargs)

    return _make


def make_record(cabinet_id: str = "1234", **kwargs) -> LocationRecord:
    """Build a LocationRecord with sensible defaults for tests."""
    kwargs.setdefault("name", f"Arcade {cabinet_id}")
    kwargs.setdefault("address", f"{cabinet_id} Main St, Nashville, TN")
    kwargs.setdefault(
        "details_url",
        f"https://location.am-all.net/alm/shop?gm=98&astep=-1&sid={cabinet_id}&lang=en",
    )
    kwargs.setdefault("source_url", "https://location.am-all.net/alm/location?gm=98")
    return LocationRecord(id=cabinet_id, **kwargs)


def make_result(
    cabinet_id: str = "1234",
    miles: float = 7.6,
    checked_at: dt.datetime | None = None,
    **kwargs,
) -> ClosestResult:
    kwargs.setdefault("distance_km", round(miles / 0.621371, 3))
    return ClosestResult(
        record=make_record(cabinet_id, **kwargs),
        distance_miles=miles,
        checked_at=checked_at
        or dt.datetime(2026, 10, 1, 12, 0, tzinfo=dt.timezone.utc),
    )
