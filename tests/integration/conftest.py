"""
tests/integration/conftest.py
~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
Live locator fixtures. Everything in this directory is skipped unless
INTEGRATION_TESTS=1, so the default run never touches the network.

    INTEGRATION_TESTS=1 pytest tests/integration/ -v
"""

from __future__ import annotations

import os
import time
from typing import AsyncIterator, Iterator

import httpx
import pytest
import pytest_asyncio

from dxfinder.config import DEFAULT_LOCATION
from dxfinder.constants import USER_AGENT
from dxfinder.models import ObserverLocation
from dxfinder.source_service import build_source_url

LIVE_TIMEOUT = 30.0


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    if os.getenv("INTEGRATION_TESTS") == "1":
        return

    skip_live = pytest.mark.skip(reason="live locator tests need INTEGRATION_TESTS=1")
    for item in items:
        if "integration" in str(item.fspath):
            item.add_marker(skip_live)


@pytest.fixture
def observer() -> ObserverLocation:
    return DEFAULT_LOCATION


@pytest.fixture
def source_url(observer: ObserverLocation) -> str:
    """Locator query for the default observer, exactly as the monitor builds it."""
    return build_source_url(observer)


@pytest.fixture
def polite_pause() -> Iterator[None]:
    # One request per second at most against the public locator.
    yield
    time.sleep(1.0)


@pytest_asyncio.fixture
async def live_client(polite_pause) -> AsyncIterator[httpx.AsyncClient]:
    async with httpx.AsyncClient(
        timeout=LIVE_TIMEOUT,
        headers={"User-Agent": USER_AGENT},
        follow_redirects=True,
    ) as client:
        yield client
