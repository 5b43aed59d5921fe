"""
tests/integration/test_locator_page.py
~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
Check that the live maimai DX locator still has the markup shape the
extractor expects. A failure here is the early warning for markup drift.

Run with:
    INTEGRATION_TESTS=1 pytest tests/integration/test_locator_page.py -v
"""

from __future__ import annotations

import pytest

from dxfinder.distance import find_closest
from dxfinder.extractor import extract
from dxfinder.source_service import fetch_listing


class TestLocatorPage:
    """Live fetch → extract → rank."""

    @pytest.mark.asyncio
    async def test_page_yields_records(self, live_client, source_url, observer) -> None:
        markup = await fetch_listing(live_client, source_url)

        records = extract(markup, source_url)

        assert records, "No cabinets parsed - markup may have changed"
        for record in records:
            assert record.id.isdigit()
            assert record.name
            assert record.address
            assert record.source_url == source_url
            assert record.details_url.endswith(f"sid={record.id}&lang=en")

        best, miles = find_closest(observer, records)
        assert miles >= 0.0
        assert best in records
