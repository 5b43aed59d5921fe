"""monitor.py
~~~~~~~~~~~~
One **check cycle**: fetch → extract → rank → load previous → save → compare
→ (maybe) notify.

The new state is written *before* the webhook is attempted, so a failed
notification never reverts or blocks it and is not retried next time.
"""

from __future__ import annotations

import datetime as dt
import logging
from typing import Optional

import httpx
from dateutil import tz

from .config import Settings
from .distance import find_closest
from .extractor import extract
from .models import ChangeEvent, CheckOutcome, ClosestResult, CycleReport, PersistedState
from .notifier import send_change_notification
from .source_service import build_source_url, fetch_listing
from .state_store import StateStore

UTC = tz.UTC
LOG = logging.getLogger("monitor")


def detect_change(
    previous: Optional[PersistedState],
    current: ClosestResult,
    observer_label: str,
) -> Optional[ChangeEvent]:
    """
    Compare two closest results by cabinet id.

    Returns a :class:`ChangeEvent` only when a previous result exists and its
    id differs from *current*'s.
    """
    if previous is None:
        return None
    if previous.record.id == current.record.id:
        return None
    return ChangeEvent(previous=previous, current=current, observer_label=observer_label)


async def run_check_once(
    settings: Settings,
    client: httpx.AsyncClient,
    store: StateStore,
    now: Optional[dt.datetime] = None,
) -> CycleReport:
    """
    Execute a single check cycle.

    Raises:
        SourceFetchError, EmptySourceError: before any state is touched.
        CorruptStateError: before any state is touched.
        NotificationDeliveryError: after the new state has been saved.
    """
    observer = settings.observer
    source_url = build_source_url(observer)

    markup = await fetch_listing(client, source_url)
    records = extract(markup, source_url)
    closest, miles = find_closest(observer, records)

    previous = store.load()
    checked_at = now or dt.datetime.now(UTC)
    current = ClosestResult(record=closest, distance_miles=miles, checked_at=checked_at)
    store.save(current)

    LOG.info(
        "[check] closest to %s: %s [sid=%s] - %s (%.1f mi)",
        observer.label,
        closest.name,
        closest.id,
        closest.address,
        miles,
    )

    if previous is None:
        LOG.info(
            "[check] no previous state at %s; initialized without notifying",
            store.path,
        )
        return CycleReport(CheckOutcome.INITIALIZED, current, len(records))

    event = detect_change(previous, current, observer.label)
    if event is None:
        LOG.info("[check] closest cabinet unchanged; no webhook sent")
        return CycleReport(CheckOutcome.UNCHANGED, current, len(records), previous)

    if not settings.notifications_enabled:
        LOG.info(
            "[check] closest cabinet changed %s -> %s, but WEBHOOK_URL is not set",
            previous.record.id,
            closest.id,
        )
        return CycleReport(
            CheckOutcome.NOTIFICATION_SKIPPED, current, len(records), previous
        )

    await send_change_notification(client, settings.webhook_url or "", event)
    return CycleReport(CheckOutcome.NOTIFIED, current, len(records), previous)
