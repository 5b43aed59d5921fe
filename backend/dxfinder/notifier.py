"""notifier.py
~~~~~~~~~~~~~
Discord webhook notification for a change of closest cabinet.

Unlike a fire-and-forget emitter, delivery here is **checked**: exactly one
POST per change, and anything but a 2xx answer raises
:class:`NotificationDeliveryError` so the monitor can log it. There is no
retry; the next cycle compares against the already-saved state.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from .api_logging import logged_request_async
from .errors import NotificationDeliveryError
from .models import ChangeEvent, ClosestResult

LOG = logging.getLogger("notifier")

WEBHOOK_TIMEOUT_SEC = 10.0
WEBHOOK_USERNAME = "DX Finder"
EMBED_COLOR = 0xE91E63  # Pink
FOOTER_TEXT = "maimai DX location monitor"


def _describe(result: ClosestResult, observer_label: str) -> str:
    rec = result.record
    return (
        f"**{rec.name}** (sid: `{rec.id}`)\n"
        f"{rec.address}\n"
        f"{result.distance_miles:.1f} mi from {observer_label}\n"
        f"[Details]({rec.details_url})"
    )


def build_payload(event: ChangeEvent) -> dict[str, Any]:
    """Webhook body describing the previous and the new closest cabinet."""
    label = event.observer_label
    return {
        "username": WEBHOOK_USERNAME,
        "content": f"Closest maimai DX cabinet changed for **{label}**.",
        "embeds": [
            {
                "title": "Closest Cabinet Updated",
                "url": event.source_url,
                "color": EMBED_COLOR,
                "timestamp": event.checked_at.isoformat(),
                "fields": [
                    {"name": "Previous", "value": _describe(event.previous, label)},
                    {"name": "New", "value": _describe(event.current, label)},
                ],
                "footer": {"text": FOOTER_TEXT},
            }
        ],
        "allowed_mentions": {"parse": []},
    }


async def send_change_notification(
    client: httpx.AsyncClient,
    webhook_url: str,
    event: ChangeEvent,
) -> None:
    """
    POST *event* to *webhook_url* once.

    Raises:
        NotificationDeliveryError: transport failure or non-2xx response.
    """
    payload = build_payload(event)
    try:
        resp = await logged_request_async(
            client, "post", webhook_url, json=payload, timeout=WEBHOOK_TIMEOUT_SEC
        )
    except httpx.HTTPError as exc:
        raise NotificationDeliveryError(f"Webhook failed: {exc}") from exc

    if not resp.is_success:
        raise NotificationDeliveryError(
            f"Webhook failed: HTTP {resp.status_code} {resp.text[:200]}",
            status_code=resp.status_code,
        )

    LOG.info(
        "[notify] closest changed %s -> %s; webhook delivered",
        event.previous.record.id,
        event.current.record.id,
    )
