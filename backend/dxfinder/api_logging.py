"""
api_logging.py
~~~~~~~~~~~~~~
Tiny wrapper that prints **one concise log line** per outbound HTTP request
(the locator page fetch and the webhook post).

Usage example
-------------
>>> from .api_logging import logged_request_async
>>> async with httpx.AsyncClient() as cli:
...     resp = await logged_request_async(cli, "get", "https://example.org/")
"""

from __future__ import annotations

import logging
import time
from typing import Any

import httpx

LOG = logging.getLogger("extapi")


async def logged_request_async(
    client: httpx.AsyncClient,
    method: str,
    url: str,
    *args: Any,
    **kwargs: Any,
) -> httpx.Response:
    """
    Issue one HTTP request on *client* **and** emit a concise log line.

    Parameters
    ----------
    client:
        ``httpx.AsyncClient`` instance.
    method:
        HTTP verb – e.g. ``"get"``, ``"post"`` … **lower-case** or **upper-case**.
    url:
        Absolute URL.

    Returns
    -------
    httpx.Response
        Raw response; the caller decides what a bad status means.

    Notes
    -----
    * Transport errors are logged as ``FAIL`` and re-raised untouched.
    * Non-2xx responses are logged at *WARNING*, everything else at *INFO*.
    """
    verb = method.upper()
    t0 = time.perf_counter()
    try:
        response = await getattr(client, method.lower())(url, *args, **kwargs)
    except Exception as exc:  # network error before we get a response
        latency_ms = (time.perf_counter() - t0) * 1000.0
        LOG.warning("FAIL %s %s %.0f ms %s", verb, url, latency_ms, exc)
        raise

    latency_ms = (time.perf_counter() - t0) * 1000.0
    code = response.status_code

    if response.is_success:
        LOG.info("%s %s → %s (%.0f ms)", verb, url, code, latency_ms)
    else:
        LOG.warning("%s %s → %s (%.0f ms)", verb, url, code, latency_ms)

    return response


__all__ = ["logged_request_async"]
