"""
main.py – monitor entry point
=============================

Runs check cycles forever (``dx-finder`` console script or
``python -m dxfinder``).

Loop behaviour
--------------
* First check runs immediately.
* Cycle *start* times are spaced by ``CHECK_INTERVAL_MINUTES``: after a
  cycle we wait ``max(0, interval - elapsed)``. A cycle longer than the
  interval is followed straight away by the next one.
* SIGINT / SIGTERM request a stop. An in-flight cycle always finishes
  (including its state save); a pending wait ends at once.
* Cycle failures are logged and the loop carries on. Configuration errors
  and anything unexpected end the process with a non-zero exit code.
"""

from __future__ import annotations

# ─── Std-lib / third-party ────────────────────────────────────────────
import asyncio
import contextlib
import logging
import signal
import sys
import time
from typing import Awaitable, Callable, Optional

import httpx

# ─── Project modules ──────────────────────────────────────────────────
from .config import Settings, load_settings
from .constants import USER_AGENT
from .errors import ConfigurationError, CycleError
from .models import CycleReport
from .monitor import run_check_once
from .state_store import StateStore

# ─── Logging ──────────────────────────────────────────────────────────
LOG = logging.getLogger("dx_loop")

_handler = logging.StreamHandler(sys.stdout)
_handler.setFormatter(logging.Formatter("%(levelname)s:     %(name)s - %(message)s"))

CheckFn = Callable[[Settings, httpx.AsyncClient, StateStore], Awaitable[CycleReport]]


def configure_logging(level: str = "INFO") -> None:
    """Send every logger to stdout with a compact one-line format."""
    root = logging.getLogger()
    if _handler not in root.handlers:
        root.addHandler(_handler)
    numeric = logging.getLevelName(level.upper())
    root.setLevel(numeric if isinstance(numeric, int) else logging.INFO)
    # httpx logs every request at INFO; api_logging already does that.
    logging.getLogger("httpx").setLevel(logging.WARNING)


# ---------------------------------------------------------------------
# Orchestrator
# ---------------------------------------------------------------------
class Monitor:
    """
    Two states: running, and stop-requested (terminal once the current
    cycle is done).
    """

    def __init__(
        self,
        settings: Settings,
        *,
        store: Optional[StateStore] = None,
        check: CheckFn = run_check_once,
        interval: Optional[float] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.settings = settings
        self.store = store or StateStore(settings.state_file)
        self.interval = settings.check_interval_seconds if interval is None else interval
        self.cycles = 0
        self._check = check
        self._clock = clock
        self._stop = asyncio.Event()

    @property
    def stop_requested(self) -> bool:
        return self._stop.is_set()

    def request_stop(self) -> None:
        if not self._stop.is_set():
            LOG.info("[loop] stop signal received; exiting after current cycle")
        self._stop.set()

    async def _run_cycle(self, client: httpx.AsyncClient) -> Optional[CycleReport]:
        try:
            report = await self._check(self.settings, client, self.store)
        except CycleError as exc:
            LOG.error("[loop] check cycle failed: %s: %s", type(exc).__name__, exc)
            return None
        finally:
            self.cycles += 1
        LOG.info(
            "[loop] cycle %d done: %s (%d cabinets)",
            self.cycles,
            report.outcome.value,
            report.record_count,
        )
        return report

    async def _sleep(self, seconds: float) -> None:
        """Wait *seconds* or until a stop is requested, whichever is first."""
        if seconds <= 0:
            return
        with contextlib.suppress(asyncio.TimeoutError):
            await asyncio.wait_for(self._stop.wait(), timeout=seconds)

    async def run(self, client: Optional[httpx.AsyncClient] = None) -> None:
        LOG.info(
            "[loop] starting; checking every %g minute(s)",
            self.interval / 60.0,
        )
        obs = self.settings.observer
        LOG.info("[loop] target location: %s (%s, %s)", obs.label, obs.lat, obs.lon)

        async with contextlib.AsyncExitStack() as stack:
            if client is None:
                client = await stack.enter_async_context(
                    httpx.AsyncClient(
                        headers={"User-Agent": USER_AGENT}, follow_redirects=True
                    )
                )

            while not self.stop_requested:
                started = self._clock()
                await self._run_cycle(client)

                if self.stop_requested:
                    break

                remaining = max(0.0, self.interval - (self._clock() - started))
                LOG.info("[loop] next check in %.0fs", remaining)
                await self._sleep(remaining)

        LOG.info("[loop] stopped after %d cycle(s)", self.cycles)


def install_signal_handlers(monitor: Monitor) -> None:
    """Map SIGINT and SIGTERM onto :meth:`Monitor.request_stop`."""
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, monitor.request_stop)
        except NotImplementedError:  # Windows event loops
            signal.signal(
                sig, lambda *_: loop.call_soon_threadsafe(monitor.request_stop)
            )


async def _serve(settings: Settings) -> None:
    monitor = Monitor(settings)
    install_signal_handlers(monitor)
    await monitor.run()


def main() -> int:
    configure_logging()
    try:
        settings = load_settings()
    except ConfigurationError as exc:
        LOG.error("[config] %s", exc)
        return 2
    configure_logging(settings.log_level)

    try:
        asyncio.run(_serve(settings))
    except Exception as exc:  # noqa: BLE001 – report, then exit non-zero
        LOG.critical("[loop] monitor failed: %s", exc, exc_info=True)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
