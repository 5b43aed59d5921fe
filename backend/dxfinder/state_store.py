"""
state_store.py
~~~~~~~~~~~~~~
Keep the **last closest cabinet** in a small JSON file so the next check has
something to compare against.

* Missing file   → ``load()`` returns *None* (first run).
* Unreadable file → :class:`CorruptStateError`; the file is left as is so a
  human can look at it instead of us silently re-initialising.
* ``save()`` writes a temp file next to the target and renames it over the
  old one, so a crash never leaves half a JSON document behind.
"""

from __future__ import annotations

import contextlib
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Optional

from dateutil import parser as date_parser
from dateutil import tz

from .errors import CorruptStateError
from .models import ClosestResult, PersistedState, record_from_json, state_to_json

LOG = logging.getLogger("state_store")


def _parse_checked_at(raw: object):
    if not isinstance(raw, str):
        raise TypeError("checkedAt must be a string")
    ts = date_parser.isoparse(raw)
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=tz.UTC)
    return ts


class StateStore:
    """JSON file holding one :class:`PersistedState`."""

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)

    def load(self) -> Optional[PersistedState]:
        """
        Read the previous closest result.

        Returns:
            The stored state, or *None* when no state file exists yet.

        Raises:
            CorruptStateError: the file exists but cannot be understood.
        """
        if not self.path.exists():
            return None

        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
            if not isinstance(data, dict) or not isinstance(data.get("closest"), dict):
                raise ValueError("expected an object with a 'closest' object")
            state = ClosestResult(
                record=record_from_json(data["closest"]),
                distance_miles=_distance_miles(data["closest"]),
                checked_at=_parse_checked_at(data.get("checkedAt")),
            )
        except (OSError, ValueError, KeyError, TypeError) as exc:
            raise CorruptStateError(f"State file {self.path} is unreadable: {exc}") from exc

        LOG.debug("[state] loaded sid=%s from %s", state.record.id, self.path)
        return state

    def save(self, state: PersistedState) -> None:
        """Atomically replace the state file with *state*."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        payload = json.dumps(state_to_json(state), indent=2) + "\n"

        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{self.path.name}.", suffix=".tmp", dir=self.path.parent
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(payload)
                fh.flush()
                os.fsync(fh.fileno())
            os.replace(tmp_name, self.path)
        except BaseException:
            with contextlib.suppress(OSError):
                os.unlink(tmp_name)
            raise

        LOG.info("[state] saved sid=%s to %s", state.record.id, self.path)


def _distance_miles(closest: dict) -> float:
    miles = closest.get("distanceMiles")
    if isinstance(miles, bool) or not isinstance(miles, (int, float)):
        raise ValueError("distanceMiles must be a number")
    return float(miles)

