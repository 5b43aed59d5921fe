"""
errors.py
~~~~~~~~~
Exception taxonomy.

* :class:`CycleError` and its children are **cycle-fatal**: the monitor
  logs them and moves on to the next scheduled check.
* :class:`ConfigurationError` is raised only while reading settings, before
  the loop starts, and ends the process.
"""

from __future__ import annotations


class DxFinderError(Exception):
    """Base class for every error raised on purpose by this package."""


class ConfigurationError(DxFinderError):
    """Inconsistent or invalid startup parameters."""


class CycleError(DxFinderError):
    """A check cycle failed; the next scheduled cycle will try again."""


class SourceFetchError(CycleError):
    """The locator page could not be fetched (transport error or non-2xx)."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class EmptySourceError(CycleError):
    """Extraction produced no valid record – most likely markup drift."""


class CorruptStateError(CycleError):
    """The state file exists but does not hold a readable closest result."""


class NotificationDeliveryError(CycleError):
    """The webhook did not accept the change notification."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


__all__ = [
    "ConfigurationError",
    "CorruptStateError",
    "CycleError",
    "DxFinderError",
    "EmptySourceError",
    "NotificationDeliveryError",
    "SourceFetchError",
]
