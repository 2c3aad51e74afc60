"""Error taxonomy for interval validation, settings and host scheduling."""

from __future__ import annotations

from typing import Any


class AutoClearError(Exception):
    """Base error carrying structured details for logging."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.details = details or {}


class InvalidInterval(AutoClearError, ValueError):
    """An interval string was rejected."""


class InvalidIntervalFormat(InvalidInterval):
    """The text does not match the [Nd][Nh][Nm] grammar or overflows."""


class IntervalTooShort(InvalidInterval):
    """The text parses but the duration is below the allowed minimum."""


class InvalidCountdown(AutoClearError, ValueError):
    """A countdown start value is negative."""


class HostSchedulingFailure(AutoClearError):
    """The host refused to arm a timer."""


class SettingsError(AutoClearError):
    """The persisted settings file could not be read or written."""
