"""Interval strings of the form [Nd][Nh][Nm]: parsing, validation and formatting."""

from __future__ import annotations

import re

from autoclear.errors import IntervalTooShort, InvalidIntervalFormat
from autoclear.infrastructure.config import MAX_DURATION_SECONDS, MIN_INTERVAL_SECONDS

SECONDS_PER_DAY = 86400
SECONDS_PER_HOUR = 3600
SECONDS_PER_MINUTE = 60

ZERO_DURATION = "0m"

_INTERVAL_PATTERN: re.Pattern[str] = re.compile(
    r"(?:(?P<days>[0-9]+)d)?\s*(?:(?P<hours>[0-9]+)h)?\s*(?:(?P<minutes>[0-9]+)m)?",
    re.IGNORECASE,
)


def parse_interval(text: str | None) -> int:
    """Parse an interval string into whole seconds.

    Components are optional but must appear in day, hour, minute order.
    Raises InvalidIntervalFormat when the text does not match the grammar or
    the total does not fit in 64 bits, and IntervalTooShort when it is zero.
    """
    if text is None:
        raise InvalidIntervalFormat("Interval is empty")

    trimmed = text.strip()
    if not trimmed:
        raise InvalidIntervalFormat("Interval is empty")

    match = _INTERVAL_PATTERN.fullmatch(trimmed)
    if not match:
        raise InvalidIntervalFormat(f"Invalid interval format: {text}", {"interval": text})

    total = 0
    for group, unit in (("days", SECONDS_PER_DAY), ("hours", SECONDS_PER_HOUR), ("minutes", SECONDS_PER_MINUTE)):
        value = match.group(group)
        if value is None:
            continue
        try:
            total += int(value) * unit
        except ValueError:
            # int() refuses digit strings past sys.get_int_max_str_digits()
            raise InvalidIntervalFormat(f"Interval too large: {text}", {"interval": text}) from None

    if total > MAX_DURATION_SECONDS:
        raise InvalidIntervalFormat(f"Interval too large: {text}", {"interval": text})
    if total == 0:
        raise IntervalTooShort(f"Interval must be greater than zero: {text}", {"interval": text})

    return total


def validate_interval(text: str | None, minimum: int = MIN_INTERVAL_SECONDS) -> int:
    """Parse an interval and enforce the configured minimum."""
    seconds = parse_interval(text)
    if seconds < minimum:
        raise IntervalTooShort(
            f"Interval must be at least {minimum} seconds: {text}",
            {"interval": text, "seconds": seconds, "minimum": minimum},
        )
    return seconds


def is_valid_interval(text: str | None) -> bool:
    try:
        validate_interval(text)
    except (InvalidIntervalFormat, IntervalTooShort):
        return False
    return True


def matches_interval_grammar(text: str | None) -> bool:
    """True if the text is non-empty and matches the grammar, regardless of value."""
    if not text or not text.strip():
        return False
    return _INTERVAL_PATTERN.fullmatch(text.strip()) is not None


def format_duration(total_seconds: int | None) -> str:
    """Render seconds as e.g. "1d 2h 30m".

    Seconds are only shown when there are no days or hours. Negative, unknown
    and zero durations render as "0m".
    """
    if total_seconds is None or total_seconds <= 0:
        return ZERO_DURATION

    days, rest = divmod(total_seconds, SECONDS_PER_DAY)
    hours, rest = divmod(rest, SECONDS_PER_HOUR)
    minutes, seconds = divmod(rest, SECONDS_PER_MINUTE)

    parts: list[str] = []
    if days:
        parts.append(f"{days}d")
    if hours:
        parts.append(f"{hours}h")
    if minutes:
        parts.append(f"{minutes}m")
    if seconds and not days and not hours:
        parts.append(f"{seconds}s")

    return " ".join(parts) or ZERO_DURATION
