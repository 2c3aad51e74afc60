"""Fire time arithmetic for the auto clear cycle."""

from __future__ import annotations

import math


def first_fire_delay(interval: int, countdown_lead: int) -> int:
    """Delay before the first countdown starts after (re)arming.

    The countdown should finish on the interval boundary, so it begins
    countdown_lead seconds early. A lead that covers the whole interval
    defers by a full interval rather than starting at once.
    """
    if countdown_lead >= interval:
        return interval
    return max(0, interval - countdown_lead)


def next_fire_at(now: float, interval: int) -> float:
    return now + interval


def time_remaining(fire_at: float | None, now: float) -> int | None:
    """Whole seconds until fire_at, never negative; None when nothing is scheduled."""
    if fire_at is None:
        return None
    return max(0, math.floor(fire_at - now))
