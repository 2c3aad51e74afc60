"""Scheduling domain types."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

from pydantic import BaseModel

if TYPE_CHECKING:
    from autoclear.host import TimerHandle
    from autoclear.scheduling.countdown import CountdownEngine


class NoticeKind(str, Enum):
    COUNTDOWN_TICK = "countdown-tick"
    SWEEP_COMPLETE = "sweep-complete"
    SWEEP_FAILED = "sweep-failed"
    STATUS = "status"


class CountdownPhase(str, Enum):
    RUNNING = "running"
    FIRED = "fired"
    CANCELLED = "cancelled"


class SetIntervalResult(str, Enum):
    SUCCESS = "success"
    INVALID_FORMAT = "invalid-format"
    INVALID_VALUE = "invalid-value"


class ToggleResult(str, Enum):
    CHANGED = "changed"
    ALREADY_RUNNING = "already-running"
    ALREADY_STOPPED = "already-stopped"
    FAILED = "failed"


class ScheduleStatus(BaseModel):
    enabled: bool
    next_fire_in_seconds: int | None = None


@dataclass
class ScheduleState:
    """Mutable scheduler state; one instance per scheduler."""

    interval: int
    countdown_lead: int
    enabled: bool = False
    next_fire_at: float | None = None
    active_countdown: CountdownEngine | None = None
    repeating_handle: TimerHandle | None = None
