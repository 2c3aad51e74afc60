"""Interfaces the scheduling core consumes from its host environment."""

from __future__ import annotations

from typing import Callable, Protocol

from autoclear.scheduling.types import NoticeKind
from autoclear.infrastructure.settings import Settings

TimerCallback = Callable[[], None]
SweepExecutor = Callable[[], int]


class TimerHandle(Protocol):
    """A registered timer. cancel() is idempotent and stops all future callbacks."""

    def cancel(self) -> None: ...

    @property
    def cancelled(self) -> bool: ...


class HostScheduler(Protocol):
    """Time source and timer registration, all callbacks on one loop."""

    def now(self) -> float: ...

    def schedule_once(self, delay_s: float, callback: TimerCallback) -> TimerHandle: ...

    def schedule_repeating(self, initial_delay_s: float, period_s: float, callback: TimerCallback) -> TimerHandle: ...


class Notifier(Protocol):
    """Delivers notices to observers; fire-and-forget."""

    def notify(self, kind: NoticeKind, params: dict[str, str]) -> None: ...


class SettingsStore(Protocol):
    def load(self) -> Settings: ...

    def save(self, settings: Settings) -> None: ...
