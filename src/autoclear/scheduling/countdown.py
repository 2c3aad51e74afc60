"""Per-second countdown that ends in a sweep."""

from __future__ import annotations

from contextlib import nullcontext
from dataclasses import dataclass
from typing import Any, ContextManager

from autoclear.errors import InvalidCountdown
from autoclear.host import HostScheduler, Notifier, SweepExecutor, TimerHandle
from autoclear.infrastructure.config import COUNTDOWN_TICK_SECONDS
from autoclear.infrastructure.logger import logger
from autoclear.scheduling.types import CountdownPhase, NoticeKind


@dataclass(frozen=True)
class CountdownStep:
    """Outcome of one tick: the state after it and what to do at the boundary."""

    phase: CountdownPhase
    remaining: int
    announce: int | None = None

    @property
    def executes(self) -> bool:
        return self.phase is CountdownPhase.FIRED


def advance(remaining: int) -> CountdownStep:
    if remaining > 0:
        return CountdownStep(CountdownPhase.RUNNING, remaining - 1, announce=remaining)
    return CountdownStep(CountdownPhase.FIRED, 0)


class CountdownEngine:
    """Ticks from start_at down to zero, announcing each second, then sweeps.

    Terminal phases are FIRED and CANCELLED; ticks after either are ignored.
    """

    def __init__(
        self,
        start_at: int,
        host: HostScheduler,
        notifier: Notifier,
        sweep: SweepExecutor,
        tick_s: float = COUNTDOWN_TICK_SECONDS,
        lock: ContextManager[Any] | None = None,
    ) -> None:
        if start_at < 0:
            raise InvalidCountdown(f"Countdown start must not be negative: {start_at}", {"start_at": start_at})
        self._start_at = start_at
        self._remaining = start_at
        self._phase = CountdownPhase.RUNNING
        self._host = host
        self._notifier = notifier
        self._sweep = sweep
        self._tick_s = tick_s
        self._handle: TimerHandle | None = None
        self._lock: ContextManager[Any] = lock if lock is not None else nullcontext()

    @property
    def phase(self) -> CountdownPhase:
        return self._phase

    @property
    def seconds_remaining(self) -> int:
        return self._remaining

    @property
    def start_at(self) -> int:
        return self._start_at

    @property
    def running(self) -> bool:
        return self._phase is CountdownPhase.RUNNING

    def start(self) -> None:
        """Arm the per-second timer; the first tick runs immediately."""
        if self._handle is not None or not self.running:
            return
        self._handle = self._host.schedule_repeating(0, self._tick_s, self.tick)
        logger.debug("Countdown started", seconds=self._start_at)

    def tick(self) -> None:
        with self._lock:
            self._tick_locked()

    def _tick_locked(self) -> None:
        if not self.running:
            return

        step = advance(self._remaining)
        self._remaining = step.remaining

        if not step.executes:
            self._notifier.notify(NoticeKind.COUNTDOWN_TICK, {"seconds": str(step.announce)})
            return

        self._phase = step.phase
        self._release_timer()

        try:
            count = self._sweep()
        except Exception as err:
            logger.exception("Sweep failed")
            self._notifier.notify(NoticeKind.SWEEP_FAILED, {"error": str(err)})
            return

        self._notifier.notify(NoticeKind.SWEEP_COMPLETE, {"count": str(count)})

    def cancel(self) -> bool:
        """Stop a running countdown. Returns False if it had already ended."""
        if not self.running:
            return False
        self._phase = CountdownPhase.CANCELLED
        self._release_timer()
        logger.debug("Countdown cancelled", seconds_remaining=self._remaining)
        return True

    def _release_timer(self) -> None:
        if self._handle:
            self._handle.cancel()
            self._handle = None
