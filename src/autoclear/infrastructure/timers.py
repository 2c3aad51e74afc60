"""Host timer implementations: an asyncio event loop and a manually advanced tick loop."""

from __future__ import annotations

import asyncio
import heapq
import itertools
import math
import time

from autoclear.errors import HostSchedulingFailure
from autoclear.host import TimerCallback
from autoclear.infrastructure.logger import logger


def _run_callback(callback: TimerCallback) -> None:
    try:
        callback()
    except Exception:
        logger.exception("Error in timer callback", callback=getattr(callback, "__qualname__", repr(callback)))


def _check_delay(delay_s: float, name: str) -> None:
    if not math.isfinite(delay_s) or delay_s < 0:
        raise HostSchedulingFailure(f"Invalid {name}: {delay_s}", {name: delay_s})


# --- asyncio ---


class AsyncioOnceHandle:
    def __init__(self) -> None:
        self._timer: asyncio.TimerHandle | None = None
        self._cancelled = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        if self._cancelled:
            return
        self._cancelled = True
        if self._timer:
            self._timer.cancel()
            self._timer = None


class AsyncioRepeatingHandle:
    def __init__(self) -> None:
        self._task: asyncio.Task[None] | None = None
        self._cancelled = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        """Stop the timer. A callback already running finishes first."""
        if self._cancelled:
            return
        self._cancelled = True
        if self._task:
            self._task.cancel()
            self._task = None


class AsyncioTimerHost:
    """Schedules callbacks on an asyncio event loop.

    Repeating timers are anchored to the loop clock, so the n-th fire is due at
    start + initial_delay + n * period regardless of how long callbacks take.
    A late fire delays, but never skips or repeats, the following one.
    """

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        self._loop = loop

    def _get_loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is not None:
            if self._loop.is_closed():
                raise HostSchedulingFailure("Event loop is closed")
            return self._loop
        try:
            return asyncio.get_running_loop()
        except RuntimeError as err:
            raise HostSchedulingFailure("No running event loop") from err

    def now(self) -> float:
        return time.time()

    def schedule_once(self, delay_s: float, callback: TimerCallback) -> AsyncioOnceHandle:
        _check_delay(delay_s, "delay_s")
        loop = self._get_loop()
        handle = AsyncioOnceHandle()

        def fire() -> None:
            if handle.cancelled:
                return
            handle._timer = None
            _run_callback(callback)

        handle._timer = loop.call_later(delay_s, fire)
        return handle

    def schedule_repeating(
        self, initial_delay_s: float, period_s: float, callback: TimerCallback
    ) -> AsyncioRepeatingHandle:
        _check_delay(initial_delay_s, "initial_delay_s")
        _check_delay(period_s, "period_s")
        if period_s == 0:
            raise HostSchedulingFailure("Repeating period must be positive")

        loop = self._get_loop()
        handle = AsyncioRepeatingHandle()
        handle._task = loop.create_task(self._repeat(loop, handle, initial_delay_s, period_s, callback))
        return handle

    async def _repeat(
        self,
        loop: asyncio.AbstractEventLoop,
        handle: AsyncioRepeatingHandle,
        initial_delay_s: float,
        period_s: float,
        callback: TimerCallback,
    ) -> None:
        due = loop.time() + initial_delay_s
        try:
            while not handle.cancelled:
                await asyncio.sleep(max(0.0, due - loop.time()))
                if handle.cancelled:
                    break
                _run_callback(callback)
                due += period_s
        except asyncio.CancelledError:
            pass


# --- manual tick loop ---


class TickTimer:
    def __init__(self, callback: TimerCallback, period_s: float | None) -> None:
        self.callback = callback
        self.period_s = period_s
        self._cancelled = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        self._cancelled = True


class TickLoop:
    """Single-threaded host where time only moves when advance() is called.

    Timers due at or before the new time fire in due order; a timer armed
    from inside a callback with zero delay fires within the same advance().
    """

    def __init__(self, start: float = 0.0) -> None:
        self._now = start
        self._queue: list[tuple[float, int, TickTimer]] = []
        self._seq = itertools.count()

    def now(self) -> float:
        return self._now

    def schedule_once(self, delay_s: float, callback: TimerCallback) -> TickTimer:
        _check_delay(delay_s, "delay_s")
        return self._push(self._now + delay_s, TickTimer(callback, None))

    def schedule_repeating(self, initial_delay_s: float, period_s: float, callback: TimerCallback) -> TickTimer:
        _check_delay(initial_delay_s, "initial_delay_s")
        _check_delay(period_s, "period_s")
        if period_s == 0:
            raise HostSchedulingFailure("Repeating period must be positive")
        return self._push(self._now + initial_delay_s, TickTimer(callback, period_s))

    def _push(self, due: float, timer: TickTimer) -> TickTimer:
        heapq.heappush(self._queue, (due, next(self._seq), timer))
        return timer

    def advance(self, seconds: float = 0.0) -> int:
        """Move time forward, firing due timers. Returns the number of callbacks run."""
        target = self._now + seconds
        fired = 0
        while self._queue and self._queue[0][0] <= target:
            due, _, timer = heapq.heappop(self._queue)
            if timer.cancelled:
                continue
            self._now = max(self._now, due)
            if timer.period_s is not None:
                self._push(due + timer.period_s, timer)
            _run_callback(timer.callback)
            fired += 1
        self._now = target
        return fired

    @property
    def pending(self) -> int:
        return sum(1 for _, _, timer in self._queue if not timer.cancelled)
