"""Tests for the host timer implementations."""

import asyncio
import time

import pytest

from autoclear.errors import HostSchedulingFailure
from autoclear.infrastructure.timers import AsyncioTimerHost, TickLoop


class TestTickLoop:
    def test_time_moves_only_on_advance(self):
        loop = TickLoop(start=5.0)
        assert loop.now() == 5.0
        loop.advance(2.5)
        assert loop.now() == 7.5

    def test_once_fires_at_due_time(self):
        loop = TickLoop()
        seen = []
        loop.schedule_once(3, lambda: seen.append(loop.now()))
        loop.advance(2)
        assert seen == []
        loop.advance(1)
        assert seen == [3.0]
        loop.advance(10)
        assert seen == [3.0]

    def test_repeating_keeps_period(self):
        loop = TickLoop()
        seen = []
        loop.schedule_repeating(1, 2, lambda: seen.append(loop.now()))
        assert loop.advance(7) == 4
        assert seen == [1.0, 3.0, 5.0, 7.0]

    def test_zero_delay_fires_on_next_advance(self):
        loop = TickLoop()
        seen = []
        loop.schedule_repeating(0, 1, lambda: seen.append(loop.now()))
        loop.advance(0)
        assert seen == [0.0]

    def test_timer_armed_in_callback_fires_same_advance(self):
        loop = TickLoop()
        seen = []
        loop.schedule_once(1, lambda: loop.schedule_once(0, lambda: seen.append(loop.now())))
        loop.advance(1)
        assert seen == [1.0]

    def test_cancel(self):
        loop = TickLoop()
        seen = []
        handle = loop.schedule_repeating(1, 1, lambda: seen.append(1))
        loop.advance(2)
        handle.cancel()
        handle.cancel()
        loop.advance(5)
        assert len(seen) == 2
        assert handle.cancelled
        assert loop.pending == 0

    def test_self_cancel_from_callback(self):
        loop = TickLoop()
        seen = []
        holder = []

        def callback():
            seen.append(1)
            holder[0].cancel()

        holder.append(loop.schedule_repeating(0, 1, callback))
        loop.advance(5)
        assert seen == [1]

    def test_callback_error_is_contained(self):
        loop = TickLoop()
        seen = []

        def callback():
            seen.append(1)
            raise RuntimeError("boom")

        loop.schedule_repeating(1, 1, callback)
        loop.advance(3)
        assert len(seen) == 3

    @pytest.mark.parametrize("delay", [-1, float("inf"), float("nan")])
    def test_rejects_bad_delay(self, delay):
        with pytest.raises(HostSchedulingFailure):
            TickLoop().schedule_once(delay, lambda: None)

    def test_rejects_zero_period(self):
        with pytest.raises(HostSchedulingFailure):
            TickLoop().schedule_repeating(0, 0, lambda: None)


class TestAsyncioTimerHost:
    def test_requires_running_loop(self):
        with pytest.raises(HostSchedulingFailure, match="No running event loop"):
            AsyncioTimerHost().schedule_once(1, lambda: None)

    @pytest.mark.asyncio
    async def test_once_fires(self):
        host = AsyncioTimerHost()
        fired = asyncio.Event()
        host.schedule_once(0.01, fired.set)
        await asyncio.wait_for(fired.wait(), timeout=1)

    @pytest.mark.asyncio
    async def test_once_cancelled(self):
        host = AsyncioTimerHost()
        seen = []
        handle = host.schedule_once(0.02, lambda: seen.append(1))
        handle.cancel()
        await asyncio.sleep(0.05)
        assert seen == []
        assert handle.cancelled

    @pytest.mark.asyncio
    async def test_repeating_fires_until_cancelled(self):
        host = AsyncioTimerHost()
        seen = []
        handle = host.schedule_repeating(0, 0.02, lambda: seen.append(1))
        await asyncio.sleep(0.09)
        handle.cancel()
        count = len(seen)
        await asyncio.sleep(0.06)
        assert count >= 3
        assert len(seen) == count

    @pytest.mark.asyncio
    async def test_repeating_survives_callback_error(self):
        host = AsyncioTimerHost()
        seen = []

        def callback():
            seen.append(1)
            raise RuntimeError("boom")

        handle = host.schedule_repeating(0, 0.01, callback)
        await asyncio.sleep(0.06)
        handle.cancel()
        assert len(seen) >= 2

    @pytest.mark.asyncio
    async def test_self_cancel_stops_after_current_callback(self):
        host = AsyncioTimerHost()
        seen = []
        holder = []

        def callback():
            seen.append(1)
            holder[0].cancel()

        holder.append(host.schedule_repeating(0, 0.01, callback))
        await asyncio.sleep(0.05)
        assert seen == [1]

    def test_now_is_wall_clock(self):
        assert abs(AsyncioTimerHost().now() - time.time()) < 1
