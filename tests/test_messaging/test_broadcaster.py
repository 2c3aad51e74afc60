"""Tests for notice rendering and delivery."""

import pytest

from autoclear.messaging.broadcaster import Broadcaster
from autoclear.messaging.catalog import MessageCatalog
from autoclear.scheduling.types import NoticeKind


@pytest.fixture
def delivered() -> list[str]:
    return []


@pytest.fixture
def broadcaster(delivered) -> Broadcaster:
    return Broadcaster(MessageCatalog(), delivered.append)


class TestBroadcaster:
    def test_countdown_tick(self, broadcaster, delivered):
        broadcaster.notify(NoticeKind.COUNTDOWN_TICK, {"seconds": "10"})
        assert delivered == ["[AutoClear] ⚠ Dropped items will be cleared in 10s!"]

    def test_sweep_complete(self, broadcaster, delivered):
        broadcaster.notify(NoticeKind.SWEEP_COMPLETE, {"count": "42"})
        assert delivered == ["[AutoClear] ✔ Cleared 42 dropped items."]

    def test_sweep_failed(self, broadcaster, delivered):
        broadcaster.notify(NoticeKind.SWEEP_FAILED, {"error": "boom"})
        assert delivered == ["[AutoClear] ✖ Clearing dropped items failed: boom"]

    def test_status_uses_key(self, broadcaster, delivered):
        params = {"key": "clear-now"}
        broadcaster.notify(NoticeKind.STATUS, params)
        assert delivered == ["[AutoClear] ⚠ Clearing dropped items now!"]
        assert params == {"key": "clear-now"}

    def test_status_without_key_dropped(self, broadcaster, delivered):
        broadcaster.notify(NoticeKind.STATUS, {})
        assert delivered == []

    def test_delivery_failure_contained(self):
        def sink(text: str) -> None:
            raise ConnectionError("gone")

        Broadcaster(MessageCatalog(), sink).broadcast("enabled")
