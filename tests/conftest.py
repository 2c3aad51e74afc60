from typing import Callable

import pytest

from autoclear.infrastructure.settings import MemorySettingsStore, Settings
from autoclear.infrastructure.timers import TickLoop
from autoclear.scheduling.scheduler import AutoClearScheduler
from autoclear.scheduling.types import NoticeKind


class RecordingNotifier:
    def __init__(self) -> None:
        self.events: list[tuple[NoticeKind, dict[str, str]]] = []

    def notify(self, kind: NoticeKind, params: dict[str, str]) -> None:
        self.events.append((kind, dict(params)))

    def kinds(self) -> list[NoticeKind]:
        return [kind for kind, _ in self.events]

    def ticks(self) -> list[int]:
        return [int(params["seconds"]) for kind, params in self.events if kind is NoticeKind.COUNTDOWN_TICK]


class CountingSweep:
    def __init__(self, result: int = 0) -> None:
        self.result = result
        self.calls = 0
        self.error: Exception | None = None

    def __call__(self) -> int:
        self.calls += 1
        if self.error:
            raise self.error
        return self.result


@pytest.fixture
def loop() -> TickLoop:
    """Manually advanced host clock starting at t=1000."""
    return TickLoop(start=1000.0)


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def sweep() -> CountingSweep:
    return CountingSweep(result=3)


@pytest.fixture
def store() -> MemorySettingsStore:
    return MemorySettingsStore()


@pytest.fixture
def make_scheduler(loop, notifier, sweep, store) -> Callable[..., AutoClearScheduler]:
    def factory(interval: str = "1m", countdown: int = 10, enabled: bool = True) -> AutoClearScheduler:
        settings = Settings()
        settings.auto_clear.interval = interval
        settings.auto_clear.enabled = enabled
        settings.countdown.start_at = countdown
        return AutoClearScheduler(settings, loop, notifier, sweep, store=store)

    return factory
