"""Administrative operations over the auto clear scheduler."""

from __future__ import annotations

from typing import Callable

from autoclear.errors import SettingsError
from autoclear.host import SettingsStore
from autoclear.infrastructure.logger import logger
from autoclear.infrastructure.settings import Settings
from autoclear.scheduling.scheduler import AutoClearScheduler
from autoclear.scheduling.types import ScheduleStatus, SetIntervalResult, ToggleResult


class AutoClearService:
    """Enable, disable, reconfigure and trigger sweeps; keeps the persisted flag in step."""

    def __init__(
        self,
        scheduler: AutoClearScheduler,
        store: SettingsStore | None = None,
        on_reload: Callable[[Settings], None] | None = None,
    ) -> None:
        self._scheduler = scheduler
        self._store = store
        self._on_reload = on_reload

    @property
    def scheduler(self) -> AutoClearScheduler:
        return self._scheduler

    @property
    def enabled(self) -> bool:
        """Persisted enabled flag."""
        return self._scheduler.settings.auto_clear.enabled

    # --- Lifecycle ---

    def start(self) -> bool:
        """Start auto clear if it is persisted as enabled."""
        if not self.enabled:
            logger.info("Auto clear disabled in settings")
            return False
        return self._scheduler.start()

    def shutdown(self) -> None:
        self._scheduler.shutdown()

    def enable(self) -> ToggleResult:
        return self._scheduler.enable()

    def disable(self) -> ToggleResult:
        return self._scheduler.disable()

    def reload(self) -> bool:
        """Re-read settings, notify listeners, and restart auto clear with them.

        Listeners run before anything is applied, so a failing listener
        leaves the running schedule untouched.
        """
        if self._store is None:
            return False
        try:
            settings = self._store.load()
        except SettingsError as err:
            logger.error("Failed to reload configuration", error=str(err), **err.details)
            return False

        if self._on_reload:
            try:
                self._on_reload(settings)
            except Exception:
                logger.exception("Failed to apply reloaded configuration")
                return False

        running = self._scheduler.reconfigure(settings)
        logger.info("Configuration reloaded", enabled=settings.auto_clear.enabled, running=running)
        return True

    # --- Configuration ---

    def set_interval(self, text: str) -> SetIntervalResult:
        return self._scheduler.set_interval(text)

    def set_countdown_lead(self, seconds: int) -> bool:
        return self._scheduler.set_countdown_lead(seconds)

    # --- Status and sweeps ---

    def status(self) -> ScheduleStatus:
        return self._scheduler.status()

    def clear_now(self) -> int | None:
        return self._scheduler.execute_immediate_clear()

    def clear_now_with_countdown(self) -> bool:
        return self._scheduler.execute_manual_clear()
