"""Auto clear scheduler: a repeating cycle timer that starts a countdown before each sweep."""

from __future__ import annotations

import threading

from autoclear.errors import HostSchedulingFailure, IntervalTooShort, InvalidInterval, SettingsError
from autoclear.host import HostScheduler, Notifier, SettingsStore, SweepExecutor
from autoclear.infrastructure.config import COUNTDOWN_TICK_SECONDS, MIN_INTERVAL_SECONDS
from autoclear.infrastructure.logger import logger
from autoclear.infrastructure.settings import Settings
from autoclear.scheduling.clock import first_fire_delay, next_fire_at, time_remaining
from autoclear.scheduling.countdown import CountdownEngine
from autoclear.scheduling.interval import format_duration, matches_interval_grammar, parse_interval, validate_interval
from autoclear.scheduling.types import NoticeKind, ScheduleState, ScheduleStatus, SetIntervalResult, ToggleResult


def interval_seconds(settings: Settings) -> int:
    """Configured interval in seconds, or 0 when the stored text is invalid."""
    try:
        return parse_interval(settings.auto_clear.interval)
    except InvalidInterval:
        return 0


def state_from_settings(settings: Settings) -> ScheduleState:
    return ScheduleState(interval=interval_seconds(settings), countdown_lead=settings.countdown.start_at)


class AutoClearScheduler:
    """Owns the repeating auto clear timer and at most one running countdown.

    Every public method and every timer callback runs under one reentrant
    lock, so the single-countdown rule holds even on a multi-threaded host.
    No method raises for invalid input or host failures; they are reported
    through return values and the log.
    """

    def __init__(
        self,
        settings: Settings,
        host: HostScheduler,
        notifier: Notifier,
        sweep: SweepExecutor,
        store: SettingsStore | None = None,
        state: ScheduleState | None = None,
        countdown_tick_s: float = COUNTDOWN_TICK_SECONDS,
    ) -> None:
        self._settings = settings
        self._state = state or state_from_settings(settings)
        self._host = host
        self._notifier = notifier
        self._sweep = sweep
        self._store = store
        self._countdown_tick_s = countdown_tick_s
        self._lock = threading.RLock()
        self._shut_down = False

    @property
    def state(self) -> ScheduleState:
        return self._state

    @property
    def settings(self) -> Settings:
        return self._settings

    @property
    def is_running(self) -> bool:
        return self._state.repeating_handle is not None

    @property
    def active_countdown(self) -> CountdownEngine | None:
        return self._state.active_countdown

    # --- Lifecycle ---

    def start(self) -> bool:
        """(Re)arm the repeating timer. Returns False if auto clear stays stopped."""
        with self._lock:
            self._stop_locked()
            if self._shut_down:
                logger.debug("Scheduler shut down, not starting")
                return False

            interval = self._state.interval
            if interval < MIN_INTERVAL_SECONDS:
                logger.warning("Invalid interval. Auto clear not started.", interval=self._settings.auto_clear.interval)
                return False

            delay = first_fire_delay(interval, self._state.countdown_lead)
            try:
                handle = self._host.schedule_repeating(delay, interval, self._on_cycle)
            except HostSchedulingFailure as err:
                logger.error("Failed to arm auto clear timer", error=str(err), **err.details)
                return False
            except Exception:
                logger.exception("Failed to arm auto clear timer")
                return False

            self._state.repeating_handle = handle
            self._state.enabled = True
            self._state.next_fire_at = next_fire_at(self._host.now(), interval)
            logger.info("Auto clear started", interval=self._settings.auto_clear.interval, first_countdown_in_s=delay)
            return True

    def stop(self) -> bool:
        """Cancel the repeating timer and any countdown. Returns False if nothing was running."""
        with self._lock:
            was_running = self.is_running or self._state.active_countdown is not None
            self._stop_locked()
            if was_running:
                logger.info("Auto clear stopped")
            return was_running

    def shutdown(self) -> None:
        """Stop everything and refuse to arm again."""
        with self._lock:
            self._shut_down = True
            self._stop_locked()

    def enable(self) -> ToggleResult:
        """Persist the enabled flag and arm the timer as one step."""
        with self._lock:
            if self._settings.auto_clear.enabled and self.is_running:
                return ToggleResult.ALREADY_RUNNING
            self._settings.auto_clear.enabled = True
            self.persist()
            if not self.start():
                return ToggleResult.FAILED
            return ToggleResult.CHANGED

    def disable(self) -> ToggleResult:
        """Persist the disabled flag and cancel timers as one step."""
        with self._lock:
            if not self._settings.auto_clear.enabled and not self.is_running:
                return ToggleResult.ALREADY_STOPPED
            self._settings.auto_clear.enabled = False
            self.persist()
            self.stop()
            return ToggleResult.CHANGED

    def reconfigure(self, settings: Settings) -> bool:
        """Apply loaded settings and re-arm from them. Returns whether auto clear is running."""
        with self._lock:
            self.apply_settings(settings)
            self._stop_locked()
            if settings.auto_clear.enabled:
                self.start()
            return self.is_running

    def _stop_locked(self) -> None:
        if self._state.repeating_handle:
            self._state.repeating_handle.cancel()
            self._state.repeating_handle = None
        self._cancel_countdown_locked()
        self._state.enabled = False
        self._state.next_fire_at = None

    # --- Countdown and sweep ---

    def _on_cycle(self) -> None:
        with self._lock:
            if not self.is_running:
                return
            self._start_countdown_locked()

    def _start_countdown_locked(self) -> bool:
        self._cancel_countdown_locked()
        engine = CountdownEngine(
            self._state.countdown_lead,
            self._host,
            self._notifier,
            self._sweep_and_track,
            tick_s=self._countdown_tick_s,
            lock=self._lock,
        )
        try:
            engine.start()
        except HostSchedulingFailure as err:
            logger.error("Failed to arm countdown timer", error=str(err), **err.details)
            return False
        except Exception:
            logger.exception("Failed to arm countdown timer")
            return False
        self._state.active_countdown = engine
        return True

    def _cancel_countdown_locked(self) -> None:
        if self._state.active_countdown:
            self._state.active_countdown.cancel()
            self._state.active_countdown = None

    def cancel_countdown(self) -> bool:
        """Cancel a running countdown without touching the cycle timer."""
        with self._lock:
            engine = self._state.active_countdown
            self._state.active_countdown = None
            return engine.cancel() if engine else False

    def _sweep_and_track(self) -> int:
        with self._lock:
            engine = self._state.active_countdown
            if engine and not engine.running:
                self._state.active_countdown = None
        try:
            count = self._sweep()
        finally:
            with self._lock:
                if self._state.enabled:
                    self._state.next_fire_at = next_fire_at(self._host.now(), self._state.interval)
        logger.info("Sweep complete", count=count)
        return count

    def execute_manual_clear(self) -> bool:
        """Start a countdown now, leaving the cycle timer and next fire estimate alone."""
        with self._lock:
            if self._shut_down:
                return False
            return self._start_countdown_locked()

    def execute_immediate_clear(self) -> int | None:
        """Sweep right away without a countdown. Returns the count, or None if the sweep failed."""
        with self._lock:
            self._notifier.notify(NoticeKind.STATUS, {"key": "clear-now"})
            try:
                count = self._sweep_and_track()
            except Exception as err:
                logger.exception("Immediate sweep failed")
                self._notifier.notify(NoticeKind.SWEEP_FAILED, {"error": str(err)})
                return None
            self._notifier.notify(NoticeKind.SWEEP_COMPLETE, {"count": str(count)})
            return count

    # --- Status ---

    def time_until_next_clear(self) -> int | None:
        """Seconds until the next sweep, or None when auto clear is not armed."""
        with self._lock:
            if not self._state.enabled or not self.is_running:
                return None
            return time_remaining(self._state.next_fire_at, self._host.now())

    def status(self) -> ScheduleStatus:
        with self._lock:
            return ScheduleStatus(enabled=self._state.enabled, next_fire_in_seconds=self.time_until_next_clear())

    # --- Configuration ---

    def set_interval(self, text: str) -> SetIntervalResult:
        """Validate, persist and apply a new interval, restarting the cycle if active."""
        if not matches_interval_grammar(text):
            return SetIntervalResult.INVALID_FORMAT
        try:
            seconds = validate_interval(text)
        except IntervalTooShort:
            return SetIntervalResult.INVALID_VALUE
        except InvalidInterval:
            return SetIntervalResult.INVALID_FORMAT

        normalized = text.strip().lower()
        with self._lock:
            self._settings.auto_clear.interval = normalized
            self._state.interval = seconds
            self.persist()
            if self.is_running or self._settings.auto_clear.enabled:
                self.start()
        logger.info("Interval updated", interval=normalized, seconds=seconds, formatted=format_duration(seconds))
        return SetIntervalResult.SUCCESS

    def set_countdown_lead(self, seconds: int) -> bool:
        """Persist and apply a new countdown length. Negative values are rejected."""
        if seconds < 0:
            return False
        with self._lock:
            self._settings.countdown.start_at = seconds
            self._state.countdown_lead = seconds
            self.persist()
            if self.is_running:
                self.start()
        logger.info("Countdown updated", seconds=seconds)
        return True

    def apply_settings(self, settings: Settings) -> None:
        """Swap in freshly loaded settings. The caller decides whether to restart."""
        with self._lock:
            self._settings = settings
            self._state.interval = interval_seconds(settings)
            self._state.countdown_lead = settings.countdown.start_at

    def persist(self) -> bool:
        if self._store is None:
            return True
        try:
            self._store.save(self._settings)
        except SettingsError as err:
            logger.error("Failed to save settings", error=str(err), **err.details)
            return False
        return True
