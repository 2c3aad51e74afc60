"""Application composition: wires settings, messages, timers, sweeper and commands."""

from __future__ import annotations

from pathlib import Path
from typing import Callable

from autoclear.commands.dispatcher import CommandDispatcher
from autoclear.commands.handlers import default_handlers
from autoclear.errors import SettingsError
from autoclear.host import HostScheduler, SettingsStore
from autoclear.infrastructure.config import CONFIG_FILE_NAME, DATA_DIR
from autoclear.infrastructure.logger import logger
from autoclear.infrastructure.settings import Settings, YamlSettingsStore
from autoclear.infrastructure.timers import AsyncioTimerHost
from autoclear.messaging.broadcaster import Broadcaster
from autoclear.messaging.catalog import MessageCatalog
from autoclear.scheduling.scheduler import AutoClearScheduler
from autoclear.scheduling.service import AutoClearService
from autoclear.world.sweeper import DroppedItemSweeper, World


def _print_broadcast(text: str) -> None:
    print(text, flush=True)


class AutoClearApp:
    """Composes all services and manages the auto clear lifecycle."""

    def __init__(
        self,
        data_dir: Path = DATA_DIR,
        host: HostScheduler | None = None,
        store: SettingsStore | None = None,
        worlds: list[World] | None = None,
        deliver: Callable[[str], None] = _print_broadcast,
    ) -> None:
        self._store = store or YamlSettingsStore(data_dir / CONFIG_FILE_NAME)
        settings = self._load_settings()

        self.worlds: list[World] = worlds if worlds is not None else [World("world")]
        self.catalog = MessageCatalog(data_dir, settings.language)
        self.broadcaster = Broadcaster(self.catalog, deliver)
        self.host = host or AsyncioTimerHost()
        self.scheduler = AutoClearScheduler(
            settings,
            self.host,
            self.broadcaster,
            DroppedItemSweeper(lambda: self.worlds),
            store=self._store,
        )
        self.service = AutoClearService(self.scheduler, self._store, on_reload=self._on_reload)
        self.commands = CommandDispatcher(default_handlers(), self.service, self.catalog)
        self._running = False

    def _load_settings(self) -> Settings:
        try:
            return self._store.load()
        except SettingsError as err:
            logger.error("Failed to load settings, using defaults", error=str(err), **err.details)
            return Settings()

    def _on_reload(self, settings: Settings) -> None:
        self.catalog.reload(settings.language)

    @property
    def running(self) -> bool:
        return self._running

    def start(self) -> None:
        logger.info("Starting AutoClear...")
        self.service.start()
        self._running = True
        logger.info("AutoClear started", enabled=self.service.enabled)

    def shutdown(self) -> None:
        """Cancel every timer so no callback fires after teardown."""
        if not self._running:
            return
        logger.info("Shutting down AutoClear...")
        self._running = False
        self.service.shutdown()
        logger.info("AutoClear shut down complete")
