"""Persisted settings: pydantic models backed by a YAML file."""

from __future__ import annotations

from pathlib import Path

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from autoclear.errors import SettingsError
from autoclear.infrastructure.config import DEFAULT_COUNTDOWN_START, DEFAULT_INTERVAL, DEFAULT_LANGUAGE
from autoclear.infrastructure.logger import logger


class AutoClearSettings(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    enabled: bool = True
    interval: str = DEFAULT_INTERVAL


class CountdownSettings(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    start_at: int = Field(default=DEFAULT_COUNTDOWN_START, ge=0, alias="start-at")


class Settings(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    language: str = DEFAULT_LANGUAGE
    auto_clear: AutoClearSettings = Field(default_factory=AutoClearSettings, alias="auto-clear")
    countdown: CountdownSettings = Field(default_factory=CountdownSettings)


class YamlSettingsStore:
    """Reads and writes Settings as YAML, creating a default file on first load."""

    def __init__(self, path: Path) -> None:
        self._path = path

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> Settings:
        if not self._path.exists():
            settings = Settings()
            self.save(settings)
            logger.info("Wrote default settings", path=str(self._path))
            return settings

        try:
            raw = yaml.safe_load(self._path.read_text(encoding="utf-8")) or {}
        except (OSError, yaml.YAMLError) as err:
            raise SettingsError(f"Cannot read settings: {err}", {"path": str(self._path)}) from err

        if not isinstance(raw, dict):
            raise SettingsError("Settings file must contain a mapping", {"path": str(self._path)})

        try:
            return Settings.model_validate(raw)
        except ValidationError as err:
            raise SettingsError(f"Invalid settings: {err}", {"path": str(self._path)}) from err

    def save(self, settings: Settings) -> None:
        """Atomically write the settings file."""
        self._path.parent.mkdir(parents=True, exist_ok=True)
        content = yaml.safe_dump(settings.model_dump(by_alias=True), sort_keys=False)

        tmp_path = self._path.with_suffix(self._path.suffix + ".tmp")
        try:
            tmp_path.write_text(content, encoding="utf-8")
            tmp_path.replace(self._path)
        except OSError as err:
            raise SettingsError(f"Cannot write settings: {err}", {"path": str(self._path)}) from err


class MemorySettingsStore:
    """Keeps settings in memory; used when no file should be touched."""

    def __init__(self, settings: Settings | None = None) -> None:
        self._settings = settings or Settings()
        self.saves = 0

    def load(self) -> Settings:
        return self._settings.model_copy(deep=True)

    def save(self, settings: Settings) -> None:
        self._settings = settings.model_copy(deep=True)
        self.saves += 1
