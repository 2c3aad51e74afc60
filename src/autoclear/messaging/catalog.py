"""Message catalog: language files with prefix and placeholder substitution."""

from __future__ import annotations

import re
import shutil
from pathlib import Path

import yaml

from autoclear.infrastructure.config import DEFAULT_LANGUAGE
from autoclear.infrastructure.logger import logger

BUNDLED_MESSAGES: Path = Path(__file__).parent / f"messages_{DEFAULT_LANGUAGE}.yml"

PREFIX_PATTERN: re.Pattern[str] = re.compile(r"\{(prefix-[^}]+)\}")


def _load_messages(path: Path) -> dict[str, str]:
    raw = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    if not isinstance(raw, dict):
        raise ValueError(f"{path.name} must contain a mapping")
    return {str(key): "" if value is None else str(value) for key, value in raw.items()}


class MessageCatalog:
    """Loads messages_<language>.yml from the data directory.

    Falls back to English when the language file is missing, and to the
    bundled English text for any key the loaded file lacks.
    """

    def __init__(self, data_dir: Path | None = None, language: str = DEFAULT_LANGUAGE) -> None:
        self._data_dir = data_dir
        self._language = language
        self._messages: dict[str, str] = {}
        self._prefixes: dict[str, str] = {}
        self.reload()

    @property
    def language(self) -> str:
        return self._language

    def reload(self, language: str | None = None) -> None:
        if language is not None:
            self._language = language

        defaults = _load_messages(BUNDLED_MESSAGES)
        messages = dict(defaults)
        loaded = self._load_language_file()
        if loaded:
            messages.update(loaded)

        self._messages = messages
        self._prefixes = {key: value for key, value in messages.items() if key.startswith("prefix-")}

    def _load_language_file(self) -> dict[str, str] | None:
        if self._data_dir is None:
            return None

        path = self._data_dir / f"messages_{self._language}.yml"
        if not path.exists():
            if self._language != DEFAULT_LANGUAGE:
                logger.warning("Language file not found. Falling back to English.", file=path.name)
            path = self._data_dir / BUNDLED_MESSAGES.name
            if not path.exists():
                try:
                    path.parent.mkdir(parents=True, exist_ok=True)
                    shutil.copyfile(BUNDLED_MESSAGES, path)
                except OSError as err:
                    logger.warning("Could not write default messages", file=str(path), error=str(err))
                    return None

        try:
            messages = _load_messages(path)
        except (OSError, ValueError, yaml.YAMLError) as err:
            logger.error("Failed to load messages, using defaults", file=str(path), error=str(err))
            return None

        logger.info("Loaded messages", file=path.name)
        return messages

    def raw(self, key: str) -> str:
        return self._messages.get(key, f"Missing message: {key}")

    def get(self, key: str, **placeholders: object) -> str:
        """Render a message: {prefix-*} tokens first, then {name} placeholders."""
        message = PREFIX_PATTERN.sub(lambda m: self._prefixes.get(m.group(1), ""), self.raw(key))
        for name, value in placeholders.items():
            message = message.replace("{" + name + "}", str(value))
        return message
