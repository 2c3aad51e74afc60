"""Configuration constants and .env parsing."""

from __future__ import annotations

import os
from pathlib import Path


def read_env_file(keys: list[str], env_file: Path | None = None) -> dict[str, str]:
    """Parse a .env file and return values for the requested keys.

    Values are not loaded into os.environ; callers decide what to do with them.
    """
    path = env_file or Path.cwd() / ".env"
    try:
        content = path.read_text()
    except OSError:
        return {}

    result: dict[str, str] = {}
    wanted = set(keys)

    for line in content.splitlines():
        trimmed = line.strip()
        if not trimmed or trimmed.startswith("#"):
            continue
        key, sep, value = trimmed.partition("=")
        if not sep:
            continue
        key = key.strip()
        if key not in wanted:
            continue
        value = value.strip()
        if len(value) >= 2 and value[0] == value[-1] and value[0] in ("'", '"'):
            value = value[1:-1]
        if value:
            result[key] = value

    return result


_env_config = read_env_file(["AUTOCLEAR_DATA_DIR", "AUTOCLEAR_CONFIG_FILE"])

DATA_DIR: Path = Path(
    os.environ.get("AUTOCLEAR_DATA_DIR") or _env_config.get("AUTOCLEAR_DATA_DIR", "data")
).resolve()
CONFIG_FILE_NAME: str = os.environ.get("AUTOCLEAR_CONFIG_FILE") or _env_config.get(
    "AUTOCLEAR_CONFIG_FILE", "config.yml"
)

MIN_INTERVAL_SECONDS: int = 60
DEFAULT_INTERVAL: str = "30m"
DEFAULT_COUNTDOWN_START: int = 10
COUNTDOWN_TICK_SECONDS: float = 1.0
DEFAULT_LANGUAGE: str = "en"

# Signed 64-bit range; larger totals are treated as overflow.
MAX_DURATION_SECONDS: int = 2**63 - 1

BASE_PERMISSION: str = "autoclear.command"
COMMAND_NAME: str = "autoclear"
