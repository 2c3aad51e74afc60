"""Command senders: the console and permission-scoped users."""

from __future__ import annotations

import sys
from typing import Callable, Iterable, TextIO


class ConsoleSender:
    """The host console; holds every permission."""

    name = "CONSOLE"

    def __init__(self, stream: TextIO | None = None) -> None:
        self._stream = stream

    def has_permission(self, permission: str) -> bool:
        return True

    def send_message(self, text: str) -> None:
        print(text, file=self._stream or sys.stdout, flush=True)


class PermissionSender:
    """A sender with an explicit permission set. "*" grants everything."""

    def __init__(self, name: str, permissions: Iterable[str], deliver: Callable[[str], None]) -> None:
        self.name = name
        self._permissions = set(permissions)
        self._deliver = deliver

    def has_permission(self, permission: str) -> bool:
        return "*" in self._permissions or permission in self._permissions

    def send_message(self, text: str) -> None:
        self._deliver(text)
