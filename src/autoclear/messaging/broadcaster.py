"""Renders scheduler notices through the catalog and hands them to a delivery sink."""

from __future__ import annotations

from typing import Callable

from autoclear.infrastructure.logger import logger
from autoclear.messaging.catalog import MessageCatalog
from autoclear.scheduling.types import NoticeKind

NOTICE_KEYS: dict[NoticeKind, str] = {
    NoticeKind.COUNTDOWN_TICK: "clear-countdown",
    NoticeKind.SWEEP_COMPLETE: "clear-success",
    NoticeKind.SWEEP_FAILED: "clear-failed",
}


class Broadcaster:
    """Notifier that renders notices and delivers them to every observer.

    STATUS notices carry their message key in params["key"].
    """

    def __init__(self, catalog: MessageCatalog, sink: Callable[[str], None]) -> None:
        self._catalog = catalog
        self._sink = sink

    def notify(self, kind: NoticeKind, params: dict[str, str]) -> None:
        placeholders = dict(params)
        if kind is NoticeKind.STATUS:
            key = placeholders.pop("key", None)
        else:
            key = NOTICE_KEYS.get(kind)
        if not key:
            logger.warning("Notice without message key", kind=kind.value)
            return
        self.broadcast(key, **placeholders)

    def broadcast(self, key: str, **placeholders: object) -> None:
        text = self._catalog.get(key, **placeholders)
        try:
            self._sink(text)
        except Exception:
            logger.exception("Failed to deliver broadcast", key=key)
