"""Administrative command dispatcher and base handler."""

from __future__ import annotations

import shlex
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Protocol, Sequence

from autoclear.infrastructure.config import BASE_PERMISSION, COMMAND_NAME
from autoclear.infrastructure.logger import logger
from autoclear.messaging.catalog import MessageCatalog
from autoclear.scheduling.service import AutoClearService


class CommandSender(Protocol):
    @property
    def name(self) -> str: ...

    def has_permission(self, permission: str) -> bool: ...

    def send_message(self, text: str) -> None: ...


@dataclass
class CommandContext:
    sender: CommandSender
    service: AutoClearService
    catalog: MessageCatalog
    args: list[str] = field(default_factory=list)

    def reply(self, key: str, **placeholders: object) -> None:
        self.sender.send_message(self.catalog.get(key, **placeholders))


class CommandHandler(ABC):
    """Base class for /autoclear subcommands."""

    @property
    @abstractmethod
    def name(self) -> str: ...

    @property
    @abstractmethod
    def permission(self) -> str: ...

    @abstractmethod
    def execute(self, context: CommandContext) -> None: ...

    def complete(self, prefix: str) -> list[str]:
        """Suggestions for the first argument after the subcommand."""
        return []

    def handle(self, context: CommandContext) -> None:
        if not context.sender.has_permission(self.permission):
            context.reply("no-permission")
            return
        self.execute(context)


class CommandDispatcher:
    """Routes /autoclear subcommands to registered handlers."""

    def __init__(self, handlers: list[CommandHandler], service: AutoClearService, catalog: MessageCatalog) -> None:
        self._handlers: dict[str, CommandHandler] = {h.name: h for h in handlers}
        self._service = service
        self._catalog = catalog

    @property
    def handlers(self) -> list[CommandHandler]:
        return list(self._handlers.values())

    def dispatch(self, sender: CommandSender, args: Sequence[str]) -> None:
        context = CommandContext(sender=sender, service=self._service, catalog=self._catalog, args=list(args[1:]))

        if not sender.has_permission(BASE_PERMISSION):
            context.reply("no-permission")
            return

        if not args:
            context.reply("usage")
            return

        sub = args[0].lower()
        handler = self._handlers.get(sub)
        if not handler:
            logger.debug("Unknown subcommand", subcommand=sub, sender=sender.name)
            context.reply("unknown-command")
            context.reply("usage")
            return

        logger.info("Command received", subcommand=sub, sender=sender.name)
        handler.handle(context)

    def dispatch_line(self, sender: CommandSender, line: str) -> bool:
        """Dispatch a console line such as "/autoclear set 30m". False if it is not ours."""
        try:
            parts = shlex.split(line)
        except ValueError:
            return False
        if not parts or parts[0].lstrip("/").lower() != COMMAND_NAME:
            return False
        self.dispatch(sender, parts[1:])
        return True

    def complete(self, sender: CommandSender, args: Sequence[str]) -> list[str]:
        """Tab completion for the argument being typed (the last element of args)."""
        if not sender.has_permission(BASE_PERMISSION) or not args:
            return []

        if len(args) == 1:
            typed = args[0].lower()
            return [
                h.name for h in self._handlers.values()
                if sender.has_permission(h.permission) and h.name.startswith(typed)
            ]

        if len(args) == 2:
            handler = self._handlers.get(args[0].lower())
            if handler and sender.has_permission(handler.permission):
                return handler.complete(args[1].lower())

        return []
