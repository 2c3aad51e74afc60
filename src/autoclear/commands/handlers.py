"""Subcommand handlers: clear, on, off, reload, set, info."""

from __future__ import annotations

from autoclear.commands.dispatcher import CommandContext, CommandHandler
from autoclear.scheduling.interval import format_duration
from autoclear.scheduling.types import SetIntervalResult, ToggleResult

INTERVAL_EXAMPLES = ["<interval>", "10m", "30m", "1h", "2h", "6h", "12h", "1d", "1d12h"]


class ClearHandler(CommandHandler):
    """`clear` starts a countdown; `clear now` sweeps immediately."""

    name = "clear"
    permission = "autoclear.clear"

    def execute(self, context: CommandContext) -> None:
        if context.args and context.args[0].lower() == "now":
            context.service.clear_now()
            return
        if not context.service.clear_now_with_countdown():
            context.reply("clear-failed", error="countdown could not be started")

    def complete(self, prefix: str) -> list[str]:
        return ["now"] if "now".startswith(prefix) else []


class OnHandler(CommandHandler):
    name = "on"
    permission = "autoclear.on"

    def execute(self, context: CommandContext) -> None:
        result = context.service.enable()
        if result is ToggleResult.ALREADY_RUNNING:
            context.reply("already-enabled")
        elif result is ToggleResult.FAILED:
            context.reply("enable-failed")
        else:
            context.reply("enabled")


class OffHandler(CommandHandler):
    name = "off"
    permission = "autoclear.off"

    def execute(self, context: CommandContext) -> None:
        if context.service.disable() is ToggleResult.ALREADY_STOPPED:
            context.reply("already-disabled")
        else:
            context.reply("disabled")


class ReloadHandler(CommandHandler):
    name = "reload"
    permission = "autoclear.reload"

    def execute(self, context: CommandContext) -> None:
        context.reply("reload-success" if context.service.reload() else "reload-failed")


class SetHandler(CommandHandler):
    name = "set"
    permission = "autoclear.set"

    def execute(self, context: CommandContext) -> None:
        if not context.args:
            context.reply("set-usage")
            return

        interval = context.args[0].lower()
        result = context.service.set_interval(interval)
        if result is SetIntervalResult.INVALID_FORMAT:
            context.reply("set-invalid-format")
        elif result is SetIntervalResult.INVALID_VALUE:
            context.reply("set-invalid-value")
        else:
            context.reply("set-success", interval=interval)

    def complete(self, prefix: str) -> list[str]:
        return [example for example in INTERVAL_EXAMPLES if example.startswith(prefix)]


class InfoHandler(CommandHandler):
    name = "info"
    permission = "autoclear.info"

    def execute(self, context: CommandContext) -> None:
        if not context.service.enabled:
            context.reply("status-disabled")
            return
        status = context.service.status()
        if status.next_fire_in_seconds is None:
            context.reply("status-unscheduled")
            return
        context.reply("status-enabled", time=format_duration(status.next_fire_in_seconds))


def default_handlers() -> list[CommandHandler]:
    return [ClearHandler(), OnHandler(), OffHandler(), ReloadHandler(), SetHandler(), InfoHandler()]
