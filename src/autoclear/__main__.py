"""Entry point: python -m autoclear"""

from __future__ import annotations

import argparse
import asyncio
import signal
import sys
import threading
from pathlib import Path

from autoclear.commands.senders import ConsoleSender
from autoclear.infrastructure.config import DATA_DIR
from autoclear.infrastructure.logger import install_exception_hooks, logger


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="autoclear", description="Periodically clear dropped items")
    parser.add_argument("--data-dir", type=Path, default=DATA_DIR, help="Directory holding config.yml and messages")
    parser.add_argument("--items", type=int, default=0, help="Dropped items to spawn at startup")
    return parser.parse_args(argv)


def _read_console(loop: asyncio.AbstractEventLoop, on_line, on_eof) -> None:  # type: ignore[no-untyped-def]
    for line in sys.stdin:
        loop.call_soon_threadsafe(on_line, line.strip())
    loop.call_soon_threadsafe(on_eof)


async def main(args: argparse.Namespace) -> None:
    from autoclear.app import AutoClearApp

    app = AutoClearApp(data_dir=args.data_dir)
    console = ConsoleSender()
    world = app.worlds[0]
    for _ in range(args.items):
        world.spawn("item")

    shutdown_event = asyncio.Event()

    def signal_handler() -> None:
        logger.info("Received shutdown signal")
        shutdown_event.set()

    def handle_line(line: str) -> None:
        if not line:
            return
        if line in ("stop", "exit"):
            shutdown_event.set()
            return
        parts = line.split()
        if parts[0] == "spawn":
            count = int(parts[1]) if len(parts) > 1 and parts[1].isdigit() else 1
            for _ in range(count):
                world.spawn("item")
            console.send_message(f"Spawned {count} items in {world.name} ({len(world)} entities)")
            return
        if not app.commands.dispatch_line(console, line):
            console.send_message("Unknown command. Try /autoclear, spawn <n> or stop.")

    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, signal_handler)

    def console_closed() -> None:
        logger.debug("Console input closed")

    threading.Thread(target=_read_console, args=(loop, handle_line, console_closed), daemon=True).start()

    try:
        app.start()
        await shutdown_event.wait()
    finally:
        app.shutdown()


def run() -> None:
    install_exception_hooks()
    args = parse_args()
    try:
        asyncio.run(main(args))
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    run()
