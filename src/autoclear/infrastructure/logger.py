"""Structured logging setup using structlog."""

from __future__ import annotations

import logging
import os
import sys
import threading

import structlog

LEVEL_ENV = ("AUTOCLEAR_LOG_LEVEL", "LOG_LEVEL")
FORMAT_ENV = "AUTOCLEAR_LOG_FORMAT"


def resolve_level(environ: dict[str, str] | None = None) -> int:
    """First of AUTOCLEAR_LOG_LEVEL / LOG_LEVEL that names a level, else INFO."""
    environ = os.environ if environ is None else environ
    for key in LEVEL_ENV:
        level = getattr(logging, environ.get(key, "").strip().upper(), None)
        if isinstance(level, int):
            return level
    return logging.INFO


def build_renderer(fmt: str | None, colors: bool = False) -> structlog.types.Processor:
    """JSON lines for log shippers, otherwise the console renderer."""
    if (fmt or "").strip().lower() == "json":
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=colors)


def setup_logging() -> structlog.stdlib.BoundLogger:
    level = resolve_level()
    renderer = build_renderer(os.environ.get(FORMAT_ENV), colors=sys.stderr.isatty())

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.dev.set_exc_info,
            structlog.processors.TimeStamper(fmt="iso"),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )
    logging.basicConfig(level=level, stream=sys.stderr, format="%(message)s")

    return structlog.get_logger("autoclear")


logger: structlog.stdlib.BoundLogger = setup_logging()


def install_exception_hooks() -> None:
    """Log uncaught exceptions, including ones raised in console and timer threads."""

    def handle_exception(exc_type, exc_value, exc_traceback):  # type: ignore[no-untyped-def]
        if issubclass(exc_type, KeyboardInterrupt):
            sys.__excepthook__(exc_type, exc_value, exc_traceback)
            return
        logger.critical("Uncaught exception", exc_info=(exc_type, exc_value, exc_traceback))

    def handle_thread_exception(args):  # type: ignore[no-untyped-def]
        logger.critical(
            "Uncaught exception in thread",
            thread=args.thread.name if args.thread else None,
            exc_info=(args.exc_type, args.exc_value, args.exc_traceback),
        )

    sys.excepthook = handle_exception
    threading.excepthook = handle_thread_exception
