"""Logging helpers used by the aeharness CLI and test sessions.

This module provides utilities for configuring console logging with Rich
and an in-memory "flight recorder" that buffers log records and writes them
to disk on flush. Two filters sit on both handlers: one annotates
third-party records (httpx, httpcore...) with a short prefix used by console
formatting, the other masks credentials in messages. httpx logs every request
URL, and node URLs may carry basic-auth passwords.
"""

from __future__ import annotations

import logging
import os
import platform
import sys
from logging.handlers import MemoryHandler
from pathlib import Path
from typing import TYPE_CHECKING, Literal, TypeAlias

import cryptography
import httpx
from rich.console import Console
from rich.logging import RichHandler

if TYPE_CHECKING:
    from logging import Logger

    from aeharness.interfaces.redactor import Redactor as RedactorPort

# pylint: disable=too-few-public-methods

PROJECT_PREFIX = "aeharness"


class ThirdPartyPrefixFilter(logging.Filter):
    """Annotate third-party log records with a short prefix.

    For records whose logger name does not start with the project prefix,
    sets `record.prefix` to a short bracketed token like "[httpx]". For
    project loggers the prefix is set to an empty string. The filter always
    returns True to allow the record to be processed.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        if not record.name.startswith(PROJECT_PREFIX):
            # e.g. "httpcore.connection" -> "[httpcore]"
            record.prefix = f"[{record.name.split('.')[0]}]"
        else:
            record.prefix = ""
        return True


class RedactingFilter(logging.Filter):
    """Rewrite each record's message through a redactor.

    The message is rendered once, sanitized and stored back on the record
    with its arguments cleared, so every handler after this one sees the
    masked text.
    """

    def __init__(self, redactor: RedactorPort) -> None:
        super().__init__()
        self.redactor = redactor

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        sanitized = self.redactor.sanitize_text(message)
        if sanitized != message:
            record.msg, record.args = sanitized, None
        return True


def config_console_handler(
    level: int = logging.INFO,
    debug_mode: bool = False,
    color: bool = True,
    redactor: RedactorPort | None = None,
) -> RichHandler:
    """Configure and return a RichHandler for console output.

    The handler writes to stderr. In debug mode it is set to DEBUG and
    includes timestamps, logger names and source locations; otherwise a short
    third-party prefix is applied.

    Args:
        level: Minimum level for console output (overridden to DEBUG in debug_mode).
        debug_mode: When True, enable debug formatting.
        color: Enable color output when True.
        redactor: When given, messages are sanitized before they are rendered.

    Returns:
        RichHandler: Configured handler suitable to attach to the root logger.
    """

    # Keep consistent with click-extra's --color / --no-color option
    ColorSystem: TypeAlias = Literal["auto", "standard", "256", "truecolor", "windows"]
    color_system: ColorSystem | None = "auto" if color else None

    console = Console(color_system=color_system, stderr=True)

    if debug_mode:
        level = logging.DEBUG

    handler = RichHandler(
        level=level,
        console=console,
        rich_tracebacks=True,
        show_time=False,
        show_path=debug_mode,
        enable_link_path=debug_mode,
    )

    fmt = (
        "%(prefix)s %(message)s"
        if not debug_mode
        else "%(asctime)s %(name)s: %(message)s"
    )
    handler.setFormatter(logging.Formatter(fmt=fmt))

    if redactor is not None:
        handler.addFilter(RedactingFilter(redactor))
    if not debug_mode:
        handler.addFilter(ThirdPartyPrefixFilter())

    return handler


def config_flight_recorder(
    path: Path,
    capacity: int = 2000,
    flush_level: int = logging.WARNING,
    flush_on_close: bool = False,
    redactor: RedactorPort | None = None,
) -> MemoryHandler:
    """Configure and return an in-memory flight recorder backed by a file.

    The flight recorder buffers up to `capacity` log records and flushes
    them to a file when a record at `flush_level` or higher is emitted (or on
    close if `flush_on_close` is True). A failed scenario step therefore
    leaves the full request/response trail leading up to it on disk.

    Args:
        path: Destination file path for flushed records.
        capacity: Number of records to buffer in memory.
        flush_level: Level at or above which the buffer will be flushed.
        flush_on_close: If True, flush the buffer when the handler is closed.
        redactor: When given, messages are sanitized before they are buffered.

    Returns:
        MemoryHandler: A memory-backed handler with a FileHandler target.
    """
    file_handler = logging.FileHandler(path, mode="w", encoding="utf-8")
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(
        logging.Formatter(
            "[%(asctime)s] [%(process)d:%(threadName)s] %(levelname)s %(name)s:%(lineno)d: %(message)s"
        )
    )

    memory_handler = MemoryHandler(
        capacity=capacity,
        flushLevel=flush_level,
        target=file_handler,
        flushOnClose=flush_on_close,
    )
    if redactor is not None:
        memory_handler.addFilter(RedactingFilter(redactor))
    return memory_handler


def log_startup(  # pylint: disable=too-many-arguments
    logger: Logger,
    *,
    app_version: str,
    level: int,
    handlers: list[logging.Handler],
    log_path: Path | None,
    flight_recorder: bool,
    flight_capacity: int | None,
    force_flush_fr: bool,
    logger_levels: dict[str, int],
    redactor_mode: str = "lenient",
) -> None:
    """Log a one-line startup summary and DEBUG-level diagnostics.

    The diagnostics include Python and platform versions, process id, current
    working directory, httpx and cryptography versions, the active handler
    types, flight-recorder settings, the redaction mode and any per-logger overrides.
    """
    logger.info(
        "aeharness %s - console=%s, flight-recorder=%s",
        app_version,
        logging.getLevelName(level),
        "ON" if flight_recorder else "OFF",
    )

    logger.debug("Python: %s", sys.version.split()[0])
    logger.debug("Platform: %s %s", platform.system(), platform.release())
    logger.debug("PID: %s", os.getpid())
    logger.debug("CWD: %s", Path.cwd())
    logger.debug("httpx: %s", httpx.__version__)
    logger.debug("cryptography: %s", cryptography.__version__)
    logger.debug("Handlers: %s", [type(h).__name__ for h in handlers])
    logger.debug("Redactor mode: %s", redactor_mode)
    if flight_recorder:
        logger.debug(
            "Flight recorder: path=%s, capacity=%s, flush_on_close=%s",
            str(log_path) if log_path else "<none>",
            flight_capacity,
            force_flush_fr,
        )
    if logger_levels:
        logger.debug(
            "Per-logger overrides: %s",
            {name: logging.getLevelName(lvl) for name, lvl in logger_levels.items()},
        )
    else:
        logger.debug("Per-logger overrides: <none>")  # pragma: no cover.
