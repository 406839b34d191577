"""Console and diagnostic logging built on loguru.

Console handlers print application records with their bound context
(org, source, target). Records bound with SYNC_LOG_KEY belong to the sync
log files (see project_branch_sync.sync_logs) and are kept off the console
and the diagnostic file.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING, Any, Literal

from loguru import logger

if TYPE_CHECKING:
    from types import FrameType

    from loguru import Logger, Record

LogLevel = Literal["TRACE", "DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

# Extra key marking records that belong to the sync log files
SYNC_LOG_KEY = "sync_log"

# Libraries whose stdlib loggers stay at WARNING unless running at DEBUG
NOISY_LIBRARIES = ("httpx", "httpcore", "githubkit")

_CONSOLE_FORMAT = (
    "<dim>{time:HH:mm:ss}</dim> | "
    "<level>{level: <8}</level> | "
    "<cyan>{extra[name]}</cyan>{extra[context]} - "
    "<level>{message}</level>"
)

_FILE_FORMAT = (
    "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | "
    "{extra[name]}:{function}:{line} | {extra} | {message}"
)

_CONTEXT_KEYS = ("org", "source", "target")


class InterceptHandler(logging.Handler):
    """Route stdlib log records (httpx, githubkit) into loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level: str | int = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        # Skip stdlib logging frames so loguru reports the real caller
        frame: FrameType | None = logging.currentframe()
        depth = 2
        while frame is not None and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).bind(
            name=record.name
        ).log(level, record.getMessage())


def _application_records(record: Record) -> bool:
    """Keep sync-log records away from the console and diagnostic file."""
    return SYNC_LOG_KEY not in record["extra"]


def _with_context(record: Record) -> None:
    """Fill the fields the console format expects."""
    extra = record["extra"]
    extra.setdefault("name", record["name"])
    bound = [str(extra[key]) for key in _CONTEXT_KEYS if key in extra]
    extra["context"] = f" [{' '.join(bound)}]" if bound else ""


def setup_logging(
    level: LogLevel = "INFO",
    *,
    verbose: bool = False,
    quiet: bool = False,
    log_file: Path | None = None,
    rotation: str = "10 MB",
    retention: str = "7 days",
    serialize: bool = False,
) -> Logger:
    """Configure console (and optional file) logging.

    Args:
        level: Base log level from config
        verbose: Use DEBUG (wins over quiet)
        quiet: Use WARNING
        log_file: Optional diagnostic log file, rotated and compressed
        rotation: When to rotate the diagnostic file (e.g. "10 MB", "1 day")
        retention: How long to keep rotated files
        serialize: Write the diagnostic file as JSON

    Returns:
        The configured loguru logger
    """
    effective_level: LogLevel = "DEBUG" if verbose else "WARNING" if quiet else level

    logger.remove()
    logger.configure(patcher=_with_context)

    logger.add(
        sys.stderr,
        level=effective_level,
        format=_CONSOLE_FORMAT,
        colorize=True,
        backtrace=True,
        diagnose=True,
        filter=_application_records,
    )

    if log_file:
        logger.add(
            log_file,
            level="DEBUG",
            format=_FILE_FORMAT,
            rotation=rotation,
            retention=retention,
            compression="gz",
            serialize=serialize,
            filter=_application_records,
        )

    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)
    library_level = logging.DEBUG if effective_level == "DEBUG" else logging.WARNING
    for name in NOISY_LIBRARIES:
        logging.getLogger(name).setLevel(library_level)

    return logger


def get_logger(name: str) -> Logger:
    """Get a logger with the module name bound.

    Usage:
        logger = get_logger(__name__)
        logger.info("Listing targets for {}", org_id)
    """
    return logger.bind(name=name)


def bind_org(org_id: str) -> Logger:
    """Logger carrying the organization being synced."""
    return logger.bind(name="sync", org=org_id)


def bind_target(org_id: str, target_name: str) -> Logger:
    """Logger carrying the organization and target (owner/repo) being synced."""
    return logger.bind(name="sync", org=org_id, target=target_name)


class LogContext:
    """Bind context to every record logged inside the block, tasks included.

    Usage:
        with LogContext(source="github"):
            await batch_sync.update_targets(org_id, targets)

    Built on loguru's contextualize, so asyncio tasks started inside the
    block inherit the context.
    """

    def __init__(self, **context: Any) -> None:
        self._context = context
        self._token: Any = None

    def __enter__(self) -> Logger:
        self._token = logger.contextualize(**self._context)
        self._token.__enter__()
        return logger

    def __exit__(self, *exc: Any) -> None:
        if self._token is not None:
            self._token.__exit__(*exc)
            self._token = None


def reset_logging() -> None:
    """Remove every handler (primarily for tests)."""
    logger.remove()
