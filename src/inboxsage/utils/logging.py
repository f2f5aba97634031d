"""Structured logging for the service, CLI and scheduled jobs."""

import logging
import sys
from contextlib import contextmanager
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path
from typing import Iterator, List, Literal, Optional

import structlog
from structlog.typing import Processor

LOG_FILE_NAME = "inboxsage.log"
LOG_RETENTION_DAYS = 14

# Third-party loggers and the level they are held at
QUIET_LOGGERS = {
    "httpx": logging.WARNING,
    "httpcore": logging.WARNING,
    "openai": logging.INFO,
    "uvicorn.access": logging.WARNING,
}


def _shared_processors() -> List[Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]


def _console_handler(log_format: str, pre_chain: List[Processor]) -> logging.Handler:
    renderer: Processor
    if log_format == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(processor=renderer, foreign_pre_chain=pre_chain)
    )
    return handler


def _file_handler(log_dir: Path, pre_chain: List[Processor]) -> logging.Handler:
    log_dir.mkdir(parents=True, exist_ok=True)
    handler = TimedRotatingFileHandler(
        filename=log_dir / LOG_FILE_NAME,
        when="midnight",
        backupCount=LOG_RETENTION_DAYS,
        encoding="utf-8",
        utc=True,
    )
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processor=structlog.dev.ConsoleRenderer(colors=False),
            foreign_pre_chain=pre_chain,
        )
    )
    return handler


def setup_logging(
    log_level: str = "INFO",
    log_format: Literal["json", "console"] = "json",
    log_dir: Optional[Path] = None,
) -> None:
    """Route structlog and stdlib logging through the same handlers.

    Args:
        log_level: Root level name (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_format: "json" for machine-readable stdout, "console" for humans.
        log_dir: Optional directory for a daily-rotated plain-text log file.
    """
    pre_chain = _shared_processors()

    structlog.configure(
        processors=pre_chain + [structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    handlers = [_console_handler(log_format, pre_chain)]
    if log_dir:
        handlers.append(_file_handler(Path(log_dir), pre_chain))

    root = logging.getLogger()
    # Re-running setup (tests, CLI re-entry) must not duplicate output
    for handler in list(root.handlers):
        root.removeHandler(handler)
    for handler in handlers:
        root.addHandler(handler)
    root.setLevel(log_level.upper())

    for name, level in QUIET_LOGGERS.items():
        logging.getLogger(name).setLevel(level)


@contextmanager
def log_context(**values: str) -> Iterator[None]:
    """Attach key/value pairs to every log line emitted inside the block.

    Bound through contextvars, so concurrent asyncio tasks keep their own
    values.
    """
    with structlog.contextvars.bound_contextvars(**values):
        yield


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a structured logger instance.

    Args:
        name: Logger name (usually __name__)

    Returns:
        Structured logger instance
    """
    return structlog.get_logger(name)
