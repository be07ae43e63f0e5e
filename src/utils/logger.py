"""
Logging configuration
"""
import logging
import sys
from pathlib import Path
from typing import Optional

import structlog

LOG_FORMAT_CONSOLE = "console"
LOG_FORMAT_JSON = "json"


def _renderer(fmt: str):
    if fmt == LOG_FORMAT_JSON:
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer()


def setup_logger(
    name: Optional[str] = None,
    level: str = "INFO",
    log_file: Optional[str] = None,
    fmt: str = LOG_FORMAT_CONSOLE
) -> structlog.BoundLogger:
    """
    Set up structured logging.

    Args:
        name: Logger name (usually the module's __name__)
        level: Log level name
        log_file: Optional file to mirror log output into
        fmt: "console" for human-readable output, "json" for one JSON object per line
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    handlers = [logging.StreamHandler(sys.stdout)]

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        format="%(message)s",
        level=log_level,
        handlers=handlers
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.dev.set_exc_info,
            structlog.processors.TimeStamper(fmt="iso"),
            _renderer(fmt)
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=False
    )

    return structlog.get_logger(name)


def configure_from_config(config) -> structlog.BoundLogger:
    """Apply the `logging` section of a loaded Config to the global structlog setup."""
    return setup_logger(
        "triage",
        level=config.logging.level,
        log_file=config.logging.file,
        fmt=config.logging.format
    )
