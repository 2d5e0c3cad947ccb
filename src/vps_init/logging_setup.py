"""Structured audit log configuration."""

import logging
from datetime import datetime
from pathlib import Path
from typing import Optional, TextIO

import structlog

from vps_init.config import LoggingConfig

_log_stream: Optional[TextIO] = None


def configure_logging(config: LoggingConfig, verbose: bool = False) -> Optional[Path]:
    """Route structlog output to the audit log file.

    Args:
        config: Logging configuration
        verbose: Log at debug level regardless of configuration

    Returns:
        Path of the log file, or None when logging to a file is disabled
    """
    global _log_stream

    level_name = "DEBUG" if verbose else config.level.upper()
    level = logging.getLevelName(level_name)
    if not isinstance(level, int):
        level = logging.INFO

    processors = [
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.format_exc_info,
        structlog.processors.KeyValueRenderer(
            key_order=["timestamp", "level", "event"], drop_missing=True
        ),
    ]

    if config.file is None:
        silence_logging()
        return None

    config.file.parent.mkdir(parents=True, exist_ok=True)
    _log_stream = open(config.file, "a")
    _log_stream.write(f"VPS Mini Init Log - {datetime.now().isoformat()}\n")
    _log_stream.flush()

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.WriteLoggerFactory(file=_log_stream),
        cache_logger_on_first_use=False,
    )
    return config.file


def close_logging() -> None:
    global _log_stream
    silence_logging()
    if _log_stream is not None:
        _log_stream.close()
        _log_stream = None


def silence_logging() -> None:
    """Drop structured events until a log file is configured."""
    structlog.configure(
        processors=[structlog.processors.KeyValueRenderer()],
        wrapper_class=structlog.make_filtering_bound_logger(logging.CRITICAL),
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=False,
    )
