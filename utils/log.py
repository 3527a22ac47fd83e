"""Structured logging setup.

Console output by default, JSON lines when ``LOG_JSON`` is enabled.
"""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog


def configure_logging(*, use_json: bool = False, level: str = "INFO") -> None:
    processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
    ]

    if use_json:
        processors.append(structlog.processors.dict_tracebacks)
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty()))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(
            getattr(logging, str(level).upper(), logging.INFO)
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stdout),
        cache_logger_on_first_use=False,
    )


def get_logger(name: str | None = None, **context: Any):
    logger = structlog.get_logger(name)
    return logger.bind(**context) if context else logger


def log_error(event: str, error: Exception | None = None, **context: Any) -> None:
    """Default error side-channel: report a best-effort failure."""
    if error is not None:
        context["error_type"] = type(error).__name__
        context["error_message"] = str(error)
    get_logger("birds").error(event, **context)
