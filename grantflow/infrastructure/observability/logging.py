"""Structured logging configuration.

Production renders one JSON object per line for log aggregation; any
other environment gets the colored console renderer.

Log Entry Format (production):
    {
        "timestamp": "2025-03-01T12:00:00.000000Z",
        "level": "info",
        "event": "vote_recorded",
        "correlation_id": "uuid",
        "service": "VoteLedgerService",
        ...operation context
    }
"""

import logging
import os
from typing import cast

import structlog
from structlog.typing import Processor

from grantflow.infrastructure.observability.correlation import (
    correlation_id_processor,
)

LOG_LEVEL_ENV = "LOG_LEVEL"
DEFAULT_LOG_LEVEL = "INFO"


def _resolve_log_level(level: str | None) -> int:
    """Map a level name to a logging constant (INFO when unknown)."""
    level_name = (level or os.getenv(LOG_LEVEL_ENV, DEFAULT_LOG_LEVEL)).upper()
    resolved = getattr(logging, level_name, logging.INFO)
    return resolved if isinstance(resolved, int) else logging.INFO


def build_processors(environment: str) -> list[Processor]:
    """Processor chain for an environment.

    Args:
        environment: ``production`` selects JSON output.

    Returns:
        Processors ending with the renderer.
    """
    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        cast(Processor, correlation_id_processor),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]
    if environment == "production":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=True))
    return processors


def configure_structlog(environment: str = "production", level: str | None = None) -> None:
    """Configure structlog once at startup.

    Args:
        environment: ``production`` for JSON, anything else for console.
        level: Level name; falls back to ``LOG_LEVEL`` then INFO.
    """
    structlog.configure(
        processors=build_processors(environment),
        wrapper_class=structlog.make_filtering_bound_logger(_resolve_log_level(level)),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )
