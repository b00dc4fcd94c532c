"""Bootstrap wiring for logging configuration."""

from __future__ import annotations

import os

from grantflow.infrastructure.observability import (
    configure_structlog as _configure_structlog,
)

ENVIRONMENT_ENV = "ENVIRONMENT"


def configure_logging(environment: str | None = None) -> str:
    """Configure structlog for the running environment.

    Args:
        environment: Explicit environment; ``ENVIRONMENT`` or
            ``development`` when omitted.

    Returns:
        The environment that was applied.
    """
    resolved = environment or os.environ.get(ENVIRONMENT_ENV, "development")
    _configure_structlog(environment=resolved)
    return resolved


__all__ = ["configure_logging"]
