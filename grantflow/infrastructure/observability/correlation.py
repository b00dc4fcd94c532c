"""Request correlation ids.

The id lives in a contextvar so that every log line written while
handling one request carries the same value, across awaits.

Usage:
    # request start (middleware)
    token = set_correlation_id(header_value or generate_correlation_id())
    ...
    reset_correlation_id(token)

    # structlog configuration
    processors = [..., correlation_id_processor, ...]
"""

from contextvars import ContextVar, Token
from typing import Any
from uuid import uuid4

# Empty string means "no request in progress"
_correlation_id: ContextVar[str] = ContextVar("grantflow_correlation_id", default="")


def generate_correlation_id() -> str:
    """Return a fresh correlation id (UUID4 text)."""
    return str(uuid4())


def get_correlation_id() -> str:
    """Return the current correlation id, or an empty string outside a request."""
    return _correlation_id.get()


def set_correlation_id(correlation_id: str) -> Token[str]:
    """Bind a correlation id to the current context.

    Args:
        correlation_id: Id to bind.

    Returns:
        Token for reset_correlation_id.
    """
    return _correlation_id.set(correlation_id)


def reset_correlation_id(token: Token[str]) -> None:
    """Restore the correlation id that was current before ``token`` was set."""
    _correlation_id.reset(token)


def correlation_id_processor(
    logger: Any, method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    """Structlog processor adding ``correlation_id`` when one is bound."""
    correlation_id = get_correlation_id()
    if correlation_id:
        event_dict.setdefault("correlation_id", correlation_id)
    return event_dict
