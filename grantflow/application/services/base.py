"""Service logging mixin.

Every service binds its class name once and then opens an
operation-scoped logger per call:

    class MyService(LoggingMixin):
        def __init__(self, repo: SomePort) -> None:
            self._repo = repo
            self._init_logger(component="budget")

        async def do_something(self, year: int) -> None:
            log = self._log_operation("do_something", year=year)
            log.info("do_something_started")
"""

import structlog

from grantflow.infrastructure.observability.correlation import get_correlation_id


class LoggingMixin:
    """Mixin providing structured, correlated logging for services.

    Attributes:
        _log: Logger bound with ``service`` and ``component``.
    """

    _log: structlog.BoundLogger

    def _init_logger(self, component: str = "grantflow") -> None:
        """Bind the service name and component.

        Args:
            component: Log category (budget, votes, proposals, ...).
        """
        self._log = structlog.get_logger().bind(
            service=self.__class__.__name__,
            component=component,
        )

    def _log_operation(self, operation: str, **context: object) -> structlog.BoundLogger:
        """Logger for one operation, carrying the request correlation id.

        Args:
            operation: Operation name.
            **context: Extra fields to bind.

        Returns:
            Bound logger.
        """
        return self._log.bind(
            operation=operation,
            correlation_id=get_correlation_id(),
            **context,
        )
