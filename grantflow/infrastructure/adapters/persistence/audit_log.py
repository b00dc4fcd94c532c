"""SQL audit log."""

from __future__ import annotations

from sqlalchemy import insert
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from grantflow.application.ports.audit_log import AuditLogProtocol
from grantflow.domain.models.audit import AuditEntry
from grantflow.infrastructure.adapters.persistence.tables import audit_log


class SqlAuditLog(AuditLogProtocol):
    """Appends entries to the ``audit_log`` table."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def write(self, entry: AuditEntry) -> None:
        async with self._session_factory() as session, session.begin():
            await session.execute(
                insert(audit_log).values(
                    id=entry.id,
                    actor_id=entry.actor_id,
                    action=entry.action,
                    entity_type=entry.entity_type,
                    entity_id=entry.entity_id,
                    details=entry.details,
                    created_at=entry.created_at,
                )
            )
