"""In-memory audit log."""

from __future__ import annotations

from uuid import UUID

from grantflow.application.ports.audit_log import AuditLogProtocol
from grantflow.domain.models.audit import AuditEntry


class AuditLogStub(AuditLogProtocol):
    """Keeps audit entries in a list, oldest first."""

    def __init__(self) -> None:
        self.entries: list[AuditEntry] = []

    async def write(self, entry: AuditEntry) -> None:
        self.entries.append(entry)

    def actions_for(self, entity_id: UUID | str) -> list[str]:
        """Actions recorded for one entity, in order (for testing)."""
        key = str(entity_id)
        return [e.action for e in self.entries if e.entity_id == key]

    def clear(self) -> None:
        self.entries.clear()
