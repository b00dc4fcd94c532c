"""Audit log port."""

from __future__ import annotations

from typing import Protocol

from grantflow.domain.models.audit import AuditEntry


class AuditLogProtocol(Protocol):
    """Protocol for recording committed mutations.

    Audit writes happen after the mutation committed. A failing write is
    reported by the caller and never undoes the mutation.
    """

    async def write(self, entry: AuditEntry) -> None:
        """Record an audit entry."""
        ...
