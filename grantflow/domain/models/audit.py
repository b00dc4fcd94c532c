"""Audit log entry."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any
from uuid import UUID, uuid4


def _utc_now() -> datetime:
    """Return current UTC time with timezone info."""
    return datetime.now(timezone.utc)


@dataclass(frozen=True, eq=True)
class AuditEntry:
    """Record of one committed mutation.

    Attributes:
        actor_id: Member who performed the action.
        action: Action name (e.g. ``reveal_votes``, ``meeting_decision_approved``).
        entity_type: Kind of entity changed (``proposal``, ``budget``).
        entity_id: Identifier of the changed entity, as text.
        details: Action-specific payload (JSON-serialisable).
        id: Entry identifier.
        created_at: When the entry was recorded (UTC).
    """

    actor_id: UUID
    action: str
    entity_type: str
    entity_id: str
    details: dict[str, Any] = field(default_factory=dict)
    id: UUID = field(default_factory=uuid4)
    created_at: datetime = field(default_factory=_utc_now)
