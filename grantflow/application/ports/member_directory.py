"""Member directory port.

Accounts and roles are managed outside the engine. This port only reads
them.
"""

from __future__ import annotations

from typing import Protocol
from uuid import UUID

from grantflow.domain.models.member import Member


class MemberDirectoryProtocol(Protocol):
    """Protocol for member and role lookup."""

    async def get(self, member_id: UUID) -> Member | None:
        """Retrieve a member by id, None if unknown."""
        ...

    async def list_voting_members(self) -> list[Member]:
        """List every member whose role votes (member, oversight)."""
        ...
