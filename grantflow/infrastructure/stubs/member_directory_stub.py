"""In-memory member directory."""

from __future__ import annotations

from uuid import UUID

from grantflow.application.ports.member_directory import MemberDirectoryProtocol
from grantflow.domain.models.member import Member


class MemberDirectoryStub(MemberDirectoryProtocol):
    """In-memory implementation of MemberDirectoryProtocol.

    Members are registered with ``add``; there is no other way to create
    them since accounts live outside the engine.
    """

    def __init__(self, members: list[Member] | None = None) -> None:
        self._members: dict[UUID, Member] = {}
        for member in members or []:
            self.add(member)

    def add(self, member: Member) -> Member:
        """Register or replace a member (for testing and seeding)."""
        self._members[member.id] = member
        return member

    def remove(self, member_id: UUID) -> None:
        self._members.pop(member_id, None)

    async def get(self, member_id: UUID) -> Member | None:
        return self._members.get(member_id)

    async def list_voting_members(self) -> list[Member]:
        return [m for m in self._members.values() if m.is_voting]

    def clear(self) -> None:
        """Remove all members (for testing)."""
        self._members.clear()
