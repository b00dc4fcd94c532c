"""SQL member directory (read-only view of ``member_profiles``)."""

from __future__ import annotations

from typing import Any
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from grantflow.application.ports.member_directory import MemberDirectoryProtocol
from grantflow.domain.models.member import VOTING_ROLES, AppRole, Member
from grantflow.infrastructure.adapters.persistence.tables import member_profiles


def _row_to_member(row: Any) -> Member:
    return Member(
        id=row.id,
        name=row.full_name,
        role=AppRole(row.role),
        email=row.email,
    )


class SqlMemberDirectory(MemberDirectoryProtocol):
    """Reads members and roles maintained by the account system."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def get(self, member_id: UUID) -> Member | None:
        async with self._session_factory() as session:
            result = await session.execute(
                select(member_profiles).where(member_profiles.c.id == member_id)
            )
            row = result.first()
        return _row_to_member(row) if row else None

    async def list_voting_members(self) -> list[Member]:
        async with self._session_factory() as session:
            result = await session.execute(
                select(member_profiles)
                .where(member_profiles.c.role.in_([r.value for r in VOTING_ROLES]))
                .order_by(member_profiles.c.full_name)
            )
            return [_row_to_member(row) for row in result]
