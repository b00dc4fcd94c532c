"""SQL proposal repository.

Changes after creation are conditional updates:

    UPDATE grant_proposals SET ..., version = :new
    WHERE id = :id AND version = :expected

A row count of zero means another request, or a vote, changed the
proposal first.
"""

from __future__ import annotations

from collections.abc import Collection
from decimal import Decimal
from typing import Any
from uuid import UUID

from sqlalchemy import insert, select, update
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from structlog import get_logger

from grantflow.application.ports.proposal_repository import ProposalRepositoryProtocol
from grantflow.domain.models.proposal import (
    AllocationMode,
    GrantProposal,
    ProposalStatus,
    ProposalType,
)
from grantflow.infrastructure.adapters.persistence.tables import as_utc, grant_proposals

logger = get_logger(__name__)


def _row_to_proposal(row: Any) -> GrantProposal:
    return GrantProposal(
        id=row.id,
        proposal_type=ProposalType(row.proposal_type),
        proposer_id=row.proposer_id,
        budget_year=row.budget_year,
        title=row.title,
        description=row.description,
        proposed_amount=Decimal(row.proposed_amount),
        allocation_mode=AllocationMode(row.allocation_mode),
        status=ProposalStatus(row.status),
        reveal_votes=bool(row.reveal_votes),
        organization_id=row.organization_id,
        notes=row.notes,
        website=row.website,
        charity_navigator_url=row.charity_navigator_url,
        final_amount=Decimal(row.final_amount) if row.final_amount is not None else None,
        sent_at=row.sent_at,
        created_at=as_utc(row.created_at),
        updated_at=as_utc(row.updated_at),
        version=row.version,
    )


def _mutable_values(proposal: GrantProposal) -> dict[str, Any]:
    return {
        "title": proposal.title,
        "description": proposal.description,
        "proposed_amount": proposal.proposed_amount,
        "allocation_mode": proposal.allocation_mode.value,
        "status": proposal.status.value,
        "reveal_votes": proposal.reveal_votes,
        "notes": proposal.notes,
        "website": proposal.website,
        "charity_navigator_url": proposal.charity_navigator_url,
        "final_amount": proposal.final_amount,
        "sent_at": proposal.sent_at,
        "updated_at": proposal.updated_at,
        "version": proposal.version,
    }


class SqlProposalRepository(ProposalRepositoryProtocol):
    """Proposal storage on the ``grant_proposals`` table."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def save(self, proposal: GrantProposal) -> None:
        values = {
            "id": proposal.id,
            "proposal_type": proposal.proposal_type.value,
            "proposer_id": proposal.proposer_id,
            "budget_year": proposal.budget_year,
            "organization_id": proposal.organization_id,
            "created_at": proposal.created_at,
            **_mutable_values(proposal),
        }
        async with self._session_factory() as session, session.begin():
            await session.execute(insert(grant_proposals).values(**values))

    async def get(self, proposal_id: UUID) -> GrantProposal | None:
        async with self._session_factory() as session:
            result = await session.execute(
                select(grant_proposals).where(grant_proposals.c.id == proposal_id)
            )
            row = result.first()
        return _row_to_proposal(row) if row else None

    async def _select(self, *criteria: Any, newest_first: bool = False) -> list[GrantProposal]:
        order = (
            grant_proposals.c.created_at.desc()
            if newest_first
            else grant_proposals.c.created_at.asc()
        )
        async with self._session_factory() as session:
            result = await session.execute(
                select(grant_proposals).where(*criteria).order_by(order)
            )
            return [_row_to_proposal(row) for row in result]

    async def list_by_year(
        self,
        year: int,
        statuses: Collection[ProposalStatus] | None = None,
    ) -> list[GrantProposal]:
        criteria: list[Any] = [grant_proposals.c.budget_year == year]
        if statuses is not None:
            criteria.append(grant_proposals.c.status.in_([s.value for s in statuses]))
        return await self._select(*criteria)

    async def list_by_statuses(
        self, statuses: Collection[ProposalStatus]
    ) -> list[GrantProposal]:
        return await self._select(
            grant_proposals.c.status.in_([s.value for s in statuses])
        )

    async def list_by_ids(self, proposal_ids: Collection[UUID]) -> list[GrantProposal]:
        if not proposal_ids:
            return []
        return await self._select(grant_proposals.c.id.in_(list(proposal_ids)))

    async def list_by_proposer(self, proposer_id: UUID) -> list[GrantProposal]:
        return await self._select(
            grant_proposals.c.proposer_id == proposer_id, newest_first=True
        )

    async def list_budget_years(self) -> list[int]:
        async with self._session_factory() as session:
            result = await session.execute(
                select(grant_proposals.c.budget_year)
                .distinct()
                .order_by(grant_proposals.c.budget_year.desc())
            )
            return [row[0] for row in result]

    async def replace_if_version(
        self,
        proposal: GrantProposal,
        expected_version: int,
    ) -> bool:
        async with self._session_factory() as session, session.begin():
            result = await session.execute(
                update(grant_proposals)
                .where(
                    grant_proposals.c.id == proposal.id,
                    grant_proposals.c.version == expected_version,
                )
                .values(**_mutable_values(proposal))
            )
        applied = result.rowcount == 1
        if not applied:
            logger.debug(
                "proposal_cas_missed",
                proposal_id=str(proposal.id),
                expected_version=expected_version,
            )
        return applied
