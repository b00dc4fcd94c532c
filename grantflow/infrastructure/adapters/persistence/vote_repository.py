"""SQL vote repository.

A vote is inserted in the same transaction that bumps its proposal
version with a conditional update on ``status = to_review``. The row
lock taken by that update orders the vote against decisions on the same
proposal. The ``uq_votes_proposal_voter`` constraint decides races
between duplicate votes; the losing insert surfaces as AlreadyVotedError.
Any other integrity error is re-raised.
"""

from __future__ import annotations

from collections.abc import Collection
from decimal import Decimal
from typing import Any
from uuid import UUID

from sqlalchemy import insert, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from structlog import get_logger

from grantflow.application.ports.vote_repository import VoteRepositoryProtocol
from grantflow.domain.errors import (
    AlreadyVotedError,
    ProposalNotFoundError,
    VotingClosedError,
)
from grantflow.domain.models.proposal import ProposalStatus
from grantflow.domain.models.vote import Vote, VoteChoice
from grantflow.infrastructure.adapters.persistence.tables import (
    as_utc,
    grant_proposals,
    votes,
)

logger = get_logger(__name__)


def _row_to_vote(row: Any) -> Vote:
    return Vote(
        id=row.id,
        proposal_id=row.proposal_id,
        voter_id=row.voter_id,
        choice=VoteChoice(row.choice),
        allocation_amount=Decimal(row.allocation_amount),
        flag_comment=row.flag_comment,
        created_at=as_utc(row.created_at),
    )


class SqlVoteRepository(VoteRepositoryProtocol):
    """Vote storage on the ``votes`` table."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def create(self, vote: Vote) -> Vote:
        try:
            async with self._session_factory() as session, session.begin():
                # Locks the proposal row until the insert commits; a decision
                # committed first leaves no to_review row to match.
                opened = await session.execute(
                    update(grant_proposals)
                    .where(
                        grant_proposals.c.id == vote.proposal_id,
                        grant_proposals.c.status == ProposalStatus.TO_REVIEW.value,
                    )
                    .values(version=grant_proposals.c.version + 1)
                )
                if opened.rowcount != 1:
                    status = await session.scalar(
                        select(grant_proposals.c.status).where(
                            grant_proposals.c.id == vote.proposal_id
                        )
                    )
                    if status is None:
                        raise ProposalNotFoundError(vote.proposal_id)
                    raise VotingClosedError(vote.proposal_id, ProposalStatus(status))
                await session.execute(
                    insert(votes).values(
                        id=vote.id,
                        proposal_id=vote.proposal_id,
                        voter_id=vote.voter_id,
                        choice=vote.choice.value,
                        allocation_amount=vote.allocation_amount,
                        flag_comment=vote.flag_comment,
                        created_at=vote.created_at,
                    )
                )
        except IntegrityError as e:
            existing = await self.get_existing(vote.proposal_id, vote.voter_id)
            if existing is None:
                logger.error(
                    "vote_insert_integrity_error",
                    proposal_id=str(vote.proposal_id),
                    voter_id=str(vote.voter_id),
                    error=str(e.orig),
                )
                raise
            logger.info(
                "vote_unique_violation",
                proposal_id=str(vote.proposal_id),
                voter_id=str(vote.voter_id),
            )
            raise AlreadyVotedError(
                vote.proposal_id,
                vote.voter_id,
                existing_vote_id=existing.id,
                voted_at=existing.created_at,
            ) from e
        return vote

    async def get_existing(self, proposal_id: UUID, voter_id: UUID) -> Vote | None:
        async with self._session_factory() as session:
            result = await session.execute(
                select(votes).where(
                    votes.c.proposal_id == proposal_id,
                    votes.c.voter_id == voter_id,
                )
            )
            row = result.first()
        return _row_to_vote(row) if row else None

    async def list_for_proposal(self, proposal_id: UUID) -> list[Vote]:
        async with self._session_factory() as session:
            result = await session.execute(
                select(votes)
                .where(votes.c.proposal_id == proposal_id)
                .order_by(votes.c.seq.asc())
            )
            return [_row_to_vote(row) for row in result]

    async def list_for_proposals(
        self, proposal_ids: Collection[UUID]
    ) -> dict[UUID, list[Vote]]:
        if not proposal_ids:
            return {}
        async with self._session_factory() as session:
            result = await session.execute(
                select(votes)
                .where(votes.c.proposal_id.in_(list(proposal_ids)))
                .order_by(votes.c.seq.asc())
            )
            grouped: dict[UUID, list[Vote]] = {}
            for row in result:
                vote = _row_to_vote(row)
                grouped.setdefault(vote.proposal_id, []).append(vote)
        return grouped

    async def list_for_voter(self, voter_id: UUID) -> list[Vote]:
        async with self._session_factory() as session:
            result = await session.execute(
                select(votes)
                .where(votes.c.voter_id == voter_id)
                .order_by(votes.c.seq.desc())
            )
            return [_row_to_vote(row) for row in result]
