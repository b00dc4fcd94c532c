"""In-memory vote repository.

Votes are inserted under the proposal stub's write lock: the proposal
must still be to_review, the (proposal_id, voter_id) pair must be free,
and the insert bumps the proposal's version, all as one step. This plays
the part of the composite unique constraint and the proposal row lock of
the SQL store.
"""

from __future__ import annotations

import asyncio
from collections.abc import Collection
from uuid import UUID

from grantflow.application.ports.vote_repository import VoteRepositoryProtocol
from grantflow.domain.errors import (
    AlreadyVotedError,
    ProposalNotFoundError,
    VotingClosedError,
)
from grantflow.domain.models.proposal import ProposalStatus
from grantflow.domain.models.vote import Vote
from grantflow.infrastructure.stubs.proposal_repository_stub import (
    ProposalRepositoryStub,
)


class VoteRepositoryStub(VoteRepositoryProtocol):
    """In-memory implementation of VoteRepositoryProtocol.

    Attributes:
        _votes: Votes keyed by (proposal_id, voter_id), in insertion order.
        _proposals: Proposal store whose lock and versions votes share.
    """

    def __init__(self, proposals: ProposalRepositoryStub) -> None:
        """Initialize the stub with empty storage.

        Args:
            proposals: The proposal stub the votes belong to.
        """
        self._votes: dict[tuple[UUID, UUID], Vote] = {}
        self._proposals = proposals

    async def create(self, vote: Vote) -> Vote:
        key = (vote.proposal_id, vote.voter_id)
        async with self._proposals.write_lock:
            proposal = self._proposals.peek_locked(vote.proposal_id)
            if proposal is None:
                raise ProposalNotFoundError(vote.proposal_id)
            if proposal.status is not ProposalStatus.TO_REVIEW:
                raise VotingClosedError(vote.proposal_id, proposal.status)
            existing = self._votes.get(key)
            if existing is not None:
                raise AlreadyVotedError(
                    vote.proposal_id,
                    vote.voter_id,
                    existing_vote_id=existing.id,
                    voted_at=existing.created_at,
                )
            self._votes[key] = vote
            self._proposals.bump_version_locked(vote.proposal_id)
        return vote

    async def get_existing(self, proposal_id: UUID, voter_id: UUID) -> Vote | None:
        # Yield like real I/O so concurrent callers interleave
        await asyncio.sleep(0)
        return self._votes.get((proposal_id, voter_id))

    async def list_for_proposal(self, proposal_id: UUID) -> list[Vote]:
        return [v for (pid, _), v in self._votes.items() if pid == proposal_id]

    async def list_for_proposals(
        self, proposal_ids: Collection[UUID]
    ) -> dict[UUID, list[Vote]]:
        wanted = set(proposal_ids)
        grouped: dict[UUID, list[Vote]] = {}
        for (pid, _), vote in self._votes.items():
            if pid in wanted:
                grouped.setdefault(pid, []).append(vote)
        return grouped

    async def list_for_voter(self, voter_id: UUID) -> list[Vote]:
        matches = [v for (_, vid), v in self._votes.items() if vid == voter_id]
        return list(reversed(matches))

    @property
    def count(self) -> int:
        """Number of stored votes (for testing)."""
        return len(self._votes)

    def clear(self) -> None:
        """Clear all stored votes (for testing)."""
        self._votes.clear()
