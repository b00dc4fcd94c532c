"""Vote repository port.

Implementations MUST insert a vote atomically with two checks: the
pair (proposal_id, voter_id) is still free and the proposal is still
to_review. The insert also increments the proposal version, so a
decision computed from an older set of votes loses its compare-and-swap.
Checking first in the service is not enough on its own: two concurrent
inserts must still end with one stored row, and a vote racing a decision
must never land on a decided proposal.
"""

from __future__ import annotations

from collections.abc import Collection
from typing import Protocol
from uuid import UUID

from grantflow.domain.models.vote import Vote


class VoteRepositoryProtocol(Protocol):
    """Protocol for vote storage.

    Methods:
        create: Insert a vote (unique per proposal and voter, to_review only)
        get_existing: A voter's vote on a proposal
        list_for_proposal: Votes of one proposal, insertion order
        list_for_proposals: Votes grouped by proposal
        list_for_voter: A voter's votes, newest first
    """

    async def create(self, vote: Vote) -> Vote:
        """Insert a vote while its proposal is still to_review.

        Args:
            vote: Vote to store.

        Returns:
            The stored vote.

        Raises:
            AlreadyVotedError: If the voter already voted on the proposal.
            VotingClosedError: If the proposal is no longer to_review.
            ProposalNotFoundError: If the proposal does not exist.
        """
        ...

    async def get_existing(self, proposal_id: UUID, voter_id: UUID) -> Vote | None:
        """Retrieve a voter's vote on a proposal, None if not voted."""
        ...

    async def list_for_proposal(self, proposal_id: UUID) -> list[Vote]:
        """List votes of a proposal in the order they were cast."""
        ...

    async def list_for_proposals(
        self, proposal_ids: Collection[UUID]
    ) -> dict[UUID, list[Vote]]:
        """List votes for several proposals.

        Returns:
            Map of proposal id to its votes in insertion order. Proposals
            without votes may be absent.
        """
        ...

    async def list_for_voter(self, voter_id: UUID) -> list[Vote]:
        """List a voter's votes, newest first."""
        ...
