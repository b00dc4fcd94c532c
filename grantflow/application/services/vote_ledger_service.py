"""Vote Ledger.

Records one write-once vote per (proposal, voter). Votes are blind until
the proposal's votes are revealed; masking happens when progress is
computed, never at storage.

Preconditions checked, in order:
    1. voter holds a voting role                  -> Forbidden
    2. proposal exists                            -> NotFound
    3. voter is not the discretionary proposer    -> Forbidden
    4. proposal is still to_review                -> Conflict
    5. ballot fits the proposal type              -> Validation
    6. voter has not voted yet                    -> Conflict

The last check is repeated atomically by the repository, so two racing
votes from the same member still store exactly one row.
"""

from __future__ import annotations

from collections.abc import Collection
from decimal import Decimal
from uuid import UUID

from grantflow.application.ports.proposal_repository import ProposalRepositoryProtocol
from grantflow.application.ports.vote_repository import VoteRepositoryProtocol
from grantflow.application.services.base import LoggingMixin
from grantflow.domain.errors import (
    AlreadyVotedError,
    NotVotingMemberError,
    ProposalNotFoundError,
    SelfVoteForbiddenError,
    VotingClosedError,
)
from grantflow.domain.models.member import Member
from grantflow.domain.models.proposal import ProposalStatus, ProposalType
from grantflow.domain.models.vote import Vote, VoteChoice, ballot_from_choice


class VoteLedgerService(LoggingMixin):
    """Casts and lists votes."""

    def __init__(
        self,
        vote_repository: VoteRepositoryProtocol,
        proposal_repository: ProposalRepositoryProtocol,
    ) -> None:
        self._votes = vote_repository
        self._proposals = proposal_repository
        self._init_logger(component="votes")

    async def cast_vote(
        self,
        proposal_id: UUID,
        voter: Member,
        choice: VoteChoice,
        allocation_amount: Decimal | None = None,
        flag_comment: str | None = None,
    ) -> Vote:
        """Record a member's vote on a proposal.

        Args:
            proposal_id: Proposal voted on.
            voter: Voting member.
            choice: Raw choice (yes/no for joint, acknowledged/flagged for
                discretionary).
            allocation_amount: Pledge for a joint yes vote.
            flag_comment: Comment for a flagged vote.

        Returns:
            The stored vote.

        Raises:
            NotVotingMemberError: If the voter's role does not vote.
            ProposalNotFoundError: If the proposal does not exist.
            SelfVoteForbiddenError: If the voter proposed this discretionary
                proposal.
            VotingClosedError: If the proposal is no longer to_review.
            VoteValidationError: If the ballot does not fit the proposal.
            AlreadyVotedError: If the voter already voted on the proposal.
        """
        log = self._log_operation(
            "cast_vote",
            proposal_id=str(proposal_id),
            voter_id=str(voter.id),
            choice=choice.value,
        )

        # 1. Role
        if not voter.is_voting:
            log.warning("vote_rejected_not_voting_member", role=voter.role.value)
            raise NotVotingMemberError(voter.id)

        # 2. Proposal
        proposal = await self._proposals.get(proposal_id)
        if proposal is None:
            log.warning("vote_rejected_proposal_not_found")
            raise ProposalNotFoundError(proposal_id)

        # 3. Self vote on own discretionary proposal
        if (
            proposal.proposal_type is ProposalType.DISCRETIONARY
            and proposal.proposer_id == voter.id
        ):
            log.warning("vote_rejected_self_vote")
            raise SelfVoteForbiddenError(proposal_id, voter.id)

        # 4. Voting window
        if proposal.status is not ProposalStatus.TO_REVIEW:
            log.warning("vote_rejected_voting_closed", status=proposal.status.value)
            raise VotingClosedError(proposal_id, proposal.status)

        # 5. Ballot shape
        ballot = ballot_from_choice(
            proposal.proposal_type, choice, allocation_amount, flag_comment
        )

        # 6. Duplicate check (repository re-checks atomically)
        existing = await self._votes.get_existing(proposal_id, voter.id)
        if existing is not None:
            log.warning("vote_rejected_already_voted", existing_vote_id=str(existing.id))
            raise AlreadyVotedError(
                proposal_id,
                voter.id,
                existing_vote_id=existing.id,
                voted_at=existing.created_at,
            )

        vote = Vote.from_ballot(proposal_id, voter.id, ballot)
        try:
            stored = await self._votes.create(vote)
        except AlreadyVotedError:
            log.warning("vote_rejected_concurrent_duplicate")
            raise

        log.info(
            "vote_recorded",
            vote_id=str(stored.id),
            allocation_amount=str(stored.allocation_amount),
        )
        return stored

    async def list_votes(self, proposal_id: UUID) -> list[Vote]:
        """Votes of a proposal in the order they were cast."""
        return await self._votes.list_for_proposal(proposal_id)

    async def has_voted(self, proposal_id: UUID, voter_id: UUID) -> bool:
        return await self._votes.get_existing(proposal_id, voter_id) is not None

    async def list_votes_for_proposals(
        self, proposal_ids: Collection[UUID]
    ) -> dict[UUID, list[Vote]]:
        if not proposal_ids:
            return {}
        return await self._votes.list_for_proposals(proposal_ids)

    async def list_votes_by_voter(self, voter_id: UUID) -> list[Vote]:
        """A member's votes, newest first."""
        return await self._votes.list_for_voter(voter_id)
