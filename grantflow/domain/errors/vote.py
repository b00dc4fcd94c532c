"""Vote ledger errors."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Any
from uuid import UUID

from grantflow.domain.errors.kinds import (
    ConflictError,
    ForbiddenError,
    ValidationError,
)

if TYPE_CHECKING:
    from grantflow.domain.models.proposal import ProposalStatus


class AlreadyVotedError(ConflictError):
    """Raised when a member votes twice on the same proposal.

    At most one vote row exists per (proposal_id, voter_id). The store
    enforces this; the ledger checks first for a clearer message.

    Attributes:
        proposal_id: The proposal already voted on.
        voter_id: The voter.
        existing_vote_id: Id of the stored vote (if known).
        voted_at: When the stored vote was cast (if known).
    """

    type_uri = "urn:grantflow:vote:already-voted"
    title = "Already Voted"

    def __init__(
        self,
        proposal_id: UUID,
        voter_id: UUID,
        existing_vote_id: UUID | None = None,
        voted_at: datetime | None = None,
    ) -> None:
        self.proposal_id = proposal_id
        self.voter_id = voter_id
        self.existing_vote_id = existing_vote_id
        self.voted_at = voted_at
        super().__init__(
            f"Member {voter_id} has already voted on proposal {proposal_id}."
        )

    def problem_extensions(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "proposal_id": str(self.proposal_id),
            "voter_id": str(self.voter_id),
        }
        if self.existing_vote_id is not None:
            result["existing_vote_id"] = str(self.existing_vote_id)
        if self.voted_at is not None:
            result["voted_at"] = self.voted_at.isoformat()
        return result


class VotingClosedError(ConflictError):
    """Raised when voting on a proposal that is no longer under review."""

    type_uri = "urn:grantflow:vote:voting-closed"
    title = "Voting Closed"

    def __init__(self, proposal_id: UUID, status: ProposalStatus) -> None:
        self.proposal_id = proposal_id
        self.status = status
        super().__init__(
            "Votes can only be submitted while the proposal is To Review "
            f"(proposal {proposal_id} is {status.value})."
        )

    def problem_extensions(self) -> dict[str, Any]:
        return {"proposal_id": str(self.proposal_id), "status": self.status.value}


class VoteValidationError(ValidationError):
    """Raised when a ballot does not fit the proposal type."""

    type_uri = "urn:grantflow:vote:invalid"
    title = "Invalid Vote"

    def __init__(self, message: str, field: str = "choice") -> None:
        self.field = field
        super().__init__(message)

    def problem_extensions(self) -> dict[str, Any]:
        return {"field": self.field}


class NotVotingMemberError(ForbiddenError):
    """Raised when a non-voting role attempts to vote."""

    type_uri = "urn:grantflow:vote:not-voting-member"
    title = "Not A Voting Member"

    def __init__(self, voter_id: UUID) -> None:
        self.voter_id = voter_id
        super().__init__("Only voting family members can cast votes.")

    def problem_extensions(self) -> dict[str, Any]:
        return {"voter_id": str(self.voter_id)}


class SelfVoteForbiddenError(ForbiddenError):
    """Raised when a proposer votes on their own discretionary proposal."""

    type_uri = "urn:grantflow:vote:self-vote"
    title = "Self Vote Forbidden"

    def __init__(self, proposal_id: UUID, voter_id: UUID) -> None:
        self.proposal_id = proposal_id
        self.voter_id = voter_id
        super().__init__("Discretionary proposer cannot vote on their own proposal.")

    def problem_extensions(self) -> dict[str, Any]:
        return {"proposal_id": str(self.proposal_id), "voter_id": str(self.voter_id)}
