"""Vote domain model.

A vote is write-once and unique per (proposal_id, voter_id). The choice
set depends on the proposal type, so ballots are modelled as a small
tagged union:

    joint:          JointYes(amount) | JointNo
    discretionary:  Acknowledged | Flagged(comment)

Ballots are validated when built; the flat Vote record is what the
ledger stores.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Union
from uuid import UUID, uuid4

from grantflow.domain.errors.vote import VoteValidationError
from grantflow.domain.models.proposal import ProposalType
from grantflow.domain.primitives.money import ZERO, is_valid_amount, round_dollars


class VoteChoice(Enum):
    """Flat vote choice as stored."""

    YES = "yes"
    NO = "no"
    ACKNOWLEDGED = "acknowledged"
    FLAGGED = "flagged"


JOINT_CHOICES: frozenset[VoteChoice] = frozenset({VoteChoice.YES, VoteChoice.NO})
DISCRETIONARY_CHOICES: frozenset[VoteChoice] = frozenset(
    {VoteChoice.ACKNOWLEDGED, VoteChoice.FLAGGED}
)


@dataclass(frozen=True)
class JointYes:
    """Joint approval pledging an allocation (whole dollars)."""

    amount: Decimal

    def __post_init__(self) -> None:
        if not is_valid_amount(self.amount):
            raise ValueError("allocation amount must be a finite, non-negative amount")


@dataclass(frozen=True)
class JointNo:
    """Joint rejection; allocates nothing."""


@dataclass(frozen=True)
class Acknowledged:
    """Discretionary acknowledgement."""


@dataclass(frozen=True)
class Flagged:
    """Discretionary concern raised for the meeting."""

    comment: str

    def __post_init__(self) -> None:
        if not self.comment.strip():
            raise ValueError("flag comment must not be empty")


Ballot = Union[JointYes, JointNo, Acknowledged, Flagged]


def ballot_from_choice(
    proposal_type: ProposalType,
    choice: VoteChoice,
    allocation_amount: Decimal | None = None,
    flag_comment: str | None = None,
) -> Ballot:
    """Build a typed ballot from flat request fields.

    Any amount sent must be a valid amount, whatever the choice. Joint
    ``yes`` allocations are rounded to whole dollars; every other ballot
    drops the amount.

    Args:
        proposal_type: Type of the proposal being voted on.
        choice: Raw choice.
        allocation_amount: Pledge for joint ``yes`` votes.
        flag_comment: Comment for discretionary ``flagged`` votes.

    Returns:
        The typed ballot.

    Raises:
        VoteValidationError: If the choice does not fit the proposal type or
            a required field is missing or invalid.
    """
    if allocation_amount is not None and not is_valid_amount(allocation_amount):
        raise VoteValidationError(
            "Allocation amount must be between 0 and 999,999,999,999.",
            field="allocation_amount",
        )

    if proposal_type is ProposalType.JOINT:
        if choice not in JOINT_CHOICES:
            raise VoteValidationError("Joint proposals only accept yes or no votes.")
        if choice is VoteChoice.NO:
            return JointNo()
        if allocation_amount is None:
            raise VoteValidationError(
                "A yes vote requires an allocation amount.",
                field="allocation_amount",
            )
        return JointYes(amount=round_dollars(allocation_amount))

    if choice not in DISCRETIONARY_CHOICES:
        raise VoteValidationError(
            "Discretionary proposals only accept acknowledged or flagged votes."
        )
    if choice is VoteChoice.ACKNOWLEDGED:
        return Acknowledged()
    comment = (flag_comment or "").strip()
    if not comment:
        raise VoteValidationError(
            "A flagged vote requires a comment.", field="flag_comment"
        )
    return Flagged(comment=comment)


def _utc_now() -> datetime:
    """Return current UTC time with timezone info."""
    return datetime.now(timezone.utc)


@dataclass(frozen=True, eq=True)
class Vote:
    """A stored vote.

    Attributes:
        id: Vote identifier.
        proposal_id: Proposal voted on.
        voter_id: Member who voted.
        choice: Flat choice.
        allocation_amount: Pledge (non-zero only for joint yes votes).
        flag_comment: Comment (only for flagged votes).
        created_at: When the vote was cast (UTC).
    """

    id: UUID
    proposal_id: UUID
    voter_id: UUID
    choice: VoteChoice
    allocation_amount: Decimal = field(default=ZERO)
    flag_comment: str | None = field(default=None)
    created_at: datetime = field(default_factory=_utc_now)

    def __post_init__(self) -> None:
        """Validate vote fields."""
        if not is_valid_amount(self.allocation_amount):
            raise ValueError("allocation_amount must be a finite, non-negative amount")
        if self.choice is not VoteChoice.YES and self.allocation_amount != ZERO:
            raise ValueError("only yes votes carry an allocation amount")
        if self.flag_comment is not None and self.choice is not VoteChoice.FLAGGED:
            raise ValueError("only flagged votes carry a comment")

    @classmethod
    def from_ballot(
        cls,
        proposal_id: UUID,
        voter_id: UUID,
        ballot: Ballot,
        vote_id: UUID | None = None,
    ) -> Vote:
        """Flatten a typed ballot into a storable vote."""
        if isinstance(ballot, JointYes):
            choice, amount, comment = VoteChoice.YES, ballot.amount, None
        elif isinstance(ballot, JointNo):
            choice, amount, comment = VoteChoice.NO, ZERO, None
        elif isinstance(ballot, Acknowledged):
            choice, amount, comment = VoteChoice.ACKNOWLEDGED, ZERO, None
        elif isinstance(ballot, Flagged):
            choice, amount, comment = VoteChoice.FLAGGED, ZERO, ballot.comment
        else:
            raise TypeError(f"Unknown ballot type: {type(ballot).__name__}")
        return cls(
            id=vote_id or uuid4(),
            proposal_id=proposal_id,
            voter_id=voter_id,
            choice=choice,
            allocation_amount=amount,
            flag_comment=comment,
        )
