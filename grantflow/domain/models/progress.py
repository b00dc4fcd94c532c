"""Derived proposal progress.

Progress is never stored. It is recomputed from the proposal, its votes
and the current set of voting members every time it is read.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from uuid import UUID

from grantflow.domain.models.proposal import GrantProposal
from grantflow.domain.models.vote import VoteChoice


@dataclass(frozen=True, eq=True)
class VoteBreakdownEntry:
    """One revealed vote."""

    voter_id: UUID
    choice: VoteChoice
    allocation_amount: Decimal
    flag_comment: str | None = None


@dataclass(frozen=True, eq=True)
class ProposalProgress:
    """Voting progress for one proposal.

    While ``masked`` is True, ``breakdown`` is None and ``choice_counts``
    is empty: only the aggregate counts and computed amount are exposed.

    Attributes:
        total_required_votes: Eligible voters for this proposal.
        votes_submitted: Eligible votes received.
        has_current_user_voted: Whether the viewing member has voted.
        masked: True until votes are revealed.
        computed_final_amount: Live tally, or the locked amount once approved.
        is_ready_for_meeting: All required votes are in.
        breakdown: Individual votes, only when unmasked.
        choice_counts: Votes per choice, only when unmasked.
    """

    total_required_votes: int
    votes_submitted: int
    has_current_user_voted: bool
    masked: bool
    computed_final_amount: Decimal
    is_ready_for_meeting: bool
    breakdown: tuple[VoteBreakdownEntry, ...] | None = field(default=None)
    choice_counts: dict[VoteChoice, int] = field(default_factory=dict)


@dataclass(frozen=True, eq=True)
class ProposalView:
    """A proposal together with its progress."""

    proposal: GrantProposal
    progress: ProposalProgress
