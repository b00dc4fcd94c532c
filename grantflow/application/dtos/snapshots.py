"""Snapshot DTOs for the foundation and workspace views."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from uuid import UUID

from grantflow.domain.models.member import Member
from grantflow.domain.models.progress import ProposalView
from grantflow.domain.models.proposal import GrantProposal, ProposalType
from grantflow.domain.models.vote import VoteChoice


@dataclass(frozen=True)
class BudgetSummaryDTO:
    """A year's budget with derived pools and allocations.

    ``*_remaining`` is ``pool - allocated`` and goes negative when the
    meeting approves more than the pool holds.
    """

    year: int
    total: Decimal
    rollover_from_previous_year: Decimal
    joint_ratio: Decimal
    discretionary_ratio: Decimal
    joint_pool: Decimal
    discretionary_pool: Decimal
    joint_allocated: Decimal
    discretionary_allocated: Decimal
    joint_remaining: Decimal
    discretionary_remaining: Decimal
    meeting_reveal_enabled: bool


@dataclass(frozen=True)
class HistoryByYearPointDTO:
    """Approved and sent giving of one year (whole dollars)."""

    year: int
    joint_sent: Decimal
    discretionary_sent: Decimal
    total_donated: Decimal


@dataclass(frozen=True)
class FoundationSnapshotDTO:
    """Foundation-wide view of one budget year.

    Attributes:
        budget: Budget summary of the year.
        proposals: The year's proposals with progress, oldest first.
        history_by_year: Giving per year, ascending by year.
        available_budget_years: Years with a budget or proposals, descending.
    """

    budget: BudgetSummaryDTO
    proposals: list[ProposalView]
    history_by_year: list[HistoryByYearPointDTO]
    available_budget_years: list[int]


@dataclass(frozen=True)
class PersonalBudgetDTO:
    """A member's own giving position for one year."""

    joint_target: Decimal
    joint_allocated: Decimal
    joint_remaining: Decimal
    discretionary_cap: Decimal
    discretionary_allocated: Decimal
    discretionary_remaining: Decimal


@dataclass(frozen=True)
class ActionItemDTO:
    """A proposal still waiting for the member's vote."""

    proposal_id: UUID
    title: str
    proposal_type: ProposalType
    votes_submitted: int
    total_required_votes: int

    @property
    def vote_progress_label(self) -> str:
        return f"{self.votes_submitted} of {self.total_required_votes} votes in"


@dataclass(frozen=True)
class VoteHistoryEntryDTO:
    """One of the member's past votes."""

    proposal_id: UUID
    proposal_title: str
    choice: VoteChoice
    amount: Decimal
    at: datetime


@dataclass(frozen=True)
class WorkspaceSnapshotDTO:
    """A member's personal view of one budget year."""

    member: Member
    year: int
    personal_budget: PersonalBudgetDTO
    action_items: list[ActionItemDTO] = field(default_factory=list)
    vote_history: list[VoteHistoryEntryDTO] = field(default_factory=list)
    submitted_gifts: list[GrantProposal] = field(default_factory=list)
