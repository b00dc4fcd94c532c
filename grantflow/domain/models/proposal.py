"""Grant proposal domain model.

State Machine:
    TO_REVIEW -> APPROVED (meeting decision)
    TO_REVIEW -> DECLINED (meeting decision)
    APPROVED -> SENT (payment executed)

DECLINED and SENT are terminal. No transition returns a proposal to
TO_REVIEW. Proposals are never deleted.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from datetime import date, datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Any
from uuid import UUID

from grantflow.domain.primitives.money import is_valid_amount


class ProposalType(Enum):
    """Kind of funding request.

    Types:
        JOINT: voted on by every voting member; amount is the sum of pledges
        DISCRETIONARY: owned by one member; amount set by the proposer
    """

    JOINT = "joint"
    DISCRETIONARY = "discretionary"


class AllocationMode(Enum):
    """How votes fold into an amount. Joint proposals always use SUM."""

    SUM = "sum"
    AVERAGE = "average"


class ProposalStatus(Enum):
    """Lifecycle status of a proposal."""

    TO_REVIEW = "to_review"
    APPROVED = "approved"
    DECLINED = "declined"
    SENT = "sent"

    def is_terminal(self) -> bool:
        """Check if no further transition is possible from this status."""
        return not STATUS_TRANSITIONS.get(self)

    def is_decided(self) -> bool:
        """Check if a meeting decision has been recorded."""
        return self is not ProposalStatus.TO_REVIEW

    def valid_transitions(self) -> frozenset[ProposalStatus]:
        """Get valid transitions from this status.

        Returns:
            Frozenset of statuses this status can move to. Empty for
            terminal statuses.
        """
        return STATUS_TRANSITIONS.get(self, frozenset())

    @property
    def counts_toward_allocation(self) -> bool:
        """Approved and sent proposals consume their pool."""
        return self in ALLOCATED_STATUSES


# Status transition matrix
STATUS_TRANSITIONS: dict[ProposalStatus, frozenset[ProposalStatus]] = {
    ProposalStatus.TO_REVIEW: frozenset(
        {ProposalStatus.APPROVED, ProposalStatus.DECLINED}
    ),
    ProposalStatus.APPROVED: frozenset({ProposalStatus.SENT}),
    ProposalStatus.DECLINED: frozenset(),
    ProposalStatus.SENT: frozenset(),
}

ALLOCATED_STATUSES: frozenset[ProposalStatus] = frozenset(
    {ProposalStatus.APPROVED, ProposalStatus.SENT}
)

# Statuses whose amount still counts against a member's discretionary cap
ACTIVE_STATUSES: frozenset[ProposalStatus] = frozenset(
    {ProposalStatus.TO_REVIEW, ProposalStatus.APPROVED, ProposalStatus.SENT}
)


def _utc_now() -> datetime:
    """Return current UTC time with timezone info."""
    return datetime.now(timezone.utc)


@dataclass(frozen=True, eq=True)
class GrantProposal:
    """A grant proposal.

    proposal_type, proposer_id, budget_year, organization_id and created_at
    are fixed at creation. Since the dataclass is frozen, every change
    produces a new instance through one of the ``with_*`` helpers.

    Attributes:
        id: Proposal identifier.
        proposal_type: JOINT or DISCRETIONARY.
        proposer_id: Member who submitted the proposal.
        budget_year: Fiscal year the proposal draws from.
        title: Short name of the grant (usually the organization name).
        description: What the money is for.
        proposed_amount: Amount asked for, in dollars and cents.
        allocation_mode: SUM for joint; SUM or AVERAGE for discretionary.
        status: Lifecycle status.
        reveal_votes: Whether individual votes are visible.
        organization_id: External organization reference (optional).
        notes: Free-form notes kept by oversight.
        website: Organization website.
        charity_navigator_url: Charity rating page.
        final_amount: Amount locked in when the proposal was approved.
        sent_at: Date the payment went out.
        created_at: Creation time (UTC).
        updated_at: Last modification time (UTC).
        version: Write counter. Every stored change, a cast vote included,
            increments it; writes compare it to detect concurrent changes.
    """

    id: UUID
    proposal_type: ProposalType
    proposer_id: UUID
    budget_year: int
    title: str
    description: str
    proposed_amount: Decimal
    allocation_mode: AllocationMode = field(default=AllocationMode.SUM)
    status: ProposalStatus = field(default=ProposalStatus.TO_REVIEW)
    reveal_votes: bool = field(default=False)
    organization_id: UUID | None = field(default=None)
    notes: str | None = field(default=None)
    website: str | None = field(default=None)
    charity_navigator_url: str | None = field(default=None)
    final_amount: Decimal | None = field(default=None)
    sent_at: date | None = field(default=None)
    created_at: datetime = field(default_factory=_utc_now)
    updated_at: datetime = field(default_factory=_utc_now)
    version: int = field(default=0)

    def __post_init__(self) -> None:
        """Validate proposal fields and force joint proposals to SUM."""
        if self.proposal_type is ProposalType.JOINT and (
            self.allocation_mode is not AllocationMode.SUM
        ):
            object.__setattr__(self, "allocation_mode", AllocationMode.SUM)
        if not is_valid_amount(self.proposed_amount):
            raise ValueError("proposed_amount must be a finite, non-negative amount")
        if self.final_amount is not None and not is_valid_amount(self.final_amount):
            raise ValueError("final_amount must be a finite, non-negative amount")
        if not self.title.strip():
            raise ValueError("title must not be empty")
        if not self.description.strip():
            raise ValueError("description must not be empty")

    @property
    def is_joint(self) -> bool:
        return self.proposal_type is ProposalType.JOINT

    @property
    def is_discretionary(self) -> bool:
        return self.proposal_type is ProposalType.DISCRETIONARY

    def with_reveal(self, reveal: bool) -> GrantProposal:
        """Return a copy with the vote visibility flag set."""
        return replace(
            self, reveal_votes=reveal, updated_at=_utc_now(), version=self.version + 1
        )

    def with_decision(
        self,
        status: ProposalStatus,
        final_amount: Decimal | None,
        sent_at: date | None,
    ) -> GrantProposal:
        """Return a copy carrying a meeting decision.

        Every decision reveals the votes. Transition validity is checked
        by the caller against STATUS_TRANSITIONS.

        Args:
            status: The decided status.
            final_amount: Locked amount (None keeps the current value).
            sent_at: Payment date (None keeps the current value).

        Returns:
            New GrantProposal with the decision applied.
        """
        return replace(
            self,
            status=status,
            reveal_votes=True,
            final_amount=final_amount if final_amount is not None else self.final_amount,
            sent_at=sent_at if sent_at is not None else self.sent_at,
            updated_at=_utc_now(),
            version=self.version + 1,
        )

    def with_changes(self, changes: Mapping[str, Any]) -> GrantProposal:
        """Return a copy with validated record edits applied."""
        return replace(
            self, **changes, updated_at=_utc_now(), version=self.version + 1
        )
