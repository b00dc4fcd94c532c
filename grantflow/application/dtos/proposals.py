"""Proposal input DTOs."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from uuid import UUID

from grantflow.domain.models.proposal import AllocationMode, ProposalType


@dataclass(frozen=True)
class ProposalSubmission:
    """Input for submitting a proposal.

    Text fields arrive untrimmed; the registry trims and validates them.

    Attributes:
        proposal_type: JOINT or DISCRETIONARY.
        budget_year: Year the proposal draws from.
        title: Grant title.
        description: What the grant is for.
        proposed_amount: Amount requested.
        allocation_mode: Ignored for joint proposals (always SUM).
        organization_id: External organization reference.
        website: Organization website.
        charity_navigator_url: Charity rating page.
        notes: Free-form notes.
    """

    proposal_type: ProposalType
    budget_year: int
    title: str
    description: str
    proposed_amount: Decimal
    allocation_mode: AllocationMode = AllocationMode.SUM
    organization_id: UUID | None = None
    website: str | None = None
    charity_navigator_url: str | None = None
    notes: str | None = None
