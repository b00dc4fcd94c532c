"""Proposal API request/response models."""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Any
from uuid import UUID

from pydantic import BaseModel, Field, model_validator

from grantflow.api.models.common import Amount, DateTimeWithZ
from grantflow.application.dtos.proposals import ProposalSubmission
from grantflow.domain.models.patch import ProposalPatch
from grantflow.domain.models.progress import (
    ProposalProgress,
    ProposalView,
    VoteBreakdownEntry,
)
from grantflow.domain.models.proposal import (
    AllocationMode,
    GrantProposal,
    ProposalStatus,
    ProposalType,
)
from grantflow.domain.models.vote import VoteChoice

_NON_NULLABLE_PATCH_FIELDS = ("title", "description", "proposed_amount", "final_amount")


class SubmitProposalRequest(BaseModel):
    """Request to submit a grant proposal."""

    proposal_type: ProposalType
    budget_year: int
    title: str = Field(..., max_length=500)
    description: str = Field(..., max_length=10000)
    proposed_amount: Decimal
    allocation_mode: AllocationMode = AllocationMode.SUM
    organization_id: UUID | None = None
    website: str | None = Field(default=None, max_length=2048)
    charity_navigator_url: str | None = Field(default=None, max_length=2048)
    notes: str | None = Field(default=None, max_length=10000)

    def to_submission(self) -> ProposalSubmission:
        return ProposalSubmission(
            proposal_type=self.proposal_type,
            budget_year=self.budget_year,
            title=self.title,
            description=self.description,
            proposed_amount=self.proposed_amount,
            allocation_mode=self.allocation_mode,
            organization_id=self.organization_id,
            website=self.website,
            charity_navigator_url=self.charity_navigator_url,
            notes=self.notes,
        )


class UpdateProposalRequest(BaseModel):
    """Partial update of a proposal record.

    Only fields present in the body are applied. ``null`` clears notes,
    website, charity_navigator_url and sent_at.
    """

    title: str | None = Field(default=None, max_length=500)
    description: str | None = Field(default=None, max_length=10000)
    proposed_amount: Decimal | None = None
    notes: str | None = Field(default=None, max_length=10000)
    website: str | None = Field(default=None, max_length=2048)
    charity_navigator_url: str | None = Field(default=None, max_length=2048)
    final_amount: Decimal | None = None
    sent_at: date | None = None

    @model_validator(mode="after")
    def reject_null_required_fields(self) -> UpdateProposalRequest:
        """Fields that cannot be cleared must not be sent as null."""
        for name in _NON_NULLABLE_PATCH_FIELDS:
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"{name} cannot be null")
        return self

    def to_patch(self) -> ProposalPatch:
        changes: dict[str, Any] = {
            name: getattr(self, name) for name in self.model_fields_set
        }
        return ProposalPatch(**changes)


class VoteBreakdownResponse(BaseModel):
    voter_id: UUID
    choice: VoteChoice
    allocation_amount: Amount
    flag_comment: str | None = None

    @classmethod
    def from_domain(cls, entry: VoteBreakdownEntry) -> VoteBreakdownResponse:
        return cls(
            voter_id=entry.voter_id,
            choice=entry.choice,
            allocation_amount=entry.allocation_amount,
            flag_comment=entry.flag_comment,
        )


class ProposalProgressResponse(BaseModel):
    """Voting progress; breakdown and choice counts only once revealed."""

    total_required_votes: int
    votes_submitted: int
    has_current_user_voted: bool
    masked: bool
    computed_final_amount: Amount
    is_ready_for_meeting: bool
    breakdown: list[VoteBreakdownResponse] | None = None
    choice_counts: dict[str, int] = Field(default_factory=dict)

    @classmethod
    def from_domain(cls, progress: ProposalProgress) -> ProposalProgressResponse:
        breakdown = None
        if progress.breakdown is not None:
            breakdown = [VoteBreakdownResponse.from_domain(e) for e in progress.breakdown]
        return cls(
            total_required_votes=progress.total_required_votes,
            votes_submitted=progress.votes_submitted,
            has_current_user_voted=progress.has_current_user_voted,
            masked=progress.masked,
            computed_final_amount=progress.computed_final_amount,
            is_ready_for_meeting=progress.is_ready_for_meeting,
            breakdown=breakdown,
            choice_counts={
                choice.value: count for choice, count in progress.choice_counts.items()
            },
        )


class ProposalResponse(BaseModel):
    id: UUID
    proposal_type: ProposalType
    proposer_id: UUID
    budget_year: int
    title: str
    description: str
    proposed_amount: Amount
    allocation_mode: AllocationMode
    status: ProposalStatus
    reveal_votes: bool
    organization_id: UUID | None = None
    notes: str | None = None
    website: str | None = None
    charity_navigator_url: str | None = None
    final_amount: Amount | None = None
    sent_at: date | None = None
    created_at: DateTimeWithZ
    updated_at: DateTimeWithZ

    @classmethod
    def from_domain(cls, proposal: GrantProposal) -> ProposalResponse:
        return cls(
            id=proposal.id,
            proposal_type=proposal.proposal_type,
            proposer_id=proposal.proposer_id,
            budget_year=proposal.budget_year,
            title=proposal.title,
            description=proposal.description,
            proposed_amount=proposal.proposed_amount,
            allocation_mode=proposal.allocation_mode,
            status=proposal.status,
            reveal_votes=proposal.reveal_votes,
            organization_id=proposal.organization_id,
            notes=proposal.notes,
            website=proposal.website,
            charity_navigator_url=proposal.charity_navigator_url,
            final_amount=proposal.final_amount,
            sent_at=proposal.sent_at,
            created_at=proposal.created_at,
            updated_at=proposal.updated_at,
        )


class ProposalViewResponse(BaseModel):
    proposal: ProposalResponse
    progress: ProposalProgressResponse

    @classmethod
    def from_domain(cls, view: ProposalView) -> ProposalViewResponse:
        return cls(
            proposal=ProposalResponse.from_domain(view.proposal),
            progress=ProposalProgressResponse.from_domain(view.progress),
        )


class ProposalListResponse(BaseModel):
    """Proposals of one budget year (meeting agenda, admin queue)."""

    year: int
    proposals: list[ProposalViewResponse]

    @classmethod
    def from_domain(cls, year: int, views: list[ProposalView]) -> ProposalListResponse:
        return cls(
            year=year, proposals=[ProposalViewResponse.from_domain(v) for v in views]
        )
