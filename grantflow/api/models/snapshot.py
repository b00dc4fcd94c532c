"""Foundation and workspace snapshot response models."""

from __future__ import annotations

from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel

from grantflow.api.models.common import Amount, DateTimeWithZ
from grantflow.api.models.proposal import ProposalResponse, ProposalViewResponse
from grantflow.application.dtos.snapshots import (
    ActionItemDTO,
    BudgetSummaryDTO,
    FoundationSnapshotDTO,
    HistoryByYearPointDTO,
    PersonalBudgetDTO,
    VoteHistoryEntryDTO,
    WorkspaceSnapshotDTO,
)
from grantflow.domain.models.member import AppRole
from grantflow.domain.models.proposal import ProposalType
from grantflow.domain.models.vote import VoteChoice


class BudgetSummaryResponse(BaseModel):
    year: int
    total: Amount
    rollover_from_previous_year: Amount
    joint_ratio: Decimal
    discretionary_ratio: Decimal
    joint_pool: Amount
    discretionary_pool: Amount
    joint_allocated: Amount
    discretionary_allocated: Amount
    joint_remaining: Amount
    discretionary_remaining: Amount
    meeting_reveal_enabled: bool

    @classmethod
    def from_dto(cls, dto: BudgetSummaryDTO) -> BudgetSummaryResponse:
        return cls(
            year=dto.year,
            total=dto.total,
            rollover_from_previous_year=dto.rollover_from_previous_year,
            joint_ratio=dto.joint_ratio,
            discretionary_ratio=dto.discretionary_ratio,
            joint_pool=dto.joint_pool,
            discretionary_pool=dto.discretionary_pool,
            joint_allocated=dto.joint_allocated,
            discretionary_allocated=dto.discretionary_allocated,
            joint_remaining=dto.joint_remaining,
            discretionary_remaining=dto.discretionary_remaining,
            meeting_reveal_enabled=dto.meeting_reveal_enabled,
        )


class HistoryPointResponse(BaseModel):
    year: int
    joint_sent: Amount
    discretionary_sent: Amount
    total_donated: Amount

    @classmethod
    def from_dto(cls, dto: HistoryByYearPointDTO) -> HistoryPointResponse:
        return cls(
            year=dto.year,
            joint_sent=dto.joint_sent,
            discretionary_sent=dto.discretionary_sent,
            total_donated=dto.total_donated,
        )


class FoundationSnapshotResponse(BaseModel):
    budget: BudgetSummaryResponse
    proposals: list[ProposalViewResponse]
    history_by_year: list[HistoryPointResponse]
    available_budget_years: list[int]

    @classmethod
    def from_dto(cls, dto: FoundationSnapshotDTO) -> FoundationSnapshotResponse:
        return cls(
            budget=BudgetSummaryResponse.from_dto(dto.budget),
            proposals=[ProposalViewResponse.from_domain(v) for v in dto.proposals],
            history_by_year=[HistoryPointResponse.from_dto(p) for p in dto.history_by_year],
            available_budget_years=list(dto.available_budget_years),
        )


class PersonalBudgetResponse(BaseModel):
    joint_target: Amount
    joint_allocated: Amount
    joint_remaining: Amount
    discretionary_cap: Amount
    discretionary_allocated: Amount
    discretionary_remaining: Amount

    @classmethod
    def from_dto(cls, dto: PersonalBudgetDTO) -> PersonalBudgetResponse:
        return cls(
            joint_target=dto.joint_target,
            joint_allocated=dto.joint_allocated,
            joint_remaining=dto.joint_remaining,
            discretionary_cap=dto.discretionary_cap,
            discretionary_allocated=dto.discretionary_allocated,
            discretionary_remaining=dto.discretionary_remaining,
        )


class ActionItemResponse(BaseModel):
    proposal_id: UUID
    title: str
    proposal_type: ProposalType
    vote_progress_label: str

    @classmethod
    def from_dto(cls, dto: ActionItemDTO) -> ActionItemResponse:
        return cls(
            proposal_id=dto.proposal_id,
            title=dto.title,
            proposal_type=dto.proposal_type,
            vote_progress_label=dto.vote_progress_label,
        )


class VoteHistoryEntryResponse(BaseModel):
    proposal_id: UUID
    proposal_title: str
    choice: VoteChoice
    amount: Amount
    at: DateTimeWithZ

    @classmethod
    def from_dto(cls, dto: VoteHistoryEntryDTO) -> VoteHistoryEntryResponse:
        return cls(
            proposal_id=dto.proposal_id,
            proposal_title=dto.proposal_title,
            choice=dto.choice,
            amount=dto.amount,
            at=dto.at,
        )


class WorkspaceUserResponse(BaseModel):
    id: UUID
    name: str
    role: AppRole


class WorkspaceSnapshotResponse(BaseModel):
    user: WorkspaceUserResponse
    year: int
    personal_budget: PersonalBudgetResponse
    action_items: list[ActionItemResponse]
    vote_history: list[VoteHistoryEntryResponse]
    submitted_gifts: list[ProposalResponse]

    @classmethod
    def from_dto(cls, dto: WorkspaceSnapshotDTO) -> WorkspaceSnapshotResponse:
        return cls(
            user=WorkspaceUserResponse(
                id=dto.member.id, name=dto.member.name, role=dto.member.role
            ),
            year=dto.year,
            personal_budget=PersonalBudgetResponse.from_dto(dto.personal_budget),
            action_items=[ActionItemResponse.from_dto(i) for i in dto.action_items],
            vote_history=[VoteHistoryEntryResponse.from_dto(e) for e in dto.vote_history],
            submitted_gifts=[ProposalResponse.from_domain(p) for p in dto.submitted_gifts],
        )
