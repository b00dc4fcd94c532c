"""Budget API request/response models."""

from __future__ import annotations

from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, Field

from grantflow.api.models.common import Amount, DateTimeWithZ
from grantflow.domain.models.budget import Budget, BudgetPools


class UpsertBudgetRequest(BaseModel):
    """Create or replace a year's budget.

    Omitted ratios keep the year's current values, or the configured
    defaults for a new year. An omitted ``meeting_reveal_enabled`` keeps
    the current flag.
    """

    total_amount: Decimal = Field(..., description="Annual fund size")
    rollover_from_previous_year: Decimal | None = None
    joint_ratio: Decimal | None = Field(default=None, ge=0, le=1)
    discretionary_ratio: Decimal | None = Field(default=None, ge=0, le=1)
    meeting_reveal_enabled: bool | None = None


class BudgetResponse(BaseModel):
    year: int
    total_amount: Amount
    rollover_from_previous_year: Amount
    available_amount: Amount
    joint_ratio: Decimal
    discretionary_ratio: Decimal
    joint_pool: Amount
    discretionary_pool: Amount
    meeting_reveal_enabled: bool
    updated_by: UUID | None
    updated_at: DateTimeWithZ

    @classmethod
    def from_domain(cls, budget: Budget, pools: BudgetPools) -> BudgetResponse:
        return cls(
            year=budget.year,
            total_amount=budget.total_amount,
            rollover_from_previous_year=budget.rollover_from_previous_year,
            available_amount=budget.available_amount,
            joint_ratio=budget.joint_ratio,
            discretionary_ratio=budget.discretionary_ratio,
            joint_pool=pools.joint_pool,
            discretionary_pool=pools.discretionary_pool,
            meeting_reveal_enabled=budget.meeting_reveal_enabled,
            updated_by=budget.updated_by,
            updated_at=budget.updated_at,
        )
