"""Budget domain model.

One budget exists per fiscal year. Updating a year's budget supersedes
the previous record for that year; budgets are never deleted.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from uuid import UUID

from grantflow.domain.primitives.money import ZERO, is_valid_amount


def _utc_now() -> datetime:
    """Return current UTC time with timezone info."""
    return datetime.now(timezone.utc)


@dataclass(frozen=True, eq=True)
class Budget:
    """A fiscal year's giving budget.

    Ratio-sum validation needs the configured tolerance and is done by the
    budget ledger before construction. This class only guards values that
    are never valid.

    Attributes:
        year: Fiscal year (unique key).
        total_amount: New money for the year (>= 0).
        joint_ratio: Share of the available amount for joint giving.
        discretionary_ratio: Share for discretionary giving.
        rollover_from_previous_year: Unspent money carried in (>= 0).
        meeting_reveal_enabled: Global display flag for the meeting stage.
        updated_by: Member who last wrote this budget.
        updated_at: Last write time (UTC).
    """

    year: int
    total_amount: Decimal
    joint_ratio: Decimal
    discretionary_ratio: Decimal
    rollover_from_previous_year: Decimal = field(default=ZERO)
    meeting_reveal_enabled: bool = field(default=False)
    updated_by: UUID | None = field(default=None)
    updated_at: datetime = field(default_factory=_utc_now)

    def __post_init__(self) -> None:
        """Validate budget fields."""
        if not is_valid_amount(self.total_amount):
            raise ValueError("Budget total_amount must be a finite, non-negative amount")
        if not is_valid_amount(self.rollover_from_previous_year):
            raise ValueError("Budget rollover must be a finite, non-negative amount")
        for name in ("joint_ratio", "discretionary_ratio"):
            value: Decimal = getattr(self, name)
            if not value.is_finite() or value < 0 or value > 1:
                raise ValueError(f"Budget {name} must be between 0 and 1")

    @property
    def available_amount(self) -> Decimal:
        """Total plus rollover, the base both pools are cut from."""
        return self.total_amount + self.rollover_from_previous_year


@dataclass(frozen=True, eq=True)
class BudgetPools:
    """Pool sizes derived from a budget (whole dollars)."""

    joint_pool: Decimal
    discretionary_pool: Decimal


@dataclass(frozen=True, eq=True)
class BudgetAllocation:
    """Amounts locked in by approved or sent proposals of one year."""

    joint_allocated: Decimal = ZERO
    discretionary_allocated: Decimal = ZERO

    @property
    def total_allocated(self) -> Decimal:
        return self.joint_allocated + self.discretionary_allocated
