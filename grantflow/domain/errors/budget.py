"""Budget ledger errors."""

from __future__ import annotations

from decimal import Decimal
from typing import Any

from grantflow.domain.errors.kinds import NotFoundError, ValidationError


class BudgetNotFoundError(NotFoundError):
    """Raised when no budget record exists for a fiscal year.

    Callers must provision a budget before proposals can be submitted
    against that year.

    Attributes:
        year: The fiscal year that was looked up (None when no budget
            exists at all).
    """

    type_uri = "urn:grantflow:budget:not-found"
    title = "Budget Not Found"

    def __init__(self, year: int | None) -> None:
        self.year = year
        if year is None:
            message = "No budget configured yet. Create one first."
        else:
            message = f"No budget configured for {year}."
        super().__init__(message)

    def problem_extensions(self) -> dict[str, Any]:
        return {"year": self.year}


class BudgetRatioError(ValidationError):
    """Raised when joint and discretionary ratios do not total 1.

    Attributes:
        joint_ratio: Submitted joint ratio.
        discretionary_ratio: Submitted discretionary ratio.
    """

    type_uri = "urn:grantflow:budget:ratio"
    title = "Invalid Budget Ratios"

    def __init__(
        self,
        joint_ratio: Decimal,
        discretionary_ratio: Decimal,
        message: str | None = None,
    ) -> None:
        self.joint_ratio = joint_ratio
        self.discretionary_ratio = discretionary_ratio
        super().__init__(
            message
            or (
                "Joint and discretionary ratios must total 1 "
                f"(got {joint_ratio} + {discretionary_ratio})."
            )
        )

    def problem_extensions(self) -> dict[str, Any]:
        return {
            "joint_ratio": str(self.joint_ratio),
            "discretionary_ratio": str(self.discretionary_ratio),
        }


class BudgetAmountError(ValidationError):
    """Raised when a budget amount or year is out of range."""

    type_uri = "urn:grantflow:budget:amount"
    title = "Invalid Budget Amount"

    def __init__(self, field: str, message: str) -> None:
        self.field = field
        super().__init__(message)

    def problem_extensions(self) -> dict[str, Any]:
        return {"field": self.field}
