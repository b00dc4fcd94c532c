"""In-memory budget repository."""

from __future__ import annotations

from grantflow.application.ports.budget_repository import BudgetRepositoryProtocol
from grantflow.domain.models.budget import Budget


class BudgetRepositoryStub(BudgetRepositoryProtocol):
    """In-memory implementation of BudgetRepositoryProtocol.

    Suitable for development and tests, not for production.

    Attributes:
        _budgets: Budgets keyed by year.
    """

    def __init__(self) -> None:
        self._budgets: dict[int, Budget] = {}

    async def get(self, year: int) -> Budget | None:
        return self._budgets.get(year)

    async def upsert(self, budget: Budget) -> Budget:
        self._budgets[budget.year] = budget
        return budget

    async def list_years(self) -> list[int]:
        return sorted(self._budgets, reverse=True)

    async def get_latest(self) -> Budget | None:
        if not self._budgets:
            return None
        return self._budgets[max(self._budgets)]

    def clear(self) -> None:
        """Clear all stored budgets (for testing)."""
        self._budgets.clear()
