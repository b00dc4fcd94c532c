"""Budget repository port.

One budget record per fiscal year. Writing a year that already exists
replaces its record.
"""

from __future__ import annotations

from typing import Protocol

from grantflow.domain.models.budget import Budget


class BudgetRepositoryProtocol(Protocol):
    """Protocol for budget storage.

    Methods:
        get: Budget for a year
        upsert: Insert or replace a year's budget
        list_years: All configured years
        get_latest: Budget with the highest year
    """

    async def get(self, year: int) -> Budget | None:
        """Retrieve the budget for a year.

        Args:
            year: Fiscal year.

        Returns:
            The budget if configured, None otherwise.
        """
        ...

    async def upsert(self, budget: Budget) -> Budget:
        """Insert or replace the budget for ``budget.year``.

        Args:
            budget: Budget to store.

        Returns:
            The stored budget.
        """
        ...

    async def list_years(self) -> list[int]:
        """List configured budget years, newest first."""
        ...

    async def get_latest(self) -> Budget | None:
        """Retrieve the budget with the highest year, if any."""
        ...
