"""SQL budget repository."""

from __future__ import annotations

from decimal import Decimal
from typing import Any

from sqlalchemy import delete, func, insert, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from grantflow.application.ports.budget_repository import BudgetRepositoryProtocol
from grantflow.domain.models.budget import Budget
from grantflow.infrastructure.adapters.persistence.tables import as_utc, budgets


def _row_to_budget(row: Any) -> Budget:
    return Budget(
        year=row.budget_year,
        total_amount=Decimal(row.annual_fund_size),
        joint_ratio=Decimal(row.joint_ratio),
        discretionary_ratio=Decimal(row.discretionary_ratio),
        rollover_from_previous_year=Decimal(row.rollover_from_previous_year),
        meeting_reveal_enabled=bool(row.meeting_reveal_enabled),
        updated_by=row.updated_by,
        updated_at=as_utc(row.updated_at),
    )


class SqlBudgetRepository(BudgetRepositoryProtocol):
    """Budget storage on the ``budgets`` table.

    Upsert replaces the year's row inside one transaction (delete then
    insert), which works the same on PostgreSQL and SQLite.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def get(self, year: int) -> Budget | None:
        async with self._session_factory() as session:
            result = await session.execute(
                select(budgets).where(budgets.c.budget_year == year)
            )
            row = result.first()
        return _row_to_budget(row) if row else None

    async def upsert(self, budget: Budget) -> Budget:
        values = {
            "budget_year": budget.year,
            "annual_fund_size": budget.total_amount,
            "joint_ratio": budget.joint_ratio,
            "discretionary_ratio": budget.discretionary_ratio,
            "rollover_from_previous_year": budget.rollover_from_previous_year,
            "meeting_reveal_enabled": budget.meeting_reveal_enabled,
            "updated_by": budget.updated_by,
            "updated_at": budget.updated_at,
        }
        async with self._session_factory() as session, session.begin():
            await session.execute(delete(budgets).where(budgets.c.budget_year == budget.year))
            await session.execute(insert(budgets).values(**values))
        return budget

    async def list_years(self) -> list[int]:
        async with self._session_factory() as session:
            result = await session.execute(
                select(budgets.c.budget_year).order_by(budgets.c.budget_year.desc())
            )
            return [row[0] for row in result]

    async def get_latest(self) -> Budget | None:
        async with self._session_factory() as session:
            latest = select(func.max(budgets.c.budget_year)).scalar_subquery()
            result = await session.execute(
                select(budgets).where(budgets.c.budget_year == latest)
            )
            row = result.first()
        return _row_to_budget(row) if row else None
