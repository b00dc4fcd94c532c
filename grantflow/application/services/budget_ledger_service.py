"""Budget Ledger.

Holds the per-year budget configuration and derives pools, caps and
allocated totals from it. Role checks for writes happen in the
lifecycle controller; this service assumes the caller is authorised.
"""

from __future__ import annotations

from collections.abc import Iterable
from decimal import Decimal
from uuid import UUID

import structlog

from grantflow.application.ports.budget_repository import BudgetRepositoryProtocol
from grantflow.application.services.base import LoggingMixin
from grantflow.config.engine_config import DEFAULT_ENGINE_CONFIG, EngineConfig
from grantflow.domain.errors import BudgetAmountError, BudgetNotFoundError, BudgetRatioError
from grantflow.domain.models.budget import Budget, BudgetAllocation, BudgetPools
from grantflow.domain.models.progress import ProposalView
from grantflow.domain.primitives.money import ZERO, is_valid_amount, round_dollars
from grantflow.domain.services import allocation


class BudgetLedgerService(LoggingMixin):
    """Reads and writes yearly budgets and derives pool figures."""

    def __init__(
        self,
        repository: BudgetRepositoryProtocol,
        config: EngineConfig | None = None,
    ) -> None:
        """Initialize the budget ledger.

        Args:
            repository: Budget storage.
            config: Budget rules (defaults when omitted).
        """
        self._repository = repository
        self._config = config or DEFAULT_ENGINE_CONFIG
        self._init_logger(component="budget")

    async def get_budget(self, year: int) -> Budget:
        """Get the budget of a year.

        Raises:
            BudgetNotFoundError: If the year has no budget.
        """
        budget = await self._repository.get(year)
        if budget is None:
            raise BudgetNotFoundError(year)
        return budget

    async def find_budget(self, year: int) -> Budget | None:
        return await self._repository.get(year)

    async def get_latest_budget(self) -> Budget:
        """Get the budget with the highest year.

        Raises:
            BudgetNotFoundError: If no budget has been configured.
        """
        budget = await self._repository.get_latest()
        if budget is None:
            raise BudgetNotFoundError(None)
        return budget

    async def resolve_budget(self, year: int | None) -> Budget:
        """Budget for ``year``, or the latest one when year is None."""
        if year is None:
            return await self.get_latest_budget()
        return await self.get_budget(year)

    async def list_years(self) -> list[int]:
        return await self._repository.list_years()

    async def upsert_budget(
        self,
        year: int,
        total_amount: Decimal,
        actor_id: UUID,
        rollover_from_previous_year: Decimal | None = None,
        joint_ratio: Decimal | None = None,
        discretionary_ratio: Decimal | None = None,
        meeting_reveal_enabled: bool | None = None,
    ) -> Budget:
        """Create or replace a year's budget.

        Omitted ratios fall back to the year's current ratios, then to the
        configured defaults. An omitted rollover keeps the current value
        (zero for a new year). ``meeting_reveal_enabled`` is preserved
        unless given.

        Args:
            year: Fiscal year.
            total_amount: New money for the year.
            actor_id: Member performing the write.
            rollover_from_previous_year: Carried-in amount.
            joint_ratio: Joint share.
            discretionary_ratio: Discretionary share.
            meeting_reveal_enabled: Global meeting display flag.

        Returns:
            The stored budget.

        Raises:
            BudgetAmountError: If the year is out of range or an amount is
                negative or not finite.
            BudgetRatioError: If a ratio is outside [0, 1] or the ratios do
                not total 1 within tolerance.
        """
        log = self._log_operation("upsert_budget", year=year, actor_id=str(actor_id))

        if not self._config.min_budget_year <= year <= self._config.max_budget_year:
            log.warning("budget_rejected_year_out_of_range")
            raise BudgetAmountError(
                "year",
                f"Budget year must be between {self._config.min_budget_year} "
                f"and {self._config.max_budget_year}.",
            )

        existing = await self._repository.get(year)

        rollover = rollover_from_previous_year
        if rollover is None:
            rollover = existing.rollover_from_previous_year if existing else ZERO

        for field_name, amount in (
            ("total_amount", total_amount),
            ("rollover_from_previous_year", rollover),
        ):
            if not is_valid_amount(amount):
                log.warning("budget_rejected_invalid_amount", field=field_name)
                raise BudgetAmountError(
                    field_name, f"{field_name} must be between 0 and 999,999,999,999."
                )

        if joint_ratio is None:
            joint_ratio = existing.joint_ratio if existing else self._config.default_joint_ratio
        if discretionary_ratio is None:
            discretionary_ratio = (
                existing.discretionary_ratio
                if existing
                else self._config.default_discretionary_ratio
            )
        self._validate_ratios(joint_ratio, discretionary_ratio, log)

        budget = Budget(
            year=year,
            total_amount=round_dollars(total_amount),
            joint_ratio=joint_ratio,
            discretionary_ratio=discretionary_ratio,
            rollover_from_previous_year=round_dollars(rollover),
            meeting_reveal_enabled=(
                meeting_reveal_enabled
                if meeting_reveal_enabled is not None
                else (existing.meeting_reveal_enabled if existing else False)
            ),
            updated_by=actor_id,
        )
        stored = await self._repository.upsert(budget)
        log.info(
            "budget_upserted",
            created=existing is None,
            total_amount=str(stored.total_amount),
            joint_ratio=str(stored.joint_ratio),
            discretionary_ratio=str(stored.discretionary_ratio),
        )
        return stored

    def _validate_ratios(
        self,
        joint_ratio: Decimal,
        discretionary_ratio: Decimal,
        log: structlog.BoundLogger,
    ) -> None:
        for ratio in (joint_ratio, discretionary_ratio):
            if not ratio.is_finite() or ratio < 0 or ratio > 1:
                log.warning("budget_rejected_ratio_range")
                raise BudgetRatioError(
                    joint_ratio,
                    discretionary_ratio,
                    "Ratios must each be between 0 and 1.",
                )
        if abs(joint_ratio + discretionary_ratio - 1) > self._config.ratio_tolerance:
            log.warning(
                "budget_rejected_ratio_sum",
                ratio_sum=str(joint_ratio + discretionary_ratio),
            )
            raise BudgetRatioError(joint_ratio, discretionary_ratio)

    def compute_pools(self, budget: Budget) -> BudgetPools:
        return allocation.compute_pools(budget)

    def compute_discretionary_cap_per_member(
        self, discretionary_pool: Decimal, voting_member_count: int
    ) -> Decimal:
        """Per-member discretionary cap with the configured ceiling."""
        return allocation.compute_discretionary_cap_per_member(
            discretionary_pool,
            voting_member_count,
            ceiling=self._config.discretionary_cap_ceiling,
        )

    def compute_joint_target(self, joint_pool: Decimal, voting_member_count: int) -> Decimal:
        return allocation.compute_joint_target(joint_pool, voting_member_count)

    def compute_allocated(self, year: int, views: Iterable[ProposalView]) -> BudgetAllocation:
        """Approved and sent totals of ``year`` per pool."""
        return allocation.compute_allocated(year, views)
