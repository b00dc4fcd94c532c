"""Unit tests for the budget ledger."""

from decimal import Decimal
from uuid import uuid4

import pytest

from grantflow.application.services.budget_ledger_service import BudgetLedgerService
from grantflow.config.engine_config import EngineConfig
from grantflow.domain.errors import (
    BudgetAmountError,
    BudgetNotFoundError,
    BudgetRatioError,
)
from grantflow.infrastructure.stubs import BudgetRepositoryStub
from tests.helpers.builders import make_budget


@pytest.fixture
def repository() -> BudgetRepositoryStub:
    return BudgetRepositoryStub()


@pytest.fixture
def ledger(repository: BudgetRepositoryStub) -> BudgetLedgerService:
    return BudgetLedgerService(repository, EngineConfig())


class TestUpsertBudget:
    @pytest.mark.asyncio
    async def test_creates_with_default_ratios(self, ledger: BudgetLedgerService) -> None:
        actor = uuid4()

        budget = await ledger.upsert_budget(2026, Decimal("400000"), actor)

        assert budget.joint_ratio == Decimal("0.75")
        assert budget.discretionary_ratio == Decimal("0.25")
        assert budget.rollover_from_previous_year == Decimal("0")
        assert budget.updated_by == actor
        assert budget.meeting_reveal_enabled is False

    @pytest.mark.asyncio
    async def test_total_rounded_to_dollars(self, ledger: BudgetLedgerService) -> None:
        budget = await ledger.upsert_budget(
            2026,
            Decimal("1000.50"),
            uuid4(),
            rollover_from_previous_year=Decimal("10.49"),
        )

        assert budget.total_amount == Decimal("1001")
        assert budget.rollover_from_previous_year == Decimal("10")

    @pytest.mark.parametrize(
        ("joint", "discretionary"),
        [("0.75", "0.249"), ("0.75", "0.251"), ("1", "0")],
    )
    @pytest.mark.asyncio
    async def test_ratio_sum_within_tolerance(
        self, ledger: BudgetLedgerService, joint: str, discretionary: str
    ) -> None:
        """Sums in [0.999, 1.001] are accepted."""
        budget = await ledger.upsert_budget(
            2026,
            Decimal("1000"),
            uuid4(),
            joint_ratio=Decimal(joint),
            discretionary_ratio=Decimal(discretionary),
        )
        assert budget.joint_ratio == Decimal(joint)

    @pytest.mark.parametrize(
        ("joint", "discretionary"),
        [("0.75", "0.248"), ("0.75", "0.252"), ("1.2", "-0.2")],
    )
    @pytest.mark.asyncio
    async def test_ratio_sum_outside_tolerance(
        self, ledger: BudgetLedgerService, joint: str, discretionary: str
    ) -> None:
        with pytest.raises(BudgetRatioError) as exc_info:
            await ledger.upsert_budget(
                2026,
                Decimal("1000"),
                uuid4(),
                joint_ratio=Decimal(joint),
                discretionary_ratio=Decimal(discretionary),
            )
        assert exc_info.value.kind == "validation"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("amount", ["-1", "NaN", "Infinity", "1E+30"])
    async def test_invalid_total(self, ledger: BudgetLedgerService, amount: str) -> None:
        with pytest.raises(BudgetAmountError) as exc_info:
            await ledger.upsert_budget(2026, Decimal(amount), uuid4())
        assert exc_info.value.field == "total_amount"

    @pytest.mark.asyncio
    async def test_negative_rollover(self, ledger: BudgetLedgerService) -> None:
        with pytest.raises(BudgetAmountError) as exc_info:
            await ledger.upsert_budget(
                2026, Decimal("1"), uuid4(), rollover_from_previous_year=Decimal("-5")
            )
        assert exc_info.value.field == "rollover_from_previous_year"

    @pytest.mark.asyncio
    async def test_year_out_of_range(self, ledger: BudgetLedgerService) -> None:
        with pytest.raises(BudgetAmountError) as exc_info:
            await ledger.upsert_budget(1899, Decimal("1000"), uuid4())
        assert exc_info.value.field == "year"

    @pytest.mark.asyncio
    async def test_update_keeps_ratios_and_reveal_flag(
        self, ledger: BudgetLedgerService, repository: BudgetRepositoryStub
    ) -> None:
        await repository.upsert(
            make_budget(
                2026,
                joint_ratio="0.6",
                discretionary_ratio="0.4",
                rollover_from_previous_year=Decimal("500"),
                meeting_reveal_enabled=True,
            )
        )

        budget = await ledger.upsert_budget(2026, Decimal("90000"), uuid4())

        assert budget.total_amount == Decimal("90000")
        assert budget.joint_ratio == Decimal("0.6")
        assert budget.rollover_from_previous_year == Decimal("500")
        assert budget.meeting_reveal_enabled is True


class TestReadBudget:
    @pytest.mark.asyncio
    async def test_missing_year(self, ledger: BudgetLedgerService) -> None:
        with pytest.raises(BudgetNotFoundError) as exc_info:
            await ledger.get_budget(2026)
        assert exc_info.value.year == 2026
        assert await ledger.find_budget(2026) is None

    @pytest.mark.asyncio
    async def test_resolve_latest(
        self, ledger: BudgetLedgerService, repository: BudgetRepositoryStub
    ) -> None:
        await repository.upsert(make_budget(2024))
        await repository.upsert(make_budget(2026))

        assert (await ledger.resolve_budget(None)).year == 2026
        assert (await ledger.resolve_budget(2024)).year == 2024
        assert await ledger.list_years() == [2026, 2024]

    @pytest.mark.asyncio
    async def test_resolve_latest_without_budgets(self, ledger: BudgetLedgerService) -> None:
        with pytest.raises(BudgetNotFoundError) as exc_info:
            await ledger.resolve_budget(None)
        assert exc_info.value.year is None


class TestDerivedFigures:
    def test_cap_uses_configured_ceiling(self, repository: BudgetRepositoryStub) -> None:
        ledger = BudgetLedgerService(
            repository, EngineConfig(discretionary_cap_ceiling=Decimal("2000"))
        )
        assert ledger.compute_discretionary_cap_per_member(Decimal("100000"), 20) == (
            Decimal("2000")
        )

    def test_pools(self, ledger: BudgetLedgerService) -> None:
        pools = ledger.compute_pools(make_budget(total_amount="400000"))
        assert (pools.joint_pool, pools.discretionary_pool) == (
            Decimal("300000"),
            Decimal("100000"),
        )
