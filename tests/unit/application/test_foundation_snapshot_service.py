"""Unit tests for foundation and workspace snapshots."""

from decimal import Decimal

import pytest

from grantflow.bootstrap.foundation import FoundationServices
from grantflow.domain.errors import BudgetNotFoundError
from grantflow.domain.models.member import Member
from grantflow.domain.models.proposal import GrantProposal, ProposalStatus, ProposalType
from grantflow.domain.models.vote import VoteChoice
from tests.helpers.builders import make_budget, make_proposal


@pytest.fixture
async def seeded(
    services: FoundationServices, alice: Member, bob: Member
) -> dict[str, GrantProposal]:
    """Two budget years with a mix of decided and pending proposals."""
    await services.adapters.budgets.upsert(make_budget(2025, total_amount="100000"))
    await services.adapters.budgets.upsert(make_budget(2026))

    proposals = {
        "approved_joint": make_proposal(
            alice.id, status=ProposalStatus.APPROVED, final_amount=Decimal("650")
        ),
        "pending_discretionary": make_proposal(
            alice.id, ProposalType.DISCRETIONARY, proposed_amount="2000"
        ),
        "sent_discretionary": make_proposal(
            bob.id,
            ProposalType.DISCRETIONARY,
            proposed_amount="1500",
            status=ProposalStatus.SENT,
            final_amount=Decimal("1500"),
        ),
        "declined_joint": make_proposal(status=ProposalStatus.DECLINED),
        "past_joint": make_proposal(
            budget_year=2025, status=ProposalStatus.SENT, final_amount=Decimal("300")
        ),
        "open_joint": make_proposal(alice.id),
    }
    for proposal in proposals.values():
        await services.adapters.proposals.save(proposal)
    return proposals


class TestFoundationSnapshot:
    @pytest.mark.asyncio
    async def test_budget_summary(
        self, services: FoundationServices, seeded: dict[str, GrantProposal]
    ) -> None:
        snapshot = await services.snapshots.get_foundation_snapshot(2026)

        budget = snapshot.budget
        assert budget.year == 2026
        assert budget.total == Decimal("400000")
        assert budget.joint_pool == Decimal("300000")
        assert budget.discretionary_pool == Decimal("100000")
        assert budget.joint_allocated == Decimal("650")
        assert budget.discretionary_allocated == Decimal("1500")
        assert budget.joint_remaining == Decimal("299350")
        assert budget.discretionary_remaining == Decimal("98500")

    @pytest.mark.asyncio
    async def test_lists_only_selected_year(
        self, services: FoundationServices, seeded: dict[str, GrantProposal]
    ) -> None:
        snapshot = await services.snapshots.get_foundation_snapshot(2026)

        ids = {view.proposal.id for view in snapshot.proposals}
        assert seeded["past_joint"].id not in ids
        assert len(ids) == 5

    @pytest.mark.asyncio
    async def test_history_and_years(
        self, services: FoundationServices, seeded: dict[str, GrantProposal]
    ) -> None:
        snapshot = await services.snapshots.get_foundation_snapshot(2026)

        assert [point.year for point in snapshot.history_by_year] == [2025, 2026]
        past, current = snapshot.history_by_year
        assert past.joint_sent == Decimal("300")
        assert past.discretionary_sent == Decimal("0")
        assert current.joint_sent == Decimal("650")
        assert current.discretionary_sent == Decimal("1500")
        assert current.total_donated == Decimal("2150")
        assert snapshot.available_budget_years == [2026, 2025]

    @pytest.mark.asyncio
    async def test_year_defaults_to_latest_budget(
        self, services: FoundationServices, seeded: dict[str, GrantProposal]
    ) -> None:
        snapshot = await services.snapshots.get_foundation_snapshot()
        assert snapshot.budget.year == 2026

    @pytest.mark.asyncio
    async def test_overspent_pool_goes_negative(
        self, services: FoundationServices
    ) -> None:
        await services.adapters.budgets.upsert(make_budget(2026, total_amount="1000"))
        await services.adapters.proposals.save(
            make_proposal(status=ProposalStatus.APPROVED, final_amount=Decimal("900"))
        )

        snapshot = await services.snapshots.get_foundation_snapshot(2026)

        assert snapshot.budget.joint_remaining == Decimal("-150")

    @pytest.mark.asyncio
    async def test_missing_budget(self, services: FoundationServices) -> None:
        with pytest.raises(BudgetNotFoundError):
            await services.snapshots.get_foundation_snapshot()
        with pytest.raises(BudgetNotFoundError):
            await services.snapshots.get_foundation_snapshot(2031)


class TestWorkspaceSnapshot:
    @pytest.mark.asyncio
    async def test_personal_budget(
        self,
        services: FoundationServices,
        seeded: dict[str, GrantProposal],
        bob: Member,
    ) -> None:
        await services.vote_ledger.cast_vote(
            seeded["open_joint"].id, bob, VoteChoice.YES, Decimal("200")
        )

        snapshot = await services.snapshots.get_workspace_snapshot(bob, 2026)

        personal = snapshot.personal_budget
        # Four voting members share the pools
        assert personal.joint_target == Decimal("75000")
        assert personal.joint_allocated == Decimal("200")
        assert personal.joint_remaining == Decimal("74800")
        assert personal.discretionary_cap == Decimal("25000")
        assert personal.discretionary_allocated == Decimal("1500")
        assert personal.discretionary_remaining == Decimal("23500")

    @pytest.mark.asyncio
    async def test_action_items_skip_voted_and_own(
        self,
        services: FoundationServices,
        seeded: dict[str, GrantProposal],
        alice: Member,
        bob: Member,
    ) -> None:
        await services.vote_ledger.cast_vote(
            seeded["open_joint"].id, bob, VoteChoice.NO
        )

        bob_view = await services.snapshots.get_workspace_snapshot(bob)
        alice_view = await services.snapshots.get_workspace_snapshot(alice)

        assert [item.proposal_id for item in bob_view.action_items] == [
            seeded["pending_discretionary"].id
        ]
        assert bob_view.action_items[0].vote_progress_label == "0 of 3 votes in"
        # Alice proposed the pending discretionary one and cannot vote on it
        assert [item.proposal_id for item in alice_view.action_items] == [
            seeded["open_joint"].id
        ]

    @pytest.mark.asyncio
    async def test_non_voting_member_has_no_action_items(
        self,
        services: FoundationServices,
        seeded: dict[str, GrantProposal],
        admin: Member,
    ) -> None:
        snapshot = await services.snapshots.get_workspace_snapshot(admin)
        assert snapshot.action_items == []

    @pytest.mark.asyncio
    async def test_vote_history_and_gifts(
        self,
        services: FoundationServices,
        seeded: dict[str, GrantProposal],
        bob: Member,
    ) -> None:
        await services.vote_ledger.cast_vote(
            seeded["open_joint"].id, bob, VoteChoice.YES, Decimal("40")
        )
        await services.vote_ledger.cast_vote(
            seeded["pending_discretionary"].id,
            bob,
            VoteChoice.FLAGGED,
            flag_comment="Why now?",
        )

        snapshot = await services.snapshots.get_workspace_snapshot(bob)

        assert [entry.proposal_id for entry in snapshot.vote_history] == [
            seeded["pending_discretionary"].id,
            seeded["open_joint"].id,
        ]
        assert snapshot.vote_history[1].amount == Decimal("40")
        assert snapshot.vote_history[1].proposal_title == "River Trust"
        assert [gift.id for gift in snapshot.submitted_gifts] == [
            seeded["sent_discretionary"].id
        ]
        assert snapshot.member == bob
        assert snapshot.year == 2026
