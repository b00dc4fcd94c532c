"""Unit tests for the lifecycle controller."""

from datetime import date
from decimal import Decimal
from unittest.mock import AsyncMock
from uuid import uuid4

import pytest

from grantflow.application.dtos.proposals import ProposalSubmission
from grantflow.application.services.lifecycle_controller import LifecycleController
from grantflow.bootstrap.foundation import FoundationServices
from grantflow.domain.errors import (
    BudgetNotFoundError,
    DiscretionaryCapExceededError,
    RoleNotPermittedError,
)
from grantflow.domain.models.member import AppRole, Member
from grantflow.domain.models.patch import ProposalPatch
from grantflow.domain.models.proposal import ProposalStatus, ProposalType
from grantflow.domain.models.vote import VoteChoice
from grantflow.infrastructure.stubs import AuditLogStub, MemberDirectoryStub
from tests.helpers.builders import make_budget, make_proposal


def _discretionary(amount: str, year: int = 2026) -> ProposalSubmission:
    return ProposalSubmission(
        proposal_type=ProposalType.DISCRETIONARY,
        budget_year=year,
        title="Food Bank",
        description="Winter meals.",
        proposed_amount=Decimal(amount),
    )


def _joint(amount: str = "1000", year: int = 2026) -> ProposalSubmission:
    return ProposalSubmission(
        proposal_type=ProposalType.JOINT,
        budget_year=year,
        title="River Trust",
        description="Wetland restoration.",
        proposed_amount=Decimal(amount),
    )


@pytest.fixture
async def twenty_voters(
    services: FoundationServices, member_directory: MemberDirectoryStub
) -> None:
    """Grow the directory to 20 voting members on a 100k discretionary pool.

    That puts every member's discretionary cap at 5000.
    """
    for n in range(16):
        member_directory.add(Member(id=uuid4(), name=f"Cousin {n}", role=AppRole.MEMBER))
    await services.adapters.budgets.upsert(make_budget(2026))


@pytest.fixture
async def budget_2026(services: FoundationServices) -> None:
    await services.adapters.budgets.upsert(make_budget(2026))


class TestDiscretionaryCap:
    @pytest.mark.asyncio
    async def test_within_cap(
        self, controller: LifecycleController, twenty_voters: None, alice: Member
    ) -> None:
        first = await controller.submit_proposal(alice, _discretionary("3000"))
        second = await controller.submit_proposal(alice, _discretionary("2000"))

        assert first.proposal.proposed_amount == Decimal("3000.00")
        assert second.progress.total_required_votes == 19

    @pytest.mark.asyncio
    async def test_cumulative_overrun(
        self, controller: LifecycleController, twenty_voters: None, alice: Member
    ) -> None:
        await controller.submit_proposal(alice, _discretionary("3000"))

        with pytest.raises(DiscretionaryCapExceededError) as exc_info:
            await controller.submit_proposal(alice, _discretionary("2001"))

        error = exc_info.value
        assert error.cap == Decimal("5000")
        assert error.already_allocated == Decimal("3000.00")
        assert error.remaining == Decimal("2000.00")
        assert error.status_code == 400

    @pytest.mark.asyncio
    async def test_declined_releases_cap(
        self,
        services: FoundationServices,
        controller: LifecycleController,
        twenty_voters: None,
        alice: Member,
    ) -> None:
        await services.adapters.proposals.save(
            make_proposal(
                alice.id,
                ProposalType.DISCRETIONARY,
                proposed_amount="5000",
                status=ProposalStatus.DECLINED,
            )
        )

        view = await controller.submit_proposal(alice, _discretionary("5000"))

        assert view.proposal.status is ProposalStatus.TO_REVIEW

    @pytest.mark.asyncio
    async def test_cap_is_per_member(
        self,
        controller: LifecycleController,
        twenty_voters: None,
        alice: Member,
        bob: Member,
    ) -> None:
        await controller.submit_proposal(alice, _discretionary("5000"))
        view = await controller.submit_proposal(bob, _discretionary("5000"))
        assert view.proposal.proposer_id == bob.id

    @pytest.mark.asyncio
    async def test_cap_locks_one_per_member_and_year(
        self,
        controller: LifecycleController,
        twenty_voters: None,
        alice: Member,
        bob: Member,
    ) -> None:
        for _ in range(3):
            await controller.submit_proposal(alice, _discretionary("1000"))
        await controller.submit_proposal(bob, _discretionary("1000"))
        await controller.submit_proposal(alice, _joint())

        assert set(controller._cap_locks) == {(alice.id, 2026), (bob.id, 2026)}

    @pytest.mark.asyncio
    async def test_joint_not_capped(
        self, controller: LifecycleController, twenty_voters: None, alice: Member
    ) -> None:
        view = await controller.submit_proposal(alice, _joint("250000"))
        assert view.proposal.proposed_amount == Decimal("250000.00")

    @pytest.mark.asyncio
    async def test_repricing_excludes_itself(
        self,
        controller: LifecycleController,
        twenty_voters: None,
        alice: Member,
        oversight: Member,
    ) -> None:
        view = await controller.submit_proposal(alice, _discretionary("4000"))

        updated = await controller.update_proposal(
            oversight,
            view.proposal.id,
            ProposalPatch(proposed_amount=Decimal("5000")),
            current_year=2026,
        )
        assert updated.proposal.proposed_amount == Decimal("5000.00")

        with pytest.raises(DiscretionaryCapExceededError):
            await controller.update_proposal(
                oversight,
                view.proposal.id,
                ProposalPatch(proposed_amount=Decimal("5000.01")),
                current_year=2026,
            )

    @pytest.mark.asyncio
    async def test_submission_requires_budget(
        self, controller: LifecycleController, alice: Member
    ) -> None:
        with pytest.raises(BudgetNotFoundError):
            await controller.submit_proposal(alice, _joint(year=2030))


class TestAuditTrail:
    @pytest.mark.asyncio
    async def test_mutations_are_audited(
        self,
        controller: LifecycleController,
        budget_2026: None,
        audit_log: AuditLogStub,
        alice: Member,
        bob: Member,
        oversight: Member,
        admin: Member,
    ) -> None:
        view = await controller.submit_proposal(alice, _joint())
        proposal_id = view.proposal.id
        await controller.cast_vote(bob, proposal_id, VoteChoice.YES, Decimal("500"))
        await controller.reveal_proposal(oversight, proposal_id, True)
        await controller.record_meeting_decision(
            oversight, proposal_id, ProposalStatus.APPROVED
        )
        sent = await controller.record_meeting_decision(
            admin, proposal_id, ProposalStatus.SENT, sent_at=date(2026, 6, 1)
        )

        assert audit_log.actions_for(proposal_id) == [
            "submit_proposal",
            "reveal_votes",
            "meeting_decision_approved",
            "meeting_decision_sent",
        ]
        assert sent.proposal.final_amount == Decimal("500")
        last = audit_log.entries[-1]
        assert last.actor_id == admin.id
        assert last.details == {
            "status": "sent",
            "final_amount": "500",
            "sent_at": "2026-06-01",
        }

    @pytest.mark.asyncio
    async def test_budget_write_audited(
        self,
        controller: LifecycleController,
        audit_log: AuditLogStub,
        manager: Member,
    ) -> None:
        budget = await controller.upsert_budget(manager, 2027, Decimal("50000"))

        assert budget.updated_by == manager.id
        assert audit_log.actions_for("2027") == ["upsert_budget"]

    @pytest.mark.asyncio
    async def test_audit_failure_does_not_fail_operation(
        self, services: FoundationServices, budget_2026: None, alice: Member
    ) -> None:
        failing_log = AsyncMock()
        failing_log.write.side_effect = RuntimeError("audit store down")
        controller = LifecycleController(
            services.budget_ledger,
            services.vote_ledger,
            services.registry,
            services.snapshots,
            failing_log,
        )

        view = await controller.submit_proposal(alice, _joint())

        assert view.proposal.title == "River Trust"
        failing_log.write.assert_awaited_once()


class TestRoleGates:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("role_fixture", ["alice", "admin"])
    async def test_budget_write_roles(
        self,
        request: pytest.FixtureRequest,
        controller: LifecycleController,
        role_fixture: str,
    ) -> None:
        actor: Member = request.getfixturevalue(role_fixture)
        with pytest.raises(RoleNotPermittedError):
            await controller.upsert_budget(actor, 2026, Decimal("1000"))

    @pytest.mark.asyncio
    async def test_meeting_agenda(
        self,
        services: FoundationServices,
        controller: LifecycleController,
        budget_2026: None,
        manager: Member,
        alice: Member,
    ) -> None:
        pending = make_proposal()
        await services.adapters.proposals.save(pending)
        await services.adapters.proposals.save(make_proposal(status=ProposalStatus.APPROVED))

        year, views = await controller.get_meeting_proposals(manager)

        assert year == 2026
        assert [view.proposal.id for view in views] == [pending.id]
        with pytest.raises(RoleNotPermittedError):
            await controller.get_meeting_proposals(alice)

    @pytest.mark.asyncio
    async def test_admin_queue(
        self,
        services: FoundationServices,
        controller: LifecycleController,
        budget_2026: None,
        admin: Member,
        bob: Member,
    ) -> None:
        approved = make_proposal(status=ProposalStatus.APPROVED)
        await services.adapters.proposals.save(approved)
        await services.adapters.proposals.save(make_proposal())

        year, views = await controller.get_admin_queue(admin, 2026)

        assert year == 2026
        assert [view.proposal.id for view in views] == [approved.id]
        with pytest.raises(RoleNotPermittedError):
            await controller.get_admin_queue(bob)

    @pytest.mark.asyncio
    async def test_snapshot_passthrough(
        self,
        controller: LifecycleController,
        budget_2026: None,
        alice: Member,
    ) -> None:
        foundation = await controller.get_foundation_snapshot(None)
        workspace = await controller.get_workspace_snapshot(alice)

        assert foundation.budget.year == 2026
        assert workspace.year == 2026
