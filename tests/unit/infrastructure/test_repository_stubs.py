"""Unit tests for the in-memory port adapters."""

import asyncio
from uuid import uuid4

import pytest

from grantflow.domain.errors import (
    AlreadyVotedError,
    ProposalNotFoundError,
    VotingClosedError,
)
from grantflow.domain.models.proposal import ProposalStatus
from grantflow.domain.models.vote import VoteChoice
from grantflow.infrastructure.stubs import (
    BudgetRepositoryStub,
    ProposalRepositoryStub,
    VoteRepositoryStub,
)
from tests.helpers.builders import make_budget, make_proposal, make_vote


class TestBudgetRepositoryStub:
    @pytest.mark.asyncio
    async def test_upsert_replaces_year(self) -> None:
        repo = BudgetRepositoryStub()
        await repo.upsert(make_budget(2025))
        await repo.upsert(make_budget(2026, total_amount="1000"))
        await repo.upsert(make_budget(2026, total_amount="2000"))

        assert await repo.list_years() == [2026, 2025]
        latest = await repo.get_latest()
        assert latest is not None and latest.total_amount == 2000

    @pytest.mark.asyncio
    async def test_empty(self) -> None:
        repo = BudgetRepositoryStub()
        assert await repo.get(2026) is None
        assert await repo.get_latest() is None


class TestProposalRepositoryStub:
    @pytest.mark.asyncio
    async def test_duplicate_save_rejected(self) -> None:
        repo = ProposalRepositoryStub()
        proposal = make_proposal()
        await repo.save(proposal)

        with pytest.raises(ValueError):
            await repo.save(proposal)

    @pytest.mark.asyncio
    async def test_replace_if_version(self) -> None:
        repo = ProposalRepositoryStub()
        proposal = make_proposal()
        await repo.save(proposal)
        approved = proposal.with_decision(ProposalStatus.APPROVED, None, None)

        assert await repo.replace_if_version(approved, proposal.version)
        assert not await repo.replace_if_version(approved, proposal.version)
        stored = await repo.get(proposal.id)
        assert stored is not None
        assert stored.status is ProposalStatus.APPROVED
        assert stored.version == proposal.version + 1

    @pytest.mark.asyncio
    async def test_stale_edit_does_not_undo_reveal(self) -> None:
        repo = ProposalRepositoryStub()
        proposal = make_proposal()
        await repo.save(proposal)
        assert await repo.replace_if_version(proposal.with_reveal(True), proposal.version)

        stale_edit = proposal.with_changes({"title": "Renamed"})

        assert not await repo.replace_if_version(stale_edit, proposal.version)
        stored = await repo.get(proposal.id)
        assert stored is not None
        assert stored.reveal_votes is True
        assert stored.title == proposal.title

    @pytest.mark.asyncio
    async def test_list_filters(self) -> None:
        repo = ProposalRepositoryStub()
        proposer = uuid4()
        old = make_proposal(proposer, budget_year=2025)
        pending = make_proposal(proposer)
        declined = make_proposal(status=ProposalStatus.DECLINED)
        for proposal in (old, pending, declined):
            await repo.save(proposal)

        assert await repo.list_by_year(2026) == [pending, declined]
        assert await repo.list_by_year(2026, [ProposalStatus.TO_REVIEW]) == [pending]
        assert await repo.list_by_statuses([ProposalStatus.DECLINED]) == [declined]
        assert {p.id for p in await repo.list_by_proposer(proposer)} == {old.id, pending.id}
        assert await repo.list_budget_years() == [2026, 2025]


class TestVoteRepositoryStub:
    @pytest.fixture
    def proposals(self) -> ProposalRepositoryStub:
        return ProposalRepositoryStub()

    @pytest.fixture
    def repo(self, proposals: ProposalRepositoryStub) -> VoteRepositoryStub:
        return VoteRepositoryStub(proposals)

    @pytest.mark.asyncio
    async def test_concurrent_duplicates_store_one(
        self, proposals: ProposalRepositoryStub, repo: VoteRepositoryStub
    ) -> None:
        proposal = make_proposal()
        await proposals.save(proposal)
        voter = uuid4()

        results = await asyncio.gather(
            repo.create(make_vote(proposal, voter, VoteChoice.YES, "10")),
            repo.create(make_vote(proposal, voter, VoteChoice.NO)),
            return_exceptions=True,
        )

        assert repo.count == 1
        assert sum(isinstance(r, AlreadyVotedError) for r in results) == 1

    @pytest.mark.asyncio
    async def test_vote_bumps_proposal_version(
        self, proposals: ProposalRepositoryStub, repo: VoteRepositoryStub
    ) -> None:
        proposal = make_proposal()
        await proposals.save(proposal)

        await repo.create(make_vote(proposal, uuid4(), VoteChoice.YES, "10"))

        approved = proposal.with_decision(ProposalStatus.APPROVED, None, None)
        assert not await proposals.replace_if_version(approved, proposal.version)

    @pytest.mark.asyncio
    async def test_decided_proposal_rejects_vote(
        self, proposals: ProposalRepositoryStub, repo: VoteRepositoryStub
    ) -> None:
        proposal = make_proposal(status=ProposalStatus.DECLINED)
        await proposals.save(proposal)

        with pytest.raises(VotingClosedError):
            await repo.create(make_vote(proposal, uuid4(), VoteChoice.NO))
        assert repo.count == 0

    @pytest.mark.asyncio
    async def test_unknown_proposal_rejects_vote(self, repo: VoteRepositoryStub) -> None:
        with pytest.raises(ProposalNotFoundError):
            await repo.create(make_vote(make_proposal(), uuid4(), VoteChoice.NO))

    @pytest.mark.asyncio
    async def test_list_for_voter_newest_first(
        self, proposals: ProposalRepositoryStub, repo: VoteRepositoryStub
    ) -> None:
        voter = uuid4()
        first = make_proposal()
        second = make_proposal()
        for proposal in (first, second):
            await proposals.save(proposal)
        older = make_vote(first, voter, VoteChoice.NO)
        newer = make_vote(second, voter, VoteChoice.NO)
        await repo.create(older)
        await repo.create(newer)

        assert [v.id for v in await repo.list_for_voter(voter)] == [newer.id, older.id]
        grouped = await repo.list_for_proposals([first.id, second.id])
        assert grouped[first.id] == [older]
