"""Unit tests for the vote ledger."""

from decimal import Decimal

import pytest

from grantflow.bootstrap.foundation import FoundationServices
from grantflow.domain.errors import (
    AlreadyVotedError,
    NotVotingMemberError,
    ProposalNotFoundError,
    SelfVoteForbiddenError,
    VoteValidationError,
    VotingClosedError,
)
from grantflow.domain.models.member import Member
from grantflow.domain.models.proposal import GrantProposal, ProposalStatus, ProposalType
from grantflow.domain.models.vote import VoteChoice
from tests.helpers.builders import make_proposal


@pytest.fixture
async def joint_proposal(services: FoundationServices, alice: Member) -> GrantProposal:
    proposal = make_proposal(alice.id)
    await services.adapters.proposals.save(proposal)
    return proposal


@pytest.fixture
async def discretionary_proposal(
    services: FoundationServices, alice: Member
) -> GrantProposal:
    proposal = make_proposal(alice.id, ProposalType.DISCRETIONARY, proposed_amount="2500")
    await services.adapters.proposals.save(proposal)
    return proposal


class TestCastVote:
    @pytest.mark.asyncio
    async def test_joint_yes(
        self, services: FoundationServices, joint_proposal: GrantProposal, bob: Member
    ) -> None:
        vote = await services.vote_ledger.cast_vote(
            joint_proposal.id, bob, VoteChoice.YES, Decimal("100.4")
        )

        assert vote.allocation_amount == Decimal("100")
        assert await services.vote_ledger.has_voted(joint_proposal.id, bob.id)
        assert await services.vote_ledger.list_votes(joint_proposal.id) == [vote]

    @pytest.mark.asyncio
    async def test_proposer_may_vote_on_own_joint(
        self, services: FoundationServices, joint_proposal: GrantProposal, alice: Member
    ) -> None:
        vote = await services.vote_ledger.cast_vote(joint_proposal.id, alice, VoteChoice.NO)
        assert vote.choice is VoteChoice.NO

    @pytest.mark.asyncio
    async def test_self_vote_on_discretionary_forbidden(
        self,
        services: FoundationServices,
        discretionary_proposal: GrantProposal,
        alice: Member,
    ) -> None:
        with pytest.raises(SelfVoteForbiddenError) as exc_info:
            await services.vote_ledger.cast_vote(
                discretionary_proposal.id, alice, VoteChoice.ACKNOWLEDGED
            )
        assert exc_info.value.status_code == 403

    @pytest.mark.asyncio
    @pytest.mark.parametrize("role_fixture", ["manager", "admin"])
    async def test_non_voting_roles_forbidden(
        self,
        request: pytest.FixtureRequest,
        services: FoundationServices,
        joint_proposal: GrantProposal,
        role_fixture: str,
    ) -> None:
        actor: Member = request.getfixturevalue(role_fixture)
        with pytest.raises(NotVotingMemberError):
            await services.vote_ledger.cast_vote(
                joint_proposal.id, actor, VoteChoice.YES, Decimal("1")
            )

    @pytest.mark.asyncio
    async def test_unknown_proposal(self, services: FoundationServices, bob: Member) -> None:
        with pytest.raises(ProposalNotFoundError):
            await services.vote_ledger.cast_vote(
                make_proposal().id, bob, VoteChoice.NO
            )

    @pytest.mark.asyncio
    async def test_closed_proposal(self, services: FoundationServices, bob: Member) -> None:
        proposal = make_proposal(status=ProposalStatus.APPROVED)
        await services.adapters.proposals.save(proposal)

        with pytest.raises(VotingClosedError) as exc_info:
            await services.vote_ledger.cast_vote(proposal.id, bob, VoteChoice.NO)
        assert exc_info.value.kind == "conflict"

    @pytest.mark.asyncio
    async def test_second_vote_conflicts(
        self, services: FoundationServices, joint_proposal: GrantProposal, bob: Member
    ) -> None:
        first = await services.vote_ledger.cast_vote(joint_proposal.id, bob, VoteChoice.NO)

        with pytest.raises(AlreadyVotedError) as exc_info:
            await services.vote_ledger.cast_vote(
                joint_proposal.id, bob, VoteChoice.YES, Decimal("50")
            )
        assert exc_info.value.existing_vote_id == first.id
        assert await services.vote_ledger.list_votes(joint_proposal.id) == [first]

    @pytest.mark.asyncio
    async def test_flag_requires_comment(
        self,
        services: FoundationServices,
        discretionary_proposal: GrantProposal,
        bob: Member,
    ) -> None:
        with pytest.raises(VoteValidationError):
            await services.vote_ledger.cast_vote(
                discretionary_proposal.id, bob, VoteChoice.FLAGGED, flag_comment=" "
            )

    @pytest.mark.asyncio
    async def test_votes_by_voter_newest_first(
        self,
        services: FoundationServices,
        joint_proposal: GrantProposal,
        discretionary_proposal: GrantProposal,
        bob: Member,
    ) -> None:
        await services.vote_ledger.cast_vote(joint_proposal.id, bob, VoteChoice.NO)
        await services.vote_ledger.cast_vote(
            discretionary_proposal.id, bob, VoteChoice.ACKNOWLEDGED
        )

        history = await services.vote_ledger.list_votes_by_voter(bob.id)

        assert [v.proposal_id for v in history] == [
            discretionary_proposal.id,
            joint_proposal.id,
        ]
        assert await services.vote_ledger.list_votes_for_proposals([]) == {}
