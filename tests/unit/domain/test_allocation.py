"""Unit tests for budget and vote aggregation rules."""

from decimal import Decimal
from uuid import uuid4

from grantflow.domain.models.progress import ProposalView
from grantflow.domain.models.proposal import ProposalStatus, ProposalType
from grantflow.domain.models.vote import VoteChoice
from grantflow.domain.services.allocation import (
    compute_allocated,
    compute_discretionary_cap_per_member,
    compute_joint_target,
    compute_pools,
    compute_progress,
    discretionary_committed,
    eligible_voter_ids,
    resolve_final_amount,
    tally_final_amount,
)
from tests.helpers.builders import make_budget, make_proposal, make_vote


class TestComputePools:
    def test_ratio_split(self) -> None:
        """$400k at 0.75 / 0.25 gives $300k joint and $100k discretionary."""
        pools = compute_pools(make_budget(total_amount="400000"))

        assert pools.joint_pool == Decimal("300000")
        assert pools.discretionary_pool == Decimal("100000")

    def test_rollover_is_added_before_split(self) -> None:
        budget = make_budget(
            total_amount="300000",
            rollover_from_previous_year=Decimal("100000"),
        )

        pools = compute_pools(budget)

        assert pools.joint_pool == Decimal("300000")
        assert pools.discretionary_pool == Decimal("100000")

    def test_pools_are_whole_dollars(self) -> None:
        pools = compute_pools(
            make_budget(total_amount="1001", joint_ratio="0.5", discretionary_ratio="0.5")
        )

        assert pools.joint_pool == Decimal("501")
        assert pools.discretionary_pool == Decimal("501")


class TestCaps:
    def test_cap_is_pool_share(self) -> None:
        """$100k discretionary pool over 20 voters is $5,000 each."""
        assert compute_discretionary_cap_per_member(Decimal("100000"), 20) == Decimal("5000")

    def test_cap_respects_ceiling(self) -> None:
        cap = compute_discretionary_cap_per_member(
            Decimal("100000000"), 2, ceiling=Decimal("5000000")
        )
        assert cap == Decimal("5000000")

    def test_zero_voters_counts_as_one(self) -> None:
        assert compute_discretionary_cap_per_member(Decimal("1000"), 0) == Decimal("1000")
        assert compute_joint_target(Decimal("3000"), 0) == Decimal("3000")

    def test_joint_target(self) -> None:
        assert compute_joint_target(Decimal("300000"), 4) == Decimal("75000")


class TestTally:
    def test_joint_sums_yes_votes(self) -> None:
        """A yes $100, B no, C yes $50 -> $150 from three votes."""
        a, b, c = uuid4(), uuid4(), uuid4()
        proposal = make_proposal()
        votes = [
            make_vote(proposal, a, VoteChoice.YES, "100"),
            make_vote(proposal, b, VoteChoice.NO),
            make_vote(proposal, c, VoteChoice.YES, "50"),
        ]

        progress = compute_progress(proposal, votes, [a, b, c])

        assert tally_final_amount(proposal, votes) == Decimal("150")
        assert progress.computed_final_amount == Decimal("150")
        assert progress.votes_submitted == 3
        assert progress.total_required_votes == 3
        assert progress.is_ready_for_meeting

    def test_discretionary_uses_proposed_amount(self) -> None:
        proposal = make_proposal(
            proposal_type=ProposalType.DISCRETIONARY, proposed_amount="2500.50"
        )
        votes = [make_vote(proposal, uuid4(), VoteChoice.ACKNOWLEDGED)]

        assert tally_final_amount(proposal, votes) == Decimal("2500.50")

    def test_locked_final_amount_wins(self) -> None:
        proposal = make_proposal(
            status=ProposalStatus.APPROVED, final_amount=Decimal("900")
        )
        votes = [make_vote(proposal, uuid4(), VoteChoice.YES, "100")]

        assert resolve_final_amount(proposal, votes) == Decimal("900")


class TestEligibility:
    def test_discretionary_proposer_not_required(self) -> None:
        proposer, other = uuid4(), uuid4()
        proposal = make_proposal(proposer, ProposalType.DISCRETIONARY)

        assert eligible_voter_ids(proposal, [proposer, other]) == frozenset({other})

    def test_joint_proposer_still_votes(self) -> None:
        proposer, other = uuid4(), uuid4()
        proposal = make_proposal(proposer, ProposalType.JOINT)

        assert eligible_voter_ids(proposal, [proposer, other]) == frozenset(
            {proposer, other}
        )

    def test_votes_from_former_members_ignored(self) -> None:
        current, former = uuid4(), uuid4()
        proposal = make_proposal()
        votes = [
            make_vote(proposal, current, VoteChoice.YES, "10"),
            make_vote(proposal, former, VoteChoice.YES, "990"),
        ]

        progress = compute_progress(proposal, votes, [current])

        assert progress.votes_submitted == 1
        assert progress.computed_final_amount == Decimal("10")


class TestMasking:
    def test_masked_progress_hides_votes(self) -> None:
        voter = uuid4()
        proposal = make_proposal()
        votes = [make_vote(proposal, voter, VoteChoice.YES, "100")]

        progress = compute_progress(proposal, votes, [voter, uuid4()], viewer_id=voter)

        assert progress.masked
        assert progress.breakdown is None
        assert progress.choice_counts == {}
        assert progress.has_current_user_voted
        assert progress.votes_submitted == 1
        assert not progress.is_ready_for_meeting

    def test_revealed_progress_has_breakdown(self) -> None:
        a, b = uuid4(), uuid4()
        proposal = make_proposal(reveal_votes=True)
        votes = [
            make_vote(proposal, a, VoteChoice.YES, "100"),
            make_vote(proposal, b, VoteChoice.NO),
        ]

        progress = compute_progress(proposal, votes, [a, b])

        assert not progress.masked
        assert progress.breakdown is not None
        assert [entry.voter_id for entry in progress.breakdown] == [a, b]
        assert progress.choice_counts == {VoteChoice.YES: 1, VoteChoice.NO: 1}

    def test_viewer_without_vote(self) -> None:
        proposal = make_proposal()
        progress = compute_progress(proposal, [], [uuid4()], viewer_id=uuid4())

        assert not progress.has_current_user_voted


class TestAllocated:
    def test_only_approved_and_sent_of_year_count(self) -> None:
        def view(status: ProposalStatus, amount: str, **kwargs: object) -> ProposalView:
            proposal = make_proposal(status=status, final_amount=Decimal(amount), **kwargs)
            return ProposalView(proposal, compute_progress(proposal, [], []))

        views = [
            view(ProposalStatus.APPROVED, "100"),
            view(ProposalStatus.SENT, "50"),
            view(ProposalStatus.DECLINED, "1000"),
            view(ProposalStatus.APPROVED, "70", proposal_type=ProposalType.DISCRETIONARY),
            view(ProposalStatus.APPROVED, "999", budget_year=2025),
        ]

        allocated = compute_allocated(2026, views)

        assert allocated.joint_allocated == Decimal("150")
        assert allocated.discretionary_allocated == Decimal("70")
        assert allocated.total_allocated == Decimal("220")


class TestDiscretionaryCommitted:
    def test_sums_active_discretionary_of_member(self) -> None:
        member = uuid4()
        pending = make_proposal(member, ProposalType.DISCRETIONARY, proposed_amount="2000")
        approved = make_proposal(
            member,
            ProposalType.DISCRETIONARY,
            proposed_amount="3000",
            status=ProposalStatus.APPROVED,
            final_amount=Decimal("2500"),
        )
        declined = make_proposal(
            member,
            ProposalType.DISCRETIONARY,
            proposed_amount="4000",
            status=ProposalStatus.DECLINED,
        )
        joint = make_proposal(member, ProposalType.JOINT, proposed_amount="100")
        other_member = make_proposal(uuid4(), ProposalType.DISCRETIONARY)
        other_year = make_proposal(member, ProposalType.DISCRETIONARY, budget_year=2025)
        proposals = [pending, approved, declined, joint, other_member, other_year]

        assert discretionary_committed(proposals, member, 2026) == Decimal("4500")
        assert discretionary_committed(
            proposals, member, 2026, exclude_id=pending.id
        ) == Decimal("2500")
