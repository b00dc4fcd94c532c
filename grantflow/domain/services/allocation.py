"""Budget and vote aggregation rules.

All functions here are pure: they read domain objects and return new
values. Callers load the inputs and persist the results.

Aggregation:
    joint:          final amount = sum of eligible ``yes`` pledges
    discretionary:  final amount = the proposer's own proposed amount

Votes from members who are no longer voting members are ignored, as is
a proposer's vote on their own discretionary proposal.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Collection, Iterable, Sequence
from decimal import Decimal
from typing import Final
from uuid import UUID

from grantflow.domain.models.budget import Budget, BudgetAllocation, BudgetPools
from grantflow.domain.models.progress import (
    ProposalProgress,
    ProposalView,
    VoteBreakdownEntry,
)
from grantflow.domain.models.proposal import (
    ACTIVE_STATUSES,
    GrantProposal,
    ProposalType,
)
from grantflow.domain.models.vote import Vote, VoteChoice
from grantflow.domain.primitives.money import ZERO, round_cents, round_dollars

# Hard ceiling on any single member's discretionary cap, in dollars
DEFAULT_DISCRETIONARY_CAP_CEILING: Final[Decimal] = Decimal("5000000")


def compute_pools(budget: Budget) -> BudgetPools:
    """Split a budget's available amount into its two pools.

    Args:
        budget: The year's budget.

    Returns:
        Joint and discretionary pools, rounded to whole dollars.
    """
    available = budget.available_amount
    return BudgetPools(
        joint_pool=round_dollars(available * budget.joint_ratio),
        discretionary_pool=round_dollars(available * budget.discretionary_ratio),
    )


def compute_discretionary_cap_per_member(
    discretionary_pool: Decimal,
    voting_member_count: int,
    ceiling: Decimal = DEFAULT_DISCRETIONARY_CAP_CEILING,
) -> Decimal:
    """Per-member discretionary cap.

    Zero voting members is treated as one so the cap never divides by zero.

    Args:
        discretionary_pool: The year's discretionary pool.
        voting_member_count: Number of voting members.
        ceiling: Absolute upper bound for any member.

    Returns:
        ``min(ceiling, pool / max(1, count))`` in whole dollars.
    """
    share = round_dollars(discretionary_pool / max(1, voting_member_count))
    return min(ceiling, share)


def compute_joint_target(joint_pool: Decimal, voting_member_count: int) -> Decimal:
    """Suggested joint giving per voting member (whole dollars)."""
    return round_dollars(joint_pool / max(1, voting_member_count))


def eligible_voter_ids(
    proposal: GrantProposal, voting_member_ids: Collection[UUID]
) -> frozenset[UUID]:
    """Members whose votes count for a proposal.

    Every voting member counts, except the proposer of a discretionary
    proposal.
    """
    eligible = frozenset(voting_member_ids)
    if proposal.proposal_type is ProposalType.DISCRETIONARY:
        eligible = eligible - {proposal.proposer_id}
    return eligible


def eligible_votes(
    proposal: GrantProposal,
    votes: Iterable[Vote],
    voting_member_ids: Collection[UUID],
) -> list[Vote]:
    """Filter votes to those cast by eligible voters, keeping their order."""
    eligible = eligible_voter_ids(proposal, voting_member_ids)
    return [
        vote
        for vote in votes
        if vote.proposal_id == proposal.id and vote.voter_id in eligible
    ]


def tally_final_amount(proposal: GrantProposal, votes: Iterable[Vote]) -> Decimal:
    """Live amount from the current votes.

    Args:
        proposal: The proposal.
        votes: Eligible votes for the proposal.

    Returns:
        Sum of ``yes`` pledges for joint proposals; the proposed amount
        (to the cent) for discretionary proposals.
    """
    if proposal.proposal_type is ProposalType.DISCRETIONARY:
        return round_cents(proposal.proposed_amount)
    total = ZERO
    for vote in votes:
        if vote.choice is VoteChoice.YES:
            total += vote.allocation_amount
    return total


def resolve_final_amount(proposal: GrantProposal, votes: Iterable[Vote]) -> Decimal:
    """Amount a proposal is worth right now.

    A locked ``final_amount`` (set when the proposal was approved) always
    wins over the live tally so decisions never change retroactively.
    """
    if proposal.final_amount is not None:
        return proposal.final_amount
    return tally_final_amount(proposal, votes)


def compute_progress(
    proposal: GrantProposal,
    votes: Sequence[Vote],
    voting_member_ids: Collection[UUID],
    viewer_id: UUID | None = None,
) -> ProposalProgress:
    """Compute voting progress for one proposal.

    Votes by ineligible voters are dropped before counting. While the
    proposal's votes are hidden the result carries only counts; the
    individual choices, amounts and voter ids are left out entirely.

    Args:
        proposal: The proposal.
        votes: Votes recorded for the proposal, in insertion order.
        voting_member_ids: Current voting members.
        viewer_id: Member viewing the progress, for ``has_current_user_voted``.

    Returns:
        ProposalProgress for the proposal.
    """
    eligible = eligible_voter_ids(proposal, voting_member_ids)
    counted = eligible_votes(proposal, votes, voting_member_ids)
    total_required = len(eligible)
    submitted = len(counted)
    masked = not proposal.reveal_votes
    has_voted = viewer_id is not None and any(
        vote.voter_id == viewer_id for vote in votes
    )

    breakdown: tuple[VoteBreakdownEntry, ...] | None = None
    choice_counts: dict[VoteChoice, int] = {}
    if not masked:
        breakdown = tuple(
            VoteBreakdownEntry(
                voter_id=vote.voter_id,
                choice=vote.choice,
                allocation_amount=vote.allocation_amount,
                flag_comment=vote.flag_comment,
            )
            for vote in counted
        )
        choice_counts = dict(Counter(vote.choice for vote in counted))

    return ProposalProgress(
        total_required_votes=total_required,
        votes_submitted=submitted,
        has_current_user_voted=has_voted,
        masked=masked,
        computed_final_amount=resolve_final_amount(proposal, counted),
        is_ready_for_meeting=submitted >= total_required,
        breakdown=breakdown,
        choice_counts=choice_counts,
    )


def compute_allocated(year: int, views: Iterable[ProposalView]) -> BudgetAllocation:
    """Sum approved and sent amounts of one year per pool.

    Args:
        year: Fiscal year.
        views: Proposals with progress (other years are skipped).

    Returns:
        BudgetAllocation with joint and discretionary totals.
    """
    joint = ZERO
    discretionary = ZERO
    for view in views:
        proposal = view.proposal
        if proposal.budget_year != year or not proposal.status.counts_toward_allocation:
            continue
        if proposal.proposal_type is ProposalType.JOINT:
            joint += view.progress.computed_final_amount
        else:
            discretionary += view.progress.computed_final_amount
    return BudgetAllocation(
        joint_allocated=joint, discretionary_allocated=discretionary
    )


def discretionary_committed(
    proposals: Iterable[GrantProposal],
    proposer_id: UUID,
    year: int,
    exclude_id: UUID | None = None,
) -> Decimal:
    """Amount a member has committed against their discretionary cap.

    Counts the member's pending, approved and sent discretionary proposals
    in the year. Declined proposals release their amount.

    Args:
        proposals: Candidate proposals.
        proposer_id: Member whose commitments are summed.
        year: Fiscal year.
        exclude_id: Proposal to leave out (used when re-pricing it).

    Returns:
        Committed amount.
    """
    total = ZERO
    for proposal in proposals:
        if (
            proposal.proposal_type is not ProposalType.DISCRETIONARY
            or proposal.proposer_id != proposer_id
            or proposal.budget_year != year
            or proposal.status not in ACTIVE_STATUSES
            or proposal.id == exclude_id
        ):
            continue
        total += resolve_final_amount(proposal, ())
    return total
