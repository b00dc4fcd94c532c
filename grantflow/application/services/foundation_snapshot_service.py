"""Foundation and workspace snapshots.

Read-only views assembled from the three ledgers. Reads are eventually
consistent with in-flight decisions: a snapshot may show an allocated
total that is one decision behind.

The snapshot year is always explicit. When the caller omits it, the
latest configured budget year is used, never the wall clock.
"""

from __future__ import annotations

from collections import defaultdict
from decimal import Decimal
from uuid import UUID

from grantflow.application.dtos.snapshots import (
    ActionItemDTO,
    BudgetSummaryDTO,
    FoundationSnapshotDTO,
    HistoryByYearPointDTO,
    PersonalBudgetDTO,
    VoteHistoryEntryDTO,
    WorkspaceSnapshotDTO,
)
from grantflow.application.services.base import LoggingMixin
from grantflow.application.services.budget_ledger_service import BudgetLedgerService
from grantflow.application.services.proposal_registry_service import (
    ProposalRegistryService,
)
from grantflow.application.services.vote_ledger_service import VoteLedgerService
from grantflow.domain.models.budget import Budget
from grantflow.domain.models.member import Member
from grantflow.domain.models.progress import ProposalView
from grantflow.domain.models.proposal import (
    ALLOCATED_STATUSES,
    ProposalStatus,
    ProposalType,
)
from grantflow.domain.primitives.money import ZERO, round_dollars
from grantflow.domain.services.allocation import discretionary_committed

UNKNOWN_PROPOSAL_TITLE = "Unknown Proposal"


class FoundationSnapshotService(LoggingMixin):
    """Builds the foundation-wide and per-member snapshots."""

    def __init__(
        self,
        budget_ledger: BudgetLedgerService,
        vote_ledger: VoteLedgerService,
        registry: ProposalRegistryService,
    ) -> None:
        self._budgets = budget_ledger
        self._votes = vote_ledger
        self._registry = registry
        self._init_logger(component="snapshots")

    async def get_foundation_snapshot(
        self, year: int | None = None, viewer_id: UUID | None = None
    ) -> FoundationSnapshotDTO:
        """Budget, proposals with progress and giving history of one year.

        Args:
            year: Budget year; latest configured year when None.
            viewer_id: Member viewing, for ``has_current_user_voted``.

        Returns:
            FoundationSnapshotDTO.

        Raises:
            BudgetNotFoundError: If the year (or any year, when omitted)
                has no budget.
        """
        log = self._log_operation("get_foundation_snapshot", requested_year=year)

        budget = await self._budgets.resolve_budget(year)
        voting_member_ids = await self._registry.voting_member_ids()
        proposals = await self._registry.list_year(budget.year)
        views = await self._registry.build_views(
            proposals, viewer_id, voting_member_ids
        )

        summary = self._summarize_budget(budget, views)
        history = await self._history_by_year(voting_member_ids)
        years = await self._available_years(budget.year)

        log.debug(
            "foundation_snapshot_built",
            year=budget.year,
            proposal_count=len(views),
        )
        return FoundationSnapshotDTO(
            budget=summary,
            proposals=views,
            history_by_year=history,
            available_budget_years=years,
        )

    def _summarize_budget(
        self, budget: Budget, views: list[ProposalView]
    ) -> BudgetSummaryDTO:
        pools = self._budgets.compute_pools(budget)
        allocated = self._budgets.compute_allocated(budget.year, views)
        return BudgetSummaryDTO(
            year=budget.year,
            total=budget.available_amount,
            rollover_from_previous_year=budget.rollover_from_previous_year,
            joint_ratio=budget.joint_ratio,
            discretionary_ratio=budget.discretionary_ratio,
            joint_pool=pools.joint_pool,
            discretionary_pool=pools.discretionary_pool,
            joint_allocated=allocated.joint_allocated,
            discretionary_allocated=allocated.discretionary_allocated,
            joint_remaining=pools.joint_pool - allocated.joint_allocated,
            discretionary_remaining=(
                pools.discretionary_pool - allocated.discretionary_allocated
            ),
            meeting_reveal_enabled=budget.meeting_reveal_enabled,
        )

    async def _history_by_year(
        self, voting_member_ids: list[UUID]
    ) -> list[HistoryByYearPointDTO]:
        """Approved and sent totals per year, ascending."""
        decided = await self._registry.list_by_statuses(ALLOCATED_STATUSES)
        views = await self._registry.build_views(
            decided, voting_member_ids=voting_member_ids
        )

        totals: dict[int, dict[ProposalType, Decimal]] = defaultdict(
            lambda: {ProposalType.JOINT: ZERO, ProposalType.DISCRETIONARY: ZERO}
        )
        for view in views:
            year_totals = totals[view.proposal.budget_year]
            year_totals[view.proposal.proposal_type] += view.progress.computed_final_amount

        history = []
        for year in sorted(totals):
            joint_sent = round_dollars(totals[year][ProposalType.JOINT])
            discretionary_sent = round_dollars(totals[year][ProposalType.DISCRETIONARY])
            history.append(
                HistoryByYearPointDTO(
                    year=year,
                    joint_sent=joint_sent,
                    discretionary_sent=discretionary_sent,
                    total_donated=joint_sent + discretionary_sent,
                )
            )
        return history

    async def _available_years(self, selected_year: int) -> list[int]:
        years = set(await self._budgets.list_years())
        years.update(await self._registry.list_budget_years())
        years.add(selected_year)
        return sorted(years, reverse=True)

    async def get_workspace_snapshot(
        self, member: Member, year: int | None = None
    ) -> WorkspaceSnapshotDTO:
        """A member's personal budget, open votes and history.

        Args:
            member: The member.
            year: Budget year; latest configured year when None.

        Returns:
            WorkspaceSnapshotDTO.

        Raises:
            BudgetNotFoundError: If no budget exists for the year.
        """
        log = self._log_operation(
            "get_workspace_snapshot", member_id=str(member.id), requested_year=year
        )

        budget = await self._budgets.resolve_budget(year)
        voting_member_ids = await self._registry.voting_member_ids()
        year_proposals = await self._registry.list_year(budget.year)
        year_views = await self._registry.build_views(
            year_proposals, member.id, voting_member_ids
        )

        pools = self._budgets.compute_pools(budget)
        member_count = len(voting_member_ids)
        joint_target = self._budgets.compute_joint_target(pools.joint_pool, member_count)
        discretionary_cap = self._budgets.compute_discretionary_cap_per_member(
            pools.discretionary_pool, member_count
        )

        # Member's votes, newest first
        member_votes = await self._votes.list_votes_by_voter(member.id)
        voted_proposals = await self._registry.list_by_ids(
            list({vote.proposal_id for vote in member_votes})
        )
        voted_by_id = {proposal.id: proposal for proposal in voted_proposals}

        joint_allocated = ZERO
        for vote in member_votes:
            proposal = voted_by_id.get(vote.proposal_id)
            if (
                proposal is not None
                and proposal.budget_year == budget.year
                and proposal.proposal_type is ProposalType.JOINT
            ):
                joint_allocated += vote.allocation_amount

        discretionary_allocated = discretionary_committed(
            year_proposals, member.id, budget.year
        )

        action_items: list[ActionItemDTO] = []
        if member.is_voting:
            for view in year_views:
                proposal = view.proposal
                if proposal.status is not ProposalStatus.TO_REVIEW:
                    continue
                if view.progress.has_current_user_voted:
                    continue
                if (
                    proposal.proposal_type is ProposalType.DISCRETIONARY
                    and proposal.proposer_id == member.id
                ):
                    continue
                action_items.append(
                    ActionItemDTO(
                        proposal_id=proposal.id,
                        title=proposal.title,
                        proposal_type=proposal.proposal_type,
                        votes_submitted=view.progress.votes_submitted,
                        total_required_votes=view.progress.total_required_votes,
                    )
                )

        vote_history = [
            VoteHistoryEntryDTO(
                proposal_id=vote.proposal_id,
                proposal_title=(
                    voted_by_id[vote.proposal_id].title
                    if vote.proposal_id in voted_by_id
                    else UNKNOWN_PROPOSAL_TITLE
                ),
                choice=vote.choice,
                amount=vote.allocation_amount,
                at=vote.created_at,
            )
            for vote in member_votes
        ]

        submitted_gifts = await self._registry.list_by_proposer(member.id)

        log.debug(
            "workspace_snapshot_built",
            year=budget.year,
            action_item_count=len(action_items),
        )
        return WorkspaceSnapshotDTO(
            member=member,
            year=budget.year,
            personal_budget=PersonalBudgetDTO(
                joint_target=joint_target,
                joint_allocated=joint_allocated,
                joint_remaining=joint_target - joint_allocated,
                discretionary_cap=discretionary_cap,
                discretionary_allocated=discretionary_allocated,
                discretionary_remaining=discretionary_cap - discretionary_allocated,
            ),
            action_items=action_items,
            vote_history=vote_history,
            submitted_gifts=submitted_gifts,
        )
