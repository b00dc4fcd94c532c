"""Lifecycle Controller.

The operations external callers (API handlers) invoke. Each one composes
the budget ledger, vote ledger and proposal registry and enforces the
invariants that span them:

- Discretionary proposals must fit the proposer's per-member cap. The
  check is a read-then-write, so it runs under a lock keyed by
  (proposer, year): two concurrent submissions by the same member cannot
  both pass against the same committed total. The locks live in this
  process only and are never evicted: the map grows to one lock per
  (member, budget year) seen, which the membership size and the year
  range bound. A multi-process deployment needs a database-side lock
  instead.
- Joint and discretionary pools are advisory. Nothing here blocks on
  them; snapshots report ``remaining = pool - allocated`` so callers can
  warn.
- Every committed mutation is written to the audit log afterwards. A
  failed audit write is logged and does not undo the mutation.
"""

from __future__ import annotations

import asyncio
from collections import defaultdict
from datetime import date
from decimal import Decimal
from typing import Any
from uuid import UUID

from grantflow.application.dtos.proposals import ProposalSubmission
from grantflow.application.dtos.snapshots import (
    FoundationSnapshotDTO,
    WorkspaceSnapshotDTO,
)
from grantflow.application.ports.audit_log import AuditLogProtocol
from grantflow.application.services.base import LoggingMixin
from grantflow.application.services.budget_ledger_service import BudgetLedgerService
from grantflow.application.services.foundation_snapshot_service import (
    FoundationSnapshotService,
)
from grantflow.application.services.proposal_registry_service import (
    ProposalRegistryService,
)
from grantflow.application.services.vote_ledger_service import VoteLedgerService
from grantflow.domain.errors import (
    DiscretionaryCapExceededError,
    ProposalValidationError,
    RoleNotPermittedError,
)
from grantflow.domain.models.audit import AuditEntry
from grantflow.domain.models.budget import Budget
from grantflow.domain.models.member import (
    ADMIN_QUEUE_ROLES,
    BUDGET_EDITOR_ROLES,
    MEETING_CHAIR_ROLES,
    Member,
)
from grantflow.domain.models.patch import ProposalPatch
from grantflow.domain.models.progress import ProposalView
from grantflow.domain.models.proposal import ProposalStatus, ProposalType
from grantflow.domain.models.vote import Vote, VoteChoice
from grantflow.domain.primitives.money import is_valid_amount, round_cents
from grantflow.domain.services.allocation import discretionary_committed


class LifecycleController(LoggingMixin):
    """Entry point for every proposal lifecycle operation."""

    def __init__(
        self,
        budget_ledger: BudgetLedgerService,
        vote_ledger: VoteLedgerService,
        registry: ProposalRegistryService,
        snapshots: FoundationSnapshotService,
        audit_log: AuditLogProtocol | None = None,
    ) -> None:
        """Initialize the controller.

        Args:
            budget_ledger: Budget Ledger.
            vote_ledger: Vote Ledger.
            registry: Proposal Registry.
            snapshots: Snapshot builder.
            audit_log: Audit sink. If None, auditing is skipped.
        """
        self._budgets = budget_ledger
        self._votes = vote_ledger
        self._registry = registry
        self._snapshots = snapshots
        self._audit_log = audit_log
        # One lock per (proposer, year); never evicted, see module docstring
        self._cap_locks: defaultdict[tuple[UUID, int], asyncio.Lock] = defaultdict(
            asyncio.Lock
        )
        self._init_logger(component="lifecycle")

    # ------------------------------------------------------------------
    # Proposals
    # ------------------------------------------------------------------

    async def submit_proposal(
        self, actor: Member, submission: ProposalSubmission
    ) -> ProposalView:
        """Submit a proposal for review.

        Args:
            actor: Proposer.
            submission: Proposal input.

        Returns:
            The new proposal with its (empty) progress.

        Raises:
            RoleNotPermittedError: If the actor may not submit this type.
            BudgetNotFoundError: If the budget year is not configured.
            DiscretionaryCapExceededError: If a discretionary amount would
                exceed the proposer's remaining cap.
            ProposalValidationError: If the input is invalid.
        """
        log = self._log_operation(
            "submit_proposal",
            actor_id=str(actor.id),
            proposal_type=submission.proposal_type.value,
            budget_year=submission.budget_year,
        )

        self._registry.authorize_submission(actor, submission.proposal_type)
        if not is_valid_amount(submission.proposed_amount):
            log.warning("proposal_rejected_amount")
            raise ProposalValidationError(
                "proposed_amount", "Proposed amount must be between 0 and 999,999,999,999."
            )
        await self._budgets.get_budget(submission.budget_year)

        if submission.proposal_type is ProposalType.DISCRETIONARY:
            async with self._cap_locks[(actor.id, submission.budget_year)]:
                await self._enforce_discretionary_cap(
                    actor.id,
                    submission.budget_year,
                    round_cents(submission.proposed_amount),
                )
                proposal = await self._registry.create_proposal(actor, submission)
        else:
            proposal = await self._registry.create_proposal(actor, submission)

        log.info("proposal_submitted", proposal_id=str(proposal.id))
        await self._audit(
            actor,
            "submit_proposal",
            "proposal",
            proposal.id,
            {
                "proposal_type": proposal.proposal_type.value,
                "budget_year": proposal.budget_year,
                "proposed_amount": str(proposal.proposed_amount),
            },
        )
        return await self._registry.get_view(proposal.id, actor.id)

    async def update_proposal(
        self,
        actor: Member,
        proposal_id: UUID,
        patch: ProposalPatch,
        current_year: int,
    ) -> ProposalView:
        """Edit a proposal record.

        Re-pricing a pending discretionary proposal re-checks the
        proposer's cap, leaving the proposal's own current amount out.

        Args:
            actor: Member editing.
            proposal_id: Proposal.
            patch: Requested changes.
            current_year: Year used to tell past proposals from current ones.

        Returns:
            The updated proposal with progress.
        """
        log = self._log_operation(
            "update_proposal", actor_id=str(actor.id), proposal_id=str(proposal_id)
        )
        proposal = await self._registry.get_proposal(proposal_id)

        new_amount = patch.proposed_amount
        reprices_discretionary = (
            isinstance(new_amount, Decimal)
            and is_valid_amount(new_amount)
            and proposal.proposal_type is ProposalType.DISCRETIONARY
            and proposal.status is ProposalStatus.TO_REVIEW
            and actor.role in MEETING_CHAIR_ROLES
        )
        if reprices_discretionary and isinstance(new_amount, Decimal):
            async with self._cap_locks[(proposal.proposer_id, proposal.budget_year)]:
                await self._enforce_discretionary_cap(
                    proposal.proposer_id,
                    proposal.budget_year,
                    round_cents(new_amount),
                    exclude_id=proposal.id,
                )
                updated = await self._registry.update_proposal(
                    proposal_id, patch, actor, current_year, proposal=proposal
                )
        else:
            updated = await self._registry.update_proposal(
                proposal_id, patch, actor, current_year, proposal=proposal
            )

        log.info("proposal_record_updated")
        await self._audit(
            actor,
            "update_proposal",
            "proposal",
            proposal_id,
            {name: _audit_value(value) for name, value in patch.as_changes().items()},
        )
        return await self._registry.get_view(updated.id, actor.id)

    async def _enforce_discretionary_cap(
        self,
        proposer_id: UUID,
        year: int,
        requested: Decimal,
        exclude_id: UUID | None = None,
    ) -> None:
        """Reject an amount that would push a member past their cap.

        Raises:
            BudgetNotFoundError: If the year has no budget.
            DiscretionaryCapExceededError: If committed + requested > cap.
        """
        budget = await self._budgets.get_budget(year)
        pools = self._budgets.compute_pools(budget)
        voting_member_ids = await self._registry.voting_member_ids()
        cap = self._budgets.compute_discretionary_cap_per_member(
            pools.discretionary_pool, len(voting_member_ids)
        )
        proposals = await self._registry.list_year(year)
        committed = discretionary_committed(proposals, proposer_id, year, exclude_id)

        if committed + requested > cap:
            self._log.warning(
                "discretionary_cap_exceeded",
                proposer_id=str(proposer_id),
                year=year,
                cap=str(cap),
                committed=str(committed),
                requested=str(requested),
            )
            raise DiscretionaryCapExceededError(
                member_id=proposer_id,
                budget_year=year,
                cap=cap,
                already_allocated=committed,
                requested=requested,
            )

    # ------------------------------------------------------------------
    # Votes
    # ------------------------------------------------------------------

    async def cast_vote(
        self,
        actor: Member,
        proposal_id: UUID,
        choice: VoteChoice,
        allocation_amount: Decimal | None = None,
        flag_comment: str | None = None,
    ) -> Vote:
        """Cast the actor's vote (see VoteLedgerService.cast_vote).

        Discretionary ballots carry no dollar amount, so a vote never
        moves a member's discretionary commitment; the per-member cap is
        enforced when discretionary amounts are submitted or re-priced.
        """
        return await self._votes.cast_vote(
            proposal_id, actor, choice, allocation_amount, flag_comment
        )

    # ------------------------------------------------------------------
    # Meeting
    # ------------------------------------------------------------------

    async def reveal_proposal(
        self, actor: Member, proposal_id: UUID, reveal: bool
    ) -> ProposalView:
        """Reveal or mask a proposal's votes.

        Raises:
            RoleNotPermittedError: If the actor is not oversight or manager.
            ProposalNotFoundError: If the proposal does not exist.
        """
        proposal = await self._registry.set_reveal(proposal_id, reveal, actor)
        await self._audit(
            actor,
            "reveal_votes" if reveal else "hide_votes",
            "proposal",
            proposal.id,
            {"reveal_votes": reveal},
        )
        return await self._registry.get_view(proposal.id, actor.id)

    async def record_meeting_decision(
        self,
        actor: Member,
        proposal_id: UUID,
        status: ProposalStatus,
        sent_at: date | None = None,
    ) -> ProposalView:
        """Record a meeting decision (see ProposalRegistryService.record_decision)."""
        proposal = await self._registry.record_decision(
            proposal_id, status, actor, sent_at=sent_at
        )
        details: dict[str, Any] = {"status": status.value}
        if proposal.final_amount is not None:
            details["final_amount"] = str(proposal.final_amount)
        if proposal.sent_at is not None:
            details["sent_at"] = proposal.sent_at.isoformat()
        await self._audit(
            actor, f"meeting_decision_{status.value}", "proposal", proposal.id, details
        )
        return await self._registry.get_view(proposal.id, actor.id)

    async def get_meeting_proposals(
        self, actor: Member, year: int | None = None
    ) -> tuple[int, list[ProposalView]]:
        """Proposals still under review, for the meeting agenda.

        Returns:
            Tuple of (resolved year, to_review proposals with progress).

        Raises:
            RoleNotPermittedError: If the actor is not oversight or manager.
            BudgetNotFoundError: If no budget exists for the year.
        """
        if actor.role not in MEETING_CHAIR_ROLES:
            self._log.warning("meeting_access_rejected", actor_id=str(actor.id))
            raise RoleNotPermittedError(actor.id, actor.role, "open the meeting")
        budget = await self._budgets.resolve_budget(year)
        views = await self._registry.list_views(
            budget.year, (ProposalStatus.TO_REVIEW,), actor.id
        )
        return budget.year, views

    async def get_admin_queue(
        self, actor: Member, year: int | None = None
    ) -> tuple[int, list[ProposalView]]:
        """Approved proposals waiting to be paid.

        Raises:
            RoleNotPermittedError: If the actor is not admin, oversight or
                manager.
            BudgetNotFoundError: If no budget exists for the year.
        """
        if actor.role not in ADMIN_QUEUE_ROLES:
            self._log.warning("admin_queue_access_rejected", actor_id=str(actor.id))
            raise RoleNotPermittedError(actor.id, actor.role, "view the admin queue")
        budget = await self._budgets.resolve_budget(year)
        views = await self._registry.list_views(
            budget.year, (ProposalStatus.APPROVED,), actor.id
        )
        return budget.year, views

    # ------------------------------------------------------------------
    # Budgets
    # ------------------------------------------------------------------

    async def get_budget(self, year: int) -> Budget:
        return await self._budgets.get_budget(year)

    async def upsert_budget(
        self,
        actor: Member,
        year: int,
        total_amount: Decimal,
        rollover_from_previous_year: Decimal | None = None,
        joint_ratio: Decimal | None = None,
        discretionary_ratio: Decimal | None = None,
        meeting_reveal_enabled: bool | None = None,
    ) -> Budget:
        """Create or replace a year's budget (oversight and manager only).

        Raises:
            RoleNotPermittedError: If the actor may not edit budgets.
            BudgetAmountError: If the year or an amount is invalid.
            BudgetRatioError: If the ratios are invalid.
        """
        if actor.role not in BUDGET_EDITOR_ROLES:
            self._log.warning(
                "budget_write_rejected_role",
                actor_id=str(actor.id),
                role=actor.role.value,
            )
            raise RoleNotPermittedError(actor.id, actor.role, "edit budgets")

        budget = await self._budgets.upsert_budget(
            year=year,
            total_amount=total_amount,
            actor_id=actor.id,
            rollover_from_previous_year=rollover_from_previous_year,
            joint_ratio=joint_ratio,
            discretionary_ratio=discretionary_ratio,
            meeting_reveal_enabled=meeting_reveal_enabled,
        )
        await self._audit(
            actor,
            "upsert_budget",
            "budget",
            str(budget.year),
            {
                "total_amount": str(budget.total_amount),
                "rollover_from_previous_year": str(budget.rollover_from_previous_year),
                "joint_ratio": str(budget.joint_ratio),
                "discretionary_ratio": str(budget.discretionary_ratio),
            },
        )
        return budget

    # ------------------------------------------------------------------
    # Snapshots
    # ------------------------------------------------------------------

    async def get_foundation_snapshot(
        self, actor: Member | None = None, year: int | None = None
    ) -> FoundationSnapshotDTO:
        return await self._snapshots.get_foundation_snapshot(
            year, actor.id if actor else None
        )

    async def get_workspace_snapshot(
        self, actor: Member, year: int | None = None
    ) -> WorkspaceSnapshotDTO:
        return await self._snapshots.get_workspace_snapshot(actor, year)

    # ------------------------------------------------------------------
    # Audit
    # ------------------------------------------------------------------

    async def _audit(
        self,
        actor: Member,
        action: str,
        entity_type: str,
        entity_id: UUID | str,
        details: dict[str, Any],
    ) -> None:
        if self._audit_log is None:
            return
        entry = AuditEntry(
            actor_id=actor.id,
            action=action,
            entity_type=entity_type,
            entity_id=str(entity_id),
            details=details,
        )
        try:
            await self._audit_log.write(entry)
        except Exception as e:
            self._log.error(
                "audit_write_failed",
                action=action,
                entity_id=str(entity_id),
                error=str(e),
                error_type=type(e).__name__,
            )


def _audit_value(value: object) -> object:
    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    if isinstance(value, date):
        return value.isoformat()
    return str(value)
