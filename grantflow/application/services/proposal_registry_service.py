"""Proposal Registry.

Owns proposal records and their status. Progress (votes submitted,
required votes, computed amount) is derived on every read from the vote
ledger and the current voting members.

Writes use compare-and-swap on the proposal version the service read.
A reveal, an edit or a decision that races another write on the same
proposal, or a vote that lands in between, fails with a conflict instead
of overwriting it.
"""

from __future__ import annotations

from collections.abc import Collection, Sequence
from datetime import date, datetime, timezone
from decimal import Decimal
from uuid import UUID, uuid4

from grantflow.application.dtos.proposals import ProposalSubmission
from grantflow.application.ports.disbursement_notifier import (
    DisbursementNotifierProtocol,
)
from grantflow.application.ports.member_directory import MemberDirectoryProtocol
from grantflow.application.ports.proposal_repository import ProposalRepositoryProtocol
from grantflow.application.services.base import LoggingMixin
from grantflow.application.services.vote_ledger_service import VoteLedgerService
from grantflow.domain.errors import (
    ConcurrentModificationError,
    EmptyPatchError,
    InvalidDecisionTransitionError,
    ProposalAlreadyDecidedError,
    ProposalNotFoundError,
    ProposalValidationError,
    RoleNotPermittedError,
)
from grantflow.domain.models.member import (
    MEETING_CHAIR_ROLES,
    PROPOSER_ROLES,
    AppRole,
    Member,
)
from grantflow.domain.models.patch import RECORD_FIELDS, ProposalPatch
from grantflow.domain.models.progress import ProposalProgress, ProposalView
from grantflow.domain.models.proposal import (
    AllocationMode,
    GrantProposal,
    ProposalStatus,
    ProposalType,
)
from grantflow.domain.models.vote import Vote
from grantflow.domain.primitives.money import is_valid_amount, round_cents
from grantflow.domain.services import allocation
from grantflow.domain.services.decision_rules import (
    DECISION_STATUSES,
    may_decide,
    validate_decision_transition,
)
from grantflow.domain.services.url_normalizer import normalize_optional_http_url


def _utc_today() -> date:
    return datetime.now(timezone.utc).date()


def _optional_text(value: object) -> str | None:
    return value if isinstance(value, str) else None


def _clean_text(value: str | None) -> str | None:
    if value is None:
        return None
    stripped = value.strip()
    return stripped or None


class ProposalRegistryService(LoggingMixin):
    """Creates, reads and transitions proposals."""

    def __init__(
        self,
        proposal_repository: ProposalRepositoryProtocol,
        vote_ledger: VoteLedgerService,
        member_directory: MemberDirectoryProtocol,
        disbursement_notifier: DisbursementNotifierProtocol | None = None,
    ) -> None:
        """Initialize the registry.

        Args:
            proposal_repository: Proposal storage.
            vote_ledger: Source of votes for progress.
            member_directory: Source of the current voting members.
            disbursement_notifier: Admin-queue collaborator told about sent
                proposals. If None, the signal is skipped.
        """
        self._proposals = proposal_repository
        self._vote_ledger = vote_ledger
        self._members = member_directory
        self._notifier = disbursement_notifier
        self._init_logger(component="proposals")

    # ------------------------------------------------------------------
    # Creation and lookup
    # ------------------------------------------------------------------

    async def create_proposal(
        self, proposer: Member, submission: ProposalSubmission
    ) -> GrantProposal:
        """Validate and store a new proposal in ``to_review``.

        Args:
            proposer: Submitting member.
            submission: Proposal input.

        Returns:
            The stored proposal with votes hidden.

        Raises:
            RoleNotPermittedError: If the role may not propose, or a manager
                submits a discretionary proposal.
            ProposalValidationError: If text is blank, the amount is negative
                or not finite, or a link is invalid.
        """
        log = self._log_operation(
            "create_proposal",
            proposer_id=str(proposer.id),
            proposal_type=submission.proposal_type.value,
            budget_year=submission.budget_year,
        )

        self.authorize_submission(proposer, submission.proposal_type)

        title = submission.title.strip()
        description = submission.description.strip()
        if not title:
            raise ProposalValidationError("title", "Title is required.")
        if not description:
            raise ProposalValidationError("description", "Description is required.")
        if not is_valid_amount(submission.proposed_amount):
            log.warning("proposal_rejected_amount")
            raise ProposalValidationError(
                "proposed_amount", "Proposed amount must be between 0 and 999,999,999,999."
            )

        proposal = GrantProposal(
            id=uuid4(),
            proposal_type=submission.proposal_type,
            proposer_id=proposer.id,
            budget_year=submission.budget_year,
            title=title,
            description=description,
            proposed_amount=round_cents(submission.proposed_amount),
            allocation_mode=(
                AllocationMode.SUM
                if submission.proposal_type is ProposalType.JOINT
                else submission.allocation_mode
            ),
            organization_id=submission.organization_id,
            notes=_clean_text(submission.notes),
            website=normalize_optional_http_url(submission.website, "website", "Website"),
            charity_navigator_url=normalize_optional_http_url(
                submission.charity_navigator_url,
                "charity_navigator_url",
                "Charity Navigator URL",
            ),
        )
        await self._proposals.save(proposal)
        log.info(
            "proposal_created",
            proposal_id=str(proposal.id),
            proposed_amount=str(proposal.proposed_amount),
        )
        return proposal

    def authorize_submission(self, proposer: Member, proposal_type: ProposalType) -> None:
        """Check that a member may submit a proposal of this type.

        Raises:
            RoleNotPermittedError: If the role may not propose, or a manager
                asks for a discretionary proposal.
        """
        if proposer.role not in PROPOSER_ROLES:
            self._log.warning(
                "proposal_rejected_role",
                proposer_id=str(proposer.id),
                role=proposer.role.value,
            )
            raise RoleNotPermittedError(proposer.id, proposer.role, "submit proposals")
        if proposer.role is AppRole.MANAGER and proposal_type is not ProposalType.JOINT:
            self._log.warning(
                "proposal_rejected_manager_discretionary",
                proposer_id=str(proposer.id),
            )
            raise RoleNotPermittedError(
                proposer.id,
                proposer.role,
                "submit discretionary proposals",
                "Managers can only submit joint proposals.",
            )

    async def get_proposal(self, proposal_id: UUID) -> GrantProposal:
        """Get a proposal by id.

        Raises:
            ProposalNotFoundError: If it does not exist.
        """
        proposal = await self._proposals.get(proposal_id)
        if proposal is None:
            raise ProposalNotFoundError(proposal_id)
        return proposal

    async def list_year(
        self, year: int, statuses: Collection[ProposalStatus] | None = None
    ) -> list[GrantProposal]:
        return await self._proposals.list_by_year(year, statuses)

    async def list_by_proposer(self, proposer_id: UUID) -> list[GrantProposal]:
        return await self._proposals.list_by_proposer(proposer_id)

    async def list_by_ids(self, proposal_ids: Collection[UUID]) -> list[GrantProposal]:
        if not proposal_ids:
            return []
        return await self._proposals.list_by_ids(proposal_ids)

    async def list_by_statuses(
        self, statuses: Collection[ProposalStatus]
    ) -> list[GrantProposal]:
        return await self._proposals.list_by_statuses(statuses)

    async def list_budget_years(self) -> list[int]:
        return await self._proposals.list_budget_years()

    # ------------------------------------------------------------------
    # Progress
    # ------------------------------------------------------------------

    async def voting_member_ids(self) -> list[UUID]:
        members = await self._members.list_voting_members()
        return [member.id for member in members]

    def compute_progress(
        self,
        proposal: GrantProposal,
        votes: Sequence[Vote],
        voting_member_ids: Collection[UUID],
        viewer_id: UUID | None = None,
    ) -> ProposalProgress:
        """Progress of one proposal (see allocation.compute_progress)."""
        return allocation.compute_progress(proposal, votes, voting_member_ids, viewer_id)

    async def build_views(
        self,
        proposals: Sequence[GrantProposal],
        viewer_id: UUID | None = None,
        voting_member_ids: Collection[UUID] | None = None,
    ) -> list[ProposalView]:
        """Attach progress to proposals, loading votes in one batch.

        Args:
            proposals: Proposals to decorate, order preserved.
            viewer_id: Member viewing, for ``has_current_user_voted``.
            voting_member_ids: Voting members; loaded when omitted.

        Returns:
            One ProposalView per proposal.
        """
        if not proposals:
            return []
        if voting_member_ids is None:
            voting_member_ids = await self.voting_member_ids()
        votes_by_proposal = await self._vote_ledger.list_votes_for_proposals(
            [proposal.id for proposal in proposals]
        )
        return [
            ProposalView(
                proposal=proposal,
                progress=self.compute_progress(
                    proposal,
                    votes_by_proposal.get(proposal.id, []),
                    voting_member_ids,
                    viewer_id,
                ),
            )
            for proposal in proposals
        ]

    async def get_view(self, proposal_id: UUID, viewer_id: UUID | None = None) -> ProposalView:
        proposal = await self.get_proposal(proposal_id)
        views = await self.build_views([proposal], viewer_id)
        return views[0]

    async def list_views(
        self,
        year: int,
        statuses: Collection[ProposalStatus] | None = None,
        viewer_id: UUID | None = None,
    ) -> list[ProposalView]:
        proposals = await self.list_year(year, statuses)
        return await self.build_views(proposals, viewer_id)

    # ------------------------------------------------------------------
    # Reveal
    # ------------------------------------------------------------------

    async def set_reveal(
        self, proposal_id: UUID, reveal: bool, actor: Member
    ) -> GrantProposal:
        """Show or hide a proposal's individual votes.

        Reveal is a visibility toggle only; it never recomputes amounts.

        Args:
            proposal_id: Proposal.
            reveal: True to reveal, False to mask.
            actor: Meeting chair.

        Returns:
            The updated proposal.

        Raises:
            RoleNotPermittedError: If the actor is not oversight or manager.
            ProposalNotFoundError: If the proposal does not exist.
            ConcurrentModificationError: If the proposal changed meanwhile.
        """
        log = self._log_operation(
            "set_reveal",
            proposal_id=str(proposal_id),
            actor_id=str(actor.id),
            reveal=reveal,
        )

        if actor.role not in MEETING_CHAIR_ROLES:
            log.warning("reveal_rejected_role", role=actor.role.value)
            raise RoleNotPermittedError(actor.id, actor.role, "reveal votes")

        proposal = await self.get_proposal(proposal_id)
        if proposal.reveal_votes == reveal:
            log.debug("reveal_unchanged")
            return proposal

        updated = proposal.with_reveal(reveal)
        if not await self._proposals.replace_if_version(updated, proposal.version):
            log.warning("reveal_lost_race", expected_version=proposal.version)
            raise ConcurrentModificationError(proposal_id, proposal.version, "reveal")

        log.info("reveal_updated")
        return updated

    # ------------------------------------------------------------------
    # Decisions
    # ------------------------------------------------------------------

    async def record_decision(
        self,
        proposal_id: UUID,
        status: ProposalStatus,
        actor: Member,
        sent_at: date | None = None,
    ) -> GrantProposal:
        """Record a meeting decision.

        Transitions: to_review -> approved | declined, approved -> sent.
        Approving locks ``final_amount`` to the amount computed at that
        instant. Every decision reveals the votes. Marking sent stamps
        ``sent_at`` (today when omitted) and signals the admin queue.

        Args:
            proposal_id: Proposal.
            status: approved, declined or sent.
            actor: Member deciding.
            sent_at: Payment date for ``sent``.

        Returns:
            The decided proposal.

        Raises:
            InvalidDecisionTransitionError: If the status is not a decision
                or the move is not in the transition table.
            RoleNotPermittedError: If the actor's role may not make it.
            ProposalValidationError: If an admin marks sent without a date.
            ProposalNotFoundError: If the proposal does not exist.
            ProposalAlreadyDecidedError: If the proposal is already decided.
            ConcurrentModificationError: If another decision won the race.
        """
        log = self._log_operation(
            "record_decision",
            proposal_id=str(proposal_id),
            actor_id=str(actor.id),
            target_status=status.value,
        )

        # 1. Target must be a decision
        if status not in DECISION_STATUSES:
            log.warning("decision_rejected_not_a_decision")
            raise InvalidDecisionTransitionError(proposal_id, None, status)

        # 2. Role
        if not may_decide(actor.role, status):
            log.warning("decision_rejected_role", role=actor.role.value)
            raise RoleNotPermittedError(
                actor.id, actor.role, f"mark proposals {status.value}"
            )
        if (
            status is ProposalStatus.SENT
            and actor.role is AppRole.ADMIN
            and sent_at is None
        ):
            log.warning("decision_rejected_missing_sent_at")
            raise ProposalValidationError(
                "sent_at", "Sent date is required when marking a proposal Sent."
            )

        # 3. Transition
        proposal = await self.get_proposal(proposal_id)
        try:
            validate_decision_transition(proposal_id, proposal.status, status)
        except ProposalAlreadyDecidedError:
            log.warning("decision_rejected_already_decided", current_status=proposal.status.value)
            raise
        except InvalidDecisionTransitionError:
            log.warning("decision_rejected_transition", current_status=proposal.status.value)
            raise

        # 4. Lock the amount
        final_amount: Decimal | None = None
        if status is ProposalStatus.APPROVED or (
            status is ProposalStatus.SENT and proposal.final_amount is None
        ):
            final_amount = await self._current_amount(proposal)

        decided = proposal.with_decision(
            status,
            final_amount=final_amount,
            sent_at=(sent_at or _utc_today()) if status is ProposalStatus.SENT else None,
        )

        # 5. Compare-and-swap on the version we validated against
        if not await self._proposals.replace_if_version(decided, proposal.version):
            log.warning("decision_lost_race", expected_version=proposal.version)
            raise ConcurrentModificationError(proposal_id, proposal.version, "decision")

        log.info(
            "decision_recorded",
            from_status=proposal.status.value,
            final_amount=str(decided.final_amount) if decided.final_amount is not None else None,
        )

        # 6. Signal the admin queue (failure does not undo the decision)
        if status is ProposalStatus.SENT and self._notifier is not None:
            try:
                await self._notifier.notify_sent(decided)
            except Exception as e:
                log.error(
                    "disbursement_notification_failed",
                    error=str(e),
                    error_type=type(e).__name__,
                )

        return decided

    async def _current_amount(self, proposal: GrantProposal) -> Decimal:
        votes = await self._vote_ledger.list_votes(proposal.id)
        voting_member_ids = await self.voting_member_ids()
        counted = allocation.eligible_votes(proposal, votes, voting_member_ids)
        return allocation.tally_final_amount(proposal, counted)

    # ------------------------------------------------------------------
    # Record edits
    # ------------------------------------------------------------------

    async def update_proposal(
        self,
        proposal_id: UUID,
        patch: ProposalPatch,
        actor: Member,
        current_year: int,
        proposal: GrantProposal | None = None,
    ) -> GrantProposal:
        """Apply a validated patch to a proposal.

        Permissions per field:
            title, description, notes, website, charity_navigator_url:
                oversight or manager
            proposed_amount: oversight or manager, to_review only
            final_amount: oversight, approved or sent proposals of a past
                budget year (``budget_year < current_year``)
            sent_at: the proposer, oversight or manager; sent proposals only

        Every provided field is checked before anything is written.

        Args:
            proposal_id: Proposal.
            patch: Requested changes.
            actor: Member editing.
            current_year: Year edits are judged against.
            proposal: Already-loaded proposal (skips the read).

        Returns:
            The updated proposal.

        Raises:
            EmptyPatchError: If the patch carries no fields.
            ProposalNotFoundError: If the proposal does not exist.
            RoleNotPermittedError: If the actor may not edit a field.
            ProposalValidationError: If a value or the proposal state does
                not allow the edit.
            ConcurrentModificationError: If the proposal changed meanwhile.
        """
        log = self._log_operation(
            "update_proposal",
            proposal_id=str(proposal_id),
            actor_id=str(actor.id),
            fields=sorted(patch.provided_fields()),
        )

        if patch.is_empty:
            log.warning("update_rejected_empty")
            raise EmptyPatchError()

        if proposal is None:
            proposal = await self.get_proposal(proposal_id)

        self._authorize_patch(proposal, patch, actor, current_year)
        changes = self._validated_changes(proposal, patch)

        updated = proposal.with_changes(changes)
        if not await self._proposals.replace_if_version(updated, proposal.version):
            log.warning("update_lost_race", expected_version=proposal.version)
            raise ConcurrentModificationError(proposal_id, proposal.version, "update")

        log.info("proposal_updated")
        return updated

    def _authorize_patch(
        self,
        proposal: GrantProposal,
        patch: ProposalPatch,
        actor: Member,
        current_year: int,
    ) -> None:
        provided = patch.provided_fields()
        is_chair = actor.role in MEETING_CHAIR_ROLES

        if provided & (RECORD_FIELDS | {"proposed_amount"}) and not is_chair:
            raise RoleNotPermittedError(actor.id, actor.role, "edit proposal records")

        if "final_amount" in provided:
            if actor.role is not AppRole.OVERSIGHT:
                raise RoleNotPermittedError(
                    actor.id,
                    actor.role,
                    "correct final amounts",
                    "Only oversight can edit historical proposals.",
                )
            if proposal.budget_year >= current_year:
                raise ProposalValidationError(
                    "final_amount",
                    "Final amounts can only be corrected for past budget years.",
                )

        if "sent_at" in provided and not (is_chair or proposal.proposer_id == actor.id):
            raise RoleNotPermittedError(
                actor.id,
                actor.role,
                "record sent dates",
                "Only the proposer can update the sent date of their proposal.",
            )

    def _validated_changes(
        self, proposal: GrantProposal, patch: ProposalPatch
    ) -> dict[str, object]:
        changes: dict[str, object] = {}

        for name in ("title", "description"):
            if patch.is_set(name):
                value = getattr(patch, name)
                text = value.strip() if isinstance(value, str) else ""
                if not text:
                    raise ProposalValidationError(name, f"{name.capitalize()} is required.")
                changes[name] = text

        if patch.is_set("notes"):
            changes["notes"] = _clean_text(_optional_text(patch.notes))
        if patch.is_set("website"):
            changes["website"] = normalize_optional_http_url(
                _optional_text(patch.website), "website", "Website"
            )
        if patch.is_set("charity_navigator_url"):
            changes["charity_navigator_url"] = normalize_optional_http_url(
                _optional_text(patch.charity_navigator_url),
                "charity_navigator_url",
                "Charity Navigator URL",
            )

        if patch.is_set("proposed_amount"):
            amount = patch.proposed_amount
            if proposal.status is not ProposalStatus.TO_REVIEW:
                raise ProposalValidationError(
                    "proposed_amount",
                    "Proposed amount can only change while the proposal is To Review.",
                )
            if not isinstance(amount, Decimal) or not is_valid_amount(amount):
                raise ProposalValidationError(
                    "proposed_amount", "Proposed amount must be between 0 and 999,999,999,999."
                )
            changes["proposed_amount"] = round_cents(amount)

        if patch.is_set("final_amount"):
            amount = patch.final_amount
            if not proposal.status.counts_toward_allocation:
                raise ProposalValidationError(
                    "final_amount",
                    "Final amount can only be set on approved or sent proposals.",
                )
            if not isinstance(amount, Decimal) or not is_valid_amount(amount):
                raise ProposalValidationError(
                    "final_amount", "Final amount must be between 0 and 999,999,999,999."
                )
            changes["final_amount"] = round_cents(amount)

        if patch.is_set("sent_at"):
            if patch.sent_at is not None and proposal.status is not ProposalStatus.SENT:
                raise ProposalValidationError(
                    "sent_at", "Sent date requires the proposal status to be Sent."
                )
            changes["sent_at"] = patch.sent_at

        return changes
