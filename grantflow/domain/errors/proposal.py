"""Proposal registry errors.

Covers lookup failures, invalid proposal input, the per-member
discretionary ceiling and the decision state machine.
"""

from __future__ import annotations

from decimal import Decimal
from typing import TYPE_CHECKING, Any
from uuid import UUID

from grantflow.domain.errors.kinds import (
    ConflictError,
    InvalidTransitionError,
    NotFoundError,
    ValidationError,
)

if TYPE_CHECKING:
    from grantflow.domain.models.proposal import ProposalStatus


class ProposalNotFoundError(NotFoundError):
    """Raised when a proposal id does not exist."""

    type_uri = "urn:grantflow:proposal:not-found"
    title = "Proposal Not Found"

    def __init__(self, proposal_id: UUID) -> None:
        self.proposal_id = proposal_id
        super().__init__(f"Proposal not found: {proposal_id}")

    def problem_extensions(self) -> dict[str, Any]:
        return {"proposal_id": str(self.proposal_id)}


class ProposalValidationError(ValidationError):
    """Raised when proposal input is malformed.

    Attributes:
        field: Name of the offending field.
    """

    type_uri = "urn:grantflow:proposal:invalid"
    title = "Invalid Proposal"

    def __init__(self, field: str, message: str) -> None:
        self.field = field
        super().__init__(message)

    def problem_extensions(self) -> dict[str, Any]:
        return {"field": self.field}


class EmptyPatchError(ValidationError):
    """Raised when a proposal edit carries no editable fields."""

    type_uri = "urn:grantflow:proposal:empty-patch"
    title = "Nothing To Update"

    def __init__(self) -> None:
        super().__init__("No editable fields were provided.")


class DiscretionaryCapExceededError(ValidationError):
    """Raised when a member's discretionary allocation would pass their cap.

    The cap is ``min(ceiling, discretionary_pool / voting_members)`` and
    counts every pending and approved discretionary proposal of the member
    in the same budget year.

    Attributes:
        member_id: Proposer whose cap would be exceeded.
        budget_year: Fiscal year of the allocation.
        cap: The member's cap for the year.
        already_allocated: Pending plus approved amount before this request.
        requested: Amount of this request.
    """

    type_uri = "urn:grantflow:proposal:discretionary-cap-exceeded"
    title = "Discretionary Cap Exceeded"

    def __init__(
        self,
        member_id: UUID,
        budget_year: int,
        cap: Decimal,
        already_allocated: Decimal,
        requested: Decimal,
    ) -> None:
        self.member_id = member_id
        self.budget_year = budget_year
        self.cap = cap
        self.already_allocated = already_allocated
        self.requested = requested
        remaining = cap - already_allocated
        super().__init__(
            "Discretionary proposal amount cannot exceed your remaining "
            f"discretionary budget of ${remaining:,.2f} for {budget_year} "
            f"(requested ${requested:,.2f})."
        )

    @property
    def remaining(self) -> Decimal:
        return self.cap - self.already_allocated

    def problem_extensions(self) -> dict[str, Any]:
        return {
            "member_id": str(self.member_id),
            "budget_year": self.budget_year,
            "cap": float(self.cap),
            "already_allocated": float(self.already_allocated),
            "requested": float(self.requested),
        }


class InvalidDecisionTransitionError(InvalidTransitionError):
    """Raised when a decision is not in the transition table.

    Attributes:
        proposal_id: The proposal being decided (None for a request that
            names a non-decision status).
        from_status: Current status.
        to_status: Requested status.
    """

    type_uri = "urn:grantflow:proposal:invalid-transition"
    title = "Invalid Decision Transition"

    def __init__(
        self,
        proposal_id: UUID | None,
        from_status: ProposalStatus | None,
        to_status: ProposalStatus,
    ) -> None:
        self.proposal_id = proposal_id
        self.from_status = from_status
        self.to_status = to_status
        if from_status is None:
            message = f"'{to_status.value}' is not a meeting decision."
        else:
            allowed = sorted(s.value for s in from_status.valid_transitions())
            allowed_str = f" Valid transitions: {allowed}" if allowed else ""
            message = (
                f"Invalid decision transition: {from_status.value} -> "
                f"{to_status.value}.{allowed_str}"
            )
        super().__init__(message)

    def problem_extensions(self) -> dict[str, Any]:
        return {
            "proposal_id": str(self.proposal_id) if self.proposal_id else None,
            "from_status": self.from_status.value if self.from_status else None,
            "to_status": self.to_status.value,
        }


class ProposalAlreadyDecidedError(ConflictError):
    """Raised when re-deciding a proposal that already carries a decision.

    Decisions are final: once approved, declined or sent, the only forward
    move is approved -> sent.

    Attributes:
        proposal_id: The proposal.
        current_status: The decision already recorded.
    """

    type_uri = "urn:grantflow:proposal:already-decided"
    title = "Proposal Already Decided"

    def __init__(self, proposal_id: UUID, current_status: ProposalStatus) -> None:
        self.proposal_id = proposal_id
        self.current_status = current_status
        super().__init__(
            f"Proposal {proposal_id} is already {current_status.value}. "
            "Decisions are final."
        )

    def problem_extensions(self) -> dict[str, Any]:
        return {
            "proposal_id": str(self.proposal_id),
            "current_status": self.current_status.value,
        }


class ConcurrentModificationError(ConflictError):
    """Raised when a compare-and-swap on the proposal version loses a race.

    This is a recoverable error - the caller should re-read the proposal
    and decide whether to retry or abort.

    Attributes:
        proposal_id: The proposal being modified.
        expected_version: Version the write was conditioned on.
        operation: Name of the failed operation.
    """

    type_uri = "urn:grantflow:proposal:concurrent-modification"
    title = "Concurrent Modification"

    def __init__(
        self,
        proposal_id: UUID,
        expected_version: int,
        operation: str = "decision",
    ) -> None:
        self.proposal_id = proposal_id
        self.expected_version = expected_version
        self.operation = operation
        super().__init__(
            f"Concurrent modification detected for proposal {proposal_id} "
            f"during {operation}. Expected version: {expected_version}. "
            "Another request has modified this proposal."
        )

    def problem_extensions(self) -> dict[str, Any]:
        return {
            "proposal_id": str(self.proposal_id),
            "expected_version": self.expected_version,
            "operation": self.operation,
        }
