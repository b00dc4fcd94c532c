"""Meeting decision rules.

Transitions and who may perform them:

    to_review -> approved   oversight, manager
    to_review -> declined   oversight, manager
    approved  -> sent       oversight, manager, admin

Anything else is refused. Re-deciding a proposal that already carries a
decision is a conflict rather than a bad transition, so that two racing
chairs see the same error the loser of a compare-and-swap would.
"""

from __future__ import annotations

from typing import Final
from uuid import UUID

from grantflow.domain.errors.proposal import (
    InvalidDecisionTransitionError,
    ProposalAlreadyDecidedError,
)
from grantflow.domain.models.member import AppRole
from grantflow.domain.models.proposal import ProposalStatus

DECISION_STATUSES: Final[frozenset[ProposalStatus]] = frozenset(
    {ProposalStatus.APPROVED, ProposalStatus.DECLINED, ProposalStatus.SENT}
)

DECISION_ROLES: Final[dict[ProposalStatus, frozenset[AppRole]]] = {
    ProposalStatus.APPROVED: frozenset({AppRole.OVERSIGHT, AppRole.MANAGER}),
    ProposalStatus.DECLINED: frozenset({AppRole.OVERSIGHT, AppRole.MANAGER}),
    ProposalStatus.SENT: frozenset(
        {AppRole.OVERSIGHT, AppRole.MANAGER, AppRole.ADMIN}
    ),
}


def may_decide(role: AppRole, target: ProposalStatus) -> bool:
    """Check whether a role may move a proposal into ``target``."""
    return role in DECISION_ROLES.get(target, frozenset())


def validate_decision_transition(
    proposal_id: UUID,
    current: ProposalStatus,
    target: ProposalStatus,
) -> None:
    """Validate a decision against the status transition table.

    Args:
        proposal_id: Proposal being decided.
        current: Its current status.
        target: Requested status.

    Raises:
        InvalidDecisionTransitionError: If ``target`` is not a decision or
            the move is not in the table.
        ProposalAlreadyDecidedError: If the proposal already carries a
            decision that does not lead to ``target``.
    """
    if target not in DECISION_STATUSES:
        raise InvalidDecisionTransitionError(proposal_id, None, target)
    if target in current.valid_transitions():
        return
    if current.is_decided():
        raise ProposalAlreadyDecidedError(proposal_id, current)
    raise InvalidDecisionTransitionError(proposal_id, current, target)
