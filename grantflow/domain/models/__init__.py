"""Domain models for Grantflow."""

from grantflow.domain.models.audit import AuditEntry
from grantflow.domain.models.budget import Budget, BudgetAllocation, BudgetPools
from grantflow.domain.models.member import (
    ADMIN_QUEUE_ROLES,
    BUDGET_EDITOR_ROLES,
    MEETING_CHAIR_ROLES,
    PROPOSER_ROLES,
    VOTING_ROLES,
    AppRole,
    Member,
)
from grantflow.domain.models.patch import UNSET, ProposalPatch
from grantflow.domain.models.progress import (
    ProposalProgress,
    ProposalView,
    VoteBreakdownEntry,
)
from grantflow.domain.models.proposal import (
    ACTIVE_STATUSES,
    ALLOCATED_STATUSES,
    AllocationMode,
    GrantProposal,
    ProposalStatus,
    ProposalType,
)
from grantflow.domain.models.vote import (
    Acknowledged,
    Ballot,
    Flagged,
    JointNo,
    JointYes,
    Vote,
    VoteChoice,
    ballot_from_choice,
)

__all__: list[str] = [
    "ACTIVE_STATUSES",
    "ADMIN_QUEUE_ROLES",
    "ALLOCATED_STATUSES",
    "Acknowledged",
    "AllocationMode",
    "AppRole",
    "AuditEntry",
    "BUDGET_EDITOR_ROLES",
    "Ballot",
    "Budget",
    "BudgetAllocation",
    "BudgetPools",
    "Flagged",
    "GrantProposal",
    "JointNo",
    "JointYes",
    "MEETING_CHAIR_ROLES",
    "Member",
    "PROPOSER_ROLES",
    "ProposalPatch",
    "ProposalProgress",
    "ProposalStatus",
    "ProposalType",
    "ProposalView",
    "UNSET",
    "VOTING_ROLES",
    "Vote",
    "VoteBreakdownEntry",
    "VoteChoice",
    "ballot_from_choice",
]
