"""Domain errors for Grantflow.

Provides specific exception classes for different failure scenarios.
All exceptions inherit from GrantflowError through one of the five kinds.
"""

from grantflow.domain.errors.access import MemberNotFoundError, RoleNotPermittedError
from grantflow.domain.errors.budget import (
    BudgetAmountError,
    BudgetNotFoundError,
    BudgetRatioError,
)
from grantflow.domain.errors.kinds import (
    ConflictError,
    ForbiddenError,
    InvalidTransitionError,
    NotFoundError,
    ValidationError,
)
from grantflow.domain.errors.proposal import (
    ConcurrentModificationError,
    DiscretionaryCapExceededError,
    EmptyPatchError,
    InvalidDecisionTransitionError,
    ProposalAlreadyDecidedError,
    ProposalNotFoundError,
    ProposalValidationError,
)
from grantflow.domain.errors.vote import (
    AlreadyVotedError,
    NotVotingMemberError,
    SelfVoteForbiddenError,
    VoteValidationError,
    VotingClosedError,
)

__all__: list[str] = [
    "AlreadyVotedError",
    "BudgetAmountError",
    "BudgetNotFoundError",
    "BudgetRatioError",
    "ConcurrentModificationError",
    "ConflictError",
    "DiscretionaryCapExceededError",
    "EmptyPatchError",
    "ForbiddenError",
    "InvalidDecisionTransitionError",
    "InvalidTransitionError",
    "MemberNotFoundError",
    "NotFoundError",
    "NotVotingMemberError",
    "ProposalAlreadyDecidedError",
    "ProposalNotFoundError",
    "ProposalValidationError",
    "RoleNotPermittedError",
    "SelfVoteForbiddenError",
    "ValidationError",
    "VoteValidationError",
    "VotingClosedError",
]
