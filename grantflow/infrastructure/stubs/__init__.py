"""In-memory adapters for every application port.

Used for development, the default ``memory`` persistence mode and tests.
"""

from grantflow.infrastructure.stubs.audit_log_stub import AuditLogStub
from grantflow.infrastructure.stubs.budget_repository_stub import BudgetRepositoryStub
from grantflow.infrastructure.stubs.disbursement_notifier_stub import (
    DisbursementNotifierStub,
)
from grantflow.infrastructure.stubs.member_directory_stub import MemberDirectoryStub
from grantflow.infrastructure.stubs.proposal_repository_stub import (
    ProposalRepositoryStub,
)
from grantflow.infrastructure.stubs.vote_repository_stub import VoteRepositoryStub

__all__: list[str] = [
    "AuditLogStub",
    "BudgetRepositoryStub",
    "DisbursementNotifierStub",
    "MemberDirectoryStub",
    "ProposalRepositoryStub",
    "VoteRepositoryStub",
]
