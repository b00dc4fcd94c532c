"""Application ports (interfaces to infrastructure)."""

from grantflow.application.ports.audit_log import AuditLogProtocol
from grantflow.application.ports.budget_repository import BudgetRepositoryProtocol
from grantflow.application.ports.disbursement_notifier import (
    DisbursementNotifierProtocol,
)
from grantflow.application.ports.member_directory import MemberDirectoryProtocol
from grantflow.application.ports.proposal_repository import (
    ProposalRepositoryProtocol,
)
from grantflow.application.ports.vote_repository import VoteRepositoryProtocol

__all__: list[str] = [
    "AuditLogProtocol",
    "BudgetRepositoryProtocol",
    "DisbursementNotifierProtocol",
    "MemberDirectoryProtocol",
    "ProposalRepositoryProtocol",
    "VoteRepositoryProtocol",
]
