"""SQLAlchemy (async) persistence adapters."""

from grantflow.infrastructure.adapters.persistence.audit_log import SqlAuditLog
from grantflow.infrastructure.adapters.persistence.budget_repository import (
    SqlBudgetRepository,
)
from grantflow.infrastructure.adapters.persistence.member_directory import (
    SqlMemberDirectory,
)
from grantflow.infrastructure.adapters.persistence.proposal_repository import (
    SqlProposalRepository,
)
from grantflow.infrastructure.adapters.persistence.tables import metadata
from grantflow.infrastructure.adapters.persistence.vote_repository import (
    SqlVoteRepository,
)

__all__: list[str] = [
    "SqlAuditLog",
    "SqlBudgetRepository",
    "SqlMemberDirectory",
    "SqlProposalRepository",
    "SqlVoteRepository",
    "metadata",
]
