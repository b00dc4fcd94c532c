"""Application services."""

from grantflow.application.services.budget_ledger_service import BudgetLedgerService
from grantflow.application.services.foundation_snapshot_service import (
    FoundationSnapshotService,
)
from grantflow.application.services.lifecycle_controller import LifecycleController
from grantflow.application.services.proposal_registry_service import (
    ProposalRegistryService,
)
from grantflow.application.services.vote_ledger_service import VoteLedgerService

__all__: list[str] = [
    "BudgetLedgerService",
    "FoundationSnapshotService",
    "LifecycleController",
    "ProposalRegistryService",
    "VoteLedgerService",
]
