"""Application DTOs.

Services return these; the API layer maps them to pydantic response
models, so the application layer never depends on the API layer.
"""

from grantflow.application.dtos.proposals import ProposalSubmission
from grantflow.application.dtos.snapshots import (
    ActionItemDTO,
    BudgetSummaryDTO,
    FoundationSnapshotDTO,
    HistoryByYearPointDTO,
    PersonalBudgetDTO,
    VoteHistoryEntryDTO,
    WorkspaceSnapshotDTO,
)

__all__: list[str] = [
    "ActionItemDTO",
    "BudgetSummaryDTO",
    "FoundationSnapshotDTO",
    "HistoryByYearPointDTO",
    "PersonalBudgetDTO",
    "ProposalSubmission",
    "VoteHistoryEntryDTO",
    "WorkspaceSnapshotDTO",
]
