"""Service construction for the giving engine.

Builds the ledgers, registry, snapshot service and controller on top of
either the in-memory stubs or the SQLAlchemy adapters, selected by
``EngineConfig.persistence``.
"""

from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from structlog import get_logger

from grantflow.application.ports.audit_log import AuditLogProtocol
from grantflow.application.ports.budget_repository import BudgetRepositoryProtocol
from grantflow.application.ports.disbursement_notifier import (
    DisbursementNotifierProtocol,
)
from grantflow.application.ports.member_directory import MemberDirectoryProtocol
from grantflow.application.ports.proposal_repository import ProposalRepositoryProtocol
from grantflow.application.ports.vote_repository import VoteRepositoryProtocol
from grantflow.application.services.budget_ledger_service import BudgetLedgerService
from grantflow.application.services.foundation_snapshot_service import (
    FoundationSnapshotService,
)
from grantflow.application.services.lifecycle_controller import LifecycleController
from grantflow.application.services.proposal_registry_service import (
    ProposalRegistryService,
)
from grantflow.application.services.vote_ledger_service import VoteLedgerService
from grantflow.config.engine_config import EngineConfig
from grantflow.infrastructure.adapters.persistence import (
    SqlAuditLog,
    SqlBudgetRepository,
    SqlMemberDirectory,
    SqlProposalRepository,
    SqlVoteRepository,
)
from grantflow.infrastructure.stubs import (
    AuditLogStub,
    BudgetRepositoryStub,
    DisbursementNotifierStub,
    MemberDirectoryStub,
    ProposalRepositoryStub,
    VoteRepositoryStub,
)

logger = get_logger()


@dataclass
class FoundationAdapters:
    """Port implementations the services are built on."""

    budgets: BudgetRepositoryProtocol
    proposals: ProposalRepositoryProtocol
    votes: VoteRepositoryProtocol
    members: MemberDirectoryProtocol
    audit_log: AuditLogProtocol
    notifier: DisbursementNotifierProtocol


@dataclass
class FoundationServices:
    """Wired application services."""

    adapters: FoundationAdapters
    budget_ledger: BudgetLedgerService
    vote_ledger: VoteLedgerService
    registry: ProposalRegistryService
    snapshots: FoundationSnapshotService
    controller: LifecycleController


def create_memory_adapters() -> FoundationAdapters:
    proposals = ProposalRepositoryStub()
    return FoundationAdapters(
        budgets=BudgetRepositoryStub(),
        proposals=proposals,
        votes=VoteRepositoryStub(proposals),
        members=MemberDirectoryStub(),
        audit_log=AuditLogStub(),
        notifier=DisbursementNotifierStub(),
    )


def create_sql_adapters(
    session_factory: async_sessionmaker[AsyncSession],
) -> FoundationAdapters:
    """SQL-backed adapters. The admin-queue signal stays in-process."""
    return FoundationAdapters(
        budgets=SqlBudgetRepository(session_factory),
        proposals=SqlProposalRepository(session_factory),
        votes=SqlVoteRepository(session_factory),
        members=SqlMemberDirectory(session_factory),
        audit_log=SqlAuditLog(session_factory),
        notifier=DisbursementNotifierStub(),
    )


def build_services(
    adapters: FoundationAdapters, config: EngineConfig
) -> FoundationServices:
    """Wire services on top of a set of adapters."""
    budget_ledger = BudgetLedgerService(adapters.budgets, config)
    vote_ledger = VoteLedgerService(adapters.votes, adapters.proposals)
    registry = ProposalRegistryService(
        adapters.proposals,
        vote_ledger,
        adapters.members,
        disbursement_notifier=adapters.notifier,
    )
    snapshots = FoundationSnapshotService(budget_ledger, vote_ledger, registry)
    controller = LifecycleController(
        budget_ledger,
        vote_ledger,
        registry,
        snapshots,
        audit_log=adapters.audit_log,
    )
    return FoundationServices(
        adapters=adapters,
        budget_ledger=budget_ledger,
        vote_ledger=vote_ledger,
        registry=registry,
        snapshots=snapshots,
        controller=controller,
    )


def create_foundation_services(
    config: EngineConfig,
    session_factory: async_sessionmaker[AsyncSession] | None = None,
) -> FoundationServices:
    """Build services for the configured persistence mode.

    Args:
        config: Engine configuration.
        session_factory: Required when ``config.persistence`` is database.

    Raises:
        ValueError: If database persistence is selected without a session
            factory.
    """
    if config.uses_database:
        if session_factory is None:
            raise ValueError("database persistence requires a session factory")
        adapters = create_sql_adapters(session_factory)
    else:
        adapters = create_memory_adapters()
    logger.info("foundation_services_created", persistence=config.persistence)
    return build_services(adapters, config)
