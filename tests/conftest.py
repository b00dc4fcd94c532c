"""
Pytest configuration and shared fixtures for Grantflow tests.

Testing Standards:
- Mark async tests with @pytest.mark.asyncio (auto mode in pyproject.toml
  covers async fixtures)
- Use AsyncMock for async collaborator mocking
- Unit tests go in tests/unit/
- Integration tests go in tests/integration/
"""

from uuid import uuid4

import pytest

from grantflow.application.services.lifecycle_controller import LifecycleController
from grantflow.bootstrap.foundation import (
    FoundationAdapters,
    FoundationServices,
    build_services,
)
from grantflow.config.engine_config import EngineConfig
from grantflow.domain.models.member import AppRole, Member
from grantflow.infrastructure.stubs import (
    AuditLogStub,
    BudgetRepositoryStub,
    DisbursementNotifierStub,
    MemberDirectoryStub,
    ProposalRepositoryStub,
    VoteRepositoryStub,
)


@pytest.fixture
def anyio_backend() -> str:
    """Use asyncio as the async backend."""
    return "asyncio"


@pytest.fixture
def project_version() -> str:
    """Provide the current project version for tests."""
    from grantflow import __version__

    return __version__


@pytest.fixture
def oversight() -> Member:
    return Member(id=uuid4(), name="Olivia Grant", role=AppRole.OVERSIGHT)


@pytest.fixture
def manager() -> Member:
    return Member(id=uuid4(), name="Marcus Hale", role=AppRole.MANAGER)


@pytest.fixture
def admin() -> Member:
    return Member(id=uuid4(), name="Ada Park", role=AppRole.ADMIN)


@pytest.fixture
def alice() -> Member:
    return Member(id=uuid4(), name="Alice Grant", role=AppRole.MEMBER)


@pytest.fixture
def bob() -> Member:
    return Member(id=uuid4(), name="Bob Grant", role=AppRole.MEMBER)


@pytest.fixture
def carol() -> Member:
    return Member(id=uuid4(), name="Carol Grant", role=AppRole.MEMBER)


@pytest.fixture
def member_directory(
    oversight: Member,
    manager: Member,
    admin: Member,
    alice: Member,
    bob: Member,
    carol: Member,
) -> MemberDirectoryStub:
    """Directory with four voting members (oversight, alice, bob, carol)."""
    return MemberDirectoryStub([oversight, manager, admin, alice, bob, carol])


@pytest.fixture
def audit_log() -> AuditLogStub:
    return AuditLogStub()


@pytest.fixture
def notifier() -> DisbursementNotifierStub:
    return DisbursementNotifierStub()


@pytest.fixture
def adapters(
    member_directory: MemberDirectoryStub,
    audit_log: AuditLogStub,
    notifier: DisbursementNotifierStub,
) -> FoundationAdapters:
    proposals = ProposalRepositoryStub()
    return FoundationAdapters(
        budgets=BudgetRepositoryStub(),
        proposals=proposals,
        votes=VoteRepositoryStub(proposals),
        members=member_directory,
        audit_log=audit_log,
        notifier=notifier,
    )


@pytest.fixture
def services(adapters: FoundationAdapters) -> FoundationServices:
    return build_services(adapters, EngineConfig())


@pytest.fixture
def controller(services: FoundationServices) -> LifecycleController:
    return services.controller
