"""Giving engine API dependencies.

Singletons are created on first use from ``EngineConfig.from_environment()``.
With ``GRANTFLOW_PERSISTENCE=database`` the services run on the
SQLAlchemy adapters, otherwise on the in-memory stubs.
"""

from __future__ import annotations

from grantflow.application.ports.member_directory import MemberDirectoryProtocol
from grantflow.application.services.lifecycle_controller import LifecycleController
from grantflow.bootstrap.database import get_session_factory
from grantflow.bootstrap.foundation import (
    FoundationServices,
    create_foundation_services,
)
from grantflow.config.engine_config import EngineConfig

_engine_config: EngineConfig | None = None
_foundation_services: FoundationServices | None = None


def get_engine_config() -> EngineConfig:
    global _engine_config
    if _engine_config is None:
        _engine_config = EngineConfig.from_environment()
    return _engine_config


def get_foundation_services() -> FoundationServices:
    """Get the wired services, building them on first use."""
    global _foundation_services
    if _foundation_services is None:
        config = get_engine_config()
        session_factory = get_session_factory() if config.uses_database else None
        _foundation_services = create_foundation_services(config, session_factory)
    return _foundation_services


def get_lifecycle_controller() -> LifecycleController:
    return get_foundation_services().controller


def get_member_directory() -> MemberDirectoryProtocol:
    return get_foundation_services().adapters.members


def set_foundation_services(services: FoundationServices) -> None:
    """Install prebuilt services (tests and custom wiring)."""
    global _foundation_services
    _foundation_services = services


def reset_foundation_dependencies() -> None:
    """Reset singletons for testing."""
    global _engine_config, _foundation_services
    _engine_config = None
    _foundation_services = None
