"""
Smoke tests to verify all critical dependencies are installed correctly.

These tests confirm that:
1. Python 3.11+ is installed
2. All core dependencies are importable
3. Project version is accessible

Run with: pytest tests/unit/test_smoke.py -v
"""

import sys


class TestPythonVersion:
    def test_python_311_or_higher(self) -> None:
        assert sys.version_info >= (3, 11), (
            f"Python 3.11+ required, "
            f"got {sys.version_info.major}.{sys.version_info.minor}"
        )


class TestCoreFramework:
    """Verify core framework dependencies."""

    def test_fastapi_import(self) -> None:
        from fastapi import FastAPI

        app = FastAPI()
        assert app is not None

    def test_pydantic_v2(self) -> None:
        """Pydantic v2 must be installed (required for FastAPI integration)."""
        import pydantic

        major_version = int(pydantic.VERSION.split(".")[0])
        assert major_version >= 2, f"Pydantic v2 required, got {pydantic.VERSION}"

    def test_uvicorn_import(self) -> None:
        import uvicorn

        assert uvicorn is not None


class TestDatabase:
    def test_sqlalchemy_async(self) -> None:
        """SQLAlchemy 2.0+ async mode must be available."""
        from sqlalchemy import __version__ as sa_version
        from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine

        major_version = int(sa_version.split(".")[0])
        assert major_version >= 2, f"SQLAlchemy 2.0+ required, got {sa_version}"
        assert AsyncSession is not None
        assert create_async_engine is not None

    def test_asyncpg_import(self) -> None:
        import asyncpg

        assert asyncpg is not None


class TestStructuredLogging:
    def test_structlog_configuration(self) -> None:
        """structlog can be bound with context."""
        import structlog

        logger = structlog.get_logger()
        bound_logger = logger.bind(member_id="m-1", operation="test")
        assert bound_logger is not None


class TestProjectVersion:
    def test_version_format(self, project_version: str) -> None:
        parts = project_version.split(".")
        assert len(parts) >= 2, f"Version must be semver format, got {project_version}"
