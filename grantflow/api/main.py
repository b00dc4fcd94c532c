"""FastAPI application entry point for Grantflow."""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from grantflow import __version__
from grantflow.api.dependencies.foundation import get_engine_config
from grantflow.api.middleware.logging_middleware import LoggingMiddleware
from grantflow.api.routes import (
    admin_router,
    budgets_router,
    foundation_router,
    health_router,
    meeting_router,
    proposals_router,
    workspace_router,
)
from grantflow.bootstrap.database import close_database_engine, create_schema
from grantflow.bootstrap.logging import configure_logging
from grantflow.domain.errors.kinds import ValidationError

logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    environment = configure_logging()
    config = get_engine_config()
    logger.info(
        "grantflow_starting",
        environment=environment,
        persistence=config.persistence,
        version=__version__,
    )
    if config.uses_database:
        await create_schema()
    yield
    if config.uses_database:
        await close_database_engine()
    logger.info("grantflow_stopped")


app = FastAPI(
    title="Grantflow API",
    description="Family foundation giving: budgets, proposals, votes and meetings",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(LoggingMiddleware)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Malformed bodies and parameters are validation errors (400)."""
    errors = exc.errors()
    first = errors[0] if errors else {}
    field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = first.get("msg", "Invalid request")
    logger.warning("request_validation_failed", path=request.url.path, field=field)
    return JSONResponse(
        status_code=ValidationError.status_code,
        content={
            "detail": {
                "type": ValidationError.type_uri,
                "title": ValidationError.title,
                "status": ValidationError.status_code,
                "detail": f"{field}: {message}" if field else message,
                "kind": ValidationError.kind,
                "instance": str(request.url),
            }
        },
    )


app.include_router(health_router)
app.include_router(budgets_router)
app.include_router(proposals_router)
app.include_router(meeting_router)
app.include_router(admin_router)
app.include_router(foundation_router)
app.include_router(workspace_router)
