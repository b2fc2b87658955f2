"""Inspection API for the agents living in this process."""

from contextlib import asynccontextmanager
from typing import Dict, Type

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import structlog

from genesis_framework import __version__
from genesis_framework.api.routers import agents
from genesis_framework.bootstrap import bootstrap
from genesis_framework.config import settings
from genesis_framework.domain.errors import (
    AgentNotFoundError,
    AgentRegistrationError,
    ConstitutionFormatError,
    ConstitutionNotFoundError,
    GenesisFrameworkError,
    ReplicationError,
    UnknownPhaseError,
)
from genesis_framework.runtime.agent_manager import get_agent_manager

logger = structlog.get_logger()

# Most specific first; the first isinstance match wins
ERROR_STATUS: Dict[Type[GenesisFrameworkError], int] = {
    AgentNotFoundError: 404,
    ConstitutionNotFoundError: 404,
    AgentRegistrationError: 409,
    ReplicationError: 409,
    ConstitutionFormatError: 422,
    UnknownPhaseError: 422,
}


def status_for(exc: GenesisFrameworkError) -> int:
    for error_type, status_code in ERROR_STATUS.items():
        if isinstance(exc, error_type):
            return status_code
    return 500


@asynccontextmanager
async def lifespan(app: FastAPI):
    bootstrap()
    manager = get_agent_manager()
    logger.info(
        "genesis_api_startup",
        host=settings.api_host,
        port=settings.api_port,
        agents=manager.list_names(),
    )
    yield
    # Flush every live soul so a cycle run through the API is never lost
    for name in manager.list_names():
        agent = manager.get(name)
        try:
            agent.soul.save()
        except OSError as exc:
            logger.error("soul_flush_failed", agent=name, error=str(exc))
    logger.info("genesis_api_shutdown", agents=len(manager.list_names()))


app = FastAPI(
    title="genesis-framework",
    description="Inspection API for long-lived agents",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins or ["*"],
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
)


@app.exception_handler(GenesisFrameworkError)
async def genesis_error_handler(request: Request, exc: GenesisFrameworkError):
    status_code = status_for(exc)
    logger.info(
        "api_request_failed",
        path=request.url.path,
        status=status_code,
        error_type=type(exc).__name__,
        error=str(exc),
    )
    return JSONResponse(
        status_code=status_code,
        content={"detail": str(exc), "error_type": type(exc).__name__},
    )


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    """Flatten pydantic errors to ``field``/``msg`` pairs."""
    errors = [
        {
            "field": " -> ".join(str(part) for part in err.get("loc", ())),
            "type": err.get("type", "unknown"),
            "msg": err.get("msg", "validation error"),
        }
        for err in exc.errors()
    ]
    return JSONResponse(
        status_code=422,
        content={"detail": "Request validation failed", "errors": errors},
    )


app.include_router(agents.router, prefix="/api/v1")


@app.get("/health")
async def health():
    return {
        "status": "ok",
        "root": str(settings.genesis_root),
        "agents": len(get_agent_manager().list_names()),
    }


@app.get("/")
async def root():
    return {
        "name": "genesis-framework",
        "version": __version__,
        "description": "Inspection API for long-lived agents",
    }
