#!/usr/bin/env python3
"""
Planning API - backend for the utility-connection planning dashboard.

Serves the dashboard's four areas:
- projects: list/search/summary and manual edits
- imports: upload a spreadsheet, review the detected counts, commit or cancel
- infra: fee-paid status, plot lookup, CC calculator, ledger reset
- insights: AI summaries of the project list and per-project reports

Run with: uvicorn api.main:app
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from planning.errors import PlanningError
from planning.logging_config import configure_logging, get_logger

from .dependencies import authenticate_pb
from .settings import get_settings
from .utils import STATUS_BY_KIND

configure_logging(source="api")
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    settings = get_settings()

    if settings.skip_pb_auth:
        logger.warning("SKIP_PB_AUTH=true: using an unauthenticated PocketBase client")
    else:
        await authenticate_pb()

    if not settings.openai_api_key:
        logger.warning("OPENAI_API_KEY is not set; insights endpoints will return the unavailable message")

    logger.info(f"Planning API ready (PocketBase at {settings.pocketbase_url})")
    yield


def create_app() -> FastAPI:
    """Build the application: CORS, error mapping, routers, health check."""
    settings = get_settings()
    app = FastAPI(title="Planning API", description="Utility-connection planning dashboard API", lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["*"],
    )

    # Engine errors that escape a router keep their kind's status code
    @app.exception_handler(PlanningError)
    async def planning_error_handler(request: Request, exc: PlanningError) -> JSONResponse:
        status_code = STATUS_BY_KIND.get(exc.kind, 500)
        logger.error(f"{request.method} {request.url.path} failed ({exc.kind.value}): {exc.message}")
        return JSONResponse(status_code=status_code, content={"detail": exc.message, "kind": exc.kind.value})

    from .routers import imports, infra, insights, projects

    for module in (projects, imports, infra, insights):
        app.include_router(module.router)

    @app.get("/health")
    async def health_check() -> dict[str, str]:
        return {"status": "healthy", "service": "planning-api"}

    return app


app = create_app()
