"""
Imports Router - Two-phase spreadsheet import.

This router handles:
- Staging an uploaded spreadsheet (raw request body) for review
- Reporting the detected counts of a staged import
- Committing or cancelling a staged import
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, Request

from planning.data import RecordStore
from planning.errors import PlanningError
from planning.importing import ImportSession, ImportSessionRegistry
from planning.models import ImportPhase

from ..dependencies import get_import_sessions, get_store
from ..schemas.imports import ImportSessionResponse
from ..settings import get_settings
from ..utils import http_error

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/imports", tags=["imports"])


def _get_session(session_id: str, registry: ImportSessionRegistry) -> ImportSession:
    session = registry.get(session_id)
    if session is None:
        raise HTTPException(status_code=404, detail="Import session not found")
    return session


@router.post("", status_code=201)
async def stage_import(
    request: Request,
    filename: str = Query(..., description="Original file name; its extension selects xlsx or csv"),
    store: RecordStore = Depends(get_store),
    registry: ImportSessionRegistry = Depends(get_import_sessions),
) -> ImportSessionResponse:
    """Read the uploaded file and stage it; nothing is written yet."""
    body = await request.body()
    if not body:
        raise HTTPException(status_code=400, detail="Request body is empty")

    settings = get_settings()
    session = ImportSession(
        store,
        infra_chunk_size=settings.infra_chunk_size,
        timeout=settings.import_timeout_seconds,
    )
    try:
        await session.stage_file(body, filename)
    except PlanningError as e:
        logger.warning(f"Could not stage '{filename}': {e.message}")
        raise http_error(e.kind, e.message) from e

    registry.add(session)
    return ImportSessionResponse.from_session(session)


@router.get("/{session_id}")
async def get_import(
    session_id: str, registry: ImportSessionRegistry = Depends(get_import_sessions)
) -> ImportSessionResponse:
    return ImportSessionResponse.from_session(_get_session(session_id, registry))


@router.post("/{session_id}/commit")
async def commit_import(
    session_id: str, registry: ImportSessionRegistry = Depends(get_import_sessions)
) -> ImportSessionResponse:
    """Persist the staged batch and report per-item outcomes.

    The session is released once the commit finishes; callers re-fetch
    projects afterwards.
    """
    session = _get_session(session_id, registry)
    try:
        await session.confirm()
    except PlanningError as e:
        raise HTTPException(status_code=409, detail=e.message) from e
    finally:
        if session.phase is ImportPhase.DONE:
            registry.discard(session_id)
    return ImportSessionResponse.from_session(session)


@router.post("/{session_id}/cancel")
async def cancel_import(
    session_id: str, registry: ImportSessionRegistry = Depends(get_import_sessions)
) -> ImportSessionResponse:
    """Drop a staged import, or stop a running commit at the next boundary."""
    session = _get_session(session_id, registry)
    session.cancel()
    if session.phase is ImportPhase.CANCELLED:
        registry.discard(session_id)
    return ImportSessionResponse.from_session(session)
