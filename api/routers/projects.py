"""
Projects Router - Project CRUD and dashboard queries.

This router handles:
- Listing projects with text search, stage filter and fee-status annotation
- Dashboard summary counts
- Manual create, partial update and delete
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Query

from planning.errors import RecordValidationError, StoreError
from planning.models import CanonicalStage, ProjectRecord
from planning.payments import PaymentStatusResolver
from planning.records import ProjectService, annotate_with_payments, draft_project, search_projects, summarize

from ..dependencies import get_payment_resolver, get_project_service
from ..schemas.projects import (
    DashboardSummaryResponse,
    ProjectCreate,
    ProjectListResponse,
    ProjectResponse,
    ProjectUpdate,
)
from ..utils import http_error

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/projects", tags=["projects"])


async def _load_projects(service: ProjectService) -> list[ProjectRecord]:
    try:
        return await service.list_projects()
    except StoreError as e:
        logger.error(f"Error loading projects: {e.message}")
        raise http_error(e.kind, f"Failed to load projects: {e.message}") from e


@router.get("")
async def list_projects(
    search: str = Query("", description="Case-insensitive text over label, reference and plot"),
    stage: CanonicalStage | None = Query(None, description="Canonical stage filter"),
    with_fees: bool = Query(False, description="Annotate each project with its fee-paid status"),
    service: ProjectService = Depends(get_project_service),
    resolver: PaymentStatusResolver = Depends(get_payment_resolver),
) -> ProjectListResponse:
    """List projects newest first, optionally filtered."""
    projects = search_projects(await _load_projects(service), search, stage)

    if with_fees:
        annotated = await annotate_with_payments(projects, resolver)
        items = [ProjectResponse.from_record(a.project, a.fee_paid) for a in annotated]
    else:
        items = [ProjectResponse.from_record(p) for p in projects]

    return ProjectListResponse(items=items, total=len(items))


@router.get("/summary")
async def get_summary(service: ProjectService = Depends(get_project_service)) -> DashboardSummaryResponse:
    """Headline counts: total, passed, escalated, in progress, per stage."""
    summary = summarize(await _load_projects(service))
    return DashboardSummaryResponse(
        total=summary.total,
        passed=summary.passed,
        escalated=summary.escalated,
        in_progress=summary.in_progress,
        stage_counts={stage.value: count for stage, count in summary.stage_counts.items()},
    )


@router.get("/{project_id}")
async def get_project(project_id: str, service: ProjectService = Depends(get_project_service)) -> ProjectResponse:
    try:
        record = await service.get_project(project_id)
    except StoreError as e:
        raise http_error(e.kind, f"Failed to get project: {e.message}") from e
    if record is None:
        raise HTTPException(status_code=404, detail="Project not found")
    return ProjectResponse.from_record(record)


@router.post("", status_code=201)
async def create_project(
    request: ProjectCreate, service: ProjectService = Depends(get_project_service)
) -> ProjectResponse:
    """Create a project from the manual entry form."""
    try:
        draft = draft_project(request.model_dump())
    except RecordValidationError as e:
        raise http_error(e.kind, e.message) from e
    result = await service.create_project(draft)
    if not result.ok:
        raise http_error(result.error_kind, result.message)
    assert result.record is not None
    return ProjectResponse.from_record(result.record)


@router.patch("/{project_id}")
async def update_project(
    project_id: str,
    request: ProjectUpdate,
    service: ProjectService = Depends(get_project_service),
) -> ProjectResponse:
    """Apply a partial update; omitted and empty fields are ignored."""
    updates = request.model_dump(exclude_none=True)
    result = await service.update_project(project_id, updates)
    if not result.ok:
        raise http_error(result.error_kind, result.message)
    assert result.record is not None
    return ProjectResponse.from_record(result.record)


@router.delete("/{project_id}")
async def delete_project(project_id: str, service: ProjectService = Depends(get_project_service)) -> dict[str, Any]:
    result = await service.delete_project(project_id)
    if not result.ok:
        raise http_error(result.error_kind, result.message)
    return {"id": project_id, "deleted": True}
