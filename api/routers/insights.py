"""
Insights Router - AI-generated dataset insights and project reports.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException

from planning.errors import StoreError
from planning.insights import MAX_SAMPLE_RECORDS, InsightService
from planning.models import CanonicalStage
from planning.payments import PaymentStatusResolver
from planning.records import ProjectService, search_projects

from ..dependencies import get_insight_service, get_payment_resolver, get_project_service
from ..schemas.insights import InsightsRequest, InsightsResponse
from ..utils import http_error

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/insights", tags=["insights"])


@router.post("")
async def generate_insights(
    request: InsightsRequest,
    service: ProjectService = Depends(get_project_service),
    insights: InsightService = Depends(get_insight_service),
) -> InsightsResponse:
    """Insights over the (optionally filtered) project list, newest first."""
    try:
        stage = CanonicalStage(request.stage) if request.stage else None
    except ValueError as e:
        raise HTTPException(status_code=422, detail=f"Unknown stage '{request.stage}'") from e

    try:
        projects = search_projects(await service.list_projects(), request.search, stage)
    except StoreError as e:
        raise http_error(e.kind, f"Failed to load projects: {e.message}") from e

    text = await insights.generate_insights(projects, request.question)
    return InsightsResponse(
        text=text,
        available=insights.available,
        sample_size=min(len(projects), MAX_SAMPLE_RECORDS),
    )


@router.get("/projects/{project_id}")
async def generate_project_report(
    project_id: str,
    service: ProjectService = Depends(get_project_service),
    resolver: PaymentStatusResolver = Depends(get_payment_resolver),
    insights: InsightService = Depends(get_insight_service),
) -> InsightsResponse:
    """Status report for a single project, including its fee status."""
    try:
        record = await service.get_project(project_id)
    except StoreError as e:
        raise http_error(e.kind, f"Failed to get project: {e.message}") from e
    if record is None:
        raise HTTPException(status_code=404, detail="Project not found")

    fee_paid = None
    if record.plot_number:
        fee_paid = record.plot_number in await resolver.resolve_paid([record.plot_number])

    text = await insights.generate_report(record, fee_paid)
    return InsightsResponse(text=text, available=insights.available, sample_size=1)
