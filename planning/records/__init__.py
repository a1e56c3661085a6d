"""Project records: CRUD service and dashboard queries."""

from __future__ import annotations

from .project_service import UPDATABLE_FIELDS, ProjectService, clean_updates, draft_project, validate_project
from .queries import (
    AnnotatedProject,
    DashboardSummary,
    annotate_fee_status,
    annotate_with_payments,
    search_projects,
    stage_counts,
    summarize,
)

__all__ = [
    "UPDATABLE_FIELDS",
    "ProjectService",
    "clean_updates",
    "draft_project",
    "validate_project",
    "AnnotatedProject",
    "DashboardSummary",
    "annotate_fee_status",
    "annotate_with_payments",
    "search_projects",
    "stage_counts",
    "summarize",
]
