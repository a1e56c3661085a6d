"""Project record service - manual CRUD behind the edit surface.

Validation runs here, before any store call; a record that fails it
never reaches the store. Store failures come back as OperationResult
objects rather than exceptions.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import replace
from typing import TYPE_CHECKING, Any

from ..data.mapping import parse_stage
from ..errors import ErrorKind, RecordValidationError, StoreError
from ..models import CanonicalStage, OperationResult, ProjectRecord
from ..shared import normalize_plot, parse_date, to_text

if TYPE_CHECKING:
    from ..data.record_store import RecordStore

logger = logging.getLogger(__name__)

# Fields a partial update may touch. reference_number is the business key
# and created_at belongs to the store, so neither is editable.
UPDATABLE_FIELDS = frozenset(
    {
        "label",
        "stage",
        "plot_number",
        "zone",
        "block",
        "wayleave_number",
        "account_number",
        "source_status",
        "justification",
        "escalation_date",
    }
)

ESCALATION_DATE_REQUIRED = "An escalation date is required when the stage is USP"
JUSTIFICATION_REQUIRED = "A justification is required when the stage is USP"


def validate_project(record: ProjectRecord) -> None:
    """Raise RecordValidationError if the record must not be saved."""
    if not record.label.strip():
        raise RecordValidationError("Label is required")
    if not record.reference_number.strip():
        raise RecordValidationError("Reference number is required")
    if not record.is_valid_for_save:
        raise RecordValidationError(ESCALATION_DATE_REQUIRED)
    if record.stage is CanonicalStage.ESCALATED and not record.justification.strip():
        raise RecordValidationError(JUSTIFICATION_REQUIRED)
    if record.escalation_date and parse_date(record.escalation_date) is None:
        raise RecordValidationError(f"Escalation date '{record.escalation_date}' is not a valid date")


def clean_updates(updates: Mapping[str, Any]) -> dict[str, Any]:
    """Keep allow-listed fields with a non-empty value, coerced to canonical types.

    Raises:
        RecordValidationError: If a field is not editable or the stage is unknown
    """
    unknown = set(updates) - UPDATABLE_FIELDS
    if unknown:
        raise RecordValidationError(f"Fields not editable: {', '.join(sorted(unknown))}")

    cleaned: dict[str, Any] = {}
    for name, value in updates.items():
        if isinstance(value, CanonicalStage):
            cleaned[name] = value
            continue
        text = normalize_plot(value) if name == "plot_number" else to_text(value)
        if not text:
            continue
        cleaned[name] = parse_stage(text, strict=True) if name == "stage" else text
    return cleaned


def draft_project(fields: Mapping[str, Any]) -> ProjectRecord:
    """Build an unsaved project from form fields.

    The stage may be a canonical value, a tab label or an upstream status;
    a blank stage means IN_DESIGN.

    Raises:
        RecordValidationError: If the stage text is not recognized
    """
    data = {name: to_text(value) for name, value in fields.items() if name != "stage"}
    stage_text = to_text(fields.get("stage"))
    stage = parse_stage(stage_text, strict=True) if stage_text else CanonicalStage.IN_DESIGN
    return ProjectRecord(stage=stage, **data)


class ProjectService:
    """List, create, update and delete projects."""

    def __init__(self, store: RecordStore) -> None:
        self.store = store

    async def list_projects(self) -> list[ProjectRecord]:
        """All projects, newest first. StoreError propagates."""
        projects = await self.store.list_projects()
        return sorted(projects, key=lambda p: p.created_at, reverse=True)

    async def get_project(self, project_id: str) -> ProjectRecord | None:
        return await self.store.get_project(project_id)

    async def create_project(self, record: ProjectRecord) -> OperationResult:
        record = replace(record, plot_number=normalize_plot(record.plot_number), id=None)
        try:
            validate_project(record)
        except RecordValidationError as e:
            return OperationResult.failure(e.kind, e.message)

        try:
            existing = await self.store.list_reference_numbers()
            if record.reference_number in existing:
                return OperationResult.failure(
                    ErrorKind.CONFLICT, f"A project with reference {record.reference_number} already exists"
                )
            created = await self.store.create_project(record)
        except StoreError as e:
            return OperationResult.failure(e.kind, e.message)

        logger.info(f"Created project {created.reference_number} ({created.id})")
        return OperationResult.success(created)

    async def update_project(self, project_id: str, updates: Mapping[str, Any]) -> OperationResult:
        """Apply a partial update.

        Empty values are dropped, so a field can be changed but not cleared.
        The merged record is validated before the store is called.
        """
        try:
            cleaned = clean_updates(updates)
        except RecordValidationError as e:
            return OperationResult.failure(e.kind, e.message)

        try:
            current = await self.store.get_project(project_id)
            if current is None:
                return OperationResult.failure(ErrorKind.NOT_FOUND, f"Project {project_id} not found")
            if not cleaned:
                return OperationResult.success(current)

            merged = replace(current, **cleaned)
            try:
                validate_project(merged)
            except RecordValidationError as e:
                return OperationResult.failure(e.kind, e.message)

            updated = await self.store.update_project(project_id, cleaned)
        except StoreError as e:
            return OperationResult.failure(e.kind, e.message)

        logger.info(f"Updated project {project_id}: {', '.join(sorted(cleaned))}")
        return OperationResult.success(updated)

    async def delete_project(self, project_id: str) -> OperationResult:
        try:
            await self.store.delete_project(project_id)
        except StoreError as e:
            return OperationResult.failure(e.kind, e.message)
        logger.info(f"Deleted project {project_id}")
        return OperationResult.success()
