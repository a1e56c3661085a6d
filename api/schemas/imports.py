"""
Pydantic schemas for spreadsheet import endpoints.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from planning.importing import ImportSession
from planning.models import CommitResult


class DetectedCounts(BaseModel):
    """What the staged batch would write, shown before the user confirms."""

    projects: int = Field(description="Rows staged as new projects")
    infra_payments: int = Field(description="Rows staged as new infra-ledger entries")
    discarded: int = Field(description="Duplicate or unclassifiable rows")
    total_rows: int = Field(description="Data rows read from the sheet")


class CommitFailureResponse(BaseModel):
    kind: str
    message: str
    reference: str = Field(description="Project reference or chunk description")
    item_count: int


class CommitResultResponse(BaseModel):
    """Outcome of committing a staged import."""

    success_count: int
    error_count: int
    skipped_count: int = Field(description="Rows never attempted because of cancellation or timeout")
    project_success_count: int
    infra_success_count: int
    cancelled: bool
    timed_out: bool
    failures: list[CommitFailureResponse]

    @classmethod
    def from_result(cls, result: CommitResult) -> CommitResultResponse:
        return cls.model_validate(result.to_dict())


class ImportSessionResponse(BaseModel):
    session_id: str
    phase: str = Field(description="scanning, awaiting_confirmation, committing, done or cancelled")
    source_name: str = ""
    detected: DetectedCounts | None = None
    result: CommitResultResponse | None = None

    @classmethod
    def from_session(cls, session: ImportSession) -> ImportSessionResponse:
        return cls.model_validate(session.summary())
