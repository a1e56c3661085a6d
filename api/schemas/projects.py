"""
Pydantic schemas for project endpoints.

Request bodies use canonical field names; the stage accepts either the
canonical value (e.g. "escalated") or an upstream status / tab label.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from planning.models import CanonicalStage, ProjectRecord


class ProjectCreate(BaseModel):
    """Manual project entry."""

    label: str = Field(min_length=1, description="Project label")
    reference_number: str = Field(min_length=1, description="Unique business reference")
    stage: str = Field(default=CanonicalStage.IN_DESIGN.value, description="Canonical stage or upstream status")
    plot_number: str = Field(default="", description="Plot identifier")
    zone: str = ""
    block: str = ""
    wayleave_number: str = ""
    account_number: str = ""
    source_status: str = Field(default="", description="Upstream workflow status")
    justification: str = ""
    escalation_date: str = Field(default="", description="Required when stage is escalated (USP)")


class ProjectUpdate(BaseModel):
    """Partial update; omitted or empty fields are left unchanged."""

    label: str | None = None
    stage: str | None = None
    plot_number: str | None = None
    zone: str | None = None
    block: str | None = None
    wayleave_number: str | None = None
    account_number: str | None = None
    source_status: str | None = None
    justification: str | None = None
    escalation_date: str | None = None


class ProjectResponse(BaseModel):
    """A project as shown on the dashboard."""

    id: str | None = Field(description="Store identifier")
    label: str
    stage: CanonicalStage
    stage_label: str = Field(description="Dashboard tab label (In Design, GIS, WL-GSN, USP, Passed)")
    reference_number: str
    plot_number: str
    zone: str
    block: str
    wayleave_number: str
    account_number: str
    source_status: str
    justification: str
    escalation_date: str
    created_at: datetime
    fee_paid: bool | None = Field(None, description="Infrastructure fee status when requested")

    @classmethod
    def from_record(cls, record: ProjectRecord, fee_paid: bool | None = None) -> ProjectResponse:
        return cls(
            id=record.id,
            label=record.label,
            stage=record.stage,
            stage_label=record.stage.label,
            reference_number=record.reference_number,
            plot_number=record.plot_number,
            zone=record.zone,
            block=record.block,
            wayleave_number=record.wayleave_number,
            account_number=record.account_number,
            source_status=record.source_status,
            justification=record.justification,
            escalation_date=record.escalation_date,
            created_at=record.created_at,
            fee_paid=fee_paid,
        )


class ProjectListResponse(BaseModel):
    items: list[ProjectResponse]
    total: int = Field(description="Number of projects after filtering")


class DashboardSummaryResponse(BaseModel):
    """Headline counts for the dashboard."""

    total: int
    passed: int
    escalated: int
    in_progress: int = Field(description="Projects neither passed nor escalated")
    stage_counts: dict[str, int] = Field(description="Count per canonical stage value")
