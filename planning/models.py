"""Core domain models for the planning dashboard.

These models represent the fundamental business concepts and are
independent of the record store. Field-name casing differences between
store schemas are resolved in planning.data, never here."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import Any

from .errors import ErrorKind


def utc_now() -> datetime:
    return datetime.now(UTC)


class CanonicalStage(Enum):
    """Coarse workflow stage a project is displayed under.

    Note: Values must match the PocketBase `projects.stage` select options.
    """

    IN_DESIGN = "in_design"
    GIS = "gis"
    WAYLEAVE = "wayleave"
    ESCALATED = "escalated"
    PASSED = "passed"

    @property
    def label(self) -> str:
        """Dashboard tab label"""
        return _STAGE_LABELS[self]


_STAGE_LABELS = {
    CanonicalStage.IN_DESIGN: "In Design",
    CanonicalStage.GIS: "GIS",
    CanonicalStage.WAYLEAVE: "WL-GSN",
    CanonicalStage.ESCALATED: "USP",
    CanonicalStage.PASSED: "Passed",
}


class RowKind(Enum):
    """Destination of a classified spreadsheet row"""

    PROJECT = "project"
    INFRA = "infra"
    DISCARD = "discard"


class ImportPhase(Enum):
    """Phase of a staged import batch"""

    SCANNING = "scanning"
    AWAITING_CONFIRMATION = "awaiting_confirmation"
    COMMITTING = "committing"
    DONE = "done"
    CANCELLED = "cancelled"


@dataclass
class ProjectRecord:
    """A tracked utility-connection project"""

    label: str
    stage: CanonicalStage
    reference_number: str
    plot_number: str = ""
    zone: str = ""
    block: str = ""
    wayleave_number: str = ""
    account_number: str = ""
    source_status: str = ""  # Upstream workflow status as imported
    justification: str = ""
    escalation_date: str = ""  # Required when stage is ESCALATED
    created_at: datetime = field(default_factory=utc_now)
    id: str | None = None  # Assigned by the store on creation

    @property
    def requires_escalation_date(self) -> bool:
        return self.stage is CanonicalStage.ESCALATED

    @property
    def is_valid_for_save(self) -> bool:
        """Escalated projects must carry an escalation date"""
        return not self.requires_escalation_date or bool(self.escalation_date.strip())


@dataclass
class InfraPaymentRecord:
    """A row in the infrastructure-fee ledger"""

    plot_number: str
    owner_name: str = ""
    application_number: str = ""
    first_payment: str = ""
    second_payment: str = ""
    third_payment: str = ""
    created_at: datetime = field(default_factory=utc_now)
    id: str | None = None

    @property
    def payment_markers(self) -> tuple[str, str, str]:
        return (self.first_payment, self.second_payment, self.third_payment)

    @property
    def fee_paid(self) -> bool:
        """Derived: any installment marker recorded"""
        return any(marker.strip() for marker in self.payment_markers)


@dataclass(frozen=True)
class DedupState:
    """Read-only snapshot of keys already known to the store.

    Attributes:
        existing_references: Reference numbers of existing projects
        existing_infra_plots: Plot numbers already present in the infra ledger
    """

    existing_references: frozenset[str] = frozenset()
    existing_infra_plots: frozenset[str] = frozenset()

    def with_reference(self, reference: str) -> DedupState:
        return DedupState(self.existing_references | {reference}, self.existing_infra_plots)

    def with_infra_plot(self, plot: str) -> DedupState:
        return DedupState(self.existing_references, self.existing_infra_plots | {plot})


@dataclass
class RowDecision:
    """Classification outcome for a single spreadsheet row"""

    kind: RowKind
    record: ProjectRecord | InfraPaymentRecord | None = None
    reason: str = ""


@dataclass
class StagedImportBatch:
    """In-memory plan of what an import would write, pending confirmation.

    Never persisted; owned by exactly one import session.
    """

    source_name: str = ""
    projects: list[ProjectRecord] = field(default_factory=list)
    infra_payments: list[InfraPaymentRecord] = field(default_factory=list)
    discarded_count: int = 0
    total_rows: int = 0
    phase: ImportPhase = ImportPhase.SCANNING
    success_count: int = 0
    error_count: int = 0

    @property
    def detected_counts(self) -> dict[str, int]:
        """Summary shown to the user before commit"""
        return {
            "projects": len(self.projects),
            "infra_payments": len(self.infra_payments),
            "discarded": self.discarded_count,
            "total_rows": self.total_rows,
        }

    @property
    def pending_count(self) -> int:
        return len(self.projects) + len(self.infra_payments)


@dataclass
class CommitFailure:
    """A single failure recorded while committing a batch"""

    kind: ErrorKind
    message: str
    reference: str = ""  # Reference number or chunk description
    item_count: int = 1


@dataclass
class CommitResult:
    """Outcome of committing a staged batch.

    skipped_count covers rows never attempted because the commit was
    cancelled or timed out. Rows left behind by a failed infra chunk are
    counted in error_count.
    """

    success_count: int = 0
    error_count: int = 0
    skipped_count: int = 0
    project_success_count: int = 0
    infra_success_count: int = 0
    cancelled: bool = False
    timed_out: bool = False
    failures: list[CommitFailure] = field(default_factory=list)

    @property
    def processed_count(self) -> int:
        return self.success_count + self.error_count

    @property
    def ok(self) -> bool:
        return self.error_count == 0 and self.skipped_count == 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "success_count": self.success_count,
            "error_count": self.error_count,
            "skipped_count": self.skipped_count,
            "project_success_count": self.project_success_count,
            "infra_success_count": self.infra_success_count,
            "cancelled": self.cancelled,
            "timed_out": self.timed_out,
            "failures": [
                {"kind": f.kind.value, "message": f.message, "reference": f.reference, "item_count": f.item_count}
                for f in self.failures
            ],
        }


@dataclass
class OperationResult:
    """Result of a single record operation (create/update/delete)"""

    ok: bool
    record: ProjectRecord | None = None
    error_kind: ErrorKind | None = None
    message: str = ""

    @classmethod
    def success(cls, record: ProjectRecord | None = None) -> OperationResult:
        return cls(ok=True, record=record)

    @classmethod
    def failure(cls, kind: ErrorKind, message: str) -> OperationResult:
        return cls(ok=False, error_kind=kind, message=message)
