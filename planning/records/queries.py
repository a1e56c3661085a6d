"""Dashboard queries over project lists: search, stage filter, summary."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING

from ..models import CanonicalStage, ProjectRecord
from ..shared import normalize_plot

if TYPE_CHECKING:
    from ..payments.payment_status import PaymentStatusResolver


@dataclass(frozen=True)
class DashboardSummary:
    total: int
    passed: int
    escalated: int
    in_progress: int
    stage_counts: dict[CanonicalStage, int]


@dataclass(frozen=True)
class AnnotatedProject:
    project: ProjectRecord
    fee_paid: bool


def matches_term(project: ProjectRecord, term: str) -> bool:
    """Case-insensitive contains over label, reference and plot."""
    needle = term.strip().casefold()
    if not needle:
        return True
    return any(needle in value.casefold() for value in (project.label, project.reference_number, project.plot_number))


def search_projects(
    projects: Iterable[ProjectRecord], term: str = "", stage: CanonicalStage | None = None
) -> list[ProjectRecord]:
    return [p for p in projects if (stage is None or p.stage is stage) and matches_term(p, term)]


def stage_counts(projects: Iterable[ProjectRecord]) -> dict[CanonicalStage, int]:
    """Count per stage; every stage is present, zero if empty."""
    counts = dict.fromkeys(CanonicalStage, 0)
    for project in projects:
        counts[project.stage] += 1
    return counts


def summarize(projects: Sequence[ProjectRecord]) -> DashboardSummary:
    counts = stage_counts(projects)
    passed = counts[CanonicalStage.PASSED]
    escalated = counts[CanonicalStage.ESCALATED]
    return DashboardSummary(
        total=len(projects),
        passed=passed,
        escalated=escalated,
        in_progress=len(projects) - passed - escalated,
        stage_counts=counts,
    )


def annotate_fee_status(projects: Iterable[ProjectRecord], paid: set[str]) -> list[AnnotatedProject]:
    return [AnnotatedProject(p, bool(p.plot_number) and normalize_plot(p.plot_number) in paid) for p in projects]


async def annotate_with_payments(
    projects: Sequence[ProjectRecord], resolver: PaymentStatusResolver
) -> list[AnnotatedProject]:
    """Look up payment status for the displayed projects' plots and attach it."""
    paid = await resolver.resolve_paid(p.plot_number for p in projects)
    return annotate_fee_status(projects, paid)
