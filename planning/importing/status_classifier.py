"""Status classification from upstream workflow statuses to canonical stages.

The upstream workflow tool exposes twelve granular statuses; the dashboard
only needs five coarse stages, so classification is a static many-to-one
lookup. Unknown input defaults to IN_DESIGN.
"""

from __future__ import annotations

from ..models import CanonicalStage

# Upstream statuses accepted as new project rows during import,
# in workflow order
RECOGNIZED_IMPORT_STATUSES: tuple[str, ...] = (
    "assign planning",
    "site visit",
    "design",
    "design approval",
    "gis digitalization",
    "wayleave",
    "cost estimation",
    "attach utilities drawing",
    "engineer approval",
    "redesign",
    "suspended by edd",
    "work design",
)

_RECOGNIZED = frozenset(RECOGNIZED_IMPORT_STATUSES)

STAGE_PHRASES: dict[CanonicalStage, frozenset[str]] = {
    CanonicalStage.IN_DESIGN: frozenset(
        {
            "assign planning",
            "site visit",
            "design",
            "design approval",
            "engineer approval",
            "redesign",
            "in design",
        }
    ),
    CanonicalStage.GIS: frozenset({"gis digitalization", "gis digitalisation", "gis"}),
    CanonicalStage.WAYLEAVE: frozenset(
        {
            "wayleave",
            "cost estimation",
            "attach utilities drawing",
            "wl-gsn",
            "wl",
        }
    ),
    CanonicalStage.ESCALATED: frozenset({"suspended by edd", "usp", "sent to usp", "escalated"}),
    CanonicalStage.PASSED: frozenset({"work design", "passed"}),
}

_PHRASE_TO_STAGE: dict[str, CanonicalStage] = {
    phrase: stage for stage, phrases in STAGE_PHRASES.items() for phrase in phrases
}


def normalize_status(status: str | None) -> str:
    """Lower-case and trim a status string for comparison."""
    return (status or "").strip().lower()


def is_recognized_import_status(status: str | None) -> bool:
    """Check whether a status makes a row eligible to become a new project."""
    return normalize_status(status) in _RECOGNIZED


def classify_status(source_status: str | None) -> CanonicalStage:
    """Map an upstream workflow status to one of the five canonical stages.

    Total over all input: empty or unrecognized text yields IN_DESIGN.
    """
    return _PHRASE_TO_STAGE.get(normalize_status(source_status), CanonicalStage.IN_DESIGN)


def is_known_status(status: str | None) -> bool:
    """Check whether text is a known stage phrase (upstream status or tab label)."""
    return normalize_status(status) in _PHRASE_TO_STAGE
