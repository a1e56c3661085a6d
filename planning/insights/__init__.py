"""Text-generation insights over project records."""

from __future__ import annotations

from .insight_service import (
    INSIGHTS_FAILED,
    INSIGHTS_UNAVAILABLE,
    MAX_SAMPLE_RECORDS,
    REPORT_FAILED,
    REPORT_UNAVAILABLE,
    InsightService,
)

__all__ = [
    "INSIGHTS_FAILED",
    "INSIGHTS_UNAVAILABLE",
    "MAX_SAMPLE_RECORDS",
    "REPORT_FAILED",
    "REPORT_UNAVAILABLE",
    "InsightService",
]
