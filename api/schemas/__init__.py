"""
Pydantic schemas for the Planning API.

Re-exports all schemas for convenient importing.
"""

from __future__ import annotations

from .imports import CommitFailureResponse, CommitResultResponse, DetectedCounts, ImportSessionResponse
from .infra import (
    CalculatorRequest,
    CalculatorResponse,
    ClearLedgerResponse,
    InfraPaymentResponse,
    PaidStatusRequest,
    PaidStatusResponse,
    PlotLookupResponse,
)
from .insights import InsightsRequest, InsightsResponse
from .projects import (
    DashboardSummaryResponse,
    ProjectCreate,
    ProjectListResponse,
    ProjectResponse,
    ProjectUpdate,
)

__all__ = [
    # Imports
    "CommitFailureResponse",
    "CommitResultResponse",
    "DetectedCounts",
    "ImportSessionResponse",
    # Infra
    "CalculatorRequest",
    "CalculatorResponse",
    "ClearLedgerResponse",
    "InfraPaymentResponse",
    "PaidStatusRequest",
    "PaidStatusResponse",
    "PlotLookupResponse",
    # Insights
    "InsightsRequest",
    "InsightsResponse",
    # Projects
    "DashboardSummaryResponse",
    "ProjectCreate",
    "ProjectListResponse",
    "ProjectResponse",
    "ProjectUpdate",
]
