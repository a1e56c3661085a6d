"""Error types for the planning dashboard.

Store failures are converted into these at the adapter boundary so that
services never see raw transport exceptions.
"""

from __future__ import annotations

from enum import Enum


class ErrorKind(Enum):
    """Kinds of failure surfaced through result objects."""

    VALIDATION = "validation"
    TRANSPORT = "transport"
    CONFLICT = "conflict"
    NOT_FOUND = "not_found"
    TIMEOUT = "timeout"
    CANCELLED = "cancelled"


class PlanningError(Exception):
    """Base exception for planning errors."""

    kind: ErrorKind = ErrorKind.VALIDATION

    def __init__(self, message: str, kind: ErrorKind | None = None) -> None:
        super().__init__(message)
        self.message = message
        if kind is not None:
            self.kind = kind


class StoreError(PlanningError):
    """Raised by record store adapters when a store call fails."""

    kind = ErrorKind.TRANSPORT


class StagingError(PlanningError):
    """Raised when an import cannot be staged (existence snapshot unavailable)."""

    kind = ErrorKind.TRANSPORT


class RecordValidationError(PlanningError):
    """Raised when a record fails validation before reaching the store."""

    kind = ErrorKind.VALIDATION


class SpreadsheetError(PlanningError):
    """Raised when an uploaded spreadsheet cannot be read."""

    kind = ErrorKind.VALIDATION
