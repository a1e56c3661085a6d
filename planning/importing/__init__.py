"""Import & reconciliation engine.

Spreadsheet rows are classified into project or infra-payment records,
deduplicated against a snapshot of the store, staged for review and then
committed in batches.
"""

from __future__ import annotations

from .committer import BatchCommitter, CancellationToken
from .row_classifier import classify_row
from .session import ImportSession, ImportSessionRegistry
from .spreadsheet import read_rows
from .staging import StagingCoordinator, build_staged_batch
from .status_classifier import (
    RECOGNIZED_IMPORT_STATUSES,
    classify_status,
    is_known_status,
    is_recognized_import_status,
)

__all__ = [
    "BatchCommitter",
    "CancellationToken",
    "classify_row",
    "ImportSession",
    "ImportSessionRegistry",
    "read_rows",
    "StagingCoordinator",
    "build_staged_batch",
    "RECOGNIZED_IMPORT_STATUSES",
    "classify_status",
    "is_known_status",
    "is_recognized_import_status",
]
