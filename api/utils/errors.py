"""Translation of engine error kinds into HTTP responses.

Every router maps StoreError, StagingError and failed OperationResults
through here so the same kind always yields the same status code.
"""

from __future__ import annotations

from fastapi import HTTPException

from planning.errors import ErrorKind

STATUS_BY_KIND: dict[ErrorKind, int] = {
    ErrorKind.VALIDATION: 422,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.CONFLICT: 409,
    ErrorKind.TIMEOUT: 504,
    ErrorKind.CANCELLED: 409,
    ErrorKind.TRANSPORT: 503,
}


def http_error(kind: ErrorKind | None, message: str) -> HTTPException:
    """Build the HTTPException for an engine failure (raise the result)."""
    return HTTPException(status_code=STATUS_BY_KIND.get(kind, 500) if kind else 500, detail=message)
