"""Record store interface.

The reconciliation engine talks to the store only through this protocol
so that tests can substitute an in-memory fake. Implementations raise
planning.errors.StoreError on failure, never raw transport exceptions,
and never perform joins: cross-referencing happens in the engine.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any, Protocol

from ..models import InfraPaymentRecord, ProjectRecord


class RecordStore(Protocol):
    """Protocol for the external project / infra-ledger record store"""

    async def list_projects(self) -> list[ProjectRecord]:
        """All projects, newest first"""
        ...

    async def get_project(self, project_id: str) -> ProjectRecord | None:
        """Project by store identifier, or None if absent"""
        ...

    async def create_project(self, record: ProjectRecord) -> ProjectRecord:
        """Insert a project and return it with its store identifier"""
        ...

    async def update_project(self, project_id: str, updates: Mapping[str, Any]) -> ProjectRecord:
        """Apply a partial update expressed in canonical field names"""
        ...

    async def delete_project(self, project_id: str) -> None: ...

    async def list_reference_numbers(self) -> set[str]:
        """Snapshot of every project reference number"""
        ...

    async def list_infra_plots(self) -> set[str]:
        """Snapshot of every plot number present in the infra ledger"""
        ...

    async def insert_infra_payments(self, records: Sequence[InfraPaymentRecord]) -> int:
        """Insert ledger rows as one bulk request; all-or-nothing"""
        ...

    async def find_infra_payments_by_plots(self, plots: Sequence[str]) -> list[InfraPaymentRecord]:
        """Ledger rows whose plot is in the given set (exact, case-sensitive).

        Only the plot and the three payment markers are fetched.
        """
        ...

    async def search_infra_payments(self, term: str, limit: int = 50) -> list[InfraPaymentRecord]:
        """Ledger rows whose plot contains term (case-insensitive)"""
        ...

    async def clear_infra_payments(self) -> int:
        """Delete the whole infra ledger; returns the number of rows removed"""
        ...
