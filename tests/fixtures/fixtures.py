"""
In-memory record store for engine and API tests.

Implements the RecordStore protocol over plain lists, with knobs for
injecting store failures and slow calls.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Mapping, Sequence
from dataclasses import replace
from typing import Any

from planning.errors import ErrorKind, StoreError
from planning.models import InfraPaymentRecord, ProjectRecord


class InMemoryRecordStore:
    """RecordStore fake with failure injection.

    Attributes:
        fail_snapshots: Raise on list_reference_numbers / list_infra_plots
        fail_references: Reference numbers whose create_project raises
        fail_insert_calls: 1-based insert_infra_payments call numbers that raise
        fail_lookup_calls: 1-based find_infra_payments_by_plots call numbers that raise
        insert_delay: Seconds to sleep inside every insert call
        before_project_insert: Awaited before each create_project
    """

    def __init__(
        self,
        projects: Sequence[ProjectRecord] = (),
        infra_payments: Sequence[InfraPaymentRecord] = (),
    ) -> None:
        self.projects: list[ProjectRecord] = []
        self.infra_payments: list[InfraPaymentRecord] = []
        self._next_id = 1

        self.fail_snapshots = False
        self.fail_references: set[str] = set()
        self.fail_insert_calls: set[int] = set()
        self.fail_lookup_calls: set[int] = set()
        self.insert_delay = 0.0
        self.before_project_insert: Callable[[ProjectRecord], Awaitable[None]] | None = None

        self.insert_calls: list[int] = []
        self.lookup_calls: list[list[str]] = []
        self.project_insert_order: list[str] = []

        for project in projects:
            self.projects.append(replace(project, id=project.id or self._new_id()))
        for payment in infra_payments:
            self.infra_payments.append(replace(payment, id=payment.id or self._new_id()))

    def _new_id(self) -> str:
        record_id = f"rec{self._next_id:05d}"
        self._next_id += 1
        return record_id

    # Projects

    async def list_projects(self) -> list[ProjectRecord]:
        return sorted(self.projects, key=lambda p: p.created_at, reverse=True)

    async def get_project(self, project_id: str) -> ProjectRecord | None:
        return next((p for p in self.projects if p.id == project_id), None)

    async def create_project(self, record: ProjectRecord) -> ProjectRecord:
        if self.before_project_insert is not None:
            await self.before_project_insert(record)
        if self.insert_delay:
            await asyncio.sleep(self.insert_delay)
        if record.reference_number in self.fail_references:
            raise StoreError(f"create project {record.reference_number} failed", kind=ErrorKind.VALIDATION)
        created = replace(record, id=self._new_id())
        self.projects.append(created)
        self.project_insert_order.append(record.reference_number)
        return created

    async def update_project(self, project_id: str, updates: Mapping[str, Any]) -> ProjectRecord:
        for index, project in enumerate(self.projects):
            if project.id == project_id:
                self.projects[index] = replace(project, **dict(updates))
                return self.projects[index]
        raise StoreError(f"update project {project_id} failed", kind=ErrorKind.NOT_FOUND)

    async def delete_project(self, project_id: str) -> None:
        before = len(self.projects)
        self.projects = [p for p in self.projects if p.id != project_id]
        if len(self.projects) == before:
            raise StoreError(f"delete project {project_id} failed", kind=ErrorKind.NOT_FOUND)

    async def list_reference_numbers(self) -> set[str]:
        if self.fail_snapshots:
            raise StoreError("snapshot references failed: connection refused")
        return {p.reference_number for p in self.projects if p.reference_number}

    # Infra ledger

    async def list_infra_plots(self) -> set[str]:
        if self.fail_snapshots:
            raise StoreError("snapshot infra plots failed: connection refused")
        return {r.plot_number for r in self.infra_payments if r.plot_number}

    async def insert_infra_payments(self, records: Sequence[InfraPaymentRecord]) -> int:
        self.insert_calls.append(len(records))
        if self.insert_delay:
            await asyncio.sleep(self.insert_delay)
        if len(self.insert_calls) in self.fail_insert_calls:
            raise StoreError(f"insert {len(records)} infra payments failed: 400 batch rejected")
        self.infra_payments.extend(replace(r, id=self._new_id()) for r in records)
        return len(records)

    async def find_infra_payments_by_plots(self, plots: Sequence[str]) -> list[InfraPaymentRecord]:
        self.lookup_calls.append(list(plots))
        if len(self.lookup_calls) in self.fail_lookup_calls:
            raise StoreError("find infra payments failed: timeout", kind=ErrorKind.TIMEOUT)
        wanted = set(plots)
        return [r for r in self.infra_payments if r.plot_number in wanted]

    async def search_infra_payments(self, term: str, limit: int = 50) -> list[InfraPaymentRecord]:
        needle = term.casefold()
        return [r for r in self.infra_payments if needle in r.plot_number.casefold()][:limit]

    async def clear_infra_payments(self) -> int:
        count = len(self.infra_payments)
        self.infra_payments = []
        return count


def make_infra_rows(count: int, prefix: str = "P") -> list[dict[str, Any]]:
    """Spreadsheet rows that all classify as new infra payments."""
    return [{"Plot Number": f"{prefix}{i:05d}", "Initial Payment Date": "2024-05-01"} for i in range(count)]
