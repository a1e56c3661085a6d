"""PocketBase-backed record store.

All SDK calls are synchronous, so each one runs in a worker thread via
asyncio.to_thread and is awaited before the next is issued. SDK and
transport exceptions are converted into StoreError here.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Mapping, Sequence
from typing import Any, TypeVar

from pocketbase.utils import ClientResponseError

from pocketbase import PocketBase

from ..errors import ErrorKind, StoreError
from ..models import InfraPaymentRecord, ProjectRecord
from .mapping import (
    INFRA_FIELD_NAMES,
    PAYMENT_MARKER_FIELDS,
    infra_from_store,
    infra_to_store,
    project_from_store,
    project_to_store,
    project_updates_to_store,
)
from .pocketbase_wrapper import PocketBaseWrapper, build_in_filter, escape_filter_value

logger = logging.getLogger(__name__)

T = TypeVar("T")

PROJECTS_COLLECTION = "projects"
INFRA_COLLECTION = "infra_payments"

# Page size for full-list snapshots
FETCH_BATCH_SIZE = 500


def _error_kind(error: Exception) -> ErrorKind:
    if isinstance(error, ClientResponseError):
        status = getattr(error, "status", 0) or 0
        if status == 404:
            return ErrorKind.NOT_FOUND
        if status == 409:
            return ErrorKind.CONFLICT
        if status in (400, 422):
            return ErrorKind.VALIDATION
    if isinstance(error, TimeoutError):
        return ErrorKind.TIMEOUT
    return ErrorKind.TRANSPORT


class PocketBaseRecordStore:
    """RecordStore implementation over PocketBase collections."""

    def __init__(
        self,
        pb: PocketBase | PocketBaseWrapper,
        projects_collection: str = PROJECTS_COLLECTION,
        infra_collection: str = INFRA_COLLECTION,
    ) -> None:
        """Initialize with a PocketBase client.

        Args:
            pb: PocketBase client (wrapped automatically if needed)
            projects_collection: Collection holding project records
            infra_collection: Collection holding the infra-fee ledger
        """
        self.pb = pb if isinstance(pb, PocketBaseWrapper) else PocketBaseWrapper(pb)
        self.projects_collection = projects_collection
        self.infra_collection = infra_collection

    async def _call(self, operation: str, fn: Callable[..., T], *args: Any, **kwargs: Any) -> T:
        try:
            return await asyncio.to_thread(fn, *args, **kwargs)
        except Exception as e:
            kind = _error_kind(e)
            logger.warning(f"Store call '{operation}' failed ({kind.value}): {e}")
            raise StoreError(f"{operation} failed: {e}", kind=kind) from e

    # ------------------------------------------------------------------
    # Projects
    # ------------------------------------------------------------------

    async def list_projects(self) -> list[ProjectRecord]:
        items = await self._call(
            "list projects",
            self.pb.collection(self.projects_collection).get_full_list,
            batch=FETCH_BATCH_SIZE,
            query_params={"sort": "-created_at"},
        )
        return [project_from_store(item) for item in items]

    async def get_project(self, project_id: str) -> ProjectRecord | None:
        try:
            item = await self._call("get project", self.pb.collection(self.projects_collection).get_one, project_id)
        except StoreError as e:
            if e.kind is ErrorKind.NOT_FOUND:
                return None
            raise
        return project_from_store(item)

    async def create_project(self, record: ProjectRecord) -> ProjectRecord:
        item = await self._call(
            f"create project {record.reference_number}",
            self.pb.collection(self.projects_collection).create,
            project_to_store(record),
        )
        return project_from_store(item)

    async def update_project(self, project_id: str, updates: Mapping[str, Any]) -> ProjectRecord:
        item = await self._call(
            f"update project {project_id}",
            self.pb.collection(self.projects_collection).update,
            project_id,
            project_updates_to_store(updates),
        )
        return project_from_store(item)

    async def delete_project(self, project_id: str) -> None:
        service = self.pb.collection(self.projects_collection)
        await self._call(f"delete project {project_id}", service.delete, project_id)

    async def list_reference_numbers(self) -> set[str]:
        items = await self._call(
            "snapshot references",
            self.pb.collection(self.projects_collection).get_full_list,
            batch=FETCH_BATCH_SIZE,
            query_params={"fields": "reference_number,referenceNumber"},
        )
        return {p.reference_number for p in map(project_from_store, items) if p.reference_number}

    # ------------------------------------------------------------------
    # Infra ledger
    # ------------------------------------------------------------------

    async def list_infra_plots(self) -> set[str]:
        items = await self._call(
            "snapshot infra plots",
            self.pb.collection(self.infra_collection).get_full_list,
            batch=FETCH_BATCH_SIZE,
            query_params={"fields": ",".join(INFRA_FIELD_NAMES["plot_number"])},
        )
        return {r.plot_number for r in map(infra_from_store, items) if r.plot_number}

    async def insert_infra_payments(self, records: Sequence[InfraPaymentRecord]) -> int:
        if not records:
            return 0
        await self._call(
            f"insert {len(records)} infra payments",
            self.pb.batch_create,
            self.infra_collection,
            [infra_to_store(r) for r in records],
        )
        return len(records)

    async def find_infra_payments_by_plots(self, plots: Sequence[str]) -> list[InfraPaymentRecord]:
        if not plots:
            return []
        fields = [name for key in ("plot_number", *PAYMENT_MARKER_FIELDS) for name in INFRA_FIELD_NAMES[key]]
        items = await self._call(
            f"find infra payments for {len(plots)} plots",
            self.pb.collection(self.infra_collection).get_full_list,
            batch=FETCH_BATCH_SIZE,
            query_params={"filter": build_in_filter("plot_number", plots), "fields": ",".join(fields)},
        )
        return [infra_from_store(item) for item in items]

    async def search_infra_payments(self, term: str, limit: int = 50) -> list[InfraPaymentRecord]:
        # `~` is PocketBase's case-insensitive contains
        result = await self._call(
            f"search infra payments for '{term}'",
            self.pb.collection(self.infra_collection).get_list,
            1,
            limit,
            {"filter": f"plot_number ~ '{escape_filter_value(term)}'"},
        )
        return [infra_from_store(item) for item in result.items]

    async def clear_infra_payments(self) -> int:
        items = await self._call(
            "list infra ids",
            self.pb.collection(self.infra_collection).get_full_list,
            batch=FETCH_BATCH_SIZE,
            query_params={"fields": "id"},
        )
        ids = [getattr(item, "id", None) or item["id"] for item in items]
        for start in range(0, len(ids), FETCH_BATCH_SIZE):
            chunk = ids[start : start + FETCH_BATCH_SIZE]
            await self._call(f"delete {len(chunk)} infra payments", self.pb.batch_delete, self.infra_collection, chunk)
        logger.info(f"Cleared {len(ids)} rows from {self.infra_collection}")
        return len(ids)
