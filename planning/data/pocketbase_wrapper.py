"""PocketBase client wrapper adding filter-safe listing and batch requests.

The PocketBase Python SDK form-encodes query parameters ('+' for spaces)
while the server expects %20 inside filter expressions, and it has no
helper for the /api/batch endpoint used for bulk ledger inserts. This
wrapper sends both through the SDK's raw `send` method."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

from pocketbase.models.utils.list_result import ListResult
from pocketbase.services.record_service import RecordService

from pocketbase import PocketBase
from planning.logging_config import TRACE

logger = logging.getLogger(__name__)

BATCH_PATH = "/api/batch"


def escape_filter_value(value: str) -> str:
    """Escape a string for use inside a single-quoted PocketBase filter literal.

    Single quotes are doubled (O'Brien -> O''Brien) to prevent filter injection.
    """
    return value.replace("'", "''")


def build_in_filter(field: str, values: Sequence[str]) -> str:
    """Express `field in [values]` as an OR of exact, case-sensitive matches."""
    return " || ".join(f"{field} = '{escape_filter_value(v)}'" for v in values)


class WrappedRecordService(RecordService):
    """RecordService whose list calls go through the client's raw send"""

    def __init__(self, original_service: RecordService) -> None:
        # Share the original's client rather than re-initializing
        self.client = original_service.client
        self.collection_id_or_name: str = getattr(original_service, "collection_id_or_name", "") or ""
        self._original_service = original_service

    def base_crud_path(self) -> str:
        return self._original_service.base_crud_path()

    def decode(self, data: dict[str, Any]) -> Any:
        return self._original_service.decode(data)

    def get_list(
        self,
        page: int = 1,
        per_page: int = 30,
        query_params: dict[str, Any] | None = None,
    ) -> Any:
        """Fetch one page of records, passing the filter through unchanged."""
        params = query_params.copy() if query_params else {}
        params.update({"page": page, "perPage": per_page})

        logger.log(TRACE, f"get_list {self.collection_id_or_name} params: {params}")

        response_data = self.client.send(self.base_crud_path(), {"method": "GET", "params": params})
        items = [self.decode(item) for item in (response_data.get("items") or [])]

        return ListResult(
            response_data.get("page", 1),
            response_data.get("perPage", 0),
            response_data.get("totalItems", 0),
            response_data.get("totalPages", 0),
            items,
        )

    def get_full_list(
        self,
        batch: int = 200,
        query_params: dict[str, Any] | None = None,
    ) -> list[Any]:
        """Page through get_list until every matching record is loaded."""
        result: list[Any] = []
        page = 1
        while True:
            list_result = self.get_list(page, batch, query_params)
            result.extend(list_result.items)
            if not list_result.items or len(result) >= list_result.total_items:
                return result
            page += 1

    def __getattr__(self, name: str) -> Any:
        """Delegate create/update/delete/get_one to the original service"""
        return getattr(self._original_service, name)


class PocketBaseWrapper:
    """Wrapper for the PocketBase client.

    Usage:
        pb = PocketBaseWrapper(PocketBase("http://localhost:8090"))

        records = pb.collection("projects").get_full_list(
            query_params={"filter": "stage = 'passed'"}
        )
        pb.batch_create("infra_payments", [{"plot_number": "55B"}])
    """

    def __init__(self, pb_client: PocketBase):
        self._client = pb_client
        self._wrapped_services: dict[str, WrappedRecordService] = {}

    def collection(self, id_or_name: str) -> WrappedRecordService:
        if id_or_name not in self._wrapped_services:
            self._wrapped_services[id_or_name] = WrappedRecordService(self._client.collection(id_or_name))
        return self._wrapped_services[id_or_name]

    def batch(self, requests: list[dict[str, Any]]) -> list[dict[str, Any]]:
        """Send a transactional batch request; all sub-requests succeed or none do.

        The server's batch.maxRequests setting must be at least len(requests).
        """
        logger.log(TRACE, f"batch with {len(requests)} requests")
        response = self._client.send(BATCH_PATH, {"method": "POST", "body": {"requests": requests}})
        return list(response or [])

    def batch_create(self, collection: str, bodies: Sequence[dict[str, Any]]) -> list[dict[str, Any]]:
        url = f"/api/collections/{collection}/records"
        return self.batch([{"method": "POST", "url": url, "body": body} for body in bodies])

    def batch_delete(self, collection: str, record_ids: Sequence[str]) -> list[dict[str, Any]]:
        url = f"/api/collections/{collection}/records"
        return self.batch([{"method": "DELETE", "url": f"{url}/{record_id}"} for record_id in record_ids])

    def __getattr__(self, name: str) -> Any:
        """Delegate all other attributes to the original client"""
        return getattr(self._client, name)
