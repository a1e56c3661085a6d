"""Tests for the PocketBase record store adapter.

The wrapper is mocked at the collection-service level; raw request
handling is covered in test_pocketbase_wrapper.py.
"""

from __future__ import annotations

from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest
from pocketbase.utils import ClientResponseError

from planning.data.pocketbase_store import PocketBaseRecordStore
from planning.data.pocketbase_wrapper import PocketBaseWrapper
from planning.errors import ErrorKind, StoreError
from planning.models import CanonicalStage, InfraPaymentRecord, ProjectRecord


@pytest.fixture
def pb():
    wrapper = MagicMock(spec=PocketBaseWrapper)
    wrapper.collection.return_value.get_full_list.return_value = []
    return wrapper


@pytest.fixture
def service(pb):
    return pb.collection.return_value


@pytest.fixture
def record_store(pb):
    return PocketBaseRecordStore(pb)


class TestSnapshots:
    @pytest.mark.asyncio
    async def test_reference_snapshot(self, pb, service, record_store):
        service.get_full_list.return_value = [
            {"reference_number": "R-1"},
            {"referenceNumber": "R-2"},
            {"reference_number": ""},
        ]

        assert await record_store.list_reference_numbers() == {"R-1", "R-2"}
        pb.collection.assert_called_with("projects")
        assert "reference_number" in service.get_full_list.call_args.kwargs["query_params"]["fields"]

    @pytest.mark.asyncio
    async def test_infra_plot_snapshot_normalized(self, pb, service, record_store):
        service.get_full_list.return_value = [{"plot_number": " 1 "}, {"plotNumber": "2"}, {"plot_number": ""}]

        assert await record_store.list_infra_plots() == {"1", "2"}
        pb.collection.assert_called_with("infra_payments")


class TestPaymentLookup:
    @pytest.mark.asyncio
    async def test_exact_or_filter_and_restricted_fields(self, service, record_store):
        service.get_full_list.return_value = [{"plot_number": "55B", "first_payment": "x"}]

        records = await record_store.find_infra_payments_by_plots(["55B", "O'Neil"])

        params = service.get_full_list.call_args.kwargs["query_params"]
        assert params["filter"] == "plot_number = '55B' || plot_number = 'O''Neil'"
        assert "first_payment" in params["fields"].split(",")
        assert "owner_name" not in params["fields"].split(",")
        assert records[0].fee_paid

    @pytest.mark.asyncio
    async def test_empty_input_skips_store(self, service, record_store):
        assert await record_store.find_infra_payments_by_plots([]) == []
        service.get_full_list.assert_not_called()

    @pytest.mark.asyncio
    async def test_search_uses_contains_operator(self, service, record_store):
        service.get_list.return_value = SimpleNamespace(items=[{"plot_number": "55B"}])

        records = await record_store.search_infra_payments("55b", limit=10)

        page, per_page, params = service.get_list.call_args.args
        assert (page, per_page) == (1, 10)
        assert params["filter"] == "plot_number ~ '55b'"
        assert records[0].plot_number == "55B"


class TestWrites:
    @pytest.mark.asyncio
    async def test_bulk_insert_uses_batch(self, pb, record_store):
        count = await record_store.insert_infra_payments([InfraPaymentRecord("1"), InfraPaymentRecord("2")])

        assert count == 2
        collection, bodies = pb.batch_create.call_args.args
        assert collection == "infra_payments"
        assert [b["plot_number"] for b in bodies] == ["1", "2"]

    @pytest.mark.asyncio
    async def test_bulk_insert_empty(self, pb, record_store):
        assert await record_store.insert_infra_payments([]) == 0
        pb.batch_create.assert_not_called()

    @pytest.mark.asyncio
    async def test_create_project(self, service, record_store):
        service.create.return_value = SimpleNamespace(id="new1", label="Villa", stage="gis", reference_number="R-1")

        created = await record_store.create_project(ProjectRecord("Villa", CanonicalStage.GIS, "R-1"))

        assert created.id == "new1"
        assert created.stage is CanonicalStage.GIS
        assert service.create.call_args.args[0]["reference_number"] == "R-1"

    @pytest.mark.asyncio
    async def test_update_translates_fields(self, service, record_store):
        service.update.return_value = {"id": "p1", "label": "Villa", "stage": "passed", "reference_number": "R-1"}

        updated = await record_store.update_project("p1", {"stage": CanonicalStage.PASSED})

        assert service.update.call_args.args == ("p1", {"stage": "passed"})
        assert updated.stage is CanonicalStage.PASSED

    @pytest.mark.asyncio
    async def test_clear_deletes_in_batches(self, pb, service, record_store):
        service.get_full_list.return_value = [{"id": "a"}, SimpleNamespace(id="b")]

        assert await record_store.clear_infra_payments() == 2
        pb.batch_delete.assert_called_once_with("infra_payments", ["a", "b"])


class TestErrorConversion:
    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "status,kind",
        [(400, ErrorKind.VALIDATION), (409, ErrorKind.CONFLICT), (500, ErrorKind.TRANSPORT)],
    )
    async def test_sdk_errors_become_store_errors(self, service, record_store, status, kind):
        service.create.side_effect = ClientResponseError(status=status)

        with pytest.raises(StoreError) as exc_info:
            await record_store.create_project(ProjectRecord("Villa", CanonicalStage.GIS, "R-1"))

        assert exc_info.value.kind is kind

    @pytest.mark.asyncio
    async def test_missing_project_is_none(self, service, record_store):
        service.get_one.side_effect = ClientResponseError(status=404)
        assert await record_store.get_project("nope") is None

    @pytest.mark.asyncio
    async def test_connection_error_is_transport(self, service, record_store):
        service.get_full_list.side_effect = ConnectionError("refused")

        with pytest.raises(StoreError) as exc_info:
            await record_store.list_reference_numbers()

        assert exc_info.value.kind is ErrorKind.TRANSPORT

    @pytest.mark.asyncio
    async def test_timeout_kind(self, pb, record_store):
        pb.batch_create.side_effect = TimeoutError()

        with pytest.raises(StoreError) as exc_info:
            await record_store.insert_infra_payments([InfraPaymentRecord("1")])

        assert exc_info.value.kind is ErrorKind.TIMEOUT
