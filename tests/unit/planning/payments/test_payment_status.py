"""Tests for resolving which plots have paid their infrastructure fees."""

from __future__ import annotations

import pytest

from planning.models import InfraPaymentRecord
from planning.payments.payment_status import PaymentStatusResolver, paid_plots
from tests.fixtures.fixtures import InMemoryRecordStore


def _ledger(*entries: tuple[str, str]) -> InMemoryRecordStore:
    records = [InfraPaymentRecord(plot, first_payment=marker) for plot, marker in entries]
    return InMemoryRecordStore(infra_payments=records)


class TestPaidPlots:
    def test_any_marker_counts(self):
        records = [
            InfraPaymentRecord("1", first_payment="2024-01-01"),
            InfraPaymentRecord("2", third_payment="paid"),
            InfraPaymentRecord("3"),
            InfraPaymentRecord("", first_payment="orphan"),
        ]
        assert paid_plots(records) == {"1", "2"}

    def test_one_paid_row_is_enough(self):
        records = [InfraPaymentRecord("7"), InfraPaymentRecord("7", second_payment="x")]
        assert paid_plots(records) == {"7"}


class TestResolvePaid:
    @pytest.mark.asyncio
    async def test_paid_plot_found_after_trimming(self):
        """A project plot typed with stray whitespace still resolves against the ledger."""
        store = _ledger(("55B", "2025-02-01"), ("60", ""))

        paid = await PaymentStatusResolver(store).resolve_paid([" 55B ", "60", "61"])

        assert paid == {"55B"}

    @pytest.mark.asyncio
    async def test_match_is_case_sensitive(self):
        store = _ledger(("55B", "2025-02-01"))
        assert await PaymentStatusResolver(store).resolve_paid(["55b"]) == set()

    @pytest.mark.asyncio
    async def test_blank_and_duplicate_input(self):
        store = _ledger(("1", "x"))

        paid = await PaymentStatusResolver(store).resolve_paid(["", None, "1", "1", 1.0])

        assert paid == {"1"}
        assert store.lookup_calls == [["1"]]

    @pytest.mark.asyncio
    async def test_empty_input_skips_store(self):
        store = _ledger()
        assert await PaymentStatusResolver(store).resolve_paid([]) == set()
        assert store.lookup_calls == []

    @pytest.mark.asyncio
    async def test_chunking_is_transparent(self):
        """The answer does not depend on how the plots are chunked."""
        plots = [f"P{i:03d}" for i in range(25)]
        store = _ledger(*((p, "x") for p in plots[::3]))

        small = await PaymentStatusResolver(store, chunk_size=4).resolve_paid(plots)
        large = await PaymentStatusResolver(store, chunk_size=200).resolve_paid(plots)

        assert small == large == set(plots[::3])
        assert [len(c) for c in store.lookup_calls[:7]] == [4, 4, 4, 4, 4, 4, 1]

    @pytest.mark.asyncio
    async def test_failed_chunk_treated_as_unpaid(self, caplog):
        plots = ["A1", "A2", "B1", "B2"]
        store = _ledger(*((p, "x") for p in plots))
        store.fail_lookup_calls = {1}

        with caplog.at_level("WARNING"):
            paid = await PaymentStatusResolver(store, chunk_size=2).resolve_paid(plots)

        assert paid == {"B1", "B2"}
        assert "treating as unpaid" in caplog.text

    @pytest.mark.asyncio
    async def test_result_is_subset_of_input(self):
        store = _ledger(("1", "x"), ("2", "x"))
        paid = await PaymentStatusResolver(store).resolve_paid(["1"])
        assert paid <= {"1"}

    @pytest.mark.asyncio
    async def test_monotonic_in_ledger(self):
        """Adding a paid ledger row never removes a plot from the result."""
        store = _ledger(("1", "x"))
        before = await PaymentStatusResolver(store).resolve_paid(["1", "2"])

        store.infra_payments.append(InfraPaymentRecord("2", second_payment="x"))
        after = await PaymentStatusResolver(store).resolve_paid(["1", "2"])

        assert before <= after == {"1", "2"}

    @pytest.mark.parametrize("size", [0, -1])
    def test_chunk_size_must_be_positive(self, size):
        with pytest.raises(ValueError, match="chunk_size"):
            PaymentStatusResolver(InMemoryRecordStore(), chunk_size=size)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("size", [1, 7, 250, 500, 1000])
    async def test_single_chunk_matches_any_chunking(self, size):
        """Chunk size K gives the same answer as one chunk of all N plots, N above 200 included."""
        plots = [f"P{i:03d}" for i in range(500)]
        store = _ledger(*((p, "x") for p in plots[::7]))

        whole = await PaymentStatusResolver(store, chunk_size=len(plots)).resolve_paid(plots)
        chunked = await PaymentStatusResolver(store, chunk_size=size).resolve_paid(plots)

        assert chunked == whole == set(plots[::7])
