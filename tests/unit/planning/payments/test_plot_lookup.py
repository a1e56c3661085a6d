"""Tests for plot search in the infra ledger."""

from __future__ import annotations

from unittest.mock import AsyncMock

import pytest

from planning.errors import StoreError
from planning.models import InfraPaymentRecord
from planning.payments.plot_lookup import lookup_plot, pick_best_match
from tests.fixtures.fixtures import InMemoryRecordStore


class TestPickBestMatch:
    def test_exact_casefold_preferred(self):
        candidates = [InfraPaymentRecord("155B"), InfraPaymentRecord("55b")]
        match, exact = pick_best_match("55B", candidates)
        assert match is candidates[1]
        assert exact

    def test_falls_back_to_first_partial(self):
        candidates = [InfraPaymentRecord("155B"), InfraPaymentRecord("255B")]
        match, exact = pick_best_match("55B", candidates)
        assert match is candidates[0]
        assert not exact

    def test_no_candidates(self):
        assert pick_best_match("55B", []) == (None, False)


class TestLookupPlot:
    @pytest.mark.asyncio
    async def test_finds_ledger_row(self):
        store = InMemoryRecordStore(
            infra_payments=[InfraPaymentRecord("155B"), InfraPaymentRecord("55B", owner_name="A. Hassan")]
        )

        result = await lookup_plot(store, " 55b ")

        assert result.found
        assert result.exact
        assert result.term == "55b"
        assert result.match.owner_name == "A. Hassan"
        assert len(result.candidates) == 2

    @pytest.mark.asyncio
    async def test_blank_term_skips_store(self):
        store = AsyncMock()
        result = await lookup_plot(store, "   ")
        assert not result.found
        store.search_infra_payments.assert_not_called()

    @pytest.mark.asyncio
    async def test_not_found(self):
        result = await lookup_plot(InMemoryRecordStore(), "404")
        assert not result.found
        assert result.candidates == []

    @pytest.mark.asyncio
    async def test_limit_passed_to_store(self):
        store = AsyncMock()
        store.search_infra_payments.return_value = []

        await lookup_plot(store, "12", limit=5)

        store.search_infra_payments.assert_awaited_once_with("12", limit=5)

    @pytest.mark.asyncio
    async def test_store_error_propagates(self):
        store = AsyncMock()
        store.search_infra_payments.side_effect = StoreError("search failed")

        with pytest.raises(StoreError):
            await lookup_plot(store, "12")
