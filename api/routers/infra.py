"""
Infra Router - Infrastructure-fee ledger endpoints.

This router handles:
- Fee-paid status for a set of plots
- Plot lookup in the ledger
- The EDD share / final CC calculator
- Clearing the ledger before a full re-import
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Query

from planning.data import RecordStore
from planning.errors import StoreError
from planning.payments import PaymentStatusResolver, calculate_contribution, lookup_plot

from ..dependencies import get_payment_resolver, get_store
from ..schemas.infra import (
    CalculatorRequest,
    CalculatorResponse,
    ClearLedgerResponse,
    InfraPaymentResponse,
    PaidStatusRequest,
    PaidStatusResponse,
    PlotLookupResponse,
)
from ..utils import http_error

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/infra", tags=["infra"])


@router.post("/paid-status")
async def get_paid_status(
    request: PaidStatusRequest, resolver: PaymentStatusResolver = Depends(get_payment_resolver)
) -> PaidStatusResponse:
    """Plots whose fees are paid; lookups that fail are reported as unpaid."""
    paid = await resolver.resolve_paid(request.plots)
    return PaidStatusResponse(paid=sorted(paid))


@router.get("/lookup")
async def lookup(
    plot: str = Query(..., min_length=1, description="Plot number or part of one"),
    limit: int = Query(50, ge=1, le=200),
    store: RecordStore = Depends(get_store),
) -> PlotLookupResponse:
    try:
        result = await lookup_plot(store, plot, limit=limit)
    except StoreError as e:
        raise http_error(e.kind, f"Plot lookup failed: {e.message}") from e

    return PlotLookupResponse(
        term=result.term,
        found=result.found,
        exact=result.exact,
        match=InfraPaymentResponse.from_record(result.match) if result.match else None,
        candidates=[InfraPaymentResponse.from_record(r) for r in result.candidates],
    )


@router.post("/calculator")
async def calculate(request: CalculatorRequest) -> CalculatorResponse:
    breakdown = calculate_contribution(request.fees, request.cc_reference, request.payment_type)
    return CalculatorResponse(
        payment_type=breakdown.payment_type.value,
        fees=breakdown.fees,
        cc_reference=breakdown.cc_reference,
        edd_share=breakdown.edd_share,
        final_cc=breakdown.final_cc,
    )


@router.delete("")
async def clear_ledger(store: RecordStore = Depends(get_store)) -> ClearLedgerResponse:
    """Delete every row of the infra ledger."""
    try:
        deleted = await store.clear_infra_payments()
    except StoreError as e:
        logger.error(f"Error clearing infra ledger: {e.message}")
        raise http_error(e.kind, f"Failed to clear infra ledger: {e.message}") from e
    logger.info(f"Infra ledger cleared ({deleted} rows)")
    return ClearLedgerResponse(deleted=deleted)
