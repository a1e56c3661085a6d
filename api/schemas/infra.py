"""
Pydantic schemas for the infrastructure-fee ledger endpoints.
"""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

from planning.models import InfraPaymentRecord


class InfraPaymentResponse(BaseModel):
    id: str | None
    plot_number: str
    owner_name: str
    application_number: str
    first_payment: str
    second_payment: str
    third_payment: str
    fee_paid: bool = Field(description="Any installment marker recorded")
    created_at: datetime

    @classmethod
    def from_record(cls, record: InfraPaymentRecord) -> InfraPaymentResponse:
        return cls(
            id=record.id,
            plot_number=record.plot_number,
            owner_name=record.owner_name,
            application_number=record.application_number,
            first_payment=record.first_payment,
            second_payment=record.second_payment,
            third_payment=record.third_payment,
            fee_paid=record.fee_paid,
            created_at=record.created_at,
        )


class PaidStatusRequest(BaseModel):
    plots: list[str] = Field(description="Plot identifiers to check")


class PaidStatusResponse(BaseModel):
    paid: list[str] = Field(description="Normalized plots whose fees are recorded as paid")


class PlotLookupResponse(BaseModel):
    term: str
    found: bool
    exact: bool = Field(description="Match equals the search term ignoring case")
    match: InfraPaymentResponse | None = None
    candidates: list[InfraPaymentResponse] = Field(default_factory=list)


class CalculatorRequest(BaseModel):
    payment_type: Literal["10", "12", "6.5"] = Field(default="10", description="Fee payment scheme")
    fees: float = Field(ge=0, description="Fees paid (BD)")
    cc_reference: float = Field(ge=0, description="13/2006 CC reference (BD)")


class CalculatorResponse(BaseModel):
    payment_type: str
    fees: float
    cc_reference: float
    edd_share: float
    final_cc: float = Field(description="CC reference minus EDD share, or 0 when not greater")


class ClearLedgerResponse(BaseModel):
    deleted: int
