"""Infrastructure contribution (CC) calculator.

The EDD share of the paid fees depends on the payment type; the final CC
is the 13/2006 CC reference minus that share, floored at zero.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class PaymentType(Enum):
    """Fee payment scheme, named by its rate"""

    RATE_10 = "10"
    RATE_12 = "12"
    RATE_6_5 = "6.5"


EDD_SHARE_RATIOS: dict[PaymentType, float] = {
    PaymentType.RATE_10: 0.4,
    PaymentType.RATE_12: 0.375,
    PaymentType.RATE_6_5: 9 / 13,
}


@dataclass(frozen=True)
class ContributionBreakdown:
    payment_type: PaymentType
    fees: float
    cc_reference: float
    edd_share: float
    final_cc: float

    @property
    def is_zero(self) -> bool:
        """CC reference does not exceed the EDD share"""
        return self.final_cc == 0


def edd_share(fees: float, payment_type: PaymentType | str) -> float:
    return fees * EDD_SHARE_RATIOS[PaymentType(payment_type)]


def final_cc(cc_reference: float, share: float) -> float:
    return cc_reference - share if cc_reference > share else 0.0


def calculate_contribution(
    fees: float, cc_reference: float, payment_type: PaymentType | str = PaymentType.RATE_10
) -> ContributionBreakdown:
    """Compute the EDD share and the final CC.

    Raises:
        ValueError: If payment_type is not one of 10, 12 or 6.5
    """
    kind = PaymentType(payment_type)
    share = edd_share(fees, kind)
    return ContributionBreakdown(
        payment_type=kind,
        fees=fees,
        cc_reference=cc_reference,
        edd_share=share,
        final_cc=final_cc(cc_reference, share),
    )
