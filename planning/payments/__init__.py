"""Plot matching and payment-status engine."""

from __future__ import annotations

from .fee_calculator import ContributionBreakdown, PaymentType, calculate_contribution
from .payment_status import PaymentStatusResolver, paid_plots
from .plot_lookup import PlotLookupResult, lookup_plot

__all__ = [
    "ContributionBreakdown",
    "PaymentType",
    "calculate_contribution",
    "PaymentStatusResolver",
    "paid_plots",
    "PlotLookupResult",
    "lookup_plot",
]
