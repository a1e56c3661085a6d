"""Payment-status resolver - which plots have cleared their infrastructure fees.

A plot is paid when at least one of its ledger rows carries a non-blank
installment marker. Lookups are chunked so each store filter stays under
the URL length limit; a failed chunk is logged and skipped, so the
result may under-count but never raises.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import TYPE_CHECKING, Any

from ..errors import StoreError
from ..models import InfraPaymentRecord
from ..shared import normalize_plot, normalize_plots

if TYPE_CHECKING:
    from ..data.record_store import RecordStore

logger = logging.getLogger(__name__)

# Plots per filter query; 200 quoted plots stay well under PocketBase's URL limit.
# MAX_CHUNK_SIZE bounds the configured size; the resolver itself takes any K >= 1.
DEFAULT_CHUNK_SIZE = 200
MAX_CHUNK_SIZE = 200


def paid_plots(records: Iterable[InfraPaymentRecord]) -> set[str]:
    """Plots with at least one ledger row whose fee is paid."""
    return {normalize_plot(r.plot_number) for r in records if r.fee_paid and normalize_plot(r.plot_number)}


class PaymentStatusResolver:
    """Resolves the fee-paid subset of a set of plot numbers."""

    def __init__(self, store: RecordStore, chunk_size: int = DEFAULT_CHUNK_SIZE) -> None:
        if chunk_size < 1:
            raise ValueError(f"chunk_size must be at least 1, got {chunk_size}")
        self.store = store
        self.chunk_size = chunk_size

    async def resolve_paid(self, plot_numbers: Iterable[Any]) -> set[str]:
        """Return the normalized plots whose fees are recorded as paid.

        Args:
            plot_numbers: Plot identifiers in any form; blanks are ignored

        Returns:
            Subset of the normalized input plots that are paid
        """
        plots = sorted(normalize_plots(plot_numbers))
        if not plots:
            return set()

        paid: set[str] = set()
        failed_chunks = 0
        for start in range(0, len(plots), self.chunk_size):
            chunk = plots[start : start + self.chunk_size]
            try:
                records = await self.store.find_infra_payments_by_plots(chunk)
            except StoreError as e:
                failed_chunks += 1
                logger.warning(f"Payment status lookup failed for {len(chunk)} plots, treating as unpaid: {e.message}")
                continue
            # Only plots that were asked about
            paid |= paid_plots(records) & set(chunk)

        logger.debug(f"Resolved payment status for {len(plots)} plots: {len(paid)} paid, {failed_chunks} failed chunks")
        return paid
