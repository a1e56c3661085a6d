"""Plot lookup in the infrastructure-fee ledger.

The store search is a case-insensitive contains (`~`); among its hits an
exact casefolded match on the plot is preferred.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from ..models import InfraPaymentRecord
from ..shared import normalize_plot, plots_match_casefold

if TYPE_CHECKING:
    from ..data.record_store import RecordStore

logger = logging.getLogger(__name__)

DEFAULT_SEARCH_LIMIT = 50


@dataclass
class PlotLookupResult:
    """Best ledger match for a searched plot plus the other partial hits"""

    term: str
    match: InfraPaymentRecord | None = None
    exact: bool = False
    candidates: list[InfraPaymentRecord] = field(default_factory=list)

    @property
    def found(self) -> bool:
        return self.match is not None


def pick_best_match(term: str, candidates: list[InfraPaymentRecord]) -> tuple[InfraPaymentRecord | None, bool]:
    """Exact casefolded plot match first, otherwise the first partial hit."""
    for record in candidates:
        if plots_match_casefold(record.plot_number, term):
            return record, True
    return (candidates[0], False) if candidates else (None, False)


async def lookup_plot(store: RecordStore, term: str, limit: int = DEFAULT_SEARCH_LIMIT) -> PlotLookupResult:
    """Search the ledger for a plot; StoreError propagates to the caller."""
    term = normalize_plot(term)
    if not term:
        return PlotLookupResult(term=term)

    candidates = await store.search_infra_payments(term, limit=limit)
    match, exact = pick_best_match(term, candidates)
    logger.debug(f"Plot lookup '{term}': {len(candidates)} candidates, exact={exact}")
    return PlotLookupResult(term=term, match=match, exact=exact, candidates=candidates)
