"""Staging coordinator - builds an in-memory import plan for confirmation.

Existing references and infra plots are fetched once, in bulk, before the
scan so that store calls stay O(1) regardless of row count. The scan
itself is synchronous and never touches the store.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import TYPE_CHECKING, Any

from ..errors import StagingError, StoreError
from ..models import (
    DedupState,
    ImportPhase,
    InfraPaymentRecord,
    ProjectRecord,
    RowKind,
    StagedImportBatch,
    utc_now,
)
from .row_classifier import Clock, classify_row

if TYPE_CHECKING:
    from ..data.record_store import RecordStore

logger = logging.getLogger(__name__)


def build_staged_batch(
    rows: Iterable[Mapping[str, Any]],
    existing_references: Iterable[str],
    existing_infra_plots: Iterable[str],
    *,
    source_name: str = "",
    now: Clock = utc_now,
) -> StagedImportBatch:
    """Classify every row and accumulate the two staged lists.

    Within one batch the first occurrence of a reference (or infra plot)
    wins; later duplicates are discarded.

    Args:
        rows: Parsed spreadsheet rows
        existing_references: Snapshot of project reference numbers in the store
        existing_infra_plots: Snapshot of plot numbers in the infra ledger
        source_name: File name shown in the review summary
        now: Clock for rows without a creation date

    Returns:
        StagedImportBatch in the AWAITING_CONFIRMATION phase
    """
    batch = StagedImportBatch(source_name=source_name)
    dedup = DedupState(frozenset(existing_references), frozenset(existing_infra_plots))

    for index, row in enumerate(rows):
        batch.total_rows += 1
        decision = classify_row(row, dedup, row_index=index, now=now)

        if decision.kind is RowKind.PROJECT and isinstance(decision.record, ProjectRecord):
            batch.projects.append(decision.record)
            dedup = dedup.with_reference(decision.record.reference_number)
        elif decision.kind is RowKind.INFRA and isinstance(decision.record, InfraPaymentRecord):
            batch.infra_payments.append(decision.record)
            dedup = dedup.with_infra_plot(decision.record.plot_number)
        else:
            batch.discarded_count += 1
            logger.debug(f"Row {index + 1} discarded: {decision.reason}")

    batch.phase = ImportPhase.AWAITING_CONFIRMATION
    logger.info(
        f"Staged '{source_name}': {len(batch.projects)} projects, "
        f"{len(batch.infra_payments)} infra payments, {batch.discarded_count} discarded "
        f"of {batch.total_rows} rows"
    )
    return batch


class StagingCoordinator:
    """Produces staged import batches against a live record store."""

    def __init__(self, store: RecordStore, now: Clock = utc_now) -> None:
        """Initialize with the record store used for existence snapshots.

        Args:
            store: Record store to snapshot existing references and plots from
            now: Clock for rows without a creation date
        """
        self.store = store
        self.now = now

    async def load_dedup_state(self) -> DedupState:
        """Fetch both existence snapshots.

        Fails closed: if either snapshot cannot be loaded the import must
        not proceed, since unknown plots would otherwise look new.

        Raises:
            StagingError: If the store cannot be reached
        """
        try:
            references = await self.store.list_reference_numbers()
            infra_plots = await self.store.list_infra_plots()
        except StoreError as e:
            logger.error(f"Existence snapshot failed, refusing to stage import: {e.message}")
            raise StagingError(f"Could not load existing records: {e.message}", kind=e.kind) from e

        logger.debug(f"Existence snapshot: {len(references)} references, {len(infra_plots)} infra plots")
        return DedupState(frozenset(references), frozenset(infra_plots))

    async def stage(self, rows: list[Mapping[str, Any]], source_name: str = "") -> StagedImportBatch:
        """Snapshot the store once, then classify all rows in memory."""
        dedup = await self.load_dedup_state()
        return build_staged_batch(
            rows,
            dedup.existing_references,
            dedup.existing_infra_plots,
            source_name=source_name,
            now=self.now,
        )
