"""Batch committer - persists a confirmed staged import.

Projects and infra payments are committed with deliberately different
failure policies:

- Projects are inserted one at a time, strictly sequentially. A failed
  insert is counted and the next project is attempted; partial success
  is useful because each project carries its own reference number.
- Infra payments are inserted in fixed-size chunks. The first failed
  chunk stops the load; the failed chunk and every row after it are
  counted as errors, because a partially loaded ledger is worse than a
  clean re-import.

Cancellation is checked between items and between chunks. An overall
timeout ends the commit with a partial result.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections.abc import Callable, Sequence
from typing import TYPE_CHECKING, Any

from ..errors import ErrorKind, StoreError
from ..models import (
    CommitFailure,
    CommitResult,
    ImportPhase,
    InfraPaymentRecord,
    ProjectRecord,
    StagedImportBatch,
)

if TYPE_CHECKING:
    from ..data.record_store import RecordStore

logger = logging.getLogger(__name__)

# Chunk size for bulk ledger inserts, kept under the store's request-size
# and batch.maxRequests limits
DEFAULT_INFRA_CHUNK_SIZE = 500
MAX_INFRA_CHUNK_SIZE = 1000

ProgressCallback = Callable[[int, int], Any]


class CancellationToken:
    """Cooperative cancellation flag checked between commit steps"""

    def __init__(self) -> None:
        self._cancelled = False

    def cancel(self) -> None:
        self._cancelled = True

    @property
    def cancelled(self) -> bool:
        return self._cancelled


async def _call_callback(callback: ProgressCallback | None, *args: Any) -> None:
    """Call a progress callback, handling both sync and async callbacks."""
    if callback is None:
        return
    result = callback(*args)
    if inspect.iscoroutine(result):
        await result


class _CommitProgress:
    """Mutable commit state shared with the timeout handler"""

    def __init__(self, total: int) -> None:
        self.total = total
        self.result = CommitResult()
        self.in_flight = 0
        self.in_flight_label = ""

    @property
    def processed(self) -> int:
        return self.result.processed_count


class BatchCommitter:
    """Writes staged projects and infra payments to the record store."""

    def __init__(
        self,
        store: RecordStore,
        infra_chunk_size: int = DEFAULT_INFRA_CHUNK_SIZE,
        progress_callback: ProgressCallback | None = None,
    ) -> None:
        """Initialize the committer.

        Args:
            store: Record store to write to
            infra_chunk_size: Rows per bulk ledger insert
            progress_callback: Called with (processed, total) after each
                project and each chunk; sync or async
        """
        if not 0 < infra_chunk_size <= MAX_INFRA_CHUNK_SIZE:
            raise ValueError(f"infra_chunk_size must be between 1 and {MAX_INFRA_CHUNK_SIZE}, got {infra_chunk_size}")
        self.store = store
        self.infra_chunk_size = infra_chunk_size
        self.progress_callback = progress_callback

    async def commit(
        self,
        batch: StagedImportBatch,
        *,
        cancel_token: CancellationToken | None = None,
        timeout: float | None = None,
    ) -> CommitResult:
        """Persist a staged batch.

        Never raises for store failures; every outcome is reported in the
        returned CommitResult. The caller must re-fetch records afterwards.

        Args:
            batch: Staged batch, normally in AWAITING_CONFIRMATION
            cancel_token: Optional token checked between items and chunks
            timeout: Overall limit in seconds for the whole commit

        Returns:
            CommitResult with success/error/skipped counts and failures
        """
        token = cancel_token or CancellationToken()
        progress = _CommitProgress(batch.pending_count)
        batch.phase = ImportPhase.COMMITTING

        logger.info(
            f"Committing '{batch.source_name}': {len(batch.projects)} projects, "
            f"{len(batch.infra_payments)} infra payments"
        )

        try:
            async with asyncio.timeout(timeout):
                await self._commit_projects(batch.projects, progress, token)
                if not progress.result.cancelled:
                    await self._commit_infra(batch.infra_payments, progress, token)
        except TimeoutError:
            self._record_timeout(progress, timeout)

        result = progress.result
        if result.cancelled or result.timed_out:
            result.skipped_count = progress.total - progress.processed

        batch.success_count = result.success_count
        batch.error_count = result.error_count
        batch.phase = ImportPhase.DONE

        logger.info(
            f"Commit of '{batch.source_name}' finished: {result.success_count} succeeded, "
            f"{result.error_count} failed, {result.skipped_count} skipped"
        )
        return result

    async def _commit_projects(
        self,
        projects: Sequence[ProjectRecord],
        progress: _CommitProgress,
        token: CancellationToken,
    ) -> None:
        result = progress.result
        for project in projects:
            if token.cancelled:
                self._record_cancel(progress)
                return

            progress.in_flight = 1
            progress.in_flight_label = project.reference_number
            try:
                await self.store.create_project(project)
            except StoreError as e:
                progress.in_flight = 0
                result.error_count += 1
                result.failures.append(CommitFailure(e.kind, e.message, reference=project.reference_number))
                logger.warning(f"Project {project.reference_number} not saved: {e.message}")
            else:
                progress.in_flight = 0
                result.success_count += 1
                result.project_success_count += 1

            await _call_callback(self.progress_callback, progress.processed, progress.total)

    async def _commit_infra(
        self,
        payments: Sequence[InfraPaymentRecord],
        progress: _CommitProgress,
        token: CancellationToken,
    ) -> None:
        result = progress.result
        chunk_count = (len(payments) + self.infra_chunk_size - 1) // self.infra_chunk_size

        for chunk_index, start in enumerate(range(0, len(payments), self.infra_chunk_size), start=1):
            if token.cancelled:
                self._record_cancel(progress)
                return

            chunk = payments[start : start + self.infra_chunk_size]
            label = f"infra chunk {chunk_index}/{chunk_count}"
            progress.in_flight = len(chunk)
            progress.in_flight_label = label
            try:
                await self.store.insert_infra_payments(chunk)
            except StoreError as e:
                progress.in_flight = 0
                remaining = len(payments) - start - len(chunk)
                result.error_count += len(chunk) + remaining
                result.failures.append(CommitFailure(e.kind, e.message, reference=label, item_count=len(chunk)))
                if remaining:
                    result.failures.append(
                        CommitFailure(
                            e.kind,
                            f"Not attempted after {label} failed",
                            reference=f"infra chunks {chunk_index + 1}-{chunk_count}",
                            item_count=remaining,
                        )
                    )
                unsaved = len(chunk) + remaining
                logger.error(f"{label} failed, stopping ledger load ({unsaved} rows not saved): {e.message}")
                await _call_callback(self.progress_callback, progress.processed, progress.total)
                return

            progress.in_flight = 0
            result.success_count += len(chunk)
            result.infra_success_count += len(chunk)
            logger.debug(f"{label} saved ({len(chunk)} rows)")
            await _call_callback(self.progress_callback, progress.processed, progress.total)

    def _record_cancel(self, progress: _CommitProgress) -> None:
        progress.result.cancelled = True
        logger.warning(f"Commit cancelled after {progress.processed} of {progress.total} items")

    def _record_timeout(self, progress: _CommitProgress, timeout: float | None) -> None:
        result = progress.result
        result.timed_out = True
        if progress.in_flight:
            # Outcome of the interrupted request is unknown
            result.error_count += progress.in_flight
            result.failures.append(
                CommitFailure(
                    ErrorKind.TIMEOUT,
                    f"Import timed out after {timeout}s",
                    reference=progress.in_flight_label,
                    item_count=progress.in_flight,
                )
            )
            progress.in_flight = 0
        logger.error(f"Commit timed out after {timeout}s with {progress.processed} of {progress.total} items processed")
