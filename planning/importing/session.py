"""Import session - drives one file from upload to commit.

Phases: scanning -> awaiting_confirmation -> committing -> done,
or awaiting_confirmation -> cancelled. A session owns its staged batch
exclusively; batches are never shared between sessions.
"""

from __future__ import annotations

import asyncio
import logging
import uuid
from collections.abc import Mapping
from datetime import timedelta
from pathlib import Path
from typing import TYPE_CHECKING, Any

from ..errors import PlanningError
from ..models import CommitResult, ImportPhase, StagedImportBatch, utc_now
from .committer import DEFAULT_INFRA_CHUNK_SIZE, BatchCommitter, CancellationToken, ProgressCallback
from .row_classifier import Clock
from .spreadsheet import read_rows
from .staging import StagingCoordinator

if TYPE_CHECKING:
    from ..data.record_store import RecordStore

logger = logging.getLogger(__name__)

DEFAULT_SESSION_TTL_SECONDS = 3600.0
DEFAULT_MAX_SESSIONS = 50


class ImportSession:
    """One user's import of one spreadsheet."""

    def __init__(
        self,
        store: RecordStore,
        *,
        infra_chunk_size: int = DEFAULT_INFRA_CHUNK_SIZE,
        timeout: float | None = None,
        progress_callback: ProgressCallback | None = None,
        now: Clock = utc_now,
    ) -> None:
        self.id = uuid.uuid4().hex
        self.created_at = now()
        self.store = store
        self.timeout = timeout
        self.coordinator = StagingCoordinator(store, now=now)
        self.committer = BatchCommitter(store, infra_chunk_size=infra_chunk_size, progress_callback=progress_callback)
        self.cancel_token = CancellationToken()
        self.batch: StagedImportBatch | None = None
        self.result: CommitResult | None = None
        self._phase = ImportPhase.SCANNING

    @property
    def phase(self) -> ImportPhase:
        return self.batch.phase if self.batch is not None else self._phase

    async def stage_rows(self, rows: list[Mapping[str, Any]], source_name: str = "") -> StagedImportBatch:
        """Stage already-parsed rows. Raises StagingError if the store snapshot fails."""
        if self.batch is not None:
            raise PlanningError(f"Import session {self.id} already staged '{self.batch.source_name}'")
        self.batch = await self.coordinator.stage(rows, source_name=source_name)
        return self.batch

    async def stage_file(self, source: bytes | Path | str, filename: str | None = None) -> StagedImportBatch:
        """Read the first sheet of a spreadsheet and stage its rows."""
        rows = await asyncio.to_thread(read_rows, source, filename)
        name = filename or (Path(source).name if isinstance(source, str | Path) else "")
        return await self.stage_rows(rows, source_name=name)

    async def confirm(self) -> CommitResult:
        """Commit the staged batch after the user has reviewed the counts."""
        if self.batch is None or self.batch.phase is not ImportPhase.AWAITING_CONFIRMATION:
            raise PlanningError(f"Import session {self.id} is not awaiting confirmation (phase={self.phase.value})")

        self.result = await self.committer.commit(self.batch, cancel_token=self.cancel_token, timeout=self.timeout)
        return self.result

    def cancel(self) -> None:
        """Abandon the import.

        Before commit the staged batch is dropped; during commit the
        committer stops at the next item or chunk boundary.
        """
        if self.batch is not None and self.batch.phase is ImportPhase.COMMITTING:
            self.cancel_token.cancel()
            return
        if self.batch is not None and self.batch.phase is ImportPhase.DONE:
            return

        logger.info(f"Import session {self.id} cancelled before commit")
        if self.batch is not None:
            self.batch.projects.clear()
            self.batch.infra_payments.clear()
            self.batch.phase = ImportPhase.CANCELLED
        else:
            self._phase = ImportPhase.CANCELLED

    def summary(self) -> dict[str, Any]:
        data: dict[str, Any] = {"session_id": self.id, "phase": self.phase.value}
        if self.batch is not None:
            data["source_name"] = self.batch.source_name
            data["detected"] = self.batch.detected_counts
        if self.result is not None:
            data["result"] = self.result.to_dict()
        return data


class ImportSessionRegistry:
    """In-process registry of import sessions awaiting confirmation.

    Sessions are held for at most `ttl_seconds` and at most `max_sessions`
    at once; both limits are enforced when a session is added. Expired or
    evicted sessions are cancelled so their staged rows are released.
    A session that is committing is never dropped.
    """

    def __init__(
        self,
        *,
        ttl_seconds: float = DEFAULT_SESSION_TTL_SECONDS,
        max_sessions: int = DEFAULT_MAX_SESSIONS,
        now: Clock = utc_now,
    ) -> None:
        if ttl_seconds <= 0:
            raise ValueError(f"ttl_seconds must be positive, got {ttl_seconds}")
        if max_sessions < 1:
            raise ValueError(f"max_sessions must be at least 1, got {max_sessions}")
        self.ttl = timedelta(seconds=ttl_seconds)
        self.max_sessions = max_sessions
        self.now = now
        self._sessions: dict[str, ImportSession] = {}

    def _is_expired(self, session: ImportSession) -> bool:
        return session.phase is not ImportPhase.COMMITTING and self.now() - session.created_at > self.ttl

    def _drop(self, session_id: str, reason: str) -> None:
        session = self._sessions.pop(session_id)
        session.cancel()
        logger.info(f"Import session {session_id} {reason}")

    def prune(self, keep: str | None = None) -> None:
        """Drop expired sessions, then the oldest idle ones while over capacity.

        The session id in `keep` is never evicted for capacity.
        """
        for session_id, session in list(self._sessions.items()):
            if self._is_expired(session):
                self._drop(session_id, "expired")

        # Dicts keep insertion order, so the first idle entries are the oldest
        idle = [
            sid for sid, s in self._sessions.items() if sid != keep and s.phase is not ImportPhase.COMMITTING
        ]
        excess = len(self._sessions) - self.max_sessions
        for session_id in idle[: max(excess, 0)]:
            self._drop(session_id, "evicted (registry full)")

    def add(self, session: ImportSession) -> ImportSession:
        self._sessions[session.id] = session
        self.prune(keep=session.id)
        return session

    def get(self, session_id: str) -> ImportSession | None:
        session = self._sessions.get(session_id)
        if session is not None and self._is_expired(session):
            self._drop(session_id, "expired")
            return None
        return session

    def discard(self, session_id: str) -> None:
        self._sessions.pop(session_id, None)

    def __len__(self) -> int:
        return len(self._sessions)
