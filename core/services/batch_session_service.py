# =============================================================================
# core/services/batch_session_service.py - Batch Session Manager
# =============================================================================
# Accumulates validation counts across many requests so a large job can be
# sent in chunks and judged once, against a threshold, at the end.
#
# Lifecycle:
#   start()    -> session is active
#   update()   -> counts added atomically (one call per chunk)
#   finalize() -> success rate + threshold verdict, session becomes final
#                 and is deleted BATCH_DELETE_DELAY_SECONDS later
#
# Sessions left idle past BATCH_EXPIRY_MINUTES are removed by
# cleanup_expired(), which the app runs periodically (see expiry_sweep).
#
# Locking:
#   - self._lock guards the session map (create / lookup / delete only)
#   - each session has its own lock guarding its counters
#   - removal takes the session lock, then the map lock, and marks the
#     session deleted so a caller still holding it gets BatchNotFoundError
#   Different batches never contend beyond the map lookup.
# =============================================================================

from __future__ import annotations

import asyncio
import logging
import re
import threading
from dataclasses import dataclass, field
from datetime import datetime, timedelta

from app.exceptions import BatchFinalizedError, BatchNotFoundError
from core.models.array import RunStatus
from core.models.batch import JOB_ID_PATTERN, BatchSnapshot, BatchState
from core.services.array_validator import success_rate, threshold_status
from lib.utils import generate_batch_id, utc_now

logger = logging.getLogger(__name__)


@dataclass
class BatchSession:
    """
    Mutable state of one batch. Only touch counters while holding `lock`.
    """
    batch_id: str
    model_type: str
    expiry: timedelta
    job_id: str | None = None
    threshold: float | None = None
    total_records: int = 0
    valid_records: int = 0
    invalid_records: int = 0
    warning_records: int = 0
    started_at: datetime = field(default_factory=utc_now)
    last_updated_at: datetime = field(default_factory=utc_now)
    is_final: bool = False
    final_status: RunStatus | None = None
    completed_at: datetime | None = None
    is_deleted: bool = False
    lock: threading.Lock = field(default_factory=threading.Lock, repr=False, compare=False)

    @property
    def success_rate(self) -> float:
        return success_rate(self.valid_records, self.total_records)

    @property
    def expires_at(self) -> datetime:
        return self.last_updated_at + self.expiry

    def is_expired(self, now: datetime) -> bool:
        return now > self.expires_at

    def snapshot(self) -> BatchSnapshot:
        status = BatchState(self.final_status.value) if self.final_status else BatchState.ACTIVE
        return BatchSnapshot(
            batch_id=self.batch_id,
            model_type=self.model_type,
            job_id=self.job_id,
            status=status,
            threshold=self.threshold,
            total_records=self.total_records,
            valid_records=self.valid_records,
            invalid_records=self.invalid_records,
            warning_records=self.warning_records,
            success_rate=self.success_rate,
            started_at=self.started_at,
            last_updated_at=self.last_updated_at,
            expires_at=self.expires_at,
            is_final=self.is_final,
            completed_at=self.completed_at,
        )


class BatchSessionManager:
    """
    In-memory registry of batch sessions, safe for concurrent use.

    Usage:
        manager = BatchSessionManager()
        session = manager.start("incident", threshold=90.0)
        manager.update(session.batch_id, valid=8, invalid=2, warnings=1)
        snapshot = manager.finalize(session.batch_id)
    """

    def __init__(
        self,
        expiry_seconds: float | None = None,
        delete_delay_seconds: float | None = None,
    ):
        from app.config import settings

        self.expiry = timedelta(
            seconds=settings.batch_expiry_seconds if expiry_seconds is None else expiry_seconds
        )
        self.delete_delay_seconds = (
            settings.BATCH_DELETE_DELAY_SECONDS if delete_delay_seconds is None else delete_delay_seconds
        )
        self._sessions: dict[str, BatchSession] = {}
        self._timers: dict[str, threading.Timer] = {}
        self._lock = threading.Lock()

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    def start(
        self,
        model_type: str,
        threshold: float | None = None,
        job_id: str | None = None,
    ) -> BatchSession:
        """
        Open a new batch session.

        Raises:
            ValueError: If model_type is empty, job_id has characters that
                can't appear in a URL path segment, or threshold is outside 0-100
        """
        if not model_type:
            raise ValueError("model_type is required")
        if job_id is not None and not re.fullmatch(JOB_ID_PATTERN, job_id):
            raise ValueError(f"job_id may only contain letters, digits, '_', '.' and '-', got {job_id!r}")
        if threshold is not None and not 0 <= threshold <= 100:
            raise ValueError(f"threshold must be between 0 and 100, got {threshold}")

        with self._lock:
            batch_id = generate_batch_id(job_id or "batch")
            while batch_id in self._sessions:
                batch_id = generate_batch_id(job_id or "batch")
            session = BatchSession(
                batch_id=batch_id,
                model_type=model_type,
                expiry=self.expiry,
                job_id=job_id,
                threshold=threshold,
            )
            self._sessions[batch_id] = session

        logger.info(f"Started batch {batch_id} for model '{model_type}' (threshold={threshold})")
        return session

    def update(self, batch_id: str, valid: int, invalid: int, warnings: int) -> None:
        """
        Add one chunk's counts to a batch.

        Raises:
            ValueError: If any count is negative
            BatchNotFoundError: If the batch doesn't exist
            BatchFinalizedError: If the batch was already finalized
        """
        if valid < 0 or invalid < 0 or warnings < 0:
            raise ValueError("batch counts cannot be negative")

        session = self._get(batch_id)
        with session.lock:
            if session.is_deleted:
                raise BatchNotFoundError(batch_id)
            if session.is_final:
                raise BatchFinalizedError(batch_id)
            session.valid_records += valid
            session.invalid_records += invalid
            session.total_records += valid + invalid
            session.warning_records += warnings
            session.last_updated_at = utc_now()

        logger.debug(f"Batch {batch_id}: +{valid} valid, +{invalid} invalid, +{warnings} warnings")

    def status(self, batch_id: str) -> BatchSnapshot:
        """
        Current state of a batch.

        Raises:
            BatchNotFoundError: If the batch doesn't exist
        """
        session = self._get(batch_id)
        with session.lock:
            if session.is_deleted:
                raise BatchNotFoundError(batch_id)
            return session.snapshot()

    def finalize(self, batch_id: str) -> BatchSnapshot:
        """
        Compute the final verdict and schedule deletion.

        Finalizing twice returns the first verdict; deletion is only
        scheduled once.

        Raises:
            BatchNotFoundError: If the batch doesn't exist
        """
        session = self._get(batch_id)
        with session.lock:
            if session.is_deleted:
                raise BatchNotFoundError(batch_id)
            if session.is_final:
                return session.snapshot()

            verdict = threshold_status(
                session.total_records,
                session.valid_records,
                session.success_rate,
                session.threshold,
            )
            session.final_status = verdict
            session.is_final = True
            session.completed_at = utc_now()
            session.last_updated_at = session.completed_at
            snapshot = session.snapshot()

        self._schedule_delete(batch_id)
        logger.info(
            f"Finalized batch {batch_id}: {snapshot.valid_records}/{snapshot.total_records} valid "
            f"({snapshot.success_rate:.2f}%) -> {verdict.value}"
        )
        return snapshot

    def delete(self, batch_id: str) -> bool:
        """Remove a batch. Returns False if it didn't exist."""
        with self._lock:
            session = self._sessions.get(batch_id)
        if session is None:
            return False
        with session.lock:
            return self._remove(session)

    def cleanup_expired(self, now: datetime | None = None) -> int:
        """
        Delete every session idle past the expiry window, final or not.

        Expiry is re-checked under the session lock, so a session updated
        while the sweep runs is kept.

        Returns:
            Number of sessions removed
        """
        now = now or utc_now()
        with self._lock:
            candidates = list(self._sessions.values())

        removed = 0
        for session in candidates:
            with session.lock:
                if session.is_expired(now) and self._remove(session):
                    removed += 1
        if removed:
            logger.info(f"Cleaned up {removed} expired batch session(s)")
        return removed

    def active_count(self) -> int:
        """Number of sessions currently held (final ones included until deleted)."""
        with self._lock:
            return len(self._sessions)

    def shutdown(self) -> None:
        """Cancel pending deletions and drop all sessions."""
        with self._lock:
            timers = list(self._timers.values())
            sessions = list(self._sessions.values())
            self._timers.clear()
            self._sessions.clear()
        for timer in timers:
            timer.cancel()
        for session in sessions:
            with session.lock:
                session.is_deleted = True

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _get(self, batch_id: str) -> BatchSession:
        with self._lock:
            session = self._sessions.get(batch_id)
        if session is None:
            raise BatchNotFoundError(batch_id)
        return session

    def _remove(self, session: BatchSession) -> bool:
        """Drop a session from the map. Caller must hold session.lock."""
        with self._lock:
            if self._sessions.get(session.batch_id) is not session:
                return False
            del self._sessions[session.batch_id]
            timer = self._timers.pop(session.batch_id, None)
        session.is_deleted = True
        if timer is not None:
            timer.cancel()
        logger.debug(f"Deleted batch {session.batch_id}")
        return True

    def _schedule_delete(self, batch_id: str) -> None:
        timer = threading.Timer(self.delete_delay_seconds, self.delete, args=(batch_id,))
        timer.daemon = True
        with self._lock:
            if batch_id not in self._sessions or batch_id in self._timers:
                return
            self._timers[batch_id] = timer
        timer.start()


async def expiry_sweep(manager: BatchSessionManager, interval_seconds: float) -> None:
    """Run cleanup_expired() every interval until cancelled."""
    logger.info(f"Batch expiry sweep started (every {interval_seconds}s)")
    while True:
        await asyncio.sleep(interval_seconds)
        try:
            manager.cleanup_expired()
        except Exception as e:
            logger.error(f"Batch expiry sweep failed: {e}")


# =============================================================================
# Shared instance
# =============================================================================

_manager: BatchSessionManager | None = None
_manager_lock = threading.Lock()


def get_batch_session_manager() -> BatchSessionManager:
    """Get the process-wide BatchSessionManager (created on first call)."""
    global _manager
    if _manager is None:
        with _manager_lock:
            if _manager is None:
                _manager = BatchSessionManager()
    return _manager
