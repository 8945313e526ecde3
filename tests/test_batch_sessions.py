# =============================================================================
# tests/test_batch_sessions.py - Batch Session Manager Tests
# =============================================================================
# Run with: pytest tests/test_batch_sessions.py -v
# =============================================================================

import threading
import time
from datetime import timedelta

import pytest

import core.services.batch_session_service as batch_service
from app.exceptions import BatchFinalizedError, BatchNotFoundError
from core.models.batch import BatchState
from core.services.batch_session_service import BatchSessionManager, get_batch_session_manager
from lib.utils import utc_now


def wait_until(predicate, timeout=2.0):
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(0.01)
    return predicate()


# =============================================================================
# Lifecycle
# =============================================================================

class TestBatchLifecycle:
    """start -> update -> finalize -> delete."""

    def test_start(self, batch_manager):
        session = batch_manager.start("incident", threshold=90.0, job_id="nightly")

        assert session.batch_id.startswith("nightly_")
        assert session.model_type == "incident"
        assert session.threshold == 90.0
        assert session.expires_at > session.started_at
        assert batch_manager.active_count() == 1

    def test_default_prefix(self, batch_manager):
        assert batch_manager.start("incident").batch_id.startswith("batch_")

    def test_start_rejects_bad_threshold(self, batch_manager):
        with pytest.raises(ValueError):
            batch_manager.start("incident", threshold=120)

    @pytest.mark.parametrize("job_id", ["team/nightly", "a?b", "a#b", "nightly\n", ""])
    def test_start_rejects_unaddressable_job_id(self, batch_manager, job_id):
        with pytest.raises(ValueError):
            batch_manager.start("incident", job_id=job_id)
        assert batch_manager.active_count() == 0

    def test_half_valid_batch(self, batch_manager):
        """Two chunks of five: one all valid, one all invalid -> 50%."""
        batch_id = batch_manager.start("incident").batch_id

        batch_manager.update(batch_id, valid=5, invalid=0, warnings=0)
        batch_manager.update(batch_id, valid=0, invalid=5, warnings=0)
        snapshot = batch_manager.finalize(batch_id)

        assert snapshot.total_records == 10
        assert snapshot.success_rate == 50.0
        assert snapshot.status == BatchState.SUCCESS
        assert snapshot.is_final

    def test_threshold_applied_at_finalize(self, batch_manager):
        batch_id = batch_manager.start("incident", threshold=90.0).batch_id
        batch_manager.update(batch_id, valid=10, invalid=90, warnings=0)

        assert batch_manager.status(batch_id).status == BatchState.ACTIVE
        assert batch_manager.finalize(batch_id).status == BatchState.FAILED

    def test_status_snapshot(self, batch_manager):
        batch_id = batch_manager.start("incident").batch_id
        batch_manager.update(batch_id, valid=3, invalid=1, warnings=2)

        snapshot = batch_manager.status(batch_id)

        assert snapshot.valid_records == 3
        assert snapshot.invalid_records == 1
        assert snapshot.warning_records == 2
        assert snapshot.total_records == 4
        assert snapshot.success_rate == 75.0
        assert not snapshot.is_final
        assert snapshot.completed_at is None

    def test_update_unknown_batch(self, batch_manager):
        with pytest.raises(BatchNotFoundError):
            batch_manager.update("missing", 1, 0, 0)

    def test_status_unknown_batch(self, batch_manager):
        with pytest.raises(BatchNotFoundError):
            batch_manager.status("missing")

    def test_negative_counts_rejected(self, batch_manager):
        batch_id = batch_manager.start("incident").batch_id

        with pytest.raises(ValueError):
            batch_manager.update(batch_id, valid=-1, invalid=0, warnings=0)
        assert batch_manager.status(batch_id).total_records == 0

    def test_update_after_finalize_rejected(self):
        manager = BatchSessionManager(expiry_seconds=600, delete_delay_seconds=60)
        batch_id = manager.start("incident").batch_id
        manager.finalize(batch_id)

        with pytest.raises(BatchFinalizedError) as exc_info:
            manager.update(batch_id, 1, 0, 0)
        assert exc_info.value.status_code == 409
        manager.shutdown()

    def test_finalize_is_idempotent(self):
        manager = BatchSessionManager(expiry_seconds=600, delete_delay_seconds=60)
        batch_id = manager.start("incident", threshold=50.0).batch_id
        manager.update(batch_id, 1, 0, 0)

        first = manager.finalize(batch_id)
        second = manager.finalize(batch_id)

        assert first.status == second.status == BatchState.SUCCESS
        assert first.completed_at == second.completed_at
        assert len(manager._timers) == 1
        manager.shutdown()

    def test_deleted_shortly_after_finalize(self, batch_manager):
        batch_id = batch_manager.start("incident").batch_id
        batch_manager.finalize(batch_id)

        assert wait_until(lambda: batch_manager.active_count() == 0)
        with pytest.raises(BatchNotFoundError):
            batch_manager.status(batch_id)

    def test_delete(self, batch_manager):
        batch_id = batch_manager.start("incident").batch_id

        assert batch_manager.delete(batch_id)
        assert not batch_manager.delete(batch_id)


# =============================================================================
# Expiry
# =============================================================================

class TestExpiry:
    """cleanup_expired() removes idle sessions, final or not."""

    def test_idle_sessions_removed(self, batch_manager):
        old = batch_manager.start("incident").batch_id
        fresh = batch_manager.start("incident").batch_id

        removed = batch_manager.cleanup_expired(now=utc_now() + timedelta(minutes=5))
        assert removed == 0

        batch_manager.update(fresh, 1, 0, 0)
        removed = batch_manager.cleanup_expired(now=utc_now() + timedelta(seconds=601))

        assert removed == 2
        assert batch_manager.active_count() == 0
        with pytest.raises(BatchNotFoundError):
            batch_manager.status(old)

    def test_update_extends_expiry(self, batch_manager):
        batch_id = batch_manager.start("incident").batch_id
        before = batch_manager.status(batch_id).expires_at

        time.sleep(0.01)
        batch_manager.update(batch_id, 1, 0, 0)

        assert batch_manager.status(batch_id).expires_at > before

    def test_update_on_swept_session_rejected(self, batch_manager, monkeypatch):
        """An update that looked the session up before the sweep must not succeed."""
        session = batch_manager.start("incident")
        monkeypatch.setattr(batch_manager, "_get", lambda batch_id: session)

        assert batch_manager.cleanup_expired(now=utc_now() + timedelta(seconds=601)) == 1

        with pytest.raises(BatchNotFoundError):
            batch_manager.update(session.batch_id, 1, 0, 0)
        with pytest.raises(BatchNotFoundError):
            batch_manager.finalize(session.batch_id)
        assert session.total_records == 0


# =============================================================================
# Concurrency
# =============================================================================

class TestConcurrency:
    """Concurrent updates never lose counts."""

    def test_parallel_updates(self, batch_manager):
        batch_id = batch_manager.start("incident").batch_id

        def submit():
            for _ in range(100):
                batch_manager.update(batch_id, valid=1, invalid=1, warnings=1)

        threads = [threading.Thread(target=submit) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        snapshot = batch_manager.status(batch_id)
        assert snapshot.valid_records == 800
        assert snapshot.invalid_records == 800
        assert snapshot.warning_records == 800
        assert snapshot.total_records == 1600

    def test_independent_batches(self, batch_manager):
        ids = [batch_manager.start("incident").batch_id for _ in range(4)]

        def submit(batch_id):
            for _ in range(50):
                batch_manager.update(batch_id, valid=1, invalid=0, warnings=0)

        threads = [threading.Thread(target=submit, args=(b,)) for b in ids]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert [batch_manager.status(b).valid_records for b in ids] == [50] * 4

    def test_shared_manager_singleton(self, monkeypatch):
        monkeypatch.setattr(batch_service, "_manager", None)

        results = []
        threads = [
            threading.Thread(target=lambda: results.append(get_batch_session_manager()))
            for _ in range(8)
        ]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert all(r is results[0] for r in results)
