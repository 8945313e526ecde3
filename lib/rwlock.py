# =============================================================================
# lib/rwlock.py - Reader-Writer Lock
# =============================================================================
# A small reader-writer lock built on threading.Condition.
#
# - Any number of readers may hold the lock at the same time.
# - A writer holds it exclusively (no readers, no other writers).
# - Waiting writers block new readers, so a steady stream of reads cannot
#   starve a registration.
#
# Usage:
#   lock = ReadWriteLock()
#   with lock.read_locked():
#       ...  # shared access
#   with lock.write_locked():
#       ...  # exclusive access
# =============================================================================

from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import Iterator


class ReadWriteLock:
    """
    Writer-preferring reader-writer lock.

    Not reentrant: a thread holding the write lock must not try to take the
    read lock (or the write lock) again.
    """

    def __init__(self) -> None:
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer = False
        self._writers_waiting = 0

    # -------------------------------------------------------------------------
    # Read side
    # -------------------------------------------------------------------------

    def acquire_read(self) -> None:
        with self._cond:
            while self._writer or self._writers_waiting:
                self._cond.wait()
            self._readers += 1

    def release_read(self) -> None:
        with self._cond:
            if self._readers <= 0:
                raise RuntimeError("release_read() called without a read lock held")
            self._readers -= 1
            if self._readers == 0:
                self._cond.notify_all()

    # -------------------------------------------------------------------------
    # Write side
    # -------------------------------------------------------------------------

    def acquire_write(self) -> None:
        with self._cond:
            self._writers_waiting += 1
            try:
                while self._writer or self._readers:
                    self._cond.wait()
            finally:
                self._writers_waiting -= 1
            self._writer = True

    def release_write(self) -> None:
        with self._cond:
            if not self._writer:
                raise RuntimeError("release_write() called without the write lock held")
            self._writer = False
            self._cond.notify_all()

    # -------------------------------------------------------------------------
    # Context managers
    # -------------------------------------------------------------------------

    @contextmanager
    def read_locked(self) -> Iterator[None]:
        """Hold the lock in shared (read) mode for the duration of the block."""
        self.acquire_read()
        try:
            yield
        finally:
            self.release_read()

    @contextmanager
    def write_locked(self) -> Iterator[None]:
        """Hold the lock in exclusive (write) mode for the duration of the block."""
        self.acquire_write()
        try:
            yield
        finally:
            self.release_write()

    @property
    def readers(self) -> int:
        """Current number of read holders (diagnostics only)."""
        with self._cond:
            return self._readers
