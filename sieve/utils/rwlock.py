"""
Reader/writer lock for in-process shared state.

Many readers may hold the lock at once; a writer holds it alone. Waiting
writers block new readers so a steady stream of reads cannot starve them.
"""

import threading
from contextlib import contextmanager


class ReadWriteLock:
    """Writer-preferring reader/writer lock built on a condition variable."""

    def __init__(self):
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer = False
        self._waiting_writers = 0

    def acquire_read(self) -> None:
        with self._cond:
            while self._writer or self._waiting_writers:
                self._cond.wait()
            self._readers += 1

    def release_read(self) -> None:
        with self._cond:
            if self._readers <= 0:
                raise RuntimeError("release_read called without a held read lock")
            self._readers -= 1
            if self._readers == 0:
                self._cond.notify_all()

    def acquire_write(self) -> None:
        with self._cond:
            self._waiting_writers += 1
            try:
                while self._writer or self._readers:
                    self._cond.wait()
            finally:
                self._waiting_writers -= 1
            self._writer = True

    def release_write(self) -> None:
        with self._cond:
            if not self._writer:
                raise RuntimeError("release_write called without a held write lock")
            self._writer = False
            self._cond.notify_all()

    @contextmanager
    def acquire(self, shared: bool = False):
        """
        Hold the lock for the duration of a with-block.

        Args:
            shared: If True, take shared (read) access. If False, exclusive (write) access.
        """
        if shared:
            self.acquire_read()
            try:
                yield self
            finally:
                self.release_read()
        else:
            self.acquire_write()
            try:
                yield self
            finally:
                self.release_write()

    def read_lock(self):
        return self.acquire(shared=True)

    def write_lock(self):
        return self.acquire(shared=False)
