"""
Time-windowed cache of recently approved inputs.

The cache is either disabled or enabled with a window and exactly one reaper
thread. The reaper wakes every half window and drops expired entries. A
repeat sighting never extends an entry's expiry.

Locking:
    _lifecycle  serializes enable/disable transitions
    _lock       reader/writer lock around _recents; shared for membership
                tests, exclusive for insert, purge and clear
"""

import math
import threading
import time
from datetime import timedelta
from typing import Dict, Optional, Union

from sieve.core.exceptions import ConfigurationError
from sieve.adapters.loggers import StructuredLogger
from sieve.utils.rwlock import ReadWriteLock

Duration = Union[int, float, timedelta]

# Upper bound on waiting for a reaper to notice its stop event
REAPER_JOIN_TIMEOUT = 1.0

_NS_PER_SECOND = 1_000_000_000

# The reaper waits half a window per tick; Event.wait rejects timeouts above TIMEOUT_MAX
MAX_WINDOW_SECONDS = 2 * threading.TIMEOUT_MAX


def to_nanoseconds(duration: Duration) -> int:
    """
    Convert seconds or a timedelta to integer nanoseconds.

    Any positive duration maps to at least one nanosecond, so only an exact
    zero reads as "disabled".

    Raises:
        ConfigurationError: If the duration is not a finite, non-negative
                           number of seconds within MAX_WINDOW_SECONDS
    """
    if isinstance(duration, timedelta):
        seconds = duration.total_seconds()
    elif isinstance(duration, (int, float)) and not isinstance(duration, bool):
        try:
            seconds = float(duration)
        except OverflowError as e:
            raise ConfigurationError(f"Duration is too large: {duration!r}") from e
    else:
        raise ConfigurationError(f"Duration must be seconds or a timedelta, got {duration!r}")
    if not math.isfinite(seconds):
        raise ConfigurationError(f"Duration must be finite, got {seconds}")
    if seconds < 0:
        raise ConfigurationError(f"Duration must not be negative, got {seconds}")
    if seconds > MAX_WINDOW_SECONDS:
        raise ConfigurationError(
            f"Duration must not exceed {MAX_WINDOW_SECONDS} seconds, got {seconds}"
        )
    if seconds == 0:
        return 0
    return max(1, int(round(seconds * _NS_PER_SECOND)))


class _Reaper:
    """Background thread purging expired entries until its stop event is set."""

    def __init__(self, cache: "RecentsCache", interval: float):
        self._cache = cache
        self._interval = interval
        self._stop = threading.Event()
        self._thread = threading.Thread(
            target=self._run,
            name="sieve-recents-reaper",
            daemon=True,
        )

    def start(self) -> None:
        self._thread.start()

    def _run(self) -> None:
        # wait() returns True as soon as stop is set, otherwise after one tick
        while not self._stop.wait(self._interval):
            self._cache.purge_expired()

    def stop(self, timeout: Optional[float] = REAPER_JOIN_TIMEOUT) -> bool:
        """Signal the thread and join it. Returns True once it has exited."""
        self._stop.set()
        if self._thread is threading.current_thread():
            return False
        if self._thread.is_alive():
            self._thread.join(timeout)
        return not self._thread.is_alive()

    def is_alive(self) -> bool:
        return self._thread.is_alive()


class _Disabled:
    enabled = False
    window_ns = 0
    reaper = None


class _Enabled:
    enabled = True

    def __init__(self, window_ns: int, reaper: _Reaper):
        self.window_ns = window_ns
        self.reaper = reaper


_DISABLED = _Disabled()


class RecentsCache:
    """
    Thread-safe "seen recently" set with automatic expiry.

    Usage:
        cache = RecentsCache()
        cache.configure(0.5)
        cache.check_and_record("abc")  # True, first sighting
        cache.check_and_record("abc")  # False, duplicate within the window
        cache.disable()
    """

    def __init__(self, logger: Optional[StructuredLogger] = None):
        self.logger = logger or StructuredLogger(name="validator.recents")
        self._recents: Dict[str, int] = {}
        self._lock = ReadWriteLock()
        self._lifecycle = threading.Lock()
        self._state = _DISABLED

    @property
    def enabled(self) -> bool:
        return self._state.enabled

    @property
    def window(self) -> float:
        """Current suppression window in seconds, 0.0 when disabled."""
        return self._state.window_ns / _NS_PER_SECOND

    @property
    def reaper_alive(self) -> bool:
        reaper = self._state.reaper
        return reaper is not None and reaper.is_alive()

    def __len__(self) -> int:
        with self._lock.read_lock():
            return len(self._recents)

    def __contains__(self, input: str) -> bool:
        with self._lock.read_lock():
            return input in self._recents

    def configure(self, duration: Duration) -> None:
        """
        Enable suppression for ``duration`` (seconds or timedelta).

        Reconfiguring an enabled cache stops the running reaper before the
        new one starts; entries already recorded keep their expiry. A zero
        duration disables suppression.

        Raises:
            ConfigurationError: If the duration is negative or not a number
        """
        window_ns = to_nanoseconds(duration)
        if window_ns == 0:
            self.disable()
            return

        with self._lifecycle:
            previous = self._state
            if previous.enabled:
                self._stop_reaper(previous.reaper)

            interval = min(window_ns / _NS_PER_SECOND / 2, threading.TIMEOUT_MAX)
            reaper = _Reaper(self, interval=interval)
            self._state = _Enabled(window_ns, reaper)
            reaper.start()

        self.logger.info({
            "action": "RECENTS_ENABLED",
            "message": "Duplicate suppression enabled",
            "data": {
                "window_seconds": window_ns / _NS_PER_SECOND,
                "restarted": previous.enabled,
            }
        })

    def disable(self) -> None:
        """Stop the reaper and forget every recorded input. Safe to call repeatedly."""
        with self._lifecycle:
            previous = self._state
            self._state = _DISABLED
            if previous.enabled:
                self._stop_reaper(previous.reaper)
            with self._lock.write_lock():
                self._recents.clear()

        if previous.enabled:
            self.logger.info({
                "action": "RECENTS_DISABLED",
                "message": "Duplicate suppression disabled",
                "data": {"window_seconds": previous.window_ns / _NS_PER_SECOND}
            })

    def _stop_reaper(self, reaper: _Reaper) -> None:
        if not reaper.stop():
            self.logger.warning({
                "action": "RECENTS_REAPER_STUCK",
                "message": "Reaper did not exit before the join timeout",
                "data": {"timeout_seconds": REAPER_JOIN_TIMEOUT}
            })

    def check_and_record(self, input: str) -> bool:
        """
        Record ``input`` if it has not been seen within the window.

        Returns:
            bool: True for a fresh input (now recorded), False for a duplicate
                  or when suppression is disabled and nothing was recorded
        """
        state = self._state
        if not state.enabled:
            return True

        with self._lock.read_lock():
            if input in self._recents:
                return False

        with self._lock.write_lock():
            # Another caller may have recorded it between the two locks
            if input in self._recents:
                return False
            # Re-read: a reconfigure may have changed the window, a disable
            # cleared the map and a write now would outlive the clear
            current = self._state
            if not current.enabled:
                return True
            self._recents[input] = time.monotonic_ns() + current.window_ns
        return True

    def purge_expired(self) -> int:
        """Delete entries whose expiry has passed. Returns how many were removed."""
        with self._lock.write_lock():
            now = time.monotonic_ns()
            expired = [text for text, expires in self._recents.items() if now > expires]
            for text in expired:
                del self._recents[text]

        if expired:
            self.logger.debug({
                "action": "RECENTS_PURGED",
                "message": f"Purged {len(expired)} expired entries",
                "data": {"purged": len(expired)}
            })
        return len(expired)
