"""Tracks how many top-level entries of a scan have been sized."""

from __future__ import annotations

import threading


class ProgressTracker:
    """Thread-safe completed/total counter exposed as a percentage.

    Workers call :meth:`record_one` concurrently; readers use
    :attr:`percent` at any time without waiting on background work.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._completed = 0
        self._total = 0
        self._percent = 0

    @property
    def completed(self) -> int:
        """Number of entries recorded since the last reset."""
        with self._lock:
            return self._completed

    @property
    def total(self) -> int:
        """Number of entries expected in the current scan."""
        with self._lock:
            return self._total

    @property
    def percent(self) -> int:
        """Percent of entries done, in [0, 100]."""
        with self._lock:
            return self._percent

    def reset(self, total: int) -> None:
        """Start counting a new population of *total* entries.

        Must be called before any worker records, otherwise an early
        ``record_one`` would be measured against the wrong total.
        """
        if total < 0:
            raise ValueError(f"total must be >= 0, got {total}")
        with self._lock:
            self._completed = 0
            self._total = total
            self._percent = 0

    def record_one(self) -> int:
        """Count one finished entry and return the new percentage."""
        with self._lock:
            self._completed += 1
            if self._total:
                percent = min(100, self._completed * 100 // self._total)
                self._percent = max(self._percent, percent)
            return self._percent

    def force_complete(self) -> None:
        """Report 100 % regardless of rounding in the integer division."""
        with self._lock:
            self._percent = 100
