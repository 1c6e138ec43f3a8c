"""Shared, lock-protected collection of scan entries."""

from __future__ import annotations

import logging
import threading

from dirsize.models.entry import Entry

log = logging.getLogger(__name__)


class ResultStore:
    """Ordered collection of :class:`Entry` shared by workers and readers.

    Entries arrive in completion order while a scan runs and are sorted by
    size, largest first, once it finishes.  Every method holds the lock only
    for its own read or write.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._entries: list[Entry] = []

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def clear(self) -> None:
        """Drop every entry."""
        with self._lock:
            self._entries.clear()

    def append(self, entry: Entry) -> None:
        """Add one entry."""
        with self._lock:
            self._entries.append(entry)

    def sort_descending_by_size(self) -> None:
        """Order entries largest first; equal sizes keep insertion order."""
        with self._lock:
            self._entries.sort(key=lambda e: e.size_bytes, reverse=True)

    def snapshot(self) -> tuple[Entry, ...]:
        """Return a consistent copy of the current entries."""
        with self._lock:
            return tuple(self._entries)

    def remove_at(self, index: int, expected_path: str | None = None) -> Entry | None:
        """Remove and return the entry at *index*.

        *index* refers to the position seen in the caller's last
        :meth:`snapshot`.  If *expected_path* is given and the entry now at
        that position differs, the store has changed since that snapshot and
        nothing is removed.

        Returns:
            The removed entry, or None if nothing was removed.
        """
        with self._lock:
            if not 0 <= index < len(self._entries):
                log.debug("Index %d out of range (%d entries)", index, len(self._entries))
                return None
            if expected_path is not None and self._entries[index].path != expected_path:
                log.debug("Entry at %d is no longer %s", index, expected_path)
                return None
            return self._entries.pop(index)
