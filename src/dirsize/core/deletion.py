"""Moves scanned entries to the trash in the background."""

from __future__ import annotations

import logging
import os
from concurrent.futures import Future, ThreadPoolExecutor

from send2trash import send2trash

from dirsize.core.store import ResultStore

log = logging.getLogger(__name__)


class DeletionService:
    """Fire-and-forget move-to-trash, independent of any scan.

    Every :meth:`delete` call is attempted exactly once on a dedicated
    worker thread.  The returned future only tells the caller whether the
    move happened; a failure is logged and never written back into a
    :class:`ResultStore`.  Callers that removed the entry from their view
    beforehand keep it removed even when the move fails.
    """

    def __init__(self) -> None:
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="dirsize-trash")

    def delete(self, path: os.PathLike[str] | str) -> Future[bool]:
        """Submit *path* for a move to the trash.

        Returns:
            Future resolving to True when the move completed, False when it
            failed.  Submission alone does not mean the path is gone.
        """
        return self._executor.submit(self._trash, os.fspath(path))

    def remove_and_trash(
        self,
        store: ResultStore,
        index: int,
        expected_path: str | None = None,
    ) -> Future[bool] | None:
        """Remove the entry at *index* from *store*, then trash its path.

        The store is updated before the move is submitted, so the next
        snapshot no longer lists the entry even while the move is pending.

        Returns:
            The deletion future, or None if no entry was removed.
        """
        entry = store.remove_at(index, expected_path=expected_path)
        if entry is None:
            return None
        return self.delete(entry.path)

    def shutdown(self, wait: bool = True) -> None:
        """Stop accepting deletions, optionally waiting for pending ones."""
        self._executor.shutdown(wait=wait)

    @staticmethod
    def _trash(path: str) -> bool:
        try:
            send2trash(path)
        except OSError as e:
            log.warning("Could not move %s to trash: %s", path, e)
            return False
        log.info("Moved to trash: %s", path)
        return True
