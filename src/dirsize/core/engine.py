"""Directory size scanning orchestration engine."""

from __future__ import annotations

import logging
import os
import threading
import time
from concurrent.futures import ThreadPoolExecutor
from typing import Callable

from dirsize.core.progress import ProgressTracker
from dirsize.core.store import ResultStore
from dirsize.models.entry import Entry
from dirsize.utils import list_children, normalize_path, probe_size

log = logging.getLogger(__name__)

ProgressCallback = Callable[[int], None]  # (percent)
CompleteCallback = Callable[[int], None]  # (entry_count)

DEFAULT_GRACE_DELAY = 0.5


def _worker_count(value: object) -> int:
    """Return *value* as a pool size of at least 1, else the CPU count."""
    default = os.cpu_count() or 1
    if value is None:
        return default
    try:
        count = int(value)  # type: ignore[call-overload]
    except (TypeError, ValueError):
        log.warning("Ignoring invalid worker count %r", value)
        return default
    if count < 1:
        log.warning("Ignoring worker count %d, must be at least 1", count)
        return default
    return count


def _delay(value: object) -> float:
    """Return *value* as a non-negative number of seconds."""
    try:
        delay = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        log.warning("Ignoring invalid grace delay %r", value)
        return DEFAULT_GRACE_DELAY
    return max(0.0, delay)


class ScanEngine:
    """Sizes every immediate child of a root directory in parallel.

    The engine owns one :class:`ResultStore` and one :class:`ProgressTracker`
    which readers may poll at any time.  Only one scan runs at a time; a scan
    requested while another is active is refused, never queued.
    """

    def __init__(
        self,
        store: ResultStore | None = None,
        progress: ProgressTracker | None = None,
        max_workers: int | None = None,
        grace_delay: float = DEFAULT_GRACE_DELAY,
        on_progress: ProgressCallback | None = None,
        on_complete: CompleteCallback | None = None,
    ) -> None:
        self.store = store if store is not None else ResultStore()
        self.progress = progress if progress is not None else ProgressTracker()
        self.max_workers = _worker_count(max_workers)
        self.grace_delay = _delay(grace_delay)
        self.on_progress = on_progress
        self.on_complete = on_complete
        self.last_root: str | None = None
        self.last_elapsed: float | None = None

        self._flag_lock = threading.Lock()
        self._scanning = False
        self._idle = threading.Event()
        self._idle.set()

    @property
    def scanning(self) -> bool:
        """Whether a scan is in progress."""
        with self._flag_lock:
            return self._scanning

    def scan(self, root: os.PathLike[str] | str) -> bool:
        """Start scanning *root* in the background.

        Returns immediately.  The store is cleared and progress reset to 0
        before this returns, so readers never see results of the previous
        scan mixed with the new one.

        Returns:
            True if the scan started, False if another scan is still running.
        """
        with self._flag_lock:
            if self._scanning:
                log.info("Scan of %s refused: another scan is in progress", root)
                return False
            self._scanning = True
            self._idle.clear()

        self.store.clear()
        self.progress.reset(0)

        thread = threading.Thread(
            target=self._run,
            args=(os.fspath(root),),
            name="dirsize-scan",
            daemon=True,
        )
        thread.start()
        return True

    def scan_sync(self, root: os.PathLike[str] | str) -> bool:
        """Scan *root* and block until the scan has finished."""
        if not self.scan(root):
            return False
        self.wait()
        return True

    def wait(self, timeout: float | None = None) -> bool:
        """Block until no scan is running. Returns False on timeout."""
        return self._idle.wait(timeout)

    def _run(self, root: str) -> None:
        """Coordinator: fan out one probe per child and finish the scan."""
        start = time.monotonic()
        try:
            children = list_children(root)
            self.progress.reset(len(children))
            log.info("Scanning %d entries in %s with %d workers", len(children), root, self.max_workers)

            if children:
                workers = min(self.max_workers, len(children))
                with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="dirsize-probe") as executor:
                    futures = [executor.submit(self._probe_child, child) for child in children]
                    for future in futures:
                        future.result()
        except Exception:
            log.exception("Scan of %s stopped early", root)

        try:
            self.store.sort_descending_by_size()
            self.last_root = normalize_path(root)
            self.last_elapsed = time.monotonic() - start
            count = len(self.store)
            log.info("Scan of %s finished: %d entries", root, count)
            self.progress.force_complete()
            self._notify(100)
            if self.on_complete is not None:
                try:
                    self.on_complete(count)
                except Exception:
                    log.exception("Completion callback failed")

            if self.grace_delay > 0:
                time.sleep(self.grace_delay)
        finally:
            self.progress.force_complete()
            with self._flag_lock:
                self._scanning = False
            self._idle.set()

    def _probe_child(self, child: str) -> None:
        """Size one child, then record it in the store and the tracker."""
        try:
            size = probe_size(child)
        except Exception:
            log.exception("Failed to size %s", child)
            size = 0

        self.store.append(Entry(path=normalize_path(child), size_bytes=size))
        self._notify(self.progress.record_one())

    def _notify(self, percent: int) -> None:
        if self.on_progress is None:
            return
        try:
            self.on_progress(percent)
        except Exception:
            log.exception("Progress callback failed")
