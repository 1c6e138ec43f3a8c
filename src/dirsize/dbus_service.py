"""D-Bus service exposing the scan engine to a GUI.

D-Bus methods use PascalCase per D-Bus convention, and type signatures
like "s" and "u" are D-Bus protocol types, not Python syntax.

The GUI polls ``GetProgress``/``GetEntries`` or listens to the signals.
Signals are emitted on the event loop thread; scan workers hand progress
over with ``call_soon_threadsafe``.
"""

from __future__ import annotations

import asyncio
import json
import logging

from dbus_next.aio import MessageBus
from dbus_next.service import ServiceInterface, method, signal
from dbus_next import BusType

from dirsize.core.deletion import DeletionService
from dirsize.core.engine import ScanEngine
from dirsize.settings import Settings
from dirsize.utils import bytes_to_human, normalize_path

log = logging.getLogger(__name__)

_BUS_NAME = "io.github.dirsize"
_OBJECT_PATH = "/io/github/dirsize"
_INTERFACE = "io.github.dirsize.Analyzer"


# noinspection PyPep8Naming
class DirSizeDBusService(ServiceInterface):
    """D-Bus service interface for dirsize."""

    def __init__(self, loop: asyncio.AbstractEventLoop, settings: Settings | None = None) -> None:
        super().__init__(_INTERFACE)
        settings = settings or Settings.instance()
        self._loop = loop
        self._settings = settings
        self._engine = ScanEngine(
            max_workers=settings.get("scan.max_workers"),
            grace_delay=settings.get("scan.grace_delay", 0.5),
            on_progress=self._on_progress,
            on_complete=self._on_complete,
        )
        self._deleter = DeletionService()

    @method()
    def StartScan(self, root: "s") -> "b":  # type: ignore[override]
        """Start scanning root in the background. False if a scan is running."""
        started = self._engine.scan(root)
        if started:
            self._settings.set("paths.last_root", normalize_path(root))
        return started

    @method()
    def IsScanning(self) -> "b":  # type: ignore[override]
        return self._engine.scanning

    @method()
    def GetProgress(self) -> "u":  # type: ignore[override]
        return self._engine.progress.percent

    @method()
    def GetEntries(self) -> "s":  # type: ignore[override]
        """Current entries as JSON, largest first once the scan is done."""
        data = [
            {"path": e.path, "size_bytes": e.size_bytes, "size": bytes_to_human(e.size_bytes)}
            for e in self._engine.store.snapshot()
        ]
        return json.dumps(data)

    @method()
    def Delete(self, index: "u", path: "s") -> "b":  # type: ignore[override]
        """Drop the entry the GUI showed at index and move it to the trash.

        Returns True once the entry left the result list; the move itself
        finishes later and its failure is only logged.
        """
        future = self._deleter.remove_and_trash(self._engine.store, index, expected_path=path)
        return future is not None

    @signal()
    def ScanProgress(self, percent: int) -> "u":  # type: ignore[override]
        return percent

    @signal()
    def ScanFinished(self, entry_count: int) -> "u":  # type: ignore[override]
        return entry_count

    def _on_progress(self, percent: int) -> None:
        """Called from scan threads; forward to the loop thread."""
        self._loop.call_soon_threadsafe(self.ScanProgress, percent)

    def _on_complete(self, entry_count: int) -> None:
        self._loop.call_soon_threadsafe(self.ScanFinished, entry_count)


async def run_service() -> None:
    """Start the D-Bus service."""
    bus = await MessageBus(bus_type=BusType.SESSION).connect()
    service = DirSizeDBusService(asyncio.get_running_loop())
    bus.export(_OBJECT_PATH, service)
    await bus.request_name(_BUS_NAME)
    log.info("D-Bus service started on %s", _BUS_NAME)
    await bus.wait_for_disconnect()


def start_service() -> None:
    """Entry point to start the D-Bus service."""
    asyncio.run(run_service())
