"""Scan entry dataclass."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Entry:
    """One immediate child of the scanned root with its aggregated size.

    ``path`` always uses ``/`` as separator so it renders the same on every
    platform.
    """

    path: str
    size_bytes: int
