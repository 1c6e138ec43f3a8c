"""Shared utility functions."""

from __future__ import annotations

import logging
import os
import stat
from pathlib import Path

log = logging.getLogger(__name__)

_UNITS = ("B", "KB", "MB", "GB")


def xdg_config_home() -> Path:
    """Return XDG_CONFIG_HOME, defaulting to ~/.config."""
    return Path(os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config"))


def normalize_path(path: os.PathLike[str] | str) -> str:
    """Return *path* as text using ``/`` as the only separator."""
    return os.fspath(path).replace("\\", "/")


def probe_size(path: os.PathLike[str] | str) -> int:
    """Return the byte size of a file or the recursive total of a directory.

    Symbolic links are never followed: a link counts as whatever the
    filesystem reports for the link itself.  Unreadable metadata yields 0.
    """
    try:
        st = os.lstat(path)
    except OSError:
        log.debug("Cannot stat: %s", path)
        return 0

    if stat.S_ISDIR(st.st_mode):
        return dir_size(path)
    return st.st_size


def dir_size(path: Path | str) -> int:
    """Calculate total size of a directory tree.

    Walks with ``os.scandir`` and an explicit stack so arbitrarily deep trees
    never hit the recursion limit.  Directories that cannot be opened and
    entries whose metadata cannot be read contribute nothing.
    """
    total = 0
    stack: list[Path | str] = [path]
    while stack:
        current = stack.pop()
        try:
            with os.scandir(current) as it:
                for entry in it:
                    try:
                        if entry.is_dir(follow_symlinks=False):
                            stack.append(entry.path)
                        else:
                            total += entry.stat(follow_symlinks=False).st_size
                    except OSError:
                        log.debug("Cannot access: %s", entry.path)
        except OSError:
            log.debug("Cannot read directory: %s", current)
    return total


def list_children(root: os.PathLike[str] | str) -> list[str]:
    """Return the immediate children of *root*, or an empty list.

    A missing root, a root that is not a directory and an unreadable root all
    yield no children.
    """
    try:
        with os.scandir(root) as it:
            return [entry.path for entry in it]
    except OSError as e:
        log.debug("Cannot list %s: %s", root, e)
        return []


def bytes_to_human(size_bytes: int) -> str:
    """Convert byte count to a human-readable string, capped at gigabytes."""
    value = float(size_bytes)
    unit = 0
    while value >= 1024 and unit < len(_UNITS) - 1:
        value /= 1024
        unit += 1
    return f"{value:.2f} {_UNITS[unit]}"


def format_elapsed(seconds: float) -> str:
    """Format an elapsed time as a human-readable string."""
    if seconds < 1:
        return f"{seconds * 1000:.0f} ms"
    if seconds < 60:
        return f"{seconds:.1f}s"
    minutes = int(seconds) // 60
    secs = seconds - minutes * 60
    return f"{minutes}m {secs:.0f}s"
