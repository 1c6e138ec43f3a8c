"""dirsize data models."""

from dirsize.models.entry import Entry

__all__ = [
    "Entry",
]
