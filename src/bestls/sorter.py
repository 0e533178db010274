"""Ordering of listed entries by name, size or modification time."""

from __future__ import annotations

from collections.abc import Iterable
from enum import Enum

from bestls.classifier import Entry


class SortKey(Enum):
    """Attribute to order entries by."""

    NAME = "name"
    SIZE = "size"
    MODIFIED = "date"

    @classmethod
    def parse(cls, value: str) -> SortKey:
        """Look up a key by its CLI value (``name``, ``size`` or ``date``).

        Raises:
            ValueError: If *value* is not a known key.
        """
        normalized = value.strip().lower()
        for key in cls:
            if key.value == normalized:
                return key
        known = ", ".join(key.value for key in cls)
        raise ValueError(f"Unknown sort key '{value}'. Known keys: {known}")


def sort_entries(
    entries: Iterable[Entry],
    key: SortKey = SortKey.NAME,
    descending: bool = False,
) -> list[Entry]:
    """Return *entries* ordered by *key*.

    Names compare by code point. Size and time ties fall back to name.
    Entries with an unknown modification time always sort last, in either
    direction. The sort is stable, so it is idempotent.

    Args:
        entries: Entries to order.
        key: Attribute to sort by.
        descending: Reverse the order of known values.

    Returns:
        list[Entry]: A new sorted list.
    """
    if key is SortKey.NAME:
        return sorted(entries, key=lambda e: e.name, reverse=descending)
    if key is SortKey.SIZE:
        return sorted(entries, key=lambda e: (e.size_bytes, e.name), reverse=descending)

    known: list[Entry] = []
    unknown: list[Entry] = []
    for entry in entries:
        (unknown if entry.modified_at is None else known).append(entry)
    known.sort(key=lambda e: (e.modified_at, e.name), reverse=descending)
    unknown.sort(key=lambda e: e.name)
    return known + unknown
