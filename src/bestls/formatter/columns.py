"""Column definitions shared by the table renderer.

A ``Column`` decouples the header from value extraction, so the ``--columns``
option only has to pick and order entries from ``COLUMNS``.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Callable, Final

from bestls.classifier import Entry

UNKNOWN_TIME: Final[str] = "unknown"
TIME_FORMAT: Final[str] = "%a %d %b %Y %H:%M:%S"


@dataclass(frozen=True, slots=True)
class Column:
    """A single table column.

    Attributes:
        key: Name used on the command line (``--columns name,size``).
        header: Header text.
        extract: Callable that takes ``(entry, root)`` and returns the cell
            text. ``root`` is the listing root, used for relative names.
        justify: Cell alignment.
    """

    key: str
    header: str
    extract: Callable[[Entry, Path | None], str]
    justify: str = "left"


def display_name(entry: Entry, root: Path | None) -> str:
    """Return the name, or the root-relative path for nested entries."""
    if root is None or entry.depth == 0:
        return entry.name
    try:
        return entry.path.relative_to(root).as_posix()
    except ValueError:
        return str(entry.path)


def format_modified(modified_at: datetime | None) -> str:
    if modified_at is None:
        return UNKNOWN_TIME
    return modified_at.strftime(TIME_FORMAT)


COLUMNS: Final[dict[str, Column]] = {
    "name": Column("name", "Name", display_name),
    "type": Column("type", "Type", lambda e, _: e.kind.value.capitalize()),
    "size": Column("size", "Size", lambda e, _: e.human_size, justify="right"),
    "date": Column("date", "Modified", lambda e, _: format_modified(e.modified_at)),
    "permissions": Column("permissions", "Permissions", lambda e, _: e.permissions),
    "owner": Column("owner", "Owner", lambda e, _: e.owner),
    "group": Column("group", "Group", lambda e, _: e.group),
}

DEFAULT_COLUMNS: Final[tuple[Column, ...]] = tuple(COLUMNS.values())


def parse_columns(value: str | None) -> tuple[Column, ...]:
    """Resolve a comma-separated column list.

    Args:
        value: e.g. ``"name,size,date"``. ``None`` selects every column.

    Returns:
        tuple[Column, ...]: Selected columns in the requested order,
        duplicates dropped.

    Raises:
        ValueError: On an unknown key or an empty selection.
    """
    if value is None:
        return DEFAULT_COLUMNS

    selected: list[Column] = []
    for raw in value.split(","):
        key = raw.strip().lower()
        if not key:
            continue
        if key not in COLUMNS:
            known = ",".join(COLUMNS)
            raise ValueError(f"Unknown column '{key}'. Known columns: {known}")
        if COLUMNS[key] not in selected:
            selected.append(COLUMNS[key])
    if not selected:
        raise ValueError("No columns selected")
    return tuple(selected)
