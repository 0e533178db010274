"""Single-column output: one name per line."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

from bestls.classifier import Entry
from bestls.formatter.columns import display_name


def format_compact(entries: Sequence[Entry], root_path: Path | None = None) -> str:
    """Render entry names one per line, directories with a trailing ``/``.

    Args:
        entries: Entries in display order.
        root_path: Listing root; nested entries are shown relative to it.

    Returns:
        str: Newline-joined names (no trailing newline).
    """
    lines: list[str] = []
    for entry in entries:
        name = display_name(entry, root_path)
        lines.append(name + "/" if entry.is_dir else name)
    return "\n".join(lines)
