"""Rounded, colored table output rendered with rich."""

from __future__ import annotations

import io
from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path

from rich import box
from rich.console import Console
from rich.table import Table
from rich.text import Text

from bestls.classifier import Entry
from bestls.formatter.columns import DEFAULT_COLUMNS, Column
from bestls.theme import Theme


@dataclass(frozen=True, slots=True)
class TableOptions:
    """Options for the table formatter.

    Attributes:
        columns: Columns to render, in order.
        theme: Colors for names, columns and the header row.
        color: Whether to emit ANSI styling.
        root_path: Listing root, used to show nested entries relative to it.
        width: Console width the table is laid out for.
    """

    columns: tuple[Column, ...] = DEFAULT_COLUMNS
    theme: Theme = field(default_factory=Theme)
    color: bool = True
    root_path: Path | None = None
    width: int = 200


def _column_style(column: Column, theme: Theme) -> str | None:
    # Name cells layer the per-entry color over this base style.
    return {
        "name": theme.table.name,
        "size": theme.table.size,
        "date": theme.table.date,
    }.get(column.key)


def _cell(column: Column, entry: Entry, opts: TableOptions) -> Text | str:
    value = column.extract(entry, opts.root_path)
    if column.key == "name":
        return Text(value, style=opts.theme.color_for(entry))
    return value


def build_table(entries: Sequence[Entry], options: TableOptions | None = None) -> Table:
    """Build the rich ``Table`` for *entries* without rendering it."""
    opts = options or TableOptions()
    table = Table(box=box.ROUNDED, header_style=f"bold {opts.theme.table.header}")
    for column in opts.columns:
        table.add_column(
            column.header,
            style=_column_style(column, opts.theme),
            justify=column.justify,  # type: ignore[arg-type]
            no_wrap=True,
        )
    for entry in entries:
        table.add_row(*(_cell(column, entry, opts) for column in opts.columns))
    return table


def format_table(entries: Sequence[Entry], options: TableOptions | None = None) -> str:
    """Render entries as a rounded box table.

    Args:
        entries: Entries in display order.
        options: Rendering options. Defaults to ``TableOptions()``.

    Returns:
        str: Table text without a trailing newline.
    """
    opts = options or TableOptions()
    buf = io.StringIO()
    console = Console(
        file=buf,
        width=opts.width,
        force_terminal=opts.color,
        no_color=not opts.color,
        color_system="standard" if opts.color else None,
        highlight=False,
        soft_wrap=False,
    )
    console.print(build_table(entries, opts))
    return buf.getvalue().rstrip("\n")
