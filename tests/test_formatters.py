"""Tests for table, compact and JSON formatters."""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path

import pytest

from bestls.classifier import Entry, EntryKind
from bestls.formatter.columns import COLUMNS, DEFAULT_COLUMNS, display_name, parse_columns
from bestls.formatter.compact import format_compact
from bestls.formatter.json_ import entry_to_dict, format_json
from bestls.formatter.table import TableOptions, format_table
from bestls.theme import Theme, TableColors

ROOT = Path("/data")
MODIFIED = datetime(2024, 3, 5, 14, 30, 0, tzinfo=timezone.utc)


def _entries() -> list[Entry]:
    return [
        Entry(
            path=ROOT / "b.rs",
            name="b.rs",
            kind=EntryKind.FILE,
            size_bytes=2048,
            modified_at=MODIFIED,
            permissions="rw-r--r--",
            owner="alice",
            group="staff",
        ),
        Entry(
            path=ROOT / "src",
            name="src",
            kind=EntryKind.DIRECTORY,
            size_bytes=4096,
            modified_at=None,
        ),
        Entry(
            path=ROOT / "src" / "main.rs",
            name="main.rs",
            kind=EntryKind.FILE,
            size_bytes=4,
            modified_at=MODIFIED,
            depth=1,
        ),
    ]


class TestColumns:
    def test_default_is_every_column(self) -> None:
        assert parse_columns(None) == DEFAULT_COLUMNS
        assert [c.key for c in DEFAULT_COLUMNS] == list(COLUMNS)

    def test_selection_order_and_duplicates(self) -> None:
        columns = parse_columns("size, NAME,size")
        assert [c.key for c in columns] == ["size", "name"]

    @pytest.mark.parametrize(("value", "match"), [("name,colour", "Unknown column"), (" , ", "No columns")])
    def test_invalid_selection(self, value: str, match: str) -> None:
        with pytest.raises(ValueError, match=match):
            parse_columns(value)

    def test_display_name_relative_for_nested(self) -> None:
        nested = _entries()[2]
        assert display_name(nested, ROOT) == "src/main.rs"
        assert display_name(nested, None) == "main.rs"


class TestFormatTable:
    def test_plain_table_contents(self) -> None:
        output = format_table(_entries(), TableOptions(color=False, root_path=ROOT))
        lines = output.splitlines()
        assert lines[0].startswith("╭")
        assert lines[-1].startswith("╰")
        for header in ("Name", "Type", "Size", "Modified", "Permissions", "Owner", "Group"):
            assert header in lines[1]
        assert "2.0 KB" in output
        assert "Tue 05 Mar 2024 14:30:00" in output
        assert "unknown" in output
        assert "src/main.rs" in output
        assert "\x1b[" not in output

    def test_selected_columns_only(self) -> None:
        options = TableOptions(columns=parse_columns("name,size"), color=False)
        output = format_table(_entries(), options)
        assert "Name" in output
        assert "Size" in output
        assert "Owner" not in output
        assert "alice" not in output

    def test_color_output_uses_ansi(self) -> None:
        output = format_table(_entries(), TableOptions(color=True))
        assert "\x1b[" in output

    def test_theme_header_color_applied(self) -> None:
        plain_theme = Theme(table=TableColors(header="red"))
        red = format_table(_entries(), TableOptions(theme=plain_theme))
        green = format_table(_entries(), TableOptions())
        assert red != green

    def test_theme_name_style_is_base_of_name_column(self) -> None:
        underlined = Theme(table=TableColors(name="underline"))
        styled = format_table(_entries(), TableOptions(theme=underlined))
        default = format_table(_entries(), TableOptions())
        assert styled != default
        assert "b.rs" in styled

    def test_empty_table_has_header(self) -> None:
        output = format_table([], TableOptions(color=False))
        assert "Name" in output


class TestFormatCompact:
    def test_one_name_per_line(self) -> None:
        assert format_compact(_entries(), ROOT).splitlines() == ["b.rs", "src/", "src/main.rs"]

    def test_empty(self) -> None:
        assert format_compact([]) == ""


class TestFormatJson:
    def test_full_field_set(self) -> None:
        record = entry_to_dict(_entries()[0])
        assert record == {
            "name": "b.rs",
            "path": str(ROOT / "b.rs"),
            "kind": "file",
            "size_bytes": 2048,
            "human_size": "2.0 KB",
            "modified_at": "2024-03-05T14:30:00+00:00",
            "permissions": "rw-r--r--",
            "owner": "alice",
            "group": "staff",
            "depth": 0,
        }

    def test_unknown_time(self) -> None:
        assert entry_to_dict(_entries()[1])["modified_at"] == "unknown"

    def test_compact_vs_pretty(self) -> None:
        compact = format_json(_entries())
        pretty = format_json(_entries(), pretty=True)
        assert "\n" not in compact
        assert "\n  {" in pretty
        assert json.loads(compact) == json.loads(pretty)

    def test_empty_list(self) -> None:
        assert format_json([]) == "[]"
