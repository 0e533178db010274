"""Tests for bestls.sorter."""

from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

from bestls.classifier import Entry, EntryKind
from bestls.sorter import SortKey, sort_entries

_EPOCH = datetime(2024, 1, 1, tzinfo=timezone.utc)


def _entry(name: str, size: int = 0, age_days: int | None = 0) -> Entry:
    modified = None if age_days is None else _EPOCH - timedelta(days=age_days)
    return Entry(
        path=Path("/data") / name,
        name=name,
        kind=EntryKind.FILE,
        size_bytes=size,
        modified_at=modified,
    )


ENTRIES = [
    _entry("delta", size=30, age_days=1),
    _entry("Alpha", size=10, age_days=None),
    _entry("charlie", size=10, age_days=5),
    _entry("bravo", size=20, age_days=1),
    _entry("echo", size=5, age_days=None),
]


def _names(entries: list[Entry]) -> list[str]:
    return [e.name for e in entries]


class TestSortKey:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [("name", SortKey.NAME), ("SIZE", SortKey.SIZE), ("date", SortKey.MODIFIED)],
    )
    def test_parse(self, value: str, expected: SortKey) -> None:
        assert SortKey.parse(value) is expected

    def test_parse_unknown(self) -> None:
        with pytest.raises(ValueError, match="Unknown sort key"):
            SortKey.parse("color")


class TestSortEntries:
    def test_by_name_is_code_point_order(self) -> None:
        assert _names(sort_entries(ENTRIES)) == ["Alpha", "bravo", "charlie", "delta", "echo"]

    def test_by_size_ties_broken_by_name(self) -> None:
        ordered = sort_entries(ENTRIES, SortKey.SIZE)
        assert _names(ordered) == ["echo", "Alpha", "charlie", "bravo", "delta"]

    def test_by_modified_unknown_last(self) -> None:
        ordered = sort_entries(ENTRIES, SortKey.MODIFIED)
        assert _names(ordered) == ["charlie", "bravo", "delta", "Alpha", "echo"]

    def test_descending_keeps_unknown_last(self) -> None:
        ordered = sort_entries(ENTRIES, SortKey.MODIFIED, descending=True)
        assert _names(ordered) == ["delta", "bravo", "charlie", "Alpha", "echo"]

    def test_descending_by_name(self) -> None:
        ordered = sort_entries(ENTRIES, SortKey.NAME, descending=True)
        assert _names(ordered) == ["echo", "delta", "charlie", "bravo", "Alpha"]

    @pytest.mark.parametrize("key", list(SortKey))
    def test_idempotent(self, key: SortKey) -> None:
        once = sort_entries(ENTRIES, key)
        assert sort_entries(once, key) == once

    def test_returns_new_list(self) -> None:
        original = list(ENTRIES)
        sort_entries(ENTRIES, SortKey.SIZE)
        assert ENTRIES == original

    def test_stable_for_equal_keys(self) -> None:
        first = _entry("same", size=1)
        second = Entry(path=Path("/other/same"), name="same", kind=EntryKind.FILE, size_bytes=1)
        assert sort_entries([first, second], SortKey.SIZE) == [first, second]
        assert sort_entries([second, first], SortKey.SIZE) == [second, first]
