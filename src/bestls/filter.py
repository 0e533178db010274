"""Entry filtering: extension, ``*``-glob and size predicates."""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass

from bestls import BestlsError
from bestls.classifier import Entry
from bestls.sizes import parse_size


class FilterConfigError(BestlsError, ValueError):
    """Filter inputs are individually valid but inconsistent."""


class NameGlob:
    """Name pattern where ``*`` matches any run of characters.

    Every other character matches itself, case-sensitively. The pattern is
    anchored at both ends of the name.
    """

    __slots__ = ("pattern", "_regex")

    def __init__(self, pattern: str) -> None:
        """Compile *pattern*.

        Args:
            pattern: Glob text, e.g. ``*.rs`` or ``test_*``.
        """
        self.pattern = pattern
        literal_parts = (re.escape(part) for part in pattern.split("*"))
        self._regex = re.compile(".*".join(literal_parts), re.DOTALL)

    def matches(self, name: str) -> bool:
        return self._regex.fullmatch(name) is not None

    def __eq__(self, other: object) -> bool:
        return isinstance(other, NameGlob) and other.pattern == self.pattern

    def __hash__(self) -> int:
        return hash(self.pattern)

    def __repr__(self) -> str:
        return f"NameGlob({self.pattern!r})"


def _normalize_extensions(raw: str | Iterable[str] | None) -> frozenset[str]:
    """Split, strip leading dots and lower-case extension input.

    Args:
        raw: Comma-separated string (``"rs,.TXT"``) or iterable of strings.

    Returns:
        frozenset[str]: Normalized extensions, empty when nothing was given.
    """
    if raw is None:
        return frozenset()
    items = raw.split(",") if isinstance(raw, str) else raw
    cleaned = (item.strip().lstrip(".").lower() for item in items)
    return frozenset(ext for ext in cleaned if ext)


@dataclass(frozen=True, slots=True)
class FilterConfig:
    """Immutable, pre-normalized predicate set evaluated once per entry.

    ``FilterConfig()`` matches everything. Directories are exempt from the
    extension and size predicates so they stay visible alongside the files
    they contain; they are tested against ``name_glob`` only when
    ``glob_directories`` is set.

    Attributes:
        extensions: Lower-cased extensions without dots. Empty means no filter.
        name_glob: Optional compiled name pattern.
        min_size: Inclusive lower byte bound.
        max_size: Inclusive upper byte bound.
        glob_directories: Whether ``name_glob`` also applies to directories.
    """

    extensions: frozenset[str] = frozenset()
    name_glob: NameGlob | None = None
    min_size: int | None = None
    max_size: int | None = None
    glob_directories: bool = False

    @classmethod
    def from_raw(
        cls,
        extensions: str | Iterable[str] | None = None,
        name_glob: str | None = None,
        min_size: str | None = None,
        max_size: str | None = None,
        glob_directories: bool = False,
    ) -> FilterConfig:
        """Build a config from CLI-level strings.

        Raises:
            SizeParseError: If a size bound is malformed.
            FilterConfigError: If ``min_size`` exceeds ``max_size``.
        """
        low = parse_size(min_size) if min_size is not None else None
        high = parse_size(max_size) if max_size is not None else None
        if low is not None and high is not None and low > high:
            raise FilterConfigError(
                f"--min-size ({min_size}) is larger than --max-size ({max_size})"
            )
        return cls(
            extensions=_normalize_extensions(extensions),
            name_glob=NameGlob(name_glob) if name_glob else None,
            min_size=low,
            max_size=high,
            glob_directories=glob_directories,
        )

    @property
    def is_noop(self) -> bool:
        return (
            not self.extensions
            and self.name_glob is None
            and self.min_size is None
            and self.max_size is None
        )

    def matches(self, entry: Entry) -> bool:
        """Return whether *entry* satisfies every configured predicate."""
        if entry.is_dir:
            if self.glob_directories and self.name_glob is not None:
                return self.name_glob.matches(entry.name)
            return True

        if self.extensions and entry.extension not in self.extensions:
            return False
        if self.name_glob is not None and not self.name_glob.matches(entry.name):
            return False
        if self.min_size is not None and entry.size_bytes < self.min_size:
            return False
        if self.max_size is not None and entry.size_bytes > self.max_size:
            return False
        return True
