"""Listing pipeline: request → filters → traversal → sorted entries."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path

from bestls.classifier import Capabilities, Entry
from bestls.filter import FilterConfig
from bestls.scanner import ScanOptions, ScanReport, ScanWarning, iter_entries
from bestls.sorter import SortKey, sort_entries


@dataclass(frozen=True, slots=True)
class ListRequest:
    """Everything the listing core needs from the CLI.

    Attributes:
        root: Directory to list.
        recursive: Whether to descend into subdirectories.
        max_depth: Depth bound for recursive listings, ``None`` for unlimited.
        extensions: Comma-separated string or sequence of extensions.
        name_glob: ``*``-only name pattern.
        min_size: Inclusive lower size bound, e.g. ``"1KB"``.
        max_size: Inclusive upper size bound.
        show_hidden: Whether to include dot entries.
        sort_key: Output ordering.
        descending: Whether to reverse the ordering.
        gitignore: Whether to hide entries matched by the root ``.gitignore``.
        workers: Thread count for metadata reads.
    """

    root: Path = Path(".")
    recursive: bool = False
    max_depth: int | None = None
    extensions: str | Sequence[str] | None = None
    name_glob: str | None = None
    min_size: str | None = None
    max_size: str | None = None
    show_hidden: bool = False
    sort_key: SortKey = SortKey.NAME
    descending: bool = False
    gitignore: bool = False
    workers: int | None = None


@dataclass(frozen=True, slots=True)
class ListResult:
    """Sorted entries plus the warnings met while collecting them."""

    entries: list[Entry] = field(default_factory=list)
    warnings: list[ScanWarning] = field(default_factory=list)


def list_entries(
    request: ListRequest,
    capabilities: Capabilities | None = None,
) -> ListResult:
    """Run a full listing for *request*.

    Filter inputs are parsed before the filesystem is touched, so a bad size
    string fails fast.

    Raises:
        SizeParseError: If a size bound is malformed.
        FilterConfigError: If the size bounds are inconsistent.
        BestlsError: If the root cannot be listed.
    """
    filters = FilterConfig.from_raw(
        extensions=request.extensions,
        name_glob=request.name_glob,
        min_size=request.min_size,
        max_size=request.max_size,
    )
    options = ScanOptions(
        recursive=request.recursive,
        max_depth=request.max_depth,
        show_hidden=request.show_hidden,
        gitignore=request.gitignore,
        workers=request.workers,
    )
    report = ScanReport()
    collected = iter_entries(request.root, options, filters, report, capabilities)
    entries = sort_entries(collected, request.sort_key, request.descending)
    return ListResult(entries=entries, warnings=list(report.warnings))
