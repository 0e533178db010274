"""Directory traversal using os.scandir with an explicit stack (DFS).

Output order is deterministic: the children of a directory are sorted by
name and emitted as one block, then each child directory is visited in name
order, depth-first. Metadata for the children of one directory is gathered
in parallel and written into index slots, so the thread pool never changes
the order.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterator
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path

from pathspec import GitIgnoreSpec

from bestls import BestlsError
from bestls.classifier import Capabilities, ClassifyError, Entry, classify, default_capabilities
from bestls.filter import FilterConfig
from bestls.gitignore import is_ignored, load_gitignore_spec

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ScanOptions:
    """Options controlling traversal.

    Attributes:
        recursive: Whether to descend into subdirectories.
        max_depth: Deepest directory depth to descend from when recursive.
            ``0`` lists only the root's children. ``None`` means unlimited.
        show_hidden: Whether to include entries whose name starts with ``.``.
        gitignore: Whether to hide entries matched by the root ``.gitignore``.
        workers: Thread count for metadata reads. ``None`` uses the CPU count.
    """

    recursive: bool = False
    max_depth: int | None = None
    show_hidden: bool = False
    gitignore: bool = False
    workers: int | None = None

    def __post_init__(self) -> None:
        if self.max_depth is not None and self.max_depth < 0:
            raise ValueError("max_depth must be non-negative")
        if self.workers is not None and self.workers < 1:
            raise ValueError("workers must be a positive integer")

    @property
    def depth_limit(self) -> int | None:
        """Deepest directory depth whose children are still read."""
        return self.max_depth if self.recursive else 0


@dataclass(frozen=True, slots=True)
class ScanWarning:
    """A recoverable problem met during traversal."""

    path: Path
    message: str

    def __str__(self) -> str:
        return f"{self.path}: {self.message}"


@dataclass(slots=True)
class ScanReport:
    """Collects warnings for entries and subtrees that were skipped."""

    warnings: list[ScanWarning] = field(default_factory=list)

    def warn(self, path: Path, message: str) -> None:
        logger.warning("%s: %s", path, message)
        self.warnings.append(ScanWarning(path, message))


def _resolve_root(root: Path | str) -> Path:
    """Resolve *root* and check that it is a directory.

    Raises:
        BestlsError: If the path does not exist or is not a directory.
    """
    resolved = Path(root).resolve()
    if not resolved.is_dir():
        raise BestlsError(f"'{root}' is not a directory")
    return resolved


def _read_directory(
    directory: Path,
    root: Path,
    options: ScanOptions,
    ignore_spec: GitIgnoreSpec | None,
) -> list[Path]:
    """Return visible child paths of *directory* sorted by name.

    Raises:
        OSError: If the directory cannot be opened or read.
    """
    with os.scandir(directory) as it:
        raw_entries = sorted(it, key=lambda e: e.name)

    paths: list[Path] = []
    for dir_entry in raw_entries:
        if not options.show_hidden and dir_entry.name.startswith("."):
            continue
        path = Path(dir_entry.path)
        if ignore_spec is not None:
            try:
                is_dir = dir_entry.is_dir(follow_symlinks=False)
            except OSError:
                logger.debug("Cannot stat: %s", dir_entry.path)
                is_dir = False
            if is_ignored(ignore_spec, root, path, is_dir):
                continue
        paths.append(path)
    return paths


def _classify_all(
    paths: list[Path],
    depth: int,
    capabilities: Capabilities,
    executor: ThreadPoolExecutor | None,
) -> list[Entry | ClassifyError]:
    """Classify *paths* into a slot list aligned with the input order."""
    slots: list[Entry | ClassifyError | None] = [None] * len(paths)

    def fill(index: int) -> None:
        try:
            slots[index] = classify(paths[index], depth, capabilities)
        except ClassifyError as exc:
            slots[index] = exc

    if executor is None or len(paths) < 2:
        for index in range(len(paths)):
            fill(index)
    else:
        futures = [executor.submit(fill, index) for index in range(len(paths))]
        for future in futures:
            future.result()

    return [slot for slot in slots if slot is not None]


def _walk(
    root: Path,
    options: ScanOptions,
    entry_filter: FilterConfig,
    report: ScanReport,
    capabilities: Capabilities,
) -> Iterator[Entry]:
    ignore_spec = load_gitignore_spec(root) if options.gitignore else None
    limit = options.depth_limit
    match_all = entry_filter.is_noop
    workers = options.workers or os.cpu_count() or 1
    executor = (
        ThreadPoolExecutor(max_workers=workers, thread_name_prefix="bestls")
        if workers > 1
        else None
    )

    # Stack items: (directory_path, depth of its children)
    stack: list[tuple[Path, int]] = [(root, 0)]
    try:
        while stack:
            current_dir, depth = stack.pop()

            try:
                paths = _read_directory(current_dir, root, options, ignore_spec)
            except OSError as exc:
                reason = exc.strerror or str(exc)
                if current_dir == root:
                    raise BestlsError(f"cannot read '{root}': {reason}") from exc
                report.warn(current_dir, f"cannot read directory: {reason}")
                continue

            child_dirs: list[tuple[Path, int]] = []
            for result in _classify_all(paths, depth, capabilities, executor):
                if isinstance(result, ClassifyError):
                    report.warn(result.path, str(result))
                    continue

                if match_all or entry_filter.matches(result):
                    yield result

                # Filters gate output only; matching never prunes traversal.
                if result.is_dir and (limit is None or depth < limit):
                    child_dirs.append((result.path, depth + 1))

            # Push children in reverse so first-alphabetical is popped first
            stack.extend(reversed(child_dirs))
    finally:
        if executor is not None:
            executor.shutdown(wait=True)


def iter_entries(
    root: Path | str,
    options: ScanOptions | None = None,
    filters: FilterConfig | None = None,
    report: ScanReport | None = None,
    capabilities: Capabilities | None = None,
) -> Iterator[Entry]:
    """Lazily yield filtered entries under *root*.

    The root is validated immediately; traversal starts on first iteration.
    Re-invoke to list again, there is no resumable cursor.

    Args:
        root: Directory to list.
        options: Traversal options. Defaults to ``ScanOptions()``.
        filters: Output predicate. Defaults to the match-all ``FilterConfig()``.
        report: Receives warnings for skipped entries and subtrees.
        capabilities: Permission and ownership readers.

    Returns:
        Iterator[Entry]: Entries in traversal order.

    Raises:
        BestlsError: If the root is missing, not a directory or unreadable.
    """
    return _walk(
        _resolve_root(root),
        options or ScanOptions(),
        filters or FilterConfig(),
        report if report is not None else ScanReport(),
        capabilities or default_capabilities(),
    )


def scan(
    root: Path | str,
    options: ScanOptions | None = None,
    filters: FilterConfig | None = None,
    report: ScanReport | None = None,
    capabilities: Capabilities | None = None,
) -> list[Entry]:
    """Scan *root* and return entries in deterministic traversal order.

    See :func:`iter_entries` for arguments.
    """
    return list(iter_entries(root, options, filters, report, capabilities))
