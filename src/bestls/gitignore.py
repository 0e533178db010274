"""Gitignore integration — hide ignored entries from listings via pathspec."""

from __future__ import annotations

import logging
from pathlib import Path

from pathspec import GitIgnoreSpec

logger = logging.getLogger(__name__)


def load_gitignore_spec(root: Path) -> GitIgnoreSpec | None:
    """Load .gitignore patterns from *root* directory.

    Args:
        root: Directory containing the ``.gitignore`` file.

    Returns:
        A compiled spec when a ``.gitignore`` exists and is readable,
        otherwise ``None``.
    """
    gitignore_path = root / ".gitignore"
    try:
        lines = gitignore_path.read_text(encoding="utf-8").splitlines()
    except OSError:
        logger.debug("Cannot read .gitignore: %s", gitignore_path)
        return None
    return GitIgnoreSpec.from_lines(lines)


def is_ignored(spec: GitIgnoreSpec, root: Path, path: Path, is_dir: bool) -> bool:
    """Return whether *path* under *root* is ignored by *spec*.

    Directories are matched with a trailing ``/`` so that patterns such as
    ``node_modules/`` apply to them.
    """
    relative = path.relative_to(root).as_posix()
    if is_dir:
        relative += "/"
    return spec.match_file(relative)
