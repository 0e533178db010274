"""Entry classification: lstat metadata normalized across platforms."""

from __future__ import annotations

import logging
import os
import stat
import sys
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Callable, Final, Protocol

from bestls.sizes import format_size

logger = logging.getLogger(__name__)

NOT_AVAILABLE: Final[str] = "N/A"

_PERMISSION_BITS: Final[tuple[tuple[int, str], ...]] = (
    (stat.S_IRUSR, "r"),
    (stat.S_IWUSR, "w"),
    (stat.S_IXUSR, "x"),
    (stat.S_IRGRP, "r"),
    (stat.S_IWGRP, "w"),
    (stat.S_IXGRP, "x"),
    (stat.S_IROTH, "r"),
    (stat.S_IWOTH, "w"),
    (stat.S_IXOTH, "x"),
)


class EntryKind(Enum):
    """Filesystem object type. Symlinks are never resolved."""

    FILE = "file"
    DIRECTORY = "directory"
    SYMLINK = "symlink"


@dataclass(frozen=True, slots=True)
class Entry:
    """A single filesystem entry discovered during listing.

    Attributes:
        path: Absolute path of the filesystem entry.
        name: Basename of the entry.
        kind: File, directory or symlink.
        size_bytes: Size reported by lstat, never negative.
        modified_at: Modification time in UTC, ``None`` when unknown.
        permissions: Symbolic permission string or ``"N/A"``.
        owner: Owning account name.
        group: Owning group name.
        depth: Parent directory depth from the listing root.
    """

    path: Path
    name: str
    kind: EntryKind
    size_bytes: int = 0
    modified_at: datetime | None = None
    permissions: str = NOT_AVAILABLE
    owner: str = NOT_AVAILABLE
    group: str = NOT_AVAILABLE
    depth: int = 0

    @property
    def human_size(self) -> str:
        return format_size(self.size_bytes)

    @property
    def extension(self) -> str:
        """Lower-cased text after the final ``.``, or ``""``."""
        _, dot, ext = self.name.rpartition(".")
        return ext.lower() if dot else ""

    @property
    def is_dir(self) -> bool:
        return self.kind is EntryKind.DIRECTORY


class ClassifyError(Exception):
    """Metadata for a path could not be read.

    Recovered by the scanner: the entry is skipped with a warning.
    """

    def __init__(self, path: Path, reason: OSError) -> None:
        super().__init__(f"cannot read metadata: {reason.strerror or reason}")
        self.path = path
        self.reason = reason


class PermissionReader(Protocol):
    """Render permission bits of a stat result."""

    def read(self, st: os.stat_result) -> str: ...


class OwnerResolver(Protocol):
    """Resolve owner and group names of a stat result."""

    def owner(self, st: os.stat_result) -> str: ...

    def group(self, st: os.stat_result) -> str: ...


class PosixPermissionReader:
    """``rwxrwxrwx`` from the nine POSIX permission bits."""

    def read(self, st: os.stat_result) -> str:
        return "".join(
            char if st.st_mode & mask else "-" for mask, char in _PERMISSION_BITS
        )


class WindowsPermissionReader:
    """Windows only exposes the read-only attribute through the write bit."""

    def read(self, st: os.stat_result) -> str:
        return "read-write" if st.st_mode & stat.S_IWRITE else "read-only"


class NullPermissionReader:
    def read(self, st: os.stat_result) -> str:
        return NOT_AVAILABLE


class PosixOwnerResolver:
    """Look up account names with ``pwd``/``grp``.

    Ids without an account (e.g. files from another machine) render as the
    numeric id.
    """

    def owner(self, st: os.stat_result) -> str:
        import pwd

        try:
            return pwd.getpwuid(st.st_uid).pw_name
        except KeyError:
            return str(st.st_uid)

    def group(self, st: os.stat_result) -> str:
        import grp

        try:
            return grp.getgrgid(st.st_gid).gr_name
        except KeyError:
            return str(st.st_gid)


class NullOwnerResolver:
    def owner(self, st: os.stat_result) -> str:
        return NOT_AVAILABLE

    def group(self, st: os.stat_result) -> str:
        return NOT_AVAILABLE


@dataclass(frozen=True, slots=True)
class Capabilities:
    """Platform-specific metadata readers used by :func:`classify`."""

    permissions: PermissionReader = field(default_factory=NullPermissionReader)
    owners: OwnerResolver = field(default_factory=NullOwnerResolver)


def default_capabilities() -> Capabilities:
    """Select the richest readers the running platform supports."""
    if sys.platform == "win32":
        return Capabilities(WindowsPermissionReader(), NullOwnerResolver())
    if os.name == "posix":
        return Capabilities(PosixPermissionReader(), PosixOwnerResolver())
    return Capabilities()


def _kind_of(mode: int) -> EntryKind:
    if stat.S_ISLNK(mode):
        return EntryKind.SYMLINK
    if stat.S_ISDIR(mode):
        return EntryKind.DIRECTORY
    return EntryKind.FILE


def _modified_at(st: os.stat_result) -> datetime | None:
    try:
        return datetime.fromtimestamp(st.st_mtime, tz=timezone.utc)
    except (OverflowError, OSError, ValueError):
        return None


def _owner_field(
    lookup: Callable[[os.stat_result], str], st: os.stat_result, path: Path
) -> str:
    try:
        return lookup(st)
    except OSError as exc:
        logger.debug("Cannot resolve ownership of %s: %s", path, exc)
        return NOT_AVAILABLE


def classify(
    path: Path | str,
    depth: int = 0,
    capabilities: Capabilities | None = None,
) -> Entry:
    """Read metadata for *path* without following symlinks.

    Args:
        path: Filesystem path to classify.
        depth: Depth recorded on the entry.
        capabilities: Permission and ownership readers. Defaults to
            :func:`default_capabilities`.

    Returns:
        Entry: Immutable snapshot of the path's metadata.

    Raises:
        ClassifyError: If the path cannot be stat'ed.
    """
    caps = capabilities or default_capabilities()
    entry_path = Path(path)
    try:
        st = os.lstat(entry_path)
    except OSError as exc:
        raise ClassifyError(entry_path, exc) from exc

    return Entry(
        path=entry_path,
        name=entry_path.name,
        kind=_kind_of(st.st_mode),
        size_bytes=max(st.st_size, 0),
        modified_at=_modified_at(st),
        permissions=caps.permissions.read(st),
        owner=_owner_field(caps.owners.owner, st, entry_path),
        group=_owner_field(caps.owners.group, st, entry_path),
        depth=depth,
    )
