"""Color theme loaded from ``config.toml`` in the user config directory.

Example file::

    [colors.file_types]
    file = "bright_cyan"
    directory = "bright_blue"
    symlink = "bright_magenta"

    [colors.extensions]
    rs = "yellow"

    [colors.table]
    header = "bright_green"

Colors are rich color names or style definitions such as ``"bold red"``.
Values rich cannot parse as a style are logged and ignored, and a
missing or malformed file falls back to the default theme.
"""

from __future__ import annotations

import logging
import os
import tomllib
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Final

from platformdirs import user_config_dir
from rich.errors import StyleSyntaxError
from rich.style import Style

from bestls.classifier import Entry, EntryKind

logger = logging.getLogger(__name__)

APP_NAME: Final[str] = "bestls"
CONFIG_FILENAME: Final[str] = "config.toml"
CONFIG_ENV_VAR: Final[str] = "BESTLS_CONFIG"

DEFAULT_EXTENSION_COLORS: Final[dict[str, str]] = {
    # source
    "rs": "yellow",
    "py": "blue",
    "js": "yellow",
    "ts": "blue",
    "go": "bright_cyan",
    "c": "bright_blue",
    "cpp": "bright_blue",
    "java": "red",
    # documents
    "md": "cyan",
    "txt": "white",
    "pdf": "red",
    # configuration
    "toml": "red",
    "json": "green",
    "yaml": "magenta",
    "yml": "magenta",
    "xml": "yellow",
    # archives
    "zip": "red",
    "tar": "red",
    "gz": "red",
    # images
    "png": "magenta",
    "jpg": "magenta",
    "jpeg": "magenta",
    "gif": "magenta",
    "svg": "yellow",
}

SAMPLE_CONFIG: Final[str] = """\
# bestls color theme. Colors are names such as "red" or "bright_cyan".

[colors.file_types]
file = "bright_cyan"
directory = "bright_blue"
symlink = "bright_magenta"

[colors.extensions]
rs = "yellow"
py = "blue"
md = "cyan"
json = "green"

[colors.table]
name = "bright_cyan"
size = "bright_magenta"
date = "bright_yellow"
header = "bright_green"
"""


@dataclass(frozen=True, slots=True)
class FileTypeColors:
    file: str = "bright_cyan"
    directory: str = "bright_blue"
    symlink: str = "bright_magenta"


@dataclass(frozen=True, slots=True)
class TableColors:
    name: str = "bright_cyan"
    size: str = "bright_magenta"
    date: str = "bright_yellow"
    header: str = "bright_green"


@dataclass(frozen=True, slots=True)
class Theme:
    """Colors for table rendering.

    Attributes:
        file_types: Name color per entry kind.
        extensions: Name color per lower-cased file extension.
        table: Column and header colors.
    """

    file_types: FileTypeColors = field(default_factory=FileTypeColors)
    extensions: dict[str, str] = field(
        default_factory=lambda: dict(DEFAULT_EXTENSION_COLORS)
    )
    table: TableColors = field(default_factory=TableColors)

    def color_for(self, entry: Entry) -> str:
        """Return the name color for *entry*.

        Files use their extension color when one is configured.
        """
        if entry.kind is EntryKind.DIRECTORY:
            return self.file_types.directory
        if entry.kind is EntryKind.SYMLINK:
            return self.file_types.symlink
        return self.extensions.get(entry.extension, self.file_types.file)


def config_path() -> Path:
    """Return the theme file path, honoring ``$BESTLS_CONFIG``."""
    override = os.environ.get(CONFIG_ENV_VAR)
    if override:
        return Path(override).expanduser()
    return Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME


def _is_color(value: Any) -> bool:
    if not isinstance(value, str) or not value.strip():
        return False
    try:
        Style.parse(value)
    except StyleSyntaxError:
        return False
    return True


def _valid_colors(section: Any, where: str) -> dict[str, str]:
    """Keep the string→color pairs of a TOML table that rich can parse."""
    if not isinstance(section, dict):
        if section is not None:
            logger.warning("Ignoring [%s]: expected a table", where)
        return {}
    colors: dict[str, str] = {}
    for key, value in section.items():
        if _is_color(value):
            colors[str(key)] = value
        else:
            logger.warning("Ignoring invalid color %r for %s.%s", value, where, key)
    return colors


def theme_from_mapping(data: dict[str, Any]) -> Theme:
    """Overlay a parsed config document on the default theme.

    Args:
        data: Parsed TOML document.

    Returns:
        Theme: Default theme with every valid configured color applied.
    """
    theme = Theme()
    colors = data.get("colors", {})
    if not isinstance(colors, dict):
        logger.warning("Ignoring [colors]: expected a table")
        return theme

    kind_fields = {f.name for f in fields(FileTypeColors)}
    column_fields = {f.name for f in fields(TableColors)}
    file_types = _valid_colors(colors.get("file_types"), "colors.file_types")
    known_kinds = {k: v for k, v in file_types.items() if k in kind_fields}
    table = _valid_colors(colors.get("table"), "colors.table")
    known_columns = {k: v for k, v in table.items() if k in column_fields}
    extensions = {
        ext.lstrip(".").lower(): color
        for ext, color in _valid_colors(
            colors.get("extensions"), "colors.extensions"
        ).items()
    }

    return Theme(
        file_types=replace(theme.file_types, **known_kinds),
        extensions={**theme.extensions, **extensions},
        table=replace(theme.table, **known_columns),
    )


def load_theme(path: Path | None = None) -> Theme:
    """Load the theme file, falling back to defaults.

    Args:
        path: Config file to read. Defaults to :func:`config_path`.

    Returns:
        Theme: Configured theme, or the default theme when the file is
        missing or malformed.
    """
    theme_path = path or config_path()
    try:
        raw = theme_path.read_bytes()
    except FileNotFoundError:
        logger.debug("No theme file at %s", theme_path)
        return Theme()
    except OSError as exc:
        logger.warning("Cannot read theme file %s: %s", theme_path, exc)
        return Theme()

    try:
        data = tomllib.loads(raw.decode("utf-8"))
    except (UnicodeDecodeError, tomllib.TOMLDecodeError) as exc:
        logger.warning("Ignoring malformed theme file %s: %s", theme_path, exc)
        return Theme()
    return theme_from_mapping(data)


def init_config(path: Path | None = None) -> Path:
    """Write the sample theme file.

    Raises:
        FileExistsError: If a config file already exists.
    """
    target = path or config_path()
    target.parent.mkdir(parents=True, exist_ok=True)
    with target.open("x", encoding="utf-8") as fh:
        fh.write(SAMPLE_CONFIG)
    return target


def reset_config(path: Path | None = None) -> bool:
    """Delete the theme file. Returns whether a file was removed."""
    target = path or config_path()
    try:
        target.unlink()
    except FileNotFoundError:
        return False
    return True
