"""Human-readable size parsing and formatting (binary, 1024-based units)."""

from __future__ import annotations

import re
from decimal import Decimal, InvalidOperation, localcontext
from enum import Enum
from typing import Final

from bestls import BestlsError

MAX_SIZE: Final[int] = 2**64 - 1

UNIT_MULTIPLIERS: Final[dict[str, int]] = {
    "": 1,
    "B": 1,
    "KB": 1024,
    "MB": 1024**2,
    "GB": 1024**3,
    "TB": 1024**4,
}

_DISPLAY_UNITS: Final[tuple[str, ...]] = ("KB", "MB", "GB", "TB", "PB", "EB")

# Leading numeric run, then whatever is left is the unit.
_SIZE_RE = re.compile(r"^(?P<number>[+\-]?[0-9.]*)\s*(?P<unit>.*)$", re.DOTALL)


class SizeErrorKind(Enum):
    """Reason a size string was rejected."""

    EMPTY = "empty"
    INVALID_NUMBER = "invalid number"
    INVALID_UNIT = "invalid unit"
    NEGATIVE = "negative"
    OVERFLOW = "overflow"


class SizeParseError(BestlsError, ValueError):
    """A size string could not be converted to a byte count.

    Attributes:
        text: The rejected input.
        kind: Which rule the input violated.
    """

    def __init__(self, text: str, kind: SizeErrorKind, detail: str) -> None:
        super().__init__(f"invalid size '{text}': {detail}")
        self.text = text
        self.kind = kind


def parse_size(text: str) -> int:
    """Parse a human-readable size such as ``1.5MB`` into bytes.

    Units are case-insensitive binary multiples (``1KB == 1024``). A missing
    unit means bytes. Fractional byte counts are truncated toward zero.

    Args:
        text: Size string, e.g. ``"100"``, ``"1KB"``, ``"1.5 mb"``.

    Returns:
        int: Byte count in ``[0, 2**64 - 1]``.

    Raises:
        SizeParseError: With ``kind`` set to the violated rule.
    """
    stripped = text.strip()
    if not stripped:
        raise SizeParseError(text, SizeErrorKind.EMPTY, "size is empty")
    if stripped.startswith("-"):
        raise SizeParseError(text, SizeErrorKind.NEGATIVE, "size must not be negative")

    match = _SIZE_RE.match(stripped)
    assert match is not None  # pattern accepts any string
    number_text = match.group("number")
    unit = match.group("unit").upper()

    if not number_text.lstrip("+"):
        raise SizeParseError(text, SizeErrorKind.INVALID_NUMBER, "missing number")
    try:
        number = Decimal(number_text)
    except InvalidOperation as exc:
        raise SizeParseError(
            text, SizeErrorKind.INVALID_NUMBER, f"'{number_text}' is not a number"
        ) from exc

    multiplier = UNIT_MULTIPLIERS.get(unit)
    if multiplier is None:
        known = ", ".join(u for u in UNIT_MULTIPLIERS if u)
        raise SizeParseError(
            text, SizeErrorKind.INVALID_UNIT, f"unknown unit '{unit}' (use {known})"
        )

    with localcontext() as ctx:
        ctx.prec = 60
        total = int(number * multiplier)
    if total > MAX_SIZE:
        raise SizeParseError(
            text, SizeErrorKind.OVERFLOW, "size exceeds the 64-bit byte range"
        )
    return total


def format_size(size_bytes: int) -> str:
    """Render a byte count with one decimal in the largest fitting unit.

    Examples:
        >>> format_size(500)
        '500 B'
        >>> format_size(2048)
        '2.0 KB'
        >>> format_size(1572864)
        '1.5 MB'
    """
    if size_bytes < 0:
        raise ValueError("size_bytes must be non-negative")
    if size_bytes < 1024:
        return f"{size_bytes} B"

    value = size_bytes / 1024
    index = 0
    # Compare the rounded value so 1048575 shows as 1.0 MB, not 1024.0 KB.
    while round(value, 1) >= 1024 and index < len(_DISPLAY_UNITS) - 1:
        value /= 1024
        index += 1
    return f"{value:.1f} {_DISPLAY_UNITS[index]}"
