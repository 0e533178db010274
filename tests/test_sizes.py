"""Tests for bestls.sizes."""

import pytest

from bestls import BestlsError
from bestls.sizes import MAX_SIZE, SizeErrorKind, SizeParseError, format_size, parse_size


class TestParseSize:
    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("0", 0),
            ("100", 100),
            ("100B", 100),
            ("1KB", 1024),
            ("1kb", 1024),
            ("1Kb", 1024),
            ("1.5MB", 1572864),
            ("2 GB", 2 * 1024**3),
            ("1TB", 1024**4),
            (".5KB", 512),
            ("+3KB", 3072),
            ("  7 mb  ", 7 * 1024**2),
            ("1.5B", 1),
        ],
    )
    def test_valid_sizes(self, text: str, expected: int) -> None:
        assert parse_size(text) == expected

    @pytest.mark.parametrize(
        ("text", "kind"),
        [
            ("", SizeErrorKind.EMPTY),
            ("   ", SizeErrorKind.EMPTY),
            ("-1KB", SizeErrorKind.NEGATIVE),
            ("-0", SizeErrorKind.NEGATIVE),
            ("99999999999999999999GB", SizeErrorKind.OVERFLOW),
            ("99999999999999GB", SizeErrorKind.OVERFLOW),
            ("1XB", SizeErrorKind.INVALID_UNIT),
            ("10 bytes", SizeErrorKind.INVALID_UNIT),
            ("abc", SizeErrorKind.INVALID_NUMBER),
            ("KB", SizeErrorKind.INVALID_NUMBER),
            ("1.2.3KB", SizeErrorKind.INVALID_NUMBER),
            (".", SizeErrorKind.INVALID_NUMBER),
        ],
    )
    def test_rejected_sizes(self, text: str, kind: SizeErrorKind) -> None:
        with pytest.raises(SizeParseError) as excinfo:
            parse_size(text)
        assert excinfo.value.kind is kind
        assert excinfo.value.text == text

    def test_largest_representable_size(self) -> None:
        assert parse_size(str(MAX_SIZE)) == MAX_SIZE
        with pytest.raises(SizeParseError) as excinfo:
            parse_size(str(MAX_SIZE + 1))
        assert excinfo.value.kind is SizeErrorKind.OVERFLOW

    def test_error_is_user_facing(self) -> None:
        with pytest.raises(BestlsError, match="invalid size '1XB'"):
            parse_size("1XB")


class TestFormatSize:
    @pytest.mark.parametrize(
        ("size", "expected"),
        [
            (0, "0 B"),
            (500, "500 B"),
            (1023, "1023 B"),
            (1024, "1.0 KB"),
            (2048, "2.0 KB"),
            (1536, "1.5 KB"),
            (1572864, "1.5 MB"),
            (1024**3, "1.0 GB"),
            (5 * 1024**4, "5.0 TB"),
            (1048575, "1.0 MB"),
            (1024**3 - 1, "1.0 GB"),
        ],
    )
    def test_binary_units(self, size: int, expected: str) -> None:
        assert format_size(size) == expected

    def test_negative_rejected(self) -> None:
        with pytest.raises(ValueError):
            format_size(-1)
