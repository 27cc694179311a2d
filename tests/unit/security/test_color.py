"""Tests for banner color validation."""

import pytest

from inputguard.core.errors import ErrorKind, SanitizationError
from inputguard.security.color import sanitize_color_format


class TestSanitizeColorFormat:
    """sanitize_color_format() accepts #rgb and #rrggbb only."""

    @pytest.mark.parametrize("raw", ["#ABC", "#aabbcc", "#fff", "#A1b2C3"])
    def test_hex_colors_accepted(self, raw: str) -> None:
        assert sanitize_color_format(raw) == raw

    def test_trimmed(self) -> None:
        assert sanitize_color_format("  #a1b2c3 ") == "#a1b2c3"

    @pytest.mark.parametrize("raw", [None, "", "  "])
    def test_absent_passes_through(self, raw: str | None) -> None:
        assert sanitize_color_format(raw) is None

    @pytest.mark.parametrize(
        "raw",
        ["blue", "fff", "#ff", "#ffff", "#abcdefa", "#ggg", "rgb(0,0,0)", "#fff;x"],
    )
    def test_invalid_rejected(self, raw: str) -> None:
        with pytest.raises(SanitizationError) as exc_info:
            sanitize_color_format(raw)
        assert exc_info.value.kind is ErrorKind.INVALID_BANNER_COLOR

    def test_idempotent(self) -> None:
        once = sanitize_color_format(" #AbC ")
        assert sanitize_color_format(once) == once
