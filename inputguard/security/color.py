"""Hex color validation for hall banners."""

from __future__ import annotations

from inputguard.core.errors import ErrorKind
from inputguard.core.policy import HEX_COLOR_PATTERN
from inputguard.security.input_validators import blank_to_none, reject


def sanitize_color_format(raw: str | None) -> str | None:
    """Return the trimmed ``#rgb``/``#rrggbb`` color, or ``None`` when blank.

    Case is preserved.  Anything else (named colors, ``rgb()``, missing
    ``#``) raises ``SanitizationError`` (INVALID_BANNER_COLOR).
    """
    value = blank_to_none(raw)
    if value is None:
        return None

    if not HEX_COLOR_PATTERN.fullmatch(value):
        raise reject(ErrorKind.INVALID_BANNER_COLOR, raw)
    return value
