"""Identity string validators: usernames, hall names, display names.

Usernames are machine-facing (ASCII, case-insensitive); display names
are human-facing, so their length is counted in code points after NFKC
normalization rather than in bytes.
"""

from __future__ import annotations

from inputguard.core.errors import ErrorKind
from inputguard.core.policy import (
    DISPLAY_NAME_MAX_LEN,
    DISPLAY_NAME_MIN_LEN,
    HALL_NAME_PATTERN,
    USERNAME_PATTERN,
)
from inputguard.security.input_validators import collapse_whitespace, normalize_unicode, reject


def sanitize_username(raw: str) -> str:
    """Trim and lower-case *raw*; it must then match ``[a-z0-9_.-]{3,32}``."""
    value = raw.strip().lower()
    if not USERNAME_PATTERN.fullmatch(value):
        raise reject(ErrorKind.INVALID_USERNAME, raw)
    return value


def sanitize_hall_name(raw: str) -> str:
    """Trim *raw* (case kept); letters, digits, ``_.-`` and spaces, 3-32 long."""
    value = raw.strip()
    if not HALL_NAME_PATTERN.fullmatch(value):
        raise reject(ErrorKind.INVALID_HALL_NAME, raw)
    return value


def sanitize_display_name(raw: str) -> str:
    """Normalize a display name.

    1. Trim and NFKC-normalize.
    2. Collapse interior whitespace runs to single spaces.
    3. Require 3-32 code points.

    Raises ``SanitizationError`` (INVALID_DISPLAY_NAME) otherwise.
    """
    value = collapse_whitespace(normalize_unicode(raw.strip()))
    if not value:
        raise reject(ErrorKind.INVALID_DISPLAY_NAME, raw, "empty")

    if not DISPLAY_NAME_MIN_LEN <= len(value) <= DISPLAY_NAME_MAX_LEN:
        raise reject(ErrorKind.INVALID_DISPLAY_NAME, raw)
    return value
