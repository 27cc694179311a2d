"""Fixed validation policy.

Compiled patterns, length bounds, the blocked-extension set and the
password entropy threshold.  These are built once at import and are
immutable; they are intentionally not part of ``Settings``.
"""

from __future__ import annotations

import re
from typing import Final

# ── Identity strings ────────────────────────────────────────────────────

USERNAME_PATTERN: Final = re.compile(r"^[a-z0-9_.-]{3,32}$")
HALL_NAME_PATTERN: Final = re.compile(r"^[a-zA-Z0-9_.\- ]{3,32}$")

DISPLAY_NAME_MIN_LEN: Final = 3
DISPLAY_NAME_MAX_LEN: Final = 32

# ── Contact ─────────────────────────────────────────────────────────────

EMAIL_PATTERN: Final = re.compile(
    r"^[a-zA-Z0-9.!#$%&'*+/=?^_`{|}~-]+"
    r"@[a-zA-Z0-9](?:[a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?"
    r"(?:\.[a-zA-Z0-9](?:[a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?)*$"
)
EMAIL_MIN_LEN: Final = 6
EMAIL_MAX_LEN: Final = 254

PHONE_MIN_LEN: Final = 7
PHONE_MAX_LEN: Final = 20

# ── Password ────────────────────────────────────────────────────────────

MIN_ENTROPY_BITS: Final = 60.0

# ── Color ───────────────────────────────────────────────────────────────

HEX_COLOR_PATTERN: Final = re.compile(r"^#(?:[0-9a-fA-F]{3}){1,2}$")

# ── Files ───────────────────────────────────────────────────────────────

BLOCKED_EXTENSIONS: Final[frozenset[str]] = frozenset({
    ".exe", ".bat", ".cmd", ".msix",
    ".scr", ".pif", ".dll", ".jse", ".vbs",
    ".vbe", ".wsf", ".wsh", ".ps1", ".psm1", ".reg",
    ".jar", ".dmg", ".iso", ".pkg", ".sh",
    ".virus",
})

MAX_UPLOAD_SIZE_MB: Final = 10
MAX_UPLOAD_SIZE_BYTES: Final = MAX_UPLOAD_SIZE_MB * 1024 * 1024
