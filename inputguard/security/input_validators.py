"""Shared normalization helpers and validation error formatting.

Provides ``normalize_unicode()`` for null-byte stripping and Unicode NFKC
normalization, ``collapse_whitespace()``, the ``reject()`` helper used by
every validator, and ``format_validation_errors()`` for structured 422 output.
"""

from __future__ import annotations

import unicodedata
from typing import Any

from inputguard.core.errors import ErrorKind, SanitizationError
from inputguard.security.audit import log_rejection


def normalize_unicode(value: str) -> str:
    """Strip null bytes and normalize to Unicode NFKC.

    Compatibility forms (full-width letters, ligatures, composed vs.
    decomposed accents) collapse to a single representation.
    """
    value = value.replace("\x00", "")
    value = unicodedata.normalize("NFKC", value)
    return value


def collapse_whitespace(value: str) -> str:
    """Replace every run of Unicode whitespace with one ASCII space and trim."""
    return " ".join(value.split())


def blank_to_none(value: str | None) -> str | None:
    """Strip *value*; return ``None`` when absent or blank."""
    if value is None:
        return None
    value = value.strip()
    return value or None


def reject(kind: ErrorKind, raw: str | None, detail: str = "") -> SanitizationError:
    """Log a rejection and build the matching error for the caller to raise."""
    log_rejection(kind, raw)
    return SanitizationError(kind, detail)


def format_validation_errors(exc: Any) -> list[dict[str, str]]:
    """Convert a Pydantic ``ValidationError`` into a structured list.

    Returns a list of ``{"field": ..., "message": ...}`` dicts suitable for
    a 422 JSON response.  Never includes stack traces or internal paths.
    """
    errors: list[dict[str, str]] = []
    for err in exc.errors():
        loc = err.get("loc", ())
        field = ".".join(str(part) for part in loc) if loc else "unknown"
        errors.append({
            "field": field,
            "message": err.get("msg", "Validation error"),
        })
    return errors
