"""Security event logging for the validation layer.

Rejections and neutralized input are logged on the ``inputguard.security``
logger.  Raw values never reach the log: each event carries a truncated
SHA-256 fingerprint of the offending input instead, which is enough to
correlate repeated attempts without storing passwords or personal data.
"""

from __future__ import annotations

import enum
import hashlib
import logging

from inputguard.core.errors import ErrorKind

_security_logger = logging.getLogger("inputguard.security")

# Hex characters of the SHA-256 digest kept in log lines
_FINGERPRINT_LEN: int = 16


# ── SecuritySeverity ────────────────────────────────────────────────────


class SecuritySeverity(enum.Enum):
    """Severity levels for security events."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


# ── fingerprint ─────────────────────────────────────────────────────────


def fingerprint(value: str | None) -> str:
    """Truncated SHA-256 hex digest of *value* (no raw input in logs)."""
    if value is None:
        return "none"
    return hashlib.sha256(value.encode("utf-8", "surrogatepass")).hexdigest()[:_FINGERPRINT_LEN]


# ── Security event logging ──────────────────────────────────────────────


def log_security_event(
    event_type: str,
    severity: SecuritySeverity,
    detail: str,
    request_id: str = "",
) -> None:
    """Log a security event with severity.

    CRITICAL severity logs at ERROR level; others at WARNING.
    """
    msg = f"SECURITY_EVENT event={event_type} severity={severity.value} detail='{detail}' request_id={request_id}"
    if severity == SecuritySeverity.CRITICAL:
        _security_logger.error(msg)
    else:
        _security_logger.warning(msg)


def log_rejection(kind: ErrorKind, raw: str | None) -> None:
    """Record a rejected value at INFO level, fingerprinted."""
    _security_logger.info(
        "SECURITY event=input_rejected kind=%s fingerprint=%s", kind.code, fingerprint(raw)
    )
