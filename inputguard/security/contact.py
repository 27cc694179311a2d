"""Contact validators: email addresses and phone numbers.

Both are syntactic pre-filters.  A stricter, library-backed check can be
plugged in through ``strict_check`` without changing the error taxonomy:
a failing strict check raises the same ``ErrorKind`` as the built-in rule.

The phone check only keeps ``+`` and digits and bounds the length; it is
not E.164 validation and says nothing about whether the number is real.
"""

from __future__ import annotations

from collections.abc import Callable

from email_validator import EmailNotValidError, validate_email

from inputguard.core.errors import ErrorKind
from inputguard.core.policy import (
    EMAIL_MAX_LEN,
    EMAIL_MIN_LEN,
    EMAIL_PATTERN,
    PHONE_MAX_LEN,
    PHONE_MIN_LEN,
)
from inputguard.security.input_validators import blank_to_none, reject

StrictCheck = Callable[[str], bool]


def email_validator_check(email: str) -> bool:
    """Strict syntax check backed by the ``email-validator`` library.

    Deliverability (DNS) is not checked; the layer performs no network I/O.
    """
    try:
        validate_email(email, check_deliverability=False)
    except EmailNotValidError:
        return False
    return True


def sanitize_email(raw: str, strict_check: StrictCheck | None = None) -> str:
    """Trim and lower-case *raw*, then check length, ``@`` and grammar."""
    value = raw.strip().lower()
    if (
        not EMAIL_MIN_LEN <= len(value) <= EMAIL_MAX_LEN
        or "@" not in value
        or not EMAIL_PATTERN.fullmatch(value)
    ):
        raise reject(ErrorKind.INVALID_EMAIL, raw)

    if strict_check is not None and not strict_check(value):
        raise reject(ErrorKind.INVALID_EMAIL, raw, "rejected by strict check")
    return value


def _keep_plus_digits(value: str) -> str:
    return "".join(ch for ch in value if ch == "+" or "0" <= ch <= "9")


def sanitize_phone_e164(raw: str | None, strict_check: StrictCheck | None = None) -> str | None:
    """Reduce *raw* to ``+`` and ASCII digits and require 7-20 characters.

    Absent or blank input is not an error and yields ``None``.
    """
    value = blank_to_none(raw)
    if value is None:
        return None

    value = _keep_plus_digits(value)
    if not PHONE_MIN_LEN <= len(value) <= PHONE_MAX_LEN:
        raise reject(ErrorKind.INVALID_PHONE_NUMBER, raw)

    if strict_check is not None and not strict_check(value):
        raise reject(ErrorKind.INVALID_PHONE_NUMBER, raw, "rejected by strict check")
    return value
