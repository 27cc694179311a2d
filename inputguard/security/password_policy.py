"""Password policy: boundary-whitespace rejection and entropy threshold.

Entropy is estimated as ``length * log2(base)``:

* *base* is the size of the combined alphabet implied by the character
  classes present in the password, plus one for every distinct character
  outside all known classes.
* *length* is measured after collapsing padding: runs of more than two
  identical characters and runs of more than two consecutive characters
  from a keyboard row or the alphabet each count as two characters.

So ``"aaaaaaaaaa"`` scores like ``"aa"`` and ``"abcdefgh"`` like ``"ab"``.
Passwords are never trimmed or otherwise modified.
"""

from __future__ import annotations

import logging
import math

from inputguard.core.errors import ErrorKind, PasswordPolicyError
from inputguard.core.policy import MIN_ENTROPY_BITS
from inputguard.security.audit import log_rejection

logger = logging.getLogger(__name__)

_REPLACE_CHARS = "!@$&*"
_SEP_CHARS = "_-., "
_OTHER_SPECIAL_CHARS = "\"#%'()+/:;<=>?[\\]^{|}~"
_LOWER_CHARS = "abcdefghijklmnopqrstuvwxyz"
_UPPER_CHARS = "ABCDEFGHIJKLMNOPQRSTUVWXYZ"
_DIGIT_CHARS = "0123456789"

_CHAR_CLASSES: tuple[str, ...] = (
    _REPLACE_CHARS,
    _SEP_CHARS,
    _OTHER_SPECIAL_CHARS,
    _LOWER_CHARS,
    _UPPER_CHARS,
    _DIGIT_CHARS,
)

_SEQUENCES: tuple[str, ...] = (
    "0123456789",
    "qwertyuiop",
    "asdfghjkl",
    "zxcvbnm",
    "abcdefghijklmnopqrstuvwxyz",
)

# Longest run kept from a repeat or a sequence
_MAX_RUN = 2


def _base(password: str) -> int:
    present: set[str] = set()
    base = 0
    for ch in set(password):
        for char_class in _CHAR_CLASSES:
            if ch in char_class:
                present.add(char_class)
                break
        else:
            base += 1
    return base + sum(len(char_class) for char_class in present)


def _collapse_repeats(password: str) -> str:
    out: list[str] = []
    for ch in password:
        if len(out) >= _MAX_RUN and all(prev == ch for prev in out[-_MAX_RUN:]):
            continue
        out.append(ch)
    return "".join(out)


def _collapse_sequence(password: str, sequence: str) -> str:
    out: list[str] = []
    run = 0
    prev_pos = -1
    for ch in password:
        pos = sequence.find(ch)
        if pos == -1:
            run = 0
        elif prev_pos != -1 and pos == prev_pos + 1:
            run += 1
        else:
            run = 1
        prev_pos = pos
        if run <= _MAX_RUN:
            out.append(ch)
    return "".join(out)


def _effective_length(password: str) -> int:
    password = _collapse_repeats(password)
    for sequence in _SEQUENCES:
        password = _collapse_sequence(password, sequence)
    return len(password)


def estimate_entropy(password: str) -> float:
    """Return the estimated entropy of *password* in bits."""
    base = _base(password)
    if base == 0:
        return 0.0
    return _effective_length(password) * math.log2(base)


def _strength_hint(password: str) -> str:
    """Describe which character classes would raise the estimate."""
    missing: list[str] = []
    if not any(ch in _REPLACE_CHARS + _SEP_CHARS + _OTHER_SPECIAL_CHARS for ch in password):
        missing.append("special characters")
    if not any(ch in _LOWER_CHARS for ch in password):
        missing.append("lowercase letters")
    if not any(ch in _UPPER_CHARS for ch in password):
        missing.append("uppercase letters")
    if not any(ch in _DIGIT_CHARS for ch in password):
        missing.append("numbers")
    if not missing:
        return "use a longer password"
    return f"try adding {', '.join(missing)} or use a longer password"


def sanitize_password_policy(raw: str) -> str:
    """Check *raw* against the password policy and return it unchanged.

    Raises ``PasswordPolicyError`` with kind PASSWORD_WHITESPACE when the
    password starts or ends with whitespace, or INVALID_PASSWORD when its
    estimated entropy is below ``MIN_ENTROPY_BITS``.
    """
    if raw.strip() != raw:
        log_rejection(ErrorKind.PASSWORD_WHITESPACE, raw)
        raise PasswordPolicyError(ErrorKind.PASSWORD_WHITESPACE)

    entropy = estimate_entropy(raw)
    if entropy < MIN_ENTROPY_BITS:
        logger.debug("password entropy %.1f below threshold %.1f", entropy, MIN_ENTROPY_BITS)
        log_rejection(ErrorKind.INVALID_PASSWORD, raw)
        raise PasswordPolicyError(ErrorKind.INVALID_PASSWORD, _strength_hint(raw))
    return raw
