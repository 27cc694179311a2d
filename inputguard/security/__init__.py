"""Validators and sanitizers for untrusted input.

Identity strings, contact details, passwords, colors, free text and
uploaded file metadata.  Every validator returns a normalized value or
raises ``SanitizationError`` with an ``ErrorKind``; the text sanitizers
never raise.
"""

from inputguard.security.color import sanitize_color_format
from inputguard.security.contact import email_validator_check, sanitize_email, sanitize_phone_e164
from inputguard.security.file_validators import (
    validate_file_name,
    validate_file_name_async,
    validate_file_size,
    validate_file_type,
)
from inputguard.security.identity import (
    sanitize_display_name,
    sanitize_hall_name,
    sanitize_username,
)
from inputguard.security.password_policy import estimate_entropy, sanitize_password_policy
from inputguard.security.text_sanitizer import sanitize_message_content, sanitize_text

__all__ = [
    "email_validator_check",
    "estimate_entropy",
    "sanitize_color_format",
    "sanitize_display_name",
    "sanitize_email",
    "sanitize_hall_name",
    "sanitize_message_content",
    "sanitize_password_policy",
    "sanitize_phone_e164",
    "sanitize_text",
    "sanitize_username",
    "validate_file_name",
    "validate_file_name_async",
    "validate_file_size",
    "validate_file_type",
]
