"""Request models wiring the validators in as pydantic field validators.

Each model normalizes its fields on construction; a rejected field
surfaces as a pydantic ``ValidationError`` whose entries can be turned
into field-level 422 output with ``format_validation_errors``.
"""

from typing import Any

from pydantic import BaseModel, Field, ValidationInfo, field_validator, model_validator

from inputguard.core.config import get_settings
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
from inputguard.security.password_policy import sanitize_password_policy
from inputguard.security.text_sanitizer import sanitize_message_content, sanitize_text

# Validation context key set once the file name was checked asynchronously
FILE_NAME_CHECKED = "file_name_checked"


class RegisterUserInput(BaseModel):
    """Input for user registration."""

    username: str
    display_name: str
    email: str
    password: str
    phone: str | None = None

    @field_validator("username")
    @classmethod
    def check_username(cls, v: str) -> str:
        return sanitize_username(v)

    @field_validator("display_name")
    @classmethod
    def check_display_name(cls, v: str) -> str:
        return sanitize_display_name(v)

    @field_validator("email")
    @classmethod
    def check_email(cls, v: str) -> str:
        strict = email_validator_check if get_settings().STRICT_EMAIL_CHECK else None
        return sanitize_email(v, strict_check=strict)

    @field_validator("password")
    @classmethod
    def check_password(cls, v: str) -> str:
        return sanitize_password_policy(v)

    @field_validator("phone")
    @classmethod
    def check_phone(cls, v: str | None) -> str | None:
        return sanitize_phone_e164(v)


class CreateHallInput(BaseModel):
    """Input for creating a hall."""

    name: str
    banner_color: str | None = None
    description: str | None = None

    @field_validator("name")
    @classmethod
    def check_name(cls, v: str) -> str:
        return sanitize_hall_name(v)

    @field_validator("banner_color")
    @classmethod
    def check_banner_color(cls, v: str | None) -> str | None:
        return sanitize_color_format(v)

    @field_validator("description")
    @classmethod
    def clean_description(cls, v: str | None) -> str | None:
        return sanitize_text(v)


class SendMessageInput(BaseModel):
    """Input for posting a chat message."""

    content: str = Field(..., min_length=1)

    @field_validator("content")
    @classmethod
    def clean_content(cls, v: str) -> str:
        return sanitize_message_content(v)


class AttachmentInput(BaseModel):
    """Metadata of an uploaded attachment.

    ``extension`` is filled in from ``url`` after the type cross-check.

    Constructing the model directly checks ``file_name`` with the blocking,
    unbounded ``validate_file_name``.  Async callers should use
    ``validate_async``, which runs the timeout-bounded check first
    and skips the blocking one.
    """

    file_name: str
    url: str
    content_type: str | None = None
    size_bytes: int = Field(..., ge=0)
    extension: str = ""

    @field_validator("file_name")
    @classmethod
    def check_file_name(cls, v: str, info: ValidationInfo) -> str:
        if info.context and info.context.get(FILE_NAME_CHECKED):
            return v
        return validate_file_name(v)

    @field_validator("size_bytes")
    @classmethod
    def check_size(cls, v: int) -> int:
        return validate_file_size(v)

    @model_validator(mode="after")
    def check_file_type(self) -> "AttachmentInput":
        self.extension = validate_file_type(self.content_type, self.url)
        return self

    @classmethod
    async def validate_async(
        cls, data: dict[str, Any], timeout: float | None = None
    ) -> "AttachmentInput":
        """Validate *data*, checking ``file_name`` with ``validate_file_name_async``.

        A rejected or unverifiable file name raises ``SanitizationError`` or
        ``FileCheckError`` before the other fields are validated.
        """
        data = dict(data)
        data["file_name"] = await validate_file_name_async(str(data.get("file_name", "")), timeout=timeout)
        return cls.model_validate(data, context={FILE_NAME_CHECKED: True})
