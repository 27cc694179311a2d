"""Tests for request models.

Each model runs the validators as field validators: valid input comes
out normalized, rejected input raises a pydantic ``ValidationError`` with
one entry per offending field, and operational file-check failures pass
through untouched.
"""

import errno
import os
import time
from collections.abc import Iterator
from pathlib import Path
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from inputguard.core.config import get_settings
from inputguard.core.errors import ErrorKind, FileCheckError, SanitizationError
from inputguard.models.schemas import (
    AttachmentInput,
    CreateHallInput,
    RegisterUserInput,
    SendMessageInput,
)
from inputguard.security.input_validators import format_validation_errors

STRONG = "Correct-Horse-Battery-Staple-9!"


def _fields(exc: ValidationError) -> set[str]:
    return {e["field"] for e in format_validation_errors(exc)}


@pytest.fixture()
def upload_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[Path]:
    """Point UPLOAD_DIR at an empty temporary directory."""
    monkeypatch.setenv("INPUTGUARD_UPLOAD_DIR", str(tmp_path))
    get_settings.cache_clear()
    yield tmp_path
    get_settings.cache_clear()


# ═══════════════════════════════════════════════════════════════════════
# RegisterUserInput
# ═══════════════════════════════════════════════════════════════════════


class TestRegisterUserInput:
    """Registration normalizes identity and contact fields."""

    def test_valid_input_normalized(self) -> None:
        user = RegisterUserInput(
            username="  Jane.Doe ",
            display_name="  Jane   Doe ",
            email=" JANE@EXAMPLE.COM ",
            password=STRONG,
            phone="+1 (555) 010-9999",
        )
        assert user.username == "jane.doe"
        assert user.display_name == "Jane Doe"
        assert user.email == "jane@example.com"
        assert user.password == STRONG
        assert user.phone == "+15550109999"

    def test_phone_optional(self) -> None:
        user = RegisterUserInput(
            username="jane", display_name="Jane", email="jane@example.com", password=STRONG
        )
        assert user.phone is None

    def test_blank_phone_becomes_none(self) -> None:
        user = RegisterUserInput(
            username="jane", display_name="Jane", email="jane@example.com",
            password=STRONG, phone="   ",
        )
        assert user.phone is None

    def test_every_invalid_field_reported(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            RegisterUserInput(
                username="x",
                display_name="  ",
                email="nope",
                password=" weak ",
                phone="12",
            )
        assert _fields(exc_info.value) == {
            "username", "display_name", "email", "password", "phone",
        }

    def test_weak_password_message(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            RegisterUserInput(
                username="jane", display_name="Jane", email="jane@example.com",
                password="aaaaaaaaaa",
            )
        messages = [e["message"] for e in format_validation_errors(exc_info.value)]
        assert any("password is too weak" in m for m in messages)

    def test_strict_email_setting(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("INPUTGUARD_STRICT_EMAIL_CHECK", "true")
        get_settings.cache_clear()
        try:
            with pytest.raises(ValidationError) as exc_info:
                RegisterUserInput(
                    username="jane", display_name="Jane",
                    email="jane..doe@example.com", password=STRONG,
                )
            assert _fields(exc_info.value) == {"email"}
        finally:
            get_settings.cache_clear()

    def test_lenient_email_by_default(self) -> None:
        get_settings.cache_clear()
        user = RegisterUserInput(
            username="jane", display_name="Jane",
            email="jane..doe@example.com", password=STRONG,
        )
        assert user.email == "jane..doe@example.com"


# ═══════════════════════════════════════════════════════════════════════
# CreateHallInput
# ═══════════════════════════════════════════════════════════════════════


class TestCreateHallInput:
    """Hall creation validates name and color, cleans the description."""

    def test_valid_input(self) -> None:
        hall = CreateHallInput(
            name=" Main Hall ",
            banner_color=" #A1B2C3 ",
            description="<b>Welcome</b><script>alert(1)</script>",
        )
        assert hall.name == "Main Hall"
        assert hall.banner_color == "#A1B2C3"
        assert hall.description is not None
        assert "<b>Welcome</b>" in hall.description
        assert "<script" not in hall.description

    def test_optional_fields_absent(self) -> None:
        hall = CreateHallInput(name="Lounge")
        assert hall.banner_color is None
        assert hall.description is None

    def test_bad_color_reported(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            CreateHallInput(name="Lounge", banner_color="red")
        assert _fields(exc_info.value) == {"banner_color"}


# ═══════════════════════════════════════════════════════════════════════
# SendMessageInput
# ═══════════════════════════════════════════════════════════════════════


class TestSendMessageInput:
    """Messages are cleaned, never rejected for their markup."""

    def test_content_cleaned(self) -> None:
        msg = SendMessageInput(content="  hi <script>x()</script><i>there</i> ")
        assert "<script" not in msg.content
        assert msg.content.startswith("hi")
        assert msg.content.endswith("<i>there</i>")

    def test_empty_content_rejected(self) -> None:
        with pytest.raises(ValidationError):
            SendMessageInput(content="")


# ═══════════════════════════════════════════════════════════════════════
# AttachmentInput
# ═══════════════════════════════════════════════════════════════════════


class TestAttachmentInput:
    """Attachments check name, size and type."""

    def test_valid_attachment(self, upload_dir: Path) -> None:
        att = AttachmentInput(
            file_name=" photo.jpeg ",
            url="https://cdn.example.com/u/photo.jpeg",
            content_type="image/jpeg",
            size_bytes=2048,
        )
        assert att.file_name == "photo.jpeg"
        assert att.extension == ".jpeg"

    def test_executable_rejected(self, upload_dir: Path) -> None:
        with pytest.raises(ValidationError) as exc_info:
            AttachmentInput(
                file_name="setup.exe",
                url="https://cdn.example.com/u/setup.exe",
                size_bytes=10,
            )
        assert "file type is not allowed" in str(exc_info.value)

    def test_type_mismatch_rejected(self, upload_dir: Path) -> None:
        with pytest.raises(ValidationError) as exc_info:
            AttachmentInput(
                file_name="a.jpg",
                url="https://cdn.example.com/u/a.jpg",
                content_type="image/png",
                size_bytes=10,
            )
        assert "does not match" in str(exc_info.value)

    def test_existing_file_and_size_reported(self, upload_dir: Path) -> None:
        (upload_dir / "taken.png").write_bytes(b"x")
        with pytest.raises(ValidationError) as exc_info:
            AttachmentInput(
                file_name="taken.png",
                url="https://cdn.example.com/u/taken.png",
                size_bytes=11 * 1024 * 1024,
            )
        assert _fields(exc_info.value) == {"file_name", "size_bytes"}

    def test_name_outside_upload_dir_reported(self, upload_dir: Path) -> None:
        with pytest.raises(ValidationError) as exc_info:
            AttachmentInput(
                file_name="../escape.png",
                url="https://cdn.example.com/u/escape.png",
                size_bytes=10,
            )
        assert _fields(exc_info.value) == {"file_name"}

    def test_file_check_failure_not_wrapped(self, upload_dir: Path) -> None:
        err = OSError(errno.EIO, "Input/output error")
        with patch("inputguard.security.file_validators.os.lstat", side_effect=err):
            with pytest.raises(FileCheckError):
                AttachmentInput(
                    file_name="a.png",
                    url="https://cdn.example.com/u/a.png",
                    size_bytes=10,
                )


class TestAttachmentInputAsync:
    """validate_async() runs the timeout-bounded file-name check."""

    @pytest.mark.asyncio
    async def test_valid_attachment(self, upload_dir: Path) -> None:
        att = await AttachmentInput.validate_async(
            {
                "file_name": " photo.png ",
                "url": "https://cdn.example.com/u/photo.png",
                "content_type": "image/png",
                "size_bytes": 10,
            }
        )
        assert att.file_name == "photo.png"
        assert att.extension == ".png"

    @pytest.mark.asyncio
    async def test_blocking_check_skipped(self, upload_dir: Path) -> None:
        data = {"file_name": "photo.png", "url": "https://cdn.example.com/u/photo.png", "size_bytes": 10}
        with patch("inputguard.models.schemas.validate_file_name") as blocking:
            await AttachmentInput.validate_async(data)
        blocking.assert_not_called()

    @pytest.mark.asyncio
    async def test_existing_file_rejected(self, upload_dir: Path) -> None:
        (upload_dir / "taken.png").write_bytes(b"x")
        with pytest.raises(SanitizationError) as exc_info:
            await AttachmentInput.validate_async(
                {"file_name": "taken.png", "url": "https://cdn.example.com/u/taken.png", "size_bytes": 10}
            )
        assert exc_info.value.kind is ErrorKind.INVALID_FILE_NAME

    @pytest.mark.asyncio
    async def test_other_fields_still_validated(self, upload_dir: Path) -> None:
        with pytest.raises(ValidationError) as exc_info:
            await AttachmentInput.validate_async(
                {"file_name": "run.sh", "url": "https://cdn.example.com/u/run.sh", "size_bytes": 10}
            )
        assert "file type is not allowed" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_timeout_raises_file_check_error(self, upload_dir: Path) -> None:
        real_lstat = os.lstat

        def slow_lstat(path, *args, **kwargs):
            if os.path.basename(os.fspath(path)) == "slow.png":
                time.sleep(0.3)
                raise FileNotFoundError(errno.ENOENT, "No such file")
            return real_lstat(path, *args, **kwargs)

        data = {"file_name": "slow.png", "url": "https://cdn.example.com/u/slow.png", "size_bytes": 10}
        with patch("inputguard.security.file_validators.os.lstat", side_effect=slow_lstat):
            with pytest.raises(FileCheckError, match="timed out"):
                await AttachmentInput.validate_async(data, timeout=0.05)
