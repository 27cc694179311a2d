"""Uploaded file metadata validation.

Validates file names against existing filesystem entries, file types
against a deny-list of executable/script extensions with a cross-check
of the declared content type, and upload sizes.

A name that already exists, or that would leave the upload directory, is a
rejection (INVALID_FILE_NAME); a filesystem call that fails for any other
reason is an operational ``FileCheckError``.
"""

from __future__ import annotations

import asyncio
import errno
import logging
import os
from pathlib import Path, PureWindowsPath
from urllib.parse import unquote, urlsplit

from inputguard.core.config import get_settings, get_upload_dir
from inputguard.core.errors import ErrorKind, FileCheckError
from inputguard.core.policy import BLOCKED_EXTENSIONS, MAX_UPLOAD_SIZE_BYTES
from inputguard.security.audit import SecuritySeverity, fingerprint, log_security_event
from inputguard.security.input_validators import blank_to_none, reject

_security_logger = logging.getLogger("inputguard.security")

# errno values meaning "nothing is there"
_NOT_FOUND_ERRNOS: frozenset[int] = frozenset({errno.ENOENT, errno.ENOTDIR})

# errno values meaning "no entry could ever exist under this name"
_UNUSABLE_NAME_ERRNOS: frozenset[int] = frozenset({errno.ENAMETOOLONG})


# ── File name ───────────────────────────────────────────────────────────


def _prepare_name(name: str) -> str:
    value = name.strip()
    if not value or "\x00" in value:
        raise reject(ErrorKind.INVALID_FILE_NAME, name)
    return value


def _has_traversal_sequences(value: str) -> bool:
    """Check for dot-dot parts, treating backslashes as separators."""
    return ".." in value.replace("\\", "/").split("/")


def _is_absolute(value: str) -> bool:
    return value.replace("\\", "/").startswith("/") or bool(PureWindowsPath(value).drive)


def _is_under_root(path: Path, root: Path) -> bool:
    """Check if *path* is equal to or a child of *root*."""
    try:
        path.relative_to(root)
        return True
    except ValueError:
        return False


def _locate(value: str, base_dir: Path | None) -> tuple[Path, Path]:
    """Return ``(root, path)`` for *value* under *base_dir* (or ``UPLOAD_DIR``).

    Absolute names and names with ``..`` parts are rejected before any
    filesystem access.
    """
    if _is_absolute(value) or _has_traversal_sequences(value):
        _security_logger.warning(
            "SECURITY event=path_traversal detail='name leaves upload directory' name_fingerprint=%s",
            fingerprint(value),
        )
        raise reject(ErrorKind.INVALID_FILE_NAME, value, "outside upload directory")
    if base_dir is None:
        base_dir = get_upload_dir(get_settings())
    root = base_dir if base_dir is not None else Path.cwd()
    return root, root / value


def _check_failed(path: Path, exc: OSError) -> FileCheckError:
    _security_logger.warning(
        "SECURITY event=file_check_failed errno=%s path_fingerprint=%s",
        exc.errno,
        fingerprint(str(path)),
    )
    return FileCheckError(str(path), exc.strerror or type(exc).__name__)


def _exists(path: Path, root: Path) -> bool:
    """Return whether any entry exists at *path*; raise ``FileCheckError`` if unknown.

    The parent directory is resolved (following symlinks) and must stay
    under *root*.  The entry itself is not followed, so a symlink counts
    as existing whether or not its target does.
    """
    try:
        real_parent = path.parent.resolve()
        real_root = root.resolve()
    except RuntimeError as exc:
        raise reject(ErrorKind.INVALID_FILE_NAME, str(path), "symlink loop") from exc
    except OSError as exc:
        raise _check_failed(path, exc) from exc

    if not _is_under_root(real_parent, real_root):
        _security_logger.warning(
            "SECURITY event=path_outside_root detail='resolved path outside upload directory' "
            "path_fingerprint=%s",
            fingerprint(str(path)),
        )
        raise reject(ErrorKind.INVALID_FILE_NAME, str(path), "outside upload directory")

    try:
        os.lstat(path)
    except OSError as exc:
        if exc.errno in _NOT_FOUND_ERRNOS:
            return False
        if exc.errno in _UNUSABLE_NAME_ERRNOS:
            raise reject(ErrorKind.INVALID_FILE_NAME, str(path), "name too long") from exc
        raise _check_failed(path, exc) from exc
    return True


def validate_file_name(name: str, base_dir: Path | None = None) -> str:
    """Accept *name* only if no filesystem entry exists at that path.

    1. Trim; reject empty names and names containing null bytes.
    2. Reject absolute names and ``..`` parts; the name is always taken
       relative to *base_dir* (or ``UPLOAD_DIR``, or the working directory).
    3. Resolve the parent directory and reject it if it escapes the base.
    4. ``lstat`` the path; reject if any entry, dangling symlinks
       included, exists there.

    Returns the trimmed name on success.
    Raises ``SanitizationError`` (INVALID_FILE_NAME) on rejection, or
    ``FileCheckError`` when existence could not be determined.
    """
    value = _prepare_name(name)
    root, path = _locate(value, base_dir)
    if _exists(path, root):
        raise reject(ErrorKind.INVALID_FILE_NAME, name, "already exists")
    return value


async def validate_file_name_async(
    name: str,
    base_dir: Path | None = None,
    timeout: float | None = None,
) -> str:
    """Async ``validate_file_name`` with the filesystem checks bounded by *timeout*.

    The blocking calls run in a worker thread.  *timeout* defaults to
    ``FILE_CHECK_TIMEOUT_SECONDS``; exceeding it raises ``FileCheckError``.
    Cancelling the awaiting task cancels the wait.
    """
    value = _prepare_name(name)
    root, path = _locate(value, base_dir)
    if timeout is None:
        timeout = get_settings().FILE_CHECK_TIMEOUT_SECONDS

    try:
        exists = await asyncio.wait_for(asyncio.to_thread(_exists, path, root), timeout=timeout)
    except asyncio.TimeoutError as exc:
        _security_logger.warning(
            "SECURITY event=file_check_timeout timeout=%s path_fingerprint=%s",
            timeout,
            fingerprint(str(path)),
        )
        raise FileCheckError(str(path), f"timed out after {timeout}s") from exc

    if exists:
        raise reject(ErrorKind.INVALID_FILE_NAME, name, "already exists")
    return value


# ── File type ───────────────────────────────────────────────────────────


def _fully_decode(path: str) -> str:
    """Apply URL decoding until nothing changes; each pass shortens the string."""
    decoded = unquote(path)
    while decoded != path:
        path, decoded = decoded, unquote(decoded)
    return path


def file_extension(url: str) -> str:
    """Lower-cased extension of the last path segment of *url*, dot included.

    Query strings and fragments are ignored; the path is URL-decoded until
    stable so encoded dots (``%2E``, ``%252E``) cannot hide the real suffix.
    Returns ``""`` when the segment has no dot.
    """
    try:
        path = urlsplit(url).path
    except ValueError:
        path = url
    path = _fully_decode(path)
    segment = path.replace("\\", "/").rsplit("/", 1)[-1]
    dot = segment.rfind(".")
    if dot == -1:
        return ""
    return segment[dot:].lower()


def validate_file_type(declared_type: str | None, url: str) -> str:
    """Check the extension of *url* and cross-check the declared type.

    Raises ``SanitizationError`` with BAD_FILE_TYPE for deny-listed
    extensions, or FILE_UNMATCH when *declared_type* is given and does
    not mention the extension.  Returns the extension.
    """
    ext = file_extension(url)
    declared_type = blank_to_none(declared_type)

    if ext in BLOCKED_EXTENSIONS:
        log_security_event(
            "blocked_file_type",
            SecuritySeverity.HIGH,
            f"extension={ext}",
        )
        raise reject(ErrorKind.BAD_FILE_TYPE, url, ext)

    if declared_type is not None and ext[1:] not in declared_type.lower():
        raise reject(ErrorKind.FILE_UNMATCH, url, f"declared {declared_type!r}, got {ext!r}")

    return ext


# ── File size ───────────────────────────────────────────────────────────


def validate_file_size(size_bytes: int) -> int:
    """Require 0 <= *size_bytes* <= ``MAX_UPLOAD_SIZE_BYTES``."""
    if not 0 <= size_bytes <= MAX_UPLOAD_SIZE_BYTES:
        raise reject(ErrorKind.FILE_TOO_LARGE, str(size_bytes))
    return size_bytes
