"""Settings for the input validation layer.

Operational knobs only, loaded from environment variables with the
INPUTGUARD_ prefix.  Validation policy (patterns, bounds, deny-lists,
entropy threshold) lives in ``inputguard.core.policy`` and is fixed.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """inputguard configuration.

    All fields can be overridden by environment variables prefixed with
    ``INPUTGUARD_``.  For example, ``INPUTGUARD_FILE_CHECK_TIMEOUT_SECONDS=5``
    raises the filesystem check timeout.
    """

    # ── File checks ─────────────────────────────────────────────────
    FILE_CHECK_TIMEOUT_SECONDS: float = 2.0  # Bound on the blocking stat call
    UPLOAD_DIR: str = ""  # Base directory for file-name checks; empty = cwd

    # ── Contact checks ──────────────────────────────────────────────
    STRICT_EMAIL_CHECK: bool = False  # Run email-validator after the regex pre-filter

    model_config = {
        "env_prefix": "INPUTGUARD_",
    }


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return the process-wide ``Settings`` instance."""
    return Settings()


def get_upload_dir(settings: Settings) -> Path | None:
    """Resolve ``UPLOAD_DIR`` to a ``Path``, or ``None`` when unset."""
    if not settings.UPLOAD_DIR:
        return None
    return Path(settings.UPLOAD_DIR)
