# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import logging
import os
import secrets
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

# Anchor the default users.yml path to the project root (works well with editable installs).
BASE_DIR = Path(__file__).resolve().parents[2]

TRUTHY = {"1", "true", "yes", "y"}


def _flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in TRUTHY


def _int(name: str, default: int) -> int:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None


@dataclass(frozen=True)
class Settings:
    secret_key: str
    cookie_name: str = "tddapp_session"
    session_max_age: int = 28800  # 8 hours
    cookie_secure: bool = False
    users_path: Path = BASE_DIR / "data" / "users.yml"
    static_prefix: str = ""
    host: str = "0.0.0.0"
    port: int = 8000
    reload: bool = False
    log_level: str = "INFO"


def normalize_prefix(prefix: str) -> str:
    """Return '' or a '/segment' style prefix without trailing slash."""
    p = (prefix or "").strip().strip("/")
    return f"/{p}" if p else ""


def load_settings() -> Settings:
    secret = os.getenv("TDDAPP_SECRET_KEY") or os.getenv("SECRET_KEY")
    if not secret:
        logger.warning("TDDAPP_SECRET_KEY not set; sessions will not survive a restart")
        secret = secrets.token_urlsafe(32)

    return Settings(
        secret_key=secret,
        cookie_name=os.getenv("TDDAPP_COOKIE_NAME", "tddapp_session"),
        session_max_age=_int("TDDAPP_SESSION_MAX_AGE", 28800),
        cookie_secure=_flag("TDDAPP_COOKIE_SECURE"),
        users_path=Path(os.getenv("TDDAPP_USERS_PATH", str(BASE_DIR / "data" / "users.yml"))).resolve(),
        static_prefix=normalize_prefix(os.getenv("TDDAPP_STATIC_PREFIX", "")),
        host=os.getenv("TDDAPP_HOST", "0.0.0.0"),
        port=_int("TDDAPP_PORT", 8000),
        reload=_flag("TDDAPP_RELOAD"),
        log_level=os.getenv("TDDAPP_LOG_LEVEL", "INFO").upper(),
    )
