# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional, Protocol, Tuple

import yaml

from tddapp.auth.passwords import verify_password

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class User:
    email: str
    password: str  # argon2 hash
    sid: str


class UserRepository(Protocol):
    def get_by_email(self, email: str) -> Optional[User]:
        ...


def canon_email(email: str) -> str:
    return (email or "").strip().lower()


class YamlUserRepository:
    """Users stored in a YAML file, reloaded whenever its mtime changes.

    Expected layout::

        version: 1
        users:
          jane@example.com:
            password_hash: "$argon2id$..."
            sid: "4f0c..."
    """

    def __init__(self, path: Path):
        self.path = Path(path)
        self._cache: Tuple[float, Dict[str, User]] = (0.0, {})

    def _load(self) -> Dict[str, User]:
        if not self.path.exists():
            return {}
        raw = yaml.safe_load(self.path.read_text(encoding="utf-8")) or {}
        users = (raw.get("users") or {}) if isinstance(raw, dict) else {}
        if not isinstance(users, dict):
            logger.warning("Ignoring %s: 'users' must be a mapping of email -> entry", self.path)
            users = {}
        out: Dict[str, User] = {}
        for email, udata in users.items():
            if not isinstance(udata, dict):
                continue
            key = canon_email(str(email))
            sid = str(udata.get("sid") or "").strip()
            if not key or not sid:
                logger.warning("Skipping incomplete user entry %r in %s", email, self.path)
                continue
            out[key] = User(
                email=key,
                password=str(udata.get("password_hash") or "").strip(),
                sid=sid,
            )
        return out

    def users(self) -> Dict[str, User]:
        try:
            mtime = self.path.stat().st_mtime
        except FileNotFoundError:
            mtime = 0.0

        cached_mtime, cached_users = self._cache
        if mtime and mtime == cached_mtime:
            return cached_users

        users = self._load()
        self._cache = (mtime, users)
        return users

    def get_by_email(self, email: str) -> Optional[User]:
        key = canon_email(email)
        if not key:
            return None
        return self.users().get(key)


def authenticate(repo: UserRepository, email: str, password: str) -> Optional[User]:
    u = repo.get_by_email(email)
    # unknown emails still pay for one hash check
    ok = verify_password(u.password if u else "", password)
    return u if u and ok else None
