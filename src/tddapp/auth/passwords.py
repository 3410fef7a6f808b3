# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

from functools import lru_cache

from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError

_PH = PasswordHasher()


def hash_password(plain: str) -> str:
    if not plain:
        raise ValueError("Empty password")
    return _PH.hash(plain)


@lru_cache(maxsize=1)
def decoy_hash() -> str:
    """Hash checked in place of a missing stored hash."""
    return _PH.hash("tddapp.decoy")


def verify_password(hash_value: str, plain: str) -> bool:
    """True only when ``plain`` matches ``hash_value``.

    Empty or malformed input is a mismatch. An empty ``hash_value`` is still
    verified against the decoy so the call takes an argon2 round either way.
    """
    if not plain:
        return False
    try:
        matched = _PH.verify(hash_value or decoy_hash(), plain)
    except (VerificationError, InvalidHashError):
        return False
    return matched and bool(hash_value)
