#!/usr/bin/env python3
from __future__ import annotations

import secrets
from getpass import getpass

import yaml

from tddapp.auth.passwords import hash_password
from tddapp.auth.users import canon_email
from tddapp.config import load_settings


def main() -> None:
    users_path = load_settings().users_path
    users_path.parent.mkdir(parents=True, exist_ok=True)
    if users_path.exists():
        raw = yaml.safe_load(users_path.read_text(encoding="utf-8")) or {}
    else:
        raw = {"version": 1, "users": {}}

    if "users" not in raw or not isinstance(raw["users"], dict):
        raw["users"] = {}

    email = canon_email(input("Email: "))
    if not email or "@" not in email:
        raise SystemExit("Invalid email")

    pw1 = getpass("Password: ")
    pw2 = getpass("Repeat password: ")
    if pw1 != pw2:
        raise SystemExit("Passwords do not match")

    existing = raw["users"].get(email) or {}
    raw["users"][email] = {
        "password_hash": hash_password(pw1),
        "sid": existing.get("sid") or secrets.token_hex(16),
    }

    users_path.write_text(yaml.safe_dump(raw, sort_keys=False, allow_unicode=True), encoding="utf-8")
    print(f"OK -> {users_path}")


if __name__ == "__main__":
    main()
