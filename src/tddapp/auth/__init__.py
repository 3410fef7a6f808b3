# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Authentication helpers.

This package provides:
- Password hashing/verification (argon2)
- User lookup by email, backed by data/users.yml
- A session wrapper over pluggable stores (signed cookies via itsdangerous)
"""
