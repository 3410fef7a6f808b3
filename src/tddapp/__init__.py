# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Demo web app: routing, session-backed login, static files and views.

Build the ASGI app with ``tddapp.app.create_app``; run it with ``python -m tddapp``.
"""
