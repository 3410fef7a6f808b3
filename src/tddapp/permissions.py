# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

from fastapi import HTTPException, Request

LOGIN_URL = "/login"
HOME_URL = "/"


def load_sid_from_request(request: Request) -> str:
    return request.app.state.session.get_user_sid(request)


def current_user_sid(request: Request) -> str:
    sid = getattr(request.state, "user_sid", None)
    if sid is not None:
        return sid
    return load_sid_from_request(request)


def require_user(request: Request) -> str:
    sid = current_user_sid(request)
    if sid:
        return sid
    raise HTTPException(status_code=302, headers={"Location": LOGIN_URL})


def require_guest(request: Request) -> None:
    if current_user_sid(request):
        raise HTTPException(status_code=302, headers={"Location": HOME_URL})
