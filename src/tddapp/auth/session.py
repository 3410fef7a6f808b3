# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

from typing import Any, Dict, Protocol

from itsdangerous import BadSignature, URLSafeTimedSerializer
from starlette.requests import Request
from starlette.responses import Response

USER_SID_KEY = "user_sid"
DEFAULT_SALT = "tddapp.session.v1"


class SessionStore(Protocol):
    def load(self, request: Request) -> Dict[str, Any]:
        ...

    def save(self, request: Request, response: Response, data: Dict[str, Any]) -> None:
        ...


class CookieSessionStore:
    """Keeps the whole session dict in one signed, timestamped cookie."""

    def __init__(
        self,
        secret_key: str,
        *,
        cookie_name: str = "tddapp_session",
        max_age: int = 28800,
        secure: bool = False,
        salt: str = DEFAULT_SALT,
    ):
        if not secret_key:
            raise ValueError("CookieSessionStore needs a secret key")
        self.cookie_name = cookie_name
        self.max_age = max_age
        self.secure = secure
        self._serializer = URLSafeTimedSerializer(secret_key=secret_key, salt=salt)

    def cookie_settings(self) -> dict:
        return {"httponly": True, "samesite": "lax", "secure": self.secure}

    def load(self, request: Request) -> Dict[str, Any]:
        token = request.cookies.get(self.cookie_name, "")
        if not token:
            return {}
        try:
            data = self._serializer.loads(token, max_age=self.max_age)
        except BadSignature:
            # BadTimeSignature / SignatureExpired are subclasses
            return {}
        return dict(data) if isinstance(data, dict) else {}

    def save(self, request: Request, response: Response, data: Dict[str, Any]) -> None:
        if not data:
            response.delete_cookie(self.cookie_name, **self.cookie_settings())
            return
        response.set_cookie(
            self.cookie_name,
            self._serializer.dumps(dict(data)),
            max_age=self.max_age,
            **self.cookie_settings(),
        )


class Session:
    def __init__(self, store: SessionStore):
        self.store = store

    def get_user_sid(self, request: Request) -> str:
        sid = self.store.load(request).get(USER_SID_KEY) or ""
        return str(sid).strip()

    def set_user_sid(self, request: Request, response: Response, sid: str) -> None:
        data = self.store.load(request)
        data[USER_SID_KEY] = sid
        self.store.save(request, response, data)

    def clear(self, request: Request, response: Response) -> None:
        self.store.save(request, response, {})
