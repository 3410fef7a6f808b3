# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

from pathlib import Path
from typing import Any, Callable, Dict, Mapping, Optional

from fastapi.templating import Jinja2Templates
from jinja2 import BaseLoader, Environment, FileSystemLoader, select_autoescape

BASE_DIR = Path(__file__).resolve().parent
TEMPLATES_DIR = BASE_DIR / "templates"


class Locale(dict):
    """Message key -> display string. Unknown keys render as the key."""

    def t(self, key: str) -> str:
        return self.get(key, key)


DEFAULT_LOCALE = Locale(
    {
        "app.title": "TDD demo",
        "nav.home": "Home",
        "nav.profile": "Profile",
        "nav.login": "Log in",
        "nav.register": "Register",
        "nav.logout": "Log out",
        "home.welcome": "You are signed in.",
        "login.title": "Log in",
        "login.email": "Email",
        "login.password": "Password",
        "login.submit": "Log in",
        "login.invalid": "Invalid email or password",
        "register.title": "Create an account",
        "register.help": "Accounts are created by an administrator with the create_user script.",
        "profile.title": "Your profile",
        "profile.sid": "Session identifier",
        "error.404": "Page not found",
        "error.405": "Method not allowed",
    }
)


def default_loader() -> BaseLoader:
    return FileSystemLoader(str(TEMPLATES_DIR))


def build_templates(
    loader: Optional[BaseLoader] = None,
    *,
    view_globals: Optional[Mapping[str, Callable[..., Any]]] = None,
    locale: Optional[Mapping[str, str]] = None,
) -> Jinja2Templates:
    loc = locale if isinstance(locale, Locale) else Locale(locale or DEFAULT_LOCALE)
    env = Environment(
        loader=loader or default_loader(),
        autoescape=select_autoescape(["html", "htm", "xml"], default_for_string=True),
    )
    env.globals["t"] = loc.t
    env.globals.update(view_globals or {})
    return Jinja2Templates(env=env)


def render(
    request,
    template_name: str,
    ctx: Optional[Dict[str, Any]] = None,
    *,
    status_code: int = 200,
    headers: Optional[Mapping[str, str]] = None,
):
    """TemplateResponse wrapper injecting the signed-in SID."""
    templates: Jinja2Templates = request.app.state.templates
    base_ctx = {"current_sid": getattr(request.state, "user_sid", "")}
    merged = {**base_ctx, **(ctx or {})}
    return templates.TemplateResponse(
        request, template_name, merged, status_code=status_code, headers=headers
    )
