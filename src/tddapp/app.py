# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import logging
from typing import Any, Callable, Mapping, Optional

from fastapi import Depends, FastAPI, Form, HTTPException, Request
from fastapi.exception_handlers import http_exception_handler
from fastapi.responses import HTMLResponse, RedirectResponse
from jinja2 import BaseLoader
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.routing import Match

from tddapp.auth.session import CookieSessionStore, Session
from tddapp.auth.users import UserRepository, YamlUserRepository, authenticate
from tddapp.config import Settings, load_settings, normalize_prefix
from tddapp.permissions import HOME_URL, LOGIN_URL, load_sid_from_request, require_guest, require_user
from tddapp.static import StaticFS, default_fs
from tddapp.views import DEFAULT_LOCALE, Locale, build_templates, render

ERROR_PAGES = {404: "error.404", 405: "error.405"}


def allowed_methods(request: Request) -> set:
    """Methods of the routes matching the request path but not its method."""
    allowed: set = set()
    for route in request.app.router.routes:
        match, _ = route.matches(request.scope)
        if match == Match.PARTIAL:
            allowed.update(getattr(route, "methods", None) or ())
    return allowed


def create_app(
    *,
    settings: Optional[Settings] = None,
    session: Optional[Session] = None,
    user_repository: Optional[UserRepository] = None,
    static_fs: Optional[StaticFS] = None,
    static_prefix: Optional[str] = None,
    views: Optional[BaseLoader] = None,
    view_globals: Optional[Mapping[str, Callable[..., Any]]] = None,
    locale: Optional[Mapping[str, str]] = None,
    logger: Optional[logging.Logger] = None,
) -> FastAPI:
    """Build the application. Every collaborator left as None gets its default."""
    settings = settings or load_settings()
    log = logger or logging.getLogger("tddapp")

    if session is None:
        session = Session(
            CookieSessionStore(
                settings.secret_key,
                cookie_name=settings.cookie_name,
                max_age=settings.session_max_age,
                secure=settings.cookie_secure,
            )
        )
    prefix = normalize_prefix(settings.static_prefix if static_prefix is None else static_prefix)
    loc = Locale(locale or DEFAULT_LOCALE)

    if user_repository is None:
        user_repository = YamlUserRepository(settings.users_path)
    if static_fs is None:
        static_fs = default_fs()

    app = FastAPI(docs_url=None, redoc_url=None, openapi_url=None, redirect_slashes=False)
    app.state.settings = settings
    app.state.session = session
    app.state.user_repository = user_repository
    app.state.static_fs = static_fs
    app.state.static_prefix = prefix
    app.state.locale = loc
    app.state.logger = log
    helpers = {"static_url": lambda p: f"{prefix}/{str(p).lstrip('/')}"}
    helpers.update(view_globals or {})
    app.state.templates = build_templates(views, view_globals=helpers, locale=loc)

    @app.middleware("http")
    async def _session_middleware(request: Request, call_next):
        request.state.user_sid = load_sid_from_request(request)
        return await call_next(request)

    @app.exception_handler(StarletteHTTPException)
    async def _http_error(request: Request, exc: StarletteHTTPException):
        key = ERROR_PAGES.get(exc.status_code)
        if key is None:
            return await http_exception_handler(request, exc)
        return render(
            request,
            "error.html",
            {"status_code": exc.status_code, "message": loc.t(key)},
            status_code=exc.status_code,
            headers=exc.headers,
        )

    # ------------------ Routes ------------------

    @app.get("/", response_class=HTMLResponse)
    def home(request: Request, sid: str = Depends(require_user)):
        return render(request, "home.html", {"sid": sid})

    @app.get("/profile", response_class=HTMLResponse)
    def profile(request: Request, sid: str = Depends(require_user)):
        return render(request, "profile.html", {"sid": sid})

    @app.get("/login", response_class=HTMLResponse, dependencies=[Depends(require_guest)])
    def login_get(request: Request):
        return render(request, "login.html", {"email": "", "error": ""})

    @app.post("/login", dependencies=[Depends(require_guest)])
    def login_post(
        request: Request,
        email: str = Form(""),
        password: str = Form(""),
    ):
        u = authenticate(request.app.state.user_repository, email, password)
        if not u:
            log.warning("Failed login for %r", email)
            return render(
                request,
                "login.html",
                {"email": email, "error": loc.t("login.invalid")},
                status_code=401,
            )
        resp = RedirectResponse(url=HOME_URL, status_code=302)
        session.set_user_sid(request, resp, u.sid)
        log.info("User %s logged in", u.email)
        return resp

    @app.get("/register", response_class=HTMLResponse, dependencies=[Depends(require_guest)])
    def register_get(request: Request):
        return render(request, "register.html")

    @app.post("/logout")
    def logout_post(request: Request):
        resp = RedirectResponse(url=LOGIN_URL, status_code=302)
        session.clear(request, resp)
        log.info("Session cleared")
        return resp

    # Registered last so that, without a prefix, explicit routes win.
    @app.get(prefix + "/{path:path}", include_in_schema=False)
    def static_file(request: Request, path: str):
        allowed = allowed_methods(request)
        if allowed:
            raise HTTPException(status_code=405, headers={"Allow": ", ".join(sorted(allowed))})
        try:
            return app.state.static_fs.response(path)
        except FileNotFoundError:
            log.debug("Static file not found: %r", path)
            raise HTTPException(status_code=404)

    log.info(
        "App ready (static prefix=%r, session store=%s)",
        prefix or "/",
        type(session.store).__name__,
    )
    return app
