# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from fastapi import Depends, FastAPI, Form, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import HTMLResponse, JSONResponse, RedirectResponse
from fastapi.templating import Jinja2Templates
from pydantic import BaseModel

from admingate.auth.session import SessionClaims, TokenIssuer
from admingate.auth.store import AdminStore
from admingate.config import Settings, cookie_settings, load_settings
from admingate.errors import AdminGateError, InvalidCredentialsError, ValidationError
from admingate.logging_setup import setup_logging
from admingate.permissions import AccessGateMiddleware, require_admin
from admingate.services.appointment_service import AppointmentRepo
from admingate.services.auth_service import AuthService
from admingate.ui.guard import UI_COOKIE_NAME, ClientSessionState, guard_view

logger = logging.getLogger(__name__)

BASE_DIR = Path(__file__).resolve().parent
templates = Jinja2Templates(directory=str(BASE_DIR / "templates"))


class CredentialsIn(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None


def _render(request: Request, template_name: str, ctx: dict, status_code: int = 200):
    """TemplateResponse wrapper injecting the UI session state."""
    base_ctx = {"ui_state": ClientSessionState.from_request(request)}
    merged = {**base_ctx, **(ctx or {})}
    return templates.TemplateResponse(request, template_name, merged, status_code=status_code)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build the app. Raises ConfigError when no signing secret is configured."""
    settings = settings or load_settings()
    setup_logging(settings.log_level, settings.log_dir)

    issuer = TokenIssuer(settings.secret_key, ttl=settings.token_ttl)
    auth = AuthService(AdminStore(settings.admin_path), issuer)
    appointments = AppointmentRepo(settings.appointments_path)

    app = FastAPI(title="admingate", version="0.1.0")
    app.state.settings = settings
    app.state.auth = auth
    app.middleware("http")(AccessGateMiddleware(issuer))

    @app.exception_handler(AdminGateError)
    async def admingate_error_handler(request: Request, exc: AdminGateError):
        if exc.status_code >= 500:
            logger.error("%s %s -> %s: %s %s", request.method, request.url.path, exc.code, exc.user_message, exc.context)
        else:
            logger.info("%s %s -> %s", request.method, request.url.path, exc.code)
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        err = ValidationError("Email and password are required.")
        logger.info("%s %s -> %s", request.method, request.url.path, err.code)
        return JSONResponse(status_code=err.status_code, content=err.to_dict())

    @app.exception_handler(Exception)
    async def unexpected_error_handler(request: Request, exc: Exception):
        # Starlette re-raises after this handler; the server logs the traceback.
        return JSONResponse(status_code=500, content={"success": False, "message": str(exc) or "Internal server error."})

    # ------------------ API ------------------

    @app.get("/health")
    def health():
        return {"status": "ok"}

    @app.get("/api/admin/setup-status")
    def setup_status():
        return auth.setup_status()

    @app.post("/api/admin/setup")
    def setup(payload: CredentialsIn):
        return auth.setup(payload.email, payload.password)

    @app.post("/api/admin/login")
    def login(payload: CredentialsIn):
        return auth.login(payload.email, payload.password)

    @app.get("/api/admin/verify")
    def verify(admin: SessionClaims = Depends(require_admin)):
        return auth.verify(admin)

    @app.get("/api/admin/appointments")
    def list_appointments(admin: SessionClaims = Depends(require_admin)):
        return {"success": True, "appointments": appointments.list_appointments()}

    # ------------------ HTML ------------------

    @app.get("/login", response_class=HTMLResponse)
    def login_get(request: Request):
        if ClientSessionState.from_request(request).is_authenticated:
            return RedirectResponse(url="/admin", status_code=303)
        return _render(request, "login.html", {"error": ""})

    @app.post("/login")
    def login_post(request: Request, email: str = Form(""), password: str = Form("")):
        try:
            auth.login(email, password)
        except (ValidationError, InvalidCredentialsError) as e:
            return _render(request, "login.html", {"error": e.user_message, "email": email}, status_code=e.status_code)
        state = ClientSessionState(is_authenticated=True, user={"email": email.strip()})
        resp = RedirectResponse(url="/admin", status_code=303)
        resp.set_cookie(UI_COOKIE_NAME, state.encode(), max_age=settings.token_ttl, **cookie_settings(settings))
        return resp

    @app.post("/logout")
    def logout_post():
        resp = RedirectResponse(url="/login", status_code=303)
        resp.delete_cookie(UI_COOKIE_NAME)
        return resp

    @app.get("/admin", response_class=HTMLResponse)
    def admin_home(request: Request):
        state = ClientSessionState.from_request(request)
        return guard_view(state, lambda: _render(request, "admin.html", {"user": state.user or {}}))

    return app
