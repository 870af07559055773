# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Access gate for /api/admin routes.

The middleware decodes the bearer token once per request and leaves the
result on ``request.state.admin``. Protected routes depend on
``require_admin``, which turns a missing or rejected token into a 401.
"""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import Request

from admingate.auth.session import SessionClaims, TokenIssuer
from admingate.errors import UnauthenticatedError

logger = logging.getLogger(__name__)

BEARER_PREFIX = "Bearer "


def bearer_token(request: Request) -> str:
    header = request.headers.get("Authorization", "")
    if not header.startswith(BEARER_PREFIX):
        return ""
    return header[len(BEARER_PREFIX):].strip()


class AccessGateMiddleware:
    def __init__(self, issuer: TokenIssuer):
        self.issuer = issuer

    async def __call__(self, request: Request, call_next):  # noqa: ANN001
        request.state.admin = self.issuer.verify(bearer_token(request))
        return await call_next(request)


def current_admin_optional(request: Request) -> Optional[SessionClaims]:
    return getattr(request.state, "admin", None)


def require_admin(request: Request) -> SessionClaims:
    claims = current_admin_optional(request)
    if claims is not None and claims.is_admin is True:
        return claims

    if not bearer_token(request):
        reason = "no_token"
    elif claims is None:
        reason = "invalid_token"
    else:
        reason = "not_admin"
    logger.info("access denied to %s: %s", request.url.path, reason)
    raise UnauthenticatedError(reason=reason)
