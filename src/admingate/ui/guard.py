# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Route guard for the HTML admin pages.

It reads ClientSessionState, a plain (unsigned) cookie that mirrors whether
the browser believes it is logged in. The cookie is editable by the user, so
this only decides what to render; the API stays behind require_admin.
"""

from __future__ import annotations

import base64
import binascii
import json
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

from fastapi import Request
from fastapi.responses import RedirectResponse, Response

UI_COOKIE_NAME = "admingate_ui"
LOGIN_PATH = "/login"


@dataclass(frozen=True)
class ClientSessionState:
    is_authenticated: bool = False
    user: Optional[Dict[str, Any]] = None

    def encode(self) -> str:
        raw = json.dumps({"isAuthenticated": self.is_authenticated, "user": self.user}, separators=(",", ":"))
        return base64.urlsafe_b64encode(raw.encode("utf-8")).decode("ascii").rstrip("=")

    @classmethod
    def decode(cls, value: str) -> "ClientSessionState":
        if not value:
            return cls()
        try:
            padded = value + "=" * (-len(value) % 4)
            data = json.loads(base64.urlsafe_b64decode(padded.encode("ascii")).decode("utf-8"))
        except (ValueError, binascii.Error, UnicodeError):
            return cls()
        if not isinstance(data, dict):
            return cls()
        user = data.get("user")
        return cls(
            is_authenticated=data.get("isAuthenticated") is True,
            user=user if isinstance(user, dict) else None,
        )

    @classmethod
    def from_request(cls, request: Request) -> "ClientSessionState":
        return cls.decode(request.cookies.get(UI_COOKIE_NAME, ""))


def guard_view(state: ClientSessionState, render: Callable[[], Response]) -> Response:
    # 303 replaces the guarded URL in history instead of pushing it.
    if not state.is_authenticated:
        return RedirectResponse(url=LOGIN_PATH, status_code=303)
    return render()
