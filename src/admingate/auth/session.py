# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

from itsdangerous import BadData, SignatureExpired, URLSafeTimedSerializer

from admingate.config import DEFAULT_TOKEN_TTL_SECONDS

logger = logging.getLogger(__name__)

TOKEN_SALT = "admingate.session.v1"


@dataclass(frozen=True)
class SessionClaims:
    identity: str
    is_admin: bool
    expires_at: int

    def to_dict(self) -> Dict[str, Any]:
        return {"identity": self.identity, "isAdmin": self.is_admin}


class TokenIssuer:
    """Mints and checks signed, time-bounded admin tokens.

    The secret is handed in at construction; nothing here reads the
    environment. ``clock`` exists so tests can issue tokens in the past.
    """

    def __init__(
        self,
        secret_key: str,
        *,
        ttl: int = DEFAULT_TOKEN_TTL_SECONDS,
        clock: Callable[[], float] = time.time,
    ):
        if not secret_key:
            raise ValueError("secret_key is required")
        self.ttl = int(ttl)
        self._clock = clock
        self._serializer = URLSafeTimedSerializer(secret_key=secret_key, salt=TOKEN_SALT)

    def issue(self, identity: str) -> str:
        expires_at = int(self._clock()) + self.ttl
        return self._serializer.dumps({"identity": identity, "isAdmin": True, "exp": expires_at})

    def verify(self, token: str) -> Optional[SessionClaims]:
        """Return the token's claims, or None. Never raises."""
        if not token:
            return None
        try:
            data = self._serializer.loads(token, max_age=self.ttl)
        except SignatureExpired:
            logger.debug("token rejected: expired (max_age)")
            return None
        except BadData:
            logger.debug("token rejected: bad signature or malformed")
            return None

        if not isinstance(data, dict):
            logger.debug("token rejected: payload is not a mapping")
            return None
        identity = str(data.get("identity") or "").strip()
        exp = data.get("exp")
        if not identity or not isinstance(exp, int):
            logger.debug("token rejected: missing claims")
            return None
        if exp <= int(self._clock()):
            logger.debug("token rejected: expired (exp claim)")
            return None
        return SessionClaims(identity=identity, is_admin=data.get("isAdmin") is True, expires_at=exp)
