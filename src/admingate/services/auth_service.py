# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Bootstrap and login handlers.

Lifecycle of the admin surface: ``uninitialized`` until ``setup`` succeeds
once, then ``initialized`` for good. Login and verify only make sense in the
initialized state; before it, login fails like any unknown identity.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from admingate.auth.passwords import hash_password, verify_password
from admingate.auth.session import SessionClaims, TokenIssuer
from admingate.auth.store import AdminStore
from admingate.config import MIN_PASSWORD_LENGTH
from admingate.errors import (
    AlreadyExistsError,
    InvalidCredentialsError,
    NotFoundError,
    ValidationError,
)

logger = logging.getLogger(__name__)

UNINITIALIZED = "uninitialized"
INITIALIZED = "initialized"

_DUMMY_HASH: Optional[str] = None


def _dummy_hash() -> str:
    global _DUMMY_HASH
    if _DUMMY_HASH is None:
        _DUMMY_HASH = hash_password("admingate-dummy-password")
    return _DUMMY_HASH


def _clean_credentials(email: Any, password: Any) -> tuple[str, str]:
    e = email.strip() if isinstance(email, str) else ""
    p = password if isinstance(password, str) else ""
    if not e or not p:
        raise ValidationError("Email and password are required.")
    return e, p


class AuthService:
    def __init__(self, store: AdminStore, issuer: TokenIssuer):
        self.store = store
        self.issuer = issuer

    @property
    def state(self) -> str:
        return INITIALIZED if self.store.exists() else UNINITIALIZED

    def setup_status(self) -> Dict[str, Any]:
        if self.state == UNINITIALIZED:
            return {"needsSetup": True, "message": "No admin account exists. Setup required."}
        return {"needsSetup": False, "message": "Admin account already configured."}

    def setup(self, email: Any, password: Any) -> Dict[str, Any]:
        if self.store.exists():
            logger.warning("setup refused: admin already exists")
            raise AlreadyExistsError()
        identity, plain = _clean_credentials(email, password)
        if len(plain) < MIN_PASSWORD_LENGTH:
            raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters long.")

        record = self.store.create(identity, hash_password(plain))
        logger.info("setup complete for %s", record.identity)
        return {
            "success": True,
            "message": "Admin account created.",
            "token": self.issuer.issue(record.identity),
        }

    def login(self, email: Any, password: Any) -> Dict[str, Any]:
        identity, plain = _clean_credentials(email, password)
        try:
            record = self.store.load()
        except NotFoundError:
            record = None

        if record is None or record.identity != identity:
            # Spend the same hashing time as a real check.
            verify_password(_dummy_hash(), plain)
            logger.info("login failed for %s: unknown identity", identity)
            raise InvalidCredentialsError()
        if not verify_password(record.password_hash, plain):
            logger.info("login failed for %s: wrong password", identity)
            raise InvalidCredentialsError()

        logger.info("login ok for %s", identity)
        return {
            "success": True,
            "message": "Login successful.",
            "token": self.issuer.issue(record.identity),
        }

    def verify(self, claims: SessionClaims) -> Dict[str, Any]:
        return {"success": True, "admin": claims.to_dict()}
