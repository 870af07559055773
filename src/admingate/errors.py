# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Error taxonomy for the admin surface.

Each error carries a stable ``code``, a terse ``user_message`` that is safe to
return to the caller, and the HTTP status it maps to. Internal context (for
logs only) goes into ``context`` and never reaches a response.
"""

from __future__ import annotations

from typing import Any, Dict


class AdminGateError(Exception):
    code = "error"
    status_code = 500
    default_message = "Unexpected error."

    def __init__(self, user_message: str = "", **context: Any):
        self.user_message = user_message or self.default_message
        self.context: Dict[str, Any] = context
        super().__init__(self.user_message)

    def to_dict(self) -> Dict[str, Any]:
        return {"success": False, "message": self.user_message}


class ValidationError(AdminGateError):
    code = "validation_error"
    status_code = 400
    default_message = "Invalid request."


class AlreadyExistsError(AdminGateError):
    code = "already_exists"
    status_code = 400
    default_message = "Admin account already exists."


class InvalidCredentialsError(AdminGateError):
    code = "invalid_credentials"
    status_code = 401
    default_message = "Invalid credentials."


class UnauthenticatedError(AdminGateError):
    code = "unauthenticated"
    status_code = 401
    default_message = "Authentication required."


class NotFoundError(AdminGateError):
    code = "not_found"
    status_code = 404
    default_message = "Not found."


class InternalError(AdminGateError):
    code = "internal_error"
    status_code = 500
    default_message = "Internal server error."


class StoreError(InternalError):
    default_message = "Credential store is unreadable."


class ConfigError(AdminGateError):
    code = "config_error"
    status_code = 500
    default_message = "Configuration error."
