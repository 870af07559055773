# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from admingate.errors import ConfigError

DEFAULT_TOKEN_TTL_SECONDS = 24 * 60 * 60
MIN_PASSWORD_LENGTH = 8

_TRUTHY = {"1", "true", "yes", "y", "on"}


@dataclass(frozen=True)
class Settings:
    secret_key: str
    data_dir: Path
    token_ttl: int = DEFAULT_TOKEN_TTL_SECONDS
    host: str = "0.0.0.0"
    port: int = 8000
    reload: bool = False
    log_level: str = "INFO"
    log_dir: str = ""
    cookie_secure: bool = False

    @property
    def admin_path(self) -> Path:
        return self.data_dir / "admin.yml"

    @property
    def appointments_path(self) -> Path:
        return self.data_dir / "appointments.yml"


def _env_int(env: Mapping[str, str], key: str, default: int) -> int:
    raw = str(env.get(key, "") or "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        raise ConfigError(f"{key} must be an integer", value=raw)


def _env_bool(env: Mapping[str, str], key: str, default: bool = False) -> bool:
    raw = str(env.get(key, "") or "").strip().lower()
    if not raw:
        return default
    return raw in _TRUTHY


def load_settings(env: Optional[Mapping[str, str]] = None) -> Settings:
    """Build Settings from the environment.

    The signing secret has no fallback: without ADMINGATE_SECRET_KEY (or
    SECRET_KEY) the service refuses to start.
    """
    env = os.environ if env is None else env
    secret = str(env.get("ADMINGATE_SECRET_KEY") or env.get("SECRET_KEY") or "").strip()
    if not secret:
        raise ConfigError("Missing ADMINGATE_SECRET_KEY (or SECRET_KEY) in environment")

    ttl = _env_int(env, "ADMINGATE_TOKEN_TTL", DEFAULT_TOKEN_TTL_SECONDS)
    if ttl <= 0:
        raise ConfigError("ADMINGATE_TOKEN_TTL must be positive", value=ttl)

    return Settings(
        secret_key=secret,
        data_dir=Path(env.get("ADMINGATE_DATA_DIR") or "data").resolve(),
        token_ttl=ttl,
        host=str(env.get("ADMINGATE_HOST") or "0.0.0.0"),
        port=_env_int(env, "ADMINGATE_PORT", 8000),
        reload=_env_bool(env, "ADMINGATE_RELOAD"),
        log_level=str(env.get("ADMINGATE_LOG_LEVEL") or "INFO").upper(),
        log_dir=str(env.get("ADMINGATE_LOG_DIR") or "").strip(),
        cookie_secure=_env_bool(env, "ADMINGATE_COOKIE_SECURE"),
    )


def cookie_settings(settings: Settings) -> dict:
    return {"httponly": True, "samesite": "lax", "secure": settings.cookie_secure}
