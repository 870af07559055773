#!/usr/bin/env python3
from __future__ import annotations

from getpass import getpass

from admingate.auth.session import TokenIssuer
from admingate.auth.store import AdminStore
from admingate.config import load_settings
from admingate.errors import AdminGateError
from admingate.services.auth_service import AuthService


def main() -> None:
    settings = load_settings()
    auth = AuthService(AdminStore(settings.admin_path), TokenIssuer(settings.secret_key, ttl=settings.token_ttl))
    if not auth.setup_status()["needsSetup"]:
        raise SystemExit(f"Admin already configured -> {settings.admin_path}")

    email = input("Email: ").strip()
    pw1 = getpass("Password: ")
    pw2 = getpass("Repeat password: ")
    if pw1 != pw2:
        raise SystemExit("Passwords do not match")

    try:
        auth.setup(email, pw1)
    except AdminGateError as e:
        raise SystemExit(e.user_message)
    print(f"OK -> {settings.admin_path}")


if __name__ == "__main__":
    main()
