#!/usr/bin/env python3
from __future__ import annotations

from getpass import getpass

from pricegate.auth.controller import AuthController
from pricegate.auth.errors import AuthError
from pricegate.auth.gate import SessionGate
from pricegate.auth.session import SessionStore
from pricegate.auth.users import CredentialStore
from pricegate.config import load_settings
from pricegate.infra.storage import FileStorage
from pricegate.services.price_feed import NullPriceFeed


def main() -> None:
    settings = load_settings()
    storage = FileStorage(settings.storage_path)
    sessions = SessionStore(storage)
    controller = AuthController(
        CredentialStore(storage),
        sessions,
        SessionGate(sessions, NullPriceFeed()),
    )

    email = input("Email: ").strip()
    pw1 = getpass("Password: ")
    pw2 = getpass("Repeat password: ")

    try:
        account = controller.register_account(email, pw1, pw2)
    except AuthError as exc:
        raise SystemExit(exc.message)

    print(f"OK {account.email} -> {settings.storage_path}")


if __name__ == "__main__":
    main()
