# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""User-correctable auth failures.

Each error carries a short ``code`` (stable, used by tests and the JSON API)
and the inline ``message`` shown next to the form.
"""

from __future__ import annotations

MESSAGES = {
    "missing credentials": "Email and password are required.",
    "secret too short": "Password must be at least 6 characters.",
    "mismatch": "Passwords do not match.",
    "account exists": "Account already exists. Try logging in.",
    "no account": "No account found for this email.",
    "wrong secret": "Incorrect password.",
}


class AuthError(Exception):
    def __init__(self, code: str) -> None:
        self.code = code
        self.message = MESSAGES.get(code, code)
        super().__init__(code)


class ValidationError(AuthError):
    pass


class ConflictError(AuthError):
    pass


class NotFoundError(AuthError):
    pass


class InvalidCredentialError(AuthError):
    pass
