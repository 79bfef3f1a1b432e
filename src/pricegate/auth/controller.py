# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import logging
from typing import Callable

from pricegate.auth.errors import ConflictError, InvalidCredentialError, NotFoundError, ValidationError
from pricegate.auth.gate import SessionGate
from pricegate.auth.passwords import compute_password_hash, make_salt, verify_password
from pricegate.auth.session import SessionRecord, SessionStore
from pricegate.auth.users import Account, CredentialStore
from pricegate.core.utils import canon_identity, now_ms

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6


class AuthController:
    """Signup and login flows.

    Nothing here awaits, so one submit runs validation, lookup, digest,
    write and session transition before the next submit is looked at.
    """

    def __init__(
        self,
        credentials: CredentialStore,
        sessions: SessionStore,
        gate: SessionGate,
        clock: Callable[[], int] = now_ms,
    ) -> None:
        self.credentials = credentials
        self.sessions = sessions
        self.gate = gate
        self._clock = clock

    def register_account(self, identity: str, secret: str, secret_confirmation: str) -> Account:
        """Validate and persist a new account without touching the session."""
        email = canon_identity(identity)
        secret = secret or ""
        if not email or not secret:
            raise ValidationError("missing credentials")
        if len(secret) < MIN_PASSWORD_LENGTH:
            raise ValidationError("secret too short")
        if secret != (secret_confirmation or ""):
            raise ValidationError("mismatch")
        if self.credentials.find_by_identity(email) is not None:
            raise ConflictError("account exists")

        salt = make_salt()
        account = Account(
            email=email,
            salt=salt,
            password_hash=compute_password_hash(salt, secret),
            created_at=self._clock(),
        )
        self.credentials.add_account(account)
        logger.info("account created: %s", email)
        return account

    def signup(self, identity: str, secret: str, secret_confirmation: str) -> Account:
        account = self.register_account(identity, secret, secret_confirmation)
        self.sessions.set_session(account.email)
        self.gate.enter_authenticated()
        return account

    def login(self, identity: str, secret: str) -> SessionRecord:
        email = canon_identity(identity)
        account = self.credentials.find_by_identity(email)
        if account is None:
            raise NotFoundError("no account")
        if not verify_password(account.salt, secret or "", account.password_hash):
            raise InvalidCredentialError("wrong secret")
        rec = self.sessions.set_session(email)
        self.gate.enter_authenticated()
        return rec
