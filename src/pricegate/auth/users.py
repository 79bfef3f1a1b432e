# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Optional

from pricegate.auth.errors import ConflictError
from pricegate.core.utils import canon_identity
from pricegate.infra.storage import KeyValueStorage, load_json, save_json

USERS_KEY = "auth.users.v1"


@dataclass(frozen=True)
class Account:
    email: str
    salt: str
    password_hash: str
    created_at: int

    def to_dict(self) -> dict:
        return {
            "email": self.email,
            "salt": self.salt,
            "passwordHash": self.password_hash,
            "createdAt": self.created_at,
        }


def _account_from_dict(udata: object) -> Optional[Account]:
    if not isinstance(udata, dict):
        return None
    email = canon_identity(str(udata.get("email") or ""))
    if not email:
        return None
    try:
        created_at = int(udata.get("createdAt") or 0)
    except (TypeError, ValueError):
        created_at = 0
    return Account(
        email=email,
        salt=str(udata.get("salt") or ""),
        password_hash=str(udata.get("passwordHash") or "").strip(),
        created_at=created_at,
    )


class CredentialStore:
    """Ordered account collection persisted whole under ``auth.users.v1``."""

    def __init__(self, storage: KeyValueStorage) -> None:
        self.storage = storage

    def list_accounts(self) -> List[Account]:
        raw = load_json(self.storage, USERS_KEY, default=[])
        if not isinstance(raw, list):
            return []
        out: List[Account] = []
        for item in raw:
            acc = _account_from_dict(item)
            if acc is not None:
                out.append(acc)
        return out

    def save_accounts(self, accounts: Iterable[Account]) -> None:
        save_json(self.storage, USERS_KEY, [a.to_dict() for a in accounts])

    def find_by_identity(self, identity: str) -> Optional[Account]:
        email = canon_identity(identity)
        if not email:
            return None
        for acc in self.list_accounts():
            if acc.email == email:
                return acc
        return None

    def add_account(self, account: Account) -> None:
        accounts = self.list_accounts()
        if any(a.email == account.email for a in accounts):
            raise ConflictError("account exists")
        accounts.append(account)
        self.save_accounts(accounts)
