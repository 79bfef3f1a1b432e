# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import hashlib
import hmac
import secrets

SALT_BYTES = 16


def digest(material: str) -> str:
    """SHA-256 of the UTF-8 encoded material as 64 lowercase hex chars."""
    return hashlib.sha256(material.encode("utf-8")).hexdigest()


def make_salt() -> str:
    return secrets.token_hex(SALT_BYTES)


def compute_password_hash(salt: str, plain: str) -> str:
    return digest(f"{salt}:{plain}")


def verify_password(salt: str, plain: str, hash_value: str) -> bool:
    if not hash_value:
        return False
    return hmac.compare_digest(compute_password_hash(salt, plain), hash_value)
