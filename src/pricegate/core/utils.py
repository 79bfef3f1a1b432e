# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import time

TRUTHY = {"1", "true", "yes", "y"}


def canon_identity(s: str) -> str:
    """Canonicalise account identities for comparisons (trim + lower)."""
    return (s or "").strip().lower()


def now_ms() -> int:
    """Current epoch time in milliseconds."""
    return int(time.time() * 1000)


def is_truthy(value: object) -> bool:
    return str(value or "").strip().lower() in TRUTHY
