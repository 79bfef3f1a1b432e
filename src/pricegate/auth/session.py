# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional

from pricegate.core.utils import now_ms
from pricegate.infra.storage import KeyValueStorage, load_json, save_json

SESSION_KEY = "auth.session.v1"


@dataclass(frozen=True)
class SessionRecord:
    email: str
    ts: int


class SessionStore:
    """Single-slot record of the currently authenticated identity."""

    def __init__(self, storage: KeyValueStorage, clock: Callable[[], int] = now_ms) -> None:
        self.storage = storage
        self._clock = clock

    def get_session(self) -> Optional[SessionRecord]:
        data = load_json(self.storage, SESSION_KEY)
        if not isinstance(data, dict):
            return None
        email = data.get("email")
        if not isinstance(email, str):
            return None
        try:
            ts = int(data.get("ts") or 0)
        except (TypeError, ValueError):
            ts = 0
        return SessionRecord(email=email, ts=ts)

    def set_session(self, identity: str) -> SessionRecord:
        rec = SessionRecord(email=identity, ts=self._clock())
        save_json(self.storage, SESSION_KEY, {"email": rec.email, "ts": rec.ts})
        return rec

    def clear_session(self) -> None:
        self.storage.remove_item(SESSION_KEY)
