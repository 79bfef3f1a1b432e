# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Session gate: decides whether the price view is unlocked.

Two states, no expiry. The initial state comes from the session slot at
process start; afterwards only explicit transitions move it.
"""

from __future__ import annotations

import enum
import logging
from typing import Protocol

from pricegate.auth.session import SessionStore

logger = logging.getLogger(__name__)


class GateState(str, enum.Enum):
    UNAUTHENTICATED = "unauthenticated"
    AUTHENTICATED = "authenticated"


class PriceFeedLike(Protocol):
    def start(self) -> None: ...

    def stop(self) -> None: ...


class SessionGate:
    def __init__(self, sessions: SessionStore, price_feed: PriceFeedLike) -> None:
        self.sessions = sessions
        self.price_feed = price_feed
        self._state = GateState.UNAUTHENTICATED
        self._whoami = ""

    @property
    def state(self) -> GateState:
        return self._state

    @property
    def is_authenticated(self) -> bool:
        return self._state is GateState.AUTHENTICATED

    @property
    def whoami(self) -> str:
        return self._whoami

    def restore(self) -> GateState:
        # Dangling sessions (no matching account) are trusted as-is.
        sess = self.sessions.get_session()
        if sess and sess.email:
            self.enter_authenticated()
        else:
            self.enter_unauthenticated()
        return self._state

    def enter_authenticated(self) -> None:
        sess = self.sessions.get_session()
        self._whoami = sess.email if sess else ""
        self._state = GateState.AUTHENTICATED
        logger.info("session gate: authenticated as %s", self._whoami)
        # start() cancels any previous poll timer
        self.price_feed.start()

    def enter_unauthenticated(self) -> None:
        self._whoami = ""
        self._state = GateState.UNAUTHENTICATED
        self.price_feed.stop()

    def logout(self) -> None:
        who = self._whoami
        self.sessions.clear_session()
        self.enter_unauthenticated()
        logger.info("session gate: signed out %s", who or "(anonymous)")
