# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

from dataclasses import dataclass

from fastapi import HTTPException, Request

from pricegate.auth.controller import AuthController
from pricegate.auth.gate import SessionGate


@dataclass(frozen=True)
class CurrentUser:
    email: str


def get_gate(request: Request) -> SessionGate:
    return request.app.state.gate


def get_controller(request: Request) -> AuthController:
    return request.app.state.controller


def require_user(request: Request) -> CurrentUser:
    gate = get_gate(request)
    if not gate.is_authenticated:
        raise HTTPException(status_code=401, detail="Not authenticated")
    return CurrentUser(email=gate.whoami)
