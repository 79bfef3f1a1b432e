# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

from fastapi import APIRouter, Depends, FastAPI, Form, Request
from fastapi.responses import HTMLResponse, JSONResponse, RedirectResponse
from fastapi.staticfiles import StaticFiles
from fastapi.templating import Jinja2Templates

from pricegate.auth.controller import AuthController
from pricegate.auth.errors import AuthError
from pricegate.auth.gate import SessionGate
from pricegate.auth.session import SessionStore
from pricegate.auth.users import CredentialStore
from pricegate.config import Settings, load_settings
from pricegate.infra.storage import FileStorage, KeyValueStorage
from pricegate.permissions import CurrentUser, get_controller, get_gate, require_user
from pricegate.services.price_feed import PriceFeed

BASE_DIR = Path(__file__).resolve().parent

templates = Jinja2Templates(directory=str(BASE_DIR / "templates"))
router = APIRouter()


def _render(
    request: Request,
    *,
    tab: str = "login",
    login_error: str = "",
    signup_error: str = "",
    email: str = "",
):
    gate = get_gate(request)
    ctx = {
        "authenticated": gate.is_authenticated,
        "whoami": gate.whoami,
        "tab": tab,
        "login_error": login_error,
        "signup_error": signup_error,
        "email": email,
        "price": request.app.state.price_feed.snapshot().to_dict(),
        "poll_interval": request.app.state.settings.poll_interval,
    }
    return templates.TemplateResponse(request, "index.html", ctx)


# ------------------ Pages ------------------


@router.get("/", response_class=HTMLResponse)
async def home(request: Request):
    return _render(request)


@router.get("/login", response_class=HTMLResponse)
async def login_get(request: Request):
    if get_gate(request).is_authenticated:
        return RedirectResponse(url="/", status_code=303)
    return _render(request, tab="login")


@router.get("/signup", response_class=HTMLResponse)
async def signup_get(request: Request):
    if get_gate(request).is_authenticated:
        return RedirectResponse(url="/", status_code=303)
    return _render(request, tab="signup")


# ------------------ Form submits ------------------


@router.post("/login")
async def login_post(
    request: Request,
    email: str = Form(""),
    password: str = Form(""),
):
    controller: AuthController = get_controller(request)
    try:
        controller.login(email, password)
    except AuthError as exc:
        return _render(request, tab="login", login_error=exc.message, email=email.strip())
    return RedirectResponse(url="/", status_code=303)


@router.post("/signup")
async def signup_post(
    request: Request,
    email: str = Form(""),
    password: str = Form(""),
    password2: str = Form(""),
):
    controller: AuthController = get_controller(request)
    try:
        controller.signup(email, password, password2)
    except AuthError as exc:
        return _render(request, tab="signup", signup_error=exc.message, email=email.strip())
    return RedirectResponse(url="/", status_code=303)


@router.post("/logout")
async def logout_post(request: Request):
    get_gate(request).logout()
    return RedirectResponse(url="/login", status_code=303)


# ------------------ JSON ------------------


@router.get("/api/session")
async def session_get(request: Request):
    gate = get_gate(request)
    return {"authenticated": gate.is_authenticated, "email": gate.whoami}


@router.get("/api/price")
async def price_get(request: Request, user: CurrentUser = Depends(require_user)):
    return JSONResponse(request.app.state.price_feed.snapshot().to_dict())


def create_app(
    settings: Optional[Settings] = None,
    storage: Optional[KeyValueStorage] = None,
    price_feed=None,
) -> FastAPI:
    """Wire storage, stores, gate and controller into a FastAPI app.

    ``storage`` and ``price_feed`` default to the file storage under the data
    dir and the CoinGecko feed; tests pass in-memory/fake ones.
    """
    settings = settings or load_settings()
    if storage is None:
        storage = FileStorage(settings.storage_path)
    if price_feed is None:
        price_feed = PriceFeed(
            api_url=settings.price_api_url,
            interval_seconds=settings.poll_interval,
            timeout=settings.http_timeout,
        )

    sessions = SessionStore(storage)
    gate = SessionGate(sessions, price_feed)
    # Storage I/O is blocking and runs on the event loop; submits stay strictly ordered.
    controller = AuthController(CredentialStore(storage), sessions, gate)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        gate.restore()
        try:
            yield
        finally:
            await price_feed.aclose()

    app = FastAPI(title="PriceGate", lifespan=lifespan)
    app.state.settings = settings
    app.state.storage = storage
    app.state.price_feed = price_feed
    app.state.gate = gate
    app.state.controller = controller

    app.mount("/static", StaticFiles(directory=str(BASE_DIR / "static")), name="static")
    app.include_router(router)
    return app


app = create_app()
