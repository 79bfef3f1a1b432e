import sys
from pathlib import Path as _Path
sys.path.insert(0, str(_Path(__file__).resolve().parents[1] / "src"))

from pathlib import Path

import pytest

from pricegate.auth.controller import AuthController
from pricegate.auth.gate import SessionGate
from pricegate.auth.session import SessionStore
from pricegate.auth.users import CredentialStore
from pricegate.config import Settings
from pricegate.infra.storage import MemoryStorage
from pricegate.services.price_feed import PriceSnapshot


class FakePriceFeed:
    """Records start/stop calls instead of polling the network."""

    def __init__(self):
        self.starts = 0
        self.stops = 0
        self.closed = False
        self.running = False

    def start(self):
        self.starts += 1
        self.running = True

    def stop(self):
        self.stops += 1
        self.running = False

    async def aclose(self):
        self.stop()
        self.closed = True

    def snapshot(self):
        return PriceSnapshot(
            usd=2345.5,
            inr=195432.25,
            usd_direction="up",
            inr_direction="down",
            last_updated="12:00:00",
            next_update_in=7,
            running=self.running,
        )


class FixedClock:
    def __init__(self, start: int = 1_700_000_000_000):
        self.now = start

    def __call__(self) -> int:
        self.now += 1
        return self.now


@pytest.fixture()
def storage() -> MemoryStorage:
    return MemoryStorage()


@pytest.fixture()
def price_feed() -> FakePriceFeed:
    return FakePriceFeed()


@pytest.fixture()
def clock() -> FixedClock:
    return FixedClock()


@pytest.fixture()
def credentials(storage) -> CredentialStore:
    return CredentialStore(storage)


@pytest.fixture()
def sessions(storage, clock) -> SessionStore:
    return SessionStore(storage, clock=clock)


@pytest.fixture()
def gate(sessions, price_feed) -> SessionGate:
    return SessionGate(sessions, price_feed)


@pytest.fixture()
def controller(credentials, sessions, gate, clock) -> AuthController:
    return AuthController(credentials, sessions, gate, clock=clock)


@pytest.fixture()
def settings(tmp_path: Path) -> Settings:
    return Settings(data_dir=tmp_path, storage_path=tmp_path / "storage.json", poll_interval=10)
