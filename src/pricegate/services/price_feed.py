# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""ETH price ticker shown once the session gate is open.

The feed polls the CoinGecko simple-price endpoint every ``interval_seconds``
and keeps the latest quote plus the direction of each currency against the
previous quote (the UI paints "up"/"down"). ``start()`` always cancels the
previous poll task first, so at most one is live.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
import math
import time
from dataclasses import asdict, dataclass
from datetime import datetime
from typing import Callable, List, Optional, Tuple

import httpx

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://api.coingecko.com/api/v3/simple/price?ids=ethereum&vs_currencies=usd,inr"
DEFAULT_INTERVAL_SECONDS = 10
FAILED_TO_LOAD = "Failed to load"


def _direction(current: float, previous: Optional[float]) -> Optional[str]:
    if previous is None:
        return None
    return "up" if current > previous else "down"


def format_usd(value: Optional[float]) -> str:
    if value is None:
        return ""
    v = float(value)
    return f"${int(v)}" if v.is_integer() else f"${v!r}"


def format_inr(value: Optional[float]) -> str:
    """Rupee amount with Indian digit grouping, e.g. ``₹1,23,456.78``."""
    if value is None:
        return ""
    v = float(value)
    sign = "-" if v < 0 else ""
    text = f"{abs(v):.3f}".rstrip("0").rstrip(".")
    whole, _, frac = text.partition(".")
    if len(whole) > 3:
        head, tail = whole[:-3], whole[-3:]
        groups = []
        while len(head) > 2:
            groups.insert(0, head[-2:])
            head = head[:-2]
        if head:
            groups.insert(0, head)
        whole = ",".join(groups + [tail])
    return f"₹{sign}{whole}" + (f".{frac}" if frac else "")


@dataclass(frozen=True)
class PriceSnapshot:
    usd: Optional[float] = None
    inr: Optional[float] = None
    usd_direction: Optional[str] = None
    inr_direction: Optional[str] = None
    last_updated: str = ""
    error: str = ""
    next_update_in: int = 0
    running: bool = False

    def to_dict(self) -> dict:
        out = asdict(self)
        out["usd_display"] = self.error or format_usd(self.usd)
        out["inr_display"] = "" if self.error else format_inr(self.inr)
        return out


class PriceFeed:
    def __init__(
        self,
        api_url: str = DEFAULT_API_URL,
        interval_seconds: int = DEFAULT_INTERVAL_SECONDS,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.api_url = api_url
        self.interval_seconds = max(1, int(interval_seconds))
        self.timeout = timeout
        self._transport = transport
        self._clock = clock
        self._task: Optional[asyncio.Task] = None
        self._cancelled: List[asyncio.Task] = []
        self._next_at = 0.0
        self._snapshot = PriceSnapshot()
        self._last_good: Tuple[Optional[float], Optional[float]] = (None, None)

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def fetch_once(self) -> PriceSnapshot:
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                resp = await client.get(self.api_url)
                resp.raise_for_status()
                data = resp.json()
            usd = float(data["ethereum"]["usd"])
            inr = float(data["ethereum"]["inr"])
        except (httpx.HTTPError, httpx.InvalidURL, ValueError, OverflowError, KeyError, TypeError) as exc:
            logger.warning("Error fetching Ethereum price from %s: %s", self.api_url, exc)
            # _last_good stays as the reference for the next direction
            self._snapshot = PriceSnapshot(error=FAILED_TO_LOAD)
            return self._snapshot

        last_usd, last_inr = self._last_good
        self._snapshot = PriceSnapshot(
            usd=usd,
            inr=inr,
            usd_direction=_direction(usd, last_usd),
            inr_direction=_direction(inr, last_inr),
            last_updated=datetime.now().strftime("%H:%M:%S"),
        )
        self._last_good = (usd, inr)
        return self._snapshot

    async def _run(self) -> None:
        while True:
            try:
                await self.fetch_once()
            except Exception:
                logger.exception("Unexpected error polling %s", self.api_url)
                self._snapshot = PriceSnapshot(error=FAILED_TO_LOAD)
            self._next_at = self._clock() + self.interval_seconds
            await asyncio.sleep(self.interval_seconds)

    def start(self) -> None:
        loop = asyncio.get_running_loop()
        self.stop()
        self._next_at = self._clock() + self.interval_seconds
        self._task = loop.create_task(self._run())

    def stop(self) -> None:
        if self._task is not None:
            self._task.cancel()
            self._cancelled = [t for t in self._cancelled if not t.done()]
            self._cancelled.append(self._task)
            self._task = None

    async def aclose(self) -> None:
        """Stop polling and wait for every cancelled poll task to finish."""
        self.stop()
        pending, self._cancelled = self._cancelled, []
        for task in pending:
            with contextlib.suppress(asyncio.CancelledError):
                await task

    def snapshot(self) -> PriceSnapshot:
        remaining = 0
        if self.running:
            remaining = max(0, math.ceil(self._next_at - self._clock()))
        s = self._snapshot
        return PriceSnapshot(
            usd=s.usd,
            inr=s.inr,
            usd_direction=s.usd_direction,
            inr_direction=s.inr_direction,
            last_updated=s.last_updated,
            error=s.error,
            next_update_in=remaining,
            running=self.running,
        )


class NullPriceFeed:
    """Collaborator for contexts without an event loop (scripts, CLI)."""

    def start(self) -> None:
        pass

    def stop(self) -> None:
        pass

    async def aclose(self) -> None:
        pass

    def snapshot(self) -> PriceSnapshot:
        return PriceSnapshot()
