"""
BTC/USD price source backed by the CoinGecko simple-price endpoint.

Refreshes itself on its own cadence; readers only ever see the latest
cached reading through ``current()``.
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Optional

from ovt_nav.domain.errors import SourceUnavailable
from ovt_nav.infrastructure.sources.http_client import JsonHttpSource
from ovt_nav.infrastructure.sources.types import BitcoinPrice

logger = logging.getLogger(__name__)


class CoinGeckoPriceSource(JsonHttpSource):
    source_name = "coingecko"

    def __init__(
        self,
        api_base_url: str = "https://api.coingecko.com/api/v3/simple/price",
        refresh_seconds: float = 60.0,
        cache_ttl_seconds: float = 30.0,
        timeout_seconds: float = 10.0,
        api_key: str = "",
    ):
        super().__init__(api_base_url, timeout_seconds)
        self.api_key = api_key
        self.refresh_seconds = refresh_seconds
        self.cache_ttl_seconds = cache_ttl_seconds
        self._price: Optional[float] = None
        self._error: Optional[str] = None
        self._fetched_at = 0.0
        self._task: Optional[asyncio.Task] = None

    def current(self) -> BitcoinPrice:
        return BitcoinPrice(
            price=self._price,
            is_loading=self._price is None and self._error is None,
            error=self._error,
        )

    async def refresh(self, force: bool = False) -> BitcoinPrice:
        if not force and self._price is not None and time.time() - self._fetched_at < self.cache_ttl_seconds:
            return self.current()

        params = {"ids": "bitcoin", "vs_currencies": "usd"}
        if self.api_key:
            params["x_cg_demo_api_key"] = self.api_key

        try:
            payload = await self._request_json(self.api_base_url, params=params)
            price = float(payload["bitcoin"]["usd"])
            if price <= 0:
                raise ValueError("non-positive price")
        except SourceUnavailable as exc:
            logger.warning("BTC price refresh failed: %s", exc)
            self._error = "Failed to fetch Bitcoin price"
            return self.current()
        except (KeyError, TypeError, ValueError) as exc:
            logger.warning("BTC price payload invalid: %s", exc)
            self._error = "Failed to fetch Bitcoin price"
            return self.current()

        self._price = price
        self._error = None
        self._fetched_at = time.time()
        return self.current()

    def start(self) -> None:
        if self._task is None or self._task.done():
            self._task = asyncio.create_task(self._run())

    async def stop(self) -> None:
        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None

    async def _run(self) -> None:
        while True:
            await self.refresh(force=True)
            await asyncio.sleep(self.refresh_seconds)
