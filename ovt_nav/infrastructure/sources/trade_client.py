"""
HTTP trade executor. The transport is opaque: it posts an amount and reads
back a trade result or a user-facing failure reason.
"""

from __future__ import annotations

import logging

import httpx
from pydantic import ValidationError

from ovt_nav.domain.errors import TradeExecutionFailed
from ovt_nav.domain.schemas.sources import TradeResult

logger = logging.getLogger(__name__)


class HttpTradeExecutor:
    def __init__(self, api_base_url: str, timeout_seconds: float = 60.0):
        self.api_base_url = api_base_url.rstrip("/")
        self.timeout_seconds = timeout_seconds

    async def buy(self, amount: float) -> TradeResult:
        return await self._submit("buy", amount)

    async def sell(self, amount: float) -> TradeResult:
        return await self._submit("sell", amount)

    async def _submit(self, side: str, amount: float) -> TradeResult:
        url = f"{self.api_base_url}/{side}"
        try:
            async with httpx.AsyncClient(timeout=self.timeout_seconds) as client:
                response = await client.post(url, json={"amount": amount})
        except httpx.HTTPError as exc:
            logger.warning("Trade %s request failed: %s", side, exc)
            raise TradeExecutionFailed("Trade service unavailable", side=side) from exc

        try:
            body = response.json()
        except ValueError:
            body = {}

        if response.status_code != 200:
            reason = body.get("error") if isinstance(body, dict) else None
            raise TradeExecutionFailed(reason or f"Trade rejected ({response.status_code})", side=side)

        try:
            return TradeResult.model_validate({"side": side, "amount": amount, **body})
        except (ValidationError, TypeError) as exc:
            raise TradeExecutionFailed("Invalid trade response", side=side) from exc
