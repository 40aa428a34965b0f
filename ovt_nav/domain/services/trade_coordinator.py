"""
Trade completion handling.

Runs a buy or sell through the executor, then applies the synthetic market
impact and refreshes the NAV. The banner keeps the latest outcome.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import Any, Optional

from ovt_nav.domain.errors import TradeExecutionFailed
from ovt_nav.domain.schemas.sources import TradeResult
from ovt_nav.domain.services.price_movement import SyntheticPriceMovement, buy_bump, sell_bump
from ovt_nav.infrastructure.sources.types import TradeExecutor

logger = logging.getLogger(__name__)


@dataclass
class StatusBanner:
    error: Optional[str] = None
    success: Optional[str] = None

    def show_error(self, message: str) -> None:
        self.error = message
        self.success = None

    def show_success(self, message: str) -> None:
        self.success = message
        self.error = None

    def clear(self) -> None:
        self.error = None
        self.success = None


def parse_amount(amount: Any) -> Optional[float]:
    try:
        value = float(amount)
    except (TypeError, ValueError):
        return None
    if value != value or value <= 0:
        return None
    return value


def _display_amount(amount: float) -> str:
    return f"{amount:g}"


class TradeCoordinator:
    def __init__(
        self,
        executor: TradeExecutor,
        aggregator,
        price_movement: SyntheticPriceMovement,
        rng: Optional[random.Random] = None,
    ):
        self._executor = executor
        self._aggregator = aggregator
        self._price_movement = price_movement
        self._rng = rng or random.Random()
        self.banner = StatusBanner()
        self.is_submitting = False

    async def buy(self, amount: Any) -> Optional[TradeResult]:
        value = parse_amount(amount)
        if value is None:
            return None
        return await self._run(
            "buy",
            value,
            success=f"Successfully purchased {_display_amount(value)} OVT!",
            fallback="Error processing your purchase",
        )

    async def sell(self, amount: Any) -> Optional[TradeResult]:
        value = parse_amount(amount)
        if value is None:
            return None
        return await self._run(
            "sell",
            value,
            success=f"Successfully sold {_display_amount(value)} OVT!",
            fallback="Error processing your sale",
        )

    async def _run(self, side: str, amount: float, success: str, fallback: str) -> TradeResult:
        self.is_submitting = True
        self.banner.clear()
        try:
            call = self._executor.buy if side == "buy" else self._executor.sell
            try:
                result = await call(amount)
            except Exception as exc:
                message = str(exc) or fallback
                logger.info("Trade %s of %s failed: %s", side, amount, message)
                self.banner.show_error(message)
                if isinstance(exc, TradeExecutionFailed):
                    raise
                raise TradeExecutionFailed(message, side=side) from exc

            self.banner.show_success(success)
            bump = buy_bump(self._rng) if side == "buy" else sell_bump(self._rng)
            factor = self._price_movement.update(bump)
            logger.info("Trade %s of %s completed; NAV factor now %.6f", side, amount, factor)
        finally:
            self.is_submitting = False

        await self._aggregator.fetch_nav()
        return result
