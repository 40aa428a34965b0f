"""
Source protocols for type hints.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Protocol

from ovt_nav.domain.schemas.sources import (
    DistributionStats,
    NAVPayload,
    RuneBalance,
    RuneInfo,
    TradeResult,
)


@dataclass(frozen=True)
class BitcoinPrice:
    price: Optional[float]
    is_loading: bool = False
    error: Optional[str] = None


class TokenDistributionSource(Protocol):
    async def get_distribution_stats(self) -> DistributionStats:
        ...

    async def get_rune_info(self) -> RuneInfo:
        ...

    async def get_rune_balances(self) -> List[RuneBalance]:
        ...


class PortfolioValuationSource(Protocol):
    async def get_current_nav(self) -> NAVPayload:
        ...


class BitcoinPriceSource(Protocol):
    def current(self) -> BitcoinPrice:
        ...


class TradeExecutor(Protocol):
    async def buy(self, amount: float) -> TradeResult:
        ...

    async def sell(self, amount: float) -> TradeResult:
        ...
