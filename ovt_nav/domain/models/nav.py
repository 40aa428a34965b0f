"""
DOMAIN MODELS - NAV SNAPSHOT

Immutable structures published by the aggregator.
No source access. No formatting.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Tuple

SATS_PER_BTC = 100_000_000


class Currency(str, Enum):
    BTC = "btc"
    USD = "usd"

    @classmethod
    def parse(cls, value: "Currency | str") -> "Currency":
        if isinstance(value, Currency):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise ValueError(f"Unsupported currency: {value!r}") from None


class LoadState(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"
    ERRORED = "errored"


@dataclass(frozen=True)
class PortfolioPosition:
    """
    One asset backing the fund. Values are in sats.

    ``current`` is an alias of ``value``; it is derived so the two
    can never diverge.
    """
    name: str
    value: int
    change: float = 0.0
    description: str = ""
    token_amount: float = 0.0
    price_per_token: float = 0.0
    address: str = ""

    @property
    def current(self) -> int:
        return self.value

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "value": self.value,
            "current": self.current,
            "change": self.change,
            "description": self.description,
            "tokenAmount": self.token_amount,
            "pricePerToken": self.price_per_token,
            "address": self.address,
        }


@dataclass(frozen=True)
class TokenDistribution:
    """
    Rune supply split.

    LP holdings are tracked as their own category and are never counted
    as distributed.
    """
    total_supply: int = 0
    distributed: int = 0
    treasury: int = 0
    lp_held: int = 0
    rune_id: str = ""
    rune_symbol: str = ""
    distribution_events: Tuple[Dict[str, Any], ...] = ()

    def __post_init__(self) -> None:
        for name in ("total_supply", "distributed", "treasury", "lp_held"):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must be non-negative")
        if self.distributed + self.treasury + self.lp_held > self.total_supply:
            raise ValueError("distributed + treasury + lp_held exceeds total_supply")

    @property
    def percent_distributed(self) -> float:
        if self.total_supply <= 0:
            return 0.0
        return self.distributed / self.total_supply * 100.0

    @property
    def percent_in_lp(self) -> float:
        if self.total_supply <= 0:
            return 0.0
        return self.lp_held / self.total_supply * 100.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "totalSupply": self.total_supply,
            "distributed": self.distributed,
            "treasury": self.treasury,
            "lpHeld": self.lp_held,
            "percentDistributed": self.percent_distributed,
            "percentInLP": self.percent_in_lp,
            "runeId": self.rune_id,
            "runeSymbol": self.rune_symbol,
            "distributionEvents": list(self.distribution_events),
        }


@dataclass(frozen=True)
class ChangePeriod:
    ovt: float = 0.0
    usd: float = 0.0


@dataclass(frozen=True)
class NAVSnapshot:
    """
    One internally-consistent published state of the aggregator.
    """
    total_value_sats: int = 0
    portfolio_items: Tuple[PortfolioPosition, ...] = ()
    token_distribution: TokenDistribution = field(default_factory=TokenDistribution)
    change_period: ChangePeriod = field(default_factory=ChangePeriod)

    def __post_init__(self) -> None:
        if self.total_value_sats < 0:
            raise ValueError("total_value_sats must be non-negative")

    @property
    def ovt_price_sats(self) -> float:
        """NAV per distributed token, 0 while nothing is distributed."""
        distributed = self.token_distribution.distributed
        if distributed <= 0:
            return 0.0
        return self.total_value_sats / distributed

    def to_dict(self) -> Dict[str, Any]:
        return {
            "totalValue": self.total_value_sats,
            "ovtPrice": self.ovt_price_sats,
            "portfolioItems": [item.to_dict() for item in self.portfolio_items],
            "tokenDistribution": self.token_distribution.to_dict(),
            "changePeriod": {
                "ovt": self.change_period.ovt,
                "usd": self.change_period.usd,
            },
        }
