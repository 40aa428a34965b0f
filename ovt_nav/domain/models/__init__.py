"""
Domain Models Package
Export all domain entities
"""

from .nav import (
    SATS_PER_BTC,
    ChangePeriod,
    Currency,
    LoadState,
    NAVSnapshot,
    PortfolioPosition,
    TokenDistribution,
)

__all__ = [
    "SATS_PER_BTC",
    "ChangePeriod",
    "Currency",
    "LoadState",
    "NAVSnapshot",
    "PortfolioPosition",
    "TokenDistribution",
]
