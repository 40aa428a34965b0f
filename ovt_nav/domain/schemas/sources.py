"""
Wire payloads returned by the upstream sources.

Sources speak camelCase JSON; fields are aliased so the models can be built
from either the raw payload or Python keyword arguments.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, NonNegativeInt, model_validator

from ovt_nav.domain.models import PortfolioPosition


class _SourceModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class DistributionStats(_SourceModel):
    total_supply: NonNegativeInt = Field(alias="totalSupply")
    treasury_held: NonNegativeInt = Field(alias="treasuryHeld")
    lp_held: NonNegativeInt = Field(default=0, alias="lpHeld")
    distributed: NonNegativeInt
    percent_distributed: float = Field(default=0.0, alias="percentDistributed")
    percent_in_lp: float = Field(default=0.0, alias="percentInLP")
    treasury_addresses: List[str] = Field(default_factory=list, alias="treasuryAddresses")
    lp_addresses: List[str] = Field(default_factory=list, alias="lpAddresses")
    distribution_events: List[Dict[str, Any]] = Field(default_factory=list, alias="distributionEvents")

    @model_validator(mode="after")
    def _check_supply(self) -> "DistributionStats":
        if self.distributed + self.treasury_held + self.lp_held > self.total_supply:
            raise ValueError("distribution categories exceed total supply")
        return self


class RuneSupply(_SourceModel):
    total: NonNegativeInt
    distributed: NonNegativeInt = 0
    treasury: NonNegativeInt = 0
    percent_distributed: float = Field(default=0.0, alias="percentDistributed")


class RuneInfo(_SourceModel):
    id: str
    symbol: str
    supply: RuneSupply
    events: List[Dict[str, Any]] = Field(default_factory=list)


class RuneBalance(_SourceModel):
    address: str
    amount: NonNegativeInt
    is_distributed: bool = Field(default=False, alias="isDistributed")


class PortfolioItemPayload(_SourceModel):
    name: str
    value: NonNegativeInt
    current: Optional[NonNegativeInt] = None
    change: float = 0.0
    description: str = ""
    token_amount: float = Field(default=0.0, alias="tokenAmount")
    price_per_token: float = Field(default=0.0, alias="pricePerToken")
    address: str = ""

    def to_position(self) -> PortfolioPosition:
        # ``value`` is authoritative; a stale ``current`` is dropped
        return PortfolioPosition(
            name=self.name,
            value=self.value,
            change=self.change,
            description=self.description,
            token_amount=self.token_amount,
            price_per_token=self.price_per_token,
            address=self.address,
        )


class NAVPayload(_SourceModel):
    value: NonNegativeInt = 0
    portfolio_items: List[PortfolioItemPayload] = Field(default_factory=list, alias="portfolioItems")

    def positions(self) -> List[PortfolioPosition]:
        return [item.to_position() for item in self.portfolio_items]


class TradeResult(_SourceModel):
    side: str
    amount: float
    txid: Optional[str] = None
    status: str = "confirmed"
    price: Optional[float] = None
