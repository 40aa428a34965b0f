from pydantic import BaseModel, Field, PositiveFloat
from typing import Any, Dict, Optional

from ovt_nav.domain.models import Currency


class NAVStateSchema(BaseModel):
    is_loading: bool
    error: Optional[str]
    state: str
    base_currency: Currency
    btc_price: Optional[float]
    btc_price_formatted: str
    formatted_total: str
    ovt_price: float
    formatted_ovt_price: str
    daily_change: float
    daily_change_formatted: str
    is_positive_change: bool
    nav_data: Dict[str, Any]


class CurrencyChangeRequest(BaseModel):
    currency: Currency


class TradeRequest(BaseModel):
    amount: PositiveFloat = Field(..., description="Amount of OVT to trade")


class TradeResponseSchema(BaseModel):
    success: bool
    message: str
    txid: Optional[str] = None
    nav: Optional[NAVStateSchema] = None
