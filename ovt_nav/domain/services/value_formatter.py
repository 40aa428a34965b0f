"""
VALUE FORMATTER

Render satoshi amounts for display in BTC or USD.

RULES:
- BTC: >= 1 BTC as "₿x.xx", >= 1,000 sats as "x.xk sats", else "n sats"
- USD: >= $1,000 as "$x.xk", else "$n" (cents only when not whole)
- Pure: the BTC/USD rate is an argument, nothing is cached
"""

from __future__ import annotations

from typing import Optional

from ovt_nav.domain.models import SATS_PER_BTC, Currency

SATS_COMPRESSION_THRESHOLD = 1_000
USD_COMPRESSION_THRESHOLD = 1_000


def sats_to_usd(amount_sats: int, btc_usd_rate: float) -> float:
    # multiply first so exact products (e.g. 1_000_000 * 50_000) stay exact
    return amount_sats * btc_usd_rate / SATS_PER_BTC


def _format_btc(amount_sats: int) -> str:
    if amount_sats >= SATS_PER_BTC:
        return f"₿{amount_sats / SATS_PER_BTC:.2f}"
    if amount_sats >= SATS_COMPRESSION_THRESHOLD:
        return f"{amount_sats / 1000:.1f}k sats"
    return f"{amount_sats} sats"


def _format_usd(usd: float) -> str:
    cents = round(usd, 2)
    if cents >= USD_COMPRESSION_THRESHOLD:
        return f"${cents / 1000:.1f}k"
    if cents == int(cents):
        return f"${int(cents)}"
    return f"${cents:.2f}"


def format_value(
    amount_sats: int,
    currency: Currency | str = Currency.BTC,
    btc_usd_rate: Optional[float] = None,
) -> str:
    """
    Format ``amount_sats`` in ``currency``.

    USD needs a positive ``btc_usd_rate``; without one the amount is
    rendered in BTC units instead.
    """
    currency = Currency.parse(currency)
    amount_sats = int(amount_sats)
    sign = "-" if amount_sats < 0 else ""
    magnitude = abs(amount_sats)

    if currency is Currency.USD and btc_usd_rate and btc_usd_rate > 0:
        return sign + _format_usd(sats_to_usd(magnitude, btc_usd_rate))
    return sign + _format_btc(magnitude)


def format_btc_price(btc_usd_rate: Optional[float]) -> str:
    if not btc_usd_rate or btc_usd_rate <= 0:
        return "—"
    return f"${btc_usd_rate:,.0f}"


def format_change(percent: float) -> str:
    """Signed percentage with two decimals, e.g. ``+1.25%``."""
    return f"{percent:+.2f}%"
