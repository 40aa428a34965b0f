"""
OVT NAV aggregator.

Client-side view of the OVT fund's net asset value, rune distribution and
BTC price, merged from independent upstream sources.
"""

__version__ = "0.1.0"
