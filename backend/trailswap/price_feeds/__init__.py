"""
Price Feeds Module

Provides the price source abstraction for the monitor loop.

Components:
- PriceSource: Abstract base class for price data sources
- JupiterPriceFeed: Jupiter aggregator price API
"""

from trailswap.price_feeds.base import PriceSource

__all__ = [
    "PriceSource",
]
