"""
Pricing package: competitor price lookups for ComparisonEngine.

Every source implements PriceSource.lookup(item_name, receipt_price):

  CatalogMatcher             local reference table, no I/O
  OpenFoodFactsPriceSource   Open Food Facts search, rate-limited
  SimulatedPriceSource       random discounts, for demos

Usage
-----
from pricing import create_price_source
source = create_price_source(config)
"""

from pricing.base import PriceSource
from pricing.catalog_matcher import CatalogMatcher
from pricing.factory import create_price_source
from pricing.open_food_facts import OpenFoodFactsPriceSource
from pricing.rate_limiter import MinIntervalRateLimiter
from pricing.simulated import SimulatedPriceSource

__all__ = [
    "PriceSource",
    "CatalogMatcher",
    "OpenFoodFactsPriceSource",
    "SimulatedPriceSource",
    "MinIntervalRateLimiter",
    "create_price_source",
]
