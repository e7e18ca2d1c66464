"""
Price Source Factory
====================
Picks the price source once, at startup, from configuration:

    comparison:
      price_source: catalog | open_food_facts | simulated

Unknown names fall back to the local catalog.
"""

from typing import Dict, Optional

from loguru import logger

from pricing.base import PriceSource
from pricing.catalog_matcher import CatalogMatcher, load_catalog
from pricing.open_food_facts import OFF_SEARCH_URL, OpenFoodFactsPriceSource
from pricing.rate_limiter import MinIntervalRateLimiter
from pricing.simulated import SimulatedPriceSource


SUPPORTED_SOURCES = ("catalog", "open_food_facts", "simulated")


def create_price_source(config: Optional[Dict] = None) -> PriceSource:
    """Build the configured price source."""
    config = config or {}
    source_name = config.get("comparison", {}).get("price_source", "catalog")

    if source_name not in SUPPORTED_SOURCES:
        logger.warning(
            f"[PriceSourceFactory] Unknown price source '{source_name}', "
            f"falling back to catalog"
        )
        source_name = "catalog"

    if source_name == "open_food_facts":
        off = config.get("open_food_facts", {})
        source = OpenFoodFactsPriceSource(
            base_url=off.get("base_url", OFF_SEARCH_URL),
            page_size=off.get("page_size", 3),
            timeout=off.get("timeout_seconds", 10.0),
            rate_limiter=MinIntervalRateLimiter(off.get("min_interval_seconds", 7.0)),
        )
    elif source_name == "simulated":
        sim = config.get("simulated", {})
        source = SimulatedPriceSource(
            coverage=sim.get("coverage", 0.7),
            min_discount=sim.get("min_discount", 0.05),
            max_discount=sim.get("max_discount", 0.15),
            seed=sim.get("seed"),
        )
    else:
        catalog_path = config.get("catalog", {}).get("path")
        catalog = load_catalog(catalog_path) if catalog_path else None
        source = CatalogMatcher(catalog)

    logger.info(f"[PriceSourceFactory] Using price source '{source.name}'")
    return source
