"""
Price Source
============
The one capability ComparisonEngine consumes:

    await source.lookup(item_name, receipt_price) -> CompetitorQuote | None

Implementations: CatalogMatcher (local table), OpenFoodFactsPriceSource
(rate-limited HTTP), SimulatedPriceSource (random discounts). The engine
never knows which one it is talking to.
"""

from abc import ABC, abstractmethod
from decimal import Decimal
from typing import Optional

from models import CompetitorQuote


class PriceSource(ABC):
    """Abstract competitor price lookup."""

    #: config name of the source
    name: str = "base"

    #: store label used for rows that get no quote
    default_store_label: str = "Superstore"

    @abstractmethod
    async def lookup(self, item_name: str, receipt_price: Decimal) -> Optional[CompetitorQuote]:
        """
        Return a competitor price for one item, or None when there is none.

        receipt_price is the line total the shopper paid; sources that only
        simulate a market use it as their baseline.
        """
        ...

    async def aclose(self) -> None:
        """Release network resources. Local sources have none."""
        return None
