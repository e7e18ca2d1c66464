"""
Simulated Price Source
======================
Stand-in market used when no real price source is configured.

About 70 % of items get a "competitor" price 5–15 % under what the shopper
paid; the rest get nothing. Pass a seed for reproducible runs.
"""

import random
from decimal import Decimal
from typing import Optional

from models import CompetitorQuote, round2
from pricing.base import PriceSource


class SimulatedPriceSource(PriceSource):

    name = "simulated"
    default_store_label = "Superstore (est.)"

    def __init__(
        self,
        coverage: float = 0.7,
        min_discount: float = 0.05,
        max_discount: float = 0.15,
        seed: Optional[int] = None,
    ):
        if not 0 <= coverage <= 1:
            raise ValueError("coverage must be between 0 and 1")
        if not 0 <= min_discount <= max_discount < 1:
            raise ValueError("discounts must satisfy 0 <= min <= max < 1")
        self.coverage = coverage
        self.min_discount = min_discount
        self.max_discount = max_discount
        self._random = random.Random(seed)

    async def lookup(self, item_name: str, receipt_price: Decimal) -> Optional[CompetitorQuote]:
        if self._random.random() >= self.coverage:
            return None
        discount = self._random.uniform(self.min_discount, self.max_discount)
        price = round2(receipt_price * (1 - Decimal(str(round(discount, 4)))))
        if price <= 0:
            return None
        return CompetitorQuote(price=price, store_label=self.default_store_label)
