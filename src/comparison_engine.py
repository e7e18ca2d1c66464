"""
Comparison Engine
=================
Sets each receipt line against a competitor price and derives two signals:

  savings        competitor is cheaper → receipt_price - competitor_price
  questionable   markup over the competitor >= advocacy threshold (20 %)

The two are computed independently and both kept on the record; a markup
that is questionable always has savings too. PriceComparison.display_status
picks one treatment for display (questionable wins).

Lookups run one item at a time, in order. A price source that raises is
treated as "no competitor price" for that item only; cancellation is the
one exception that is allowed through.
"""

import asyncio
from decimal import Decimal
from typing import Iterable, List, Optional

from loguru import logger

from models import CompetitorQuote, ParsedLineItem, PriceComparison, round2
from pricing.base import PriceSource


ADVOCACY_THRESHOLD = Decimal("0.20")
DELIVERY_MARKUP_PERCENT = Decimal("0.18")

_PERCENT_PLACES = Decimal("0.0001")


def estimate_delivery_price(
    price: Decimal,
    markup_percent: Decimal = DELIVERY_MARKUP_PERCENT,
) -> Decimal:
    """What a delivery app would typically charge for the same line."""
    return round2(Decimal(price) * (1 + Decimal(markup_percent)))


class ComparisonEngine:
    """
    Usage
    -----
    engine = ComparisonEngine()
    comparisons = await engine.compare(items, CatalogMatcher())
    """

    def __init__(
        self,
        advocacy_threshold: Decimal = ADVOCACY_THRESHOLD,
        delivery_markup_percent: Decimal = DELIVERY_MARKUP_PERCENT,
    ):
        self.advocacy_threshold = Decimal(str(advocacy_threshold))
        self.delivery_markup_percent = Decimal(str(delivery_markup_percent))

    async def compare(
        self,
        items: Iterable[ParsedLineItem],
        price_source: PriceSource,
    ) -> List[PriceComparison]:
        comparisons: List[PriceComparison] = []

        for item in items:
            receipt_price = item.line_total
            quote = await self._lookup(price_source, item.item_name, receipt_price)
            comparisons.append(self.compare_one(item, quote, price_source))

        flagged = sum(1 for c in comparisons if c.is_questionable)
        logger.info(
            f"[ComparisonEngine] {len(comparisons)} item(s) compared via "
            f"'{price_source.name}', {flagged} questionable"
        )
        return comparisons

    def compare_one(
        self,
        item: ParsedLineItem,
        quote: Optional[CompetitorQuote],
        price_source: PriceSource,
    ) -> PriceComparison:
        """Build the comparison row for one item from an already fetched quote."""
        receipt_price = item.line_total
        delivery = estimate_delivery_price(receipt_price, self.delivery_markup_percent)

        if quote is None:
            return PriceComparison(
                item_name=item.item_name,
                receipt_price=receipt_price,
                competitor_price=None,
                savings=Decimal("0"),
                store_name=price_source.default_store_label,
                estimated_delivery_price=delivery,
            )

        competitor_price = round2(quote.price)
        savings = Decimal("0")
        if competitor_price < receipt_price:
            savings = round2(receipt_price - competitor_price)

        over_market: Optional[Decimal] = None
        questionable = False
        if competitor_price > 0:
            ratio = (receipt_price - competitor_price) / competitor_price
            # threshold is checked before rounding so 19.996% never counts as 20%
            questionable = ratio >= self.advocacy_threshold
            over_market = ratio.quantize(_PERCENT_PLACES)

        return PriceComparison(
            item_name=item.item_name,
            receipt_price=receipt_price,
            competitor_price=competitor_price,
            savings=savings,
            store_name=quote.store_label,
            over_market_percent=over_market,
            is_questionable=questionable,
            estimated_delivery_price=delivery,
        )

    async def _lookup(
        self,
        price_source: PriceSource,
        item_name: str,
        receipt_price: Decimal,
    ) -> Optional[CompetitorQuote]:
        try:
            return await price_source.lookup(item_name, receipt_price)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logger.warning(
                f"[ComparisonEngine] price lookup failed for {item_name!r} "
                f"({price_source.name}): {e}"
            )
            return None
