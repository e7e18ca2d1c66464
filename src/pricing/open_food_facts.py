"""
Open Food Facts Price Source
============================
Looks up a competitor price through the Open Food Facts v2 search API.

Each lookup is one GET request, throttled by MinIntervalRateLimiter so the
per-minute quota is never exceeded. Every failure mode (network error,
timeout, non-2xx status, malformed JSON, no priced product) is caught here
and reported as "no competitor price" for that one item.

Search term: the item name without "2%", "500ml", "750g" style noise,
truncated to 50 characters.
"""

import re
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Optional

import httpx
from loguru import logger

from models import CompetitorQuote
from pricing.base import PriceSource
from pricing.rate_limiter import MinIntervalRateLimiter


OFF_SEARCH_URL = "https://world.openfoodfacts.org/api/v2/search"
DEFAULT_MIN_INTERVAL = 7.0        # ~8 req/min, under the 10/min ceiling
DEFAULT_TIMEOUT = 10.0
_MAX_TERM_LENGTH = 50

_TERM_NOISE = re.compile(r'\d+%|\d+ml|\d+g', re.IGNORECASE)


def search_term(item_name: str) -> str:
    term = _TERM_NOISE.sub('', item_name).strip() or item_name
    return term[:_MAX_TERM_LENGTH]


def _positive_decimal(value: Any) -> Optional[Decimal]:
    if value is None or isinstance(value, bool):
        return None
    try:
        number = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return None
    if not number.is_finite() or number <= 0:
        return None
    return number


def price_from_response(data: Any) -> Optional[Decimal]:
    """First product with a positive price (or compared price) wins."""
    if not isinstance(data, dict):
        return None
    products = [p for p in (data.get("products") or []) if isinstance(p, dict)]

    for product in products:
        price = _positive_decimal(product.get("price"))
        if price is not None:
            return price
        compared = product.get("compared_prices") or []
        if compared and isinstance(compared[0], dict):
            price = _positive_decimal(compared[0].get("value"))
            if price is not None:
                return price
    return None


class OpenFoodFactsPriceSource(PriceSource):
    """
    Usage
    -----
    source = OpenFoodFactsPriceSource()
    quote = await source.lookup("Lucerne Milk 2L", Decimal("5.49"))
    await source.aclose()
    """

    name = "open_food_facts"
    default_store_label = "Open Food Facts"

    def __init__(
        self,
        base_url: str = OFF_SEARCH_URL,
        page_size: int = 3,
        timeout: float = DEFAULT_TIMEOUT,
        rate_limiter: Optional[MinIntervalRateLimiter] = None,
        client: Optional[httpx.AsyncClient] = None,
        user_agent: str = "receipt-price-advocate/1.0",
    ):
        self.base_url = base_url
        self.page_size = page_size
        self.rate_limiter = rate_limiter or MinIntervalRateLimiter(DEFAULT_MIN_INTERVAL)
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            timeout=timeout,
            headers={"User-Agent": user_agent},
        )

    async def lookup(self, item_name: str, receipt_price: Decimal) -> Optional[CompetitorQuote]:
        params: Dict[str, str] = {
            "search_terms": search_term(item_name),
            "page_size": str(self.page_size),
            "fields": "product_name,price,compared_prices",
        }

        await self.rate_limiter.acquire()
        try:
            response = await self._client.get(self.base_url, params=params)
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPError as e:
            logger.warning(f"[OpenFoodFacts] lookup failed for {item_name!r}: {e}")
            return None
        except ValueError as e:
            logger.warning(f"[OpenFoodFacts] malformed response for {item_name!r}: {e}")
            return None

        price = price_from_response(data)
        if price is None:
            logger.debug(f"[OpenFoodFacts] no priced product for {item_name!r}")
            return None
        return CompetitorQuote(price=price, store_label=self.default_store_label)

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()
