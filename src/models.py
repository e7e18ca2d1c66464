"""
Domain Models
=============
Immutable value records passed between pipeline stages.

  ParsedLineItem    one purchased line (LineItemExtractor → ComparisonEngine)
  StoreExtraction   issuing merchant + reward tier (StoreIdentifier)
  CatalogEntry      one row of the reference price catalog
  CompetitorQuote   what a price source returns for a single lookup
  PriceComparison   one comparison row for display
  ParsedReceipt     normalized text + store + items for one transcript
  ScanResult        everything produced by a full scan

Money is decimal.Decimal throughout; floats never touch a price.
"""

from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from enum import Enum
from typing import Dict, Optional, Tuple

MAX_ITEM_PRICE = Decimal("9999")

_CENT = Decimal("0.01")


def round2(value: Decimal) -> Decimal:
    """Round a money amount to cents (half-up, like a till)."""
    return Decimal(value).quantize(_CENT, rounding=ROUND_HALF_UP)


class StoreType(str, Enum):
    """Reward tier of the issuing merchant."""

    LOCAL_GEM = "Local Gem"
    STANDARD = "Standard"


@dataclass(frozen=True)
class ParsedLineItem:
    """A single line item read off a receipt.

    ``quantity`` is a unit count for counted lines and a weight in
    kilograms for weighted lines, so it may be fractional.
    """

    item_name: str
    price: Decimal
    quantity: Decimal = Decimal(1)

    def __post_init__(self):
        # frozen: coerce ints/strings through object.__setattr__
        for name in ("price", "quantity"):
            value = getattr(self, name)
            if not isinstance(value, Decimal):
                object.__setattr__(self, name, Decimal(str(value)))
        if not self.item_name:
            raise ValueError("item_name must be non-empty")
        if not self.price.is_finite() or self.price <= 0 or self.price > MAX_ITEM_PRICE:
            raise ValueError(f"price out of range: {self.price}")
        if not self.quantity.is_finite() or self.quantity <= 0:
            raise ValueError(f"quantity out of range: {self.quantity}")

    @property
    def line_total(self) -> Decimal:
        return self.price * self.quantity


@dataclass(frozen=True)
class StoreExtraction:
    store_name: Optional[str]
    store_type: StoreType = StoreType.STANDARD


@dataclass(frozen=True)
class CatalogEntry:
    canonical_key: str
    price: Decimal
    store_label: str


@dataclass(frozen=True)
class CompetitorQuote:
    price: Decimal
    store_label: str


@dataclass(frozen=True)
class PriceComparison:
    """
    One receipt line set against a competitor price.

    Savings and questionable are independent flags: a markup big enough
    to be questionable always has positive savings too. ``display_status``
    picks the single treatment a row gets:

        questionable  markup before rounding >= threshold
        savings       competitor cheaper, but under the threshold
        market        competitor price known, not cheaper
        unmatched     no competitor price
    """

    item_name: str
    receipt_price: Decimal
    competitor_price: Optional[Decimal]
    savings: Decimal
    store_name: str
    over_market_percent: Optional[Decimal] = None
    is_questionable: bool = False
    estimated_delivery_price: Optional[Decimal] = None

    @property
    def has_savings(self) -> bool:
        return self.competitor_price is not None and self.savings > 0

    @property
    def display_status(self) -> str:
        if self.competitor_price is None:
            return "unmatched"
        if self.is_questionable:
            return "questionable"
        if self.has_savings:
            return "savings"
        return "market"


@dataclass(frozen=True)
class ParsedReceipt:
    normalized_text: str
    store: StoreExtraction
    items: Tuple[ParsedLineItem, ...] = ()


@dataclass(frozen=True)
class ScanResult:
    receipt_id: Optional[str]
    store: StoreExtraction
    items: Tuple[ParsedLineItem, ...] = ()
    comparisons: Tuple[PriceComparison, ...] = ()
    price_rows: Tuple[Dict, ...] = ()

    @property
    def total_savings(self) -> Decimal:
        return round2(sum((c.savings for c in self.comparisons), Decimal(0)))
