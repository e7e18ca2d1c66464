"""
Catalog Matcher
===============
Best-effort match of a receipt item name against a static reference catalog.

Receipt names carry brand and package-size noise ("Lucerne Milk 2L") that
has to collapse to a generic catalog key ("milk") without a product ontology.

Normalization
-------------
  lower-case → punctuation to spaces → brand tokens removed
  → unit-size tokens (2l, 500 ml, 12oz ...) removed → whitespace collapsed

Matching precedence (first hit wins)
------------------------------------
  1. the whole normalized name is a key        "bread white"
  2. any single word is a key                  "lucerne milk 2l" → "milk"
  3. any adjacent word pair is a key           "fresh bread white loaf" → "bread white"
  4. None

The catalog is an immutable mapping built once at import. A different
catalog can be loaded from YAML with load_catalog().
"""

import re
from decimal import Decimal
from pathlib import Path
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional, Union

import yaml
from loguru import logger

from models import CatalogEntry, CompetitorQuote
from pricing.base import PriceSource


# ─── Reference market (Superstore, Vancouver) ────────────────────────────────

_DEFAULT_STORE = "Superstore"

_DEFAULT_PRICES: Dict[str, str] = {
    "milk": "4.49",
    "milk 2%": "4.49",
    "milk 2l": "4.49",
    "milk 1%": "4.49",
    "milk whole": "4.99",
    "eggs": "3.99",
    "eggs dozen": "3.99",
    "eggs large": "3.99",
    "bread": "2.49",
    "bread white": "2.49",
    "bread whole wheat": "2.99",
    "butter": "5.99",
    "cheese": "6.49",
    "yogurt": "3.49",
    "banana": "0.79",
    "bananas": "0.79",
    "apple": "1.29",
    "apples": "1.29",
    "chicken": "8.99",
    "beef": "12.99",
    "rice": "4.99",
    "pasta": "1.99",
    "cereal": "4.49",
    "coffee": "9.99",
    "juice": "3.99",
    "water": "2.49",
    "soda": "2.99",
    "chips": "3.49",
    "cookies": "2.99",
    "soup": "2.49",
    "tomato": "2.99",
    "tomatoes": "2.99",
    "potato": "1.49",
    "potatoes": "1.49",
    "onion": "1.29",
    "onions": "1.29",
    "lettuce": "2.49",
    "carrot": "1.99",
    "carrots": "1.99",
}

DEFAULT_CATALOG: Mapping[str, CatalogEntry] = MappingProxyType({
    key: CatalogEntry(canonical_key=key, price=Decimal(price), store_label=_DEFAULT_STORE)
    for key, price in _DEFAULT_PRICES.items()
})


# ─── Noise patterns ───────────────────────────────────────────────────────────

# Applied after punctuation is stripped, so "president's" is "president s".
_BRAND_PATTERN = re.compile(
    r"\b(lucerne|natrel|dairyland|saputo|black diamond|no name|pc\s*brand|pc|"
    r"president s choice|great value|kirkland|compliments|organic)\b"
)
_SIZE_PATTERN = re.compile(r"\b\d+(?:\s\d+)?\s*(?:ml|l|oz|g|kg|lb|lbs)\b")
_PUNCTUATION = re.compile(r"[^\w\s]")


def _collapse(text: str) -> str:
    return re.sub(r"\s+", " ", text).strip()


def normalize_item_name(item_name: str) -> str:
    """Reduce a receipt item name to its bare product words."""
    key = _collapse(_PUNCTUATION.sub(" ", (item_name or "").lower()))
    key = _collapse(_BRAND_PATTERN.sub(" ", key))
    key = _collapse(_SIZE_PATTERN.sub(" ", key))
    return key


def load_catalog(path: Union[str, Path]) -> Mapping[str, CatalogEntry]:
    """
    Load a catalog from YAML:

        milk: {price: 4.49, store: Superstore}
        eggs: {price: 3.99}
    """
    with open(path, "r", encoding="utf-8") as f:
        raw = yaml.safe_load(f) or {}

    entries = {}
    for key, row in raw.items():
        canonical = normalize_item_name(str(key)) or str(key).lower()
        entries[canonical] = CatalogEntry(
            canonical_key=canonical,
            price=Decimal(str(row["price"])),
            store_label=row.get("store", _DEFAULT_STORE),
        )
    logger.info(f"[CatalogMatcher] loaded {len(entries)} catalog entries from {path}")
    return MappingProxyType(entries)


class CatalogMatcher(PriceSource):
    """
    Usage
    -----
    matcher = CatalogMatcher()
    entry = matcher.match("Lucerne Milk 2L")   # CatalogEntry('milk', 4.49, 'Superstore')
    """

    name = "catalog"
    default_store_label = _DEFAULT_STORE

    def __init__(self, catalog: Optional[Mapping[str, CatalogEntry]] = None):
        self.catalog = catalog if catalog is not None else DEFAULT_CATALOG

    def fuzzy_match_key(self, item_name: str) -> Optional[str]:
        """Return the catalog key an item name resolves to, or None."""
        key = normalize_item_name(item_name)
        if not key:
            return None

        # ── 1. exact ─────────────────────────────────────────────────────────
        if key in self.catalog:
            return key

        words: List[str] = [w for w in key.split(" ") if len(w) > 1]

        # ── 2. single word ───────────────────────────────────────────────────
        for word in words:
            if word in self.catalog:
                return word

        # ── 3. adjacent pairs ────────────────────────────────────────────────
        for first, second in zip(words, words[1:]):
            pair = f"{first} {second}"
            if pair in self.catalog:
                return pair

        return None

    def match(self, item_name: str) -> Optional[CatalogEntry]:
        key = self.fuzzy_match_key(item_name)
        if key is None:
            logger.debug(f"[CatalogMatcher] no match for {item_name!r}")
            return None
        return self.catalog[key]

    async def lookup(self, item_name: str, receipt_price: Decimal) -> Optional[CompetitorQuote]:
        entry = self.match(item_name)
        if entry is None:
            return None
        return CompetitorQuote(price=entry.price, store_label=entry.store_label)
