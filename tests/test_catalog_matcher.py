"""
Tests for Catalog Matcher
"""

import asyncio
import pytest
import sys
from decimal import Decimal
from pathlib import Path
from types import MappingProxyType

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from models import CatalogEntry
from pricing.catalog_matcher import (
    DEFAULT_CATALOG,
    CatalogMatcher,
    load_catalog,
    normalize_item_name,
)


@pytest.fixture
def matcher():
    return CatalogMatcher()


def test_brand_and_size_stripped(matcher):
    """Lucerne Milk 2L resolves to the same entry as plain milk"""
    entry = matcher.match("Lucerne Milk 2L")

    assert entry is not None
    assert entry == matcher.match("milk")
    assert entry.canonical_key == "milk"
    assert entry.price == Decimal("4.49")
    assert entry.store_label == "Superstore"


@pytest.mark.parametrize("name, expected", [
    ("Lucerne Milk 2L", "milk"),
    ("President's Choice Organic Eggs 12 pk", "eggs 12 pk"),
    ("NO NAME  Pasta, 900 g", "pasta"),
    ("Kirkland Coffee 1.36 kg", "coffee"),
])
def test_normalize_item_name(name, expected):
    assert normalize_item_name(name) == expected


def test_exact_match_first(matcher):
    assert matcher.fuzzy_match_key("Bread White") == "bread white"
    assert matcher.fuzzy_match_key("Milk Whole") == "milk whole"


def test_single_word_match(matcher):
    assert matcher.fuzzy_match_key("Whole Wheat Bread Loaf") == "bread"


def test_adjacent_pair_match():
    catalog = MappingProxyType({
        "ice cream": CatalogEntry("ice cream", Decimal("6.99"), "Superstore"),
    })
    matcher = CatalogMatcher(catalog)

    assert matcher.fuzzy_match_key("Chapman's Ice Cream 2L") == "ice cream"
    assert matcher.fuzzy_match_key("Cream Cheese") is None


@pytest.mark.parametrize("name", ["", "Gift Card", "12.99", "Lucerne"])
def test_no_match(matcher, name):
    assert matcher.match(name) is None


def test_default_catalog_read_only():
    with pytest.raises(TypeError):
        DEFAULT_CATALOG["milk"] = None


def test_lookup_returns_quote(matcher):
    quote = asyncio.run(matcher.lookup("Great Value Bananas", Decimal("1.29")))

    assert quote.price == Decimal("0.79")
    assert quote.store_label == "Superstore"


def test_lookup_miss(matcher):
    assert asyncio.run(matcher.lookup("Gift Card", Decimal("25.00"))) is None


def test_load_catalog(tmp_path):
    path = tmp_path / "catalog.yaml"
    path.write_text(
        "Oat Milk:\n  price: 4.79\n  store: Save-On\n"
        "tofu:\n  price: 2.99\n",
        encoding="utf-8",
    )

    catalog = load_catalog(path)

    assert set(catalog) == {"oat milk", "tofu"}
    assert catalog["oat milk"].price == Decimal("4.79")
    assert catalog["oat milk"].store_label == "Save-On"
    assert catalog["tofu"].store_label == "Superstore"
    assert CatalogMatcher(catalog).match("Oat Milk 1.75L").canonical_key == "oat milk"


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
