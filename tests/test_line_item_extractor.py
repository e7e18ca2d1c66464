"""
Tests for Line Item Extractor
"""

import pytest
import sys
from decimal import Decimal
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from extractor import Accepted, LineItemExtractor, Rejected
from extractor.line_rules import generic_rule, looks_like_date, skip_rule, weighted_rule
from models import MAX_ITEM_PRICE


SAMPLE_RECEIPT = """\
SAFEWAY #4521
MAIN ST VANCOUVER BC
04/12/24
12:45
LUCERNE MILK 2L 6.49 G
2 x 1.49 BREAD
2.5kg @ 1.99/kg GROUND BEEF
BANANAS 0.79
BANANAS 0.79
SUBTOTAL 13.14
HST 3.15
TOTAL 45.00
DEBIT
"""


@pytest.fixture
def extractor():
    return LineItemExtractor()


# ─── Examples ────────────────────────────────────────────────────────────────

def test_percent_stays_in_name(extractor):
    items = extractor.extract("MILK 2% 4.99")

    assert len(items) == 1
    assert items[0].item_name == "MILK 2%"
    assert items[0].price == Decimal("4.99")
    assert items[0].quantity == 1


def test_quantity_prefix(extractor):
    items = extractor.extract("2 x 1.49 BREAD")

    assert len(items) == 1
    assert items[0].item_name == "BREAD"
    assert items[0].price == Decimal("1.49")
    assert items[0].quantity == 2


def test_quantity_prefix_at_sign(extractor):
    items = extractor.extract("3@ 2.99 APPLES")

    assert [(i.item_name, i.price, i.quantity) for i in items] == [
        ("APPLES", Decimal("2.99"), 3),
    ]


def test_weighted_line(extractor):
    items = extractor.extract("2.5kg @ 1.99/kg GROUND BEEF")

    assert len(items) == 1
    assert items[0].item_name == "GROUND BEEF"
    assert items[0].price == Decimal("1.99")
    assert items[0].quantity == Decimal("2.5")


@pytest.mark.parametrize("line", ["TOTAL 45.00", "HST 3.15", "04/12/24", "12:45"])
def test_non_item_lines(extractor, line):
    assert extractor.extract(line) == []


@pytest.mark.parametrize("line", ["TOTAL", "Subtotal:", "CASH", "#123", "12:45 PM"])
def test_skip_rule_rejects(line):
    assert isinstance(skip_rule(line, 0), Rejected)


def test_skip_rule_declines_items():
    assert skip_rule("MILK 4.99", 0) is None


# ─── Full receipt ────────────────────────────────────────────────────────────

def test_sample_receipt(extractor):
    items = extractor.extract(SAMPLE_RECEIPT)

    assert [i.item_name for i in items] == [
        "LUCERNE MILK 2L",
        "BREAD",
        "GROUND BEEF",
        "BANANAS",
    ]
    assert items[0].price == Decimal("6.49")


def test_prices_in_range(extractor):
    for item in extractor.extract(SAMPLE_RECEIPT + "TV 12000.99\nFREEBIE 0.00\n"):
        assert Decimal(0) < item.price <= MAX_ITEM_PRICE
        assert item.quantity > 0


def test_dedup_keys_unique(extractor):
    items = extractor.extract("EGGS 3.99\nEGGS 3.99\nEGGS 4.49")

    assert len(items) == 2
    assert [(i.item_name, i.price) for i in items] == [
        ("EGGS", Decimal("3.99")),
        ("EGGS", Decimal("4.49")),
    ]


def test_weighted_dedup_keeps_other_weights(extractor):
    """Weighted lines dedup on name, unit price and weight"""
    items = extractor.extract(
        "2.5kg @ 1.99/kg BEEF\n"
        "2.5kg @ 1.99/kg BEEF\n"
        "1.0kg @ 1.99/kg BEEF"
    )

    assert [(i.item_name, i.quantity) for i in items] == [
        ("BEEF", Decimal("2.5")),
        ("BEEF", Decimal("1.0")),
    ]


def test_extract_is_idempotent(extractor):
    assert extractor.extract(SAMPLE_RECEIPT) == extractor.extract(SAMPLE_RECEIPT)


def test_empty_input(extractor):
    assert extractor.extract("") == []
    assert extractor.extract("\n   \n") == []


# ─── Individual rules ────────────────────────────────────────────────────────

def test_date_like_price_dropped(extractor):
    """12.05 reads as a date (both halves <= 31)"""
    assert extractor.extract("PICKUP 12.05") == []
    assert looks_like_date("12.05")
    assert not looks_like_date("12.50")
    assert not looks_like_date("4.99")


def test_out_of_range_prices_dropped(extractor):
    assert extractor.extract("TELEVISION 12000.99") == []
    assert extractor.extract("COUPON 0.00") == []


def test_dollar_sign_and_thousands(extractor):
    items = extractor.extract("STAND MIXER $1,299.99")

    assert items[0].item_name == "STAND MIXER"
    assert items[0].price == Decimal("1299.99")


def test_short_name_gets_synthetic(extractor):
    items = extractor.extract("BREAD 2.49\nX 3.49")

    assert items[1].item_name == "Item 2"


def test_weighted_rule_bad_unit_price():
    outcome = weighted_rule("1.2kg @ 1500.00/kg WAGYU", 0)

    assert isinstance(outcome, Rejected)


def test_weighted_rule_declines_plain_line():
    assert weighted_rule("MILK 4.99", 0) is None


def test_weighted_rule_sub_cent_unit_price():
    """A three-decimal rate is read whole, never cut down to its integer part"""
    outcome = weighted_rule("1kg @ 1.999/kg X", 0)

    assert isinstance(outcome, Accepted)
    assert outcome.item.price == Decimal("1.999")
    assert outcome.item.quantity == 1
    assert outcome.item.item_name == "Item 1"


def test_generic_rule_accepts_with_key():
    outcome = generic_rule("CHEESE 6.49", 0)

    assert isinstance(outcome, Accepted)
    assert outcome.key == ("CHEESE", Decimal("6.49"))


def test_generic_rule_no_price():
    assert isinstance(generic_rule("THANK YOU FOR SHOPPING", 0), Rejected)


def test_classify_line_reports_reason(extractor):
    outcome = extractor.classify_line("TOTAL 45.00")

    assert isinstance(outcome, Rejected)
    assert "TOTAL" in outcome.reason


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
