"""
Tests for the Receipt Processor pipeline and its configuration helpers
"""

import asyncio
import pytest
import sys
from decimal import Decimal
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from loguru import logger

from models import StoreType
from pricing import CatalogMatcher, SimulatedPriceSource
from receipt_processor import ReceiptProcessor
from utils import DEFAULT_CONFIG, load_config, setup_logging


RECEIPT = """\
KIN'S MARKET
04/12/24
LUCERNE MILK 2L 6.49 H
2 x 1.49 BREAD
EGGS S4.99
GIFT CARD 25.99
TOTAL 39.45
"""


@pytest.fixture
def processor():
    return ReceiptProcessor({"comparison": {"price_source": "catalog"}})


def test_parse_text(processor):
    parsed = processor.parse_text(RECEIPT)

    assert parsed.store.store_name == "Kin's Market"
    assert parsed.store.store_type == StoreType.LOCAL_GEM
    assert "EGGS $4.99" in parsed.normalized_text
    assert "LUCERNE MILK 2L 6.49\n" in parsed.normalized_text
    assert [(i.item_name, i.price, i.quantity) for i in parsed.items] == [
        ("LUCERNE MILK 2L", Decimal("6.49"), 1),
        ("BREAD", Decimal("1.49"), 2),
        ("EGGS", Decimal("4.99"), 1),
        ("GIFT CARD", Decimal("25.99"), 1),
    ]


def test_parse_unreadable(processor):
    parsed = processor.parse_text("")

    assert parsed.items == ()
    assert parsed.store.store_name is None


def test_scan(processor):
    result = asyncio.run(processor.scan(RECEIPT, receipt_id="scan-001"))

    assert result.receipt_id == "scan-001"
    assert [c.display_status for c in result.comparisons] == [
        "questionable", "savings", "questionable", "unmatched",
    ]
    assert result.comparisons[1].receipt_price == Decimal("2.98")
    assert result.total_savings == Decimal("3.49")


def test_scan_generates_receipt_id(processor):
    result = asyncio.run(processor.scan("MILK 4.99"))

    assert result.receipt_id
    assert result.price_rows[0]['receipt_scan_id'] == result.receipt_id


def test_scan_price_source_override(processor):
    result = asyncio.run(processor.scan(RECEIPT, price_source=SimulatedPriceSource(coverage=0)))

    assert all(c.competitor_price is None for c in result.comparisons)
    assert result.total_savings == Decimal("0.00")


def test_price_rows(processor):
    result = asyncio.run(processor.scan(RECEIPT, receipt_id="scan-002"))
    rows = result.price_rows

    assert len(rows) == 4
    assert rows[0] == {
        'item_name': "LUCERNE MILK 2L",
        'price': Decimal("6.49"),
        'unit': None,
        'store_name': "Kin's Market",
        'is_delivery_app_price': False,
        'receipt_scan_id': "scan-002",
    }
    assert rows[1]['price'] == Decimal("2.98")
    assert rows[1]['unit'] == "2 units"


def test_build_price_rows_without_store(processor):
    items = processor.parse_text("2.5kg @ 1.99/kg GROUND BEEF").items
    [row] = processor.build_price_rows(items, "scan-003")

    assert row['price'] == Decimal("4.98")
    assert row['unit'] == "2.5 units"
    assert row['store_name'] is None


def test_config_applied():
    processor = ReceiptProcessor({
        "store_identifier": {"header_lines": 1},
        "comparison": {"price_source": "simulated", "advocacy_threshold": "0.50"},
        "simulated": {"seed": 1},
    })

    assert isinstance(processor.price_source, SimulatedPriceSource)
    assert processor.engine.advocacy_threshold == Decimal("0.50")
    assert processor.store_identifier.header_lines == 1
    asyncio.run(processor.aclose())


# ─── Config / logging helpers ────────────────────────────────────────────────

def test_load_config_missing_file(tmp_path):
    config = load_config(tmp_path / "nope.yaml")

    assert config == DEFAULT_CONFIG
    assert config is not DEFAULT_CONFIG


def test_load_config_merges_defaults(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("comparison:\n  price_source: simulated\n", encoding="utf-8")

    config = load_config(path)

    assert config['comparison']['price_source'] == "simulated"
    assert config['comparison']['advocacy_threshold'] == "0.20"
    assert config['open_food_facts']['page_size'] == 3


def test_shipped_config_loads():
    config = load_config()

    assert config['comparison']['price_source'] in ("catalog", "open_food_facts", "simulated")
    assert isinstance(ReceiptProcessor().price_source, CatalogMatcher)


def test_setup_logging(tmp_path):
    log_file = tmp_path / "logs" / "advocate.log"

    try:
        setup_logging(str(log_file), level="DEBUG")
        assert log_file.exists()
    finally:
        logger.remove()
        logger.add(sys.stderr)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
