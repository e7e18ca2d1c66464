"""
Integrated Receipt Processing Pipeline
Combines normalization, store identification, extraction and price comparison
into a unified workflow for one OCR transcript
"""

import uuid
from decimal import Decimal
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Union

from loguru import logger

from comparison_engine import ComparisonEngine
from extractor import LineItemExtractor
from models import ParsedLineItem, ParsedReceipt, ScanResult, round2
from pricing import PriceSource, create_price_source
from store_identifier import StoreIdentifier
from text_normalizer import TextNormalizer
from utils import DEFAULT_CONFIG, deep_merge, load_config


class ReceiptProcessor:
    """
    End-to-end receipt processing pipeline

    Workflow:
    1. Normalize OCR misreads
    2. Identify the store from the header
    3. Extract line items
    4. Compare each item against the configured price source
    5. Build rows for the persistence layer (returned, never written here)
    """

    def __init__(self, config: Optional[Union[str, Path, Dict]] = None):
        """Initialize all processing components"""
        logger.info("Initializing Receipt Processor Pipeline")

        if isinstance(config, dict):
            self.config = deep_merge(DEFAULT_CONFIG, config)
        else:
            self.config = load_config(config)

        comparison = self.config.get('comparison', {})
        header_lines = self.config.get('store_identifier', {}).get('header_lines', 10)

        self.normalizer = TextNormalizer()
        self.store_identifier = StoreIdentifier(header_lines=header_lines)
        self.extractor = LineItemExtractor(normalizer=self.normalizer)
        self.engine = ComparisonEngine(
            advocacy_threshold=Decimal(str(comparison.get('advocacy_threshold', '0.20'))),
            delivery_markup_percent=Decimal(str(comparison.get('delivery_markup_percent', '0.18'))),
        )
        self.price_source: PriceSource = create_price_source(self.config)

        logger.success("Receipt Processor ready")

    def parse_text(self, raw_text: str) -> ParsedReceipt:
        """
        Normalize, identify the store and extract line items.

        Args:
            raw_text: OCR transcript of one receipt

        Returns:
            ParsedReceipt (items may be empty: "could not read" is the caller's call)
        """
        normalized = self.normalizer.normalize(raw_text or "")
        store = self.store_identifier.identify(raw_text)
        items = self.extractor.extract(normalized)

        logger.info(
            f"Parsed receipt: store={store.store_name!r} "
            f"({store.store_type.value}), {len(items)} items"
        )
        return ParsedReceipt(normalized_text=normalized, store=store, items=tuple(items))

    async def scan(
        self,
        raw_text: str,
        receipt_id: Optional[str] = None,
        price_source: Optional[PriceSource] = None,
    ) -> ScanResult:
        """
        Full scan: parse, compare and build persistence rows.

        Args:
            raw_text:     OCR transcript
            receipt_id:   identifier of the stored scan (generated when missing)
            price_source: overrides the configured source for this call
        """
        receipt_id = receipt_id or uuid.uuid4().hex
        parsed = self.parse_text(raw_text)

        comparisons = await self.engine.compare(parsed.items, price_source or self.price_source)
        rows = self.build_price_rows(parsed.items, receipt_id, parsed.store.store_name)

        result = ScanResult(
            receipt_id=receipt_id,
            store=parsed.store,
            items=parsed.items,
            comparisons=tuple(comparisons),
            price_rows=tuple(rows),
        )
        logger.info(f"Scan {receipt_id}: total savings ${result.total_savings}")
        return result

    @staticmethod
    def build_price_rows(
        items: Iterable[ParsedLineItem],
        receipt_id: str,
        store_name: Optional[str] = None,
    ) -> List[Dict]:
        """One price-history row per item, shaped for the persistence layer."""
        rows = []
        for item in items:
            rows.append({
                'item_name': item.item_name,
                'price': round2(item.line_total),
                'unit': f"{item.quantity} units" if item.quantity > 1 else None,
                'store_name': store_name,
                'is_delivery_app_price': False,
                'receipt_scan_id': receipt_id,
            })
        return rows

    async def aclose(self):
        """Release the price source (closes HTTP clients)"""
        await self.price_source.aclose()
