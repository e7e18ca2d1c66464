"""
API Models: Request and Response schemas
Using Pydantic for automatic validation and documentation

Money fields are Decimal and serialize as strings ("4.99") so no cent is
lost to float rounding on the way out.
"""

from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field

from models import ParsedLineItem, PriceComparison, StoreExtraction


# ─── Requests ─────────────────────────────────────────────────────────────────

class ParseRequest(BaseModel):
    """OCR transcript of one receipt."""
    text: str = Field(..., description="Raw OCR text, one receipt line per line")


class ScanTextRequest(ParseRequest):
    """Transcript plus the id of the stored scan, if the caller has one."""
    receipt_id: Optional[str] = Field(None, description="Receipt scan id (generated when omitted)")

    class Config:
        json_schema_extra = {
            "example": {
                "text": "KIN'S MARKET\nLUCERNE MILK 2L 6.49\n2 x 1.49 BREAD\nTOTAL 9.47",
                "receipt_id": "scan-001",
            }
        }


class LineItemModel(BaseModel):
    """One purchased line."""
    item_name: str    = Field(..., min_length=1, description="Item name as printed")
    price: Decimal    = Field(..., gt=0, le=9999, description="Unit price (or price per kg)")
    quantity: Decimal = Field(Decimal(1), gt=0, description="Count, or weight in kg")

    @classmethod
    def from_item(cls, item: ParsedLineItem) -> "LineItemModel":
        return cls(item_name=item.item_name, price=item.price, quantity=item.quantity)

    def to_item(self) -> ParsedLineItem:
        return ParsedLineItem(item_name=self.item_name, price=self.price, quantity=self.quantity)


class CompareRequest(BaseModel):
    """Line items to compare against the configured price source."""
    items: List[LineItemModel] = Field(..., description="Items in receipt order")


# ─── Responses ────────────────────────────────────────────────────────────────

class StoreModel(BaseModel):
    store_name: Optional[str] = Field(None, description="Identified merchant, if any")
    store_type: str           = Field("Standard", description="'Local Gem' | 'Standard'")

    @classmethod
    def from_store(cls, store: StoreExtraction) -> "StoreModel":
        return cls(store_name=store.store_name, store_type=store.store_type.value)


class ComparisonModel(BaseModel):
    """One receipt line set against a competitor price."""
    item_name: str
    receipt_price: Decimal
    competitor_price: Optional[Decimal] = None
    savings: Decimal
    store_name: str
    over_market_percent: Optional[Decimal] = None
    is_questionable: bool = False
    has_savings: bool = False
    estimated_delivery_price: Optional[Decimal] = None
    display_status: str = Field(..., description="questionable | savings | market | unmatched")

    @classmethod
    def from_comparison(cls, c: PriceComparison) -> "ComparisonModel":
        return cls(
            item_name=c.item_name,
            receipt_price=c.receipt_price,
            competitor_price=c.competitor_price,
            savings=c.savings,
            store_name=c.store_name,
            over_market_percent=c.over_market_percent,
            is_questionable=c.is_questionable,
            has_savings=c.has_savings,
            estimated_delivery_price=c.estimated_delivery_price,
            display_status=c.display_status,
        )


class PriceRowModel(BaseModel):
    """Row shaped for the price-history table."""
    item_name: str
    price: Decimal
    unit: Optional[str] = None
    store_name: Optional[str] = None
    is_delivery_app_price: bool = False
    receipt_scan_id: str


class ParseResponse(BaseModel):
    status: str            = Field("success", description="Response status")
    store: StoreModel
    items: List[LineItemModel]
    items_detected: int    = Field(..., description="0 means the receipt could not be read")


class CompareResponse(BaseModel):
    status: str                       = Field("success", description="Response status")
    price_source: str                 = Field(..., description="Price source used")
    comparisons: List[ComparisonModel]
    total_savings: Decimal


class ScanResponse(BaseModel):
    status: str                       = Field("success", description="Response status")
    receipt_id: str
    store: StoreModel
    items: List[LineItemModel]
    comparisons: List[ComparisonModel]
    price_rows: List[PriceRowModel]
    total_savings: Decimal


class HealthResponse(BaseModel):
    """Health check response."""
    status: str  = Field("healthy",                 description="Health status")
    service: str = Field("receipt-price-advocate",  description="Service name")
    version: str = Field("1.0.0",                   description="API version")


class ErrorResponse(BaseModel):
    """Error response."""
    status: str           = Field("error", description="Response status")
    error: str            = Field(...,     description="Error type")
    message: str          = Field(...,     description="Error message")
    detail: Optional[str] = Field(None,    description="Additional details")
