"""
API Routes - All API endpoints
"""

from decimal import Decimal

from fastapi import APIRouter
from fastapi.responses import JSONResponse
from loguru import logger

from api.models import (
    CompareRequest,
    CompareResponse,
    ComparisonModel,
    ErrorResponse,
    LineItemModel,
    ParseRequest,
    ParseResponse,
    PriceRowModel,
    ScanResponse,
    ScanTextRequest,
    StoreModel,
)
from models import round2
from receipt_processor import ReceiptProcessor

# Create router
router = APIRouter()

# Initialize pipeline (price source chosen once, from config)
processor = ReceiptProcessor()

ERROR_RESPONSES = {500: {"model": ErrorResponse, "description": "Unexpected pipeline failure"}}


def _error_response(e: Exception) -> JSONResponse:
    body = ErrorResponse(error=type(e).__name__, message=str(e))
    return JSONResponse(status_code=500, content=body.model_dump())


# ==================== API ENDPOINTS ====================

@router.post("/receipts/parse", response_model=ParseResponse, responses=ERROR_RESPONSES, tags=["Receipts"])
async def parse_receipt(request: ParseRequest):
    """
    **Parse a receipt transcript**

    Corrects OCR misreads, identifies the store and extracts line items.
    No price lookups are made.

    **Example:**
    ```bash
    curl -X POST http://localhost:8000/api/v1/receipts/parse \\
      -H "Content-Type: application/json" \\
      -d '{"text": "SAFEWAY\\nMILK 2% 4.99"}'
    ```
    """
    try:
        parsed = processor.parse_text(request.text)
        return ParseResponse(
            store=StoreModel.from_store(parsed.store),
            items=[LineItemModel.from_item(i) for i in parsed.items],
            items_detected=len(parsed.items),
        )
    except Exception as e:
        logger.error(f"Error parsing receipt: {e}")
        return _error_response(e)


@router.post("/receipts/scan", response_model=ScanResponse, responses=ERROR_RESPONSES, tags=["Receipts"])
async def scan_receipt(request: ScanTextRequest):
    """
    **Scan a receipt transcript end to end**

    Parse, compare every item against the configured price source and
    return the rows the caller should store in its price history.

    **Returns:**
    - Store name and reward tier (`Local Gem` / `Standard`)
    - Line items in receipt order
    - One comparison per item, with savings and questionable flags
    - Price-history rows (not persisted by this service)
    """
    try:
        result = await processor.scan(request.text, receipt_id=request.receipt_id)
        return ScanResponse(
            receipt_id=result.receipt_id,
            store=StoreModel.from_store(result.store),
            items=[LineItemModel.from_item(i) for i in result.items],
            comparisons=[ComparisonModel.from_comparison(c) for c in result.comparisons],
            price_rows=[PriceRowModel(**row) for row in result.price_rows],
            total_savings=result.total_savings,
        )
    except Exception as e:
        logger.error(f"Error scanning receipt: {e}")
        return _error_response(e)


@router.post("/receipts/compare", response_model=CompareResponse, responses=ERROR_RESPONSES, tags=["Receipts"])
async def compare_items(request: CompareRequest):
    """
    **Compare already extracted items**

    Useful when the caller corrected the extracted items by hand.
    """
    try:
        items = [i.to_item() for i in request.items]
        comparisons = await processor.engine.compare(items, processor.price_source)
        total = round2(sum((c.savings for c in comparisons), Decimal(0)))
        return CompareResponse(
            price_source=processor.price_source.name,
            comparisons=[ComparisonModel.from_comparison(c) for c in comparisons],
            total_savings=total,
        )
    except Exception as e:
        logger.error(f"Error comparing items: {e}")
        return _error_response(e)
