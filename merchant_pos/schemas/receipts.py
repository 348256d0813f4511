"""
Receipt Schemas for Merchant POS
================================

Pydantic models for checkout receipts.

Endpoint Coverage:
------------------
- POST /receipts: Create the receipt for an order (checkout)
- POST /receipts/preview: Receipt data for an ad-hoc order, nothing persisted
- GET /receipts/stats: Count, revenue and average over active receipts
- GET /receipts/{id}: Get a receipt
- GET /receipts/bill/{bill_number}: Look up by bill number
- GET /receipts/order/{order_id}: Look up by order
- POST /receipts/{id}/reprint: Bump the print counter
- PATCH /receipts/{id}/void: Void an active receipt

Bill Numbers:
-------------
Bill numbers are 10-digit decimal strings shown to the customer. They are
distinct from order numbers and are checked against existing receipts before
being assigned.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict


class ReceiptCreate(BaseModel):
    order_id: int


class ReceiptItemOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    dish_id: Optional[str] = None
    name: str
    selected_options: Dict[str, Any] = {}
    quantity: int
    unit_price: float
    total_price: float


class ReceiptOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    bill_number: str
    order_id: int
    table_number: Optional[str] = None
    employee_id: str
    employee_name: str
    store_name: str
    subtotal: float
    total: float
    status: str
    notes: str
    print_count: int
    last_printed_at: Optional[datetime] = None
    checkout_time: datetime
    items: List[ReceiptItemOut] = []


class ReceiptVoidRequest(BaseModel):
    reason: Optional[str] = None


class ReceiptStatsOut(BaseModel):
    total_receipts: int
    total_revenue: float
    average_amount: float


class PreviewOrderItem(BaseModel):
    """Line item for an ad-hoc receipt preview."""
    dish_id: Any = None
    id: Any = None
    name: Optional[str] = None
    selected_options: Dict[str, Any] = {}
    quantity: int = 1
    price: Optional[float] = None
    unit_price: Optional[float] = None


class ReceiptPreviewRequest(BaseModel):
    """
    Request body for a receipt preview.

    items is optional so that a missing items collection reaches the receipt
    builder and is reported as a 400, the same way a malformed stored order
    would be.
    """
    order_id: Optional[str] = None
    order_number: Optional[str] = None
    table_number: Optional[str] = None
    items: Optional[List[PreviewOrderItem]] = None
    existing_bill_number: Optional[str] = None


class ReceiptPreviewLine(BaseModel):
    dish_id: Optional[str] = None
    name: Optional[str] = None
    selected_options: Dict[str, Any] = {}
    quantity: int
    unit_price: float
    total_price: float


class ReceiptPreviewOut(BaseModel):
    order_id: Optional[str] = None
    order_number: Optional[str] = None
    table_number: Optional[str] = None
    bill_number: str
    employee_id: Optional[str] = None
    checkout_time: str
    items: List[ReceiptPreviewLine]
    subtotal: float
    total: float
    store_name: str
