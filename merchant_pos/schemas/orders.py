"""
Order Schemas for Merchant POS
==============================

Pydantic models for placing and viewing dine-in orders.

Endpoint Coverage:
------------------
- POST /orders: Place an order (checks and deducts inventory)
- GET /orders: List orders, optionally filtered by status
- GET /orders/{id}: Get order details

Order Lifecycle:
----------------
1. **open**: Placed, stock deducted, awaiting checkout
2. **paid**: A receipt was created at checkout
3. **cancelled**: Voided by staff

Usage:
------
    detail = OrderOut.model_validate(order)
    for item in detail.items:
        print(f"{item.name} x{item.quantity}: {item.total_price}")
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from .inventory import OrderLineRequest, ShortfallOut


class OrderCreate(BaseModel):
    """
    Request model for placing an order.

    Example:
        {
            "table_number": "A3",
            "items": [
                {"dish_id": 1, "selected_options": {"size": "large"}, "quantity": 2}
            ]
        }
    """
    table_number: Optional[str] = None
    items: List[OrderLineRequest] = Field(..., min_length=1)


class OrderItemOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    dish_id: Optional[int] = None
    name: str
    selected_options: Dict[str, Any] = {}
    quantity: int
    unit_price: float
    total_price: float


class OrderOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    order_number: str
    table_number: Optional[str] = None
    status: str
    total_amount: float
    created_at: datetime
    items: List[OrderItemOut] = []


class OutOfStockResponse(BaseModel):
    """Body of the 409 returned when stock cannot cover an order."""
    detail: str
    insufficient_items: List[ShortfallOut]
