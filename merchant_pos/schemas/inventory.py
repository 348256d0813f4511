"""
Inventory Schemas for Merchant POS
==================================

Pydantic models for inventory item management and for the usage/sufficiency
check endpoint.

Endpoint Coverage:
------------------
- GET /admin/inventory: List inventory items
- POST /admin/inventory: Create an inventory item
- GET /admin/inventory/{id}: Get an inventory item
- PUT /admin/inventory/{id}: Update an inventory item
- PATCH /admin/inventory/{id}/restock: Add stock
- DELETE /admin/inventory/{id}: Delete an inventory item
- GET /admin/inventory/stats: Stock overview
- POST /admin/inventory/check: Usage and sufficiency for proposed order lines

Unlimited Stock:
----------------
A stock of -1 marks an item as unlimited (e.g. tap water, napkins). Unlimited
items never produce shortfalls and are never decremented.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _check_stock(value: Optional[float]) -> Optional[float]:
    if value is not None and value < 0 and value != -1:
        raise ValueError("stock must be non-negative, or -1 for unlimited")
    return value


class InventoryItemOut(BaseModel):
    """
    Response model for an inventory item.

    Attributes:
        id: Database primary key
        name: Display name (e.g., "Jasmine Rice")
        category: Grouping (grain, dairy, packaging, ...)
        unit: Unit of measurement (g, ml, piece, ...)
        stock: Current stock, -1 for unlimited
        min_stock: Low-stock threshold
        unit_cost: Cost per unit
        is_active: Inactive items are excluded from stock snapshots
        is_unlimited: Convenience flag for stock == -1
    """
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    category: str
    unit: str
    stock: float
    min_stock: float
    unit_cost: float
    is_active: bool
    is_unlimited: bool


class InventoryItemCreate(BaseModel):
    """
    Request model for creating an inventory item.

    Example:
        {"name": "Paper Cup (L)", "category": "packaging", "unit": "piece", "stock": 200}
    """
    name: str
    category: str
    unit: str = "piece"
    stock: float = 0
    min_stock: float = Field(0, ge=0)
    unit_cost: float = Field(0.0, ge=0)
    is_active: bool = True

    @field_validator("stock")
    @classmethod
    def validate_stock(cls, v):
        return _check_stock(v)


class InventoryItemUpdate(BaseModel):
    """Request model for updating an inventory item. Only provided fields change."""
    name: Optional[str] = None
    category: Optional[str] = None
    unit: Optional[str] = None
    stock: Optional[float] = None
    min_stock: Optional[float] = Field(None, ge=0)
    unit_cost: Optional[float] = Field(None, ge=0)
    is_active: Optional[bool] = None

    @field_validator("stock")
    @classmethod
    def validate_stock(cls, v):
        return _check_stock(v)


class RestockRequest(BaseModel):
    quantity: float = Field(..., gt=0)


class OrderLineRequest(BaseModel):
    """One proposed order line: a dish, its selected options, and a quantity."""
    dish_id: int
    selected_options: Dict[str, Any] = {}
    quantity: int = Field(1, ge=1)


class InventoryCheckRequest(BaseModel):
    items: List[OrderLineRequest]


class ShortfallOut(BaseModel):
    inventory_id: str
    name: str
    required: float
    available: float
    shortfall: float


class UsageDetailOut(BaseModel):
    inventory_id: str
    name: str
    category: str
    unit: str
    required: float
    available: float
    is_unlimited: bool


class InventoryCheckResponse(BaseModel):
    """
    Result of checking proposed order lines against current stock.

    Attributes:
        usage: Inventory id -> total required quantity
        is_sufficient: True when every usage key is covered
        insufficient_items: One entry per uncovered inventory id
        details: One row per usage key, covered or not
    """
    usage: Dict[str, float]
    is_sufficient: bool
    insufficient_items: List[ShortfallOut]
    details: List[UsageDetailOut]


class CategoryStatsOut(BaseModel):
    category: str
    count: int
    total_value: float


class InventoryStatsOut(BaseModel):
    total_items: int
    active_items: int
    unlimited_items: int
    out_of_stock_items: int
    low_stock_items: int
    categories: List[CategoryStatsOut]
