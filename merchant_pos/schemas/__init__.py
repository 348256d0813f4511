"""
Schemas Package for Merchant POS
================================

Pydantic models used for API request validation and response serialization.

Schema Organization:
--------------------
- **inventory.py**: Inventory item CRUD, stock stats, usage/sufficiency checks
- **dishes.py**: Dish CRUD and inventory configuration
- **orders.py**: Order placement and order views
- **receipts.py**: Checkout receipts, previews and stats

Naming Conventions:
-------------------
- *Out: Response models (e.g., InventoryItemOut) - what API returns
- *Create: Request models for POST - what client sends to create
- *Update: Request models for PUT/PATCH - what client sends to update
- *Request: Complex request bodies (e.g., InventoryCheckRequest)
- *Response: Complex response structures (e.g., InventoryCheckResponse)

Most response models use `model_config = ConfigDict(from_attributes=True)`
so they can be built directly from SQLAlchemy ORM objects:

    item = db.get(InventoryItem, 1)
    return InventoryItemOut.model_validate(item)
"""

from .inventory import (
    InventoryItemOut,
    InventoryItemCreate,
    InventoryItemUpdate,
    RestockRequest,
    OrderLineRequest,
    InventoryCheckRequest,
    InventoryCheckResponse,
    ShortfallOut,
    UsageDetailOut,
    InventoryStatsOut,
)

from .dishes import (
    InventoryConfig,
    DishOut,
    DishCreate,
    DishUpdate,
    UsagePreviewRequest,
    UsagePreviewResponse,
)

from .orders import (
    OrderCreate,
    OrderItemOut,
    OrderOut,
    OutOfStockResponse,
)

from .receipts import (
    ReceiptCreate,
    ReceiptItemOut,
    ReceiptOut,
    ReceiptVoidRequest,
    ReceiptStatsOut,
    ReceiptPreviewRequest,
    ReceiptPreviewOut,
)

__all__ = [
    # Inventory
    "InventoryItemOut",
    "InventoryItemCreate",
    "InventoryItemUpdate",
    "RestockRequest",
    "OrderLineRequest",
    "InventoryCheckRequest",
    "InventoryCheckResponse",
    "ShortfallOut",
    "UsageDetailOut",
    "InventoryStatsOut",
    # Dishes
    "InventoryConfig",
    "DishOut",
    "DishCreate",
    "DishUpdate",
    "UsagePreviewRequest",
    "UsagePreviewResponse",
    # Orders
    "OrderCreate",
    "OrderItemOut",
    "OrderOut",
    "OutOfStockResponse",
    # Receipts
    "ReceiptCreate",
    "ReceiptItemOut",
    "ReceiptOut",
    "ReceiptVoidRequest",
    "ReceiptStatsOut",
    "ReceiptPreviewRequest",
    "ReceiptPreviewOut",
]
