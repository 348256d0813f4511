"""
Routes Package for Merchant POS
===============================

This package contains all API route definitions organized by domain. Each module
defines a FastAPI APIRouter with related endpoints grouped together.

Architecture Overview:
----------------------
**Front-of-House Routes:**
- orders.py: Placing, listing and cancelling dine-in orders
- receipts.py: Checkout, receipt lookup, reprint and void

**Admin Routes:**
- admin_inventory.py: Inventory item CRUD, restock, stats, stock checks
- admin_dishes.py: Dish CRUD and inventory usage preview

Router Registration:
--------------------
All routers are registered in app_factory.py under two prefixes:
1. /api/v1/* - Versioned API (recommended)
2. /* - Root paths

Route Dependencies:
-------------------
Common dependencies are injected via FastAPI's Depends():
- get_db: Database session for queries
- verify_admin_credentials: HTTP Basic authentication
- get_checkout_context: Employee and store for the current checkout
- limiter.limit(): Rate limiting

Error Handling:
---------------
Routes raise HTTPException for error conditions:
- 400: Bad request (invalid order data, wrong order/receipt state)
- 401: Unauthorized (invalid credentials)
- 404: Not found (invalid ID)
- 409: Conflict (insufficient inventory, receipt already exists)
- 429: Too many requests (rate limited)
- 503: Service unavailable (missing configuration, no free bill number)
"""

from .admin_inventory import admin_inventory_router
from .admin_dishes import admin_dishes_router
from .orders import orders_router
from .receipts import receipts_router

__all__ = [
    "admin_inventory_router",
    "admin_dishes_router",
    "orders_router",
    "receipts_router",
]
