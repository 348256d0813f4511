"""
Admin Inventory Routes for Merchant POS
=======================================

Admin endpoints for managing raw inventory items and for checking proposed
order lines against current stock.

Endpoints:
----------
Inventory Management:
- GET /admin/inventory: List inventory items
- POST /admin/inventory: Create an inventory item
- GET /admin/inventory/{id}: Get an inventory item
- PUT /admin/inventory/{id}: Update an inventory item
- PATCH /admin/inventory/{id}/restock: Add stock
- DELETE /admin/inventory/{id}: Delete an inventory item

Reporting:
- GET /admin/inventory/stats: Totals, low/out-of-stock counts, per category

Checks:
- POST /admin/inventory/check: Usage, sufficiency and detail rows for
  proposed order lines, without deducting anything

Authentication:
---------------
All endpoints require admin authentication via HTTP Basic Auth.

Usage:
------
    # Would two large milk teas fit current stock?
    POST /admin/inventory/check
    {"items": [{"dish_id": 1, "selected_options": {"size": "large"}, "quantity": 2}]}
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from ..auth import verify_admin_credentials
from ..db import get_db
from ..inventory import get_inventory_usage_details
from ..models import InventoryItem
from ..schemas.inventory import (
    InventoryItemOut,
    InventoryItemCreate,
    InventoryItemUpdate,
    RestockRequest,
    InventoryCheckRequest,
    InventoryCheckResponse,
    InventoryStatsOut,
)
from ..services.inventory import (
    DishNotFoundError,
    build_order_lines,
    check_order_inventory,
    inventory_stats,
    restock_inventory,
)


logger = logging.getLogger(__name__)

admin_inventory_router = APIRouter(
    prefix="/admin/inventory",
    tags=["Admin - Inventory"]
)


def _get_item_or_404(db: Session, item_id: int) -> InventoryItem:
    item = db.get(InventoryItem, item_id)
    if item is None:
        raise HTTPException(status_code=404, detail="Inventory item not found")
    return item


@admin_inventory_router.get("", response_model=List[InventoryItemOut])
def list_inventory(
    db: Session = Depends(get_db),
    _admin: str = Depends(verify_admin_credentials),
    category: Optional[str] = Query(None, description="Filter by category"),
    low_stock_only: bool = Query(False, description="Only items at or below min_stock"),
) -> List[InventoryItemOut]:
    """List inventory items, ordered by category and name."""
    query = db.query(InventoryItem)
    if category:
        query = query.filter(InventoryItem.category == category.lower())
    items = query.order_by(InventoryItem.category, InventoryItem.name).all()
    if low_stock_only:
        items = [item for item in items if not item.is_unlimited and item.stock <= item.min_stock]
    return [InventoryItemOut.model_validate(item) for item in items]


@admin_inventory_router.post("", response_model=InventoryItemOut, status_code=201)
def create_inventory_item(
    payload: InventoryItemCreate,
    db: Session = Depends(get_db),
    _admin: str = Depends(verify_admin_credentials),
) -> InventoryItemOut:
    item = InventoryItem(
        name=payload.name,
        category=payload.category.lower(),
        unit=payload.unit,
        stock=payload.stock,
        min_stock=payload.min_stock,
        unit_cost=payload.unit_cost,
        is_active=payload.is_active,
    )
    db.add(item)
    db.commit()
    db.refresh(item)
    logger.info("Created inventory item: %s (id=%d)", item.name, item.id)
    return InventoryItemOut.model_validate(item)


@admin_inventory_router.get("/stats", response_model=InventoryStatsOut)
def get_inventory_stats(
    db: Session = Depends(get_db),
    _admin: str = Depends(verify_admin_credentials),
) -> InventoryStatsOut:
    return InventoryStatsOut(**inventory_stats(db))


@admin_inventory_router.post("/check", response_model=InventoryCheckResponse)
def check_inventory(
    payload: InventoryCheckRequest,
    db: Session = Depends(get_db),
    _admin: str = Depends(verify_admin_credentials),
) -> InventoryCheckResponse:
    """Check proposed order lines against current stock. Nothing is deducted."""
    try:
        lines = build_order_lines(db, [line.model_dump() for line in payload.items])
    except DishNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc))

    check = check_order_inventory(db, lines)
    return InventoryCheckResponse(
        usage=check.usage,
        is_sufficient=check.result.is_sufficient,
        insufficient_items=[entry.to_dict() for entry in check.result.insufficient_items],
        details=[detail.to_dict() for detail in get_inventory_usage_details(check.usage, check.snapshot)],
    )


@admin_inventory_router.get("/{item_id}", response_model=InventoryItemOut)
def get_inventory_item(
    item_id: int,
    db: Session = Depends(get_db),
    _admin: str = Depends(verify_admin_credentials),
) -> InventoryItemOut:
    return InventoryItemOut.model_validate(_get_item_or_404(db, item_id))


@admin_inventory_router.put("/{item_id}", response_model=InventoryItemOut)
def update_inventory_item(
    item_id: int,
    payload: InventoryItemUpdate,
    db: Session = Depends(get_db),
    _admin: str = Depends(verify_admin_credentials),
) -> InventoryItemOut:
    """Update an inventory item. Only provided fields change."""
    item = _get_item_or_404(db, item_id)

    updates = payload.model_dump(exclude_unset=True)
    if updates.get("category"):
        updates["category"] = updates["category"].lower()
    for field_name, value in updates.items():
        if value is not None:
            setattr(item, field_name, value)

    db.commit()
    db.refresh(item)
    logger.info("Updated inventory item: %s (id=%d)", item.name, item.id)
    return InventoryItemOut.model_validate(item)


@admin_inventory_router.patch("/{item_id}/restock", response_model=InventoryItemOut)
def restock_inventory_item(
    item_id: int,
    payload: RestockRequest,
    db: Session = Depends(get_db),
    _admin: str = Depends(verify_admin_credentials),
) -> InventoryItemOut:
    item = restock_inventory(_get_item_or_404(db, item_id), payload.quantity)
    db.commit()
    db.refresh(item)
    logger.info("Restocked inventory item %d by %s (now %s)", item.id, payload.quantity, item.stock)
    return InventoryItemOut.model_validate(item)


@admin_inventory_router.delete("/{item_id}", status_code=204)
def delete_inventory_item(
    item_id: int,
    db: Session = Depends(get_db),
    _admin: str = Depends(verify_admin_credentials),
) -> None:
    item = _get_item_or_404(db, item_id)
    db.delete(item)
    db.commit()
    logger.info("Deleted inventory item id=%d", item_id)
