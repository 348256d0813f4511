"""
Admin Dish Routes for Merchant POS
==================================

Admin endpoints for the dishes on the menu and their inventory configuration.
The inventory configuration is what order placement uses to work out how
much stock a dish consumes, so the editor offers a usage preview for a given
set of options before the dish is saved or sold.

Endpoints:
----------
- GET /admin/dishes: List dishes
- POST /admin/dishes: Create a dish
- GET /admin/dishes/{id}: Get a dish
- PUT /admin/dishes/{id}: Update a dish
- DELETE /admin/dishes/{id}: Delete a dish
- POST /admin/dishes/{id}/usage-preview: Usage for one unit with given options

Authentication:
---------------
All endpoints require admin authentication via HTTP Basic Auth.

Deleting Dishes:
----------------
Order lines keep their own name and price, so deleting a dish leaves past
orders readable; their dish_id becomes NULL. Prefer is_active=false for
dishes that should simply stop being sold.
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from ..auth import verify_admin_credentials
from ..db import get_db
from ..inventory import estimate_dish_inventory_usage, format_inventory_usage_display
from ..models import Dish, OrderItem
from ..schemas.dishes import (
    DishOut,
    DishCreate,
    DishUpdate,
    UsagePreviewRequest,
    UsagePreviewResponse,
)
from ..services.inventory import load_inventory_snapshot


logger = logging.getLogger(__name__)

admin_dishes_router = APIRouter(
    prefix="/admin/dishes",
    tags=["Admin - Dishes"]
)


def _get_dish_or_404(db: Session, dish_id: int) -> Dish:
    dish = db.get(Dish, dish_id)
    if dish is None:
        raise HTTPException(status_code=404, detail="Dish not found")
    return dish


@admin_dishes_router.get("", response_model=List[DishOut])
def list_dishes(
    db: Session = Depends(get_db),
    _admin: str = Depends(verify_admin_credentials),
    category: Optional[str] = Query(None, description="Filter by category"),
    active_only: bool = Query(False, description="Only dishes currently on sale"),
) -> List[DishOut]:
    query = db.query(Dish)
    if category:
        query = query.filter(Dish.category == category)
    if active_only:
        query = query.filter(Dish.is_active.is_(True))
    dishes = query.order_by(Dish.category, Dish.name).all()
    return [DishOut.model_validate(dish) for dish in dishes]


@admin_dishes_router.post("", response_model=DishOut, status_code=201)
def create_dish(
    payload: DishCreate,
    db: Session = Depends(get_db),
    _admin: str = Depends(verify_admin_credentials),
) -> DishOut:
    dish = Dish(
        name=payload.name,
        category=payload.category,
        price=payload.price,
        is_active=payload.is_active,
        inventory_config=payload.inventory_config.model_dump() if payload.inventory_config else None,
    )
    db.add(dish)
    db.commit()
    db.refresh(dish)
    logger.info("Created dish: %s (id=%d)", dish.name, dish.id)
    return DishOut.model_validate(dish)


@admin_dishes_router.get("/{dish_id}", response_model=DishOut)
def get_dish(
    dish_id: int,
    db: Session = Depends(get_db),
    _admin: str = Depends(verify_admin_credentials),
) -> DishOut:
    return DishOut.model_validate(_get_dish_or_404(db, dish_id))


@admin_dishes_router.put("/{dish_id}", response_model=DishOut)
def update_dish(
    dish_id: int,
    payload: DishUpdate,
    db: Session = Depends(get_db),
    _admin: str = Depends(verify_admin_credentials),
) -> DishOut:
    """Update a dish. Only provided fields change."""
    dish = _get_dish_or_404(db, dish_id)

    updates = payload.model_dump(exclude_unset=True)
    for field_name, value in updates.items():
        if value is not None:
            setattr(dish, field_name, value)

    db.commit()
    db.refresh(dish)
    logger.info("Updated dish: %s (id=%d)", dish.name, dish.id)
    return DishOut.model_validate(dish)


@admin_dishes_router.delete("/{dish_id}", status_code=204)
def delete_dish(
    dish_id: int,
    db: Session = Depends(get_db),
    _admin: str = Depends(verify_admin_credentials),
) -> None:
    dish = _get_dish_or_404(db, dish_id)
    db.query(OrderItem).filter(OrderItem.dish_id == dish.id).update(
        {OrderItem.dish_id: None}, synchronize_session=False
    )
    db.delete(dish)
    db.commit()
    logger.info("Deleted dish id=%d", dish_id)


@admin_dishes_router.post("/{dish_id}/usage-preview", response_model=UsagePreviewResponse)
def preview_dish_usage(
    dish_id: int,
    payload: UsagePreviewRequest,
    db: Session = Depends(get_db),
    _admin: str = Depends(verify_admin_credentials),
) -> UsagePreviewResponse:
    """
    Inventory consumed by one unit of the dish with the given options.

    Ids in the configuration that do not match an active inventory item are
    shown as "unknown" rather than rejected, so a half-finished configuration
    can still be previewed.
    """
    dish = _get_dish_or_404(db, dish_id)
    usage = estimate_dish_inventory_usage(dish.to_snapshot(), payload.selected_options)
    snapshot = load_inventory_snapshot(db, usage.keys())
    return UsagePreviewResponse(
        dish_id=dish.id,
        usage=usage,
        rows=format_inventory_usage_display(usage, snapshot),
    )
