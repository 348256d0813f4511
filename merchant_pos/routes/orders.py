"""
Order Routes for Merchant POS
=============================

Endpoints used by the front-of-house terminal to place and manage dine-in
orders. Placing an order checks and deducts inventory; if stock cannot cover
every line the order is refused and nothing changes.

Endpoints:
----------
- POST /orders: Place an order
- GET /orders: List orders, newest first
- GET /orders/{id}: Get order details
- PATCH /orders/{id}/cancel: Cancel an open order and return its stock

Authentication:
---------------
All endpoints require HTTP Basic Auth (the terminal signs in as staff).

Out of Stock:
-------------
A refused order returns 409 with the shortfall for each inventory item:

    {
        "detail": "Insufficient inventory",
        "insufficient_items": [
            {"inventory_id": "3", "name": "rice", "required": 400,
             "available": 150, "shortfall": 250}
        ]
    }
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from ..auth import verify_admin_credentials
from ..db import get_db
from ..inventory import OutOfStockError
from ..models import Order
from ..schemas.orders import OrderCreate, OrderOut, OutOfStockResponse
from ..services.inventory import DishNotFoundError
from ..services.order import OrderStateError, cancel_order, place_order


logger = logging.getLogger(__name__)

orders_router = APIRouter(prefix="/orders", tags=["Orders"])


def _get_order_or_404(db: Session, order_id: int) -> Order:
    order = db.get(Order, order_id)
    if order is None:
        raise HTTPException(status_code=404, detail="Order not found")
    return order


@orders_router.post(
    "",
    response_model=OrderOut,
    status_code=201,
    responses={409: {"model": OutOfStockResponse}},
)
def create_order(
    payload: OrderCreate,
    db: Session = Depends(get_db),
    _admin: str = Depends(verify_admin_credentials),
):
    try:
        order = place_order(
            db,
            payload.table_number,
            [line.model_dump() for line in payload.items],
        )
    except DishNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc))
    except OutOfStockError as exc:
        db.rollback()
        return JSONResponse(
            status_code=409,
            content=OutOfStockResponse(
                detail="Insufficient inventory",
                insufficient_items=[entry.to_dict() for entry in exc.insufficient_items],
            ).model_dump(),
        )
    return OrderOut.model_validate(order)


@orders_router.get("", response_model=List[OrderOut])
def list_orders(
    db: Session = Depends(get_db),
    _admin: str = Depends(verify_admin_credentials),
    status: Optional[str] = Query(None, description="Filter by status (open, paid, cancelled)"),
    limit: int = Query(50, ge=1, le=500),
    offset: int = Query(0, ge=0),
) -> List[OrderOut]:
    query = db.query(Order)
    if status:
        query = query.filter(Order.status == status)
    orders = query.order_by(Order.created_at.desc(), Order.id.desc()).offset(offset).limit(limit).all()
    return [OrderOut.model_validate(order) for order in orders]


@orders_router.get("/{order_id}", response_model=OrderOut)
def get_order(
    order_id: int,
    db: Session = Depends(get_db),
    _admin: str = Depends(verify_admin_credentials),
) -> OrderOut:
    return OrderOut.model_validate(_get_order_or_404(db, order_id))


@orders_router.patch("/{order_id}/cancel", response_model=OrderOut)
def cancel_existing_order(
    order_id: int,
    db: Session = Depends(get_db),
    _admin: str = Depends(verify_admin_credentials),
) -> OrderOut:
    order = _get_order_or_404(db, order_id)
    try:
        order = cancel_order(db, order)
    except OrderStateError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    return OrderOut.model_validate(order)
