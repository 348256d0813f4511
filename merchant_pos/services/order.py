"""
Order Placement Service for Merchant POS
========================================

Functions for placing and cancelling dine-in orders. Placing an order checks
and deducts inventory in the same transaction that persists the order, so an
order is never saved without its stock having been taken.

Key Functions:
--------------
- place_order: Resolve dishes, deduct stock, persist Order + OrderItems
- cancel_order: Mark an open order cancelled and return its stock
- order_to_receipt_input: Order as the plain mapping the receipt builder reads

Order Lifecycle:
----------------
1. place_order -> status "open"
2. Receipt created at checkout -> status "paid" (see services/receipt.py)
3. cancel_order -> status "cancelled" (open orders only)

Pricing:
--------
Line prices come from the dish's current price at the time the order is
placed; the order's total_amount is the sum of its line totals.
"""

import logging
import uuid
from datetime import datetime
from typing import Any, Dict, Iterable, Mapping, Optional

from sqlalchemy.orm import Session

from ..inventory import calculate_order_inventory_usage
from ..logging_config import audit
from ..models import Order, OrderItem
from .inventory import build_order_lines, deduct_inventory, return_inventory

logger = logging.getLogger(__name__)


class OrderStateError(Exception):
    """Raised when an order is not in a state that allows the operation."""


def generate_order_number(now: Optional[datetime] = None) -> str:
    now = now or datetime.now()
    return f"{now:%Y%m%d}-{uuid.uuid4().hex[:8].upper()}"


def place_order(
    db: Session,
    table_number: Optional[str],
    items: Iterable[Mapping[str, Any]],
) -> Order:
    """
    Place an order.

    Args:
        db: Database session
        table_number: Table the order is for
        items: Requested lines, each {dish_id, selected_options, quantity}

    Returns:
        The persisted Order

    Raises:
        DishNotFoundError: If a requested dish does not exist or is inactive.
        OutOfStockError: If stock cannot cover the order. Nothing is persisted.
    """
    lines = build_order_lines(db, items)
    usage = calculate_order_inventory_usage(lines)
    deduct_inventory(db, usage)

    order = Order(
        order_number=generate_order_number(),
        table_number=table_number,
        status="open",
    )
    total = 0.0
    for line in lines:
        dish = line["dish"]
        quantity = line["quantity"]
        line_total = dish["price"] * quantity
        order.items.append(OrderItem(
            dish_id=int(dish["id"]),
            name=dish["name"],
            selected_options=line["selected_options"],
            quantity=quantity,
            unit_price=dish["price"],
            total_price=line_total,
        ))
        total += line_total
    order.total_amount = total

    db.add(order)
    db.commit()
    db.refresh(order)

    audit(
        "order.placed",
        order_number=order.order_number,
        table=table_number,
        lines=len(order.items),
        total=f"{order.total_amount:.2f}",
    )
    return order


def cancel_order(db: Session, order: Order) -> Order:
    """
    Cancel an open order and return the inventory it consumed.

    Usage is recomputed from the dishes' current inventory configuration.

    Raises:
        OrderStateError: If the order is not open.
    """
    if order.status != "open":
        raise OrderStateError(f"Order {order.order_number} is {order.status}, only open orders can be cancelled")

    lines = []
    for item in order.items:
        # Inactive dishes still give their stock back; deleted ones cannot
        if item.dish is None:
            logger.warning("Dish for line %s missing while cancelling order %s", item.id, order.order_number)
            continue
        lines.append({
            "dish": item.dish.to_snapshot(),
            "selected_options": item.selected_options or {},
            "quantity": item.quantity,
        })
    return_inventory(db, calculate_order_inventory_usage(lines))

    order.status = "cancelled"
    db.commit()
    db.refresh(order)
    audit("order.cancelled", order_number=order.order_number)
    return order


def order_to_receipt_input(order: Order) -> Dict[str, Any]:
    """Order as the mapping generate_receipt_data expects."""
    return {
        "id": order.id,
        "order_number": order.order_number,
        "total_amount": order.total_amount,
        "items": [
            {
                "dish_id": item.dish_id,
                "name": item.name,
                "selected_options": item.selected_options or {},
                "quantity": item.quantity,
                "unit_price": item.unit_price,
                "total_price": item.total_price,
            }
            for item in order.items
        ],
    }
