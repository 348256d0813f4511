"""
Inventory Persistence Service for Merchant POS
==============================================

Database-facing side of inventory handling. The usage and sufficiency rules
themselves live in merchant_pos/inventory.py and work on plain dicts; this
module loads those dicts from the database and writes stock changes back.

Key Functions:
--------------
- load_inventory_snapshot: Active inventory rows as plain dicts
- build_order_lines: Resolve requested dish ids into core order lines
- check_order_inventory: Usage + sufficiency for a set of order lines
- deduct_inventory: Validate, then decrement stock for a usage map
- restock_inventory: Add stock to one item
- inventory_stats: Stock overview for the dashboard

Transactions:
-------------
deduct_inventory and restock_inventory only modify ORM objects; the caller
commits (or rolls back) so that stock changes land in the same transaction as
the order that caused them.
"""

import logging
from collections import defaultdict
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Mapping, Optional

from sqlalchemy.orm import Session

from ..inventory import (
    OutOfStockError,
    SufficiencyResult,
    UsageMap,
    calculate_order_inventory_usage,
    check_inventory_sufficiency,
)
from ..logging_config import audit
from ..models import Dish, InventoryItem

logger = logging.getLogger(__name__)


class DishNotFoundError(Exception):
    """Raised when an order line refers to a missing or inactive dish."""

    def __init__(self, dish_id: Any):
        self.dish_id = dish_id
        super().__init__(f"Dish not found: {dish_id}")


@dataclass
class InventoryCheck:
    usage: UsageMap
    snapshot: List[Dict[str, Any]]
    result: SufficiencyResult


def _row_id(inventory_id: Any) -> Optional[int]:
    try:
        return int(inventory_id)
    except (TypeError, ValueError):
        return None


def load_inventory_snapshot(
    db: Session,
    inventory_ids: Optional[Iterable[Any]] = None,
) -> List[Dict[str, Any]]:
    """
    Load active inventory items as snapshot dicts.

    Args:
        db: Database session
        inventory_ids: Restrict to these ids. Ids that are not valid row ids
                       are ignored (they will surface as unknown inventory).
    """
    query = db.query(InventoryItem).filter(InventoryItem.is_active.is_(True))
    if inventory_ids is not None:
        row_ids = [row_id for row_id in map(_row_id, inventory_ids) if row_id is not None]
        if not row_ids:
            return []
        query = query.filter(InventoryItem.id.in_(row_ids))
    return [item.to_snapshot() for item in query.order_by(InventoryItem.id).all()]


def build_order_lines(db: Session, items: Iterable[Mapping[str, Any]]) -> List[Dict[str, Any]]:
    """
    Turn requested lines ({dish_id, selected_options, quantity}) into core
    order lines carrying the dish snapshot.

    Raises:
        DishNotFoundError: If a dish id is unknown or the dish is inactive.
    """
    lines = []
    for item in items:
        dish = db.get(Dish, item["dish_id"])
        if dish is None or not dish.is_active:
            raise DishNotFoundError(item["dish_id"])
        lines.append({
            "dish": dish.to_snapshot(),
            "selected_options": dict(item.get("selected_options") or {}),
            "quantity": item.get("quantity", 1),
        })
    return lines


def check_order_inventory(db: Session, lines: Iterable[Mapping[str, Any]]) -> InventoryCheck:
    """Compute usage for order lines and check it against current stock."""
    usage = calculate_order_inventory_usage(lines)
    snapshot = load_inventory_snapshot(db, usage.keys())
    return InventoryCheck(
        usage=usage,
        snapshot=snapshot,
        result=check_inventory_sufficiency(usage, snapshot),
    )


def deduct_inventory(db: Session, usage: Mapping[str, float]) -> None:
    """
    Decrement stock for every inventory id in ``usage``.

    1. Check the usage against current stock.
       - If anything is short, raise OutOfStockError and change nothing.
    2. Decrement each limited item; unlimited items (stock == -1) are skipped.

    The caller is responsible for committing.
    """
    snapshot = load_inventory_snapshot(db, usage.keys())
    result = check_inventory_sufficiency(usage, snapshot)
    if not result.is_sufficient:
        logger.warning(
            "Stock deduction refused, %d item(s) short", len(result.insufficient_items)
        )
        raise OutOfStockError(result.insufficient_items)

    for inventory_id, required in usage.items():
        item = db.get(InventoryItem, _row_id(inventory_id))
        if item.is_unlimited:
            continue
        item.stock -= required
        audit("stock.deduct", inventory_id=item.id, amount=required, stock=item.stock)


def restock_inventory(
    item: InventoryItem,
    quantity: float,
    event: str = "stock.restock",
) -> InventoryItem:
    """Add ``quantity`` to an item's stock. Unlimited items are left unchanged."""
    if not item.is_unlimited:
        item.stock += quantity
        audit(event, inventory_id=item.id, amount=quantity, stock=item.stock)
    return item


def return_inventory(db: Session, usage: Mapping[str, float]) -> None:
    """Put previously deducted usage back into stock (e.g. a cancelled order)."""
    for inventory_id, amount in usage.items():
        row_id = _row_id(inventory_id)
        item = db.get(InventoryItem, row_id) if row_id is not None else None
        if item is None:
            logger.warning("Cannot return stock to missing inventory %s", inventory_id)
            continue
        restock_inventory(item, amount, event="stock.return")


def inventory_stats(db: Session) -> Dict[str, Any]:
    """
    Stock overview.

    Low-stock counts items at or below their min_stock, which includes items
    that are out of stock. Unlimited items are never low or out of stock and
    contribute no stock value.
    """
    items = db.query(InventoryItem).all()

    categories: Dict[str, Dict[str, Any]] = defaultdict(lambda: {"count": 0, "total_value": 0.0})
    out_of_stock = 0
    low_stock = 0
    unlimited = 0
    for item in items:
        bucket = categories[item.category]
        bucket["count"] += 1
        if item.is_unlimited:
            unlimited += 1
            continue
        bucket["total_value"] += (item.unit_cost or 0.0) * item.stock
        if item.stock <= 0:
            out_of_stock += 1
        if item.stock <= item.min_stock:
            low_stock += 1

    return {
        "total_items": len(items),
        "active_items": sum(1 for item in items if item.is_active),
        "unlimited_items": unlimited,
        "out_of_stock_items": out_of_stock,
        "low_stock_items": low_stock,
        "categories": [
            {"category": name, "count": bucket["count"], "total_value": round(bucket["total_value"], 2)}
            for name, bucket in sorted(categories.items(), key=lambda kv: (-kv[1]["count"], kv[0]))
        ],
    }
