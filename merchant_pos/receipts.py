"""
Receipt Line Merging and Receipt Data
=====================================

Builds the data printed on a checkout receipt from an order's line items.
Line items ordering the same dish with the same selected options are merged
into one receipt row with a combined quantity and price.

Key Functions:
--------------
- normalize_identifier: Turn a raw id (plain value or embedded document with
  ``_id``/``id``) into a string
- receipt_item_key: Identity of a line item for merging
- merge_items: Group duplicate line items, preserving first-seen order
- generate_receipt_data: Receipt summary for print/export
- generate_bill_number: Random 10-digit bill number (no uniqueness check;
  see services/receipt.py for the collision-checked allocator)

Pricing:
--------
A merged row is always priced at the unit price of the first line item seen
for its key (``price``, falling back to ``unit_price``):

    total_price = quantity * unit_price
"""

import json
import random
from datetime import datetime
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from . import config

BILL_NUMBER_MIN = 1_000_000_000
BILL_NUMBER_MAX = 9_999_999_999


class InvalidOrderError(ValueError):
    """Raised when an order passed in for checkout has no items collection."""


def normalize_identifier(value: Any) -> Optional[str]:
    """
    Normalize a raw identifier to a string.

    Accepts a plain value (string, int, ObjectId-like) or an embedded document
    carrying ``_id`` or ``id``. Returns None when no identifier is present.
    """
    if isinstance(value, Mapping):
        embedded = value.get("_id")
        if embedded is None:
            embedded = value.get("id")
        value = embedded
    if value is None or value == "":
        return None
    return str(value)


def render_option_value(value: Any) -> str:
    """Render one selected option value for the merge key."""
    if isinstance(value, Mapping):
        for field_name in ("label", "name", "value"):
            if value.get(field_name):
                return str(value[field_name])
        return json.dumps(value, sort_keys=True, default=str)
    return str(value)


def canonical_options_key(selected_options: Optional[Mapping[str, Any]]) -> str:
    """``type:value`` pairs sorted by option type, joined with ``|``."""
    if not selected_options:
        return ""
    return "|".join(
        f"{option_type}:{render_option_value(selected_options[option_type])}"
        for option_type in sorted(selected_options)
    )


def _item_dish_id(item: Mapping[str, Any]) -> Optional[str]:
    dish_id = normalize_identifier(item.get("dish_id"))
    if dish_id is None:
        dish_id = normalize_identifier(item.get("id"))
    return dish_id


def receipt_item_key(item: Mapping[str, Any]) -> Tuple[Optional[str], str]:
    """Merge identity of a line item: dish id plus canonical options."""
    return _item_dish_id(item), canonical_options_key(item.get("selected_options"))


def item_unit_price(item: Mapping[str, Any]) -> float:
    return item.get("price") or item.get("unit_price") or 0


def merge_items(items: Optional[Iterable[Mapping[str, Any]]]) -> List[Dict[str, Any]]:
    """
    Merge line items sharing a dish and selected options.

    Quantities of matching items are summed and the row is repriced at the
    first-seen item's unit price. Rows come out in first-occurrence order.

    Raises:
        InvalidOrderError: If ``items`` is None.
    """
    if items is None:
        raise InvalidOrderError("Order has no items to merge")

    merged: Dict[Tuple[Optional[str], str], Dict[str, Any]] = {}
    for item in items:
        dish_id, options_key = receipt_item_key(item)
        key = (dish_id, options_key)
        quantity = item.get("quantity")
        if quantity is None:
            quantity = 1

        existing = merged.get(key)
        if existing is not None:
            existing["quantity"] += quantity
            existing["total_price"] = existing["quantity"] * item_unit_price(existing)
            continue

        entry = dict(item)
        entry["dish_id"] = dish_id
        entry["selected_options"] = dict(item.get("selected_options") or {})
        entry["quantity"] = quantity
        entry["total_price"] = quantity * item_unit_price(item)
        merged[key] = entry

    return list(merged.values())


def generate_bill_number() -> str:
    """Random 10-digit decimal string. Not guaranteed unique."""
    return str(random.randint(BILL_NUMBER_MIN, BILL_NUMBER_MAX))


def format_checkout_time(moment: datetime) -> str:
    return moment.strftime("%Y/%m/%d %H:%M")


def generate_receipt_data(
    order: Optional[Mapping[str, Any]],
    employee_id: Optional[str],
    table_number: Optional[str],
    store_name: Optional[str] = None,
    existing_bill_number: Optional[str] = None,
    checkout_time: Optional[datetime] = None,
) -> Dict[str, Any]:
    """
    Build receipt data for an order.

    Args:
        order: Order mapping with an ``items`` list (plus optional ``_id``/``id``
               and ``order_number``).
        employee_id: Staff member checking the order out.
        table_number: Table the order belongs to.
        store_name: Name printed on the receipt (default from config).
        existing_bill_number: Reuse this bill number, e.g. when reprinting a
               historical order; otherwise a new one is generated.
        checkout_time: Timestamp to print (default: now).

    Raises:
        InvalidOrderError: If the order is missing or has no items collection.
    """
    if not order or order.get("items") is None:
        raise InvalidOrderError("Invalid order data: order items are required")

    order_id = order.get("_id")
    if order_id is None:
        order_id = order.get("id")

    merged_items = merge_items(order["items"])
    subtotal = sum(item["total_price"] for item in merged_items)

    return {
        "order_id": normalize_identifier(order_id),
        "order_number": order.get("order_number"),
        "table_number": table_number,
        "bill_number": existing_bill_number or generate_bill_number(),
        "employee_id": employee_id,
        "checkout_time": format_checkout_time(checkout_time or datetime.now()),
        "items": [
            {
                "dish_id": item["dish_id"],
                "name": item.get("name"),
                "selected_options": item["selected_options"],
                "quantity": item["quantity"],
                "unit_price": item_unit_price(item),
                "total_price": item["total_price"],
            }
            for item in merged_items
        ],
        "subtotal": subtotal,
        # No service charge or tax lines yet, so total equals subtotal
        "total": subtotal,
        "store_name": store_name or config.DEFAULT_STORE_NAME,
    }
