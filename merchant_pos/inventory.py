"""
Inventory Usage and Sufficiency Calculation
===========================================

Pure functions that work out how much raw inventory a dish (or a whole order)
consumes, and whether a stock snapshot can cover it. Nothing in this module
touches the database; callers pass in plain dicts and get plain results back.
See services/inventory.py for the persistence side (loading snapshots and
decrementing stock).

Inventory Config Shape:
-----------------------
A dish carries an optional ``inventory_config`` mapping:

    {
        "base_inventory": [
            {"inventory_id": "rice", "quantity": 1},
        ],
        "conditional_inventory": [
            {
                "inventory_id": "cup",
                "base_quantity": 1,
                "conditions": [
                    {"option_type": "size", "option_value": "large",
                     "multiplier": 2, "additional_quantity": 0},
                ],
            },
        ],
    }

Base entries always apply. A conditional entry starts from ``base_quantity``;
each condition matching the customer's selected options rewrites the running
quantity as ``quantity * multiplier + additional_quantity``. Matching
conditions are applied in list order and each one overwrites the previous
result; they do not add up independently.

Stock Snapshot Shape:
---------------------
Available inventory is a list of mappings with ``id`` (or ``_id``), ``name``,
``category``, ``unit`` and ``stock``. A stock of -1 means unlimited.

Usage:
------
    usage = calculate_order_inventory_usage(order_items)
    result = check_inventory_sufficiency(usage, snapshot)
    if not result.is_sufficient:
        raise OutOfStockError(result.insufficient_items)
"""

import logging
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional

logger = logging.getLogger(__name__)

UNLIMITED_STOCK = -1
UNKNOWN_INVENTORY_NAME = "unknown"

UsageMap = Dict[str, float]


class OutOfStockError(Exception):
    """Raised when there is not enough inventory to fulfill an order."""

    def __init__(self, insufficient_items: List["ShortfallEntry"]):
        self.insufficient_items = insufficient_items
        names = ", ".join(entry.name for entry in insufficient_items)
        super().__init__(f"Not enough inventory for: {names}")


@dataclass
class ShortfallEntry:
    inventory_id: str
    name: str
    required: float
    available: float
    shortfall: float

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class SufficiencyResult:
    is_sufficient: bool
    insufficient_items: List[ShortfallEntry] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "is_sufficient": self.is_sufficient,
            "insufficient_items": [entry.to_dict() for entry in self.insufficient_items],
        }


@dataclass
class UsageDetail:
    inventory_id: str
    name: str
    category: str
    unit: str
    required: float
    available: float
    is_unlimited: bool

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


# =============================================================================
# Normalization helpers
# =============================================================================

def normalize_inventory_id(value: Any) -> Optional[str]:
    """Return the inventory id as a string, or None when it is missing."""
    if value is None or value == "":
        return None
    return str(value)


def inventory_record_id(record: Mapping[str, Any]) -> Optional[str]:
    """Id of a stock snapshot record, accepting either ``id`` or ``_id``."""
    value = record.get("id")
    if value is None:
        value = record.get("_id")
    return normalize_inventory_id(value)


def _as_number(value: Any, default: Optional[float] = None) -> Optional[float]:
    if value is None:
        return default
    if isinstance(value, bool):
        return default
    if isinstance(value, (int, float)):
        return value
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


def _positive_quantity(value: Any) -> Optional[float]:
    quantity = _as_number(value)
    if quantity is None or quantity <= 0:
        return None
    return quantity


def _index_inventory(available: Iterable[Mapping[str, Any]]) -> Dict[str, Mapping[str, Any]]:
    index = {}
    for record in available or []:
        record_id = inventory_record_id(record)
        if record_id is not None and record_id not in index:
            index[record_id] = record
    return index


def _stock_of(record: Mapping[str, Any]) -> float:
    return _as_number(record.get("stock"), default=0)


# =============================================================================
# Option Resolver / Usage Aggregator
# =============================================================================

def calculate_dish_inventory_usage(
    dish: Optional[Mapping[str, Any]],
    selected_options: Optional[Mapping[str, Any]] = None,
) -> UsageMap:
    """
    Compute the inventory consumed by one unit of a dish.

    Args:
        dish: Dish mapping, optionally carrying ``inventory_config``.
        selected_options: Option type -> chosen value for this line item.

    Returns:
        Inventory id -> required quantity. Empty when the dish has no
        inventory configuration. Malformed entries contribute nothing.
    """
    if not dish:
        return {}
    config = dish.get("inventory_config")
    if not isinstance(config, Mapping):
        return {}

    selected_options = selected_options or {}
    usage: UsageMap = {}

    for entry in config.get("base_inventory") or []:
        if not isinstance(entry, Mapping):
            continue
        inventory_id = normalize_inventory_id(entry.get("inventory_id"))
        quantity = _positive_quantity(entry.get("quantity"))
        if inventory_id is None or quantity is None:
            continue
        usage[inventory_id] = usage.get(inventory_id, 0) + quantity

    for entry in config.get("conditional_inventory") or []:
        if not isinstance(entry, Mapping):
            continue
        inventory_id = normalize_inventory_id(entry.get("inventory_id"))
        quantity = _positive_quantity(entry.get("base_quantity"))
        if inventory_id is None or quantity is None:
            continue

        for condition in entry.get("conditions") or []:
            if not isinstance(condition, Mapping):
                continue
            option_type = condition.get("option_type")
            if option_type not in selected_options:
                continue
            if selected_options[option_type] != condition.get("option_value"):
                continue
            multiplier = _as_number(condition.get("multiplier"), default=1)
            additional = _as_number(condition.get("additional_quantity"), default=0)
            # Each match rewrites the running quantity; matches do not stack.
            quantity = quantity * multiplier + additional

        # A non-positive result contributes nothing.
        if quantity <= 0:
            continue
        usage[inventory_id] = usage.get(inventory_id, 0) + quantity

    return usage


def estimate_dish_inventory_usage(
    dish: Optional[Mapping[str, Any]],
    preview_options: Optional[Mapping[str, Any]] = None,
) -> UsageMap:
    """Preview usage for the dish editor; same rules as an actual order."""
    return calculate_dish_inventory_usage(dish, preview_options)


def calculate_order_inventory_usage(order_items: Iterable[Mapping[str, Any]]) -> UsageMap:
    """
    Sum inventory usage across order line items.

    Each line item is ``{"dish": ..., "selected_options": ..., "quantity": n}``;
    the dish's per-unit usage is scaled by ``quantity``. A missing, zero or
    negative quantity counts as 1.
    """
    total: UsageMap = {}
    for item in order_items or []:
        item_usage = calculate_dish_inventory_usage(
            item.get("dish"), item.get("selected_options")
        )
        quantity = _positive_quantity(item.get("quantity")) or 1
        for inventory_id, amount in item_usage.items():
            total[inventory_id] = total.get(inventory_id, 0) + amount * quantity
    return total


# =============================================================================
# Sufficiency Checker
# =============================================================================

def check_inventory_sufficiency(
    usage: Mapping[str, float],
    available: Iterable[Mapping[str, Any]],
) -> SufficiencyResult:
    """
    Compare required usage against a stock snapshot.

    Never raises: an inventory id missing from the snapshot is reported as a
    shortfall of the full required amount.
    """
    index = _index_inventory(available)
    insufficient: List[ShortfallEntry] = []

    for inventory_id, required in usage.items():
        record = index.get(inventory_id)
        if record is None:
            insufficient.append(ShortfallEntry(
                inventory_id=inventory_id,
                name=UNKNOWN_INVENTORY_NAME,
                required=required,
                available=0,
                shortfall=required,
            ))
            continue

        stock = _stock_of(record)
        if stock != UNLIMITED_STOCK and stock < required:
            insufficient.append(ShortfallEntry(
                inventory_id=inventory_id,
                name=record.get("name") or UNKNOWN_INVENTORY_NAME,
                required=required,
                available=stock,
                shortfall=required - stock,
            ))

    if insufficient:
        logger.debug("Inventory shortfall on %d item(s)", len(insufficient))

    return SufficiencyResult(
        is_sufficient=not insufficient,
        insufficient_items=insufficient,
    )


def get_inventory_usage_details(
    usage: Mapping[str, float],
    available: Iterable[Mapping[str, Any]],
) -> List[UsageDetail]:
    """One descriptive row per usage key, whether or not stock covers it."""
    index = _index_inventory(available)
    details = []
    for inventory_id, required in usage.items():
        record = index.get(inventory_id)
        if record is None:
            details.append(UsageDetail(
                inventory_id=inventory_id,
                name=UNKNOWN_INVENTORY_NAME,
                category="",
                unit="",
                required=required,
                available=0,
                is_unlimited=False,
            ))
            continue

        stock = _stock_of(record)
        details.append(UsageDetail(
            inventory_id=inventory_id,
            name=record.get("name") or UNKNOWN_INVENTORY_NAME,
            category=record.get("category") or "",
            unit=record.get("unit") or "",
            required=required,
            available=stock,
            is_unlimited=stock == UNLIMITED_STOCK,
        ))
    return details


def format_inventory_usage_display(
    usage: Mapping[str, float],
    available: Iterable[Mapping[str, Any]],
) -> List[Dict[str, Any]]:
    """Rows for previews and printouts: display name, quantity and unit."""
    index = _index_inventory(available)
    rows = []
    for inventory_id, quantity in usage.items():
        record = index.get(inventory_id)
        if record is None:
            rows.append({
                "key": inventory_id,
                "display_name": UNKNOWN_INVENTORY_NAME,
                "quantity": quantity,
                "unit": "",
            })
            continue
        rows.append({
            "key": inventory_id,
            "display_name": record.get("name") or UNKNOWN_INVENTORY_NAME,
            "quantity": quantity,
            "unit": record.get("unit") or "",
        })
    return rows
