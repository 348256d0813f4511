"""
Receipt Service for Merchant POS
================================

Checkout persistence: turns an open order into a stored receipt with merged
lines and a bill number that no other receipt uses.

Key Functions:
--------------
- allocate_bill_number: Random 10-digit bill number checked against stored
  receipts (the unique column on Receipt.bill_number backs this up)
- create_receipt_for_order: Checkout; one active receipt per order
- reprint_receipt: Bump the print counter
- void_receipt: Void an active receipt and reopen its order
- receipt_stats: Count, revenue and average over active receipts
"""

import logging
from datetime import date, datetime, time, timedelta
from typing import Callable, Dict, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from .. import config
from ..auth import CheckoutContext
from ..logging_config import audit
from ..models import Order, Receipt, ReceiptItem
from ..receipts import generate_bill_number, generate_receipt_data
from .order import order_to_receipt_input

logger = logging.getLogger(__name__)


class ReceiptExistsError(Exception):
    """Raised when an order already has an active receipt."""


class ReceiptStateError(Exception):
    """Raised when a receipt or its order is in the wrong state for the operation."""


class BillNumberExhaustedError(Exception):
    """Raised when no unused bill number was found within the attempt budget."""


def allocate_bill_number(
    db: Session,
    max_attempts: Optional[int] = None,
    generator: Optional[Callable[[], str]] = None,
) -> str:
    """
    Find a bill number not used by any stored receipt.

    Raises:
        BillNumberExhaustedError: After ``max_attempts`` collisions
            (default BILL_NUMBER_MAX_ATTEMPTS).
    """
    attempts = max_attempts or config.BILL_NUMBER_MAX_ATTEMPTS
    generator = generator or generate_bill_number
    for _ in range(attempts):
        candidate = generator()
        taken = db.query(Receipt.id).filter(Receipt.bill_number == candidate).first()
        if taken is None:
            return candidate
        logger.debug("Bill number %s already used, retrying", candidate)
    raise BillNumberExhaustedError(f"No free bill number after {attempts} attempts")


def create_receipt_for_order(
    db: Session,
    order: Order,
    context: CheckoutContext,
    checkout_time: Optional[datetime] = None,
) -> Receipt:
    """
    Check out an order: persist its receipt and mark the order paid.

    Raises:
        ReceiptExistsError: If the order already has an active receipt.
        ReceiptStateError: If the order was cancelled.
        BillNumberExhaustedError: If no bill number could be allocated.
    """
    existing = db.query(Receipt).filter(
        Receipt.order_id == order.id,
        Receipt.status == "active",
    ).first()
    if existing is not None:
        raise ReceiptExistsError(f"Order {order.order_number} already has receipt {existing.bill_number}")
    if order.status == "cancelled":
        raise ReceiptStateError(f"Order {order.order_number} is cancelled")

    checkout_time = checkout_time or datetime.now()
    data = generate_receipt_data(
        order_to_receipt_input(order),
        context.employee_id,
        order.table_number,
        context.store_name,
        existing_bill_number=allocate_bill_number(db),
        checkout_time=checkout_time,
    )

    receipt = Receipt(
        bill_number=data["bill_number"],
        order_id=order.id,
        table_number=order.table_number,
        employee_id=context.employee_id,
        employee_name=context.employee_name,
        store_name=data["store_name"],
        subtotal=data["subtotal"],
        total=data["total"],
        checkout_time=checkout_time,
    )
    for line in data["items"]:
        receipt.items.append(ReceiptItem(
            dish_id=line["dish_id"],
            name=line["name"],
            selected_options=line["selected_options"],
            quantity=line["quantity"],
            unit_price=line["unit_price"],
            total_price=line["total_price"],
        ))

    order.status = "paid"
    db.add(receipt)
    db.commit()
    db.refresh(receipt)

    audit(
        "receipt.created",
        bill_number=receipt.bill_number,
        order_number=order.order_number,
        employee_id=context.employee_id,
        total=f"{receipt.total:.2f}",
    )
    return receipt


def reprint_receipt(db: Session, receipt: Receipt) -> Receipt:
    receipt.print_count = (receipt.print_count or 0) + 1
    receipt.last_printed_at = datetime.now()
    db.commit()
    db.refresh(receipt)
    return receipt


def void_receipt(db: Session, receipt: Receipt, reason: Optional[str] = None) -> Receipt:
    """
    Void an active receipt. The order goes back to "open" so it can be
    checked out again.

    Raises:
        ReceiptStateError: If the receipt is not active.
    """
    if receipt.status != "active":
        raise ReceiptStateError(f"Receipt {receipt.bill_number} is {receipt.status}")

    receipt.status = "void"
    receipt.notes = reason or "Receipt voided"
    if receipt.order is not None and receipt.order.status == "paid":
        receipt.order.status = "open"
    db.commit()
    db.refresh(receipt)
    audit("receipt.voided", bill_number=receipt.bill_number, reason=receipt.notes)
    return receipt


def receipt_stats(
    db: Session,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
) -> Dict[str, float]:
    """
    Count, revenue and average total of active receipts.

    Both bounds are optional; end_date is inclusive.
    """
    query = db.query(
        func.count(Receipt.id),
        func.coalesce(func.sum(Receipt.total), 0.0),
        func.avg(Receipt.total),
    ).filter(Receipt.status == "active")

    if start_date is not None:
        query = query.filter(Receipt.checkout_time >= datetime.combine(start_date, time.min))
    if end_date is not None:
        query = query.filter(Receipt.checkout_time < datetime.combine(end_date + timedelta(days=1), time.min))

    count, revenue, average = query.one()
    return {
        "total_receipts": count,
        "total_revenue": float(revenue or 0.0),
        "average_amount": float(average or 0.0),
    }
