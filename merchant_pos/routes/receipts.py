"""
Receipt Routes for Merchant POS
===============================

Checkout endpoints. Creating a receipt merges identical order lines, assigns
a 10-digit bill number and marks the order paid.

Endpoints:
----------
Checkout:
- POST /receipts: Create the receipt for an order (rate limited)
- POST /receipts/preview: Receipt data for an ad-hoc order, nothing persisted

Lookup:
- GET /receipts/stats: Count, revenue and average of active receipts
- GET /receipts/bill/{bill_number}: Receipt by bill number
- GET /receipts/order/{order_id}: Active receipt for an order
- GET /receipts/{id}: Receipt by id

Maintenance:
- POST /receipts/{id}/reprint: Bump the print counter
- PATCH /receipts/{id}/void: Void an active receipt, reopening its order

Authentication:
---------------
All endpoints require HTTP Basic Auth. The employee and store printed on the
receipt come from the optional X-Employee-Id, X-Employee-Name and
X-Store-Name headers; the employee id defaults to the authenticated user.

Rate Limiting:
--------------
POST /receipts is limited per client IP (RATE_LIMIT_CHECKOUT, default
"60 per minute").
"""

import logging
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.orm import Session

from ..auth import CheckoutContext, get_checkout_context, verify_admin_credentials
from ..config import get_rate_limit_checkout
from ..db import get_db
from ..limiter import limiter
from ..models import Order, Receipt
from ..receipts import InvalidOrderError, generate_receipt_data
from ..schemas.receipts import (
    ReceiptCreate,
    ReceiptOut,
    ReceiptVoidRequest,
    ReceiptStatsOut,
    ReceiptPreviewRequest,
    ReceiptPreviewOut,
)
from ..services.receipt import (
    BillNumberExhaustedError,
    ReceiptExistsError,
    ReceiptStateError,
    create_receipt_for_order,
    receipt_stats,
    reprint_receipt,
    void_receipt,
)


logger = logging.getLogger(__name__)

receipts_router = APIRouter(prefix="/receipts", tags=["Receipts"])


def _get_receipt_or_404(db: Session, receipt_id: int) -> Receipt:
    receipt = db.get(Receipt, receipt_id)
    if receipt is None:
        raise HTTPException(status_code=404, detail="Receipt not found")
    return receipt


@receipts_router.post("", response_model=ReceiptOut, status_code=201)
@limiter.limit(get_rate_limit_checkout)
def create_receipt(
    request: Request,
    payload: ReceiptCreate,
    db: Session = Depends(get_db),
    context: CheckoutContext = Depends(get_checkout_context),
) -> ReceiptOut:
    """Check out an order. Rate limited per client IP."""
    order = db.get(Order, payload.order_id)
    if order is None:
        raise HTTPException(status_code=404, detail="Order not found")

    try:
        receipt = create_receipt_for_order(db, order, context)
    except ReceiptExistsError as exc:
        raise HTTPException(status_code=409, detail=str(exc))
    except ReceiptStateError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    except InvalidOrderError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    except BillNumberExhaustedError as exc:
        logger.error("Checkout for order %s failed: %s", order.order_number, exc)
        raise HTTPException(status_code=503, detail="Could not allocate a bill number, try again")
    return ReceiptOut.model_validate(receipt)


@receipts_router.post("/preview", response_model=ReceiptPreviewOut)
def preview_receipt(
    payload: ReceiptPreviewRequest,
    context: CheckoutContext = Depends(get_checkout_context),
) -> ReceiptPreviewOut:
    """
    Build receipt data for an order that is not (or not yet) stored.

    Pass existing_bill_number to keep the number of a receipt that was
    already printed; otherwise a fresh one is generated without checking it
    against stored receipts.
    """
    order = payload.model_dump(exclude={"table_number", "existing_bill_number"})
    if order["order_id"] is not None:
        order["id"] = order.pop("order_id")
    try:
        data = generate_receipt_data(
            order,
            context.employee_id,
            payload.table_number,
            context.store_name,
            existing_bill_number=payload.existing_bill_number,
        )
    except InvalidOrderError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    return ReceiptPreviewOut(**data)


@receipts_router.get("/stats", response_model=ReceiptStatsOut)
def get_receipt_stats(
    db: Session = Depends(get_db),
    _admin: str = Depends(verify_admin_credentials),
    start_date: Optional[date] = Query(None, description="First day to include (YYYY-MM-DD)"),
    end_date: Optional[date] = Query(None, description="Last day to include (YYYY-MM-DD)"),
) -> ReceiptStatsOut:
    return ReceiptStatsOut(**receipt_stats(db, start_date, end_date))


@receipts_router.get("/bill/{bill_number}", response_model=ReceiptOut)
def get_receipt_by_bill_number(
    bill_number: str,
    db: Session = Depends(get_db),
    _admin: str = Depends(verify_admin_credentials),
) -> ReceiptOut:
    receipt = db.query(Receipt).filter(Receipt.bill_number == bill_number).first()
    if receipt is None:
        raise HTTPException(status_code=404, detail="Receipt not found")
    return ReceiptOut.model_validate(receipt)


@receipts_router.get("/order/{order_id}", response_model=ReceiptOut)
def get_receipt_for_order(
    order_id: int,
    db: Session = Depends(get_db),
    _admin: str = Depends(verify_admin_credentials),
) -> ReceiptOut:
    receipt = db.query(Receipt).filter(
        Receipt.order_id == order_id,
        Receipt.status == "active",
    ).first()
    if receipt is None:
        raise HTTPException(status_code=404, detail="No active receipt for this order")
    return ReceiptOut.model_validate(receipt)


@receipts_router.get("/{receipt_id}", response_model=ReceiptOut)
def get_receipt(
    receipt_id: int,
    db: Session = Depends(get_db),
    _admin: str = Depends(verify_admin_credentials),
) -> ReceiptOut:
    return ReceiptOut.model_validate(_get_receipt_or_404(db, receipt_id))


@receipts_router.post("/{receipt_id}/reprint", response_model=ReceiptOut)
def reprint(
    receipt_id: int,
    db: Session = Depends(get_db),
    _admin: str = Depends(verify_admin_credentials),
) -> ReceiptOut:
    receipt = reprint_receipt(db, _get_receipt_or_404(db, receipt_id))
    logger.info("Reprinted receipt %s (print_count=%d)", receipt.bill_number, receipt.print_count)
    return ReceiptOut.model_validate(receipt)


@receipts_router.patch("/{receipt_id}/void", response_model=ReceiptOut)
def void(
    receipt_id: int,
    payload: ReceiptVoidRequest,
    db: Session = Depends(get_db),
    _admin: str = Depends(verify_admin_credentials),
) -> ReceiptOut:
    receipt = _get_receipt_or_404(db, receipt_id)
    try:
        receipt = void_receipt(db, receipt, payload.reason)
    except ReceiptStateError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    return ReceiptOut.model_validate(receipt)
