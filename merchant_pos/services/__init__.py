"""
Services Package for Merchant POS
=================================

Service modules encapsulating database-backed business operations. The pure
calculation rules live in merchant_pos/inventory.py and merchant_pos/receipts.py;
services load their inputs from the database and persist their results.

Available Services:
-------------------
- **inventory**: Stock snapshots, stock deduction/return, stock stats
- **order**: Order placement and cancellation
- **receipt**: Checkout receipts, bill number allocation, reprint/void, stats

Services receive their database session from the caller rather than creating
one, so routes and tests control the transaction.

Usage:
------
    from merchant_pos.services.order import place_order
    from merchant_pos.services.receipt import create_receipt_for_order

Or import the modules:

    from merchant_pos.services import inventory, order, receipt
"""

from . import inventory
from . import order
from . import receipt

__all__ = ["inventory", "order", "receipt"]
