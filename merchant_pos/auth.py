"""
Authentication Module for Merchant POS
======================================

HTTP Basic Authentication for admin and staff endpoints, plus the
request-scoped checkout context used by the receipt endpoints.

Authentication:
---------------
Credentials are configured via environment variables (ADMIN_USERNAME,
ADMIN_PASSWORD). Comparison uses `secrets.compare_digest()` so response time
does not reveal how many characters matched. If ADMIN_PASSWORD is not
configured, protected endpoints return 503 rather than allowing
unauthenticated access.

Checkout Context:
-----------------
Who is checking out, and for which store, travels with the request instead of
living in global state. `get_checkout_context` builds a `CheckoutContext` from
the authenticated username and optional headers:

- X-Employee-Id: Employee number printed on the receipt (default: username)
- X-Employee-Name: Display name (default: "")
- X-Store-Name: Store name printed on the receipt (default: DEFAULT_STORE_NAME)

Usage:
------
    @router.post("/receipts")
    def create_receipt(
        context: CheckoutContext = Depends(get_checkout_context),
        db: Session = Depends(get_db),
    ):
        ...
"""

import secrets
from dataclasses import dataclass
from typing import Optional

from fastapi import Depends, Header, HTTPException, status
from fastapi.security import HTTPBasic, HTTPBasicCredentials

from . import config


# Shared realm so browsers cache credentials across dashboard pages
security = HTTPBasic(realm="Merchant POS")


def verify_admin_credentials(
    credentials: HTTPBasicCredentials = Depends(security),
) -> str:
    """
    Verify HTTP Basic Auth credentials.

    Returns:
        str: The authenticated username if credentials are valid.

    Raises:
        HTTPException (503): If ADMIN_PASSWORD is not set.
        HTTPException (401): If credentials are invalid.
    """
    # Fail closed: if password not configured, deny all access
    if not config.ADMIN_PASSWORD:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Admin authentication not configured. Set ADMIN_PASSWORD environment variable.",
        )

    username_correct = secrets.compare_digest(
        credentials.username.encode("utf-8"),
        config.ADMIN_USERNAME.encode("utf-8"),
    )
    password_correct = secrets.compare_digest(
        credentials.password.encode("utf-8"),
        config.ADMIN_PASSWORD.encode("utf-8"),
    )

    if not (username_correct and password_correct):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid admin credentials",
            headers={"WWW-Authenticate": "Basic"},
        )

    return credentials.username


@dataclass(frozen=True)
class CheckoutContext:
    """Who is checking out and for which store, scoped to one request."""

    employee_id: str
    employee_name: str
    store_name: str


def get_checkout_context(
    username: str = Depends(verify_admin_credentials),
    x_employee_id: Optional[str] = Header(None),
    x_employee_name: Optional[str] = Header(None),
    x_store_name: Optional[str] = Header(None),
) -> CheckoutContext:
    """FastAPI dependency building the checkout context for this request."""
    return CheckoutContext(
        employee_id=(x_employee_id or "").strip() or username,
        employee_name=(x_employee_name or "").strip(),
        store_name=(x_store_name or "").strip() or config.DEFAULT_STORE_NAME,
    )
