"""
Configuration Module for Merchant POS
=====================================

This module centralizes the configuration settings, environment variables, and
constants used throughout the Merchant POS backend. Values are read once at
module load time, so a `.env` file must be loaded (see main.py) before this
module is imported.

Configuration Categories:
-------------------------
- **Database**: Connection URL for the SQLAlchemy engine.

- **Store Configuration**: Display name printed on receipts when the checkout
  request does not name a store.

- **Rate Limiting**: Throttling for the checkout endpoints, which create
  receipts and reserve bill numbers.

- **Bill Numbers**: How many random candidates the allocator tries before
  giving up on finding an unused bill number.

- **CORS Settings**: Cross-Origin Resource Sharing configuration for the
  merchant dashboard frontend.

- **Admin Authentication**: Credentials for HTTP Basic Auth.

Environment Variables:
----------------------
- DATABASE_URL: SQLAlchemy URL (default: "sqlite:///./merchant_pos.db")
- DEFAULT_STORE_NAME: Receipt store name fallback (default: "Restaurant")
- RATE_LIMIT_CHECKOUT: Checkout rate limit (default: "60 per minute")
- RATE_LIMIT_ENABLED: Enable/disable rate limiting (default: "true")
- BILL_NUMBER_MAX_ATTEMPTS: Allocator retry budget (default: 20)
- CORS_ORIGINS: Comma-separated allowed origins (default: "*")
- ADMIN_USERNAME: Admin/staff username (default: "admin")
- ADMIN_PASSWORD: Admin/staff password (required for protected endpoints)

Usage:
------
    from merchant_pos.config import (
        DEFAULT_STORE_NAME,
        RATE_LIMIT_CHECKOUT,
        BILL_NUMBER_MAX_ATTEMPTS,
    )
"""

import os
from typing import List


# =============================================================================
# Database Configuration
# =============================================================================

DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./merchant_pos.db")


# =============================================================================
# Store Configuration
# =============================================================================

DEFAULT_STORE_NAME: str = os.getenv("DEFAULT_STORE_NAME", "Restaurant")


# =============================================================================
# Rate Limiting Configuration
# =============================================================================
# Uses slowapi with in-memory storage (use Redis for multi-worker prod).

# Rate limit format: "X per Y" where Y is second, minute, hour, or day
RATE_LIMIT_CHECKOUT: str = os.getenv("RATE_LIMIT_CHECKOUT", "60 per minute")
RATE_LIMIT_ENABLED: bool = os.getenv("RATE_LIMIT_ENABLED", "true").lower() == "true"


def get_rate_limit_checkout() -> str:
    """
    Return the current checkout rate limit.

    This function allows dynamic override in tests without modifying
    the module-level constant.
    """
    return RATE_LIMIT_CHECKOUT


# =============================================================================
# Bill Number Configuration
# =============================================================================

BILL_NUMBER_MAX_ATTEMPTS: int = int(os.getenv("BILL_NUMBER_MAX_ATTEMPTS", "20"))


# =============================================================================
# CORS Configuration
# =============================================================================

# Format: comma-separated list of origins, e.g., "https://pos.example.com"
_cors_origins_env = os.getenv("CORS_ORIGINS", "")
CORS_ORIGINS: List[str] = [
    origin.strip()
    for origin in _cors_origins_env.split(",")
    if origin.strip()
] or ["*"]


# =============================================================================
# Admin Authentication Configuration
# =============================================================================
# ADMIN_PASSWORD must be set in production for protected endpoints to work.

ADMIN_USERNAME: str = os.getenv("ADMIN_USERNAME", "admin")
ADMIN_PASSWORD: str = os.getenv("ADMIN_PASSWORD", "")
