"""
Rate limiter shared by the app and the routers that throttle requests.

Uses slowapi with in-memory storage by default. For multiple workers, use
Redis: Limiter(key_func=..., storage_uri="redis://...")
"""

from slowapi import Limiter
from slowapi.util import get_remote_address

from .config import RATE_LIMIT_ENABLED

limiter = Limiter(key_func=get_remote_address, enabled=RATE_LIMIT_ENABLED)
