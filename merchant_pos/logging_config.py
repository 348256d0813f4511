"""
Logging configuration for the merchant POS backend.

Two channels:

- Application logs under the ``merchant_pos`` logger tree, controlled by
  LOG_LEVEL.
- The stock and money audit trail on ``merchant_pos.audit``: one line per
  stock movement, order placed/cancelled and receipt created/voided. It has
  its own level (AUDIT_LOG_LEVEL) so a quiet LOG_LEVEL=WARNING deployment
  still records every movement of stock and money.

Audit lines are ``event key=value ...`` with keys in a fixed order, e.g.:

    stock.deduct inventory_id=3 amount=200 stock=800

Usage:
    from merchant_pos.logging_config import setup_logging, audit
    setup_logging()  # Call once at application startup
    audit("order.placed", order_number=order.order_number, total=order.total_amount)

Environment variables:
    LOG_LEVEL: DEBUG, INFO, WARNING, ERROR, or CRITICAL (default: INFO)
    AUDIT_LOG_LEVEL: Level for the audit trail (default: INFO). Set to
        WARNING or above to silence it.
"""
import logging
import os
import sys

AUDIT_LOGGER_NAME = "merchant_pos.audit"

VALID_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

audit_logger = logging.getLogger(AUDIT_LOGGER_NAME)


def _resolve_level(level: str, env_var: str) -> str:
    """Explicit level, else the env var, else INFO. Unknown names become INFO."""
    if level is None:
        level = os.getenv(env_var, "INFO")
    level = level.upper()
    if level not in VALID_LEVELS:
        level = "INFO"
    return level


def _audit_value(value) -> str:
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    text = str(value)
    if not text or any(char.isspace() for char in text):
        return f'"{text}"'
    return text


def format_audit_fields(**fields) -> str:
    """Render audit fields as ``key=value`` pairs, skipping None values.

    Whole floats print without a decimal part. Values that are empty or
    contain whitespace are double-quoted.
    """
    return " ".join(
        f"{key}={_audit_value(value)}" for key, value in fields.items() if value is not None
    )


def audit(event: str, **fields) -> None:
    """Write one line to the audit trail."""
    if fields:
        audit_logger.info("%s %s", event, format_audit_fields(**fields))
    else:
        audit_logger.info("%s", event)


def setup_logging(level: str = None, audit_level: str = None) -> None:
    """
    Configure logging for the application.

    Args:
        level: Application log level. If not provided, reads LOG_LEVEL.
        audit_level: Audit trail level. If not provided, reads AUDIT_LOG_LEVEL.
    """
    level = _resolve_level(level, "LOG_LEVEL")
    audit_level = _resolve_level(audit_level, "AUDIT_LOG_LEVEL")

    logging.basicConfig(
        level=getattr(logging, level),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stdout,
    )

    logging.getLogger("merchant_pos").setLevel(getattr(logging, level))
    # Set after the parent so the audit trail keeps its own threshold
    audit_logger.setLevel(getattr(logging, audit_level))

    if level != "DEBUG":
        logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
        logging.getLogger("uvicorn.access").setLevel(logging.WARNING)

    logging.getLogger(__name__).debug(
        "Logging configured at %s level (audit %s)", level, audit_level
    )
