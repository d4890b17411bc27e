"""
Runtime configuration.

All settings come from environment variables with defaults suitable for
local development. Values are read once at import time.
"""
import os
from decimal import Decimal, InvalidOperation


def _env_decimal(name: str, default: str) -> Decimal:
    raw = os.environ.get(name, default)
    try:
        return Decimal(raw)
    except (InvalidOperation, ValueError):
        return Decimal(default)


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


# Cart storage
CART_STORAGE_KEY = os.environ.get("MEDCART_STORAGE_KEY", "medlynx_cart")

# 15% South African VAT
TAX_RATE: Decimal = _env_decimal("MEDCART_TAX_RATE", "0.15")

# Ceiling used when a product carries no stock count
DEFAULT_MAX_QUANTITY: int = _env_int("MEDCART_MAX_QUANTITY", 99)

# Checkout
CURRENCY = os.environ.get("MEDCART_CURRENCY", "ZAR")
REFERENCE_PREFIX = os.environ.get("MEDCART_REFERENCE_PREFIX", "MEDLYNX")
RETURN_URL = os.environ.get("MEDCART_RETURN_URL", "https://medlynx.app/payment-success")
NOTIFY_URL = os.environ.get("MEDCART_NOTIFY_URL", "https://medlynx.app/payment-notify")

# Upstash Redis - standard env var names per docs
UPSTASH_REDIS_REST_URL = os.environ.get("UPSTASH_REDIS_REST_URL", "")
UPSTASH_REDIS_REST_TOKEN = os.environ.get("UPSTASH_REDIS_REST_TOKEN", "")
