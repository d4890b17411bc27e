"""
Common Error Constants

Centralized user-facing messages so the UI layer and tests share one wording.
"""
from typing import Optional

# Cart validation issues (formatted with the item name)
ISSUE_OUT_OF_STOCK = "{name} is currently out of stock"
ISSUE_EXCEEDS_STOCK = "{name} quantity exceeds available stock ({stock_count})"
ISSUE_PRESCRIPTION_REQUIRED = "{name} requires a valid prescription"

# Checkout
ERROR_CART_EMPTY = "Cart is empty"
ERROR_CART_INVALID = "Cart has issues that must be resolved before checkout"
ERROR_PAYMENT_METHOD_UNAVAILABLE = "Payment method is not available for this amount"
ERROR_PAYMENT_FAILED = "Payment processing failed. Please try again."
ERROR_PAYMENT_STATUS_UNKNOWN = "Unable to check payment status"


class PersistenceError(Exception):
    """Durable storage read or write failed."""

    def __init__(self, operation: str, cause: Optional[BaseException] = None):
        self.operation = operation
        self.cause = cause
        message = f"Cart {operation} failed"
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message)
