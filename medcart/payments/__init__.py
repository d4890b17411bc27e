"""Payment processing boundary: statuses, method catalog and checkout handoff."""
from .checkout import CheckoutResult, CheckoutService, PaymentProcessor
from .constants import FINAL_STATES, PaymentMethodType, PaymentStatus
from .methods import (
    PAYMENT_METHODS,
    get_available_payment_methods,
    get_payment_method,
    get_payment_methods,
)
from .models import CustomerDetails, PaymentMethod, PaymentRequest, PaymentResponse

__all__ = [
    "CheckoutResult",
    "CheckoutService",
    "PaymentProcessor",
    "FINAL_STATES",
    "PaymentMethodType",
    "PaymentStatus",
    "PAYMENT_METHODS",
    "get_available_payment_methods",
    "get_payment_method",
    "get_payment_methods",
    "CustomerDetails",
    "PaymentMethod",
    "PaymentRequest",
    "PaymentResponse",
]
