"""Payment constants and enums."""
from enum import Enum
from typing import Set


class PaymentStatus(str, Enum):
    """
    Payment status reported by the processor.

    Flow:
        pending -> completed
                -> failed
                -> cancelled
    """
    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"


class PaymentMethodType(str, Enum):
    """Payment method families offered at checkout."""
    CARD = "card"
    EFT = "eft"
    MOBILE = "mobile"
    WALLET = "wallet"
    INSTANT_PAYMENT = "instant_payment"


# Final statuses (no further transitions)
FINAL_STATES: Set[str] = {
    PaymentStatus.COMPLETED.value,
    PaymentStatus.FAILED.value,
    PaymentStatus.CANCELLED.value,
}
