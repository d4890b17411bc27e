"""Payment methods offered in South Africa."""
from decimal import Decimal
from typing import List, Optional

from medcart.services.money import to_decimal
from .constants import PaymentMethodType
from .models import PaymentMethod


def _bank(method_id: str, name: str, label: str, logo: str) -> PaymentMethod:
    return PaymentMethod(
        id=method_id,
        name=name,
        type=PaymentMethodType.EFT,
        description=f"Pay securely with {label}",
        icon="business-outline",
        processing_time="Instant",
        provider_logo=logo,
    )


PAYMENT_METHODS: List[PaymentMethod] = [
    # Cards
    PaymentMethod(
        id="visa",
        name="Visa",
        type=PaymentMethodType.CARD,
        description="Credit & Debit Cards",
        icon="card-outline",
        processing_time="Instant",
        provider_logo="visa-logo",
    ),
    PaymentMethod(
        id="mastercard",
        name="Mastercard",
        type=PaymentMethodType.CARD,
        description="Credit & Debit Cards",
        icon="card-outline",
        processing_time="Instant",
        provider_logo="mastercard-logo",
    ),
    # Online banking
    _bank("fnb", "FNB Online Banking", "FNB", "fnb-logo"),
    _bank("absa", "ABSA Online Banking", "ABSA", "absa-logo"),
    _bank("standard_bank", "Standard Bank", "Standard Bank", "standard-bank-logo"),
    _bank("nedbank", "Nedbank", "Nedbank", "nedbank-logo"),
    _bank("capitec", "Capitec Bank", "Capitec", "capitec-logo"),
    # Instant EFT
    PaymentMethod(
        id="ozow",
        name="Ozow",
        type=PaymentMethodType.INSTANT_PAYMENT,
        description="Instant bank payments",
        icon="flash-outline",
        processing_time="Instant",
        provider_logo="ozow-logo",
        min_amount=Decimal("5"),
        max_amount=Decimal("50000"),
    ),
    # Mobile wallets
    PaymentMethod(
        id="snapscan",
        name="SnapScan",
        type=PaymentMethodType.MOBILE,
        description="Mobile payment app",
        icon="phone-portrait-outline",
        processing_time="Instant",
        provider_logo="snapscan-logo",
    ),
    PaymentMethod(
        id="zapper",
        name="Zapper",
        type=PaymentMethodType.MOBILE,
        description="QR code payments",
        icon="qr-code-outline",
        processing_time="Instant",
        provider_logo="zapper-logo",
    ),
    # Manual transfer
    PaymentMethod(
        id="eft",
        name="EFT/Bank Transfer",
        type=PaymentMethodType.EFT,
        description="Manual bank transfer",
        icon="swap-horizontal-outline",
        processing_time="1-2 business days",
    ),
]


def get_payment_methods() -> List[PaymentMethod]:
    return list(PAYMENT_METHODS)


def get_payment_method(method_id: str) -> Optional[PaymentMethod]:
    return next((method for method in PAYMENT_METHODS if method.id == method_id), None)


def get_available_payment_methods(amount) -> List[PaymentMethod]:
    """Methods that can take a payment of `amount` (availability and min/max limits)."""
    value = to_decimal(amount)
    return [method for method in PAYMENT_METHODS if method.accepts(value)]
