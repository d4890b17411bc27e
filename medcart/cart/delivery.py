"""Static delivery catalog. The first entry is the default selection."""
from decimal import Decimal
from typing import Optional, Tuple

from .models import DeliveryOption

DELIVERY_OPTIONS: Tuple[DeliveryOption, ...] = (
    DeliveryOption(
        id="standard",
        name="Standard Delivery",
        description="3-5 business days",
        estimated_time="3-5 days",
        price=Decimal("60.00"),
        icon="car",
    ),
    DeliveryOption(
        id="express",
        name="Express Delivery",
        description="Next business day",
        estimated_time="1 day",
        price=Decimal("120.00"),
        icon="flash",
    ),
    DeliveryOption(
        id="same-day",
        name="Same Day Delivery",
        description="Within 4 hours",
        estimated_time="4 hours",
        price=Decimal("200.00"),
        icon="time",
    ),
    DeliveryOption(
        id="pickup",
        name="Store Pickup",
        description="Collect at pharmacy",
        estimated_time="2 hours",
        price=Decimal("0.00"),
        icon="storefront",
    ),
)


def find_delivery_option(
    option_id: str,
    options: Tuple[DeliveryOption, ...] = DELIVERY_OPTIONS,
) -> Optional[DeliveryOption]:
    return next((option for option in options if option.id == option_id), None)
