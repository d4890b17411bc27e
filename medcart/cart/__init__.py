"""Cart package: models, storage, delivery catalog and the cart service."""
from .delivery import DELIVERY_OPTIONS, find_delivery_option
from .models import CartSummary, CartValidation, DeliveryOption, LineItem
from .service import CartService
from .storage import CartStorage, RedisCartStorage, decode_cart, encode_cart

__all__ = [
    "DELIVERY_OPTIONS",
    "find_delivery_option",
    "CartSummary",
    "CartValidation",
    "DeliveryOption",
    "LineItem",
    "CartService",
    "CartStorage",
    "RedisCartStorage",
    "decode_cart",
    "encode_cart",
]
