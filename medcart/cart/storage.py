"""
Durable storage for the cart.

The cart is stored as one JSON document under a fixed key:

    {"version": 1, "items": [<LineItem.to_dict()>, ...]}

Payloads written before versioning existed are a bare JSON list of items
and are migrated on load.
"""
import asyncio
import json
from collections.abc import Mapping
from typing import List, Optional, Protocol, Tuple, Type

from tenacity import (
    AsyncRetrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from medcart.db import RedisKeys
from medcart.logging import get_logger
from .models import LineItem

logger = get_logger(__name__)

SCHEMA_VERSION = 1

# Network-level failures worth another attempt; command and auth errors are not
TRANSIENT_ERRORS: Tuple[Type[BaseException], ...] = (OSError, asyncio.TimeoutError)


class CartStorage(Protocol):
    """Async key-value store holding the serialized cart."""

    async def get(self, key: str) -> Optional[str]: ...

    async def set(self, key: str, value: str) -> None: ...

    async def delete(self, key: str) -> None: ...


class UnsupportedSchemaVersion(ValueError):
    """Stored payload was written by a newer, unknown schema."""


def _migrate_unversioned(items: list) -> list:
    """Version 0 (bare list, camelCase keys) -> version 1 (snake_case keys)."""
    renames = {
        "id": "product_id",
        "originalPrice": "original_price",
        "pharmacyColor": "pharmacy_color",
        "inStock": "in_stock",
        "stockCount": "stock_count",
        "maxQuantity": "max_quantity",
        "genericName": "generic_name",
        "packSize": "pack_size",
        "realImageUrl": "real_image_url",
    }
    migrated = []
    for item in items:
        if not isinstance(item, Mapping):
            raise TypeError(f"Unexpected cart item type: {type(item).__name__}")
        migrated.append({renames.get(key, key): value for key, value in item.items()})
    return migrated


def encode_cart(items: List[LineItem]) -> str:
    """Serialize line items into the versioned envelope."""
    return json.dumps({
        "version": SCHEMA_VERSION,
        "items": [item.to_dict() for item in items],
    })


def decode_cart(raw: str) -> List[LineItem]:
    """
    Deserialize a stored payload, migrating older formats.

    Raises:
        json.JSONDecodeError, KeyError, TypeError, ValueError: corrupted payload
        UnsupportedSchemaVersion: payload from an unknown newer schema
    """
    data = json.loads(raw)

    if isinstance(data, list):
        logger.info("Migrating unversioned cart payload to version %s", SCHEMA_VERSION)
        items = _migrate_unversioned(data)
    elif isinstance(data, dict):
        version = data.get("version")
        if version != SCHEMA_VERSION:
            raise UnsupportedSchemaVersion(f"Unsupported cart schema version: {version!r}")
        items = data["items"]
    else:
        raise TypeError(f"Unexpected cart payload type: {type(data).__name__}")

    if not isinstance(items, list) or not all(isinstance(item, Mapping) for item in items):
        raise TypeError("Cart items must be a list of objects")

    return [LineItem.from_dict(item) for item in items]


class RedisCartStorage:
    """
    Cart storage backed by Upstash Redis.

    Writes are retried on network failures (`retry_on`) before the error
    propagates to the cart service. Anything else fails on the first attempt.
    """

    def __init__(
        self,
        redis,
        attempts: int = 3,
        wait_min: float = 0.2,
        wait_max: float = 2.0,
        retry_on: Tuple[Type[BaseException], ...] = TRANSIENT_ERRORS,
    ):
        self.redis = redis
        self._retry_on = retry_on
        self._attempts = attempts
        self._wait_min = wait_min
        self._wait_max = wait_max

    def _retrying(self) -> AsyncRetrying:
        return AsyncRetrying(
            stop=stop_after_attempt(self._attempts),
            wait=wait_exponential(multiplier=self._wait_min, min=self._wait_min, max=self._wait_max),
            retry=retry_if_exception_type(self._retry_on),
            reraise=True,
        )

    async def get(self, key: str) -> Optional[str]:
        return await self.redis.get(RedisKeys.cart_key(key))

    async def set(self, key: str, value: str) -> None:
        async for attempt in self._retrying():
            with attempt:
                await self.redis.set(RedisKeys.cart_key(key), value)

    async def delete(self, key: str) -> None:
        await self.redis.delete(RedisKeys.cart_key(key))
