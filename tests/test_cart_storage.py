"""
Tests for cart persistence format and Redis storage
"""

import json
from decimal import Decimal

import pytest

from medcart.cart import LineItem, RedisCartStorage, decode_cart, encode_cart
from medcart.cart.storage import SCHEMA_VERSION, UnsupportedSchemaVersion
from fakes import FakeRedis


def _item(**overrides):
    data = {
        "product_id": "p1",
        "name": "Panado",
        "price": Decimal("50.00"),
        "quantity": 2,
        "pharmacy": "Clicks",
        "stock_count": 10,
        "max_quantity": 10,
    }
    data.update(overrides)
    return LineItem(**data)


def test_encode_wraps_items_in_versioned_envelope():
    payload = json.loads(encode_cart([_item()]))

    assert payload["version"] == SCHEMA_VERSION
    assert payload["items"][0]["product_id"] == "p1"
    assert payload["items"][0]["price"] == "50.00"


def test_decode_current_version():
    items = decode_cart(encode_cart([_item(), _item(product_id="p2", quantity=1)]))

    assert [(i.product_id, i.quantity) for i in items] == [("p1", 2), ("p2", 1)]
    assert items[0].price == Decimal("50.00")


def test_decode_migrates_unversioned_list():
    legacy = json.dumps([
        {
            "id": "p7",
            "name": "Corenza C",
            "price": 64.99,
            "originalPrice": 79.99,
            "quantity": 2,
            "image": "corenza.png",
            "pharmacy": "Dis-Chem",
            "pharmacyColor": "#00A651",
            "inStock": True,
            "stockCount": 12,
            "maxQuantity": 12,
            "prescription": False,
        }
    ])

    items = decode_cart(legacy)

    assert len(items) == 1
    item = items[0]
    assert item.product_id == "p7"
    assert item.price == Decimal("64.99")
    assert item.original_price == Decimal("79.99")
    assert item.pharmacy_color == "#00A651"
    assert item.max_quantity == 12


def test_decode_rejects_unknown_version():
    with pytest.raises(UnsupportedSchemaVersion):
        decode_cart(json.dumps({"version": 99, "items": []}))


def test_decode_rejects_garbage():
    with pytest.raises(ValueError):
        decode_cart("not json")

    with pytest.raises(TypeError):
        decode_cart("42")

    with pytest.raises(KeyError):
        decode_cart(json.dumps({"version": SCHEMA_VERSION, "items": [{"name": "no id"}]}))


def test_decode_rejects_non_object_items():
    with pytest.raises(TypeError):
        decode_cart(json.dumps([1, None]))

    with pytest.raises(TypeError):
        decode_cart(json.dumps({"version": SCHEMA_VERSION, "items": ["p1"]}))

    with pytest.raises(TypeError):
        decode_cart(json.dumps({"version": SCHEMA_VERSION, "items": 3}))


@pytest.mark.asyncio
async def test_redis_storage_prefixes_keys():
    redis = FakeRedis()
    storage = RedisCartStorage(redis)

    await storage.set("medlynx_cart", "payload")

    assert redis.store == {"cart:medlynx_cart": "payload"}
    assert await storage.get("medlynx_cart") == "payload"

    await storage.delete("medlynx_cart")
    assert await storage.get("medlynx_cart") is None


@pytest.mark.asyncio
async def test_redis_storage_retries_transient_write_failures():
    redis = FakeRedis(failures_before_success=2)
    storage = RedisCartStorage(redis, attempts=3, wait_min=0, wait_max=0)

    await storage.set("medlynx_cart", "payload")

    assert redis.set_calls == 3
    assert redis.store["cart:medlynx_cart"] == "payload"


@pytest.mark.asyncio
async def test_redis_storage_gives_up_after_attempts():
    redis = FakeRedis(failures_before_success=5)
    storage = RedisCartStorage(redis, attempts=2, wait_min=0, wait_max=0)

    with pytest.raises(ConnectionError):
        await storage.set("medlynx_cart", "payload")

    assert redis.set_calls == 2


@pytest.mark.asyncio
async def test_redis_storage_does_not_retry_command_errors():
    redis = FakeRedis(failures_before_success=5, error=RuntimeError("WRONGPASS invalid token"))
    storage = RedisCartStorage(redis, attempts=3, wait_min=0, wait_max=0)

    with pytest.raises(RuntimeError):
        await storage.set("medlynx_cart", "payload")

    assert redis.set_calls == 1
