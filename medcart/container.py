"""
Composition root.

Builds the cart service and checkout service once at application start
and owns their teardown:

    container = Container(processor=my_gateway)
    await container.startup()
    ...
    await container.shutdown()

Tests and embedding apps can pass their own storage instead of Redis.
"""
from typing import Optional

from medcart.cart import CartService, CartStorage, RedisCartStorage
from medcart.db import get_redis, reset_redis
from medcart.logging import get_logger
from medcart.payments import CheckoutService, PaymentProcessor

logger = get_logger(__name__)


class Container:
    """Holds the process-wide cart and checkout services."""

    def __init__(
        self,
        processor: Optional[PaymentProcessor] = None,
        storage: Optional[CartStorage] = None,
    ):
        self._owns_redis = storage is None
        self.storage: CartStorage = storage if storage is not None else RedisCartStorage(get_redis())
        self.cart = CartService(self.storage)
        self.checkout: Optional[CheckoutService] = (
            CheckoutService(self.cart, processor) if processor is not None else None
        )
        self._started = False

    async def startup(self) -> None:
        if self._started:
            return
        logger.info("medcart starting up...")
        await self.cart.load()
        self._started = True

    async def shutdown(self) -> None:
        if not self._started:
            return
        logger.info("medcart shutting down...")
        await self.cart.close()
        if self._owns_redis:
            await reset_redis()
        self._started = False
