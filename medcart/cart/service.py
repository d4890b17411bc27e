"""Cart service: line items, pricing and delivery selection with durable storage."""
import asyncio
from decimal import Decimal
from typing import Any, Callable, Dict, Iterable, List, Optional

from medcart import config
from medcart.errors import (
    ISSUE_EXCEEDS_STOCK,
    ISSUE_OUT_OF_STOCK,
    ISSUE_PRESCRIPTION_REQUIRED,
    PersistenceError,
)
from medcart.logging import get_logger, sanitize_id_for_logging
from medcart.services.money import multiply, round_money, to_decimal
from .delivery import DELIVERY_OPTIONS, find_delivery_option
from .models import (
    CartSummary,
    CartValidation,
    DeliveryOption,
    LineItem,
    product_field,
    product_id_of,
)
from .storage import CartStorage, decode_cart, encode_cart

logger = get_logger(__name__)

CartListener = Callable[[List[LineItem]], None]
ErrorListener = Callable[[PersistenceError], None]


class CartService:
    """
    The cart engine.

    Features:
    - Stock ceilings per line item (rejected mutations return False)
    - Subtotal / savings / VAT / delivery fee summary, computed on demand
    - Grouping and subtotals per pharmacy
    - Persistence to a CartStorage after every mutation
    - Listeners notified synchronously, in registration order, after each mutation

    Mutations run one at a time through an asyncio.Lock, so concurrent
    callers cannot interleave a read-modify-write of the same item.

    Usage:
        service = CartService(storage)
        await service.load()
        unsubscribe = service.add_listener(render)
        await service.add_item(product, 2)
        summary = service.get_cart_summary()
    """

    def __init__(
        self,
        storage: CartStorage,
        storage_key: str = config.CART_STORAGE_KEY,
        tax_rate: Any = config.TAX_RATE,
        default_max_quantity: int = config.DEFAULT_MAX_QUANTITY,
        delivery_options: Iterable[DeliveryOption] = DELIVERY_OPTIONS,
    ):
        self._delivery_options = tuple(delivery_options)
        if not self._delivery_options:
            raise ValueError("at least one delivery option is required")

        self._storage = storage
        self.storage_key = storage_key
        self.tax_rate: Decimal = to_decimal(tax_rate)
        self.default_max_quantity = default_max_quantity

        self._items: List[LineItem] = []
        # Not persisted: every new service starts on the first catalog entry
        self._selected_delivery: DeliveryOption = self._delivery_options[0]
        self._listeners: List[CartListener] = []
        self._error_listeners: List[ErrorListener] = []
        self._lock = asyncio.Lock()

        self.last_persistence_error: Optional[PersistenceError] = None

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def load(self) -> None:
        """Restore line items from storage. Missing or unreadable state leaves the cart empty."""
        async with self._lock:
            try:
                raw = await self._storage.get(self.storage_key)
            except Exception as e:
                logger.error(f"Failed to load cart from storage: {e}", exc_info=True)
                self._report_persistence_error(PersistenceError("load", e))
                return

            if not raw:
                return

            try:
                items = decode_cart(raw)
            except (KeyError, TypeError, ValueError) as e:
                logger.warning(f"Corrupted cart data under '{self.storage_key}', starting empty: {e}")
                return

            self._items = items
            logger.info(f"Restored cart with {len(items)} line items")
            self._notify_listeners()

    async def close(self) -> None:
        """Drop all listeners. Storage clients are owned by the caller."""
        self._listeners.clear()
        self._error_listeners.clear()

    # ------------------------------------------------------------------
    # Listeners
    # ------------------------------------------------------------------

    def add_listener(self, listener: CartListener) -> Callable[[], None]:
        """Register a callback receiving an item snapshot after every mutation."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def add_error_listener(self, listener: ErrorListener) -> Callable[[], None]:
        """Register a callback receiving PersistenceError when storage fails."""
        self._error_listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._error_listeners:
                self._error_listeners.remove(listener)

        return unsubscribe

    def _notify_listeners(self) -> None:
        for listener in list(self._listeners):
            try:
                listener(list(self._items))
            except Exception as e:
                logger.error(f"Cart listener failed: {e}", exc_info=True)

    def _report_persistence_error(self, error: PersistenceError) -> None:
        self.last_persistence_error = error
        for listener in list(self._error_listeners):
            try:
                listener(error)
            except Exception as e:
                logger.error(f"Cart error listener failed: {e}", exc_info=True)

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    async def _save(self) -> None:
        """Write the item list. Failures are reported, never raised."""
        try:
            await self._storage.set(self.storage_key, encode_cart(self._items))
        except Exception as e:
            logger.error(f"Failed to save cart to storage: {e}", exc_info=True)
            self._report_persistence_error(PersistenceError("save", e))
            return
        self.last_persistence_error = None

    async def _commit(self) -> None:
        await self._save()
        self._notify_listeners()

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def _index_of(self, product_id: str) -> Optional[int]:
        return next(
            (index for index, item in enumerate(self._items) if item.product_id == product_id),
            None,
        )

    async def add_item(self, product: Any, quantity: int = 1) -> bool:
        """
        Add a product, or grow the quantity of the matching line item.

        Returns False (cart unchanged) when the combined quantity would exceed
        the stock ceiling or the product cannot be read.
        """
        async with self._lock:
            try:
                product_id = product_id_of(product)
                index = self._index_of(product_id)

                if index is not None:
                    existing = self._items[index]
                    new_quantity = existing.quantity + quantity
                    max_allowed = (
                        product_field(product, "stock_count")
                        or existing.max_quantity
                        or self.default_max_quantity
                    )
                    if new_quantity > int(max_allowed):
                        logger.info(
                            f"Rejected add for {sanitize_id_for_logging(product_id)}: "
                            f"{new_quantity} exceeds max {max_allowed}"
                        )
                        return False
                    self._items[index] = existing.with_quantity(new_quantity)
                else:
                    item = LineItem.from_product(product, quantity, self.default_max_quantity)
                    if item.quantity > item.max_quantity:
                        logger.info(
                            f"Rejected add for {sanitize_id_for_logging(product_id)}: "
                            f"{item.quantity} exceeds max {item.max_quantity}"
                        )
                        return False
                    self._items.append(item)
            except Exception as e:
                logger.error(f"Error adding item to cart: {e}", exc_info=True)
                return False

            await self._commit()
            return True

    async def _set_quantity(self, product_id: str, quantity: int) -> bool:
        """Quantity update body; caller must hold the lock."""
        index = self._index_of(product_id)
        if index is None:
            return False

        item = self._items[index]
        max_allowed = item.max_quantity or self.default_max_quantity

        if quantity <= 0:
            del self._items[index]
        elif quantity <= max_allowed:
            self._items[index] = item.with_quantity(quantity)
        else:
            logger.info(
                f"Rejected quantity {quantity} for {sanitize_id_for_logging(product_id)}: "
                f"max {max_allowed}"
            )
            return False

        await self._commit()
        return True

    async def update_item_quantity(self, product_id: str, quantity: int) -> bool:
        """Set an item's quantity; 0 or below removes it."""
        async with self._lock:
            return await self._set_quantity(product_id, quantity)

    async def increment_item(self, product_id: str) -> bool:
        async with self._lock:
            item = self.get_item(product_id)
            if item is None:
                return False
            return await self._set_quantity(product_id, item.quantity + 1)

    async def decrement_item(self, product_id: str) -> bool:
        async with self._lock:
            item = self.get_item(product_id)
            if item is None:
                return False
            return await self._set_quantity(product_id, item.quantity - 1)

    async def remove_item(self, product_id: str) -> None:
        """Remove an item. Persists and notifies even when the id is absent."""
        async with self._lock:
            self._items = [item for item in self._items if item.product_id != product_id]
            await self._commit()

    async def clear_cart(self) -> None:
        async with self._lock:
            self._items = []
            await self._commit()
            logger.info("Cart cleared")

    async def set_delivery_option(self, option_id: str) -> bool:
        """Select a delivery option from the catalog. Unknown ids are rejected."""
        async with self._lock:
            option = find_delivery_option(option_id, self._delivery_options)
            if option is None:
                return False
            self._selected_delivery = option
            # Delivery selection is not persisted; listeners still need to recompute totals
            self._notify_listeners()
            return True

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get_items(self) -> List[LineItem]:
        return list(self._items)

    def get_item(self, product_id: str) -> Optional[LineItem]:
        return next((item for item in self._items if item.product_id == product_id), None)

    def has_item(self, product_id: str) -> bool:
        return self.get_item(product_id) is not None

    def get_item_quantity(self, product_id: str) -> int:
        item = self.get_item(product_id)
        return item.quantity if item else 0

    def get_item_count(self) -> int:
        """Total number of units in the cart."""
        return sum(item.quantity for item in self._items)

    def get_delivery_options(self) -> List[DeliveryOption]:
        return list(self._delivery_options)

    def get_selected_delivery_option(self) -> DeliveryOption:
        return self._selected_delivery

    def get_cart_summary(self) -> CartSummary:
        """
        Compute the monetary breakdown.

        Calculation order:
        1. subtotal = sum of the per-pharmacy subtotals, each rounded to cents
        2. tax = subtotal * tax rate, rounded to cents
        3. total = subtotal + tax + selected delivery fee
        """
        subtotal = sum(self.get_pharmacy_totals().values(), Decimal("0.00"))
        savings = sum((item.savings for item in self._items), Decimal("0"))
        tax = round_money(multiply(subtotal, self.tax_rate))
        delivery_fee = self._selected_delivery.price

        return CartSummary(
            total_items=self.get_item_count(),
            subtotal=subtotal,
            savings=savings,
            tax=tax,
            delivery_fee=delivery_fee,
            total=subtotal + tax + delivery_fee,
        )

    def validate_cart(self) -> CartValidation:
        """
        Report stock and prescription findings.

        Findings are advisory: the caller decides whether to block checkout.
        Prescription items are always reported.
        """
        issues: List[str] = []

        for item in self._items:
            if not item.in_stock:
                issues.append(ISSUE_OUT_OF_STOCK.format(name=item.name))

            if item.stock_count is not None and item.quantity > item.stock_count:
                issues.append(ISSUE_EXCEEDS_STOCK.format(name=item.name, stock_count=item.stock_count))

            if item.prescription:
                issues.append(ISSUE_PRESCRIPTION_REQUIRED.format(name=item.name))

        return CartValidation(valid=not issues, issues=issues)

    def get_items_by_pharmacy(self) -> Dict[str, List[LineItem]]:
        groups: Dict[str, List[LineItem]] = {}
        for item in self._items:
            groups.setdefault(item.pharmacy, []).append(item)
        return groups

    def get_pharmacy_totals(self) -> Dict[str, Decimal]:
        """
        Subtotal per pharmacy, excluding tax and delivery.

        Each value is rounded to cents; the cart subtotal is their sum.
        """
        return {
            pharmacy: round_money(sum((item.line_total for item in items), Decimal("0")))
            for pharmacy, items in self.get_items_by_pharmacy().items()
        }
