"""Cart models with Decimal-based pricing."""
from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from decimal import Decimal
from typing import Any, List, Optional

from medcart.services.money import to_decimal, to_float, round_money, subtract, multiply


def product_field(product: Any, name: str, default: Any = None) -> Any:
    """Read a field from a mapping or an attribute-style product object."""
    if isinstance(product, Mapping):
        return product.get(name, default)
    return getattr(product, name, default)


def product_id_of(product: Any) -> str:
    """Cart key of a catalog product (`product_id`, falling back to `id`)."""
    product_id = product_field(product, "product_id") or product_field(product, "id")
    if not product_id:
        raise ValueError("product must carry an id")
    return str(product_id)


def _optional_decimal(value: Any) -> Optional[Decimal]:
    if value is None or value == "":
        return None
    return to_decimal(value)


def _optional_int(value: Any) -> Optional[int]:
    if value is None or value == "":
        return None
    return int(value)


@dataclass(frozen=True)
class LineItem:
    """
    One product in the cart.

    Instances are immutable: quantity changes produce a new LineItem via
    with_quantity(), so snapshots handed to listeners never change under them.
    """
    product_id: str
    name: str
    price: Decimal
    quantity: int
    pharmacy: str
    pharmacy_color: str = ""
    in_stock: bool = True
    image: str = ""
    original_price: Optional[Decimal] = None
    stock_count: Optional[int] = None
    max_quantity: Optional[int] = None
    generic_name: Optional[str] = None
    dosage: Optional[str] = None
    pack_size: Optional[str] = None
    prescription: bool = False
    real_image_url: Optional[str] = None

    def __post_init__(self):
        # Normalize numeric fields (frozen, so go through object.__setattr__)
        object.__setattr__(self, "price", to_decimal(self.price))
        object.__setattr__(self, "original_price", _optional_decimal(self.original_price))

    @property
    def line_total(self) -> Decimal:
        """Price for all units."""
        return multiply(self.price, self.quantity)

    @property
    def savings(self) -> Decimal:
        """Discount against the original price; zero when there is none."""
        if self.original_price is None or self.original_price <= self.price:
            return Decimal("0")
        return multiply(subtract(self.original_price, self.price), self.quantity)

    def with_quantity(self, quantity: int) -> "LineItem":
        return replace(self, quantity=quantity)

    @classmethod
    def from_product(cls, product: Any, quantity: int, default_max_quantity: int) -> "LineItem":
        """
        Build a line item from a catalog product.

        `product` may be a mapping or any object exposing the fields as
        attributes. Only product_id/id, name, price and pharmacy are required.
        """
        stock_count = _optional_int(product_field(product, "stock_count"))
        return cls(
            product_id=product_id_of(product),
            name=product_field(product, "name", ""),
            price=product_field(product, "price", 0),
            quantity=quantity,
            pharmacy=product_field(product, "pharmacy", ""),
            pharmacy_color=product_field(product, "pharmacy_color", ""),
            in_stock=bool(product_field(product, "in_stock", True)),
            image=product_field(product, "image", ""),
            original_price=product_field(product, "original_price"),
            stock_count=stock_count,
            max_quantity=stock_count or default_max_quantity,
            generic_name=product_field(product, "generic_name"),
            dosage=product_field(product, "dosage"),
            pack_size=product_field(product, "pack_size"),
            prescription=bool(product_field(product, "prescription", False)),
            real_image_url=product_field(product, "real_image_url"),
        )

    def to_dict(self) -> dict:
        """Convert to a JSON-compatible dictionary."""
        return {
            "product_id": self.product_id,
            "name": self.name,
            "price": str(self.price),
            "original_price": str(self.original_price) if self.original_price is not None else None,
            "quantity": self.quantity,
            "image": self.image,
            "pharmacy": self.pharmacy,
            "pharmacy_color": self.pharmacy_color,
            "in_stock": self.in_stock,
            "stock_count": self.stock_count,
            "max_quantity": self.max_quantity,
            "generic_name": self.generic_name,
            "dosage": self.dosage,
            "pack_size": self.pack_size,
            "prescription": self.prescription,
            "real_image_url": self.real_image_url,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "LineItem":
        """Create from dictionary."""
        return cls(
            product_id=str(data["product_id"]),
            name=data["name"],
            price=to_decimal(data["price"]),
            quantity=int(data["quantity"]),
            pharmacy=data.get("pharmacy", ""),
            pharmacy_color=data.get("pharmacy_color", ""),
            in_stock=bool(data.get("in_stock", True)),
            image=data.get("image", ""),
            original_price=data.get("original_price"),
            stock_count=_optional_int(data.get("stock_count")),
            max_quantity=_optional_int(data.get("max_quantity")),
            generic_name=data.get("generic_name"),
            dosage=data.get("dosage"),
            pack_size=data.get("pack_size"),
            prescription=bool(data.get("prescription", False)),
            real_image_url=data.get("real_image_url"),
        )


@dataclass(frozen=True)
class DeliveryOption:
    """A selectable fulfillment method."""
    id: str
    name: str
    description: str
    estimated_time: str
    price: Decimal
    icon: str


@dataclass
class CartSummary:
    """Monetary breakdown of the cart, recomputed on demand."""
    total_items: int = 0
    subtotal: Decimal = Decimal("0.00")
    savings: Decimal = Decimal("0.00")
    tax: Decimal = Decimal("0.00")
    delivery_fee: Decimal = Decimal("0.00")
    total: Decimal = Decimal("0.00")

    def __post_init__(self):
        self.subtotal = round_money(self.subtotal)
        self.savings = round_money(self.savings)
        self.tax = round_money(self.tax)
        self.delivery_fee = round_money(self.delivery_fee)
        self.total = round_money(self.total)

    def to_dict(self) -> dict:
        return {
            "total_items": self.total_items,
            "subtotal": to_float(self.subtotal),
            "savings": to_float(self.savings),
            "tax": to_float(self.tax),
            "delivery_fee": to_float(self.delivery_fee),
            "total": to_float(self.total),
        }


@dataclass
class CartValidation:
    """Advisory findings about the cart before checkout."""
    valid: bool
    issues: List[str] = field(default_factory=list)
