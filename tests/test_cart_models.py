"""
Tests for cart models
"""

from decimal import Decimal
from types import SimpleNamespace

import pytest
from medcart.cart import CartSummary, DELIVERY_OPTIONS, LineItem, find_delivery_option


class TestLineItem:
    """Tests for LineItem dataclass."""

    def test_from_product_copies_known_fields(self, sample_product):
        """Test building a line item from a catalog product."""
        item = LineItem.from_product(sample_product, 2, default_max_quantity=99)

        assert item.product_id == "p1"
        assert item.quantity == 2
        assert item.price == Decimal("50.0")
        assert item.original_price == Decimal("65.0")
        assert item.pharmacy == "Clicks"
        assert item.generic_name == "Paracetamol"
        assert item.pack_size == "24 tablets"
        assert item.prescription is False

    def test_max_quantity_defaults_to_ceiling(self, sample_product):
        """Test products without a stock count get the fixed ceiling."""
        item = LineItem.from_product(sample_product, 1, default_max_quantity=99)

        assert item.stock_count is None
        assert item.max_quantity == 99

    def test_max_quantity_follows_stock_count(self, limited_product):
        """Test stock count becomes the per-item maximum."""
        item = LineItem.from_product(limited_product, 1, default_max_quantity=99)

        assert item.stock_count == 5
        assert item.max_quantity == 5

    def test_from_attribute_object(self):
        """Test products exposing attributes instead of keys."""
        product = SimpleNamespace(
            id="p9",
            name="Vitamin C",
            price=89.5,
            pharmacy="Medirite",
            pharmacy_color="#E30613",
            in_stock=True,
        )

        item = LineItem.from_product(product, 1, default_max_quantity=99)

        assert item.product_id == "p9"
        assert item.price == Decimal("89.5")
        assert item.original_price is None

    def test_product_without_id_is_rejected(self):
        """Test a product with no identifier cannot become a line item."""
        with pytest.raises(ValueError):
            LineItem.from_product({"name": "Nameless", "price": 1}, 1, default_max_quantity=99)

    def test_line_total(self, sample_product):
        """Test total price for quantity."""
        item = LineItem.from_product(sample_product, 3, default_max_quantity=99)

        assert item.line_total == Decimal("150.0")

    def test_savings(self):
        """Test savings against the original price."""
        item = LineItem(
            product_id="p1",
            name="Test",
            price=70,
            original_price=100,
            quantity=3,
            pharmacy="Clicks",
        )

        assert item.savings == Decimal("90")

    def test_no_savings_without_discount(self):
        """Test items priced at or above the original save nothing."""
        no_original = LineItem(product_id="a", name="A", price=70, quantity=3, pharmacy="Clicks")
        higher = LineItem(
            product_id="b", name="B", price=70, original_price=60, quantity=3, pharmacy="Clicks"
        )

        assert no_original.savings == 0
        assert higher.savings == 0

    def test_with_quantity_returns_new_item(self, sample_product):
        """Test quantity changes do not mutate the original item."""
        item = LineItem.from_product(sample_product, 1, default_max_quantity=99)
        updated = item.with_quantity(4)

        assert item.quantity == 1
        assert updated.quantity == 4
        assert updated.product_id == item.product_id

    def test_to_dict_keeps_decimal_precision(self, sample_product):
        """Test serialization stores prices as strings."""
        item = LineItem.from_product(sample_product, 1, default_max_quantity=99)

        data = item.to_dict()

        assert data["product_id"] == "p1"
        assert data["price"] == "50.0"
        assert data["original_price"] == "65.0"

    def test_from_dict(self):
        """Test deserialization from dict."""
        data = {
            "product_id": "p1",
            "name": "Test",
            "price": "19.99",
            "quantity": 2,
            "pharmacy": "Clicks",
            "stock_count": 4,
            "max_quantity": 4,
        }

        item = LineItem.from_dict(data)

        assert item.price == Decimal("19.99")
        assert item.max_quantity == 4
        assert item.in_stock is True


class TestCartSummary:
    """Tests for CartSummary dataclass."""

    def test_rounds_to_cents(self):
        summary = CartSummary(total_items=1, subtotal=Decimal("10.005"), tax=Decimal("1.5007"))

        assert summary.subtotal == Decimal("10.01")
        assert summary.tax == Decimal("1.50")

    def test_to_dict(self):
        summary = CartSummary(
            total_items=3,
            subtotal=Decimal("150"),
            tax=Decimal("22.5"),
            delivery_fee=Decimal("0"),
            total=Decimal("172.5"),
        )

        assert summary.to_dict()["total"] == 172.5


class TestDeliveryCatalog:
    """Tests for the static delivery catalog."""

    def test_default_is_standard(self):
        assert DELIVERY_OPTIONS[0].id == "standard"
        assert DELIVERY_OPTIONS[0].price == Decimal("60.00")

    def test_find_option(self):
        assert find_delivery_option("pickup").price == Decimal("0.00")
        assert find_delivery_option("drone") is None
