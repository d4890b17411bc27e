"""Pytest configuration and fixtures"""
import os

import pytest

# Set test environment variables
os.environ.setdefault("UPSTASH_REDIS_REST_URL", "https://test.upstash.io")
os.environ.setdefault("UPSTASH_REDIS_REST_TOKEN", "test_token")
os.environ.setdefault("LOG_LEVEL", "DEBUG")

from medcart.cart import CartService  # noqa: E402
from fakes import FakeStorage  # noqa: E402


@pytest.fixture
def storage():
    return FakeStorage()


@pytest.fixture
def cart(storage):
    """Empty cart service backed by in-memory storage."""
    return CartService(storage)


@pytest.fixture
def sample_product():
    """Discounted OTC product from Clicks"""
    return {
        "id": "p1",
        "name": "Panado 500mg",
        "price": 50.0,
        "original_price": 65.0,
        "image": "panado.png",
        "pharmacy": "Clicks",
        "pharmacy_color": "#005EB8",
        "in_stock": True,
        "generic_name": "Paracetamol",
        "dosage": "500mg",
        "pack_size": "24 tablets",
    }


@pytest.fixture
def limited_product():
    """Product with only 5 units available"""
    return {
        "id": "p2",
        "name": "Allergex",
        "price": 39.99,
        "image": "allergex.png",
        "pharmacy": "Dis-Chem",
        "pharmacy_color": "#00A651",
        "in_stock": True,
        "stock_count": 5,
    }


@pytest.fixture
def prescription_product():
    """Schedule 4 product requiring a script"""
    return {
        "id": "p3",
        "name": "Amoxil 250mg",
        "price": 120.0,
        "image": "amoxil.png",
        "pharmacy": "Clicks",
        "pharmacy_color": "#005EB8",
        "in_stock": True,
        "stock_count": 10,
        "prescription": True,
    }
