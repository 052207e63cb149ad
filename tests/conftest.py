from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest

from product_sync.schema import Product
from product_sync.upsert_product import ProductGateway

STORED_AT = datetime(2024, 1, 1, tzinfo=timezone.utc)
SCRAPED_AT = datetime(2024, 6, 1, tzinfo=timezone.utc)


@pytest.fixture
def make_product():
    """Build a Product with sensible grocery defaults, overridable per test."""

    def _make(omit=(), **overrides):
        fields = {
            "id": "P123",
            "name": "Anchor Blue Top Milk 2L",
            "ingredients": ["milk", "vitamin d"],
            "category": ["milk"],
            "currentPrice": 4.5,
            "unitPrice": 2.25,
            "size": "2L",
            "unitName": "L",
            "originalUnitQuantity": 2,
            "sourceSite": "countdown.co.nz",
            "lastUpdated": SCRAPED_AT,
            "lastChecked": SCRAPED_AT,
        }
        fields.update(overrides)
        for name in omit:
            fields.pop(name, None)
        return Product(**fields)

    return _make


@pytest.fixture
def stored_product(make_product):
    return make_product(lastUpdated=STORED_AT, lastChecked=STORED_AT)


@pytest.fixture
def gateway():
    """Mock ProductGateway: no stored row and writes succeed."""
    mock = MagicMock(spec=ProductGateway)
    mock.fetch.return_value = None
    return mock
