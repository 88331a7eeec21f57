"""
Pytest fixtures and test configuration.
"""

import pytest
from unittest.mock import Mock
from storefront.adapters import ecwid
from storefront.adapters.base import Cart, CartCost, Money
from storefront.adapters.ecwid import EcwidAdapter
from storefront.clients.ecwid_client import EcwidClient, EcwidResponse
from storefront.config import Config
from storefront.constants import DEFAULT_CURRENCY_CODE
from storefront.services.storefront_service import StorefrontService

STORE_ID = "1003"
SESSION_COOKIE = f"ec-{STORE_ID}-session"


@pytest.fixture(autouse=True)
def config(monkeypatch):
    """Required configuration for every test."""
    monkeypatch.setattr(Config, 'ECWID_STORE_ID', STORE_ID)
    monkeypatch.setattr(Config, 'ECWID_API_KEY', 'secret_key')
    monkeypatch.setattr(Config, 'ECWID_REVALIDATION_SECRET', 'webhook-secret')
    return Config


@pytest.fixture(autouse=True)
def reset_currency():
    """Currency code is process-wide; start every test from the default."""
    ecwid.set_currency_code(DEFAULT_CURRENCY_CODE)
    yield
    ecwid.set_currency_code(DEFAULT_CURRENCY_CODE)


@pytest.fixture
def route_fetch():
    """
    Answer mock_client.fetch() from a {(method, path): body} table.

    Unknown routes answer 404 with an Ecwid-style error message body.
    """
    def install(mock_client, routes):
        def fetch(method, path, **kwargs):
            if (method, path) in routes:
                return EcwidResponse(status=200, body=routes[(method, path)])
            return EcwidResponse(status=404, body={"errorMessage": "Not found"})

        mock_client.fetch.side_effect = fetch
        return mock_client

    return install


@pytest.fixture
def mock_ecwid_client():
    """Mock Ecwid API client."""
    return Mock(spec=EcwidClient)


@pytest.fixture
def ecwid_adapter(mock_ecwid_client):
    """Ecwid adapter over a mocked client."""
    return EcwidAdapter(mock_ecwid_client)


@pytest.fixture
def mock_adapter():
    """Mock commerce adapter."""
    return Mock(spec=EcwidAdapter)


@pytest.fixture
def storefront_service(mock_adapter):
    """Storefront service with mocked adapter."""
    return StorefrontService(mock_adapter, STORE_ID)


@pytest.fixture
def product_node():
    """Ecwid product node with two options and one real combination."""
    return {
        "id": 123,
        "enabled": True,
        "name": "Running Shoe",
        "url": "/running-shoe-p123/",
        "description": "<p>Light and fast</p>",
        "inStock": True,
        "price": 50,
        "compareToPrice": 70,
        "seoTitle": "",
        "seoDescription": "",
        "updateDate": "2024-05-01T10:00:00+0000",
        "originalImage": {"url": "https://img/original.jpg", "width": 800, "height": 600, "name": "Shoe"},
        "galleryImages": [
            {"url": "https://img/side.jpg", "width": 400, "height": 300, "name": "Side"}
        ],
        "options": [
            {
                "type": "SIZE",
                "name": "Size",
                "choices": [{"text": "S"}, {"text": "M"}, {"text": "L"}]
            },
            {
                "type": "DROPDOWN",
                "name": "Color",
                "choices": [{"text": "Red"}, {"text": "Blue"}]
            }
        ],
        "combinations": [
            {
                "id": 1,
                "inStock": True,
                "price": 65,
                "options": [
                    {"name": "Size", "value": "L"},
                    {"name": "Color", "value": "Blue"}
                ]
            }
        ],
        "relatedProducts": {
            "productIds": [124, 125],
            "relatedCategory": {"enabled": False, "categoryId": 0, "productCount": 0}
        }
    }


@pytest.fixture
def order():
    """Storefront checkout order with two lines (quantities 2 and 3)."""
    return {
        "id": "ORDER-1",
        "cartItems": [
            {
                "identifier": {
                    "productId": 123,
                    "selectedOptions": {
                        "Size": {"type": "SIZE", "choice": "M"},
                        "Color": {"type": "DROPDOWN", "choice": "Red"}
                    }
                },
                "quantity": 2,
                "price": 12.5,
                "productInfo": {
                    "name": "Running Shoe",
                    "slugs": {"forRouteWithId": "running-shoe"},
                    "mediaItem": {"image160pxUrl": "https://img/160.jpg"}
                }
            },
            {
                "identifier": {"productId": 200, "selectedOptions": {}},
                "quantity": 3,
                "price": 4,
                "productInfo": {
                    "name": "Socks",
                    "slugs": {"forRouteWithId": "socks"}
                }
            }
        ],
        "amounts": {"subtotal": 37.5, "total": 40.0, "tax": 2.5}
    }


@pytest.fixture
def empty_cart():
    """Cart as returned right after checkout creation."""
    empty = Money(amount='', currency_code='')
    return Cart(
        id="CART-1",
        session_token="session-token",
        checkout_url='',
        cost=CartCost(subtotal_amount=empty, total_amount=empty, total_tax_amount=empty),
        lines=[],
        total_quantity=0
    )
