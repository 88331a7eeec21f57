"""
Tests for the catalog and cart HTTP endpoints.
"""

import pytest

from storefront import create_app
from storefront.adapters.base import Collection, Menu
from storefront.adapters.reshape import reshape_order, reshape_product
from storefront.clients.ecwid_client import EcwidAPIError
from storefront.config import Config

SESSION_COOKIE = "ec-1003-session"


@pytest.fixture
def client(mock_adapter):
    app = create_app(adapter=mock_adapter)
    mock_adapter.reset_mock()
    return app.test_client()


def _set_cookies(response):
    return response.headers.getlist('Set-Cookie')


def _login_cart(client):
    """Cookies of a browser that already has a cart."""
    client.set_cookie('cartId', 'ORDER-1')
    client.set_cookie(SESSION_COOKIE, 'tok')


def test_create_app_requires_configuration(monkeypatch, mock_adapter):
    monkeypatch.setattr(Config, 'ECWID_API_KEY', '')

    with pytest.raises(ValueError) as exc_info:
        create_app(adapter=mock_adapter)

    assert 'ECWID_API_KEY' in str(exc_info.value)


def test_create_app_loads_currency(mock_adapter):
    create_app(adapter=mock_adapter)

    mock_adapter.load_currency_code.assert_called_once_with()


def test_health(client):
    response = client.get('/health')

    assert response.status_code == 200
    assert response.get_json() == {"status": "healthy"}


def test_list_products(client, mock_adapter, product_node):
    mock_adapter.get_products.return_value = [reshape_product(product_node, "USD")]

    response = client.get('/api/products?q=shoe&sort=price-desc')

    assert response.status_code == 200
    products = response.get_json()["products"]
    assert products[0]["id"] == "123"
    assert products[0]["priceRange"]["maxVariantPrice"] == {"amount": "65", "currencyCode": "USD"}
    mock_adapter.get_products.assert_called_once_with(query="shoe", reverse=True, sort_key="price")


def test_get_product(client, mock_adapter, product_node):
    mock_adapter.get_product.return_value = reshape_product(product_node, "USD")

    response = client.get('/api/products/running-shoe-p123')

    assert response.status_code == 200
    assert response.get_json()["handle"] == "running-shoe-p123"
    mock_adapter.get_product.assert_called_once_with("running-shoe-p123")


def test_get_product_not_found(client, mock_adapter):
    mock_adapter.get_product.return_value = None

    assert client.get('/api/products/missing-p9').status_code == 404


def test_provider_error_is_502(client, mock_adapter):
    mock_adapter.get_product.side_effect = EcwidAPIError("Unauthorized", status=401)

    response = client.get('/api/products/running-shoe-p123')

    assert response.status_code == 502
    assert response.get_json()["status"] == "error"


def test_product_recommendations(client, mock_adapter):
    mock_adapter.get_product_recommendations.return_value = []

    response = client.get('/api/products/123/recommendations')

    assert response.get_json() == {"products": []}
    mock_adapter.get_product_recommendations.assert_called_once_with("123")


def test_collections(client, mock_adapter):
    mock_adapter.get_collections.return_value = [Collection(handle='', title='All', path='/search')]
    mock_adapter.get_collection.return_value = Collection(handle='42', title='Shoes')
    mock_adapter.get_collection_products.return_value = []

    assert client.get('/api/collections').get_json()["collections"][0]["title"] == "All"
    assert client.get('/api/collections/shoes-c42').get_json()["title"] == "Shoes"
    assert client.get('/api/collections/shoes-c42/products').get_json() == {"products": []}
    mock_adapter.get_collection_products.assert_called_once_with(
        "shoes-c42", reverse=False, sort_key="relevance"
    )


def test_menu(client, mock_adapter):
    mock_adapter.get_menu.return_value = [Menu(title='All', path='/search')]

    response = client.get('/api/menu/main-menu')

    assert response.get_json() == {"menu": [{"title": "All", "path": "/search"}]}


def test_get_cart_without_cookie(client, mock_adapter):
    response = client.get('/api/cart')

    assert response.get_json() == {"cart": None}
    mock_adapter.get_cart.assert_not_called()


def test_add_item_sets_cart_cookies(client, mock_adapter, empty_cart, order):
    mock_adapter.create_cart.return_value = empty_cart
    mock_adapter.get_cart.return_value = reshape_order(order, "USD")

    response = client.post('/api/cart/items', json={"variantId": "123|Size:M"})

    assert response.status_code == 201
    assert response.get_json()["cart"]["totalQuantity"] == 5
    cookies = _set_cookies(response)
    assert any(c.startswith("cartId=CART-1") for c in cookies)
    assert any(c.startswith(f"{SESSION_COOKIE}=session-token") for c in cookies)


def test_add_item_keeps_cookies_when_snapshot_fails(client, mock_adapter, empty_cart):
    mock_adapter.create_cart.return_value = empty_cart
    mock_adapter.get_cart.side_effect = EcwidAPIError("temporary", status=503)

    response = client.post('/api/cart/items', json={"variantId": "200"})

    assert response.status_code == 201
    assert response.get_json() == {"status": "success", "cart": None}
    mock_adapter.add_to_cart.assert_called_once()
    cookies = _set_cookies(response)
    assert any(c.startswith("cartId=CART-1") for c in cookies)
    assert any(c.startswith(f"{SESSION_COOKIE}=session-token") for c in cookies)


def test_add_item_missing_variant(client, mock_adapter):
    response = client.post('/api/cart/items', json={})

    assert response.status_code == 400
    assert response.get_json()["message"] == 'Missing product variant ID'
    assert _set_cookies(response) == []


def test_remove_item(client, mock_adapter, order):
    _login_cart(client)
    mock_adapter.get_cart.return_value = reshape_order(order, "USD")

    response = client.delete('/api/cart/items/123%7CSize:M')

    assert response.status_code == 200
    mock_adapter.remove_from_cart.assert_called_once_with("ORDER-1", ["123|Size:M"], "tok")


def test_remove_item_without_cart(client):
    response = client.delete('/api/cart/items/200')

    assert response.status_code == 400
    assert response.get_json()["message"] == 'Missing cart ID'


def test_update_item_to_zero_removes(client, mock_adapter, order):
    _login_cart(client)
    mock_adapter.get_cart.return_value = reshape_order(order, "USD")

    response = client.patch('/api/cart/items/200', json={"quantity": 0})

    assert response.status_code == 200
    mock_adapter.remove_from_cart.assert_called_once_with("ORDER-1", ["200"], "tok")
    mock_adapter.update_cart.assert_not_called()


def test_update_item_invalid_quantity(client, mock_adapter):
    _login_cart(client)

    response = client.patch('/api/cart/items/200', json={"quantity": -1})

    assert response.status_code == 400
    mock_adapter.update_cart.assert_not_called()
