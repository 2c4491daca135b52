"""Integration tests for Order API endpoints via TestClient."""

import pytest
from commerce.catalogue.product import Product
from commerce.inventory.guard import InventoryGuard
from protean import current_domain


def _fill_cart(client, headers, make_product, quantity=2, price=100.0):
    make_product(price=price, inventory=10)
    response = client.post("/cart/items", json={"product_id": "prod-001", "quantity": quantity}, headers=headers)
    assert response.status_code == 200


def _checkout(client, headers, shipping_address):
    return client.post("/orders", json={"shipping_address": shipping_address}, headers=headers)


class TestCheckoutEndpoint:
    def test_checkout_creates_order(self, client, headers, make_product, shipping_address):
        _fill_cart(client, headers, make_product)

        response = _checkout(client, headers, shipping_address)

        assert response.status_code == 201
        body = response.json()
        assert body["status"] == "PLACED"
        assert body["order_number"].startswith("ORD-")
        assert body["total"] == pytest.approx(200.0)
        assert body["shipping_address"]["address_line2"] == "Apt 4"

    def test_empty_cart_is_400(self, client, headers, shipping_address):
        assert _checkout(client, headers, shipping_address).status_code == 400

    def test_missing_address_field_is_422(self, client, headers, make_product, shipping_address):
        _fill_cart(client, headers, make_product)
        del shipping_address["phone"]
        assert _checkout(client, headers, shipping_address).status_code == 422

    def test_pricing_conflict_is_409_with_product_ids(self, client, headers, make_product, shipping_address):
        _fill_cart(client, headers, make_product)
        repo = current_domain.repository_for(Product)
        product = repo.get_for_tenant("tenant-a", "prod-001")
        product.change_price(150.0)
        repo.add(product)

        response = _checkout(client, headers, shipping_address)

        assert response.status_code == 409
        assert response.json()["product_ids"] == ["prod-001"]
        assert client.get("/cart", headers=headers).json()["total"] == pytest.approx(300.0)
        assert _checkout(client, headers, shipping_address).status_code == 201

    def test_inventory_race_is_500_with_generic_message(
        self, client, headers, make_product, shipping_address, monkeypatch
    ):
        _fill_cart(client, headers, make_product)
        monkeypatch.setattr(InventoryGuard, "reserve", lambda self, product_id, quantity: False)

        response = _checkout(client, headers, shipping_address)

        assert response.status_code == 500
        assert response.json()["error"] == {"checkout": ["Failed to process order. Please try again"]}


class TestOrderQueries:
    def test_list_and_get(self, client, headers, make_product, shipping_address):
        _fill_cart(client, headers, make_product)
        order_id = _checkout(client, headers, shipping_address).json()["id"]

        listing = client.get("/orders", headers=headers)
        assert listing.status_code == 200
        assert [order["id"] for order in listing.json()["orders"]] == [order_id]
        assert listing.json()["pagination"]["total_items"] == 1

        single = client.get(f"/orders/{order_id}", headers=headers)
        assert single.status_code == 200
        assert single.json()["items"][0]["product_id"] == "prod-001"

    def test_order_of_other_user_is_404(self, client, headers, make_product, shipping_address):
        _fill_cart(client, headers, make_product)
        order_id = _checkout(client, headers, shipping_address).json()["id"]

        response = client.get(f"/orders/{order_id}", headers={**headers, "X-User-ID": "user-002"})
        assert response.status_code == 404

    def test_invalid_limit_is_400(self, client, headers):
        assert client.get("/orders?limit=500", headers=headers).status_code == 400


class TestOrderStatusEndpoint:
    def test_cancel_restores_stock(self, client, headers, make_product, shipping_address):
        _fill_cart(client, headers, make_product, quantity=4)
        order_id = _checkout(client, headers, shipping_address).json()["id"]

        response = client.patch(f"/orders/{order_id}/status", json={"status": "CANCELLED"}, headers=headers)

        assert response.status_code == 200
        assert response.json()["status"] == "CANCELLED"
        assert current_domain.repository_for(Product).get_for_tenant("tenant-a", "prod-001").inventory == 10

    def test_invalid_transition_is_400(self, client, headers, make_product, shipping_address):
        _fill_cart(client, headers, make_product)
        order_id = _checkout(client, headers, shipping_address).json()["id"]
        client.patch(f"/orders/{order_id}/status", json={"status": "CONFIRMED"}, headers=headers)

        response = client.patch(f"/orders/{order_id}/status", json={"status": "CANCELLED"}, headers=headers)
        assert response.status_code == 400
