"""
API tests for /api/v1/carts

Author: TM3
Date: 2025-10-17
"""
import pytest

CARTS = "/api/v1/carts"


@pytest.fixture
def cart_id(client, customer):
    response = client.post(f"{CARTS}/", json={"customer_id": customer.id})
    assert response.status_code == 201
    return response.json()['data']['id']


class TestCartsAPI:

    def test_create_cart_for_unknown_customer(self, client):
        assert client.post(f"{CARTS}/", json={"customer_id": "nobody"}).status_code == 404

    def test_add_update_remove_items(self, client, cart_id, make_product):
        tea = make_product(sku="TEA", price="2.00", stock=10)
        mug = make_product(sku="MUG", price="6.00", stock=10)

        client.post(f"{CARTS}/{cart_id}/items", json={"product_id": tea.id, "quantity": 2})
        client.post(f"{CARTS}/{cart_id}/items", json={"product_id": mug.id})
        updated = client.patch(f"{CARTS}/{cart_id}/items/{tea.id}", json={"quantity": 3}).json()['data']

        assert updated['item_count'] == 4
        assert updated['total'] == {"amount": "12.00", "currency": "USD"}

        removed = client.delete(f"{CARTS}/{cart_id}/items/{mug.id}").json()['data']
        assert [line['product_id'] for line in removed['lines']] == [tea.id]

    def test_add_inactive_product(self, client, cart_id, make_product):
        tea = make_product(is_active=False)

        response = client.post(f"{CARTS}/{cart_id}/items", json={"product_id": tea.id})

        assert response.status_code == 400
        assert response.json()['error'] == "ProductUnavailableError"

    def test_remove_missing_line(self, client, cart_id):
        response = client.delete(f"{CARTS}/{cart_id}/items/nope")

        assert response.status_code == 400
        assert response.json()['error'] == "ItemNotFoundError"

    def test_checkout(self, client, cart_id, make_product, product_repo):
        tea = make_product(price="2.50", stock=10)
        client.post(f"{CARTS}/{cart_id}/items", json={"product_id": tea.id, "quantity": 4})

        response = client.post(f"{CARTS}/{cart_id}/checkout", json={"shipping_address": {
            "street": "9 Side St", "city": "Shelbyville", "postal_code": "54321", "country": "US",
        }})

        assert response.status_code == 201
        order = response.json()['data']
        assert order['total'] == {"amount": "10.00", "currency": "USD"}
        assert order['shipping_address']['city'] == "Shelbyville"
        assert product_repo.get(tea.id).stock == 6
        assert client.get(f"{CARTS}/{cart_id}").json()['data']['is_empty'] is True

    def test_checkout_empty_cart(self, client, cart_id):
        response = client.post(f"{CARTS}/{cart_id}/checkout")

        assert response.status_code == 400
        assert response.json()['error'] == "EmptyCartError"
