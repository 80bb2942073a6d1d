"""
API tests for /api/v1/orders

Author: TM3
Date: 2025-10-17
"""
import pytest

ORDERS = "/api/v1/orders"


@pytest.fixture
def placed_order(client, customer, make_product):
    tea = make_product(price="4.00", stock=10)
    response = client.post(f"{ORDERS}/", json={
        "customer_id": customer.id,
        "items": [{"product_id": tea.id, "quantity": 2}],
    })
    assert response.status_code == 201
    return response.json()['data']


class TestOrdersAPI:

    def test_place_order(self, placed_order, client, product_repo):
        assert placed_order['status'] == "pending"
        assert placed_order['total'] == {"amount": "8.00", "currency": "USD"}
        assert placed_order['shipping_address']['city'] == "Springfield"

        product_id = placed_order['items'][0]['product_id']
        assert product_repo.get(product_id).stock == 8

    def test_place_order_insufficient_stock(self, client, customer, make_product):
        tea = make_product(stock=1)

        response = client.post(f"{ORDERS}/", json={
            "customer_id": customer.id,
            "items": [{"product_id": tea.id, "quantity": 5}],
        })

        assert response.status_code == 400
        assert response.json()['error'] == "InsufficientStockError"

    def test_place_order_requires_items(self, client, customer):
        response = client.post(f"{ORDERS}/", json={"customer_id": customer.id, "items": []})
        assert response.status_code == 422

    def test_place_order_unknown_customer(self, client, make_product):
        tea = make_product()
        response = client.post(f"{ORDERS}/", json={
            "customer_id": "nobody",
            "items": [{"product_id": tea.id, "quantity": 1}],
        })
        assert response.status_code == 404

    def test_lifecycle(self, client, placed_order):
        order_id = placed_order['id']

        for action, status in [("confirm", "confirmed"), ("ship", "shipped"), ("deliver", "delivered")]:
            response = client.post(f"{ORDERS}/{order_id}/{action}")
            assert response.status_code == 200
            assert response.json()['data']['status'] == status

        final = client.get(f"{ORDERS}/{order_id}").json()['data']
        assert final['is_final'] is True
        assert final['delivered_at'] is not None

    def test_invalid_transition_conflicts(self, client, placed_order):
        response = client.post(f"{ORDERS}/{placed_order['id']}/ship")

        assert response.status_code == 409
        assert response.json()['error'] == "InvalidOrderTransitionError"

    def test_cancel_with_reason(self, client, placed_order, product_repo):
        response = client.post(f"{ORDERS}/{placed_order['id']}/cancel", json={"reason": "duplicate order"})

        data = response.json()['data']
        assert data['status'] == "cancelled"
        assert data['cancellation_reason'] == "duplicate order"
        assert product_repo.get(data['items'][0]['product_id']).stock == 10

    def test_cancel_without_body(self, client, placed_order):
        response = client.post(f"{ORDERS}/{placed_order['id']}/cancel")
        assert response.json()['data']['cancellation_reason'] is None

    def test_list_orders_by_status(self, client, placed_order):
        pending = client.get(f"{ORDERS}/", params={"status": "pending"}).json()
        shipped = client.get(f"{ORDERS}/", params={"status": "shipped"}).json()

        assert [o['id'] for o in pending['data']] == [placed_order['id']]
        assert shipped['total'] == 0

    def test_list_orders_rejects_unknown_status(self, client):
        assert client.get(f"{ORDERS}/", params={"status": "lost"}).status_code == 422

    def test_get_missing_order(self, client):
        assert client.get(f"{ORDERS}/missing").status_code == 404
