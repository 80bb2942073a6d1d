"""
Unit tests for CartService

Author: TM3
Date: 2025-10-17
"""
import pytest

from storefront.domain.exceptions import EntityNotFoundError, InsufficientStockError, ItemNotFoundError


class TestCartService:

    def test_create_cart_for_known_customer(self, cart_service, customer, cart_repo):
        cart = cart_service.create_cart(customer.id)

        assert cart.customer_id == customer.id
        assert cart.currency == "USD"
        assert cart_repo.get(cart.id) == cart

    def test_create_cart_for_unknown_customer_raises(self, cart_service):
        with pytest.raises(EntityNotFoundError):
            cart_service.create_cart("nobody")

    def test_add_update_remove(self, cart_service, customer, make_product, cart_repo):
        tea = make_product(sku="TEA", stock=10)
        mug = make_product(sku="MUG", stock=10)
        cart = cart_service.create_cart(customer.id)

        cart_service.add_item(cart.id, tea.id, 2)
        cart_service.add_item(cart.id, mug.id)
        cart_service.update_item(cart.id, tea.id, 5)
        cart_service.remove_item(cart.id, mug.id)

        stored = cart_repo.get(cart.id)
        assert [(line.product_id, line.quantity) for line in stored.lines] == [(tea.id, 5)]

    def test_update_to_zero_removes(self, cart_service, customer, make_product):
        tea = make_product()
        cart = cart_service.create_cart(customer.id)
        cart_service.add_item(cart.id, tea.id, 2)

        assert cart_service.update_item(cart.id, tea.id, 0).is_empty

    def test_add_more_than_stock_raises(self, cart_service, customer, make_product, cart_repo):
        tea = make_product(stock=1)
        cart = cart_service.create_cart(customer.id)

        with pytest.raises(InsufficientStockError):
            cart_service.add_item(cart.id, tea.id, 2)

        assert cart_repo.get(cart.id).is_empty

    def test_unknown_cart_or_product(self, cart_service, customer, make_product):
        cart = cart_service.create_cart(customer.id)
        with pytest.raises(EntityNotFoundError):
            cart_service.add_item("no-cart", make_product().id)
        with pytest.raises(EntityNotFoundError):
            cart_service.add_item(cart.id, "no-product")
        with pytest.raises(ItemNotFoundError):
            cart_service.remove_item(cart.id, "no-product")

    def test_clear_and_find_for_customer(self, cart_service, customer, make_product):
        tea = make_product()
        cart = cart_service.create_cart(customer.id)
        cart_service.add_item(cart.id, tea.id)

        assert cart_service.clear(cart.id).is_empty
        assert cart_service.find_for_customer(customer.id) == cart
        assert cart_service.find_for_customer("nobody") is None
