"""
Cart Service
Opens carts and keeps their lines in sync with the catalog

Author: TM3
Date: 2025-10-17
"""
import logging
from typing import Optional

from storefront.domain.cart import ShoppingCart
from storefront.repositories.base import CartRepository, CustomerRepository, ProductRepository

logger = logging.getLogger(__name__)


class CartService:
    """Service for shopping cart operations"""

    def __init__(
        self,
        products: ProductRepository,
        customers: CustomerRepository,
        carts: CartRepository,
        currency: str = "USD",
    ):
        self.products = products
        self.customers = customers
        self.carts = carts
        self.currency = currency

    def create_cart(self, customer_id: str) -> ShoppingCart:
        customer = self.customers.get_or_raise(customer_id)
        cart = ShoppingCart(customer_id=customer.id, currency=self.currency)
        self.carts.save(cart)
        logger.info(f"Opened cart {cart.id} for customer {customer.id}")
        return cart

    def get_cart(self, cart_id: str) -> ShoppingCart:
        return self.carts.get_or_raise(cart_id)

    def add_item(self, cart_id: str, product_id: str, quantity: int = 1) -> ShoppingCart:
        cart = self.carts.get_or_raise(cart_id)
        product = self.products.get_or_raise(product_id)
        cart.add_product(product, quantity)
        self.carts.save(cart)
        return cart

    def update_item(self, cart_id: str, product_id: str, quantity: int) -> ShoppingCart:
        """Set a line's quantity; 0 removes the line"""
        cart = self.carts.get_or_raise(cart_id)
        cart.update_quantity(product_id, quantity)
        self.carts.save(cart)
        return cart

    def remove_item(self, cart_id: str, product_id: str) -> ShoppingCart:
        cart = self.carts.get_or_raise(cart_id)
        cart.remove_product(product_id)
        self.carts.save(cart)
        return cart

    def clear(self, cart_id: str) -> ShoppingCart:
        cart = self.carts.get_or_raise(cart_id)
        cart.clear()
        self.carts.save(cart)
        return cart

    def find_for_customer(self, customer_id: str) -> Optional[ShoppingCart]:
        """Most recently opened cart of a customer"""
        carts = self.carts.find_by_customer(customer_id)
        return carts[-1] if carts else None
