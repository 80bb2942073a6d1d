"""
Order Service
Places orders, reserves stock and drives the order lifecycle

Author: TM3
Date: 2025-10-17
"""
import logging
import threading
from typing import Dict, List, Optional, Sequence, Tuple

from storefront.domain.address import Address
from storefront.domain.exceptions import (
    EmptyCartError,
    EmptyOrderError,
    ProductUnavailableError,
)
from storefront.domain.order import Order, OrderStatus
from storefront.domain.product import Product
from storefront.repositories.base import (
    CartRepository,
    CustomerRepository,
    OrderRepository,
    ProductRepository,
)

logger = logging.getLogger(__name__)

# Serializes stock read-modify-write across request threads of one process
STOCK_LOCK = threading.RLock()


class OrderService:
    """
    Service for placing and progressing orders

    Handles:
    - Stock reservation when an order is placed
    - Stock release when an order is cancelled
    - Cart checkout
    - Status transitions (confirm, ship, deliver, cancel)
    """

    def __init__(
        self,
        products: ProductRepository,
        customers: CustomerRepository,
        orders: OrderRepository,
        carts: Optional[CartRepository] = None,
        currency: str = "USD",
    ):
        self.products = products
        self.customers = customers
        self.orders = orders
        self.carts = carts
        self.currency = currency

    def place_order(
        self,
        customer_id: str,
        lines: Sequence[Tuple[str, int]],
        shipping_address: Optional[Address] = None,
    ) -> Order:
        """
        Place a new pending order and reserve its stock

        Every line is checked before anything is written, so a failed
        order leaves stock untouched.

        Args:
            customer_id: Ordering customer
            lines: (product_id, quantity) pairs; repeated products are merged
            shipping_address: Defaults to the customer's address

        Returns:
            The saved order

        Raises:
            EntityNotFoundError: customer or a product does not exist
            EmptyOrderError: no lines given
            ProductUnavailableError: a product is inactive
            InsufficientStockError: not enough stock for a line
            CurrencyMismatchError: a product is priced in another currency
        """
        customer = self.customers.get_or_raise(customer_id)
        if not lines:
            raise EmptyOrderError("An order needs at least one item", {"customer_id": customer_id})

        order = Order(
            customer_id=customer.id,
            currency=self.currency,
            shipping_address=shipping_address or customer.shipping_address,
        )

        with STOCK_LOCK:
            reserved: Dict[str, Product] = {}
            for product_id, quantity in lines:
                product = reserved.get(product_id) or self.products.get_or_raise(product_id)
                if not product.is_active:
                    raise ProductUnavailableError(product.id)

                product.remove_stock(quantity)
                order.add_product(product, quantity)
                reserved[product.id] = product

            for product in reserved.values():
                self.products.save(product)
            self.orders.save(order)

        logger.info(
            f"Order {order.id} placed by customer {customer.id}: "
            f"{order.total_quantity} units, total {order.total}"
        )
        return order

    def checkout_cart(self, cart_id: str, shipping_address: Optional[Address] = None) -> Order:
        """
        Place an order for everything in a cart, then empty the cart

        Lines are charged at the current catalog price.
        """
        if self.carts is None:
            raise RuntimeError("OrderService was built without a cart repository")

        cart = self.carts.get_or_raise(cart_id)
        if cart.is_empty:
            raise EmptyCartError(f"Cart {cart.id} is empty", {"cart_id": cart.id})

        order = self.place_order(
            cart.customer_id,
            [(line.product_id, line.quantity) for line in cart.lines],
            shipping_address,
        )

        cart.clear()
        self.carts.save(cart)
        logger.info(f"Cart {cart.id} checked out as order {order.id}")
        return order

    def get_order(self, order_id: str) -> Order:
        return self.orders.get_or_raise(order_id)

    def list_orders(
        self,
        customer_id: Optional[str] = None,
        status: Optional[OrderStatus] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> Tuple[List[Order], int]:
        """
        List orders with optional filters

        Returns:
            Tuple of (page of orders, total matching count)
        """
        if customer_id is None and status is None:
            return self.orders.find_all(limit=limit, offset=offset)

        if customer_id is not None:
            orders = self.orders.find_by_customer(customer_id)
            if status is not None:
                orders = [order for order in orders if order.status == OrderStatus(status)]
        else:
            orders = self.orders.find_by_status(status)

        return orders[offset:offset + limit], len(orders)

    def confirm_order(self, order_id: str) -> Order:
        order = self.orders.get_or_raise(order_id)
        order.confirm()
        self.orders.save(order)
        logger.info(f"Order {order.id} confirmed")
        return order

    def ship_order(self, order_id: str) -> Order:
        order = self.orders.get_or_raise(order_id)
        order.ship()
        self.orders.save(order)
        logger.info(f"Order {order.id} shipped")
        return order

    def deliver_order(self, order_id: str) -> Order:
        order = self.orders.get_or_raise(order_id)
        order.deliver()
        self.orders.save(order)
        logger.info(f"Order {order.id} delivered")
        return order

    def cancel_order(self, order_id: str, reason: Optional[str] = None) -> Order:
        """
        Cancel an order and put its reserved stock back

        Lines whose product has since been deleted are skipped.
        """
        with STOCK_LOCK:
            order = self.orders.get_or_raise(order_id)
            order.cancel(reason)

            for item in order.items:
                product = self.products.get(item.product_id)
                if product is None:
                    logger.warning(f"Product {item.product_id} of order {order.id} no longer exists, not restocking")
                    continue
                product.add_stock(item.quantity)
                self.products.save(product)

            self.orders.save(order)
        logger.info(f"Order {order.id} cancelled" + (f": {reason}" if reason else ""))
        return order
