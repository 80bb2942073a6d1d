"""
Domain Layer - Business Entities and Value Objects

Value objects (Money, Email, Address) are immutable and compare by value.
Entities (Product, Customer, Order, ShoppingCart) have identity and
re-validate their invariants on every change.

Author: TM3
Date: 2025-10-17
"""
from storefront.domain.address import Address
from storefront.domain.cart import CartLine, ShoppingCart
from storefront.domain.customer import Customer
from storefront.domain.email import Email
from storefront.domain.entity import Entity
from storefront.domain.money import Money
from storefront.domain.order import ALLOWED_TRANSITIONS, Order, OrderItem, OrderStatus
from storefront.domain.product import Product

__all__ = [
    'Address',
    'ALLOWED_TRANSITIONS',
    'CartLine',
    'Customer',
    'Email',
    'Entity',
    'Money',
    'Order',
    'OrderItem',
    'OrderStatus',
    'Product',
    'ShoppingCart',
]
