"""
Service Layer - Business Operations

Services coordinate domain models and repositories. They never touch SQL
or HTTP directly.
"""
from storefront.services.cart_service import CartService
from storefront.services.catalog_service import CatalogService
from storefront.services.order_service import OrderService

__all__ = ['CartService', 'CatalogService', 'OrderService']
