"""
Repository Interfaces

Business logic depends on these abstract classes only; the concrete
storage (memory, PostgreSQL, remote HTTP API) is picked at startup.

Author: TM3
Date: 2025-10-17
"""
from abc import ABC, abstractmethod
from typing import Generic, List, Optional, Tuple, TypeVar

from storefront.domain.cart import ShoppingCart
from storefront.domain.customer import Customer
from storefront.domain.exceptions import EntityNotFoundError
from storefront.domain.order import Order, OrderStatus
from storefront.domain.product import Product

T = TypeVar("T")


class Repository(ABC, Generic[T]):
    """
    Generic collection-like access to one entity type

    save() is an upsert keyed by entity id. Entities handed out are
    detached: changing one has no effect until it is saved.
    """

    entity_name = "Entity"

    @abstractmethod
    def get(self, entity_id: str) -> Optional[T]:
        """Return the entity with this id, or None"""

    @abstractmethod
    def find_all(self, limit: int = 50, offset: int = 0) -> Tuple[List[T], int]:
        """
        Page through all entities

        Returns:
            Tuple of (list of entities, total count)
        """

    @abstractmethod
    def save(self, entity: T) -> T:
        """Insert or update an entity"""

    @abstractmethod
    def delete(self, entity_id: str) -> bool:
        """Delete by id; False when nothing was deleted"""

    @abstractmethod
    def count(self) -> int:
        """Total number of stored entities"""

    def get_or_raise(self, entity_id: str) -> T:
        entity = self.get(entity_id)
        if entity is None:
            raise EntityNotFoundError(self.entity_name, entity_id)
        return entity

    def exists(self, entity_id: str) -> bool:
        return self.get(entity_id) is not None


class ProductRepository(Repository[Product]):
    entity_name = "Product"

    @abstractmethod
    def find_by_sku(self, sku: str) -> Optional[Product]:
        """Find a product by SKU (case-insensitive)"""

    @abstractmethod
    def find_active(self) -> List[Product]:
        """All products that can be sold"""

    @abstractmethod
    def find_by_category(self, category: str) -> List[Product]:
        """All products in a category"""

    @abstractmethod
    def find_low_stock(self, threshold: Optional[int] = None) -> List[Product]:
        """
        Active products with low stock, lowest stock first

        Args:
            threshold: Custom threshold (if None, uses each product's min_stock)
        """


class CustomerRepository(Repository[Customer]):
    entity_name = "Customer"

    @abstractmethod
    def find_by_email(self, email: str) -> Optional[Customer]:
        """Find a customer by email (case-insensitive)"""


class OrderRepository(Repository[Order]):
    entity_name = "Order"

    @abstractmethod
    def find_by_customer(self, customer_id: str) -> List[Order]:
        """All orders of a customer, oldest first"""

    @abstractmethod
    def find_by_status(self, status: OrderStatus) -> List[Order]:
        """All orders currently in a status, oldest first"""


class CartRepository(Repository[ShoppingCart]):
    entity_name = "Cart"

    @abstractmethod
    def find_by_customer(self, customer_id: str) -> List[ShoppingCart]:
        """All carts owned by a customer"""
