"""
In-memory repositories

Dict-backed implementations of every repository interface. They keep
deep copies on both save and read, so a caller holding an entity cannot
change the store behind the repository's back, the same isolation a
database gives. Used for the "memory" backend and as test doubles.

The store lives in one process: stock updates are serialized by the
services' STOCK_LOCK, which does not reach across worker processes, so
run the memory backend with a single worker.

Author: TM3
Date: 2025-10-17
"""
from typing import Callable, Dict, List, Optional, Tuple, TypeVar

from storefront.domain.cart import ShoppingCart
from storefront.domain.customer import Customer
from storefront.domain.email import Email
from storefront.domain.entity import Entity
from storefront.domain.exceptions import DuplicateEntityError
from storefront.domain.order import Order, OrderStatus
from storefront.domain.product import Product
from storefront.repositories.base import (
    CartRepository,
    CustomerRepository,
    OrderRepository,
    ProductRepository,
    Repository,
)

E = TypeVar("E", bound=Entity)


class InMemoryRepository(Repository[E]):
    """Shared storage and paging for the in-memory repositories"""

    def __init__(self):
        self._items: Dict[str, E] = {}

    def _ordered(self) -> List[E]:
        return sorted(self._items.values(), key=lambda entity: (entity.created_at, entity.id))

    def _matching(self, predicate: Callable[[E], bool]) -> List[E]:
        return [entity.model_copy(deep=True) for entity in self._ordered() if predicate(entity)]

    def _check_unique(self, entity: E) -> None:
        """Raise DuplicateEntityError when entity clashes with another stored one"""

    def get(self, entity_id: str) -> Optional[E]:
        entity = self._items.get(entity_id)
        return entity.model_copy(deep=True) if entity is not None else None

    def find_all(self, limit: int = 50, offset: int = 0) -> Tuple[List[E], int]:
        ordered = self._ordered()
        page = ordered[offset:offset + limit]
        return [entity.model_copy(deep=True) for entity in page], len(ordered)

    def save(self, entity: E) -> E:
        self._check_unique(entity)
        self._items[entity.id] = entity.model_copy(deep=True)
        return entity

    def delete(self, entity_id: str) -> bool:
        return self._items.pop(entity_id, None) is not None

    def count(self) -> int:
        return len(self._items)

    def clear(self) -> None:
        self._items.clear()


class InMemoryProductRepository(InMemoryRepository[Product], ProductRepository):

    def _check_unique(self, entity: Product) -> None:
        for other in self._items.values():
            if other.id != entity.id and other.sku == entity.sku:
                raise DuplicateEntityError(self.entity_name, "sku", entity.sku)

    def find_by_sku(self, sku: str) -> Optional[Product]:
        wanted = sku.strip().upper()
        matches = self._matching(lambda product: product.sku == wanted)
        return matches[0] if matches else None

    def find_active(self) -> List[Product]:
        return self._matching(lambda product: product.is_active)

    def find_by_category(self, category: str) -> List[Product]:
        return self._matching(lambda product: product.category == category)

    def find_low_stock(self, threshold: Optional[int] = None) -> List[Product]:
        def is_low(product: Product) -> bool:
            limit = threshold if threshold is not None else product.min_stock
            return product.is_active and product.stock <= limit

        return sorted(self._matching(is_low), key=lambda product: product.stock)


class InMemoryCustomerRepository(InMemoryRepository[Customer], CustomerRepository):

    def _check_unique(self, entity: Customer) -> None:
        for other in self._items.values():
            if other.id != entity.id and other.email == entity.email:
                raise DuplicateEntityError(self.entity_name, "email", entity.email.value)

    def find_by_email(self, email: str) -> Optional[Customer]:
        wanted = Email(value=email)
        matches = self._matching(lambda customer: customer.email == wanted)
        return matches[0] if matches else None


class InMemoryOrderRepository(InMemoryRepository[Order], OrderRepository):

    def find_by_customer(self, customer_id: str) -> List[Order]:
        return self._matching(lambda order: order.customer_id == customer_id)

    def find_by_status(self, status: OrderStatus) -> List[Order]:
        status = OrderStatus(status)
        return self._matching(lambda order: order.status == status)


class InMemoryCartRepository(InMemoryRepository[ShoppingCart], CartRepository):

    def find_by_customer(self, customer_id: str) -> List[ShoppingCart]:
        return self._matching(lambda cart: cart.customer_id == customer_id)
