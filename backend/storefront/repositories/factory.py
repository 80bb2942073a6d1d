"""
Repository wiring

Picks the storage backend named by Settings.REPOSITORY_BACKEND.
"""
import logging
from dataclasses import dataclass

from storefront.core.config import Settings
from storefront.repositories.base import (
    CartRepository,
    CustomerRepository,
    OrderRepository,
    ProductRepository,
)

logger = logging.getLogger(__name__)


@dataclass
class Repositories:
    products: ProductRepository
    customers: CustomerRepository
    orders: OrderRepository
    carts: CartRepository


def build_repositories(settings: Settings) -> Repositories:
    """
    Build one repository per aggregate for the configured backend

    Raises:
        ValueError: unknown backend, or postgres without DATABASE_URL
    """
    backend = settings.REPOSITORY_BACKEND

    if backend == "memory":
        from storefront.repositories.memory import (
            InMemoryCartRepository,
            InMemoryCustomerRepository,
            InMemoryOrderRepository,
            InMemoryProductRepository,
        )

        logger.info("Using in-memory repositories")
        return Repositories(
            products=InMemoryProductRepository(),
            customers=InMemoryCustomerRepository(),
            orders=InMemoryOrderRepository(),
            carts=InMemoryCartRepository(),
        )

    if backend == "postgres":
        if not settings.DATABASE_URL:
            raise ValueError("REPOSITORY_BACKEND=postgres requires DATABASE_URL")

        from storefront.repositories.postgres import (
            PostgresCartRepository,
            PostgresCustomerRepository,
            PostgresOrderRepository,
            PostgresProductRepository,
        )

        logger.info("Using PostgreSQL repositories")
        return Repositories(
            products=PostgresProductRepository(settings.DATABASE_URL),
            customers=PostgresCustomerRepository(settings.DATABASE_URL),
            orders=PostgresOrderRepository(settings.DATABASE_URL),
            carts=PostgresCartRepository(settings.DATABASE_URL),
        )

    raise ValueError(f"Unknown repository backend: {backend}")
