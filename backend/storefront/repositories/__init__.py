"""
Repository Layer - Data Access

Abstract interfaces plus in-memory, PostgreSQL and REST implementations.
Repositories hand out and accept domain models; SQL and HTTP details stay
in here.

Author: TM3
Date: 2025-10-17
"""
from storefront.repositories.base import (
    CartRepository,
    CustomerRepository,
    OrderRepository,
    ProductRepository,
    Repository,
)
from storefront.repositories.factory import Repositories, build_repositories
from storefront.repositories.memory import (
    InMemoryCartRepository,
    InMemoryCustomerRepository,
    InMemoryOrderRepository,
    InMemoryProductRepository,
)

__all__ = [
    'CartRepository',
    'CustomerRepository',
    'OrderRepository',
    'ProductRepository',
    'Repository',
    'Repositories',
    'build_repositories',
    'InMemoryCartRepository',
    'InMemoryCustomerRepository',
    'InMemoryOrderRepository',
    'InMemoryProductRepository',
]
