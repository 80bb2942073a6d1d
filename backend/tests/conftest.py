"""
Pytest fixtures and configuration for Storefront backend tests

This file provides shared fixtures that can be used across all test modules.
Everything runs against the in-memory repositories; no database is needed.

Author: TM3
Date: 2025-10-17
"""
from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from storefront.core.config import Settings
from storefront.domain.address import Address
from storefront.domain.customer import Customer
from storefront.domain.email import Email
from storefront.domain.money import Money
from storefront.domain.product import Product
from storefront.main import create_app
from storefront.repositories.factory import Repositories
from storefront.repositories.memory import (
    InMemoryCartRepository,
    InMemoryCustomerRepository,
    InMemoryOrderRepository,
    InMemoryProductRepository,
)
from storefront.services.cart_service import CartService
from storefront.services.catalog_service import CatalogService
from storefront.services.order_service import OrderService

BASE_TIME = datetime(2025, 1, 1, tzinfo=timezone.utc)


@pytest.fixture
def settings():
    """
    Settings for tests

    Ignores any local .env so results do not depend on the developer machine
    """
    return Settings(_env_file=None, REPOSITORY_BACKEND="memory", DEFAULT_CURRENCY="USD", LOG_LEVEL="WARNING")


@pytest.fixture
def repositories():
    """Fresh in-memory repositories for each test"""
    return Repositories(
        products=InMemoryProductRepository(),
        customers=InMemoryCustomerRepository(),
        orders=InMemoryOrderRepository(),
        carts=InMemoryCartRepository(),
    )


@pytest.fixture
def product_repo(repositories):
    return repositories.products


@pytest.fixture
def customer_repo(repositories):
    return repositories.customers


@pytest.fixture
def order_repo(repositories):
    return repositories.orders


@pytest.fixture
def cart_repo(repositories):
    return repositories.carts


@pytest.fixture
def catalog_service(product_repo):
    return CatalogService(product_repo)


@pytest.fixture
def order_service(repositories):
    return OrderService(
        products=repositories.products,
        customers=repositories.customers,
        orders=repositories.orders,
        carts=repositories.carts,
        currency="USD",
    )


@pytest.fixture
def cart_service(repositories):
    return CartService(
        products=repositories.products,
        customers=repositories.customers,
        carts=repositories.carts,
        currency="USD",
    )


@pytest.fixture
def client(settings, repositories):
    """
    Provides a TestClient over an app wired to the in-memory repositories

    Tests can seed data through the repository fixtures and read it back over HTTP
    """
    app = create_app(settings=settings, repositories=repositories)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def make_product(product_repo):
    """
    Factory for saved products

    Each call gets a created_at one minute after the previous one, so
    listing order is deterministic.
    """
    counter = {"n": 0}

    def _make(sku="TEA-001", name="Green Tea", price="10.00", stock=10, min_stock=2,
              category="tea", currency="USD", is_active=True, save=True):
        counter["n"] += 1
        product = Product(
            sku=sku,
            name=name,
            category=category,
            price=Money(amount=Decimal(price), currency=currency),
            stock=stock,
            min_stock=min_stock,
            is_active=is_active,
            created_at=BASE_TIME + timedelta(minutes=counter["n"]),
        )
        if save:
            product_repo.save(product)
        return product

    return _make


@pytest.fixture
def sample_address():
    return Address(street="1 Main St", city="Springfield", postal_code="12345", country="US", state="IL")


@pytest.fixture
def customer(customer_repo, sample_address):
    """A saved customer with a default shipping address"""
    customer = Customer(name="Ada Lovelace", email=Email(value="ada@example.com"), shipping_address=sample_address)
    customer_repo.save(customer)
    return customer


@pytest.fixture
def sample_product_data():
    """
    Provides sample product payload for API tests
    """
    return {
        "sku": "tea-green-100",
        "name": "Green Tea 100g",
        "category": "tea",
        "price": {"amount": "8.50", "currency": "USD"},
        "stock": 40,
        "min_stock": 10,
    }
