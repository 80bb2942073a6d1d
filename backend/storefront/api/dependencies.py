"""
FastAPI dependencies

Repositories live on app.state (built once in create_app); services are
cheap and built per request on top of them.
"""
from fastapi import Depends, Request

from storefront.core.config import Settings
from storefront.repositories.base import CustomerRepository
from storefront.repositories.factory import Repositories
from storefront.services.cart_service import CartService
from storefront.services.catalog_service import CatalogService
from storefront.services.order_service import OrderService


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_repositories(request: Request) -> Repositories:
    return request.app.state.repositories


def get_customer_repository(repositories: Repositories = Depends(get_repositories)) -> CustomerRepository:
    return repositories.customers


def get_catalog_service(
    repositories: Repositories = Depends(get_repositories),
    settings: Settings = Depends(get_app_settings),
) -> CatalogService:
    return CatalogService(repositories.products, low_stock_threshold=settings.LOW_STOCK_THRESHOLD)


def get_order_service(
    repositories: Repositories = Depends(get_repositories),
    settings: Settings = Depends(get_app_settings),
) -> OrderService:
    return OrderService(
        products=repositories.products,
        customers=repositories.customers,
        orders=repositories.orders,
        carts=repositories.carts,
        currency=settings.DEFAULT_CURRENCY,
    )


def get_cart_service(
    repositories: Repositories = Depends(get_repositories),
    settings: Settings = Depends(get_app_settings),
) -> CartService:
    return CartService(
        products=repositories.products,
        customers=repositories.customers,
        carts=repositories.carts,
        currency=settings.DEFAULT_CURRENCY,
    )
