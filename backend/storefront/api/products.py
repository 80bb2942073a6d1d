"""
Products API Endpoints
Catalog management and queries

Author: TM3
Date: 2025-10-17
"""
from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends, Query, status
from pydantic import BaseModel, Field

from storefront.api.dependencies import get_catalog_service
from storefront.domain.exceptions import EntityNotFoundError
from storefront.domain.money import Money
from storefront.domain.product import Product, ProductCreate, ProductUpdate
from storefront.services.catalog_service import CatalogService

router = APIRouter()


class PriceChange(BaseModel):
    price: Money


class Restock(BaseModel):
    quantity: int = Field(..., ge=1)


def _product_response(product: Product) -> dict:
    return {"status": "success", "data": product.to_dict()}


@router.get("/")
def get_products(
    sku: Optional[str] = Query(None, description="Exact SKU"),
    category: Optional[str] = Query(None, description="Filter by category"),
    active: Optional[bool] = Query(None, description="Filter by active flag"),
    limit: int = Query(50, ge=1, le=1000),
    offset: int = Query(0, ge=0),
    service: CatalogService = Depends(get_catalog_service),
):
    """
    Get products with optional filters

    Returns a page of products plus the total matching count
    """
    products, total = service.list_products(
        sku=sku,
        category=category,
        active=active,
        limit=limit,
        offset=offset,
    )

    return {
        "status": "success",
        "total": total,
        "limit": limit,
        "offset": offset,
        "count": len(products),
        "data": [product.to_dict() for product in products],
    }


@router.get("/low-stock")
def get_low_stock(
    threshold: Optional[int] = Query(None, ge=0, description="Override per-product min_stock"),
    service: CatalogService = Depends(get_catalog_service),
):
    """Active products at or below their stock threshold, lowest first"""
    products = service.low_stock_report(threshold)
    return {
        "status": "success",
        "count": len(products),
        "data": [product.to_dict() for product in products],
    }


@router.post("/", status_code=status.HTTP_201_CREATED)
def create_product(data: ProductCreate, service: CatalogService = Depends(get_catalog_service)):
    return _product_response(service.create_product(data))


@router.get("/{product_id}")
def get_product(product_id: str, service: CatalogService = Depends(get_catalog_service)):
    return _product_response(service.get_product(product_id))


@router.put("/{product_id}")
def put_product(
    product_id: str,
    payload: Dict[str, Any] = Body(...),
    service: CatalogService = Depends(get_catalog_service),
):
    """
    Store a complete product under this id (insert or overwrite)

    Used by RestProductRepository.save on remote instances.
    """
    product = Product.model_validate({**payload, "id": product_id})
    return _product_response(service.replace_product(product))


@router.patch("/{product_id}")
def update_product(
    product_id: str,
    data: ProductUpdate,
    service: CatalogService = Depends(get_catalog_service),
):
    return _product_response(service.update_product(product_id, data))


@router.patch("/{product_id}/price")
def change_price(
    product_id: str,
    data: PriceChange,
    service: CatalogService = Depends(get_catalog_service),
):
    return _product_response(service.change_price(product_id, data.price))


@router.post("/{product_id}/restock")
def restock_product(
    product_id: str,
    data: Restock,
    service: CatalogService = Depends(get_catalog_service),
):
    return _product_response(service.restock(product_id, data.quantity))


@router.post("/{product_id}/activate")
def activate_product(product_id: str, service: CatalogService = Depends(get_catalog_service)):
    return _product_response(service.activate(product_id))


@router.post("/{product_id}/deactivate")
def deactivate_product(product_id: str, service: CatalogService = Depends(get_catalog_service)):
    return _product_response(service.deactivate(product_id))


@router.delete("/{product_id}")
def delete_product(product_id: str, service: CatalogService = Depends(get_catalog_service)):
    if not service.delete_product(product_id):
        raise EntityNotFoundError("Product", product_id)
    return {"status": "success", "data": {"id": product_id, "deleted": True}}
