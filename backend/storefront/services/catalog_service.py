"""
Catalog Service
Business operations on the product catalog

Author: TM3
Date: 2025-10-17
"""
import logging
from typing import List, Optional, Tuple

from storefront.domain.exceptions import DuplicateEntityError
from storefront.domain.money import Money
from storefront.domain.product import Product, ProductCreate, ProductUpdate
from storefront.repositories.base import ProductRepository
from storefront.services.order_service import STOCK_LOCK

logger = logging.getLogger(__name__)


class CatalogService:
    """
    Service for managing products

    Handles:
    - Product creation (unique SKU)
    - Price changes and restocking
    - Activation / deactivation
    - Low stock reporting
    """

    def __init__(self, products: ProductRepository, low_stock_threshold: Optional[int] = None):
        self.products = products
        self.low_stock_threshold = low_stock_threshold

    def create_product(self, data: ProductCreate) -> Product:
        """
        Create a product from a creation schema

        Raises:
            DuplicateEntityError: SKU is already in use
        """
        product = Product(**data.model_dump())
        if self.products.find_by_sku(product.sku) is not None:
            raise DuplicateEntityError("Product", "sku", product.sku)

        self.products.save(product)
        logger.info(f"Created product {product.id} ({product.sku}) at {product.price}")
        return product

    def get_product(self, product_id: str) -> Product:
        return self.products.get_or_raise(product_id)

    def list_products(
        self,
        sku: Optional[str] = None,
        category: Optional[str] = None,
        active: Optional[bool] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> Tuple[List[Product], int]:
        """
        List products with optional filters

        Returns:
            Tuple of (page of products, total matching count)
        """
        if sku is None and category is None and active is None:
            return self.products.find_all(limit=limit, offset=offset)

        if sku is not None:
            found = self.products.find_by_sku(sku)
            candidates = [found] if found is not None else []
        elif category is not None:
            candidates = self.products.find_by_category(category)
        elif active:
            candidates = self.products.find_active()
        else:
            candidates, _ = self.products.find_all(limit=self.products.count(), offset=0)

        if category is not None:
            candidates = [p for p in candidates if p.category == category]
        if active is not None:
            candidates = [p for p in candidates if p.is_active == active]

        return candidates[offset:offset + limit], len(candidates)

    def update_product(self, product_id: str, data: ProductUpdate) -> Product:
        product = self.products.get_or_raise(product_id)
        changes = data.model_dump(exclude_unset=True)
        for field, value in changes.items():
            setattr(product, field, value)
        if changes:
            product.touch()
        self.products.save(product)
        return product

    def replace_product(self, product: Product) -> Product:
        """Store a complete product as given (insert or overwrite)"""
        existing = self.products.find_by_sku(product.sku)
        if existing is not None and existing.id != product.id:
            raise DuplicateEntityError("Product", "sku", product.sku)
        return self.products.save(product)

    def change_price(self, product_id: str, new_price: Money) -> Product:
        product = self.products.get_or_raise(product_id)
        old_price = product.price
        product.change_price(new_price)
        self.products.save(product)
        logger.info(f"Price of {product.sku} changed from {old_price} to {new_price}")
        return product

    def restock(self, product_id: str, quantity: int) -> Product:
        with STOCK_LOCK:
            product = self.products.get_or_raise(product_id)
            product.add_stock(quantity)
            self.products.save(product)
        logger.info(f"Restocked {product.sku} with {quantity} units (now {product.stock})")
        return product

    def deactivate(self, product_id: str) -> Product:
        product = self.products.get_or_raise(product_id)
        product.deactivate()
        self.products.save(product)
        logger.info(f"Deactivated product {product.sku}")
        return product

    def activate(self, product_id: str) -> Product:
        product = self.products.get_or_raise(product_id)
        product.activate()
        self.products.save(product)
        return product

    def delete_product(self, product_id: str) -> bool:
        deleted = self.products.delete(product_id)
        if deleted:
            logger.info(f"Deleted product {product_id}")
        return deleted

    def low_stock_report(self, threshold: Optional[int] = None) -> List[Product]:
        """
        Active products at or below their stock threshold

        Args:
            threshold: Overrides the service default, which overrides each product's min_stock
        """
        effective = threshold if threshold is not None else self.low_stock_threshold
        return self.products.find_low_stock(effective)
