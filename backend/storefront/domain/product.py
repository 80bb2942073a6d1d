"""
Product Domain Model

Represents a sellable product in the catalog.
This is the single source of truth for product data structure.

Author: TM3
Date: 2025-10-17
"""
import re
from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator

from storefront.domain.entity import Entity
from storefront.domain.exceptions import InsufficientStockError, InvalidQuantityError
from storefront.domain.money import Money

SKU_PATTERN = re.compile(r"^[A-Z0-9_\-]+$")


def require_positive_quantity(quantity: Any) -> None:
    if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity <= 0:
        raise InvalidQuantityError(quantity)


class Product(Entity):
    """
    Product domain model - represents a product in our catalog

    Fields:
        id: Internal product ID (UUID string)
        sku: Stock Keeping Unit (unique, upper-cased)
        name: Product name
        description: Product description (optional)
        category: Product category (optional)
        price: Current sale price
        stock: Units on hand, never negative
        min_stock: Low stock alert threshold
        is_active: Whether the product can be sold
        created_at: When product was created
        updated_at: When product was last updated
    """

    sku: str = Field(..., description="Stock Keeping Unit", min_length=1, max_length=64)
    name: str = Field(..., description="Product name", min_length=1, max_length=200)
    description: Optional[str] = Field(None, description="Product description")
    category: Optional[str] = Field(None, description="Product category")
    price: Money = Field(..., description="Sale price")
    stock: int = Field(0, description="Units on hand", ge=0)
    min_stock: int = Field(0, description="Minimum stock threshold", ge=0)
    is_active: bool = Field(True, description="Whether product is active")

    @field_validator("sku", mode="before")
    @classmethod
    def _normalize_sku(cls, value: Any) -> Any:
        if isinstance(value, str):
            value = value.strip().upper()
            if value and not SKU_PATTERN.match(value):
                raise ValueError(f"SKU may only contain letters, digits, '-' and '_': {value!r}")
        return value

    @field_validator("name", mode="before")
    @classmethod
    def _strip_name(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip()
        return value

    # Computed properties
    @property
    def is_in_stock(self) -> bool:
        return self.stock > 0

    @property
    def is_low_stock(self) -> bool:
        """Check if product stock is at or below minimum threshold"""
        return self.stock <= self.min_stock

    def can_fulfill(self, quantity: int) -> bool:
        return self.is_active and 0 < quantity <= self.stock

    # Behaviour
    def change_price(self, new_price: Money) -> None:
        self.price = new_price
        self.touch()

    def add_stock(self, quantity: int) -> None:
        require_positive_quantity(quantity)
        self.stock = self.stock + quantity
        self.touch()

    def remove_stock(self, quantity: int) -> None:
        """
        Take units out of stock

        Raises:
            InvalidQuantityError: quantity is not a positive integer
            InsufficientStockError: quantity exceeds what is on hand
        """
        require_positive_quantity(quantity)
        if quantity > self.stock:
            raise InsufficientStockError(self.id, quantity, self.stock)
        self.stock = self.stock - quantity
        self.touch()

    def activate(self) -> None:
        self.is_active = True
        self.touch()

    def deactivate(self) -> None:
        self.is_active = False
        self.touch()

    def to_dict(self) -> dict:
        """
        Convert to dictionary with computed fields

        Returns dict with all fields plus computed properties
        """
        data = self.model_dump(mode="json")

        data['is_in_stock'] = self.is_in_stock
        data['is_low_stock'] = self.is_low_stock

        return data


class ProductCreate(BaseModel):
    """Schema for creating a new product"""
    sku: str
    name: str
    price: Money
    description: Optional[str] = None
    category: Optional[str] = None
    stock: int = Field(0, ge=0)
    min_stock: int = Field(0, ge=0)
    is_active: bool = True


class ProductUpdate(BaseModel):
    """Schema for updating descriptive fields of an existing product"""
    name: Optional[str] = None
    description: Optional[str] = None
    category: Optional[str] = None
    min_stock: Optional[int] = Field(None, ge=0)
