"""
Shopping Cart Domain Model

A cart collects products before checkout. Checking out produces a new
pending Order carrying the cart's lines; stock is not reserved until the
order is placed.

Author: TM3
Date: 2025-10-17
"""
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from storefront.domain.address import Address
from storefront.domain.entity import Entity
from storefront.domain.exceptions import (
    CurrencyMismatchError,
    EmptyCartError,
    InsufficientStockError,
    InvalidQuantityError,
    ItemNotFoundError,
    ProductUnavailableError,
)
from storefront.domain.money import Money, normalize_currency
from storefront.domain.order import Order, OrderItem
from storefront.domain.product import Product, require_positive_quantity


class CartLine(BaseModel):
    """One product in a cart"""

    product_id: str = Field(..., min_length=1)
    product_name: str = Field(..., min_length=1)
    unit_price: Money
    quantity: int = Field(..., ge=1)

    model_config = ConfigDict(frozen=True)

    @property
    def subtotal(self) -> Money:
        return self.unit_price * self.quantity

    def to_order_item(self) -> OrderItem:
        return OrderItem(
            product_id=self.product_id,
            product_name=self.product_name,
            unit_price=self.unit_price,
            quantity=self.quantity,
        )

    def to_dict(self) -> dict:
        data = self.model_dump(mode="json")
        data['subtotal'] = self.subtotal.to_dict()
        return data


class ShoppingCart(Entity):
    """
    Shopping cart domain model

    Fields:
        id: Cart ID (UUID string)
        customer_id: Owner of the cart
        currency: Currency all lines are priced in
        lines: Cart lines in insertion order, at most one per product
    """

    customer_id: str = Field(..., min_length=1)
    currency: str
    lines: List[CartLine] = Field(default_factory=list)

    @field_validator("currency", mode="before")
    @classmethod
    def _validate_currency(cls, value: Any) -> str:
        return normalize_currency(value)

    @model_validator(mode="after")
    def _check_lines(self) -> "ShoppingCart":
        product_ids = [line.product_id for line in self.lines]
        if len(product_ids) != len(set(product_ids)):
            raise ValueError("A cart holds at most one line per product")
        for line in self.lines:
            if line.unit_price.currency != self.currency:
                raise ValueError(f"Line {line.product_id} is not priced in {self.currency}")
        return self

    @property
    def total(self) -> Money:
        return Money.sum((line.subtotal for line in self.lines), self.currency)

    @property
    def item_count(self) -> int:
        """Total units across all lines"""
        return sum(line.quantity for line in self.lines)

    @property
    def is_empty(self) -> bool:
        return not self.lines

    def find_line(self, product_id: str) -> Optional[CartLine]:
        for line in self.lines:
            if line.product_id == product_id:
                return line
        return None

    def add_product(self, product: Product, quantity: int = 1) -> CartLine:
        """
        Put a product in the cart, merging with an existing line

        The line is re-priced at the product's current price.

        Raises:
            InvalidQuantityError: quantity is not a positive integer
            ProductUnavailableError: product is inactive
            CurrencyMismatchError: product is priced in another currency
            InsufficientStockError: cart would hold more units than are in stock
        """
        require_positive_quantity(quantity)
        if not product.is_active:
            raise ProductUnavailableError(product.id)
        if product.price.currency != self.currency:
            raise CurrencyMismatchError(self.currency, product.price.currency)

        existing = self.find_line(product.id)
        new_quantity = quantity + (existing.quantity if existing else 0)
        if new_quantity > product.stock:
            raise InsufficientStockError(product.id, new_quantity, product.stock)

        line = CartLine(
            product_id=product.id,
            product_name=product.name,
            unit_price=product.price,
            quantity=new_quantity,
        )
        if existing is not None:
            self.lines = [line if l.product_id == product.id else l for l in self.lines]
        else:
            self.lines = self.lines + [line]

        self.touch()
        return line

    def update_quantity(self, product_id: str, quantity: int) -> Optional[CartLine]:
        """Set the quantity of a line; 0 removes it"""
        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 0:
            raise InvalidQuantityError(quantity, "Quantity must be zero or a positive integer")

        existing = self.find_line(product_id)
        if existing is None:
            raise ItemNotFoundError(f"cart {self.id}", product_id)

        if quantity == 0:
            self.remove_product(product_id)
            return None

        line = CartLine(
            product_id=existing.product_id,
            product_name=existing.product_name,
            unit_price=existing.unit_price,
            quantity=quantity,
        )
        self.lines = [line if l.product_id == product_id else l for l in self.lines]
        self.touch()
        return line

    def remove_product(self, product_id: str) -> CartLine:
        existing = self.find_line(product_id)
        if existing is None:
            raise ItemNotFoundError(f"cart {self.id}", product_id)
        self.lines = [l for l in self.lines if l.product_id != product_id]
        self.touch()
        return existing

    def clear(self) -> None:
        self.lines = []
        self.touch()

    def checkout(self, shipping_address: Optional[Address] = None) -> Order:
        """
        Build a pending order from the cart contents

        The cart itself is left untouched.

        Raises:
            EmptyCartError: there is nothing to check out
        """
        if self.is_empty:
            raise EmptyCartError(f"Cart {self.id} is empty", {"cart_id": self.id})

        return Order(
            customer_id=self.customer_id,
            currency=self.currency,
            items=[line.to_order_item() for line in self.lines],
            shipping_address=shipping_address,
        )

    def to_dict(self) -> dict:
        data = self.model_dump(mode="json")
        data['lines'] = [line.to_dict() for line in self.lines]
        data['total'] = self.total.to_dict()
        data['item_count'] = self.item_count
        data['is_empty'] = self.is_empty
        return data


class CartCreate(BaseModel):
    """Schema for opening a cart"""
    customer_id: str


class CartItemAdd(BaseModel):
    """Schema for adding a product to a cart"""
    product_id: str
    quantity: int = Field(1, ge=1)


class CartItemUpdate(BaseModel):
    """Schema for changing a cart line quantity (0 removes the line)"""
    quantity: int = Field(..., ge=0)
