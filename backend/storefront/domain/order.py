"""
Order Domain Models

Represents an order, its line items and the order lifecycle:

    pending ──> confirmed ──> shipped ──> delivered
       │            │
       └────────────┴──> cancelled

delivered and cancelled are final.

Author: TM3
Date: 2025-10-17
"""
from datetime import datetime
from enum import Enum
from typing import Any, Dict, FrozenSet, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from storefront.domain.address import Address
from storefront.domain.entity import Entity, utcnow
from storefront.domain.exceptions import (
    CurrencyMismatchError,
    EmptyOrderError,
    InvalidOrderTransitionError,
    ItemNotFoundError,
    OrderNotEditableError,
)
from storefront.domain.money import Money, normalize_currency
from storefront.domain.product import Product, require_positive_quantity


class OrderStatus(str, Enum):
    """Order lifecycle states"""
    PENDING = "pending"
    CONFIRMED = "confirmed"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


ALLOWED_TRANSITIONS: Dict[OrderStatus, FrozenSet[OrderStatus]] = {
    OrderStatus.PENDING: frozenset({OrderStatus.CONFIRMED, OrderStatus.CANCELLED}),
    OrderStatus.CONFIRMED: frozenset({OrderStatus.SHIPPED, OrderStatus.CANCELLED}),
    OrderStatus.SHIPPED: frozenset({OrderStatus.DELIVERED}),
    OrderStatus.DELIVERED: frozenset(),
    OrderStatus.CANCELLED: frozenset(),
}

# Timestamp field stamped when an order enters each status
STATUS_TIMESTAMPS: Dict[OrderStatus, str] = {
    OrderStatus.CONFIRMED: "confirmed_at",
    OrderStatus.SHIPPED: "shipped_at",
    OrderStatus.DELIVERED: "delivered_at",
    OrderStatus.CANCELLED: "cancelled_at",
}


class OrderItem(BaseModel):
    """
    Order line - a product snapshot at the time it was ordered

    Fields:
        product_id: Reference to the catalog product
        product_name: Product name at order time
        unit_price: Price per unit at order time
        quantity: Number of units ordered
    """

    product_id: str = Field(..., description="Product ID", min_length=1)
    product_name: str = Field(..., description="Product name at order time", min_length=1)
    unit_price: Money = Field(..., description="Price per unit")
    quantity: int = Field(..., description="Quantity ordered", ge=1)

    model_config = ConfigDict(frozen=True)

    @property
    def subtotal(self) -> Money:
        return self.unit_price * self.quantity

    def with_quantity(self, quantity: int) -> "OrderItem":
        return OrderItem(
            product_id=self.product_id,
            product_name=self.product_name,
            unit_price=self.unit_price,
            quantity=quantity,
        )

    def to_dict(self) -> dict:
        data = self.model_dump(mode="json")
        data['subtotal'] = self.subtotal.to_dict()
        return data


class Order(Entity):
    """
    Order domain model - represents a customer order

    Fields:
        id: Order ID (UUID string)
        customer_id: Reference to customer
        currency: Currency every line must be priced in
        items: Order lines, at most one per product
        status: Current lifecycle status
        shipping_address: Where the order ships to (optional)
        cancellation_reason: Why the order was cancelled (optional)
        confirmed_at / shipped_at / delivered_at / cancelled_at:
            When the order entered each status
    """

    customer_id: str = Field(..., description="Customer ID", min_length=1)
    currency: str = Field(..., description="Order currency")
    items: List[OrderItem] = Field(default_factory=list, description="Order items")
    status: OrderStatus = Field(OrderStatus.PENDING, description="Order status")
    shipping_address: Optional[Address] = Field(None, description="Shipping address")
    cancellation_reason: Optional[str] = Field(None, description="Cancellation reason")

    confirmed_at: Optional[datetime] = None
    shipped_at: Optional[datetime] = None
    delivered_at: Optional[datetime] = None
    cancelled_at: Optional[datetime] = None

    @field_validator("currency", mode="before")
    @classmethod
    def _validate_currency(cls, value: Any) -> str:
        return normalize_currency(value)

    @model_validator(mode="after")
    def _check_items(self) -> "Order":
        seen = set()
        for item in self.items:
            if item.unit_price.currency != self.currency:
                raise ValueError(
                    f"Item {item.product_id} is priced in {item.unit_price.currency}, order is in {self.currency}"
                )
            if item.product_id in seen:
                raise ValueError(f"Duplicate line for product {item.product_id}")
            seen.add(item.product_id)
        return self

    # Computed properties
    @property
    def total(self) -> Money:
        return Money.sum((item.subtotal for item in self.items), self.currency)

    @property
    def item_count(self) -> int:
        """Number of distinct lines"""
        return len(self.items)

    @property
    def total_quantity(self) -> int:
        """Total quantity of all items"""
        return sum(item.quantity for item in self.items)

    @property
    def is_editable(self) -> bool:
        return self.status == OrderStatus.PENDING

    @property
    def is_final(self) -> bool:
        return not ALLOWED_TRANSITIONS[self.status]

    def find_item(self, product_id: str) -> Optional[OrderItem]:
        for item in self.items:
            if item.product_id == product_id:
                return item
        return None

    # Line editing (pending only)
    def _ensure_editable(self) -> None:
        if not self.is_editable:
            raise OrderNotEditableError(self.id, self.status)

    def add_item(self, product_id: str, product_name: str, unit_price: Money, quantity: int) -> OrderItem:
        """
        Add a line, or grow the existing line for the same product

        An existing line keeps its original unit price.

        Raises:
            OrderNotEditableError: order is no longer pending
            InvalidQuantityError: quantity is not a positive integer
            CurrencyMismatchError: unit_price is not in the order currency
        """
        self._ensure_editable()
        require_positive_quantity(quantity)
        if unit_price.currency != self.currency:
            raise CurrencyMismatchError(self.currency, unit_price.currency)

        existing = self.find_item(product_id)
        if existing is not None:
            item = existing.with_quantity(existing.quantity + quantity)
            self.items = [item if line.product_id == product_id else line for line in self.items]
        else:
            item = OrderItem(
                product_id=product_id,
                product_name=product_name,
                unit_price=unit_price,
                quantity=quantity,
            )
            self.items = self.items + [item]

        self.touch()
        return item

    def add_product(self, product: Product, quantity: int = 1) -> OrderItem:
        return self.add_item(product.id, product.name, product.price, quantity)

    def remove_item(self, product_id: str) -> OrderItem:
        self._ensure_editable()
        item = self.find_item(product_id)
        if item is None:
            raise ItemNotFoundError(f"order {self.id}", product_id)
        self.items = [line for line in self.items if line.product_id != product_id]
        self.touch()
        return item

    # Lifecycle
    def can_transition_to(self, status: OrderStatus) -> bool:
        return OrderStatus(status) in ALLOWED_TRANSITIONS[self.status]

    def _transition(self, target: OrderStatus) -> None:
        if not self.can_transition_to(target):
            raise InvalidOrderTransitionError(self.id, self.status, target)
        now = utcnow()
        self.status = target
        setattr(self, STATUS_TIMESTAMPS[target], now)
        self.updated_at = now

    def confirm(self) -> None:
        if not self.items:
            raise EmptyOrderError(f"Order {self.id} has no items", {"order_id": self.id})
        self._transition(OrderStatus.CONFIRMED)

    def ship(self) -> None:
        self._transition(OrderStatus.SHIPPED)

    def deliver(self) -> None:
        self._transition(OrderStatus.DELIVERED)

    def cancel(self, reason: Optional[str] = None) -> None:
        self._transition(OrderStatus.CANCELLED)
        self.cancellation_reason = reason

    def transition_to(self, status: OrderStatus, reason: Optional[str] = None) -> None:
        """Dispatch to the lifecycle method for a target status"""
        status = OrderStatus(status)
        if status == OrderStatus.CONFIRMED:
            self.confirm()
        elif status == OrderStatus.SHIPPED:
            self.ship()
        elif status == OrderStatus.DELIVERED:
            self.deliver()
        elif status == OrderStatus.CANCELLED:
            self.cancel(reason)
        else:
            raise InvalidOrderTransitionError(self.id, self.status, status)

    def to_dict(self) -> dict:
        """
        Convert to dictionary with computed fields

        Returns dict with all fields plus computed properties
        """
        data = self.model_dump(mode="json")

        data['items'] = [item.to_dict() for item in self.items]
        data['total'] = self.total.to_dict()
        data['item_count'] = self.item_count
        data['total_quantity'] = self.total_quantity
        data['is_final'] = self.is_final

        return data


class OrderLine(BaseModel):
    """Requested product and quantity when placing an order"""
    product_id: str
    quantity: int = Field(..., ge=1)

    def as_tuple(self) -> Tuple[str, int]:
        return self.product_id, self.quantity


class OrderCreate(BaseModel):
    """Schema for placing a new order"""
    customer_id: str
    items: List[OrderLine] = Field(..., min_length=1)
    shipping_address: Optional[Address] = None


class StatusChange(BaseModel):
    """Schema for cancelling an order"""
    reason: Optional[str] = None
