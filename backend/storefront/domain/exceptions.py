"""
Domain exceptions and error hierarchy

StorefrontError
├── DomainError           business rule violations
│   ├── CurrencyMismatchError
│   ├── NegativeAmountError
│   ├── InvalidQuantityError
│   ├── InsufficientStockError
│   ├── ProductUnavailableError
│   ├── InvalidOrderTransitionError
│   ├── OrderNotEditableError
│   ├── EmptyOrderError
│   ├── EmptyCartError
│   └── ItemNotFoundError
└── RepositoryError       data access failures
    ├── EntityNotFoundError
    └── DuplicateEntityError

Constructor validation of value objects and entities is left to pydantic,
so invalid input there surfaces as pydantic.ValidationError.
"""
from typing import Any, Dict, Optional


class StorefrontError(Exception):
    """Base exception for all storefront errors."""

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def __str__(self) -> str:
        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"{self.message} (Context: {context_str})"
        return self.message


class DomainError(StorefrontError):
    """A business rule was violated."""
    pass


class CurrencyMismatchError(DomainError):

    def __init__(self, expected: str, actual: str):
        super().__init__(
            f"Currency mismatch: expected {expected}, got {actual}",
            {"expected": expected, "actual": actual},
        )
        self.expected = expected
        self.actual = actual


class NegativeAmountError(DomainError):
    """Arithmetic would produce a negative amount of money."""
    pass


class InvalidQuantityError(DomainError):

    def __init__(self, quantity: Any, message: str = "Quantity must be a positive integer"):
        super().__init__(message, {"quantity": quantity})
        self.quantity = quantity


class InsufficientStockError(DomainError):

    def __init__(self, product_id: str, requested: int, available: int):
        super().__init__(
            f"Insufficient stock for product {product_id}: requested {requested}, available {available}",
            {"product_id": product_id, "requested": requested, "available": available},
        )
        self.product_id = product_id
        self.requested = requested
        self.available = available


class ProductUnavailableError(DomainError):

    def __init__(self, product_id: str):
        super().__init__(f"Product {product_id} is not available for sale", {"product_id": product_id})
        self.product_id = product_id


class InvalidOrderTransitionError(DomainError):
    """An order was asked to move to a status its current status does not allow."""

    def __init__(self, order_id: str, from_status: Any, to_status: Any):
        from_value = getattr(from_status, "value", from_status)
        to_value = getattr(to_status, "value", to_status)
        super().__init__(
            f"Cannot change order {order_id} from {from_value} to {to_value}",
            {"order_id": order_id, "from": from_value, "to": to_value},
        )
        self.order_id = order_id
        self.from_status = from_status
        self.to_status = to_status


class OrderNotEditableError(DomainError):

    def __init__(self, order_id: str, status: Any):
        status_value = getattr(status, "value", status)
        super().__init__(
            f"Order {order_id} can only be edited while pending (status: {status_value})",
            {"order_id": order_id, "status": status_value},
        )
        self.order_id = order_id
        self.status = status


class EmptyOrderError(DomainError):
    pass


class EmptyCartError(DomainError):
    pass


class ItemNotFoundError(DomainError):
    """No line for the given product in an order or cart."""

    def __init__(self, container_id: str, product_id: str):
        super().__init__(
            f"Product {product_id} is not in {container_id}",
            {"container_id": container_id, "product_id": product_id},
        )
        self.container_id = container_id
        self.product_id = product_id


class RepositoryError(StorefrontError):
    """Data access failed."""
    pass


class EntityNotFoundError(RepositoryError):

    def __init__(self, entity_name: str, entity_id: Any):
        super().__init__(f"{entity_name} {entity_id} not found", {"entity": entity_name, "id": entity_id})
        self.entity_name = entity_name
        self.entity_id = entity_id


class DuplicateEntityError(RepositoryError):

    def __init__(self, entity_name: str, field: str, value: Any):
        super().__init__(
            f"{entity_name} with {field}={value} already exists",
            {"entity": entity_name, "field": field, "value": value},
        )
        self.entity_name = entity_name
        self.field = field
        self.value = value
