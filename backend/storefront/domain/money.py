"""
Money Value Object

Immutable amount + currency pair. All arithmetic stays in Decimal and is
only defined between values of the same currency.

Author: TM3
Date: 2025-10-17
"""
import re
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Iterable

from pydantic import BaseModel, ConfigDict, Field, field_validator

from storefront.domain.exceptions import CurrencyMismatchError, NegativeAmountError

CENTS = Decimal("0.01")
CURRENCY_PATTERN = re.compile(r"^[A-Z]{3}$")


def normalize_currency(value: Any) -> str:
    """Upper-case and validate an ISO-4217 style currency code"""
    if not isinstance(value, str):
        raise ValueError("Currency must be a string")
    code = value.strip().upper()
    if not CURRENCY_PATTERN.match(code):
        raise ValueError(f"Invalid currency code: {value!r}")
    return code


class Money(BaseModel):
    """
    Money value object

    Fields:
        amount: Non-negative amount, quantized to cents (ROUND_HALF_UP)
        currency: Three-letter currency code (USD, EUR, CLP, ...)
    """

    amount: Decimal = Field(..., description="Amount, quantized to cents")
    currency: str = Field(..., description="ISO-4217 currency code")

    model_config = ConfigDict(frozen=True)

    @field_validator("amount", mode="before")
    @classmethod
    def _coerce_amount(cls, value: Any) -> Any:
        # Floats go through str() so 0.1 becomes Decimal("0.1"), not its binary expansion
        if isinstance(value, bool):
            raise ValueError("Amount must be a number")
        if isinstance(value, float):
            return str(value)
        return value

    @field_validator("amount")
    @classmethod
    def _validate_amount(cls, value: Decimal) -> Decimal:
        if not value.is_finite():
            raise ValueError("Amount must be a finite number")
        if value < 0:
            raise ValueError("Amount cannot be negative")
        return value.quantize(CENTS, rounding=ROUND_HALF_UP)

    @field_validator("currency", mode="before")
    @classmethod
    def _validate_currency(cls, value: Any) -> str:
        return normalize_currency(value)

    @classmethod
    def zero(cls, currency: str) -> "Money":
        return cls(amount=Decimal("0"), currency=currency)

    @classmethod
    def sum(cls, values: Iterable["Money"], currency: str) -> "Money":
        """Add up values of one currency; an empty iterable gives zero"""
        total = cls.zero(currency)
        for value in values:
            total = total.add(value)
        return total

    def _check_currency(self, other: "Money") -> None:
        if not isinstance(other, Money):
            raise TypeError(f"Expected Money, got {type(other).__name__}")
        if other.currency != self.currency:
            raise CurrencyMismatchError(self.currency, other.currency)

    def add(self, other: "Money") -> "Money":
        self._check_currency(other)
        return Money(amount=self.amount + other.amount, currency=self.currency)

    def subtract(self, other: "Money") -> "Money":
        self._check_currency(other)
        result = self.amount - other.amount
        if result < 0:
            raise NegativeAmountError(
                f"Cannot subtract {other} from {self}",
                {"minuend": str(self), "subtrahend": str(other)},
            )
        return Money(amount=result, currency=self.currency)

    def multiply(self, factor: int) -> "Money":
        if isinstance(factor, bool) or not isinstance(factor, int):
            raise TypeError("Money can only be multiplied by an integer")
        if factor < 0:
            raise NegativeAmountError(f"Cannot multiply {self} by negative factor {factor}")
        return Money(amount=self.amount * factor, currency=self.currency)

    @property
    def is_zero(self) -> bool:
        return self.amount == 0

    def to_dict(self) -> dict:
        """JSON-friendly representation; the amount is kept as a string"""
        return {"amount": str(self.amount), "currency": self.currency}

    def __add__(self, other: "Money") -> "Money":
        return self.add(other)

    def __sub__(self, other: "Money") -> "Money":
        return self.subtract(other)

    def __mul__(self, factor: int) -> "Money":
        return self.multiply(factor)

    __rmul__ = __mul__

    def __lt__(self, other: "Money") -> bool:
        self._check_currency(other)
        return self.amount < other.amount

    def __le__(self, other: "Money") -> bool:
        self._check_currency(other)
        return self.amount <= other.amount

    def __gt__(self, other: "Money") -> bool:
        self._check_currency(other)
        return self.amount > other.amount

    def __ge__(self, other: "Money") -> bool:
        self._check_currency(other)
        return self.amount >= other.amount

    def __str__(self) -> str:
        return f"{self.currency} {self.amount}"
