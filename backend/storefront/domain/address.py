"""
Address Value Object
"""
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Address(BaseModel):
    """
    Postal address

    Fields:
        street: Street and number
        city: City
        postal_code: Postal / ZIP code
        country: ISO 3166-1 alpha-2 country code (upper-cased)
        state: State, region or province (optional)
    """

    street: str = Field(..., min_length=1, max_length=200)
    city: str = Field(..., min_length=1, max_length=100)
    postal_code: str = Field(..., min_length=1, max_length=20)
    country: str = Field(..., min_length=2, max_length=2)
    state: Optional[str] = Field(None, max_length=100)

    model_config = ConfigDict(frozen=True)

    @field_validator("street", "city", "postal_code", "state", mode="before")
    @classmethod
    def _strip(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip()
        return value

    @field_validator("state")
    @classmethod
    def _empty_state_is_none(cls, value: Optional[str]) -> Optional[str]:
        return value or None

    @field_validator("country", mode="before")
    @classmethod
    def _normalize_country(cls, value: Any) -> Any:
        if isinstance(value, str):
            value = value.strip().upper()
            if not value.isalpha():
                raise ValueError(f"Invalid country code: {value!r}")
        return value

    def format(self) -> str:
        """Multi-line mailing label"""
        locality = f"{self.city}, {self.state}" if self.state else self.city
        return "\n".join([self.street, f"{locality} {self.postal_code}", self.country])
