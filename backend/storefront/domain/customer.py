"""
Customer Domain Model

Author: TM3
Date: 2025-10-17
"""
from typing import Any, Optional, Union

from pydantic import BaseModel, Field, field_validator

from storefront.domain.address import Address
from storefront.domain.email import Email
from storefront.domain.entity import Entity


class Customer(Entity):
    """
    Customer domain model

    Fields:
        id: Customer ID (UUID string)
        name: Full name
        email: Contact email, unique across customers
        shipping_address: Default shipping address (optional)
    """

    name: str = Field(..., description="Customer name", min_length=1, max_length=200)
    email: Email = Field(..., description="Customer email")
    shipping_address: Optional[Address] = Field(None, description="Default shipping address")

    @field_validator("name", mode="before")
    @classmethod
    def _strip_name(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip()
        return value

    def rename(self, name: str) -> None:
        self.name = name
        self.touch()

    def change_email(self, email: Union[Email, str]) -> None:
        self.email = email if isinstance(email, Email) else Email(value=email)
        self.touch()

    def change_address(self, address: Optional[Address]) -> None:
        self.shipping_address = address
        self.touch()

    def to_dict(self) -> dict:
        return self.model_dump(mode="json")


class CustomerCreate(BaseModel):
    """Schema for registering a new customer"""
    name: str
    email: str
    shipping_address: Optional[Address] = None
