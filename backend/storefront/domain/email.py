"""
Email Value Object
"""
import re
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_serializer, model_validator

MAX_EMAIL_LENGTH = 254
EMAIL_PATTERN = re.compile(r"^[a-z0-9._%+\-]+@[a-z0-9\-]+(\.[a-z0-9\-]+)*\.[a-z]{2,}$")


class Email(BaseModel):
    """
    Normalized email address

    Accepts either Email(value="...") or a bare string wherever an Email
    field is validated. Serializes back to the bare string.
    """

    value: str = Field(..., description="Lower-cased email address")

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="before")
    @classmethod
    def _from_string(cls, data: Any) -> Any:
        if isinstance(data, str):
            return {"value": data}
        return data

    @field_validator("value", mode="before")
    @classmethod
    def _normalize(cls, value: Any) -> str:
        if not isinstance(value, str):
            raise ValueError("Email must be a string")
        address = value.strip().lower()
        if not address:
            raise ValueError("Email cannot be empty")
        if len(address) > MAX_EMAIL_LENGTH:
            raise ValueError(f"Email cannot be longer than {MAX_EMAIL_LENGTH} characters")
        if ".." in address or not EMAIL_PATTERN.match(address):
            raise ValueError(f"Invalid email address: {value!r}")
        return address

    @model_serializer
    def _serialize(self) -> str:
        return self.value

    @property
    def local_part(self) -> str:
        return self.value.rsplit("@", 1)[0]

    @property
    def domain(self) -> str:
        return self.value.rsplit("@", 1)[1]

    def __str__(self) -> str:
        return self.value
