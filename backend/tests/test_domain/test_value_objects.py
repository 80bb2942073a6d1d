"""
Unit tests for the Email and Address value objects and the Entity base

Author: TM3
Date: 2025-10-17
"""
import pytest
from pydantic import ValidationError

from storefront.domain.address import Address
from storefront.domain.customer import Customer
from storefront.domain.email import Email


class TestEmail:

    def test_email_is_normalized(self):
        email = Email(value="  Ada.Lovelace@Example.COM ")
        assert email.value == "ada.lovelace@example.com"
        assert email.local_part == "ada.lovelace"
        assert email.domain == "example.com"
        assert str(email) == "ada.lovelace@example.com"

    @pytest.mark.parametrize("value", [
        "",
        "no-at-sign",
        "two@@example.com",
        "dots..here@example.com",
        "missing-tld@example",
        "a" * 250 + "@example.com",
    ])
    def test_invalid_email_rejected(self, value):
        with pytest.raises(ValidationError):
            Email(value=value)

    def test_equal_addresses_are_equal(self):
        assert Email(value="ADA@example.com") == Email(value="ada@example.com")

    def test_serializes_to_plain_string(self):
        customer = Customer(name="Ada", email="ada@example.com")
        assert customer.model_dump()["email"] == "ada@example.com"


class TestAddress:

    def test_address_is_normalized(self):
        address = Address(street=" 1 Main St ", city="Springfield", postal_code="12345", country="us", state="")
        assert address.street == "1 Main St"
        assert address.country == "US"
        assert address.state is None

    @pytest.mark.parametrize("country", ["USA", "U", "U1"])
    def test_invalid_country_rejected(self, country):
        with pytest.raises(ValidationError):
            Address(street="1 Main St", city="Springfield", postal_code="12345", country=country)

    def test_missing_street_rejected(self):
        with pytest.raises(ValidationError):
            Address(street="  ", city="Springfield", postal_code="12345", country="US")

    def test_format(self):
        address = Address(street="1 Main St", city="Springfield", postal_code="12345", country="US", state="IL")
        assert address.format() == "1 Main St\nSpringfield, IL 12345\nUS"


class TestEntityIdentity:

    def test_entities_get_distinct_ids(self):
        first = Customer(name="Ada", email="ada@example.com")
        second = Customer(name="Ada", email="ada@example.com")
        assert first.id != second.id
        assert first != second

    def test_same_id_means_same_entity(self):
        first = Customer(name="Ada", email="ada@example.com")
        renamed = first.model_copy(deep=True)
        renamed.rename("Ada King")

        assert renamed == first
        assert hash(renamed) == hash(first)
        assert len({first, renamed}) == 1

    def test_touch_moves_updated_at(self):
        customer = Customer(name="Ada", email="ada@example.com")
        before = customer.updated_at
        customer.touch()
        assert customer.updated_at >= before
        assert customer.created_at <= customer.updated_at
