"""
Unit tests for CatalogService

Author: TM3
Date: 2025-10-17
"""
from decimal import Decimal

import pytest

from storefront.domain.exceptions import DuplicateEntityError, EntityNotFoundError, InvalidQuantityError
from storefront.domain.money import Money
from storefront.domain.product import Product, ProductCreate, ProductUpdate
from storefront.services.catalog_service import CatalogService


def usd(amount) -> Money:
    return Money(amount=Decimal(str(amount)), currency="USD")


class TestCatalogService:

    def test_create_product(self, catalog_service, product_repo):
        product = catalog_service.create_product(
            ProductCreate(sku="tea-001", name="Green Tea", price=usd("8.50"), stock=10)
        )

        assert product.sku == "TEA-001"
        assert product_repo.get(product.id) == product

    def test_create_duplicate_sku_raises(self, catalog_service, make_product):
        make_product(sku="TEA-001")

        with pytest.raises(DuplicateEntityError):
            catalog_service.create_product(ProductCreate(sku="TEA-001", name="Copy", price=usd(1)))

    def test_get_missing_product_raises(self, catalog_service):
        with pytest.raises(EntityNotFoundError):
            catalog_service.get_product("missing")

    def test_list_without_filters_pages(self, catalog_service, make_product):
        for sku in ["A", "B", "C"]:
            make_product(sku=sku)

        page, total = catalog_service.list_products(limit=2, offset=1)

        assert total == 3
        assert [p.sku for p in page] == ["B", "C"]

    def test_list_with_filters(self, catalog_service, make_product):
        make_product(sku="A", category="tea")
        make_product(sku="B", category="tea", is_active=False)
        make_product(sku="C", category="mugs")

        tea, tea_total = catalog_service.list_products(category="tea", active=True)
        inactive, inactive_total = catalog_service.list_products(active=False)
        by_sku, _ = catalog_service.list_products(sku="c")

        assert [p.sku for p in tea] == ["A"] and tea_total == 1
        assert [p.sku for p in inactive] == ["B"] and inactive_total == 1
        assert [p.sku for p in by_sku] == ["C"]

    def test_update_product_only_touches_given_fields(self, catalog_service, make_product, product_repo):
        product = make_product(name="Green Tea", category="tea")

        catalog_service.update_product(product.id, ProductUpdate(name="Sencha"))

        stored = product_repo.get(product.id)
        assert stored.name == "Sencha"
        assert stored.category == "tea"

    def test_replace_product_rejects_sku_of_another_product(self, catalog_service, make_product):
        make_product(sku="TEA-001")
        other = Product(sku="TEA-001", name="Other", price=usd(1))

        with pytest.raises(DuplicateEntityError):
            catalog_service.replace_product(other)

    def test_replace_product_upserts(self, catalog_service, make_product, product_repo):
        product = make_product(stock=3)
        product.stock = 9

        catalog_service.replace_product(product)

        assert product_repo.get(product.id).stock == 9

    def test_change_price_and_restock(self, catalog_service, make_product, product_repo):
        product = make_product(price="10.00", stock=1)

        catalog_service.change_price(product.id, usd("11.25"))
        catalog_service.restock(product.id, 4)

        stored = product_repo.get(product.id)
        assert stored.price == usd("11.25")
        assert stored.stock == 5

    def test_restock_rejects_non_positive_quantity(self, catalog_service, make_product):
        product = make_product()
        with pytest.raises(InvalidQuantityError):
            catalog_service.restock(product.id, 0)

    def test_deactivate_and_activate(self, catalog_service, make_product, product_repo):
        product = make_product()

        catalog_service.deactivate(product.id)
        assert product_repo.get(product.id).is_active is False

        catalog_service.activate(product.id)
        assert product_repo.get(product.id).is_active is True

    def test_delete_product(self, catalog_service, make_product):
        product = make_product()
        assert catalog_service.delete_product(product.id) is True
        assert catalog_service.delete_product(product.id) is False

    def test_low_stock_report_threshold_precedence(self, product_repo, make_product):
        make_product(sku="A", stock=3, min_stock=1)
        make_product(sku="B", stock=8, min_stock=10)

        assert [p.sku for p in CatalogService(product_repo).low_stock_report()] == ["B"]
        assert [p.sku for p in CatalogService(product_repo, low_stock_threshold=5).low_stock_report()] == ["A"]
        assert [p.sku for p in CatalogService(product_repo, low_stock_threshold=5).low_stock_report(10)] == ["A", "B"]
