"""
Unit tests for RestProductRepository

Uses httpx.MockTransport for protocol details and a TestClient for a
round trip through a real app.

Author: TM3
Date: 2025-10-17
"""
from datetime import datetime, timezone
from decimal import Decimal

import httpx
import pytest
from fastapi.testclient import TestClient

from storefront.domain.exceptions import DuplicateEntityError, RepositoryError
from storefront.domain.money import Money
from storefront.domain.product import Product
from storefront.main import create_app
from storefront.repositories import rest
from storefront.repositories.rest import RestProductRepository

NOW = datetime(2025, 10, 17, tzinfo=timezone.utc).isoformat()


def product_json(product_id="p-1", sku="TEA-001", stock=5):
    return {
        "id": product_id,
        "sku": sku,
        "name": "Green Tea",
        "description": None,
        "category": "tea",
        "price": {"amount": "8.50", "currency": "USD"},
        "stock": stock,
        "min_stock": 2,
        "is_active": True,
        "created_at": NOW,
        "updated_at": NOW,
        "is_in_stock": stock > 0,
        "is_low_stock": stock <= 2,
    }


def make_repo(handler) -> RestProductRepository:
    client = httpx.Client(base_url="http://catalog.test", transport=httpx.MockTransport(handler))
    return RestProductRepository(client=client)


class TestRestProductRepository:

    def test_requires_base_url_or_client(self):
        with pytest.raises(ValueError):
            RestProductRepository()

    def test_get(self):
        def handler(request):
            assert request.method == "GET"
            assert request.url.path == "/api/v1/products/p-1"
            return httpx.Response(200, json={"status": "success", "data": product_json()})

        product = make_repo(handler).get("p-1")

        assert product.sku == "TEA-001"
        assert product.price == Money(amount=Decimal("8.50"), currency="USD")

    def test_get_missing_returns_none(self):
        repo = make_repo(lambda request: httpx.Response(404, json={"status": "error"}))
        assert repo.get("p-404") is None

    def test_server_error_raises_repository_error(self):
        repo = make_repo(lambda request: httpx.Response(503, text="maintenance"))
        with pytest.raises(RepositoryError):
            repo.get("p-1")

    def test_transport_error_raises_repository_error(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(RepositoryError):
            make_repo(handler).find_all()

    def test_find_all_passes_paging(self):
        seen = {}

        def handler(request):
            seen.update(request.url.params)
            return httpx.Response(200, json={"status": "success", "total": 9, "data": [product_json()]})

        products, total = make_repo(handler).find_all(limit=1, offset=4)

        assert total == 9
        assert len(products) == 1
        assert seen == {"limit": "1", "offset": "4"}

    def test_listing_follows_pages(self, monkeypatch):
        monkeypatch.setattr(rest, "PAGE_SIZE", 2)
        catalog = [product_json(f"p-{i}", f"SKU-{i}") for i in range(3)]
        offsets = []

        def handler(request):
            offset = int(request.url.params["offset"])
            offsets.append(offset)
            assert request.url.params["active"] == "true"
            page = catalog[offset:offset + 2]
            return httpx.Response(200, json={"status": "success", "total": 3, "data": page})

        products = make_repo(handler).find_active()

        assert [p.id for p in products] == ["p-0", "p-1", "p-2"]
        assert offsets == [0, 2]

    def test_find_low_stock_sends_threshold(self):
        def handler(request):
            assert request.url.path == "/api/v1/products/low-stock"
            assert request.url.params["threshold"] == "3"
            return httpx.Response(200, json={"status": "success", "data": [product_json(stock=1)]})

        assert [p.stock for p in make_repo(handler).find_low_stock(3)] == [1]

    def test_save_puts_full_product(self):
        product = Product(sku="TEA-001", name="Green Tea", price=Money(amount=Decimal("8.5"), currency="USD"))
        sent = {}

        def handler(request):
            sent["method"] = request.method
            sent["path"] = request.url.path
            return httpx.Response(200, json={"status": "success", "data": product_json(product.id)})

        saved = make_repo(handler).save(product)

        assert sent == {"method": "PUT", "path": f"/api/v1/products/{product.id}"}
        assert saved.id == product.id

    def test_save_conflict_raises_duplicate(self):
        product = Product(sku="TEA-001", name="Green Tea", price=Money(amount=Decimal("8.5"), currency="USD"))
        repo = make_repo(lambda request: httpx.Response(409, json={"status": "error"}))

        with pytest.raises(DuplicateEntityError):
            repo.save(product)

    def test_delete(self):
        repo = make_repo(lambda request: httpx.Response(200, json={"status": "success", "data": {}}))
        assert repo.delete("p-1") is True

        repo = make_repo(lambda request: httpx.Response(404, json={"status": "error"}))
        assert repo.delete("p-1") is False


class TestRestRoundTrip:
    """RestProductRepository talking to a real app backed by memory repositories"""

    @pytest.fixture
    def remote(self, settings, repositories):
        app = create_app(settings=settings, repositories=repositories)
        with TestClient(app) as client:
            yield RestProductRepository(client=client)

    def test_save_then_read_back(self, remote, product_repo):
        product = Product(sku="tea-rt", name="Round Trip Tea",
                          price=Money(amount=Decimal("3.20"), currency="USD"), stock=4, min_stock=5)

        remote.save(product)

        assert product_repo.get(product.id).sku == "TEA-RT"
        assert remote.find_by_sku("TEA-RT") == product
        assert remote.count() == 1
        assert [p.id for p in remote.find_low_stock()] == [product.id]

    def test_duplicate_sku_over_http(self, remote, make_product):
        make_product(sku="TEA-001")
        clash = Product(sku="TEA-001", name="Clash", price=Money(amount=Decimal("1"), currency="USD"))

        with pytest.raises(DuplicateEntityError):
            remote.save(clash)

    def test_delete_over_http(self, remote, make_product):
        product = make_product()

        assert remote.delete(product.id) is True
        assert remote.get(product.id) is None
        assert remote.delete(product.id) is False
