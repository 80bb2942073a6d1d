"""
REST Product Repository

ProductRepository backed by a remote Storefront API
(/api/v1/products). Lets one deployment read and write the catalog
owned by another.

Author: TM3
Date: 2025-10-17
"""
import logging
from typing import Any, Dict, List, Optional, Tuple

import httpx

from storefront.domain.exceptions import DuplicateEntityError, RepositoryError
from storefront.domain.product import Product
from storefront.repositories.base import ProductRepository

logger = logging.getLogger(__name__)

PRODUCTS_PATH = "/api/v1/products"
# Collection routes are mounted with a trailing slash
LIST_PATH = f"{PRODUCTS_PATH}/"
PAGE_SIZE = 200


class RestProductRepository(ProductRepository):
    """
    Product repository over HTTP

    Handles:
    - 404 on lookups -> None
    - 409 on save -> DuplicateEntityError
    - transport errors and 5xx -> RepositoryError
    """

    def __init__(self, base_url: Optional[str] = None, client: Optional[httpx.Client] = None,
                 timeout: float = 10.0):
        """
        Initialize the repository

        Args:
            base_url: Root URL of the remote API (e.g. 'https://catalog.example.com')
            client: Preconfigured httpx.Client (overrides base_url, used in tests)
            timeout: Request timeout in seconds when building our own client
        """
        if client is None:
            if not base_url:
                raise ValueError("RestProductRepository needs either base_url or client")
            client = httpx.Client(base_url=base_url, timeout=timeout)
        self.client = client

    def close(self) -> None:
        self.client.close()

    def _request(self, method: str, path: str, **kwargs) -> httpx.Response:
        try:
            response = self.client.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            logger.error(f"{method} {path} failed: {e}")
            raise RepositoryError(f"Catalog API unreachable: {e}", {"method": method, "path": path}) from e

        if response.status_code >= 500:
            raise RepositoryError(
                f"Catalog API error {response.status_code}",
                {"method": method, "path": path, "status_code": response.status_code},
            )
        return response

    def _expect_ok(self, response: httpx.Response) -> Dict[str, Any]:
        if response.status_code >= 400:
            raise RepositoryError(
                f"Catalog API rejected request with {response.status_code}: {response.text}",
                {"status_code": response.status_code},
            )
        return response.json()

    def _list(self, path: str = LIST_PATH, **params) -> List[Product]:
        """Fetch every page of a product listing"""
        products: List[Product] = []
        offset = 0

        while True:
            response = self._request("GET", path, params={**params, "limit": PAGE_SIZE, "offset": offset})
            body = self._expect_ok(response)
            page = [Product.model_validate(item) for item in body['data']]
            products.extend(page)

            offset += len(page)
            if not page or offset >= body.get('total', offset):
                return products

    def get(self, entity_id: str) -> Optional[Product]:
        response = self._request("GET", f"{PRODUCTS_PATH}/{entity_id}")
        if response.status_code == 404:
            return None
        return Product.model_validate(self._expect_ok(response)['data'])

    def find_all(self, limit: int = 50, offset: int = 0) -> Tuple[List[Product], int]:
        response = self._request("GET", LIST_PATH, params={"limit": limit, "offset": offset})
        body = self._expect_ok(response)
        return [Product.model_validate(item) for item in body['data']], body['total']

    def find_by_sku(self, sku: str) -> Optional[Product]:
        products = self._list(sku=sku)
        return products[0] if products else None

    def find_active(self) -> List[Product]:
        return self._list(active="true")

    def find_by_category(self, category: str) -> List[Product]:
        return self._list(category=category)

    def find_low_stock(self, threshold: Optional[int] = None) -> List[Product]:
        params = {} if threshold is None else {"threshold": threshold}
        response = self._request("GET", f"{PRODUCTS_PATH}/low-stock", params=params)
        return [Product.model_validate(item) for item in self._expect_ok(response)['data']]

    def save(self, entity: Product) -> Product:
        response = self._request("PUT", f"{PRODUCTS_PATH}/{entity.id}", json=entity.model_dump(mode="json"))
        if response.status_code == 409:
            raise DuplicateEntityError(self.entity_name, "sku", entity.sku)
        return Product.model_validate(self._expect_ok(response)['data'])

    def delete(self, entity_id: str) -> bool:
        response = self._request("DELETE", f"{PRODUCTS_PATH}/{entity_id}")
        if response.status_code == 404:
            return False
        self._expect_ok(response)
        return True

    def count(self) -> int:
        _, total = self.find_all(limit=1, offset=0)
        return total
