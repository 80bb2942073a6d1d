"""
PostgreSQL repositories - Data Access Layer

All SQL for the storefront tables is centralized here. Every method opens
its own connection, so a repository instance is cheap and stateless.
Schema: sql/schema.sql

Author: TM3
Date: 2025-10-17
"""
import logging
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

import psycopg2
import psycopg2.errors

from storefront.core.database import get_db_connection_dict
from storefront.domain.address import Address
from storefront.domain.cart import CartLine, ShoppingCart
from storefront.domain.customer import Customer
from storefront.domain.email import Email
from storefront.domain.exceptions import DuplicateEntityError, RepositoryError
from storefront.domain.money import Money
from storefront.domain.order import Order, OrderItem, OrderStatus
from storefront.domain.product import Product
from storefront.repositories.base import (
    CartRepository,
    CustomerRepository,
    OrderRepository,
    ProductRepository,
)

logger = logging.getLogger(__name__)

ADDRESS_COLUMNS = "address_street, address_city, address_postal_code, address_country, address_state"


def _address_from_row(row: Dict[str, Any]) -> Optional[Address]:
    if not row.get('address_street'):
        return None
    return Address(
        street=row['address_street'],
        city=row['address_city'],
        postal_code=row['address_postal_code'],
        country=row['address_country'],
        state=row.get('address_state'),
    )


def _address_params(address: Optional[Address]) -> Tuple:
    if address is None:
        return (None, None, None, None, None)
    return (address.street, address.city, address.postal_code, address.country, address.state)


class PostgresRepository:
    """
    Connection handling shared by the PostgreSQL repositories

    Reads wrap driver errors in RepositoryError; writes run in a single
    transaction that is rolled back on any error.
    """

    # entity_name comes from the repository interface mixed in alongside
    table = ""

    def __init__(self, database_url: Optional[str] = None):
        self.database_url = database_url

    def _connect(self):
        try:
            return get_db_connection_dict(self.database_url)
        except psycopg2.Error as e:
            logger.error(f"Could not connect to the database for {self.table}: {e}")
            raise RepositoryError(f"Database unavailable: {e}", {"table": self.table}) from e

    def _fetch_one(self, query: str, params: Sequence = ()) -> Optional[Dict[str, Any]]:
        conn = self._connect()
        cursor = conn.cursor()

        try:
            cursor.execute(query, params)
            return cursor.fetchone()
        except psycopg2.Error as e:
            raise RepositoryError(f"Error reading {self.table}: {e}") from e
        finally:
            cursor.close()
            conn.close()

    def _fetch_all(self, query: str, params: Sequence = ()) -> List[Dict[str, Any]]:
        conn = self._connect()
        cursor = conn.cursor()

        try:
            cursor.execute(query, params)
            return cursor.fetchall()
        except psycopg2.Error as e:
            raise RepositoryError(f"Error reading {self.table}: {e}") from e
        finally:
            cursor.close()
            conn.close()

    def _duplicate_error(self, entity: Any) -> DuplicateEntityError:
        return DuplicateEntityError(self.entity_name, "id", entity.id)

    def _write(self, entity: Any, statements: Callable[[Any], None]) -> None:
        conn = self._connect()
        cursor = conn.cursor()

        try:
            statements(cursor)
            conn.commit()
        except psycopg2.errors.UniqueViolation as e:
            conn.rollback()
            raise self._duplicate_error(entity) from e
        except psycopg2.Error as e:
            conn.rollback()
            logger.error(f"Failed to save {self.entity_name} {entity.id}: {e}")
            raise RepositoryError(f"Error saving {self.entity_name} {entity.id}: {e}") from e
        finally:
            cursor.close()
            conn.close()

    def delete(self, entity_id: str) -> bool:
        conn = self._connect()
        cursor = conn.cursor()

        try:
            cursor.execute(f"DELETE FROM {self.table} WHERE id = %s", (entity_id,))
            deleted = cursor.rowcount > 0
            conn.commit()
            return deleted
        except psycopg2.Error as e:
            conn.rollback()
            raise RepositoryError(f"Error deleting {self.entity_name} {entity_id}: {e}") from e
        finally:
            cursor.close()
            conn.close()

    def count(self) -> int:
        row = self._fetch_one(f"SELECT COUNT(*) AS total FROM {self.table}")
        return row['total']


# ============================================================================
# Products
# ============================================================================

PRODUCT_COLUMNS = """
    id, sku, name, description, category,
    price_amount, price_currency, stock, min_stock,
    is_active, created_at, updated_at
"""


class PostgresProductRepository(PostgresRepository, ProductRepository):
    """
    Repository for Product data access

    Returns Product domain models; prices are stored as amount + currency.
    """

    table = "products"

    def _map_row_to_product(self, row: Dict[str, Any]) -> Product:
        return Product(
            id=row['id'],
            sku=row['sku'],
            name=row['name'],
            description=row.get('description'),
            category=row.get('category'),
            price=Money(amount=row['price_amount'], currency=row['price_currency']),
            stock=row['stock'],
            min_stock=row['min_stock'],
            is_active=row['is_active'],
            created_at=row['created_at'],
            updated_at=row['updated_at'],
        )

    def _duplicate_error(self, entity: Product) -> DuplicateEntityError:
        return DuplicateEntityError(self.entity_name, "sku", entity.sku)

    def get(self, entity_id: str) -> Optional[Product]:
        row = self._fetch_one(f"""
            SELECT {PRODUCT_COLUMNS}
            FROM products
            WHERE id = %s
        """, (entity_id,))
        return self._map_row_to_product(row) if row else None

    def find_all(self, limit: int = 50, offset: int = 0) -> Tuple[List[Product], int]:
        """
        Find products page by page

        Returns:
            Tuple of (list of products, total count)
        """
        total = self.count()
        rows = self._fetch_all(f"""
            SELECT {PRODUCT_COLUMNS}
            FROM products
            ORDER BY created_at, id
            LIMIT %s OFFSET %s
        """, (limit, offset))
        return [self._map_row_to_product(row) for row in rows], total

    def find_by_sku(self, sku: str) -> Optional[Product]:
        row = self._fetch_one(f"""
            SELECT {PRODUCT_COLUMNS}
            FROM products
            WHERE sku = %s
        """, (sku.strip().upper(),))
        return self._map_row_to_product(row) if row else None

    def find_active(self) -> List[Product]:
        rows = self._fetch_all(f"""
            SELECT {PRODUCT_COLUMNS}
            FROM products
            WHERE is_active = true
            ORDER BY created_at, id
        """)
        return [self._map_row_to_product(row) for row in rows]

    def find_by_category(self, category: str) -> List[Product]:
        rows = self._fetch_all(f"""
            SELECT {PRODUCT_COLUMNS}
            FROM products
            WHERE category = %s
            ORDER BY created_at, id
        """, (category,))
        return [self._map_row_to_product(row) for row in rows]

    def find_low_stock(self, threshold: Optional[int] = None) -> List[Product]:
        """
        Find products with low stock

        Args:
            threshold: Custom threshold (if None, uses min_stock)

        Returns:
            List of products with low stock
        """
        if threshold is not None:
            rows = self._fetch_all(f"""
                SELECT {PRODUCT_COLUMNS}
                FROM products
                WHERE is_active = true AND stock <= %s
                ORDER BY stock ASC
            """, (threshold,))
        else:
            rows = self._fetch_all(f"""
                SELECT {PRODUCT_COLUMNS}
                FROM products
                WHERE is_active = true AND stock <= min_stock
                ORDER BY stock ASC
            """)
        return [self._map_row_to_product(row) for row in rows]

    def save(self, entity: Product) -> Product:
        def statements(cursor):
            cursor.execute("""
                INSERT INTO products (
                    id, sku, name, description, category,
                    price_amount, price_currency, stock, min_stock,
                    is_active, created_at, updated_at
                ) VALUES (
                    %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s
                )
                ON CONFLICT (id) DO UPDATE SET
                    sku = EXCLUDED.sku,
                    name = EXCLUDED.name,
                    description = EXCLUDED.description,
                    category = EXCLUDED.category,
                    price_amount = EXCLUDED.price_amount,
                    price_currency = EXCLUDED.price_currency,
                    stock = EXCLUDED.stock,
                    min_stock = EXCLUDED.min_stock,
                    is_active = EXCLUDED.is_active,
                    updated_at = EXCLUDED.updated_at
            """, (
                entity.id, entity.sku, entity.name, entity.description, entity.category,
                entity.price.amount, entity.price.currency, entity.stock, entity.min_stock,
                entity.is_active, entity.created_at, entity.updated_at,
            ))

        self._write(entity, statements)
        return entity


# ============================================================================
# Customers
# ============================================================================

CUSTOMER_COLUMNS = f"id, name, email, {ADDRESS_COLUMNS}, created_at, updated_at"


class PostgresCustomerRepository(PostgresRepository, CustomerRepository):
    """Repository for Customer data access"""

    table = "customers"

    def _map_row_to_customer(self, row: Dict[str, Any]) -> Customer:
        return Customer(
            id=row['id'],
            name=row['name'],
            email=Email(value=row['email']),
            shipping_address=_address_from_row(row),
            created_at=row['created_at'],
            updated_at=row['updated_at'],
        )

    def _duplicate_error(self, entity: Customer) -> DuplicateEntityError:
        return DuplicateEntityError(self.entity_name, "email", entity.email.value)

    def get(self, entity_id: str) -> Optional[Customer]:
        row = self._fetch_one(f"SELECT {CUSTOMER_COLUMNS} FROM customers WHERE id = %s", (entity_id,))
        return self._map_row_to_customer(row) if row else None

    def find_all(self, limit: int = 50, offset: int = 0) -> Tuple[List[Customer], int]:
        total = self.count()
        rows = self._fetch_all(f"""
            SELECT {CUSTOMER_COLUMNS}
            FROM customers
            ORDER BY created_at, id
            LIMIT %s OFFSET %s
        """, (limit, offset))
        return [self._map_row_to_customer(row) for row in rows], total

    def find_by_email(self, email: str) -> Optional[Customer]:
        row = self._fetch_one(
            f"SELECT {CUSTOMER_COLUMNS} FROM customers WHERE email = %s",
            (Email(value=email).value,),
        )
        return self._map_row_to_customer(row) if row else None

    def save(self, entity: Customer) -> Customer:
        def statements(cursor):
            cursor.execute(f"""
                INSERT INTO customers (
                    id, name, email, {ADDRESS_COLUMNS}, created_at, updated_at
                ) VALUES (
                    %s, %s, %s, %s, %s, %s, %s, %s, %s, %s
                )
                ON CONFLICT (id) DO UPDATE SET
                    name = EXCLUDED.name,
                    email = EXCLUDED.email,
                    address_street = EXCLUDED.address_street,
                    address_city = EXCLUDED.address_city,
                    address_postal_code = EXCLUDED.address_postal_code,
                    address_country = EXCLUDED.address_country,
                    address_state = EXCLUDED.address_state,
                    updated_at = EXCLUDED.updated_at
            """, (
                entity.id, entity.name, entity.email.value,
                *_address_params(entity.shipping_address),
                entity.created_at, entity.updated_at,
            ))

        self._write(entity, statements)
        return entity


# ============================================================================
# Orders
# ============================================================================

ORDER_COLUMNS = f"""
    id, customer_id, currency, status, {ADDRESS_COLUMNS},
    cancellation_reason, confirmed_at, shipped_at, delivered_at, cancelled_at,
    created_at, updated_at
"""

LINE_COLUMNS = "product_id, product_name, unit_price_amount, unit_price_currency, quantity"


class PostgresOrderRepository(PostgresRepository, OrderRepository):
    """
    Repository for Order data access

    Orders are stored in `orders`, their lines in `order_items`. Saving an
    order rewrites all of its lines in the same transaction.
    """

    table = "orders"

    def _map_row_to_item(self, row: Dict[str, Any]) -> OrderItem:
        return OrderItem(
            product_id=row['product_id'],
            product_name=row['product_name'],
            unit_price=Money(amount=row['unit_price_amount'], currency=row['unit_price_currency']),
            quantity=row['quantity'],
        )

    def _map_row_to_order(self, row: Dict[str, Any], items: List[OrderItem]) -> Order:
        return Order(
            id=row['id'],
            customer_id=row['customer_id'],
            currency=row['currency'],
            status=OrderStatus(row['status']),
            items=items,
            shipping_address=_address_from_row(row),
            cancellation_reason=row.get('cancellation_reason'),
            confirmed_at=row.get('confirmed_at'),
            shipped_at=row.get('shipped_at'),
            delivered_at=row.get('delivered_at'),
            cancelled_at=row.get('cancelled_at'),
            created_at=row['created_at'],
            updated_at=row['updated_at'],
        )

    def _load_orders(self, order_rows: List[Dict[str, Any]]) -> List[Order]:
        """Attach items to order rows with ONE query for all of them"""
        if not order_rows:
            return []

        order_ids = [row['id'] for row in order_rows]
        item_rows = self._fetch_all(f"""
            SELECT order_id, {LINE_COLUMNS}
            FROM order_items
            WHERE order_id = ANY(%s)
            ORDER BY order_id, position
        """, (order_ids,))

        items_by_order: Dict[str, List[OrderItem]] = {}
        for item in item_rows:
            items_by_order.setdefault(item['order_id'], []).append(self._map_row_to_item(item))

        return [self._map_row_to_order(row, items_by_order.get(row['id'], [])) for row in order_rows]

    def get(self, entity_id: str) -> Optional[Order]:
        row = self._fetch_one(f"SELECT {ORDER_COLUMNS} FROM orders WHERE id = %s", (entity_id,))
        if not row:
            return None
        return self._load_orders([row])[0]

    def find_all(self, limit: int = 50, offset: int = 0) -> Tuple[List[Order], int]:
        total = self.count()
        rows = self._fetch_all(f"""
            SELECT {ORDER_COLUMNS}
            FROM orders
            ORDER BY created_at, id
            LIMIT %s OFFSET %s
        """, (limit, offset))
        return self._load_orders(rows), total

    def find_by_customer(self, customer_id: str) -> List[Order]:
        rows = self._fetch_all(f"""
            SELECT {ORDER_COLUMNS}
            FROM orders
            WHERE customer_id = %s
            ORDER BY created_at, id
        """, (customer_id,))
        return self._load_orders(rows)

    def find_by_status(self, status: OrderStatus) -> List[Order]:
        rows = self._fetch_all(f"""
            SELECT {ORDER_COLUMNS}
            FROM orders
            WHERE status = %s
            ORDER BY created_at, id
        """, (OrderStatus(status).value,))
        return self._load_orders(rows)

    def save(self, entity: Order) -> Order:
        def statements(cursor):
            cursor.execute(f"""
                INSERT INTO orders (
                    id, customer_id, currency, status, {ADDRESS_COLUMNS},
                    cancellation_reason, confirmed_at, shipped_at, delivered_at, cancelled_at,
                    created_at, updated_at
                ) VALUES (
                    %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s
                )
                ON CONFLICT (id) DO UPDATE SET
                    status = EXCLUDED.status,
                    address_street = EXCLUDED.address_street,
                    address_city = EXCLUDED.address_city,
                    address_postal_code = EXCLUDED.address_postal_code,
                    address_country = EXCLUDED.address_country,
                    address_state = EXCLUDED.address_state,
                    cancellation_reason = EXCLUDED.cancellation_reason,
                    confirmed_at = EXCLUDED.confirmed_at,
                    shipped_at = EXCLUDED.shipped_at,
                    delivered_at = EXCLUDED.delivered_at,
                    cancelled_at = EXCLUDED.cancelled_at,
                    updated_at = EXCLUDED.updated_at
            """, (
                entity.id, entity.customer_id, entity.currency, entity.status.value,
                *_address_params(entity.shipping_address),
                entity.cancellation_reason, entity.confirmed_at, entity.shipped_at,
                entity.delivered_at, entity.cancelled_at,
                entity.created_at, entity.updated_at,
            ))

            cursor.execute("DELETE FROM order_items WHERE order_id = %s", (entity.id,))
            if entity.items:
                cursor.executemany(f"""
                    INSERT INTO order_items (order_id, position, {LINE_COLUMNS})
                    VALUES (%s, %s, %s, %s, %s, %s, %s)
                """, [
                    (
                        entity.id, position, item.product_id, item.product_name,
                        item.unit_price.amount, item.unit_price.currency, item.quantity,
                    )
                    for position, item in enumerate(entity.items)
                ])

        self._write(entity, statements)
        return entity


# ============================================================================
# Carts
# ============================================================================

class PostgresCartRepository(PostgresRepository, CartRepository):
    """Repository for ShoppingCart data access (carts + cart_items)"""

    table = "carts"

    def _load_carts(self, cart_rows: List[Dict[str, Any]]) -> List[ShoppingCart]:
        if not cart_rows:
            return []

        cart_ids = [row['id'] for row in cart_rows]
        line_rows = self._fetch_all(f"""
            SELECT cart_id, {LINE_COLUMNS}
            FROM cart_items
            WHERE cart_id = ANY(%s)
            ORDER BY cart_id, position
        """, (cart_ids,))

        lines_by_cart: Dict[str, List[CartLine]] = {}
        for line in line_rows:
            lines_by_cart.setdefault(line['cart_id'], []).append(CartLine(
                product_id=line['product_id'],
                product_name=line['product_name'],
                unit_price=Money(amount=line['unit_price_amount'], currency=line['unit_price_currency']),
                quantity=line['quantity'],
            ))

        return [
            ShoppingCart(
                id=row['id'],
                customer_id=row['customer_id'],
                currency=row['currency'],
                lines=lines_by_cart.get(row['id'], []),
                created_at=row['created_at'],
                updated_at=row['updated_at'],
            )
            for row in cart_rows
        ]

    def get(self, entity_id: str) -> Optional[ShoppingCart]:
        row = self._fetch_one("""
            SELECT id, customer_id, currency, created_at, updated_at
            FROM carts
            WHERE id = %s
        """, (entity_id,))
        if not row:
            return None
        return self._load_carts([row])[0]

    def find_all(self, limit: int = 50, offset: int = 0) -> Tuple[List[ShoppingCart], int]:
        total = self.count()
        rows = self._fetch_all("""
            SELECT id, customer_id, currency, created_at, updated_at
            FROM carts
            ORDER BY created_at, id
            LIMIT %s OFFSET %s
        """, (limit, offset))
        return self._load_carts(rows), total

    def find_by_customer(self, customer_id: str) -> List[ShoppingCart]:
        rows = self._fetch_all("""
            SELECT id, customer_id, currency, created_at, updated_at
            FROM carts
            WHERE customer_id = %s
            ORDER BY created_at, id
        """, (customer_id,))
        return self._load_carts(rows)

    def save(self, entity: ShoppingCart) -> ShoppingCart:
        def statements(cursor):
            cursor.execute("""
                INSERT INTO carts (id, customer_id, currency, created_at, updated_at)
                VALUES (%s, %s, %s, %s, %s)
                ON CONFLICT (id) DO UPDATE SET
                    updated_at = EXCLUDED.updated_at
            """, (entity.id, entity.customer_id, entity.currency, entity.created_at, entity.updated_at))

            cursor.execute("DELETE FROM cart_items WHERE cart_id = %s", (entity.id,))
            if entity.lines:
                cursor.executemany(f"""
                    INSERT INTO cart_items (cart_id, position, {LINE_COLUMNS})
                    VALUES (%s, %s, %s, %s, %s, %s, %s)
                """, [
                    (
                        entity.id, position, line.product_id, line.product_name,
                        line.unit_price.amount, line.unit_price.currency, line.quantity,
                    )
                    for position, line in enumerate(entity.lines)
                ])

        self._write(entity, statements)
        return entity
