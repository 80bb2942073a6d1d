"""
PostgreSQL connections (psycopg2)

All raw SQL access goes through the helpers in this module so that the
retry policy and connection settings live in one place.

Author: TM3
Updated: 2025-10-17
"""
import logging
import time
from pathlib import Path
from typing import Optional

import psycopg2
from psycopg2.extras import RealDictCursor

from storefront.core.config import get_settings
from storefront.domain.exceptions import RepositoryError

logger = logging.getLogger(__name__)

SCHEMA_PATH = Path(__file__).resolve().parents[2] / "sql" / "schema.sql"


def _database_url(database_url: Optional[str] = None) -> str:
    url = database_url or get_settings().DATABASE_URL
    if not url:
        raise RepositoryError("DATABASE_URL not configured")
    return url


def get_db_connection_dict(database_url: Optional[str] = None):
    """
    Get a database connection with RealDictCursor (returns dictionaries)

    Repositories use this one: rows come back as dicts that map straight
    onto domain model fields.

    Example:
        conn = get_db_connection_dict()
        cursor = conn.cursor()
        cursor.execute("SELECT * FROM products")
        results = cursor.fetchall()  # Returns list of dicts
        cursor.close()
        conn.close()
    """
    return psycopg2.connect(_database_url(database_url), cursor_factory=RealDictCursor)


def get_db_connection_with_retry(
    max_retries: Optional[int] = None,
    retry_delay: Optional[float] = None,
    database_url: Optional[str] = None,
):
    """
    Get a psycopg2 connection with automatic retry on connection failures

    Retries OperationalError with exponential backoff; any other error
    fails immediately.

    Args:
        max_retries: Maximum number of connection attempts (default: DB_CONNECT_RETRIES)
        retry_delay: Initial delay between retries in seconds (default: DB_RETRY_DELAY)

    Returns:
        psycopg2 connection object

    Raises:
        psycopg2.OperationalError: If all retry attempts fail
    """
    settings = get_settings()
    url = _database_url(database_url)
    max_retries = max_retries if max_retries is not None else settings.DB_CONNECT_RETRIES
    retry_delay = retry_delay if retry_delay is not None else settings.DB_RETRY_DELAY

    for attempt in range(1, max_retries + 1):
        try:
            logger.debug(f"Database connection attempt {attempt}/{max_retries}")
            conn = psycopg2.connect(url)

            # Test connection with a simple query
            cursor = conn.cursor()
            cursor.execute("SELECT 1")
            cursor.close()

            logger.debug(f"Database connection successful on attempt {attempt}")
            return conn

        except psycopg2.OperationalError as e:
            logger.warning(f"Connection error on attempt {attempt}/{max_retries}: {e}")

            if attempt >= max_retries:
                logger.error(f"All {max_retries} connection attempts failed")
                raise

            delay = retry_delay * (2 ** (attempt - 1))
            logger.info(f"Retrying in {delay:.2f} seconds...")
            time.sleep(delay)

    raise RepositoryError("Connection failed: no attempts were made", {"max_retries": max_retries})


def init_schema(database_url: Optional[str] = None, schema_path: Path = SCHEMA_PATH) -> None:
    """
    Apply sql/schema.sql to the configured database

    Every statement in the schema file is idempotent (IF NOT EXISTS), so
    running this against an initialized database is a no-op.
    """
    sql = schema_path.read_text(encoding="utf-8")
    conn = get_db_connection_with_retry(database_url=database_url)
    cursor = conn.cursor()

    try:
        cursor.execute(sql)
        conn.commit()
        logger.info(f"Applied schema from {schema_path}")
    except psycopg2.Error as e:
        conn.rollback()
        raise RepositoryError(f"Failed to apply schema: {e}") from e
    finally:
        cursor.close()
        conn.close()
