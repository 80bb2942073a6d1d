#!/usr/bin/env python3
"""
Create the storefront tables and optionally seed a demo catalog

Purpose: Apply sql/schema.sql (idempotent) to DATABASE_URL
Author: TM3
Date: 2025-10-17

Usage:
    export DATABASE_URL="postgresql://..."
    python3 backend/scripts/init_db.py
    python3 backend/scripts/init_db.py --seed
"""

import argparse
import os
import sys
from decimal import Decimal

import psycopg2
from dotenv import load_dotenv

from storefront.core.database import init_schema
from storefront.domain.exceptions import DuplicateEntityError, RepositoryError
from storefront.domain.money import Money
from storefront.domain.product import Product
from storefront.repositories.postgres import PostgresProductRepository

# (sku, name, category, price, stock, min_stock)
SEED_PRODUCTS = [
    ("TEA-GREEN-100", "Green Tea 100g", "tea", "8.50", 40, 10),
    ("TEA-BLACK-100", "Black Tea 100g", "tea", "7.90", 25, 10),
    ("MUG-CER-350", "Ceramic Mug 350ml", "accessories", "12.00", 15, 5),
    ("KETTLE-GLS-1L", "Glass Kettle 1L", "accessories", "34.99", 4, 3),
]


def seed_catalog(database_url, currency="USD"):
    """Insert the demo products, skipping SKUs that already exist"""
    repo = PostgresProductRepository(database_url)
    created = 0

    for sku, name, category, price, stock, min_stock in SEED_PRODUCTS:
        if repo.find_by_sku(sku) is not None:
            print(f"   ⏭️  {sku} already exists")
            continue

        product = Product(
            sku=sku,
            name=name,
            category=category,
            price=Money(amount=Decimal(price), currency=currency),
            stock=stock,
            min_stock=min_stock,
        )
        try:
            repo.save(product)
            created += 1
            print(f"   ✅ {sku} - {name}")
        except DuplicateEntityError:
            print(f"   ⏭️  {sku} already exists")

    return created


def main():
    """Main execution"""
    parser = argparse.ArgumentParser(description="Initialize the storefront database")
    parser.add_argument("--seed", action="store_true", help="Insert a small demo catalog")
    parser.add_argument("--currency", default="USD", help="Currency for seeded prices")
    args = parser.parse_args()

    load_dotenv()

    print("=" * 60)
    print("🗄️  STOREFRONT DATABASE INIT")
    print("=" * 60)
    print()

    database_url = os.getenv("DATABASE_URL")
    if not database_url:
        print("❌ Error: DATABASE_URL environment variable not set")
        print("   Set it before running this script")
        return 1

    try:
        init_schema(database_url)
        print("✅ Schema applied")

        if args.seed:
            print("\n🌱 Seeding demo catalog...")
            created = seed_catalog(database_url, args.currency)
            print(f"\n📦 {created} products created")
    except (RepositoryError, psycopg2.Error) as e:
        print(f"\n❌ Database init failed: {e}")
        return 1

    print("\n" + "=" * 60)
    print("✅ DATABASE READY")
    print("=" * 60)
    return 0


if __name__ == "__main__":
    sys.exit(main())
