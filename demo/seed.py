#!/usr/bin/env python3
"""
Demo seed script — populates the product catalog and a few demo accounts.

!! NOT FOR PRODUCTION !!
The product catalog is owned by an external service, so there is no API to
create products. For local demos this script writes them straight into the
ledger database, then opens accounts and moves money through the account
authority exactly as the API would.

Usage:
    python demo/seed.py            # create tables and seed
    python demo/seed.py --reset    # drop everything first

Demo owners are identified by the `sub` claim of their bearer tokens:
    ┌───────┬──────────────────────────────┐
    │ Owner │ Accounts                     │
    ├───────┼──────────────────────────────┤
    │ 1     │ Free Savings, 12M Fixed      │
    │ 2     │ Free Savings                 │
    └───────┴──────────────────────────────┘
"""

import argparse
import asyncio
import logging
from decimal import Decimal
from pathlib import Path

import bank_ledger.models  # noqa: F401
from bank_ledger.config import settings
from bank_ledger.database import AsyncSessionLocal, Base, engine
from bank_ledger.logging_config import setup_logging
from bank_ledger.models.product import Product, ProductType
from bank_ledger.services import account_authority, query_service

logger = logging.getLogger("demo.seed")

PRODUCTS = [
    {
        "name": "Free Savings",
        "product_type": ProductType.SAVINGS,
        "interest_rate": Decimal("2.5"),
        "min_amount": 1_000,
        "max_amount": None,
        "duration_months": None,
        "is_active": True,
    },
    {
        "name": "12M Fixed Deposit",
        "product_type": ProductType.FIXED_DEPOSIT,
        "interest_rate": Decimal("3.8"),
        "min_amount": 1_000_000,
        "max_amount": 100_000_000,
        "duration_months": 12,
        "is_active": True,
    },
    {
        "name": "24M Regular Deposit",
        "product_type": ProductType.REGULAR_DEPOSIT,
        "interest_rate": Decimal("4.2"),
        "min_amount": 10_000,
        "max_amount": 1_000_000,
        "duration_months": 24,
        "is_active": True,
    },
    {
        "name": "Legacy Savings (discontinued)",
        "product_type": ProductType.SAVINGS,
        "interest_rate": Decimal("1.0"),
        "min_amount": 0,
        "max_amount": None,
        "duration_months": None,
        "is_active": False,
    },
]

# owner_id -> list of (product index, [(operation, amount), ...])
DEMO_ACCOUNTS = {
    "1": [
        (0, [("deposit", 10_000), ("withdraw", 3_000), ("deposit", 250_000)]),
        (1, [("deposit", 10_000_000)]),
    ],
    "2": [
        (0, [("deposit", 50_000), ("withdraw", 12_500)]),
    ],
}


async def reset_database() -> None:
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    logger.info("Dropped all tables")


async def seed() -> None:
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with AsyncSessionLocal() as db:
        products = [Product(**fields) for fields in PRODUCTS]
        db.add_all(products)
        await db.flush()
        logger.info("Seeded %d products", len(products))

        for owner_id, accounts in DEMO_ACCOUNTS.items():
            for product_index, operations in accounts:
                account = await account_authority.open_account(
                    db, owner_id, products[product_index].id,
                )
                for operation, amount in operations:
                    apply = getattr(account_authority, operation)
                    await apply(db, account.account_number, amount, "Demo seed")

            summary = await query_service.get_owner_summary(db, owner_id)
            logger.info(
                "Owner %s: %d accounts, total balance %d %s",
                owner_id, summary["account_count"], summary["total_balance"], summary["currency"],
            )

        await db.commit()

    await engine.dispose()


def main() -> None:
    parser = argparse.ArgumentParser(description="Seed the ledger database with demo data")
    parser.add_argument("--reset", action="store_true", help="Drop all tables before seeding")
    args = parser.parse_args()

    setup_logging(settings.LOG_LEVEL, settings.LOG_FORMAT)

    if settings.DATABASE_URL.startswith("sqlite"):
        Path("data").mkdir(exist_ok=True)

    async def run() -> None:
        if args.reset:
            await reset_database()
        await seed()

    asyncio.run(run())


if __name__ == "__main__":
    main()
