"""
SQLAlchemy ORM models package.

All models are imported here so that:
  1. Base.metadata knows every table before create_all() runs
  2. Other modules can import from bank_ledger.models directly
"""

from bank_ledger.models.product import Product, ProductType  # noqa: F401
from bank_ledger.models.account import Account, AccountStatus  # noqa: F401
from bank_ledger.models.transaction import Transaction, TransactionType  # noqa: F401
