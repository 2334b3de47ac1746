"""
Product model — a deposit product accounts are opened against.

Products are reference data owned by the external product catalog. The
ledger only reads them:
  - is_active gates opening new accounts
  - interest_rate / duration_months feed the interest projection
  - min_amount / max_amount are exposed for display

Interest rate:
  Stored as an exact NUMERIC annual percentage (2.5 means 2.5% a year).
  It is read back as a Decimal so the interest calculator never sees a float.
"""

import enum
from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy import String, Boolean, Integer, Numeric, DateTime, Enum, CheckConstraint
from sqlalchemy.orm import Mapped, mapped_column

from bank_ledger.database import Base


class ProductType(str, enum.Enum):
    SAVINGS = "SAVINGS"                  # Free-form savings
    FIXED_DEPOSIT = "FIXED_DEPOSIT"      # Lump sum held for a term
    REGULAR_DEPOSIT = "REGULAR_DEPOSIT"  # Recurring instalments over a term


class Product(Base):
    __tablename__ = "products"

    __table_args__ = (
        CheckConstraint("interest_rate >= 0", name="ck_products_non_negative_rate"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    name: Mapped[str] = mapped_column(String(100), nullable=False)

    product_type: Mapped[ProductType] = mapped_column(
        Enum(ProductType),
        nullable=False,
    )

    # Stored as a float on SQLite (see config.DATABASE_URL)
    interest_rate: Mapped[Decimal] = mapped_column(
        Numeric(6, 3, asdecimal=True),
        nullable=False,
        default=Decimal("0"),
    )

    # Minor currency units
    min_amount: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    max_amount: Mapped[int | None] = mapped_column(Integer, nullable=True)

    duration_months: Mapped[int | None] = mapped_column(Integer, nullable=True)

    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
    )
