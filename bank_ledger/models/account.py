"""
Account model — a ledger account owned by an external identity.

Each account has:
  - A unique account number (randomly generated digit string)
  - The owner's identity reference (the `sub` of their bearer token)
  - The product it was opened against
  - A balance in integer minor currency units
  - A status: ACTIVE, INACTIVE or CLOSED (accounts are never deleted)
  - A version number used for optimistic concurrency control

Balance management:
  `balance` is the persisted source of truth. It changes only through the
  account authority, which writes it with a version check and appends the
  matching transaction in the same database transaction.

  A CHECK constraint at the database level enforces that the balance can
  never go negative. The application checks before withdrawing; the
  constraint is the final safety net. At the other end the balance is
  capped at MAX_BALANCE, the largest value the column stores.

Versioning:
  `version` starts at 0 and is incremented by every successful write to
  the row. A writer remembers the version it read and only updates the row
  if it is unchanged — otherwise someone else got there first and the
  writer must re-read and re-validate.

Why integer minor units?
  Floating-point numbers introduce rounding errors in financial
  calculations (0.1 + 0.2 != 0.3 in IEEE 754). Storing amounts as integer
  minor units keeps all arithmetic exact.
"""

import enum
import uuid
from datetime import datetime, timezone

from sqlalchemy import String, Integer, DateTime, ForeignKey, CheckConstraint, Enum
from sqlalchemy.orm import Mapped, mapped_column, relationship

from bank_ledger.database import Base


# Largest value the 64-bit INTEGER balance column can hold
MAX_BALANCE = 2**63 - 1


class AccountStatus(str, enum.Enum):
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"  # Temporarily blocked; may be reactivated
    CLOSED = "CLOSED"      # Terminal


class Account(Base):
    __tablename__ = "accounts"

    # Database-level constraint: balance can never be negative
    __table_args__ = (
        CheckConstraint(
            "balance >= 0",
            name="ck_accounts_non_negative_balance",
        ),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        primary_key=True,
        default=uuid.uuid4,
    )

    # Unique display identifier, the external lookup key
    account_number: Mapped[str] = mapped_column(
        String(32),
        unique=True,
        nullable=False,
    )

    # Identity reference from the external identity provider
    owner_id: Mapped[str] = mapped_column(
        String(64),
        nullable=False,
        index=True,
    )

    product_id: Mapped[int] = mapped_column(
        ForeignKey("products.id"),
        nullable=False,
    )

    balance: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
    )

    status: Mapped[AccountStatus] = mapped_column(
        Enum(AccountStatus),
        nullable=False,
        default=AccountStatus.ACTIVE,
    )

    version: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
    )

    # Audit timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
    )

    # --- Relationships ---
    # Eager-loaded: responses include the product's name and type, and lazy
    # loading is not available in async context.
    product: Mapped["Product"] = relationship(lazy="joined")
