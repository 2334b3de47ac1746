"""
Transaction model — the append-only log of balance changes.

Every successful deposit or withdrawal writes exactly one Transaction.
Failed operations write nothing. Rows are never updated or deleted.

Key fields:
  - type: DEPOSIT or WITHDRAWAL — the direction of money flow
  - amount: Always positive (the direction is implied by the type)
  - balance_after: The account balance immediately after this transaction
  - sequence: The account version this transaction produced. It is unique
    per account and strictly increasing, so it is the ordering key of an
    account's history (created_at can tie).

Replay invariant:
  Folding an account's transactions in sequence order from a balance of 0
  (+amount for DEPOSIT, -amount for WITHDRAWAL) reproduces each row's
  balance_after, and the last balance_after equals the account's balance.

Why amount is always positive:
  Storing a positive amount with a separate type field is clearer than
  signed integers — the type field makes the direction explicit.
"""

import enum
import uuid
from datetime import datetime, timezone

from sqlalchemy import (
    String, Integer, DateTime, ForeignKey, CheckConstraint, Enum, UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column

from bank_ledger.database import Base


class TransactionType(str, enum.Enum):
    DEPOSIT = "DEPOSIT"
    WITHDRAWAL = "WITHDRAWAL"


class Transaction(Base):
    __tablename__ = "transactions"

    __table_args__ = (
        CheckConstraint("amount > 0", name="ck_transactions_positive_amount"),
        CheckConstraint("balance_after >= 0", name="ck_transactions_non_negative_balance_after"),
        # One log entry per account version
        UniqueConstraint("account_id", "sequence", name="uq_transactions_account_sequence"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        primary_key=True,
        default=uuid.uuid4,
    )

    account_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("accounts.id"),
        nullable=False,
        index=True,
    )

    sequence: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
    )

    type: Mapped[TransactionType] = mapped_column(
        Enum(TransactionType),
        nullable=False,
    )

    # Minor currency units, always positive
    amount: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
    )

    balance_after: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
    )

    # Optional memo
    description: Mapped[str | None] = mapped_column(
        String(255),
        nullable=True,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
        index=True,
    )
