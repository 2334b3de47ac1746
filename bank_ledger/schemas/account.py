"""
Pydantic schemas for Account endpoints.

These schemas define the API contract for account opening, retrieval,
status changes and balance checks. All monetary amounts are integer minor
currency units.
"""

import uuid
from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

from bank_ledger.models.account import AccountStatus
from bank_ledger.models.product import ProductType


class AccountOpenRequest(BaseModel):
    """Request body for POST /accounts."""
    product_id: int = Field(description="Deposit product to open the account against")


class AccountResponse(BaseModel):
    """Public representation of a ledger account."""
    id: uuid.UUID
    account_number: str
    owner_id: str
    product_id: int
    product_name: str
    product_type: ProductType
    balance: int
    status: AccountStatus
    version: int
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_account(cls, account) -> "AccountResponse":
        return cls(
            id=account.id,
            account_number=account.account_number,
            owner_id=account.owner_id,
            product_id=account.product_id,
            product_name=account.product.name,
            product_type=account.product.product_type,
            balance=account.balance,
            status=account.status,
            version=account.version,
            created_at=account.created_at,
            updated_at=account.updated_at,
        )


class AccountStatusRequest(BaseModel):
    """Request body for PATCH /accounts/{account_number}/status."""
    status: Literal["ACTIVE", "INACTIVE", "CLOSED"]


class BalanceResponse(BaseModel):
    """
    Balance check response — includes both stored and replayed values.

    The `match` field indicates whether the stored balance agrees with the
    balance replayed from the transaction log. A mismatch would indicate a
    data integrity issue.
    """
    account_number: str
    balance: int
    replayed_balance: int
    match: bool
    currency: str


class OwnerSummaryResponse(BaseModel):
    """Totals across all of the caller's accounts."""
    owner_id: str
    account_count: int
    total_balance: int
    currency: str
