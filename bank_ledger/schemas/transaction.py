"""
Pydantic schemas for deposit, withdrawal and transaction history endpoints.

All monetary amounts are integer minor currency units. Amount fields are
strict: a JSON float such as 100.0 is rejected rather than coerced.
The range is NOT checked here. The account authority rejects zero, negative
and oversized amounts (above MAX_BALANCE) with its own invalid_amount error.
"""

import uuid
from datetime import datetime

from pydantic import BaseModel, Field

from bank_ledger.models.transaction import TransactionType
from bank_ledger.schemas.account import AccountResponse


class MoneyMovementRequest(BaseModel):
    """Request body for POST /accounts/{account_number}/deposit and /withdraw."""
    amount: int = Field(strict=True, description="Amount in minor currency units")
    description: str | None = Field(None, max_length=255)


class TransactionResponse(BaseModel):
    """Public representation of a transaction."""
    id: uuid.UUID
    account_id: uuid.UUID
    sequence: int
    type: TransactionType
    amount: int
    balance_after: int
    description: str | None
    created_at: datetime

    model_config = {"from_attributes": True}


class MoneyMovementResponse(BaseModel):
    """Response body for a successful deposit or withdrawal."""
    account: AccountResponse
    transaction: TransactionResponse
