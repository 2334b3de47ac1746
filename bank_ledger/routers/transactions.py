"""
Transactions router — move money and read history for an account.

Endpoints (scoped to the caller's accounts):
  POST /accounts/{account_number}/deposit        — Deposit money
  POST /accounts/{account_number}/withdraw       — Withdraw money
  GET  /accounts/{account_number}/transactions   — List transactions
"""

from typing import Literal

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from bank_ledger.database import get_db
from bank_ledger.dependencies import get_current_owner_id
from bank_ledger.schemas.account import AccountResponse
from bank_ledger.schemas.transaction import (
    MoneyMovementRequest,
    MoneyMovementResponse,
    TransactionResponse,
)
from bank_ledger.services import account_authority, query_service

router = APIRouter()


@router.post(
    "/{account_number}/deposit",
    response_model=MoneyMovementResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Deposit money",
)
async def deposit(
    account_number: str,
    request: MoneyMovementRequest,
    owner_id: str = Depends(get_current_owner_id),
    db: AsyncSession = Depends(get_db),
):
    """
    Add money to an account and record a DEPOSIT transaction.

    All amounts are **integer minor units**. Zero or negative amounts are
    rejected with `invalid_amount`; inactive or closed accounts with
    `account_not_active`.
    """
    await query_service.get_account(db, account_number, owner_id)
    account, txn = await account_authority.deposit(
        db=db,
        account_number=account_number,
        amount=request.amount,
        description=request.description,
    )
    return MoneyMovementResponse(
        account=AccountResponse.from_account(account),
        transaction=TransactionResponse.model_validate(txn),
    )


@router.post(
    "/{account_number}/withdraw",
    response_model=MoneyMovementResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Withdraw money",
)
async def withdraw(
    account_number: str,
    request: MoneyMovementRequest,
    owner_id: str = Depends(get_current_owner_id),
    db: AsyncSession = Depends(get_db),
):
    """
    Take money out of an account and record a WITHDRAWAL transaction.

    Withdrawals larger than the balance are rejected with
    `insufficient_funds` (409) and change nothing. Withdrawing the exact
    balance is allowed.
    """
    await query_service.get_account(db, account_number, owner_id)
    account, txn = await account_authority.withdraw(
        db=db,
        account_number=account_number,
        amount=request.amount,
        description=request.description,
    )
    return MoneyMovementResponse(
        account=AccountResponse.from_account(account),
        transaction=TransactionResponse.model_validate(txn),
    )


@router.get(
    "/{account_number}/transactions",
    response_model=list[TransactionResponse],
    summary="List transactions for an account",
)
async def list_transactions(
    account_number: str,
    order: Literal["asc", "desc"] = Query("desc", description="asc: oldest first, desc: newest first"),
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
    owner_id: str = Depends(get_current_owner_id),
    db: AsyncSession = Depends(get_db),
):
    """List an account's transactions, newest first by default, with pagination."""
    return await query_service.get_transactions(
        db,
        account_number,
        owner_id,
        descending=(order == "desc"),
        limit=limit,
        offset=offset,
    )
