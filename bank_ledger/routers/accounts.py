"""
Accounts router — account opening, lookup and status endpoints.

All endpoints require a bearer token and are scoped to the caller:
    POST   /accounts                               — Open a new account
    GET    /accounts                               — List own accounts
    GET    /accounts/summary                       — Totals across own accounts
    GET    /accounts/{account_number}              — Get own account details
    GET    /accounts/{account_number}/balance      — Stored vs replayed balance
    PATCH  /accounts/{account_number}/status       — Activate, deactivate or close

Deposits, withdrawals and history live in the transactions router.
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from bank_ledger.database import get_db
from bank_ledger.dependencies import get_current_owner_id
from bank_ledger.models.account import AccountStatus
from bank_ledger.schemas.account import (
    AccountOpenRequest,
    AccountResponse,
    AccountStatusRequest,
    BalanceResponse,
    OwnerSummaryResponse,
)
from bank_ledger.services import account_authority, query_service

router = APIRouter()


@router.post(
    "",
    response_model=AccountResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Open a new account",
)
async def open_account(
    request: AccountOpenRequest,
    owner_id: str = Depends(get_current_owner_id),
    db: AsyncSession = Depends(get_db),
):
    """
    Open an account against a deposit product.

    The account is created ACTIVE with a zero balance and a randomly
    generated account number. The caller becomes the owner. Fails with 404
    for an unknown product and 422 for a product no longer on sale.
    """
    account = await account_authority.open_account(
        db=db,
        owner_id=owner_id,
        product_id=request.product_id,
    )
    return AccountResponse.from_account(account)


@router.get(
    "",
    response_model=list[AccountResponse],
    summary="List your accounts",
)
async def list_accounts(
    owner_id: str = Depends(get_current_owner_id),
    db: AsyncSession = Depends(get_db),
):
    """List all accounts owned by the caller (empty if there are none)."""
    accounts = await query_service.list_accounts_for_owner(db, owner_id)
    return [AccountResponse.from_account(account) for account in accounts]


@router.get(
    "/summary",
    response_model=OwnerSummaryResponse,
    summary="Totals across your accounts",
)
async def get_summary(
    owner_id: str = Depends(get_current_owner_id),
    db: AsyncSession = Depends(get_db),
):
    return await query_service.get_owner_summary(db, owner_id)


@router.get(
    "/{account_number}",
    response_model=AccountResponse,
    summary="Get account details",
)
async def get_account(
    account_number: str,
    owner_id: str = Depends(get_current_owner_id),
    db: AsyncSession = Depends(get_db),
):
    """
    Get details for a specific account.

    Returns 403 if the account belongs to a different owner, or 404 if
    the account doesn't exist.
    """
    account = await query_service.get_account(db, account_number, owner_id)
    return AccountResponse.from_account(account)


@router.get(
    "/{account_number}/balance",
    response_model=BalanceResponse,
    summary="Check account balance",
)
async def get_balance(
    account_number: str,
    owner_id: str = Depends(get_current_owner_id),
    db: AsyncSession = Depends(get_db),
):
    """
    Get the stored balance alongside the balance replayed from the
    transaction log. `match` is false only if the two disagree, which
    would indicate a data integrity issue.
    """
    return await query_service.get_balance(db, account_number, owner_id)


@router.patch(
    "/{account_number}/status",
    response_model=AccountResponse,
    summary="Change account status",
)
async def change_status(
    account_number: str,
    request: AccountStatusRequest,
    owner_id: str = Depends(get_current_owner_id),
    db: AsyncSession = Depends(get_db),
):
    """
    Activate, deactivate or close an account.

    Closing requires a zero balance and cannot be undone. Deposits and
    withdrawals are refused while the account is not ACTIVE.
    """
    await query_service.get_account(db, account_number, owner_id)
    account = await account_authority.change_status(
        db, account_number, AccountStatus(request.status),
    )
    return AccountResponse.from_account(account)
