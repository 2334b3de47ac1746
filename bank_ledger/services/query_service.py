"""
Query service — the read-only path to balances and history.

Presentation layers read accounts and transactions only through here; none
of these functions write. Because the account authority commits a balance
and its transaction together, nothing read here can show one without the
other.

Ownership enforcement:
  Functions accept an optional `owner_id`. Routers always pass the
  authenticated caller's identity, and an account that belongs to someone
  else raises UnauthorizedAccessError. Omitting owner_id gives unscoped
  access for internal callers.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from bank_ledger.config import settings
from bank_ledger.exceptions import UnauthorizedAccessError
from bank_ledger.models.account import Account
from bank_ledger.models.transaction import Transaction
from bank_ledger.services import ledger_store, transaction_log


async def get_account(
    db: AsyncSession,
    account_number: str,
    owner_id: str | None = None,
) -> Account:
    """
    Get a single account, verifying ownership when owner_id is given.

    Raises:
        AccountNotFoundError: If the account doesn't exist.
        UnauthorizedAccessError: If the account belongs to someone else.
    """
    account = await ledger_store.get_account(db, account_number)

    if owner_id is not None and account.owner_id != owner_id:
        raise UnauthorizedAccessError("You do not have access to this account")

    return account


async def list_accounts_for_owner(db: AsyncSession, owner_id: str) -> list[Account]:
    """
    List all accounts belonging to an owner.

    An owner with no accounts gets an empty list, not an error.
    """
    return await ledger_store.list_accounts_by_owner(db, owner_id)


async def get_transactions(
    db: AsyncSession,
    account_number: str,
    owner_id: str | None = None,
    *,
    descending: bool = False,
    limit: int | None = None,
    offset: int = 0,
) -> list[Transaction]:
    """
    List an account's transactions in sequence order.

    Raises:
        AccountNotFoundError: If the account doesn't exist.
        UnauthorizedAccessError: If the account belongs to someone else.
    """
    account = await get_account(db, account_number, owner_id)
    return await transaction_log.list_by_account(
        db, account.id, descending=descending, limit=limit, offset=offset,
    )


async def get_balance(
    db: AsyncSession,
    account_number: str,
    owner_id: str | None = None,
) -> dict:
    """
    Get the account balance — both stored and replayed from the log.

    A mismatch between the two would signal a data integrity problem.

    Returns:
        Dict with account_number, balance, replayed_balance, match, currency.
    """
    account = await get_account(db, account_number, owner_id)
    replayed = await transaction_log.replay_balance(db, account.id)

    return {
        "account_number": account.account_number,
        "balance": account.balance,
        "replayed_balance": replayed,
        "match": account.balance == replayed,
        "currency": settings.CURRENCY,
    }


async def get_owner_summary(db: AsyncSession, owner_id: str) -> dict:
    """Account count and total balance across an owner's accounts."""
    accounts = await list_accounts_for_owner(db, owner_id)
    return {
        "owner_id": owner_id,
        "account_count": len(accounts),
        "total_balance": sum(account.balance for account in accounts),
        "currency": settings.CURRENCY,
    }
