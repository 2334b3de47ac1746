"""
Ledger store — persistence of Account records.

Accounts are reachable by two keys that resolve to the same row:
  - account_number: the external-facing lookup path
  - id (UUID): the internal identifier the transaction log references

Fresh reads:
  Every read uses populate_existing, so an Account already sitting in the
  session's identity map is overwritten with the row as it is now. The
  account authority relies on this when it re-reads after losing a race.

Conditional writes:
  put_account() only updates the row if its version still matches the
  version on the in-memory Account, and bumps the version when it does:

      UPDATE accounts SET ..., version = :v + 1
       WHERE id = :id AND version = :v

  Zero rows updated means another writer committed first, which is
  reported as VersionConflictError. No row lock is held between the read
  and the write.

Storage failures:
  Driver-level connectivity errors are re-raised as StorageError so callers
  handle one exception type for "the database is unavailable".
"""

import logging
import uuid
from datetime import datetime, timezone

from sqlalchemy import select, update, exists
from sqlalchemy.exc import IntegrityError, InterfaceError, OperationalError
from sqlalchemy.ext.asyncio import AsyncSession

from bank_ledger.exceptions import (
    AccountNotFoundError,
    DuplicateKeyError,
    StorageError,
    VersionConflictError,
)
from bank_ledger.models.account import Account

logger = logging.getLogger(__name__)


async def get_account(db: AsyncSession, account_number: str) -> Account:
    """
    Get an account by its account number.

    Raises:
        AccountNotFoundError: If no account has this number.
    """
    account = await _fetch_one(
        db, select(Account).where(Account.account_number == account_number)
    )
    if account is None:
        raise AccountNotFoundError(account_number)
    return account


async def get_account_by_id(db: AsyncSession, account_id: uuid.UUID) -> Account:
    """
    Get an account by its internal ID.

    Raises:
        AccountNotFoundError: If no account has this ID.
    """
    account = await _fetch_one(db, select(Account).where(Account.id == account_id))
    if account is None:
        raise AccountNotFoundError(account_id)
    return account


async def list_accounts_by_owner(db: AsyncSession, owner_id: str) -> list[Account]:
    """All accounts belonging to an owner, oldest first."""
    try:
        result = await db.execute(
            select(Account)
            .where(Account.owner_id == owner_id)
            .order_by(Account.created_at, Account.account_number)
            .execution_options(populate_existing=True)
        )
    except (OperationalError, InterfaceError) as exc:
        raise StorageError() from exc
    return list(result.scalars().all())


async def account_number_exists(db: AsyncSession, account_number: str) -> bool:
    try:
        result = await db.execute(
            select(exists().where(Account.account_number == account_number))
        )
    except (OperationalError, InterfaceError) as exc:
        raise StorageError() from exc
    return bool(result.scalar())


async def create_account(db: AsyncSession, account: Account) -> Account:
    """
    Insert a new account.

    Raises:
        DuplicateKeyError: If the ID or account number is already taken.
    """
    db.add(account)
    try:
        await db.flush()
    except IntegrityError as exc:
        raise DuplicateKeyError(
            f"Account {account.account_number} already exists"
        ) from exc
    except (OperationalError, InterfaceError) as exc:
        raise StorageError() from exc
    return account


async def put_account(db: AsyncSession, account: Account, **changes) -> Account:
    """
    Write changed columns of an account, conditional on its version.

    Args:
        db: Database session.
        account: The account as it was read; its `version` is the
                 expected current version of the row.
        **changes: Column values to set (e.g. balance=..., status=...).

    Returns:
        The account re-read from the row, carrying the new version.

    Raises:
        VersionConflictError: If the row's version no longer matches.
    """
    expected_version = account.version
    try:
        result = await db.execute(
            update(Account)
            .where(Account.id == account.id)
            .where(Account.version == expected_version)
            .values(
                version=expected_version + 1,
                updated_at=datetime.now(timezone.utc),
                **changes,
            )
            .execution_options(synchronize_session=False)
        )
    except (OperationalError, InterfaceError) as exc:
        raise StorageError() from exc

    if result.rowcount != 1:
        logger.debug(
            "Stale write to account %s at version %s",
            account.account_number, expected_version,
        )
        raise VersionConflictError(account.account_number, expected_version)

    return await get_account_by_id(db, account.id)


async def _fetch_one(db: AsyncSession, statement) -> Account | None:
    try:
        result = await db.execute(statement.execution_options(populate_existing=True))
    except (OperationalError, InterfaceError) as exc:
        raise StorageError() from exc
    return result.scalar_one_or_none()
