"""
Transaction log — append-only storage of Transaction records.

append() is the only mutation. There is no update or delete
function: once a transaction is written it is permanent.

Listing is ordered by the per-account sequence number, ascending (oldest
first, the replay order) or descending (newest first, the display order).
Because sequences only grow, re-running the same query later returns the
same prefix followed by anything appended since.
"""

import uuid

from sqlalchemy import select, func
from sqlalchemy.exc import IntegrityError, InterfaceError, OperationalError
from sqlalchemy.ext.asyncio import AsyncSession

from bank_ledger.exceptions import DuplicateKeyError, StorageError
from bank_ledger.models.transaction import Transaction, TransactionType


async def append(db: AsyncSession, txn: Transaction) -> Transaction:
    """
    Append a transaction to its account's log.

    Raises:
        DuplicateKeyError: If the account already has an entry with this
                           sequence number.
    """
    db.add(txn)
    try:
        await db.flush()
    except IntegrityError as exc:
        raise DuplicateKeyError(
            f"Account {txn.account_id} already has transaction #{txn.sequence}"
        ) from exc
    except (OperationalError, InterfaceError) as exc:
        raise StorageError() from exc
    return txn


async def list_by_account(
    db: AsyncSession,
    account_id: uuid.UUID,
    *,
    descending: bool = False,
    limit: int | None = None,
    offset: int = 0,
) -> list[Transaction]:
    """
    List an account's transactions in sequence order.

    Args:
        db: Database session.
        account_id: The account whose log to read.
        descending: Newest first when True, oldest first otherwise.
        limit: Max number of results (None for all).
        offset: Number of results to skip (for pagination).
    """
    order = Transaction.sequence.desc() if descending else Transaction.sequence.asc()
    query = (
        select(Transaction)
        .where(Transaction.account_id == account_id)
        .order_by(order)
        .offset(offset)
    )
    if limit is not None:
        query = query.limit(limit)

    try:
        result = await db.execute(query)
    except (OperationalError, InterfaceError) as exc:
        raise StorageError() from exc
    return list(result.scalars().all())


async def count_by_account(db: AsyncSession, account_id: uuid.UUID) -> int:
    try:
        result = await db.execute(
            select(func.count()).select_from(Transaction).where(Transaction.account_id == account_id)
        )
    except (OperationalError, InterfaceError) as exc:
        raise StorageError() from exc
    return result.scalar_one()


async def replay_balance(db: AsyncSession, account_id: uuid.UUID) -> int:
    """
    Compute an account's balance by folding its log from zero.

    This is the integrity-check counterpart to the stored balance: the two
    must always agree.
    """
    balance = 0
    for txn in await list_by_account(db, account_id):
        if txn.type == TransactionType.DEPOSIT:
            balance += txn.amount
        else:
            balance -= txn.amount
    return balance
