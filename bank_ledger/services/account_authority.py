"""
Account authority — the only writer of the ledger.

THIS IS THE MOST CRITICAL FILE IN THE PROJECT. It handles:
  - Opening accounts against active products
  - Deposits and withdrawals (balance enforcement: no negative balances)
  - Account status changes

Atomicity:
  Every balance change and its transaction record are written inside the
  SAME database transaction (the request's session, committed by get_db).
  A reader therefore never sees a new balance without its transaction, or
  a transaction without its balance. A failed operation writes nothing.

Per-account ordering (optimistic concurrency):
  Each attempt reads the account fresh, validates the request against that
  snapshot, then writes the new balance only if the account's version is
  still the one it read. If another operation committed in between, the
  write matches no row, and the attempt is repeated from the read — so a
  withdrawal is always validated against the balance it actually changes.
  After settings.MAX_UPDATE_RETRIES lost races the caller gets
  ConcurrentUpdateError. Operations on different accounts never touch the
  same row and proceed independently.

  No lock is held while waiting on the database, which is why this is
  preferred over SELECT ... FOR UPDATE here.

Validation order:
  1. 0 < amount <= MAX_BALANCE  (InvalidAmountError — before touching storage)
  2. account exists             (AccountNotFoundError)
  3. account is ACTIVE          (AccountNotActiveError)
  4. amount <= balance          (InsufficientFundsError — withdrawals only)
     balance + amount <= MAX_BALANCE  (BalanceLimitExceededError — deposits only)
"""

import logging
import random
import string
from collections.abc import Awaitable, Callable

from sqlalchemy.ext.asyncio import AsyncSession

from bank_ledger.config import settings
from bank_ledger.exceptions import (
    AccountNotActiveError,
    BalanceLimitExceededError,
    ConcurrentUpdateError,
    InsufficientFundsError,
    InvalidAmountError,
    InvalidStatusTransitionError,
    ProductInactiveError,
    VersionConflictError,
)
from bank_ledger.models.account import MAX_BALANCE, Account, AccountStatus
from bank_ledger.models.transaction import Transaction, TransactionType
from bank_ledger.services import ledger_store, product_service, transaction_log

logger = logging.getLogger(__name__)

# Allowed status changes; CLOSED is terminal.
_STATUS_TRANSITIONS = {
    AccountStatus.ACTIVE: {AccountStatus.INACTIVE, AccountStatus.CLOSED},
    AccountStatus.INACTIVE: {AccountStatus.ACTIVE, AccountStatus.CLOSED},
    AccountStatus.CLOSED: set(),
}


def _generate_account_number() -> str:
    """
    Generate a random account number of settings.ACCOUNT_NUMBER_LENGTH digits.

    Random rather than sequential to avoid account-number guessing.
    """
    return "".join(random.choices(string.digits, k=settings.ACCOUNT_NUMBER_LENGTH))


async def open_account(
    db: AsyncSession,
    owner_id: str,
    product_id: int,
) -> Account:
    """
    Open a new account for an owner against a product.

    The account starts ACTIVE with a zero balance and no transactions.

    Args:
        db: Database session.
        owner_id: The authenticated owner's identity reference.
        product_id: The product to open the account against.

    Returns:
        The newly created Account.

    Raises:
        ProductNotFoundError: If the product doesn't exist.
        ProductInactiveError: If the product is not open for new accounts.
    """
    product = await product_service.get_product(db, product_id)
    if not product.is_active:
        raise ProductInactiveError(product_id)

    # Generate a unique account number (retry if collision, extremely unlikely)
    for _ in range(10):
        account_number = _generate_account_number()
        if not await ledger_store.account_number_exists(db, account_number):
            break
    else:
        raise RuntimeError("Failed to generate a unique account number")

    account = Account(
        account_number=account_number,
        owner_id=owner_id,
        product=product,
        balance=0,
        status=AccountStatus.ACTIVE,
        version=0,
    )
    await ledger_store.create_account(db, account)

    logger.info(
        "Opened account %s for owner %s on product %s",
        account.account_number, owner_id, product_id,
    )
    return account


async def deposit(
    db: AsyncSession,
    account_number: str,
    amount: int,
    description: str | None = None,
) -> tuple[Account, Transaction]:
    """
    Add money to an account.

    Returns:
        The updated Account and the DEPOSIT Transaction that recorded it.

    Raises:
        InvalidAmountError: If amount <= 0 or above MAX_BALANCE.
        AccountNotFoundError: If the account doesn't exist.
        AccountNotActiveError: If the account is not ACTIVE.
        BalanceLimitExceededError: If the new balance would exceed MAX_BALANCE.
        ConcurrentUpdateError: If retries were exhausted.
    """
    return await _apply(db, account_number, amount, TransactionType.DEPOSIT, description)


async def withdraw(
    db: AsyncSession,
    account_number: str,
    amount: int,
    description: str | None = None,
) -> tuple[Account, Transaction]:
    """
    Take money out of an account.

    Withdrawing the exact balance is allowed and leaves it at zero.

    Returns:
        The updated Account and the WITHDRAWAL Transaction that recorded it.

    Raises:
        InvalidAmountError: If amount <= 0 or above MAX_BALANCE.
        AccountNotFoundError: If the account doesn't exist.
        AccountNotActiveError: If the account is not ACTIVE.
        InsufficientFundsError: If amount exceeds the current balance.
        ConcurrentUpdateError: If retries were exhausted.
    """
    return await _apply(db, account_number, amount, TransactionType.WITHDRAWAL, description)


async def change_status(
    db: AsyncSession,
    account_number: str,
    status: AccountStatus,
) -> Account:
    """
    Move an account to a new status.

    ACTIVE and INACTIVE can switch back and forth. Either can be CLOSED,
    but only once the balance is zero. CLOSED is final. Setting the
    current status again is a no-op.

    Raises:
        AccountNotFoundError: If the account doesn't exist.
        InvalidStatusTransitionError: If the transition is not allowed.
        ConcurrentUpdateError: If retries were exhausted.
    """

    async def attempt() -> Account:
        account = await ledger_store.get_account(db, account_number)
        if account.status == status:
            return account
        if status not in _STATUS_TRANSITIONS[account.status]:
            raise InvalidStatusTransitionError(
                f"Account {account_number} cannot go from {account.status.value} to {status.value}"
            )
        if status == AccountStatus.CLOSED and account.balance != 0:
            raise InvalidStatusTransitionError(
                f"Account {account_number} still holds {account.balance}; "
                "withdraw the balance before closing"
            )
        return await ledger_store.put_account(db, account, status=status)

    account = await _with_retries(account_number, attempt)
    logger.info("Account %s is now %s", account_number, account.status.value)
    return account


async def _apply(
    db: AsyncSession,
    account_number: str,
    amount: int,
    txn_type: TransactionType,
    description: str | None,
) -> tuple[Account, Transaction]:
    if amount <= 0 or amount > MAX_BALANCE:
        raise InvalidAmountError(amount)

    async def attempt() -> tuple[Account, Transaction]:
        account = await ledger_store.get_account(db, account_number)

        if account.status != AccountStatus.ACTIVE:
            raise AccountNotActiveError(account_number, account.status.value)

        if txn_type == TransactionType.WITHDRAWAL:
            if amount > account.balance:
                raise InsufficientFundsError(
                    account_number=account_number,
                    requested=amount,
                    available=account.balance,
                )
            new_balance = account.balance - amount
        else:
            new_balance = account.balance + amount
            if new_balance > MAX_BALANCE:
                raise BalanceLimitExceededError(
                    account_number=account_number,
                    requested=amount,
                    balance=account.balance,
                )

        updated = await ledger_store.put_account(db, account, balance=new_balance)

        txn = Transaction(
            account_id=updated.id,
            sequence=updated.version,
            type=txn_type,
            amount=amount,
            balance_after=new_balance,
            description=description,
        )
        await transaction_log.append(db, txn)
        return updated, txn

    account, txn = await _with_retries(account_number, attempt)
    logger.info(
        "%s of %s on account %s, balance now %s",
        txn_type.value, amount, account_number, txn.balance_after,
    )
    return account, txn


async def _with_retries(account_number: str, attempt: Callable[[], Awaitable]):
    """Run an optimistic read-validate-write attempt until it wins or retries run out."""
    attempts = max(1, settings.MAX_UPDATE_RETRIES)
    for n in range(1, attempts + 1):
        try:
            return await attempt()
        except VersionConflictError:
            logger.warning(
                "Lost update race on account %s (attempt %s of %s)",
                account_number, n, attempts,
            )
    raise ConcurrentUpdateError(account_number, attempts)
