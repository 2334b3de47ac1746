"""
Tests for the transaction log.

These tests verify:
  - Listing order (ascending and descending by sequence) and pagination
  - Re-reading the log gives a stable prefix plus new appends
  - One entry per account version
  - Replay from zero reproduces the stored balance
"""

import pytest
import pytest_asyncio

from bank_ledger.exceptions import DuplicateKeyError
from bank_ledger.models.transaction import Transaction, TransactionType
from bank_ledger.services import account_authority, transaction_log


@pytest_asyncio.fixture
async def funded_account(db_session, products):
    """An account with three transactions: +1000, +500, -300 (balance 1200)."""
    account = await account_authority.open_account(db_session, "1", products["savings"].id)
    await account_authority.deposit(db_session, account.account_number, 1000)
    await account_authority.deposit(db_session, account.account_number, 500)
    account, _ = await account_authority.withdraw(db_session, account.account_number, 300)
    return account


class TestListing:

    async def test_ascending_is_replay_order(self, db_session, funded_account):
        txns = await transaction_log.list_by_account(db_session, funded_account.id)

        assert [t.sequence for t in txns] == [1, 2, 3]
        assert [t.type for t in txns] == [
            TransactionType.DEPOSIT,
            TransactionType.DEPOSIT,
            TransactionType.WITHDRAWAL,
        ]
        assert [t.balance_after for t in txns] == [1000, 1500, 1200]

    async def test_descending_is_newest_first(self, db_session, funded_account):
        txns = await transaction_log.list_by_account(
            db_session, funded_account.id, descending=True,
        )
        assert [t.sequence for t in txns] == [3, 2, 1]

    async def test_pagination(self, db_session, funded_account):
        page_one = await transaction_log.list_by_account(
            db_session, funded_account.id, limit=2,
        )
        page_two = await transaction_log.list_by_account(
            db_session, funded_account.id, limit=2, offset=2,
        )

        assert [t.sequence for t in page_one] == [1, 2]
        assert [t.sequence for t in page_two] == [3]

    async def test_requery_is_stable_prefix(self, db_session, funded_account):
        before = await transaction_log.list_by_account(db_session, funded_account.id)

        await account_authority.deposit(db_session, funded_account.account_number, 50)
        after = await transaction_log.list_by_account(db_session, funded_account.id)

        assert [t.id for t in after[: len(before)]] == [t.id for t in before]
        assert len(after) == len(before) + 1
        assert after[-1].amount == 50

    async def test_count(self, db_session, funded_account):
        assert await transaction_log.count_by_account(db_session, funded_account.id) == 3


class TestAppend:

    async def test_duplicate_sequence_rejected(self, db_session, funded_account):
        duplicate = Transaction(
            account_id=funded_account.id,
            sequence=3,
            type=TransactionType.DEPOSIT,
            amount=1,
            balance_after=1201,
        )
        with pytest.raises(DuplicateKeyError):
            await transaction_log.append(db_session, duplicate)


class TestReplay:

    async def test_replay_matches_balance(self, db_session, funded_account):
        assert await transaction_log.replay_balance(db_session, funded_account.id) == 1200
        assert funded_account.balance == 1200

    async def test_replay_of_new_account_is_zero(self, db_session, products):
        account = await account_authority.open_account(db_session, "1", products["savings"].id)
        assert await transaction_log.replay_balance(db_session, account.id) == 0
