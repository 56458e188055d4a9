"""Tests for soft delete and undo."""

from datetime import date
from decimal import Decimal

import pytest

from daybook.domain.entities import TransactionType
from daybook.domain.errors import NotFoundError, ReferentialIntegrityError, StoreError


@pytest.fixture
def failing():
    """Build an async stand-in that always raises a store error."""

    def build(message="database is locked"):
        async def fail(*args, **kwargs):
            raise StoreError(message)

        return fail

    return build


class TestDelete:
    @pytest.mark.asyncio
    async def test_delete_archives_and_removes(self, archive, ledger, temp_db, sample_transactions):
        rent = sample_transactions["rent"]
        await ledger.fetch_transactions()

        assert await archive.delete_transaction(rent.id) is True

        assert await temp_db.get_transaction(rent.id) is None
        assert rent.id not in {t.id for t in ledger.transactions}
        assert ledger.total_debit == Decimal("42.50")

        entries = await archive.list_archived()
        assert len(entries) == 1
        assert entries[0].original_id == rent.id
        assert entries[0].transaction_data["description"] == "rent"
        assert entries[0].transaction_data["amount"] == "500.00"

    @pytest.mark.asyncio
    async def test_delete_requires_cached_transaction(self, archive, temp_db, sample_transactions):
        # Ledger has not been fetched yet
        assert await archive.delete_transaction(sample_transactions["rent"].id) is False
        assert isinstance(archive.error, NotFoundError)
        assert await temp_db.get_transaction(sample_transactions["rent"].id) is not None
        assert await archive.list_archived() == []

    @pytest.mark.asyncio
    async def test_archive_failure_leaves_live_row(
        self, archive, ledger, temp_db, sample_transactions, monkeypatch, failing
    ):
        await ledger.fetch_transactions()
        monkeypatch.setattr(temp_db, "archive_transaction", failing())

        assert await archive.delete_transaction(sample_transactions["rent"].id) is False
        assert isinstance(archive.error, StoreError)
        assert await temp_db.get_transaction(sample_transactions["rent"].id) is not None

    @pytest.mark.asyncio
    async def test_live_delete_failure_leaves_both(
        self, archive, ledger, temp_db, sample_transactions, monkeypatch, failing
    ):
        rent = sample_transactions["rent"]
        await ledger.fetch_transactions()
        monkeypatch.setattr(temp_db, "delete_transaction", failing())

        assert await archive.delete_transaction(rent.id) is False
        assert isinstance(archive.error, StoreError)
        assert await temp_db.get_transaction(rent.id) is not None
        entries = await temp_db.list_archived_transactions()
        assert [e.original_id for e in entries] == [rent.id]


class TestUndo:
    @pytest.mark.asyncio
    async def test_round_trip_restores_fields_with_new_id(self, archive, ledger, temp_db, sample_transactions):
        rent = sample_transactions["rent"]
        await ledger.fetch_transactions()
        debit_before = ledger.total_debit

        await archive.delete_transaction(rent.id)
        assert await archive.undo_transaction(rent.id) is True

        restored = [t for t in ledger.transactions if t.description == "rent"]
        assert len(restored) == 1
        restored = restored[0]
        assert restored.id != rent.id
        assert restored.date == date(2024, 1, 10)
        assert restored.main_account_id == rent.main_account_id
        assert restored.sub_account_id == rent.sub_account_id
        assert restored.amount == Decimal("500.00")
        assert restored.type == TransactionType.DEBIT
        assert restored.created_by == "alice"
        assert restored.created_at == rent.created_at
        assert ledger.total_debit == debit_before
        assert await archive.list_archived() == []

    @pytest.mark.asyncio
    async def test_restored_id_is_never_reused(self, archive, ledger, temp_db, sample_transactions):
        groceries = sample_transactions["groceries"]
        await ledger.fetch_transactions()

        # Deleting the highest id must not let the restore take it again
        await archive.delete_transaction(groceries.id)
        await archive.undo_transaction(groceries.id)

        assert await temp_db.get_transaction(groceries.id) is None
        assert max(t.id for t in ledger.transactions) > groceries.id

    @pytest.mark.asyncio
    async def test_nothing_archived(self, archive, sample_transactions):
        assert await archive.undo_transaction(sample_transactions["rent"].id) is False
        assert isinstance(archive.error, NotFoundError)

    @pytest.mark.asyncio
    async def test_restore_failure_keeps_archive_entry(self, archive, ledger, temp_db, accounts, sample_transactions):
        rent = sample_transactions["rent"]
        await ledger.fetch_transactions()
        await archive.delete_transaction(rent.id)
        await temp_db.delete_sub_account(accounts["rent"].id)

        assert await archive.undo_transaction(rent.id) is False
        assert isinstance(archive.error, ReferentialIntegrityError)
        assert [e.original_id for e in await archive.list_archived()] == [rent.id]
        assert await temp_db.count_transactions() == 2

    @pytest.mark.asyncio
    async def test_cleanup_failure_still_succeeds(
        self, archive, ledger, temp_db, sample_transactions, monkeypatch, failing
    ):
        rent = sample_transactions["rent"]
        await ledger.fetch_transactions()
        await archive.delete_transaction(rent.id)
        monkeypatch.setattr(temp_db, "delete_archived_transaction", failing())

        assert await archive.undo_transaction(rent.id) is True
        assert archive.error is None
        assert await temp_db.count_transactions() == 3
        # Stale entry remains
        assert len(await temp_db.list_archived_transactions()) == 1

    @pytest.mark.asyncio
    async def test_latest_snapshot_wins(self, archive, ledger, temp_db, sample_transactions):
        rent = sample_transactions["rent"]
        await ledger.fetch_transactions()
        await archive.delete_transaction(rent.id)

        # A second snapshot for the same original id, e.g. left behind by a failed cleanup
        snapshot = dict((await temp_db.list_archived_transactions())[0].transaction_data)
        snapshot["description"] = "rent (corrected)"
        await temp_db.archive_transaction(original_id=rent.id, transaction_data=snapshot)

        assert await archive.undo_transaction(rent.id) is True
        descriptions = {t.description for t in ledger.transactions}
        assert "rent (corrected)" in descriptions
        assert "rent" not in descriptions

        # Only the consumed entry is removed
        remaining = await temp_db.list_archived_transactions()
        assert [e.transaction_data["description"] for e in remaining] == ["rent"]

    @pytest.mark.asyncio
    async def test_repeated_cycles(self, archive, ledger, sample_transactions):
        await ledger.fetch_transactions()
        current_id = sample_transactions["rent"].id

        for _ in range(3):
            assert await archive.delete_transaction(current_id) is True
            assert await archive.undo_transaction(current_id) is True
            current_id = next(t.id for t in ledger.transactions if t.description == "rent")

        assert len(ledger.transactions) == 3
        assert ledger.balance == Decimal("457.50")
        assert await archive.list_archived() == []


class TestListArchived:
    @pytest.mark.asyncio
    async def test_newest_first_with_limit(self, archive, ledger, sample_transactions):
        await ledger.fetch_transactions()
        await archive.delete_transaction(sample_transactions["salary"].id)
        await archive.delete_transaction(sample_transactions["groceries"].id)

        entries = await archive.list_archived()
        assert [e.original_id for e in entries] == [
            sample_transactions["groceries"].id,
            sample_transactions["salary"].id,
        ]
        assert len(await archive.list_archived(limit=1)) == 1
