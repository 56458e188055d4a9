"""Soft delete and undo of transactions, backed by the archive record set.

Per transaction identity::

    Live --delete--> Archived --undo--> Live (new identity)

Neither transition is atomic because the store offers no multi-row
transactions:

- delete inserts the archive entry first and removes the live row second. If
  the removal fails, the transaction is both live and archived; this state is
  logged and reported as a failure, not compensated.
- undo inserts the restored row first and removes the consumed archive entry
  second. If the cleanup fails, the undo still succeeds and the stale entry is
  logged.
"""

from datetime import datetime, UTC
from typing import Optional

from daybook.domain.entities import ArchivedTransaction
from daybook.domain.errors import (
    DomainError,
    NotFoundError,
    archived_transaction_not_found,
    transaction_not_found,
)
from daybook.domain.ledger import LedgerStore
from daybook.domain.snapshot import snapshot_to_transaction_fields, transaction_to_snapshot
from daybook.logging_setup import get_logger

_logger = get_logger("daybook.archive")


class TransactionArchive:
    """Delete/undo workflow layered on a ``LedgerStore``."""

    def __init__(self, ledger: LedgerStore):
        self.ledger = ledger
        self.db = ledger.db
        self.error: Optional[DomainError] = None

    def _fail(self, action: str, error: DomainError) -> None:
        self.error = error
        _logger.error("Failed to %s: %s", action, error)

    async def delete_transaction(self, transaction_id: int) -> bool:
        """Archive a live transaction, then remove it from the ledger.

        The transaction must be part of the ledger's current view.
        """
        self.error = None
        try:
            txn = self.ledger.get_transaction_by_id(transaction_id)
            if txn is None:
                raise NotFoundError(transaction_not_found(transaction_id))

            archived = await self.db.archive_transaction(
                original_id=transaction_id,
                transaction_data=transaction_to_snapshot(txn),
                deleted_at=datetime.now(UTC),
            )
        except DomainError as e:
            self._fail("delete transaction", e)
            return False

        try:
            await self.db.delete_transaction(transaction_id)
        except DomainError as e:
            # Archive entry stays; the live row is untouched
            _logger.error(
                "Transaction %s archived as entry %s but could not be removed: %s",
                transaction_id,
                archived.id,
                e,
            )
            self.error = e
            return False

        _logger.info("Deleted transaction %s (archive entry %s)", transaction_id, archived.id)
        await self.ledger.refresh()
        return True

    async def undo_transaction(self, original_id: int) -> bool:
        """Restore the most recently deleted snapshot of ``original_id``.

        The restored transaction gets a new identity. The archive entry is
        kept if the restore fails.
        """
        self.error = None
        try:
            archived = await self.db.get_latest_archived_transaction(original_id)
            if archived is None:
                raise NotFoundError(archived_transaction_not_found(original_id))

            restored = await self.db.create_transaction(
                **snapshot_to_transaction_fields(archived.transaction_data)
            )
        except DomainError as e:
            self._fail("restore transaction", e)
            return False

        _logger.info("Restored transaction %s as %s", original_id, restored.id)

        try:
            await self.db.delete_archived_transaction(archived.id)
        except DomainError as e:
            _logger.warning("Could not clean up archive entry %s: %s", archived.id, e)

        await self.ledger.refresh()
        return True

    async def list_archived(self, limit: Optional[int] = None) -> Optional[list[ArchivedTransaction]]:
        """Archive entries, newest first."""
        self.error = None
        try:
            return await self.db.list_archived_transactions(limit=limit)
        except DomainError as e:
            self._fail("load deleted transactions", e)
            return None
