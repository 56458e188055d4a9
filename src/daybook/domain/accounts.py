"""Account directory: the two-level chart of accounts."""

from typing import TYPE_CHECKING, Optional

from daybook.domain.entities import MainAccount, SubAccount
from daybook.domain.errors import (
    DomainError,
    HasDependentsError,
    NotFoundError,
    ValidationError,
    main_account_delete_blocked,
    main_account_not_found,
    sub_account_delete_blocked,
    sub_account_not_found,
)
from daybook.logging_setup import get_logger

if TYPE_CHECKING:
    from daybook.database.base import Database

_logger = get_logger("daybook.accounts")


def _require_name(name: Optional[str], label: str) -> str:
    if name is None or not name.strip():
        raise ValidationError(f"{label} name is required")
    return name.strip()


class AccountDirectory:
    """Owns main and sub accounts and enforces the hierarchy rules.

    Operations never raise for steady-state failures: they log, keep the
    failure on ``error`` and return ``None``/``False``. The last successfully
    fetched lists are kept in ``main_accounts`` and ``sub_accounts``; every
    successful mutation re-fetches them.

    The dependent checks in ``delete_main_account``/``delete_sub_account`` are
    separate queries issued before the delete, so a dependent created between
    check and delete is not seen by the check. The store's foreign keys still
    reject such a delete, surfacing it as ``ReferentialIntegrityError``.
    """

    def __init__(self, db: "Database"):
        """Initialize account directory.

        Args:
            db: Database instance
        """
        self.db = db
        self.main_accounts: list[MainAccount] = []
        self.sub_accounts: list[SubAccount] = []
        self.error: Optional[DomainError] = None
        self.loading = False
        self._sub_account_filter: Optional[int] = None

    def _fail(self, action: str, error: DomainError) -> None:
        self.error = error
        _logger.error("Failed to %s: %s", action, error)

    async def fetch_main_accounts(self) -> Optional[list[MainAccount]]:
        """Load all main accounts ordered by name."""
        self.loading = True
        self.error = None
        try:
            self.main_accounts = await self.db.list_main_accounts()
            return self.main_accounts
        except DomainError as e:
            self._fail("load main accounts", e)
            return None
        finally:
            self.loading = False

    async def fetch_sub_accounts(self, main_account_id: Optional[int] = None) -> Optional[list[SubAccount]]:
        """Load sub accounts ordered by name, optionally for one main account.

        The filter is remembered and reused when mutations refresh the list.
        """
        self.loading = True
        self.error = None
        self._sub_account_filter = main_account_id
        try:
            self.sub_accounts = await self.db.list_sub_accounts(main_account_id=main_account_id)
            return self.sub_accounts
        except DomainError as e:
            self._fail("load sub accounts", e)
            return None
        finally:
            self.loading = False

    async def refresh(self) -> None:
        """Re-fetch both account lists."""
        await self.fetch_main_accounts()
        await self.fetch_sub_accounts(self._sub_account_filter)

    async def create_main_account(self, name: str, description: Optional[str] = None) -> Optional[MainAccount]:
        """Create a main account."""
        try:
            account = await self.db.create_main_account(
                name=_require_name(name, "Main account"), description=description
            )
        except DomainError as e:
            self._fail("create main account", e)
            return None

        _logger.info("Created main account %s (%s)", account.id, account.name)
        await self.refresh()
        return account

    async def create_sub_account(
        self, name: str, main_account_id: int, description: Optional[str] = None
    ) -> Optional[SubAccount]:
        """Create a sub account under an existing main account.

        A missing parent is rejected by the store and reported as
        ``ReferentialIntegrityError``.
        """
        try:
            account = await self.db.create_sub_account(
                name=_require_name(name, "Sub account"),
                main_account_id=main_account_id,
                description=description,
            )
        except DomainError as e:
            self._fail("create sub account", e)
            return None

        _logger.info(
            "Created sub account %s (%s) under main account %s", account.id, account.name, main_account_id
        )
        await self.refresh()
        return account

    @staticmethod
    def _account_changes(name: Optional[str], description: Optional[str]) -> dict:
        changes = {}
        if name is not None:
            changes["name"] = _require_name(name, "Account")
        if description is not None:
            changes["description"] = description
        if not changes:
            raise ValidationError("Nothing to update")
        return changes

    async def update_main_account(
        self, main_account_id: int, name: Optional[str] = None, description: Optional[str] = None
    ) -> bool:
        """Update the name and/or description of a main account."""
        try:
            await self.db.update_main_account(main_account_id, **self._account_changes(name, description))
        except DomainError as e:
            self._fail("update main account", e)
            return False

        _logger.info("Updated main account %s", main_account_id)
        await self.refresh()
        return True

    async def update_sub_account(
        self, sub_account_id: int, name: Optional[str] = None, description: Optional[str] = None
    ) -> bool:
        """Update the name and/or description of a sub account."""
        try:
            await self.db.update_sub_account(sub_account_id, **self._account_changes(name, description))
        except DomainError as e:
            self._fail("update sub account", e)
            return False

        _logger.info("Updated sub account %s", sub_account_id)
        await self.refresh()
        return True

    async def delete_main_account(self, main_account_id: int) -> bool:
        """Delete a main account that has no sub accounts and no transactions."""
        try:
            if await self.db.get_main_account(main_account_id) is None:
                raise NotFoundError(main_account_not_found(main_account_id))

            sub_account_count = await self.db.count_sub_accounts(main_account_id)
            if sub_account_count > 0:
                raise HasDependentsError(main_account_delete_blocked(main_account_id, sub_account_count, 0))

            transaction_count = await self.db.count_transactions(main_account_id=main_account_id)
            if transaction_count > 0:
                raise HasDependentsError(main_account_delete_blocked(main_account_id, 0, transaction_count))

            await self.db.delete_main_account(main_account_id)
        except DomainError as e:
            self._fail("delete main account", e)
            return False

        _logger.info("Deleted main account %s", main_account_id)
        await self.refresh()
        return True

    async def delete_sub_account(self, sub_account_id: int) -> bool:
        """Delete a sub account that has no transactions."""
        try:
            if await self.db.get_sub_account(sub_account_id) is None:
                raise NotFoundError(sub_account_not_found(sub_account_id))

            transaction_count = await self.db.count_transactions(sub_account_id=sub_account_id)
            if transaction_count > 0:
                raise HasDependentsError(sub_account_delete_blocked(sub_account_id, transaction_count))

            await self.db.delete_sub_account(sub_account_id)
        except DomainError as e:
            self._fail("delete sub account", e)
            return False

        _logger.info("Deleted sub account %s", sub_account_id)
        await self.refresh()
        return True

    def get_main_account_by_id(self, main_account_id: int) -> Optional[MainAccount]:
        """Look up a main account in the fetched list."""
        for account in self.main_accounts:
            if account.id == main_account_id:
                return account
        return None

    def get_sub_account_by_id(self, sub_account_id: int) -> Optional[SubAccount]:
        """Look up a sub account in the fetched list."""
        for account in self.sub_accounts:
            if account.id == sub_account_id:
                return account
        return None

    def sub_accounts_for(self, main_account_id: int) -> list[SubAccount]:
        """Fetched sub accounts belonging to one main account."""
        return [acc for acc in self.sub_accounts if acc.main_account_id == main_account_id]
