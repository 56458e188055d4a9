"""Ledger store: recording, filtering and aggregating transactions."""

from datetime import date
from decimal import Decimal, InvalidOperation
from typing import TYPE_CHECKING, Any, Optional

from daybook.domain.aggregation import calculate_totals, running_balance
from daybook.domain.entities import (
    LedgerTotals,
    Transaction,
    TransactionFilters,
    TransactionType,
    TransactionWithDetails,
)
from daybook.domain.errors import (
    DomainError,
    NotFoundError,
    ReferentialIntegrityError,
    ValidationError,
    main_account_not_found,
    sub_account_not_found,
    sub_account_parent_mismatch,
    transaction_not_found,
)
from daybook.logging_setup import get_logger

if TYPE_CHECKING:
    from daybook.database.base import Database

_logger = get_logger("daybook.ledger")

MUTABLE_FIELDS = frozenset(
    {"date", "main_account_id", "sub_account_id", "description", "amount", "type"}
)


# Amounts are stored as Numeric(12, 2)
CENT = Decimal("0.01")
MAX_AMOUNT = Decimal("9999999999.99")


def validate_amount(amount: Any) -> Decimal:
    """Return ``amount`` as a Decimal with two decimal places.

    Rejects non-positive and non-finite values, values with more than two
    decimal places and values too large for the amount column.
    """
    try:
        value = amount if isinstance(amount, Decimal) else Decimal(str(amount))
    except (InvalidOperation, ValueError) as e:
        raise ValidationError(f"Amount must be a number, got {amount!r}") from e
    if not value.is_finite() or value <= 0:
        raise ValidationError(f"Amount must be a positive number, got {amount}")
    if value > MAX_AMOUNT:
        raise ValidationError(f"Amount must not exceed {MAX_AMOUNT}, got {amount}")
    quantized = value.quantize(CENT)
    if quantized != value:
        raise ValidationError(f"Amount must have at most two decimal places, got {amount}")
    return quantized


def validate_type(value: Any) -> TransactionType:
    """Return ``value`` as a TransactionType."""
    try:
        return TransactionType(value)
    except ValueError as e:
        raise ValidationError(f"Transaction type must be 'credit' or 'debit', got {value!r}") from e


class LedgerStore:
    """Owns the live transaction view and its aggregates.

    Every read passes its result through the aggregation functions, and every
    successful write re-fetches the whole view under the remembered filters
    instead of patching local state.
    """

    def __init__(self, db: "Database"):
        """Initialize ledger store.

        Args:
            db: Database instance
        """
        self.db = db
        self.transactions: list[TransactionWithDetails] = []
        self.totals = LedgerTotals()
        self.running_balance: dict[int, Decimal] = {}
        self.filters = TransactionFilters()
        self.error: Optional[DomainError] = None
        self.loading = False
        self._active = True

    @property
    def total_credit(self) -> Decimal:
        return self.totals.total_credit

    @property
    def total_debit(self) -> Decimal:
        return self.totals.total_debit

    @property
    def balance(self) -> Decimal:
        return self.totals.balance

    def close(self) -> None:
        """Stop accepting results; fetches still in flight are discarded."""
        self._active = False

    def _fail(self, action: str, error: DomainError) -> None:
        self.error = error
        _logger.error("Failed to %s: %s", action, error)

    async def fetch_transactions(
        self, filters: Optional[TransactionFilters] = None
    ) -> Optional[list[TransactionWithDetails]]:
        """Load transactions (newest first) joined with their accounts.

        Once the store is closed, results are returned but no state is touched.

        Args:
            filters: Optional filters; when given they replace the remembered
                filter set used by later refreshes

        Returns:
            The fetched transactions, or None on failure
        """
        query = filters if filters is not None else self.filters
        if not self._active:
            _logger.debug("Fetching on a closed ledger store; state is left untouched")
            try:
                return await self.db.list_transactions(query)
            except DomainError as e:
                _logger.debug("Fetch on closed ledger store failed: %s", e)
                return None

        self.filters = query
        self.loading = True
        self.error = None
        try:
            transactions = await self.db.list_transactions(query)
        except DomainError as e:
            if self._active:
                self._fail("load transactions", e)
            return None
        finally:
            if self._active:
                self.loading = False

        if not self._active:
            _logger.debug("Discarding transactions fetched after close")
            return transactions

        self.transactions = transactions
        self.totals = calculate_totals(transactions)
        self.running_balance = running_balance(transactions)
        return transactions

    async def refresh(self) -> Optional[list[TransactionWithDetails]]:
        """Re-run the current view."""
        return await self.fetch_transactions()

    async def apply_filters(self, filters: TransactionFilters) -> None:
        """Replace the filter set and re-fetch."""
        await self.fetch_transactions(filters)

    def get_transaction_by_id(self, transaction_id: int) -> Optional[TransactionWithDetails]:
        """Look up a transaction in the current view."""
        for txn in self.transactions:
            if txn.id == transaction_id:
                return txn
        return None

    async def _check_accounts(self, main_account_id: int, sub_account_id: int) -> None:
        """Both accounts must exist and the sub account must belong to the main account."""
        if await self.db.get_main_account(main_account_id) is None:
            raise ReferentialIntegrityError(main_account_not_found(main_account_id))
        sub_account = await self.db.get_sub_account(sub_account_id)
        if sub_account is None:
            raise ReferentialIntegrityError(sub_account_not_found(sub_account_id))
        if sub_account.main_account_id != main_account_id:
            raise ReferentialIntegrityError(sub_account_parent_mismatch(sub_account_id, main_account_id))

    async def create_transaction(
        self,
        date: date,
        main_account_id: int,
        sub_account_id: int,
        description: str,
        amount: Decimal,
        type: TransactionType | str,
        created_by: str,
    ) -> Optional[Transaction]:
        """Record a new transaction.

        Returns:
            The stored transaction, or None on failure
        """
        try:
            if not created_by:
                raise ValidationError("created_by is required")
            checked_amount = validate_amount(amount)
            checked_type = validate_type(type)
            await self._check_accounts(main_account_id, sub_account_id)
            txn = await self.db.create_transaction(
                date=date,
                main_account_id=main_account_id,
                sub_account_id=sub_account_id,
                description=description or "",
                amount=checked_amount,
                type=checked_type,
                created_by=created_by,
            )
        except DomainError as e:
            self._fail("create transaction", e)
            return None

        _logger.info("Created transaction %s (%s %s)", txn.id, txn.type.value, txn.amount)
        await self.refresh()
        return txn

    async def update_transaction(self, transaction_id: int, **fields: Any) -> bool:
        """Update non-identity fields of a transaction in place.

        Accepted fields: date, main_account_id, sub_account_id, description,
        amount, type.
        """
        try:
            rejected = set(fields) - MUTABLE_FIELDS
            if rejected:
                raise ValidationError(f"Fields cannot be updated: {', '.join(sorted(rejected))}")
            if not fields:
                raise ValidationError("Nothing to update")

            changes = dict(fields)
            if "amount" in changes:
                changes["amount"] = validate_amount(changes["amount"])
            if "type" in changes:
                changes["type"] = validate_type(changes["type"])

            if "main_account_id" in changes or "sub_account_id" in changes:
                current = await self.db.get_transaction(transaction_id)
                if current is None:
                    raise NotFoundError(transaction_not_found(transaction_id))
                await self._check_accounts(
                    changes.get("main_account_id", current.main_account_id),
                    changes.get("sub_account_id", current.sub_account_id),
                )

            await self.db.update_transaction(transaction_id, **changes)
        except DomainError as e:
            self._fail("update transaction", e)
            return False

        _logger.info("Updated transaction %s (%s)", transaction_id, ", ".join(sorted(fields)))
        await self.refresh()
        return True
