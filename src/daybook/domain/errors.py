"""Shared domain error messages and error types."""

from enum import Enum


class ErrorKind(str, Enum):
    """Closed set of failure categories reported by the engine."""

    VALIDATION = "validation"
    REFERENTIAL_INTEGRITY = "referential_integrity"
    HAS_DEPENDENTS = "has_dependents"
    NOT_FOUND = "not_found"
    STORE = "store"


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """

    kind: ErrorKind = ErrorKind.STORE


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""

    kind = ErrorKind.VALIDATION


class ReferentialIntegrityError(DomainError):
    """A reference points at a record that does not exist or does not match."""

    kind = ErrorKind.REFERENTIAL_INTEGRITY


class HasDependentsError(DomainError):
    """Operation blocked due to dependent domain data."""

    kind = ErrorKind.HAS_DEPENDENTS


class NotFoundError(DomainError):
    """Requested domain entity does not exist."""

    kind = ErrorKind.NOT_FOUND


class StoreError(DomainError):
    """Any failure of the underlying store not classified above."""

    kind = ErrorKind.STORE


def main_account_not_found(main_account_id: int) -> str:
    """Return message for missing main account."""
    return f"Main account {main_account_id} not found"


def sub_account_not_found(sub_account_id: int) -> str:
    """Return message for missing sub account."""
    return f"Sub account {sub_account_id} not found"


def transaction_not_found(transaction_id: int) -> str:
    """Return message for missing transaction."""
    return f"Transaction {transaction_id} not found"


def archived_transaction_not_found(original_id: int) -> str:
    """Return message when nothing is archived under an original ID."""
    return f"No deleted transaction found for transaction {original_id}"


def sub_account_parent_mismatch(sub_account_id: int, main_account_id: int) -> str:
    """Return message when a sub account belongs to another main account."""
    return f"Sub account {sub_account_id} does not belong to main account {main_account_id}"


def _plural(count: int, noun: str) -> str:
    return f"{count} {noun}{'s' if count != 1 else ''}"


def main_account_delete_blocked(
    main_account_id: int, sub_account_count: int, transaction_count: int
) -> str:
    """Return message when a main account has sub accounts or transactions."""
    if sub_account_count > 0:
        dependents = _plural(sub_account_count, "sub account")
    else:
        dependents = _plural(transaction_count, "transaction")
    return (
        f"Cannot delete main account {main_account_id}: it has {dependents}. "
        "Please reassign or delete them first."
    )


def sub_account_delete_blocked(sub_account_id: int, transaction_count: int) -> str:
    """Return message when a sub account has transactions."""
    return (
        f"Cannot delete sub account {sub_account_id}: it has "
        f"{_plural(transaction_count, 'transaction')}. "
        "Please reassign or delete them first."
    )
