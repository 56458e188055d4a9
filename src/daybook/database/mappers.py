"""Mapper functions to convert between domain models and SQLAlchemy models."""

from decimal import Decimal
from typing import Any

from daybook.domain import entities as domain
from daybook.database.models import (
    ArchivedTransaction as ORMArchivedTransaction,
    MainAccount as ORMMainAccount,
    SubAccount as ORMSubAccount,
    Transaction as ORMTransaction,
)


def main_account_to_domain(orm_account: ORMMainAccount) -> domain.MainAccount:
    """Convert SQLAlchemy MainAccount model to domain MainAccount entity."""
    return domain.MainAccount(
        id=orm_account.id,
        name=orm_account.name,
        description=orm_account.description,
        created_at=orm_account.created_at,
        updated_at=orm_account.updated_at,
    )


def sub_account_to_domain(orm_account: ORMSubAccount) -> domain.SubAccount:
    """Convert SQLAlchemy SubAccount model to domain SubAccount entity."""
    return domain.SubAccount(
        id=orm_account.id,
        name=orm_account.name,
        main_account_id=orm_account.main_account_id,
        description=orm_account.description,
        created_at=orm_account.created_at,
        updated_at=orm_account.updated_at,
    )


def _transaction_fields(orm_transaction: ORMTransaction) -> dict[str, Any]:
    return {
        "id": orm_transaction.id,
        "date": orm_transaction.date,
        "main_account_id": orm_transaction.main_account_id,
        "sub_account_id": orm_transaction.sub_account_id,
        "description": orm_transaction.description,
        "amount": Decimal(orm_transaction.amount),
        "type": domain.TransactionType(orm_transaction.type),
        "created_by": orm_transaction.created_by,
        "created_at": orm_transaction.created_at,
        "updated_at": orm_transaction.updated_at,
    }


def transaction_to_domain(orm_transaction: ORMTransaction) -> domain.Transaction:
    """Convert SQLAlchemy Transaction model to domain Transaction entity."""
    return domain.Transaction(**_transaction_fields(orm_transaction))


def transaction_with_details_to_domain(
    orm_transaction: ORMTransaction,
) -> domain.TransactionWithDetails:
    """Convert a Transaction with loaded account relationships."""
    return domain.TransactionWithDetails(
        **_transaction_fields(orm_transaction),
        main_account=main_account_to_domain(orm_transaction.main_account),
        sub_account=sub_account_to_domain(orm_transaction.sub_account),
    )


def archived_transaction_to_domain(
    orm_archived: ORMArchivedTransaction,
) -> domain.ArchivedTransaction:
    """Convert SQLAlchemy ArchivedTransaction model to domain entity."""
    return domain.ArchivedTransaction(
        id=orm_archived.id,
        original_id=orm_archived.original_id,
        transaction_data=dict(orm_archived.transaction_data),
        deleted_at=orm_archived.deleted_at,
    )
