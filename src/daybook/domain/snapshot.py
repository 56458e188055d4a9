"""Archive snapshot format.

A deleted transaction is kept as a JSON document and turned back into
insertable fields on undo.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Any

from daybook.domain.entities import Transaction, TransactionType


def transaction_to_snapshot(txn: Transaction) -> dict[str, Any]:
    """Serialize a transaction into a JSON-safe archive document."""
    return {
        "id": txn.id,
        "date": txn.date.isoformat(),
        "main_account_id": txn.main_account_id,
        "sub_account_id": txn.sub_account_id,
        "description": txn.description,
        "amount": str(txn.amount),
        "type": TransactionType(txn.type).value,
        "created_by": txn.created_by,
        "created_at": txn.created_at.isoformat(),
        "updated_at": txn.updated_at.isoformat(),
    }


def snapshot_to_transaction_fields(snapshot: dict[str, Any]) -> dict[str, Any]:
    """Turn an archive document back into fields for a new transaction row.

    The old identity is dropped so the store assigns a fresh one.
    """
    fields = {
        "date": date.fromisoformat(snapshot["date"]),
        "main_account_id": snapshot["main_account_id"],
        "sub_account_id": snapshot["sub_account_id"],
        "description": snapshot.get("description") or "",
        "amount": Decimal(snapshot["amount"]),
        "type": TransactionType(snapshot["type"]),
        "created_by": snapshot["created_by"],
    }
    if snapshot.get("created_at"):
        fields["created_at"] = datetime.fromisoformat(snapshot["created_at"])
    return fields
