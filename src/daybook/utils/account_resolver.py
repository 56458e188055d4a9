"""Utility for resolving account names to IDs."""

from daybook.domain.accounts import AccountDirectory
from daybook.domain.entities import MainAccount, SubAccount
from daybook.domain.errors import NotFoundError


def _as_id(account: str | int) -> int | None:
    if isinstance(account, int):
        return account
    try:
        return int(account)
    except (TypeError, ValueError):
        return None


def resolve_main_account(directory: AccountDirectory, account: str | int) -> MainAccount:
    """Resolve a main account name or ID against the directory's fetched list.

    Raises:
        NotFoundError: If no main account matches
    """
    account_id = _as_id(account)
    if account_id is not None:
        found = directory.get_main_account_by_id(account_id)
        if found is None:
            raise NotFoundError(f"Main account ID {account_id} not found")
        return found

    for acc in directory.main_accounts:
        if acc.name == account:
            return acc
    raise NotFoundError(f"Main account '{account}' not found")


def resolve_sub_account(
    directory: AccountDirectory, account: str | int, main_account_id: int | None = None
) -> SubAccount:
    """Resolve a sub account name or ID.

    Names are looked up under ``main_account_id`` when given, since the same
    name may exist under several main accounts.

    Raises:
        NotFoundError: If no sub account matches
    """
    account_id = _as_id(account)
    if account_id is not None:
        found = directory.get_sub_account_by_id(account_id)
        if found is None:
            raise NotFoundError(f"Sub account ID {account_id} not found")
        return found

    candidates = directory.sub_accounts
    if main_account_id is not None:
        candidates = directory.sub_accounts_for(main_account_id)
    for acc in candidates:
        if acc.name == account:
            return acc
    raise NotFoundError(f"Sub account '{account}' not found")
