"""Utility for resolving account names to IDs."""

from virman.domain.account import AccountService
from virman.domain.errors import NotFoundError, account_name_not_found


def resolve_account(account_service: AccountService, account: str) -> str:
    """Resolve an account id or display name to the account id.

    Ids are tried first; inactive accounts are still resolvable so that
    their history can be listed.

    Args:
        account_service: AccountService instance
        account: Account id or unique account name

    Returns:
        Account ID

    Raises:
        NotFoundError: If no account has that id or name
    """
    account = account.strip()
    if account_service.get_account(account) is not None:
        return account

    for acc in account_service.list_accounts(include_inactive=True):
        if acc.name == account:
            return acc.id

    raise NotFoundError(account_name_not_found(account))
