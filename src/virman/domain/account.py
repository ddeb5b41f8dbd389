"""Account domain service."""

import re
from decimal import Decimal
from typing import Optional

from virman.database.base import Database
from virman.domain.entities import Account as AccountEntity, AccountType
from virman.domain.errors import (
    ConflictError,
    NotFoundError,
    ValidationError,
    account_not_found,
)
from virman.utils.amount_parser import quantize_amount

CURRENCY_PATTERN = re.compile(r"^[A-Z]{3}$")


def parse_account_type(value) -> AccountType:
    """Return the AccountType for an enum member or its string value.

    Raises:
        ValidationError: If the type is missing or unknown
    """
    if isinstance(value, AccountType):
        return value
    if not value:
        raise ValidationError("Account type is required")
    try:
        return AccountType(str(value).strip().lower())
    except ValueError:
        allowed = ", ".join(t.value for t in AccountType)
        raise ValidationError(f"Invalid account type '{value}'. Expected one of: {allowed}")


def parse_currency(value: Optional[str]) -> str:
    """Return an upper-cased three-letter currency code.

    Raises:
        ValidationError: If the currency is missing or malformed
    """
    if not value or not value.strip():
        raise ValidationError("Currency is required")
    currency = value.strip().upper()
    if not CURRENCY_PATTERN.match(currency):
        raise ValidationError(f"Invalid currency code '{value}'. Expected three letters, e.g. TRY")
    return currency


def _require_text(value: Optional[str], field: str) -> str:
    if value is None or not value.strip():
        raise ValidationError(f"{field} is required")
    return value.strip()


class AccountService:
    """Service for opening, listing and retiring accounts.

    Balances are never set here; they move only through recorded
    transactions and transfers.
    """

    def __init__(self, db: Database):
        """Initialize account service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_account(
        self,
        account_type,
        name: str,
        bank_name: str,
        currency: str,
        balance=Decimal("0"),
    ) -> AccountEntity:
        """Open a new account.

        Args:
            account_type: AccountType or its value ("personal" / "company")
            name: Display name, unique across accounts
            bank_name: Bank name
            currency: Three-letter currency code
            balance: Opening balance; may be negative (e.g. a credit line)

        Returns:
            The created account

        Raises:
            ValidationError: If a field is missing or invalid
            ConflictError: If account name already exists
        """
        return self.db.create_account(
            account_type=parse_account_type(account_type),
            name=_require_text(name, "Account name"),
            bank_name=_require_text(bank_name, "Bank name"),
            currency=parse_currency(currency),
            opening_balance=quantize_amount(Decimal("0") if balance is None else balance),
        )

    def get_account(self, account_id: str) -> Optional[AccountEntity]:
        """Get account by ID.

        Returns:
            Account entity or None if not found
        """
        return self.db.get_account(account_id)

    def require_account(self, account_id: str) -> AccountEntity:
        """Get account by ID or raise NotFoundError."""
        account = self.db.get_account(account_id)
        if account is None:
            raise NotFoundError(account_not_found(account_id))
        return account

    def list_accounts(self, include_inactive: bool = False) -> list[AccountEntity]:
        """List accounts, active ones only unless asked otherwise."""
        return self.db.list_accounts(include_inactive=include_inactive)

    def rename_account(self, account_id: str, name: str, bank_name: Optional[str] = None) -> None:
        """Rename an account.

        Args:
            account_id: Account ID to rename
            name: New account name
            bank_name: Optional new bank name (if None, bank_name is not updated)

        Raises:
            NotFoundError: If account not found
            ConflictError: If the name already exists
        """
        self.require_account(account_id)
        if bank_name is not None:
            bank_name = _require_text(bank_name, "Bank name")
        self.db.update_account_name(
            account_id=account_id, name=_require_text(name, "Account name"), bank_name=bank_name
        )

    def deactivate_account(self, account_id: str) -> None:
        """Soft-delete an account; its history and balance are kept."""
        self.require_account(account_id)
        self.db.set_account_active(account_id, False)

    def delete_account(self, account_id: str) -> bool:
        """Delete an account, or deactivate it once transactions exist.

        Returns:
            True if the account was soft-deleted, False if it was removed

        Raises:
            NotFoundError: If account not found
        """
        self.require_account(account_id)
        if self.db.get_account_transaction_count(account_id) > 0:
            self.db.set_account_active(account_id, False)
            return True

        try:
            self.db.delete_account(account_id)
        except ConflictError:
            # A transaction landed after the count
            self.db.set_account_active(account_id, False)
            return True
        return False
