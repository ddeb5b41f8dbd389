"""Tests for AccountService."""

import pytest
from decimal import Decimal

from virman.domain.account import parse_account_type, parse_currency
from virman.domain.entities import AccountType
from virman.domain.errors import ConflictError, NotFoundError, ValidationError
from virman.utils.account_resolver import resolve_account


def test_create_account_normalizes_fields(account_service):
    account = account_service.create_account(
        account_type="Company",
        name="  Company Main ",
        bank_name="Yapı Kredi",
        currency="try",
        balance="50,000",
    )

    assert account.account_type == AccountType.COMPANY
    assert account.name == "Company Main"
    assert account.currency == "TRY"
    assert account.balance == Decimal("50000")


def test_create_account_defaults_to_zero_balance(account_service):
    account = account_service.create_account(
        account_type=AccountType.PERSONAL, name="Cash", bank_name="Cash", currency="TRY"
    )
    assert account.balance == Decimal("0")


@pytest.mark.parametrize(
    "overrides,message",
    [
        ({"account_type": "savings"}, "Invalid account type"),
        ({"account_type": None}, "Account type is required"),
        ({"name": "  "}, "Account name is required"),
        ({"bank_name": ""}, "Bank name is required"),
        ({"currency": "TL"}, "Invalid currency code"),
        ({"currency": None}, "Currency is required"),
        ({"balance": "1.00001"}, "more than 4 decimal places"),
    ],
)
def test_create_account_validation(account_service, overrides, message):
    fields = {
        "account_type": "personal",
        "name": "Cash",
        "bank_name": "Cash",
        "currency": "TRY",
        "balance": "0",
    }
    fields.update(overrides)

    with pytest.raises(ValidationError, match=message):
        account_service.create_account(**fields)
    assert account_service.list_accounts(include_inactive=True) == []


def test_require_account_missing(account_service):
    with pytest.raises(NotFoundError, match="Account missing not found"):
        account_service.require_account("missing")


def test_rename_account(account_service, open_account):
    account = open_account("Cash")

    account_service.rename_account(account.id, "Wallet", bank_name="Home")

    renamed = account_service.get_account(account.id)
    assert renamed.name == "Wallet"
    assert renamed.bank_name == "Home"


def test_rename_account_to_existing_name(account_service, open_account):
    open_account("Cash")
    other = open_account("Bank")

    with pytest.raises(ConflictError):
        account_service.rename_account(other.id, "Cash")


def test_rename_missing_account(account_service):
    with pytest.raises(NotFoundError):
        account_service.rename_account("missing", "Anything")


def test_delete_account_without_history_removes_it(account_service, open_account):
    account = open_account("Temp")

    assert account_service.delete_account(account.id) is False
    assert account_service.get_account(account.id) is None


def test_delete_account_with_history_deactivates_it(account_service, open_account):
    account = open_account("Savings", "500")

    assert account_service.delete_account(account.id) is True

    kept = account_service.get_account(account.id)
    assert kept.is_active is False
    assert kept.balance == Decimal("500")
    assert account_service.list_accounts() == []


def test_deactivate_account(account_service, open_account):
    account = open_account("Cash")
    account_service.deactivate_account(account.id)
    assert account_service.get_account(account.id).is_active is False


def test_resolve_account_by_id_and_name(account_service, open_account):
    account = open_account("Company Main")

    assert resolve_account(account_service, account.id) == account.id
    assert resolve_account(account_service, "Company Main") == account.id

    account_service.deactivate_account(account.id)
    assert resolve_account(account_service, "Company Main") == account.id


def test_resolve_unknown_account(account_service):
    with pytest.raises(NotFoundError, match="'Nowhere' not found"):
        resolve_account(account_service, "Nowhere")


def test_parse_helpers():
    assert parse_account_type(AccountType.PERSONAL) is AccountType.PERSONAL
    assert parse_account_type(" PERSONAL ") is AccountType.PERSONAL
    assert parse_currency(" usd ") == "USD"
    with pytest.raises(ValidationError):
        parse_currency("US1")
