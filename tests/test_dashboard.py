"""Tests for dashboard totals."""

import pytest
from decimal import Decimal

from virman.domain.entities import AccountType
from virman.domain.errors import ValidationError


def test_empty_dashboard(dashboard_service):
    totals = dashboard_service.get_totals()

    assert totals.total_balance == Decimal("0")
    assert totals.subtotals == {AccountType.PERSONAL: Decimal("0"), AccountType.COMPANY: Decimal("0")}
    assert totals.account_count == 0
    assert totals.currency is None


def test_dashboard_totals(dashboard_service, open_account):
    open_account("Cash", "1500")
    open_account("Credit Card", "-300.25")
    open_account("Company Main", "50000", account_type="company")
    open_account("Company Loan", "-10000", account_type="company")
    open_account("Empty")

    totals = dashboard_service.get_totals()

    assert totals.total_balance == Decimal("41199.75")
    assert totals.subtotals[AccountType.PERSONAL] == Decimal("1199.75")
    assert totals.subtotals[AccountType.COMPANY] == Decimal("40000")
    assert totals.total_cash == Decimal("51500")
    assert totals.total_debt == Decimal("10300.25")
    assert totals.cash_account_count == 2
    assert totals.debt_account_count == 2
    assert totals.account_count == 5


def test_dashboard_ignores_inactive_accounts(dashboard_service, account_service, open_account):
    open_account("Cash", "100")
    closed = open_account("Old", "900")
    account_service.deactivate_account(closed.id)

    totals = dashboard_service.get_totals()

    assert totals.total_balance == Decimal("100")
    assert totals.account_count == 1


def test_dashboard_currency_filter(dashboard_service, open_account):
    open_account("Cash", "100", currency="TRY")
    open_account("Dollars", "40", currency="USD")

    totals = dashboard_service.get_totals(currency="usd")

    assert totals.currency == "USD"
    assert totals.total_balance == Decimal("40")
    assert totals.account_count == 1


def test_dashboard_invalid_currency(dashboard_service):
    with pytest.raises(ValidationError):
        dashboard_service.get_totals(currency="dollars")


def test_dashboard_reflects_transfers(dashboard_service, transfer_service, open_account):
    company = open_account("Company Main", "1000", account_type="company")
    cash = open_account("Cash")

    transfer_service.transfer(company.id, cash.id, Decimal("250"))
    totals = dashboard_service.get_totals()

    assert totals.total_balance == Decimal("1000")
    assert totals.subtotals[AccountType.COMPANY] == Decimal("750")
    assert totals.subtotals[AccountType.PERSONAL] == Decimal("250")
