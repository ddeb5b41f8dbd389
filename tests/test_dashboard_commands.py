"""Tests for dashboard and verify commands."""

from decimal import Decimal
from virman.cli.main import cli
from virman.domain.account import AccountService


def _invoke(cli_runner, temp_db, *args):
    return cli_runner.invoke(cli, ["--db-path", temp_db.database_path, *args])


def test_dashboard(cli_runner, temp_db):
    service = AccountService(temp_db)
    service.create_account("personal", "Cash", "Cash", "TRY", Decimal("1500"))
    service.create_account("company", "Company Loan", "Garanti", "TRY", Decimal("-10000"))

    result = _invoke(cli_runner, temp_db, "dashboard")

    assert result.exit_code == 0
    assert "Accounts:        2" in result.output
    assert "-8,500.00" in result.output
    assert "1,500.00" in result.output
    assert "10,000.00" in result.output
    assert "(1 account(s))" in result.output


def test_dashboard_currency(cli_runner, temp_db):
    service = AccountService(temp_db)
    service.create_account("personal", "Cash", "Cash", "TRY", Decimal("1500"))
    service.create_account("personal", "Dollars", "Cash", "USD", Decimal("40"))

    result = _invoke(cli_runner, temp_db, "dashboard", "--currency", "USD")

    assert result.exit_code == 0
    assert "Dashboard (USD)" in result.output
    assert "Accounts:        1" in result.output
    assert "40.00 USD" in result.output


def test_verify_consistent(cli_runner, temp_db):
    AccountService(temp_db).create_account("personal", "Cash", "Cash", "TRY", Decimal("10"))

    result = _invoke(cli_runner, temp_db, "verify")

    assert result.exit_code == 0
    assert "Ledger is consistent" in result.output


def test_verify_reports_discrepancy(cli_runner, temp_db):
    account = AccountService(temp_db).create_account("personal", "Cash", "Cash", "TRY", Decimal("10"))
    temp_db.adjust_balance(account.id, Decimal("5"))

    result = _invoke(cli_runner, temp_db, "verify")

    assert result.exit_code == 2
    assert f"Balance mismatch on {account.id}" in result.output


def test_memory_database_url(cli_runner):
    result = cli_runner.invoke(cli, ["--database-url", "memory://", "dashboard"])

    assert result.exit_code == 0
    assert "Accounts:        0" in result.output


def test_invalid_log_level(cli_runner, temp_db):
    result = _invoke(cli_runner, temp_db, "--log-level", "chatty", "dashboard")

    assert result.exit_code == 2
    assert "Unknown log level" in result.output
