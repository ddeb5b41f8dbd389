"""Tests for account commands."""

import pytest
from decimal import Decimal
from virman.cli.main import cli


def _open(cli_runner, db_path, *args):
    return cli_runner.invoke(cli, ["--db-path", db_path, "account", "open", *args])


def test_account_open_with_bank(cli_runner, temp_db):
    """Test opening an account with --bank option."""
    result = _open(
        cli_runner, temp_db.database_path, "Company Main", "--type", "company", "--bank", "Yapı Kredi"
    )

    assert result.exit_code == 0
    assert "Opened account 'Company Main'" in result.output
    assert "ID:" in result.output
    (account,) = temp_db.list_accounts()
    assert account.bank_name == "Yapı Kredi"
    assert account.account_type.value == "company"


def test_account_open_without_bank(cli_runner, temp_db):
    """Test opening an account without --bank option (short form)."""
    result = _open(cli_runner, temp_db.database_path, "Cash")

    assert result.exit_code == 0
    assert "Bank name set to 'Cash'" in result.output
    assert "Balance: 0.00 TRY" in result.output


def test_account_open_with_opening_balance(cli_runner, temp_db):
    result = _open(cli_runner, temp_db.database_path, "Credit Line", "--balance=-1,200", "--currency", "usd")

    assert result.exit_code == 0
    assert "Balance: -1,200.00 USD" in result.output
    (account,) = temp_db.list_accounts()
    assert account.balance == Decimal("-1200")
    assert temp_db.get_account_transaction_count(account.id) == 1


def test_account_open_duplicate(cli_runner, temp_db):
    """Test opening a duplicate account name fails with a conflict status."""
    assert _open(cli_runner, temp_db.database_path, "Cash").exit_code == 0

    result = _open(cli_runner, temp_db.database_path, "Cash")

    assert result.exit_code == 5
    assert "already exists" in result.output.lower()


def test_account_open_invalid_currency(cli_runner, temp_db):
    result = _open(cli_runner, temp_db.database_path, "Cash", "--currency", "LIRA")

    assert result.exit_code == 1
    assert "Invalid currency code" in result.output


def test_account_list_empty(cli_runner, temp_db):
    """Test listing accounts when none exist."""
    result = cli_runner.invoke(cli, ["--db-path", temp_db.database_path, "account", "list"])

    assert result.exit_code == 0
    assert "No accounts found" in result.output


def test_account_list_with_inactive(cli_runner, temp_db):
    _open(cli_runner, temp_db.database_path, "Cash", "--balance", "10")
    _open(cli_runner, temp_db.database_path, "Bank")
    cash = next(acc for acc in temp_db.list_accounts() if acc.name == "Cash")
    temp_db.set_account_active(cash.id, False)

    result = cli_runner.invoke(cli, ["--db-path", temp_db.database_path, "account", "list"])
    assert result.exit_code == 0
    assert "Bank" in result.output
    assert "Cash" not in result.output

    result = cli_runner.invoke(cli, ["--db-path", temp_db.database_path, "account", "list", "--all"])
    assert "Cash" in result.output
    assert "(inactive)" in result.output


def test_account_rename(cli_runner, temp_db):
    _open(cli_runner, temp_db.database_path, "Cash")

    result = cli_runner.invoke(
        cli, ["--db-path", temp_db.database_path, "account", "rename", "Cash", "Wallet", "--bank", "Home"]
    )

    assert result.exit_code == 0
    assert "Renamed account to 'Wallet'" in result.output
    (account,) = temp_db.list_accounts()
    assert (account.name, account.bank_name) == ("Wallet", "Home")


def test_account_rename_unknown(cli_runner, temp_db):
    result = cli_runner.invoke(
        cli, ["--db-path", temp_db.database_path, "account", "rename", "Nowhere", "Wallet"]
    )

    assert result.exit_code == 3
    assert "not found" in result.output


@pytest.mark.parametrize(
    "balance,expected_output,still_listed",
    [
        ("0", "Deleted account 'Cash'", False),
        ("25", "marked inactive", True),
    ],
)
def test_account_delete(cli_runner, temp_db, balance, expected_output, still_listed):
    _open(cli_runner, temp_db.database_path, "Cash", "--balance", balance)

    result = cli_runner.invoke(
        cli, ["--db-path", temp_db.database_path, "account", "delete", "Cash", "--yes"]
    )

    assert result.exit_code == 0
    assert expected_output in result.output
    assert bool(temp_db.list_accounts(include_inactive=True)) is still_listed


def test_account_delete_cancelled(cli_runner, temp_db):
    _open(cli_runner, temp_db.database_path, "Cash")

    result = cli_runner.invoke(
        cli, ["--db-path", temp_db.database_path, "account", "delete", "Cash"], input="n\n"
    )

    assert result.exit_code == 0
    assert "Deletion cancelled" in result.output
    assert len(temp_db.list_accounts()) == 1


def test_account_commands_with_injected_memory_db(cli_runner, memory_db):
    obj = {"db": memory_db}

    result = cli_runner.invoke(cli, ["account", "open", "Cash", "--balance", "50"], obj=obj)
    assert result.exit_code == 0

    result = cli_runner.invoke(cli, ["account", "list"], obj=obj)
    assert "Cash" in result.output
    assert "50.00 TRY" in result.output
