"""Shared pytest fixtures for virman tests."""

import tempfile
import os
from decimal import Decimal
import pytest

from virman.database.factories import create_memory_database, create_sqlite_database
from virman.domain.account import AccountService
from virman.domain.dashboard import DashboardService
from virman.domain.integrity import IntegrityService
from virman.domain.transaction import TransactionService
from virman.domain.transfer import TransferService


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    # Create a temporary file for the database
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    db = create_sqlite_database(database_path=db_path)
    db.connect()
    db.initialize_schema()

    yield db

    # Cleanup
    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def memory_db():
    """Create an in-memory database for testing."""
    db = create_memory_database()
    db.connect()
    db.initialize_schema()
    yield db
    db.disconnect()


@pytest.fixture(params=["sqlite", "memory"])
def ledger_db(request):
    """Run the test once against each storage backend."""
    return request.getfixturevalue("temp_db" if request.param == "sqlite" else "memory_db")


@pytest.fixture
def account_service(ledger_db):
    """Create an AccountService over the backend under test."""
    return AccountService(ledger_db)


@pytest.fixture
def transaction_service(ledger_db):
    """Create a TransactionService over the backend under test."""
    return TransactionService(ledger_db)


@pytest.fixture
def transfer_service(ledger_db):
    """Create a TransferService over the backend under test."""
    return TransferService(ledger_db)


@pytest.fixture
def dashboard_service(ledger_db):
    """Create a DashboardService over the backend under test."""
    return DashboardService(ledger_db)


@pytest.fixture
def integrity_service(ledger_db):
    """Create an IntegrityService over the backend under test."""
    return IntegrityService(ledger_db)


@pytest.fixture
def open_account(account_service):
    """Return a helper that opens a personal TRY account with a balance."""

    def _open(name, balance="0", account_type="personal", currency="TRY"):
        return account_service.create_account(
            account_type=account_type,
            name=name,
            bank_name=f"{name} Bank",
            currency=currency,
            balance=Decimal(balance),
        )

    return _open


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()
