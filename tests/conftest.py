"""Shared pytest fixtures for finledger tests."""

import tempfile
import os
import pytest

from finledger.database.factories import create_sqlite_database
from finledger.domain.account import AccountService
from finledger.domain.debt import DebtService
from finledger.domain.statistics import StatisticsService
from finledger.domain.sync import SyncService
from finledger.domain.transaction import TransactionService


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    # Create a temporary file for the database
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    # Create database
    db = create_sqlite_database(database_path=db_path)
    # Store the path for tests that need it
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    # Cleanup
    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def debt_service(temp_db):
    """Create a DebtService with a temporary database."""
    return DebtService(temp_db)


@pytest.fixture
def account_service(temp_db):
    """Create an AccountService with a temporary database."""
    return AccountService(temp_db)


@pytest.fixture
def transaction_service(temp_db):
    """Create a TransactionService with a temporary database."""
    return TransactionService(temp_db)


@pytest.fixture
def sync_service(temp_db):
    """Create a SyncService with a temporary database."""
    return SyncService(temp_db)


@pytest.fixture
def statistics_service(temp_db):
    """Create a StatisticsService with a temporary database."""
    return StatisticsService(temp_db)


@pytest.fixture
def sample_person(debt_service):
    """Create a sample person for testing."""
    person_id = debt_service.create_person("Alice")
    return debt_service.get_person(person_id)


@pytest.fixture
def sample_account_payload():
    """Raw aggregator account with an array-shaped balance."""
    return {
        "uid": "acc-1",
        "name": "Main Account",
        "iban": "DE89 3704 0044 0532 0130 00",
        "currency": "EUR",
        "balances": [{"balance_amount": {"amount": "1250.40", "currency": "EUR"}}],
    }


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()
