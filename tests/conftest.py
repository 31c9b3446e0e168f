"""Shared pytest fixtures for tallyup tests."""

import tempfile
import os
from pathlib import Path
import pytest

from tallyup.database.factories import create_sqlite_database
from tallyup.domain.auto_tagging import AutoTaggingService
from tallyup.domain.balance import BalanceService
from tallyup.domain.csv_import import CSVImportService
from tallyup.domain.entities import StatementUpload
from tallyup.domain.rule import RuleService
from tallyup.domain.tag import TagService
from tallyup.domain.transaction import TransactionService


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    db = create_sqlite_database(database_path=db_path)
    # Store the path for tests that need it
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def tag_service(temp_db):
    """Create a TagService with a temporary database."""
    return TagService(temp_db)


@pytest.fixture
def rule_service(temp_db):
    """Create a RuleService with a temporary database."""
    return RuleService(temp_db)


@pytest.fixture
def transaction_service(temp_db):
    """Create a TransactionService with a temporary database."""
    return TransactionService(temp_db)


@pytest.fixture
def balance_service(temp_db):
    """Create a BalanceService with a temporary database."""
    return BalanceService(temp_db)


@pytest.fixture
def tagging_service(temp_db):
    """Create an AutoTaggingService with a temporary database."""
    return AutoTaggingService(temp_db)


@pytest.fixture
def import_service(temp_db):
    """Create a CSVImportService with a temporary database."""
    return CSVImportService(temp_db)


@pytest.fixture
def sample_tags(tag_service):
    """Create Coffee and Groceries tags and return their IDs by name."""
    return {
        "Coffee": tag_service.create_tag("Coffee"),
        "Groceries": tag_service.create_tag("Groceries"),
    }


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()


@pytest.fixture
def fixtures_dir():
    """Return the path to the test fixtures directory."""
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def read_fixture(fixtures_dir):
    """Return a function that reads a fixture file as text."""

    def _read(name: str) -> str:
        return (fixtures_dir / name).read_text(encoding="utf-8")

    return _read


@pytest.fixture
def make_upload(read_fixture):
    """Return a function that builds a CSV upload from a fixture file."""

    def _make(name: str, content_type: str | None = "text/csv") -> StatementUpload:
        return StatementUpload(filename=name, content_type=content_type, text=read_fixture(name))

    return _make
