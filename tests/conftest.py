"""Shared pytest fixtures for bizledger tests."""

import tempfile
import os
from datetime import date, datetime, UTC
from decimal import Decimal
import pytest

from bizledger.database.factories import create_sqlite_database
from bizledger.domain.client import ClientService
from bizledger.domain.cost import CostService
from bizledger.domain.entities import (
    PaymentMethod,
    Transaction,
    TransactionCategory,
    TransactionType,
)
from bizledger.domain.transaction import TransactionService


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
def client_service(temp_db):
    """Create a ClientService with a temporary database."""
    return ClientService(temp_db)


@pytest.fixture
def transaction_service(temp_db):
    """Create a TransactionService with a temporary database."""
    return TransactionService(temp_db)


@pytest.fixture
def cost_service(temp_db):
    """Create a CostService with a temporary database."""
    return CostService(temp_db)


@pytest.fixture
def sample_client(client_service):
    """Create a sample client for testing."""
    client_id = client_service.create_client(
        first_name="Jane",
        last_name="Citizen",
        email="jane@example.com",
        phone_number="0400 000 000",
        suburb="Fitzroy",
        post_code="3065",
        state="VIC",
        services_purchased="Bookkeeping, BAS",
        created_by="tester",
    )
    return client_service.get_client(client_id)


@pytest.fixture
def make_transaction():
    """Build an in-memory Transaction entity with sensible defaults."""

    def _make(**overrides) -> Transaction:
        now = datetime(2024, 1, 15, 9, 30, tzinfo=UTC)
        values = {
            "id": 1,
            "type": TransactionType.INFLOW,
            "category": TransactionCategory.CLIENT_PAYMENT,
            "amount_net": Decimal("100.00"),
            "gst_amount": Decimal("10.00"),
            "amount_gross": Decimal("110.00"),
            "payment_method": PaymentMethod.CREDIT_DEBIT_CARD,
            "gst_applied": True,
            "date": date(2024, 1, 15),
            "created_at": now,
            "updated_at": now,
            "created_by": "tester",
        }
        values.update(overrides)
        return Transaction(**values)

    return _make


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()
