"""Shared pytest fixtures for carledger tests."""

import tempfile
import os
from datetime import date
from decimal import Decimal
from pathlib import Path
import pytest

from carledger.database.factories import create_sqlite_database
from carledger.domain.audit import AuditService
from carledger.domain.backup import BackupService
from carledger.domain.category import CategoryService
from carledger.domain.settings import SettingsService
from carledger.domain.transaction import TransactionService
from carledger.domain.vehicle import VehicleService


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
def audit_service(temp_db):
    """Create an AuditService that stamps entries with a test user."""
    return AuditService(temp_db, user_id="tester")


@pytest.fixture
def transaction_service(temp_db, audit_service):
    """Create a TransactionService with a temporary database."""
    return TransactionService(temp_db, audit_service)


@pytest.fixture
def vehicle_service(temp_db, audit_service, transaction_service):
    """Create a VehicleService with a temporary database."""
    return VehicleService(temp_db, audit_service, transaction_service)


@pytest.fixture
def category_service(temp_db, audit_service):
    """Create a CategoryService with a temporary database."""
    return CategoryService(temp_db, audit_service)


@pytest.fixture
def settings_service(temp_db, audit_service):
    """Create a SettingsService with a temporary database."""
    return SettingsService(temp_db, audit_service)


@pytest.fixture
def backup_service(temp_db, audit_service):
    """Create a BackupService with a temporary database."""
    return BackupService(temp_db, audit_service)


@pytest.fixture
def sample_vehicle(vehicle_service):
    """Create an available 2019 Toyota Camry bought for 50,000."""
    vehicle_id = vehicle_service.create_vehicle(
        vin="JTNB11HK0K3000001",
        make="Toyota",
        model="Camry",
        year=2019,
        color="White",
        purchase_price=Decimal("50000"),
        purchase_date=date(2024, 1, 10),
    )
    return vehicle_service.get_vehicle(vehicle_id)


@pytest.fixture
def sold_vehicle(vehicle_service, sample_vehicle):
    """The sample vehicle with a 2,000 expense paid by Ahmed, sold for 70,000."""
    vehicle_service.add_expense(
        vehicle_id=sample_vehicle.id,
        type="Repair",
        amount=Decimal("2000"),
        expense_date=date(2024, 2, 1),
        recipient="Ahmed",
    )
    return vehicle_service.update_vehicle(
        sample_vehicle.id,
        status="SOLD",
        sale_price=Decimal("70000"),
        sale_date=date(2024, 3, 15),
    )


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()


@pytest.fixture
def fixtures_dir():
    """Return the path to the test fixtures directory."""
    return Path(__file__).parent / "fixtures"
