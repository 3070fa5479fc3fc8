"""Domain entity builders shared by the pure calculator tests."""

from datetime import date, datetime, UTC
from decimal import Decimal

from carledger.domain.entities import (
    Transaction,
    TransactionType,
    Vehicle,
    VehicleExpense,
    VehicleStatus,
)


def make_vehicle(**overrides) -> Vehicle:
    """A sold 2019 Toyota Camry bought for 50,000 and sold for 70,000."""
    now = datetime.now(UTC)
    values = dict(
        id=1,
        vin="JTNB11HK0K3000001",
        make="Toyota",
        model="Camry",
        year=2019,
        color="White",
        status=VehicleStatus.SOLD,
        purchase_price=Decimal("50000"),
        purchase_date=date(2024, 1, 10),
        sale_price=Decimal("70000"),
        sale_date=date(2024, 3, 15),
        notes=None,
        owner_name=None,
        tc_number=None,
        certificate_number=None,
        registration_location=None,
        created_at=now,
        updated_at=now,
    )
    values.update(overrides)
    return Vehicle(**values)


def make_expense(amount: str, recipient=None, expense_id: int = 1) -> VehicleExpense:
    return VehicleExpense(
        id=expense_id,
        vehicle_id=1,
        date=date(2024, 2, 1),
        type="Repair",
        amount=Decimal(amount),
        recipient=recipient,
        notes=None,
        created_at=datetime.now(UTC),
    )


def make_transaction(
    amount: str,
    type: TransactionType,
    category: str,
    on: date = date(2024, 3, 1),
    txn_id: int = 1,
) -> Transaction:
    return Transaction(
        id=txn_id,
        amount=Decimal(amount),
        type=type,
        category=category,
        description="",
        date=on,
        created_at=datetime.now(UTC),
    )
