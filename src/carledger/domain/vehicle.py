"""Vehicle inventory domain service.

Owns the cascading workflows around vehicles:

* the SOLD to AVAILABLE status flip, which drops every profit distribution
  and clears the sale fields,
* the mirrored ledger transaction kept for every expense paid by Ahmed,
* auto-distribute, which regenerates a sold vehicle's distribution rows and
  posts the matching income transactions in one store commit.
"""

import logging
from datetime import date
from decimal import Decimal
from typing import Any, Optional

from sqlalchemy.exc import SQLAlchemyError

from carledger.database.base import Database
from carledger.domain import audit
from carledger.domain.audit import AuditService
from carledger.domain.constants import VEHICLE_EXPENSE
from carledger.domain.entities import (
    ProfitDistribution,
    TransactionType,
    Vehicle,
    VehicleExpense,
    VehicleFinancials,
    VehicleProfit,
    VehicleStatus,
)
from carledger.domain.errors import (
    DomainError,
    NotFoundError,
    ValidationError,
    distribute_requires_sold,
    expense_not_found,
    vehicle_not_found,
)
from carledger.domain.transaction import TransactionService
from carledger.domain.validation import optional_text, require_positive_amount, require_text
from carledger.domain.vehicle_profit import (
    DISTRIBUTION_POLICY,
    build_ledger_postings,
    compute_vehicle_profit,
)
from carledger.utils.amount_parser import format_money

logger = logging.getLogger(__name__)

# Expenses paid by this recipient are mirrored into the ledger.
MIRRORED_RECIPIENT = "Ahmed"

MIN_YEAR = 1900

OPTIONAL_TEXT_FIELDS = (
    "notes",
    "owner_name",
    "tc_number",
    "certificate_number",
    "registration_location",
)
UPDATABLE_FIELDS = frozenset(
    {
        "vin",
        "make",
        "model",
        "year",
        "color",
        "status",
        "purchase_price",
        "purchase_date",
        "sale_price",
        "sale_date",
        *OPTIONAL_TEXT_FIELDS,
    }
)


def parse_vehicle_status(value) -> VehicleStatus:
    """Coerce 'available'/'sold' (any case) into a VehicleStatus."""
    if isinstance(value, VehicleStatus):
        return value
    try:
        return VehicleStatus(str(value).strip().upper())
    except ValueError:
        raise ValidationError(f"Invalid vehicle status '{value}', expected AVAILABLE or SOLD")


def validate_year(year: Any) -> int:
    try:
        year = int(year)
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid year: {year!r}")
    latest = date.today().year + 1
    if not MIN_YEAR <= year <= latest:
        raise ValidationError(f"Year must be between {MIN_YEAR} and {latest}")
    return year


def expense_mirror_description(vehicle: Vehicle) -> str:
    """Description used for the ledger transaction mirroring an expense."""
    return f"Vehicle Expense - {vehicle.title} (VIN: {vehicle.vin or 'N/A'})"


class VehicleService:
    """Service for vehicles, their expenses and profit distributions."""

    def __init__(
        self,
        db: Database,
        audit_service: Optional[AuditService] = None,
        transaction_service: Optional[TransactionService] = None,
    ):
        """Initialize vehicle service.

        Args:
            db: Database instance
            audit_service: Audit sink, defaults to an anonymous one
            transaction_service: Used for mirrored expense transactions
        """
        self.db = db
        self.audit = audit_service or AuditService(db)
        self.transactions = transaction_service or TransactionService(db, self.audit)

    # Vehicles

    def require_vehicle(self, vehicle_id: int) -> Vehicle:
        """Get vehicle by ID, raising NotFoundError if it doesn't exist."""
        vehicle = self.db.get_vehicle(vehicle_id)
        if vehicle is None:
            raise NotFoundError(vehicle_not_found(vehicle_id))
        return vehicle

    def create_vehicle(
        self,
        vin: str,
        make: str,
        model: str,
        year: int,
        purchase_price: Decimal,
        purchase_date: Optional[date] = None,
        color: Optional[str] = None,
        status: VehicleStatus = VehicleStatus.AVAILABLE,
        sale_price: Optional[Decimal] = None,
        sale_date: Optional[date] = None,
        **details: Optional[str],
    ) -> int:
        """Create a vehicle.

        Args:
            vin: Vehicle identification number
            make: Manufacturer
            model: Model name
            year: Model year
            purchase_price: Positive acquisition cost
            purchase_date: Defaults to today
            color: Optional color
            status: AVAILABLE (default) or SOLD
            sale_price: Required, and only allowed, when status is SOLD
            sale_date: Defaults to today when status is SOLD
            **details: notes, owner_name, tc_number, certificate_number,
                registration_location

        Returns:
            Vehicle ID

        Raises:
            ValidationError: If a field is missing or inconsistent with status
        """
        unknown = set(details) - set(OPTIONAL_TEXT_FIELDS)
        if unknown:
            raise ValidationError(f"Unknown vehicle field(s): {', '.join(sorted(unknown))}")

        status = parse_vehicle_status(status)
        fields = {
            "vin": require_text(vin, "vin"),
            "make": require_text(make, "make"),
            "model": require_text(model, "model"),
            "year": validate_year(year),
            "color": (color or "").strip(),
            "status": status,
            "purchase_price": require_positive_amount(purchase_price, "purchase_price"),
            "purchase_date": purchase_date or date.today(),
        }
        fields.update(self._sale_fields(status, sale_price, sale_date))
        for name in OPTIONAL_TEXT_FIELDS:
            fields[name] = optional_text(details.get(name))

        vehicle_id = self.db.create_vehicle(fields)
        created = self.db.get_vehicle(vehicle_id)
        self.audit.record(
            audit.CREATE,
            audit.VEHICLE,
            vehicle_id,
            f"Created vehicle: {created.title}",
            new_data=created,
        )
        return vehicle_id

    @staticmethod
    def _sale_fields(
        status: VehicleStatus,
        sale_price: Optional[Decimal],
        sale_date: Optional[date],
    ) -> dict[str, Any]:
        """Validate sale fields against status and return them."""
        if status == VehicleStatus.SOLD:
            return {
                "sale_price": require_positive_amount(sale_price, "sale_price"),
                "sale_date": sale_date or date.today(),
            }
        if sale_price is not None or sale_date is not None:
            raise ValidationError("Sale price and sale date can only be set on SOLD vehicles")
        return {"sale_price": None, "sale_date": None}

    def get_vehicle(self, vehicle_id: int) -> Optional[Vehicle]:
        """Get vehicle by ID."""
        return self.db.get_vehicle(vehicle_id)

    def list_vehicles(self, status: Optional[VehicleStatus] = None) -> list[Vehicle]:
        """List vehicles, newest first."""
        return self.db.list_vehicles(None if status is None else parse_vehicle_status(status))

    def list_financials(self) -> list[VehicleFinancials]:
        """List vehicles with their expense, profit and distribution totals."""
        return self.db.list_vehicle_financials()

    def update_vehicle(self, vehicle_id: int, **changes: Any) -> Vehicle:
        """Update a vehicle.

        Changing status from SOLD to AVAILABLE deletes every profit
        distribution for the vehicle and clears the sale fields, in that
        order. Marking a vehicle SOLD requires a sale price.

        Raises:
            NotFoundError: If the vehicle doesn't exist
            ValidationError: If a field is invalid or inconsistent with status
        """
        unknown = set(changes) - UPDATABLE_FIELDS
        if unknown:
            raise ValidationError(f"Unknown vehicle field(s): {', '.join(sorted(unknown))}")

        old = self.require_vehicle(vehicle_id)
        fields: dict[str, Any] = {}
        for name in ("vin", "make", "model"):
            if changes.get(name) is not None:
                fields[name] = require_text(changes[name], name)
        if changes.get("year") is not None:
            fields["year"] = validate_year(changes["year"])
        if changes.get("color") is not None:
            fields["color"] = changes["color"].strip()
        if changes.get("purchase_price") is not None:
            fields["purchase_price"] = require_positive_amount(
                changes["purchase_price"], "purchase_price"
            )
        if changes.get("purchase_date") is not None:
            fields["purchase_date"] = changes["purchase_date"]
        for name in OPTIONAL_TEXT_FIELDS:
            if name in changes:
                fields[name] = optional_text(changes[name])

        status = parse_vehicle_status(changes.get("status") or old.status)
        fields["status"] = status
        flipping_to_available = (
            old.status == VehicleStatus.SOLD and status == VehicleStatus.AVAILABLE
        )
        if status == VehicleStatus.SOLD:
            sale_price = changes.get("sale_price")
            fields.update(
                self._sale_fields(
                    status,
                    old.sale_price if sale_price is None else sale_price,
                    changes.get("sale_date") or old.sale_date,
                )
            )
        elif flipping_to_available:
            fields["sale_price"] = None
            fields["sale_date"] = None
        else:
            fields.update(
                self._sale_fields(status, changes.get("sale_price"), changes.get("sale_date"))
            )

        cleared = self.db.update_vehicle(
            vehicle_id, fields, clear_distributions=flipping_to_available
        )
        if flipping_to_available:
            logger.info(
                "Cleared %d profit distribution(s) for vehicle %s", cleared, vehicle_id
            )
            self.audit.record(
                audit.DELETE,
                audit.PROFIT_DISTRIBUTION,
                vehicle_id,
                f"Cleared profit distributions for vehicle {old.title} "
                "due to status change to AVAILABLE",
                old_data={"vehicle_id": vehicle_id, "rows_deleted": cleared},
            )

        updated = self.db.get_vehicle(vehicle_id)
        self.audit.record(
            audit.UPDATE,
            audit.VEHICLE,
            vehicle_id,
            f"Updated vehicle: {updated.title}",
            old_data=old,
            new_data=updated,
        )
        return updated

    def delete_vehicle(self, vehicle_id: int) -> None:
        """Delete a vehicle, its expenses, distributions and mirrored transactions.

        Raises:
            NotFoundError: If the vehicle doesn't exist
        """
        vehicle = self.require_vehicle(vehicle_id)
        for expense in self.db.list_vehicle_expenses(vehicle_id):
            if expense.recipient == MIRRORED_RECIPIENT:
                self.transactions.delete_linked_transactions(expense.id)
        self.db.delete_vehicle(vehicle_id)
        self.audit.record(
            audit.DELETE,
            audit.VEHICLE,
            vehicle_id,
            f"Deleted vehicle: {vehicle.title}",
            old_data=vehicle,
        )

    # Expenses

    def _require_expense(self, expense_id: int) -> VehicleExpense:
        expense = self.db.get_vehicle_expense(expense_id)
        if expense is None:
            raise NotFoundError(expense_not_found(expense_id))
        return expense

    def _mirror_expense(self, vehicle: Vehicle, expense: VehicleExpense) -> int:
        return self.transactions.sync_linked_transaction(
            reference_id=expense.id,
            amount=expense.amount,
            type=TransactionType.EXPENSE,
            category=VEHICLE_EXPENSE,
            description=expense_mirror_description(vehicle),
            date=expense.date,
        )

    def list_expenses(self, vehicle_id: int) -> list[VehicleExpense]:
        """List expenses for a vehicle, newest first."""
        self.require_vehicle(vehicle_id)
        return self.db.list_vehicle_expenses(vehicle_id)

    def get_expense(self, expense_id: int) -> Optional[VehicleExpense]:
        """Get vehicle expense by ID."""
        return self.db.get_vehicle_expense(expense_id)

    def add_expense(
        self,
        vehicle_id: int,
        type: str,
        amount: Decimal,
        expense_date: Optional[date] = None,
        recipient: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> int:
        """Record an expense against a vehicle.

        An expense paid by Ahmed also gets a mirrored "Vehicle Expense" ledger
        transaction. If that mirror cannot be written the expense is removed
        again and the error propagates.

        Returns:
            Expense ID

        Raises:
            NotFoundError: If the vehicle doesn't exist
            ValidationError: If a field is invalid
        """
        vehicle = self.require_vehicle(vehicle_id)
        expense_id = self.db.create_vehicle_expense(
            vehicle_id=vehicle_id,
            date=expense_date or date.today(),
            type=require_text(type, "type"),
            amount=require_positive_amount(amount),
            recipient=optional_text(recipient),
            notes=optional_text(notes),
        )
        expense = self.db.get_vehicle_expense(expense_id)

        if expense.recipient == MIRRORED_RECIPIENT:
            try:
                self._mirror_expense(vehicle, expense)
            except (DomainError, SQLAlchemyError):
                logger.warning(
                    "Mirroring expense %s failed, removing the expense", expense_id
                )
                self.db.delete_vehicle_expense(expense_id)
                raise

        self.audit.record(
            audit.CREATE,
            audit.VEHICLE_EXPENSE,
            expense_id,
            f"Added expense of {format_money(expense.amount)} for vehicle {vehicle_id}",
            new_data=expense,
        )
        return expense_id

    def update_expense(
        self,
        expense_id: int,
        type: Optional[str] = None,
        amount: Optional[Decimal] = None,
        expense_date: Optional[date] = None,
        recipient: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> VehicleExpense:
        """Update the provided fields of an expense.

        Pass an empty string for ``recipient`` or ``notes`` to clear them. The
        mirrored transaction follows the effective recipient: it is created
        or updated while the recipient is Ahmed and deleted when it no longer is.

        Raises:
            NotFoundError: If the expense doesn't exist
            ValidationError: If a provided field is invalid
        """
        old = self._require_expense(expense_id)
        fields: dict[str, Any] = {}
        if type is not None:
            fields["type"] = require_text(type, "type")
        if amount is not None:
            fields["amount"] = require_positive_amount(amount)
        if expense_date is not None:
            fields["date"] = expense_date
        if recipient is not None:
            fields["recipient"] = optional_text(recipient)
        if notes is not None:
            fields["notes"] = optional_text(notes)

        if fields:
            self.db.update_vehicle_expense(expense_id, fields)
        updated = self.db.get_vehicle_expense(expense_id)

        if updated.recipient == MIRRORED_RECIPIENT:
            self._mirror_expense(self.require_vehicle(updated.vehicle_id), updated)
        elif old.recipient == MIRRORED_RECIPIENT:
            self.transactions.delete_linked_transactions(expense_id)

        self.audit.record(
            audit.UPDATE,
            audit.VEHICLE_EXPENSE,
            expense_id,
            f"Updated expense of {format_money(updated.amount)} for vehicle {updated.vehicle_id}",
            old_data=old,
            new_data=updated,
        )
        return updated

    def delete_expense(self, expense_id: int) -> None:
        """Delete an expense and, for Ahmed, its mirrored transaction.

        Raises:
            NotFoundError: If the expense doesn't exist
        """
        expense = self._require_expense(expense_id)
        if expense.recipient == MIRRORED_RECIPIENT:
            self.transactions.delete_linked_transactions(expense_id)
        self.db.delete_vehicle_expense(expense_id)
        self.audit.record(
            audit.DELETE,
            audit.VEHICLE_EXPENSE,
            expense_id,
            f"Deleted expense of {format_money(expense.amount)} for vehicle {expense.vehicle_id}",
            old_data=expense,
        )

    # Profit

    def get_profit(self, vehicle_id: int) -> VehicleProfit:
        """Compute a vehicle's net profit and split without writing anything.

        Raises:
            NotFoundError: If the vehicle doesn't exist
            DataIntegrityError: If the vehicle is SOLD without a sale price
        """
        vehicle = self.require_vehicle(vehicle_id)
        return compute_vehicle_profit(
            vehicle, self.db.list_vehicle_expenses(vehicle_id), DISTRIBUTION_POLICY
        )

    def list_distributions(self, vehicle_id: int) -> list[ProfitDistribution]:
        """List a vehicle's profit distribution rows."""
        self.require_vehicle(vehicle_id)
        return self.db.list_profit_distributions(vehicle_id)

    def auto_distribute(
        self, vehicle_id: int, distribution_date: Optional[date] = None
    ) -> list[ProfitDistribution]:
        """Regenerate a sold vehicle's profit distributions.

        Deletes every existing distribution row, inserts one row per policy
        rule and posts the sale and profit income transactions, all in a
        single store commit. Running it twice leaves the same distribution
        rows; ledger postings are added on every run.

        Args:
            vehicle_id: Vehicle to distribute
            distribution_date: Date stored on the rows, defaults to today

        Returns:
            The new distribution rows

        Raises:
            NotFoundError: If the vehicle doesn't exist
            ValidationError: If the vehicle is not SOLD
            DataIntegrityError: If the vehicle is SOLD without a sale price
        """
        vehicle = self.require_vehicle(vehicle_id)
        if vehicle.status != VehicleStatus.SOLD:
            raise ValidationError(distribute_requires_sold(vehicle_id))

        distribution_date = distribution_date or date.today()
        profit = compute_vehicle_profit(
            vehicle, self.db.list_vehicle_expenses(vehicle_id), DISTRIBUTION_POLICY
        )
        postings = build_ledger_postings(
            vehicle, profit, DISTRIBUTION_POLICY, on_date=distribution_date
        )
        self.db.replace_profit_distributions(
            vehicle_id, profit.shares, distribution_date, postings
        )
        logger.info(
            "Distributed %s net profit for vehicle %s across %d recipients",
            profit.net_profit,
            vehicle_id,
            len(profit.shares),
        )

        distributions = self.db.list_profit_distributions(vehicle_id)
        self.audit.record(
            audit.AUTO_DISTRIBUTE,
            audit.PROFIT_DISTRIBUTION,
            vehicle_id,
            f"Auto-distributed profit for vehicle {vehicle.title}",
            new_data={
                "net_profit": profit.net_profit,
                "shares": list(profit.shares),
                "postings": postings,
            },
        )
        return distributions
