"""Abstract database interface."""

from abc import ABC, abstractmethod
from typing import Any, Optional, Sequence
from datetime import date
from decimal import Decimal

# Import entities directly to avoid circular import through domain/__init__.py
from carledger.domain.entities import (
    AuditLogEntry,
    Category,
    CategoryStats,
    DistributionShare,
    FinancialSettings,
    GlobalSettings,
    LedgerPosting,
    ProfitDistribution,
    Transaction,
    TransactionType,
    Vehicle,
    VehicleExpense,
    VehicleFinancials,
    VehicleStatus,
)


class Database(ABC):
    """Abstract database interface for carledger."""

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    # Transaction operations
    @abstractmethod
    def create_transaction(
        self,
        amount: Decimal,
        type: TransactionType,
        category: str,
        description: str,
        date: date,
        reference_id: Optional[int] = None,
    ) -> int:
        """Create a transaction. Returns transaction ID."""
        pass

    @abstractmethod
    def get_transaction(self, transaction_id: int) -> Optional[Transaction]:
        """Get transaction by ID."""
        pass

    @abstractmethod
    def list_transactions(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        type: Optional[TransactionType] = None,
        category: Optional[str] = None,
        categories: Optional[Sequence[str]] = None,
    ) -> list[Transaction]:
        """List transactions, newest first, with optional filters.

        Args:
            start_date: Optional start date filter (inclusive)
            end_date: Optional end date filter (inclusive)
            type: Optional income/expense filter
            category: Optional exact category name filter
            categories: Optional set of category names to include
        """
        pass

    @abstractmethod
    def update_transaction(self, transaction_id: int, fields: dict[str, Any]) -> None:
        """Update the given transaction columns."""
        pass

    @abstractmethod
    def delete_transaction(self, transaction_id: int) -> None:
        """Delete a transaction."""
        pass

    @abstractmethod
    def list_transactions_by_reference(self, reference_id: int) -> list[Transaction]:
        """List transactions linked to a vehicle expense, oldest first."""
        pass

    # Vehicle operations
    @abstractmethod
    def create_vehicle(self, fields: dict[str, Any]) -> int:
        """Create a vehicle. Returns vehicle ID."""
        pass

    @abstractmethod
    def get_vehicle(self, vehicle_id: int) -> Optional[Vehicle]:
        """Get vehicle by ID."""
        pass

    @abstractmethod
    def list_vehicles(self, status: Optional[VehicleStatus] = None) -> list[Vehicle]:
        """List vehicles, newest first, optionally filtered by status."""
        pass

    @abstractmethod
    def update_vehicle(
        self, vehicle_id: int, fields: dict[str, Any], clear_distributions: bool = False
    ) -> int:
        """Update the given vehicle columns.

        With ``clear_distributions`` the vehicle's profit distribution rows are
        deleted in the same commit. Returns the number of rows deleted.
        """
        pass

    @abstractmethod
    def delete_vehicle(self, vehicle_id: int) -> None:
        """Delete a vehicle with its expenses and distributions."""
        pass

    @abstractmethod
    def list_vehicle_financials(self) -> list[VehicleFinancials]:
        """List vehicles joined with expense and distribution totals."""
        pass

    # Vehicle expense operations
    @abstractmethod
    def create_vehicle_expense(
        self,
        vehicle_id: int,
        date: date,
        type: str,
        amount: Decimal,
        recipient: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> int:
        """Create a vehicle expense. Returns expense ID."""
        pass

    @abstractmethod
    def get_vehicle_expense(self, expense_id: int) -> Optional[VehicleExpense]:
        """Get vehicle expense by ID."""
        pass

    @abstractmethod
    def list_vehicle_expenses(self, vehicle_id: int) -> list[VehicleExpense]:
        """List expenses for a vehicle, newest first."""
        pass

    @abstractmethod
    def update_vehicle_expense(self, expense_id: int, fields: dict[str, Any]) -> None:
        """Update the given expense columns."""
        pass

    @abstractmethod
    def delete_vehicle_expense(self, expense_id: int) -> None:
        """Delete a vehicle expense."""
        pass

    # Profit distribution operations
    @abstractmethod
    def list_profit_distributions(self, vehicle_id: int) -> list[ProfitDistribution]:
        """List distribution rows for a vehicle."""
        pass

    @abstractmethod
    def replace_profit_distributions(
        self,
        vehicle_id: int,
        shares: Sequence[DistributionShare],
        distribution_date: date,
        postings: Sequence[LedgerPosting] = (),
    ) -> list[int]:
        """Replace a vehicle's distributions and post ledger entries atomically.

        Deletes all existing rows for the vehicle, inserts one row per share and
        one income transaction per posting, and commits once.

        Returns:
            IDs of the new distribution rows
        """
        pass

    # Category operations
    @abstractmethod
    def create_category(self, name: str) -> int:
        """Create a category. Returns category ID."""
        pass

    @abstractmethod
    def get_category(self, category_id: int) -> Optional[Category]:
        """Get category by ID."""
        pass

    @abstractmethod
    def get_category_by_name(self, name: str) -> Optional[Category]:
        """Get category by exact name."""
        pass

    @abstractmethod
    def list_categories(self) -> list[Category]:
        """List all categories ordered by name."""
        pass

    @abstractmethod
    def rename_category(self, category_id: int, name: str) -> None:
        """Rename a category."""
        pass

    @abstractmethod
    def delete_category(self, category_id: int) -> None:
        """Delete a category."""
        pass

    @abstractmethod
    def get_category_stats(self) -> list[CategoryStats]:
        """List categories with derived transaction count and totals."""
        pass

    # Settings operations
    @abstractmethod
    def get_financial_settings(self) -> Optional[FinancialSettings]:
        """Get the financial settings singleton, if stored."""
        pass

    @abstractmethod
    def save_financial_settings(self, settings: FinancialSettings) -> None:
        """Create or replace the financial settings singleton."""
        pass

    @abstractmethod
    def get_global_settings(self) -> Optional[GlobalSettings]:
        """Get the global settings singleton, if stored."""
        pass

    @abstractmethod
    def save_global_settings(self, settings: GlobalSettings) -> None:
        """Create or replace the global settings singleton."""
        pass

    # Audit operations
    @abstractmethod
    def create_audit_log(
        self,
        action_type: str,
        entity_type: str,
        entity_id: Optional[str],
        description: str,
        user_id: Optional[str] = None,
        old_data: Optional[Any] = None,
        new_data: Optional[Any] = None,
    ) -> int:
        """Append an audit entry. Returns entry ID."""
        pass

    @abstractmethod
    def list_audit_logs(
        self, entity_type: Optional[str] = None, limit: Optional[int] = None
    ) -> list[AuditLogEntry]:
        """List audit entries, newest first."""
        pass

    # Backup operations
    @abstractmethod
    def export_tables(self) -> dict[str, list[dict[str, Any]]]:
        """Dump every backed-up table as JSON-compatible rows."""
        pass

    @abstractmethod
    def replace_tables(self, tables: dict[str, list[dict[str, Any]]]) -> None:
        """Replace the contents of every backed-up table in one commit.

        Raises ValidationError, leaving the data untouched, when a row does not
        fit its table.
        """
        pass
