"""Domain model entities for carledger.

These are pure data classes representing business concepts, independent of
database schema. Services and the pure calculators only ever see these, never
the SQLAlchemy models.
"""

from dataclasses import dataclass, field
from datetime import datetime, date
from decimal import Decimal
from enum import Enum
from typing import Any, Optional


class TransactionType(str, Enum):
    """Direction of a ledger transaction."""

    INCOME = "income"
    EXPENSE = "expense"


class VehicleStatus(str, Enum):
    """Inventory status of a vehicle."""

    AVAILABLE = "AVAILABLE"
    SOLD = "SOLD"


@dataclass(frozen=True)
class Transaction:
    """Ledger transaction domain entity."""

    id: int
    amount: Decimal
    type: TransactionType
    category: str
    description: str
    date: date
    created_at: datetime
    reference_id: Optional[int] = None


@dataclass(frozen=True)
class Vehicle:
    """Vehicle inventory domain entity."""

    id: int
    vin: str
    make: str
    model: str
    year: int
    color: str
    status: VehicleStatus
    purchase_price: Decimal
    purchase_date: date
    sale_price: Optional[Decimal]
    sale_date: Optional[date]
    notes: Optional[str]
    owner_name: Optional[str]
    tc_number: Optional[str]
    certificate_number: Optional[str]
    registration_location: Optional[str]
    created_at: datetime
    updated_at: datetime

    @property
    def title(self) -> str:
        """Short human-readable label, e.g. '2019 Toyota Camry'."""
        return f"{self.year} {self.make} {self.model}"


@dataclass(frozen=True)
class VehicleExpense:
    """Expense recorded against a single vehicle."""

    id: int
    vehicle_id: int
    date: date
    type: str
    amount: Decimal
    recipient: Optional[str]
    notes: Optional[str]
    created_at: datetime


@dataclass(frozen=True)
class ProfitDistribution:
    """One recipient's payable amount from a vehicle sale."""

    id: int
    vehicle_id: int
    recipient: str
    amount: Decimal
    percentage: Decimal
    date: date
    notes: Optional[str]
    created_at: datetime


@dataclass(frozen=True)
class VehicleFinancials:
    """Vehicle joined with its aggregate expense and distribution totals."""

    vehicle: Vehicle
    total_expenses: Decimal
    net_profit: Decimal
    total_distributed: Decimal


@dataclass(frozen=True)
class FinancialSettings:
    """Manually maintained baseline figures used by the dashboard."""

    cash_on_hand: Decimal
    showroom_balance: Decimal
    personal_loan: Decimal
    additional: Decimal
    expenses: Decimal = Decimal("0")
    updated_at: Optional[datetime] = None


@dataclass(frozen=True)
class GlobalSettings:
    """Company-wide presentation settings."""

    company_name: str
    company_address: str
    company_phone: str
    company_email: str
    currency: str
    exchange_rate: Decimal
    date_format: str
    auto_logout_minutes: int
    updated_at: Optional[datetime] = None


@dataclass(frozen=True)
class Category:
    """Transaction category domain entity."""

    id: int
    name: str
    created_at: datetime


@dataclass(frozen=True)
class CategoryStats:
    """Category with derived transaction totals."""

    category: Category
    transaction_count: int
    total_income: Decimal
    total_expenses: Decimal


@dataclass(frozen=True)
class AuditLogEntry:
    """Audit trail entry."""

    id: int
    created_at: datetime
    user_id: Optional[str]
    action_type: str
    entity_type: str
    entity_id: Optional[str]
    old_data: Optional[Any]
    new_data: Optional[Any]
    description: str


@dataclass(frozen=True)
class DashboardStats:
    """Flat record of dashboard aggregates."""

    total_income: Decimal
    total_expenses: Decimal
    total_contribution: Decimal
    profit_ahmed: Decimal
    profit_nada: Decimal
    expenses: Decimal
    overall_money_flow: Decimal
    total_loans: Decimal
    total_capital: Decimal
    bank_balance: Decimal
    asset_value: Decimal


@dataclass(frozen=True)
class DistributionShare:
    """Computed share of a vehicle's profit for one recipient."""

    recipient: str
    percentage: Decimal
    profit_share: Decimal
    reimbursement: Decimal
    purchase_price_component: Decimal
    notes: str

    @property
    def profit_only(self) -> Decimal:
        """Profit share plus reimbursement, excluding any purchase-price repayment."""
        return self.profit_share + self.reimbursement

    @property
    def amount(self) -> Decimal:
        """Total payable amount for the recipient."""
        return self.profit_only + self.purchase_price_component


@dataclass(frozen=True)
class LedgerPosting:
    """Income transaction to post when a vehicle's profit is distributed."""

    category: str
    amount: Decimal
    description: str
    date: date


@dataclass(frozen=True)
class VehicleProfit:
    """Result of the per-vehicle profit calculation."""

    vehicle_id: int
    total_expenses: Decimal
    net_profit: Decimal
    expenses_by_recipient: dict[str, Decimal]
    shares: tuple[DistributionShare, ...] = field(default_factory=tuple)

    def share_for(self, recipient: str) -> Optional[DistributionShare]:
        """Return the share computed for a recipient, if any."""
        for share in self.shares:
            if share.recipient == recipient:
                return share
        return None

    @property
    def total_payable(self) -> Decimal:
        return sum((share.amount for share in self.shares), Decimal("0"))


@dataclass(frozen=True)
class MonthlyStats:
    """Business performance for one calendar month."""

    month: str
    income: Decimal
    expenses: Decimal
    profit: Decimal
    profit_percentage: Decimal


@dataclass(frozen=True)
class YearlyStats:
    """Business performance rolled up over a calendar year."""

    year: int
    months: tuple[MonthlyStats, ...]
    total_profit: Decimal
    total_income: Decimal
    total_expenses: Decimal
    average_profit_percentage: Decimal


@dataclass(frozen=True)
class TransactionSummary:
    """Totals shown at the top of a transaction report."""

    total_income: Decimal
    total_expenses: Decimal
    count: int

    @property
    def net_total(self) -> Decimal:
        return self.total_income - self.total_expenses
