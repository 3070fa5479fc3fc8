"""Dashboard aggregation.

``compute_dashboard_stats`` is pure and never raises for a missing settings
record. ``DashboardService`` wraps it with the store reads and falls back to
an all-zero record when the store itself fails.
"""

import logging
from decimal import Decimal
from typing import Iterable, Optional

from sqlalchemy.exc import SQLAlchemyError

from carledger.database.base import Database
from carledger.domain.constants import (
    CONTRIBUTION,
    OPERATING_EXPENSE_CATEGORIES,
    PROFIT_AHMED,
    PROFIT_NADA,
)
from carledger.domain.entities import (
    DashboardStats,
    FinancialSettings,
    Transaction,
    TransactionType,
    Vehicle,
    VehicleStatus,
)
from carledger.domain.errors import DomainError

logger = logging.getLogger(__name__)

ZERO = Decimal("0")

DEFAULT_FINANCIAL_SETTINGS = FinancialSettings(
    cash_on_hand=Decimal("18400"),
    showroom_balance=Decimal("20135"),
    personal_loan=Decimal("22500"),
    additional=Decimal("-4100"),
    expenses=ZERO,
)

EMPTY_DASHBOARD_STATS = DashboardStats(
    total_income=ZERO,
    total_expenses=ZERO,
    total_contribution=ZERO,
    profit_ahmed=ZERO,
    profit_nada=ZERO,
    expenses=ZERO,
    overall_money_flow=ZERO,
    total_loans=ZERO,
    total_capital=ZERO,
    bank_balance=ZERO,
    asset_value=ZERO,
)


def calculate_asset_value(vehicles: Iterable[Vehicle]) -> Decimal:
    """Sum purchase prices of vehicles still in stock."""
    return sum(
        (v.purchase_price for v in vehicles if v.status == VehicleStatus.AVAILABLE),
        ZERO,
    )


def compute_dashboard_stats(
    transactions: Iterable[Transaction],
    settings: Optional[FinancialSettings],
    vehicles: Iterable[Vehicle] = (),
) -> DashboardStats:
    """Compute the dashboard aggregates.

    Args:
        transactions: Full transaction set
        settings: Financial settings, or None to use the default baseline
        vehicles: Vehicle inventory used for the asset value

    Returns:
        DashboardStats record
    """
    if settings is None:
        settings = DEFAULT_FINANCIAL_SETTINGS

    total_income = ZERO
    total_expenses = ZERO
    total_contribution = ZERO
    profit_ahmed = ZERO
    profit_nada = ZERO
    expenses = ZERO

    for txn in transactions:
        if txn.type == TransactionType.INCOME:
            total_income += txn.amount
            if txn.category == CONTRIBUTION:
                total_contribution += txn.amount
            elif txn.category == PROFIT_AHMED:
                profit_ahmed += txn.amount
            elif txn.category == PROFIT_NADA:
                profit_nada += txn.amount
        elif txn.type == TransactionType.EXPENSE:
            total_expenses += txn.amount
            if txn.category in OPERATING_EXPENSE_CATEGORIES:
                expenses += txn.amount

    overall_money_flow = total_contribution + profit_ahmed
    total_loans = settings.showroom_balance + settings.personal_loan
    total_capital = overall_money_flow + total_loans + settings.additional - expenses
    bank_balance = (
        total_income
        + settings.additional
        - total_expenses
        - total_loans
        - settings.cash_on_hand
        - profit_nada
    )

    return DashboardStats(
        total_income=total_income,
        total_expenses=total_expenses,
        total_contribution=total_contribution,
        profit_ahmed=profit_ahmed,
        profit_nada=profit_nada,
        expenses=expenses,
        overall_money_flow=overall_money_flow,
        total_loans=total_loans,
        total_capital=total_capital,
        bank_balance=bank_balance,
        asset_value=calculate_asset_value(vehicles),
    )


class DashboardService:
    """Service for building dashboard aggregates from the store."""

    def __init__(self, db: Database):
        """Initialize dashboard service.

        Args:
            db: Database instance
        """
        self.db = db

    def get_dashboard_stats(self) -> DashboardStats:
        """Load the current snapshot and compute the dashboard aggregates.

        Store failures are logged and produce ``EMPTY_DASHBOARD_STATS`` so the
        dashboard stays available.
        """
        try:
            settings = self.db.get_financial_settings()
            transactions = self.db.list_transactions()
            vehicles = self.db.list_vehicles()
        except (DomainError, SQLAlchemyError):
            logger.exception("Could not load dashboard data")
            return EMPTY_DASHBOARD_STATS

        return compute_dashboard_stats(transactions, settings, vehicles)
