"""Monthly and yearly business performance roll-ups."""

from collections import defaultdict
from decimal import Decimal
from typing import Iterable, Sequence

from carledger.database.base import Database
from carledger.domain.constants import (
    OPERATING_EXPENSE_CATEGORIES,
    PERFORMANCE_CATEGORIES,
    PROFIT_AHMED,
)
from carledger.domain.entities import MonthlyStats, Transaction, YearlyStats

ZERO = Decimal("0")
HUNDRED = Decimal("100")
PERCENT = Decimal("0.01")


def profit_percentage(income: Decimal, expenses: Decimal) -> Decimal:
    """Return (income - expenses) / income * 100, or 0 without income."""
    if income <= ZERO:
        return ZERO
    return ((income - expenses) / income * HUNDRED).quantize(PERCENT)


def compute_monthly_stats(transactions: Iterable[Transaction]) -> list[MonthlyStats]:
    """Bucket performance transactions by calendar month.

    Only Profit-AHMED, Personal Expenses and Distribution rows count; other
    categories are ignored.

    Returns:
        Monthly series sorted ascending by ``YYYY-MM`` key
    """
    buckets: dict[str, dict[str, Decimal]] = defaultdict(
        lambda: {"income": ZERO, "expenses": ZERO, "profit": ZERO}
    )

    for txn in transactions:
        if txn.category not in PERFORMANCE_CATEGORIES:
            continue
        bucket = buckets[txn.date.strftime("%Y-%m")]
        if txn.category == PROFIT_AHMED:
            bucket["income"] += txn.amount
            bucket["profit"] += txn.amount
        elif txn.category in OPERATING_EXPENSE_CATEGORIES:
            bucket["expenses"] += txn.amount
            bucket["profit"] -= txn.amount

    return [
        MonthlyStats(
            month=month,
            income=data["income"],
            expenses=data["expenses"],
            profit=data["profit"],
            profit_percentage=profit_percentage(data["income"], data["expenses"]),
        )
        for month, data in sorted(buckets.items())
    ]


def compute_yearly_stats(monthly: Sequence[MonthlyStats]) -> list[YearlyStats]:
    """Roll monthly stats up into calendar years, newest first."""
    months_by_year: dict[int, list[MonthlyStats]] = defaultdict(list)
    for stats in monthly:
        months_by_year[int(stats.month[:4])].append(stats)

    result = []
    for year, months in months_by_year.items():
        total_income = sum((m.income for m in months), ZERO)
        total_expenses = sum((m.expenses for m in months), ZERO)
        result.append(
            YearlyStats(
                year=year,
                months=tuple(months),
                total_profit=sum((m.profit for m in months), ZERO),
                total_income=total_income,
                total_expenses=total_expenses,
                average_profit_percentage=profit_percentage(total_income, total_expenses),
            )
        )
    return sorted(result, key=lambda y: y.year, reverse=True)


class BusinessService:
    """Service for business performance analytics."""

    def __init__(self, db: Database):
        self.db = db

    def get_monthly_stats(self) -> list[MonthlyStats]:
        transactions = self.db.list_transactions(categories=sorted(PERFORMANCE_CATEGORIES))
        return compute_monthly_stats(transactions)

    def get_yearly_stats(self) -> list[YearlyStats]:
        return compute_yearly_stats(self.get_monthly_stats())
