"""Ledger category names that carry aggregation semantics."""

CONTRIBUTION = "Contribution"
PROFIT_AHMED = "Profit-AHMED"
PROFIT_NADA = "Profit-NADA"
PERSONAL_EXPENSES = "Personal Expenses"
DISTRIBUTION = "Distribution"
VEHICLE_EXPENSE = "Vehicle Expense"
VEHICLE_SALE = "Vehicle Sale"

# Expense categories counted against capital on the dashboard and against
# profit in the business analytics.
OPERATING_EXPENSE_CATEGORIES = frozenset({PERSONAL_EXPENSES, DISTRIBUTION})

# Categories that feed the monthly/yearly business performance series.
PERFORMANCE_CATEGORIES = frozenset({PROFIT_AHMED}) | OPERATING_EXPENSE_CATEGORIES

DEFAULT_CATEGORIES = (
    CONTRIBUTION,
    PROFIT_AHMED,
    PROFIT_NADA,
    PERSONAL_EXPENSES,
    DISTRIBUTION,
    VEHICLE_EXPENSE,
    VEHICLE_SALE,
)

CURRENCY = "AED"
