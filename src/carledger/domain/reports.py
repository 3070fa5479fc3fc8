"""Report rendering: transaction CSV export, summaries and vehicle reports."""

import csv
from datetime import date
from decimal import Decimal
from typing import Iterable, Optional, Sequence, TextIO

from carledger.domain.entities import (
    GlobalSettings,
    ProfitDistribution,
    Transaction,
    TransactionSummary,
    TransactionType,
    Vehicle,
    VehicleExpense,
    VehicleProfit,
)
from carledger.utils.amount_parser import format_money

CSV_HEADERS = ("Date", "Type", "Category", "Description", "Amount (AED)")

LABEL_WIDTH = 24


def default_export_filename(today: Optional[date] = None) -> str:
    return f"transactions_{(today or date.today()).isoformat()}.csv"


def write_transactions_csv(transactions: Iterable[Transaction], stream: TextIO) -> int:
    """Write transactions as CSV to ``stream``.

    Returns:
        Number of data rows written
    """
    writer = csv.writer(stream, quoting=csv.QUOTE_ALL)
    writer.writerow(CSV_HEADERS)
    count = 0
    for txn in transactions:
        writer.writerow(
            [
                txn.date.isoformat(),
                txn.type.value,
                txn.category,
                txn.description,
                f"{txn.amount:,.2f}",
            ]
        )
        count += 1
    return count


def summarize_transactions(transactions: Iterable[Transaction]) -> TransactionSummary:
    """Total income and expenses over a set of transactions."""
    income = Decimal("0")
    expenses = Decimal("0")
    count = 0
    for txn in transactions:
        if txn.type == TransactionType.INCOME:
            income += txn.amount
        else:
            expenses += txn.amount
        count += 1
    return TransactionSummary(total_income=income, total_expenses=expenses, count=count)


def _field(label: str, value) -> str:
    return f"  {label + ':':<{LABEL_WIDTH}}{'-' if value in (None, '') else value}"


def build_vehicle_report(
    vehicle: Vehicle,
    expenses: Sequence[VehicleExpense],
    distributions: Sequence[ProfitDistribution],
    profit: VehicleProfit,
    settings: Optional[GlobalSettings] = None,
) -> list[str]:
    """Render a plain-text sales report for one vehicle.

    Args:
        vehicle: Vehicle to report on
        expenses: Its recorded expenses
        distributions: Its stored profit distribution rows
        profit: Computed totals for the vehicle
        settings: Company header details, omitted when None

    Returns:
        Report lines without trailing newlines
    """
    lines: list[str] = []
    if settings is not None:
        lines.append(settings.company_name)
        for detail in (settings.company_address, settings.company_phone, settings.company_email):
            if detail:
                lines.append(detail)
        lines.append("")

    lines.append("Vehicle Sales Report")
    lines.append("=" * 60)

    lines.append("Vehicle Information")
    lines.extend(
        [
            _field("Make", vehicle.make),
            _field("Model", vehicle.model),
            _field("Year", vehicle.year),
            _field("VIN", vehicle.vin),
            _field("Color", vehicle.color),
            _field("Status", vehicle.status.value),
            _field("Purchase Date", vehicle.purchase_date),
            _field("Sale Date", vehicle.sale_date),
        ]
    )

    lines.append("Registration Details")
    lines.extend(
        [
            _field("Owner Name", vehicle.owner_name),
            _field("TC#", vehicle.tc_number),
            _field("Certificate Number", vehicle.certificate_number),
            _field("Registration Location", vehicle.registration_location),
        ]
    )

    lines.append("Financial Summary")
    lines.extend(
        [
            _field("Purchase Price", format_money(vehicle.purchase_price)),
            _field(
                "Sale Price",
                format_money(vehicle.sale_price) if vehicle.sale_price is not None else None,
            ),
            _field("Total Expenses", format_money(profit.total_expenses)),
            _field("Net Profit", format_money(profit.net_profit)),
        ]
    )

    lines.append("Expenses")
    if expenses:
        lines.append(f"  {'Date':<12}{'Type':<20}{'Amount':>16}  Recipient")
        for expense in expenses:
            lines.append(
                f"  {expense.date.isoformat():<12}{expense.type:<20}"
                f"{format_money(expense.amount):>16}  {expense.recipient or '-'}"
            )
    else:
        lines.append("  No expenses recorded")

    lines.append("Profit Distribution")
    if distributions:
        lines.append(f"  {'Recipient':<12}{'Amount':>18}{'Percentage':>12}  Notes")
        for dist in distributions:
            lines.append(
                f"  {dist.recipient:<12}{format_money(dist.amount):>18}"
                f"{dist.percentage.normalize():>11f}%  {dist.notes or '-'}"
            )
    else:
        lines.append("  No profit distributions recorded")

    if vehicle.notes:
        lines.append("Notes")
        lines.extend(f"  {line}" for line in vehicle.notes.splitlines())

    return lines
