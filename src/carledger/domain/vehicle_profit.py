"""Per-vehicle profit calculation and the profit-split policy.

Everything in this module is pure: callers pass in a vehicle snapshot and its
expenses and get back computed values. Persisting distributions and posting
ledger entries is the job of ``VehicleService.auto_distribute``.
"""

from collections import defaultdict
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Iterable, Optional, Sequence

from carledger.domain.constants import PROFIT_AHMED, PROFIT_NADA, VEHICLE_SALE
from carledger.domain.entities import (
    DistributionShare,
    LedgerPosting,
    Vehicle,
    VehicleExpense,
    VehicleProfit,
    VehicleStatus,
)
from carledger.domain.errors import (
    DataIntegrityError,
    ValidationError,
    sold_vehicle_missing_sale_price,
)
from carledger.utils.amount_parser import format_money, round_money

HUNDRED = Decimal("100")
ZERO = Decimal("0")

# Expenses without a recipient are grouped under this key.
UNASSIGNED_RECIPIENT = "Other"


@dataclass(frozen=True)
class DistributionRule:
    """One row of the profit-split policy."""

    recipient: str
    percentage: Decimal
    includes_purchase_price: bool = False
    ledger_category: Optional[str] = None


DISTRIBUTION_POLICY: tuple[DistributionRule, ...] = (
    DistributionRule(
        recipient="Ahmed",
        percentage=Decimal("35"),
        includes_purchase_price=True,
        ledger_category=PROFIT_AHMED,
    ),
    DistributionRule(
        recipient="Nada",
        percentage=Decimal("15"),
        ledger_category=PROFIT_NADA,
    ),
    DistributionRule(
        recipient="Shaker",
        percentage=Decimal("50"),
    ),
)


def calculate_total_expenses(expenses: Iterable[VehicleExpense]) -> Decimal:
    """Sum all expense amounts."""
    return sum((expense.amount for expense in expenses), ZERO)


def group_expenses_by_recipient(
    expenses: Iterable[VehicleExpense],
) -> dict[str, Decimal]:
    """Sum expense amounts per recipient.

    Expenses without a recipient are grouped under ``UNASSIGNED_RECIPIENT``.
    """
    grouped: dict[str, Decimal] = defaultdict(lambda: ZERO)
    for expense in expenses:
        grouped[expense.recipient or UNASSIGNED_RECIPIENT] += expense.amount
    return dict(grouped)


def calculate_net_profit(vehicle: Vehicle, total_expenses: Decimal) -> Decimal:
    """Return sale price minus purchase price minus expenses.

    Unsold vehicles have a net profit of zero.

    Raises:
        DataIntegrityError: If the vehicle is SOLD but has no sale price
    """
    if vehicle.status != VehicleStatus.SOLD:
        return ZERO
    if vehicle.sale_price is None:
        raise DataIntegrityError(sold_vehicle_missing_sale_price(vehicle.id))
    return vehicle.sale_price - vehicle.purchase_price - total_expenses


def describe_share(
    percentage: Decimal,
    profit_share: Decimal,
    reimbursement: Decimal,
    purchase_price_component: Decimal = ZERO,
) -> str:
    """Build the human-readable breakdown stored with a distribution."""
    text = f"{percentage.normalize():f}% of net profit ({format_money(profit_share)})"
    if reimbursement:
        text += f" + reimbursement ({format_money(reimbursement)})"
    if purchase_price_component:
        text += f" + purchase price ({format_money(purchase_price_component)})"
    return text


def split_profit(
    vehicle: Vehicle,
    net_profit: Decimal,
    expenses_by_recipient: dict[str, Decimal],
    policy: Sequence[DistributionRule] = DISTRIBUTION_POLICY,
) -> tuple[DistributionShare, ...]:
    """Split net profit according to the policy table.

    Shares are rounded to cents. When the policy covers 100% of the profit the
    last rule takes the rounding remainder, so shares always sum to net profit.
    """
    if not policy:
        raise ValidationError("Distribution policy must have at least one rule")
    covers_everything = sum((rule.percentage for rule in policy), ZERO) == HUNDRED

    shares = []
    allocated = ZERO
    for index, rule in enumerate(policy):
        is_last = index == len(policy) - 1
        if is_last and covers_everything:
            profit_share = net_profit - allocated
        else:
            profit_share = round_money(net_profit * rule.percentage / HUNDRED)
        allocated += profit_share

        reimbursement = expenses_by_recipient.get(rule.recipient, ZERO)
        purchase_component = vehicle.purchase_price if rule.includes_purchase_price else ZERO
        shares.append(
            DistributionShare(
                recipient=rule.recipient,
                percentage=rule.percentage,
                profit_share=profit_share,
                reimbursement=reimbursement,
                purchase_price_component=purchase_component,
                notes=describe_share(
                    rule.percentage, profit_share, reimbursement, purchase_component
                ),
            )
        )
    return tuple(shares)


def compute_vehicle_profit(
    vehicle: Vehicle,
    expenses: Sequence[VehicleExpense],
    policy: Sequence[DistributionRule] = DISTRIBUTION_POLICY,
) -> VehicleProfit:
    """Compute totals, net profit and the per-recipient split for a vehicle.

    Args:
        vehicle: Vehicle snapshot
        expenses: All expenses recorded for the vehicle
        policy: Split policy, defaults to ``DISTRIBUTION_POLICY``

    Returns:
        VehicleProfit with one share per policy rule

    Raises:
        DataIntegrityError: If the vehicle is SOLD but has no sale price
    """
    total_expenses = calculate_total_expenses(expenses)
    expenses_by_recipient = group_expenses_by_recipient(expenses)
    net_profit = calculate_net_profit(vehicle, total_expenses)
    return VehicleProfit(
        vehicle_id=vehicle.id,
        total_expenses=total_expenses,
        net_profit=net_profit,
        expenses_by_recipient=expenses_by_recipient,
        shares=split_profit(vehicle, net_profit, expenses_by_recipient, policy),
    )


def build_ledger_postings(
    vehicle: Vehicle,
    profit: VehicleProfit,
    policy: Sequence[DistributionRule] = DISTRIBUTION_POLICY,
    on_date: Optional[date] = None,
) -> list[LedgerPosting]:
    """Build the income transactions posted by auto-distribute.

    A "Vehicle Sale" entry returns the purchase price, then every rule with a
    ledger category posts its profit-only sub-total. The purchase price is
    never part of a profit posting, so it is not counted twice as income.
    Non-positive amounts (loss-making sales) are not posted.
    """
    posting_date = vehicle.sale_date or on_date or date.today()
    headline = f"Vehicle Sold - {vehicle.title} ({vehicle.vin})"

    postings = [
        LedgerPosting(
            category=VEHICLE_SALE,
            amount=vehicle.purchase_price,
            description=headline,
            date=posting_date,
        )
    ]
    for rule in policy:
        if rule.ledger_category is None:
            continue
        share = profit.share_for(rule.recipient)
        if share is None:
            continue
        postings.append(
            LedgerPosting(
                category=rule.ledger_category,
                amount=share.profit_only,
                description=(
                    f"{headline}\n"
                    f"{describe_share(share.percentage, share.profit_share, share.reimbursement)}"
                ),
                date=posting_date,
            )
        )
    return [posting for posting in postings if posting.amount > ZERO]
