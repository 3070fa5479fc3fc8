"""Tests for the per-vehicle profit calculation and split policy."""

import pytest
from datetime import date
from decimal import Decimal

from builders import make_expense, make_vehicle
from carledger.domain.constants import PROFIT_AHMED, PROFIT_NADA, VEHICLE_SALE
from carledger.domain.entities import VehicleStatus
from carledger.domain.errors import DataIntegrityError, ValidationError
from carledger.domain.vehicle_profit import (
    DISTRIBUTION_POLICY,
    UNASSIGNED_RECIPIENT,
    DistributionRule,
    build_ledger_postings,
    calculate_net_profit,
    compute_vehicle_profit,
    group_expenses_by_recipient,
    split_profit,
)


class TestNetProfit:
    """Tests for net profit."""

    def test_sold_vehicle(self):
        vehicle = make_vehicle()
        assert calculate_net_profit(vehicle, Decimal("2000")) == Decimal("18000")

    def test_available_vehicle_has_zero_profit(self):
        vehicle = make_vehicle(status=VehicleStatus.AVAILABLE, sale_price=None, sale_date=None)
        assert calculate_net_profit(vehicle, Decimal("2000")) == Decimal("0")

    def test_sold_without_sale_price_raises(self):
        vehicle = make_vehicle(sale_price=None)
        with pytest.raises(DataIntegrityError, match="no sale price"):
            calculate_net_profit(vehicle, Decimal("0"))

    def test_loss_is_negative(self):
        vehicle = make_vehicle(sale_price=Decimal("45000"))
        assert calculate_net_profit(vehicle, Decimal("0")) == Decimal("-5000")


def test_group_expenses_by_recipient():
    expenses = [
        make_expense("2000", "Ahmed", 1),
        make_expense("500", "Ahmed", 2),
        make_expense("300", "Nada", 3),
        make_expense("100", None, 4),
    ]
    grouped = group_expenses_by_recipient(expenses)
    assert grouped == {
        "Ahmed": Decimal("2500"),
        "Nada": Decimal("300"),
        UNASSIGNED_RECIPIENT: Decimal("100"),
    }


class TestComputeVehicleProfit:
    """Tests for the full split."""

    def test_reference_example(self):
        """50k purchase, 70k sale, 2k paid by Ahmed."""
        profit = compute_vehicle_profit(make_vehicle(), [make_expense("2000", "Ahmed")])

        assert profit.total_expenses == Decimal("2000")
        assert profit.net_profit == Decimal("18000")

        ahmed = profit.share_for("Ahmed")
        nada = profit.share_for("Nada")
        shaker = profit.share_for("Shaker")
        assert ahmed.amount == Decimal("58300")
        assert nada.amount == Decimal("2700")
        assert shaker.amount == Decimal("9000")

    def test_ahmed_profit_only_excludes_purchase_price(self):
        profit = compute_vehicle_profit(make_vehicle(), [make_expense("2000", "Ahmed")])
        ahmed = profit.share_for("Ahmed")

        assert ahmed.profit_share == Decimal("6300")
        assert ahmed.reimbursement == Decimal("2000")
        assert ahmed.purchase_price_component == Decimal("50000")
        assert ahmed.profit_only == Decimal("8300")

    def test_shares_follow_policy_order(self):
        profit = compute_vehicle_profit(make_vehicle(), [])
        assert [s.recipient for s in profit.shares] == ["Ahmed", "Nada", "Shaker"]
        assert [s.percentage for s in profit.shares] == [
            Decimal("35"),
            Decimal("15"),
            Decimal("50"),
        ]

    def test_total_payable_balances(self):
        """Sum of payables = net profit + purchase price + reimbursements."""
        expenses = [
            make_expense("2000", "Ahmed", 1),
            make_expense("750.55", "Nada", 2),
            make_expense("199.99", None, 3),
        ]
        profit = compute_vehicle_profit(make_vehicle(), expenses)
        reimbursed = Decimal("2000") + Decimal("750.55")

        assert profit.total_payable == profit.net_profit + Decimal("50000") + reimbursed

    def test_rounding_remainder_goes_to_last_rule(self):
        vehicle = make_vehicle(sale_price=Decimal("50100.01"))
        profit = compute_vehicle_profit(vehicle, [])

        assert profit.net_profit == Decimal("100.01")
        assert profit.share_for("Ahmed").profit_share == Decimal("35.00")
        assert profit.share_for("Nada").profit_share == Decimal("15.00")
        assert profit.share_for("Shaker").profit_share == Decimal("50.01")
        assert sum(s.profit_share for s in profit.shares) == profit.net_profit

    def test_unassigned_expenses_reduce_profit_without_reimbursement(self):
        profit = compute_vehicle_profit(make_vehicle(), [make_expense("1000", None)])
        assert profit.net_profit == Decimal("19000")
        assert all(s.reimbursement == 0 for s in profit.shares)

    def test_available_vehicle_still_reimburses(self):
        vehicle = make_vehicle(status=VehicleStatus.AVAILABLE, sale_price=None, sale_date=None)
        profit = compute_vehicle_profit(vehicle, [make_expense("400", "Nada")])
        assert profit.net_profit == Decimal("0")
        assert profit.share_for("Nada").amount == Decimal("400")

    def test_breakdown_notes(self):
        profit = compute_vehicle_profit(make_vehicle(), [make_expense("2000", "Ahmed")])
        assert profit.share_for("Ahmed").notes == (
            "35% of net profit (AED 6,300.00) + reimbursement (AED 2,000.00)"
            " + purchase price (AED 50,000.00)"
        )
        assert profit.share_for("Nada").notes == "15% of net profit (AED 2,700.00)"
        assert profit.share_for("Shaker").notes == "50% of net profit (AED 9,000.00)"

    def test_custom_policy(self):
        policy = (
            DistributionRule(recipient="A", percentage=Decimal("60")),
            DistributionRule(recipient="B", percentage=Decimal("40")),
        )
        profit = compute_vehicle_profit(make_vehicle(), [], policy)
        assert [s.amount for s in profit.shares] == [Decimal("12000"), Decimal("8000")]

    def test_empty_policy_rejected(self):
        with pytest.raises(ValidationError):
            split_profit(make_vehicle(), Decimal("100"), {}, policy=())


class TestLedgerPostings:
    """Tests for the income transactions posted on auto-distribute."""

    def test_reference_postings(self):
        vehicle = make_vehicle()
        profit = compute_vehicle_profit(vehicle, [make_expense("2000", "Ahmed")])
        postings = build_ledger_postings(vehicle, profit, DISTRIBUTION_POLICY)

        by_category = {p.category: p for p in postings}
        assert set(by_category) == {VEHICLE_SALE, PROFIT_AHMED, PROFIT_NADA}
        assert by_category[VEHICLE_SALE].amount == Decimal("50000")
        # Purchase price is posted once, under Vehicle Sale, never as profit
        assert by_category[PROFIT_AHMED].amount == Decimal("8300")
        assert by_category[PROFIT_NADA].amount == Decimal("2700")
        assert all(p.date == date(2024, 3, 15) for p in postings)

    def test_posting_descriptions(self):
        vehicle = make_vehicle()
        profit = compute_vehicle_profit(vehicle, [])
        postings = build_ledger_postings(vehicle, profit)

        assert postings[0].description == "Vehicle Sold - 2019 Toyota Camry (JTNB11HK0K3000001)"
        nada = next(p for p in postings if p.category == PROFIT_NADA)
        assert nada.description.splitlines() == [
            "Vehicle Sold - 2019 Toyota Camry (JTNB11HK0K3000001)",
            "15% of net profit (AED 3,000.00)",
        ]

    def test_loss_skips_profit_postings(self):
        vehicle = make_vehicle(sale_price=Decimal("45000"))
        profit = compute_vehicle_profit(vehicle, [])
        postings = build_ledger_postings(vehicle, profit)

        assert [p.category for p in postings] == [VEHICLE_SALE]

    def test_falls_back_to_given_date(self):
        vehicle = make_vehicle(sale_date=None)
        profit = compute_vehicle_profit(vehicle, [])
        postings = build_ledger_postings(vehicle, profit, on_date=date(2024, 5, 1))
        assert {p.date for p in postings} == {date(2024, 5, 1)}
