"""Tests for transactions."""

import pytest
from datetime import date, timedelta
from decimal import Decimal

from carledger.cli.main import cli
from carledger.domain import audit
from carledger.domain.entities import TransactionType
from carledger.domain.errors import NotFoundError, ValidationError


def _add(cli_runner, temp_db, *args):
    return cli_runner.invoke(
        cli, ["--db-path", temp_db.database_path, "transaction", "add", *args]
    )


def test_add_transaction_minimal(cli_runner, temp_db):
    """Test adding a transaction with required fields only."""
    result = _add(
        cli_runner,
        temp_db,
        "--type",
        "income",
        "--amount",
        "5000",
        "--category",
        "Contribution",
        "--date",
        "2024-01-15",
    )

    assert result.exit_code == 0
    assert "Created transaction" in result.output
    assert "income AED 5,000.00 (Contribution) on 2024-01-15" in result.output


def test_add_transaction_formatted_amount(cli_runner, temp_db):
    """Amounts may carry the currency code and thousands separators."""
    result = _add(
        cli_runner,
        temp_db,
        "--type",
        "expense",
        "--amount",
        "AED 1,200.50",
        "--category",
        "Personal Expenses",
        "--date",
        "2024-01-15",
    )

    assert result.exit_code == 0
    assert "AED 1,200.50" in result.output


def test_add_transaction_with_relative_date(cli_runner, temp_db):
    """Test adding a transaction with relative date."""
    result = _add(
        cli_runner,
        temp_db,
        "--type",
        "income",
        "--amount",
        "100",
        "--category",
        "Contribution",
        "--date",
        "yesterday",
    )

    assert result.exit_code == 0
    assert str(date.today() - timedelta(days=1)) in result.output


def test_add_transaction_defaults_to_today(cli_runner, temp_db):
    result = _add(
        cli_runner, temp_db, "--type", "income", "--amount", "100", "--category", "Contribution"
    )

    assert result.exit_code == 0
    assert str(date.today()) in result.output


def test_add_transaction_negative_amount(cli_runner, temp_db):
    """Amounts must be positive; direction comes from --type."""
    result = _add(
        cli_runner,
        temp_db,
        "--type",
        "expense",
        "--amount=-50",
        "--category",
        "Distribution",
    )

    assert result.exit_code == 1
    assert "greater than zero" in result.output


def test_add_transaction_invalid_amount(cli_runner, temp_db):
    result = _add(
        cli_runner, temp_db, "--type", "income", "--amount", "lots", "--category", "Contribution"
    )

    assert result.exit_code == 1
    assert "Invalid amount" in result.output


def test_add_transaction_invalid_type(cli_runner, temp_db):
    result = _add(
        cli_runner, temp_db, "--type", "refund", "--amount", "10", "--category", "Contribution"
    )

    assert result.exit_code == 2


def test_add_transaction_invalid_date(cli_runner, temp_db):
    result = _add(
        cli_runner,
        temp_db,
        "--type",
        "income",
        "--amount",
        "10",
        "--category",
        "Contribution",
        "--date",
        "not-a-date",
    )

    assert result.exit_code == 1
    assert "Invalid date" in result.output


def test_list_transactions(cli_runner, temp_db, transaction_service):
    transaction_service.create_transaction(
        amount=Decimal("5000"),
        type="income",
        category="Contribution",
        date=date(2024, 1, 15),
        description="Capital injection",
    )
    transaction_service.create_transaction(
        amount=Decimal("1200"),
        type="expense",
        category="Personal Expenses",
        date=date(2024, 2, 1),
    )

    result = cli_runner.invoke(
        cli, ["--db-path", temp_db.database_path, "transaction", "list"]
    )

    assert result.exit_code == 0
    assert "Capital injection" in result.output
    assert "Total Income:" in result.output
    assert "AED 3,800.00" in result.output
    assert "2 transaction(s)" in result.output
    # Newest first
    assert result.output.index("2024-02-01") < result.output.index("2024-01-15")


def test_list_transactions_filters(cli_runner, temp_db, transaction_service):
    transaction_service.create_transaction(
        amount=Decimal("5000"), type="income", category="Contribution", date=date(2024, 1, 15)
    )
    transaction_service.create_transaction(
        amount=Decimal("1200"), type="expense", category="Personal Expenses", date=date(2024, 2, 1)
    )

    result = cli_runner.invoke(
        cli,
        [
            "--db-path",
            temp_db.database_path,
            "transaction",
            "list",
            "--start-date",
            "2024-02-01",
            "--type",
            "expense",
        ],
    )

    assert result.exit_code == 0
    assert "Personal Expenses" in result.output
    assert "Contribution" not in result.output
    assert "1 transaction(s)" in result.output


def test_list_transactions_empty(cli_runner, temp_db):
    result = cli_runner.invoke(
        cli, ["--db-path", temp_db.database_path, "transaction", "list", "--this-month"]
    )

    assert result.exit_code == 0
    assert "No transactions found." in result.output


def test_list_transactions_inverted_range(cli_runner, temp_db):
    result = cli_runner.invoke(
        cli,
        [
            "--db-path",
            temp_db.database_path,
            "transaction",
            "list",
            "--start-date",
            "2024-03-01",
            "--end-date",
            "2024-01-01",
        ],
    )

    assert result.exit_code == 1
    assert "Start date must not be after end date" in result.output


def test_show_transaction(cli_runner, temp_db, transaction_service):
    transaction_id = transaction_service.create_transaction(
        amount=Decimal("750"),
        type="expense",
        category="Distribution",
        date=date(2024, 1, 15),
        description="Monthly draw",
    )

    result = cli_runner.invoke(
        cli, ["--db-path", temp_db.database_path, "transaction", "show", str(transaction_id)]
    )

    assert result.exit_code == 0
    assert f"Transaction ID: {transaction_id}" in result.output
    assert "Amount: AED 750.00" in result.output
    assert "Description: Monthly draw" in result.output


def test_show_transaction_not_found(cli_runner, temp_db):
    result = cli_runner.invoke(
        cli, ["--db-path", temp_db.database_path, "transaction", "show", "999"]
    )

    assert result.exit_code == 1
    assert "Transaction 999 not found" in result.output


def test_update_transaction(cli_runner, temp_db, transaction_service):
    transaction_id = transaction_service.create_transaction(
        amount=Decimal("750"), type="expense", category="Distribution", date=date(2024, 1, 15)
    )

    result = cli_runner.invoke(
        cli,
        [
            "--db-path",
            temp_db.database_path,
            "transaction",
            "update",
            str(transaction_id),
            "--amount",
            "800",
            "--description",
            "Corrected",
        ],
    )

    assert result.exit_code == 0
    assert f"Updated transaction {transaction_id}" in result.output

    result = cli_runner.invoke(
        cli, ["--db-path", temp_db.database_path, "transaction", "show", str(transaction_id)]
    )
    assert "AED 800.00" in result.output
    assert "Corrected" in result.output


def test_update_transaction_not_found(cli_runner, temp_db):
    result = cli_runner.invoke(
        cli,
        ["--db-path", temp_db.database_path, "transaction", "update", "999", "--amount", "5"],
    )

    assert result.exit_code == 1
    assert "Transaction 999 not found" in result.output


def test_delete_transaction(cli_runner, temp_db, transaction_service):
    transaction_id = transaction_service.create_transaction(
        amount=Decimal("750"), type="expense", category="Distribution", date=date(2024, 1, 15)
    )

    result = cli_runner.invoke(
        cli,
        ["--db-path", temp_db.database_path, "transaction", "delete", str(transaction_id), "--yes"],
    )

    assert result.exit_code == 0
    assert f"Deleted transaction {transaction_id}" in result.output


def test_delete_transaction_requires_confirmation(cli_runner, temp_db, transaction_service):
    transaction_id = transaction_service.create_transaction(
        amount=Decimal("750"), type="expense", category="Distribution", date=date(2024, 1, 15)
    )

    result = cli_runner.invoke(
        cli,
        ["--db-path", temp_db.database_path, "transaction", "delete", str(transaction_id)],
        input="n\n",
    )

    assert result.exit_code == 1
    assert transaction_service.get_transaction(transaction_id) is not None


class TestTransactionService:
    """Tests for TransactionService."""

    def test_create_and_get(self, transaction_service):
        transaction_id = transaction_service.create_transaction(
            amount=Decimal("5000"),
            type="INCOME",
            category=" Contribution ",
            date=date(2024, 1, 15),
            description="  Capital  ",
        )
        txn = transaction_service.get_transaction(transaction_id)

        assert txn.type == TransactionType.INCOME
        assert txn.amount == Decimal("5000")
        assert txn.category == "Contribution"
        assert txn.description == "Capital"
        assert txn.reference_id is None

    @pytest.mark.parametrize("amount", [Decimal("0"), Decimal("-1"), None, "abc"])
    def test_create_rejects_bad_amount(self, transaction_service, amount):
        with pytest.raises(ValidationError):
            transaction_service.create_transaction(
                amount=amount, type="income", category="Contribution", date=date(2024, 1, 1)
            )

    def test_create_rejects_bad_type(self, transaction_service):
        with pytest.raises(ValidationError, match="Invalid transaction type"):
            transaction_service.create_transaction(
                amount=Decimal("1"), type="refund", category="Contribution", date=date(2024, 1, 1)
            )

    def test_create_requires_category(self, transaction_service):
        with pytest.raises(ValidationError, match="category"):
            transaction_service.create_transaction(
                amount=Decimal("1"), type="income", category="", date=date(2024, 1, 1)
            )

    def test_create_requires_date(self, transaction_service):
        with pytest.raises(ValidationError, match="date"):
            transaction_service.create_transaction(
                amount=Decimal("1"), type="income", category="Contribution", date=None
            )

    def test_list_filters(self, transaction_service):
        for day, txn_type, category in (
            (1, "income", "Contribution"),
            (10, "expense", "Distribution"),
            (20, "income", "Profit-AHMED"),
        ):
            transaction_service.create_transaction(
                amount=Decimal("10"), type=txn_type, category=category, date=date(2024, 1, day)
            )

        in_range = transaction_service.list_transactions(
            start_date=date(2024, 1, 5), end_date=date(2024, 1, 20)
        )
        assert [t.category for t in in_range] == ["Profit-AHMED", "Distribution"]
        income = transaction_service.list_transactions(type=TransactionType.INCOME)
        assert len(income) == 2
        assert [t.date.day for t in transaction_service.list_transactions(category="Contribution")] == [1]

    def test_list_inverted_range_rejected(self, transaction_service):
        with pytest.raises(ValidationError):
            transaction_service.list_transactions(
                start_date=date(2024, 2, 1), end_date=date(2024, 1, 1)
            )

    def test_update_partial(self, transaction_service):
        transaction_id = transaction_service.create_transaction(
            amount=Decimal("10"), type="income", category="Contribution", date=date(2024, 1, 1)
        )

        updated = transaction_service.update_transaction(transaction_id, category="Vehicle Sale")

        assert updated.category == "Vehicle Sale"
        assert updated.amount == Decimal("10")
        assert updated.date == date(2024, 1, 1)

    def test_update_missing(self, transaction_service):
        with pytest.raises(NotFoundError, match="Transaction 999 not found"):
            transaction_service.update_transaction(999, amount=Decimal("1"))

    def test_delete(self, transaction_service):
        transaction_id = transaction_service.create_transaction(
            amount=Decimal("10"), type="income", category="Contribution", date=date(2024, 1, 1)
        )
        transaction_service.delete_transaction(transaction_id)
        assert transaction_service.get_transaction(transaction_id) is None

    def test_delete_missing(self, transaction_service):
        with pytest.raises(NotFoundError):
            transaction_service.delete_transaction(999)

    def test_writes_are_audited(self, transaction_service, audit_service):
        transaction_id = transaction_service.create_transaction(
            amount=Decimal("10"), type="income", category="Contribution", date=date(2024, 1, 1)
        )
        transaction_service.update_transaction(transaction_id, amount=Decimal("20"))
        transaction_service.delete_transaction(transaction_id)

        entries = audit_service.list_entries(entity_type=audit.TRANSACTION)
        assert sorted(e.action_type for e in entries) == [audit.CREATE, audit.DELETE, audit.UPDATE]
        update = next(e for e in entries if e.action_type == audit.UPDATE)
        assert update.old_data["amount"] == "10.00"
        assert update.new_data["amount"] == "20.00"


class TestLinkedTransactions:
    """Tests for transactions mirroring a vehicle expense."""

    def test_sync_creates_then_updates(self, transaction_service, temp_db):
        first = transaction_service.sync_linked_transaction(
            reference_id=7,
            amount=Decimal("100"),
            type="expense",
            category="Vehicle Expense",
            description="Vehicle Expense - test",
            date=date(2024, 1, 1),
        )
        second = transaction_service.sync_linked_transaction(
            reference_id=7,
            amount=Decimal("150"),
            type="expense",
            category="Vehicle Expense",
            description="Vehicle Expense - test",
            date=date(2024, 1, 2),
        )

        assert first == second
        [linked] = temp_db.list_transactions_by_reference(7)
        assert linked.amount == Decimal("150")
        assert linked.date == date(2024, 1, 2)

    def test_sync_collapses_duplicates(self, transaction_service, audit_service, temp_db):
        ids = [
            transaction_service.create_transaction(
                amount=Decimal("100"),
                type="expense",
                category="Vehicle Expense",
                date=date(2024, 1, 1),
                reference_id=7,
            )
            for _ in range(3)
        ]

        kept = transaction_service.sync_linked_transaction(
            reference_id=7,
            amount=Decimal("120"),
            type="expense",
            category="Vehicle Expense",
            description="x",
            date=date(2024, 1, 1),
        )

        assert kept == ids[0]
        assert [t.id for t in temp_db.list_transactions_by_reference(7)] == [ids[0]]
        deletions = [
            e
            for e in audit_service.list_entries(entity_type=audit.TRANSACTION)
            if e.action_type == audit.DELETE
        ]
        assert sorted(e.entity_id for e in deletions) == sorted(str(i) for i in ids[1:])
        assert all("duplicate" in e.description for e in deletions)

    def test_delete_linked(self, transaction_service, temp_db):
        for _ in range(2):
            transaction_service.create_transaction(
                amount=Decimal("100"),
                type="expense",
                category="Vehicle Expense",
                date=date(2024, 1, 1),
                reference_id=7,
            )
        transaction_service.create_transaction(
            amount=Decimal("5"), type="income", category="Contribution", date=date(2024, 1, 1)
        )

        assert transaction_service.delete_linked_transactions(7) == 2
        assert temp_db.list_transactions_by_reference(7) == []
        assert len(transaction_service.list_transactions()) == 1
        assert transaction_service.delete_linked_transactions(7) == 0
