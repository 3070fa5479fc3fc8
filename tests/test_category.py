"""Tests for categories."""

import pytest
from datetime import date
from decimal import Decimal

from carledger.cli.main import cli
from carledger.domain.constants import DEFAULT_CATEGORIES
from carledger.domain.errors import ConflictError, NotFoundError, ValidationError


def test_init_categories(cli_runner, temp_db):
    """Test initializing categories."""
    result = cli_runner.invoke(
        cli, ["--db-path", temp_db.database_path, "init-categories"]
    )

    assert result.exit_code == 0
    assert f"Successfully created {len(DEFAULT_CATEGORIES)} categories." in result.output
    assert "Profit-AHMED" in result.output


def test_init_categories_duplicate(cli_runner, temp_db):
    """Test initializing categories twice."""
    result1 = cli_runner.invoke(
        cli, ["--db-path", temp_db.database_path, "init-categories"]
    )
    assert result1.exit_code == 0

    result2 = cli_runner.invoke(
        cli, ["--db-path", temp_db.database_path, "init-categories"]
    )

    assert result2.exit_code == 0
    assert "already exist" in result2.output.lower()


def test_init_categories_fills_gaps(category_service):
    category_service.create_category("Contribution")

    created = category_service.init_default_categories()

    assert "Contribution" not in created
    assert len(created) == len(DEFAULT_CATEGORIES) - 1
    assert {c.name for c in category_service.list_categories()} == set(DEFAULT_CATEGORIES)


def test_category_list(cli_runner, temp_db, category_service):
    """Test listing categories."""
    category_service.create_category("Contribution")
    category_service.create_category("Vehicle Sale")

    result = cli_runner.invoke(
        cli, ["--db-path", temp_db.database_path, "category", "list"]
    )

    assert result.exit_code == 0
    assert "Contribution" in result.output
    assert "Vehicle Sale" in result.output


def test_category_list_empty(cli_runner, temp_db):
    result = cli_runner.invoke(
        cli, ["--db-path", temp_db.database_path, "category", "list"]
    )

    assert result.exit_code == 0
    assert "No categories found" in result.output


def test_category_list_stats(cli_runner, temp_db, category_service, transaction_service):
    """Test listing categories with derived totals."""
    category_service.create_category("Contribution")
    transaction_service.create_transaction(
        amount=Decimal("1000"), type="income", category="Contribution", date=date(2024, 1, 1)
    )
    transaction_service.create_transaction(
        amount=Decimal("250"), type="income", category="Contribution", date=date(2024, 1, 2)
    )

    result = cli_runner.invoke(
        cli, ["--db-path", temp_db.database_path, "category", "list", "--stats"]
    )

    assert result.exit_code == 0
    assert "AED 1,250.00" in result.output


def test_category_create(cli_runner, temp_db):
    """Test creating a category."""
    result = cli_runner.invoke(
        cli,
        ["--db-path", temp_db.database_path, "category", "create", "Showroom Rent"],
    )

    assert result.exit_code == 0
    assert "Created category 'Showroom Rent'" in result.output


def test_category_create_duplicate(cli_runner, temp_db, category_service):
    """Test creating a category whose name is taken."""
    category_service.create_category("Contribution")

    result = cli_runner.invoke(
        cli,
        ["--db-path", temp_db.database_path, "category", "create", "Contribution"],
    )

    assert result.exit_code == 1
    assert "already exists" in result.output


def test_category_rename(cli_runner, temp_db, category_service):
    category_id = category_service.create_category("Rent")

    result = cli_runner.invoke(
        cli,
        ["--db-path", temp_db.database_path, "category", "rename", str(category_id), "Showroom Rent"],
    )

    assert result.exit_code == 0
    assert "Renamed category" in result.output


def test_category_delete(cli_runner, temp_db, category_service):
    category_id = category_service.create_category("Rent")

    result = cli_runner.invoke(
        cli,
        ["--db-path", temp_db.database_path, "category", "delete", str(category_id), "--yes"],
    )

    assert result.exit_code == 0
    assert f"Deleted category {category_id}" in result.output


def test_category_delete_not_found(cli_runner, temp_db):
    result = cli_runner.invoke(
        cli,
        ["--db-path", temp_db.database_path, "category", "delete", "999", "--yes"],
    )

    assert result.exit_code == 1
    assert "Category 999 not found" in result.output


class TestCategoryService:
    """Tests for CategoryService."""

    def test_create_strips_name(self, category_service):
        category_id = category_service.create_category("  Rent  ")
        assert category_service.get_category(category_id).name == "Rent"

    def test_create_blank_rejected(self, category_service):
        with pytest.raises(ValidationError):
            category_service.create_category("   ")

    def test_create_duplicate_rejected(self, category_service):
        category_service.create_category("Rent")
        with pytest.raises(ConflictError, match="Category 'Rent' already exists"):
            category_service.create_category("Rent")

    def test_rename_to_taken_name_rejected(self, category_service):
        category_service.create_category("Rent")
        other_id = category_service.create_category("Utilities")
        with pytest.raises(ConflictError):
            category_service.rename_category(other_id, "Rent")

    def test_rename_to_same_name_allowed(self, category_service):
        category_id = category_service.create_category("Rent")
        assert category_service.rename_category(category_id, "Rent").name == "Rent"

    def test_rename_missing(self, category_service):
        with pytest.raises(NotFoundError):
            category_service.rename_category(999, "Rent")

    def test_rename_keeps_transaction_text(self, category_service, transaction_service):
        category_id = category_service.create_category("Rent")
        transaction_id = transaction_service.create_transaction(
            amount=Decimal("100"), type="expense", category="Rent", date=date(2024, 1, 1)
        )

        category_service.rename_category(category_id, "Showroom Rent")

        assert transaction_service.get_transaction(transaction_id).category == "Rent"

    def test_stats(self, category_service, transaction_service):
        category_service.create_category("Contribution")
        category_service.create_category("Distribution")
        transaction_service.create_transaction(
            amount=Decimal("1000"), type="income", category="Contribution", date=date(2024, 1, 1)
        )
        transaction_service.create_transaction(
            amount=Decimal("300"), type="expense", category="Contribution", date=date(2024, 1, 1)
        )

        stats = {row.category.name: row for row in category_service.list_category_stats()}

        assert stats["Contribution"].transaction_count == 2
        assert stats["Contribution"].total_income == Decimal("1000")
        assert stats["Contribution"].total_expenses == Decimal("300")
        assert stats["Distribution"].transaction_count == 0
        assert stats["Distribution"].total_income == Decimal("0")

    def test_list_sorted_by_name(self, category_service):
        for name in ("Vehicle Sale", "Contribution", "Distribution"):
            category_service.create_category(name)
        assert [c.name for c in category_service.list_categories()] == [
            "Contribution",
            "Distribution",
            "Vehicle Sale",
        ]
