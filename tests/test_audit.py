"""Tests for the audit trail."""

from datetime import date
from decimal import Decimal
from sqlalchemy.exc import OperationalError

from carledger.cli.main import cli
from carledger.domain import audit
from carledger.domain.audit import AuditService


def test_record_and_list(audit_service):
    audit_service.record(
        audit.CREATE,
        audit.VEHICLE,
        7,
        "Created vehicle: 2019 Toyota Camry",
        new_data={"price": Decimal("50000"), "bought": date(2024, 1, 10)},
    )

    [entry] = audit_service.list_entries()
    assert entry.entity_id == "7"
    assert entry.user_id == "tester"
    assert entry.old_data is None
    assert entry.new_data == {"price": "50000", "bought": "2024-01-10"}


def test_list_newest_first_with_limit(audit_service):
    for n in range(5):
        audit_service.record(audit.CREATE, audit.CATEGORY, n, f"Created category {n}")

    entries = audit_service.list_entries(limit=2)

    assert [e.entity_id for e in entries] == ["4", "3"]


def test_filter_by_entity_type(audit_service):
    audit_service.record(audit.CREATE, audit.CATEGORY, 1, "category")
    audit_service.record(audit.CREATE, audit.VEHICLE, 1, "vehicle")

    [entry] = audit_service.list_entries(entity_type=audit.VEHICLE)
    assert entry.description == "vehicle"


def test_anonymous_user(temp_db):
    service = AuditService(temp_db)
    service.record(audit.DELETE, audit.TRANSACTION, None, "gone")

    [entry] = service.list_entries()
    assert entry.user_id is None
    assert entry.entity_id is None


def test_failed_write_is_swallowed(temp_db, transaction_service, monkeypatch, caplog):
    """A failing audit sink never fails the operation it records."""

    def broken(**kwargs):
        raise OperationalError("INSERT", {}, Exception("disk I/O error"))

    monkeypatch.setattr(temp_db, "create_audit_log", broken)

    transaction_id = transaction_service.create_transaction(
        amount=Decimal("10"), type="income", category="Contribution", date=date(2024, 1, 1)
    )

    assert transaction_service.get_transaction(transaction_id) is not None
    assert "Failed to write audit entry CREATE TRANSACTION" in caplog.text


def test_audit_cli_list(cli_runner, temp_db, sample_vehicle):
    result = cli_runner.invoke(
        cli,
        [
            "--db-path",
            temp_db.database_path,
            "audit",
            "list",
            "--entity-type",
            "vehicle",
            "--verbose",
        ],
    )

    assert result.exit_code == 0
    assert "Created vehicle: 2019 Toyota Camry" in result.output
    assert "tester" in result.output
    assert '"vin": "JTNB11HK0K3000001"' in result.output


def test_cli_user_is_recorded(cli_runner, temp_db):
    result = cli_runner.invoke(
        cli,
        [
            "--db-path",
            temp_db.database_path,
            "--user",
            "nada",
            "category",
            "create",
            "Showroom Rent",
        ],
    )
    assert result.exit_code == 0

    [entry] = AuditService(temp_db).list_entries()
    assert entry.user_id == "nada"


def test_audit_cli_empty(cli_runner, temp_db):
    result = cli_runner.invoke(cli, ["--db-path", temp_db.database_path, "audit", "list"])

    assert result.exit_code == 0
    assert "No audit entries found." in result.output
