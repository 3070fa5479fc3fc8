"""Backup and restore of the business tables as a JSON envelope."""

import json
import logging
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional

from carledger.database.base import Database
from carledger.domain import audit
from carledger.domain.audit import AuditService
from carledger.domain.errors import ValidationError

logger = logging.getLogger(__name__)

BACKUP_TABLES = (
    "vehicles",
    "vehicle_expenses",
    "profit_distributions",
    "transactions",
    "categories",
    "financial_settings",
    "global_settings",
)
HEADER_FIELDS = ("backup_id", "created_at", "type")
MANUAL_BACKUP = "manual"


def is_valid_backup(backup: Any) -> bool:
    """Return True if ``backup`` has the envelope headers and all table arrays."""
    try:
        validate_backup(backup)
    except ValidationError:
        return False
    return True


def validate_backup(backup: Any) -> None:
    """Check the backup envelope before anything is written.

    Raises:
        ValidationError: Describing the first problem found
    """
    if not isinstance(backup, dict):
        raise ValidationError("Invalid backup file format: expected a JSON object")
    for name in HEADER_FIELDS:
        if not isinstance(backup.get(name), str):
            raise ValidationError(f"Invalid backup file format: '{name}' must be a string")
    tables = backup.get("tables")
    if not isinstance(tables, dict):
        raise ValidationError("Invalid backup file format: missing 'tables'")
    for name in BACKUP_TABLES:
        rows = tables.get(name)
        if not isinstance(rows, list):
            raise ValidationError(f"Invalid backup file format: '{name}' must be a list")
        if not all(isinstance(row, dict) for row in rows):
            raise ValidationError(f"Invalid backup file format: rows of '{name}' must be objects")


def default_backup_filename(today: Optional[datetime] = None) -> str:
    """File name used when saving a backup without an explicit path."""
    return f"backup_{(today or datetime.now()).date().isoformat()}.json"


class BackupService:
    """Service for creating and restoring backups."""

    def __init__(self, db: Database, audit_service: Optional[AuditService] = None):
        """Initialize backup service.

        Args:
            db: Database instance
            audit_service: Audit sink, defaults to an anonymous one
        """
        self.db = db
        self.audit = audit_service or AuditService(db)

    def create_backup(self, backup_type: str = MANUAL_BACKUP) -> dict[str, Any]:
        """Dump all business tables into a backup envelope.

        Decimals are stored as strings and dates as ISO 8601 text.
        """
        tables = self.db.export_tables()
        backup = {
            "backup_id": str(uuid.uuid4()),
            "created_at": datetime.now(timezone.utc).isoformat(),
            "type": backup_type,
            "tables": {name: tables.get(name, []) for name in BACKUP_TABLES},
        }
        logger.info(
            "Created backup %s with %d rows",
            backup["backup_id"],
            sum(len(rows) for rows in backup["tables"].values()),
        )
        return backup

    def restore_backup(self, backup: dict[str, Any]) -> None:
        """Replace every business table with the backup's contents.

        The backup is validated first, then all tables are replaced in a
        single commit.

        Raises:
            ValidationError: If the envelope is malformed
        """
        validate_backup(backup)
        self.db.replace_tables({name: backup["tables"][name] for name in BACKUP_TABLES})
        logger.info("Restored backup %s", backup["backup_id"])
        self.audit.record(
            audit.RESTORE,
            audit.BACKUP,
            backup["backup_id"],
            f"Restored backup created at {backup['created_at']}",
            new_data={
                name: len(backup["tables"][name]) for name in BACKUP_TABLES
            },
        )

    def save_backup(self, backup: dict[str, Any], path: Path) -> Path:
        """Write a backup to ``path`` as indented JSON."""
        path = Path(path)
        path.write_text(json.dumps(backup, indent=2), encoding="utf-8")
        return path

    def load_backup(self, path: Path) -> dict[str, Any]:
        """Read and validate a backup file.

        Raises:
            ValidationError: If the file is not JSON or not a valid backup
        """
        try:
            backup = json.loads(Path(path).read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            raise ValidationError(f"Invalid backup file format: {e}")
        validate_backup(backup)
        return backup
