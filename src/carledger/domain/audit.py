"""Audit trail domain service."""

import logging
from typing import Any, Optional

from carledger.database.base import Database
from carledger.domain.entities import AuditLogEntry

logger = logging.getLogger(__name__)

# Action types
CREATE = "CREATE"
UPDATE = "UPDATE"
DELETE = "DELETE"
AUTO_DISTRIBUTE = "AUTO_DISTRIBUTE"
RESTORE = "RESTORE"

# Entity types
TRANSACTION = "TRANSACTION"
VEHICLE = "VEHICLE"
VEHICLE_EXPENSE = "VEHICLE_EXPENSE"
PROFIT_DISTRIBUTION = "PROFIT_DISTRIBUTION"
CATEGORY = "CATEGORY"
SETTINGS = "SETTINGS"
GLOBAL_SETTINGS = "GLOBAL_SETTINGS"
BACKUP = "BACKUP"


class AuditService:
    """Fire-and-forget audit sink.

    ``record`` never raises: a failed audit write is logged and the
    originating operation carries on.
    """

    def __init__(self, db: Database, user_id: Optional[str] = None):
        """Initialize audit service.

        Args:
            db: Database instance
            user_id: Identity recorded on every entry
        """
        self.db = db
        self.user_id = user_id

    def record(
        self,
        action_type: str,
        entity_type: str,
        entity_id: Any,
        description: str,
        old_data: Optional[Any] = None,
        new_data: Optional[Any] = None,
    ) -> None:
        """Append an audit entry, swallowing any failure."""
        try:
            self.db.create_audit_log(
                action_type=action_type,
                entity_type=entity_type,
                entity_id=None if entity_id is None else str(entity_id),
                description=description,
                user_id=self.user_id,
                old_data=old_data,
                new_data=new_data,
            )
        except Exception:
            logger.exception(
                "Failed to write audit entry %s %s %s", action_type, entity_type, entity_id
            )

    def list_entries(
        self, entity_type: Optional[str] = None, limit: Optional[int] = None
    ) -> list[AuditLogEntry]:
        """List audit entries, newest first."""
        return self.db.list_audit_logs(entity_type=entity_type, limit=limit)
