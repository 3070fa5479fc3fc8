"""Category domain service."""

from typing import Optional

from carledger.database.base import Database
from carledger.domain import audit
from carledger.domain.audit import AuditService
from carledger.domain.constants import DEFAULT_CATEGORIES
from carledger.domain.entities import Category, CategoryStats
from carledger.domain.errors import (
    ConflictError,
    NotFoundError,
    category_not_found,
    duplicate_category_name,
)
from carledger.domain.validation import require_text


class CategoryService:
    """Service for managing transaction categories.

    Transactions store their category as free text, so renaming or deleting
    a category never touches existing transactions.
    """

    def __init__(self, db: Database, audit_service: Optional[AuditService] = None):
        """Initialize category service.

        Args:
            db: Database instance
            audit_service: Audit sink, defaults to an anonymous one
        """
        self.db = db
        self.audit = audit_service or AuditService(db)

    def _require_unique(self, name: str, ignore_id: Optional[int] = None) -> None:
        existing = self.db.get_category_by_name(name)
        if existing is not None and existing.id != ignore_id:
            raise ConflictError(duplicate_category_name(name))

    def create_category(self, name: str) -> int:
        """Create a category.

        Returns:
            Category ID

        Raises:
            ValidationError: If the name is blank
            ConflictError: If the name is already taken
        """
        name = require_text(name, "name")
        self._require_unique(name)
        category_id = self.db.create_category(name)
        self.audit.record(
            audit.CREATE,
            audit.CATEGORY,
            category_id,
            f"Created category: {name}",
            new_data={"id": category_id, "name": name},
        )
        return category_id

    def get_category(self, category_id: int) -> Optional[Category]:
        """Get category by ID."""
        return self.db.get_category(category_id)

    def get_category_by_name(self, name: str) -> Optional[Category]:
        """Get category by exact name."""
        return self.db.get_category_by_name(name)

    def list_categories(self) -> list[Category]:
        """List all categories ordered by name."""
        return self.db.list_categories()

    def list_category_stats(self) -> list[CategoryStats]:
        """List categories with transaction count, income and expense totals."""
        return self.db.get_category_stats()

    def rename_category(self, category_id: int, name: str) -> Category:
        """Rename a category.

        Raises:
            NotFoundError: If the category doesn't exist
            ValidationError: If the name is blank
            ConflictError: If another category already has the name
        """
        old = self.db.get_category(category_id)
        if old is None:
            raise NotFoundError(category_not_found(category_id))
        name = require_text(name, "name")
        self._require_unique(name, ignore_id=category_id)

        self.db.rename_category(category_id, name)
        updated = self.db.get_category(category_id)
        self.audit.record(
            audit.UPDATE,
            audit.CATEGORY,
            category_id,
            f"Renamed category '{old.name}' to '{name}'",
            old_data=old,
            new_data=updated,
        )
        return updated

    def delete_category(self, category_id: int) -> None:
        """Delete a category.

        Raises:
            NotFoundError: If the category doesn't exist
        """
        old = self.db.get_category(category_id)
        if old is None:
            raise NotFoundError(category_not_found(category_id))
        self.db.delete_category(category_id)
        self.audit.record(
            audit.DELETE,
            audit.CATEGORY,
            category_id,
            f"Deleted category: {old.name}",
            old_data=old,
        )

    def init_default_categories(self) -> list[str]:
        """Create any missing default categories.

        Returns:
            Names of the categories that were created
        """
        created = []
        for name in DEFAULT_CATEGORIES:
            if self.db.get_category_by_name(name) is None:
                self.create_category(name)
                created.append(name)
        return created
