"""Transaction domain service."""

from typing import Optional
from datetime import date
from decimal import Decimal

from carledger.database.base import Database
from carledger.domain import audit
from carledger.domain.audit import AuditService
from carledger.domain.entities import Transaction as TransactionEntity, TransactionType
from carledger.domain.errors import NotFoundError, ValidationError, transaction_not_found
from carledger.domain.validation import require_positive_amount, require_text


def parse_transaction_type(value) -> TransactionType:
    """Coerce 'income'/'expense' (any case) into a TransactionType."""
    if isinstance(value, TransactionType):
        return value
    try:
        return TransactionType(str(value).strip().lower())
    except ValueError:
        raise ValidationError(f"Invalid transaction type '{value}', expected income or expense")


class TransactionService:
    """Service for managing ledger transactions."""

    def __init__(self, db: Database, audit_service: Optional[AuditService] = None):
        """Initialize transaction service.

        Args:
            db: Database instance
            audit_service: Audit sink, defaults to an anonymous one
        """
        self.db = db
        self.audit = audit_service or AuditService(db)

    def create_transaction(
        self,
        amount: Decimal,
        type: TransactionType,
        category: str,
        date: date,
        description: str = "",
        reference_id: Optional[int] = None,
    ) -> int:
        """Create a transaction.

        Args:
            amount: Positive amount
            type: income or expense
            category: Category name
            date: Transaction date
            description: Optional description
            reference_id: Vehicle expense this transaction mirrors, if any

        Returns:
            Transaction ID

        Raises:
            ValidationError: If a field is missing or the amount is not positive
        """
        amount = require_positive_amount(amount)
        txn_type = parse_transaction_type(type)
        category = require_text(category, "category")
        if date is None:
            raise ValidationError("Missing required field: date")

        transaction_id = self.db.create_transaction(
            amount=amount,
            type=txn_type,
            category=category,
            description=(description or "").strip(),
            date=date,
            reference_id=reference_id,
        )
        created = self.db.get_transaction(transaction_id)
        self.audit.record(
            audit.CREATE,
            audit.TRANSACTION,
            transaction_id,
            f"Created {txn_type.value} transaction: {created.description}",
            new_data=created,
        )
        return transaction_id

    def get_transaction(self, transaction_id: int) -> Optional[TransactionEntity]:
        """Get transaction by ID."""
        return self.db.get_transaction(transaction_id)

    def list_transactions(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        type: Optional[TransactionType] = None,
        category: Optional[str] = None,
    ) -> list[TransactionEntity]:
        """List transactions, newest first.

        Raises:
            ValidationError: If start_date is after end_date
        """
        if start_date is not None and end_date is not None and start_date > end_date:
            raise ValidationError("Start date must not be after end date")
        return self.db.list_transactions(
            start_date=start_date,
            end_date=end_date,
            type=None if type is None else parse_transaction_type(type),
            category=category,
        )

    def update_transaction(
        self,
        transaction_id: int,
        amount: Optional[Decimal] = None,
        type: Optional[TransactionType] = None,
        category: Optional[str] = None,
        description: Optional[str] = None,
        date: Optional[date] = None,
    ) -> TransactionEntity:
        """Update the provided fields of a transaction.

        Raises:
            NotFoundError: If the transaction doesn't exist
            ValidationError: If a provided field is invalid
        """
        old = self.db.get_transaction(transaction_id)
        if old is None:
            raise NotFoundError(transaction_not_found(transaction_id))

        fields = {}
        if amount is not None:
            fields["amount"] = require_positive_amount(amount)
        if type is not None:
            fields["type"] = parse_transaction_type(type)
        if category is not None:
            fields["category"] = require_text(category, "category")
        if description is not None:
            fields["description"] = description.strip()
        if date is not None:
            fields["date"] = date

        if fields:
            self.db.update_transaction(transaction_id, fields)
        updated = self.db.get_transaction(transaction_id)
        self.audit.record(
            audit.UPDATE,
            audit.TRANSACTION,
            transaction_id,
            f"Updated {updated.type.value} transaction: {updated.description}",
            old_data=old,
            new_data=updated,
        )
        return updated

    def delete_transaction(self, transaction_id: int) -> None:
        """Delete a transaction.

        Raises:
            NotFoundError: If the transaction doesn't exist
        """
        old = self.db.get_transaction(transaction_id)
        if old is None:
            raise NotFoundError(transaction_not_found(transaction_id))
        self.db.delete_transaction(transaction_id)
        self.audit.record(
            audit.DELETE,
            audit.TRANSACTION,
            transaction_id,
            f"Deleted {old.type.value} transaction: {old.description}",
            old_data=old,
        )

    def sync_linked_transaction(
        self,
        reference_id: int,
        amount: Decimal,
        type: TransactionType,
        category: str,
        description: str,
        date: date,
    ) -> int:
        """Make exactly one transaction mirror the given reference.

        Creates the transaction when none exists. Otherwise keeps the oldest
        linked transaction, deletes any extras and updates it in place.

        Returns:
            ID of the linked transaction
        """
        linked = self.db.list_transactions_by_reference(reference_id)
        if not linked:
            return self.create_transaction(
                amount=amount,
                type=type,
                category=category,
                date=date,
                description=description,
                reference_id=reference_id,
            )

        keep, extras = linked[0], linked[1:]
        for extra in extras:
            self.db.delete_transaction(extra.id)
            self.audit.record(
                audit.DELETE,
                audit.TRANSACTION,
                extra.id,
                f"Deleted duplicate linked transaction for expense {reference_id}",
                old_data=extra,
            )

        self.db.update_transaction(
            keep.id,
            {
                "amount": require_positive_amount(amount),
                "type": parse_transaction_type(type),
                "category": category,
                "description": description,
                "date": date,
            },
        )
        self.audit.record(
            audit.UPDATE,
            audit.TRANSACTION,
            keep.id,
            f"Updated linked transaction for expense {reference_id}",
            old_data=keep,
            new_data=self.db.get_transaction(keep.id),
        )
        return keep.id

    def delete_linked_transactions(self, reference_id: int) -> int:
        """Delete every transaction linked to a reference. Returns count deleted."""
        linked = self.db.list_transactions_by_reference(reference_id)
        for txn in linked:
            self.db.delete_transaction(txn.id)
            self.audit.record(
                audit.DELETE,
                audit.TRANSACTION,
                txn.id,
                f"Deleted linked transaction for expense {reference_id}",
                old_data=txn,
            )
        return len(linked)
