"""Shared domain error messages and error types."""


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested domain entity does not exist."""


class ConflictError(DomainError):
    """Domain conflict, such as uniqueness violations."""


class DataIntegrityError(DomainError):
    """Stored data violates an invariant and cannot be computed on."""


class TransientStoreError(DomainError):
    """The store stayed unreachable after all retries."""


def transaction_not_found(transaction_id: int) -> str:
    """Return message for missing transaction."""
    return f"Transaction {transaction_id} not found"


def vehicle_not_found(vehicle_id: int) -> str:
    """Return message for missing vehicle."""
    return f"Vehicle {vehicle_id} not found"


def expense_not_found(expense_id: int) -> str:
    """Return message for missing vehicle expense."""
    return f"Expense {expense_id} not found"


def category_not_found(category_id: int) -> str:
    """Return message for missing category by ID."""
    return f"Category {category_id} not found"


def duplicate_category_name(name: str) -> str:
    """Return message for a category name that is already taken."""
    return f"Category '{name}' already exists"


def amount_not_positive(field_name: str = "amount") -> str:
    """Return message for an amount that must be greater than zero."""
    return f"{field_name.replace('_', ' ').capitalize()} must be greater than zero"


def sold_vehicle_missing_sale_price(vehicle_id: int) -> str:
    """Return message for a SOLD vehicle without a sale price."""
    return f"Vehicle {vehicle_id} is marked SOLD but has no sale price"


def distribute_requires_sold(vehicle_id: int) -> str:
    """Return message when auto-distribute is attempted on an unsold vehicle."""
    return (
        f"Cannot distribute profit for vehicle {vehicle_id}: "
        "vehicle must be SOLD first"
    )


def store_unavailable(attempts: int) -> str:
    """Return message when the store could not be reached."""
    return (
        f"The database is unavailable after {attempts} attempt"
        f"{'s' if attempts != 1 else ''}. Please try again."
    )


def invalid_backup_value(table: str, column: str, value: object) -> str:
    """Return message for a backup cell that does not fit its column."""
    return f"Invalid backup file format: bad value {value!r} for {table}.{column}"
