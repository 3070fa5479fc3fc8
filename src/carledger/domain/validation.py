"""Input validation shared by the domain services."""

from decimal import Decimal, InvalidOperation
from typing import Any, Optional

from carledger.domain.errors import ValidationError, amount_not_positive


def require_positive_amount(value: Any, field_name: str = "amount") -> Decimal:
    """Return ``value`` as a Decimal, rejecting non-numbers and values <= 0."""
    if value is None:
        raise ValidationError(f"Missing required field: {field_name}")
    try:
        amount = value if isinstance(value, Decimal) else Decimal(str(value))
    except InvalidOperation:
        raise ValidationError(f"Invalid {field_name.replace('_', ' ')}: {value!r}")
    if not amount.is_finite() or amount <= 0:
        raise ValidationError(amount_not_positive(field_name))
    return amount


def require_text(value: Optional[str], field_name: str) -> str:
    """Return stripped text, rejecting missing or blank values."""
    if value is None or not str(value).strip():
        raise ValidationError(f"Missing required field: {field_name}")
    return str(value).strip()


def optional_text(value: Optional[str]) -> Optional[str]:
    """Strip text and turn blanks into None."""
    if value is None:
        return None
    value = str(value).strip()
    return value or None
