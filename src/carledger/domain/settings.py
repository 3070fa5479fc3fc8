"""Settings domain service for the financial and global singletons."""

import logging
from dataclasses import asdict, replace
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

from carledger.database.base import Database
from carledger.domain import audit
from carledger.domain.aggregation import DEFAULT_FINANCIAL_SETTINGS
from carledger.domain.audit import AuditService
from carledger.domain.constants import CURRENCY
from carledger.domain.entities import FinancialSettings, GlobalSettings
from carledger.domain.errors import ValidationError
from carledger.domain.validation import require_positive_amount

logger = logging.getLogger(__name__)

DEFAULT_GLOBAL_SETTINGS = GlobalSettings(
    company_name="Challenger Used Cars",
    company_address=(
        "Showroom No 801/290, Opposite Tamouh Souq Al Haraj - Al Ruqa Al Hamra, "
        "Sharjah, United Arab Emirates"
    ),
    company_phone="+971 50 123 4567",
    company_email="info@challengerucars.com",
    currency=CURRENCY,
    exchange_rate=Decimal("3.6725"),
    date_format="YYYY-MM-DD",
    auto_logout_minutes=30,
)

FINANCIAL_FIELDS = ("cash_on_hand", "showroom_balance", "personal_loan", "additional", "expenses")
GLOBAL_TEXT_FIELDS = ("company_name", "company_address", "company_phone", "company_email", "date_format")


def _to_decimal(value: Any, field_name: str) -> Decimal:
    try:
        amount = value if isinstance(value, Decimal) else Decimal(str(value))
    except InvalidOperation:
        raise ValidationError(f"Invalid {field_name.replace('_', ' ')}: {value!r}")
    if not amount.is_finite():
        raise ValidationError(f"Invalid {field_name.replace('_', ' ')}: {value!r}")
    return amount


class SettingsService:
    """Service for the financial baseline and company-wide settings."""

    def __init__(self, db: Database, audit_service: Optional[AuditService] = None):
        """Initialize settings service.

        Args:
            db: Database instance
            audit_service: Audit sink, defaults to an anonymous one
        """
        self.db = db
        self.audit = audit_service or AuditService(db)

    def get_financial_settings(self) -> FinancialSettings:
        """Return the financial settings, storing the default baseline on first use."""
        settings = self.db.get_financial_settings()
        if settings is None:
            logger.info("No financial settings stored, creating default baseline")
            self.db.save_financial_settings(DEFAULT_FINANCIAL_SETTINGS)
            settings = self.db.get_financial_settings()
        return settings

    def update_financial_settings(self, **changes: Any) -> FinancialSettings:
        """Update any of cash_on_hand, showroom_balance, personal_loan,
        additional and expenses. Values may be zero or negative.

        Raises:
            ValidationError: On an unknown field or a non-numeric value
        """
        unknown = set(changes) - set(FINANCIAL_FIELDS)
        if unknown:
            raise ValidationError(f"Unknown financial setting(s): {', '.join(sorted(unknown))}")

        old = self.get_financial_settings()
        values = {
            name: _to_decimal(value, name)
            for name, value in changes.items()
            if value is not None
        }
        self.db.save_financial_settings(replace(old, **values))
        updated = self.db.get_financial_settings()
        self.audit.record(
            audit.UPDATE,
            audit.SETTINGS,
            "financial-settings",
            "Updated financial settings",
            old_data=old,
            new_data=updated,
        )
        return updated

    def get_global_settings(self) -> GlobalSettings:
        """Return the global settings, falling back to defaults when none are stored.

        Currency is always AED regardless of what is stored.
        """
        settings = self.db.get_global_settings()
        if settings is None:
            return DEFAULT_GLOBAL_SETTINGS
        return replace(settings, currency=CURRENCY)

    def update_global_settings(self, **changes: Any) -> GlobalSettings:
        """Update company-wide settings.

        Raises:
            ValidationError: On an unknown field or an invalid value
        """
        allowed = set(asdict(DEFAULT_GLOBAL_SETTINGS)) - {"updated_at"}
        unknown = set(changes) - allowed
        if unknown:
            raise ValidationError(f"Unknown global setting(s): {', '.join(sorted(unknown))}")

        old = self.get_global_settings()
        values: dict[str, Any] = {}
        for name in GLOBAL_TEXT_FIELDS:
            if changes.get(name) is not None:
                values[name] = changes[name].strip()
        if not values.get("company_name", old.company_name):
            raise ValidationError("Missing required field: company_name")
        if changes.get("exchange_rate") is not None:
            values["exchange_rate"] = require_positive_amount(
                changes["exchange_rate"], "exchange_rate"
            )
        if changes.get("auto_logout_minutes") is not None:
            try:
                minutes = int(changes["auto_logout_minutes"])
            except (TypeError, ValueError):
                raise ValidationError("Auto logout minutes must be a whole number")
            if minutes <= 0:
                raise ValidationError("Auto logout minutes must be greater than zero")
            values["auto_logout_minutes"] = minutes
        if changes.get("currency") is not None and changes["currency"] != CURRENCY:
            logger.warning("Ignoring currency %r, currency is always %s", changes["currency"], CURRENCY)
        values["currency"] = CURRENCY

        self.db.save_global_settings(replace(old, **values))
        updated = self.get_global_settings()
        self.audit.record(
            audit.UPDATE,
            audit.GLOBAL_SETTINGS,
            "global-settings",
            "Updated global settings",
            old_data=old,
            new_data=updated,
        )
        return updated
