"""Mapper functions to convert between domain models and SQLAlchemy models.

This layer isolates the conversion logic, so the domain entities stay stable
when the database schema changes.
"""

from decimal import Decimal

from carledger.domain import entities as domain
from carledger.database.models import (
    AuditLog as ORMAuditLog,
    Category as ORMCategory,
    FinancialSettings as ORMFinancialSettings,
    GlobalSettings as ORMGlobalSettings,
    ProfitDistribution as ORMProfitDistribution,
    Transaction as ORMTransaction,
    Vehicle as ORMVehicle,
    VehicleExpense as ORMVehicleExpense,
)


def _money(value) -> Decimal:
    """Normalize a Numeric column value to Decimal."""
    return value if isinstance(value, Decimal) else Decimal(str(value))


def transaction_to_domain(orm_transaction: ORMTransaction) -> domain.Transaction:
    """Convert SQLAlchemy Transaction model to domain Transaction entity."""
    return domain.Transaction(
        id=orm_transaction.id,
        amount=_money(orm_transaction.amount),
        type=domain.TransactionType(orm_transaction.type),
        category=orm_transaction.category,
        description=orm_transaction.description or "",
        date=orm_transaction.date,
        created_at=orm_transaction.created_at,
        reference_id=orm_transaction.reference_id,
    )


def vehicle_to_domain(orm_vehicle: ORMVehicle) -> domain.Vehicle:
    """Convert SQLAlchemy Vehicle model to domain Vehicle entity."""
    return domain.Vehicle(
        id=orm_vehicle.id,
        vin=orm_vehicle.vin,
        make=orm_vehicle.make,
        model=orm_vehicle.model,
        year=orm_vehicle.year,
        color=orm_vehicle.color or "",
        status=domain.VehicleStatus(orm_vehicle.status),
        purchase_price=_money(orm_vehicle.purchase_price),
        purchase_date=orm_vehicle.purchase_date,
        sale_price=None if orm_vehicle.sale_price is None else _money(orm_vehicle.sale_price),
        sale_date=orm_vehicle.sale_date,
        notes=orm_vehicle.notes,
        owner_name=orm_vehicle.owner_name,
        tc_number=orm_vehicle.tc_number,
        certificate_number=orm_vehicle.certificate_number,
        registration_location=orm_vehicle.registration_location,
        created_at=orm_vehicle.created_at,
        updated_at=orm_vehicle.updated_at,
    )


def vehicle_expense_to_domain(orm_expense: ORMVehicleExpense) -> domain.VehicleExpense:
    """Convert SQLAlchemy VehicleExpense model to domain VehicleExpense entity."""
    return domain.VehicleExpense(
        id=orm_expense.id,
        vehicle_id=orm_expense.vehicle_id,
        date=orm_expense.date,
        type=orm_expense.type,
        amount=_money(orm_expense.amount),
        recipient=orm_expense.recipient,
        notes=orm_expense.notes,
        created_at=orm_expense.created_at,
    )


def profit_distribution_to_domain(
    orm_distribution: ORMProfitDistribution,
) -> domain.ProfitDistribution:
    """Convert SQLAlchemy ProfitDistribution model to domain entity."""
    return domain.ProfitDistribution(
        id=orm_distribution.id,
        vehicle_id=orm_distribution.vehicle_id,
        recipient=orm_distribution.recipient,
        amount=_money(orm_distribution.amount),
        percentage=_money(orm_distribution.percentage),
        date=orm_distribution.date,
        notes=orm_distribution.notes,
        created_at=orm_distribution.created_at,
    )


def category_to_domain(orm_category: ORMCategory) -> domain.Category:
    """Convert SQLAlchemy Category model to domain Category entity."""
    return domain.Category(
        id=orm_category.id,
        name=orm_category.name,
        created_at=orm_category.created_at,
    )


def financial_settings_to_domain(
    orm_settings: ORMFinancialSettings,
) -> domain.FinancialSettings:
    """Convert SQLAlchemy FinancialSettings model to domain entity."""
    return domain.FinancialSettings(
        cash_on_hand=_money(orm_settings.cash_on_hand),
        showroom_balance=_money(orm_settings.showroom_balance),
        personal_loan=_money(orm_settings.personal_loan),
        additional=_money(orm_settings.additional),
        expenses=_money(orm_settings.expenses or 0),
        updated_at=orm_settings.updated_at,
    )


def global_settings_to_domain(orm_settings: ORMGlobalSettings) -> domain.GlobalSettings:
    """Convert SQLAlchemy GlobalSettings model to domain entity."""
    return domain.GlobalSettings(
        company_name=orm_settings.company_name,
        company_address=orm_settings.company_address or "",
        company_phone=orm_settings.company_phone or "",
        company_email=orm_settings.company_email or "",
        currency=orm_settings.currency,
        exchange_rate=_money(orm_settings.exchange_rate),
        date_format=orm_settings.date_format,
        auto_logout_minutes=orm_settings.auto_logout_minutes,
        updated_at=orm_settings.updated_at,
    )


def audit_log_to_domain(orm_log: ORMAuditLog) -> domain.AuditLogEntry:
    """Convert SQLAlchemy AuditLog model to domain AuditLogEntry entity."""
    return domain.AuditLogEntry(
        id=orm_log.id,
        created_at=orm_log.created_at,
        user_id=orm_log.user_id,
        action_type=orm_log.action_type,
        entity_type=orm_log.entity_type,
        entity_id=orm_log.entity_id,
        old_data=orm_log.old_data,
        new_data=orm_log.new_data,
        description=orm_log.description or "",
    )
