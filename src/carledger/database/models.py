"""SQLAlchemy models for carledger database."""

from datetime import datetime, UTC
from sqlalchemy import (
    Column,
    Integer,
    String,
    Text,
    ForeignKey,
    DateTime,
    Date,
    Numeric,
    JSON,
    create_engine,
)
from sqlalchemy.orm import declarative_base, relationship, sessionmaker, Session

Base = declarative_base()

MONEY = Numeric(14, 2)


def _utcnow() -> datetime:
    return datetime.now(UTC)


class Transaction(Base):
    """Ledger transaction model."""

    __tablename__ = "transactions"

    id = Column(Integer, primary_key=True)
    amount = Column(MONEY, nullable=False)
    type = Column(String, nullable=False)
    category = Column(String, nullable=False, index=True)
    description = Column(String, nullable=False, default="")
    date = Column(Date, nullable=False)
    reference_id = Column(Integer, nullable=True, index=True)
    created_at = Column(DateTime, default=_utcnow, nullable=False)


class Vehicle(Base):
    """Vehicle inventory model."""

    __tablename__ = "vehicles"

    id = Column(Integer, primary_key=True)
    vin = Column(String, nullable=False)
    make = Column(String, nullable=False)
    model = Column(String, nullable=False)
    year = Column(Integer, nullable=False)
    color = Column(String, nullable=False, default="")
    status = Column(String, nullable=False, default="AVAILABLE")
    purchase_price = Column(MONEY, nullable=False)
    purchase_date = Column(Date, nullable=False)
    sale_price = Column(MONEY, nullable=True)
    sale_date = Column(Date, nullable=True)
    notes = Column(Text, nullable=True)
    owner_name = Column(String, nullable=True)
    tc_number = Column(String, nullable=True)
    certificate_number = Column(String, nullable=True)
    registration_location = Column(String, nullable=True)
    created_at = Column(DateTime, default=_utcnow, nullable=False)
    updated_at = Column(DateTime, default=_utcnow, onupdate=_utcnow, nullable=False)

    # Relationships
    expenses = relationship(
        "VehicleExpense", back_populates="vehicle", cascade="all, delete-orphan"
    )
    distributions = relationship(
        "ProfitDistribution", back_populates="vehicle", cascade="all, delete-orphan"
    )


class VehicleExpense(Base):
    """Per-vehicle expense model."""

    __tablename__ = "vehicle_expenses"

    id = Column(Integer, primary_key=True)
    vehicle_id = Column(Integer, ForeignKey("vehicles.id"), nullable=False)
    date = Column(Date, nullable=False)
    type = Column(String, nullable=False)
    amount = Column(MONEY, nullable=False)
    recipient = Column(String, nullable=True)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime, default=_utcnow, nullable=False)

    # Relationships
    vehicle = relationship("Vehicle", back_populates="expenses")


class ProfitDistribution(Base):
    """Profit distribution row model."""

    __tablename__ = "profit_distributions"

    id = Column(Integer, primary_key=True)
    vehicle_id = Column(Integer, ForeignKey("vehicles.id"), nullable=False)
    recipient = Column(String, nullable=False)
    amount = Column(MONEY, nullable=False)
    percentage = Column(Numeric(5, 2), nullable=False)
    date = Column(Date, nullable=False)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime, default=_utcnow, nullable=False)

    # Relationships
    vehicle = relationship("Vehicle", back_populates="distributions")


class Category(Base):
    """Transaction category model."""

    __tablename__ = "categories"

    id = Column(Integer, primary_key=True)
    name = Column(String, unique=True, nullable=False)
    created_at = Column(DateTime, default=_utcnow, nullable=False)


class FinancialSettings(Base):
    """Singleton row with the dashboard baseline figures."""

    __tablename__ = "financial_settings"

    id = Column(Integer, primary_key=True)
    cash_on_hand = Column(MONEY, nullable=False)
    showroom_balance = Column(MONEY, nullable=False)
    personal_loan = Column(MONEY, nullable=False)
    additional = Column(MONEY, nullable=False)
    expenses = Column(MONEY, nullable=False, default=0)
    updated_at = Column(DateTime, default=_utcnow, onupdate=_utcnow, nullable=False)


class GlobalSettings(Base):
    """Singleton row with company-wide settings."""

    __tablename__ = "global_settings"

    id = Column(Integer, primary_key=True)
    company_name = Column(String, nullable=False)
    company_address = Column(String, nullable=False, default="")
    company_phone = Column(String, nullable=False, default="")
    company_email = Column(String, nullable=False, default="")
    currency = Column(String, nullable=False, default="AED")
    exchange_rate = Column(Numeric(12, 4), nullable=False)
    date_format = Column(String, nullable=False)
    auto_logout_minutes = Column(Integer, nullable=False)
    updated_at = Column(DateTime, default=_utcnow, onupdate=_utcnow, nullable=False)


class AuditLog(Base):
    """Append-only audit trail model."""

    __tablename__ = "audit_logs"

    id = Column(Integer, primary_key=True)
    created_at = Column(DateTime, default=_utcnow, nullable=False)
    user_id = Column(String, nullable=True)
    action_type = Column(String, nullable=False)
    entity_type = Column(String, nullable=False)
    entity_id = Column(String, nullable=True)
    old_data = Column(JSON, nullable=True)
    new_data = Column(JSON, nullable=True)
    description = Column(Text, nullable=False, default="")


# Tables included in backups, in restore order (parents before children).
BACKUP_MODELS = {
    "vehicles": Vehicle,
    "vehicle_expenses": VehicleExpense,
    "profit_distributions": ProfitDistribution,
    "transactions": Transaction,
    "categories": Category,
    "financial_settings": FinancialSettings,
    "global_settings": GlobalSettings,
}


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    engine = create_engine(database_url, echo=False)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
