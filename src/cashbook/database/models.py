"""SQLAlchemy models for cashbook database."""

from datetime import datetime, UTC
from sqlalchemy import (
    Column,
    Integer,
    BigInteger,
    String,
    ForeignKey,
    DateTime,
    Date,
    Numeric,
    Boolean,
    UniqueConstraint,
    CheckConstraint,
    create_engine,
    event,
)
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, relationship, sessionmaker, Session

Base = declarative_base()

MONEY = Numeric(12, 2)


def _utcnow() -> datetime:
    return datetime.now(UTC)


class Household(Base):
    """Household model holding shared finance settings."""

    __tablename__ = "households"

    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False)
    currency = Column(String(3), default="USD", nullable=False)
    budget_month_start_day = Column(Integer, default=1, nullable=False)
    created_at = Column(DateTime, default=_utcnow, nullable=False)

    __table_args__ = (
        CheckConstraint(
            "budget_month_start_day BETWEEN 1 AND 31", name="ck_household_start_day"
        ),
    )


class HouseholdMember(Base):
    """Membership of a user in a household."""

    __tablename__ = "household_members"

    id = Column(Integer, primary_key=True)
    household_id = Column(Integer, ForeignKey("households.id", ondelete="CASCADE"), nullable=False)
    user_id = Column(String, nullable=False)
    role = Column(String, default="member", nullable=False)
    joined_at = Column(DateTime, default=_utcnow, nullable=False)

    __table_args__ = (UniqueConstraint("household_id", "user_id", name="uq_household_member"),)


class Account(Base):
    """Bank account model."""

    __tablename__ = "bank_accounts"

    id = Column(Integer, primary_key=True)
    household_id = Column(Integer, ForeignKey("households.id", ondelete="CASCADE"), nullable=False)
    name = Column(String, nullable=False)
    account_type = Column(String, default="checking", nullable=False)
    institution = Column(String, nullable=True)
    account_number_last4 = Column(String(4), nullable=True)
    balance = Column(MONEY, default=0, nullable=False)
    currency = Column(String(3), default="USD", nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, default=_utcnow, nullable=False)
    updated_at = Column(DateTime, default=_utcnow, onupdate=_utcnow, nullable=False)

    # Relationships
    balance_history = relationship(
        "AccountBalanceHistory", back_populates="account", cascade="all, delete-orphan"
    )
    transactions = relationship("Transaction", back_populates="account")


class AccountBalanceHistory(Base):
    """Append-only balance snapshots for an account."""

    __tablename__ = "account_balance_history"

    id = Column(Integer, primary_key=True)
    account_id = Column(Integer, ForeignKey("bank_accounts.id", ondelete="CASCADE"), nullable=False)
    balance = Column(MONEY, nullable=False)
    recorded_at = Column(DateTime, default=_utcnow, nullable=False)

    account = relationship("Account", back_populates="balance_history")


class Category(Base):
    """Category model."""

    __tablename__ = "categories"

    id = Column(Integer, primary_key=True)
    household_id = Column(Integer, ForeignKey("households.id", ondelete="CASCADE"), nullable=False)
    name = Column(String, nullable=False)
    kind = Column(String, nullable=False)
    color = Column(String, default="#3B82F6", nullable=False)
    created_at = Column(DateTime, default=_utcnow, nullable=False)

    __table_args__ = (
        UniqueConstraint("household_id", "name", name="uq_household_category_name"),
        CheckConstraint("kind IN ('income', 'expense')", name="ck_category_kind"),
    )

    # Relationships
    patterns = relationship("CategorizationPattern", back_populates="category", cascade="all, delete-orphan")
    transactions = relationship("Transaction", back_populates="category")


class CategorizationPattern(Base):
    """Keyword pattern assigning transaction descriptions to a category."""

    __tablename__ = "categorization_patterns"

    id = Column(Integer, primary_key=True)
    household_id = Column(Integer, ForeignKey("households.id", ondelete="CASCADE"), nullable=False)
    category_id = Column(Integer, ForeignKey("categories.id", ondelete="CASCADE"), nullable=False)
    pattern = Column(String, nullable=False)
    priority = Column(Integer, default=0, nullable=False)
    is_default = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, default=_utcnow, nullable=False)

    category = relationship("Category", back_populates="patterns")


class CSVMapping(Base):
    """Saved CSV column mapping model."""

    __tablename__ = "csv_mappings"

    id = Column(Integer, primary_key=True)
    household_id = Column(Integer, ForeignKey("households.id", ondelete="CASCADE"), nullable=False)
    name = Column(String, nullable=False)
    date_column = Column(String, nullable=False)
    description_column = Column(String, nullable=False)
    amount_column = Column(String, nullable=False)
    type_column = Column(String, nullable=True)
    balance_column = Column(String, nullable=True)
    date_format = Column(String, default="YYYY-MM-DD", nullable=False)
    delimiter = Column(String(1), default=",", nullable=False)
    has_header = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, default=_utcnow, nullable=False)

    __table_args__ = (UniqueConstraint("household_id", "name", name="uq_household_mapping_name"),)


class Transaction(Base):
    """Transaction model."""

    __tablename__ = "transactions"

    id = Column(Integer, primary_key=True)
    household_id = Column(Integer, ForeignKey("households.id", ondelete="CASCADE"), nullable=False)
    account_id = Column(Integer, ForeignKey("bank_accounts.id", ondelete="SET NULL"), nullable=True)
    category_id = Column(Integer, ForeignKey("categories.id", ondelete="SET NULL"), nullable=True)
    date = Column(Date, nullable=False)
    description = Column(String, nullable=False)
    amount = Column(MONEY, nullable=False)
    kind = Column(String, nullable=False)
    balance_after = Column(MONEY, nullable=True)
    excluded_from_reports = Column(Boolean, default=False, nullable=False)
    import_batch_id = Column(BigInteger, nullable=True)
    created_by = Column(String, nullable=True)
    created_at = Column(DateTime, default=_utcnow, nullable=False)
    updated_at = Column(DateTime, default=_utcnow, onupdate=_utcnow, nullable=False)

    __table_args__ = (
        CheckConstraint("kind IN ('income', 'expense')", name="ck_transaction_kind"),
        CheckConstraint("amount >= 0", name="ck_transaction_amount_non_negative"),
    )

    # Relationships
    account = relationship("Account", back_populates="transactions")
    category = relationship("Category", back_populates="transactions")


class Budget(Base):
    """Budget model."""

    __tablename__ = "budgets"

    id = Column(Integer, primary_key=True)
    household_id = Column(Integer, ForeignKey("households.id", ondelete="CASCADE"), nullable=False)
    category_id = Column(Integer, ForeignKey("categories.id", ondelete="CASCADE"), nullable=False)
    amount = Column(MONEY, nullable=False)
    period = Column(String, default="monthly", nullable=False)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=True)
    created_at = Column(DateTime, default=_utcnow, nullable=False)
    updated_at = Column(DateTime, default=_utcnow, onupdate=_utcnow, nullable=False)

    __table_args__ = (CheckConstraint("period IN ('monthly', 'yearly')", name="ck_budget_period"),)

    category = relationship("Category")


@event.listens_for(Engine, "connect")
def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    """SQLite only enforces ON DELETE clauses with this pragma set."""
    if type(dbapi_connection).__module__.startswith("sqlite3"):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    engine = create_engine(database_url, echo=False)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
