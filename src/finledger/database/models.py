"""SQLAlchemy models for finledger database."""

from datetime import datetime, UTC
from sqlalchemy import (
    CheckConstraint,
    Column,
    Integer,
    String,
    ForeignKey,
    DateTime,
    Date,
    Numeric,
    Text,
    create_engine,
    event,
)
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, relationship, sessionmaker, Session

Base = declarative_base()


class Person(Base):
    """Person model."""

    __tablename__ = "people"

    id = Column(Integer, primary_key=True)
    name = Column(String, unique=True, nullable=False)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    # Relationships
    debts = relationship("Debt", back_populates="person", cascade="all, delete-orphan")


class Debt(Base):
    """Debt model."""

    __tablename__ = "debts"

    id = Column(Integer, primary_key=True)
    person_id = Column(Integer, ForeignKey("people.id", ondelete="CASCADE"), nullable=False)
    type = Column(String, nullable=False)
    amount = Column(Numeric(12, 2), nullable=False)
    currency = Column(String, default="EUR", nullable=False)
    description = Column(String, default="Debt", nullable=False)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    __table_args__ = (
        CheckConstraint("type IN ('OWED_BY_ME', 'OWED_TO_ME')", name="ck_debt_type"),
    )

    # Relationships
    person = relationship("Person", back_populates="debts")
    sub_debts = relationship(
        "SubDebt",
        back_populates="debt",
        cascade="all, delete-orphan",
        order_by=lambda: [SubDebt.created_at.desc(), SubDebt.id.desc()],
    )


class SubDebt(Base):
    """Partial repayment model."""

    __tablename__ = "sub_debts"

    id = Column(Integer, primary_key=True)
    debt_id = Column(Integer, ForeignKey("debts.id", ondelete="CASCADE"), nullable=False)
    amount = Column(Numeric(12, 2), nullable=False)
    note = Column(String, default="", nullable=False)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    # Relationships
    debt = relationship("Debt", back_populates="sub_debts")


class Account(Base):
    """Bank account model keyed by the aggregator-derived identity."""

    __tablename__ = "accounts"

    account_id = Column(String, primary_key=True)
    name = Column(String, nullable=False)
    iban = Column(String, default="", nullable=False)
    balance = Column(Numeric(14, 2), default=0, nullable=False)
    currency = Column(String, default="EUR", nullable=False)
    bank_name = Column(String, nullable=False)
    last_synced = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)


class Transaction(Base):
    """Bank transaction model keyed by the stable transaction identity."""

    __tablename__ = "transactions"

    transaction_id = Column(String, primary_key=True)
    account_id = Column(String, nullable=False, index=True)
    booking_date = Column(Date, nullable=False)
    amount = Column(Numeric(14, 2), nullable=False)
    currency = Column(String, default="EUR", nullable=False)
    creditor_name = Column(String, nullable=True)
    debtor_name = Column(String, nullable=True)
    remittance_information = Column(String, default="", nullable=False)
    raw_json = Column(Text, default="{}", nullable=False)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)


@event.listens_for(Engine, "connect")
def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    """Turn on foreign key enforcement for SQLite connections."""
    if type(dbapi_connection).__module__.startswith("sqlite3"):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    engine = create_engine(database_url, echo=False)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
