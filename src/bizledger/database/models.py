"""SQLAlchemy models for bizledger database."""

from datetime import datetime, UTC
from sqlalchemy import (
    Column,
    Integer,
    String,
    DateTime,
    Date,
    Numeric,
    Boolean,
    Enum as SQLEnum,
    JSON,
    create_engine,
)
from sqlalchemy.orm import declarative_base, sessionmaker, Session

from bizledger.domain.entities import (
    AustralianState,
    CostType,
    PaymentMethod,
    TransactionCategory,
    TransactionType,
)

Base = declarative_base()


def _now() -> datetime:
    return datetime.now(UTC)


class Client(Base):
    """Client model."""

    __tablename__ = "clients"

    id = Column(Integer, primary_key=True)
    first_name = Column(String, nullable=False)
    last_name = Column(String, nullable=False)
    email = Column(String, nullable=False)
    phone_number = Column(String, nullable=False)
    suburb = Column(String, nullable=False)
    post_code = Column(String, nullable=False)
    state = Column(SQLEnum(AustralianState, native_enum=False), nullable=False)
    services_purchased = Column(JSON, default=list, nullable=False)
    created_at = Column(DateTime, default=_now, nullable=False)
    updated_at = Column(DateTime, default=_now, nullable=False)
    created_by = Column(String, nullable=False)
    created_by_name = Column(String, nullable=True)
    updated_by = Column(String, nullable=True)
    updated_by_name = Column(String, nullable=True)


class Transaction(Base):
    """Transaction model.

    ``client_id`` is a weak reference without a foreign key; deleting a
    client leaves its transactions in place.
    """

    __tablename__ = "transactions"

    id = Column(Integer, primary_key=True)
    type = Column(SQLEnum(TransactionType, native_enum=False), nullable=False)
    category = Column(SQLEnum(TransactionCategory, native_enum=False), nullable=False)
    custom_category = Column(String, nullable=True)
    amount_net = Column(Numeric(12, 2), nullable=False)
    gst_amount = Column(Numeric(12, 2), nullable=False)
    amount_gross = Column(Numeric(12, 2), nullable=False)
    payment_method = Column(SQLEnum(PaymentMethod, native_enum=False), nullable=False)
    gst_applied = Column(Boolean, default=False, nullable=False)
    description = Column(String, nullable=True)
    client_id = Column(Integer, nullable=True)
    client_name = Column(String, nullable=True)
    date = Column(Date, nullable=False)
    created_at = Column(DateTime, default=_now, nullable=False)
    updated_at = Column(DateTime, default=_now, nullable=False)
    created_by = Column(String, nullable=False)
    created_by_name = Column(String, nullable=True)
    updated_by = Column(String, nullable=True)
    updated_by_name = Column(String, nullable=True)


class Cost(Base):
    """Fixed or variable cost model."""

    __tablename__ = "costs"

    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False)
    cost_type = Column(SQLEnum(CostType, native_enum=False, values_callable=lambda e: [m.value for m in e]), nullable=False)
    amount = Column(Numeric(12, 2), nullable=False)
    actual_volume = Column(Numeric(12, 2), nullable=True)
    created_at = Column(DateTime, default=_now, nullable=False)


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    engine = create_engine(database_url, echo=False)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
