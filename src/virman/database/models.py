"""SQLAlchemy models for virman database."""

from datetime import datetime, UTC
from decimal import Decimal
from sqlalchemy import (
    BigInteger,
    Boolean,
    Column,
    DateTime,
    Engine,
    ForeignKey,
    Integer,
    String,
    create_engine,
    event,
)
from sqlalchemy.orm import declarative_base, relationship, sessionmaker, Session
from sqlalchemy.pool import StaticPool
from sqlalchemy.types import TypeDecorator

Base = declarative_base()

# Balances are kept in ten-thousandths so the database adds integers.
MONEY_SCALE = 4


class Money(TypeDecorator):
    """Fixed-point Decimal stored as an integer count of 1/10000 units.

    Comparisons and arithmetic against plain Python values are coerced
    through this type, so ``Account.balance + Decimal("1.5")`` binds 15000.
    """

    impl = BigInteger
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        return int(Decimal(value).scaleb(MONEY_SCALE).to_integral_exact())

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        return Decimal(int(value)).scaleb(-MONEY_SCALE).quantize(Decimal(1).scaleb(-MONEY_SCALE))

    def coerce_compared_value(self, op, value):
        return self


class Account(Base):
    """Bank account model."""

    __tablename__ = "accounts"

    id = Column(String(36), primary_key=True)
    account_type = Column(String(20), nullable=False)
    name = Column(String(255), unique=True, nullable=False)
    bank_name = Column(String(100), nullable=False)
    balance = Column(Money, nullable=False, default=Decimal("0"))
    currency = Column(String(3), nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    # Relationships
    transactions = relationship("Transaction", back_populates="account")


class Transaction(Base):
    """Transaction model.

    ``position`` is the insertion order; ``id`` is the opaque identifier
    handed out to callers.
    """

    __tablename__ = "transactions"

    position = Column(Integer, primary_key=True, autoincrement=True)
    id = Column(String(36), unique=True, nullable=False)
    account_id = Column(String(36), ForeignKey("accounts.id"), nullable=False, index=True)
    kind = Column(String(20), nullable=False)
    amount = Column(Money, nullable=False)
    description = Column(String, nullable=False)
    category = Column(String(50), nullable=True)
    pair_id = Column(String(36), nullable=True, index=True)
    idempotency_key = Column(String(255), unique=True, nullable=True)
    reversal_of = Column(String(36), unique=True, nullable=True)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    # Relationships
    account = relationship("Account", back_populates="transactions")


def _configure_sqlite(engine: Engine) -> None:
    """Serialize SQLite writers from the start of each transaction.

    pysqlite defers BEGIN until the first write, which lets two
    read-then-write units deadlock on the lock upgrade. Emitting
    BEGIN IMMEDIATE ourselves takes the write lock up front; the busy
    timeout makes the other writers queue for it.
    """

    @event.listens_for(engine, "connect")
    def do_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(engine, "begin")
    def do_begin(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")


def create_database_engine(database_url: str) -> Engine:
    """Create an engine, with the SQLite locking recipe where it applies."""
    if not database_url.startswith("sqlite"):
        return create_engine(database_url, echo=False)

    connect_args = {"check_same_thread": False, "timeout": 30}
    if database_url in ("sqlite://", "sqlite:///:memory:"):
        engine = create_engine(
            database_url, echo=False, connect_args=connect_args, poolclass=StaticPool
        )
    else:
        engine = create_engine(database_url, echo=False, connect_args=connect_args)
    _configure_sqlite(engine)
    return engine


def create_session_factory(engine: Engine) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory and make sure the tables exist."""
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine, expire_on_commit=False)
