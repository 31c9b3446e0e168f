"""SQLAlchemy models for tallyup database."""

from datetime import datetime, UTC
from sqlalchemy import (
    BigInteger,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    UniqueConstraint,
    create_engine,
    event,
)
from sqlalchemy.orm import declarative_base, relationship, sessionmaker, Session

Base = declarative_base()


class Tag(Base):
    """Transaction tag model."""

    __tablename__ = "tags"

    id = Column(Integer, primary_key=True)
    name = Column(String, unique=True, nullable=False)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    # Relationships
    rules = relationship("Rule", back_populates="tag", cascade="all, delete-orphan", passive_deletes=True)
    transactions = relationship("Transaction", back_populates="tag", passive_deletes=True)


class Rule(Base):
    """Auto-tagging rule model."""

    __tablename__ = "rules"

    id = Column(Integer, primary_key=True)
    pattern = Column(String, nullable=False)
    tag_id = Column(Integer, ForeignKey("tags.id", ondelete="CASCADE"), nullable=False)

    __table_args__ = (UniqueConstraint("pattern", "tag_id", name="uq_rule_pattern_tag"),)

    # Relationships
    tag = relationship("Tag", back_populates="rules")


class Transaction(Base):
    """Transaction model."""

    __tablename__ = "transactions"

    id = Column(Integer, primary_key=True)
    amount = Column(Numeric(12, 2), nullable=False)
    date = Column(Date, nullable=False)
    description = Column(String, nullable=False)
    # NULL for manually entered transactions; NULLs never collide
    import_fingerprint = Column(BigInteger, unique=True, nullable=True)
    tag_id = Column(Integer, ForeignKey("tags.id", ondelete="SET NULL"), nullable=True)
    imported_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    # Relationships
    tag = relationship("Tag", back_populates="transactions")


class Balance(Base):
    """Latest known balance per account."""

    __tablename__ = "balances"

    id = Column(Integer, primary_key=True)
    account = Column(String, unique=True, nullable=False)
    balance = Column(Numeric(16, 2), nullable=False)
    date = Column(Date, nullable=False)


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    engine = create_engine(database_url, echo=False)

    if engine.dialect.name == "sqlite":

        @event.listens_for(engine, "connect")
        def _enable_foreign_keys(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
