"""SQLAlchemy ORM models for the party store"""

from sqlalchemy import Boolean, Column, Date, DateTime, ForeignKey, Integer, Numeric, Text, UniqueConstraint
from sqlalchemy.orm import declarative_base, relationship
from sqlalchemy.sql import func

Base = declarative_base()


class Party(Base):
    """Business entity seen in receipt books"""

    __tablename__ = "parties"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(Text, nullable=False, index=True)
    location = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    identifiers = relationship("PartyIdentifier", back_populates="party", cascade="all, delete-orphan")
    transactions = relationship("LedgerTransaction", back_populates="party", cascade="all, delete-orphan")


class PartyIdentifier(Base):
    """Payment identifier linked to a party; each (type, value) belongs to one party"""

    __tablename__ = "identifiers"
    __table_args__ = (UniqueConstraint("type", "value", name="uq_identifiers_type_value"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    party_id = Column(Integer, ForeignKey("parties.id", ondelete="CASCADE"), nullable=False, index=True)
    type = Column(Text, nullable=False)
    value = Column(Text, nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    party = relationship("Party", back_populates="identifiers")


class LedgerTransaction(Base):
    """Imported receipt book entry"""

    __tablename__ = "transactions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    party_id = Column(Integer, ForeignKey("parties.id", ondelete="CASCADE"), nullable=False, index=True)
    amount = Column(Numeric(14, 2), nullable=False)
    transaction_date = Column(Date, nullable=False)
    payment_mode = Column(Text, nullable=True)
    narration = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    party = relationship("Party", back_populates="transactions")


class SaleBillRow(Base):
    """Sales register entry"""

    __tablename__ = "sale_bills"

    id = Column(Integer, primary_key=True, autoincrement=True)
    bill_number = Column(Text, nullable=False)
    bill_date = Column(Date, nullable=False, index=True)
    party_name = Column(Text, nullable=False)
    amount = Column(Numeric(14, 2), nullable=False, index=True)
    is_cash_sale = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
