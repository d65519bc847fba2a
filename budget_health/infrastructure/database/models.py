"""SQLAlchemy ORM models for the budgeting data store"""

import uuid

from sqlalchemy import BigInteger, Column, Date, DateTime, ForeignKey, Integer, Text
from sqlalchemy.orm import declarative_base
from sqlalchemy.sql import func

Base = declarative_base()


def _new_id() -> str:
    return str(uuid.uuid4())


class UserSettingsRecord(Base):
    """Per-user budgeting preferences"""

    __tablename__ = "user_settings"

    user_id = Column(Text, primary_key=True)
    payday_of_month = Column(Integer, nullable=False, default=25)
    income_cadence = Column(Text, nullable=False, default="monthly")
    budget_method = Column(Text, nullable=False, default="percentage_based")
    needs_percentage = Column(Integer, nullable=False, default=50)
    wants_percentage = Column(Integer, nullable=False, default=30)
    savings_percentage = Column(Integer, nullable=False, default=20)
    savings_adjustment_strategy = Column(Text, nullable=False, default="inverse_priority")
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())


class AccountRecord(Base):
    """Linked bank account"""

    __tablename__ = "accounts"

    id = Column(Text, primary_key=True, default=_new_id)
    user_id = Column(Text, nullable=False, index=True)
    available_balance_cents = Column(BigInteger, nullable=False, default=0)
    status = Column(Text, nullable=False, default="active")
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())


class TransactionRecord(Base):
    """Synced bank transaction, negative amount = outflow"""

    __tablename__ = "transactions"

    id = Column(Text, primary_key=True, default=_new_id)
    user_id = Column(Text, nullable=False, index=True)
    account_id = Column(Text, ForeignKey("accounts.id", ondelete="CASCADE"), nullable=False)
    amount_cents = Column(BigInteger, nullable=False)
    transaction_date = Column(Date, nullable=False, index=True)
    description = Column(Text, nullable=False, default="")
    category = Column(Text, nullable=True)


class GoalRecord(Base):
    """Savings goal; lower position = higher priority"""

    __tablename__ = "goals"

    id = Column(Text, primary_key=True, default=_new_id)
    user_id = Column(Text, nullable=False, index=True)
    name = Column(Text, nullable=False)
    position = Column(Integer, nullable=False, default=0)
    target_cents = Column(BigInteger, nullable=False)
    saved_cents = Column(BigInteger, nullable=False, default=0)
    monthly_allocation_cents = Column(BigInteger, nullable=False, default=0)
    due_date = Column(Date, nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())


class BudgetItemRecord(Base):
    """Planned expense line"""

    __tablename__ = "budget_items"

    id = Column(Text, primary_key=True, default=_new_id)
    user_id = Column(Text, nullable=False, index=True)
    name = Column(Text, nullable=False)
    frequency = Column(Text, nullable=False, default="Monthly")
    amount_cents = Column(BigInteger, nullable=False)
    days_per_week = Column(Integer, nullable=True)
    parent_category = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
