from sqlalchemy import Column, Date, DateTime, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.orm import relationship

from flockwise.database import Base
from flockwise.models.audit_mixin import TimestampMixin


class IncomeTransaction(Base, TimestampMixin):
    __tablename__ = "income_transactions"

    id = Column(Integer, primary_key=True, index=True)
    transaction_date = Column(Date, nullable=False, index=True)
    category = Column(String, nullable=False)  # e.g. "egg_sales", "bird_sales", "manure"
    amount = Column(Numeric(12, 2), nullable=False)
    quantity = Column(Numeric(10, 2), nullable=True)
    unit_price = Column(Numeric(10, 2), nullable=True)
    customer_name = Column(String, nullable=True)
    customer_phone = Column(String, nullable=True)
    payment_method = Column(String, nullable=False)
    payment_status = Column(String, nullable=False)  # "paid", "pending" or "partial"
    invoice_number = Column(String, nullable=True, unique=True)
    flock_id = Column(Integer, ForeignKey("flocks.id"), nullable=True)
    batch_id = Column(Integer, ForeignKey("batches.id"), nullable=True)
    description = Column(Text, nullable=True)
    notes = Column(Text, nullable=True)

    flock = relationship("Flock")
    batch = relationship("Batch")


class ExpenseTransaction(Base, TimestampMixin):
    __tablename__ = "expense_transactions"

    id = Column(Integer, primary_key=True, index=True)
    transaction_date = Column(Date, nullable=False, index=True)
    category = Column(String, nullable=False)  # e.g. "feed", "medication", "labor"
    amount = Column(Numeric(12, 2), nullable=False)
    quantity = Column(Numeric(10, 2), nullable=True)
    unit_cost = Column(Numeric(10, 2), nullable=True)
    vendor_name = Column(String, nullable=True)
    payment_method = Column(String, nullable=False)
    payment_status = Column(String, nullable=False)
    invoice_number = Column(String, nullable=True, unique=True)
    flock_id = Column(Integer, ForeignKey("flocks.id"), nullable=True)
    batch_id = Column(Integer, ForeignKey("batches.id"), nullable=True)
    description = Column(Text, nullable=True)
    notes = Column(Text, nullable=True)

    flock = relationship("Flock")
    batch = relationship("Batch")


class DailyBankingRecord(Base, TimestampMixin):
    """One day's cash sales against what was deposited at the bank."""
    __tablename__ = "daily_banking_records"

    id = Column(Integer, primary_key=True, index=True)
    record_date = Column(Date, nullable=False, unique=True)
    total_cash_sales = Column(Numeric(12, 2), nullable=False)
    total_banked = Column(Numeric(12, 2), nullable=False)
    variance = Column(Numeric(12, 2), nullable=False)  # cash sales minus banked
    bank_name = Column(String, nullable=True)
    account_number = Column(String, nullable=True)
    deposit_slip_number = Column(String, nullable=True)
    deposited_by = Column(String, nullable=True)
    cash_on_hand = Column(Numeric(12, 2), nullable=True)
    status = Column(String, nullable=False, default="pending")  # "pending", "banked" or "verified"
    verified_by = Column(String, nullable=True)
    verified_at = Column(DateTime(timezone=True), nullable=True)
    recorded_by = Column(String, nullable=True)
    notes = Column(Text, nullable=True)
