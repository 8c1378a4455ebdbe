from datetime import date, datetime
from decimal import Decimal
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, Field

PaymentStatus = Literal["paid", "pending", "partial"]


class TransactionBase(BaseModel):
    transaction_date: date
    category: str = Field(min_length=1)
    amount: Decimal = Field(gt=0)
    payment_method: str
    payment_status: PaymentStatus
    invoice_number: Optional[str] = None
    flock_id: Optional[int] = None
    batch_id: Optional[int] = None
    description: Optional[str] = None
    notes: Optional[str] = None


class TransactionUpdateBase(BaseModel):
    transaction_date: Optional[date] = None
    category: Optional[str] = Field(default=None, min_length=1)
    amount: Optional[Decimal] = Field(default=None, gt=0)
    payment_method: Optional[str] = None
    payment_status: Optional[PaymentStatus] = None
    invoice_number: Optional[str] = None
    flock_id: Optional[int] = None
    batch_id: Optional[int] = None
    description: Optional[str] = None
    notes: Optional[str] = None


# --- Income ---

class IncomeCreate(TransactionBase):
    quantity: Optional[Decimal] = Field(default=None, ge=0)
    unit_price: Optional[Decimal] = Field(default=None, ge=0)
    customer_name: Optional[str] = None
    customer_phone: Optional[str] = None


class IncomeUpdate(TransactionUpdateBase):
    quantity: Optional[Decimal] = Field(default=None, ge=0)
    unit_price: Optional[Decimal] = Field(default=None, ge=0)
    customer_name: Optional[str] = None
    customer_phone: Optional[str] = None


class Income(IncomeCreate):
    id: int
    created_by: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True


# --- Expense ---

class ExpenseCreate(TransactionBase):
    quantity: Optional[Decimal] = Field(default=None, ge=0)
    unit_cost: Optional[Decimal] = Field(default=None, ge=0)
    vendor_name: Optional[str] = None


class ExpenseUpdate(TransactionUpdateBase):
    quantity: Optional[Decimal] = Field(default=None, ge=0)
    unit_cost: Optional[Decimal] = Field(default=None, ge=0)
    vendor_name: Optional[str] = None


class Expense(ExpenseCreate):
    id: int
    created_by: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True


# --- List responses ---

class CategoryTotal(BaseModel):
    count: int
    total: Decimal


class TransactionSummary(BaseModel):
    total: Decimal
    paid: Decimal
    pending: Decimal
    transaction_count: int
    by_category: Dict[str, CategoryTotal]


class IncomeList(BaseModel):
    transactions: List[Income]
    summary: TransactionSummary


class ExpenseList(BaseModel):
    transactions: List[Expense]
    summary: TransactionSummary
