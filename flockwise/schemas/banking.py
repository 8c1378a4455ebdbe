from datetime import date, datetime
from decimal import Decimal
from typing import List, Literal, Optional

from pydantic import BaseModel, Field

BankingStatus = Literal["pending", "banked", "verified"]


class BankingRecordCreate(BaseModel):
    record_date: date
    total_cash_sales: Decimal = Field(ge=0)
    total_banked: Decimal = Field(ge=0)
    bank_name: Optional[str] = None
    account_number: Optional[str] = None
    deposit_slip_number: Optional[str] = None
    deposited_by: Optional[str] = None
    cash_on_hand: Optional[Decimal] = Field(default=None, ge=0)
    status: BankingStatus = "pending"
    notes: Optional[str] = None


class BankingRecordUpdate(BaseModel):
    total_cash_sales: Optional[Decimal] = Field(default=None, ge=0)
    total_banked: Optional[Decimal] = Field(default=None, ge=0)
    bank_name: Optional[str] = None
    account_number: Optional[str] = None
    deposit_slip_number: Optional[str] = None
    deposited_by: Optional[str] = None
    cash_on_hand: Optional[Decimal] = Field(default=None, ge=0)
    status: Optional[BankingStatus] = None
    notes: Optional[str] = None
    # record_date identifies the day and is not editable; variance is recomputed


class BankingRecord(BankingRecordCreate):
    id: int
    variance: Decimal
    verified_by: Optional[str] = None
    verified_at: Optional[datetime] = None
    recorded_by: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True


class BankingSummary(BaseModel):
    total_cash_sales: Decimal
    total_banked: Decimal
    total_variance: Decimal
    total_cash_on_hand: Decimal
    record_count: int
    pending_count: int
    banked_count: int
    verified_count: int


class BankingRecordList(BaseModel):
    records: List[BankingRecord]
    summary: BankingSummary
