"""Daily banking reconciliation: cash sales against deposits."""

import logging
from datetime import date
from decimal import Decimal
from typing import List, Optional

from sqlalchemy.orm import Session

from flockwise.exceptions import FarmError
from flockwise.models.audit_mixin import local_now
from flockwise.models.finance import DailyBankingRecord
from flockwise.schemas.banking import BankingRecordCreate, BankingRecordUpdate, BankingSummary

logger = logging.getLogger("banking")


def get_banking_record(db: Session, record_id: int) -> Optional[DailyBankingRecord]:
    return db.query(DailyBankingRecord).filter(DailyBankingRecord.id == record_id).first()


def get_banking_records(
    db: Session,
    status: Optional[str] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
) -> List[DailyBankingRecord]:
    query = db.query(DailyBankingRecord)
    if status:
        query = query.filter(DailyBankingRecord.status == status)
    if start_date:
        query = query.filter(DailyBankingRecord.record_date >= start_date)
    if end_date:
        query = query.filter(DailyBankingRecord.record_date <= end_date)
    return query.order_by(DailyBankingRecord.record_date.desc()).all()


def summarize_banking(rows: List[DailyBankingRecord]) -> BankingSummary:
    return BankingSummary(
        total_cash_sales=sum((r.total_cash_sales for r in rows), Decimal(0)),
        total_banked=sum((r.total_banked for r in rows), Decimal(0)),
        total_variance=sum((r.variance for r in rows), Decimal(0)),
        total_cash_on_hand=sum((r.cash_on_hand or Decimal(0) for r in rows), Decimal(0)),
        record_count=len(rows),
        pending_count=sum(1 for r in rows if r.status == "pending"),
        banked_count=sum(1 for r in rows if r.status == "banked"),
        verified_count=sum(1 for r in rows if r.status == "verified"),
    )


def create_banking_record(db: Session, record: BankingRecordCreate, changed_by: str) -> DailyBankingRecord:
    """
    Record one day's banking. The variance is cash sales minus the amount banked;
    when no cash on hand is given, a positive variance is taken as cash kept back.
    """
    existing = db.query(DailyBankingRecord.id).filter(DailyBankingRecord.record_date == record.record_date).first()
    if existing is not None:
        raise FarmError("Banking record already exists for this date")

    variance = record.total_cash_sales - record.total_banked
    data = record.model_dump()
    if data["cash_on_hand"] is None and variance > 0:
        data["cash_on_hand"] = variance

    db_record = DailyBankingRecord(**data, variance=variance, recorded_by=changed_by, created_by=changed_by)
    if record.status == "verified":
        db_record.verified_by = changed_by
        db_record.verified_at = local_now()
    db.add(db_record)
    db.commit()
    db.refresh(db_record)
    logger.info(f"Banking for {record.record_date} recorded by {changed_by}: sales {record.total_cash_sales}, banked {record.total_banked}, variance {variance}")
    return db_record


def update_banking_record(db: Session, record_id: int, record: BankingRecordUpdate, changed_by: str) -> Optional[DailyBankingRecord]:
    db_record = db.query(DailyBankingRecord).filter(DailyBankingRecord.id == record_id).with_for_update().first()
    if db_record is None:
        return None

    update_data = record.model_dump(exclude_unset=True)
    previous_status = db_record.status
    for key, value in update_data.items():
        if value is None and key in ("total_cash_sales", "total_banked", "status"):
            continue
        setattr(db_record, key, value)
    db_record.variance = db_record.total_cash_sales - db_record.total_banked

    if db_record.status == "verified" and previous_status != "verified":
        db_record.verified_by = changed_by
        db_record.verified_at = local_now()
    db_record.updated_by = changed_by
    db.commit()
    db.refresh(db_record)
    return db_record


def delete_banking_record(db: Session, db_record: DailyBankingRecord) -> None:
    db.delete(db_record)
    db.commit()
