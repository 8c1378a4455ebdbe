from datetime import date
from decimal import Decimal
from typing import Dict, List, Optional, Type, Union

from sqlalchemy.orm import Session

from flockwise.models.finance import ExpenseTransaction, IncomeTransaction
from flockwise.schemas.finance import CategoryTotal, TransactionSummary

Ledger = Union[Type[IncomeTransaction], Type[ExpenseTransaction]]


def get_transaction(db: Session, model: Ledger, transaction_id: int):
    return db.query(model).filter(model.id == transaction_id).first()


def get_transactions(
    db: Session,
    model: Ledger,
    category: Optional[str] = None,
    payment_status: Optional[str] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    flock_id: Optional[int] = None,
    batch_id: Optional[int] = None,
) -> List:
    query = db.query(model)
    if category:
        query = query.filter(model.category == category)
    if payment_status:
        query = query.filter(model.payment_status == payment_status)
    if start_date:
        query = query.filter(model.transaction_date >= start_date)
    if end_date:
        query = query.filter(model.transaction_date <= end_date)
    if flock_id:
        query = query.filter(model.flock_id == flock_id)
    if batch_id:
        query = query.filter(model.batch_id == batch_id)
    return query.order_by(model.transaction_date.desc(), model.id.desc()).all()


def summarize_transactions(rows: List) -> TransactionSummary:
    by_category: Dict[str, CategoryTotal] = {}
    for row in rows:
        entry = by_category.setdefault(row.category, CategoryTotal(count=0, total=Decimal(0)))
        entry.count += 1
        entry.total += row.amount
    return TransactionSummary(
        total=sum((r.amount for r in rows), Decimal(0)),
        paid=sum((r.amount for r in rows if r.payment_status == "paid"), Decimal(0)),
        pending=sum((r.amount for r in rows if r.payment_status in ("pending", "partial")), Decimal(0)),
        transaction_count=len(rows),
        by_category=by_category,
    )


def create_transaction(db: Session, model: Ledger, data, changed_by: str):
    db_row = model(**data.model_dump(), created_by=changed_by, updated_by=changed_by)
    db.add(db_row)
    db.commit()
    db.refresh(db_row)
    return db_row


def update_transaction(db: Session, model: Ledger, transaction_id: int, data, changed_by: str):
    db_row = get_transaction(db, model, transaction_id)
    if db_row:
        for key, value in data.model_dump(exclude_unset=True).items():
            if value is None and key in ("transaction_date", "category", "amount", "payment_method", "payment_status"):
                continue
            setattr(db_row, key, value)
        db_row.updated_by = changed_by
        db.commit()
        db.refresh(db_row)
    return db_row


def delete_transaction(db: Session, db_row) -> None:
    db.delete(db_row)
    db.commit()
