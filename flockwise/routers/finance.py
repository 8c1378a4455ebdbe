import logging
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

import flockwise.crud.finance as crud_finance
from flockwise.database import get_db
from flockwise.models.finance import ExpenseTransaction, IncomeTransaction
from flockwise.schemas.finance import (
    Expense,
    ExpenseCreate,
    ExpenseList,
    ExpenseUpdate,
    Income,
    IncomeCreate,
    IncomeList,
    IncomeUpdate,
    PaymentStatus,
)
from flockwise.utils.auth_utils import (
    MANAGER_ROLES,
    AuthenticatedContext,
    get_current_user,
    get_user_identifier,
    require_role,
)

router = APIRouter(prefix="/finance", tags=["Finance"])
logger = logging.getLogger("finance")


# --- Income ---

@router.get("/income/", response_model=IncomeList)
def read_income(
    category: Optional[str] = None,
    payment_status: Optional[PaymentStatus] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    flock_id: Optional[int] = None,
    batch_id: Optional[int] = None,
    db: Session = Depends(get_db),
    user: AuthenticatedContext = Depends(get_current_user),
):
    rows = crud_finance.get_transactions(
        db, IncomeTransaction, category, payment_status, start_date, end_date, flock_id, batch_id
    )
    return IncomeList(transactions=rows, summary=crud_finance.summarize_transactions(rows))


@router.post("/income/", response_model=Income, status_code=status.HTTP_201_CREATED)
def create_income(
    income: IncomeCreate,
    db: Session = Depends(get_db),
    user: AuthenticatedContext = Depends(get_current_user),
):
    db_row = crud_finance.create_transaction(db, IncomeTransaction, income, changed_by=get_user_identifier(user))
    logger.info(f"Income (ID: {db_row.id}) of {db_row.amount} in '{db_row.category}' recorded by {get_user_identifier(user)}")
    return db_row


@router.put("/income/{transaction_id}", response_model=Income)
def update_income(
    transaction_id: int,
    income: IncomeUpdate,
    db: Session = Depends(get_db),
    user: AuthenticatedContext = Depends(get_current_user),
):
    db_row = crud_finance.update_transaction(db, IncomeTransaction, transaction_id, income, changed_by=get_user_identifier(user))
    if db_row is None:
        raise HTTPException(status_code=404, detail="Income transaction not found")
    return db_row


@router.delete("/income/{transaction_id}")
def delete_income(
    transaction_id: int,
    db: Session = Depends(get_db),
    user: AuthenticatedContext = Depends(require_role(*MANAGER_ROLES)),
):
    db_row = crud_finance.get_transaction(db, IncomeTransaction, transaction_id)
    if db_row is None:
        raise HTTPException(status_code=404, detail="Income transaction not found")
    crud_finance.delete_transaction(db, db_row)
    logger.info(f"Income (ID: {transaction_id}) deleted by {get_user_identifier(user)}")
    return {"message": "Income transaction deleted successfully"}


# --- Expenses ---

@router.get("/expenses/", response_model=ExpenseList)
def read_expenses(
    category: Optional[str] = None,
    payment_status: Optional[PaymentStatus] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    flock_id: Optional[int] = None,
    batch_id: Optional[int] = None,
    db: Session = Depends(get_db),
    user: AuthenticatedContext = Depends(get_current_user),
):
    rows = crud_finance.get_transactions(
        db, ExpenseTransaction, category, payment_status, start_date, end_date, flock_id, batch_id
    )
    return ExpenseList(transactions=rows, summary=crud_finance.summarize_transactions(rows))


@router.post("/expenses/", response_model=Expense, status_code=status.HTTP_201_CREATED)
def create_expense(
    expense: ExpenseCreate,
    db: Session = Depends(get_db),
    user: AuthenticatedContext = Depends(get_current_user),
):
    db_row = crud_finance.create_transaction(db, ExpenseTransaction, expense, changed_by=get_user_identifier(user))
    logger.info(f"Expense (ID: {db_row.id}) of {db_row.amount} in '{db_row.category}' recorded by {get_user_identifier(user)}")
    return db_row


@router.put("/expenses/{transaction_id}", response_model=Expense)
def update_expense(
    transaction_id: int,
    expense: ExpenseUpdate,
    db: Session = Depends(get_db),
    user: AuthenticatedContext = Depends(get_current_user),
):
    db_row = crud_finance.update_transaction(db, ExpenseTransaction, transaction_id, expense, changed_by=get_user_identifier(user))
    if db_row is None:
        raise HTTPException(status_code=404, detail="Expense transaction not found")
    return db_row


@router.delete("/expenses/{transaction_id}")
def delete_expense(
    transaction_id: int,
    db: Session = Depends(get_db),
    user: AuthenticatedContext = Depends(require_role(*MANAGER_ROLES)),
):
    db_row = crud_finance.get_transaction(db, ExpenseTransaction, transaction_id)
    if db_row is None:
        raise HTTPException(status_code=404, detail="Expense transaction not found")
    crud_finance.delete_transaction(db, db_row)
    logger.info(f"Expense (ID: {transaction_id}) deleted by {get_user_identifier(user)}")
    return {"message": "Expense transaction deleted successfully"}
