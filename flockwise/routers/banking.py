import logging
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

import flockwise.crud.banking as crud_banking
from flockwise.database import get_db
from flockwise.schemas.banking import (
    BankingRecord,
    BankingRecordCreate,
    BankingRecordList,
    BankingRecordUpdate,
    BankingStatus,
)
from flockwise.utils.auth_utils import (
    MANAGER_ROLES,
    AuthenticatedContext,
    get_current_user,
    get_user_identifier,
    require_role,
)

router = APIRouter(prefix="/finance/banking", tags=["Banking"])
logger = logging.getLogger("banking")


@router.get("/", response_model=BankingRecordList)
def read_banking_records(
    status: Optional[BankingStatus] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    db: Session = Depends(get_db),
    user: AuthenticatedContext = Depends(get_current_user),
):
    rows = crud_banking.get_banking_records(db, status, start_date, end_date)
    return BankingRecordList(records=rows, summary=crud_banking.summarize_banking(rows))


@router.post("/", response_model=BankingRecord, status_code=status.HTTP_201_CREATED)
def create_banking_record(
    record: BankingRecordCreate,
    db: Session = Depends(get_db),
    user: AuthenticatedContext = Depends(get_current_user),
):
    return crud_banking.create_banking_record(db, record, changed_by=get_user_identifier(user))


@router.get("/{record_id}", response_model=BankingRecord)
def read_banking_record(
    record_id: int,
    db: Session = Depends(get_db),
    user: AuthenticatedContext = Depends(get_current_user),
):
    db_record = crud_banking.get_banking_record(db, record_id)
    if db_record is None:
        raise HTTPException(status_code=404, detail="Banking record not found")
    return db_record


@router.put("/{record_id}", response_model=BankingRecord)
def update_banking_record(
    record_id: int,
    record: BankingRecordUpdate,
    db: Session = Depends(get_db),
    user: AuthenticatedContext = Depends(get_current_user),
):
    db_record = crud_banking.update_banking_record(db, record_id, record, changed_by=get_user_identifier(user))
    if db_record is None:
        raise HTTPException(status_code=404, detail="Banking record not found")
    return db_record


@router.delete("/{record_id}")
def delete_banking_record(
    record_id: int,
    db: Session = Depends(get_db),
    user: AuthenticatedContext = Depends(require_role(*MANAGER_ROLES)),
):
    db_record = crud_banking.get_banking_record(db, record_id)
    if db_record is None:
        raise HTTPException(status_code=404, detail="Banking record not found")
    crud_banking.delete_banking_record(db, db_record)
    logger.info(f"Banking record (ID: {record_id}) for {db_record.record_date} deleted by {get_user_identifier(user)}")
    return {"message": "Banking record deleted successfully"}
