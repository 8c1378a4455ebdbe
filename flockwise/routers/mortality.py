import logging
from datetime import date
from typing import List, Literal, Optional

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

import flockwise.crud.production as crud_production
from flockwise.database import get_db
from flockwise.schemas.production import MortalityRecord, MortalityRecordCreate, MortalityRecordUpdate
from flockwise.utils.auth_utils import AuthenticatedContext, get_current_user, get_user_identifier

router = APIRouter(prefix="/mortality", tags=["Mortality"])
logger = logging.getLogger("mortality")


@router.get("/", response_model=List[MortalityRecord])
def read_mortality_records(
    record_type: Optional[Literal["flock", "batch"]] = None,
    flock_id: Optional[int] = None,
    batch_id: Optional[int] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    db: Session = Depends(get_db),
    user: AuthenticatedContext = Depends(get_current_user),
):
    return crud_production.get_mortality_records(db, record_type, flock_id, batch_id, start_date, end_date)


@router.post("/", response_model=MortalityRecord, status_code=status.HTTP_201_CREATED)
def create_mortality_record(
    record: MortalityRecordCreate,
    db: Session = Depends(get_db),
    user: AuthenticatedContext = Depends(get_current_user),
):
    return crud_production.create_mortality_record(db, record, changed_by=get_user_identifier(user))


@router.put("/{record_id}", response_model=MortalityRecord)
def update_mortality_record(
    record_id: int,
    record: MortalityRecordUpdate,
    db: Session = Depends(get_db),
    user: AuthenticatedContext = Depends(get_current_user),
):
    db_record = crud_production.update_mortality_record(db, record_id, record, changed_by=get_user_identifier(user))
    if db_record is None:
        raise HTTPException(status_code=404, detail="Mortality record not found")
    return db_record


@router.delete("/{record_id}")
def delete_mortality_record(
    record_id: int,
    db: Session = Depends(get_db),
    user: AuthenticatedContext = Depends(get_current_user),
):
    db_record = crud_production.get_mortality_record(db, record_id)
    if db_record is None:
        raise HTTPException(status_code=404, detail="Mortality record not found")
    crud_production.delete_mortality_record(db, db_record)
    logger.info(f"Mortality record (ID: {record_id}) deleted by {get_user_identifier(user)}; birds restored")
    return {"message": "Mortality record deleted successfully"}
