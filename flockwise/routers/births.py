import logging
from typing import List, Literal, Optional

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

import flockwise.crud.production as crud_production
from flockwise.database import get_db
from flockwise.schemas.production import BirthRecord, BirthRecordCreate
from flockwise.utils.auth_utils import AuthenticatedContext, get_current_user, get_user_identifier

router = APIRouter(prefix="/births", tags=["Births"])
logger = logging.getLogger("births")


@router.get("/", response_model=List[BirthRecord])
def read_birth_records(
    record_type: Optional[Literal["flock", "batch"]] = None,
    flock_id: Optional[int] = None,
    batch_id: Optional[int] = None,
    db: Session = Depends(get_db),
    user: AuthenticatedContext = Depends(get_current_user),
):
    return crud_production.get_birth_records(db, record_type, flock_id, batch_id)


@router.post("/", response_model=BirthRecord, status_code=status.HTTP_201_CREATED)
def create_birth_record(
    record: BirthRecordCreate,
    db: Session = Depends(get_db),
    user: AuthenticatedContext = Depends(get_current_user),
):
    return crud_production.create_birth_record(db, record, changed_by=get_user_identifier(user))


@router.delete("/{record_id}")
def delete_birth_record(
    record_id: int,
    db: Session = Depends(get_db),
    user: AuthenticatedContext = Depends(get_current_user),
):
    db_record = crud_production.get_birth_record(db, record_id)
    if db_record is None:
        raise HTTPException(status_code=404, detail="Birth record not found")
    crud_production.delete_birth_record(db, db_record)
    logger.info(f"Birth record (ID: {record_id}) deleted by {get_user_identifier(user)}; birds removed")
    return {"message": "Birth record deleted successfully"}
