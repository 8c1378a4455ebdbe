import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

import flockwise.crud.production as crud_production
from flockwise.database import get_db
from flockwise.schemas.production import WeightRecord, WeightRecordCreate, WeightRecordUpdate
from flockwise.utils.auth_utils import (
    MANAGER_ROLES,
    AuthenticatedContext,
    get_current_user,
    get_user_identifier,
    require_role,
)

router = APIRouter(prefix="/weight-tracking", tags=["Weight Tracking"])
logger = logging.getLogger("weight_tracking")


@router.get("/", response_model=List[WeightRecord])
def read_weight_records(
    batch_id: Optional[int] = None,
    db: Session = Depends(get_db),
    user: AuthenticatedContext = Depends(get_current_user),
):
    return crud_production.get_weight_records(db, batch_id=batch_id)


@router.post("/", response_model=WeightRecord, status_code=status.HTTP_201_CREATED)
def create_weight_record(
    record: WeightRecordCreate,
    db: Session = Depends(get_db),
    user: AuthenticatedContext = Depends(get_current_user),
):
    """Record a sample weighing; one per batch per day."""
    db_record = crud_production.create_weight_record(db, record, changed_by=get_user_identifier(user))
    logger.info(f"Weight record (ID: {db_record.id}) for batch {record.batch_id} on {record.weighing_date}: {record.average_weight} kg")
    return db_record


@router.put("/{record_id}", response_model=WeightRecord)
def update_weight_record(
    record_id: int,
    record: WeightRecordUpdate,
    db: Session = Depends(get_db),
    user: AuthenticatedContext = Depends(get_current_user),
):
    db_record = crud_production.update_weight_record(db, record_id, record, changed_by=get_user_identifier(user))
    if db_record is None:
        raise HTTPException(status_code=404, detail="Weight record not found")
    return db_record


@router.delete("/{record_id}")
def delete_weight_record(
    record_id: int,
    db: Session = Depends(get_db),
    user: AuthenticatedContext = Depends(require_role(*MANAGER_ROLES)),
):
    db_record = crud_production.get_weight_record(db, record_id)
    if db_record is None:
        raise HTTPException(status_code=404, detail="Weight record not found")
    crud_production.delete_weight_record(db, db_record)
    logger.info(f"Weight record (ID: {record_id}) deleted by {get_user_identifier(user)}")
    return {"message": "Weight record deleted successfully"}
