import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

import flockwise.crud.batch as crud_batch
from flockwise.database import get_db
from flockwise.schemas.batch import Batch, BatchCreate, BatchUpdate
from flockwise.utils.auth_utils import (
    MANAGER_ROLES,
    AuthenticatedContext,
    get_current_user,
    get_user_identifier,
    require_role,
)

router = APIRouter(prefix="/batches", tags=["batches"])
logger = logging.getLogger("batches")


@router.get("/", response_model=List[Batch])
def get_all_batches(
    status: Optional[str] = None,
    batch_type: Optional[str] = None,
    db: Session = Depends(get_db),
    user: AuthenticatedContext = Depends(get_current_user),
):
    return crud_batch.get_all_batches(db, status=status, batch_type=batch_type)


@router.post("/", response_model=Batch, status_code=status.HTTP_201_CREATED)
def create_batch(
    batch: BatchCreate,
    db: Session = Depends(get_db),
    user: AuthenticatedContext = Depends(get_current_user),
):
    """Register a new broiler batch; its live count starts at the quantity received."""
    db_batch = crud_batch.create_batch(db, batch, changed_by=get_user_identifier(user))
    logger.info(f"Batch '{db_batch.batch_name}' (ID: {db_batch.id}) created with {db_batch.current_stock} birds by {get_user_identifier(user)}")
    return db_batch


@router.get("/{batch_id}", response_model=Batch)
def get_batch(
    batch_id: int,
    db: Session = Depends(get_db),
    user: AuthenticatedContext = Depends(get_current_user),
):
    db_batch = crud_batch.get_batch(db, batch_id)
    if db_batch is None:
        raise HTTPException(status_code=404, detail="Batch not found")
    return db_batch


@router.put("/{batch_id}", response_model=Batch)
def update_batch(
    batch_id: int,
    batch: BatchUpdate,
    db: Session = Depends(get_db),
    user: AuthenticatedContext = Depends(get_current_user),
):
    db_batch = crud_batch.update_batch(db, batch_id, batch, changed_by=get_user_identifier(user))
    if db_batch is None:
        raise HTTPException(status_code=404, detail="Batch not found")
    return db_batch


@router.delete("/{batch_id}")
def delete_batch(
    batch_id: int,
    db: Session = Depends(get_db),
    user: AuthenticatedContext = Depends(require_role(*MANAGER_ROLES)),
):
    db_batch = crud_batch.get_batch(db, batch_id)
    if db_batch is None:
        raise HTTPException(status_code=404, detail="Batch not found")
    if crud_batch.batch_in_use(db, batch_id):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Batch has linked records and cannot be deleted. Close it instead.",
        )
    crud_batch.delete_batch(db, db_batch)
    logger.info(f"Batch (ID: {batch_id}) deleted by {get_user_identifier(user)}")
    return {"message": "Batch deleted successfully"}
