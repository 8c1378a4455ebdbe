import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

import flockwise.crud.flock as crud_flock
from flockwise.database import get_db
from flockwise.schemas.flock import Flock, FlockCreate, FlockUpdate
from flockwise.utils.auth_utils import (
    MANAGER_ROLES,
    AuthenticatedContext,
    get_current_user,
    get_user_identifier,
    require_role,
)

router = APIRouter(prefix="/flocks", tags=["flocks"])
logger = logging.getLogger("flocks")


@router.get("/", response_model=List[Flock])
def get_all_flocks(
    status: Optional[str] = None,
    db: Session = Depends(get_db),
    user: AuthenticatedContext = Depends(get_current_user),
):
    return crud_flock.get_all_flocks(db, status=status)


@router.post("/", response_model=Flock, status_code=status.HTTP_201_CREATED)
def create_flock(
    flock: FlockCreate,
    db: Session = Depends(get_db),
    user: AuthenticatedContext = Depends(get_current_user),
):
    db_flock = crud_flock.create_flock(db, flock, changed_by=get_user_identifier(user))
    logger.info(f"Flock '{db_flock.flock_name}' (ID: {db_flock.id}) created by {get_user_identifier(user)}")
    return db_flock


@router.get("/{flock_id}", response_model=Flock)
def get_flock(
    flock_id: int,
    db: Session = Depends(get_db),
    user: AuthenticatedContext = Depends(get_current_user),
):
    db_flock = crud_flock.get_flock(db, flock_id)
    if db_flock is None:
        raise HTTPException(status_code=404, detail="Flock not found")
    return db_flock


@router.put("/{flock_id}", response_model=Flock)
def update_flock(
    flock_id: int,
    flock: FlockUpdate,
    db: Session = Depends(get_db),
    user: AuthenticatedContext = Depends(get_current_user),
):
    db_flock = crud_flock.update_flock(db, flock_id, flock, changed_by=get_user_identifier(user))
    if db_flock is None:
        raise HTTPException(status_code=404, detail="Flock not found")
    return db_flock


@router.delete("/{flock_id}")
def delete_flock(
    flock_id: int,
    db: Session = Depends(get_db),
    user: AuthenticatedContext = Depends(require_role(*MANAGER_ROLES)),
):
    db_flock = crud_flock.get_flock(db, flock_id)
    if db_flock is None:
        raise HTTPException(status_code=404, detail="Flock not found")
    if crud_flock.flock_in_use(db, flock_id):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Flock has linked records and cannot be deleted. Close it instead.",
        )
    crud_flock.delete_flock(db, db_flock)
    logger.info(f"Flock (ID: {flock_id}) deleted by {get_user_identifier(user)}")
    return {"message": "Flock deleted successfully"}
