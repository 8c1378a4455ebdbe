from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

import flockwise.crud.production as crud_production
from flockwise.database import get_db
from flockwise.schemas.production import EggCollection, EggCollectionCreate
from flockwise.utils.auth_utils import AuthenticatedContext, get_current_user, get_user_identifier

router = APIRouter(prefix="/egg-collection", tags=["Egg Collection"])


@router.get("/", response_model=List[EggCollection])
def read_egg_collections(
    flock_id: Optional[int] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    db: Session = Depends(get_db),
    user: AuthenticatedContext = Depends(get_current_user),
):
    return crud_production.get_egg_collections(db, flock_id, start_date, end_date)


@router.post("/", response_model=EggCollection, status_code=status.HTTP_201_CREATED)
def create_egg_collection(
    collection: EggCollectionCreate,
    db: Session = Depends(get_db),
    user: AuthenticatedContext = Depends(get_current_user),
):
    return crud_production.create_egg_collection(db, collection, changed_by=get_user_identifier(user))


@router.delete("/{collection_id}")
def delete_egg_collection(
    collection_id: int,
    db: Session = Depends(get_db),
    user: AuthenticatedContext = Depends(get_current_user),
):
    if not crud_production.delete_egg_collection(db, collection_id):
        raise HTTPException(status_code=404, detail="Egg collection not found")
    return {"message": "Egg collection deleted successfully"}
