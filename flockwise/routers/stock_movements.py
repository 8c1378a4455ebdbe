from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

import flockwise.crud.stock_movements as crud_stock_movements
from flockwise.database import get_db
from flockwise.models.stock_movement import MovementType
from flockwise.schemas.inventory_items import StockMovement, StockMovementCreate, StockMovementList
from flockwise.utils.auth_utils import AuthenticatedContext, get_current_user, get_user_identifier

router = APIRouter(prefix="/inventory/stock-movements", tags=["Stock Movements"])


@router.get("/", response_model=StockMovementList)
def read_stock_movements(
    inventory_id: Optional[int] = None,
    movement_type: Optional[MovementType] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    db: Session = Depends(get_db),
    user: AuthenticatedContext = Depends(get_current_user),
):
    movements = crud_stock_movements.get_stock_movements(db, inventory_id, movement_type, start_date, end_date)
    return StockMovementList(data=movements, summary=crud_stock_movements.summarize_stock_movements(movements))


@router.post("/", response_model=StockMovement, status_code=status.HTTP_201_CREATED)
def create_stock_movement(
    movement: StockMovementCreate,
    db: Session = Depends(get_db),
    user: AuthenticatedContext = Depends(get_current_user),
):
    """Adjust an item's stock by hand and append the movement to its ledger."""
    return crud_stock_movements.create_stock_movement(db, movement, changed_by=get_user_identifier(user))


@router.delete("/{movement_id}")
def delete_stock_movement(
    movement_id: int,
    db: Session = Depends(get_db),
    user: AuthenticatedContext = Depends(get_current_user),
):
    if not crud_stock_movements.delete_stock_movement(db, movement_id, changed_by=get_user_identifier(user)):
        raise HTTPException(status_code=404, detail="Stock movement not found")
    return {"message": "Stock movement deleted and inventory reversed"}
