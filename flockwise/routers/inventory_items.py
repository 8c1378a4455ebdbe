import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

import flockwise.crud.inventory_items as crud_inventory_items
from flockwise.database import get_db
from flockwise.schemas.inventory_items import InventoryItem, InventoryItemCreate, InventoryItemList, InventoryItemUpdate
from flockwise.utils.auth_utils import AuthenticatedContext, get_current_user, get_user_identifier

router = APIRouter(prefix="/inventory/items", tags=["Inventory Items"])
logger = logging.getLogger("inventory_items")


@router.get("/", response_model=InventoryItemList)
def read_inventory_items(
    category: Optional[str] = None,
    include_inactive: bool = False,
    db: Session = Depends(get_db),
    user: AuthenticatedContext = Depends(get_current_user),
):
    items = crud_inventory_items.get_inventory_items(db, category=category, include_inactive=include_inactive)
    return InventoryItemList(data=items, summary=crud_inventory_items.summarize_inventory_items(items))


@router.post("/", response_model=InventoryItem, status_code=status.HTTP_201_CREATED)
def create_inventory_item(
    item: InventoryItemCreate,
    db: Session = Depends(get_db),
    user: AuthenticatedContext = Depends(get_current_user),
):
    db_item = crud_inventory_items.create_inventory_item(db, item, changed_by=get_user_identifier(user))
    logger.info(f"Inventory item '{db_item.item_name}' (ID: {db_item.id}) created by {get_user_identifier(user)}")
    return db_item


@router.get("/{item_id}", response_model=InventoryItem)
def read_inventory_item(
    item_id: int,
    db: Session = Depends(get_db),
    user: AuthenticatedContext = Depends(get_current_user),
):
    db_item = crud_inventory_items.get_inventory_item(db, item_id)
    if db_item is None:
        raise HTTPException(status_code=404, detail="Inventory item not found")
    return db_item


@router.put("/{item_id}", response_model=InventoryItem)
def update_inventory_item(
    item_id: int,
    item: InventoryItemUpdate,
    db: Session = Depends(get_db),
    user: AuthenticatedContext = Depends(get_current_user),
):
    db_item = crud_inventory_items.update_inventory_item(db, item_id, item, changed_by=get_user_identifier(user))
    if db_item is None:
        raise HTTPException(status_code=404, detail="Inventory item not found")
    return db_item


@router.delete("/{item_id}")
def delete_inventory_item(
    item_id: int,
    db: Session = Depends(get_db),
    user: AuthenticatedContext = Depends(get_current_user),
):
    db_item = crud_inventory_items.get_inventory_item(db, item_id)
    if db_item is None:
        raise HTTPException(status_code=404, detail="Inventory item not found")
    if crud_inventory_items.inventory_item_in_use(db_item):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Inventory item has stock movements or purchase order lines and cannot be deleted. Deactivate it instead.",
        )
    crud_inventory_items.delete_inventory_item(db, db_item)
    logger.info(f"Inventory item (ID: {item_id}) deleted by {get_user_identifier(user)}")
    return {"message": "Inventory item deleted successfully"}
