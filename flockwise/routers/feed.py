import logging
from datetime import date
from typing import Literal, Optional

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

import flockwise.crud.feed as crud_feed
from flockwise.database import get_db
from flockwise.schemas import feed as schemas
from flockwise.utils.auth_utils import AuthenticatedContext, get_current_user, get_user_identifier

router = APIRouter(prefix="/feed", tags=["feed"])
logger = logging.getLogger("feed")


# --- Inventory ---

@router.get("/inventory/", response_model=schemas.FeedInventoryList)
def list_feed_inventory(
    include_inactive: bool = False,
    feed_type: Optional[str] = None,
    db: Session = Depends(get_db),
    user: AuthenticatedContext = Depends(get_current_user),
):
    """List feed stock with low-stock and total value figures."""
    items = crud_feed.get_feed_inventories(db, include_inactive=include_inactive, feed_type=feed_type)
    return schemas.FeedInventoryList(inventory=items, summary=crud_feed.summarize_feed_inventory(items))


@router.post("/inventory/", response_model=schemas.FeedInventory, status_code=status.HTTP_201_CREATED)
def create_feed_inventory(
    item: schemas.FeedInventoryCreate,
    db: Session = Depends(get_db),
    user: AuthenticatedContext = Depends(get_current_user),
):
    db_item = crud_feed.create_feed_inventory(db, item, changed_by=get_user_identifier(user))
    logger.info(f"Feed inventory item '{db_item.feed_type}' (ID: {db_item.id}) created by {get_user_identifier(user)}")
    return db_item


@router.get("/inventory/{inventory_id}", response_model=schemas.FeedInventory)
def get_feed_inventory(
    inventory_id: int,
    db: Session = Depends(get_db),
    user: AuthenticatedContext = Depends(get_current_user),
):
    db_item = crud_feed.get_feed_inventory(db, inventory_id)
    if db_item is None:
        raise HTTPException(status_code=404, detail="Feed inventory item not found")
    return db_item


@router.put("/inventory/{inventory_id}", response_model=schemas.FeedInventory)
def update_feed_inventory(
    inventory_id: int,
    item: schemas.FeedInventoryUpdate,
    db: Session = Depends(get_db),
    user: AuthenticatedContext = Depends(get_current_user),
):
    db_item = crud_feed.update_feed_inventory(db, inventory_id, item, changed_by=get_user_identifier(user))
    if db_item is None:
        raise HTTPException(status_code=404, detail="Feed inventory item not found")
    return db_item


@router.delete("/inventory/{inventory_id}")
def delete_feed_inventory(
    inventory_id: int,
    db: Session = Depends(get_db),
    user: AuthenticatedContext = Depends(get_current_user),
):
    db_item = crud_feed.get_feed_inventory(db, inventory_id)
    if db_item is None:
        raise HTTPException(status_code=404, detail="Feed inventory item not found")
    if crud_feed.feed_inventory_in_use(db, inventory_id):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Feed inventory item has purchases or consumption records and cannot be deleted. Deactivate it instead.",
        )
    crud_feed.delete_feed_inventory(db, db_item)
    logger.info(f"Feed inventory item (ID: {inventory_id}) deleted by {get_user_identifier(user)}")
    return {"message": "Feed inventory item deleted successfully"}


# --- Purchases ---

@router.get("/purchases/", response_model=schemas.FeedPurchaseList)
def list_feed_purchases(
    supplier_id: Optional[int] = None,
    payment_status: Optional[Literal["pending", "paid", "partial"]] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    db: Session = Depends(get_db),
    user: AuthenticatedContext = Depends(get_current_user),
):
    purchases = crud_feed.get_feed_purchases(db, supplier_id, payment_status, start_date, end_date)
    return schemas.FeedPurchaseList(purchases=purchases, summary=crud_feed.summarize_feed_purchases(purchases))


@router.post("/purchases/", response_model=schemas.FeedPurchase, status_code=status.HTTP_201_CREATED)
def record_feed_purchase(
    purchase: schemas.FeedPurchaseCreate,
    db: Session = Depends(get_db),
    user: AuthenticatedContext = Depends(get_current_user),
):
    """Record a feed purchase and add its bags to the inventory item."""
    return crud_feed.record_purchase(db, purchase, changed_by=get_user_identifier(user))


@router.put("/purchases/{purchase_id}", response_model=schemas.FeedPurchase)
def update_feed_purchase(
    purchase_id: int,
    purchase: schemas.FeedPurchaseUpdate,
    db: Session = Depends(get_db),
    user: AuthenticatedContext = Depends(get_current_user),
):
    db_purchase = crud_feed.update_purchase(db, purchase_id, purchase, changed_by=get_user_identifier(user))
    if db_purchase is None:
        raise HTTPException(status_code=404, detail="Purchase not found")
    return db_purchase


@router.delete("/purchases/{purchase_id}")
def delete_feed_purchase(
    purchase_id: int,
    db: Session = Depends(get_db),
    user: AuthenticatedContext = Depends(get_current_user),
):
    if not crud_feed.delete_purchase(db, purchase_id, changed_by=get_user_identifier(user)):
        raise HTTPException(status_code=404, detail="Purchase not found")
    return {"message": "Purchase deleted successfully"}


# --- Consumption ---

@router.get("/consumption/", response_model=schemas.FeedConsumptionList)
def list_feed_consumption(
    consumption_type: Optional[Literal["flock", "batch"]] = None,
    flock_id: Optional[int] = None,
    batch_id: Optional[int] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    db: Session = Depends(get_db),
    user: AuthenticatedContext = Depends(get_current_user),
):
    consumptions = crud_feed.get_feed_consumptions(db, consumption_type, flock_id, batch_id, start_date, end_date)
    return schemas.FeedConsumptionList(
        consumptions=consumptions,
        summary=crud_feed.summarize_feed_consumptions(consumptions),
    )


@router.post("/consumption/", response_model=schemas.FeedConsumption, status_code=status.HTTP_201_CREATED)
def record_feed_consumption(
    consumption: schemas.FeedConsumptionCreate,
    db: Session = Depends(get_db),
    user: AuthenticatedContext = Depends(get_current_user),
):
    """Record feed eaten by a flock or batch, drawing it from inventory when an item is given."""
    return crud_feed.record_consumption(db, consumption, changed_by=get_user_identifier(user))


@router.post("/consumption/sync-expenses", response_model=schemas.ExpenseSyncResult)
def sync_feed_consumption_expenses(
    db: Session = Depends(get_db),
    user: AuthenticatedContext = Depends(get_current_user),
):
    """Back-fill feed expenses for consumption records recorded before expenses were tracked."""
    summary = crud_feed.sync_consumption_expenses(db, changed_by=get_user_identifier(user))
    return schemas.ExpenseSyncResult(
        message=f"Synced {summary.expenses_created} feed consumption records to expenses",
        summary=summary,
    )


@router.put("/consumption/{consumption_id}", response_model=schemas.FeedConsumption)
def update_feed_consumption(
    consumption_id: int,
    consumption: schemas.FeedConsumptionUpdate,
    db: Session = Depends(get_db),
    user: AuthenticatedContext = Depends(get_current_user),
):
    db_consumption = crud_feed.update_consumption(db, consumption_id, consumption, changed_by=get_user_identifier(user))
    if db_consumption is None:
        raise HTTPException(status_code=404, detail="Consumption record not found")
    return db_consumption


@router.delete("/consumption/{consumption_id}")
def delete_feed_consumption(
    consumption_id: int,
    db: Session = Depends(get_db),
    user: AuthenticatedContext = Depends(get_current_user),
):
    if not crud_feed.delete_consumption(db, consumption_id, changed_by=get_user_identifier(user)):
        raise HTTPException(status_code=404, detail="Consumption record not found")
    return {"message": "Consumption record deleted successfully"}
