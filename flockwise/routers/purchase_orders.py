import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

import flockwise.crud.purchase_orders as crud_purchase_orders
from flockwise.database import get_db
from flockwise.models.purchase_orders import PurchaseOrderStatus
from flockwise.schemas.purchase_orders import (
    PurchaseOrder as PurchaseOrderSchema,
    PurchaseOrderCreate,
    PurchaseOrderList,
    PurchaseOrderUpdate,
)
from flockwise.utils.auth_utils import AuthenticatedContext, get_current_user, get_user_identifier

router = APIRouter(prefix="/inventory/purchase-orders", tags=["Purchase Orders"])
logger = logging.getLogger("purchase_orders")


@router.get("/", response_model=PurchaseOrderList)
def read_purchase_orders(
    status: Optional[PurchaseOrderStatus] = None,
    supplier_id: Optional[int] = None,
    db: Session = Depends(get_db),
    user: AuthenticatedContext = Depends(get_current_user),
):
    orders = crud_purchase_orders.get_purchase_orders(db, status=status, supplier_id=supplier_id)
    return PurchaseOrderList(data=orders, summary=crud_purchase_orders.summarize_purchase_orders(orders))


@router.post("/", response_model=PurchaseOrderSchema, status_code=status.HTTP_201_CREATED)
def create_purchase_order(
    po: PurchaseOrderCreate,
    db: Session = Depends(get_db),
    user: AuthenticatedContext = Depends(get_current_user),
):
    """Create a new purchase order with its items."""
    return crud_purchase_orders.create_purchase_order(db, po, changed_by=get_user_identifier(user))


@router.get("/{po_id}", response_model=PurchaseOrderSchema)
def read_purchase_order(
    po_id: int,
    db: Session = Depends(get_db),
    user: AuthenticatedContext = Depends(get_current_user),
):
    db_po = crud_purchase_orders.get_purchase_order(db, po_id)
    if db_po is None:
        raise HTTPException(status_code=404, detail="Purchase Order not found")
    return db_po


@router.put("/{po_id}", response_model=PurchaseOrderSchema)
def update_purchase_order(
    po_id: int,
    po_update: PurchaseOrderUpdate,
    db: Session = Depends(get_db),
    user: AuthenticatedContext = Depends(get_current_user),
):
    """
    Update an existing purchase order (partial update).

    Setting the status to `received` books every line into inventory and the
    stock movement ledger in the same transaction.
    """
    db_po = crud_purchase_orders.update_purchase_order(db, po_id, po_update, changed_by=get_user_identifier(user))
    if db_po is None:
        raise HTTPException(status_code=404, detail="Purchase Order not found")
    return db_po


@router.delete("/{po_id}")
def delete_purchase_order(
    po_id: int,
    db: Session = Depends(get_db),
    user: AuthenticatedContext = Depends(get_current_user),
):
    if not crud_purchase_orders.delete_purchase_order(db, po_id, changed_by=get_user_identifier(user)):
        raise HTTPException(status_code=404, detail="Purchase Order not found")
    return {"message": "Purchase Order deleted successfully"}
