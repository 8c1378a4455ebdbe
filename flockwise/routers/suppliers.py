import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

import flockwise.crud.supplier as crud_supplier
from flockwise.database import get_db
from flockwise.schemas.supplier import Supplier, SupplierCreate, SupplierUpdate
from flockwise.utils.auth_utils import AuthenticatedContext, get_current_user, get_user_identifier

router = APIRouter(prefix="/suppliers", tags=["Suppliers"])
logger = logging.getLogger("suppliers")


@router.get("/", response_model=List[Supplier])
def read_suppliers(
    include_inactive: bool = False,
    db: Session = Depends(get_db),
    user: AuthenticatedContext = Depends(get_current_user),
):
    return crud_supplier.get_suppliers(db, include_inactive=include_inactive)


@router.post("/", response_model=Supplier, status_code=status.HTTP_201_CREATED)
def create_supplier(
    supplier: SupplierCreate,
    db: Session = Depends(get_db),
    user: AuthenticatedContext = Depends(get_current_user),
):
    db_supplier = crud_supplier.create_supplier(db, supplier, changed_by=get_user_identifier(user))
    logger.info(f"Supplier '{db_supplier.name}' (ID: {db_supplier.id}) created by {get_user_identifier(user)}")
    return db_supplier


@router.put("/{supplier_id}", response_model=Supplier)
def update_supplier(
    supplier_id: int,
    supplier: SupplierUpdate,
    db: Session = Depends(get_db),
    user: AuthenticatedContext = Depends(get_current_user),
):
    db_supplier = crud_supplier.update_supplier(db, supplier_id, supplier, changed_by=get_user_identifier(user))
    if db_supplier is None:
        raise HTTPException(status_code=404, detail="Supplier not found")
    return db_supplier


@router.delete("/{supplier_id}")
def delete_supplier(
    supplier_id: int,
    db: Session = Depends(get_db),
    user: AuthenticatedContext = Depends(get_current_user),
):
    db_supplier = crud_supplier.get_supplier(db, supplier_id)
    if db_supplier is None:
        raise HTTPException(status_code=404, detail="Supplier not found")
    if crud_supplier.supplier_in_use(db_supplier):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Supplier is referenced by inventory, purchases or orders. Deactivate it instead.",
        )
    crud_supplier.delete_supplier(db, db_supplier)
    logger.info(f"Supplier (ID: {supplier_id}) deleted by {get_user_identifier(user)}")
    return {"message": "Supplier deleted successfully"}
