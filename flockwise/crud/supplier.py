from typing import List, Optional

from sqlalchemy.orm import Session

from flockwise.models.supplier import Supplier
from flockwise.schemas.supplier import SupplierCreate, SupplierUpdate


def get_supplier(db: Session, supplier_id: int) -> Optional[Supplier]:
    return db.query(Supplier).filter(Supplier.id == supplier_id).first()


def get_suppliers(db: Session, include_inactive: bool = False) -> List[Supplier]:
    query = db.query(Supplier)
    if not include_inactive:
        query = query.filter(Supplier.is_active.is_(True))
    return query.order_by(Supplier.name).all()


def create_supplier(db: Session, supplier: SupplierCreate, changed_by: str) -> Supplier:
    db_supplier = Supplier(**supplier.model_dump(), created_by=changed_by, updated_by=changed_by)
    db.add(db_supplier)
    db.commit()
    db.refresh(db_supplier)
    return db_supplier


def update_supplier(db: Session, supplier_id: int, supplier: SupplierUpdate, changed_by: str) -> Optional[Supplier]:
    db_supplier = get_supplier(db, supplier_id)
    if db_supplier:
        for key, value in supplier.model_dump(exclude_unset=True).items():
            setattr(db_supplier, key, value)
        db_supplier.updated_by = changed_by
        db.commit()
        db.refresh(db_supplier)
    return db_supplier


def supplier_in_use(db_supplier: Supplier) -> bool:
    return any((
        db_supplier.feed_inventory,
        db_supplier.feed_purchases,
        db_supplier.inventory_items,
        db_supplier.purchase_orders,
    ))


def delete_supplier(db: Session, db_supplier: Supplier) -> None:
    db.delete(db_supplier)
    db.commit()
