from decimal import Decimal
from typing import List, Optional

from sqlalchemy.orm import Session

from flockwise.exceptions import NotFoundError
from flockwise.models.inventory_items import InventoryItem
from flockwise.models.supplier import Supplier
from flockwise.schemas.inventory_items import InventoryItemCreate, InventoryItemSummary, InventoryItemUpdate


def _check_supplier(db: Session, supplier_id: Optional[int]):
    if supplier_id is not None and db.query(Supplier).filter(Supplier.id == supplier_id).first() is None:
        raise NotFoundError(f"Supplier {supplier_id} not found")


def get_inventory_item(db: Session, item_id: int) -> Optional[InventoryItem]:
    return db.query(InventoryItem).filter(InventoryItem.id == item_id).first()


def get_inventory_items(db: Session, category: Optional[str] = None, include_inactive: bool = False) -> List[InventoryItem]:
    query = db.query(InventoryItem)
    if category:
        query = query.filter(InventoryItem.category == category)
    if not include_inactive:
        query = query.filter(InventoryItem.is_active.is_(True))
    return query.order_by(InventoryItem.item_name).all()


def summarize_inventory_items(items: List[InventoryItem]) -> InventoryItemSummary:
    return InventoryItemSummary(
        total_items=len(items),
        low_stock_count=sum(1 for item in items if item.current_stock <= item.reorder_level),
        total_value=sum((item.current_stock * item.unit_cost for item in items), Decimal(0)),
    )


def create_inventory_item(db: Session, item: InventoryItemCreate, changed_by: str) -> InventoryItem:
    _check_supplier(db, item.supplier_id)
    db_item = InventoryItem(**item.model_dump(), created_by=changed_by, updated_by=changed_by)
    db.add(db_item)
    db.commit()
    db.refresh(db_item)
    return db_item


def update_inventory_item(db: Session, item_id: int, item: InventoryItemUpdate, changed_by: str) -> Optional[InventoryItem]:
    db_item = get_inventory_item(db, item_id)
    if db_item:
        update_data = item.model_dump(exclude_unset=True)
        _check_supplier(db, update_data.get("supplier_id"))
        for key, value in update_data.items():
            setattr(db_item, key, value)
        db_item.updated_by = changed_by
        db.commit()
        db.refresh(db_item)
    return db_item


def inventory_item_in_use(db_item: InventoryItem) -> bool:
    return bool(db_item.stock_movements) or bool(db_item.purchase_order_items)


def delete_inventory_item(db: Session, db_item: InventoryItem) -> None:
    db.delete(db_item)
    db.commit()
