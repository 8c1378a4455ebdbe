import logging
import secrets
import string
from datetime import date
from decimal import Decimal
from typing import List, Optional

from sqlalchemy.orm import Session, selectinload

from flockwise.crud.stock import apply_stock_delta
from flockwise.crud.stock_movements import lock_inventory_item
from flockwise.exceptions import FarmError, InvalidTransitionError, NotFoundError
from flockwise.models.audit_mixin import local_now
from flockwise.models.inventory_items import InventoryItem
from flockwise.models.purchase_orders import PurchaseOrder, PurchaseOrderItem, PurchaseOrderStatus
from flockwise.models.stock_movement import MovementType, StockMovement
from flockwise.models.supplier import Supplier
from flockwise.schemas.purchase_orders import PurchaseOrderCreate, PurchaseOrderSummary, PurchaseOrderUpdate

logger = logging.getLogger("purchase_orders")

ORDER_SUFFIX_ALPHABET = string.ascii_uppercase + string.digits


def generate_order_number(db: Session, order_day: date) -> str:
    """PO-YYYYMMDD-XXX with a random three character suffix not used yet."""
    while True:
        suffix = "".join(secrets.choice(ORDER_SUFFIX_ALPHABET) for _ in range(3))
        order_number = f"PO-{order_day:%Y%m%d}-{suffix}"
        if db.query(PurchaseOrder.id).filter(PurchaseOrder.order_number == order_number).first() is None:
            return order_number


def get_purchase_order(db: Session, po_id: int) -> Optional[PurchaseOrder]:
    return (
        db.query(PurchaseOrder)
        .options(selectinload(PurchaseOrder.items))
        .filter(PurchaseOrder.id == po_id)
        .first()
    )


def locked_order_query(db: Session, po_id: int):
    """Order row held FOR UPDATE so concurrent receipts and deletes run one at a time."""
    return (
        db.query(PurchaseOrder)
        .options(selectinload(PurchaseOrder.items))
        .filter(PurchaseOrder.id == po_id)
        .with_for_update()
    )


def get_purchase_orders(db: Session, status: Optional[PurchaseOrderStatus] = None, supplier_id: Optional[int] = None) -> List[PurchaseOrder]:
    query = db.query(PurchaseOrder).options(selectinload(PurchaseOrder.items))
    if status:
        query = query.filter(PurchaseOrder.status == status)
    if supplier_id:
        query = query.filter(PurchaseOrder.supplier_id == supplier_id)
    return query.order_by(PurchaseOrder.order_date.desc(), PurchaseOrder.id.desc()).all()


def summarize_purchase_orders(orders: List[PurchaseOrder]) -> PurchaseOrderSummary:
    def count(*statuses):
        return sum(1 for o in orders if PurchaseOrderStatus(o.status) in statuses)

    return PurchaseOrderSummary(
        total_orders=len(orders),
        draft_orders=count(PurchaseOrderStatus.DRAFT),
        pending_orders=count(PurchaseOrderStatus.SUBMITTED, PurchaseOrderStatus.APPROVED),
        received_orders=count(PurchaseOrderStatus.RECEIVED),
        total_value=sum((o.total_amount for o in orders), Decimal(0)),
        total_paid=sum((o.paid_amount or Decimal(0) for o in orders), Decimal(0)),
    )


def create_purchase_order(db: Session, po: PurchaseOrderCreate, changed_by: str) -> PurchaseOrder:
    """Create an order with its lines. Stock is untouched until the order is received."""
    if db.query(Supplier).filter(Supplier.id == po.supplier_id).first() is None:
        raise NotFoundError(f"Supplier {po.supplier_id} not found")
    if po.status == PurchaseOrderStatus.RECEIVED:
        raise FarmError("A new purchase order cannot start as received")

    total_amount = Decimal(0)
    db_items = []
    for item_data in po.items:
        if db.query(InventoryItem.id).filter(InventoryItem.id == item_data.inventory_id).first() is None:
            raise NotFoundError(f"Inventory item {item_data.inventory_id} not found")
        line_total = item_data.quantity_ordered * item_data.unit_price
        total_amount += line_total
        db_items.append(PurchaseOrderItem(**item_data.model_dump(), total_price=line_total))

    db_po = PurchaseOrder(
        **po.model_dump(exclude={"items"}),
        order_number=generate_order_number(db, po.order_date),
        total_amount=total_amount,
        items=db_items,
        created_by=changed_by,
        updated_by=changed_by,
    )
    db.add(db_po)
    db.commit()
    db.refresh(db_po)
    logger.info(f"Purchase Order {db_po.order_number} (ID: {db_po.id}) created for supplier {po.supplier_id} by {changed_by}")
    return db_po


def _receive(db: Session, db_po: PurchaseOrder, delivery_date: date, performed_by: str):
    for line in db_po.items:
        quantity = line.quantity_received if line.quantity_received is not None else line.quantity_ordered
        line.quantity_received = quantity
        if quantity == 0:
            # nothing arrived on this line
            continue
        item = lock_inventory_item(db, line.inventory_id)
        item.current_stock = apply_stock_delta(item.current_stock, quantity)
        item.last_restock_date = delivery_date
        item.updated_by = performed_by
        db.add(StockMovement(
            inventory_id=item.id,
            movement_date=delivery_date,
            movement_type=MovementType.PURCHASE,
            quantity=quantity,
            balance_after=item.current_stock,
            reference_number=db_po.order_number,
            reason=f"Purchase order received: {db_po.order_number}",
            performed_by=performed_by,
            created_by=performed_by,
        ))


def update_purchase_order(db: Session, po_id: int, po_update: PurchaseOrderUpdate, changed_by: str) -> Optional[PurchaseOrder]:
    """
    Partial update of an order.

    Line quantity_received values are applied first; a transition into
    `received` then books every line into stock with a purchase movement.
    A received order is final.
    """
    db_po = locked_order_query(db, po_id).first()
    if db_po is None:
        return None

    old_status = PurchaseOrderStatus(db_po.status)
    new_status = po_update.status
    if old_status == PurchaseOrderStatus.RECEIVED and new_status not in (None, PurchaseOrderStatus.RECEIVED):
        raise InvalidTransitionError(f"Purchase order {db_po.order_number} is already received")

    lines = {line.id: line for line in db_po.items}
    for item_update in po_update.items or []:
        line = lines.get(item_update.id)
        if line is None:
            raise NotFoundError(f"Purchase order line {item_update.id} not found on order {db_po.order_number}")
        if old_status == PurchaseOrderStatus.RECEIVED and item_update.quantity_received is not None:
            raise InvalidTransitionError("Received quantities cannot change after receipt")
        for key, value in item_update.model_dump(exclude_unset=True, exclude={"id"}).items():
            setattr(line, key, value)

    po_data = po_update.model_dump(exclude_unset=True, exclude={"items"})
    if po_data.get("status") is None:
        po_data.pop("status", None)
    for key, value in po_data.items():
        setattr(db_po, key, value)

    if new_status == PurchaseOrderStatus.RECEIVED and old_status != PurchaseOrderStatus.RECEIVED:
        delivery_date = db_po.actual_delivery or local_now().date()
        db_po.actual_delivery = delivery_date
        _receive(db, db_po, delivery_date, db_po.received_by or changed_by)
        logger.info(f"Purchase Order (ID: {po_id}) marked as received. Inventory increased for {len(db_po.items)} line(s).")

    db_po.updated_by = changed_by
    db.commit()
    db.refresh(db_po)
    logger.info(f"Purchase Order (ID: {po_id}) updated by {changed_by}")
    return db_po


def delete_purchase_order(db: Session, po_id: int, changed_by: str) -> bool:
    db_po = locked_order_query(db, po_id).first()
    if db_po is None:
        return False
    if PurchaseOrderStatus(db_po.status) == PurchaseOrderStatus.RECEIVED:
        raise FarmError("Cannot delete a received purchase order")
    db.delete(db_po)
    db.commit()
    logger.info(f"Purchase Order (ID: {po_id}) deleted by {changed_by}")
    return True
