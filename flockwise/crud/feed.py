"""
Feed inventory, purchases and consumption.

Every purchase/consumption write touches the linked FeedInventory row in the
same transaction: the inventory row is locked (SELECT ... FOR UPDATE), the new
stock level is computed and checked, the purchase/consumption row is written,
and the whole unit is committed once. Any error before the commit leaves both
tables untouched.
"""

import logging
from datetime import date
from decimal import Decimal
from typing import List, Optional

from sqlalchemy.orm import Session

from flockwise.crud.stock import apply_stock_delta
from flockwise.exceptions import NotFoundError
from flockwise.models.batch import Batch
from flockwise.models.feed import FeedConsumption, FeedInventory, FeedPurchase
from flockwise.models.finance import ExpenseTransaction
from flockwise.models.flock import Flock
from flockwise.models.supplier import Supplier
from flockwise.schemas import feed as schemas

logger = logging.getLogger("feed")

# Columns an update may change but never clear
REQUIRED_PURCHASE_FIELDS = ("purchase_date", "supplier_id", "inventory_id", "quantity_bags", "price_per_bag", "payment_status")
REQUIRED_CONSUMPTION_FIELDS = ("consumption_date", "feed_quantity_bags", "feed_price_per_bag")


def _drop_cleared(update_data: dict, required) -> dict:
    return {k: v for k, v in update_data.items() if v is not None or k not in required}


def _lock_inventory(db: Session, inventory_id: int) -> Optional[FeedInventory]:
    return db.query(FeedInventory).filter(FeedInventory.id == inventory_id).with_for_update().first()


def _require_inventory(db: Session, inventory_id: int) -> FeedInventory:
    inventory = _lock_inventory(db, inventory_id)
    if inventory is None:
        raise NotFoundError(f"Feed inventory item {inventory_id} not found")
    return inventory


def _require_supplier(db: Session, supplier_id: int) -> Supplier:
    supplier = db.query(Supplier).filter(Supplier.id == supplier_id).first()
    if supplier is None:
        raise NotFoundError(f"Supplier {supplier_id} not found")
    return supplier


# --- Feed inventory ---

def get_feed_inventory(db: Session, inventory_id: int) -> Optional[FeedInventory]:
    return db.query(FeedInventory).filter(FeedInventory.id == inventory_id).first()


def get_feed_inventories(db: Session, include_inactive: bool = False, feed_type: Optional[str] = None) -> List[FeedInventory]:
    query = db.query(FeedInventory)
    if not include_inactive:
        query = query.filter(FeedInventory.is_active.is_(True))
    if feed_type:
        query = query.filter(FeedInventory.feed_type == feed_type)
    return query.order_by(FeedInventory.feed_type).all()


def summarize_feed_inventory(items: List[FeedInventory]) -> schemas.FeedInventorySummary:
    total_value = sum((item.current_stock_bags * item.unit_cost_per_bag for item in items), Decimal(0))
    low_stock = [item for item in items if item.current_stock_bags <= item.reorder_level]
    return schemas.FeedInventorySummary(
        total_items=len(items),
        total_value=total_value,
        low_stock_count=len(low_stock),
        low_stock_items=[
            schemas.LowStockItem(
                id=item.id,
                feed_type=item.feed_type,
                current_stock_bags=item.current_stock_bags,
                reorder_level=item.reorder_level,
            )
            for item in low_stock
        ],
    )


def create_feed_inventory(db: Session, item: schemas.FeedInventoryCreate, changed_by: str) -> FeedInventory:
    if item.supplier_id is not None:
        _require_supplier(db, item.supplier_id)
    db_item = FeedInventory(**item.model_dump(), created_by=changed_by, updated_by=changed_by)
    db.add(db_item)
    db.commit()
    db.refresh(db_item)
    return db_item


def update_feed_inventory(db: Session, inventory_id: int, item: schemas.FeedInventoryUpdate, changed_by: str) -> Optional[FeedInventory]:
    db_item = get_feed_inventory(db, inventory_id)
    if db_item is None:
        return None
    update_data = item.model_dump(exclude_unset=True)
    if update_data.get("supplier_id") is not None:
        _require_supplier(db, update_data["supplier_id"])
    for key, value in update_data.items():
        setattr(db_item, key, value)
    db_item.updated_by = changed_by
    db.commit()
    db.refresh(db_item)
    return db_item


def delete_feed_inventory(db: Session, db_item: FeedInventory) -> None:
    db.delete(db_item)
    db.commit()


def feed_inventory_in_use(db: Session, inventory_id: int) -> bool:
    purchase = db.query(FeedPurchase.id).filter(FeedPurchase.inventory_id == inventory_id).first()
    consumption = db.query(FeedConsumption.id).filter(FeedConsumption.inventory_id == inventory_id).first()
    return purchase is not None or consumption is not None


# --- Feed purchases ---

def get_feed_purchase(db: Session, purchase_id: int) -> Optional[FeedPurchase]:
    return db.query(FeedPurchase).filter(FeedPurchase.id == purchase_id).first()


def get_feed_purchases(
    db: Session,
    supplier_id: Optional[int] = None,
    payment_status: Optional[str] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
) -> List[FeedPurchase]:
    query = db.query(FeedPurchase)
    if supplier_id:
        query = query.filter(FeedPurchase.supplier_id == supplier_id)
    if payment_status:
        query = query.filter(FeedPurchase.payment_status == payment_status)
    if start_date:
        query = query.filter(FeedPurchase.purchase_date >= start_date)
    if end_date:
        query = query.filter(FeedPurchase.purchase_date <= end_date)
    return query.order_by(FeedPurchase.purchase_date.desc(), FeedPurchase.id.desc()).all()


def summarize_feed_purchases(purchases: List[FeedPurchase]) -> schemas.FeedPurchaseSummary:
    pending = [p for p in purchases if p.payment_status == "pending"]
    return schemas.FeedPurchaseSummary(
        total_purchases=len(purchases),
        total_spent=sum((p.total_cost for p in purchases), Decimal(0)),
        pending_payments=sum((p.total_cost for p in pending), Decimal(0)),
        paid_count=sum(1 for p in purchases if p.payment_status == "paid"),
        pending_count=len(pending),
    )


def record_purchase(db: Session, purchase: schemas.FeedPurchaseCreate, changed_by: str) -> FeedPurchase:
    """Insert a purchase and restock its inventory item in one transaction."""
    _require_supplier(db, purchase.supplier_id)
    inventory = _require_inventory(db, purchase.inventory_id)

    inventory.current_stock_bags = apply_stock_delta(inventory.current_stock_bags, purchase.quantity_bags)
    inventory.last_restock_date = purchase.purchase_date
    inventory.unit_cost_per_bag = purchase.price_per_bag  # latest price wins
    inventory.updated_by = changed_by

    db_purchase = FeedPurchase(
        **purchase.model_dump(),
        total_cost=purchase.quantity_bags * purchase.price_per_bag,
        received_by=changed_by,
        created_by=changed_by,
    )
    db.add(db_purchase)
    db.commit()
    db.refresh(db_purchase)
    logger.info(
        f"Feed purchase (ID: {db_purchase.id}) of {purchase.quantity_bags} bags recorded for inventory "
        f"{inventory.id}; stock now {inventory.current_stock_bags}"
    )
    return db_purchase


def update_purchase(db: Session, purchase_id: int, update: schemas.FeedPurchaseUpdate, changed_by: str) -> Optional[FeedPurchase]:
    """
    Edit a purchase and move the linked stock by the quantity difference.

    Moving a purchase to another inventory item takes the old quantity off the
    old item and adds the new quantity to the new one.
    """
    db_purchase = db.query(FeedPurchase).filter(FeedPurchase.id == purchase_id).with_for_update().first()
    if db_purchase is None:
        return None

    update_data = _drop_cleared(update.model_dump(exclude_unset=True), REQUIRED_PURCHASE_FIELDS)
    old_quantity = db_purchase.quantity_bags
    new_quantity = update_data.get("quantity_bags") or old_quantity
    old_inventory_id = db_purchase.inventory_id
    new_inventory_id = update_data.get("inventory_id") or old_inventory_id

    if update_data.get("supplier_id") is not None:
        _require_supplier(db, update_data["supplier_id"])

    if new_inventory_id != old_inventory_id:
        # lock in id order so two concurrent moves cannot deadlock
        locked = {i: _require_inventory(db, i) for i in sorted((old_inventory_id, new_inventory_id))}
        old_inventory, new_inventory = locked[old_inventory_id], locked[new_inventory_id]
        old_inventory.current_stock_bags = apply_stock_delta(
            old_inventory.current_stock_bags, -old_quantity,
            message="Cannot move purchase: would result in negative stock on the original item",
        )
        new_inventory.current_stock_bags = apply_stock_delta(new_inventory.current_stock_bags, new_quantity)
    elif new_quantity != old_quantity:
        inventory = _require_inventory(db, old_inventory_id)
        inventory.current_stock_bags = apply_stock_delta(
            inventory.current_stock_bags, new_quantity - old_quantity,
            message="Insufficient stock for this adjustment",
        )

    for key, value in update_data.items():
        setattr(db_purchase, key, value)
    db_purchase.total_cost = db_purchase.quantity_bags * db_purchase.price_per_bag
    db_purchase.updated_by = changed_by
    db.commit()
    db.refresh(db_purchase)
    logger.info(f"Feed purchase (ID: {purchase_id}) updated by {changed_by}; quantity {old_quantity} -> {new_quantity}")
    return db_purchase


def delete_purchase(db: Session, purchase_id: int, changed_by: str) -> bool:
    """Delete a purchase and take its quantity back out of stock."""
    db_purchase = db.query(FeedPurchase).filter(FeedPurchase.id == purchase_id).with_for_update().first()
    if db_purchase is None:
        return False

    inventory = _lock_inventory(db, db_purchase.inventory_id)
    if inventory is not None:
        inventory.current_stock_bags = apply_stock_delta(
            inventory.current_stock_bags, -db_purchase.quantity_bags,
            message="Cannot delete purchase: would result in negative stock",
        )
    db.delete(db_purchase)
    db.commit()
    logger.info(f"Feed purchase (ID: {purchase_id}) deleted by {changed_by}; inventory reversed")
    return True


# --- Feed consumption ---

def get_feed_consumption(db: Session, consumption_id: int) -> Optional[FeedConsumption]:
    return db.query(FeedConsumption).filter(FeedConsumption.id == consumption_id).first()


def get_feed_consumptions(
    db: Session,
    consumption_type: Optional[str] = None,
    flock_id: Optional[int] = None,
    batch_id: Optional[int] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
) -> List[FeedConsumption]:
    query = db.query(FeedConsumption)
    if consumption_type:
        query = query.filter(FeedConsumption.consumption_type == consumption_type)
    if flock_id:
        query = query.filter(FeedConsumption.flock_id == flock_id)
    if batch_id:
        query = query.filter(FeedConsumption.batch_id == batch_id)
    if start_date:
        query = query.filter(FeedConsumption.consumption_date >= start_date)
    if end_date:
        query = query.filter(FeedConsumption.consumption_date <= end_date)
    return query.order_by(FeedConsumption.consumption_date.desc(), FeedConsumption.id.desc()).all()


def summarize_feed_consumptions(consumptions: List[FeedConsumption]) -> schemas.FeedConsumptionSummary:
    total_used = sum((c.feed_quantity_bags for c in consumptions), Decimal(0))
    total_cost = sum((c.total_feed_cost for c in consumptions), Decimal(0))
    average = (total_cost / len(consumptions)).quantize(Decimal("0.01")) if consumptions else Decimal(0)
    return schemas.FeedConsumptionSummary(
        total_records=len(consumptions),
        total_feed_used=total_used,
        total_cost=total_cost,
        average_daily_cost=average,
    )


def record_consumption(db: Session, consumption: schemas.FeedConsumptionCreate, changed_by: str) -> FeedConsumption:
    """Insert a consumption row and draw the bags out of inventory in one transaction."""
    if consumption.consumption_type == "flock":
        if db.query(Flock).filter(Flock.id == consumption.flock_id).first() is None:
            raise NotFoundError(f"Flock {consumption.flock_id} not found")
    elif db.query(Batch).filter(Batch.id == consumption.batch_id).first() is None:
        raise NotFoundError(f"Batch {consumption.batch_id} not found")

    if consumption.inventory_id is not None:
        inventory = _require_inventory(db, consumption.inventory_id)
        inventory.current_stock_bags = apply_stock_delta(
            inventory.current_stock_bags, -consumption.feed_quantity_bags,
            message=(
                f"Insufficient stock. Available: {inventory.current_stock_bags} bags, "
                f"Requested: {consumption.feed_quantity_bags} bags"
            ),
        )
        inventory.updated_by = changed_by

    data = consumption.model_dump()
    # only the id matching the consumption type is kept
    if consumption.consumption_type == "flock":
        data["batch_id"] = None
    else:
        data["flock_id"] = None

    db_consumption = FeedConsumption(
        **data,
        total_feed_cost=consumption.feed_quantity_bags * consumption.feed_price_per_bag,
        recorded_by=changed_by,
        created_by=changed_by,
    )
    db.add(db_consumption)
    db.commit()
    db.refresh(db_consumption)
    logger.info(
        f"Feed consumption (ID: {db_consumption.id}) of {consumption.feed_quantity_bags} bags recorded "
        f"for {consumption.consumption_type} by {changed_by}"
    )
    return db_consumption


def update_consumption(db: Session, consumption_id: int, update: schemas.FeedConsumptionUpdate, changed_by: str) -> Optional[FeedConsumption]:
    db_consumption = db.query(FeedConsumption).filter(FeedConsumption.id == consumption_id).with_for_update().first()
    if db_consumption is None:
        return None

    update_data = _drop_cleared(update.model_dump(exclude_unset=True), REQUIRED_CONSUMPTION_FIELDS)
    old_quantity = db_consumption.feed_quantity_bags
    new_quantity = update_data.get("feed_quantity_bags") or old_quantity
    difference = new_quantity - old_quantity

    if difference != 0 and db_consumption.inventory_id is not None:
        inventory = _lock_inventory(db, db_consumption.inventory_id)
        if inventory is not None:
            inventory.current_stock_bags = apply_stock_delta(
                inventory.current_stock_bags, -difference,
                message="Insufficient stock for this adjustment",
            )

    for key, value in update_data.items():
        setattr(db_consumption, key, value)
    db_consumption.total_feed_cost = db_consumption.feed_quantity_bags * db_consumption.feed_price_per_bag
    db_consumption.updated_by = changed_by
    db.commit()
    db.refresh(db_consumption)
    return db_consumption


def delete_consumption(db: Session, consumption_id: int, changed_by: str) -> bool:
    """Delete a consumption row and put its bags back into stock."""
    db_consumption = db.query(FeedConsumption).filter(FeedConsumption.id == consumption_id).with_for_update().first()
    if db_consumption is None:
        return False

    if db_consumption.inventory_id is not None:
        inventory = _lock_inventory(db, db_consumption.inventory_id)
        if inventory is not None:
            inventory.current_stock_bags = apply_stock_delta(inventory.current_stock_bags, db_consumption.feed_quantity_bags)
    db.delete(db_consumption)
    db.commit()
    logger.info(f"Feed consumption (ID: {consumption_id}) deleted by {changed_by}; inventory restored")
    return True


# --- Expense sync ---

FEED_EXPENSE_CATEGORY = "feed"
SYNC_TOLERANCE = Decimal("0.01")


def _has_matching_expense(expenses: List[ExpenseTransaction], consumption: FeedConsumption) -> bool:
    for expense in expenses:
        if expense.transaction_date != consumption.consumption_date:
            continue
        if abs(expense.amount - consumption.total_feed_cost) >= SYNC_TOLERANCE:
            continue
        if expense.quantity is not None and abs(expense.quantity - consumption.feed_quantity_bags) < SYNC_TOLERANCE:
            return True
    return False


def sync_consumption_expenses(db: Session, changed_by: str) -> schemas.ExpenseSyncSummary:
    """
    Create a paid feed expense for every consumption record that has none yet.

    A consumption counts as already synced when a feed expense exists on the
    same date with the same amount and bag quantity (to within 0.01).
    """
    consumptions = db.query(FeedConsumption).order_by(FeedConsumption.consumption_date, FeedConsumption.id).all()
    expenses = db.query(ExpenseTransaction).filter(ExpenseTransaction.category == FEED_EXPENSE_CATEGORY).all()

    created = 0
    skipped = 0
    total = Decimal(0)
    for consumption in consumptions:
        if _has_matching_expense(expenses, consumption):
            skipped += 1
            continue

        if consumption.consumption_type == "flock":
            target = consumption.flock.flock_name if consumption.flock else "Unknown Flock"
        else:
            target = consumption.batch.batch_name if consumption.batch else "Unknown Batch"
        inventory = consumption.inventory
        feed_type = consumption.feed_type or (inventory.feed_type if inventory else "Feed")
        supplier = inventory.supplier if inventory else None

        expense = ExpenseTransaction(
            transaction_date=consumption.consumption_date,
            category=FEED_EXPENSE_CATEGORY,
            amount=consumption.total_feed_cost,
            quantity=consumption.feed_quantity_bags,
            unit_cost=consumption.feed_price_per_bag,
            vendor_name=supplier.name if supplier else None,
            payment_method="cash",
            payment_status="paid",
            flock_id=consumption.flock_id,
            batch_id=consumption.batch_id,
            description=(
                f"Feed consumption: {consumption.feed_quantity_bags} bags @ {consumption.feed_price_per_bag}/bag "
                f"for {feed_type} ({target})"
            ),
            notes=f"Synced from existing feed consumption record. {consumption.notes or ''}".rstrip(),
            created_by=changed_by,
            updated_by=changed_by,
        )
        db.add(expense)
        expenses.append(expense)
        created += 1
        total += consumption.total_feed_cost

    db.commit()
    logger.info(f"Feed expense sync by {changed_by}: {created} created, {skipped} already present")
    return schemas.ExpenseSyncSummary(
        total_consumption_records=len(consumptions),
        expenses_created=created,
        expenses_skipped=skipped,
        total_amount_synced=total,
    )
