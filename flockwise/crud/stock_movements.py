"""
Manual stock movements on general inventory items.

A movement is stored with an absolute quantity; its effect on stock comes from
the movement type (consumption, damage and return take stock out, purchase and
adjustment put it in). Each row keeps the item's balance right after it was
applied.
"""

import logging
from datetime import date
from typing import List, Optional

from sqlalchemy.orm import Session

from flockwise.crud.stock import apply_stock_delta
from flockwise.exceptions import NotFoundError
from flockwise.models.inventory_items import InventoryItem
from flockwise.models.stock_movement import MovementType, StockMovement
from flockwise.schemas.inventory_items import StockMovementCreate, StockMovementSummary

logger = logging.getLogger("stock_movements")


def lock_inventory_item(db: Session, item_id: int) -> InventoryItem:
    item = db.query(InventoryItem).filter(InventoryItem.id == item_id).with_for_update().first()
    if item is None:
        raise NotFoundError(f"Inventory item {item_id} not found")
    return item


def locked_movement_query(db: Session, movement_id: int):
    return db.query(StockMovement).filter(StockMovement.id == movement_id).with_for_update()


def get_stock_movements(
    db: Session,
    inventory_id: Optional[int] = None,
    movement_type: Optional[MovementType] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
) -> List[StockMovement]:
    query = db.query(StockMovement)
    if inventory_id:
        query = query.filter(StockMovement.inventory_id == inventory_id)
    if movement_type:
        query = query.filter(StockMovement.movement_type == movement_type)
    if start_date:
        query = query.filter(StockMovement.movement_date >= start_date)
    if end_date:
        query = query.filter(StockMovement.movement_date <= end_date)
    return query.order_by(StockMovement.movement_date.desc(), StockMovement.id.desc()).all()


def summarize_stock_movements(movements: List[StockMovement]) -> StockMovementSummary:
    counts = {movement_type: 0 for movement_type in MovementType}
    for movement in movements:
        counts[MovementType(movement.movement_type)] += 1
    return StockMovementSummary(
        total_movements=len(movements),
        purchases=counts[MovementType.PURCHASE],
        consumptions=counts[MovementType.CONSUMPTION],
        adjustments=counts[MovementType.ADJUSTMENT],
        returns=counts[MovementType.RETURN],
        damages=counts[MovementType.DAMAGE],
    )


def create_stock_movement(db: Session, movement: StockMovementCreate, changed_by: str) -> StockMovement:
    item = lock_inventory_item(db, movement.inventory_id)
    delta = movement.quantity * movement.movement_type.sign
    item.current_stock = apply_stock_delta(
        item.current_stock, delta,
        message=f"Insufficient stock. Available: {item.current_stock}, Requested: {movement.quantity}",
    )
    if movement.movement_type == MovementType.PURCHASE:
        item.last_restock_date = movement.movement_date
    item.updated_by = changed_by

    db_movement = StockMovement(
        **movement.model_dump(),
        balance_after=item.current_stock,
        performed_by=changed_by,
        created_by=changed_by,
    )
    db.add(db_movement)
    db.commit()
    db.refresh(db_movement)
    logger.info(
        f"Stock movement (ID: {db_movement.id}) {movement.movement_type.value} of {movement.quantity} "
        f"on item {item.id} by {changed_by}; balance {item.current_stock}"
    )
    return db_movement


def delete_stock_movement(db: Session, movement_id: int, changed_by: str) -> bool:
    """Delete a movement and undo its effect on the item's stock."""
    db_movement = locked_movement_query(db, movement_id).first()
    if db_movement is None:
        return False

    item = lock_inventory_item(db, db_movement.inventory_id)
    item.current_stock = apply_stock_delta(
        item.current_stock, -db_movement.signed_quantity,
        message="Cannot delete movement: would result in negative stock",
    )
    item.updated_by = changed_by
    db.delete(db_movement)
    db.commit()
    logger.info(f"Stock movement (ID: {movement_id}) reversed and deleted by {changed_by}")
    return True
