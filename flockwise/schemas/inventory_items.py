from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field

from flockwise.models.stock_movement import MovementType


class InventoryItemBase(BaseModel):
    item_name: str = Field(min_length=1)
    unit: str  # e.g., "kg", "liters", "units"
    category: Optional[str] = None
    reorder_level: Decimal = Field(default=Decimal("0"), ge=0)
    unit_cost: Decimal = Field(default=Decimal("0"), ge=0)
    supplier_id: Optional[int] = None
    description: Optional[str] = None


class InventoryItemCreate(InventoryItemBase):
    current_stock: Decimal = Field(default=Decimal("0"), ge=0)


class InventoryItemUpdate(BaseModel):
    item_name: Optional[str] = Field(default=None, min_length=1)
    unit: Optional[str] = None
    category: Optional[str] = None
    # current_stock is system-managed; change it through a stock movement
    reorder_level: Optional[Decimal] = Field(default=None, ge=0)
    unit_cost: Optional[Decimal] = Field(default=None, ge=0)
    supplier_id: Optional[int] = None
    description: Optional[str] = None
    is_active: Optional[bool] = None


class InventoryItem(InventoryItemBase):
    id: int
    current_stock: Decimal
    last_restock_date: Optional[date] = None
    is_active: bool
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class InventoryItemSummary(BaseModel):
    total_items: int
    low_stock_count: int
    total_value: Decimal


class InventoryItemList(BaseModel):
    data: List[InventoryItem]
    summary: InventoryItemSummary


# --- Stock movements ---

class StockMovementCreate(BaseModel):
    inventory_id: int
    movement_date: date
    movement_type: MovementType
    quantity: Decimal = Field(gt=0)
    reference_number: Optional[str] = None
    reason: Optional[str] = None
    notes: Optional[str] = None


class StockMovement(BaseModel):
    id: int
    inventory_id: int
    movement_date: date
    movement_type: MovementType
    quantity: Decimal
    balance_after: Decimal
    reference_number: Optional[str] = None
    reason: Optional[str] = None
    performed_by: Optional[str] = None
    notes: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True


class StockMovementSummary(BaseModel):
    total_movements: int
    purchases: int
    consumptions: int
    adjustments: int
    returns: int
    damages: int


class StockMovementList(BaseModel):
    data: List[StockMovement]
    summary: StockMovementSummary
