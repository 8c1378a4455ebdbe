from datetime import date, datetime
from decimal import Decimal
from typing import List, Literal, Optional

from pydantic import BaseModel, Field, model_validator


# --- Feed inventory ---

class FeedInventoryBase(BaseModel):
    feed_type: str = Field(min_length=1)
    feed_brand: Optional[str] = None
    supplier_id: Optional[int] = None
    reorder_level: Decimal = Field(default=Decimal("50"), ge=0)
    unit_cost_per_bag: Decimal = Field(ge=0)
    bag_weight_kg: Decimal = Field(default=Decimal("25"), gt=0)
    expiry_date: Optional[date] = None
    storage_location: Optional[str] = None


class FeedInventoryCreate(FeedInventoryBase):
    # Opening stock; afterwards the counter only moves through purchases and consumption
    current_stock_bags: Decimal = Field(default=Decimal("0"), ge=0)


class FeedInventoryUpdate(BaseModel):
    feed_type: Optional[str] = Field(default=None, min_length=1)
    feed_brand: Optional[str] = None
    supplier_id: Optional[int] = None
    reorder_level: Optional[Decimal] = Field(default=None, ge=0)
    unit_cost_per_bag: Optional[Decimal] = Field(default=None, ge=0)
    bag_weight_kg: Optional[Decimal] = Field(default=None, gt=0)
    expiry_date: Optional[date] = None
    storage_location: Optional[str] = None
    is_active: Optional[bool] = None
    # current_stock_bags is system-managed, not directly updated via this schema


class FeedInventory(FeedInventoryBase):
    id: int
    current_stock_bags: Decimal
    last_restock_date: Optional[date] = None
    is_active: bool
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class LowStockItem(BaseModel):
    id: int
    feed_type: str
    current_stock_bags: Decimal
    reorder_level: Decimal


class FeedInventorySummary(BaseModel):
    total_items: int
    total_value: Decimal
    low_stock_count: int
    low_stock_items: List[LowStockItem]


class FeedInventoryList(BaseModel):
    inventory: List[FeedInventory]
    summary: FeedInventorySummary


# --- Feed purchases ---

class FeedPurchaseCreate(BaseModel):
    purchase_date: date
    supplier_id: int
    inventory_id: int
    quantity_bags: Decimal = Field(gt=0)
    price_per_bag: Decimal = Field(ge=0)
    payment_status: Literal["pending", "paid", "partial"] = "pending"
    payment_date: Optional[date] = None
    invoice_number: Optional[str] = None
    delivery_date: Optional[date] = None
    notes: Optional[str] = None


class FeedPurchaseUpdate(BaseModel):
    purchase_date: Optional[date] = None
    supplier_id: Optional[int] = None
    inventory_id: Optional[int] = None
    quantity_bags: Optional[Decimal] = Field(default=None, gt=0)
    price_per_bag: Optional[Decimal] = Field(default=None, ge=0)
    payment_status: Optional[Literal["pending", "paid", "partial"]] = None
    payment_date: Optional[date] = None
    invoice_number: Optional[str] = None
    delivery_date: Optional[date] = None
    notes: Optional[str] = None


class FeedPurchase(BaseModel):
    id: int
    purchase_date: date
    supplier_id: int
    inventory_id: int
    quantity_bags: Decimal
    price_per_bag: Decimal
    total_cost: Decimal
    payment_status: str
    payment_date: Optional[date] = None
    invoice_number: Optional[str] = None
    delivery_date: Optional[date] = None
    received_by: Optional[str] = None
    notes: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True


class FeedPurchaseSummary(BaseModel):
    total_purchases: int
    total_spent: Decimal
    pending_payments: Decimal
    paid_count: int
    pending_count: int


class FeedPurchaseList(BaseModel):
    purchases: List[FeedPurchase]
    summary: FeedPurchaseSummary


# --- Feed consumption ---

class FeedConsumptionCreate(BaseModel):
    consumption_type: Literal["flock", "batch"]
    flock_id: Optional[int] = None
    batch_id: Optional[int] = None
    inventory_id: Optional[int] = None
    consumption_date: date
    feed_quantity_bags: Decimal = Field(gt=0)
    feed_price_per_bag: Decimal = Field(ge=0)
    feed_type: Optional[str] = None
    notes: Optional[str] = None

    @model_validator(mode="after")
    def check_target(self):
        if self.consumption_type == "flock" and self.flock_id is None:
            raise ValueError("Flock ID is required for flock consumption")
        if self.consumption_type == "batch" and self.batch_id is None:
            raise ValueError("Batch ID is required for batch consumption")
        return self


class FeedConsumptionUpdate(BaseModel):
    consumption_date: Optional[date] = None
    feed_quantity_bags: Optional[Decimal] = Field(default=None, gt=0)
    feed_price_per_bag: Optional[Decimal] = Field(default=None, ge=0)
    feed_type: Optional[str] = None
    notes: Optional[str] = None


class FeedConsumption(BaseModel):
    id: int
    consumption_type: str
    flock_id: Optional[int] = None
    batch_id: Optional[int] = None
    inventory_id: Optional[int] = None
    consumption_date: date
    feed_quantity_bags: Decimal
    feed_price_per_bag: Decimal
    total_feed_cost: Decimal
    feed_type: Optional[str] = None
    recorded_by: Optional[str] = None
    notes: Optional[str] = None

    class Config:
        from_attributes = True


class FeedConsumptionSummary(BaseModel):
    total_records: int
    total_feed_used: Decimal
    total_cost: Decimal
    average_daily_cost: Decimal


class FeedConsumptionList(BaseModel):
    consumptions: List[FeedConsumption]
    summary: FeedConsumptionSummary


class ExpenseSyncSummary(BaseModel):
    total_consumption_records: int
    expenses_created: int
    expenses_skipped: int
    total_amount_synced: Decimal


class ExpenseSyncResult(BaseModel):
    message: str
    summary: ExpenseSyncSummary
