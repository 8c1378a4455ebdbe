from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field

from flockwise.models.purchase_orders import PurchaseOrderStatus


class PurchaseOrderItemCreate(BaseModel):
    inventory_id: int
    quantity_ordered: Decimal = Field(gt=0)
    unit_price: Decimal = Field(ge=0)
    notes: Optional[str] = None


class PurchaseOrderItemUpdate(BaseModel):
    id: int
    quantity_received: Optional[Decimal] = Field(default=None, ge=0)
    notes: Optional[str] = None


class PurchaseOrderItem(BaseModel):
    id: int
    inventory_id: int
    quantity_ordered: Decimal
    quantity_received: Optional[Decimal] = None
    unit_price: Decimal
    total_price: Decimal
    notes: Optional[str] = None

    class Config:
        from_attributes = True


class PurchaseOrderCreate(BaseModel):
    supplier_id: int
    order_date: date
    expected_delivery: Optional[date] = None
    status: PurchaseOrderStatus = PurchaseOrderStatus.DRAFT
    shipping_address: Optional[str] = None
    notes: Optional[str] = None
    # When creating, items are part of the initial request
    items: List[PurchaseOrderItemCreate] = Field(min_length=1)


class PurchaseOrderUpdate(BaseModel):
    status: Optional[PurchaseOrderStatus] = None
    actual_delivery: Optional[date] = None
    payment_status: Optional[str] = None
    paid_amount: Optional[Decimal] = Field(default=None, ge=0)
    payment_date: Optional[date] = None
    payment_method: Optional[str] = None
    invoice_number: Optional[str] = None
    received_by: Optional[str] = None
    notes: Optional[str] = None
    items: Optional[List[PurchaseOrderItemUpdate]] = None
    # total_amount is system-calculated, not updated directly


class PurchaseOrder(BaseModel):
    id: int
    order_number: str
    supplier_id: int
    order_date: date
    expected_delivery: Optional[date] = None
    actual_delivery: Optional[date] = None
    status: PurchaseOrderStatus
    total_amount: Decimal
    payment_status: str
    paid_amount: Decimal
    payment_date: Optional[date] = None
    payment_method: Optional[str] = None
    invoice_number: Optional[str] = None
    received_by: Optional[str] = None
    shipping_address: Optional[str] = None
    notes: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None
    items: List[PurchaseOrderItem] = []

    class Config:
        from_attributes = True


class PurchaseOrderSummary(BaseModel):
    total_orders: int
    draft_orders: int
    pending_orders: int
    received_orders: int
    total_value: Decimal
    total_paid: Decimal


class PurchaseOrderList(BaseModel):
    data: List[PurchaseOrder]
    summary: PurchaseOrderSummary
