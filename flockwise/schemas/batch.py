from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field, model_validator


class BatchBase(BaseModel):
    batch_name: str = Field(min_length=1)
    batch_type: str = "broilers"
    breed: Optional[str] = None
    doc_arrival_date: date
    supplier: Optional[str] = None
    doc_cost_per_bird: Optional[Decimal] = Field(default=None, ge=0)
    expected_sale_date: Optional[date] = None
    notes: Optional[str] = None


class BatchCreate(BatchBase):
    quantity_ordered: int = Field(gt=0)
    quantity_received: int = Field(gt=0)

    @model_validator(mode="after")
    def check_received(self):
        if self.quantity_received > self.quantity_ordered:
            raise ValueError("Quantity received cannot exceed quantity ordered")
        return self


class BatchUpdate(BaseModel):
    batch_name: Optional[str] = Field(default=None, min_length=1)
    batch_type: Optional[str] = None
    breed: Optional[str] = None
    status: Optional[str] = None
    supplier: Optional[str] = None
    doc_cost_per_bird: Optional[Decimal] = Field(default=None, ge=0)
    expected_sale_date: Optional[date] = None
    notes: Optional[str] = None


class Batch(BatchBase):
    id: int
    quantity_ordered: int
    quantity_received: int
    current_stock: int
    status: str
    created_at: datetime

    class Config:
        from_attributes = True
