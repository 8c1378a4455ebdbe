from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field


class FlockBase(BaseModel):
    flock_name: str = Field(min_length=1)
    flock_type: str = "layers"
    breed: Optional[str] = None
    arrival_date: date
    supplier: Optional[str] = None
    cost_per_bird: Optional[Decimal] = Field(default=None, ge=0)
    notes: Optional[str] = None


class FlockCreate(FlockBase):
    opening_stock: int = Field(gt=0)


class FlockUpdate(BaseModel):
    flock_name: Optional[str] = Field(default=None, min_length=1)
    flock_type: Optional[str] = None
    breed: Optional[str] = None
    status: Optional[str] = None
    supplier: Optional[str] = None
    cost_per_bird: Optional[Decimal] = Field(default=None, ge=0)
    notes: Optional[str] = None


class Flock(FlockBase):
    id: int
    opening_stock: int
    current_stock: int
    status: str
    created_at: datetime

    class Config:
        from_attributes = True
