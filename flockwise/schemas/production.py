from datetime import date
from decimal import Decimal
from typing import Literal, Optional

from pydantic import BaseModel, Field, model_validator


# --- Weight tracking ---

class WeightRecordCreate(BaseModel):
    batch_id: int
    weighing_date: date
    age_in_days: int = Field(ge=0)
    sample_size: int = Field(gt=0)
    average_weight: Decimal = Field(gt=0)
    min_weight: Optional[Decimal] = Field(default=None, gt=0)
    max_weight: Optional[Decimal] = Field(default=None, gt=0)
    uniformity: Optional[Decimal] = Field(default=None, ge=0, le=100)
    notes: Optional[str] = None


class WeightRecordUpdate(BaseModel):
    weighing_date: Optional[date] = None
    age_in_days: Optional[int] = Field(default=None, ge=0)
    sample_size: Optional[int] = Field(default=None, gt=0)
    average_weight: Optional[Decimal] = Field(default=None, gt=0)
    min_weight: Optional[Decimal] = Field(default=None, gt=0)
    max_weight: Optional[Decimal] = Field(default=None, gt=0)
    uniformity: Optional[Decimal] = Field(default=None, ge=0, le=100)
    notes: Optional[str] = None


class WeightRecord(WeightRecordCreate):
    id: int
    recorded_by: Optional[str] = None

    class Config:
        from_attributes = True


# --- Mortality ---

class MortalityRecordCreate(BaseModel):
    record_type: Literal["flock", "batch"]
    flock_id: Optional[int] = None
    batch_id: Optional[int] = None
    mortality_date: date
    mortality_count: int = Field(gt=0)
    cause: str = "Unknown"
    notes: Optional[str] = None

    @model_validator(mode="after")
    def check_target(self):
        if self.record_type == "flock" and self.flock_id is None:
            raise ValueError("Flock ID required for flock mortality")
        if self.record_type == "batch" and self.batch_id is None:
            raise ValueError("Batch ID required for batch mortality")
        return self


class MortalityRecordUpdate(BaseModel):
    mortality_date: Optional[date] = None
    mortality_count: Optional[int] = Field(default=None, gt=0)
    cause: Optional[str] = None
    notes: Optional[str] = None


class MortalityRecord(BaseModel):
    id: int
    record_type: str
    flock_id: Optional[int] = None
    batch_id: Optional[int] = None
    mortality_date: date
    mortality_count: int
    cause: str
    mortality_rate: Optional[Decimal] = None
    recorded_by: Optional[str] = None
    notes: Optional[str] = None

    class Config:
        from_attributes = True


# --- Egg collection ---

class EggCollectionCreate(BaseModel):
    flock_id: int
    collection_date: date
    good_eggs_count: int = Field(ge=0)
    broken_eggs_count: int = Field(default=0, ge=0)
    collection_time: Optional[str] = None
    notes: Optional[str] = None


class EggCollection(EggCollectionCreate):
    id: int
    total_eggs_count: int
    production_percentage: Optional[Decimal] = None
    recorded_by: Optional[str] = None

    class Config:
        from_attributes = True


# --- Births ---

class BirthRecordCreate(BaseModel):
    record_type: Literal["flock", "batch"]
    flock_id: Optional[int] = None
    batch_id: Optional[int] = None
    birth_date: date
    birth_count: int = Field(gt=0)
    male_count: int = Field(default=0, ge=0)
    female_count: int = Field(default=0, ge=0)
    mother_details: Optional[str] = None
    father_details: Optional[str] = None
    health_status: str = "healthy"
    notes: Optional[str] = None

    @model_validator(mode="after")
    def check_target(self):
        if self.record_type == "flock" and self.flock_id is None:
            raise ValueError("Flock ID required for flock birth record")
        if self.record_type == "batch" and self.batch_id is None:
            raise ValueError("Batch ID required for batch birth record")
        if self.male_count + self.female_count > self.birth_count:
            raise ValueError("Male and female counts cannot exceed the birth count")
        return self


class BirthRecord(BirthRecordCreate):
    id: int
    birds_added: int
    recorded_by: Optional[str] = None

    class Config:
        from_attributes = True
