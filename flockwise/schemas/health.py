from datetime import date
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field


class VaccinationRecordCreate(BaseModel):
    flock_id: Optional[int] = None
    batch_id: Optional[int] = None
    vaccination_date: date
    vaccine_name: str = Field(min_length=1)
    dosage: Optional[str] = None
    administration_method: Optional[str] = None
    birds_vaccinated: Optional[int] = Field(default=None, ge=0)
    cost: Optional[Decimal] = Field(default=None, ge=0)
    next_due_date: Optional[date] = None
    notes: Optional[str] = None


class VaccinationRecord(VaccinationRecordCreate):
    id: int
    administered_by: Optional[str] = None

    class Config:
        from_attributes = True


class HealthCheckCreate(BaseModel):
    flock_id: Optional[int] = None
    batch_id: Optional[int] = None
    check_date: date
    overall_health: str = Field(min_length=1)
    symptoms: Optional[str] = None
    treatment: Optional[str] = None
    notes: Optional[str] = None


class HealthCheck(HealthCheckCreate):
    id: int
    inspected_by: Optional[str] = None

    class Config:
        from_attributes = True


class DiseaseOutbreakCreate(BaseModel):
    flock_id: Optional[int] = None
    batch_id: Optional[int] = None
    outbreak_date: date
    disease_name: str = Field(min_length=1)
    birds_affected: Optional[int] = Field(default=None, ge=0)
    treatment: Optional[str] = None
    is_resolved: bool = False
    resolved_date: Optional[date] = None
    notes: Optional[str] = None


class DiseaseOutbreak(DiseaseOutbreakCreate):
    id: int
    recorded_by: Optional[str] = None

    class Config:
        from_attributes = True
