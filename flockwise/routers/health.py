from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

import flockwise.crud.health as crud_health
from flockwise.database import get_db
from flockwise.models.health import DiseaseOutbreak, HealthCheck, VaccinationRecord
from flockwise.schemas import health as schemas
from flockwise.utils.auth_utils import AuthenticatedContext, get_current_user, get_user_identifier

router = APIRouter(prefix="/health", tags=["Health"])


# --- Vaccinations ---

@router.get("/vaccination-records/", response_model=List[schemas.VaccinationRecord])
def read_vaccination_records(
    flock_id: Optional[int] = None,
    batch_id: Optional[int] = None,
    db: Session = Depends(get_db),
    user: AuthenticatedContext = Depends(get_current_user),
):
    return crud_health.get_health_records(db, VaccinationRecord, flock_id, batch_id)


@router.post("/vaccination-records/", response_model=schemas.VaccinationRecord, status_code=status.HTTP_201_CREATED)
def create_vaccination_record(
    record: schemas.VaccinationRecordCreate,
    db: Session = Depends(get_db),
    user: AuthenticatedContext = Depends(get_current_user),
):
    return crud_health.create_health_record(db, VaccinationRecord, record, changed_by=get_user_identifier(user))


@router.delete("/vaccination-records/{record_id}")
def delete_vaccination_record(
    record_id: int,
    db: Session = Depends(get_db),
    user: AuthenticatedContext = Depends(get_current_user),
):
    if not crud_health.delete_health_record(db, VaccinationRecord, record_id):
        raise HTTPException(status_code=404, detail="Vaccination record not found")
    return {"message": "Vaccination record deleted successfully"}


# --- Health checks ---

@router.get("/health-checks/", response_model=List[schemas.HealthCheck])
def read_health_checks(
    flock_id: Optional[int] = None,
    batch_id: Optional[int] = None,
    db: Session = Depends(get_db),
    user: AuthenticatedContext = Depends(get_current_user),
):
    return crud_health.get_health_records(db, HealthCheck, flock_id, batch_id)


@router.post("/health-checks/", response_model=schemas.HealthCheck, status_code=status.HTTP_201_CREATED)
def create_health_check(
    record: schemas.HealthCheckCreate,
    db: Session = Depends(get_db),
    user: AuthenticatedContext = Depends(get_current_user),
):
    return crud_health.create_health_record(db, HealthCheck, record, changed_by=get_user_identifier(user))


@router.delete("/health-checks/{record_id}")
def delete_health_check(
    record_id: int,
    db: Session = Depends(get_db),
    user: AuthenticatedContext = Depends(get_current_user),
):
    if not crud_health.delete_health_record(db, HealthCheck, record_id):
        raise HTTPException(status_code=404, detail="Health check not found")
    return {"message": "Health check deleted successfully"}


# --- Disease outbreaks ---

@router.get("/disease-outbreaks/", response_model=List[schemas.DiseaseOutbreak])
def read_disease_outbreaks(
    flock_id: Optional[int] = None,
    batch_id: Optional[int] = None,
    db: Session = Depends(get_db),
    user: AuthenticatedContext = Depends(get_current_user),
):
    return crud_health.get_health_records(db, DiseaseOutbreak, flock_id, batch_id)


@router.post("/disease-outbreaks/", response_model=schemas.DiseaseOutbreak, status_code=status.HTTP_201_CREATED)
def create_disease_outbreak(
    record: schemas.DiseaseOutbreakCreate,
    db: Session = Depends(get_db),
    user: AuthenticatedContext = Depends(get_current_user),
):
    return crud_health.create_health_record(db, DiseaseOutbreak, record, changed_by=get_user_identifier(user))


@router.delete("/disease-outbreaks/{record_id}")
def delete_disease_outbreak(
    record_id: int,
    db: Session = Depends(get_db),
    user: AuthenticatedContext = Depends(get_current_user),
):
    if not crud_health.delete_health_record(db, DiseaseOutbreak, record_id):
        raise HTTPException(status_code=404, detail="Disease outbreak not found")
    return {"message": "Disease outbreak deleted successfully"}
