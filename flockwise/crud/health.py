from typing import List, Optional

from sqlalchemy.orm import Session

from flockwise.exceptions import NotFoundError
from flockwise.models.batch import Batch
from flockwise.models.flock import Flock
from flockwise.models.health import DiseaseOutbreak, HealthCheck, VaccinationRecord

# the column each record type keeps its author in
RECORDED_BY_COLUMN = {
    VaccinationRecord: "administered_by",
    HealthCheck: "inspected_by",
    DiseaseOutbreak: "recorded_by",
}

DATE_COLUMN = {
    VaccinationRecord: "vaccination_date",
    HealthCheck: "check_date",
    DiseaseOutbreak: "outbreak_date",
}


def get_health_records(db: Session, model, flock_id: Optional[int] = None, batch_id: Optional[int] = None) -> List:
    query = db.query(model)
    if flock_id:
        query = query.filter(model.flock_id == flock_id)
    if batch_id:
        query = query.filter(model.batch_id == batch_id)
    return query.order_by(getattr(model, DATE_COLUMN[model]).desc()).all()


def create_health_record(db: Session, model, data, changed_by: str):
    if data.flock_id is not None and db.query(Flock.id).filter(Flock.id == data.flock_id).first() is None:
        raise NotFoundError(f"Flock {data.flock_id} not found")
    if data.batch_id is not None and db.query(Batch.id).filter(Batch.id == data.batch_id).first() is None:
        raise NotFoundError(f"Batch {data.batch_id} not found")
    db_record = model(**data.model_dump(), created_by=changed_by, updated_by=changed_by)
    setattr(db_record, RECORDED_BY_COLUMN[model], changed_by)
    db.add(db_record)
    db.commit()
    db.refresh(db_record)
    return db_record


def delete_health_record(db: Session, model, record_id: int) -> bool:
    db_record = db.query(model).filter(model.id == record_id).first()
    if db_record is None:
        return False
    db.delete(db_record)
    db.commit()
    return True
