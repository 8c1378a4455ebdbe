from typing import List, Optional

from sqlalchemy.orm import Session

from flockwise.models.batch import Batch
from flockwise.models.feed import FeedConsumption
from flockwise.models.finance import ExpenseTransaction, IncomeTransaction
from flockwise.models.health import DiseaseOutbreak, HealthCheck, VaccinationRecord
from flockwise.models.production import BirthRecord, MortalityRecord, WeightRecord
from flockwise.schemas.batch import BatchCreate, BatchUpdate


def get_batch(db: Session, batch_id: int) -> Optional[Batch]:
    return db.query(Batch).filter(Batch.id == batch_id).first()


def get_all_batches(db: Session, status: Optional[str] = None, batch_type: Optional[str] = None) -> List[Batch]:
    query = db.query(Batch)
    if status:
        query = query.filter(Batch.status == status)
    if batch_type:
        query = query.filter(Batch.batch_type == batch_type)
    return query.order_by(Batch.doc_arrival_date.desc()).all()


def create_batch(db: Session, batch: BatchCreate, changed_by: str) -> Batch:
    # the live population starts at what actually arrived
    db_batch = Batch(
        **batch.model_dump(),
        current_stock=batch.quantity_received,
        status="active",
        created_by=changed_by,
        updated_by=changed_by,
    )
    db.add(db_batch)
    db.commit()
    db.refresh(db_batch)
    return db_batch


def update_batch(db: Session, batch_id: int, batch: BatchUpdate, changed_by: str) -> Optional[Batch]:
    db_batch = get_batch(db, batch_id)
    if db_batch:
        for key, value in batch.model_dump(exclude_unset=True).items():
            setattr(db_batch, key, value)
        db_batch.updated_by = changed_by
        db.commit()
        db.refresh(db_batch)
    return db_batch


def delete_batch(db: Session, db_batch: Batch) -> None:
    db.delete(db_batch)
    db.commit()


# Tables whose rows point at a batch; a batch with any of them is closed, not deleted.
BATCH_REFERENCES = (
    FeedConsumption,
    WeightRecord,
    MortalityRecord,
    BirthRecord,
    IncomeTransaction,
    ExpenseTransaction,
    VaccinationRecord,
    HealthCheck,
    DiseaseOutbreak,
)


def batch_in_use(db: Session, batch_id: int) -> bool:
    return any(
        db.query(model.id).filter(model.batch_id == batch_id).first() is not None
        for model in BATCH_REFERENCES
    )
