from typing import List, Optional

from sqlalchemy.orm import Session

from flockwise.models.feed import FeedConsumption
from flockwise.models.finance import ExpenseTransaction, IncomeTransaction
from flockwise.models.flock import Flock
from flockwise.models.health import DiseaseOutbreak, HealthCheck, VaccinationRecord
from flockwise.models.production import BirthRecord, EggCollection, MortalityRecord
from flockwise.schemas.flock import FlockCreate, FlockUpdate


def get_flock(db: Session, flock_id: int) -> Optional[Flock]:
    return db.query(Flock).filter(Flock.id == flock_id).first()


def get_all_flocks(db: Session, status: Optional[str] = None) -> List[Flock]:
    query = db.query(Flock)
    if status:
        query = query.filter(Flock.status == status)
    return query.order_by(Flock.arrival_date.desc()).all()


def create_flock(db: Session, flock: FlockCreate, changed_by: str) -> Flock:
    db_flock = Flock(
        **flock.model_dump(),
        current_stock=flock.opening_stock,
        status="active",
        created_by=changed_by,
        updated_by=changed_by,
    )
    db.add(db_flock)
    db.commit()
    db.refresh(db_flock)
    return db_flock


def update_flock(db: Session, flock_id: int, flock: FlockUpdate, changed_by: str) -> Optional[Flock]:
    db_flock = get_flock(db, flock_id)
    if db_flock:
        for key, value in flock.model_dump(exclude_unset=True).items():
            setattr(db_flock, key, value)
        db_flock.updated_by = changed_by
        db.commit()
        db.refresh(db_flock)
    return db_flock


def delete_flock(db: Session, db_flock: Flock) -> None:
    db.delete(db_flock)
    db.commit()


FLOCK_REFERENCES = (
    FeedConsumption,
    EggCollection,
    MortalityRecord,
    BirthRecord,
    IncomeTransaction,
    ExpenseTransaction,
    VaccinationRecord,
    HealthCheck,
    DiseaseOutbreak,
)


def flock_in_use(db: Session, flock_id: int) -> bool:
    return any(
        db.query(model.id).filter(model.flock_id == flock_id).first() is not None
        for model in FLOCK_REFERENCES
    )
