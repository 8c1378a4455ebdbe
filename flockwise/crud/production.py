"""Weight samples, mortality, births and egg collection records."""

import logging
from datetime import date
from typing import List, Optional, Union

from sqlalchemy.orm import Session

from flockwise.exceptions import FarmError, NotFoundError
from flockwise.models.batch import Batch
from flockwise.models.flock import Flock
from flockwise.models.production import BirthRecord, EggCollection, MortalityRecord, WeightRecord
from flockwise.schemas import production as schemas
from flockwise.utils.formatting import percentage

logger = logging.getLogger("production")


# --- Weight tracking ---

def get_weight_record(db: Session, record_id: int) -> Optional[WeightRecord]:
    return db.query(WeightRecord).filter(WeightRecord.id == record_id).first()


def get_weight_records(db: Session, batch_id: Optional[int] = None) -> List[WeightRecord]:
    query = db.query(WeightRecord)
    if batch_id:
        query = query.filter(WeightRecord.batch_id == batch_id)
    return query.order_by(WeightRecord.weighing_date.desc()).all()


def create_weight_record(db: Session, record: schemas.WeightRecordCreate, changed_by: str) -> WeightRecord:
    if db.query(Batch.id).filter(Batch.id == record.batch_id).first() is None:
        raise NotFoundError(f"Batch {record.batch_id} not found")
    db_record = WeightRecord(**record.model_dump(), recorded_by=changed_by, created_by=changed_by)
    db.add(db_record)
    db.commit()
    db.refresh(db_record)
    return db_record


def update_weight_record(db: Session, record_id: int, record: schemas.WeightRecordUpdate, changed_by: str) -> Optional[WeightRecord]:
    db_record = get_weight_record(db, record_id)
    if db_record:
        for key, value in record.model_dump(exclude_unset=True).items():
            setattr(db_record, key, value)
        db_record.updated_by = changed_by
        db.commit()
        db.refresh(db_record)
    return db_record


def delete_weight_record(db: Session, db_record: WeightRecord) -> None:
    db.delete(db_record)
    db.commit()


# --- Mortality ---

def _population_query(db: Session, record_type: str, flock_id: Optional[int], batch_id: Optional[int]):
    if record_type == "flock":
        return db.query(Flock).filter(Flock.id == flock_id).with_for_update()
    return db.query(Batch).filter(Batch.id == batch_id).with_for_update()


def _lock_population(db: Session, record_type: str, flock_id: Optional[int], batch_id: Optional[int]) -> Union[Flock, Batch]:
    subject = _population_query(db, record_type, flock_id, batch_id).first()
    if subject is None:
        subject_id = flock_id if record_type == "flock" else batch_id
        raise NotFoundError(f"{record_type.capitalize()} {subject_id} not found")
    return subject


def get_mortality_records(
    db: Session,
    record_type: Optional[str] = None,
    flock_id: Optional[int] = None,
    batch_id: Optional[int] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
) -> List[MortalityRecord]:
    query = db.query(MortalityRecord)
    if record_type:
        query = query.filter(MortalityRecord.record_type == record_type)
    if flock_id:
        query = query.filter(MortalityRecord.flock_id == flock_id)
    if batch_id:
        query = query.filter(MortalityRecord.batch_id == batch_id)
    if start_date:
        query = query.filter(MortalityRecord.mortality_date >= start_date)
    if end_date:
        query = query.filter(MortalityRecord.mortality_date <= end_date)
    return query.order_by(MortalityRecord.mortality_date.desc()).all()


def get_mortality_record(db: Session, record_id: int) -> Optional[MortalityRecord]:
    return db.query(MortalityRecord).filter(MortalityRecord.id == record_id).first()


def create_mortality_record(db: Session, record: schemas.MortalityRecordCreate, changed_by: str) -> MortalityRecord:
    """Record deaths and take them off the flock's or batch's live count."""
    subject = _lock_population(db, record.record_type, record.flock_id, record.batch_id)
    if record.mortality_count > subject.current_stock:
        raise FarmError(
            f"Mortality count {record.mortality_count} exceeds the live count of {subject.current_stock}"
        )
    rate = percentage(record.mortality_count, subject.current_stock)
    subject.current_stock -= record.mortality_count

    data = record.model_dump()
    if record.record_type == "flock":
        data["batch_id"] = None
    else:
        data["flock_id"] = None
    db_record = MortalityRecord(**data, mortality_rate=rate, recorded_by=changed_by, created_by=changed_by)
    db.add(db_record)
    db.commit()
    db.refresh(db_record)
    logger.info(f"Mortality of {record.mortality_count} recorded for {record.record_type} {subject.id}; live count now {subject.current_stock}")
    return db_record


def update_mortality_record(db: Session, record_id: int, record: schemas.MortalityRecordUpdate, changed_by: str) -> Optional[MortalityRecord]:
    db_record = get_mortality_record(db, record_id)
    if db_record is None:
        return None

    update_data = record.model_dump(exclude_unset=True)
    new_count = update_data.get("mortality_count") or db_record.mortality_count
    difference = new_count - db_record.mortality_count
    subject = _lock_population(db, db_record.record_type, db_record.flock_id, db_record.batch_id)
    if difference > subject.current_stock:
        raise FarmError(
            f"Mortality count {new_count} exceeds the live count of {subject.current_stock + db_record.mortality_count}"
        )
    subject.current_stock -= difference
    # rate against the population before these deaths
    db_record.mortality_rate = percentage(new_count, subject.current_stock + new_count)

    for key, value in update_data.items():
        if value is not None or key not in ("mortality_date", "mortality_count", "cause"):
            setattr(db_record, key, value)
    db_record.updated_by = changed_by
    db.commit()
    db.refresh(db_record)
    return db_record


def delete_mortality_record(db: Session, db_record: MortalityRecord) -> None:
    """Delete a mortality record and give its birds back to the live count."""
    subject = _population_query(db, db_record.record_type, db_record.flock_id, db_record.batch_id).first()
    if subject is not None:
        subject.current_stock += db_record.mortality_count
    db.delete(db_record)
    db.commit()


# --- Births ---

def get_birth_records(
    db: Session,
    record_type: Optional[str] = None,
    flock_id: Optional[int] = None,
    batch_id: Optional[int] = None,
) -> List[BirthRecord]:
    query = db.query(BirthRecord)
    if record_type:
        query = query.filter(BirthRecord.record_type == record_type)
    if flock_id:
        query = query.filter(BirthRecord.flock_id == flock_id)
    if batch_id:
        query = query.filter(BirthRecord.batch_id == batch_id)
    return query.order_by(BirthRecord.birth_date.desc()).all()


def get_birth_record(db: Session, record_id: int) -> Optional[BirthRecord]:
    return db.query(BirthRecord).filter(BirthRecord.id == record_id).first()


def create_birth_record(db: Session, record: schemas.BirthRecordCreate, changed_by: str) -> BirthRecord:
    """Record hatched birds and add the live ones to the flock's or batch's count."""
    subject = _lock_population(db, record.record_type, record.flock_id, record.batch_id)
    birds_added = 0 if record.health_status == "stillborn" else record.birth_count
    subject.current_stock += birds_added

    data = record.model_dump()
    if record.record_type == "flock":
        data["batch_id"] = None
    else:
        data["flock_id"] = None
    db_record = BirthRecord(**data, birds_added=birds_added, recorded_by=changed_by, created_by=changed_by)
    db.add(db_record)
    db.commit()
    db.refresh(db_record)
    logger.info(f"Birth of {record.birth_count} recorded for {record.record_type} {subject.id}; live count now {subject.current_stock}")
    return db_record


def delete_birth_record(db: Session, db_record: BirthRecord) -> None:
    """Delete a birth record and take its birds back off the live count."""
    subject = _lock_population(db, db_record.record_type, db_record.flock_id, db_record.batch_id)
    if db_record.birds_added > subject.current_stock:
        raise FarmError("Cannot delete birth record: live count is lower than the birds it added")
    subject.current_stock -= db_record.birds_added
    db.delete(db_record)
    db.commit()


# --- Egg collection ---

def get_egg_collections(
    db: Session,
    flock_id: Optional[int] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
) -> List[EggCollection]:
    query = db.query(EggCollection)
    if flock_id:
        query = query.filter(EggCollection.flock_id == flock_id)
    if start_date:
        query = query.filter(EggCollection.collection_date >= start_date)
    if end_date:
        query = query.filter(EggCollection.collection_date <= end_date)
    return query.order_by(EggCollection.collection_date.desc()).all()


def create_egg_collection(db: Session, collection: schemas.EggCollectionCreate, changed_by: str) -> EggCollection:
    flock = db.query(Flock).filter(Flock.id == collection.flock_id).first()
    if flock is None:
        raise NotFoundError(f"Flock {collection.flock_id} not found")

    total = collection.good_eggs_count + collection.broken_eggs_count
    db_collection = EggCollection(
        **collection.model_dump(),
        total_eggs_count=total,
        production_percentage=percentage(total, flock.current_stock),
        recorded_by=changed_by,
        created_by=changed_by,
    )
    db.add(db_collection)
    db.commit()
    db.refresh(db_collection)
    return db_collection


def delete_egg_collection(db: Session, collection_id: int) -> bool:
    db_collection = db.query(EggCollection).filter(EggCollection.id == collection_id).first()
    if db_collection is None:
        return False
    db.delete(db_collection)
    db.commit()
    return True
