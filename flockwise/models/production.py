from sqlalchemy import Column, Date, ForeignKey, Integer, Numeric, String, Text, UniqueConstraint
from sqlalchemy.orm import relationship

from flockwise.database import Base
from flockwise.models.audit_mixin import TimestampMixin


class WeightRecord(Base, TimestampMixin):
    __tablename__ = "weight_records"
    __table_args__ = (UniqueConstraint("batch_id", "weighing_date", name="_weight_batch_date_uc"),)

    id = Column(Integer, primary_key=True, index=True)
    batch_id = Column(Integer, ForeignKey("batches.id"), nullable=False, index=True)
    weighing_date = Column(Date, nullable=False)
    age_in_days = Column(Integer, nullable=False)
    sample_size = Column(Integer, nullable=False)
    average_weight = Column(Numeric(8, 3), nullable=False)  # kg per bird
    min_weight = Column(Numeric(8, 3), nullable=True)
    max_weight = Column(Numeric(8, 3), nullable=True)
    uniformity = Column(Numeric(5, 2), nullable=True)
    recorded_by = Column(String, nullable=True)
    notes = Column(Text, nullable=True)

    batch = relationship("Batch", back_populates="weight_records")


class MortalityRecord(Base, TimestampMixin):
    __tablename__ = "mortality_records"

    id = Column(Integer, primary_key=True, index=True)
    record_type = Column(String, nullable=False)  # "flock" or "batch"
    flock_id = Column(Integer, ForeignKey("flocks.id"), nullable=True)
    batch_id = Column(Integer, ForeignKey("batches.id"), nullable=True)
    mortality_date = Column(Date, nullable=False)
    mortality_count = Column(Integer, nullable=False)
    cause = Column(String, nullable=False, default="Unknown")
    mortality_rate = Column(Numeric(6, 2), nullable=True)
    recorded_by = Column(String, nullable=True)
    notes = Column(Text, nullable=True)

    flock = relationship("Flock", back_populates="mortality_records")
    batch = relationship("Batch", back_populates="mortality_records")


class BirthRecord(Base, TimestampMixin):
    __tablename__ = "birth_records"

    id = Column(Integer, primary_key=True, index=True)
    record_type = Column(String, nullable=False)  # "flock" or "batch"
    flock_id = Column(Integer, ForeignKey("flocks.id"), nullable=True)
    batch_id = Column(Integer, ForeignKey("batches.id"), nullable=True)
    birth_date = Column(Date, nullable=False)
    birth_count = Column(Integer, nullable=False)
    male_count = Column(Integer, nullable=False, default=0)
    female_count = Column(Integer, nullable=False, default=0)
    mother_details = Column(String, nullable=True)
    father_details = Column(String, nullable=True)
    health_status = Column(String, nullable=False, default="healthy")
    birds_added = Column(Integer, nullable=False)  # 0 for stillborn births
    recorded_by = Column(String, nullable=True)
    notes = Column(Text, nullable=True)

    flock = relationship("Flock")
    batch = relationship("Batch")


class EggCollection(Base, TimestampMixin):
    __tablename__ = "egg_collections"
    __table_args__ = (UniqueConstraint("flock_id", "collection_date", name="_egg_flock_date_uc"),)

    id = Column(Integer, primary_key=True, index=True)
    flock_id = Column(Integer, ForeignKey("flocks.id"), nullable=False, index=True)
    collection_date = Column(Date, nullable=False)
    good_eggs_count = Column(Integer, nullable=False)
    broken_eggs_count = Column(Integer, nullable=False, default=0)
    total_eggs_count = Column(Integer, nullable=False)
    collection_time = Column(String, nullable=True)
    production_percentage = Column(Numeric(6, 2), nullable=True)
    recorded_by = Column(String, nullable=True)
    notes = Column(Text, nullable=True)

    flock = relationship("Flock", back_populates="egg_collections")
