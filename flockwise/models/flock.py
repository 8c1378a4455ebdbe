from sqlalchemy import Column, Date, Integer, Numeric, String, Text
from sqlalchemy.orm import relationship

from flockwise.database import Base
from flockwise.models.audit_mixin import TimestampMixin


class Flock(Base, TimestampMixin):
    __tablename__ = "flocks"

    id = Column(Integer, primary_key=True, index=True)
    flock_name = Column(String, nullable=False, unique=True)
    flock_type = Column(String, nullable=False, default="layers")
    breed = Column(String, nullable=True)
    arrival_date = Column(Date, nullable=False)
    opening_stock = Column(Integer, nullable=False)
    current_stock = Column(Integer, nullable=False)  # mutated by mortality records
    status = Column(String, nullable=False, default="active")
    supplier = Column(String, nullable=True)
    cost_per_bird = Column(Numeric(10, 2), nullable=True)
    notes = Column(Text, nullable=True)

    egg_collections = relationship("EggCollection", back_populates="flock")
    mortality_records = relationship("MortalityRecord", back_populates="flock")
