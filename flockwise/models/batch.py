from datetime import date

from sqlalchemy import Column, Date, Integer, Numeric, String, Text
from sqlalchemy.ext.hybrid import hybrid_property
from sqlalchemy.orm import relationship

from flockwise.database import Base
from flockwise.models.audit_mixin import TimestampMixin


class Batch(Base, TimestampMixin):
    __tablename__ = "batches"

    id = Column(Integer, primary_key=True, index=True)
    batch_name = Column(String, nullable=False, unique=True)
    batch_type = Column(String, nullable=False, default="broilers")
    breed = Column(String, nullable=True)
    doc_arrival_date = Column(Date, nullable=False)
    quantity_ordered = Column(Integer, nullable=False)
    quantity_received = Column(Integer, nullable=False)
    current_stock = Column(Integer, nullable=False)  # mutated by mortality records
    status = Column(String, nullable=False, default="active")
    supplier = Column(String, nullable=True)
    doc_cost_per_bird = Column(Numeric(10, 2), nullable=True)
    expected_sale_date = Column(Date, nullable=True)
    notes = Column(Text, nullable=True)

    weight_records = relationship("WeightRecord", back_populates="batch", order_by="WeightRecord.weighing_date")
    feed_consumptions = relationship("FeedConsumption", back_populates="batch")
    mortality_records = relationship("MortalityRecord", back_populates="batch")

    @hybrid_property
    def is_active(self):
        return self.status == "active"

    def age_in_days(self, today: date) -> int:
        return (today - self.doc_arrival_date).days
