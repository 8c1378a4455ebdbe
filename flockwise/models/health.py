from sqlalchemy import Boolean, Column, Date, ForeignKey, Integer, Numeric, String, Text

from flockwise.database import Base
from flockwise.models.audit_mixin import TimestampMixin


class VaccinationRecord(Base, TimestampMixin):
    __tablename__ = "vaccination_records"

    id = Column(Integer, primary_key=True, index=True)
    flock_id = Column(Integer, ForeignKey("flocks.id"), nullable=True)
    batch_id = Column(Integer, ForeignKey("batches.id"), nullable=True)
    vaccination_date = Column(Date, nullable=False)
    vaccine_name = Column(String, nullable=False)
    dosage = Column(String, nullable=True)
    administration_method = Column(String, nullable=True)
    birds_vaccinated = Column(Integer, nullable=True)
    cost = Column(Numeric(10, 2), nullable=True)
    next_due_date = Column(Date, nullable=True)
    administered_by = Column(String, nullable=True)
    notes = Column(Text, nullable=True)


class HealthCheck(Base, TimestampMixin):
    __tablename__ = "health_checks"

    id = Column(Integer, primary_key=True, index=True)
    flock_id = Column(Integer, ForeignKey("flocks.id"), nullable=True)
    batch_id = Column(Integer, ForeignKey("batches.id"), nullable=True)
    check_date = Column(Date, nullable=False)
    overall_health = Column(String, nullable=False)  # e.g. "good", "fair", "poor"
    symptoms = Column(Text, nullable=True)
    treatment = Column(Text, nullable=True)
    inspected_by = Column(String, nullable=True)
    notes = Column(Text, nullable=True)


class DiseaseOutbreak(Base, TimestampMixin):
    __tablename__ = "disease_outbreaks"

    id = Column(Integer, primary_key=True, index=True)
    flock_id = Column(Integer, ForeignKey("flocks.id"), nullable=True)
    batch_id = Column(Integer, ForeignKey("batches.id"), nullable=True)
    outbreak_date = Column(Date, nullable=False)
    disease_name = Column(String, nullable=False)
    birds_affected = Column(Integer, nullable=True)
    treatment = Column(Text, nullable=True)
    is_resolved = Column(Boolean, default=False, nullable=False)
    resolved_date = Column(Date, nullable=True)
    recorded_by = Column(String, nullable=True)
    notes = Column(Text, nullable=True)
