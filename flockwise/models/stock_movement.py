import enum

from sqlalchemy import Column, Date, Enum, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.orm import relationship

from flockwise.database import Base
from flockwise.models.audit_mixin import TimestampMixin


class MovementType(str, enum.Enum):
    PURCHASE = "purchase"
    CONSUMPTION = "consumption"
    ADJUSTMENT = "adjustment"
    RETURN = "return"
    DAMAGE = "damage"

    @property
    def sign(self) -> int:
        if self in (MovementType.CONSUMPTION, MovementType.DAMAGE, MovementType.RETURN):
            return -1
        return 1


class StockMovement(Base, TimestampMixin):
    __tablename__ = "stock_movements"

    id = Column(Integer, primary_key=True, index=True)
    inventory_id = Column(Integer, ForeignKey("inventory_items.id"), nullable=False, index=True)
    movement_date = Column(Date, nullable=False)
    movement_type = Column(Enum(MovementType, values_callable=lambda e: [m.value for m in e]), nullable=False)
    quantity = Column(Numeric(10, 3), nullable=False)  # always positive, sign comes from movement_type
    balance_after = Column(Numeric(10, 3), nullable=False)
    reference_number = Column(String, nullable=True)
    reason = Column(String, nullable=True)
    performed_by = Column(String, nullable=True)
    notes = Column(Text, nullable=True)

    inventory = relationship("InventoryItem", back_populates="stock_movements")

    @property
    def signed_quantity(self):
        return self.quantity * MovementType(self.movement_type).sign
