from sqlalchemy import Boolean, CheckConstraint, Column, Date, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.orm import relationship

from flockwise.database import Base
from flockwise.models.audit_mixin import TimestampMixin


class InventoryItem(Base, TimestampMixin):
    __tablename__ = "inventory_items"
    __table_args__ = (
        CheckConstraint("current_stock >= 0", name="ck_inventory_items_stock_non_negative"),
    )

    id = Column(Integer, primary_key=True, index=True)
    item_name = Column(String, nullable=False, unique=True)
    category = Column(String, nullable=True)  # e.g. "Medicine", "Equipment", "Cleaning Supplies"
    unit = Column(String, nullable=False)  # e.g. "kg", "liters", "units"
    current_stock = Column(Numeric(10, 3), default=0, nullable=False)
    reorder_level = Column(Numeric(10, 3), default=0, nullable=False)
    unit_cost = Column(Numeric(10, 2), default=0, nullable=False)
    supplier_id = Column(Integer, ForeignKey("suppliers.id"), nullable=True)
    last_restock_date = Column(Date, nullable=True)
    description = Column(Text, nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)

    supplier = relationship("Supplier", back_populates="inventory_items")
    stock_movements = relationship("StockMovement", back_populates="inventory", order_by="StockMovement.id")
    purchase_order_items = relationship("PurchaseOrderItem", back_populates="inventory")
