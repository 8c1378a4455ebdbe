from sqlalchemy import Boolean, CheckConstraint, Column, Date, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.orm import relationship

from flockwise.database import Base
from flockwise.models.audit_mixin import TimestampMixin


class FeedInventory(Base, TimestampMixin):
    __tablename__ = "feed_inventory"
    __table_args__ = (
        CheckConstraint("current_stock_bags >= 0", name="ck_feed_inventory_stock_non_negative"),
    )

    id = Column(Integer, primary_key=True, index=True)
    feed_type = Column(String, nullable=False)
    feed_brand = Column(String, nullable=True)
    supplier_id = Column(Integer, ForeignKey("suppliers.id"), nullable=True)
    current_stock_bags = Column(Numeric(10, 2), default=0, nullable=False)
    reorder_level = Column(Numeric(10, 2), default=50, nullable=False)
    unit_cost_per_bag = Column(Numeric(10, 2), nullable=False)  # latest purchase price
    bag_weight_kg = Column(Numeric(6, 2), default=25, nullable=False)
    last_restock_date = Column(Date, nullable=True)
    expiry_date = Column(Date, nullable=True)
    storage_location = Column(String, nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)

    supplier = relationship("Supplier", back_populates="feed_inventory")
    purchases = relationship("FeedPurchase", back_populates="inventory")
    consumptions = relationship("FeedConsumption", back_populates="inventory")


class FeedPurchase(Base, TimestampMixin):
    __tablename__ = "feed_purchases"

    id = Column(Integer, primary_key=True, index=True)
    purchase_date = Column(Date, nullable=False)
    supplier_id = Column(Integer, ForeignKey("suppliers.id"), nullable=False)
    inventory_id = Column(Integer, ForeignKey("feed_inventory.id"), nullable=False)
    quantity_bags = Column(Numeric(10, 2), nullable=False)
    price_per_bag = Column(Numeric(10, 2), nullable=False)
    total_cost = Column(Numeric(12, 2), nullable=False)  # quantity_bags * price_per_bag
    payment_status = Column(String, nullable=False, default="pending")
    payment_date = Column(Date, nullable=True)
    invoice_number = Column(String, nullable=True)
    delivery_date = Column(Date, nullable=True)
    received_by = Column(String, nullable=True)
    notes = Column(Text, nullable=True)

    supplier = relationship("Supplier", back_populates="feed_purchases")
    inventory = relationship("FeedInventory", back_populates="purchases")


class FeedConsumption(Base, TimestampMixin):
    __tablename__ = "feed_consumption"

    id = Column(Integer, primary_key=True, index=True)
    consumption_type = Column(String, nullable=False)  # "flock" or "batch"
    flock_id = Column(Integer, ForeignKey("flocks.id"), nullable=True)
    batch_id = Column(Integer, ForeignKey("batches.id"), nullable=True, index=True)
    inventory_id = Column(Integer, ForeignKey("feed_inventory.id"), nullable=True)
    consumption_date = Column(Date, nullable=False)
    feed_quantity_bags = Column(Numeric(10, 2), nullable=False)
    feed_price_per_bag = Column(Numeric(10, 2), nullable=False)
    total_feed_cost = Column(Numeric(12, 2), nullable=False)
    feed_type = Column(String, nullable=True)
    recorded_by = Column(String, nullable=True)
    notes = Column(Text, nullable=True)

    flock = relationship("Flock")
    batch = relationship("Batch", back_populates="feed_consumptions")
    inventory = relationship("FeedInventory", back_populates="consumptions")
