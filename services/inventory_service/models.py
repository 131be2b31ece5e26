from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, Integer, String, func
from sqlalchemy.orm import relationship
from shared.config.database import Base
from services.catalog_service.models import Product


class InventoryRecord(Base):
    """On-hand quantity of one product at one location."""

    __tablename__ = "inventories"
    __table_args__ = (
        # The floor clamp is enforced in the ledger; this is the last line at the database
        CheckConstraint("quantity >= 0", name="ck_inventories_quantity_non_negative"),
        CheckConstraint("reorder_level >= 0", name="ck_inventories_reorder_level_non_negative"),
    )

    id = Column(Integer, primary_key=True, index=True)
    # Not unique: one row per location in practice, several rows per product allowed
    product_id = Column(Integer, ForeignKey("products.id"), nullable=False, index=True)
    quantity = Column(Integer, nullable=False, default=0)
    reorder_level = Column(Integer, nullable=False, default=0)
    location = Column(String(255), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    product = relationship(Product, lazy="selectin")

    @property
    def is_low_stock(self) -> bool:
        return self.quantity <= self.reorder_level
