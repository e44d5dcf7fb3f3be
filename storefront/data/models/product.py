#storefront/data/models/product.py
from datetime import datetime, timezone

from sqlalchemy import Column, Integer, String, Text, DateTime, Numeric, ForeignKey, JSON
from sqlalchemy.orm import relationship

from storefront.data.database import Base


class ProductModel(Base):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True)
    name = Column(String(200), nullable=False, index=True)
    description = Column(Text, nullable=False)
    details = Column(Text, nullable=True)
    category = Column(String(20), nullable=False, index=True)  # men, women
    images = Column(JSON, nullable=False, default=list)  # [{"public_id": ..., "url": ...}]
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))

    variants = relationship(
        "VariantModel",
        back_populates="product",
        cascade="all, delete-orphan",
        order_by="VariantModel.id",
    )


class VariantModel(Base):
    """Jedna kombinacja size + color + price + quantity."""

    __tablename__ = "product_variants"

    id = Column(Integer, primary_key=True)
    product_id = Column(Integer, ForeignKey("products.id", ondelete="CASCADE"), nullable=False, index=True)
    size = Column(String(20), nullable=False)
    color = Column(String(40), nullable=False)
    price = Column(Numeric(10, 2), nullable=False)
    quantity = Column(Integer, nullable=False, default=0)

    product = relationship("ProductModel", back_populates="variants")
