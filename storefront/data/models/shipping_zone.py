from sqlalchemy import Column, Integer, String, Boolean, Numeric, JSON

from storefront.data.database import Base


class ShippingZoneModel(Base):
    __tablename__ = "shipping_zones"

    id = Column(Integer, primary_key=True)
    name = Column(String(120), nullable=False)
    countries = Column(JSON, nullable=False, default=list)  # ["India", ...]
    states = Column(JSON, nullable=False, default=list)  # [{"country": ..., "state": ...}]
    postal_codes = Column(JSON, nullable=False, default=list)
    rates = Column(JSON, nullable=False, default=list)  # patrz domain.schemas.ShippingRate
    tax_rate = Column(Numeric(5, 2), nullable=False, default=0)
    is_active = Column(Boolean, nullable=False, default=True)
    priority = Column(Integer, nullable=False, default=0)
