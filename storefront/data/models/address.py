from datetime import datetime, timezone

from sqlalchemy import Column, Integer, String, Boolean, DateTime, ForeignKey

from storefront.data.database import Base


def _now():
    return datetime.now(timezone.utc)


class AddressModel(Base):
    __tablename__ = "addresses"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    label = Column(String(10), nullable=False, default="Home")
    full_name = Column(String(120), nullable=False)
    mobile_number = Column(String(10), nullable=False)
    alternate_phone = Column(String(10), nullable=False, default="")
    address_line1 = Column(String(255), nullable=False)
    address_line2 = Column(String(255), nullable=True)
    landmark = Column(String(255), nullable=False, default="")
    city = Column(String(100), nullable=False)
    district = Column(String(100), nullable=False)
    state = Column(String(60), nullable=False)
    pincode = Column(String(6), nullable=False)
    country = Column(String(60), nullable=False, default="India")
    is_default = Column(Boolean, nullable=False, default=False)

    created_at = Column(DateTime(timezone=True), nullable=False, default=_now)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_now, onupdate=_now)
