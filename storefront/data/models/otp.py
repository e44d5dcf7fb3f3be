from sqlalchemy import Column, Integer, String, DateTime

from storefront.data.database import Base


class OtpModel(Base):
    __tablename__ = "otps"

    id = Column(Integer, primary_key=True)
    phone = Column(String(20), nullable=False, index=True)
    code_hash = Column(String(64), nullable=False)
    expires_at = Column(DateTime(timezone=True), nullable=False, index=True)
    attempts = Column(Integer, nullable=False, default=0)
