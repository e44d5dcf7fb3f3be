from datetime import datetime, timezone

from sqlalchemy import Column, Integer, String, Boolean, Numeric, DateTime

from storefront.data.database import Base


class CurrencyModel(Base):
    __tablename__ = "currencies"

    id = Column(Integer, primary_key=True)
    code = Column(String(3), nullable=False, unique=True)
    name = Column(String(60), nullable=False)
    symbol = Column(String(8), nullable=False)
    # kurs wzgledem waluty bazowej
    exchange_rate = Column(Numeric(18, 6), nullable=False, default=1)
    is_active = Column(Boolean, nullable=False, default=True)
    is_base_currency = Column(Boolean, nullable=False, default=False)
    last_updated = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )
