from typing import List

from sqlalchemy import select
from sqlalchemy.orm import Session

from storefront.data.models.shipping_zone import ShippingZoneModel


class ShippingZoneRepo:
    def __init__(self, db: Session):
        self.db = db

    def active_by_priority(self) -> List[ShippingZoneModel]:
        return list(
            self.db.execute(
                select(ShippingZoneModel)
                .where(ShippingZoneModel.is_active.is_(True))
                .order_by(ShippingZoneModel.priority, ShippingZoneModel.id)
            ).scalars().all()
        )

    def get(self, zone_id: int) -> ShippingZoneModel | None:
        return self.db.get(ShippingZoneModel, zone_id)

    def create(self, zone: ShippingZoneModel) -> ShippingZoneModel:
        self.db.add(zone)
        self.db.commit()
        self.db.refresh(zone)
        return zone

    def save(self, zone: ShippingZoneModel) -> ShippingZoneModel:
        self.db.commit()
        self.db.refresh(zone)
        return zone

    def delete(self, zone: ShippingZoneModel) -> None:
        self.db.delete(zone)
        self.db.commit()
