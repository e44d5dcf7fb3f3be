# storefront/services/shipping_service.py
from typing import Any, Dict, List

from sqlalchemy.orm import Session

from storefront.data.models.shipping_zone import ShippingZoneModel
from storefront.domain import pricing
from storefront.domain.exceptions import NotFoundError
from storefront.domain.schemas import ShippingZoneIn, ShippingZoneUpdate
from storefront.repos.shipping_repo import ShippingZoneRepo
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


def _jsonable(payload) -> Dict[str, Any]:
    # kolumny JSON - Decimale zapisane jako string
    return payload.model_dump(mode="json", exclude_none=True)


class ShippingService:
    def __init__(self, db: Session):
        self.repo = ShippingZoneRepo(db)

    def find_zone(self, address: Dict[str, Any]) -> ShippingZoneModel:
        """Pierwsza aktywna strefa (wg priority rosnaco), ktora obejmuje adres."""
        for zone in self.repo.active_by_priority():
            if pricing.address_in_zone(zone, address):
                return zone
        raise NotFoundError("No shipping zone found for this address")

    def calculate(self, address: Dict[str, Any], subtotal, weight) -> Dict[str, Any]:
        zone = self.find_zone(address)
        best = pricing.cheapest_rate(zone.rates, subtotal, weight)
        if not best:
            raise NotFoundError("No shipping rate available for this order")
        return {"zone": zone.name, **best}

    def methods(self, address: Dict[str, Any]) -> Dict[str, Any]:
        zone = self.find_zone(address)
        return {"zone": zone.name, "rates": list(zone.rates or [])}

    # -------------------------------------------------------------------
    # admin CRUD
    # -------------------------------------------------------------------
    def list_zones(self) -> List[ShippingZoneModel]:
        return self.repo.active_by_priority()

    def get_zone(self, zone_id: int) -> ShippingZoneModel:
        zone = self.repo.get(zone_id)
        if not zone:
            raise NotFoundError("Shipping zone not found")
        return zone

    def create_zone(self, payload: ShippingZoneIn) -> ShippingZoneModel:
        data = _jsonable(payload)
        zone = ShippingZoneModel(
            name=payload.name,
            countries=payload.countries,
            states=data.get("states", []),
            postal_codes=payload.postal_codes,
            rates=data.get("rates", []),
            tax_rate=payload.tax_rate,
            is_active=payload.is_active,
            priority=payload.priority,
        )
        created = self.repo.create(zone)
        logger.info(f"Shipping zone {created.id} ({created.name}) created")
        return created

    def update_zone(self, zone_id: int, payload: ShippingZoneUpdate) -> ShippingZoneModel:
        zone = self.get_zone(zone_id)
        data = _jsonable(payload)
        for field in payload.model_fields_set:
            if field in ("states", "rates"):
                setattr(zone, field, data.get(field, []))
            elif getattr(payload, field) is not None:
                setattr(zone, field, getattr(payload, field))
        return self.repo.save(zone)

    def delete_zone(self, zone_id: int) -> None:
        self.repo.delete(self.get_zone(zone_id))
        logger.info(f"Shipping zone {zone_id} deleted")
