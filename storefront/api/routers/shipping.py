# storefront/api/routers/shipping.py
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from storefront.api.deps import require_admin
from storefront.data.database import get_db
from storefront.domain.schemas import (
    MessageOut,
    ShippingCalcIn,
    ShippingMethodsIn,
    ShippingMethodsOut,
    ShippingQuoteOut,
    ShippingZoneIn,
    ShippingZoneOut,
    ShippingZoneUpdate,
)
from storefront.services.shipping_service import ShippingService

router = APIRouter(prefix="/shipping", tags=["shipping"])


@router.post("/calculate", response_model=ShippingQuoteOut)
def calculate(payload: ShippingCalcIn, db: Session = Depends(get_db)):
    return ShippingService(db).calculate(
        payload.address.model_dump(),
        payload.order_details.subtotal,
        payload.order_details.weight,
    )


@router.post("/methods", response_model=ShippingMethodsOut)
def methods(payload: ShippingMethodsIn, db: Session = Depends(get_db)):
    return ShippingService(db).methods(payload.address.model_dump())


# ----------------------------------------------------------------------
# admin
# ----------------------------------------------------------------------

admin = APIRouter(prefix="/zones", dependencies=[Depends(require_admin)])


@admin.get("", response_model=List[ShippingZoneOut])
def list_zones(db: Session = Depends(get_db)):
    return ShippingService(db).list_zones()


@admin.post("", response_model=ShippingZoneOut, status_code=201)
def create_zone(payload: ShippingZoneIn, db: Session = Depends(get_db)):
    return ShippingService(db).create_zone(payload)


@admin.get("/{zone_id}", response_model=ShippingZoneOut)
def get_zone(zone_id: int, db: Session = Depends(get_db)):
    return ShippingService(db).get_zone(zone_id)


@admin.put("/{zone_id}", response_model=ShippingZoneOut)
def update_zone(zone_id: int, payload: ShippingZoneUpdate, db: Session = Depends(get_db)):
    return ShippingService(db).update_zone(zone_id, payload)


@admin.delete("/{zone_id}", response_model=MessageOut)
def delete_zone(zone_id: int, db: Session = Depends(get_db)):
    ShippingService(db).delete_zone(zone_id)
    return {"message": "Shipping zone deleted"}


router.include_router(admin)
