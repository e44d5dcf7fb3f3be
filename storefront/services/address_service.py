# storefront/services/address_service.py
from typing import List

from sqlalchemy.orm import Session

from storefront.data.models.address import AddressModel
from storefront.domain.exceptions import NotFoundError
from storefront.domain.schemas import AddressIn, AddressUpdate
from storefront.repos.address_repo import AddressRepo
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

# kolumny NOT NULL z pustym stringiem zamiast None
_BLANK_DEFAULTS = ("alternate_phone", "landmark")


class AddressService:
    def __init__(self, db: Session):
        self.repo = AddressRepo(db)

    def list_addresses(self, user_id: int) -> List[AddressModel]:
        return self.repo.list_for_user(user_id)

    def get_address(self, user_id: int, address_id: int) -> AddressModel:
        address = self.repo.get_for_user(address_id, user_id)
        if not address:
            raise NotFoundError("Address not found")
        return address

    def create_address(self, user_id: int, payload: AddressIn) -> AddressModel:
        data = payload.model_dump()
        for field in _BLANK_DEFAULTS:
            data[field] = data.get(field) or ""

        # pierwszy adres zawsze domyslny
        if self.repo.count_for_user(user_id) == 0:
            data["is_default"] = True

        address = AddressModel(user_id=user_id, **data)
        self.repo.add(address)
        if address.is_default:
            self.repo.clear_default(user_id, except_id=address.id)

        self.repo.commit()
        self.repo.refresh(address)
        logger.info(f"Address {address.id} created for user {user_id} (default={address.is_default})")
        return address

    def update_address(self, user_id: int, address_id: int, payload: AddressUpdate) -> AddressModel:
        address = self.get_address(user_id, address_id)
        data = payload.model_dump(exclude_unset=True)
        was_default = address.is_default

        for field, value in data.items():
            if field in _BLANK_DEFAULTS and value is None:
                value = ""
            if value is None and field != "address_line2":
                continue
            setattr(address, field, value)

        if data.get("is_default"):
            self.repo.clear_default(user_id, except_id=address.id)
        elif was_default and data.get("is_default") is False:
            others = [a for a in self.repo.list_for_user(user_id) if a.id != address.id]
            if others:
                others[0].is_default = True
            else:
                # jedyny adres zostaje domyslnym
                address.is_default = True

        self.repo.commit()
        self.repo.refresh(address)
        return address

    def delete_address(self, user_id: int, address_id: int) -> None:
        address = self.get_address(user_id, address_id)
        was_default = address.is_default
        self.repo.delete(address)
        self.repo.commit()

        if was_default:
            # domyslny przechodzi na najstarszy pozostaly adres
            remaining = self.repo.list_for_user(user_id)
            if remaining:
                remaining[0].is_default = True
                self.repo.commit()
        logger.info(f"Address {address_id} deleted for user {user_id}")
