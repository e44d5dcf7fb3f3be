from typing import List

from sqlalchemy import select, update, func
from sqlalchemy.orm import Session

from storefront.data.models.address import AddressModel


class AddressRepo:
    def __init__(self, db: Session):
        self.db = db

    def list_for_user(self, user_id: int) -> List[AddressModel]:
        return list(
            self.db.execute(
                select(AddressModel)
                .where(AddressModel.user_id == user_id)
                .order_by(AddressModel.is_default.desc(), AddressModel.id)
            ).scalars().all()
        )

    def get_for_user(self, address_id: int, user_id: int) -> AddressModel | None:
        return self.db.execute(
            select(AddressModel).where(AddressModel.id == address_id, AddressModel.user_id == user_id)
        ).scalar_one_or_none()

    def count_for_user(self, user_id: int) -> int:
        return self.db.execute(
            select(func.count(AddressModel.id)).where(AddressModel.user_id == user_id)
        ).scalar_one()

    def clear_default(self, user_id: int, except_id: int | None = None) -> None:
        stmt = update(AddressModel).where(AddressModel.user_id == user_id, AddressModel.is_default.is_(True))
        if except_id is not None:
            stmt = stmt.where(AddressModel.id != except_id)
        self.db.execute(stmt.values(is_default=False).execution_options(synchronize_session="fetch"))

    def add(self, address: AddressModel) -> None:
        self.db.add(address)
        self.db.flush()

    def delete(self, address: AddressModel) -> None:
        self.db.delete(address)

    def commit(self):
        self.db.commit()

    def refresh(self, address: AddressModel):
        self.db.refresh(address)
