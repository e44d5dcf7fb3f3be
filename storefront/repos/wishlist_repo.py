from typing import List

from sqlalchemy import select, delete
from sqlalchemy.orm import Session

from storefront.data.models.wishlist import WishlistItemModel


class WishlistRepo:
    def __init__(self, db: Session):
        self.db = db

    def items(self, user_id: int) -> List[WishlistItemModel]:
        return list(
            self.db.execute(
                select(WishlistItemModel)
                .where(WishlistItemModel.user_id == user_id)
                .order_by(WishlistItemModel.added_at.desc(), WishlistItemModel.id.desc())
            ).scalars().all()
        )

    def has(self, user_id: int, product_id: int) -> bool:
        return self.db.execute(
            select(WishlistItemModel.id).where(
                WishlistItemModel.user_id == user_id, WishlistItemModel.product_id == product_id
            )
        ).first() is not None

    def add(self, user_id: int, product_id: int) -> None:
        """$addToSet - bez duplikatow."""
        if not self.has(user_id, product_id):
            self.db.add(WishlistItemModel(user_id=user_id, product_id=product_id))

    def remove(self, user_id: int, product_id: int) -> int:
        result = self.db.execute(
            delete(WishlistItemModel).where(
                WishlistItemModel.user_id == user_id, WishlistItemModel.product_id == product_id
            )
        )
        return result.rowcount

    def commit(self):
        self.db.commit()
