# storefront/services/user_service.py
import math
from typing import Any, Dict, List

from sqlalchemy import delete
from sqlalchemy.orm import Session

from storefront.data.models.address import AddressModel
from storefront.data.models.cart import CartModel
from storefront.data.models.cart_item import CartItemModel
from storefront.data.models.user import UserModel
from storefront.data.models.wishlist import WishlistItemModel
from storefront.domain.exceptions import NotFoundError, ValidationFailed
from storefront.domain.schemas import ProfileUpdateIn
from storefront.repos.order_repo import OrderRepo
from storefront.repos.review_repo import ReviewRepo
from storefront.repos.user_repo import UserRepo
from storefront.services.review_service import review_to_dict
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class UserService:
    def __init__(self, db: Session):
        self.db = db
        self.repo = UserRepo(db)

    def get_user(self, user_id: int) -> UserModel:
        user = self.repo.get_user(user_id)
        if not user:
            raise NotFoundError("User not found")
        return user

    def update_profile(self, user: UserModel, payload: ProfileUpdateIn) -> UserModel:
        data = payload.model_dump(exclude_unset=True, exclude_none=True)
        if "phone" in data and data["phone"] != user.phone:
            other = self.repo.get_by_phone(data["phone"])
            if other and other.id != user.id:
                raise ValidationFailed("Phone number is already in use")
        for field, value in data.items():
            setattr(user, field, value.strip() if isinstance(value, str) else value)
        return self.repo.save(user)

    # -------------------------------------------------------------------
    # admin
    # -------------------------------------------------------------------
    def list_users(self, search: str = "", role: str | None = None, sort: str = "-created_at",
                   page: int = 1, limit: int = 10) -> Dict[str, Any]:
        users, total = self.repo.search(search=search, role=role, sort=sort, page=page, limit=limit)
        return {
            "users": users,
            "pagination": {
                "page": page,
                "limit": limit,
                "total": total,
                "pages": math.ceil(total / limit) if limit else 0,
            },
        }

    def user_detail(self, user_id: int) -> Dict[str, Any]:
        user = self.get_user(user_id)
        orders = OrderRepo(self.db).list_for_user_all(user_id, limit=10)
        reviews = ReviewRepo(self.db).list_for_user(user_id, limit=10)
        return {
            "user": user,
            "orders": orders,
            "reviews": [review_to_dict(r) for r in reviews],
        }

    def update_role(self, user_id: int, role: str, acting_user: UserModel) -> UserModel:
        user = self.get_user(user_id)
        if user.id == acting_user.id and role != "admin":
            raise ValidationFailed("You cannot remove your own admin role")
        user.role = role
        logger.info(f"User {user_id} role set to {role} by {acting_user.id}")
        return self.repo.save(user)

    def bulk_update_roles(self, user_ids: List[int], role: str, acting_user: UserModel) -> int:
        if role != "admin" and acting_user.id in user_ids:
            raise ValidationFailed("You cannot remove your own admin role")
        modified = self.repo.set_role_bulk(user_ids, role)
        logger.info(f"Bulk role update to {role}: {modified} users modified")
        return modified

    def delete_user(self, user_id: int, acting_user: UserModel) -> None:
        user = self.get_user(user_id)
        if user.id == acting_user.id:
            raise ValidationFailed("You cannot delete your own account")

        # wszystko co nalezy do usera, potem sam user - jedna transakcja
        cart_ids = [c for (c,) in self.db.query(CartModel.id).filter(CartModel.user_id == user_id).all()]
        if cart_ids:
            self.db.execute(delete(CartItemModel).where(CartItemModel.cart_id.in_(cart_ids)))
            self.db.execute(delete(CartModel).where(CartModel.id.in_(cart_ids)))
        self.db.execute(delete(WishlistItemModel).where(WishlistItemModel.user_id == user_id))
        ReviewRepo(self.db).delete_for_user(user_id)
        OrderRepo(self.db).delete_for_user(user_id)
        self.db.execute(delete(AddressModel).where(AddressModel.user_id == user_id))
        self.repo.delete(user)
        logger.info(f"User {user_id} deleted with all related data by {acting_user.id}")
