from typing import List, Tuple

from sqlalchemy import select, or_, func, update
from sqlalchemy.orm import Session

from storefront.data.models.user import UserModel

_SORTABLE = {"created_at", "name", "email", "role", "last_login"}


class UserRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_user(self, user_id: int) -> UserModel | None:
        return self.db.get(UserModel, user_id)

    def get_by_email(self, email: str) -> UserModel | None:
        return self.db.execute(
            select(UserModel).where(UserModel.email == email.lower())
        ).scalar_one_or_none()

    def get_by_phone(self, phone: str) -> UserModel | None:
        return self.db.execute(
            select(UserModel).where(UserModel.phone == phone)
        ).scalar_one_or_none()

    def get_by_verification_token(self, token_hash: str) -> UserModel | None:
        return self.db.execute(
            select(UserModel).where(UserModel.verification_token == token_hash)
        ).scalar_one_or_none()

    def get_by_reset_token(self, token_hash: str) -> UserModel | None:
        return self.db.execute(
            select(UserModel).where(UserModel.reset_password_token == token_hash)
        ).scalar_one_or_none()

    def create_user(self, user: UserModel) -> UserModel:
        self.db.add(user)
        self.db.commit()
        self.db.refresh(user)
        return user

    def save(self, user: UserModel) -> UserModel:
        self.db.add(user)
        self.db.commit()
        self.db.refresh(user)
        return user

    def delete(self, user: UserModel) -> None:
        self.db.delete(user)
        self.db.commit()

    def search(
        self,
        search: str = "",
        role: str | None = None,
        sort: str = "-created_at",
        page: int = 1,
        limit: int = 10,
    ) -> Tuple[List[UserModel], int]:
        stmt = select(UserModel)
        if search:
            pattern = f"%{search.lower()}%"
            stmt = stmt.where(
                or_(func.lower(UserModel.name).like(pattern), UserModel.email.like(pattern))
            )
        if role:
            stmt = stmt.where(UserModel.role == role)

        total = self.db.execute(select(func.count()).select_from(stmt.subquery())).scalar_one()

        field = sort.lstrip("-")
        if field not in _SORTABLE:
            field = "created_at"
        column = getattr(UserModel, field)
        stmt = stmt.order_by(column.desc() if sort.startswith("-") else column.asc(), UserModel.id)

        users = self.db.execute(stmt.offset((page - 1) * limit).limit(limit)).scalars().all()
        return list(users), total

    def set_role_bulk(self, user_ids: List[int], role: str) -> int:
        result = self.db.execute(
            update(UserModel)
            .where(UserModel.id.in_(user_ids), UserModel.role != role)
            .values(role=role)
        )
        self.db.commit()
        return result.rowcount

    def count(self, since=None, field: str = "created_at") -> int:
        stmt = select(func.count(UserModel.id))
        if since is not None:
            stmt = stmt.where(getattr(UserModel, field) >= since)
        return self.db.execute(stmt).scalar_one()

    def recent(self, limit: int = 5) -> List[UserModel]:
        return list(
            self.db.execute(
                select(UserModel).order_by(UserModel.created_at.desc()).limit(limit)
            ).scalars().all()
        )
