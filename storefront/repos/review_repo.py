from typing import List

from sqlalchemy import select, delete
from sqlalchemy.orm import Session

from storefront.data.models.review import ReviewModel, ReviewVoteModel, ReviewReportModel


class ReviewRepo:
    def __init__(self, db: Session):
        self.db = db

    def get(self, review_id: int) -> ReviewModel | None:
        return self.db.get(ReviewModel, review_id)

    def get_by_user_product(self, user_id: int, product_id: int) -> ReviewModel | None:
        return self.db.execute(
            select(ReviewModel).where(ReviewModel.user_id == user_id, ReviewModel.product_id == product_id)
        ).scalar_one_or_none()

    def list_for_product(self, product_id: int, status: str | None = "approved") -> List[ReviewModel]:
        stmt = select(ReviewModel).where(ReviewModel.product_id == product_id)
        if status:
            stmt = stmt.where(ReviewModel.status == status)
        return list(self.db.execute(stmt.order_by(ReviewModel.created_at.desc())).scalars().all())

    def list_for_user(self, user_id: int, limit: int | None = None) -> List[ReviewModel]:
        stmt = select(ReviewModel).where(ReviewModel.user_id == user_id).order_by(ReviewModel.created_at.desc())
        if limit:
            stmt = stmt.limit(limit)
        return list(self.db.execute(stmt).scalars().all())

    def recent(self, limit: int = 5) -> List[ReviewModel]:
        return list(
            self.db.execute(select(ReviewModel).order_by(ReviewModel.created_at.desc()).limit(limit)).scalars().all()
        )

    def get_vote(self, review_id: int, user_id: int) -> ReviewVoteModel | None:
        return self.db.execute(
            select(ReviewVoteModel).where(ReviewVoteModel.review_id == review_id, ReviewVoteModel.user_id == user_id)
        ).scalar_one_or_none()

    def get_report(self, review_id: int, user_id: int) -> ReviewReportModel | None:
        return self.db.execute(
            select(ReviewReportModel).where(
                ReviewReportModel.review_id == review_id, ReviewReportModel.user_id == user_id
            )
        ).scalar_one_or_none()

    def add(self, obj) -> None:
        self.db.add(obj)

    def delete(self, obj) -> None:
        self.db.delete(obj)

    def delete_for_user(self, user_id: int) -> None:
        self.db.execute(delete(ReviewModel).where(ReviewModel.user_id == user_id))

    def commit(self):
        self.db.commit()

    def refresh(self, obj):
        self.db.refresh(obj)
