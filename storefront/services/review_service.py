# storefront/services/review_service.py
from typing import Any, Dict, List

from sqlalchemy.orm import Session

from storefront.data.models.review import ReviewModel, ReviewVoteModel, ReviewReportModel
from storefront.data.models.user import UserModel
from storefront.domain.exceptions import AccessDenied, NotFoundError, ValidationFailed
from storefront.domain.schemas import ReviewIn
from storefront.repos.order_repo import OrderRepo
from storefront.repos.product_repo import ProductRepo
from storefront.repos.review_repo import ReviewRepo
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


def helpfulness_score(upvotes: int, downvotes: int) -> float:
    total = upvotes + downvotes
    if total == 0:
        return 0.0
    return round(upvotes / total * 100, 2)


def review_to_dict(review: ReviewModel) -> Dict[str, Any]:
    up = sum(1 for v in review.votes if v.direction == "up")
    down = sum(1 for v in review.votes if v.direction == "down")
    return {
        "id": review.id,
        "user_id": review.user_id,
        "user_name": review.user.name if review.user else None,
        "product_id": review.product_id,
        "rating": review.rating,
        "title": review.title,
        "comment": review.comment,
        "is_verified_purchase": review.is_verified_purchase,
        "status": review.status,
        "upvotes": up,
        "downvotes": down,
        "helpfulness_score": helpfulness_score(up, down),
        "report_count": review.report_count,
        "created_at": review.created_at,
    }


class ReviewService:
    def __init__(self, db: Session):
        self.db = db
        self.repo = ReviewRepo(db)

    def _get(self, review_id: int) -> ReviewModel:
        review = self.repo.get(review_id)
        if not review:
            raise NotFoundError("Review not found")
        return review

    def list_for_product(self, product_id: int) -> List[Dict[str, Any]]:
        if not ProductRepo(self.db).get_product(product_id):
            raise NotFoundError("Product not found")
        return [review_to_dict(r) for r in self.repo.list_for_product(product_id)]

    def add_or_update(self, user: UserModel, payload: ReviewIn) -> Dict[str, Any]:
        if not ProductRepo(self.db).get_product(payload.product_id):
            raise NotFoundError("Product not found")

        delivered = OrderRepo(self.db).user_has_delivered(user.id, payload.product_id)
        review = self.repo.get_by_user_product(user.id, payload.product_id)

        if review:
            review.rating = payload.rating
            review.title = payload.title
            review.comment = payload.comment
            # ponowna moderacja po edycji
            review.status = "pending"
            logger.info(f"Review {review.id} updated by user {user.id}")
        else:
            review = ReviewModel(
                user_id=user.id,
                product_id=payload.product_id,
                rating=payload.rating,
                title=payload.title,
                comment=payload.comment,
                status="pending",
            )
            self.repo.add(review)
            logger.info(f"New review by user {user.id} for product {payload.product_id}")

        review.is_verified_purchase = delivered is not None
        review.order_id = delivered.id if delivered else None
        self.repo.commit()
        self.repo.refresh(review)
        return review_to_dict(review)

    def delete(self, user: UserModel, review_id: int) -> None:
        review = self._get(review_id)
        if review.user_id != user.id:
            raise AccessDenied("You can only delete your own reviews")
        self.repo.delete(review)
        self.repo.commit()

    def vote(self, user: UserModel, review_id: int, direction: str) -> Dict[str, Any]:
        """Ten sam glos drugi raz = cofniecie; przeciwny glos zastepuje poprzedni."""
        review = self._get(review_id)
        if review.user_id == user.id:
            raise ValidationFailed("You cannot vote on your own review")

        existing = self.repo.get_vote(review.id, user.id)
        if existing and existing.direction == direction:
            self.repo.delete(existing)
        elif existing:
            existing.direction = direction
        else:
            self.repo.add(ReviewVoteModel(review_id=review.id, user_id=user.id, direction=direction))

        self.repo.commit()
        self.repo.refresh(review)
        return review_to_dict(review)

    def report(self, user: UserModel, review_id: int, reason: str | None) -> Dict[str, Any]:
        review = self._get(review_id)
        if self.repo.get_report(review.id, user.id):
            raise ValidationFailed("You have already reported this review")

        self.repo.add(ReviewReportModel(review_id=review.id, user_id=user.id, reason=reason))
        review.report_count = (review.report_count or 0) + 1
        self.repo.commit()
        self.repo.refresh(review)
        logger.info(f"Review {review.id} reported by user {user.id} (total {review.report_count})")
        return review_to_dict(review)

    def set_status(self, review_id: int, status: str) -> Dict[str, Any]:
        review = self._get(review_id)
        review.status = status
        self.repo.commit()
        self.repo.refresh(review)
        return review_to_dict(review)
