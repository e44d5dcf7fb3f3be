# storefront/api/routers/reviews.py
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from storefront.api.deps import get_current_user, require_admin
from storefront.data.database import get_db
from storefront.data.models.user import UserModel
from storefront.domain.schemas import MessageOut, ReportIn, ReviewIn, ReviewOut, ReviewStatusIn, VoteIn
from storefront.services.review_service import ReviewService

router = APIRouter(prefix="/reviews", tags=["reviews"])


@router.get("/product/{product_id}", response_model=List[ReviewOut])
def list_product_reviews(product_id: int, db: Session = Depends(get_db)):
    return ReviewService(db).list_for_product(product_id)


@router.post("", response_model=ReviewOut)
def add_or_update_review(payload: ReviewIn, user: UserModel = Depends(get_current_user), db: Session = Depends(get_db)):
    return ReviewService(db).add_or_update(user, payload)


@router.delete("/{review_id}", response_model=MessageOut)
def delete_review(review_id: int, user: UserModel = Depends(get_current_user), db: Session = Depends(get_db)):
    ReviewService(db).delete(user, review_id)
    return {"message": "Review deleted successfully"}


@router.post("/{review_id}/vote", response_model=ReviewOut)
def vote(review_id: int, payload: VoteIn, user: UserModel = Depends(get_current_user), db: Session = Depends(get_db)):
    return ReviewService(db).vote(user, review_id, payload.direction)


@router.post("/{review_id}/report", response_model=ReviewOut)
def report(review_id: int, payload: ReportIn, user: UserModel = Depends(get_current_user), db: Session = Depends(get_db)):
    return ReviewService(db).report(user, review_id, payload.reason)


@router.patch("/{review_id}/status", response_model=ReviewOut, dependencies=[Depends(require_admin)])
def set_review_status(review_id: int, payload: ReviewStatusIn, db: Session = Depends(get_db)):
    return ReviewService(db).set_status(review_id, payload.status)
