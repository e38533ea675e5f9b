# Reviews Router for the Creator/Venue Marketplace
# Reviews on completed applications, listed per creator or venue

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import Optional

from config.app_config import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from database.config import get_db
from database.models import UserType
from auth.dependencies import CurrentUser, get_current_user
from schemas.marketplace import ReviewCreate, ReviewResponse, ReviewStats, RatingBucket
from schemas.envelope import success, pagination
from services.review_service import ReviewService

router = APIRouter(prefix="/reviews", tags=["Reviews"])


def review_page(
    db: Session,
    subject_id: str,
    subject_type: UserType,
    rating: Optional[int],
    page: int,
    limit: int,
) -> dict:
    """Reviews received by a creator or venue with stats and pagination."""
    service = ReviewService(db)
    reviews, total, stats = service.get_reviews(subject_id, subject_type, rating, page, limit)
    data = {
        "reviews": [ReviewResponse.model_validate(r).model_dump(mode="json") for r in reviews],
        "stats": ReviewStats(**stats).model_dump(),
        "pagination": pagination(page, limit, total),
    }
    if subject_type == UserType.VENUE:
        data["rating_distribution"] = [
            RatingBucket(**bucket).model_dump() for bucket in service.rating_distribution(subject_id)
        ]
    return data


@router.post("/application/{application_id}", status_code=status.HTTP_201_CREATED)
def create_review(
    application_id: str,
    data: ReviewCreate,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
):
    """
    Review the other side of a completed application.
    Creators review the venue, venues review the creator.
    """
    review = ReviewService(db).create_review(
        application_id,
        current_user.id,
        current_user.user_type,
        data.rating,
        data.comment,
    )
    return success(ReviewResponse.model_validate(review).model_dump(mode="json"))


@router.get("/creator/{creator_id}")
def get_creator_reviews(
    creator_id: str,
    db: Session = Depends(get_db),
    rating: Optional[int] = Query(None, ge=1, le=5),
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
):
    return success(review_page(db, creator_id, UserType.CREATOR, rating, page, limit))


@router.get("/venue/{venue_id}")
def get_venue_reviews(
    venue_id: str,
    db: Session = Depends(get_db),
    rating: Optional[int] = Query(None, ge=1, le=5),
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
):
    return success(review_page(db, venue_id, UserType.VENUE, rating, page, limit))
