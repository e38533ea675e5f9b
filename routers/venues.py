# Venues Router for the Creator/Venue Marketplace
# Venue dashboard, activity feed, profile and public profiles

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import Optional

from config.app_config import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE, ACTIVITY_FEED_LIMIT
from database.config import get_db
from database.models import UserType
from auth.dependencies import CurrentUser
from auth.decorators import require_permission
from auth.roles import Permission
from schemas.marketplace import (
    VenueUpdate,
    VenueProfileResponse,
    VenueAccountResponse,
    ActivityResponse,
)
from schemas.envelope import success
from services.profile_service import ProfileService
from routers.reviews import review_page

router = APIRouter(prefix="/venues", tags=["Venues"])

venue_only = require_permission(Permission.VIEW_VENUE_DASHBOARD)


@router.get("/me/stats")
def get_my_stats(
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(venue_only),
):
    return success(ProfileService(db).venue_stats(current_user.id))


@router.get("/me/activity")
def get_my_activity(
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(venue_only),
    limit: int = Query(ACTIVITY_FEED_LIMIT, ge=1, le=MAX_PAGE_SIZE),
):
    """Most recent activity log entries, newest first."""
    entries = ProfileService(db).venue_activity(current_user.id, limit)
    return success([ActivityResponse.model_validate(e).model_dump(mode="json") for e in entries])


@router.get("/me/reviews")
def get_my_reviews(
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(venue_only),
    rating: Optional[int] = Query(None, ge=1, le=5),
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
):
    return success(review_page(db, current_user.id, UserType.VENUE, rating, page, limit))


@router.get("/me")
def get_my_profile(
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(venue_only),
):
    venue = ProfileService(db).get_venue(current_user.id)
    return success(VenueAccountResponse.model_validate(venue).model_dump(mode="json"))


@router.put("/me")
def update_my_profile(
    data: VenueUpdate,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(venue_only),
):
    venue = ProfileService(db).update_venue(current_user.id, data)
    return success(VenueAccountResponse.model_validate(venue).model_dump(mode="json"))


@router.get("/{venue_id}")
def get_venue_profile(venue_id: str, db: Session = Depends(get_db)):
    service = ProfileService(db)
    venue = service.get_venue(venue_id)
    data = VenueProfileResponse.model_validate(venue).model_dump(mode="json")
    data["stats"] = service.reviews.stats(venue_id, UserType.VENUE)
    return success(data)
