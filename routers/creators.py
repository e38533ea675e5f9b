# Creators Router for the Creator/Venue Marketplace
# Creator dashboard, profile, favorites and public profiles

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session
from typing import Optional

from config.app_config import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from database.config import get_db
from database.models import UserType
from auth.dependencies import CurrentUser
from auth.decorators import require_permission
from auth.roles import Permission
from schemas.marketplace import (
    CreatorUpdate,
    CreatorProfileResponse,
    CreatorAccountResponse,
    FavoriteResponse,
)
from schemas.envelope import success, pagination
from services.profile_service import ProfileService
from routers.reviews import review_page

router = APIRouter(prefix="/creators", tags=["Creators"])

creator_only = require_permission(Permission.VIEW_CREATOR_DASHBOARD)


# ============================================================================
# DASHBOARD
# ============================================================================

@router.get("/me/stats")
def get_my_stats(
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(creator_only),
):
    return success(ProfileService(db).creator_stats(current_user.id))


@router.get("/me/reviews")
def get_my_reviews(
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(creator_only),
    rating: Optional[int] = Query(None, ge=1, le=5),
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
):
    return success(review_page(db, current_user.id, UserType.CREATOR, rating, page, limit))


@router.get("/me")
def get_my_profile(
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(creator_only),
):
    creator = ProfileService(db).get_creator(current_user.id)
    return success(CreatorAccountResponse.model_validate(creator).model_dump(mode="json"))


@router.put("/me")
def update_my_profile(
    data: CreatorUpdate,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(creator_only),
):
    creator = ProfileService(db).update_creator(current_user.id, data)
    return success(CreatorAccountResponse.model_validate(creator).model_dump(mode="json"))


# ============================================================================
# FAVORITES
# ============================================================================

@router.get("/me/favorites")
def list_favorites(
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(require_permission(Permission.MANAGE_FAVORITES)),
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
):
    favorites, total = ProfileService(db).list_favorites(current_user.id, page, limit)
    return success({
        "favorites": [FavoriteResponse.model_validate(f).model_dump(mode="json") for f in favorites],
        "pagination": pagination(page, limit, total),
    })


@router.post("/me/favorites/{campaign_id}", status_code=status.HTTP_201_CREATED)
def add_favorite(
    campaign_id: str,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(require_permission(Permission.MANAGE_FAVORITES)),
):
    favorite = ProfileService(db).add_favorite(current_user.id, campaign_id)
    return success(FavoriteResponse.model_validate(favorite).model_dump(mode="json"))


@router.delete("/me/favorites/{campaign_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_favorite(
    campaign_id: str,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(require_permission(Permission.MANAGE_FAVORITES)),
):
    ProfileService(db).remove_favorite(current_user.id, campaign_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# ============================================================================
# PUBLIC
# ============================================================================

@router.get("/{creator_id}")
def get_creator_profile(creator_id: str, db: Session = Depends(get_db)):
    service = ProfileService(db)
    creator = service.get_creator(creator_id)
    data = CreatorProfileResponse.model_validate(creator).model_dump(mode="json")
    data["stats"] = service.creator_public_stats(creator_id)
    return success(data)
