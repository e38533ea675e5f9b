# Campaigns Router for the Creator/Venue Marketplace
# Public browsing plus venue-side campaign management

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session
from typing import Literal, Optional

from config.app_config import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from database.config import get_db
from database.models import UserType
from database.marketplace_models import CampaignStatusDB
from auth.dependencies import CurrentUser
from auth.decorators import require_user_type
from schemas.marketplace import (
    CampaignCreate,
    CampaignUpdate,
    CampaignStatusUpdate,
    CampaignFilters,
    CampaignResponse,
)
from schemas.envelope import success, pagination
from services.campaign_service import CampaignService

router = APIRouter(prefix="/campaigns", tags=["Campaigns"])


def _campaign(campaign) -> dict:
    return CampaignResponse.model_validate(campaign).model_dump(mode="json")


# ============================================================================
# PUBLIC
# ============================================================================

@router.get("")
def list_campaigns(
    db: Session = Depends(get_db),
    status_filter: Optional[CampaignStatusDB] = Query(None, alias="status"),
    category: Optional[str] = None,
    city: Optional[str] = None,
    min_value: Optional[float] = Query(None, ge=0),
    max_value: Optional[float] = Query(None, ge=0),
    search: Optional[str] = Query(None, max_length=100),
    sort_by: Literal["newest", "ending", "value", "popular"] = "newest",
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
):
    """Browse campaigns with filters, search and sorting."""
    filters = CampaignFilters(
        status=status_filter,
        category=category,
        city=city,
        min_value=min_value,
        max_value=max_value,
        search=search,
        sort_by=sort_by,
        page=page,
        limit=limit,
    )
    campaigns, total = CampaignService(db).search(filters)
    return success({
        "campaigns": [_campaign(c) for c in campaigns],
        "pagination": pagination(page, limit, total),
    })


# ============================================================================
# VENUE
# ============================================================================

@router.get("/my")
def list_my_campaigns(
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(require_user_type(UserType.VENUE)),
    status_filter: Optional[CampaignStatusDB] = Query(None, alias="status"),
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
):
    campaigns, total = CampaignService(db).list_for_venue(current_user.id, status_filter, page, limit)
    return success({
        "campaigns": [_campaign(c) for c in campaigns],
        "pagination": pagination(page, limit, total),
    })


@router.get("/{campaign_id}")
def get_campaign(campaign_id: str, db: Session = Depends(get_db)):
    return success(_campaign(CampaignService(db).get(campaign_id)))


@router.post("", status_code=status.HTTP_201_CREATED)
def create_campaign(
    data: CampaignCreate,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(require_user_type(UserType.VENUE)),
):
    """
    Create a campaign.
    Campaigns with a future schedule_launch_date start as drafts and are
    launched by the housekeeping worker.
    """
    campaign = CampaignService(db).create(current_user.id, data)
    return success(_campaign(campaign))


@router.put("/{campaign_id}")
def update_campaign(
    campaign_id: str,
    data: CampaignUpdate,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(require_user_type(UserType.VENUE)),
):
    campaign = CampaignService(db).update(campaign_id, current_user.id, data)
    return success(_campaign(campaign))


@router.patch("/{campaign_id}/status")
def update_campaign_status(
    campaign_id: str,
    data: CampaignStatusUpdate,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(require_user_type(UserType.VENUE)),
):
    campaign = CampaignService(db).update_status(campaign_id, current_user.id, data.status)
    return success(_campaign(campaign))


@router.delete("/{campaign_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_campaign(
    campaign_id: str,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(require_user_type(UserType.VENUE)),
):
    CampaignService(db).delete(campaign_id, current_user.id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
