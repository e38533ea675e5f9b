# Applications Router for the Creator/Venue Marketplace
# Creators apply and cancel; venues accept, reject and complete

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session
from typing import Optional

from config.app_config import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from database.config import get_db
from database.models import UserType
from database.marketplace_models import ApplicationStatusDB
from auth.dependencies import CurrentUser, get_current_user
from auth.decorators import require_user_type
from schemas.marketplace import (
    ApplicationCreate,
    ApplicationUpdate,
    ApplicationStatusCheck,
    ApplicationResponse,
)
from schemas.envelope import success, pagination
from services.application_service import ApplicationService

router = APIRouter(prefix="/applications", tags=["Applications"])


def _application(application) -> dict:
    return ApplicationResponse.model_validate(application).model_dump(mode="json")


# ============================================================================
# CREATOR ENDPOINTS
# ============================================================================

@router.get("/my")
def list_my_applications(
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(require_user_type(UserType.CREATOR)),
    status_filter: Optional[ApplicationStatusDB] = Query(None, alias="status"),
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
):
    applications, total = ApplicationService(db).list_for_creator(current_user.id, status_filter, page, limit)
    return success({
        "applications": [_application(a) for a in applications],
        "pagination": pagination(page, limit, total),
    })


@router.post("/check-status")
def check_application_statuses(
    data: ApplicationStatusCheck,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(require_user_type(UserType.CREATOR)),
):
    """Which of these campaigns has the creator applied to, and with what status."""
    return success(ApplicationService(db).check_statuses(current_user.id, data.campaign_ids))


@router.post("/campaign/{campaign_id}", status_code=status.HTTP_201_CREATED)
def apply_to_campaign(
    campaign_id: str,
    data: ApplicationCreate,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(require_user_type(UserType.CREATOR)),
):
    application = ApplicationService(db).apply(campaign_id, current_user.id, data.creator_note)
    return success(_application(application))


@router.delete("/{application_id}", status_code=status.HTTP_204_NO_CONTENT)
def cancel_application(
    application_id: str,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(require_user_type(UserType.CREATOR)),
):
    ApplicationService(db).cancel(application_id, current_user.id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# ============================================================================
# VENUE ENDPOINTS
# ============================================================================

@router.get("/campaign/{campaign_id}")
def list_campaign_applications(
    campaign_id: str,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(require_user_type(UserType.VENUE)),
    status_filter: Optional[ApplicationStatusDB] = Query(None, alias="status"),
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
):
    applications, total = ApplicationService(db).list_for_campaign(
        campaign_id, current_user.id, status_filter, page, limit
    )
    return success({
        "applications": [_application(a) for a in applications],
        "pagination": pagination(page, limit, total),
    })


@router.put("/{application_id}")
def update_application_status(
    application_id: str,
    data: ApplicationUpdate,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(require_user_type(UserType.VENUE)),
):
    """Accept, reject or complete an application."""
    application = ApplicationService(db).transition(
        application_id,
        current_user.id,
        data.status,
        venue_note=data.venue_note,
        visit_date=data.visit_date,
    )
    return success(_application(application))


# ============================================================================
# SHARED
# ============================================================================

@router.get("/{application_id}")
def get_application(
    application_id: str,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
):
    application = ApplicationService(db).get(application_id, current_user.id, current_user.user_type)
    return success(_application(application))
