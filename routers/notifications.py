# Notifications Router for the Creator/Venue Marketplace
# Handles user notifications

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from config.app_config import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from database.config import get_db
from auth.dependencies import CurrentUser, get_current_user
from schemas.marketplace import NotificationResponse
from schemas.envelope import success, pagination
from services.notification_service import NotificationService
from services.errors import NotFound

router = APIRouter(prefix="/notifications", tags=["Notifications"])


# ============================================================================
# NOTIFICATION ENDPOINTS
# ============================================================================

@router.get("")
def get_notifications(
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
    unread_only: bool = Query(False, description="Only return unread notifications"),
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
):
    """
    Get user's notifications.
    """
    service = NotificationService(db)
    notifications, total = service.list(current_user.id, current_user.user_type, unread_only, page, limit)

    return success({
        "notifications": [
            NotificationResponse.model_validate(n).model_dump(mode="json") for n in notifications
        ],
        "unread_count": service.get_unread_count(current_user.id, current_user.user_type),
        "pagination": pagination(page, limit, total),
    })


@router.get("/unread-count")
def get_unread_count(
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
):
    """
    Get count of unread notifications.
    """
    count = NotificationService(db).get_unread_count(current_user.id, current_user.user_type)
    return success({"unread_count": count})


@router.put("/read-all")
def mark_all_as_read(
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
):
    """
    Mark all notifications as read.
    """
    count = NotificationService(db).mark_all_read(current_user.id, current_user.user_type)
    return success({"marked_read": count})


@router.put("/{notification_id}/read")
def mark_as_read(
    notification_id: str,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
):
    """
    Mark a notification as read.
    """
    if not NotificationService(db).mark_read(notification_id, current_user.id, current_user.user_type):
        raise NotFound("Notification not found")
    return success({"id": notification_id, "read": True})


@router.delete("/{notification_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_notification(
    notification_id: str,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
):
    if not NotificationService(db).delete(notification_id, current_user.id, current_user.user_type):
        raise NotFound("Notification not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
