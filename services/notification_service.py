# Notification Service for the Creator/Venue Marketplace
# Provides centralized notification creation and management

from sqlalchemy.orm import Session
from typing import Optional, List, Tuple
from datetime import datetime
from enum import Enum
import logging

from database.models import UserType
from database.marketplace_models import Notification

logger = logging.getLogger(__name__)


class NotificationType(str, Enum):
    APPLICATION_RECEIVED = "application_received"
    APPLICATION_ACCEPTED = "application_accepted"
    APPLICATION_REJECTED = "application_rejected"
    APPLICATION_COMPLETED = "application_completed"
    REVIEW_RECEIVED = "review_received"
    NEW_MESSAGE = "new_message"
    SYSTEM = "system"


class NotificationService:
    """
    Service for creating and managing user notifications.

    `emit` is the entry point used by the other services: it runs in its own
    commit after the caller's primary write and never raises, so a broken
    notification can not undo or fail the operation that triggered it.
    """

    def __init__(self, db: Session):
        self.db = db

    def create(
        self,
        user_id: str,
        user_type: UserType,
        type: NotificationType | str,
        title: str,
        message: str,
        data: Optional[dict] = None,
    ) -> Notification:
        """
        Create a new notification for a user (flushed, not committed).

        Args:
            user_id: The user to notify
            user_type: Whether user_id is a creator or a venue
            type: Notification type (use NotificationType enum)
            title: Short notification title
            message: Full notification message
            data: Optional additional data as JSON

        Returns:
            The created Notification object
        """
        try:
            type_value = NotificationType(type).value
        except ValueError:
            type_value = NotificationType.SYSTEM.value

        notification = Notification(
            user_id=user_id,
            user_type=UserType(user_type),
            type=type_value,
            title=title,
            message=message,
            data=data or {},
        )
        self.db.add(notification)
        self.db.flush()  # Get the ID without committing
        return notification

    def emit(
        self,
        user_id: str,
        user_type: UserType,
        type: NotificationType | str,
        title: str,
        message: str,
        data: Optional[dict] = None,
    ) -> Optional[Notification]:
        """Create and commit a notification. Failures are logged and dropped."""
        try:
            notification = self.create(user_id, user_type, type, title, message, data)
            self.db.commit()
            return notification
        except Exception:
            logger.exception(f"Failed to create {type} notification for {user_type} {user_id}")
            self.db.rollback()
            return None

    # =========================================================================
    # QUERIES
    # =========================================================================

    def _for_user(self, user_id: str, user_type: UserType):
        return self.db.query(Notification).filter(
            Notification.user_id == user_id,
            Notification.user_type == UserType(user_type),
        )

    def list(
        self,
        user_id: str,
        user_type: UserType,
        unread_only: bool = False,
        page: int = 1,
        limit: int = 20,
    ) -> Tuple[List[Notification], int]:
        query = self._for_user(user_id, user_type)
        if unread_only:
            query = query.filter(Notification.read == False)

        total = query.count()
        notifications = query.order_by(Notification.created_at.desc()).offset((page - 1) * limit).limit(limit).all()
        return notifications, total

    def mark_read(self, notification_id: str, user_id: str, user_type: UserType) -> bool:
        """
        Mark a notification as read.

        Returns:
            True if notification was marked read, False if not found
        """
        notification = self._for_user(user_id, user_type).filter(
            Notification.id == notification_id
        ).first()

        if notification:
            notification.read = True
            notification.read_at = datetime.utcnow()
            self.db.commit()
            return True
        return False

    def mark_all_read(self, user_id: str, user_type: UserType) -> int:
        """
        Mark all notifications as read for a user.

        Returns:
            Number of notifications marked as read
        """
        count = self._for_user(user_id, user_type).filter(
            Notification.read == False
        ).update({
            "read": True,
            "read_at": datetime.utcnow()
        }, synchronize_session=False)
        self.db.commit()
        return count

    def delete(self, notification_id: str, user_id: str, user_type: UserType) -> bool:
        deleted = self._for_user(user_id, user_type).filter(
            Notification.id == notification_id
        ).delete(synchronize_session=False)
        self.db.commit()
        return bool(deleted)

    def get_unread_count(self, user_id: str, user_type: UserType) -> int:
        """Get unread notification count for a user."""
        return self._for_user(user_id, user_type).filter(
            Notification.read == False
        ).count()

    # =========================================================================
    # APPLICATION NOTIFICATION HELPERS
    # =========================================================================

    def notify_application_received(
        self,
        venue_id: str,
        creator_name: str,
        campaign_id: str,
        campaign_title: str,
        application_id: str,
    ):
        """Notify venue of a new application."""
        return self.emit(
            user_id=venue_id,
            user_type=UserType.VENUE,
            type=NotificationType.APPLICATION_RECEIVED,
            title="New Application",
            message=f"{creator_name} applied to {campaign_title}",
            data={"campaign_id": campaign_id, "application_id": application_id},
        )

    def notify_application_accepted(
        self,
        creator_id: str,
        venue_name: str,
        campaign_id: str,
        campaign_title: str,
        application_id: str,
    ):
        """Notify creator that the venue accepted their application."""
        return self.emit(
            user_id=creator_id,
            user_type=UserType.CREATOR,
            type=NotificationType.APPLICATION_ACCEPTED,
            title="Application Accepted!",
            message=f"{venue_name} accepted your application for {campaign_title}",
            data={"campaign_id": campaign_id, "application_id": application_id},
        )

    def notify_application_rejected(
        self,
        creator_id: str,
        venue_name: str,
        campaign_id: str,
        campaign_title: str,
        application_id: str,
    ):
        """Notify creator that the venue declined their application."""
        return self.emit(
            user_id=creator_id,
            user_type=UserType.CREATOR,
            type=NotificationType.APPLICATION_REJECTED,
            title="Application Declined",
            message=f"{venue_name} declined your application for {campaign_title}",
            data={"campaign_id": campaign_id, "application_id": application_id},
        )

    def notify_application_completed(
        self,
        creator_id: str,
        venue_name: str,
        campaign_id: str,
        campaign_title: str,
        application_id: str,
    ):
        """Notify creator that the collaboration was marked complete."""
        return self.emit(
            user_id=creator_id,
            user_type=UserType.CREATOR,
            type=NotificationType.APPLICATION_COMPLETED,
            title="Collaboration Completed",
            message=f"{venue_name} marked {campaign_title} as completed. You can now leave a review.",
            data={"campaign_id": campaign_id, "application_id": application_id},
        )

    # =========================================================================
    # REVIEW / MESSAGE HELPERS
    # =========================================================================

    def notify_review_received(
        self,
        reviewee_id: str,
        reviewee_type: UserType,
        reviewer_name: Optional[str],
        rating: int,
        review_id: str,
        application_id: str,
    ):
        return self.emit(
            user_id=reviewee_id,
            user_type=reviewee_type,
            type=NotificationType.REVIEW_RECEIVED,
            title="New Review",
            message=f"{reviewer_name or 'Someone'} left you a {rating}-star review",
            data={"review_id": review_id, "application_id": application_id, "rating": rating},
        )

    def notify_new_message(
        self,
        recipient_id: str,
        recipient_type: UserType,
        sender_name: str,
        conversation_id: str,
    ):
        return self.emit(
            user_id=recipient_id,
            user_type=recipient_type,
            type=NotificationType.NEW_MESSAGE,
            title="New Message",
            message=f"{sender_name} sent you a message",
            data={"conversation_id": conversation_id},
        )
