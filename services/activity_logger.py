# Activity Logger
# Append-only audit trail for the venue (and creator) dashboards

from sqlalchemy.orm import Session
from typing import List, Optional
from enum import Enum
import logging

from database.models import UserType
from database.marketplace_models import ActivityLog

logger = logging.getLogger(__name__)


class ActivityType(str, Enum):
    CAMPAIGN_CREATED = "campaign_created"
    CAMPAIGN_STATUS_CHANGED = "campaign_status_changed"
    APPLICATION_RECEIVED = "application_received"
    APPLICATION_ACCEPTED = "application_accepted"
    APPLICATION_REJECTED = "application_rejected"
    APPLICATION_COMPLETED = "application_completed"
    APPLICATION_CANCELLED = "application_cancelled"
    REVIEW_RECEIVED = "review_received"


class ActivityLogger:
    """Best-effort writer: `append` commits on its own and never raises."""

    def __init__(self, db: Session):
        self.db = db

    def append(
        self,
        owner_id: str,
        owner_type: UserType,
        type: ActivityType | str,
        message: str,
        metadata: Optional[dict] = None,
    ) -> None:
        try:
            owner_column = "venue_id" if UserType(owner_type) == UserType.VENUE else "creator_id"
            entry = ActivityLog(
                type=ActivityType(type).value if isinstance(type, ActivityType) else type,
                message=message,
                metadata_json=metadata or {},
                **{owner_column: owner_id},
            )
            self.db.add(entry)
            self.db.commit()
        except Exception:
            logger.exception(f"Failed to log activity {type} for {owner_type} {owner_id}")
            self.db.rollback()

    def recent_for_venue(self, venue_id: str, limit: int = 20) -> List[ActivityLog]:
        return self.db.query(ActivityLog).filter(
            ActivityLog.venue_id == venue_id
        ).order_by(ActivityLog.created_at.desc()).limit(limit).all()
