# Application Lifecycle Service
# Apply, accept/reject/complete, cancel and the listings around them

from sqlalchemy.orm import Session, joinedload
from sqlalchemy.exc import IntegrityError
from typing import Dict, List, Optional, Tuple
from datetime import datetime
import logging

from database.models import UserType
from database.marketplace_models import (
    Campaign,
    Application,
    CampaignStatusDB,
    ApplicationStatusDB,
)
from services import counters
from services.errors import NotFound, Forbidden, Conflict, InvalidState, CapacityExceeded
from services.state_machine import ensure_transition
from services.notification_service import NotificationService
from services.activity_logger import ActivityLogger, ActivityType

logger = logging.getLogger(__name__)

# Venue-driven transitions and the side effects each one triggers
_VENUE_OUTCOMES = {
    ApplicationStatusDB.ACCEPTED: ("notify_application_accepted", ActivityType.APPLICATION_ACCEPTED, "Accepted"),
    ApplicationStatusDB.REJECTED: ("notify_application_rejected", ActivityType.APPLICATION_REJECTED, "Declined"),
    ApplicationStatusDB.COMPLETED: ("notify_application_completed", ActivityType.APPLICATION_COMPLETED, "Completed"),
}


class ApplicationService:
    """
    Owns every Application status write.

    The application row and the campaign counters it touches are committed
    together; notifications and activity entries follow in their own commits
    and are allowed to fail.
    """

    def __init__(
        self,
        db: Session,
        notifier: Optional[NotificationService] = None,
        activity: Optional[ActivityLogger] = None,
    ):
        self.db = db
        self.notifier = notifier or NotificationService(db)
        self.activity = activity or ActivityLogger(db)

    def _load(self, application_id: str) -> Application:
        application = self.db.query(Application).options(
            joinedload(Application.campaign).joinedload(Campaign.venue),
            joinedload(Application.creator),
        ).filter(Application.id == application_id).first()
        if not application:
            raise NotFound("Application not found")
        return application

    # =========================================================================
    # CREATOR ACTIONS
    # =========================================================================

    def apply(self, campaign_id: str, creator_id: str, note: Optional[str] = None) -> Application:
        campaign = self.db.query(Campaign).filter(Campaign.id == campaign_id).first()
        if not campaign:
            raise NotFound("Campaign not found")
        if campaign.status != CampaignStatusDB.ACTIVE:
            raise InvalidState("Campaign is not accepting applications")
        if campaign.spots_used >= campaign.spots_total:
            raise CapacityExceeded("Campaign is full")

        existing = self.db.query(Application).filter(
            Application.campaign_id == campaign_id,
            Application.creator_id == creator_id,
        ).first()
        if existing:
            raise Conflict("You have already applied to this campaign")

        application = Application(
            campaign_id=campaign_id,
            creator_id=creator_id,
            status=ApplicationStatusDB.PENDING,
            creator_note=note,
        )
        self.db.add(application)
        counters.increment(self.db, Campaign, campaign_id, "total_applicants")
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise Conflict("You have already applied to this campaign")

        application = self._load(application.id)
        logger.info(f"Creator {creator_id} applied to campaign {campaign_id}")

        creator_name = application.creator.name if application.creator else "A creator"
        self.notifier.notify_application_received(
            venue_id=campaign.venue_id,
            creator_name=creator_name,
            campaign_id=campaign_id,
            campaign_title=application.campaign.title,
            application_id=application.id,
        )
        self.activity.append(
            campaign.venue_id, UserType.VENUE, ActivityType.APPLICATION_RECEIVED,
            f"New application from {creator_name} for {application.campaign.title}",
            {"campaign_id": campaign_id, "application_id": application.id, "creator_id": creator_id},
        )
        return application

    def cancel(self, application_id: str, creator_id: str) -> Application:
        application = self._load(application_id)
        if application.creator_id != creator_id:
            raise Forbidden("You cannot cancel this application")
        if application.status != ApplicationStatusDB.PENDING:
            raise InvalidState("Can only cancel pending applications")
        ensure_transition(application.status, ApplicationStatusDB.CANCELLED, "Application")

        # A venue decision landing after the load wins over the cancel
        moved = self.db.query(Application).filter(
            Application.id == application.id,
            Application.status == ApplicationStatusDB.PENDING,
        ).update({"status": ApplicationStatusDB.CANCELLED}, synchronize_session=False)
        if not moved:
            self.db.rollback()
            raise InvalidState("Can only cancel pending applications")

        counters.decrement(self.db, Campaign, application.campaign_id, "total_applicants")
        self.db.commit()
        logger.info(f"Creator {creator_id} cancelled application {application_id}")

        application = self._load(application_id)
        campaign = application.campaign
        creator_name = application.creator.name if application.creator else "A creator"
        self.activity.append(
            campaign.venue_id, UserType.VENUE, ActivityType.APPLICATION_CANCELLED,
            f"{creator_name} withdrew their application for {campaign.title}",
            {"campaign_id": campaign.id, "application_id": application.id},
        )
        return application

    def check_statuses(self, creator_id: str, campaign_ids: List[str]) -> Dict[str, str]:
        """Map campaign id -> status for the creator's applications among campaign_ids."""
        rows = self.db.query(Application.campaign_id, Application.status).filter(
            Application.creator_id == creator_id,
            Application.campaign_id.in_(campaign_ids),
        ).all()
        return {campaign_id: ApplicationStatusDB(status).value for campaign_id, status in rows}

    # =========================================================================
    # VENUE ACTIONS
    # =========================================================================

    def transition(
        self,
        application_id: str,
        venue_id: str,
        new_status: ApplicationStatusDB,
        venue_note: Optional[str] = None,
        visit_date: Optional[datetime] = None,
    ) -> Application:
        """Accept, reject or complete an application on behalf of the campaign's venue."""
        application = self._load(application_id)
        campaign = application.campaign
        if campaign.venue_id != venue_id:
            raise Forbidden("You do not own this campaign")

        new_status = ApplicationStatusDB(new_status)
        if new_status not in _VENUE_OUTCOMES:
            raise InvalidState(f"Venues cannot set an application to '{new_status.value}'")
        ensure_transition(application.status, new_status, "Application")

        now = datetime.utcnow()
        values = {"status": new_status}
        if venue_note is not None:
            values["venue_note"] = venue_note
        if visit_date is not None:
            values["visit_date"] = visit_date
        if new_status == ApplicationStatusDB.COMPLETED:
            values["completed_at"] = now
        else:
            values["reviewed_at"] = now

        # Guard on the status we validated against so two concurrent decisions can not both apply
        moved = self.db.query(Application).filter(
            Application.id == application.id,
            Application.status == application.status,
        ).update(values, synchronize_session=False)
        if not moved:
            self.db.rollback()
            raise InvalidState("Application status changed, reload and try again")

        if new_status == ApplicationStatusDB.ACCEPTED:
            updated = counters.adjust(
                self.db, Campaign, campaign.id,
                where=[Campaign.spots_used < Campaign.spots_total],
                spots_used=1,
                total_accepted=1,
            )
            if not updated:
                self.db.rollback()
                raise CapacityExceeded("Campaign is full")

        self.db.commit()

        application = self._load(application_id)
        campaign = application.campaign
        logger.info(f"Venue {venue_id} set application {application_id} to {new_status.value}")

        notify, activity_type, verb = _VENUE_OUTCOMES[new_status]
        getattr(self.notifier, notify)(
            creator_id=application.creator_id,
            venue_name=campaign.venue.company_name if campaign.venue else "The venue",
            campaign_id=campaign.id,
            campaign_title=campaign.title,
            application_id=application.id,
        )
        creator_name = application.creator.name if application.creator else "a creator"
        self.activity.append(
            venue_id, UserType.VENUE, activity_type,
            f"{verb} application from {creator_name} for {campaign.title}",
            {"campaign_id": campaign.id, "application_id": application.id},
        )
        return application

    # =========================================================================
    # QUERIES
    # =========================================================================

    def get(self, application_id: str, user_id: str, user_type: UserType) -> Application:
        application = self._load(application_id)
        if UserType(user_type) == UserType.CREATOR:
            allowed = application.creator_id == user_id
        else:
            allowed = application.campaign.venue_id == user_id
        if not allowed:
            raise Forbidden("You cannot view this application")
        return application

    def list_for_creator(
        self,
        creator_id: str,
        status: Optional[ApplicationStatusDB] = None,
        page: int = 1,
        limit: int = 20,
    ) -> Tuple[List[Application], int]:
        query = self.db.query(Application).options(
            joinedload(Application.campaign).joinedload(Campaign.venue)
        ).filter(Application.creator_id == creator_id)
        if status:
            query = query.filter(Application.status == status)

        total = query.count()
        applications = query.order_by(
            Application.applied_at.desc()
        ).offset((page - 1) * limit).limit(limit).all()
        return applications, total

    def list_for_campaign(
        self,
        campaign_id: str,
        venue_id: str,
        status: Optional[ApplicationStatusDB] = None,
        page: int = 1,
        limit: int = 20,
    ) -> Tuple[List[Application], int]:
        campaign = self.db.query(Campaign).filter(
            Campaign.id == campaign_id,
            Campaign.venue_id == venue_id,
        ).first()
        if not campaign:
            raise NotFound("Campaign not found or access denied")

        query = self.db.query(Application).options(
            joinedload(Application.creator)
        ).filter(Application.campaign_id == campaign_id)
        if status:
            query = query.filter(Application.status == status)

        total = query.count()
        applications = query.order_by(
            Application.applied_at.desc()
        ).offset((page - 1) * limit).limit(limit).all()
        return applications, total
