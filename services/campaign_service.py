# Campaign Lifecycle Service
# Creation, editing, status changes, deletion, search and scheduled housekeeping

from sqlalchemy.orm import Session, joinedload
from sqlalchemy import or_
from typing import List, Optional, Tuple
from datetime import datetime
import logging

from database.models import Venue, UserType
from database.marketplace_models import (
    Campaign,
    Application,
    CampaignStatusDB,
    ApplicationStatusDB,
)
from schemas.marketplace import CampaignCreate, CampaignUpdate, CampaignFilters
from services import counters
from services.errors import NotFound, Forbidden, InvalidState, ValidationError
from services.state_machine import ensure_transition
from services.activity_logger import ActivityLogger, ActivityType

logger = logging.getLogger(__name__)

OPEN_APPLICATION_STATUSES = (ApplicationStatusDB.PENDING, ApplicationStatusDB.ACCEPTED)

SORT_ORDERS = {
    "newest": Campaign.created_at.desc(),
    "ending": Campaign.end_date.asc(),
    "value": Campaign.offer_value.desc(),
    "popular": Campaign.total_applicants.desc(),
}


class CampaignService:
    def __init__(self, db: Session):
        self.db = db
        self.activity = ActivityLogger(db)

    # =========================================================================
    # LOOKUPS
    # =========================================================================

    def get(self, campaign_id: str) -> Campaign:
        campaign = self.db.query(Campaign).options(
            joinedload(Campaign.venue)
        ).filter(Campaign.id == campaign_id).first()
        if not campaign:
            raise NotFound("Campaign not found")
        return campaign

    def get_owned(self, campaign_id: str, venue_id: str) -> Campaign:
        campaign = self.get(campaign_id)
        if campaign.venue_id != venue_id:
            raise Forbidden("You do not own this campaign")
        return campaign

    def search(self, filters: CampaignFilters) -> Tuple[List[Campaign], int]:
        """Browse campaigns with filters, free-text search and a sort key."""
        query = self.db.query(Campaign).options(joinedload(Campaign.venue))

        if filters.status:
            query = query.filter(Campaign.status == filters.status)
        if filters.category:
            query = query.filter(Campaign.category == filters.category)
        if filters.city:
            query = query.filter(Campaign.location.ilike(f"%{filters.city}%"))
        if filters.min_value is not None:
            query = query.filter(Campaign.offer_value >= filters.min_value)
        if filters.max_value is not None:
            query = query.filter(Campaign.offer_value <= filters.max_value)
        if filters.search:
            term = f"%{filters.search}%"
            query = query.filter(or_(
                Campaign.title.ilike(term),
                Campaign.description.ilike(term),
                Campaign.offer_description.ilike(term),
            ))

        total = query.count()
        campaigns = query.order_by(
            SORT_ORDERS[filters.sort_by], Campaign.id
        ).offset((filters.page - 1) * filters.limit).limit(filters.limit).all()
        return campaigns, total

    def list_for_venue(
        self,
        venue_id: str,
        status: Optional[CampaignStatusDB] = None,
        page: int = 1,
        limit: int = 20,
    ) -> Tuple[List[Campaign], int]:
        query = self.db.query(Campaign).filter(Campaign.venue_id == venue_id)
        if status:
            query = query.filter(Campaign.status == status)

        total = query.count()
        campaigns = query.order_by(Campaign.created_at.desc()).offset((page - 1) * limit).limit(limit).all()
        return campaigns, total

    # =========================================================================
    # WRITES
    # =========================================================================

    def create(self, venue_id: str, data: CampaignCreate) -> Campaign:
        if not data.deal_type:
            raise ValidationError("Deal type is required")
        if not data.required_platforms:
            raise ValidationError("At least one platform is required")
        if data.spots_total < 1:
            raise ValidationError("Campaign needs at least one spot")

        scheduled = data.schedule_launch_date is not None and data.schedule_launch_date > datetime.utcnow()

        fields = data.model_dump(mode="python")
        fields["required_platforms"] = [p.value for p in data.required_platforms]
        campaign = Campaign(
            venue_id=venue_id,
            spots_used=0,
            total_applicants=0,
            total_accepted=0,
            status=CampaignStatusDB.DRAFT if scheduled else CampaignStatusDB.ACTIVE,
            **fields,
        )
        self.db.add(campaign)
        counters.increment(self.db, Venue, venue_id, "total_campaigns")
        self.db.commit()
        self.db.refresh(campaign)

        logger.info(f"Venue {venue_id} created campaign {campaign.id} ({campaign.status.value})")
        self.activity.append(
            venue_id, UserType.VENUE, ActivityType.CAMPAIGN_CREATED,
            f"Created campaign {campaign.title}",
            {"campaign_id": campaign.id},
        )
        return campaign

    def update(self, campaign_id: str, venue_id: str, data: CampaignUpdate) -> Campaign:
        campaign = self.get_owned(campaign_id, venue_id)
        changes = data.model_dump(exclude_unset=True, exclude_none=True, mode="python")

        new_status = changes.pop("status", None)
        if new_status is not None and new_status != campaign.status:
            ensure_transition(campaign.status, new_status, "Campaign")

        if "spots_total" in changes and changes["spots_total"] < campaign.spots_used:
            raise ValidationError(
                f"spots_total cannot be lower than the {campaign.spots_used} spots already used"
            )
        if "required_platforms" in changes:
            changes["required_platforms"] = [p.value for p in data.required_platforms]

        for field, value in changes.items():
            setattr(campaign, field, value)
        if new_status is not None:
            campaign.status = new_status

        self.db.commit()
        self.db.refresh(campaign)
        return campaign

    def update_status(self, campaign_id: str, venue_id: str, status: CampaignStatusDB) -> Campaign:
        campaign = self.get_owned(campaign_id, venue_id)
        if campaign.status == status:
            return campaign

        previous = campaign.status
        ensure_transition(previous, status, "Campaign")
        campaign.status = status
        self.db.commit()
        self.db.refresh(campaign)

        self.activity.append(
            venue_id, UserType.VENUE, ActivityType.CAMPAIGN_STATUS_CHANGED,
            f"Campaign {campaign.title} moved from {previous.value} to {status.value}",
            {"campaign_id": campaign.id, "from": previous.value, "to": status.value},
        )
        return campaign

    def delete(self, campaign_id: str, venue_id: str) -> None:
        """Delete a campaign that has no pending or accepted applications."""
        campaign = self.get_owned(campaign_id, venue_id)

        open_count = self.db.query(Application).filter(
            Application.campaign_id == campaign.id,
            Application.status.in_(OPEN_APPLICATION_STATUSES),
        ).count()
        if open_count:
            raise InvalidState(
                f"Campaign has {open_count} open application(s); cancel or complete it instead"
            )

        self.db.delete(campaign)
        counters.decrement(self.db, Venue, venue_id, "total_campaigns")
        self.db.commit()
        logger.info(f"Venue {venue_id} deleted campaign {campaign_id}")

    # =========================================================================
    # HOUSEKEEPING
    # =========================================================================

    def _advance(self, campaigns: List[Campaign], status: CampaignStatusDB) -> int:
        moved = 0
        for campaign in campaigns:
            ensure_transition(campaign.status, status, "Campaign")
            campaign.status = status
            moved += 1
        if moved:
            self.db.commit()
        return moved

    def launch_scheduled(self, now: Optional[datetime] = None) -> int:
        """Activate draft campaigns whose launch date has passed."""
        now = now or datetime.utcnow()
        due = self.db.query(Campaign).filter(
            Campaign.status == CampaignStatusDB.DRAFT,
            Campaign.schedule_launch_date.isnot(None),
            Campaign.schedule_launch_date <= now,
        ).all()
        launched = self._advance(due, CampaignStatusDB.ACTIVE)
        if launched:
            logger.info(f"Launched {launched} scheduled campaign(s)")
        return launched

    def close_expired(self, now: Optional[datetime] = None) -> int:
        """Complete active or paused campaigns whose end date has passed."""
        now = now or datetime.utcnow()
        expired = self.db.query(Campaign).filter(
            Campaign.status.in_((CampaignStatusDB.ACTIVE, CampaignStatusDB.PAUSED)),
            Campaign.end_date.isnot(None),
            Campaign.end_date < now,
        ).all()
        closed = self._advance(expired, CampaignStatusDB.COMPLETED)
        if closed:
            logger.info(f"Closed {closed} expired campaign(s)")
        return closed
