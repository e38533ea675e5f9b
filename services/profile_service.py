# Profile Service
# Creator/venue profiles, dashboard stats, favorites and the venue activity feed

from sqlalchemy.orm import Session, joinedload
from sqlalchemy.exc import IntegrityError
from sqlalchemy import func
from typing import Dict, List, Tuple
import logging

from config.app_config import ACTIVITY_FEED_LIMIT
from database.models import Creator, Venue, UserType
from database.marketplace_models import (
    Campaign,
    Application,
    Favorite,
    ActivityLog,
    CampaignStatusDB,
    ApplicationStatusDB,
)
from schemas.marketplace import CreatorUpdate, VenueUpdate
from services.errors import NotFound, Conflict
from services.review_service import ReviewService
from services.activity_logger import ActivityLogger

logger = logging.getLogger(__name__)


class ProfileService:
    def __init__(self, db: Session):
        self.db = db
        self.reviews = ReviewService(db)

    # =========================================================================
    # CREATORS
    # =========================================================================

    def get_creator(self, creator_id: str) -> Creator:
        creator = self.db.query(Creator).filter(Creator.id == creator_id).first()
        if not creator:
            raise NotFound("Creator not found")
        return creator

    def creator_public_stats(self, creator_id: str) -> Dict:
        completed = self.db.query(Application).filter(
            Application.creator_id == creator_id,
            Application.status == ApplicationStatusDB.COMPLETED,
        ).count()
        stats = self.reviews.stats(creator_id, UserType.CREATOR)
        stats["completed_campaigns"] = completed
        return stats

    def update_creator(self, creator_id: str, data: CreatorUpdate) -> Creator:
        creator = self.get_creator(creator_id)
        for field, value in data.model_dump(exclude_unset=True, exclude_none=True).items():
            setattr(creator, field, value)
        self.db.commit()
        self.db.refresh(creator)
        return creator

    def creator_stats(self, creator_id: str) -> Dict:
        """Application counts per status and the offer value of completed collaborations."""
        rows = self.db.query(Application.status, func.count(Application.id)).filter(
            Application.creator_id == creator_id
        ).group_by(Application.status).all()
        counts = {ApplicationStatusDB(status).value: count for status, count in rows}

        value_saved = self.db.query(func.coalesce(func.sum(Campaign.offer_value), 0)).join(
            Application, Application.campaign_id == Campaign.id
        ).filter(
            Application.creator_id == creator_id,
            Application.status == ApplicationStatusDB.COMPLETED,
        ).scalar()

        return {
            "pending": counts.get("pending", 0),
            "accepted": counts.get("accepted", 0),
            "completed": counts.get("completed", 0),
            "rejected": counts.get("rejected", 0),
            "total_value_saved": float(value_saved or 0),
        }

    # =========================================================================
    # FAVORITES
    # =========================================================================

    def list_favorites(self, creator_id: str, page: int = 1, limit: int = 20) -> Tuple[List[Favorite], int]:
        query = self.db.query(Favorite).options(
            joinedload(Favorite.campaign).joinedload(Campaign.venue)
        ).filter(Favorite.creator_id == creator_id)

        total = query.count()
        favorites = query.order_by(Favorite.created_at.desc()).offset((page - 1) * limit).limit(limit).all()
        return favorites, total

    def add_favorite(self, creator_id: str, campaign_id: str) -> Favorite:
        if not self.db.query(Campaign.id).filter(Campaign.id == campaign_id).first():
            raise NotFound("Campaign not found")

        existing = self.db.query(Favorite).filter(
            Favorite.creator_id == creator_id,
            Favorite.campaign_id == campaign_id,
        ).first()
        if existing:
            raise Conflict("Already in favorites")

        favorite = Favorite(creator_id=creator_id, campaign_id=campaign_id)
        self.db.add(favorite)
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise Conflict("Already in favorites")
        self.db.refresh(favorite)
        return favorite

    def remove_favorite(self, creator_id: str, campaign_id: str) -> bool:
        """Idempotent: removing a campaign that is not a favorite is not an error."""
        removed = self.db.query(Favorite).filter(
            Favorite.creator_id == creator_id,
            Favorite.campaign_id == campaign_id,
        ).delete(synchronize_session=False)
        self.db.commit()
        return bool(removed)

    # =========================================================================
    # VENUES
    # =========================================================================

    def get_venue(self, venue_id: str) -> Venue:
        venue = self.db.query(Venue).filter(Venue.id == venue_id).first()
        if not venue:
            raise NotFound("Venue not found")
        return venue

    def update_venue(self, venue_id: str, data: VenueUpdate) -> Venue:
        venue = self.get_venue(venue_id)
        for field, value in data.model_dump(exclude_unset=True, exclude_none=True).items():
            setattr(venue, field, value)
        self.db.commit()
        self.db.refresh(venue)
        return venue

    def venue_stats(self, venue_id: str) -> Dict:
        campaigns = self.db.query(Campaign).filter(Campaign.venue_id == venue_id)
        total_campaigns = campaigns.count()
        active_campaigns = campaigns.filter(Campaign.status == CampaignStatusDB.ACTIVE).count()
        total_reach = self.db.query(func.coalesce(func.sum(Campaign.total_reach), 0)).filter(
            Campaign.venue_id == venue_id
        ).scalar()

        rows = self.db.query(Application.status, func.count(Application.id)).join(
            Campaign, Application.campaign_id == Campaign.id
        ).filter(Campaign.venue_id == venue_id).group_by(Application.status).all()
        by_status = {ApplicationStatusDB(status).value: count for status, count in rows}

        review_stats = self.reviews.stats(venue_id, UserType.VENUE)
        return {
            "total_campaigns": total_campaigns,
            "active_campaigns": active_campaigns,
            "total_applications": sum(by_status.values()),
            "pending_applications": by_status.get("pending", 0),
            "accepted_applications": by_status.get("accepted", 0),
            "completed_collaborations": by_status.get("completed", 0),
            "total_reach": int(total_reach or 0),
            "avg_rating": review_stats["average_rating"],
        }

    def venue_activity(self, venue_id: str, limit: int = ACTIVITY_FEED_LIMIT) -> List[ActivityLog]:
        return ActivityLogger(self.db).recent_for_venue(venue_id, limit)
