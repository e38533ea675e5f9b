# Review Service
# Two-sided reviews on completed applications and venue rating aggregation

from sqlalchemy.orm import Session, joinedload
from sqlalchemy.exc import IntegrityError
from sqlalchemy import func
from typing import Dict, List, Optional, Tuple
import logging

from database.models import Venue, Creator, UserType
from database.marketplace_models import (
    Campaign,
    Application,
    Review,
    ApplicationStatusDB,
)
from auth.roles import counterpart
from services.errors import NotFound, Forbidden, Conflict, InvalidState
from services.notification_service import NotificationService
from services.activity_logger import ActivityLogger, ActivityType

logger = logging.getLogger(__name__)


class ReviewService:
    def __init__(
        self,
        db: Session,
        notifier: Optional[NotificationService] = None,
        activity: Optional[ActivityLogger] = None,
    ):
        self.db = db
        self.notifier = notifier or NotificationService(db)
        self.activity = activity or ActivityLogger(db)

    def create_review(
        self,
        application_id: str,
        reviewer_id: str,
        reviewer_type: UserType,
        rating: int,
        comment: Optional[str] = None,
    ) -> Review:
        """
        Review the other side of a completed application.

        A creator's review of a venue recomputes Venue.rating from every
        creator -> venue review, in the same commit as the review itself.
        """
        reviewer_type = UserType(reviewer_type)
        application = self.db.query(Application).options(
            joinedload(Application.campaign).joinedload(Campaign.venue),
            joinedload(Application.creator),
        ).filter(Application.id == application_id).first()
        if not application:
            raise NotFound("Application not found")
        if application.status != ApplicationStatusDB.COMPLETED:
            raise InvalidState("Can only review completed applications")

        campaign = application.campaign
        if reviewer_type == UserType.CREATOR and application.creator_id == reviewer_id:
            reviewee_id = campaign.venue_id
            reviewer_name = application.creator.name if application.creator else None
        elif reviewer_type == UserType.VENUE and campaign.venue_id == reviewer_id:
            reviewee_id = application.creator_id
            reviewer_name = campaign.venue.company_name if campaign.venue else None
        else:
            raise Forbidden("You cannot review this application")

        existing = self.db.query(Review).filter(
            Review.application_id == application_id,
            Review.reviewer_id == reviewer_id,
        ).first()
        if existing:
            raise Conflict("You have already reviewed this application")

        review = Review(
            application_id=application_id,
            reviewer_id=reviewer_id,
            reviewee_id=reviewee_id,
            reviewer_type=reviewer_type,
            rating=rating,
            comment=comment,
        )
        self.db.add(review)
        try:
            self.db.flush()
            if reviewer_type == UserType.CREATOR:
                self._recompute_venue_rating(reviewee_id)
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise Conflict("You have already reviewed this application")
        self.db.refresh(review)

        logger.info(f"{reviewer_type.value} {reviewer_id} reviewed application {application_id} ({rating}/5)")
        self.notifier.notify_review_received(
            reviewee_id=reviewee_id,
            reviewee_type=counterpart(reviewer_type),
            reviewer_name=reviewer_name,
            rating=rating,
            review_id=review.id,
            application_id=application_id,
        )
        if reviewer_type == UserType.CREATOR:
            self.activity.append(
                reviewee_id, UserType.VENUE, ActivityType.REVIEW_RECEIVED,
                f"{reviewer_name or 'A creator'} left a {rating}-star review",
                {"review_id": review.id, "application_id": application_id, "rating": rating},
            )
        return review

    def _recompute_venue_rating(self, venue_id: str) -> None:
        average = self.db.query(func.avg(Review.rating)).filter(
            Review.reviewee_id == venue_id,
            Review.reviewer_type == UserType.CREATOR,
        ).scalar()
        self.db.query(Venue).filter(Venue.id == venue_id).update(
            {Venue.rating: float(average or 0)}, synchronize_session=False
        )

    # =========================================================================
    # QUERIES
    # =========================================================================

    def _received(self, subject_id: str, subject_type: UserType):
        return self.db.query(Review).filter(
            Review.reviewee_id == subject_id,
            Review.reviewer_type == counterpart(subject_type),
        )

    def stats(self, subject_id: str, subject_type: UserType) -> Dict:
        average, count = self._received(subject_id, subject_type).with_entities(
            func.avg(Review.rating), func.count(Review.id)
        ).one()
        return {
            "average_rating": float(average) if average is not None else None,
            "total_reviews": count,
        }

    def get_reviews(
        self,
        subject_id: str,
        subject_type: UserType,
        rating: Optional[int] = None,
        page: int = 1,
        limit: int = 20,
    ) -> Tuple[List[Review], int, Dict]:
        """Reviews received by a creator or venue, newest first, plus overall stats."""
        subject_type = UserType(subject_type)
        model = Creator if subject_type == UserType.CREATOR else Venue
        if not self.db.query(model.id).filter(model.id == subject_id).first():
            raise NotFound(f"{subject_type.value.capitalize()} not found")

        query = self._received(subject_id, subject_type)
        if rating:
            query = query.filter(Review.rating == rating)

        total = query.count()
        reviews = query.order_by(Review.created_at.desc()).offset((page - 1) * limit).limit(limit).all()
        return reviews, total, self.stats(subject_id, subject_type)

    def rating_distribution(self, venue_id: str) -> List[Dict[str, int]]:
        """Count of creator reviews per star, 5 down to 1."""
        rows = self._received(venue_id, UserType.VENUE).with_entities(
            Review.rating, func.count(Review.id)
        ).group_by(Review.rating).all()
        counts = dict(rows)
        return [{"stars": stars, "count": counts.get(stars, 0)} for stars in range(5, 0, -1)]
