# Marketplace Database Models
# Campaigns, applications, reviews, messaging, notifications and activity logs.
# Import these in addition to the account models in database/models.py

from sqlalchemy import Column, String, Integer, DateTime, ForeignKey, Text, JSON, Enum, Boolean, Float, UniqueConstraint, CheckConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from datetime import datetime
import enum

# Use the same Base from existing models
from database.models import Base, generate_uuid, UserType


# ============================================================================
# ENUMS
# ============================================================================

class CampaignStatusDB(str, enum.Enum):
    DRAFT = "draft"
    ACTIVE = "active"
    PAUSED = "paused"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class DealTypeDB(str, enum.Enum):
    FREE_PRODUCT = "free_product"
    FREE_SERVICE = "free_service"
    DISCOUNT = "discount"
    PAID = "paid"
    EXPERIENCE = "experience"


class ContentTypeDB(str, enum.Enum):
    INSTAGRAM_POST = "instagram_post"
    INSTAGRAM_REEL = "instagram_reel"
    INSTAGRAM_STORY = "instagram_story"
    TIKTOK_VIDEO = "tiktok_video"


class ApplicationStatusDB(str, enum.Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class AttachmentTypeDB(str, enum.Enum):
    IMAGE = "image"
    FILE = "file"


def _enum_column(enum_cls, name, **kwargs):
    return Column(Enum(enum_cls, values_callable=lambda x: [e.value for e in x], name=name), **kwargs)


# ============================================================================
# CAMPAIGN
# ============================================================================

class Campaign(Base):
    """Sponsorship offer posted by a venue.

    Counter columns (spots_used, total_applicants, total_accepted) are only
    ever changed with SQL-level increments, see services/counters.py.
    """
    __tablename__ = "campaigns"
    __table_args__ = (
        CheckConstraint("spots_used >= 0 AND spots_used <= spots_total", name="ck_campaign_spots"),
    )

    id = Column(String(36), primary_key=True, default=generate_uuid)
    venue_id = Column(String(36), ForeignKey("venues.id", ondelete="CASCADE"), nullable=False, index=True)

    title = Column(String(100), nullable=False)
    description = Column(Text, nullable=False)
    cover_image = Column(String(500))
    category = Column(String(100), nullable=False)

    # Offer
    deal_type = _enum_column(DealTypeDB, "dealtypedb", nullable=False)
    offer_description = Column(String(200), nullable=False)
    offer_value = Column(Float, nullable=False, default=0.0)
    discount_amount = Column(String(50))
    coupon_code = Column(String(50))

    # Where
    address = Column(String(255))
    location = Column(String(255), nullable=False)

    # When
    start_date = Column(DateTime, nullable=False)
    end_date = Column(DateTime)
    schedule_launch_date = Column(DateTime)

    # Capacity
    spots_total = Column(Integer, nullable=False)
    spots_used = Column(Integer, nullable=False, default=0)
    total_applicants = Column(Integer, nullable=False, default=0)
    total_accepted = Column(Integer, nullable=False, default=0)
    total_reach = Column(Integer, default=0)

    # Creator requirements
    required_platforms = Column(JSON, nullable=False)  # ["instagram_post", "tiktok_video"]
    requires_photo = Column(Boolean, default=False)
    requires_video = Column(Boolean, default=False)
    min_followers = Column(Integer)
    min_engagement_rate = Column(Float)
    tags = Column(JSON)

    status = _enum_column(CampaignStatusDB, "campaignstatusdb", nullable=False, default=CampaignStatusDB.ACTIVE)

    created_at = Column(DateTime, default=datetime.utcnow, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    # Relationships
    venue = relationship("Venue", back_populates="campaigns")
    applications = relationship("Application", back_populates="campaign", cascade="all, delete-orphan")
    favorites = relationship("Favorite", back_populates="campaign", cascade="all, delete-orphan")

    @property
    def spots_remaining(self):
        return max((self.spots_total or 0) - (self.spots_used or 0), 0)


# ============================================================================
# APPLICATION
# ============================================================================

class Application(Base):
    """A creator's request to take part in a campaign."""
    __tablename__ = "applications"
    __table_args__ = (
        UniqueConstraint("campaign_id", "creator_id", name="uq_application_campaign_creator"),
    )

    id = Column(String(36), primary_key=True, default=generate_uuid)
    campaign_id = Column(String(36), ForeignKey("campaigns.id", ondelete="CASCADE"), nullable=False, index=True)
    creator_id = Column(String(36), ForeignKey("creators.id", ondelete="CASCADE"), nullable=False, index=True)

    status = _enum_column(ApplicationStatusDB, "applicationstatusdb", nullable=False, default=ApplicationStatusDB.PENDING)
    creator_note = Column(Text)
    venue_note = Column(Text)

    applied_at = Column(DateTime, default=datetime.utcnow, server_default=func.now())
    reviewed_at = Column(DateTime)
    completed_at = Column(DateTime)
    visit_date = Column(DateTime)

    created_at = Column(DateTime, default=datetime.utcnow, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    # Relationships
    campaign = relationship("Campaign", back_populates="applications")
    creator = relationship("Creator", back_populates="applications")
    reviews = relationship("Review", back_populates="application", cascade="all, delete-orphan")


# ============================================================================
# REVIEW
# ============================================================================

class Review(Base):
    """Rating left by one side of a completed application for the other."""
    __tablename__ = "reviews"
    __table_args__ = (
        UniqueConstraint("application_id", "reviewer_id", name="uq_review_application_reviewer"),
        CheckConstraint("rating BETWEEN 1 AND 5", name="ck_review_rating"),
    )

    id = Column(String(36), primary_key=True, default=generate_uuid)
    application_id = Column(String(36), ForeignKey("applications.id", ondelete="CASCADE"), nullable=False, index=True)
    reviewer_id = Column(String(36), nullable=False)  # creators.id or venues.id, see reviewer_type
    reviewee_id = Column(String(36), nullable=False, index=True)
    reviewer_type = _enum_column(UserType, "usertype", nullable=False)

    rating = Column(Integer, nullable=False)  # 1-5
    comment = Column(Text)

    created_at = Column(DateTime, default=datetime.utcnow, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    # Relationships
    application = relationship("Application", back_populates="reviews")


# ============================================================================
# FAVORITE
# ============================================================================

class Favorite(Base):
    """Campaign bookmarked by a creator."""
    __tablename__ = "favorites"
    __table_args__ = (
        UniqueConstraint("creator_id", "campaign_id", name="uq_favorite_creator_campaign"),
    )

    id = Column(String(36), primary_key=True, default=generate_uuid)
    creator_id = Column(String(36), ForeignKey("creators.id", ondelete="CASCADE"), nullable=False)
    campaign_id = Column(String(36), ForeignKey("campaigns.id", ondelete="CASCADE"), nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, server_default=func.now())

    # Relationships
    creator = relationship("Creator", back_populates="favorites")
    campaign = relationship("Campaign", back_populates="favorites")


# ============================================================================
# MESSAGING
# ============================================================================

class Conversation(Base):
    """Message thread between exactly one creator and one venue."""
    __tablename__ = "conversations"
    __table_args__ = (
        UniqueConstraint("creator_id", "venue_id", name="uq_conversation_creator_venue"),
    )

    id = Column(String(36), primary_key=True, default=generate_uuid)
    creator_id = Column(String(36), ForeignKey("creators.id", ondelete="CASCADE"), nullable=False)
    venue_id = Column(String(36), ForeignKey("venues.id", ondelete="CASCADE"), nullable=False)
    application_id = Column(String(36), ForeignKey("applications.id", ondelete="SET NULL"), nullable=True)

    last_message_at = Column(DateTime)
    creator_unread_count = Column(Integer, nullable=False, default=0)
    venue_unread_count = Column(Integer, nullable=False, default=0)
    message_count = Column(Integer, nullable=False, default=0)

    created_at = Column(DateTime, default=datetime.utcnow, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    # Relationships
    creator = relationship("Creator", back_populates="conversations")
    venue = relationship("Venue", back_populates="conversations")
    messages = relationship("Message", back_populates="conversation", cascade="all, delete-orphan")


class Message(Base):
    __tablename__ = "messages"
    __table_args__ = (
        UniqueConstraint("conversation_id", "sequence", name="uq_message_conversation_sequence"),
    )

    id = Column(String(36), primary_key=True, default=generate_uuid)
    conversation_id = Column(String(36), ForeignKey("conversations.id", ondelete="CASCADE"), nullable=False, index=True)
    # Position within the conversation, allocated from Conversation.message_count
    sequence = Column(Integer, nullable=False)
    sender_id = Column(String(36), nullable=False)
    sender_type = _enum_column(UserType, "usertype", nullable=False)

    content = Column(Text, nullable=False)
    attachment_url = Column(String(500))
    attachment_type = _enum_column(AttachmentTypeDB, "attachmenttypedb", nullable=True)

    is_read = Column(Boolean, nullable=False, default=False)
    read_at = Column(DateTime)

    created_at = Column(DateTime, default=datetime.utcnow, server_default=func.now(), index=True)

    # Relationships
    conversation = relationship("Conversation", back_populates="messages")


# ============================================================================
# NOTIFICATION
# ============================================================================

class Notification(Base):
    """User notifications."""
    __tablename__ = "notifications"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    user_id = Column(String(36), nullable=False, index=True)
    user_type = _enum_column(UserType, "usertype", nullable=False)

    type = Column(String(50), nullable=False)  # application_received, review_received, etc.
    title = Column(String(200), nullable=False)
    message = Column(Text)
    data = Column(JSON)  # Additional context (campaign_id, application_id, etc.)

    read = Column(Boolean, default=False)
    read_at = Column(DateTime)

    created_at = Column(DateTime, default=datetime.utcnow, server_default=func.now())


# ============================================================================
# ACTIVITY LOG
# ============================================================================

class ActivityLog(Base):
    """Append-only audit trail shown on the venue dashboard."""
    __tablename__ = "activity_logs"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    venue_id = Column(String(36), ForeignKey("venues.id", ondelete="CASCADE"), nullable=True, index=True)
    creator_id = Column(String(36), ForeignKey("creators.id", ondelete="CASCADE"), nullable=True, index=True)

    type = Column(String(50), nullable=False)
    message = Column(Text, nullable=False)
    metadata_json = Column(JSON)

    created_at = Column(DateTime, default=datetime.utcnow, server_default=func.now())
