# Pydantic Schemas for the Creator/Venue Marketplace
# Request bodies carry the field-level constraints; responses read from ORM objects

from pydantic import BaseModel, EmailStr, Field, field_validator
from typing import Optional, List, Literal
from datetime import datetime, timezone

from database.models import UserType, AccountStatus
from database.marketplace_models import (
    CampaignStatusDB,
    DealTypeDB,
    ContentTypeDB,
    ApplicationStatusDB,
    AttachmentTypeDB,
)


def _naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Store timestamps as naive UTC, matching the DateTime columns."""
    if value is not None and value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


# ============================================================================
# AUTH SCHEMAS
# ============================================================================

class CreatorRegister(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=8, max_length=128)
    name: str = Field(..., min_length=2, max_length=100)
    username: str = Field(..., min_length=3, max_length=30, pattern=r"^[a-zA-Z0-9_.]+$")
    city: Optional[str] = Field(None, max_length=100)
    instagram_handle: Optional[str] = Field(None, max_length=100)
    tiktok_handle: Optional[str] = Field(None, max_length=100)


class VenueRegister(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=8, max_length=128)
    company_name: str = Field(..., min_length=2, max_length=100)
    category: str = Field(..., min_length=1, max_length=100)
    city: Optional[str] = Field(None, max_length=100)
    address: Optional[str] = Field(None, max_length=255)
    phone: Optional[str] = Field(None, max_length=30)


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class RefreshRequest(BaseModel):
    refresh_token: str = Field(..., min_length=1)


# ============================================================================
# PROFILE SCHEMAS
# ============================================================================

class CreatorUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=2, max_length=100)
    bio: Optional[str] = Field(None, max_length=500)
    avatar: Optional[str] = Field(None, max_length=500)
    city: Optional[str] = Field(None, max_length=100)
    instagram_handle: Optional[str] = Field(None, max_length=100)
    instagram_followers: Optional[int] = Field(None, ge=0)
    tiktok_handle: Optional[str] = Field(None, max_length=100)
    tiktok_followers: Optional[int] = Field(None, ge=0)
    engagement_rate: Optional[float] = Field(None, ge=0, le=100)


class VenueUpdate(BaseModel):
    company_name: Optional[str] = Field(None, min_length=2, max_length=100)
    category: Optional[str] = Field(None, max_length=100)
    description: Optional[str] = Field(None, max_length=1000)
    logo: Optional[str] = Field(None, max_length=500)
    address: Optional[str] = Field(None, max_length=255)
    city: Optional[str] = Field(None, max_length=100)
    phone: Optional[str] = Field(None, max_length=30)
    website: Optional[str] = Field(None, max_length=500)
    instagram_handle: Optional[str] = Field(None, max_length=100)
    facebook_handle: Optional[str] = Field(None, max_length=100)
    tiktok_handle: Optional[str] = Field(None, max_length=100)
    response_time: Optional[str] = Field(None, max_length=50)


class CreatorSummary(BaseModel):
    id: str
    name: str
    username: str
    avatar: Optional[str] = None
    instagram_handle: Optional[str] = None
    instagram_followers: Optional[int] = 0
    tiktok_followers: Optional[int] = 0
    engagement_rate: Optional[float] = 0.0

    class Config:
        from_attributes = True


class CreatorProfileResponse(CreatorSummary):
    bio: Optional[str] = None
    city: Optional[str] = None
    tiktok_handle: Optional[str] = None
    created_at: Optional[datetime] = None


class CreatorAccountResponse(CreatorProfileResponse):
    email: str
    status: AccountStatus


class VenueSummary(BaseModel):
    id: str
    company_name: str
    logo: Optional[str] = None
    rating: Optional[float] = 0.0

    class Config:
        from_attributes = True


class VenueProfileResponse(VenueSummary):
    category: Optional[str] = None
    description: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    website: Optional[str] = None
    instagram_handle: Optional[str] = None
    facebook_handle: Optional[str] = None
    tiktok_handle: Optional[str] = None
    total_campaigns: int = 0
    response_time: Optional[str] = None
    created_at: Optional[datetime] = None


class VenueAccountResponse(VenueProfileResponse):
    email: str
    phone: Optional[str] = None
    status: AccountStatus


# ============================================================================
# CAMPAIGN SCHEMAS
# ============================================================================

class CampaignBase(BaseModel):
    title: str = Field(..., min_length=3, max_length=100)
    description: str = Field(..., min_length=10, max_length=1000)
    cover_image: Optional[str] = Field(None, max_length=500)
    category: str = Field(..., min_length=1, max_length=100)
    deal_type: DealTypeDB
    offer_description: str = Field(..., min_length=5, max_length=200)
    offer_value: float = Field(..., ge=0)
    discount_amount: Optional[str] = Field(None, max_length=50)
    coupon_code: Optional[str] = Field(None, max_length=50)
    address: Optional[str] = Field(None, max_length=255)
    location: str = Field(..., min_length=1, max_length=255)
    start_date: datetime
    end_date: Optional[datetime] = None
    schedule_launch_date: Optional[datetime] = None
    spots_total: int = Field(..., ge=1)
    required_platforms: List[ContentTypeDB] = Field(..., min_length=1)
    requires_photo: bool = False
    requires_video: bool = False
    min_followers: Optional[int] = Field(None, ge=0)
    min_engagement_rate: Optional[float] = Field(None, ge=0)
    tags: Optional[List[str]] = None

    @field_validator("start_date", "end_date", "schedule_launch_date")
    @classmethod
    def normalize_dates(cls, value):
        return _naive_utc(value)


class CampaignCreate(CampaignBase):
    """Schema for creating a campaign."""


class CampaignUpdate(BaseModel):
    """Partial update; only the fields sent are applied."""
    title: Optional[str] = Field(None, min_length=3, max_length=100)
    description: Optional[str] = Field(None, min_length=10, max_length=1000)
    cover_image: Optional[str] = Field(None, max_length=500)
    category: Optional[str] = Field(None, min_length=1, max_length=100)
    deal_type: Optional[DealTypeDB] = None
    offer_description: Optional[str] = Field(None, min_length=5, max_length=200)
    offer_value: Optional[float] = Field(None, ge=0)
    discount_amount: Optional[str] = Field(None, max_length=50)
    coupon_code: Optional[str] = Field(None, max_length=50)
    address: Optional[str] = Field(None, max_length=255)
    location: Optional[str] = Field(None, min_length=1, max_length=255)
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    schedule_launch_date: Optional[datetime] = None
    spots_total: Optional[int] = Field(None, ge=1)
    required_platforms: Optional[List[ContentTypeDB]] = Field(None, min_length=1)
    requires_photo: Optional[bool] = None
    requires_video: Optional[bool] = None
    min_followers: Optional[int] = Field(None, ge=0)
    min_engagement_rate: Optional[float] = Field(None, ge=0)
    tags: Optional[List[str]] = None
    status: Optional[CampaignStatusDB] = None

    @field_validator("start_date", "end_date", "schedule_launch_date")
    @classmethod
    def normalize_dates(cls, value):
        return _naive_utc(value)


class CampaignStatusUpdate(BaseModel):
    status: CampaignStatusDB


class CampaignFilters(BaseModel):
    """Browse/search parameters."""
    status: Optional[CampaignStatusDB] = None
    category: Optional[str] = None
    city: Optional[str] = None
    min_value: Optional[float] = None
    max_value: Optional[float] = None
    search: Optional[str] = None
    sort_by: Literal["newest", "ending", "value", "popular"] = "newest"
    page: int = Field(1, ge=1)
    limit: int = Field(20, ge=1, le=50)


class CampaignResponse(BaseModel):
    id: str
    venue_id: str
    title: str
    description: str
    cover_image: Optional[str] = None
    category: str
    deal_type: DealTypeDB
    offer_description: str
    offer_value: float
    discount_amount: Optional[str] = None
    coupon_code: Optional[str] = None
    address: Optional[str] = None
    location: str
    start_date: datetime
    end_date: Optional[datetime] = None
    schedule_launch_date: Optional[datetime] = None
    spots_total: int
    spots_used: int
    spots_remaining: int
    total_applicants: int
    total_accepted: int
    required_platforms: List[ContentTypeDB]
    requires_photo: Optional[bool] = False
    requires_video: Optional[bool] = False
    min_followers: Optional[int] = None
    min_engagement_rate: Optional[float] = None
    tags: Optional[List[str]] = None
    status: CampaignStatusDB
    created_at: Optional[datetime] = None
    venue: Optional[VenueSummary] = None

    class Config:
        from_attributes = True


class CampaignSummary(BaseModel):
    id: str
    title: str
    offer_description: str
    offer_value: float
    status: CampaignStatusDB
    venue: Optional[VenueSummary] = None

    class Config:
        from_attributes = True


# ============================================================================
# APPLICATION SCHEMAS
# ============================================================================

class ApplicationCreate(BaseModel):
    creator_note: Optional[str] = Field(None, max_length=500)


class ApplicationUpdate(BaseModel):
    status: ApplicationStatusDB
    venue_note: Optional[str] = Field(None, max_length=500)
    visit_date: Optional[datetime] = None

    @field_validator("visit_date")
    @classmethod
    def normalize_visit_date(cls, value):
        return _naive_utc(value)


class ApplicationStatusCheck(BaseModel):
    campaign_ids: List[str] = Field(..., min_length=1, max_length=100)


class ApplicationResponse(BaseModel):
    id: str
    campaign_id: str
    creator_id: str
    status: ApplicationStatusDB
    creator_note: Optional[str] = None
    venue_note: Optional[str] = None
    applied_at: Optional[datetime] = None
    reviewed_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    visit_date: Optional[datetime] = None
    campaign: Optional[CampaignSummary] = None
    creator: Optional[CreatorSummary] = None

    class Config:
        from_attributes = True


# ============================================================================
# REVIEW SCHEMAS
# ============================================================================

class ReviewCreate(BaseModel):
    rating: int = Field(..., ge=1, le=5)
    comment: Optional[str] = Field(None, max_length=1000)


class ReviewResponse(BaseModel):
    id: str
    application_id: str
    reviewer_id: str
    reviewee_id: str
    reviewer_type: UserType
    rating: int
    comment: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ReviewStats(BaseModel):
    average_rating: Optional[float] = None
    total_reviews: int = 0


class RatingBucket(BaseModel):
    stars: int
    count: int


# ============================================================================
# MESSAGING SCHEMAS
# ============================================================================

class ConversationCreate(BaseModel):
    recipient_id: str = Field(..., min_length=1, max_length=36)
    recipient_type: UserType
    message: str = Field(..., min_length=1, max_length=2000)
    application_id: Optional[str] = Field(None, max_length=36)


class MessageCreate(BaseModel):
    content: str = Field(..., min_length=1, max_length=2000)
    attachment_url: Optional[str] = Field(None, max_length=500)
    attachment_type: Optional[AttachmentTypeDB] = None


class MessageResponse(BaseModel):
    id: str
    conversation_id: str
    sequence: int
    sender_id: str
    sender_type: UserType
    content: str
    attachment_url: Optional[str] = None
    attachment_type: Optional[AttachmentTypeDB] = None
    is_read: bool
    read_at: Optional[datetime] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ConversationResponse(BaseModel):
    id: str
    creator_id: str
    venue_id: str
    application_id: Optional[str] = None
    last_message_at: Optional[datetime] = None
    creator_unread_count: int
    venue_unread_count: int
    creator: Optional[CreatorSummary] = None
    venue: Optional[VenueSummary] = None

    class Config:
        from_attributes = True


# ============================================================================
# NOTIFICATION / ACTIVITY SCHEMAS
# ============================================================================

class NotificationResponse(BaseModel):
    id: str
    user_type: UserType
    type: str
    title: str
    message: Optional[str] = None
    data: Optional[dict] = None
    read: bool
    read_at: Optional[datetime] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ActivityResponse(BaseModel):
    id: str
    type: str
    action: str = Field(validation_alias="message")
    metadata: Optional[dict] = Field(None, validation_alias="metadata_json")
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class FavoriteResponse(BaseModel):
    id: str
    campaign_id: str
    created_at: Optional[datetime] = None
    campaign: Optional[CampaignSummary] = None

    class Config:
        from_attributes = True
