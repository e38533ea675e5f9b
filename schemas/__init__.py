# Schemas module for the Creator/Venue Marketplace
# Request validation, ORM-backed responses and the JSON envelope

from schemas.marketplace import (
    # Auth
    CreatorRegister,
    VenueRegister,
    LoginRequest,
    RefreshRequest,

    # Profiles
    CreatorUpdate,
    VenueUpdate,
    CreatorSummary,
    CreatorProfileResponse,
    CreatorAccountResponse,
    VenueSummary,
    VenueProfileResponse,
    VenueAccountResponse,

    # Campaigns
    CampaignCreate,
    CampaignUpdate,
    CampaignStatusUpdate,
    CampaignFilters,
    CampaignResponse,
    CampaignSummary,

    # Applications
    ApplicationCreate,
    ApplicationUpdate,
    ApplicationStatusCheck,
    ApplicationResponse,

    # Reviews
    ReviewCreate,
    ReviewResponse,
    ReviewStats,
    RatingBucket,

    # Messaging
    ConversationCreate,
    MessageCreate,
    MessageResponse,
    ConversationResponse,

    # Notifications / activity / favorites
    NotificationResponse,
    ActivityResponse,
    FavoriteResponse,
)
from schemas.envelope import ErrorResponse, success, pagination, error

__all__ = [
    # Auth
    "CreatorRegister",
    "VenueRegister",
    "LoginRequest",
    "RefreshRequest",

    # Profiles
    "CreatorUpdate",
    "VenueUpdate",
    "CreatorSummary",
    "CreatorProfileResponse",
    "CreatorAccountResponse",
    "VenueSummary",
    "VenueProfileResponse",
    "VenueAccountResponse",

    # Campaigns
    "CampaignCreate",
    "CampaignUpdate",
    "CampaignStatusUpdate",
    "CampaignFilters",
    "CampaignResponse",
    "CampaignSummary",

    # Applications
    "ApplicationCreate",
    "ApplicationUpdate",
    "ApplicationStatusCheck",
    "ApplicationResponse",

    # Reviews
    "ReviewCreate",
    "ReviewResponse",
    "ReviewStats",
    "RatingBucket",

    # Messaging
    "ConversationCreate",
    "MessageCreate",
    "MessageResponse",
    "ConversationResponse",

    # Notifications / activity / favorites
    "NotificationResponse",
    "ActivityResponse",
    "FavoriteResponse",

    # Envelope
    "ErrorResponse",
    "success",
    "pagination",
    "error",
]
