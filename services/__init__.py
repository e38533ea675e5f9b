# Services Module for the Creator/Venue Marketplace
# Business logic shared by the API routers and the housekeeping worker

from services.notification_service import NotificationService, NotificationType
from services.activity_logger import ActivityLogger, ActivityType
from services.campaign_service import CampaignService
from services.application_service import ApplicationService
from services.review_service import ReviewService
from services.messaging_service import MessagingService
from services.profile_service import ProfileService

__all__ = [
    'NotificationService',
    'NotificationType',
    'ActivityLogger',
    'ActivityType',
    'CampaignService',
    'ApplicationService',
    'ReviewService',
    'MessagingService',
    'ProfileService',
]
