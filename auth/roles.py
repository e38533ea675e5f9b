# Role-Based Access Control for the Creator/Venue Marketplace
# This module defines user roles, permissions and role-indexed lookups

from enum import Enum
from typing import List, Set

from database.models import UserType


class Permission(str, Enum):
    """Fine-grained permissions for the platform."""

    # Venue permissions
    MANAGE_CAMPAIGNS = "manage_campaigns"
    REVIEW_APPLICATIONS = "review_applications"
    VIEW_VENUE_DASHBOARD = "view_venue_dashboard"

    # Creator permissions
    APPLY_TO_CAMPAIGNS = "apply_to_campaigns"
    MANAGE_FAVORITES = "manage_favorites"
    VIEW_CREATOR_DASHBOARD = "view_creator_dashboard"

    # Common permissions
    BROWSE_CAMPAIGNS = "browse_campaigns"
    LEAVE_REVIEWS = "leave_reviews"
    SEND_MESSAGES = "send_messages"
    VIEW_NOTIFICATIONS = "view_notifications"
    UPDATE_PROFILE = "update_profile"


_COMMON = {
    Permission.BROWSE_CAMPAIGNS,
    Permission.LEAVE_REVIEWS,
    Permission.SEND_MESSAGES,
    Permission.VIEW_NOTIFICATIONS,
    Permission.UPDATE_PROFILE,
}

# Role to permissions mapping
ROLE_PERMISSIONS: dict[UserType, Set[Permission]] = {
    UserType.VENUE: {
        Permission.MANAGE_CAMPAIGNS,
        Permission.REVIEW_APPLICATIONS,
        Permission.VIEW_VENUE_DASHBOARD,
        *_COMMON,
    },
    UserType.CREATOR: {
        Permission.APPLY_TO_CAMPAIGNS,
        Permission.MANAGE_FAVORITES,
        Permission.VIEW_CREATOR_DASHBOARD,
        *_COMMON,
    },
}


def get_permissions_for_role(user_type: UserType) -> Set[Permission]:
    """Get all permissions for a given user type."""
    return ROLE_PERMISSIONS.get(user_type, set())


def has_any_permission(user_type: UserType, permissions: List[Permission]) -> bool:
    """Check if a user type has any of the given permissions."""
    user_permissions = get_permissions_for_role(user_type)
    return any(p in user_permissions for p in permissions)


# ============================================================================
# ROLE-INDEXED LOOKUPS
# ============================================================================

_COUNTERPART = {
    UserType.CREATOR: UserType.VENUE,
    UserType.VENUE: UserType.CREATOR,
}

# Conversation columns owned by each side
_UNREAD_FIELD = {
    UserType.CREATOR: "creator_unread_count",
    UserType.VENUE: "venue_unread_count",
}

_ID_FIELD = {
    UserType.CREATOR: "creator_id",
    UserType.VENUE: "venue_id",
}


def counterpart(user_type: UserType) -> UserType:
    """The other side of a creator/venue pair."""
    return _COUNTERPART[UserType(user_type)]


def unread_field(user_type: UserType) -> str:
    return _UNREAD_FIELD[UserType(user_type)]


def id_field(user_type: UserType) -> str:
    return _ID_FIELD[UserType(user_type)]
