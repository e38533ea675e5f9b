# Auth module for the Creator/Venue Marketplace
# Provides role-based access control and authentication dependencies

from auth.roles import (
    Permission,
    ROLE_PERMISSIONS,
    get_permissions_for_role,
    has_any_permission,
    counterpart,
    unread_field,
    id_field,
)

from auth.decorators import (
    AuthError,
    require_user_type,
    require_permission,
)

from auth.dependencies import (
    CurrentUser,
    get_current_user,
)

__all__ = [
    # Roles
    "Permission",
    "ROLE_PERMISSIONS",
    "get_permissions_for_role",
    "has_any_permission",
    "counterpart",
    "unread_field",
    "id_field",

    # Decorators
    "AuthError",
    "require_user_type",
    "require_permission",

    # Dependencies
    "CurrentUser",
    "get_current_user",
]
