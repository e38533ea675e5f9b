# Authentication and Authorization Decorators for the Creator/Venue Marketplace
# These dependencies provide easy-to-use access control for API endpoints

from fastapi import HTTPException, status, Depends

from auth.roles import Permission, has_any_permission
from auth.dependencies import CurrentUser, get_current_user
from database.models import UserType


class AuthError(HTTPException):
    """Custom exception for authentication/authorization errors."""

    def __init__(self, detail: str, status_code: int = status.HTTP_403_FORBIDDEN):
        super().__init__(status_code=status_code, detail=detail)


def require_user_type(*allowed_types: UserType):
    """
    Dependency that requires the user to be one of the specified types.

    Usage:
        @router.post("/campaigns")
        async def create_campaign(
            user: CurrentUser = Depends(require_user_type(UserType.VENUE))
        ):
            ...
    """
    async def dependency(current_user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
        if current_user.user_type not in allowed_types:
            raise AuthError(
                detail="Insufficient permissions",
                status_code=status.HTTP_403_FORBIDDEN
            )

        return current_user

    return dependency


def require_permission(*permissions: Permission):
    """
    Dependency that requires the user to have specific permissions.

    Usage:
        @router.post("/creators/me/favorites/{campaign_id}")
        async def add_favorite(
            user: CurrentUser = Depends(require_permission(Permission.MANAGE_FAVORITES))
        ):
            ...
    """
    async def dependency(current_user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
        if not has_any_permission(current_user.user_type, list(permissions)):
            raise AuthError(
                detail="You don't have permission to perform this action",
                status_code=status.HTTP_403_FORBIDDEN
            )

        return current_user

    return dependency
