# Authentication Dependencies for the Creator/Venue Marketplace
# Provides dependencies for getting the current user from JWT token

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session
from typing import Optional
from pydantic import BaseModel

from database.config import get_db
from database.models import Creator, Venue, UserType
from auth.utils import decode_access_token


security = HTTPBearer(auto_error=False)


class CurrentUser(BaseModel):
    """Authenticated caller as seen by the services."""
    id: str
    user_type: UserType
    email: str
    name: str


def load_account(db: Session, user_id: str, user_type: UserType):
    model = Creator if user_type == UserType.CREATOR else Venue
    return db.query(model).filter(model.id == user_id).first()


def to_current_user(account, user_type: UserType) -> CurrentUser:
    return CurrentUser(
        id=account.id,
        user_type=user_type,
        email=account.email,
        name=account.display_name,
    )


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Session = Depends(get_db)
) -> CurrentUser:
    """
    Validate JWT token and return current user.
    This is the core authentication dependency.
    """
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="No token provided",
            headers={"WWW-Authenticate": "Bearer"},
        )

    token_data = decode_access_token(credentials.credentials)
    if token_data is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        )

    account = load_account(db, token_data.user_id, token_data.user_type)
    if account is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found"
        )

    return to_current_user(account, token_data.user_type)

