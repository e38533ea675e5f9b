# Password hashing and JWT helpers

from datetime import datetime, timedelta
from typing import Optional
import logging

import bcrypt
from jose import jwt, JWTError
from pydantic import BaseModel

from config.app_config import (
    JWT_SECRET_KEY,
    JWT_ALGORITHM,
    JWT_EXPIRE_MINUTES,
    JWT_REFRESH_EXPIRE_DAYS,
    BCRYPT_ROUNDS,
)
from database.models import UserType

logger = logging.getLogger(__name__)


class Token(BaseModel):
    access_token: str
    refresh_token: Optional[str] = None
    token_type: str = "bearer"
    user_type: UserType


class TokenData(BaseModel):
    user_id: str
    user_type: UserType


def get_password_hash(password: str) -> str:
    salt = bcrypt.gensalt(rounds=BCRYPT_ROUNDS)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError as e:
        logger.error(f"Password verification failed: {e}")
        return False


def _encode(user_id: str, user_type: UserType, token_type: str, expires_delta: timedelta) -> str:
    payload = {
        "sub": user_id,
        "user_type": UserType(user_type).value,
        "type": token_type,
        "exp": datetime.utcnow() + expires_delta,
    }
    return jwt.encode(payload, JWT_SECRET_KEY, algorithm=JWT_ALGORITHM)


def _decode(token: str, token_type: str) -> Optional[TokenData]:
    try:
        payload = jwt.decode(token, JWT_SECRET_KEY, algorithms=[JWT_ALGORITHM])
    except JWTError:
        return None

    user_id = payload.get("sub")
    user_type = payload.get("user_type")
    if payload.get("type") != token_type:
        return None
    if not user_id or user_type not in {t.value for t in UserType}:
        return None
    return TokenData(user_id=user_id, user_type=UserType(user_type))


def create_access_token(user_id: str, user_type: UserType, expires_delta: Optional[timedelta] = None) -> str:
    """Issue a signed access token carrying the user id and user type."""
    return _encode(user_id, user_type, "access", expires_delta or timedelta(minutes=JWT_EXPIRE_MINUTES))


def create_refresh_token(user_id: str, user_type: UserType) -> str:
    return _encode(user_id, user_type, "refresh", timedelta(days=JWT_REFRESH_EXPIRE_DAYS))


def decode_access_token(token: str) -> Optional[TokenData]:
    """Decode and validate JWT token. Returns None when invalid or expired."""
    return _decode(token, "access")


def decode_refresh_token(token: str) -> Optional[TokenData]:
    return _decode(token, "refresh")
