# Auth Router for the Creator/Venue Marketplace
# Registration and login per account type, token refresh and the current-user lookup

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
import logging

from database.config import get_db
from database.models import Creator, Venue, UserType, AccountStatus
from auth.utils import (
    Token,
    get_password_hash,
    verify_password,
    create_access_token,
    create_refresh_token,
    decode_refresh_token,
)
from auth.dependencies import CurrentUser, get_current_user, load_account
from schemas.marketplace import (
    CreatorRegister,
    VenueRegister,
    LoginRequest,
    RefreshRequest,
    CreatorAccountResponse,
    VenueAccountResponse,
)
from schemas.envelope import success
from services.errors import Conflict, Unauthenticated, Forbidden

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Auth"])

ACCOUNT_MODELS = {
    UserType.CREATOR: Creator,
    UserType.VENUE: Venue,
}


def _account_response(account, user_type: UserType) -> dict:
    schema = CreatorAccountResponse if user_type == UserType.CREATOR else VenueAccountResponse
    return schema.model_validate(account).model_dump(mode="json")


def _token_payload(account, user_type: UserType) -> dict:
    token = Token(
        access_token=create_access_token(account.id, user_type),
        refresh_token=create_refresh_token(account.id, user_type),
        user_type=user_type,
    )
    payload = token.model_dump(mode="json")
    payload["user"] = _account_response(account, user_type)
    return payload


def _email_taken(db: Session, email: str) -> bool:
    return any(
        db.query(model.id).filter(model.email == email).first()
        for model in ACCOUNT_MODELS.values()
    )


def _save(db: Session, account, conflict_detail: str):
    db.add(account)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise Conflict(conflict_detail)
    db.refresh(account)
    return account


def _login(db: Session, credentials: LoginRequest, user_type: UserType) -> dict:
    model = ACCOUNT_MODELS[user_type]
    account = db.query(model).filter(model.email == credentials.email.lower()).first()
    if not account or not verify_password(credentials.password, account.password_hash):
        raise Unauthenticated("Invalid email or password")
    if account.status == AccountStatus.SUSPENDED:
        raise Forbidden("Account is suspended")
    return success(_token_payload(account, user_type))


# ============================================================================
# REGISTRATION
# ============================================================================

@router.post("/creator/register", status_code=status.HTTP_201_CREATED)
def register_creator(data: CreatorRegister, db: Session = Depends(get_db)):
    """Register a creator account and return access/refresh tokens."""
    email = data.email.lower()
    if _email_taken(db, email):
        raise Conflict("Email already registered")
    if db.query(Creator.id).filter(Creator.username == data.username).first():
        raise Conflict("Username already taken")

    fields = data.model_dump(exclude={"password", "email"})
    creator = _save(
        db,
        Creator(email=email, password_hash=get_password_hash(data.password), **fields),
        "Email or username already registered",
    )
    logger.info(f"Registered creator {creator.id}")
    return success(_token_payload(creator, UserType.CREATOR))


@router.post("/venue/register", status_code=status.HTTP_201_CREATED)
def register_venue(data: VenueRegister, db: Session = Depends(get_db)):
    """Register a venue account and return access/refresh tokens."""
    email = data.email.lower()
    if _email_taken(db, email):
        raise Conflict("Email already registered")

    fields = data.model_dump(exclude={"password", "email"})
    venue = _save(
        db,
        Venue(email=email, password_hash=get_password_hash(data.password), **fields),
        "Email already registered",
    )
    logger.info(f"Registered venue {venue.id}")
    return success(_token_payload(venue, UserType.VENUE))


# ============================================================================
# LOGIN / TOKENS
# ============================================================================

@router.post("/creator/login")
def login_creator(credentials: LoginRequest, db: Session = Depends(get_db)):
    return _login(db, credentials, UserType.CREATOR)


@router.post("/venue/login")
def login_venue(credentials: LoginRequest, db: Session = Depends(get_db)):
    return _login(db, credentials, UserType.VENUE)


@router.post("/refresh")
def refresh(body: RefreshRequest, db: Session = Depends(get_db)):
    """Exchange a refresh token for a new token pair."""
    token_data = decode_refresh_token(body.refresh_token)
    if token_data is None:
        raise Unauthenticated("Invalid refresh token")

    account = load_account(db, token_data.user_id, token_data.user_type)
    if account is None:
        raise Unauthenticated("User not found")
    return success(_token_payload(account, token_data.user_type))


@router.get("/me")
def me(current_user: CurrentUser = Depends(get_current_user), db: Session = Depends(get_db)):
    account = load_account(db, current_user.id, current_user.user_type)
    return success({
        "user_type": current_user.user_type.value,
        "user": _account_response(account, current_user.user_type),
    })
