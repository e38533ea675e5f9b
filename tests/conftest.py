"""
Pytest configuration: in-memory SQLite database, API client and account fixtures.
"""
import logging
import os
import sys
from datetime import datetime, timedelta

# Settings are read at import time, so they are pinned before the app is imported
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key")
os.environ["BCRYPT_ROUNDS"] = "4"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from database.config import get_db
from database.models import Base, Creator, Venue, UserType
from database import marketplace_models  # noqa: F401
from database.marketplace_models import DealTypeDB, ContentTypeDB
from auth.utils import create_access_token, get_password_hash
from schemas.marketplace import CampaignCreate
from services.campaign_service import CampaignService
from server import app

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    stream=sys.stdout
)

PASSWORD = "correct-horse-battery"


# =============================================================================
# Database
# =============================================================================

@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def client(session_factory):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


# =============================================================================
# Accounts
# =============================================================================

def make_creator(db, username="alice", **overrides) -> Creator:
    creator = Creator(
        email=overrides.pop("email", f"{username}@example.com"),
        password_hash=get_password_hash(PASSWORD),
        name=overrides.pop("name", username.capitalize()),
        username=username,
        **overrides,
    )
    db.add(creator)
    db.commit()
    db.refresh(creator)
    return creator


def make_venue(db, company_name="Cafe Aroma", **overrides) -> Venue:
    slug = company_name.lower().replace(" ", "")
    venue = Venue(
        email=overrides.pop("email", f"{slug}@example.com"),
        password_hash=get_password_hash(PASSWORD),
        company_name=company_name,
        category=overrides.pop("category", "Food & Drink"),
        **overrides,
    )
    db.add(venue)
    db.commit()
    db.refresh(venue)
    return venue


def auth_headers(account, user_type: UserType) -> dict:
    return {"Authorization": f"Bearer {create_access_token(account.id, user_type)}"}


@pytest.fixture
def creator(db):
    return make_creator(db, "alice")


@pytest.fixture
def other_creator(db):
    return make_creator(db, "bob")


@pytest.fixture
def venue(db):
    return make_venue(db, "Cafe Aroma")


@pytest.fixture
def other_venue(db):
    return make_venue(db, "Sushi Bar")


@pytest.fixture
def creator_headers(creator):
    return auth_headers(creator, UserType.CREATOR)


@pytest.fixture
def other_creator_headers(other_creator):
    return auth_headers(other_creator, UserType.CREATOR)


@pytest.fixture
def venue_headers(venue):
    return auth_headers(venue, UserType.VENUE)


# =============================================================================
# Campaigns
# =============================================================================

def campaign_payload(**overrides) -> dict:
    payload = {
        "title": "Free brunch for two",
        "description": "Visit our cafe and share your brunch experience.",
        "category": "Food & Drink",
        "deal_type": DealTypeDB.FREE_PRODUCT.value,
        "offer_description": "Brunch for two people",
        "offer_value": 60.0,
        "location": "Berlin Mitte",
        "start_date": (datetime.utcnow() - timedelta(days=1)).isoformat(),
        "end_date": (datetime.utcnow() + timedelta(days=30)).isoformat(),
        "spots_total": 3,
        "required_platforms": [ContentTypeDB.INSTAGRAM_POST.value],
    }
    payload.update(overrides)
    return payload


def make_campaign(db, venue, **overrides):
    return CampaignService(db).create(venue.id, CampaignCreate(**campaign_payload(**overrides)))


@pytest.fixture
def campaign(db, venue):
    return make_campaign(db, venue)
