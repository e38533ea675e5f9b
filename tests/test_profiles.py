import pytest

from conftest import make_campaign
from database.models import UserType
from database.marketplace_models import ApplicationStatusDB
from schemas.marketplace import CreatorUpdate
from services.application_service import ApplicationService
from services.profile_service import ProfileService
from services.review_service import ReviewService
from services.errors import Conflict, NotFound


# ============================================================================
# FAVORITES
# ============================================================================

def test_add_and_remove_favorite(db, creator, campaign):
    service = ProfileService(db)
    service.add_favorite(creator.id, campaign.id)

    with pytest.raises(Conflict):
        service.add_favorite(creator.id, campaign.id)

    favorites, total = service.list_favorites(creator.id)
    assert total == 1
    assert favorites[0].campaign.title == campaign.title

    assert service.remove_favorite(creator.id, campaign.id) is True
    assert service.remove_favorite(creator.id, campaign.id) is False
    assert service.list_favorites(creator.id)[1] == 0


def test_favorite_missing_campaign(db, creator):
    with pytest.raises(NotFound):
        ProfileService(db).add_favorite(creator.id, "missing")


def test_favorites_endpoints(client, creator_headers, campaign):
    added = client.post(f"/api/creators/me/favorites/{campaign.id}", headers=creator_headers)
    assert added.status_code == 201
    assert added.json()["data"]["campaign"]["id"] == campaign.id

    listing = client.get("/api/creators/me/favorites", headers=creator_headers).json()["data"]
    assert listing["pagination"]["total"] == 1

    assert client.delete(f"/api/creators/me/favorites/{campaign.id}", headers=creator_headers).status_code == 204
    assert client.delete(f"/api/creators/me/favorites/{campaign.id}", headers=creator_headers).status_code == 204


def test_venue_has_no_favorites(client, venue_headers, campaign):
    response = client.post(f"/api/creators/me/favorites/{campaign.id}", headers=venue_headers)
    assert response.status_code == 403


# ============================================================================
# STATS
# ============================================================================

@pytest.fixture
def history(db, venue, creator, other_creator):
    """One completed, one rejected and one pending application for alice."""
    service = ApplicationService(db)
    done = make_campaign(db, venue, title="Tasting menu", offer_value=120)
    rejected = make_campaign(db, venue, title="Cocktail night", offer_value=45)
    pending = make_campaign(db, venue, title="Lunch special", offer_value=25)

    application = service.apply(done.id, creator.id)
    service.transition(application.id, venue.id, ApplicationStatusDB.ACCEPTED)
    service.transition(application.id, venue.id, ApplicationStatusDB.COMPLETED)
    service.transition(service.apply(rejected.id, creator.id).id, venue.id, ApplicationStatusDB.REJECTED)
    service.apply(pending.id, creator.id)
    service.apply(pending.id, other_creator.id)
    return application


def test_creator_stats(db, creator, history):
    assert ProfileService(db).creator_stats(creator.id) == {
        "pending": 1,
        "accepted": 0,
        "completed": 1,
        "rejected": 1,
        "total_value_saved": 120.0,
    }


def test_venue_stats(db, venue, creator, history):
    ReviewService(db).create_review(history.id, creator.id, UserType.CREATOR, 5)

    stats = ProfileService(db).venue_stats(venue.id)

    assert stats["total_campaigns"] == 3
    assert stats["active_campaigns"] == 3
    assert stats["total_applications"] == 4
    assert stats["pending_applications"] == 2
    assert stats["accepted_applications"] == 0
    assert stats["completed_collaborations"] == 1
    assert stats["avg_rating"] == 5.0


def test_stats_endpoints_are_role_scoped(client, creator_headers, venue_headers, history):
    assert client.get("/api/creators/me/stats", headers=creator_headers).json()["data"]["completed"] == 1
    assert client.get("/api/venues/me/stats", headers=venue_headers).json()["data"]["total_campaigns"] == 3
    assert client.get("/api/venues/me/stats", headers=creator_headers).status_code == 403


def test_activity_feed_newest_first(client, venue_headers, history):
    response = client.get("/api/venues/me/activity", params={"limit": 3}, headers=venue_headers)

    entries = response.json()["data"]
    assert len(entries) == 3
    assert entries[0]["type"] == "application_received"
    assert "Bob" in entries[0]["action"]
    assert entries[0]["metadata"]["campaign_id"]


# ============================================================================
# PROFILES
# ============================================================================

def test_update_creator_ignores_nulls(db, creator):
    updated = ProfileService(db).update_creator(
        creator.id, CreatorUpdate(bio="Food lover in Berlin", name=None)
    )
    assert updated.bio == "Food lover in Berlin"
    assert updated.name == "Alice"


def test_my_profile_endpoints(client, creator_headers, venue_headers):
    me = client.get("/api/creators/me", headers=creator_headers).json()["data"]
    assert me["email"] == "alice@example.com"

    response = client.put("/api/venues/me", json={"city": "Berlin", "response_time": "< 1 day"}, headers=venue_headers)
    assert response.status_code == 200
    assert response.json()["data"]["city"] == "Berlin"


def test_public_creator_profile(client, creator, history):
    data = client.get(f"/api/creators/{creator.id}").json()["data"]
    assert data["username"] == "alice"
    assert "email" not in data
    assert data["stats"]["completed_campaigns"] == 1


def test_public_venue_profile(client, venue):
    data = client.get(f"/api/venues/{venue.id}").json()["data"]
    assert data["company_name"] == "Cafe Aroma"
    assert data["stats"] == {"average_rating": None, "total_reviews": 0}


def test_unknown_profiles(client):
    assert client.get("/api/creators/missing").status_code == 404
    assert client.get("/api/venues/missing").json() == {"success": False, "error": "Venue not found"}
