from datetime import datetime, timedelta

import pytest

from conftest import campaign_payload, make_campaign, make_venue
from database.models import Venue
from database.marketplace_models import (
    Application,
    Campaign,
    Favorite,
    ApplicationStatusDB,
    CampaignStatusDB,
)
from schemas.marketplace import CampaignFilters, CampaignUpdate
from services.application_service import ApplicationService
from services.campaign_service import CampaignService
from services.errors import Forbidden, InvalidState, NotFound, ValidationError


def venue_campaign_count(db, venue):
    db.expire_all()
    return db.query(Venue).filter(Venue.id == venue.id).one().total_campaigns


# ============================================================================
# CREATE / UPDATE
# ============================================================================

def test_create_defaults_to_active_and_counts_campaign(db, venue):
    campaign = make_campaign(db, venue)

    assert campaign.status == CampaignStatusDB.ACTIVE
    assert campaign.spots_used == 0
    assert campaign.required_platforms == ["instagram_post"]
    assert venue_campaign_count(db, venue) == 1


def test_future_launch_date_creates_draft(db, venue):
    launch = (datetime.utcnow() + timedelta(days=2)).isoformat()
    campaign = make_campaign(db, venue, schedule_launch_date=launch)
    assert campaign.status == CampaignStatusDB.DRAFT


def test_update_merges_fields(db, venue, campaign):
    updated = CampaignService(db).update(
        campaign.id, venue.id, CampaignUpdate(title="Bottomless brunch", offer_value=80)
    )
    assert updated.title == "Bottomless brunch"
    assert updated.offer_value == 80
    assert updated.location == "Berlin Mitte"


def test_update_cannot_drop_spots_below_used(db, venue, creator, other_creator, campaign):
    service = ApplicationService(db)
    for applicant in (creator, other_creator):
        service.transition(service.apply(campaign.id, applicant.id).id, venue.id, ApplicationStatusDB.ACCEPTED)
    db.expire_all()

    with pytest.raises(ValidationError):
        CampaignService(db).update(campaign.id, venue.id, CampaignUpdate(spots_total=1))

    updated = CampaignService(db).update(campaign.id, venue.id, CampaignUpdate(spots_total=2))
    assert updated.spots_total == 2


def test_update_status_in_payload_uses_transition_table(db, venue, campaign):
    service = CampaignService(db)
    service.update(campaign.id, venue.id, CampaignUpdate(status=CampaignStatusDB.COMPLETED))

    with pytest.raises(InvalidState):
        service.update(campaign.id, venue.id, CampaignUpdate(status=CampaignStatusDB.ACTIVE))


def test_update_requires_owner(db, other_venue, campaign):
    with pytest.raises(Forbidden):
        CampaignService(db).update(campaign.id, other_venue.id, CampaignUpdate(title="Hijacked"))


# ============================================================================
# STATUS
# ============================================================================

def test_status_round_trip_pause_and_resume(db, venue, campaign):
    service = CampaignService(db)
    assert service.update_status(campaign.id, venue.id, CampaignStatusDB.PAUSED).status == CampaignStatusDB.PAUSED
    assert service.update_status(campaign.id, venue.id, CampaignStatusDB.ACTIVE).status == CampaignStatusDB.ACTIVE


def test_same_status_is_noop(db, venue, campaign):
    assert CampaignService(db).update_status(campaign.id, venue.id, CampaignStatusDB.ACTIVE).status == CampaignStatusDB.ACTIVE


def test_terminal_status_cannot_be_left(db, venue, campaign):
    service = CampaignService(db)
    service.update_status(campaign.id, venue.id, CampaignStatusDB.CANCELLED)
    with pytest.raises(InvalidState):
        service.update_status(campaign.id, venue.id, CampaignStatusDB.ACTIVE)


# ============================================================================
# DELETE
# ============================================================================

def test_delete_with_open_application_is_refused(db, venue, creator, campaign):
    ApplicationService(db).apply(campaign.id, creator.id)

    with pytest.raises(InvalidState):
        CampaignService(db).delete(campaign.id, venue.id)
    assert db.query(Campaign).count() == 1


def test_delete_removes_closed_applications_and_favorites(db, venue, creator, campaign):
    service = ApplicationService(db)
    application = service.apply(campaign.id, creator.id)
    service.cancel(application.id, creator.id)
    db.add(Favorite(creator_id=creator.id, campaign_id=campaign.id))
    db.commit()

    CampaignService(db).delete(campaign.id, venue.id)

    db.expire_all()
    assert db.query(Campaign).count() == 0
    assert db.query(Application).count() == 0
    assert db.query(Favorite).count() == 0
    assert venue_campaign_count(db, venue) == 0


def test_delete_missing_campaign(db, venue):
    with pytest.raises(NotFound):
        CampaignService(db).delete("missing", venue.id)


# ============================================================================
# SEARCH
# ============================================================================

@pytest.fixture
def catalog(db, venue):
    other = make_venue(db, "Yoga Loft", category="Fitness")
    brunch = make_campaign(db, venue, title="Weekend brunch", offer_value=40, location="Berlin Mitte")
    spa = make_campaign(
        db, other, title="Spa day", category="Wellness", offer_value=150,
        location="Munich", description="Relax with a full spa day for content.",
        end_date=(datetime.utcnow() + timedelta(days=3)).isoformat(),
    )
    coffee = make_campaign(
        db, venue, title="Coffee tasting", offer_value=15, location="Berlin Kreuzberg",
        offer_description="Specialty coffee flight",
    )
    return brunch, spa, coffee


def search(db, **kwargs):
    campaigns, total = CampaignService(db).search(CampaignFilters(**kwargs))
    return [c.title for c in campaigns], total


def test_search_filters(db, catalog):
    assert search(db, city="berlin")[1] == 2
    assert search(db, category="Wellness")[0] == ["Spa day"]
    assert set(search(db, min_value=20, max_value=100)[0]) == {"Weekend brunch"}
    assert search(db, search="SPECIALTY")[0] == ["Coffee tasting"]


def test_search_sorts(db, catalog):
    titles, _ = search(db, sort_by="value")
    assert titles == ["Spa day", "Weekend brunch", "Coffee tasting"]

    titles, _ = search(db, sort_by="newest")
    assert titles[0] == "Coffee tasting"


def test_search_paginates(db, catalog):
    titles, total = search(db, page=2, limit=2, sort_by="value")
    assert total == 3
    assert titles == ["Coffee tasting"]


def test_list_endpoint_includes_venue_summary(client, catalog):
    response = client.get("/api/campaigns", params={"sort_by": "value", "limit": 2})
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["pagination"] == {"page": 1, "limit": 2, "total": 3, "totalPages": 2}
    assert data["campaigns"][0]["venue"]["company_name"] == "Yoga Loft"
    assert data["campaigns"][0]["spots_remaining"] == 3


# ============================================================================
# API
# ============================================================================

def test_create_endpoint(client, db, venue, venue_headers):
    response = client.post("/api/campaigns", json=campaign_payload(), headers=venue_headers)
    assert response.status_code == 201
    data = response.json()["data"]
    assert data["status"] == "active"
    assert data["venue_id"] == venue.id


def test_create_endpoint_validates(client, venue_headers):
    response = client.post(
        "/api/campaigns",
        json=campaign_payload(spots_total=0, required_platforms=[]),
        headers=venue_headers,
    )
    assert response.status_code == 400
    fields = {d["field"] for d in response.json()["details"]}
    assert {"spots_total", "required_platforms"} <= fields


def test_creator_cannot_create_campaign(client, creator_headers):
    response = client.post("/api/campaigns", json=campaign_payload(), headers=creator_headers)
    assert response.status_code == 403


def test_status_endpoint_rejects_illegal_transition(client, venue_headers, campaign):
    done = client.patch(f"/api/campaigns/{campaign.id}/status", json={"status": "completed"}, headers=venue_headers)
    assert done.status_code == 200

    response = client.patch(f"/api/campaigns/{campaign.id}/status", json={"status": "paused"}, headers=venue_headers)
    assert response.status_code == 400
    assert response.json()["error"] == "Campaign cannot move from 'completed' to 'paused'"


def test_get_and_delete_endpoints(client, venue_headers, campaign):
    assert client.get(f"/api/campaigns/{campaign.id}").json()["data"]["title"] == campaign.title

    assert client.delete(f"/api/campaigns/{campaign.id}", headers=venue_headers).status_code == 204
    missing = client.get(f"/api/campaigns/{campaign.id}")
    assert missing.status_code == 404
    assert missing.json() == {"success": False, "error": "Campaign not found"}


def test_my_campaigns(client, db, venue, venue_headers, other_venue):
    make_campaign(db, venue)
    make_campaign(db, other_venue)

    data = client.get("/api/campaigns/my", headers=venue_headers).json()["data"]
    assert data["pagination"]["total"] == 1


# ============================================================================
# HOUSEKEEPING
# ============================================================================

def test_launch_scheduled_activates_due_drafts(db, venue):
    launch = datetime.utcnow() + timedelta(hours=1)
    campaign = make_campaign(db, venue, schedule_launch_date=launch.isoformat())
    service = CampaignService(db)

    assert service.launch_scheduled(now=datetime.utcnow()) == 0
    assert service.launch_scheduled(now=launch + timedelta(minutes=1)) == 1

    db.expire_all()
    assert db.get(Campaign, campaign.id).status == CampaignStatusDB.ACTIVE


def test_close_expired_completes_active_and_paused(db, venue):
    ended = (datetime.utcnow() - timedelta(days=1)).isoformat()
    active = make_campaign(db, venue, end_date=ended)
    paused = make_campaign(db, venue, end_date=ended)
    running = make_campaign(db, venue)
    CampaignService(db).update_status(paused.id, venue.id, CampaignStatusDB.PAUSED)

    assert CampaignService(db).close_expired() == 2

    db.expire_all()
    assert db.get(Campaign, active.id).status == CampaignStatusDB.COMPLETED
    assert db.get(Campaign, paused.id).status == CampaignStatusDB.COMPLETED
    assert db.get(Campaign, running.id).status == CampaignStatusDB.ACTIVE
