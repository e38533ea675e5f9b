import pytest

from database.models import UserType
from database.marketplace_models import Notification
from services.notification_service import NotificationService, NotificationType


@pytest.fixture
def inbox(db, creator, venue):
    service = NotificationService(db)
    for i in range(3):
        service.emit(creator.id, UserType.CREATOR, NotificationType.SYSTEM, f"Notice {i}", "Hello")
    service.emit(venue.id, UserType.VENUE, NotificationType.SYSTEM, "Venue notice", "Hello")
    return service


def test_unknown_type_falls_back_to_system(db, creator):
    notification = NotificationService(db).emit(creator.id, UserType.CREATOR, "mystery", "Hi", "There")
    assert notification.type == "system"


def test_counts_are_scoped_to_account(db, creator, venue, inbox):
    assert inbox.get_unread_count(creator.id, UserType.CREATOR) == 3
    assert inbox.get_unread_count(venue.id, UserType.VENUE) == 1
    assert inbox.get_unread_count(creator.id, UserType.VENUE) == 0


def test_mark_read_and_read_all(db, creator, inbox):
    first = db.query(Notification).filter(Notification.user_id == creator.id).first()

    assert inbox.mark_read(first.id, creator.id, UserType.CREATOR) is True
    assert inbox.get_unread_count(creator.id, UserType.CREATOR) == 2
    assert inbox.mark_all_read(creator.id, UserType.CREATOR) == 2
    assert inbox.get_unread_count(creator.id, UserType.CREATOR) == 0


def test_cannot_touch_someone_elses_notification(db, creator, venue, inbox):
    theirs = db.query(Notification).filter(Notification.user_id == venue.id).one()

    assert inbox.mark_read(theirs.id, creator.id, UserType.CREATOR) is False
    assert inbox.delete(theirs.id, creator.id, UserType.CREATOR) is False
    assert db.query(Notification).filter(Notification.id == theirs.id).count() == 1


def test_list_unread_only(db, creator, inbox):
    first = db.query(Notification).filter(Notification.user_id == creator.id).first()
    inbox.mark_read(first.id, creator.id, UserType.CREATOR)

    notifications, total = inbox.list(creator.id, UserType.CREATOR, unread_only=True)
    assert total == 2
    assert all(not n.read for n in notifications)


def test_notification_endpoints(client, db, creator, creator_headers, inbox):
    listing = client.get("/api/notifications", params={"limit": 2}, headers=creator_headers).json()["data"]
    assert len(listing["notifications"]) == 2
    assert listing["unread_count"] == 3
    assert listing["pagination"] == {"page": 1, "limit": 2, "total": 3, "totalPages": 2}

    notification_id = listing["notifications"][0]["id"]
    read = client.put(f"/api/notifications/{notification_id}/read", headers=creator_headers)
    assert read.json()["data"] == {"id": notification_id, "read": True}

    count = client.get("/api/notifications/unread-count", headers=creator_headers).json()["data"]
    assert count == {"unread_count": 2}

    assert client.put("/api/notifications/read-all", headers=creator_headers).json()["data"] == {"marked_read": 2}

    assert client.delete(f"/api/notifications/{notification_id}", headers=creator_headers).status_code == 204
    missing = client.delete(f"/api/notifications/{notification_id}", headers=creator_headers)
    assert missing.status_code == 404
    assert missing.json()["error"] == "Notification not found"


def test_notifications_require_token(client):
    response = client.get("/api/notifications")
    assert response.status_code == 401
    assert response.json() == {"success": False, "error": "No token provided"}
