from datetime import datetime, timedelta

import pytest

from database.models import UserType
from database.marketplace_models import Conversation, Message, Notification
from services.messaging_service import MessagingService
from services.errors import Forbidden, NotFound, ValidationError


def conversation_row(db, conversation_id):
    db.expire_all()
    return db.query(Conversation).filter(Conversation.id == conversation_id).one()


@pytest.fixture
def opened(db, creator, venue):
    conversation, _ = MessagingService(db).start_or_get_conversation(
        creator.id, UserType.CREATOR, venue.id, UserType.VENUE, "Hi! Is the brunch offer still open?"
    )
    return conversation


# ============================================================================
# SERVICE
# ============================================================================

def test_start_reuses_conversation_per_pair(db, creator, venue, opened):
    again, message = MessagingService(db).start_or_get_conversation(
        creator.id, UserType.CREATOR, venue.id, UserType.VENUE, "Following up"
    )

    assert again.id == opened.id
    assert message.content == "Following up"
    assert db.query(Conversation).count() == 1
    assert db.query(Message).filter(Message.conversation_id == opened.id).count() == 2
    assert conversation_row(db, opened.id).venue_unread_count == 2


def test_venue_can_start_the_same_conversation(db, creator, venue, opened):
    conversation, _ = MessagingService(db).start_or_get_conversation(
        venue.id, UserType.VENUE, creator.id, UserType.CREATOR, "Yes it is!"
    )

    assert conversation.id == opened.id
    row = conversation_row(db, opened.id)
    assert row.creator_unread_count == 1
    assert row.venue_unread_count == 1


def test_same_role_messaging_is_rejected(db, creator, other_creator):
    with pytest.raises(ValidationError):
        MessagingService(db).start_or_get_conversation(
            creator.id, UserType.CREATOR, other_creator.id, UserType.CREATOR, "Hey"
        )


def test_missing_recipient(db, creator):
    with pytest.raises(NotFound) as exc:
        MessagingService(db).start_or_get_conversation(
            creator.id, UserType.CREATOR, "missing", UserType.VENUE, "Hello?"
        )
    assert exc.value.detail == "Recipient not found"


def test_missing_application_reference(db, creator, venue):
    with pytest.raises(NotFound):
        MessagingService(db).start_or_get_conversation(
            creator.id, UserType.CREATOR, venue.id, UserType.VENUE, "About my application", application_id="missing"
        )
    assert db.query(Conversation).count() == 0


def test_send_increments_counterpart_unread(db, creator, venue, opened):
    service = MessagingService(db)
    service.send_message(opened.id, venue.id, UserType.VENUE, "Sure, come by Saturday")
    service.send_message(opened.id, venue.id, UserType.VENUE, "Ask for Mia")

    row = conversation_row(db, opened.id)
    assert row.creator_unread_count == 2
    assert row.venue_unread_count == 1


def test_outsider_cannot_send(db, other_venue, opened):
    with pytest.raises(Forbidden):
        MessagingService(db).send_message(opened.id, other_venue.id, UserType.VENUE, "Hi")


def test_send_to_missing_conversation(db, venue):
    with pytest.raises(NotFound):
        MessagingService(db).send_message("missing", venue.id, UserType.VENUE, "Hi")


def test_open_conversation_marks_read(db, creator, venue, opened):
    service = MessagingService(db)
    service.send_message(opened.id, creator.id, UserType.CREATOR, "I can come on Saturday")

    conversation, messages = service.open_conversation(opened.id, venue.id, UserType.VENUE)

    assert [m.content for m in messages] == ["Hi! Is the brunch offer still open?", "I can come on Saturday"]
    assert all(m.is_read and m.read_at is not None for m in messages)
    assert conversation_row(db, opened.id).venue_unread_count == 0


def test_mark_read_leaves_own_messages(db, creator, venue, opened):
    service = MessagingService(db)
    service.send_message(opened.id, venue.id, UserType.VENUE, "Welcome!")

    assert service.mark_read(opened.id, venue.id, UserType.VENUE) == 1
    assert service.mark_read(opened.id, venue.id, UserType.VENUE) == 0

    db.expire_all()
    reply = db.query(Message).filter(Message.sender_type == UserType.VENUE).one()
    assert reply.is_read is False


def test_open_conversation_limits_history(db, creator, venue, opened):
    service = MessagingService(db)
    for i in range(4):
        service.send_message(opened.id, creator.id, UserType.CREATOR, f"Message {i}")

    _, messages = service.open_conversation(opened.id, venue.id, UserType.VENUE, limit=2)

    assert [m.content for m in messages] == ["Message 2", "Message 3"]


def test_messages_keep_send_order_within_one_timestamp(db, creator, venue, opened, monkeypatch):
    frozen = datetime(2024, 6, 1, 12, 0, 0)

    class FrozenDatetime(datetime):
        @classmethod
        def utcnow(cls):
            return frozen

    monkeypatch.setattr("services.messaging_service.datetime", FrozenDatetime)
    service = MessagingService(db)
    replies = ["Sure", "Saturday works", "Ask for Mia", "See you then"]
    for i, content in enumerate(replies):
        sender = (venue.id, UserType.VENUE) if i % 2 == 0 else (creator.id, UserType.CREATOR)
        service.send_message(opened.id, *sender, content)

    _, messages = service.open_conversation(opened.id, venue.id, UserType.VENUE, limit=3)

    assert [m.content for m in messages] == replies[1:]
    assert [m.sequence for m in messages] == [3, 4, 5]
    assert conversation_row(db, opened.id).message_count == 5


def test_list_orders_by_recent_activity(db, creator, venue, other_venue, opened):
    service = MessagingService(db)
    later, _ = service.start_or_get_conversation(
        creator.id, UserType.CREATOR, other_venue.id, UserType.VENUE, "Do you host tastings?"
    )
    db.query(Conversation).filter(Conversation.id == opened.id).update(
        {Conversation.last_message_at: datetime.utcnow() - timedelta(hours=1)}, synchronize_session=False
    )
    db.commit()

    items, total = service.list_conversations(creator.id, UserType.CREATOR)

    assert total == 2
    assert [c.id for c, _ in items] == [later.id, opened.id]
    assert items[0][1].content == "Do you host tastings?"


def test_messages_notify_recipient(db, venue, opened):
    notification = db.query(Notification).filter(Notification.user_id == venue.id).one()
    assert notification.type == "new_message"
    assert notification.data == {"conversation_id": opened.id}


# ============================================================================
# API
# ============================================================================

def test_conversation_flow_through_api(client, venue, creator_headers, venue_headers):
    started = client.post(
        "/api/conversations",
        json={"recipient_id": venue.id, "recipient_type": "venue", "message": "Hello from Alice"},
        headers=creator_headers,
    )
    assert started.status_code == 201
    data = started.json()["data"]
    conversation_id = data["id"]
    assert data["message"]["content"] == "Hello from Alice"
    assert data["unread_count"] == 0

    listing = client.get("/api/conversations", headers=venue_headers).json()["data"]
    assert listing["conversations"][0]["unread_count"] == 1
    assert listing["conversations"][0]["last_message"]["content"] == "Hello from Alice"

    reply = client.post(
        f"/api/conversations/{conversation_id}/messages", json={"content": "Hi Alice"}, headers=venue_headers
    )
    assert reply.status_code == 201

    opened = client.get(f"/api/conversations/{conversation_id}", headers=creator_headers).json()["data"]
    assert [m["content"] for m in opened["messages"]] == ["Hello from Alice", "Hi Alice"]
    assert opened["unread_count"] == 0

    marked = client.put(f"/api/conversations/{conversation_id}/read", headers=venue_headers)
    assert marked.json()["data"] == {"marked_read": 1}


def test_same_role_endpoint(client, other_creator, creator_headers):
    response = client.post(
        "/api/conversations",
        json={"recipient_id": other_creator.id, "recipient_type": "creator", "message": "Hey"},
        headers=creator_headers,
    )
    assert response.status_code == 400
    assert response.json() == {"success": False, "error": "Cannot message same user type"}


def test_outsider_cannot_open(client, opened, other_creator_headers):
    response = client.get(f"/api/conversations/{opened.id}", headers=other_creator_headers)
    assert response.status_code == 403
