# Conversations Router for the Creator/Venue Marketplace
# Direct messaging between a creator and a venue

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from config.app_config import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from database.config import get_db
from auth.dependencies import CurrentUser, get_current_user
from auth.roles import unread_field
from schemas.marketplace import (
    ConversationCreate,
    MessageCreate,
    ConversationResponse,
    MessageResponse,
)
from schemas.envelope import success, pagination
from services.messaging_service import MessagingService

router = APIRouter(prefix="/conversations", tags=["Conversations"])


def _conversation(conversation, user: CurrentUser, last_message=None) -> dict:
    data = ConversationResponse.model_validate(conversation).model_dump(mode="json")
    data["unread_count"] = getattr(conversation, unread_field(user.user_type))
    if last_message is not None:
        data["last_message"] = _message(last_message)
    return data


def _message(message) -> dict:
    return MessageResponse.model_validate(message).model_dump(mode="json")


@router.get("")
def list_conversations(
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
):
    """Conversations with the most recent activity first."""
    items, total = MessagingService(db).list_conversations(
        current_user.id, current_user.user_type, page, limit
    )
    return success({
        "conversations": [_conversation(c, current_user, last) for c, last in items],
        "pagination": pagination(page, limit, total),
    })


@router.get("/{conversation_id}")
def open_conversation(
    conversation_id: str,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
):
    """Conversation with its recent messages; marks the other side's messages read."""
    conversation, messages = MessagingService(db).open_conversation(
        conversation_id, current_user.id, current_user.user_type
    )
    data = _conversation(conversation, current_user)
    data["messages"] = [_message(m) for m in messages]
    return success(data)


@router.post("", status_code=status.HTTP_201_CREATED)
def start_conversation(
    data: ConversationCreate,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
):
    conversation, message = MessagingService(db).start_or_get_conversation(
        current_user.id,
        current_user.user_type,
        data.recipient_id,
        data.recipient_type,
        data.message,
        data.application_id,
    )
    result = _conversation(conversation, current_user)
    result["message"] = _message(message)
    return success(result)


@router.post("/{conversation_id}/messages", status_code=status.HTTP_201_CREATED)
def send_message(
    conversation_id: str,
    data: MessageCreate,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
):
    message = MessagingService(db).send_message(
        conversation_id,
        current_user.id,
        current_user.user_type,
        data.content,
        data.attachment_url,
        data.attachment_type,
    )
    return success(_message(message))


@router.put("/{conversation_id}/read")
def mark_conversation_read(
    conversation_id: str,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
):
    marked = MessagingService(db).mark_read(conversation_id, current_user.id, current_user.user_type)
    return success({"marked_read": marked})
