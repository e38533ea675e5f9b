# Messaging Service
# One conversation per creator/venue pair with per-side unread counters

from sqlalchemy.orm import Session, joinedload
from sqlalchemy.exc import IntegrityError
from typing import List, Optional, Tuple
from datetime import datetime
import logging

from config.app_config import MESSAGE_HISTORY_LIMIT
from database.models import Creator, Venue, UserType
from database.marketplace_models import Conversation, Message, Application, AttachmentTypeDB
from auth.roles import counterpart, unread_field, id_field
from services import counters
from services.errors import NotFound, Forbidden, ValidationError
from services.notification_service import NotificationService

logger = logging.getLogger(__name__)

ACCOUNT_MODELS = {
    UserType.CREATOR: Creator,
    UserType.VENUE: Venue,
}


class MessagingService:
    def __init__(self, db: Session, notifier: Optional[NotificationService] = None):
        self.db = db
        self.notifier = notifier or NotificationService(db)

    # =========================================================================
    # HELPERS
    # =========================================================================

    def _account(self, user_id: str, user_type: UserType):
        model = ACCOUNT_MODELS[UserType(user_type)]
        return self.db.query(model).filter(model.id == user_id).first()

    def _participant_conversation(self, conversation_id: str, user_id: str, user_type: UserType) -> Conversation:
        conversation = self.db.query(Conversation).filter(Conversation.id == conversation_id).first()
        if not conversation:
            raise NotFound("Conversation not found")
        if getattr(conversation, id_field(user_type)) != user_id:
            raise Forbidden("You are not part of this conversation")
        return conversation

    def _append_message(
        self,
        conversation_id: str,
        sender_id: str,
        sender_type: UserType,
        content: str,
        attachment_url: Optional[str] = None,
        attachment_type: Optional[AttachmentTypeDB] = None,
    ) -> Message:
        now = datetime.utcnow()
        counters.increment(self.db, Conversation, conversation_id, "message_count")
        sequence = self.db.query(Conversation.message_count).filter(
            Conversation.id == conversation_id
        ).scalar()

        message = Message(
            conversation_id=conversation_id,
            sequence=sequence,
            sender_id=sender_id,
            sender_type=UserType(sender_type),
            content=content,
            attachment_url=attachment_url,
            attachment_type=attachment_type,
            is_read=False,
            created_at=now,
        )
        self.db.add(message)
        self.db.query(Conversation).filter(Conversation.id == conversation_id).update(
            {Conversation.last_message_at: now}, synchronize_session=False
        )
        return message

    # =========================================================================
    # OPERATIONS
    # =========================================================================

    def start_or_get_conversation(
        self,
        initiator_id: str,
        initiator_type: UserType,
        recipient_id: str,
        recipient_type: UserType,
        first_message: str,
        application_id: Optional[str] = None,
    ) -> Tuple[Conversation, Message]:
        """Reuse the pair's conversation (or open it) and post the first message."""
        initiator_type, recipient_type = UserType(initiator_type), UserType(recipient_type)
        if initiator_type == recipient_type:
            raise ValidationError("Cannot message same user type")

        recipient = self._account(recipient_id, recipient_type)
        if not recipient:
            raise NotFound("Recipient not found")
        if application_id and not self.db.query(Application.id).filter(Application.id == application_id).first():
            raise NotFound("Application not found")

        pair = {id_field(initiator_type): initiator_id, id_field(recipient_type): recipient_id}
        conversation = self.db.query(Conversation).filter_by(**pair).first()

        if conversation:
            counters.increment(self.db, Conversation, conversation.id, unread_field(recipient_type))
        else:
            conversation = Conversation(
                application_id=application_id,
                creator_unread_count=0,
                venue_unread_count=0,
                message_count=0,
                **pair,
            )
            setattr(conversation, unread_field(recipient_type), 1)
            self.db.add(conversation)
            try:
                self.db.flush()
            except IntegrityError:
                # The pair opened a conversation concurrently; post into that one
                self.db.rollback()
                conversation = self.db.query(Conversation).filter_by(**pair).one()
                counters.increment(self.db, Conversation, conversation.id, unread_field(recipient_type))

        message = self._append_message(conversation.id, initiator_id, initiator_type, first_message)
        self.db.commit()
        self.db.refresh(conversation)
        self.db.refresh(message)
        logger.info(f"{initiator_type.value} {initiator_id} messaged {recipient_type.value} {recipient_id}")

        sender = self._account(initiator_id, initiator_type)
        self.notifier.notify_new_message(
            recipient_id=recipient_id,
            recipient_type=recipient_type,
            sender_name=sender.display_name if sender else "Someone",
            conversation_id=conversation.id,
        )
        return conversation, message

    def send_message(
        self,
        conversation_id: str,
        sender_id: str,
        sender_type: UserType,
        content: str,
        attachment_url: Optional[str] = None,
        attachment_type: Optional[AttachmentTypeDB] = None,
    ) -> Message:
        sender_type = UserType(sender_type)
        conversation = self._participant_conversation(conversation_id, sender_id, sender_type)
        recipient_type = counterpart(sender_type)

        message = self._append_message(
            conversation.id, sender_id, sender_type, content, attachment_url, attachment_type
        )
        counters.increment(self.db, Conversation, conversation.id, unread_field(recipient_type))
        self.db.commit()
        self.db.refresh(message)

        sender = self._account(sender_id, sender_type)
        self.notifier.notify_new_message(
            recipient_id=getattr(conversation, id_field(recipient_type)),
            recipient_type=recipient_type,
            sender_name=sender.display_name if sender else "Someone",
            conversation_id=conversation.id,
        )
        return message

    def mark_read(self, conversation_id: str, reader_id: str, reader_type: UserType) -> int:
        """Reset the reader's unread counter and mark the other side's messages read."""
        reader_type = UserType(reader_type)
        conversation = self._participant_conversation(conversation_id, reader_id, reader_type)

        counters.reset(self.db, Conversation, conversation.id, unread_field(reader_type))
        marked = self.db.query(Message).filter(
            Message.conversation_id == conversation.id,
            Message.sender_type == counterpart(reader_type),
            Message.is_read == False,
        ).update({Message.is_read: True, Message.read_at: datetime.utcnow()}, synchronize_session=False)
        self.db.commit()
        return marked

    def open_conversation(
        self,
        conversation_id: str,
        reader_id: str,
        reader_type: UserType,
        limit: int = MESSAGE_HISTORY_LIMIT,
    ) -> Tuple[Conversation, List[Message]]:
        """Most recent messages, oldest first; opening counts as reading."""
        self.mark_read(conversation_id, reader_id, reader_type)

        conversation = self.db.query(Conversation).options(
            joinedload(Conversation.creator),
            joinedload(Conversation.venue),
        ).filter(Conversation.id == conversation_id).one()
        recent = self.db.query(Message).filter(
            Message.conversation_id == conversation_id
        ).order_by(Message.sequence.desc()).limit(limit).all()
        return conversation, list(reversed(recent))

    def list_conversations(
        self,
        user_id: str,
        user_type: UserType,
        page: int = 1,
        limit: int = 20,
    ) -> Tuple[List[Tuple[Conversation, Optional[Message]]], int]:
        user_type = UserType(user_type)
        query = self.db.query(Conversation).options(
            joinedload(Conversation.creator),
            joinedload(Conversation.venue),
        ).filter(getattr(Conversation, id_field(user_type)) == user_id)

        total = query.count()
        conversations = query.order_by(
            Conversation.last_message_at.desc(), Conversation.id
        ).offset((page - 1) * limit).limit(limit).all()

        items = []
        for conversation in conversations:
            last_message = self.db.query(Message).filter(
                Message.conversation_id == conversation.id
            ).order_by(Message.sequence.desc()).first()
            items.append((conversation, last_message))
        return items, total
