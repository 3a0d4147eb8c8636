"""
Conversation service.

A gift giver and a list owner can talk about an item without either seeing
who the other is. Messages change often, so they go stale after a minute.
"""

import logging

from pydantic import Field

from core.models import AnonymizedMessage, Conversation
from core.models.base import PayloadModel
from core.query_keys import ConversationKeys
from core.services.base import BaseService

logger = logging.getLogger(__name__)


class SendMessage(PayloadModel):
    message: str = Field(..., min_length=1, max_length=1000)


class ConversationService(BaseService):
    """Service for anonymized item conversations."""

    def start(self, item_id: str) -> Conversation:
        """Open (or reopen) the conversation about an item."""
        conversation = self._mutate(
            lambda: Conversation.model_validate(self.api.post(f"/conversations/items/{item_id}/start")),
            [],
        )
        self.cache.invalidate(ConversationKeys.messages(conversation.id))
        return conversation

    def messages(self, conversation_id: str, require_fresh: bool = False) -> list[AnonymizedMessage]:
        return self._query(
            ConversationKeys.messages(conversation_id),
            lambda: [
                AnonymizedMessage.model_validate(m)
                for m in self.api.get(f"/conversations/{conversation_id}/messages") or []
            ],
            stale_seconds=self.config.message_stale_seconds,
            require_fresh=require_fresh,
        )

    def send(self, conversation_id: str, message: str) -> dict:
        """
        Post a message.

        Raises:
            pydantic.ValidationError: Empty or oversized message (nothing sent)
        """
        payload = SendMessage(message=message).to_payload()
        body = self._mutate(
            lambda: self.api.post(f"/conversations/{conversation_id}/messages", json=payload),
            [ConversationKeys.messages(conversation_id)],
        )
        return body or {}
