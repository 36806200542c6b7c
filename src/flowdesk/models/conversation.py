"""Conversation models for flowdesk."""

from enum import StrEnum
from typing import ClassVar, Literal

from pydantic import Field

from flowdesk.models.base import Entity, Record
from flowdesk.utils.dates import now_iso

__all__ = [
    "Channel",
    "Conversation",
    "ConversationStatus",
    "Message",
]


class Channel(StrEnum):
    WEB = "web"
    WHATSAPP = "whatsapp"
    TELEGRAM = "telegram"


class ConversationStatus(StrEnum):
    ACTIVE = "active"
    CLOSED = "closed"


class Message(Record):
    """One turn of a conversation."""

    role: Literal["user", "bot"]
    content: str
    timestamp: str = Field(default_factory=now_iso)


class Conversation(Entity):
    """Ordered exchange of messages between a user and a chatbot.

    ``bot_id`` is not checked against existing chatbots.
    """

    entity_name: ClassVar[str] = "conversation"

    bot_id: str
    messages: list[Message] = Field(default_factory=list)
    status: ConversationStatus = ConversationStatus.ACTIVE
    channel: Channel = Channel.WEB
    created_at: str
    updated_at: str | None = None
