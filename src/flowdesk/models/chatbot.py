"""Chatbot models for flowdesk.

A chatbot carries its knowledge base and integration flags inline, and
a denormalized counter of the conversations opened against it.
"""

from enum import StrEnum
from typing import ClassVar

from pydantic import Field, NonNegativeInt, field_validator

from flowdesk.models.base import Entity, Record
from flowdesk.utils.dates import now_iso

__all__ = [
    "Chatbot",
    "ChatbotStatus",
    "Faq",
    "Integrations",
    "Knowledge",
    "KnowledgeFile",
]


class ChatbotStatus(StrEnum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    TRAINING = "training"


class KnowledgeFile(Record):
    """Metadata of an uploaded training file. The content is not kept."""

    name: str
    size: NonNegativeInt = 0
    type: str = ""
    uploaded_at: str = Field(default_factory=now_iso)


class Faq(Record):
    question: str
    answer: str


class Knowledge(Record):
    """Training corpus attached to a chatbot."""

    files: list[KnowledgeFile] = Field(default_factory=list)
    urls: list[str] = Field(default_factory=list)
    faqs: list[Faq] = Field(default_factory=list)
    text: str = ""


class Integrations(Record):
    """Messaging channels a chatbot is published to."""

    whatsapp: bool = False
    telegram: bool = False


class Chatbot(Entity):
    """A configured conversational agent.

    Attributes:
        name: Display name, required
        description: Free-form description
        status: active, inactive or training
        language: Reply language code
        personality: Tone preset
        knowledge: Attached knowledge base
        integrations: Enabled messaging channels
        conversations_count: Number of conversations opened against the bot
    """

    entity_name: ClassVar[str] = "chatbot"

    name: str
    description: str = ""
    status: ChatbotStatus = ChatbotStatus.ACTIVE
    language: str = "es"
    personality: str = "friendly"
    knowledge: Knowledge = Field(default_factory=Knowledge)
    integrations: Integrations = Field(default_factory=Integrations)
    conversations_count: NonNegativeInt = 0
    created_at: str
    updated_at: str | None = None

    @field_validator("name")
    @classmethod
    def _require_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("name is required")
        return value
