"""Public entity models for flowdesk.

This module exports all persisted entity types.
"""

from flowdesk.models.base import Entity, Record
from flowdesk.models.bundle import Bundle, BundleStatus, SortField, SortOrder
from flowdesk.models.chatbot import (
    Chatbot,
    ChatbotStatus,
    Faq,
    Integrations,
    Knowledge,
    KnowledgeFile,
)
from flowdesk.models.conversation import Channel, Conversation, ConversationStatus, Message
from flowdesk.models.feed import (
    Feed,
    FeedItem,
    FeedStatus,
    FilterAction,
    FilterRule,
    FilterType,
    SourceType,
)
from flowdesk.models.views import ChatbotView, FeedView
from flowdesk.models.widget import Widget, WidgetStyle, WidgetTheme

__all__ = [
    "Bundle",
    "BundleStatus",
    "Channel",
    "Chatbot",
    "ChatbotStatus",
    "ChatbotView",
    "Conversation",
    "ConversationStatus",
    "Entity",
    "Faq",
    "Feed",
    "FeedItem",
    "FeedStatus",
    "FeedView",
    "FilterAction",
    "FilterRule",
    "FilterType",
    "Integrations",
    "Knowledge",
    "KnowledgeFile",
    "Message",
    "Record",
    "SortField",
    "SortOrder",
    "SourceType",
    "Widget",
    "WidgetStyle",
    "WidgetTheme",
]
