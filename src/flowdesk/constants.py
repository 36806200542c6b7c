"""Collection keys shared by every storage backend."""

from enum import StrEnum

__all__ = ["CollectionKey"]


class CollectionKey(StrEnum):
    """Key (blob store) or collection name (record store) per entity type."""

    FEEDS = "rssFeeds"
    FEED_ITEMS = "feedItems"
    BUNDLES = "bundles"
    WIDGETS = "widgets"
    CHATBOTS = "chatbots"
    CONVERSATIONS = "conversations"
