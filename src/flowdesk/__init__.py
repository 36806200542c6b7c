"""flowdesk - persistence and view-state core for feed and chatbot dashboards.

This package provides:
- Entity models for RSS feeds, items, bundles, widgets, chatbots and conversations
- A persistence gateway per entity collection, over a key/value blob store
  (in-memory or Redis) or a MongoDB record store
- View-state controllers that own the dashboard snapshot and its intents

Example usage:
    from flowdesk import FeedDashboard, FlowdeskConfig, open_backend

    backend = await open_backend(FlowdeskConfig())
    dashboard = FeedDashboard.from_backend(backend, confirm=lambda message: True)
    await dashboard.load()
    await dashboard.create_feed({"name": "Tech News", "sourceUrl": "https://example.com"})
    await backend.close()
"""

__version__ = "0.1.0"

from flowdesk.backends import KeyValueBackend, MongoBackend, open_backend
from flowdesk.config import FlowdeskConfig, MongoSettings, RedisSettings
from flowdesk.constants import CollectionKey
from flowdesk.errors import FlowdeskError, NotFoundError, PersistenceError, ValidationError
from flowdesk.gateways import BlobCollectionGateway, DocumentCollectionGateway
from flowdesk.infra.memory import InMemoryKeyValueStore
from flowdesk.interfaces.storage import (
    EntityGatewayInterface,
    KeyValueStoreInterface,
    StorageBackendInterface,
)
from flowdesk.services import ChatbotDashboard, FeedDashboard

__all__ = [  # noqa: RUF022
    # Controllers
    "FeedDashboard",
    "ChatbotDashboard",
    # Backends
    "KeyValueBackend",
    "MongoBackend",
    "open_backend",
    "InMemoryKeyValueStore",
    # Gateways
    "BlobCollectionGateway",
    "DocumentCollectionGateway",
    "CollectionKey",
    # Config
    "FlowdeskConfig",
    "MongoSettings",
    "RedisSettings",
    # Errors
    "FlowdeskError",
    "NotFoundError",
    "PersistenceError",
    "ValidationError",
    # Interfaces
    "EntityGatewayInterface",
    "KeyValueStoreInterface",
    "StorageBackendInterface",
]
