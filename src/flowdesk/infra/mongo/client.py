"""MongoDB client for flowdesk.

This module provides an async MongoDB client wrapper using Motor.
"""

from typing import TYPE_CHECKING, Any

from flowdesk.config import MongoSettings
from flowdesk.constants import CollectionKey
from flowdesk.errors import PersistenceError
from flowdesk.logging import get_logger
from flowdesk.utils.lazy_import import lazy_import

if TYPE_CHECKING:
    from motor.motor_asyncio import AsyncIOMotorCollection, AsyncIOMotorDatabase

__all__ = [
    "MongoClient",
]

logger = get_logger(__name__)

get_async_motor = lazy_import("motor.motor_asyncio", "AsyncIOMotorClient")

# collection -> secondary index fields
REFERENCE_INDEXES: dict[CollectionKey, tuple[str, ...]] = {
    CollectionKey.FEEDS: ("status",),
    CollectionKey.FEED_ITEMS: ("feedId",),
    CollectionKey.BUNDLES: (),
    CollectionKey.WIDGETS: (),
    CollectionKey.CHATBOTS: ("status",),
    CollectionKey.CONVERSATIONS: ("botId",),
}


class MongoClient:
    """Async MongoDB client wrapper.

    Owns the Motor client and hands out collections, prefixed as
    configured.

    Example:
        client = MongoClient(settings)
        await client.connect()
        await client.collection("rssFeeds").find_one({"id": feed_id})
        await client.disconnect()
    """

    def __init__(self, settings: MongoSettings) -> None:
        """Initialize client with settings.

        Args:
            settings: MongoDB connection settings
        """
        self._settings = settings
        self._client = None
        self._db = None

    async def connect(self) -> None:
        """Initialize connection to MongoDB."""
        if self._client is not None:
            return
        AsyncIOMotorClient = get_async_motor()  # noqa: N806

        uri = self._settings.uri.get_secret_value()
        client = AsyncIOMotorClient(uri)
        try:
            await client.admin.command("ping")
        except Exception as e:
            client.close()
            raise PersistenceError(f"Cannot connect to MongoDB: {e}") from e

        self._client = client
        self._db = client[self._settings.database]
        logger.info(
            "connected_to_mongodb",
            database=self._settings.database,
        )

    async def disconnect(self) -> None:
        """Close connection to MongoDB."""
        if self._client:
            self._client.close()
            self._client = None
            self._db = None
            logger.info("disconnected_from_mongodb")

    @property
    def db(self) -> "AsyncIOMotorDatabase[dict[str, Any]]":
        """Get database instance.

        Raises:
            PersistenceError: If not connected
        """
        if self._db is None:
            raise PersistenceError("MongoClient not connected. Call connect() first.")
        return self._db

    def collection(self, name: str) -> "AsyncIOMotorCollection[dict[str, Any]]":
        """Get collection with optional prefix."""
        full_name = f"{self._settings.collection_prefix}{name}"
        return self.db[full_name]

    async def create_indexes(self) -> None:
        """Create the unique id index and reference indexes of every collection."""
        for name, fields in REFERENCE_INDEXES.items():
            records = self.collection(name)
            await records.create_index("id", unique=True)
            for field in fields:
                await records.create_index(field)

        logger.info("created_mongodb_indexes")

    async def __aenter__(self) -> "MongoClient":
        """Async context manager entry."""
        await self.connect()
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Async context manager exit."""
        await self.disconnect()
