"""Storage backends for flowdesk.

A backend owns one storage client and hands out a gateway per entity
collection. Controllers receive gateways, never clients.
"""

from collections.abc import Callable
from typing import Any, Self

from flowdesk.config import FlowdeskConfig, MongoSettings, RedisSettings
from flowdesk.gateways.blob import BlobCollectionGateway
from flowdesk.gateways.base import EntityT
from flowdesk.gateways.document import DocumentCollectionGateway
from flowdesk.infra.memory import InMemoryKeyValueStore
from flowdesk.infra.mongo.client import MongoClient
from flowdesk.infra.redis.client import RedisKeyValueStore
from flowdesk.interfaces.storage import (
    DocumentCodecInterface,
    EntityGatewayInterface,
    KeyValueStoreInterface,
    StorageBackendInterface,
)
from flowdesk.logging import configure_logging, get_logger
from flowdesk.utils.ids import new_timestamp_id

__all__ = [
    "KeyValueBackend",
    "MongoBackend",
    "open_backend",
]

logger = get_logger(__name__)


class KeyValueBackend(StorageBackendInterface):
    """Backend over an opaque key/value store.

    Every collection is one JSON array under one key. The codec argument
    of ``gateway`` is ignored: nested records are kept inline.
    """

    config_class = RedisSettings

    def __init__(
        self,
        store: KeyValueStoreInterface,
        id_factory: Callable[[], str] = new_timestamp_id,
    ) -> None:
        """Initialize backend.

        Args:
            store: Key/value store the collections live in
            id_factory: Generator for client-side ids
        """
        self._store = store
        self._id_factory = id_factory
        self._owns_store = False

    @property
    def store(self) -> KeyValueStoreInterface:
        return self._store

    @classmethod
    def in_memory(cls) -> Self:
        """Backend over a fresh in-process store."""
        return cls(InMemoryKeyValueStore())

    @classmethod
    async def from_config(cls, config: RedisSettings) -> Self:
        """Connect a Redis store and wrap it.

        Args:
            config: Redis settings

        Returns:
            Backend owning a connected RedisKeyValueStore
        """
        store = RedisKeyValueStore(config)
        await store.connect()
        instance = cls(store)
        instance._owns_store = True
        return instance

    @classmethod
    async def from_dict(cls, config: dict[str, Any]) -> Self:
        return await cls.from_config(RedisSettings(**config))

    def gateway(
        self,
        collection: str,
        model: type[EntityT],
        codec: DocumentCodecInterface | None = None,
    ) -> EntityGatewayInterface[EntityT]:
        return BlobCollectionGateway(self._store, collection, model, id_factory=self._id_factory)

    async def close(self) -> None:
        """Disconnect the store if this backend opened it."""
        if self._owns_store and isinstance(self._store, RedisKeyValueStore):
            await self._store.disconnect()


class MongoBackend(StorageBackendInterface):
    """Backend over MongoDB with one document per record."""

    config_class = MongoSettings

    def __init__(self, client: MongoClient) -> None:
        """Initialize backend.

        Args:
            client: Connected MongoClient instance
        """
        self._client = client
        self._owns_client = False

    @classmethod
    async def from_config(cls, config: MongoSettings) -> Self:
        """Create a MongoClient, connect, create indexes, and wrap it.

        Args:
            config: MongoDB settings

        Returns:
            Backend owning a connected MongoClient
        """
        client = MongoClient(config)
        await client.connect()
        await client.create_indexes()
        instance = cls(client)
        instance._owns_client = True
        return instance

    @classmethod
    async def from_dict(cls, config: dict[str, Any]) -> Self:
        return await cls.from_config(MongoSettings(**config))

    def gateway(
        self,
        collection: str,
        model: type[EntityT],
        codec: DocumentCodecInterface | None = None,
    ) -> EntityGatewayInterface[EntityT]:
        return DocumentCollectionGateway(
            self._client.collection(collection),
            collection,
            model,
            codec=codec,
        )

    async def close(self) -> None:
        """Close owned resources."""
        if self._owns_client:
            await self._client.disconnect()


async def open_backend(config: FlowdeskConfig | None = None) -> StorageBackendInterface:
    """Open the backend selected by ``config.backend``.

    Args:
        config: Application config; loaded from the environment when omitted

    Returns:
        A connected backend. The caller closes it.
    """
    config = config or FlowdeskConfig()
    configure_logging(config.log_level, json_output=config.log_json)

    backend: StorageBackendInterface
    if config.backend == "redis":
        backend = await KeyValueBackend.from_config(config.redis)
    elif config.backend == "mongo":
        backend = await MongoBackend.from_config(config.mongo)
    else:
        backend = KeyValueBackend.in_memory()

    logger.info("storage_backend_opened", backend=config.backend)
    return backend
