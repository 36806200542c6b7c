"""Key/value collection gateway for flowdesk.

Each collection lives under a single key as a JSON array. Every mutation
is a full read-modify-write of that array, so two writers racing on the
same key lose one of the updates.
"""

import json
from collections.abc import Callable, Mapping
from typing import Any

from pydantic import BaseModel

from flowdesk.errors import FlowdeskError, NotFoundError, PersistenceError
from flowdesk.gateways.base import CollectionGateway, EntityT
from flowdesk.interfaces.storage import EntityGatewayInterface, KeyValueStoreInterface
from flowdesk.logging import get_logger
from flowdesk.utils.ids import new_timestamp_id

__all__ = [
    "BlobCollectionGateway",
]

logger = get_logger(__name__)


class BlobCollectionGateway(CollectionGateway[EntityT], EntityGatewayInterface[EntityT]):
    """Entity gateway over an opaque key/value store.

    Example:
        feeds = BlobCollectionGateway(store, "rssFeeds", Feed)
        feed = await feeds.create({"name": "Tech News", "sourceUrl": "https://example.com"})
        await feeds.update(feed.id, {"status": "paused"})
    """

    def __init__(
        self,
        store: KeyValueStoreInterface,
        key: str,
        model: type[EntityT],
        id_factory: Callable[[], str] = new_timestamp_id,
    ) -> None:
        """Initialize gateway.

        Args:
            store: Key/value store holding the collection
            key: Key the JSON array is stored under
            model: Entity class of the collection
            id_factory: Generator for new ids
        """
        super().__init__(key, model)
        self._store = store
        self._id_factory = id_factory

    async def _read(self) -> list[dict[str, Any]]:
        """Read the raw array; failures raise PersistenceError."""
        try:
            raw = await self._store.get(self._collection)
        except PersistenceError:
            raise
        except Exception as e:
            raise PersistenceError(f"Failed to read '{self._collection}': {e}") from e

        if raw is None or raw == "":
            return []
        try:
            records = json.loads(raw)
        except json.JSONDecodeError as e:
            raise PersistenceError(f"'{self._collection}' does not hold valid JSON") from e
        if not isinstance(records, list):
            raise PersistenceError(f"'{self._collection}' does not hold a JSON array")
        return records

    async def _write(self, records: list[dict[str, Any]]) -> None:
        try:
            await self._store.set(self._collection, json.dumps(records))
        except PersistenceError:
            raise
        except Exception as e:
            raise PersistenceError(f"Failed to write '{self._collection}': {e}") from e

    def _new_id(self, taken: set[str]) -> str:
        entity_id = self._id_factory()
        while entity_id in taken:
            entity_id = self._id_factory()
        return entity_id

    def _index_of(self, records: list[dict[str, Any]], entity_id: str) -> int:
        for i, record in enumerate(records):
            if isinstance(record, dict) and record.get("id") == entity_id:
                return i
        logger.warning("entity_update_missing", collection=self._collection, entity_id=entity_id)
        raise NotFoundError(self._model.entity_name, entity_id)

    async def get_all(self, *, strict: bool = False) -> list[EntityT]:
        """Load every entity stored under the key."""
        try:
            return [self._parse(record) for record in await self._read()]
        except FlowdeskError as e:
            if strict:
                raise
            logger.error("collection_load_failed", collection=self._collection, error=str(e))
            return []

    async def create(self, data: Mapping[str, Any] | BaseModel) -> EntityT:
        """Append a new entity and write the collection back."""
        records = await self._read()
        taken = {str(record.get("id")) for record in records if isinstance(record, dict)}
        entity = self._build_new(data, self._new_id(taken))

        records.append(entity.to_json())
        await self._write(records)

        logger.debug("entity_created", collection=self._collection, entity_id=entity.id)
        return entity

    async def update(self, entity_id: str, fields: Mapping[str, Any]) -> EntityT:
        """Merge fields onto the stored entity and write the collection back."""
        records = await self._read()
        index = self._index_of(records, entity_id)

        merged, changed = self._merge(self._parse(records[index]), fields)
        records[index] = merged.to_json()
        await self._write(records)

        logger.debug(
            "entity_updated",
            collection=self._collection,
            entity_id=entity_id,
            fields=sorted(changed),
        )
        return merged

    async def increment(self, entity_id: str, field: str, amount: int = 1) -> EntityT:
        """Add amount to an integer field of the stored entity."""
        name, _ = self._counter(field)
        records = await self._read()
        index = self._index_of(records, entity_id)

        stored = self._parse(records[index])
        merged, _ = self._merge(stored, {name: getattr(stored, name) + amount})
        records[index] = merged.to_json()
        await self._write(records)

        logger.debug(
            "entity_incremented",
            collection=self._collection,
            entity_id=entity_id,
            field=field,
            value=getattr(merged, name),
        )
        return merged

    async def delete(self, entity_id: str) -> None:
        """Filter the entity out of the collection."""
        records = await self._read()
        remaining = [
            record
            for record in records
            if not (isinstance(record, dict) and record.get("id") == entity_id)
        ]
        if len(remaining) == len(records):
            return
        await self._write(remaining)
        logger.debug("entity_deleted", collection=self._collection, entity_id=entity_id)
